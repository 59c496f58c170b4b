"""Service status models for svcstat."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ServiceState(str, Enum):
    """Canonical service states shared by every backend."""

    RUNNING = "RUNNING"
    STOPPED = "STOPPED"
    START_PENDING = "START_PENDING"
    STOP_PENDING = "STOP_PENDING"
    CONTINUE_PENDING = "CONTINUE_PENDING"
    PAUSE_PENDING = "PAUSE_PENDING"
    PAUSED = "PAUSED"
    UNKNOWN = "UNKNOWN"


class InitSystemKind(str, Enum):
    """Linux init systems svcstat knows how to query."""

    SYSTEMD = "systemd"
    OPENRC = "openrc"
    SYSV = "sysv"


class CanonicalState(BaseModel):
    """A canonical state, carrying the raw value when it could not be mapped."""

    kind: ServiceState
    raw: str | int | None = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def of(cls, kind: ServiceState) -> "CanonicalState":
        """Build a mapped state."""
        return cls(kind=kind)

    @classmethod
    def unknown(cls, raw: str | int) -> "CanonicalState":
        """Build an UNKNOWN state that keeps the untranslated value."""
        return cls(kind=ServiceState.UNKNOWN, raw=raw)

    @property
    def is_unknown(self) -> bool:
        return self.kind == ServiceState.UNKNOWN

    def __str__(self) -> str:
        if self.is_unknown:
            return f"UNKNOWN({self.raw})"
        return self.kind.value


class ServiceStatus(BaseModel):
    """Status of a single OS service, as returned by get_status()."""

    name: str = Field(description="Service name as provided by the caller")
    exists: bool = Field(default=True, description="Always true on a returned status")
    state: CanonicalState
    pid: int = Field(default=0, ge=0, description="Main process ID, 0 when not running")
    raw_code: str | int = Field(alias="rawCode", description="Backend-native state value")

    # Extras
    display_name: str | None = Field(default=None, alias="displayName")
    backend: str | None = Field(default=None, description="Backend that answered")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON-equivalent status shape.

        Returns:
            Dictionary with name, exists, state, pid, rawCode and,
            when known, displayName.
        """
        data: dict[str, Any] = {
            "name": self.name,
            "exists": self.exists,
            "state": str(self.state),
            "pid": self.pid,
            "rawCode": self.raw_code,
        }
        if self.display_name:
            data["displayName"] = self.display_name
        return data


class UnitProperties(BaseModel):
    """The four systemd unit properties svcstat reads."""

    load_state: str = ""
    active_state: str = ""
    sub_state: str = ""
    main_pid: int = 0

    model_config = ConfigDict(frozen=True)

    @property
    def is_loaded(self) -> bool:
        """Whether systemd knows the unit at all."""
        return self.load_state not in ("", "not-found")


class ProbeResult(BaseModel):
    """Outcome of classifying filesystem facts for OpenRC or SysV."""

    state: ServiceState
    pid: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)
