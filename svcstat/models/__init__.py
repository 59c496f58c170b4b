"""Pydantic data models."""

from svcstat.models.status import (
    CanonicalState,
    InitSystemKind,
    ProbeResult,
    ServiceState,
    ServiceStatus,
    UnitProperties,
)

__all__ = [
    "CanonicalState",
    "InitSystemKind",
    "ProbeResult",
    "ServiceState",
    "ServiceStatus",
    "UnitProperties",
]
