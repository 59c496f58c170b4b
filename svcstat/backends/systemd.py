"""systemd backend.

Unit properties are read over the system bus first and through
`systemctl show` when the bus is unusable. Units systemd does not know are
handed to the SysV backend, since many systemd distributions still ship
legacy init scripts.
"""

import importlib
import logging
import subprocess
from abc import ABC, abstractmethod
from contextlib import closing
from typing import Any

from svcstat.backends.base import ServiceBackend
from svcstat.backends.normalize import normalize_systemd
from svcstat.backends.sysv import SysVBackend
from svcstat.exceptions import ServiceNotFoundError, TransportError
from svcstat.models.status import ServiceStatus, UnitProperties

logger = logging.getLogger(__name__)

UNIT_SUFFIX = ".service"
SHOW_PROPERTIES = ("LoadState", "ActiveState", "SubState", "MainPID")

SYSTEMD_BUS_NAME = "org.freedesktop.systemd1"
UNIT_PATH_PREFIX = "/org/freedesktop/systemd1/unit/"
UNIT_INTERFACE = "org.freedesktop.systemd1.Unit"
SERVICE_INTERFACE = "org.freedesktop.systemd1.Service"

DEFAULT_STATUS_TIMEOUT = 5.0
DEFAULT_PROBE_TIMEOUT = 3.0


def unit_name_for(service_name: str) -> str:
    """Return the systemd unit name for a service name."""
    if service_name.endswith(UNIT_SUFFIX):
        return service_name
    return f"{service_name}{UNIT_SUFFIX}"


def escape_bus_label(label: str) -> str:
    """Escape a string into a single D-Bus object path element.

    Follows systemd's convention: bytes outside [A-Za-z0-9], and a leading
    digit, become "_" plus two lower-case hex digits. The empty string
    becomes "_".
    """
    if not label:
        return "_"

    parts = []
    for i, byte in enumerate(label.encode("utf-8")):
        char = chr(byte)
        is_alnum = char.isascii() and char.isalnum()
        if is_alnum and not (i == 0 and char.isdigit()):
            parts.append(char)
        else:
            parts.append(f"_{byte:02x}")
    return "".join(parts)


def unit_object_path(unit_name: str) -> str:
    """Return the bus object path addressing a unit."""
    return UNIT_PATH_PREFIX + escape_bus_label(unit_name)


def parse_show_output(stdout: str) -> UnitProperties:
    """Parse `systemctl show` key=value output.

    Args:
        stdout: Output of `systemctl show --property=...`.

    Returns:
        The parsed properties. Missing keys become empty values and an
        unparsable MainPID becomes 0.
    """
    props: dict[str, str] = {}
    for line in stdout.splitlines():
        key, sep, value = line.partition("=")
        if sep:
            props[key.strip()] = value.strip()

    return UnitProperties(
        load_state=props.get("LoadState", ""),
        active_state=props.get("ActiveState", ""),
        sub_state=props.get("SubState", ""),
        main_pid=_to_pid(props.get("MainPID", "0")),
    )


def _to_pid(value: Any) -> int:
    try:
        pid = int(value)
    except (TypeError, ValueError):
        return 0
    return pid if pid > 0 else 0


class UnitPropertySource(ABC):
    """One stage of the systemd query cascade."""

    #: Stage name used in logs and TransportError.stage
    stage: str = ""

    @property
    def available(self) -> bool:
        """Whether this stage can be attempted at all."""
        return True

    @abstractmethod
    def query(self, unit_name: str) -> UnitProperties:
        """Read LoadState, ActiveState, SubState and MainPID for a unit.

        Raises:
            TransportError: If the query fails.
        """
        pass


class SystemdBusClient(UnitPropertySource):
    """Reads unit properties from systemd over the system bus via jeepney.

    Whether jeepney can be imported is settled once, in the constructor. A
    new bus connection is opened and closed for every query.
    """

    stage = "bus"

    def __init__(self, timeout: float = DEFAULT_STATUS_TIMEOUT) -> None:
        self.timeout = timeout
        self._jeepney: Any = None
        self._blocking: Any = None
        try:
            self._jeepney = importlib.import_module("jeepney")
            self._blocking = importlib.import_module("jeepney.io.blocking")
        except ImportError as e:
            logger.debug("jeepney unavailable, bus queries disabled: %s", e)
            self._jeepney = None
            self._blocking = None

    @property
    def available(self) -> bool:
        return self._jeepney is not None

    def _call(self, conn: Any, message: Any) -> tuple[Any, ...]:
        reply = conn.send_and_get_reply(message, timeout=self.timeout)
        return self._jeepney.unwrap_msg(reply)

    def query(self, unit_name: str) -> UnitProperties:
        if not self.available:
            raise TransportError("D-Bus client library is not installed", stage=self.stage)

        jeepney = self._jeepney
        path = unit_object_path(unit_name)
        unit = jeepney.DBusAddress(path, bus_name=SYSTEMD_BUS_NAME, interface=UNIT_INTERFACE)

        try:
            with closing(self._blocking.open_dbus_connection(bus="SYSTEM")) as conn:
                (props,) = self._call(conn, jeepney.Properties(unit).get_all())
                load_state = _variant_value(props.get("LoadState"), "")

                main_pid = 0
                if load_state not in ("", "not-found"):
                    service = jeepney.DBusAddress(
                        path, bus_name=SYSTEMD_BUS_NAME, interface=SERVICE_INTERFACE
                    )
                    (pid_variant,) = self._call(conn, jeepney.Properties(service).get("MainPID"))
                    main_pid = _to_pid(_variant_value(pid_variant, 0))
        except (OSError, ValueError, jeepney.DBusErrorResponse) as e:
            raise TransportError(
                f"System bus query for {unit_name} failed: {e}", stage=self.stage
            ) from e

        return UnitProperties(
            load_state=load_state,
            active_state=_variant_value(props.get("ActiveState"), ""),
            sub_state=_variant_value(props.get("SubState"), ""),
            main_pid=main_pid,
        )


def _variant_value(variant: Any, default: Any) -> Any:
    """Unpack a jeepney (signature, value) variant."""
    if not variant:
        return default
    return variant[1]


class SystemctlClient(UnitPropertySource):
    """Reads unit properties by running `systemctl show`."""

    stage = "systemctl"

    def __init__(
        self,
        executable: str = "systemctl",
        timeout: float = DEFAULT_STATUS_TIMEOUT,
        probe_timeout: float = DEFAULT_PROBE_TIMEOUT,
    ) -> None:
        self.executable = executable
        self.timeout = timeout
        self.probe_timeout = probe_timeout

    def _run(self, args: list[str], timeout: float) -> str:
        try:
            result = subprocess.run(
                [self.executable, *args],
                capture_output=True,
                text=True,
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise TransportError(
                f"{self.executable} {args[0]} timed out after {timeout:g}s", stage=self.stage
            ) from e
        except OSError as e:
            raise TransportError(
                f"Could not run {self.executable}: {e}", stage=self.stage
            ) from e

        if result.returncode != 0:
            stderr = result.stderr.strip() if result.stderr else ""
            raise TransportError(
                f"{self.executable} {args[0]} failed: {stderr or 'no output'}",
                error_code=result.returncode,
                stage=self.stage,
            )
        return result.stdout

    def probe(self) -> None:
        """Check that systemctl runs.

        Raises:
            TransportError: If systemctl is missing, hangs, or fails.
        """
        self._run(["--version"], self.probe_timeout)

    def query(self, unit_name: str) -> UnitProperties:
        self.probe()
        stdout = self._run(
            [
                "show",
                "--no-pager",
                f"--property={','.join(SHOW_PROPERTIES)}",
                unit_name,
            ],
            self.timeout,
        )
        return parse_show_output(stdout)


class SystemdBackend(ServiceBackend):
    """systemd backend with bus, systemctl and SysV stages."""

    name = "systemd"

    def __init__(self, sources: list[UnitPropertySource], sysv: SysVBackend) -> None:
        """Initialize the backend.

        Args:
            sources: Query stages, tried in order.
            sysv: Backend for units systemd does not know.
        """
        self.sources = sources
        self.sysv = sysv

    def _query(self, unit_name: str) -> tuple[UnitProperties | None, TransportError | None]:
        """Run the query stages until one answers.

        Returns:
            The properties from the first stage that answered and None, or
            None and the last stage failure.
        """
        error: TransportError | None = None
        for source in self.sources:
            if not source.available:
                logger.debug("Skipping unavailable %s stage for %s", source.stage, unit_name)
                continue
            try:
                props = source.query(unit_name)
            except TransportError as e:
                logger.debug("%s stage failed for %s: %s", source.stage, unit_name, e)
                error = e
                continue
            logger.debug("%s stage answered for %s: %s", source.stage, unit_name, props)
            return props, None

        if error is None:
            error = TransportError("No systemd query method is available", stage=self.name)
        return None, error

    @staticmethod
    def _sysv_name(service_name: str) -> str:
        return service_name.removesuffix(UNIT_SUFFIX)

    def exists(self, service_name: str) -> bool:
        props, error = self._query(unit_name_for(service_name))
        if props is not None and props.is_loaded:
            return True

        if self.sysv.exists(self._sysv_name(service_name)):
            return True
        if props is None:
            raise TransportError(
                f"Could not query systemd for {service_name}", stage=self.name
            ) from error
        return False

    def get_status(self, service_name: str) -> ServiceStatus:
        props, error = self._query(unit_name_for(service_name))
        if props is not None and props.is_loaded:
            return ServiceStatus(
                name=service_name,
                state=normalize_systemd(props.active_state),
                pid=props.main_pid,
                raw_code=props.active_state,
                backend=self.name,
            )

        sysv_name = self._sysv_name(service_name)
        if self.sysv.exists(sysv_name):
            status = self.sysv.get_status(sysv_name)
            return status.model_copy(update={"name": service_name})
        if props is None:
            raise TransportError(
                f"Could not query systemd for {service_name}", stage=self.name
            ) from error
        raise ServiceNotFoundError(service_name)
