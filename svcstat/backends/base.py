"""Base service backend interface."""

import os
import platform
from abc import ABC, abstractmethod

from svcstat.config import SvcstatConfig
from svcstat.exceptions import UnsupportedPlatformError
from svcstat.models.status import InitSystemKind, ServiceStatus

WINDOWS = "windows"


class ServiceBackend(ABC):
    """Abstract base class for native service-manager backends."""

    #: Identifier reported in ServiceStatus.backend
    name: str = ""

    @abstractmethod
    def exists(self, service_name: str) -> bool:
        """Check whether the service is registered.

        Args:
            service_name: Service name in platform-native convention.

        Returns:
            True if the service exists, False if it is not registered.

        Raises:
            TransportError: If the service manager cannot be queried.
        """
        pass

    @abstractmethod
    def get_status(self, service_name: str) -> ServiceStatus:
        """Get the current status of the service.

        Args:
            service_name: Service name in platform-native convention.

        Returns:
            The canonical service status.

        Raises:
            ServiceNotFoundError: If the service does not exist.
            TransportError: If the service manager cannot be queried.
        """
        pass


def get_backends(
    config: SvcstatConfig | None = None, system: str | None = None
) -> dict[str, ServiceBackend]:
    """Build the backends for the current platform.

    Args:
        config: Settings for timeouts and the probe root.
        system: Platform name as reported by platform.system(). Defaults
                to the running platform.

    Returns:
        On Windows, {"windows": backend}. On Linux and other POSIX
        hosts, one backend per InitSystemKind value.

    Raises:
        UnsupportedPlatformError: If the platform is not supported.
    """
    config = config or SvcstatConfig()
    system = system or platform.system()

    if system == "Windows":
        from svcstat.backends.windows import WindowsSCMBackend

        return {WINDOWS: WindowsSCMBackend()}
    elif system == "Linux" or os.name == "posix":
        from svcstat.backends.fs import HostFilesystem
        from svcstat.backends.openrc import OpenRCBackend
        from svcstat.backends.systemd import SystemctlClient, SystemdBackend, SystemdBusClient
        from svcstat.backends.sysv import SysVBackend

        fs = HostFilesystem(config.root)
        sysv = SysVBackend(fs)
        sources = [
            SystemctlClient(
                executable=config.systemctl,
                timeout=config.status_timeout,
                probe_timeout=config.probe_timeout,
            )
        ]
        if config.use_bus:
            sources.insert(0, SystemdBusClient(timeout=config.status_timeout))

        return {
            InitSystemKind.SYSTEMD.value: SystemdBackend(sources, sysv),
            InitSystemKind.OPENRC.value: OpenRCBackend(fs),
            InitSystemKind.SYSV.value: sysv,
        }
    else:
        raise UnsupportedPlatformError(f"Service queries not supported on {system}")
