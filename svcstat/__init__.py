"""svcstat - cross-platform service existence and status queries.

On Windows, services are looked up in the Service Control Manager. On Linux
and other POSIX hosts, the init system (systemd, OpenRC or SysV) is detected
and queried.
"""

from svcstat.config import SvcstatConfig, load_config
from svcstat.exceptions import (
    ConfigError,
    InvalidServiceNameError,
    ServiceNotFoundError,
    ServiceStatusError,
    TransportError,
    UnsupportedPlatformError,
)
from svcstat.models.status import CanonicalState, InitSystemKind, ServiceState, ServiceStatus
from svcstat.resolver import ServiceResolver, validate_service_name

__version__ = "0.1.0"


def exists(service_name: str, config: SvcstatConfig | None = None) -> bool:
    """Check whether a service exists on this host.

    Args:
        service_name: Windows short name (e.g. "wuauserv") or Linux unit /
                      init script name (e.g. "sshd").
        config: Settings to use. Loaded from the config file if omitted.

    Returns:
        True if the service is registered, False otherwise.
    """
    validate_service_name(service_name)
    return ServiceResolver.from_config(config or load_config()).resolve_exists(service_name)


def get_status(service_name: str, config: SvcstatConfig | None = None) -> ServiceStatus:
    """Get the status of a service on this host.

    Args:
        service_name: See exists().
        config: Settings to use. Loaded from the config file if omitted.

    Returns:
        The canonical service status.

    Raises:
        ServiceNotFoundError: If the service does not exist.
    """
    validate_service_name(service_name)
    return ServiceResolver.from_config(config or load_config()).resolve_status(service_name)


__all__ = [
    "CanonicalState",
    "ConfigError",
    "InitSystemKind",
    "InvalidServiceNameError",
    "ServiceNotFoundError",
    "ServiceResolver",
    "ServiceState",
    "ServiceStatus",
    "ServiceStatusError",
    "SvcstatConfig",
    "TransportError",
    "UnsupportedPlatformError",
    "exists",
    "get_status",
    "load_config",
]
