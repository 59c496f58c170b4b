"""Service resolver: the public entry point for service queries."""

import logging
import platform

from svcstat.backends.base import WINDOWS, ServiceBackend, get_backends
from svcstat.backends.detect import InitSystemDetector
from svcstat.backends.fs import HostFilesystem, is_plain_name
from svcstat.config import SvcstatConfig
from svcstat.exceptions import InvalidServiceNameError, UnsupportedPlatformError
from svcstat.models.status import InitSystemKind, ServiceStatus

logger = logging.getLogger(__name__)


def validate_service_name(name: object) -> str:
    """Check that a service name is a non-empty string naming one entry.

    Raises:
        InvalidServiceNameError: If the name is empty, blank, not a string,
            "." or "..", or contains "/" or NUL.
    """
    if not isinstance(name, str) or not name.strip() or not is_plain_name(name):
        raise InvalidServiceNameError(name)
    return name


class ServiceResolver:
    """Selects the backend for the host and answers service queries.

    On Linux and other POSIX hosts the init system is detected again on every
    call. The resolver never retries across backends; fallbacks live inside
    each backend.
    """

    def __init__(
        self,
        backends: dict[str, ServiceBackend],
        detector: InitSystemDetector | None = None,
        system: str | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            backends: Backends keyed by "windows" or InitSystemKind value,
                      as built by get_backends().
            detector: Init system detector, required off Windows.
            system: Platform name as reported by platform.system().
        """
        self.backends = backends
        self.detector = detector
        self.system = system or platform.system()

    @classmethod
    def from_config(
        cls, config: SvcstatConfig | None = None, system: str | None = None
    ) -> "ServiceResolver":
        """Build a resolver with the default backends for the platform."""
        config = config or SvcstatConfig()
        system = system or platform.system()
        backends = get_backends(config, system)
        detector = None
        if system != "Windows":
            detector = InitSystemDetector(HostFilesystem(config.root))
        return cls(backends, detector=detector, system=system)

    def init_system(self) -> InitSystemKind | None:
        """Detect the host's init system, or None on Windows."""
        if self.system == "Windows":
            return None
        if self.detector is None:
            raise UnsupportedPlatformError(f"No init system detector configured for {self.system}")
        return self.detector.detect()

    def select_backend(self) -> ServiceBackend:
        """Pick the backend that answers for this host right now."""
        kind = self.init_system()
        key = WINDOWS if kind is None else kind.value
        backend = self.backends.get(key)
        if backend is None:
            raise UnsupportedPlatformError(f"No backend available for {key} on {self.system}")
        logger.debug("Using %s backend", key)
        return backend

    def resolve_exists(self, name: object) -> bool:
        """Check whether a service exists.

        Returns:
            True if the service is registered, False otherwise.

        Raises:
            InvalidServiceNameError: If the name is not a non-empty string.
            TransportError: If the service manager cannot be queried.
        """
        service_name = validate_service_name(name)
        return self.select_backend().exists(service_name)

    def resolve_status(self, name: object) -> ServiceStatus:
        """Get the canonical status of a service.

        Raises:
            InvalidServiceNameError: If the name is not a non-empty string.
            ServiceNotFoundError: If the service does not exist.
            TransportError: If the service manager cannot be queried.
        """
        service_name = validate_service_name(name)
        return self.select_backend().get_status(service_name)
