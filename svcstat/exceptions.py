"""Custom exceptions for svcstat."""


class ServiceStatusError(Exception):
    """Base exception for svcstat errors."""

    pass


class InvalidServiceNameError(ServiceStatusError, ValueError):
    """Raised when a service name is empty, not a string, or path-like."""

    def __init__(self, name: object) -> None:
        self.name = name
        super().__init__(
            f"Service name must be a non-empty string without path separators, got {name!r}"
        )


class ServiceNotFoundError(ServiceStatusError):
    """Raised when a service is absent from every applicable backend."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f'Service "{name}" does not exist')


class TransportError(ServiceStatusError):
    """Raised when a service manager cannot be reached or queried."""

    def __init__(
        self, message: str, error_code: int | None = None, stage: str | None = None
    ) -> None:
        self.error_code = error_code
        self.stage = stage
        if error_code is not None:
            message = f"{message} (error {error_code})"
        super().__init__(message)


class UnsupportedPlatformError(ServiceStatusError):
    """Raised when no backend exists for the running platform."""

    pass


class ConfigError(ServiceStatusError):
    """Raised when the configuration file cannot be read or is invalid."""

    pass
