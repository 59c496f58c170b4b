"""Windows Service Control Manager backend.

Talks to the SCM through pywin32's win32service bindings. Every handle is
opened in a context manager so it is closed on every exit path.
"""

import importlib
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from svcstat.backends.base import ServiceBackend
from svcstat.backends.normalize import normalize_windows
from svcstat.exceptions import ServiceNotFoundError, TransportError
from svcstat.models.status import ServiceStatus

logger = logging.getLogger(__name__)

# Access rights
SC_MANAGER_CONNECT = 0x0001
SERVICE_QUERY_STATUS = 0x0004

# Win32 error codes
ERROR_ACCESS_DENIED = 5
ERROR_SERVICE_DOES_NOT_EXIST = 1060


def _winerror(error: Exception) -> int | None:
    """Extract the Win32 error code from a pywintypes.error."""
    code = getattr(error, "winerror", None)
    if code is None and error.args and isinstance(error.args[0], int):
        code = error.args[0]
    return code


class WindowsSCMBackend(ServiceBackend):
    """Service Control Manager backend."""

    name = "windows"

    def __init__(self, api: Any = None, error_type: type[Exception] | None = None) -> None:
        """Initialize the backend.

        Args:
            api: Module exposing OpenSCManager, OpenService,
                 QueryServiceStatusEx, GetServiceDisplayName and
                 CloseServiceHandle. Defaults to win32service.
            error_type: Exception raised by api calls. Defaults to
                        pywintypes.error.
        """
        if api is None:
            api = importlib.import_module("win32service")
        if error_type is None:
            error_type = importlib.import_module("pywintypes").error
        self.api = api
        self.error_type = error_type

    @contextmanager
    def _manager(self) -> Iterator[Any]:
        """Open the SCM database with connect rights."""
        try:
            handle = self.api.OpenSCManager(None, None, SC_MANAGER_CONNECT)
        except self.error_type as e:
            code = _winerror(e)
            if code == ERROR_ACCESS_DENIED:
                message = "Access denied opening Service Control Manager"
            else:
                message = "Failed to open Service Control Manager"
            raise TransportError(message, error_code=code, stage=self.name) from e
        try:
            yield handle
        finally:
            self.api.CloseServiceHandle(handle)

    @contextmanager
    def _service(self, manager: Any, service_name: str) -> Iterator[Any]:
        """Open a service with query-status rights.

        Raises:
            ServiceNotFoundError: If the SCM has no such service.
            TransportError: On any other failure.
        """
        try:
            handle = self.api.OpenService(manager, service_name, SERVICE_QUERY_STATUS)
        except self.error_type as e:
            code = _winerror(e)
            if code == ERROR_SERVICE_DOES_NOT_EXIST:
                raise ServiceNotFoundError(service_name) from e
            if code == ERROR_ACCESS_DENIED:
                message = f"Access denied opening service '{service_name}'"
            else:
                message = f"Failed to open service '{service_name}'"
            raise TransportError(message, error_code=code, stage=self.name) from e
        try:
            yield handle
        finally:
            self.api.CloseServiceHandle(handle)

    def _display_name(self, manager: Any, service_name: str) -> str | None:
        try:
            return self.api.GetServiceDisplayName(manager, service_name) or None
        except self.error_type as e:
            logger.debug("No display name for %s: %s", service_name, e)
            return None

    def exists(self, service_name: str) -> bool:
        with self._manager() as manager:
            try:
                with self._service(manager, service_name):
                    return True
            except ServiceNotFoundError:
                return False

    def get_status(self, service_name: str) -> ServiceStatus:
        with self._manager() as manager:
            with self._service(manager, service_name) as service:
                try:
                    record = self.api.QueryServiceStatusEx(service)
                except self.error_type as e:
                    raise TransportError(
                        "QueryServiceStatusEx failed", error_code=_winerror(e), stage=self.name
                    ) from e
            display_name = self._display_name(manager, service_name)

        code = record["CurrentState"]
        logger.debug("SCM status for %s: %s", service_name, record)
        return ServiceStatus(
            name=service_name,
            state=normalize_windows(code),
            pid=max(int(record.get("ProcessId", 0) or 0), 0),
            raw_code=code,
            display_name=display_name,
            backend=self.name,
        )
