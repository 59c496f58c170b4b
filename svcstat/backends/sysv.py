"""Legacy SysV init backend.

State is inferred from init scripts, pid files, the process table under
/proc and subsystem lock files.
"""

import logging

from svcstat.backends.base import ServiceBackend
from svcstat.backends.fs import HostFilesystem, is_plain_name
from svcstat.exceptions import ServiceNotFoundError
from svcstat.models.status import CanonicalState, ProbeResult, ServiceState, ServiceStatus

logger = logging.getLogger(__name__)

INIT_SCRIPT = "/etc/init.d/{name}"
PID_FILES = ("/var/run/{name}.pid", "/run/{name}.pid")
LOCK_FILES = ("/var/lock/subsys/{name}", "/var/lock/{name}")
PROC_ENTRY = "/proc/{pid}"

# LSB-style vocabulary reported as the raw code
RAW_CODES = {
    ServiceState.RUNNING: "active",
    ServiceState.STOPPED: "inactive",
}


def read_first_pid(fs: HostFilesystem, service_name: str, candidates: tuple[str, ...]) -> int:
    """Return the first positive pid found among candidate pid files, else 0."""
    for template in candidates:
        pid = fs.read_pid(template.format(name=service_name))
        if pid:
            return pid
    return 0


def classify_sysv(fs: HostFilesystem, service_name: str) -> ProbeResult:
    """Derive the state of an installed SysV service.

    A live pid (pid file plus /proc entry) means RUNNING with that pid. A
    pid whose process is gone means STOPPED. Without a usable pid file, a
    lock file means RUNNING with pid 0.
    """
    pid = read_first_pid(fs, service_name, PID_FILES)
    if pid:
        if fs.exists(PROC_ENTRY.format(pid=pid)):
            return ProbeResult(state=ServiceState.RUNNING, pid=pid)
        logger.debug("Stale pid %d for %s", pid, service_name)
        return ProbeResult(state=ServiceState.STOPPED)

    if any(fs.exists(lock.format(name=service_name)) for lock in LOCK_FILES):
        return ProbeResult(state=ServiceState.RUNNING)
    return ProbeResult(state=ServiceState.STOPPED)


class SysVBackend(ServiceBackend):
    """SysV init-script backend."""

    name = "sysv"

    def __init__(self, fs: HostFilesystem) -> None:
        self.fs = fs

    def exists(self, service_name: str) -> bool:
        if not is_plain_name(service_name):
            return False
        return self.fs.is_file(INIT_SCRIPT.format(name=service_name))

    def get_status(self, service_name: str) -> ServiceStatus:
        if not self.exists(service_name):
            raise ServiceNotFoundError(service_name)

        result = classify_sysv(self.fs, service_name)
        return ServiceStatus(
            name=service_name,
            state=CanonicalState.of(result.state),
            pid=result.pid,
            raw_code=RAW_CODES[result.state],
            backend=self.name,
        )
