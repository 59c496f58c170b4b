"""OpenRC backend (Alpine, Gentoo).

OpenRC keeps no queryable daemon; service state is recorded as marker
files under /run/openrc.
"""

from svcstat.backends.base import ServiceBackend
from svcstat.backends.fs import HostFilesystem, is_plain_name
from svcstat.backends.normalize import normalize_probe
from svcstat.backends.sysv import read_first_pid
from svcstat.exceptions import ServiceNotFoundError
from svcstat.models.status import ProbeResult, ServiceState, ServiceStatus

INIT_SCRIPT = "/etc/init.d/{name}"
DEFAULT_RUNLEVEL_LINK = "/etc/runlevels/default/{name}"
PID_FILES = ("/run/{name}.pid", "/var/run/{name}.pid")

# Checked in order; OpenRC keeps at most one of them per service
STATE_MARKERS = (
    ("/run/openrc/started/{name}", ServiceState.RUNNING),
    ("/run/openrc/starting/{name}", ServiceState.START_PENDING),
    ("/run/openrc/stopping/{name}", ServiceState.STOP_PENDING),
)


def classify_openrc(fs: HostFilesystem, service_name: str) -> ProbeResult:
    """Derive the state of an installed OpenRC service from its markers."""
    state = ServiceState.STOPPED
    for template, marker_state in STATE_MARKERS:
        if fs.exists(template.format(name=service_name)):
            state = marker_state
            break

    pid = read_first_pid(fs, service_name, PID_FILES)
    return ProbeResult(state=state, pid=pid)


class OpenRCBackend(ServiceBackend):
    """OpenRC filesystem-probe backend."""

    name = "openrc"

    def __init__(self, fs: HostFilesystem) -> None:
        self.fs = fs

    def exists(self, service_name: str) -> bool:
        if not is_plain_name(service_name):
            return False
        return self.fs.is_file(INIT_SCRIPT.format(name=service_name)) or self.fs.exists(
            DEFAULT_RUNLEVEL_LINK.format(name=service_name)
        )

    def get_status(self, service_name: str) -> ServiceStatus:
        if not self.exists(service_name):
            raise ServiceNotFoundError(service_name)

        result = classify_openrc(self.fs, service_name)
        raw = result.state.value.lower()
        return ServiceStatus(
            name=service_name,
            state=normalize_probe(raw),
            pid=result.pid,
            raw_code=raw,
            backend=self.name,
        )
