"""Init system detection for Linux hosts."""

import logging

from svcstat.backends.fs import HostFilesystem
from svcstat.models.status import InitSystemKind

logger = logging.getLogger(__name__)

SYSTEMD_MARKERS = (
    "/run/systemd/private",
    "/run/systemd/system",
    "/sys/fs/cgroup/systemd",
)

OPENRC_MARKERS = (
    "/run/openrc/softlevel",
    "/run/openrc",
)


def detect_init_system(fs: HostFilesystem) -> InitSystemKind:
    """Classify the host's init system from filesystem markers.

    systemd markers win over OpenRC markers; with neither present the host is
    treated as SysV.

    Args:
        fs: Filesystem view to probe.

    Returns:
        The detected init system.
    """
    if any(fs.exists(marker) for marker in SYSTEMD_MARKERS):
        kind = InitSystemKind.SYSTEMD
    elif any(fs.exists(marker) for marker in OPENRC_MARKERS):
        kind = InitSystemKind.OPENRC
    else:
        kind = InitSystemKind.SYSV
    logger.debug("Detected init system %s under %s", kind.value, fs.root)
    return kind


class InitSystemDetector:
    """Detects the init system on every call; nothing is memoized."""

    def __init__(self, fs: HostFilesystem) -> None:
        self.fs = fs

    def detect(self) -> InitSystemKind:
        return detect_init_system(self.fs)
