"""Native service-manager backends.

Provides one backend per service manager:
- Service Control Manager on Windows
- systemd, OpenRC and SysV init on Linux
"""

from svcstat.backends.base import ServiceBackend, get_backends
from svcstat.backends.detect import InitSystemDetector, detect_init_system
from svcstat.backends.fs import HostFilesystem

__all__ = [
    "HostFilesystem",
    "InitSystemDetector",
    "ServiceBackend",
    "detect_init_system",
    "get_backends",
]
