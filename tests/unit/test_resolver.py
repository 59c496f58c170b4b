"""Unit tests for the service resolver and the public entry points."""

from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

import svcstat
from svcstat.backends.base import get_backends
from svcstat.backends.openrc import OpenRCBackend
from svcstat.backends.systemd import SystemctlClient, SystemdBackend, SystemdBusClient
from svcstat.backends.sysv import SysVBackend
from svcstat.config import SvcstatConfig
from svcstat.exceptions import InvalidServiceNameError, UnsupportedPlatformError
from svcstat.models.status import InitSystemKind, ServiceState
from svcstat.resolver import ServiceResolver, validate_service_name


@pytest.fixture
def config(fake_root: Path) -> SvcstatConfig:
    """Create a config rooted at the fake root with the bus disabled."""
    return SvcstatConfig(root=fake_root, use_bus=False)


def _detector(kind: InitSystemKind) -> MagicMock:
    detector = MagicMock()
    detector.detect.return_value = kind
    return detector


class TestValidateServiceName:
    """Tests for validate_service_name."""

    @pytest.mark.parametrize(
        "name", ["", "   ", None, 123, b"sshd", ".", "..", "../passwd", "init.d/cron", "cron\0"]
    )
    def test_rejects_invalid(self, name: object) -> None:
        """Empty, blank, non-string and path-like names should be rejected."""
        with pytest.raises(InvalidServiceNameError):
            validate_service_name(name)

    def test_is_value_error(self) -> None:
        """Invalid names should also be catchable as ValueError."""
        with pytest.raises(ValueError):
            validate_service_name("")

    def test_accepts_name(self) -> None:
        """A plain name should be returned unchanged."""
        assert validate_service_name("sshd") == "sshd"


class TestServiceResolver:
    """Tests for ServiceResolver."""

    @pytest.mark.parametrize("name", ["", " ", None, "..", "../passwd"])
    def test_invalid_name_never_reaches_backend(self, name: object) -> None:
        """Validation should run before any backend is touched."""
        backend = MagicMock()
        detector = _detector(InitSystemKind.SYSTEMD)
        resolver = ServiceResolver({"systemd": backend}, detector=detector, system="Linux")

        with pytest.raises(InvalidServiceNameError):
            resolver.resolve_exists(name)
        with pytest.raises(InvalidServiceNameError):
            resolver.resolve_status(name)

        backend.exists.assert_not_called()
        backend.get_status.assert_not_called()
        detector.detect.assert_not_called()

    def test_windows_selects_scm(self) -> None:
        """On Windows the SCM backend should answer and no detection runs."""
        backend = MagicMock()
        backend.exists.return_value = True
        resolver = ServiceResolver({"windows": backend}, system="Windows")

        assert resolver.init_system() is None
        assert resolver.resolve_exists("wuauserv") is True
        backend.exists.assert_called_once_with("wuauserv")

    @pytest.mark.parametrize("kind", list(InitSystemKind))
    def test_linux_dispatches_on_detected_kind(self, kind: InitSystemKind) -> None:
        """On Linux the backend for the detected init system should answer."""
        backends = {k.value: MagicMock(name=k.value) for k in InitSystemKind}
        resolver = ServiceResolver(backends, detector=_detector(kind), system="Linux")

        resolver.resolve_status("sshd")

        backends[kind.value].get_status.assert_called_once_with("sshd")
        for other in InitSystemKind:
            if other != kind:
                backends[other.value].get_status.assert_not_called()

    def test_detects_on_every_call(self) -> None:
        """The init system should be detected again for each query."""
        detector = _detector(InitSystemKind.SYSV)
        resolver = ServiceResolver({"sysv": MagicMock()}, detector=detector, system="Linux")

        resolver.resolve_exists("cron")
        resolver.resolve_exists("cron")

        assert detector.detect.call_count == 2

    def test_missing_backend(self) -> None:
        """A detected kind with no backend should be unsupported."""
        resolver = ServiceResolver({}, detector=_detector(InitSystemKind.OPENRC), system="Linux")
        with pytest.raises(UnsupportedPlatformError):
            resolver.resolve_status("nginx")

    def test_linux_without_detector(self) -> None:
        """A Linux resolver without a detector cannot pick a backend."""
        resolver = ServiceResolver({}, system="Linux")
        with pytest.raises(UnsupportedPlatformError):
            resolver.init_system()

    def test_from_config_end_to_end(
        self,
        config: SvcstatConfig,
        openrc_host: None,
        make_file: Callable[..., Path],
    ) -> None:
        """A resolver from config should probe the configured root."""
        make_file("/etc/init.d/nginx")
        make_file("/run/openrc/started/nginx")
        make_file("/run/nginx.pid", "9999\n")

        resolver = ServiceResolver.from_config(config, system="Linux")

        assert resolver.init_system() == InitSystemKind.OPENRC
        assert resolver.resolve_exists("nginx")
        status = resolver.resolve_status("nginx")
        assert status.state.kind == ServiceState.RUNNING
        assert status.pid == 9999


class TestGetBackends:
    """Tests for get_backends."""

    def test_linux_backends(self, config: SvcstatConfig) -> None:
        """Linux should get one backend per init system."""
        backends = get_backends(config, system="Linux")

        assert set(backends) == {"systemd", "openrc", "sysv"}
        assert isinstance(backends["systemd"], SystemdBackend)
        assert isinstance(backends["openrc"], OpenRCBackend)
        assert isinstance(backends["sysv"], SysVBackend)

    def test_systemctl_only_without_bus(self, config: SvcstatConfig) -> None:
        """With the bus disabled only systemctl should be queried."""
        backend = get_backends(config, system="Linux")["systemd"]

        assert len(backend.sources) == 1
        assert isinstance(backend.sources[0], SystemctlClient)
        assert backend.sources[0].timeout == 5.0
        assert backend.sources[0].probe_timeout == 3.0

    def test_bus_first(self, fake_root: Path) -> None:
        """With the bus enabled it should be tried before systemctl."""
        config = SvcstatConfig(root=fake_root, systemctl="/usr/bin/systemctl", status_timeout=2.0)
        backend = get_backends(config, system="Linux")["systemd"]

        bus, cli = backend.sources
        assert isinstance(bus, SystemdBusClient)
        assert bus.timeout == 2.0
        assert isinstance(cli, SystemctlClient)
        assert cli.executable == "/usr/bin/systemctl"

    @pytest.mark.parametrize("system", ["Darwin", "FreeBSD"])
    def test_other_posix_hosts(self, config: SvcstatConfig, system: str) -> None:
        """Other POSIX hosts should get the init-system backends."""
        with patch("svcstat.backends.base.os.name", "posix"):
            backends = get_backends(config, system=system)

        assert set(backends) == {"systemd", "openrc", "sysv"}

    def test_other_posix_host_falls_back_to_sysv(self, config: SvcstatConfig) -> None:
        """A POSIX host without init markers should be answered by SysV."""
        with patch("svcstat.backends.base.os.name", "posix"):
            resolver = ServiceResolver.from_config(config, system="Darwin")

        assert resolver.init_system() == InitSystemKind.SYSV
        assert isinstance(resolver.select_backend(), SysVBackend)

    def test_unsupported_platform(self) -> None:
        """Non-POSIX platforms other than Windows should be rejected."""
        with patch("svcstat.backends.base.os.name", "java"):
            with pytest.raises(UnsupportedPlatformError):
                get_backends(SvcstatConfig(), system="Java")


class TestPublicApi:
    """Tests for svcstat.exists and svcstat.get_status."""

    @pytest.mark.parametrize("name", ["", "  ", ".", "../passwd"])
    def test_invalid_name(self, name: str) -> None:
        """Invalid names should be rejected without loading config."""
        with patch("svcstat.load_config") as mock_load:
            with pytest.raises(InvalidServiceNameError):
                svcstat.exists(name)
            with pytest.raises(InvalidServiceNameError):
                svcstat.get_status(name)
        mock_load.assert_not_called()

    def test_sysv_host(
        self,
        config: SvcstatConfig,
        make_file: Callable[..., Path],
        make_dir: Callable[[str], Path],
    ) -> None:
        """The public functions should answer from the detected backend."""
        make_file("/etc/init.d/cron")
        make_file("/var/run/cron.pid", "5678\n")
        make_dir("/proc/5678")

        with patch("svcstat.resolver.platform.system", return_value="Linux"):
            assert svcstat.exists("cron", config=config)
            assert not svcstat.exists("ghost", config=config)
            status = svcstat.get_status("cron", config=config)

        assert status.to_dict() == {
            "name": "cron",
            "exists": True,
            "state": "RUNNING",
            "pid": 5678,
            "rawCode": "active",
        }
