"""Pytest fixtures for svcstat tests."""

from collections.abc import Callable
from pathlib import Path

import pytest

from svcstat.backends.fs import HostFilesystem


@pytest.fixture
def fake_root(tmp_path: Path) -> Path:
    """Create an empty directory that stands in for the host's "/".

    Returns:
        Path to the fake root.
    """
    root = tmp_path / "host"
    root.mkdir()
    return root


@pytest.fixture
def host_fs(fake_root: Path) -> HostFilesystem:
    """Create a HostFilesystem rooted at the fake root."""
    return HostFilesystem(fake_root)


@pytest.fixture
def make_file(fake_root: Path) -> Callable[..., Path]:
    """Return a helper that creates a file under the fake root.

    The helper takes a host-absolute path and optional content.
    """

    def _make(path: str, content: str = "") -> Path:
        target = fake_root / path.lstrip("/")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        return target

    return _make


@pytest.fixture
def make_dir(fake_root: Path) -> Callable[[str], Path]:
    """Return a helper that creates a directory under the fake root."""

    def _make(path: str) -> Path:
        target = fake_root / path.lstrip("/")
        target.mkdir(parents=True, exist_ok=True)
        return target

    return _make


@pytest.fixture
def systemd_host(make_file: Callable[..., Path]) -> None:
    """Mark the fake root as a systemd host."""
    make_file("/run/systemd/private")


@pytest.fixture
def openrc_host(make_file: Callable[..., Path]) -> None:
    """Mark the fake root as an OpenRC host."""
    make_file("/run/openrc/softlevel", "default\n")
