"""Read-only view of the host filesystem used by the probe backends.

All paths are given in host-absolute form ("/etc/init.d/cron") and resolved
against a configurable root, so the same probes run against "/" in
production and against a prepared directory tree in tests or chroots.
"""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


def is_plain_name(name: str) -> bool:
    """Whether a name can stand for exactly one directory entry.

    Names with a path separator or NUL, and "." or "..", would resolve
    outside the directory they are joined to.
    """
    return name not in ("", ".", "..") and "/" not in name and "\0" not in name


class HostFilesystem:
    """Filesystem facts rooted at a given directory."""

    def __init__(self, root: Path | str = "/") -> None:
        """Initialize the filesystem view.

        Args:
            root: Directory that stands in for the host's "/".
        """
        self.root = Path(root)

    def resolve(self, path: str) -> Path:
        """Map a host-absolute path onto the configured root."""
        return self.root / path.lstrip("/")

    def exists(self, path: str) -> bool:
        """Check whether a path is present.

        Symlinks count as present even when their target is missing, since
        runlevel links are created before the target may be readable.
        """
        return os.path.lexists(self.resolve(path))

    def is_dir(self, path: str) -> bool:
        return self.resolve(path).is_dir()

    def is_file(self, path: str) -> bool:
        """Check whether a path is a regular file, following symlinks."""
        return self.resolve(path).is_file()

    def read_text(self, path: str) -> str | None:
        """Read a small text file.

        Returns:
            The file contents, or None if the file is absent or unreadable.
        """
        try:
            return self.resolve(path).read_text(encoding="utf-8", errors="replace")
        except (OSError, ValueError) as e:
            logger.debug("Could not read %s: %s", path, e)
            return None

    def read_pid(self, path: str) -> int:
        """Read a pid file.

        Returns:
            The first whitespace-separated token as an integer, or 0 if the
            file is absent, empty, or that token is not a positive integer.
        """
        content = self.read_text(path)
        if not content:
            return 0
        tokens = content.split(None, 1)
        if not tokens:
            return 0
        first = tokens[0]
        try:
            pid = int(first)
        except ValueError:
            logger.debug("Ignoring malformed pid file %s: %r", path, first)
            return 0
        return pid if pid > 0 else 0
