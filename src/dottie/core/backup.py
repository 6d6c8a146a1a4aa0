"""Backups of paths that stand in the way of a link.

A conflicting file, directory or symlink is renamed to a sibling called
``<path>.dottie-backup-YYYYMMDD-HHMMSS``. If that name is taken, ``.1``,
``.2`` and so on are appended until a free name is found, so a backup never
replaces another one.
"""

from __future__ import annotations

import logging
import os
import shutil
from datetime import datetime, timezone
from typing import Callable, Optional

from .models import BackupOutcome

logger = logging.getLogger(__name__)

TOOL_NAME = "dottie"
TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default clock."""
    return datetime.now(timezone.utc)


class BackupService:
    """Moves existing entries aside before they are replaced by links.

    Attributes:
        clock (Clock): Zero-argument callable returning the current time.
            Tests pass a fixed clock to get predictable backup names.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or utc_now

    def backup_path(self, path: str, timestamp: datetime) -> str:
        """Return the first free backup name for ``path`` at ``timestamp``.

        Args:
            path: Path being backed up.
            timestamp: Time to stamp into the name, converted to UTC.

        Returns:
            str: ``<path>.dottie-backup-<stamp>`` or the same with a ``.N``
            suffix when earlier backups already hold that name.
        """
        if timestamp.tzinfo is not None:
            timestamp = timestamp.astimezone(timezone.utc)
        base = f"{path}.{TOOL_NAME}-backup-{timestamp.strftime(TIMESTAMP_FORMAT)}"
        if not os.path.lexists(base):
            return base

        counter = 1
        while os.path.lexists(f"{base}.{counter}"):
            counter += 1
        return f"{base}.{counter}"

    def backup(self, path: str) -> BackupOutcome:
        """Move ``path`` to a timestamped sibling.

        Real directories are moved as a whole. Files and symlinks are renamed,
        so a symlink is backed up as a symlink rather than as the thing it
        points at.

        Args:
            path: Existing file, directory or symlink.

        Returns:
            BackupOutcome: On failure ``error_message`` explains why and the
            original is left where it was.
        """
        if not path:
            raise ValueError("path must be non-empty")

        timestamp = self.clock()
        if not os.path.lexists(path):
            logger.warning("Nothing to back up at %s", path)
            return BackupOutcome.failed(path, f"Path does not exist: {path}", timestamp)

        try:
            destination = self.backup_path(path, timestamp)
            if os.path.isdir(path) and not os.path.islink(path):
                shutil.move(path, destination)
            else:
                os.rename(path, destination)
        except OSError as e:
            logger.warning("Backup of %s failed: %s", path, e)
            return BackupOutcome.failed(path, e.strerror or str(e), timestamp)

        logger.info("Backed up %s to %s", path, destination)
        return BackupOutcome.succeeded(path, destination, timestamp)
