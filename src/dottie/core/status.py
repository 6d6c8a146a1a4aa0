"""Read-only link status for each dotfile in a profile."""

from __future__ import annotations

import errno
import logging
import os
import stat
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from .models import DotfileEntry
from .paths import canonicalize, expand_path, resolve_link_value, source_path

logger = logging.getLogger(__name__)


class DotfileLinkState(Enum):
    """Current state of a dotfile link."""

    LINKED = "linked"
    MISSING = "missing"
    BROKEN = "broken"
    CONFLICTING = "conflicting"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class DotfileStatus:
    """Status of a single dotfile entry.

    Attributes:
        entry: The configured entry.
        state: What was found at the target.
        expanded_target_path: Target with ``~`` expanded.
        message: Details such as the wrong link value or the lstat error.
    """

    entry: DotfileEntry
    state: DotfileLinkState
    expanded_target_path: str
    message: Optional[str] = None


class DotfileStatusChecker:
    """Reports how each configured dotfile currently looks on disk."""

    def check(self, entries: Sequence[DotfileEntry], repo_root: str) -> List[DotfileStatus]:
        """Check every entry.

        Args:
            entries: Dotfile entries to check.
            repo_root: Absolute path of the dotfiles repository.

        Returns:
            One status per entry, in input order.
        """
        if entries is None:
            raise ValueError("entries must not be None")
        if not repo_root or not str(repo_root).strip():
            raise ValueError("repo_root must be a non-empty path")

        return [self._check_entry(entry, repo_root) for entry in entries]

    def _check_entry(self, entry: DotfileEntry, repo_root: str) -> DotfileStatus:
        target = expand_path(entry.target)
        expected = canonicalize(source_path(repo_root, entry.source))

        try:
            st = os.lstat(target)
        except OSError as e:
            if e.errno in (errno.ENOENT, errno.ENOTDIR):
                return DotfileStatus(entry, DotfileLinkState.MISSING, target)
            logger.debug("Could not inspect %s: %s", target, e)
            return DotfileStatus(entry, DotfileLinkState.UNKNOWN, target, f"Cannot read: {e}")

        if not stat.S_ISLNK(st.st_mode):
            kind = "directory" if stat.S_ISDIR(st.st_mode) else "file"
            return DotfileStatus(
                entry, DotfileLinkState.CONFLICTING, target, f"Existing {kind} blocks target"
            )

        try:
            value = os.readlink(target)
        except OSError as e:
            return DotfileStatus(entry, DotfileLinkState.UNKNOWN, target, f"Cannot read: {e}")

        resolved = resolve_link_value(target, value)
        if not os.path.exists(resolved):
            return DotfileStatus(
                entry, DotfileLinkState.BROKEN, target, f"Symlink target does not exist: {value}"
            )
        if resolved == expected:
            return DotfileStatus(entry, DotfileLinkState.LINKED, target)
        return DotfileStatus(
            entry, DotfileLinkState.CONFLICTING, target, f"Symlink points to wrong target: {value}"
        )
