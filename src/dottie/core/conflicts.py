"""Conflict detection between configured links and the filesystem."""

from __future__ import annotations

import errno
import logging
import os
import stat
from typing import List, Optional, Sequence, Tuple

from .models import Conflict, ConflictKind, ConflictSurvey, DotfileEntry
from .paths import canonicalize, expand_path, resolve_link_value, source_path

logger = logging.getLogger(__name__)

# lstat errors that mean "nothing is there"
_ABSENT_ERRNOS = {errno.ENOENT, errno.ENOTDIR}


class ConflictDetector:
    """Sorts dotfile entries into safe, already linked and conflicting.

    Detection only reads the filesystem (``lstat`` and ``readlink``) and
    never changes it.
    """

    def detect(self, entries: Sequence[DotfileEntry], repo_root: str) -> ConflictSurvey:
        """Classify each entry by what currently sits at its target.

        Args:
            entries: Dotfile entries, in the order they should be processed.
            repo_root: Absolute path of the dotfiles repository.

        Returns:
            ConflictSurvey: Each entry appears in exactly one bucket; buckets
            keep input order.

        Raises:
            ValueError: If ``entries`` is None or ``repo_root`` is blank.
        """
        if entries is None:
            raise ValueError("entries must not be None")
        if not repo_root or not str(repo_root).strip():
            raise ValueError("repo_root must be a non-empty path")

        conflicts: List[Conflict] = []
        safe: List[DotfileEntry] = []
        linked: List[DotfileEntry] = []

        for entry in entries:
            target = expand_path(entry.target)
            expected = canonicalize(source_path(repo_root, entry.source))
            kind, link_value, error = self.classify(target, expected)

            if kind is ConflictKind.NONE:
                if link_value is not None:
                    logger.debug("Already linked: %s", target)
                    linked.append(entry)
                else:
                    logger.debug("Safe to link: %s", target)
                    safe.append(entry)
            elif kind in (
                ConflictKind.REGULAR_FILE,
                ConflictKind.DIRECTORY,
                ConflictKind.MISMATCHED_SYMLINK,
                ConflictKind.UNREADABLE,
            ):
                logger.debug("Conflict at %s: %s", target, kind.value)
                conflicts.append(
                    Conflict(
                        entry=entry,
                        expanded_target_path=target,
                        kind=kind,
                        existing_symlink_target=(
                            link_value if kind is ConflictKind.MISMATCHED_SYMLINK else None
                        ),
                        error_message=error,
                    )
                )
            else:
                raise AssertionError(f"Unhandled conflict kind: {kind}")

        return ConflictSurvey(tuple(conflicts), tuple(safe), tuple(linked))

    @staticmethod
    def classify(
        target: str, expected_source: str
    ) -> Tuple[ConflictKind, Optional[str], Optional[str]]:
        """Work out what is at ``target``.

        Returns:
            Tuple of (kind, raw link value or None, lstat error or None). A
            ``NONE`` kind with a link value means the target is already a
            correct link.
        """
        try:
            st = os.lstat(target)
        except OSError as e:
            if e.errno in _ABSENT_ERRNOS:
                return ConflictKind.NONE, None, None
            return ConflictKind.UNREADABLE, None, e.strerror or str(e)

        if stat.S_ISLNK(st.st_mode):
            try:
                value = os.readlink(target)
            except OSError as e:
                return ConflictKind.UNREADABLE, None, e.strerror or str(e)
            if resolve_link_value(target, value) == expected_source:
                return ConflictKind.NONE, value, None
            return ConflictKind.MISMATCHED_SYMLINK, value, None

        if stat.S_ISDIR(st.st_mode):
            return ConflictKind.DIRECTORY, None, None
        return ConflictKind.REGULAR_FILE, None, None
