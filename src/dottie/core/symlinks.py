"""Symlink creation and verification."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from typing import Optional

from .paths import canonicalize, resolve_link_value

logger = logging.getLogger(__name__)

# ERROR_PRIVILEGE_NOT_HELD
_WINDOWS_PRIVILEGE_ERROR = 1314

WINDOWS_SYMLINK_HINT = (
    "Creating symbolic links on Windows requires Developer Mode or an elevated prompt. "
    "Enable Developer Mode under Settings > System > For developers, "
    "or run dottie from a terminal started with 'Run as administrator'."
)


@dataclass(frozen=True)
class LinkAttempt:
    """Result of a single :meth:`SymlinkLinker.create_link` call."""

    ok: bool
    error_message: Optional[str] = None


class SymlinkLinker:
    """Creates symlinks and checks whether existing ones are correct.

    The linker keeps no state between calls, so one instance can be shared
    freely.
    """

    def create_link(self, link_path: str, target_path: str) -> LinkAttempt:
        """Create a symlink at ``link_path`` pointing at ``target_path``.

        Missing parent directories of ``link_path`` are created. The link
        value is written exactly as given.

        Args:
            link_path: Where the link goes.
            target_path: What the link points at.

        Returns:
            LinkAttempt: ``ok`` is False and ``error_message`` set when the
            filesystem refused the operation.
        """
        if not link_path or not target_path:
            raise ValueError("link_path and target_path must be non-empty")

        try:
            parent = os.path.dirname(link_path)
            if parent and not os.path.isdir(parent):
                logger.debug("Creating parent directory %s", parent)
                os.makedirs(parent, exist_ok=True)

            os.symlink(
                target_path, link_path, target_is_directory=os.path.isdir(target_path)
            )
        except OSError as e:
            message = self._describe_error(e)
            logger.warning("Could not link %s -> %s: %s", link_path, target_path, message)
            return LinkAttempt(False, message)

        logger.info("Linked %s -> %s", link_path, target_path)
        return LinkAttempt(True)

    def is_correct_link(self, link_path: str, expected_target: str) -> bool:
        """Check whether ``link_path`` is a symlink resolving to ``expected_target``.

        The link value is resolved relative to the link's parent directory
        and both sides are compared after lexical normalisation.
        """
        if not link_path or not expected_target:
            raise ValueError("link_path and expected_target must be non-empty")

        if not os.path.islink(link_path):
            return False
        try:
            value = os.readlink(link_path)
        except OSError:
            return False
        return resolve_link_value(link_path, value) == canonicalize(expected_target)

    @staticmethod
    def _describe_error(error: OSError) -> str:
        if sys.platform == "win32" and (
            isinstance(error, PermissionError)
            or getattr(error, "winerror", None) == _WINDOWS_PRIVILEGE_ERROR
        ):
            return WINDOWS_SYMLINK_HINT
        return error.strerror or str(error)
