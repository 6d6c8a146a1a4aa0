"""Linking orchestration.

A run surveys every target first. If anything conflicts and the caller did
not ask for ``force``, the run stops there and returns the survey without
touching the filesystem. Otherwise already linked entries are skipped,
conflicts are backed up and linked (only with ``force``), and safe entries
are linked. A failure on one entry never stops the others.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .backup import BackupService
from .conflicts import ConflictDetector
from .models import (
    BackupOutcome,
    Blocked,
    Completed,
    Conflict,
    ConflictSurvey,
    DotfileEntry,
    LinkBatchResult,
    LinkOutcome,
    LinkOutcomeKind,
    LinkRunResult,
    ResolvedProfile,
)
from .paths import expand_path, source_path
from .symlinks import SymlinkLinker

logger = logging.getLogger(__name__)


class LinkingOrchestrator:
    """Runs the survey, backup and link steps for a resolved profile.

    Attributes:
        detector (ConflictDetector): Classifies targets before anything moves.
        backup_service (BackupService): Moves conflicting targets aside.
        linker (SymlinkLinker): Creates the links.
    """

    def __init__(
        self,
        detector: Optional[ConflictDetector] = None,
        backup_service: Optional[BackupService] = None,
        linker: Optional[SymlinkLinker] = None,
    ):
        self.detector = detector or ConflictDetector()
        self.backup_service = backup_service or BackupService()
        self.linker = linker or SymlinkLinker()

    def preview(self, profile: ResolvedProfile, repo_root: str) -> ConflictSurvey:
        """Survey the profile's targets without changing anything."""
        self._check_arguments(profile, repo_root)
        return self.detector.detect(list(profile.dotfiles), repo_root)

    def execute_link(self, profile: ResolvedProfile, repo_root: str, force: bool) -> LinkRunResult:
        """Link every dotfile in ``profile``.

        Args:
            profile: Resolved profile whose dotfiles should be linked.
            repo_root: Absolute path of the dotfiles repository.
            force: Back up and replace conflicting targets instead of
                refusing to run.

        Returns:
            LinkRunResult: ``Blocked`` when conflicts exist and ``force`` is
            False (nothing was changed), ``Completed`` otherwise.

        Raises:
            ValueError: If ``profile`` is None or ``repo_root`` is blank.
        """
        survey = self.preview(profile, repo_root)

        if survey.has_conflicts and not force:
            logger.info(
                "Linking blocked by %d conflict(s) in profile '%s'",
                len(survey.conflicts),
                profile.name,
            )
            return Blocked(survey)

        successful: List[LinkOutcome] = []
        skipped: List[LinkOutcome] = []
        failed: List[LinkOutcome] = []
        backups: List[BackupOutcome] = []

        for entry in survey.already_linked_entries:
            skipped.append(LinkOutcome.skipped(entry, expand_path(entry.target)))

        if force:
            for conflict in survey.conflicts:
                outcome = self._replace_conflict(conflict, repo_root, backups)
                self._record(outcome, successful, failed)

        for entry in survey.safe_entries:
            outcome = self._link(entry, expand_path(entry.target), repo_root)
            self._record(outcome, successful, failed)

        logger.info(
            "Linked %d, skipped %d, failed %d for profile '%s'",
            len(successful),
            len(skipped),
            len(failed),
            profile.name,
        )
        return Completed(
            LinkBatchResult(tuple(successful), tuple(skipped), tuple(failed)), tuple(backups)
        )

    def _replace_conflict(
        self, conflict: Conflict, repo_root: str, backups: List[BackupOutcome]
    ) -> LinkOutcome:
        backup = self.backup_service.backup(conflict.expanded_target_path)
        backups.append(backup)
        if not backup.success:
            return LinkOutcome.failure(
                conflict.entry,
                conflict.expanded_target_path,
                f"Backup failed: {backup.error_message}",
            )
        return self._link(conflict.entry, conflict.expanded_target_path, repo_root, backup)

    def _link(
        self,
        entry: DotfileEntry,
        target: str,
        repo_root: str,
        backup: Optional[BackupOutcome] = None,
    ) -> LinkOutcome:
        attempt = self.linker.create_link(target, source_path(repo_root, entry.source))
        if attempt.ok:
            return LinkOutcome.success(entry, target, backup)
        message = "Failed to create symlink"
        if attempt.error_message:
            message = f"{message}: {attempt.error_message}"
        return LinkOutcome.failure(entry, target, message)

    @staticmethod
    def _record(
        outcome: LinkOutcome, successful: List[LinkOutcome], failed: List[LinkOutcome]
    ) -> None:
        if outcome.kind is LinkOutcomeKind.SUCCESS:
            successful.append(outcome)
        elif outcome.kind is LinkOutcomeKind.FAILURE:
            failed.append(outcome)
        else:
            raise AssertionError(f"Unexpected outcome for a link attempt: {outcome.kind}")

    @staticmethod
    def _check_arguments(profile: ResolvedProfile, repo_root: str) -> None:
        if profile is None:
            raise ValueError("profile must not be None")
        if not repo_root or not str(repo_root).strip():
            raise ValueError("repo_root must be a non-empty path")
