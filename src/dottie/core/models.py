"""Value objects produced and consumed by the linking engine.

Everything here is created fresh for a single run and never mutated
afterwards. Callers (the CLI formatters, tests) read them and throw them
away.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class DotfileEntry:
    """A configured (source, target) pair.

    Attributes:
        source: Path relative to the repository root.
        target: Destination path, may start with ``~``.
    """

    source: str
    target: str


@dataclass(frozen=True)
class ResolvedProfile:
    """A profile with its inheritance chain already merged."""

    name: str
    dotfiles: Tuple[DotfileEntry, ...] = ()
    inheritance_chain: Tuple[str, ...] = ()


class ConflictKind(Enum):
    """State of an existing entry at a link target."""

    NONE = "none"
    REGULAR_FILE = "file"
    DIRECTORY = "directory"
    MISMATCHED_SYMLINK = "mismatched_symlink"
    UNREADABLE = "unreadable"


@dataclass(frozen=True)
class Conflict:
    """A target whose current state prevents a direct link.

    Attributes:
        entry: The dotfile entry that wants the target.
        expanded_target_path: Target with ``~`` expanded.
        kind: What is in the way.
        existing_symlink_target: Raw link value, only for mismatched symlinks.
        error_message: lstat or readlink error text, only for unreadable targets.
    """

    entry: DotfileEntry
    expanded_target_path: str
    kind: ConflictKind
    existing_symlink_target: Optional[str] = None
    error_message: Optional[str] = None


@dataclass(frozen=True)
class ConflictSurvey:
    """Result of a detection pass.

    Every input entry lands in exactly one of the three buckets, in input
    order.
    """

    conflicts: Tuple[Conflict, ...] = ()
    safe_entries: Tuple[DotfileEntry, ...] = ()
    already_linked_entries: Tuple[DotfileEntry, ...] = ()

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)

    @property
    def total(self) -> int:
        """Number of entries surveyed, across all three buckets."""
        return len(self.conflicts) + len(self.safe_entries) + len(self.already_linked_entries)


@dataclass(frozen=True)
class BackupOutcome:
    """Result of moving an existing path aside."""

    original_path: str
    success: bool
    timestamp: datetime
    backup_path: Optional[str] = None
    error_message: Optional[str] = None

    @classmethod
    def succeeded(cls, original_path: str, backup_path: str, timestamp: datetime) -> BackupOutcome:
        return cls(original_path, True, timestamp, backup_path=backup_path)

    @classmethod
    def failed(cls, original_path: str, error_message: str, timestamp: datetime) -> BackupOutcome:
        return cls(original_path, False, timestamp, error_message=error_message)


class LinkOutcomeKind(Enum):
    """Per-entry result of a linking run."""

    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILURE = "failure"


@dataclass(frozen=True)
class LinkOutcome:
    """What happened to one dotfile entry."""

    kind: LinkOutcomeKind
    entry: DotfileEntry
    expanded_target_path: str
    backup: Optional[BackupOutcome] = None
    error_message: Optional[str] = None

    @classmethod
    def success(
        cls, entry: DotfileEntry, target_path: str, backup: Optional[BackupOutcome] = None
    ) -> LinkOutcome:
        return cls(LinkOutcomeKind.SUCCESS, entry, target_path, backup=backup)

    @classmethod
    def skipped(cls, entry: DotfileEntry, target_path: str) -> LinkOutcome:
        return cls(LinkOutcomeKind.SKIPPED, entry, target_path)

    @classmethod
    def failure(cls, entry: DotfileEntry, target_path: str, error_message: str) -> LinkOutcome:
        return cls(LinkOutcomeKind.FAILURE, entry, target_path, error_message=error_message)


@dataclass(frozen=True)
class LinkBatchResult:
    """Outcomes of a completed run, split by kind."""

    successful: Tuple[LinkOutcome, ...] = ()
    skipped: Tuple[LinkOutcome, ...] = ()
    failed: Tuple[LinkOutcome, ...] = ()

    @property
    def is_success(self) -> bool:
        return not self.failed


@dataclass(frozen=True)
class Blocked:
    """Run refused because conflicts exist and force was not requested."""

    survey: ConflictSurvey

    @property
    def is_blocked(self) -> bool:
        return True


@dataclass(frozen=True)
class Completed:
    """Run went through every entry."""

    batch: LinkBatchResult
    backups: Tuple[BackupOutcome, ...] = field(default_factory=tuple)

    @property
    def is_blocked(self) -> bool:
        return False


LinkRunResult = Union[Blocked, Completed]
