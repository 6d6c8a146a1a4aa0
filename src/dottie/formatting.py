"""Console rendering of linking and status results."""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from .core.models import (
    BackupOutcome,
    Conflict,
    ConflictKind,
    ConflictSurvey,
    LinkBatchResult,
    ResolvedProfile,
)
from .core.status import DotfileLinkState, DotfileStatus


def conflict_label(conflict: Conflict) -> str:
    """Short description of what is in the way."""
    if conflict.kind is ConflictKind.REGULAR_FILE:
        return "file"
    if conflict.kind is ConflictKind.DIRECTORY:
        return "directory"
    if conflict.kind is ConflictKind.MISMATCHED_SYMLINK:
        return f"symlink → {conflict.existing_symlink_target or 'unknown'}"
    if conflict.kind is ConflictKind.UNREADABLE:
        return f"unreadable: {conflict.error_message or 'unknown error'}"
    raise ValueError(f"Not a conflict: {conflict.kind}")


def write_dry_run(survey: ConflictSurvey, console: Console) -> None:
    """Show what a link run would do without doing it."""
    console.print("[yellow]Dry run - no changes will be made.[/yellow]")
    console.print()

    if survey.safe_entries:
        console.print(f"[green]Would create {len(survey.safe_entries)} symlink(s):[/green]")
        for entry in survey.safe_entries:
            console.print(f"  [dim]•[/dim] {escape(entry.source)} → {escape(entry.target)}")
        console.print()

    if survey.already_linked_entries:
        console.print(
            f"[dim]Would skip {len(survey.already_linked_entries)} file(s) (already linked):[/dim]"
        )
        for entry in survey.already_linked_entries:
            console.print(f"  [dim]•[/dim] {escape(entry.target)}")
        console.print()

    if survey.conflicts:
        console.print("[yellow]Conflicts detected (use --force to resolve):[/yellow]")
        for conflict in survey.conflicts:
            console.print(
                f"  [yellow]•[/yellow] {escape(conflict.expanded_target_path)} "
                f"[dim]({escape(conflict_label(conflict))})[/dim]"
            )


def write_conflicts(conflicts: Sequence[Conflict], console: Console) -> None:
    """Explain why a run was blocked."""
    console.print(
        "[red]Error:[/red] Conflicting files detected. Use --force to backup and overwrite."
    )
    console.print()
    console.print("[yellow]Conflicts:[/yellow]")
    for conflict in conflicts:
        console.print(
            f"  [yellow]•[/yellow] {escape(conflict.expanded_target_path)} "
            f"[dim]({escape(conflict_label(conflict))})[/dim]"
        )
    console.print()
    console.print(f"[red]Found {len(conflicts)} conflict(s). Nothing was changed.[/red]")


def write_backups(backups: Sequence[BackupOutcome], console: Console) -> None:
    """List backups made during a forced run."""
    succeeded = [b for b in backups if b.success]
    failed = [b for b in backups if not b.success]

    if succeeded:
        console.print(f"[green]Backed up {len(succeeded)} file(s):[/green]")
        for backup in succeeded:
            console.print(
                f"  [dim]•[/dim] {escape(backup.original_path)} → {escape(backup.backup_path or '')}"
            )
        console.print()

    if failed:
        console.print(f"[red]Failed to backup {len(failed)} file(s):[/red]")
        for backup in failed:
            console.print(
                f"  [red]•[/red] {escape(backup.original_path)}: {escape(backup.error_message or '')}"
            )
        console.print()


def write_batch(batch: LinkBatchResult, console: Console) -> None:
    """Summarise a completed run."""
    if batch.successful:
        console.print(f"[green]✓[/green] Created {len(batch.successful)} symlink(s).")
    if batch.skipped:
        console.print(f"[dim]Skipped {len(batch.skipped)} file(s) (already linked).[/dim]")
    if batch.failed:
        console.print(f"[red]Failed to link {len(batch.failed)} file(s):[/red]")
        for outcome in batch.failed:
            console.print(
                f"  [red]•[/red] {escape(outcome.expanded_target_path)}: "
                f"{escape(outcome.error_message or '')}"
            )
    if not (batch.successful or batch.skipped or batch.failed):
        console.print("[yellow]Nothing to link.[/yellow]")


_STATE_STYLES = {
    DotfileLinkState.LINKED: ("✓ linked", "green"),
    DotfileLinkState.MISSING: ("missing", "yellow"),
    DotfileLinkState.BROKEN: ("broken", "red"),
    DotfileLinkState.CONFLICTING: ("conflict", "red"),
    DotfileLinkState.UNKNOWN: ("unknown", "magenta"),
}


def write_status(
    profile_name: str,
    inheritance_chain: Sequence[str],
    statuses: Sequence[DotfileStatus],
    console: Console,
    branch: Optional[str] = None,
) -> None:
    """Render a status table for a profile."""
    header = f"[bold]Profile:[/bold] {escape(profile_name)}"
    if len(inheritance_chain) > 1:
        header += f" [dim]({escape(' → '.join(inheritance_chain))})[/dim]"
    console.print(header)
    if branch:
        console.print(f"[bold]Branch:[/bold] {escape(branch)}")

    if not statuses:
        console.print("[yellow]No dotfiles configured.[/yellow]")
        return

    table = Table(title="Dotfiles")
    table.add_column("Source", style="cyan")
    table.add_column("Target", style="blue")
    table.add_column("State")
    table.add_column("Details", style="dim")

    for status in statuses:
        label, style = _STATE_STYLES[status.state]
        table.add_row(
            escape(status.entry.source),
            escape(status.entry.target),
            f"[{style}]{label}[/{style}]",
            escape(status.message or ""),
        )

    console.print(table)

    linked = sum(1 for s in statuses if s.state is DotfileLinkState.LINKED)
    console.print(f"{linked}/{len(statuses)} dotfile(s) linked.")


def write_valid_profile(profile: ResolvedProfile, console: Console) -> None:
    """Confirm that a profile resolved cleanly."""
    console.print(f"[green]✓[/green] Profile '[bold]{escape(profile.name)}[/bold]' is valid.")
    if len(profile.inheritance_chain) > 1:
        console.print(f"  Inheritance chain: {escape(' → '.join(profile.inheritance_chain))}")
    console.print(f"  {len(profile.dotfiles)} dotfile(s) after inheritance.")


def write_profiles(profiles: Sequence[Tuple[str, Optional[str]]], console: Console) -> None:
    """List profile names with the profile each one extends."""
    console.print("[yellow]Available profiles:[/yellow]")
    tree = Tree("[yellow]Profiles[/yellow]")
    for name, parent in profiles:
        label = f"[bold]{escape(name)}[/bold]"
        if parent:
            label += f" [dim](extends: {escape(parent)})[/dim]"
        tree.add(label)
    console.print(tree)
