"""Command line interface for dottie."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Tuple

import click
from rich.console import Console
from rich.markup import escape

from .core.config import (
    CONFIG_FILENAME,
    DEFAULT_PROFILE,
    Config,
    ConfigError,
    ValidationError,
    load_profile,
)
from .core.linking import LinkingOrchestrator
from .core.logging import setup_logging
from .core.models import Blocked, Completed, ResolvedProfile
from .core.repository import GitRepository
from .core.status import DotfileStatusChecker
from .formatting import (
    write_backups,
    write_batch,
    write_conflicts,
    write_dry_run,
    write_profiles,
    write_status,
    write_valid_profile,
)

console = Console()
logger = logging.getLogger(__name__)

EXIT_FAILED = 1
EXIT_BLOCKED = 2


def _profile_name(ctx: click.Context, param: click.Parameter, value: Optional[str]) -> str:
    """Treat an empty or blank profile name as the default profile."""
    name = (value or "").strip()
    return name or DEFAULT_PROFILE


profile_option = click.option(
    "--profile",
    "-p",
    default=DEFAULT_PROFILE,
    show_default=True,
    callback=_profile_name,
    help="Profile to use",
)
config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help=f"Path to the configuration file (default: {CONFIG_FILENAME} in repo root)",
)


@click.group()
@click.option("--debug", is_flag=True, help="Show debug logging")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    help="Also write a debug log to this file",
)
def cli(debug: bool, log_file: Optional[str]) -> None:
    """Link dotfiles from a repository into your home directory.

    Dotfiles are described in dottie.yaml at the root of the repository, grouped
    into profiles. A profile can extend another profile and inherits its
    dotfiles.

    Main commands:

      link      Create symlinks for a profile's dotfiles
      status    Show which dotfiles are linked
      validate  Check dottie.yaml and a profile without linking anything

    Run 'dottie COMMAND --help' for more information on a specific command.
    """
    setup_logging(debug=debug, log_file=log_file)


def _find_repo() -> GitRepository:
    """Return the enclosing repository or exit with status 1."""
    repo = GitRepository.find()
    if repo is None:
        console.print("[red]Error:[/red] Could not find git repository root.")
        console.print("[yellow]Hint:[/yellow] Make sure you're running from within a git repository.")
        raise click.exceptions.Exit(EXIT_FAILED)
    logger.debug("Repository root: %s", repo.path)
    return repo


def _check_config_file(config_file: Path) -> None:
    if not config_file.is_file():
        console.print(f"[red]Error:[/red] Could not find {escape(str(config_file))}.")
        raise click.exceptions.Exit(EXIT_FAILED)


def _write_config_errors(errors: List[ValidationError]) -> None:
    console.print("[red]Error:[/red] Invalid configuration:")
    for error in errors:
        console.print(f"  [red]•[/red] {escape(str(error))}")


def _load(profile: str, config_path: Optional[Path]) -> Tuple[str, ResolvedProfile]:
    """Find the repository and resolve the requested profile.

    Exits with status 1 after printing the reason if either step fails.
    """
    repo = _find_repo()
    config_file = config_path or repo.path / CONFIG_FILENAME
    _check_config_file(config_file)

    try:
        resolved = load_profile(config_file, profile)
    except ConfigError as e:
        _write_config_errors(e.errors)
        raise click.exceptions.Exit(EXIT_FAILED)

    return str(repo.path), resolved


@cli.command()
@profile_option
@config_option
@click.option(
    "--force", "-f", is_flag=True, help="Back up conflicting files and link over them"
)
@click.option(
    "--dry-run", is_flag=True, help="Show what would be linked without making any changes"
)
def link(profile: str, config_path: Optional[Path], force: bool, dry_run: bool) -> None:
    """Create symlinks for a profile's dotfiles.

    Every target is checked before anything changes. If a target is already
    taken by a file, a directory or a symlink pointing elsewhere, nothing is
    linked and the conflicts are listed (exit status 2). With --force each
    conflicting target is moved to <target>.dottie-backup-YYYYMMDD-HHMMSS and
    then linked.

    Exit status is 0 when every dotfile is linked, 1 when some entries failed
    and 2 when the run was blocked by conflicts.

    Examples:

      # Link the default profile
      dottie link

      # Link the 'work' profile, backing up anything in the way
      dottie link --profile work --force

      # Preview without touching the filesystem
      dottie link --dry-run
    """
    repo_root, resolved = _load(profile, config_path)

    if not resolved.dotfiles:
        console.print(f"[yellow]Warning:[/yellow] Profile '{profile}' has no dotfiles to link.")
        return

    orchestrator = LinkingOrchestrator()

    if dry_run:
        write_dry_run(orchestrator.preview(resolved, repo_root), console)
        return

    with console.status("[green]Linking dotfiles...[/green]"):
        result = orchestrator.execute_link(resolved, repo_root, force)

    if isinstance(result, Blocked):
        write_conflicts(result.survey.conflicts, console)
        raise click.exceptions.Exit(EXIT_BLOCKED)
    if isinstance(result, Completed):
        write_backups(result.backups, console)
        write_batch(result.batch, console)
        if not result.batch.is_success:
            raise click.exceptions.Exit(EXIT_FAILED)
        return
    raise TypeError(f"Unexpected link result: {result!r}")


@cli.command()
@profile_option
@config_option
def status(profile: str, config_path: Optional[Path]) -> None:
    """Show which of a profile's dotfiles are linked.

    Examples:

      # Status of the default profile
      dottie status

      # Status of the 'work' profile
      dottie status -p work
    """
    repo_root, resolved = _load(profile, config_path)
    statuses = DotfileStatusChecker().check(resolved.dotfiles, repo_root)
    write_status(
        resolved.name,
        resolved.inheritance_chain,
        statuses,
        console,
        branch=GitRepository(repo_root).get_current_branch(),
    )


@cli.command()
@profile_option
@config_option
def validate(profile: str, config_path: Optional[Path]) -> None:
    """Check dottie.yaml and a profile without linking anything.

    The whole file is validated first, then the profile is resolved through
    its inheritance chain. With --config the file is used as given and no
    git repository is needed.

    Examples:

      # Validate the default profile
      dottie validate

      # Validate the 'work' profile of another file
      dottie validate -p work -c ~/dotfiles/dottie.yaml
    """
    config_file = config_path or _find_repo().path / CONFIG_FILENAME
    _check_config_file(config_file)

    config = Config()
    errors = config.load_config(config_file) or config.validate()
    if errors:
        _write_config_errors(errors)
        raise click.exceptions.Exit(EXIT_FAILED)

    try:
        resolved = config.resolve_profile(profile)
    except ConfigError as e:
        _write_config_errors(e.errors)
        names = config.get_profile_names()
        if profile not in names:
            write_profiles([(name, config.get_profile_parent(name)) for name in names], console)
        raise click.exceptions.Exit(EXIT_FAILED)

    write_valid_profile(resolved, console)


def main() -> None:
    """Entry point for the dottie CLI."""
    cli()


if __name__ == "__main__":
    main()
