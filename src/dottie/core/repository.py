"""Repository functionality for dottie."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Optional, Union


class GitRepository:
    """The Git repository that holds the dotfiles.

    Attributes:
        path (Path): Absolute path of the repository root.
        name (str): Directory name of the repository.
    """

    def __init__(self, path: Union[str, Path]):
        """Initialize repository."""
        self.path = Path(path).absolute()
        self.name = self.path.name

    def __str__(self) -> str:
        """Return string representation."""
        return f"GitRepository({self.path})"

    def __repr__(self) -> str:
        """Return string representation."""
        return self.__str__()

    @classmethod
    def find(cls, start: Optional[Union[str, Path]] = None) -> Optional[GitRepository]:
        """Find the repository containing ``start``.

        Walks up from ``start`` (default: the current directory) to the first
        directory with a ``.git`` entry. Worktrees and submodules use a
        ``.git`` file, which counts too.

        Args:
            start: Directory to start searching from.

        Returns:
            Optional[GitRepository]: The enclosing repository, or None if there
            is none.

        Example:
            ```python
            repo = GitRepository.find()
            if repo is None:
                print("Not inside a git repository")
            ```
        """
        current = Path(start) if start is not None else Path.cwd()
        current = current.absolute()
        for candidate in (current, *current.parents):
            if (candidate / ".git").exists():
                return cls(candidate)
        return None

    def _run_git(self, *args: str) -> str:
        """Run a Git command and return its output."""
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=self.path,
                capture_output=True,
                text=True,
                check=True,
            )
            return result.stdout.strip()
        except FileNotFoundError:
            raise RuntimeError("Git executable not found")
        except subprocess.CalledProcessError as e:
            if e.stderr:
                raise RuntimeError(f"Git command failed: {e.stderr.strip()}")
            if e.stdout:
                raise RuntimeError(f"Git command failed: {e.stdout.strip()}")
            raise RuntimeError("Git command failed with no output")

    def get_current_branch(self) -> Optional[str]:
        """Get the current branch name, or None if Git cannot tell."""
        try:
            return self._run_git("rev-parse", "--abbrev-ref", "HEAD")
        except RuntimeError:
            return None
