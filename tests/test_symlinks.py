"""Tests for symlink creation and verification."""

import os
import sys
from pathlib import Path

import pytest

from dottie.core import symlinks
from dottie.core.symlinks import WINDOWS_SYMLINK_HINT, SymlinkLinker


@pytest.fixture
def linker() -> SymlinkLinker:
    """Create a linker."""
    return SymlinkLinker()


def test_create_file_link(linker: SymlinkLinker, repo_root: Path, home: Path) -> None:
    """A link to a file is created and points at the exact source string."""
    link = str(home / ".bashrc")
    source = os.path.join(str(repo_root), "bashrc")

    attempt = linker.create_link(link, source)

    assert attempt.ok
    assert attempt.error_message is None
    assert os.path.islink(link)
    assert os.readlink(link) == source
    assert Path(link).read_text() == "export EDITOR=vim\n"


def test_create_directory_link(linker: SymlinkLinker, repo_root: Path, home: Path) -> None:
    """A link to a directory behaves like the directory."""
    link = str(home / ".config" / "nvim")
    source = os.path.join(str(repo_root), "nvim")

    assert linker.create_link(link, source).ok
    assert os.path.islink(link)
    assert os.path.isdir(link)
    assert (Path(link) / "init.lua").exists()


def test_create_link_makes_parents(linker: SymlinkLinker, repo_root: Path, home: Path) -> None:
    """Missing parent directories are created."""
    link = home / "a" / "b" / "c" / ".vimrc"

    assert linker.create_link(str(link), str(repo_root / "vimrc")).ok
    assert (home / "a" / "b" / "c").is_dir()
    assert link.is_symlink()


def test_create_link_over_existing_file_fails(
    linker: SymlinkLinker, repo_root: Path, home: Path
) -> None:
    """An occupied link path is reported, not raised, and left alone."""
    existing = home / ".bashrc"
    existing.write_text("original")

    attempt = linker.create_link(str(existing), str(repo_root / "bashrc"))

    assert not attempt.ok
    assert attempt.error_message
    assert existing.read_text() == "original"
    assert not existing.is_symlink()


def test_create_link_under_file_fails(linker: SymlinkLinker, repo_root: Path, home: Path) -> None:
    """A parent that is a regular file makes the link fail."""
    (home / "blocker").write_text("not a directory")

    attempt = linker.create_link(str(home / "blocker" / "child"), str(repo_root / "bashrc"))

    assert not attempt.ok
    assert attempt.error_message


def test_create_link_rejects_empty_paths(linker: SymlinkLinker) -> None:
    """Empty arguments are programming errors."""
    with pytest.raises(ValueError):
        linker.create_link("", "/somewhere")
    with pytest.raises(ValueError):
        linker.create_link("/somewhere", "")


def test_is_correct_link(linker: SymlinkLinker, repo_root: Path, home: Path) -> None:
    """Only a symlink resolving to the expected target counts."""
    link = home / ".bashrc"
    assert not linker.is_correct_link(str(link), str(repo_root / "bashrc"))

    link.write_text("plain file")
    assert not linker.is_correct_link(str(link), str(repo_root / "bashrc"))

    link.unlink()
    link.symlink_to(repo_root / "vimrc")
    assert not linker.is_correct_link(str(link), str(repo_root / "bashrc"))

    link.unlink()
    link.symlink_to(repo_root / "bashrc")
    assert linker.is_correct_link(str(link), str(repo_root / "bashrc"))


def test_is_correct_link_relative_value(linker: SymlinkLinker, repo_root: Path, home: Path) -> None:
    """Relative link values are resolved against the link's directory."""
    link = home / ".bashrc"
    link.symlink_to(os.path.join("..", "repo", "bashrc"))

    assert linker.is_correct_link(str(link), str(repo_root / "bashrc"))
    assert linker.is_correct_link(str(link), str(repo_root / "." / "bashrc"))


def test_windows_privilege_hint(monkeypatch: pytest.MonkeyPatch) -> None:
    """Permission errors on Windows explain how to enable symlinks."""
    monkeypatch.setattr(symlinks.sys, "platform", "win32")
    message = SymlinkLinker._describe_error(PermissionError(1, "A required privilege is not held"))
    assert message == WINDOWS_SYMLINK_HINT
    assert "Developer Mode" in message


def test_other_errors_keep_message() -> None:
    """Other failures pass the underlying message through."""
    if sys.platform == "win32":
        pytest.skip("POSIX message check")
    message = SymlinkLinker._describe_error(FileExistsError(17, "File exists"))
    assert message == "File exists"
