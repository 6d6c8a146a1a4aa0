"""Test configuration."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, Tuple

import pytest

from dottie.core.backup import BackupService
from dottie.core.models import DotfileEntry, ResolvedProfile

FIXED_TIME = datetime(2026, 1, 30, 14, 30, 22, tzinfo=timezone.utc)


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point ``~`` at an empty temporary home directory."""
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    monkeypatch.setenv("USERPROFILE", str(home_dir))
    return home_dir


@pytest.fixture
def repo_root(tmp_path: Path) -> Path:
    """Create a dotfiles repository with a few sources."""
    repo_dir = tmp_path / "repo"
    repo_dir.mkdir()
    (repo_dir / ".git").mkdir()
    (repo_dir / "bashrc").write_text("export EDITOR=vim\n")
    (repo_dir / "vimrc").write_text("set number\n")
    (repo_dir / "gitconfig").write_text("[user]\n\tname = Test User\n")
    nvim = repo_dir / "nvim"
    nvim.mkdir()
    (nvim / "init.lua").write_text("vim.opt.number = true\n")
    return repo_dir


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock that always returns the same instant."""
    return lambda: FIXED_TIME


@pytest.fixture
def backup_service(fixed_clock: Callable[[], datetime]) -> BackupService:
    """Create a backup service with a fixed clock."""
    return BackupService(clock=fixed_clock)


@pytest.fixture
def bashrc_profile() -> ResolvedProfile:
    """Profile with a single bashrc entry."""
    return ResolvedProfile(
        name="default",
        dotfiles=(DotfileEntry(source="bashrc", target="~/.bashrc"),),
        inheritance_chain=("default",),
    )


def _snapshot(root: Path) -> Dict[str, Tuple]:
    state: Dict[str, Tuple] = {}
    for dirpath, dirnames, filenames in os.walk(root):
        for name in dirnames + filenames:
            path = os.path.join(dirpath, name)
            st = os.lstat(path)
            if os.path.islink(path):
                detail = ("link", os.readlink(path))
            elif os.path.isdir(path):
                detail = ("dir",)
            else:
                detail = ("file", Path(path).read_bytes())
            state[path] = (st.st_mode, st.st_mtime_ns, st.st_size) + detail
    return state


@pytest.fixture
def snapshot() -> Callable[[Path], Dict[str, Tuple]]:
    """Return a function recording everything observable about a directory tree."""
    return _snapshot

