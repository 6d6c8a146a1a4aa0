"""Tests for path expansion."""

import os
from pathlib import Path

import pytest

from dottie.core.paths import canonicalize, expand_path, resolve_link_value, source_path


def test_expand_tilde_alone(home: Path) -> None:
    """A bare tilde is the home directory."""
    assert expand_path("~") == str(home)


def test_expand_tilde_prefix(home: Path) -> None:
    """A tilde followed by a separator is joined onto home."""
    assert expand_path("~/.bashrc") == os.path.join(str(home), ".bashrc")
    assert expand_path("~/.config/nvim") == os.path.join(str(home), ".config", "nvim")


def test_expand_strips_extra_separators(home: Path) -> None:
    """Repeated separators after the tilde do not produce a double separator."""
    assert expand_path("~//.bashrc") == os.path.join(str(home), ".bashrc")


def test_expand_tilde_trailing_separator(home: Path) -> None:
    """A tilde followed only by separators is the home directory itself."""
    assert expand_path("~/") == str(home)
    assert expand_path("~//") == str(home)


def test_expand_absolute_passthrough(tmp_path: Path) -> None:
    """Absolute paths come back unchanged apart from normalisation."""
    assert expand_path(str(tmp_path / "a" / ".." / "b")) == str(tmp_path / "b")


def test_expand_relative(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Relative paths resolve against the working directory."""
    monkeypatch.chdir(tmp_path)
    assert expand_path("dotfile") == os.path.join(os.getcwd(), "dotfile")


def test_tilde_user_is_not_home(home: Path, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Only ``~`` and ``~/`` are expanded."""
    monkeypatch.chdir(tmp_path)
    assert expand_path("~other") == os.path.join(os.getcwd(), "~other")


def test_source_path_is_not_normalised() -> None:
    """The link value keeps exactly what the configuration said."""
    assert source_path("/repo", "./shell/bashrc") == os.path.join("/repo", "./shell/bashrc")
    assert canonicalize(source_path("/repo", "./shell/bashrc")) == os.path.abspath(
        "/repo/shell/bashrc"
    )


def test_resolve_link_value(tmp_path: Path) -> None:
    """Relative link values resolve against the link's directory."""
    link = str(tmp_path / "home" / ".bashrc")
    assert resolve_link_value(link, "../repo/bashrc") == str(tmp_path / "repo" / "bashrc")
    assert resolve_link_value(link, "/etc/bashrc") == os.path.abspath("/etc/bashrc")
