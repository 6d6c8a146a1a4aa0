"""Symlink dotfiles from a repository into your home directory."""

__version__ = "0.1.0"
