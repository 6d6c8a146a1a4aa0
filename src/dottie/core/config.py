"""Configuration management for dottie.

The configuration lives in ``dottie.yaml`` at the root of the dotfiles
repository::

    profiles:
      default:
        dotfiles:
          - source: bashrc
            target: ~/.bashrc
      work:
        extends: default
        dotfiles:
          - source: work/gitconfig
            target: ~/.gitconfig

Problems are collected as :class:`ValidationError` records instead of being
raised one at a time, so the CLI can show all of them at once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .models import DotfileEntry, ResolvedProfile

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "dottie.yaml"
DEFAULT_PROFILE = "default"


@dataclass(frozen=True)
class ValidationError:
    """A single problem found in the configuration."""

    path: str
    message: str
    line: Optional[int] = None
    column: Optional[int] = None

    def __str__(self) -> str:
        location = self.path
        if self.line is not None:
            location = f"{location}:{self.line}:{self.column or 0}"
        return f"{location}: {self.message}"


class ConfigError(Exception):
    """Raised when the configuration cannot be loaded or resolved."""

    def __init__(self, errors: List[ValidationError]):
        self.errors = errors
        super().__init__("; ".join(str(e) for e in errors))


class Config:
    """Configuration class for dottie."""

    def __init__(self) -> None:
        """Initialize an empty configuration."""
        self.config: Dict[str, Any] = {}
        self.profiles: Dict[str, Dict[str, Any]] = {}

    def load_config(self, config_file: Path) -> List[ValidationError]:
        """Load configuration from a YAML file.

        Args:
            config_file: Path to ``dottie.yaml``.

        Returns:
            List of load errors; empty when the file parsed into at least one
            profile.
        """
        config_file = Path(config_file)
        source = str(config_file)
        if not config_file.is_file():
            return [ValidationError(source, f"Configuration file not found: {config_file}")]

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            return [ValidationError(source, f"Failed to read configuration file: {e}")]
        except yaml.YAMLError as e:
            mark = getattr(e, "problem_mark", None)
            return [
                ValidationError(
                    source,
                    f"YAML parse error: {e}",
                    line=mark.line + 1 if mark else None,
                    column=mark.column + 1 if mark else None,
                )
            ]

        logger.debug("Loaded configuration from %s", config_file)
        return self.load_from_dict(data, source)

    def load_from_dict(self, config_data: Any, source: str = "yaml") -> List[ValidationError]:
        """Load configuration from already parsed data.

        Args:
            config_data: Parsed YAML document.
            source: Name used in error messages.

        Returns:
            List of load errors.
        """
        if not isinstance(config_data, dict):
            return [
                ValidationError(
                    source, "Configuration file is empty or invalid - must contain 'profiles' key"
                )
            ]

        profiles = config_data.get("profiles")
        if not isinstance(profiles, dict) or not profiles:
            return [
                ValidationError(
                    "profiles",
                    "Configuration must contain at least one profile under 'profiles' key",
                )
            ]

        self.config = config_data
        self.profiles = {str(name): body for name, body in profiles.items()}
        return []

    def validate(self) -> List[ValidationError]:
        """Validate the loaded profiles."""
        errors: List[ValidationError] = []

        for name, profile in self.profiles.items():
            prefix = f"profiles.{name}"
            if profile is None:
                continue
            if not isinstance(profile, dict):
                errors.append(ValidationError(prefix, f"Profile '{name}' must be a mapping"))
                continue

            dotfiles = profile.get("dotfiles", [])
            if dotfiles is not None and not isinstance(dotfiles, list):
                errors.append(ValidationError(f"{prefix}.dotfiles", "dotfiles must be a list"))
            else:
                for index, item in enumerate(dotfiles or []):
                    errors.extend(self._validate_entry(item, f"{prefix}.dotfiles[{index}]"))

            extends = profile.get("extends")
            if extends is not None and str(extends).strip() and str(extends) not in self.profiles:
                errors.append(
                    ValidationError(
                        f"{prefix}.extends",
                        f"Profile '{name}' extends non-existent profile '{extends}'",
                    )
                )

        return errors

    @staticmethod
    def _validate_entry(item: Any, path: str) -> List[ValidationError]:
        if not isinstance(item, dict):
            return [ValidationError(path, "Dotfile entry must be a mapping with source and target")]

        errors = []
        for key in ("source", "target"):
            value = item.get(key)
            if not isinstance(value, str) or not value.strip():
                errors.append(
                    ValidationError(f"{path}.{key}", f"Dotfile entry must have a '{key}' field")
                )
        return errors

    def get_profile_names(self) -> List[str]:
        """Get the names of all configured profiles."""
        return list(self.profiles)

    def get_profile_parent(self, profile_name: str) -> Optional[str]:
        """Return the profile that ``profile_name`` extends, if any."""
        profile = self.profiles.get(profile_name)
        extends = profile.get("extends") if isinstance(profile, dict) else None
        if extends is None or not str(extends).strip():
            return None
        return str(extends)

    def inheritance_chain(self, profile_name: str) -> List[str]:
        """Return the profile names from the root ancestor down to ``profile_name``.

        Raises:
            ConfigError: If a profile in the chain is missing or the chain loops.
        """
        chain: List[str] = []
        current: Optional[str] = profile_name
        while current is not None:
            if current in chain:
                cycle = " -> ".join(chain + [current])
                raise ConfigError(
                    [ValidationError("profiles", f"Circular inheritance detected: {cycle}")]
                )
            if current not in self.profiles:
                if not chain:
                    message = f"Profile '{current}' not found."
                else:
                    message = f"Profile '{current}' not found (extended by '{chain[-1]}')."
                raise ConfigError([ValidationError("profiles", message)])

            chain.append(current)
            current = self.get_profile_parent(current)

        chain.reverse()
        return chain

    def resolve_profile(self, profile_name: str = DEFAULT_PROFILE) -> ResolvedProfile:
        """Merge a profile with its ancestors.

        Ancestor dotfiles come first. A descendant entry with the same target
        as an ancestor entry replaces it in place.

        Args:
            profile_name: Profile to resolve.

        Returns:
            ResolvedProfile: Merged dotfiles and the inheritance chain.

        Raises:
            ValueError: If ``profile_name`` is blank.
            ConfigError: If the profile or one of its ancestors is missing, or
                the inheritance loops.
        """
        if not profile_name or not profile_name.strip():
            raise ValueError("profile_name must be non-empty")

        if profile_name == DEFAULT_PROFILE and profile_name not in self.profiles:
            return ResolvedProfile(name=profile_name, inheritance_chain=(profile_name,))

        chain = self.inheritance_chain(profile_name)
        merged: Dict[str, DotfileEntry] = {}
        for name in chain:
            for item in (self.profiles[name] or {}).get("dotfiles") or []:
                entry = DotfileEntry(source=item["source"], target=item["target"])
                merged[entry.target] = entry

        logger.debug("Resolved profile '%s' via %s", profile_name, " -> ".join(chain))
        return ResolvedProfile(
            name=profile_name, dotfiles=tuple(merged.values()), inheritance_chain=tuple(chain)
        )


def load_profile(config_file: Path, profile_name: str = DEFAULT_PROFILE) -> ResolvedProfile:
    """Load, validate and resolve a profile in one step.

    Raises:
        ConfigError: With every load or validation error found.
    """
    config = Config()
    errors = config.load_config(config_file)
    if not errors:
        errors = config.validate()
    if errors:
        raise ConfigError(errors)
    return config.resolve_profile(profile_name)
