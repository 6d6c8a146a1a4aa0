"""Core functionality for dottie."""

from .backup import BackupService
from .config import Config, ConfigError, load_profile
from .conflicts import ConflictDetector
from .linking import LinkingOrchestrator
from .models import DotfileEntry, ResolvedProfile
from .symlinks import SymlinkLinker

__all__ = [
    "BackupService",
    "Config",
    "ConfigError",
    "ConflictDetector",
    "DotfileEntry",
    "LinkingOrchestrator",
    "ResolvedProfile",
    "SymlinkLinker",
    "load_profile",
]
