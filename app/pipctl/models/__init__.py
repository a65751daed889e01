"""Data models for pipctl.

This module exports the core data structures used throughout the application.
"""

from pipctl.models.manifest import Manifest, ManifestEntry, ManifestMeta
from pipctl.models.specifier import PackageSpecifier, SpecifierParseError
from pipctl.models.task import (
    ExecutionMode,
    InstallResult,
    InstallTask,
    ProgressSnapshot,
    TaskStatus,
)

__all__ = [
    "ExecutionMode",
    "InstallResult",
    "InstallTask",
    "Manifest",
    "ManifestEntry",
    "ManifestMeta",
    "PackageSpecifier",
    "ProgressSnapshot",
    "SpecifierParseError",
    "TaskStatus",
]
