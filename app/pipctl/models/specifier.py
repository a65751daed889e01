"""Package specifier model.

A specifier names a package and optionally pins it to an exact version,
written as ``name`` or ``name==version``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from packaging.utils import canonicalize_name
from packaging.version import InvalidVersion, Version

# PEP 508 project name
_NAME_RE = re.compile(r"^([A-Z0-9]|[A-Z0-9][A-Z0-9._-]*[A-Z0-9])$", re.IGNORECASE)

PIN_OPERATOR = "=="


class SpecifierParseError(ValueError):
    """Raised when a package specifier is malformed."""

    def __init__(self, text: str, reason: str) -> None:
        self.text = text
        self.reason = reason
        super().__init__(f"Invalid package specifier '{text}': {reason}")


@dataclass(frozen=True, slots=True)
class PackageSpecifier:
    """A package name with an optional exact version.

    Attributes:
        name: Project name as given by the user (e.g., 'Requests').
        version: Exact version to install, or None for the installer's choice.
    """

    name: str
    version: str | None = None

    def __post_init__(self) -> None:
        """Validate specifier data after initialization."""
        if not self.name:
            raise SpecifierParseError(self.name, "package name cannot be empty")
        if not _NAME_RE.match(self.name):
            raise SpecifierParseError(self.name, "not a valid package name")
        if self.version is not None:
            if not self.version:
                raise SpecifierParseError(self.name, "version cannot be empty")
            try:
                Version(self.version)
            except InvalidVersion:
                raise SpecifierParseError(
                    self.requirement, f"'{self.version}' is not a valid version"
                ) from None

    @classmethod
    def parse(cls, text: str) -> PackageSpecifier:
        """Parse ``name`` or ``name==version``.

        Args:
            text: Specifier text; surrounding whitespace is ignored.

        Returns:
            Parsed PackageSpecifier.

        Raises:
            SpecifierParseError: If the text is empty or malformed.
        """
        spec = text.strip()
        if not spec:
            raise SpecifierParseError(text, "empty package specifier")

        name, sep, version = spec.partition(PIN_OPERATOR)
        name = name.strip()
        if not name:
            raise SpecifierParseError(spec, "package name cannot be empty")
        if not sep:
            return cls(name=name)

        version = version.strip()
        if not version:
            raise SpecifierParseError(spec, "version cannot be empty")
        return cls(name=name, version=version)

    @property
    def key(self) -> str:
        """Normalized project name used as the manifest key."""
        return canonicalize_name(self.name)

    @property
    def is_pinned(self) -> bool:
        """Check if an exact version was requested."""
        return self.version is not None

    @property
    def requirement(self) -> str:
        """Requirement string handed to the installer."""
        if self.version is None:
            return self.name
        return f"{self.name}{PIN_OPERATOR}{self.version}"

    def __str__(self) -> str:
        return self.requirement
