"""Requirements file parsing.

Reads one ``name`` or ``name==version`` per line. Blank lines and ``#``
comments are ignored, as is a trailing `` # comment`` after a specifier.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from pipctl.models.specifier import PackageSpecifier, SpecifierParseError

logger = logging.getLogger(__name__)


class RequirementsFileError(Exception):
    """Raised when a requirements file cannot be read."""


@dataclass(frozen=True, slots=True)
class RequirementLineError:
    """A requirements line that could not be parsed.

    Attributes:
        line_number: 1-based line number in the file.
        content: The offending line, stripped.
        reason: Why the line was rejected.
    """

    line_number: int
    content: str
    reason: str

    def __str__(self) -> str:
        return f"line {self.line_number}: {self.content!r} ({self.reason})"


class RequirementsParseError(ValueError):
    """Raised when one or more requirements lines are malformed.

    Attributes:
        errors: Every rejected line, in file order.
    """

    def __init__(self, source: str, errors: list[RequirementLineError]) -> None:
        self.source = source
        self.errors = errors
        super().__init__(f"{len(errors)} invalid line(s) in {source}")


def _strip_comment(line: str) -> str:
    if line.startswith("#"):
        return ""
    # Inline comments need whitespace before the hash, as in pip.
    for marker in (" #", "\t#"):
        position = line.find(marker)
        if position != -1:
            line = line[:position]
    return line.strip()


def parse_requirements(text: str, source: str = "<string>") -> list[PackageSpecifier]:
    """Parse requirements text into specifiers.

    Args:
        text: File content.
        source: Name used in error messages.

    Returns:
        Specifiers in file order.

    Raises:
        RequirementsParseError: If any line is malformed. All bad lines are
            collected before raising.
    """
    specifiers: list[PackageSpecifier] = []
    errors: list[RequirementLineError] = []

    for line_number, raw in enumerate(text.splitlines(), start=1):
        line = _strip_comment(raw.strip())
        if not line:
            continue
        try:
            specifiers.append(PackageSpecifier.parse(line))
        except SpecifierParseError as e:
            errors.append(RequirementLineError(line_number, line, e.reason))

    if errors:
        raise RequirementsParseError(source, errors)

    logger.debug("Parsed %d specifier(s) from %s", len(specifiers), source)
    return specifiers


def read_requirements(path: Path) -> list[PackageSpecifier]:
    """Read and parse a requirements file.

    Args:
        path: Path to the requirements file.

    Returns:
        Specifiers in file order.

    Raises:
        RequirementsFileError: If the file is missing or unreadable.
        RequirementsParseError: If any line is malformed.
    """
    if not path.exists():
        raise RequirementsFileError(f"Requirements file not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise RequirementsFileError(f"Failed to read requirements file {path}: {e}") from e

    return parse_requirements(text, source=str(path))
