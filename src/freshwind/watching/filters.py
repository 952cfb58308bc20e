"""Include/exclude filtering of file names for change detection."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field


class FilterConfigError(ValueError):
    """Raised when a user-supplied pattern does not compile."""

    def __init__(self, pattern: str, role: str, error: re.error) -> None:
        self.pattern = pattern
        self.role = role
        super().__init__(f"invalid {role} pattern {pattern!r}: {error}")


def split_patterns(value: str | Iterable[str] | None) -> list[str]:
    """Split a comma-separated pattern string, dropping blank entries."""
    if value is None:
        return []
    items = value.split(",") if isinstance(value, str) else list(value)
    return [item.strip() for item in items if item.strip()]


def _compile(patterns: list[str], role: str) -> list[re.Pattern[str]]:
    compiled: list[re.Pattern[str]] = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            raise FilterConfigError(pattern, role, e) from e
    return compiled


@dataclass
class FilterSet:
    """Decides which files participate in change detection.

    Patterns are regular expressions searched in the entry's base name.
    Excludes are checked first and veto the entry; then at least one
    include must match. An empty include list matches every name.
    """

    include: list[re.Pattern[str]] = field(default_factory=list)
    exclude: list[re.Pattern[str]] = field(default_factory=list)

    @classmethod
    def from_strings(
        cls,
        include: str | Iterable[str] | None = None,
        exclude: str | Iterable[str] | None = None,
    ) -> FilterSet:
        """Compile include and exclude patterns.

        Args:
            include: Comma-separated string or list of regexes. Empty or
                None matches every file.
            exclude: Comma-separated string or list of regexes.

        Raises:
            FilterConfigError: If any pattern fails to compile.
        """
        return cls(
            include=_compile(split_patterns(include), "include"),
            exclude=_compile(split_patterns(exclude), "exclude"),
        )

    @property
    def matches_all(self) -> bool:
        return not self.include

    def should_process(self, name: str, is_dir: bool) -> bool:
        """Return True if the entry should be checked for modification.

        Args:
            name: Base name of the entry.
            is_dir: Whether the entry is a directory. Directories are
                never reported (the scanner still descends into them).
        """
        if is_dir:
            return False
        if any(p.search(name) for p in self.exclude):
            return False
        if self.matches_all:
            return True
        return any(p.search(name) for p in self.include)

    def describe(self) -> str:
        include = ", ".join(p.pattern for p in self.include) or "*"
        exclude = ", ".join(p.pattern for p in self.exclude) or "-"
        return f"include [{include}] exclude [{exclude}]"
