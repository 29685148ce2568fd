"""Substring include/exclude filtering of changed file paths."""

from dataclasses import dataclass, field
from typing import Iterable, List, Protocol, TypeVar


class HasFilename(Protocol):
    filename: str


FileT = TypeVar("FileT", bound=HasFilename)


def parse_patterns(raw: str | None) -> List[str]:
    """
    Split a comma-delimited pattern string.

    Tokens are trimmed and empty tokens dropped, so "" and " , " both
    yield an empty list (an empty pattern would match every path).
    """
    if not raw:
        return []
    return [token.strip() for token in raw.split(",") if token.strip()]


def matches_any_pattern(filename: str, patterns: Iterable[str]) -> bool:
    """Plain, case-sensitive substring containment."""
    return any(pattern in filename for pattern in patterns)


@dataclass(frozen=True)
class PatternMatcher:
    include: List[str] = field(default_factory=list)
    exclude: List[str] = field(default_factory=list)

    @classmethod
    def from_strings(cls, include: str | None, exclude: str | None) -> "PatternMatcher":
        return cls(include=parse_patterns(include), exclude=parse_patterns(exclude))

    def keeps(self, filename: str) -> bool:
        # An empty include set admits everything
        included = not self.include or matches_any_pattern(filename, self.include)
        return included and not matches_any_pattern(filename, self.exclude)

    def filter_files(self, files: Iterable[FileT]) -> List[FileT]:
        """Keep anything with a ``filename`` attribute that passes ``keeps``, in order."""
        return [f for f in files if self.keeps(f.filename)]
