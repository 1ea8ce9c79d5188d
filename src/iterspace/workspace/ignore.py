"""Ignore-pattern matching for packaging."""

from fnmatch import fnmatchcase
from pathlib import Path, PurePath

IGNORE_DEF_FILE = ".qignore"


class IgnoreMatcher:
    """Matches relative paths against shell glob patterns.

    A pattern matches a path only when both have the same number of
    segments and every segment matches, so ``*`` never crosses ``/``.
    """

    def __init__(self, patterns: list[str] | None = None) -> None:
        self._patterns = list(patterns or [])

    @classmethod
    def load(cls, base_dir: Path, filename: str = IGNORE_DEF_FILE) -> "IgnoreMatcher":
        """Load patterns from ``base_dir/filename``.

        Blank lines and ``#`` comments are skipped. A missing file gives an
        empty matcher.
        """
        path = Path(base_dir) / filename
        try:
            text = path.read_text(encoding="utf-8")
        except (FileNotFoundError, IsADirectoryError):
            return cls()

        patterns = []
        for line in text.splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            patterns.append(line)
        return cls(patterns)

    @property
    def patterns(self) -> list[str]:
        """Get loaded patterns."""
        return list(self._patterns)

    def ignore(self, rel_path: str | PurePath) -> bool:
        """Check if a root-relative path is excluded."""
        parts = PurePath(rel_path).parts
        for pattern in self._patterns:
            pattern_parts = PurePath(pattern).parts
            if len(pattern_parts) != len(parts):
                continue
            if all(fnmatchcase(p, pat) for p, pat in zip(parts, pattern_parts)):
                return True
        return False
