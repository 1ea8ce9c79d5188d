"""Root-relative file access for a working directory."""

from pathlib import Path


class Workspace:
    """Reads and writes files relative to a fixed root directory."""

    def __init__(self, root: str | Path) -> None:
        """Initialize workspace.

        Args:
            root: Root directory. Resolved to an absolute path.
        """
        self._root = Path(root).resolve()

    @property
    def root(self) -> Path:
        """Get root directory."""
        return self._root

    def path(self, *parts: str) -> Path:
        """Get the absolute path for a root-relative path."""
        return self._root.joinpath(*parts)

    def read(self, *parts: str) -> str:
        """Read a file relative to the root.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        return self.path(*parts).read_text(encoding="utf-8")

    def write(self, content: str, *parts: str) -> None:
        """Write a file relative to the root, creating parent directories."""
        path = self.path(*parts)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")

    def exists(self, *parts: str) -> bool:
        """Check if a file or directory exists."""
        return self.path(*parts).exists()
