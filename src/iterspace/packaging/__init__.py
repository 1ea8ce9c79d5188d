"""Archive packaging for iterspace."""

from iterspace.packaging.archive import build_archive, extract_archive

__all__ = [
    "build_archive",
    "extract_archive",
]
