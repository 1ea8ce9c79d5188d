"""Zip archives of working directory subtrees."""

import io
import logging
import os
import shutil
import zipfile
from pathlib import Path

from iterspace.core.exceptions import ArchiveError, UnsafeArchiveError
from iterspace.workspace.ignore import IGNORE_DEF_FILE, IgnoreMatcher

logger = logging.getLogger(__name__)


def build_archive(
    local_root: str | Path,
    rel_input_path: str = "",
    ignore_file: str = IGNORE_DEF_FILE,
) -> bytes:
    """Zip the files below ``local_root/rel_input_path``.

    Entry names are relative to ``local_root``. Paths matched by the ignore
    file in ``local_root`` are skipped. Directories get no entries of their
    own.

    Args:
        local_root: Working directory root.
        rel_input_path: Subtree to pack, relative to the root.
        ignore_file: Name of the ignore file in the root.

    Returns:
        Zip archive bytes.

    Raises:
        ArchiveError: If the subtree cannot be read.
    """
    root = Path(local_root).resolve()
    src = (root / rel_input_path).resolve()
    if src != root and root not in src.parents:
        raise ArchiveError(f"Zip failed, path escapes root: {rel_input_path}")
    matcher = IgnoreMatcher.load(root, ignore_file)

    if not src.exists():
        raise ArchiveError(f"Zip failed, root: {root}: rel-path: {rel_input_path}")

    buffer = io.BytesIO()
    try:
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
            paths = [src] if src.is_file() else sorted(src.rglob("*"))
            for path in paths:
                rel_path = path.relative_to(root)
                if matcher.ignore(rel_path) or path.is_dir():
                    continue
                zf.write(path, rel_path.as_posix())
    except OSError as e:
        logger.warning(f"Zip failed, root: {root}: rel-path: {rel_input_path} -- {e}")
        raise ArchiveError(f"Zip failed: {e}") from e

    return buffer.getvalue()


def _target_path(dest: Path, name: str) -> Path:
    target = (dest / name).resolve()
    if target != dest and dest not in target.parents:
        raise UnsafeArchiveError(name)
    return target


def extract_archive(src: str | Path | bytes, dest: str | Path) -> list[Path]:
    """Extract a zip archive below ``dest``.

    Every entry is checked before anything is written; an entry resolving
    outside ``dest`` aborts the extraction.

    Args:
        src: Archive path or archive bytes.
        dest: Destination directory.

    Returns:
        Paths of the extracted files.

    Raises:
        UnsafeArchiveError: If an entry escapes ``dest``.
        ArchiveError: If the archive is unreadable.
    """
    dest_path = Path(dest).resolve()
    source = io.BytesIO(src) if isinstance(src, bytes) else src

    try:
        with zipfile.ZipFile(source) as zf:
            members = [(info, _target_path(dest_path, info.filename)) for info in zf.infolist()]

            extracted: list[Path] = []
            for info, target in members:
                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue

                target.parent.mkdir(parents=True, exist_ok=True)
                with zf.open(info) as fsrc, open(target, "wb") as fdst:
                    shutil.copyfileobj(fsrc, fdst)

                mode = (info.external_attr >> 16) & 0o777
                if mode:
                    os.chmod(target, mode)
                extracted.append(target)
    except (zipfile.BadZipFile, OSError) as e:
        raise ArchiveError(f"Unzip failed: {e}") from e

    return extracted
