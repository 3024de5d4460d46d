from __future__ import annotations

import logging
import zipfile
from pathlib import Path

from ..errors import FilesystemError

logger = logging.getLogger(__name__)


def _member_target(root: Path, name: str) -> Path:
    candidate = (root / name).resolve()
    try:
        candidate.relative_to(root)
    except ValueError as e:
        raise FilesystemError("ExtractionFailed", f"archive member escapes destination: {name}") from e
    return candidate


def extract_zip(archive: Path, destination: Path) -> None:
    """Extract every member of ``archive`` below ``destination``."""

    dest = Path(destination)
    try:
        dest.mkdir(parents=True, exist_ok=True)
        root = dest.resolve()
        with zipfile.ZipFile(archive) as zf:
            for info in zf.infolist():
                out = _member_target(root, info.filename.replace("\\", "/"))
                if info.is_dir():
                    out.mkdir(parents=True, exist_ok=True)
                    continue
                out.parent.mkdir(parents=True, exist_ok=True)
                with zf.open(info) as src, out.open("wb") as dst:
                    while True:
                        chunk = src.read(1024 * 1024)
                        if not chunk:
                            break
                        dst.write(chunk)
    except (zipfile.BadZipFile, OSError) as e:
        raise FilesystemError("ExtractionFailed", f"could not extract {archive} to {dest}: {e}") from e

    logger.info("Extracted %s to %s", archive, dest)
