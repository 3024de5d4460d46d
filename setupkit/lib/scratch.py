from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class ScratchSpace:
    """A temporary directory owned by one batch and removed when it closes."""

    def __init__(self, *, prefix: str = "setupkit-", parent: Optional[Path] = None) -> None:
        self._prefix = prefix
        self._parent = parent
        self._root: Optional[Path] = None

    @property
    def root(self) -> Path:
        if self._root is None:
            self._root = Path(tempfile.mkdtemp(prefix=self._prefix, dir=self._parent))
            logger.debug("Created scratch directory %s", self._root)
        return self._root

    def subdir(self, name: str) -> Path:
        """Return a fresh, empty directory ``name`` under the scratch root."""

        p = self.root / name
        if p.exists():
            shutil.rmtree(p)
        p.mkdir(parents=True)
        return p

    def close(self) -> None:
        if self._root is None:
            return
        shutil.rmtree(self._root, ignore_errors=True)
        logger.debug("Removed scratch directory %s", self._root)
        self._root = None

    def __enter__(self) -> "ScratchSpace":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
