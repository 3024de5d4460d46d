from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path, PureWindowsPath
from typing import Any, Callable, Sequence

from .errors import FilesystemError, InstallError, ProcessError, ToolMissingError
from .templates import TemplateExpander

logger = logging.getLogger(__name__)

SHIM_TOOL_VERB = "exeproxy-copy"


@dataclass(frozen=True)
class ShimCreator:
    """Exposes installed executables on a shared command path through a shim tool.

    The tool is not installed by setupkit; without it no shim can be created.
    """

    shims_dir: Path
    tool: Path
    expander: TemplateExpander
    run: Callable[[Sequence[str]], Any]

    def create(self, shims: Sequence[str], version: str) -> None:
        if not self.tool.is_file():
            raise ToolMissingError("ShimToolMissing", f"could not find shim tool {self.tool}")

        if not self.shims_dir.is_dir():
            try:
                self.shims_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise FilesystemError("DirectoryCreateFailed", f"could not create shims directory: {e}") from e

        # First failure stops the remaining shims.
        for raw in shims:
            target = self.expander.expand(raw, {"version": version})
            shim = self.shims_dir / PureWindowsPath(target).name

            if shim.exists():
                try:
                    shim.unlink()
                except OSError as e:
                    raise FilesystemError("ShimRemovalFailed", f"could not remove existing shim {shim}: {e}") from e

            logger.info("Creating shim for %s (%s)", target, shim)
            try:
                self.run([str(self.tool), SHIM_TOOL_VERB, str(shim), target])
            except (InstallError, OSError) as e:
                raise ProcessError("ShimCreationFailed", f"could not create shim {shim}: {e}") from e
