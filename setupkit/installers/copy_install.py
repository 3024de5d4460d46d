from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Optional

from ..errors import ConfigurationError, FilesystemError
from ..registry import Options, is_blank
from .context import InstallContext

logger = logging.getLogger(__name__)


class CopyInstaller:
    kind = "copy"

    def install(self, artifact: Path, options: Optional[Options], ctx: InstallContext) -> None:
        if options is None:
            raise ConfigurationError("MissingOptions", 'the "copy" installer requires additional options')
        if is_blank(options.destination):
            raise ConfigurationError("MissingDestination", '"destination" is missing from installer options')

        destination = Path(ctx.expander.expand(options.destination))

        parent = destination.parent
        logger.info("Creating %s", parent)
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError("DirectoryCreateFailed", f"could not create {parent}: {e}") from e

        logger.info("Copying %s to %s", artifact, destination)
        try:
            shutil.copy2(artifact, destination)
        except OSError as e:
            raise FilesystemError("CopyFailed", f"could not copy {artifact} to {destination}: {e}") from e
