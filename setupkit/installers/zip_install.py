from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..errors import ConfigurationError, FilesystemError, InstallError
from ..registry import Options, is_blank
from .context import InstallContext

logger = logging.getLogger(__name__)


class ZipInstaller:
    kind = "zip"

    def install(self, artifact: Path, options: Optional[Options], ctx: InstallContext) -> None:
        if options is None:
            raise ConfigurationError("MissingOptions", 'the "zip" installer requires additional options')
        if is_blank(options.destination):
            raise ConfigurationError("MissingDestination", '"destination" is missing from installer options')

        destination = Path(ctx.expander.expand(options.destination))

        logger.info("Extracting %s to %s", artifact, destination)
        try:
            ctx.tools.extract_zip(artifact, destination)
        except OSError as e:
            raise FilesystemError("ExtractionFailed", f"could not extract {artifact}: {e}") from e

        for shortcut in options.shortcuts:
            name = ctx.expander.expand(shortcut.name)
            target = ctx.expander.expand(shortcut.target)
            location = ctx.start_menu_dir / f"{name}.lnk"

            logger.info("Creating shortcut to %s in %s", target, location)
            try:
                ctx.tools.create_link(target, location)
            except (InstallError, OSError) as e:
                raise FilesystemError("ShortcutCreationFailed", f"could not create shortcut {location}: {e}") from e
