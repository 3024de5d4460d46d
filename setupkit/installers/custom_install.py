from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..errors import ConfigurationError
from ..registry import Options
from .context import InstallContext

logger = logging.getLogger(__name__)


class CustomInstaller:
    """Runs a registry-provided command line; ``${installer}`` is the artifact path."""

    kind = "custom"

    def install(self, artifact: Path, options: Optional[Options], ctx: InstallContext) -> None:
        if options is None:
            raise ConfigurationError("MissingOptions", 'the "custom" installer requires additional options')
        if not options.arguments:
            raise ConfigurationError("MissingArguments", '"arguments" is missing from installer options')

        argv = [ctx.expander.expand(a, {"installer": str(artifact)}) for a in options.arguments]
        ctx.tools.run(argv)
