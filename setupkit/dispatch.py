from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional

from .installers import (
    CopyInstaller,
    CustomInstaller,
    InstallContext,
    InstallerHandler,
    NativeInstaller,
    ZipInstaller,
)
from .registry import Options

logger = logging.getLogger(__name__)


BESPOKE_HANDLERS: Dict[str, InstallerHandler] = {
    h.kind: h for h in (CopyInstaller(), CustomInstaller(), ZipInstaller())
}


def handler_for(kind: str) -> InstallerHandler:
    """Bespoke kinds win over native installer kinds of the same name."""

    handler = BESPOKE_HANDLERS.get(kind)
    if handler is not None:
        return handler
    return NativeInstaller(kind)


def dispatch_install(artifact: Path, kind: str, options: Optional[Options], ctx: InstallContext) -> None:
    handler = handler_for(kind)
    logger.info("Installing %s with the %s installer", artifact, kind)
    handler.install(Path(artifact), options, ctx)
