from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional

from ..errors import ConfigurationError
from ..registry import Options
from .context import InstallContext

logger = logging.getLogger(__name__)


# Unattended command lines per installer technology.
NATIVE_COMMANDS: Dict[str, Callable[[str], List[str]]] = {
    "advancedinstaller": lambda path: [path, "/q", "/i"],
    "as-is": lambda path: [path],
    "innosetup": lambda path: [path, "/norestart", "/sp-", "/verysilent"],
    "msi": lambda path: ["msiexec.exe", "/q", "/i", path, "ALLUSERS=1", "REBOOT=ReallySuppress"],
    "nsis": lambda path: [path, "/S", "/NCRC"],
}


def is_native_kind(kind: str) -> bool:
    return kind in NATIVE_COMMANDS


def native_command(artifact: Path, kind: str) -> List[str]:
    build = NATIVE_COMMANDS.get(kind)
    if build is None:
        raise ConfigurationError("UnknownInstallerKind", f"unknown installer type: {kind}")
    return build(str(artifact))


class NativeInstaller:
    """Runs a vendor installer (MSI, NSIS, Inno Setup, ...) silently."""

    def __init__(self, kind: str) -> None:
        if not is_native_kind(kind):
            raise ConfigurationError("UnknownInstallerKind", f"unknown installer type: {kind}")
        self.kind = kind

    def install(self, artifact: Path, options: Optional[Options], ctx: InstallContext) -> None:
        ctx.tools.run(native_command(artifact, self.kind))
