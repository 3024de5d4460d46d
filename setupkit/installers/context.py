from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from ..registry import Options
from ..templates import TemplateExpander
from ..tools import HostTools


@dataclass(frozen=True)
class InstallContext:
    expander: TemplateExpander
    tools: HostTools
    start_menu_dir: Path


class InstallerHandler(Protocol):
    """Installs one downloaded artifact for a given installer kind."""

    kind: str

    def install(self, artifact: Path, options: Optional[Options], ctx: InstallContext) -> None:
        ...
