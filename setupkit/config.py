from __future__ import annotations

import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .templates import TemplateExpander

DEFAULT_REGISTRY = "registry.json"
DEFAULT_SHIMS_DIR = "${SYSTEMDRIVE}\\Shims"
DEFAULT_START_MENU_DIR = "${PROGRAMDATA}\\Microsoft\\Windows\\Start Menu\\Programs"
DEFAULT_SHIM_TOOL = "${PROGRAMFILES_X86}\\exeproxy\\exeproxy.exe"
DEFAULT_DOWNLOAD_DIR = str(Path(tempfile.gettempdir()) / "setupkit")


@dataclass(frozen=True)
class HostPaths:
    download_dir: Path
    shims_dir: Path
    start_menu_dir: Path
    shim_tool: Path


@dataclass(frozen=True)
class InstallerConfig:
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def registry(self) -> str:
        return str(self.raw.get("registry") or DEFAULT_REGISTRY)

    @property
    def download_dir(self) -> str:
        return str(((self.raw.get("paths") or {}).get("download_dir")) or DEFAULT_DOWNLOAD_DIR)

    @property
    def shims_dir(self) -> str:
        return str(((self.raw.get("paths") or {}).get("shims_dir")) or DEFAULT_SHIMS_DIR)

    @property
    def start_menu_dir(self) -> str:
        return str(((self.raw.get("paths") or {}).get("start_menu_dir")) or DEFAULT_START_MENU_DIR)

    @property
    def shim_tool(self) -> str:
        return str(((self.raw.get("paths") or {}).get("shim_tool")) or DEFAULT_SHIM_TOOL)

    @property
    def log_path(self) -> Optional[str]:
        v = self.raw.get("log_path")
        return str(v) if v else None

    @property
    def strict_templates(self) -> bool:
        return self.raw.get("strict_templates") is True

    def resolve_paths(self, expander: TemplateExpander) -> HostPaths:
        """Expand the configured path templates against the environment snapshot."""

        return HostPaths(
            download_dir=Path(expander.expand(self.download_dir)),
            shims_dir=Path(expander.expand(self.shims_dir)),
            start_menu_dir=Path(expander.expand(self.start_menu_dir)),
            shim_tool=Path(expander.expand(self.shim_tool)),
        )


def load_config(path: Optional[str]) -> InstallerConfig:
    """Load the optional YAML settings file; no path means built-in defaults."""

    if not path:
        return InstallerConfig()

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("setupkit config must be YAML")

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"could not parse {p}: {e}") from e
    if not isinstance(raw, dict):
        raise ValueError(f"{p} must contain a mapping/object")
    if not isinstance(raw.get("strict_templates", False), bool):
        raise ValueError(f"{p}: strict_templates must be true or false")

    return InstallerConfig(raw=raw)
