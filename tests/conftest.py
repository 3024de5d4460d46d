"""
Shared test fixtures: recording host tools, host paths and registry builders.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pytest

from setupkit.config import HostPaths
from setupkit.errors import ProcessError, TransportError
from setupkit.lib.fetch import FetchOptions, filename_from_url
from setupkit.registry import parse_registry
from setupkit.templates import TemplateExpander
from setupkit.tools import HostTools


class RecordingTools:
    """Stands in for the network, archive, shortcut and process primitives."""

    def __init__(self) -> None:
        self.fetched: List[Tuple[str, FetchOptions]] = []
        self.extracted: List[Tuple[Path, Path]] = []
        self.links: List[Tuple[str, Path]] = []
        self.commands: List[List[str]] = []
        self.fail_urls: set = set()
        self.fail_commands: int = 0
        self.fail_links: bool = False

    def fetch(self, url: str, options: FetchOptions) -> Path:
        self.fetched.append((url, options))
        if url in self.fail_urls:
            raise TransportError("DownloadFailed", f"could not download {url}: HTTP 404")
        options.destination.mkdir(parents=True, exist_ok=True)
        target = options.destination / filename_from_url(url)
        target.write_bytes(f"artifact:{url}".encode("utf-8"))
        return target

    def extract_zip(self, archive: Path, destination: Path) -> None:
        self.extracted.append((Path(archive), Path(destination)))
        Path(destination).mkdir(parents=True, exist_ok=True)

    def create_link(self, target: str, link_path: Path) -> None:
        if self.fail_links:
            raise OSError("access denied")
        self.links.append((target, Path(link_path)))

    def run(self, argv: Sequence[str]) -> Any:
        self.commands.append(list(argv))
        if self.fail_commands:
            self.fail_commands -= 1
            raise ProcessError("ProcessFailed", f"Command failed (1): {' '.join(argv)}")
        return None

    def host_tools(self) -> HostTools:
        return HostTools(fetch=self.fetch, extract_zip=self.extract_zip, create_link=self.create_link, run=self.run)


@pytest.fixture
def recorder() -> RecordingTools:
    return RecordingTools()


@pytest.fixture
def host_paths(tmp_path: Path) -> HostPaths:
    return HostPaths(
        download_dir=tmp_path / "downloads",
        shims_dir=tmp_path / "shims",
        start_menu_dir=tmp_path / "startmenu",
        shim_tool=tmp_path / "exeproxy" / "exeproxy.exe",
    )


@pytest.fixture
def shim_tool(host_paths: HostPaths) -> Path:
    """Install a placeholder shim tool at the configured location."""
    host_paths.shim_tool.parent.mkdir(parents=True, exist_ok=True)
    host_paths.shim_tool.write_bytes(b"MZ")
    return host_paths.shim_tool


@pytest.fixture
def program_files(tmp_path: Path) -> Path:
    p = tmp_path / "pf"
    p.mkdir()
    return p


@pytest.fixture
def expander(program_files: Path) -> TemplateExpander:
    return TemplateExpander.from_environ(
        {
            "ProgramFiles": str(program_files),
            "ProgramFiles(x86)": str(program_files) + " (x86)",
            "SystemDrive": "C:",
        }
    )


def make_registry(packages: Dict[str, Dict[str, Any]], version: Optional[int] = 4):
    data: Dict[str, Any] = {"packages": packages}
    if version is not None:
        data["version"] = version
    return parse_registry(data)


@pytest.fixture
def registry_factory():
    return make_registry
