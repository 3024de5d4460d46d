from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Callable

from .arch import X86, X86_64
from .errors import ConfigurationError, InstallError, TransportError
from .lib.fetch import FetchOptions
from .registry import Package, is_blank
from .templates import TemplateExpander

logger = logging.getLogger(__name__)

_UNSAFE_NAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def select_installer_url(entry: Package, arch: str, expander: TemplateExpander) -> str:
    """Pick and expand the installer URL for ``arch``.

    64-bit requests fall back to the 32-bit installer, which Windows runs
    under WOW64.
    """

    inst = entry.installer
    if is_blank(inst.x86) and is_blank(inst.x86_64):
        raise ConfigurationError("MissingInstallers", "package entry is missing both 32-bit and 64-bit installers")

    if arch == X86:
        if is_blank(inst.x86):
            raise ConfigurationError("Missing32BitInstaller", "this package doesn't offer a 32-bit installer")
        template = inst.x86
    elif arch == X86_64:
        template = inst.x86 if is_blank(inst.x86_64) else inst.x86_64
    else:
        raise ConfigurationError("UnknownArchitecture", f"unknown architecture: {arch}")

    return expander.expand(template, {"version": entry.version})


def download_dir_for(download_dir: Path, entry: Package) -> Path:
    """Each package version downloads into its own directory, so artifacts
    from different packages never share a file name."""

    parts = [entry.name, entry.version]
    safe = [_UNSAFE_NAME_CHARS.sub("_", p).strip(" .") or "_" for p in parts if not is_blank(p)]
    return Path(download_dir).joinpath(*safe)


def fetch_installer(
    entry: Package,
    arch: str,
    *,
    expander: TemplateExpander,
    fetch: Callable[[str, FetchOptions], Path],
    download_dir: Path,
    overwrite: bool,
) -> Path:
    url = select_installer_url(entry, arch, expander)
    logger.info("Fetching %s %s (%s)", entry.name, entry.version, url)
    options = FetchOptions(destination=download_dir_for(download_dir, entry), overwrite=overwrite, progress=True)
    try:
        return Path(fetch(url, options))
    except InstallError:
        raise
    except OSError as e:
        raise TransportError("DownloadFailed", f"could not download {url}: {e}") from e
