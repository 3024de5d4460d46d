from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from .config import HostPaths, load_config
from .errors import BatchError, InstallError
from .lib.fetch import FetchOptions
from .lib.host import is_64bit_capable
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import BatchInstaller, BatchResult, install_packages
from .registry import Registry, load_registry
from .templates import TemplateExpander
from .tools import HostTools

logger = logging.getLogger(__name__)


def _is_url(source: str) -> bool:
    return source.lower().startswith(("http://", "https://", "file://"))


def open_registry(source: str, *, paths: HostPaths, tools: HostTools, force: bool) -> Registry:
    """Load the registry from a local file or download it first."""

    if _is_url(source):
        logger.info("Fetching registry %s", source)
        source = str(tools.fetch(source, FetchOptions(destination=paths.download_dir, overwrite=force)))
    return load_registry(source)


def run_install(
    packages: Sequence[str],
    *,
    config_path: Optional[str] = None,
    registry_source: Optional[str] = None,
    arch: Optional[str] = None,
    force: bool = False,
    download_only: bool = False,
    shims_only: bool = False,
    tools: Optional[HostTools] = None,
) -> BatchResult:
    """Install ``packages`` from the registry; raises BatchError if any failed."""

    cfg = load_config(config_path)
    expander = TemplateExpander.from_environ(strict=cfg.strict_templates)
    paths = cfg.resolve_paths(expander)
    tools = tools or HostTools()

    registry = open_registry(registry_source or cfg.registry, paths=paths, tools=tools, force=force)

    installer = BatchInstaller(
        registry=registry,
        expander=expander,
        paths=paths,
        tools=tools,
        host_64bit=is_64bit_capable(),
    )
    return install_packages(
        installer,
        list(packages),
        arch=arch,
        force=force,
        download_only=download_only,
        shims_only=shims_only,
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="setupkit", description="Simple package installer for Windows")
    p.add_argument("--config", default=None, help="Path to a YAML settings file")
    p.add_argument("--registry", default=None, help="Registry file or URL (overrides config)")
    p.add_argument("--log", default=None, help="Path to the log file")
    p.add_argument("-v", "--verbose", action="store_true", help="Log debug messages")

    sub = p.add_subparsers(dest="command", required=True)

    inst = sub.add_parser("install", help="Install packages from the registry")
    inst.add_argument("packages", nargs="+", help="Package names")
    inst.add_argument("--force", action="store_true", help="Download again even if already downloaded")
    inst.add_argument("--download-only", action="store_true", help="Only download installers")
    inst.add_argument("--shim", action="store_true", help="Only create shims for already installed packages")
    inst.add_argument("--arch", default=None, help="Force an architecture (x86|x86_64)")
    return p


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    log_path = args.log
    if log_path is None:
        try:
            log_path = load_config(args.config).log_path
        except (OSError, ValueError):
            log_path = None
    configure_logging(log_path=log_path or DEFAULT_LOG_PATH, level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        run_install(
            args.packages,
            config_path=args.config,
            registry_source=args.registry,
            arch=args.arch,
            force=bool(args.force),
            download_only=bool(args.download_only),
            shims_only=bool(args.shim),
        )
    except BatchError as e:
        logger.error("%s", e)
        return 1
    except (InstallError, OSError, ValueError) as e:
        logger.error("install failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
