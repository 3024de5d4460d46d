from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Callable, List, Mapping, Optional, Sequence, TypeVar

from .arch import resolve_arch
from .config import HostPaths
from .containers import unwrap_container
from .dispatch import dispatch_install
from .errors import BatchError, InstallError
from .installers import InstallContext
from .lib.scratch import ScratchSpace
from .registry import Package, Registry
from .shims import ShimCreator
from .sources import fetch_installer
from .templates import TemplateExpander
from .tools import HostTools

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Stage(str, Enum):
    DOWNLOAD = "download"
    UNWRAP = "unwrap"
    INSTALL = "install"
    SHIM = "shim"
    SHIM_ONLY = "shim-only"


class Policy(str, Enum):
    CONTINUE = "continue"
    ABORT = "abort"


# What a failure at each stage does to the rest of the batch.
STAGE_POLICY: Mapping[Stage, Policy] = MappingProxyType(
    {
        Stage.DOWNLOAD: Policy.CONTINUE,
        Stage.UNWRAP: Policy.ABORT,
        Stage.INSTALL: Policy.CONTINUE,
        Stage.SHIM: Policy.CONTINUE,
        Stage.SHIM_ONLY: Policy.ABORT,
    }
)


@dataclass(frozen=True)
class PackageOutcome:
    package: str
    ok: bool
    action: Optional[str] = None  # installed|downloaded|shimmed|skipped
    stage: Optional[Stage] = None
    code: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class BatchResult:
    arch: str
    outcomes: List[PackageOutcome] = field(default_factory=list)
    unknown: List[str] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return any(not o.ok for o in self.outcomes)


class _StageFailed(Exception):
    def __init__(self, outcome: PackageOutcome) -> None:
        super().__init__(outcome.error)
        self.outcome = outcome


class BatchInstaller:
    """Installs a list of registry packages one after another."""

    def __init__(
        self,
        *,
        registry: Registry,
        expander: TemplateExpander,
        paths: HostPaths,
        tools: Optional[HostTools] = None,
        host_64bit: bool,
        policy: Mapping[Stage, Policy] = STAGE_POLICY,
    ) -> None:
        self.registry = registry
        self.expander = expander
        self.paths = paths
        self.tools = tools or HostTools()
        self.host_64bit = host_64bit
        self.policy = policy
        self.shims = ShimCreator(
            shims_dir=paths.shims_dir,
            tool=paths.shim_tool,
            expander=expander,
            run=self.tools.run,
        )

    def _attempt(self, stage: Stage, package: str, fn: Callable[[], T]) -> T:
        try:
            return fn()
        except (InstallError, OSError) as e:
            code = getattr(e, "code", type(e).__name__)
            if self.policy.get(stage, Policy.CONTINUE) is Policy.ABORT:
                logger.error("%s failed for %s, aborting: %s", stage.value, package, e)
                raise
            logger.error("%s failed for %s: %s", stage.value, package, e)
            raise _StageFailed(
                PackageOutcome(package=package, ok=False, stage=stage, code=code, error=str(e))
            ) from e

    def _install_one(
        self,
        entry: Package,
        arch: str,
        *,
        scratch: ScratchSpace,
        force: bool,
        download_only: bool,
        shims_only: bool,
    ) -> PackageOutcome:
        name = entry.name
        options = entry.installer.options_for_arch(arch)
        shims = options.shims if options is not None else ()

        if shims_only:
            if not shims:
                logger.info("%s declares no shims", name)
                return PackageOutcome(package=name, ok=True, action="skipped")
            self._attempt(Stage.SHIM_ONLY, name, lambda: self.shims.create(shims, entry.version))
            return PackageOutcome(package=name, ok=True, action="shimmed")

        artifact: Path = self._attempt(
            Stage.DOWNLOAD,
            name,
            lambda: fetch_installer(
                entry,
                arch,
                expander=self.expander,
                fetch=self.tools.fetch,
                download_dir=self.paths.download_dir,
                overwrite=force,
            ),
        )
        if download_only:
            logger.info("Downloaded %s to %s", name, artifact)
            return PackageOutcome(package=name, ok=True, action="downloaded")

        installer_path: Path = self._attempt(
            Stage.UNWRAP,
            name,
            lambda: unwrap_container(artifact, options, scratch=scratch, extract_zip=self.tools.extract_zip),
        )

        ctx = InstallContext(expander=self.expander, tools=self.tools, start_menu_dir=self.paths.start_menu_dir)
        self._attempt(
            Stage.INSTALL,
            name,
            lambda: dispatch_install(installer_path, entry.installer.kind, options, ctx),
        )

        if shims:
            self._attempt(Stage.SHIM, name, lambda: self.shims.create(shims, entry.version))

        logger.info("Installed %s %s", name, entry.version)
        return PackageOutcome(package=name, ok=True, action="installed")

    def run(
        self,
        names: Sequence[str],
        *,
        arch: Optional[str] = None,
        force: bool = False,
        download_only: bool = False,
        shims_only: bool = False,
    ) -> BatchResult:
        """Process ``names`` in order; see STAGE_POLICY for failure handling."""

        resolved = resolve_arch(arch, host_64bit=self.host_64bit)
        logger.info("Installing for %s", resolved)

        interactive = self.registry.interactive(names)
        if interactive:
            logger.info("These packages might require user interaction to complete their installation:")
            for name in interactive:
                logger.info("    %s", name)

        result = BatchResult(arch=resolved)
        with ScratchSpace() as scratch:
            for name in names:
                entry = self.registry.get(name)
                if entry is None:
                    logger.warning("Unknown package %s", name)
                    result.unknown.append(name)
                    continue

                try:
                    outcome = self._install_one(
                        entry,
                        resolved,
                        scratch=scratch,
                        force=force,
                        download_only=download_only,
                        shims_only=shims_only,
                    )
                except _StageFailed as f:
                    outcome = f.outcome
                result.outcomes.append(outcome)

        return result


def install_packages(installer: BatchInstaller, names: Sequence[str], **kwargs) -> BatchResult:
    """Run the batch and raise BatchError if any package failed."""

    result = installer.run(names, **kwargs)
    if result.failed:
        raise BatchError()
    return result
