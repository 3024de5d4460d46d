from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import yaml

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

ARCH_KEYS = ("x86", "x86_64")


def is_blank(s: Optional[str]) -> bool:
    """True for None, empty or whitespace-only strings."""

    return not (s or "").strip()


@dataclass(frozen=True)
class Shortcut:
    name: str
    target: str


@dataclass(frozen=True)
class Container:
    kind: str
    installer: str


@dataclass(frozen=True)
class Options:
    destination: str = ""
    arguments: Tuple[str, ...] = ()
    container: Optional[Container] = None
    shortcuts: Tuple[Shortcut, ...] = ()
    shims: Tuple[str, ...] = ()


@dataclass(frozen=True)
class InstallerSpec:
    kind: str
    x86: str = ""
    x86_64: str = ""
    interactive: bool = False
    options: Optional[Options] = None
    # Architecture-specific options, when the registry keys "options" by arch.
    arch_options: Mapping[str, Options] = field(default_factory=dict)

    def options_for_arch(self, arch: str) -> Optional[Options]:
        if not self.arch_options:
            return self.options
        if arch in self.arch_options:
            return self.arch_options[arch]
        if arch == "x86_64":
            return self.arch_options.get("x86")
        return None


@dataclass(frozen=True)
class Package:
    name: str
    version: str
    installer: InstallerSpec


@dataclass(frozen=True)
class Registry:
    packages: Mapping[str, Package]
    version: Optional[int] = None

    def get(self, name: str) -> Optional[Package]:
        return self.packages.get(name)

    def interactive(self, names: Iterable[str]) -> List[str]:
        """Requested names whose installers may need user interaction, in request order."""

        out: List[str] = []
        for name in names:
            pkg = self.packages.get(name)
            if pkg is not None and pkg.installer.interactive and name not in out:
                out.append(name)
        return out


def _malformed(where: str, msg: str) -> ConfigurationError:
    return ConfigurationError("MalformedRegistry", f"{where}: {msg}")


def _mapping(value: Any, where: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise _malformed(where, "must be a mapping/object")
    return value


def _string(value: Any, where: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise _malformed(where, f"must be a string (got {value!r}; quote it in YAML)")
    return value


def _string_list(value: Any, where: str) -> Tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise _malformed(where, "must be a list")
    return tuple(_string(v, f"{where}[{i}]") for i, v in enumerate(value))


def _parse_options(raw: Dict[str, Any], where: str) -> Options:
    container = None
    craw = raw.get("container")
    if craw is not None:
        c = _mapping(craw, f"{where}.container")
        container = Container(
            kind=_string(c.get("kind"), f"{where}.container.kind"),
            installer=_string(c.get("installer"), f"{where}.container.installer"),
        )

    shortcuts: List[Shortcut] = []
    sraw = raw.get("shortcuts") or []
    if not isinstance(sraw, list):
        raise _malformed(f"{where}.shortcuts", "must be a list")
    for i, s in enumerate(sraw):
        s = _mapping(s, f"{where}.shortcuts[{i}]")
        shortcuts.append(
            Shortcut(
                name=_string(s.get("name"), f"{where}.shortcuts[{i}].name"),
                target=_string(s.get("target"), f"{where}.shortcuts[{i}].target"),
            )
        )

    return Options(
        destination=_string(raw.get("destination"), f"{where}.destination"),
        arguments=_string_list(raw.get("arguments"), f"{where}.arguments"),
        container=container,
        shortcuts=tuple(shortcuts),
        shims=_string_list(raw.get("shims"), f"{where}.shims"),
    )


def _is_arch_keyed(raw: Dict[str, Any]) -> bool:
    return bool(raw) and all(k in ARCH_KEYS and isinstance(v, dict) for k, v in raw.items())


def _parse_installer(raw: Dict[str, Any], where: str) -> InstallerSpec:
    kind = _string(raw.get("kind"), f"{where}.kind").strip()
    if not kind:
        raise _malformed(f"{where}.kind", "is required")

    interactive = raw.get("interactive", False)
    if not isinstance(interactive, bool):
        raise _malformed(f"{where}.interactive", "must be a boolean")

    options: Optional[Options] = None
    arch_options: Dict[str, Options] = {}
    if raw.get("options") is not None:
        oraw = _mapping(raw.get("options"), f"{where}.options")
        if _is_arch_keyed(oraw):
            for arch, sub in oraw.items():
                arch_options[arch] = _parse_options(sub, f"{where}.options.{arch}")
        else:
            options = _parse_options(oraw, f"{where}.options")

    return InstallerSpec(
        kind=kind,
        x86=_string(raw.get("x86"), f"{where}.x86"),
        x86_64=_string(raw.get("x86_64"), f"{where}.x86_64"),
        interactive=interactive,
        options=options,
        arch_options=arch_options,
    )


def parse_registry(data: Any) -> Registry:
    root = _mapping(data, "registry")
    packages_raw = root.get("packages")
    if not isinstance(packages_raw, dict):
        raise _malformed("registry.packages", "must be a mapping of package name to entry")

    version = root.get("version")
    if version is not None and (isinstance(version, bool) or not isinstance(version, int)):
        raise _malformed("registry.version", "must be an integer")

    packages: Dict[str, Package] = {}
    for name, entry in packages_raw.items():
        where = f"packages.{name}"
        e = _mapping(entry, where)
        packages[str(name)] = Package(
            name=str(name),
            version=_string(e.get("version"), f"{where}.version"),
            installer=_parse_installer(_mapping(e.get("installer"), f"{where}.installer"), f"{where}.installer"),
        )
    return Registry(packages=packages, version=version)


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"yaml", "yml"}:
        return "yaml"
    # Default to JSON for unknown extensions.
    return "json"


def load_registry(path: str | Path) -> Registry:
    """Load a registry file (JSON or YAML, chosen by extension)."""

    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError("MalformedRegistry", f"could not read registry {p}: {e}") from e

    try:
        if _detect_format(p) == "yaml":
            data = yaml.safe_load(text) or {}
        else:
            data = json.loads(text)
    except (ValueError, yaml.YAMLError) as e:
        raise ConfigurationError("MalformedRegistry", f"could not parse registry {p}: {e}") from e

    registry = parse_registry(data)
    logger.info("Loaded registry %s (%d packages)", p, len(registry.packages))
    return registry
