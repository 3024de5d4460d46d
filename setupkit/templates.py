from __future__ import annotations

import logging
import os
import string
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from .errors import TemplateExpansionError

logger = logging.getLogger(__name__)


def normalize_key(name: str) -> str:
    """Upper-case a variable name; ``ProgramFiles(x86)`` becomes ``PROGRAMFILES_X86``."""

    return name.upper().replace("(X86)", "_X86")


def environ_snapshot(environ: Optional[Mapping[str, str]] = None) -> Mapping[str, str]:
    """Capture the process environment once, with normalized keys."""

    source = os.environ if environ is None else environ
    out: Dict[str, str] = {}
    for k, v in source.items():
        if not k:
            continue
        out[normalize_key(k)] = v
    return MappingProxyType(out)


class _BracedTemplate(string.Template):
    # Only ${NAME} is a placeholder. A bare $ is literal and there is no escape,
    # so text without ${ passes through untouched.
    pattern = r"""
    \$(?:
      (?P<escaped>(?!)) |
      (?P<named>(?!)) |
      {(?P<braced>[_a-z][_a-z0-9]*)} |
      (?P<invalid>{)
    )
    """


class _Context(dict):
    def __init__(self, data: Mapping[str, str], *, template: str, strict: bool) -> None:
        super().__init__(data)
        self._template = template
        self._strict = strict

    def __missing__(self, key: str) -> str:
        normalized = normalize_key(key)
        if normalized != key and normalized in self:
            return self[normalized]
        if self._strict:
            raise TemplateExpansionError(
                "UndefinedVariable", f"undefined variable ${{{key}}} in {self._template!r}"
            )
        logger.warning("Undefined variable ${%s} in %r expands to an empty string", key, self._template)
        return ""


@dataclass(frozen=True)
class TemplateExpander:
    environ: Mapping[str, str] = field(default_factory=dict)
    strict: bool = False

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None, *, strict: bool = False) -> "TemplateExpander":
        return cls(environ=environ_snapshot(environ), strict=strict)

    def context(self, overrides: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        data = dict(self.environ)
        data.update(overrides or {})
        return data

    def expand(self, template: str, overrides: Optional[Mapping[str, str]] = None) -> str:
        ctx = _Context(self.context(overrides), template=template, strict=self.strict)
        try:
            return _BracedTemplate(template).substitute(ctx)
        except ValueError as e:
            raise TemplateExpansionError("TemplateExpansionFailed", f"could not expand {template!r}: {e}") from e
