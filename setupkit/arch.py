from __future__ import annotations

from typing import Optional

from .errors import ConfigurationError

X86 = "x86"
X86_64 = "x86_64"


def resolve_arch(requested: Optional[str], *, host_64bit: bool) -> str:
    """Return the architecture to install for.

    ``requested`` is what the user asked for (e.g. ``--arch``); empty means
    pick the best one for this machine.
    """

    if not requested:
        return X86_64 if host_64bit else X86
    if requested == X86:
        return X86
    if requested == X86_64:
        if not host_64bit:
            raise ConfigurationError("UnsupportedArchitecture", "this machine cannot run 64-bit software")
        return X86_64
    raise ConfigurationError("UnknownArchitecture", f"unknown architecture: {requested}")
