from __future__ import annotations

import os
import platform
from typing import Mapping, Optional

_64BIT_MACHINES = {"amd64", "x86_64", "arm64", "aarch64", "ia64"}


def normalize_machine(machine: str) -> str:
    m = machine.strip().lower()
    return {
        "x64": "amd64",
        "em64t": "amd64",
        "i386": "x86",
        "i486": "x86",
        "i586": "x86",
        "i686": "x86",
    }.get(m, m)


def is_64bit_capable(*, machine: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> bool:
    """Return True if the host can run 64-bit software.

    A 32-bit interpreter on 64-bit Windows reports ``x86``; WOW64 exposes the
    real processor through PROCESSOR_ARCHITEW6432.
    """

    env = os.environ if environ is None else environ
    if normalize_machine(env.get("PROCESSOR_ARCHITEW6432", "")) in _64BIT_MACHINES:
        return True
    m = platform.machine() if machine is None else machine
    return normalize_machine(m) in _64BIT_MACHINES
