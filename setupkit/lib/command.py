from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import Mapping, Sequence

from ..errors import ProcessError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    capture: bool = False,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command.
    - Installers inherit stdin/stdout/stderr unless ``capture`` is set.
    - Launch failures and (with ``check``) non-zero exits raise ProcessError.
    """

    argv_list = [str(a) for a in argv]
    logger.info("CMD %s", _fmt_argv(argv_list))

    pipe = subprocess.PIPE if capture else None
    try:
        p = subprocess.run(
            argv_list,
            text=True,
            stdout=pipe,
            stderr=pipe,
            cwd=cwd,
            env=dict(os.environ, **(env or {})),
        )
    except OSError as e:
        raise ProcessError("ProcessFailed", f"could not launch {_fmt_argv(argv_list)}: {e}") from e

    stdout = p.stdout or ""
    stderr = p.stderr or ""
    if stdout:
        logger.debug("STDOUT %s", stdout.strip())
    if stderr:
        logger.debug("STDERR %s", stderr.strip())

    if check and p.returncode != 0:
        raise ProcessError(
            "ProcessFailed", f"Command failed ({p.returncode}): {_fmt_argv(argv_list)}\n{stderr}".rstrip()
        )

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=stdout, stderr=stderr)
