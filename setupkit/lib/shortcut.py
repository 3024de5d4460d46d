from __future__ import annotations

import logging
from pathlib import Path

from .command import run_cmd

logger = logging.getLogger(__name__)


def _ps_quote(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def shortcut_command(target: str, link_path: Path) -> list[str]:
    script = (
        f"$s = (New-Object -ComObject WScript.Shell).CreateShortcut({_ps_quote(str(link_path))}); "
        f"$s.TargetPath = {_ps_quote(target)}; "
        "$s.Save()"
    )
    return [
        "powershell.exe",
        "-NoProfile",
        "-NonInteractive",
        "-ExecutionPolicy",
        "Bypass",
        "-Command",
        script,
    ]


def create_link(target: str, link_path: Path) -> None:
    """Create a Windows ``.lnk`` shortcut at ``link_path`` pointing to ``target``."""

    Path(link_path).parent.mkdir(parents=True, exist_ok=True)
    run_cmd(shortcut_command(target, link_path), capture=True)
