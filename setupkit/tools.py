from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Sequence

from .lib.archive import extract_zip
from .lib.command import run_cmd
from .lib.fetch import FetchOptions, fetch
from .lib.shortcut import create_link


def run_installer(argv: Sequence[str]) -> Any:
    return run_cmd(argv)


@dataclass(frozen=True)
class HostTools:
    """The host primitives the install pipeline consumes.

    Tests swap these for recorders; the defaults touch the network, the
    filesystem and child processes.
    """

    fetch: Callable[[str, FetchOptions], Path] = fetch
    extract_zip: Callable[[Path, Path], None] = extract_zip
    create_link: Callable[[str, Path], None] = create_link
    run: Callable[[Sequence[str]], Any] = run_installer
