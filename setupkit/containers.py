from __future__ import annotations

import logging
from pathlib import Path, PureWindowsPath
from typing import Callable, Optional

from .errors import ConfigurationError, FilesystemError
from .lib.scratch import ScratchSpace
from .registry import Options, is_blank

logger = logging.getLogger(__name__)

SUPPORTED_CONTAINERS = {"zip"}


def inner_path(root: Path, relative: str) -> Path:
    """Join a registry-style relative path (either slash) onto ``root``."""

    return root.joinpath(*PureWindowsPath(relative).parts)


def unwrap_container(
    artifact: Path,
    options: Optional[Options],
    *,
    scratch: ScratchSpace,
    extract_zip: Callable[[Path, Path], None],
) -> Path:
    """Return the real installer, extracting it from its container if one is declared."""

    if options is None or options.container is None:
        return artifact

    container = options.container
    if is_blank(container.installer):
        raise ConfigurationError("EmptyContainerInstallerPath", '"installer" option cannot be empty')

    if container.kind not in SUPPORTED_CONTAINERS:
        raise ConfigurationError(
            "UnsupportedContainerKind", f'only "zip" containers are supported (got {container.kind!r})'
        )

    try:
        extract_dir = scratch.subdir(Path(artifact).name + "_extracted")
        logger.info("Extracting container %s to %s", artifact, extract_dir)
        extract_zip(Path(artifact), extract_dir)
    except OSError as e:
        raise FilesystemError("ExtractionFailed", f"could not extract container {artifact}: {e}") from e

    return inner_path(extract_dir, container.installer)
