from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

DEFAULT_LOG_PATH = str(Path(tempfile.gettempdir()) / "setupkit" / "setupkit.log")


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
) -> Optional[str]:
    """Configure root logging once per process.

    The file handler goes to ``log_path``; if that location is not writable
    we fall back to ``setupkit.log`` in the working directory, and to the
    console alone when neither can be opened.

    Returns the actual file path being used, or None without a log file.
    """

    logger = logging.getLogger()
    logger.setLevel(level)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_setupkit_configured", False):
        return getattr(logger, "_setupkit_log_path", log_path)

    chosen_path: Optional[str] = log_path
    handlers: list[logging.Handler] = []

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    file_handler: Optional[logging.Handler] = None
    try:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError:
        chosen_path = str(Path.cwd() / "setupkit.log")
        try:
            file_handler = logging.FileHandler(chosen_path, encoding="utf-8")
        except OSError:
            chosen_path = None
    if file_handler is not None:
        file_handler.setFormatter(fmt)
        handlers.append(file_handler)

    # Without a log file the console is the only record of the run.
    if also_console or file_handler is None:
        console = logging.StreamHandler()
        console.setFormatter(fmt)
        handlers.append(console)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_setupkit_configured", True)
    setattr(logger, "_setupkit_log_path", chosen_path)

    logging.getLogger(__name__).debug("Logging initialized (requested=%s, actual=%s)", log_path, chosen_path)
    return chosen_path
