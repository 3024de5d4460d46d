from __future__ import annotations

import logging
import os
import posixpath
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from pathlib import Path

from ..errors import TransportError

logger = logging.getLogger(__name__)

USER_AGENT = "setupkit/0.1"
_CHUNK = 1024 * 1024


@dataclass(frozen=True)
class FetchOptions:
    destination: Path
    overwrite: bool = False
    progress: bool = True


def filename_from_url(url: str) -> str:
    path = urllib.parse.urlsplit(url).path
    name = posixpath.basename(urllib.parse.unquote(path).replace("\\", "/"))
    return name or "download"


def _urlopen(url: str, timeout: int = 180):
    request = urllib.request.Request(url, headers={"User-Agent": USER_AGENT, "Accept": "*/*"})
    return urllib.request.urlopen(request, timeout=timeout)


def fetch(url: str, options: FetchOptions) -> Path:
    """Download ``url`` into ``options.destination`` and return the local path.

    An existing file is reused unless ``overwrite`` is set. Data is streamed to
    a ``.part`` file that is renamed once complete.
    """

    dest_dir = Path(options.destination)
    target = dest_dir / filename_from_url(url)

    if target.exists() and not options.overwrite:
        logger.info("Using existing download %s (force to download again)", target)
        return target

    part = target.with_name(target.name + ".part")
    logger.info("Downloading %s to %s", url, target)
    try:
        dest_dir.mkdir(parents=True, exist_ok=True)
        with _urlopen(url) as response, part.open("wb") as fh:
            total = int(response.headers.get("Content-Length") or 0)
            done = 0
            next_report = 10
            for chunk in iter(lambda: response.read(_CHUNK), b""):
                fh.write(chunk)
                done += len(chunk)
                if options.progress and total:
                    pct = done * 100 // total
                    while pct >= next_report:
                        logger.info("  %s: %d%%", target.name, next_report)
                        next_report += 10
        os.replace(part, target)
    except (urllib.error.URLError, OSError, ValueError) as e:
        part.unlink(missing_ok=True)
        raise TransportError("DownloadFailed", f"could not download {url}: {e}") from e

    if options.progress:
        logger.info("Downloaded %s (%d bytes)", target.name, done)
    return target
