"""
Track probing entry points.

- parse: classify the tracks found in an in-memory byte prefix
- probe_file: read the leading bytes of a local file and parse them

The parser itself never performs I/O and never raises on malformed data;
probe_file only adds the prefix read.
"""

import logging
import os
from pathlib import Path

import aiofiles

from localtv.configs import settings
from localtv.const import MATROSKA_EXTENSIONS
from localtv.parser.classifier import classify
from localtv.parser.tracks import extract_tracks
from localtv.schemas import ClassifiedTracks

logger = logging.getLogger(__name__)


def parse(data: bytes) -> ClassifiedTracks:
    """Classified audio and subtitle tracks of a Matroska byte prefix."""
    tracks = extract_tracks(data)
    result = classify(tracks)
    logger.debug(
        "[probe] Parsed %d bytes: %d audio, %d subtitle track(s)",
        len(data),
        len(result.audio),
        len(result.subtitles),
    )
    return result


async def probe_file(path: str | os.PathLike, header_size: int | None = None) -> ClassifiedTracks:
    """
    Read up to ``header_size`` bytes from the start of a file and parse them.

    Track metadata normally sits in the first few MiB even for very large
    files. Unreadable files are logged and yield an empty result.

    Args:
        path: Local media file.
        header_size: Prefix length in bytes. Defaults to ``settings.header_probe_size``.
    """
    path = Path(path)
    if header_size is None:
        header_size = settings.header_probe_size

    if path.suffix.lower() not in MATROSKA_EXTENSIONS:
        logger.debug("[probe] %s is not a Matroska file, tracks are unlikely to be found", path.name)

    try:
        async with aiofiles.open(path, "rb") as f:
            data = await f.read(header_size)
    except OSError as e:
        logger.warning("[probe] Failed to read %s: %s", path, e)
        return ClassifiedTracks()

    logger.info("[probe] Read %d header bytes from %s", len(data), path.name)
    return parse(data)
