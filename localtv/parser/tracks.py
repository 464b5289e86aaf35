"""
Track metadata extraction from a Matroska byte prefix.

Walks ``Segment -> Tracks -> TrackEntry`` with ElementScanner and builds one
TrackRecord per complete TrackEntry. Clusters, Cues and every other
top-level element are skipped by size, never descended.
"""

import logging
from dataclasses import dataclass

from localtv.parser.ebml import (
    ElementHeader,
    ElementScanner,
    FieldKind,
    read_string,
    read_uint,
)

logger = logging.getLogger(__name__)

TRACK_TYPE_VIDEO = 1
TRACK_TYPE_AUDIO = 2
TRACK_TYPE_SUBTITLE = 17

DEFAULT_LANGUAGE = "und"


@dataclass(frozen=True)
class TrackRecord:
    """Metadata for a single track from a TrackEntry element."""

    track_number: int
    track_type: int  # 1=video, 2=audio, 17=subtitle
    codec_id: str | None = None  # e.g. "A_AAC", "S_TEXT/UTF8"
    language: str | None = None  # ISO 639-2 as stored in the file
    name: str | None = None
    flag_default: bool = False

    @property
    def effective_language(self) -> str:
        return self.language or DEFAULT_LANGUAGE

    @property
    def is_video(self) -> bool:
        return self.track_type == TRACK_TYPE_VIDEO

    @property
    def is_audio(self) -> bool:
        return self.track_type == TRACK_TYPE_AUDIO

    @property
    def is_subtitle(self) -> bool:
        return self.track_type == TRACK_TYPE_SUBTITLE


@dataclass
class _TrackBuilder:
    """Fields collected while a TrackEntry is open."""

    track_number: int | None = None
    track_type: int | None = None
    codec_id: str | None = None
    language: str | None = None
    name: str | None = None
    flag_default: bool = False

    def build(self) -> TrackRecord | None:
        if self.track_number is None or self.track_type is None:
            return None
        return TrackRecord(
            track_number=self.track_number,
            track_type=self.track_type,
            codec_id=self.codec_id,
            language=self.language,
            name=self.name,
            flag_default=self.flag_default,
        )


def extract_tracks(data: bytes) -> list[TrackRecord]:
    """
    Extract the track table from the leading bytes of a Matroska file.

    Returns:
        TrackRecords in file order. Empty when no Tracks element is found in
        ``data``, which is a normal outcome for non-Matroska input or for a
        prefix that ends before the track metadata.
    """
    tracks = _find_tracks(ElementScanner(data), depth=0)
    if tracks is None:
        logger.debug("[tracks] No Tracks element in %d bytes", len(data))
        return []

    logger.debug("[tracks] Found %d track(s)", len(tracks))
    return tracks


def _find_tracks(scanner: ElementScanner, depth: int) -> list[TrackRecord] | None:
    """Search a level for Tracks, descending only into Segment."""
    for header in scanner:
        if header.kind == FieldKind.TRACKS:
            return _parse_tracks(scanner.descend(header), depth + 1)
        if header.kind == FieldKind.SEGMENT and depth == 0:
            found = _find_tracks(scanner.descend(header), depth + 1)
            if found is not None:
                return found
    return None


def _parse_tracks(scanner: ElementScanner, depth: int) -> list[TrackRecord]:
    """Read the direct TrackEntry children of a Tracks element."""
    tracks = []
    for header in scanner:
        if header.kind != FieldKind.TRACK_ENTRY:
            continue
        if header.truncated or header.size is None:
            # Entry never closes within the buffer
            logger.debug("[tracks] Dropping truncated TrackEntry at %d", header.element_start)
            continue

        track = _parse_track_entry(scanner.descend(header), depth + 1)
        if track is None:
            logger.debug("[tracks] Dropping incomplete TrackEntry at %d", header.element_start)
            continue
        tracks.append(track)
    return tracks


def _parse_track_entry(scanner: ElementScanner, depth: int) -> TrackRecord | None:
    builder = _TrackBuilder()
    data = scanner.data

    for header in scanner:
        if not _is_complete_leaf(header):
            logger.debug("[tracks] Skipping partial leaf at %d (depth %d)", header.element_start, depth)
            continue

        if header.kind == FieldKind.TRACK_NUMBER:
            builder.track_number = read_uint(data, header)
        elif header.kind == FieldKind.TRACK_TYPE:
            builder.track_type = read_uint(data, header)
        elif header.kind == FieldKind.CODEC_ID:
            builder.codec_id = read_string(data, header)
        elif header.kind == FieldKind.LANGUAGE:
            builder.language = read_string(data, header)
        elif header.kind == FieldKind.NAME:
            builder.name = read_string(data, header)
        elif header.kind == FieldKind.FLAG_DEFAULT:
            builder.flag_default = read_uint(data, header) == 1

    return builder.build()


def _is_complete_leaf(header: ElementHeader) -> bool:
    return not header.truncated and header.size is not None
