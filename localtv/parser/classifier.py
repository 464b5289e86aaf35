"""
Turn raw track records into the audio and subtitle menus shown by the player.
"""

from collections.abc import Iterable

from localtv.const import LANGUAGE_NAMES
from localtv.parser.tracks import TrackRecord
from localtv.schemas import ClassifiedTracks, TrackView


def language_name(code: str) -> str:
    """Display name for an ISO 639-2 code; unknown codes are shown upper-cased."""
    return LANGUAGE_NAMES.get(code.lower(), code.upper())


def track_label(track: TrackRecord) -> str:
    """
    Label resolution: explicit name, then language, then track number.

    Only a language actually stored in the file is used for the label; a
    track with no Language element falls through to ``Track N``.
    """
    if track.name:
        return track.name
    if track.language:
        return language_name(track.language)
    return f"Track {track.track_number}"


def _views(tracks: Iterable[TrackRecord]) -> list[TrackView]:
    ordered = sorted(tracks, key=lambda t: t.track_number)
    return [
        TrackView(
            index=index,
            label=track_label(track),
            language=track.effective_language,
            track_number=track.track_number,
            codec_id=track.codec_id,
            default=track.flag_default,
        )
        for index, track in enumerate(ordered)
    ]


def classify(tracks: Iterable[TrackRecord]) -> ClassifiedTracks:
    """Split tracks into audio and subtitle views; video and unknown types are dropped."""
    tracks = list(tracks)
    return ClassifiedTracks(
        audio=_views(t for t in tracks if t.is_audio),
        subtitles=_views(t for t in tracks if t.is_subtitle),
    )
