"""
Shared pytest fixtures.

EBML builders produce small synthetic Matroska files; ScriptedRandom makes
shuffles and draws deterministic. Settings overrides may be placed in a local
.env file at the project root.
"""

from pathlib import Path

import pytest
from dotenv import load_dotenv

from localtv.parser.ebml import FieldKind, encode_element

# Load .env file from project root
project_root = Path(__file__).parent.parent
load_dotenv(project_root / ".env")

CODEC_PRIVATE_ID = b"\x63\xa2"
DOC_TYPE_ID = b"\x42\x82"
TIMESTAMP_SCALE_ID = b"\x2a\xd7\xb1"
SIMPLE_BLOCK_ID = b"\xa3"


def pytest_configure(config):
    """Configure pytest-asyncio mode."""
    config.addinivalue_line("markers", "asyncio: mark test as async")


class ScriptedRandom:
    """Returns scripted values (modulo ``stop``), then 0 forever."""

    def __init__(self, values=()):
        self.values = list(values)
        self.calls = 0

    def randrange(self, stop: int) -> int:
        self.calls += 1
        if self.values:
            return self.values.pop(0) % stop
        return 0


def uint_payload(value: int) -> bytes:
    return value.to_bytes(max(1, (value.bit_length() + 7) // 8), "big")


def build_track_entry(
    number: int | None = None,
    track_type: int | None = None,
    codec_id: str | None = None,
    language: str | None = None,
    name: str | None = None,
    default: bool | None = None,
    extra: bytes = b"",
) -> bytes:
    children = b""
    if number is not None:
        children += encode_element(FieldKind.TRACK_NUMBER, uint_payload(number))
    if track_type is not None:
        children += encode_element(FieldKind.TRACK_TYPE, uint_payload(track_type))
    children += extra
    if codec_id is not None:
        children += encode_element(FieldKind.CODEC_ID, codec_id.encode())
    if language is not None:
        children += encode_element(FieldKind.LANGUAGE, language.encode())
    if name is not None:
        children += encode_element(FieldKind.NAME, name.encode())
    if default is not None:
        children += encode_element(FieldKind.FLAG_DEFAULT, uint_payload(int(default)))
    return encode_element(FieldKind.TRACK_ENTRY, children)


def build_mkv(entries: list[bytes], cluster_size: int = 256) -> bytes:
    """EBML header + Segment(Info, Tracks, Cluster)."""
    ebml_header = encode_element(FieldKind.EBML_HEADER, encode_element(DOC_TYPE_ID, b"matroska"))
    info = encode_element(FieldKind.INFO, encode_element(TIMESTAMP_SCALE_ID, uint_payload(1_000_000)))
    tracks = encode_element(FieldKind.TRACKS, b"".join(entries))
    cluster = encode_element(FieldKind.CLUSTER, encode_element(SIMPLE_BLOCK_ID, b"\xae\xd7\x83" * (cluster_size // 3)))
    segment = encode_element(FieldKind.SEGMENT, info + tracks + cluster, size_length=8)
    return ebml_header + segment


@pytest.fixture
def sample_entries() -> list[bytes]:
    return [
        build_track_entry(number=1, track_type=1, codec_id="V_MPEG4/ISO/AVC", default=True),
        build_track_entry(number=2, track_type=2, codec_id="A_AAC", language="jpn", default=True),
        build_track_entry(number=3, track_type=2, codec_id="A_AC3", language="eng", name="Commentary"),
        build_track_entry(number=4, track_type=17, codec_id="S_TEXT/UTF8", language="spa"),
        build_track_entry(number=5, track_type=17, codec_id="S_TEXT/ASS"),
    ]


@pytest.fixture
def sample_mkv(sample_entries) -> bytes:
    return build_mkv(sample_entries)


@pytest.fixture
def track_entry():
    """Factory fixture building a TrackEntry element from keyword fields."""
    return build_track_entry


@pytest.fixture
def mkv():
    """Factory fixture wrapping TrackEntry elements into a minimal Matroska file."""
    return build_mkv


@pytest.fixture
def scripted_random():
    """
    Factory fixture for deterministic random sources.

    Usage:
        def test_something(scripted_random):
            rng = scripted_random([2, 0, 1])
    """
    return ScriptedRandom
