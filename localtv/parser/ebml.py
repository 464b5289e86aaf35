"""
Minimal EBML reader for Matroska track discovery.

Provides the two lowest layers of the track parser:

- VINT decoding (read_vint / vint_length / encode_vint)
- Element iteration (ElementScanner) over a byte range, yielding element
  headers that can be descended into or skipped by their declared size.

Nothing here raises on malformed input. Bad varints decode to ``(0, 1)``,
elements that run past the buffer are clamped and end the scan of their
range, and every iteration step advances at least one byte.
"""

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)

# Longest VINT the format allows
MAX_VINT_LENGTH = 8

# Longest element ID the format allows (Class D ids)
MAX_ID_LENGTH = 4


# =============================================================================
# Matroska element IDs
# =============================================================================


class FieldKind(Enum):
    """Role of an element id inside the track walk."""

    EBML_HEADER = "ebml_header"
    SEGMENT = "segment"
    SEEK_HEAD = "seek_head"
    INFO = "info"
    TRACKS = "tracks"
    TRACK_ENTRY = "track_entry"
    TRACK_NUMBER = "track_number"
    TRACK_TYPE = "track_type"
    CODEC_ID = "codec_id"
    LANGUAGE = "language"
    NAME = "name"
    FLAG_DEFAULT = "flag_default"
    CLUSTER = "cluster"
    CUES = "cues"
    UNKNOWN = "unknown"


# Raw id bytes (marker bit included), matched byte-by-byte
KNOWN_IDS: dict[bytes, FieldKind] = {
    b"\x1a\x45\xdf\xa3": FieldKind.EBML_HEADER,
    b"\x18\x53\x80\x67": FieldKind.SEGMENT,
    b"\x11\x4d\x9b\x74": FieldKind.SEEK_HEAD,
    b"\x15\x49\xa9\x66": FieldKind.INFO,
    b"\x16\x54\xae\x6b": FieldKind.TRACKS,
    b"\xae": FieldKind.TRACK_ENTRY,
    b"\xd7": FieldKind.TRACK_NUMBER,
    b"\x83": FieldKind.TRACK_TYPE,
    b"\x86": FieldKind.CODEC_ID,
    b"\x22\xb5\x9c": FieldKind.LANGUAGE,
    b"\x53\x6e": FieldKind.NAME,
    b"\x88": FieldKind.FLAG_DEFAULT,
    b"\x1f\x43\xb6\x75": FieldKind.CLUSTER,
    b"\x1c\x53\xbb\x6b": FieldKind.CUES,
}

# Reverse lookup, used when building elements
ID_BYTES: dict[FieldKind, bytes] = {kind: id_bytes for id_bytes, kind in KNOWN_IDS.items()}


# =============================================================================
# VINT decoding
# =============================================================================


def vint_length(first_byte: int) -> int:
    """
    Encoded length of a VINT given its first byte.

    Returns:
        1..8, or 0 when no marker bit is set (0x00 leading byte).
    """
    mask = 0x80
    for length in range(1, MAX_VINT_LENGTH + 1):
        if first_byte & mask:
            return length
        mask >>= 1
    return 0


def read_vint(data: bytes, pos: int) -> tuple[int, int]:
    """
    Read an EBML variable-length integer.

    The first set bit of the leading byte gives the length L. The value is
    the leading byte with the marker bit cleared, followed big-endian by the
    next L-1 bytes.

    Returns:
        (value, bytes_consumed). Malformed or truncated input yields (0, 1)
        so that callers always make forward progress.
    """
    if pos < 0 or pos >= len(data):
        return 0, 1

    first = data[pos]
    length = vint_length(first)
    if length == 0 or pos + length > len(data):
        return 0, 1

    value = first & ((0x80 >> (length - 1)) - 1)
    for i in range(1, length):
        value = (value << 8) | data[pos + i]
    return value, length


def is_unknown_size(value: int, length: int) -> bool:
    """All value bits set means "size unknown" in EBML."""
    return value == (1 << (7 * length)) - 1


def encode_vint(value: int, length: int | None = None) -> bytes:
    """
    Encode a non-negative integer as an EBML VINT.

    Uses the shortest length that fits unless ``length`` is given. The
    all-ones pattern of a length class is representable, so the largest
    value of class L is ``2**(7*L) - 1`` (which readers may treat as the
    unknown-size marker).
    """
    if value < 0:
        raise ValueError(f"EBML VINT: negative value {value}")

    if length is None:
        length = 1
        while length < MAX_VINT_LENGTH and value >= (1 << (7 * length)):
            length += 1

    if not 1 <= length <= MAX_VINT_LENGTH:
        raise ValueError(f"EBML VINT: invalid length {length}")
    if value >= (1 << (7 * length)):
        raise ValueError(f"EBML VINT: value {value} does not fit in {length} bytes")

    marked = value | (1 << (7 * length))
    return marked.to_bytes(length, "big")


def encode_element(element_id: bytes | FieldKind, payload: bytes, size_length: int | None = None) -> bytes:
    """Build a complete element: id bytes, VINT size, payload."""
    if isinstance(element_id, FieldKind):
        element_id = ID_BYTES[element_id]

    size = len(payload)
    if size_length is None:
        # Sizes must never use the all-ones (unknown size) pattern
        size_length = 1
        while size_length < MAX_VINT_LENGTH and size >= (1 << (7 * size_length)) - 1:
            size_length += 1
    return element_id + encode_vint(size, size_length) + payload


# =============================================================================
# Element iteration
# =============================================================================


@dataclass(frozen=True)
class ElementHeader:
    """
    Header of one EBML element within a scanned range.

    ``data_end`` is already clamped to the scanned range; ``size`` keeps the
    declared value (None for unknown-size elements).
    """

    id_bytes: bytes
    kind: FieldKind
    size: int | None
    element_start: int
    data_offset: int
    data_end: int
    truncated: bool = False

    @property
    def element_id(self) -> int:
        return int.from_bytes(self.id_bytes, "big")

    @property
    def available(self) -> int:
        """Payload bytes actually present in the buffer."""
        return self.data_end - self.data_offset


class ElementScanner:
    """
    Restartable iterator over the elements of ``data[start:end]``.

    Iterating skips each element by its declared size; use ``descend`` to
    obtain a scanner over a master element's children. Each call to
    ``iter()`` starts again from ``start``.
    """

    def __init__(self, data: bytes, start: int = 0, end: int | None = None) -> None:
        self.data = data
        self.start = max(start, 0)
        self.end = len(data) if end is None else min(end, len(data))

    def __iter__(self):
        data = self.data
        end = self.end
        pos = self.start

        while pos < end:
            element_start = pos

            id_length = vint_length(data[pos])
            if id_length == 0 or id_length > MAX_ID_LENGTH or pos + id_length > end:
                logger.debug("[ebml] Invalid element id at %d, stopping scan", pos)
                return
            id_bytes = bytes(data[pos : pos + id_length])
            pos += id_length

            if pos >= end or vint_length(data[pos]) == 0 or pos + vint_length(data[pos]) > end:
                logger.debug("[ebml] Element header at %d does not fit in range", element_start)
                return
            size, size_length = read_vint(data, pos)
            pos += size_length

            kind = KNOWN_IDS.get(id_bytes, FieldKind.UNKNOWN)

            if is_unknown_size(size, size_length):
                # Unknown size extends to the end of the parent
                yield ElementHeader(id_bytes, kind, None, element_start, pos, end)
                return

            declared_end = pos + size
            if declared_end > end:
                yield ElementHeader(id_bytes, kind, size, element_start, pos, end, truncated=True)
                return

            yield ElementHeader(id_bytes, kind, size, element_start, pos, declared_end)
            pos = declared_end

    def descend(self, header: ElementHeader) -> "ElementScanner":
        """Scanner over the children of a master element."""
        return ElementScanner(self.data, header.data_offset, header.data_end)


# =============================================================================
# Leaf payload decoding
# =============================================================================


def read_uint(data: bytes, header: ElementHeader) -> int:
    """Read a big-endian unsigned integer payload (0 for empty payloads)."""
    return int.from_bytes(data[header.data_offset : header.data_end], "big")


def read_string(data: bytes, header: ElementHeader) -> str:
    """Read a UTF-8 payload, stripping null padding."""
    raw = data[header.data_offset : header.data_end]
    return bytes(raw).rstrip(b"\x00").decode("utf-8", errors="replace")
