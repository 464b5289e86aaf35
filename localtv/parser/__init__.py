"""
Matroska track parser.

Discovers the audio and subtitle tracks of a media file from its leading
bytes, without a demuxer:

- ebml: VINT decoding and element scanning
- tracks: Track table extraction from Segment/Tracks/TrackEntry
- classifier: Audio/subtitle split and human-readable labels
- probe: parse() and probe_file() entry points
"""
