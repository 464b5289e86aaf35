"""
Playback scheduling.

- rotation_queue: Shuffled rotation with history and reshuffle on exhaustion
- ad_scheduler: Ad breaks interleaved into the rotation at a fixed cadence
"""
