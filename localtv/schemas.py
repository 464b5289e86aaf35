from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TrackView(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int = Field(..., description="Position within the audio or subtitle list, 0-based.")
    label: str = Field(..., description="Human-readable label for track menus.")
    language: str = Field("und", description="ISO 639-2 language code.")
    track_number: int = Field(..., description="Matroska TrackNumber.")
    codec_id: Optional[str] = Field(None, description="Matroska CodecID, e.g. A_AAC or S_TEXT/UTF8.")
    default: bool = Field(False, description="Whether the track is flagged as default.")


class ClassifiedTracks(BaseModel):
    model_config = ConfigDict(frozen=True)

    audio: list[TrackView] = Field(default_factory=list, description="Audio tracks ordered by track number.")
    subtitles: list[TrackView] = Field(default_factory=list, description="Subtitle tracks ordered by track number.")

    @property
    def is_empty(self) -> bool:
        return not self.audio and not self.subtitles


class AdBreakConfig(BaseModel):
    """Ad break cadence. Out-of-range values are clamped, never rejected."""

    enabled: bool = Field(False, description="Whether ad breaks are inserted at all.")
    frequency: int = Field(3, description="Insert a break after every N normal items.")
    min_per_break: int = Field(1, description="Minimum number of ads per break.")
    max_per_break: int = Field(2, description="Maximum number of ads per break.")

    @model_validator(mode="before")
    @classmethod
    def clamp_bounds(cls, values: Any):
        if not isinstance(values, dict):
            return values
        values = dict(values)
        for key in ("frequency", "min_per_break", "max_per_break"):
            if values.get(key) is not None:
                values[key] = max(1, int(values[key]))
        minimum = values.get("min_per_break")
        maximum = values.get("max_per_break")
        if minimum is None:
            minimum = cls.model_fields["min_per_break"].default
        if maximum is None:
            maximum = cls.model_fields["max_per_break"].default
        if maximum < minimum:
            values["max_per_break"] = minimum
        return values


class AdBreakConfigUpdate(BaseModel):
    enabled: Optional[bool] = Field(None, description="Whether ad breaks are inserted at all.")
    frequency: Optional[int] = Field(None, description="Insert a break after every N normal items.")
    min_per_break: Optional[int] = Field(None, description="Minimum number of ads per break.")
    max_per_break: Optional[int] = Field(None, description="Maximum number of ads per break.")


class MediaItem(BaseModel):
    name: str = Field(..., description="Display name of the video.")
    path: str = Field(..., description="Path or URL the player resolves to load the video.")
    folder_index: int = Field(0, description="Which selected folder the video came from.")


class LoadItemsRequest(BaseModel):
    items: list[MediaItem] = Field(..., description="Items to schedule.")


class ProbeRequest(BaseModel):
    path: str = Field(..., description="Local path of the media file to probe.")
    header_size: Optional[int] = Field(
        None, gt=0, description="Bytes to read from the start of the file. Defaults to the configured probe size."
    )


class NextItemResponse(BaseModel):
    item: Optional[MediaItem] = Field(None, description="The dispensed item, or null when nothing is available.")
    is_ad: bool = Field(False, description="Whether the item belongs to an ad break.")


class PlaybackStatus(BaseModel):
    total_items: int
    total_ads: int
    played_count: int
    normal_items_played: int
    in_break: bool
    current: Optional[MediaItem] = None
    ads: AdBreakConfig
