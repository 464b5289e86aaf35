from pydantic import Field
from pydantic_settings import BaseSettings

from localtv.const import DEFAULT_HEADER_PROBE_SIZE
from localtv.schemas import AdBreakConfig


class Settings(BaseSettings):
    api_password: str | None = None  # The password for protecting the API endpoints.
    log_level: str = "INFO"  # The logging level to use.
    host: str = "127.0.0.1"  # Interface the local service binds to.
    port: int = 8890  # Port the local service listens on.
    header_probe_size: int = Field(
        DEFAULT_HEADER_PROBE_SIZE, gt=0
    )  # Bytes read from the start of a file when probing its tracks.
    ads_enabled: bool = False  # Whether ad breaks are inserted by default.
    ad_frequency: int = 3  # Insert a break after every N normal items.
    ad_min_per_break: int = 1  # Minimum number of ads per break.
    ad_max_per_break: int = 2  # Maximum number of ads per break.

    def ad_break_config(self) -> AdBreakConfig:
        """Default ad cadence built from the environment."""
        return AdBreakConfig(
            enabled=self.ads_enabled,
            frequency=self.ad_frequency,
            min_per_break=self.ad_min_per_break,
            max_per_break=self.ad_max_per_break,
        )

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
