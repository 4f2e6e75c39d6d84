"""Settings — environment-driven configuration via pydantic-settings.

Every value has a working default; override with ROIBOARD_* environment
variables or a .env file. get_settings() is cached, one instance per process.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings for the dashboard engine."""

    model_config = SettingsConfigDict(
        env_prefix="ROIBOARD_", env_file=".env", case_sensitive=False, extra="ignore",
    )

    # Observability
    log_level: str = "INFO"
    log_format: str = "text"

    # Undo affordance
    undo_window_seconds: float = Field(default=5.0, gt=0)

    # Presentation
    roi_decimal_places: int = Field(default=2, ge=0, le=10)
    roi_bucket_edges: list[float] = Field(default_factory=lambda: [0.0, 1.0, 5.0, 10.0])
    sort_enabled: bool = True

    @field_validator("log_format")
    @classmethod
    def _known_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return v

    @field_validator("roi_bucket_edges")
    @classmethod
    def _increasing_edges(cls, v: list[float]) -> list[float]:
        if not v:
            raise ValueError("roi_bucket_edges needs at least one edge")
        if any(b <= a for a, b in zip(v, v[1:])):
            raise ValueError("roi_bucket_edges must be strictly increasing")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
