"""Configuration management."""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Terrain settings, overridable through MERCATOR_* environment variables."""

    # Terrain
    default_resolution: int = Field(default=64, ge=1, description="Segment edge length in world units")
    default_level: float = Field(default=8.0, description="Height reported where no segment covers the ground")
    region_padding: float = Field(
        default=1.0, ge=0.0, description="World units added around region bounding boxes"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="console", description="Log renderer (console or json)")

    class Config:
        env_prefix = "MERCATOR_"
        env_file = ".env"
        extra = "ignore"


settings = Settings()
