from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings pulled from HEXWORLD_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="HEXWORLD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="console", description="Logging format (console or json)")

    # Generation Defaults
    default_radius: int = Field(default=100, ge=1, description="Default map radius in cells")
    default_preset: str = Field(default="default", description="World preset used when none is given")
    seed: Optional[str] = Field(default=None, description="Seed used when a run does not pass one")


# Instantiate singleton settings object
settings = Settings()
