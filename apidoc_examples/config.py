"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - Every field has a default; the servers run with no environment at all
    - get_settings() is cached (lru_cache), single instance per process
    - port_for() gives distinct ports per server, or 0 (OS-assigned) for all
    - base_port + (number of examples - 1) never exceeds 65535

Design Decisions:
    - APIDOC_ env prefix keeps the settings apart from uvicorn's own variables
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from apidoc_examples.examples import EXAMPLES

LOG_FORMATS = ("text", "json")

# Highest base port that still leaves a valid port for every example.
MAX_BASE_PORT = 65535 - (len(EXAMPLES) - 1)


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="APIDOC_", env_file=".env", case_sensitive=False,
        extra="ignore",
    )

    # Listeners
    host: str = "127.0.0.1"
    base_port: int = Field(default=10000, ge=0, le=MAX_BASE_PORT)

    # Shared handler context
    context_name: str = "Foo"

    # Documents
    api_version: str = "0.1.0"

    # Observability
    log_level: str = "INFO"
    log_format: str = "text"
    access_log: bool = True

    @field_validator("log_format")
    @classmethod
    def check_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {', '.join(LOG_FORMATS)}")
        return v

    @field_validator("log_level")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return v.upper()

    def port_for(self, index: int) -> int:
        """Port of the index-th selected server."""
        if self.base_port == 0:
            return 0
        return self.base_port + index


@lru_cache
def get_settings() -> Settings:
    return Settings()
