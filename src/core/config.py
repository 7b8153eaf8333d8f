"""Application settings, read from environment variables."""

import os
from functools import lru_cache

from pydantic import BaseModel, Field

ENV_PREFIX = "CHESS_"


class Settings(BaseModel):
    database_url: str = "sqlite:///./chess.db"
    log_level: str = "INFO"

    # match creation
    default_time_ms: int = Field(default=600_000, gt=0)
    default_tick_rate: int = Field(default=1, gt=0)

    # client polling / transport
    poll_base_delay: float = Field(default=0.5, gt=0)
    poll_max_delay: float = Field(default=5.0, gt=0)
    http_timeout: float = Field(default=5.0, gt=0)


def settings_from_env(environ: dict[str, str] | None = None) -> Settings:
    """Pick up every `CHESS_<FIELD>` variable that is set. Pydantic takes care of the type conversion."""
    environ = dict(os.environ) if environ is None else environ
    values = {
        name: environ[f"{ENV_PREFIX}{name.upper()}"]
        for name in Settings.model_fields
        if f"{ENV_PREFIX}{name.upper()}" in environ
    }
    return Settings.model_validate(values)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return settings_from_env()
