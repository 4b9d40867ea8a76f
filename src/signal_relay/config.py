from __future__ import annotations

from datetime import timedelta

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "info"

    CORS_ORIGINS: list[str] = ["*"]

    CALL_END_GRACE_SECONDS: float = 5.0
    CALL_MAX_AGE_SECONDS: int = 3600
    REAPER_INTERVAL_SECONDS: float = 300.0

    DEFAULT_CALL_KIND: str = "video"

    @property
    def call_max_age(self) -> timedelta:
        return timedelta(seconds=self.CALL_MAX_AGE_SECONDS)

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
