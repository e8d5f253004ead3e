from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_env: str = Field(default="dev", alias="APP_ENV")
    app_host: str = Field(default="0.0.0.0", alias="APP_HOST")
    app_port: int = Field(default=8000, alias="APP_PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    database_url: str = Field(alias="DATABASE_URL")
    db_echo: bool = Field(default=False, alias="DB_ECHO")
    db_lock_timeout_seconds: float = Field(default=5.0, gt=0, alias="DB_LOCK_TIMEOUT_SECONDS")

    gateway_token: str = Field(
        default="dev_gateway_token_change_me",
        alias="GATEWAY_TOKEN",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
