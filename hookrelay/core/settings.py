from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = Field(default="Hook Relay", alias="APP_NAME")
    app_env: str = Field(default="local", alias="APP_ENV")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    database_url: str = Field(
        default="sqlite+pysqlite:///./hookrelay.db",
        alias="DATABASE_URL",
    )
    api_key: str | None = Field(default=None, alias="API_KEY")
    require_tld: bool = Field(default=True, alias="REQUIRE_TLD")
    delivery_timeout_s: float = Field(default=10.0, alias="DELIVERY_TIMEOUT_S")
    # None: any subscriber response counts as delivered
    delivery_success_statuses: list[int] | None = Field(default=None, alias="DELIVERY_SUCCESS_STATUSES")
    fanout_in_background: bool = Field(default=True, alias="FANOUT_IN_BACKGROUND")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
