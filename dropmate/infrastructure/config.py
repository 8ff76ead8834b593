from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Environment-driven configuration.

    BASE_URL, LINE_CHANNEL_ACCESS_TOKEN and OWNER_USER_ID have no default: constructing Settings without
    them raises a pydantic ValidationError, which stops the process at startup.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    port: int = 3000
    base_url: str
    line_channel_access_token: str
    owner_user_id: str

    default_locker_id: str = "LOCKER001"
    database_url: str = "sqlite+pysqlite:///:memory:"

    line_api_base_url: str = "https://api.line.me/v2/bot"
    line_data_api_base_url: str = "https://api-data.line.me/v2/bot"
    line_dry_run: bool = False

    sse_retry_ms: int = 1500
    sse_keepalive_seconds: float = 15.0
    log_level: str = "INFO"

    @property
    def public_base_url(self) -> str:
        return self.base_url.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    return Settings()
