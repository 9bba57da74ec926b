from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ENDPOINTS = [
    "https://relay.virtualkemomimi.net/api/relay.json",
    "https://relay.virtualkemomimi.net/relay.json",
    "https://relay.virtualkemomimi.net/api/instances.json",
    "https://relay.virtualkemomimi.net/api/relays.json",
    "https://relay.virtualkemomimi.net/api/instances",
    "https://relay.virtualkemomimi.net/",
]


class Settings(BaseSettings):
    # Environment mode: dev or prod
    ENV: Literal["dev", "prod"] = "dev"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str | None = None
    SLACK_WEBHOOK_URL: str | None = None

    # Relay sources
    RELAY_SOURCE: str | None = None  # URL or local path, replaces RELAY_ENDPOINTS when set
    RELAY_ENDPOINTS: list[str] = DEFAULT_ENDPOINTS
    RELAY_SOURCE_NAME: str = "Virtual Kemomimi Relay"

    # HTTP
    USER_AGENT: str = "Misskey-Compass-Bot/1.0 (+https://github.com/misskey-compass)"
    ACCEPT_HEADER: str = "application/json,text/html;q=0.9,*/*;q=0.8"
    HTTP_TIMEOUT_SECONDS: float = 30.0  # 0 disables the timeout

    # Output artifact consumed by the static site
    OUTPUT_PATH: str = "assets/data/virtual-kemomimi-servers.json"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",  # ignore unrelated keys in local .env
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENV == "prod"

    @property
    def effective_log_level(self) -> str:
        """Return appropriate log level based on environment."""
        level = (self.LOG_LEVEL or "INFO").strip().upper()
        level = {"WARN": "WARNING", "FATAL": "CRITICAL"}.get(level, level)
        if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            return "INFO"
        if self.is_production and level in {"TRACE", "DEBUG"}:
            # In production, minimum INFO level
            return "INFO"
        return level

    @property
    def http_timeout(self) -> float | None:
        return self.HTTP_TIMEOUT_SECONDS if self.HTTP_TIMEOUT_SECONDS > 0 else None

    @property
    def request_headers(self) -> dict[str, str]:
        return {"User-Agent": self.USER_AGENT, "Accept": self.ACCEPT_HEADER}


settings = Settings()
