from typing import Dict, List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

REQUIRED_CREDENTIALS = ("finnhub_api_key", "telegram_bot_token", "telegram_chat_id")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Keys must be provided via env / .env (never hardcode secrets in code)
    finnhub_api_key: str | None = None
    telegram_bot_token: str | None = None
    telegram_chat_id: str | None = None

    finnhub_base_url: str = "https://finnhub.io/api/v1"
    telegram_api_base: str = "https://api.telegram.org"

    quote_timeout: float = 5.0
    notify_timeout: float = 3.0
    notify_max_attempts: int = 3
    notify_backoff_seconds: float = 1.0  # multiplied by the attempt number
    cache_ttl_seconds: float = 30.0

    error_alerts: bool = True
    environment: str = "production"
    log_level: str = "INFO"
    cors_allow_origins: List[str] = ["*"]

    def missing_credentials(self) -> List[str]:
        """Names of required credentials that are unset or blank."""
        missing = []
        for name in REQUIRED_CREDENTIALS:
            value = getattr(self, name)
            if value is None or not str(value).strip():
                missing.append(name.upper())
        return missing

    @property
    def can_alert(self) -> bool:
        return bool(self.telegram_bot_token and self.telegram_chat_id)

    def cors_headers(self, origin: Optional[str] = None) -> Dict[str, str]:
        """CORS response headers for a request from ``origin``.

        An empty allow-list, or an origin not on it, gets no Allow-Origin header.
        """
        headers = {
            "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
            "Access-Control-Allow-Headers": "Content-Type",
        }
        if "*" in self.cors_allow_origins:
            headers["Access-Control-Allow-Origin"] = "*"
        elif origin and origin in self.cors_allow_origins:
            headers["Access-Control-Allow-Origin"] = origin
            headers["Vary"] = "Origin"
        return headers

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() in ("production", "prod")


settings = Settings()  # load once at import
