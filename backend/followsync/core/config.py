import os
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    trakt_api_url: str = os.getenv("TRAKT_API_URL", "https://api.trakt.tv")
    trakt_client_id: str = os.getenv("TRAKT_CLIENT_ID", "")
    trakt_access_token: str = os.getenv("TRAKT_ACCESS_TOKEN", "")
    trakt_timeout_seconds: float = float(os.getenv("TRAKT_TIMEOUT_SECONDS", "10"))

    # Retry / backoff for Trakt calls
    trakt_retry_max_attempts: int = int(os.getenv("TRAKT_RETRY_MAX_ATTEMPTS", "3"))
    trakt_retry_initial_delay: float = float(os.getenv("TRAKT_RETRY_INITIAL_DELAY", "1.0"))
    trakt_retry_multiplier: float = float(os.getenv("TRAKT_RETRY_MULTIPLIER", "2.0"))
    trakt_retry_max_delay: float = float(os.getenv("TRAKT_RETRY_MAX_DELAY", "30.0"))  # cap at 30 seconds

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

settings = Settings()
