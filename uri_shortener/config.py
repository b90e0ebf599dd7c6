from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables (prefixed with SHORTENER_)
    2. .env file
    3. Default values below

    The secret alphabet has no usable default on purpose: it is the key for
    every alias in the store and must be provisioned out-of-band
    (see uri_shortener.services.ciphers.new_letter_ordering).
    """

    # Environment
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Application
    app_name: str = "URI Shortener"
    app_version: str = "1.0.0"

    # Shortener
    secret: str = ""
    prefix: str = "http://127.0.0.1:8000"
    store_location: str = "uris.db"  # Path, ":memory:" or SQLAlchemy URL
    # Added to the row id before ciphering. Token length grows by one
    # character per len(secret) of offset: 90210 with 52 letters gives
    # ~1,736-character tokens, so keep it small.
    offset: int = 0
    max_attempts: int = 5  # Bound on the lookup/insert loop in shorten()

    # Cleanup task
    prune_max_age_days: int = 90

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_prefix="SHORTENER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Create settings instance
settings = Settings()
