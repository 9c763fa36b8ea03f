"""Library configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Connection values are validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment and .env.

    All settings are optional with defaults; validate_search_and_database
    rejects combinations that can never connect (e.g. an empty host list or
    a password without a username).
    """

    # App
    app_name: str = "searchsync"
    app_version: str = "0.1.0"
    debug: bool = False

    # Database (SQLAlchemy async URL, e.g. postgresql+asyncpg://... or sqlite+aiosqlite://...)
    database_url: str = ""
    database_echo: bool = False
    db_pool_size: int | None = None
    db_max_overflow: int | None = None

    # Search engine connection (opaque to the sync core; consumed by the adapter factory)
    search_hosts: str = "http://localhost:9200"
    search_api_key: SecretStr | None = None
    search_username: str | None = None
    search_password: SecretStr | None = None
    search_request_timeout: float = 10.0
    search_verify_certs: bool = True

    # Index behaviour
    search_index_name: str = "default"
    # "true" | "false" | "wait_for": passed as refresh= on every write
    search_refresh: str = "false"
    search_flatten_single_highlight: bool = False
    search_default_size: int | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def search_host_list(self) -> list[str]:
        """Comma-separated search_hosts as a list (whitespace stripped, empties dropped)."""
        return [h.strip() for h in self.search_hosts.split(",") if h.strip()]

    @model_validator(mode="after")
    def validate_search_and_database(self) -> "Settings":
        """Validate search connection and index settings.

        - At least one search host.
        - Basic auth needs both username and password.
        - search_refresh must be one of true/false/wait_for.
        - search_index_name must be a valid lowercase index name.
        """
        if not self.search_host_list:
            raise ValueError(
                "SEARCH_HOSTS is required (comma-separated URLs, e.g. http://localhost:9200)."
            )
        if bool(self.search_username) != bool(self.search_password):
            raise ValueError(
                "SEARCH_USERNAME and SEARCH_PASSWORD must be set together."
            )
        if self.search_refresh not in ("true", "false", "wait_for"):
            raise ValueError(
                f"search_refresh must be 'true', 'false' or 'wait_for', got: {self.search_refresh!r}"
            )
        if not self.search_index_name or self.search_index_name != self.search_index_name.lower():
            raise ValueError(
                f"search_index_name must be a non-empty lowercase name, got: {self.search_index_name!r}"
            )
        if self.search_default_size is not None and self.search_default_size < 0:
            raise ValueError("search_default_size must be >= 0")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
