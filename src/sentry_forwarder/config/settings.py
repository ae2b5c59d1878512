from pydantic_settings import BaseSettings
from pydantic import ConfigDict, field_validator
from pathlib import Path
from typing import Any, Literal
from functools import lru_cache
from ..validators.config_validators import to_uppercase, to_lowercase, to_lowercase_list

class Settings(BaseSettings):
    """
    Application settings loaded from environment.
    """

    # Environment
    ENV: Literal["development", "testing", "staging", "production"] = "development"

    # Application metadata (reported as Sentry extras)
    APP_NAME: str | None = None
    APP_EDITION: str = "Solo"
    APP_VERSION: str | None = None
    APP_SCHEMA_VERSION: str | None = None

    # Outbound proxy, also used by the Sentry transport
    HTTP_PROXY: str | None = None

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FORMAT: Literal["json", "text"] = "json"
    LOG_TO_STDOUT: bool = True
    LOG_DIR: Path = Path("/var/log/sentry-forwarder")
    LOG_MAX_BYTES: int = 10_000_000  # 10 MB
    LOG_BACKUP_COUNT: int = 5

    # Sentry
    SENTRY_ENABLED: bool = True
    SENTRY_DSN: str | None = None
    SENTRY_RELEASE: str | None = None
    SENTRY_ENVIRONMENT: str | None = None
    SENTRY_ANONYMOUS: bool = False
    SENTRY_LEVELS: list[str] = ["error", "warning"]
    SENTRY_CATEGORIES: list[str] = []
    SENTRY_EXCEPT: list[str] = []
    SENTRY_EXCEPT_CODES: list[Any] = [403, 404]
    SENTRY_EXCEPT_PATTERNS: list[str] = []
    SENTRY_OPTIONS: dict[str, Any] = {}
    SENTRY_BUFFER_SIZE: int = 1000
    SENTRY_FLUSH_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "ERROR"

    # --- Derived settings ---
    @property
    def sentry_environment(self) -> str:
        """
        Environment name reported to Sentry.

        An explicit SENTRY_ENVIRONMENT wins; otherwise the application ENV is used.
        """
        return self.SENTRY_ENVIRONMENT or self.ENV

    # --- Validators ---
    @field_validator("LOG_LEVEL", "SENTRY_FLUSH_LEVEL", mode="before")
    def normalize_log_level(cls, v: str | None) -> str | None:
        """
        Normalize logging level names to uppercase.

        The stdlib logging module expects level names in uppercase ("DEBUG", "INFO"),
        while environment files are often written in lowercase.
        """
        return to_uppercase(v)

    @field_validator("LOG_FORMAT", mode="before")
    def normalize_log_format(cls, v: str | None) -> str | None:
        """
        Normalize the LOG_FORMAT environment variable value to lowercase.
        """
        return to_lowercase(v)

    @field_validator("SENTRY_LEVELS", mode="before")
    def normalize_sentry_levels(cls, v: Any) -> Any:
        return to_lowercase_list(v)

    # --- ConfigDict settings ---
    model_config = ConfigDict(
        # Load environment variables from the .env file located at the package root.
        env_file=str(Path(__file__).parent.parent / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

# get_settings() takes no arguments and always returns the same settings from the environment,
# so it is cached with @lru_cache().
@lru_cache()
def get_settings() -> Settings:
    return Settings()
