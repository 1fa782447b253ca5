"""
Application configuration and settings.
Centralized configuration management using Pydantic Settings.
"""
import re
from functools import lru_cache
from typing import FrozenSet, Mapping, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PORT = 3000
DEFAULT_REQUEST_BODY_LIMIT = "20mb"
DEFAULT_DOCUMENT_MAX_BYTES = 20 * 1024 * 1024
REQUIRED_ENVIRONMENT_KEYS = ("OPENAI_API_KEY", "BITRIX_URL")

_BYTE_UNITS = {
    "b": 1,
    "kb": 1024,
    "mb": 1024 ** 2,
    "gb": 1024 ** 3,
}
_BYTE_SIZE_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([kmg]?b)?\s*$", re.IGNORECASE)


class ConfigurationError(RuntimeError):
    """Raised when the environment does not describe a runnable service."""


def parse_allowed_chat_ids(value: Optional[str] = "") -> FrozenSet[str]:
    """Split a comma separated allowlist into a set of trimmed chat ids."""
    return frozenset(
        chat_id.strip() for chat_id in (value or "").split(",") if chat_id.strip()
    )


def parse_byte_size(value) -> int:
    """
    Convert a human readable size such as ``"20mb"`` into a number of bytes.

    Bare integers are taken as bytes. Units are binary (1kb == 1024 bytes).

    Raises:
        ConfigurationError: If the value cannot be parsed.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value

    match = _BYTE_SIZE_PATTERN.match(str(value or ""))
    if not match:
        raise ConfigurationError(f"Invalid byte size: {value!r}")

    number, unit = match.groups()
    return int(float(number) * _BYTE_UNITS[(unit or "b").lower()])


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        extra="ignore",
        case_sensitive=False,
        env_file=[".env", ".env.local"],  # .env.local overrides .env
    )

    # Application settings
    app_name: str = "EvaLegalAI Core"
    system_environment: str = "local"
    log_level: str = "INFO"
    enable_request_logging: bool = True

    # HTTP server settings
    port: int = DEFAULT_PORT
    request_body_limit: str = DEFAULT_REQUEST_BODY_LIMIT

    # OpenAI settings
    openai_api_key: str = ""
    openai_model: str = "gpt-4o"
    openai_timeout_seconds: float = 120.0

    # Bitrix24 settings
    bitrix_url: str = ""
    bitrix_timeout_seconds: float = 10.0
    allowed_chat_ids: str = ""

    # Document download settings
    document_timeout_seconds: float = 15.0
    document_max_bytes: int = DEFAULT_DOCUMENT_MAX_BYTES

    @property
    def chat_allowlist(self) -> FrozenSet[str]:
        """Chat ids allowed to use the relay. Empty means every chat is allowed."""
        return parse_allowed_chat_ids(self.allowed_chat_ids)

    @property
    def request_body_limit_bytes(self) -> int:
        """Maximum accepted size of an inbound request body."""
        return parse_byte_size(self.request_body_limit)

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.system_environment == "production"

    def missing_required_keys(self) -> list:
        values = {
            "OPENAI_API_KEY": self.openai_api_key,
            "BITRIX_URL": self.bitrix_url,
        }
        return [key for key in REQUIRED_ENVIRONMENT_KEYS if not values[key]]


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Load and validate settings.

    Args:
        env: Explicit environment mapping. When omitted, the process
            environment and the .env files are used.

    Raises:
        ConfigurationError: If a required key is missing or a value is malformed.
    """
    if env is None:
        settings = Settings()
    else:
        # model_validate skips the environment sources, so only ``env`` is read
        settings = Settings.model_validate({key.lower(): value for key, value in env.items()})

    missing_keys = settings.missing_required_keys()
    if missing_keys:
        raise ConfigurationError(
            f"Missing required environment variables: {', '.join(missing_keys)}"
        )

    # Fail at startup rather than on the first request
    parse_byte_size(settings.request_body_limit)
    return settings


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return load_settings()
