"""
Configuration for the Axiom client.

Settings are read from the environment (``AXIOM_`` prefix) or a ``.env`` file.
The current-user endpoint version differs between API revisions, so it is a
setting rather than a constant.
"""

from functools import lru_cache
from typing import Any, Dict, Optional

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError

SDK_VERSION = "0.1.0"
DEFAULT_URL = "https://api.axiom.co"
DEFAULT_USER_PATH = "/v2/user"
DEFAULT_MAX_RESPONSE_BYTES = 1024 * 1024  # 1 MiB
DEFAULT_TIMEOUT = 30.0


class ClientSettings(BaseSettings):
    """Connection settings for :class:`axiom_sdk.AxiomClient`."""

    model_config = SettingsConfigDict(
        env_prefix="AXIOM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    token: Optional[SecretStr] = None
    url: str = DEFAULT_URL
    user_path: str = DEFAULT_USER_PATH
    max_response_bytes: int = Field(default=DEFAULT_MAX_RESPONSE_BYTES, gt=0)
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("url must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("user_path")
    @classmethod
    def validate_user_path(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("user_path must start with '/'")
        return v

    def get_config_summary(self) -> Dict[str, Any]:
        """Settings without the token, safe to log."""
        return {
            "url": self.url,
            "user_path": self.user_path,
            "max_response_bytes": self.max_response_bytes,
            "timeout": self.timeout,
            "token_set": self.token is not None,
        }


@lru_cache()
def get_settings() -> ClientSettings:
    """Get cached settings instance."""
    try:
        return ClientSettings()
    except ValidationError as e:
        raise ConfigurationError(f"invalid client configuration: {e}") from e
