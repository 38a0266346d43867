"""Link configuration management using Pydantic Settings.

Values are read from environment variables or a `.env` file. They only feed
`HttpLink.from_settings` and the CLI; a link constructed directly with an
`httpx.AsyncClient` does not consult them.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict as _SettingsConfigDict


class Settings(BaseSettings):
    model_config = _SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    GRAPHQL_ENDPOINT: str = Field(default="", description="GraphQL HTTP endpoint URL")
    # Use Any type to prevent Pydantic Settings JSON decoding; validator converts to dict
    GRAPHQL_DEFAULT_HEADERS: Any = Field(
        default_factory=dict,
        description=(
            "Comma-separated 'Name: value' pairs sent with every request, e.g. "
            "'Authorization: Bearer abc, X-Client: cli'. Per-request headers from "
            "the context override these."
        ),
    )
    GRAPHQL_TIMEOUT: float = Field(
        default=30.0, description="Read/write/pool timeout (seconds) for the httpx client"
    )
    GRAPHQL_CONNECT_TIMEOUT: float = Field(
        default=5.0, description="Connect timeout (seconds) for the httpx client"
    )
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    @field_validator("GRAPHQL_DEFAULT_HEADERS", mode="before")
    @classmethod
    def parse_headers(cls, v: Any) -> Dict[str, str]:
        """Accept a mapping (code/tests) or a 'Name: value, ...' string (env)."""
        if isinstance(v, dict):
            return {str(k).strip(): str(val).strip() for k, val in v.items()}
        if isinstance(v, str):
            headers: Dict[str, str] = {}
            for part in v.split(","):
                if not part.strip():
                    continue
                name, sep, value = part.partition(":")
                if not sep or not name.strip():
                    raise ValueError(f"Invalid header '{part.strip()}', expected 'Name: value'")
                headers[name.strip()] = value.strip()
            return headers
        if v is None:
            return {}
        raise ValueError(f"Unsupported headers value of type {type(v).__name__}")

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        return str(v or "INFO").strip().upper()


@lru_cache(maxsize=1)
def get_settings() -> Settings:  # pragma: no cover - trivial
    """Return a cached, singleton instance of the settings."""
    return Settings()
