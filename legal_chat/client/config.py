"""Client configuration with environment variable loading.

Pydantic-based configuration for the backend client, the conversation store
and the optional Supabase authentication provider.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()


def _optional_env(name: str) -> str | None:
    value = os.getenv(name, "").strip()
    return value or None


class ClientConfig(BaseModel):
    """Configuration for the legal research chat client.

    Attributes:
        api_base_url: Base URL of the answering backend.
        request_timeout_seconds: Upper bound for a single backend call.
        conversations_dir: Directory for per-user JSON files (None keeps them in browser storage).
        supabase_url: Supabase project URL (None disables Supabase auth).
        supabase_anon_key: Supabase anonymous key.
    """

    api_base_url: str = Field(
        default_factory=lambda: os.getenv("API_BASE_URL", "http://localhost:8000"),
        description="Base URL of the legal RAG backend",
    )
    request_timeout_seconds: float = Field(
        default_factory=lambda: float(os.getenv("REQUEST_TIMEOUT_SECONDS", "300")),
        gt=0.0,
        description="Upper bound for one backend request, in seconds",
    )
    conversations_dir: str | None = Field(
        default_factory=lambda: _optional_env("CONVERSATIONS_DIR"),
        description="Optional directory holding one conversations file per user",
    )
    supabase_url: str | None = Field(
        default_factory=lambda: _optional_env("SUPABASE_URL"),
        description="Supabase project URL",
    )
    supabase_anon_key: str | None = Field(
        default_factory=lambda: _optional_env("SUPABASE_ANON_KEY"),
        description="Supabase anonymous API key",
    )

    @field_validator("api_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require a base URL and drop any trailing slash."""
        v = v.strip()
        if not v:
            raise ValueError("API base URL required. Set API_BASE_URL in .env")
        return v.rstrip("/")

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)


def get_client_config() -> ClientConfig:
    """Create client configuration from environment.

    Returns:
        Configured ClientConfig instance.
    """
    return ClientConfig()
