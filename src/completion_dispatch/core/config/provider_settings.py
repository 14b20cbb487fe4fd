"""Provider configuration for the completion dispatch engine."""

from typing import Any

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ...domain.enums import ProviderId

DEFAULT_GEMINI_MODELS = [
    "gemini-3-flash-preview",
    "gemini-2.5-flash",
    "gemini-2.0-flash",
    "gemini-2.5-flash-lite",
    "gemini-2.0-flash-lite",
]

DEFAULT_OPENROUTER_MODELS = [
    "meta-llama/llama-3.3-70b-instruct:free",
    "meta-llama/llama-3.2-3b-instruct:free",
    "arcee-ai/trinity-large-preview:free",
    "nvidia/nemotron-3-nano-30b-a3b:free",
    "tngtech/deepseek-r1t2-chimera:free",
]

DEFAULT_BASE_URLS = {
    ProviderId.GEMINI: "https://generativelanguage.googleapis.com/v1beta",
    ProviderId.OPENROUTER: "https://openrouter.ai/api/v1",
}


class ProviderSettings(BaseModel):
    """Per-provider client configuration with sensible defaults and validation."""

    provider: ProviderId = Field(..., description="The provider these settings apply to")
    base_url: str = Field(default="", description="Base URL for the provider API")

    # Model Configuration
    models: list[str] = Field(default_factory=list, description="Fallback models in priority order")
    auto_select_model: str | None = Field(
        default=None,
        description="Provider-side meta-model that picks an available backend, tried last",
    )

    # Request Configuration
    timeout: float = Field(default=20.0, gt=0, le=300, description="Request timeout in seconds")
    max_output_tokens: int = Field(default=1024, ge=1, le=32768, description="Maximum tokens to generate")
    extra_headers: dict[str, str] = Field(default_factory=dict, description="Additional request headers")

    @field_validator("base_url")
    @classmethod
    def set_default_base_url(cls, v: str, info: Any) -> str:
        """Fall back to the provider's public endpoint."""
        if v:
            return v.rstrip("/")

        provider_value = info.data.get("provider") if info.data else None
        return DEFAULT_BASE_URLS.get(provider_value, "").rstrip("/")

    @field_validator("models")
    @classmethod
    def strip_models(cls, v: list[str]) -> list[str]:
        """Drop blank entries from the model list."""
        return [model.strip() for model in v if model and model.strip()]

    def get_client_config(self) -> dict[str, Any]:
        """Get configuration for provider client initialization."""
        return {
            "base_url": self.base_url,
            "timeout": self.timeout,
            "max_output_tokens": self.max_output_tokens,
            "extra_headers": dict(self.extra_headers),
        }


class ProviderSecrets(BaseSettings):
    """Provider API keys read from the environment or ``.env``.

    There are no default credentials: an unset key stays ``None``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    GEMINI_API_KEY: SecretStr | None = Field(default=None)
    OPENROUTER_API_KEY: SecretStr | None = Field(default=None)
