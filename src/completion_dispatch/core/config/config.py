"""Configuration management for the completion dispatch engine."""

from enum import Enum
from typing import Any

from dotenv import load_dotenv
from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ...domain.enums import ProviderId
from ...domain.value_objects import Candidate, CandidateQueue
from .logging import LogFormat, LoggingConfig, LogLevel, setup_logging
from .provider_settings import DEFAULT_GEMINI_MODELS, DEFAULT_OPENROUTER_MODELS, ProviderSettings

load_dotenv()


class Environment(str, Enum):
    """Application environments."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Construct one instance at process start and pass it explicitly; nothing in
    the package keeps a module-level settings object.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Configuration
    APP_NAME: str = Field(default="Completion Dispatch API")
    APP_VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: Environment = Field(default=Environment.DEVELOPMENT)

    # Provider Configuration
    PROVIDER_PRIORITY: list[ProviderId] = Field(default_factory=lambda: [ProviderId.GEMINI, ProviderId.OPENROUTER])
    PRIMARY_MODEL: str = Field(default="gemini:gemini-3-flash-preview")
    GEMINI_BASE_URL: str = Field(default="")
    GEMINI_MODELS: list[str] = Field(default_factory=lambda: list(DEFAULT_GEMINI_MODELS))
    OPENROUTER_BASE_URL: str = Field(default="")
    OPENROUTER_MODELS: list[str] = Field(default_factory=lambda: list(DEFAULT_OPENROUTER_MODELS))
    OPENROUTER_AUTO_MODEL: str | None = Field(default="openrouter/free")
    OPENROUTER_APP_TITLE: str | None = Field(default=None)
    MAX_OUTPUT_TOKENS: int = Field(default=1024, ge=1, le=32768)
    REQUEST_TIMEOUT: float = Field(default=20.0, gt=0, le=300)
    DEFAULT_TEMPERATURE: float = Field(default=0.3, ge=0.0, le=2.0)

    # Retry Configuration
    RETRY_MAX_ATTEMPTS: int = Field(default=2, ge=1, le=5)
    RETRY_BASE_DELAY: float = Field(default=1.0, ge=0.0, le=30.0)
    RETRY_MAX_DELAY: float = Field(default=10.0, ge=0.0, le=60.0)
    RETRY_LINEAR_BACKOFF: bool = Field(default=True)
    HOST_TIME_BUDGET_SECONDS: float = Field(default=30.0, gt=0)

    # Cache Configuration
    CACHE_ENABLED: bool = Field(default=True)
    CACHE_TTL_SECONDS: int = Field(default=6 * 60 * 60, ge=1)
    CACHE_MAX_ENTRY_BYTES: int = Field(default=100_000, ge=1)
    CACHE_MAX_ENTRIES: int = Field(default=1000, ge=1)

    # Usage Configuration
    USAGE_BUFFER_SIZE: int = Field(default=100, ge=1)
    USAGE_LOG_PATH: str = Field(default="logs/ai_usage.csv")

    # Logging Configuration
    LOG_LEVEL: LogLevel = Field(default=LogLevel.INFO)
    LOG_FORMAT: LogFormat = Field(default=LogFormat.JSON)
    LOG_CONSOLE_ENABLED: bool = Field(default=True)
    LOG_FILE_ENABLED: bool = Field(default=False)
    LOG_FILE_PATH: str = Field(default="logs/app.log")

    # Monitoring Configuration
    MONITORING_METRICS_ENABLED: bool = Field(default=True)
    METRICS_PREFIX: str = Field(default="completion_dispatch")

    @field_validator("PROVIDER_PRIORITY")
    @classmethod
    def validate_provider_priority(cls, v: list[ProviderId]) -> list[ProviderId]:
        """Keep the first occurrence of each provider."""
        seen: list[ProviderId] = []
        for provider in v:
            if provider not in seen:
                seen.append(provider)
        if not seen:
            raise ValueError("PROVIDER_PRIORITY must name at least one provider")
        return seen

    @computed_field
    @property
    def gemini_settings(self) -> ProviderSettings:
        """Generate Gemini client configuration from individual settings."""
        return ProviderSettings(
            provider=ProviderId.GEMINI,
            base_url=self.GEMINI_BASE_URL,
            models=self.GEMINI_MODELS,
            timeout=self.REQUEST_TIMEOUT,
            max_output_tokens=self.MAX_OUTPUT_TOKENS,
        )

    @computed_field
    @property
    def openrouter_settings(self) -> ProviderSettings:
        """Generate OpenRouter client configuration from individual settings."""
        headers = {"X-Title": self.OPENROUTER_APP_TITLE} if self.OPENROUTER_APP_TITLE else {}
        return ProviderSettings(
            provider=ProviderId.OPENROUTER,
            base_url=self.OPENROUTER_BASE_URL,
            models=self.OPENROUTER_MODELS,
            auto_select_model=self.OPENROUTER_AUTO_MODEL or None,
            timeout=self.REQUEST_TIMEOUT,
            max_output_tokens=self.MAX_OUTPUT_TOKENS,
            extra_headers=headers,
        )

    @computed_field
    @property
    def retry_config(self) -> dict[str, Any]:
        """Generate retry executor arguments from individual settings."""
        return {
            "max_attempts": self.RETRY_MAX_ATTEMPTS,
            "base_delay": self.RETRY_BASE_DELAY,
            "max_delay": self.RETRY_MAX_DELAY,
            "linear": self.RETRY_LINEAR_BACKOFF,
        }

    @computed_field
    @property
    def logging_config(self) -> LoggingConfig:
        """Generate logging configuration from individual settings."""
        return LoggingConfig(
            level=self.LOG_LEVEL,
            format=self.LOG_FORMAT,
            console_enabled=self.LOG_CONSOLE_ENABLED,
            file_enabled=self.LOG_FILE_ENABLED,
            file_path=self.LOG_FILE_PATH,
        )

    def provider_settings(self, provider: ProviderId) -> ProviderSettings:
        """Settings for one provider."""
        if provider == ProviderId.GEMINI:
            return self.gemini_settings
        return self.openrouter_settings

    def fallback_plan(self) -> list[tuple[ProviderId, list[str]]]:
        """Provider fallback lists in priority order."""
        return [(provider, self.provider_settings(provider).models) for provider in self.PROVIDER_PRIORITY]

    def primary_candidate(self) -> Candidate | None:
        """Default first candidate; None lets the first fallback lead."""
        return Candidate.parse(self.PRIMARY_MODEL) if self.PRIMARY_MODEL.strip() else None

    def auto_select_candidate(self) -> Candidate | None:
        """OpenRouter auto-routing candidate, tried after every fallback list."""
        if ProviderId.OPENROUTER not in self.PROVIDER_PRIORITY or not self.OPENROUTER_AUTO_MODEL:
            return None
        return Candidate(provider=ProviderId.OPENROUTER, model=self.OPENROUTER_AUTO_MODEL)

    @property
    def candidate_count(self) -> int:
        """Number of candidates a request without override tries."""
        queue = CandidateQueue.build(self.primary_candidate(), self.fallback_plan(), self.auto_select_candidate())
        return len(queue)

    @property
    def worst_case_latency_seconds(self) -> float:
        """candidates x attempts x (timeout + longest backoff)."""
        backoff = self.RETRY_BASE_DELAY * (self.RETRY_MAX_ATTEMPTS - 1) if self.RETRY_LINEAR_BACKOFF else self.RETRY_BASE_DELAY
        backoff = min(backoff, self.RETRY_MAX_DELAY)
        return self.candidate_count * self.RETRY_MAX_ATTEMPTS * (self.REQUEST_TIMEOUT + backoff)

    def setup_logging(self) -> None:
        """Initialize logging using the logging configuration."""
        setup_logging(self.logging_config)
