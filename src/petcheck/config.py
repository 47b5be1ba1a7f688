"""
Configuration management for PetCheck.

Uses pydantic-settings for environment-based configuration with validation.
All settings can be overridden via environment variables with PETCHECK_ prefix.
"""

from enum import Enum
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class LLMProvider(str, Enum):
    """Supported chat completion providers."""

    ANTHROPIC = "anthropic"
    OPENAI = "openai"


class StorageBackend(str, Enum):
    """Key-value store backends."""

    MEMORY = "memory"
    JSON = "json"


class ScanSettings(BaseSettings):
    """Settings for dipstick sampling and matching."""

    model_config = SettingsConfigDict(env_prefix="PETCHECK_SCAN_")

    # Side length of the square sampling window in frame pixels
    window_size: int = Field(default=20, ge=1, le=512)

    # Optional JSON file replacing the built-in reference chart
    reference_chart_path: Optional[Path] = Field(default=None)


class StorageSettings(BaseSettings):
    """Settings for pet and record storage."""

    model_config = SettingsConfigDict(env_prefix="PETCHECK_STORAGE_")

    backend: StorageBackend = Field(default=StorageBackend.MEMORY)
    data_file: Optional[Path] = Field(
        default=None,
        description="JSON file for the json backend (defaults to <data_dir>/petcheck.json)",
    )


class LLMSettings(BaseSettings):
    """Settings for the chat assistant.

    The API key can be provided via PETCHECK_LLM_API_KEY or the
    provider-specific PETCHECK_LLM_ANTHROPIC_API_KEY / PETCHECK_LLM_OPENAI_API_KEY.
    """

    model_config = SettingsConfigDict(env_prefix="PETCHECK_LLM_")

    provider: LLMProvider = Field(default=LLMProvider.ANTHROPIC)
    api_key: Optional[str] = Field(
        default=None,
        description="Primary API key (used if provider-specific key not set)",
    )
    anthropic_api_key: Optional[str] = Field(default=None)
    openai_api_key: Optional[str] = Field(default=None)

    # Model selection
    anthropic_model: str = Field(default="claude-sonnet-4-20250514")
    openai_model: str = Field(default="gpt-4o")

    # Request parameters
    max_tokens: int = Field(default=1024, ge=100, le=32000)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    timeout_seconds: int = Field(default=60, ge=10, le=300)

    def get_active_api_key(self, provider: Optional[LLMProvider] = None) -> Optional[str]:
        """Get the API key for a provider, by default the configured one.

        A provider-specific key wins over the shared `api_key`.
        """
        provider_keys = {
            LLMProvider.ANTHROPIC: self.anthropic_api_key,
            LLMProvider.OPENAI: self.openai_api_key,
        }
        return provider_keys.get(provider or self.provider) or self.api_key


class APISettings(BaseSettings):
    """Settings for the API server."""

    model_config = SettingsConfigDict(env_prefix="PETCHECK_API_")

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1024, le=65535)
    reload: bool = Field(default=False)

    # CORS
    cors_origins: list[str] = Field(default=["*"])
    cors_allow_credentials: bool = Field(default=True)

    # Identity cookie
    cookie_name: str = Field(default="petcheck_uid", min_length=1)
    cookie_max_age_days: int = Field(default=365, ge=1, le=3650)

    # File uploads
    max_upload_size_mb: int = Field(default=10, ge=1, le=100)

    # Chat rate limiting (per user)
    chat_rate_limit: int = Field(default=10, ge=1, le=1000)
    chat_rate_window_seconds: float = Field(default=60.0, ge=1.0, le=86400.0)


class SimulationSettings(BaseSettings):
    """Settings for simulated analysis and health scoring."""

    model_config = SettingsConfigDict(env_prefix="PETCHECK_SIM_")

    # Chance that a simulated parameter reads abnormal
    abnormal_probability: float = Field(default=0.2, ge=0.0, le=1.0)
    seed: Optional[int] = Field(default=None)

    # Points deducted from 100 per level above the first pad
    penalty_per_level: int = Field(default=5, ge=0, le=100)


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings."""

    model_config = SettingsConfigDict(
        env_prefix="PETCHECK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application info
    app_name: str = Field(default="PetCheck")
    log_level: str = Field(default="INFO")

    # Data directory
    data_dir: Path = Field(default=Path.home() / ".petcheck")

    # Subsettings
    scan: ScanSettings = Field(default_factory=ScanSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    api: APISettings = Field(default_factory=APISettings)
    simulation: SimulationSettings = Field(default_factory=SimulationSettings)

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Upper-case and validate the log level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level

    def resolve_data_file(self) -> Path:
        """Get the JSON store path, relative paths resolved against data_dir."""
        path = self.storage.data_file or Path("petcheck.json")
        if not path.is_absolute():
            return self.data_dir / path
        return path

    def ensure_directories(self) -> None:
        """Create required directories if they don't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)


# Global settings instance - lazy loaded
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, creating it if necessary."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def configure(settings: Optional[Settings] = None, **kwargs) -> Settings:
    """
    Configure the global settings.

    Args:
        settings: Optional Settings instance to use directly
        **kwargs: Settings overrides

    Returns:
        The configured Settings instance
    """
    global _settings
    if settings is not None:
        _settings = settings
    elif kwargs:
        _settings = Settings(**kwargs)
    else:
        _settings = Settings()
    return _settings
