"""Service configuration using Pydantic Settings with YAML/JSON file support."""

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from video_resolver.utils.logger import get_logger

logger = get_logger(__name__)

CONFIG_DIR = Path.home() / ".video_resolver"


class ExtractionConfig(BaseModel):
    """Extraction tool invocation settings."""

    tool_binary: str = Field(default="yt-dlp", description="Extraction tool executable")
    timeout_ms: int = Field(default=15000, gt=0, description="Primary extraction timeout in ms")
    unlisted_retry_timeout_ms: int = Field(
        default=20000, gt=0, description="Timeout for the single unlisted-video retry in ms"
    )
    probe_timeout_ms: int = Field(
        default=10000, gt=0, description="Timeout for the --version availability probe in ms"
    )
    user_agent: str = Field(
        default="Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36",
        description="Browser user agent passed to the tool",
    )
    player_client: str = Field(default="android", description="YouTube player client hint")
    extra_args: list[str] = Field(
        default_factory=lambda: [
            "--no-warnings",
            "--no-check-certificate",
            "--prefer-free-formats",
        ],
        description="Additional tool flags appended to the fixed argument set",
    )
    pad_single_stream: bool = Field(
        default=True,
        description="Fabricate placeholder qualities when only one real stream exists",
    )
    placeholder_qualities: list[str] = Field(
        default_factory=lambda: ["2160p", "1440p", "1080p", "720p", "480p", "360p", "240p"],
        description="Synthetic quality labels used for single-stream padding",
    )

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    @property
    def unlisted_retry_timeout_seconds(self) -> float:
        return self.unlisted_retry_timeout_ms / 1000

    @property
    def probe_timeout_seconds(self) -> float:
        return self.probe_timeout_ms / 1000


class RateLimitConfig(BaseModel):
    """Fixed-window rate limit settings."""

    window_ms: int = Field(default=900000, gt=0, description="Window length in ms (15 minutes)")
    max_requests: int = Field(default=100, gt=0, description="Requests allowed per window")
    path_prefix: str = Field(default="/api/", description="Paths guarded by the limiter")
    sweep_interval_seconds: float = Field(
        default=300.0, gt=0, description="Interval between expired-window sweeps"
    )

    @property
    def window_seconds(self) -> float:
        return self.window_ms / 1000


class ServerConfig(BaseModel):
    """HTTP server settings."""

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=3001, description="Bind port")
    environment: str = Field(default="development", description="development or production")
    debug: bool = Field(default=False, description="Verbose extraction logging")
    cors_origin: str = Field(
        default="",
        description="Comma-separated origins allowed in production",
    )
    trust_proxy: bool = Field(
        default=False, description="Take client address from X-Forwarded-For"
    )
    version: str = Field(default="1.0.0", description="Version reported by /api/health")

    @field_validator("environment", mode="before")
    @classmethod
    def normalize_environment(cls, v):
        """Lower-case the environment name."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def cors_origins(self) -> list[str]:
        origins = [origin.strip() for origin in self.cors_origin.split(",") if origin.strip()]
        return origins or ["https://yourdomain.com"]


def _load_config_file() -> dict | None:
    """Load configuration from a single YAML or JSON file.

    Priority order:
    1. config.yaml in current directory
    2. config.json in current directory
    3. ~/.video_resolver/config.yaml
    4. ~/.video_resolver/config.json

    Returns:
        Dictionary with config values or None if no file found
    """
    config_files = [
        Path("config.yaml"),
        Path("config.json"),
        CONFIG_DIR / "config.yaml",
        CONFIG_DIR / "config.json",
    ]

    for config_file in config_files:
        if not config_file.exists():
            continue
        try:
            with open(config_file, encoding="utf-8") as f:
                if config_file.suffix in (".yaml", ".yml"):
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.warning(f"[CONFIG] Ignoring unreadable config file {config_file}: {e}")
            continue
        if isinstance(data, dict):
            logger.info(f"[CONFIG] Loaded configuration from {config_file}")
            return data
    return None


class ConfigFileSettingsSource(PydanticBaseSettingsSource):
    """Settings source backed by the optional YAML/JSON config file."""

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        return _load_config_file() or {}


class AppConfig(BaseSettings):
    """Main service configuration.

    Supports YAML and JSON config files, environment variables (APP_*) and
    a .env file. Nested sections use a double underscore, for example
    ``APP_EXTRACTION__TIMEOUT_MS=15000`` or ``APP_SERVER__DEBUG=true``.

    Example config file:
        extraction:
          timeout_ms: 15000
          unlisted_retry_timeout_ms: 20000
        rate_limit:
          window_ms: 900000
          max_requests: 100
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        """Insert the config file source after explicit init values."""
        return (
            init_settings,
            ConfigFileSettingsSource(settings_cls),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )


# Singleton instance
_config_instance: AppConfig | None = None


def get_config() -> AppConfig:
    """Get the singleton configuration instance.

    Returns:
        The service configuration instance
    """
    global _config_instance  # noqa: PLW0603
    if _config_instance is None:
        _config_instance = AppConfig()
    return _config_instance


def set_config(config: AppConfig) -> None:
    """Set the configuration instance (mainly for testing).

    Args:
        config: The configuration instance to set
    """
    global _config_instance  # noqa: PLW0603
    _config_instance = config


def reset_config() -> None:
    """Reset the configuration instance (mainly for testing)."""
    global _config_instance  # noqa: PLW0603
    _config_instance = None
