"""Configuration management for LocaleLeap."""

from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_USER_AGENT = "LocaleLeap/0.1 (+locale redirect probe)"


class ProbeSettings(BaseSettings):
    """Reachability probe settings."""

    timeout_seconds: float = Field(default=4.0, alias="LOCALELEAP_PROBE_TIMEOUT")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, alias="LOCALELEAP_PROBE_USER_AGENT")
    follow_redirects: bool = Field(default=True, alias="LOCALELEAP_PROBE_FOLLOW_REDIRECTS")


class LogSettings(BaseModel):
    """Log file settings (uses nested delimiter LOG__)."""

    directory: Path = Path("logs/localeleap")
    to_console: bool = True
    to_file: bool = True


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",  # LOG__DIRECTORY=/tmp/logs
    )

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    settings_file: Path = Field(
        default_factory=lambda: Path.home() / ".localeleap" / "settings.yaml",
        alias="LOCALELEAP_SETTINGS_FILE",
    )

    probe: ProbeSettings = Field(default_factory=ProbeSettings)
    log: LogSettings = Field(default_factory=LogSettings)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
