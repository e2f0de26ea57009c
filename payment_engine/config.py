"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class EngineConfig(BaseSettings):
    """Payment engine configuration"""
    
    model_config = SettingsConfigDict(
        env_prefix="PAYMENT_ENGINE_",
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )
    
    # Logging configuration
    log_level: LogLevel = "WARNING"
    log_format: Literal["json", "text"] = "json"
    log_file: Optional[str] = None  # If None, logs to stderr
    
    # Processing configuration
    strict: bool = False  # Abort the run on a malformed row instead of skipping it
    sort_output: bool = True  # Emit snapshots ordered by client id
    
    @field_validator("log_level", "log_format", mode="before")
    @classmethod
    def _normalize_case(cls, value, info):
        if not isinstance(value, str):
            return value
        value = value.strip()
        return value.upper() if info.field_name == "log_level" else value.lower()


# Global configuration instance, built on first use by get_config()
config: Optional[EngineConfig] = None


def get_config() -> EngineConfig:
    """Get global configuration instance"""
    global config
    if config is None:
        config = EngineConfig()
    return config


def reload_config() -> EngineConfig:
    """Reload configuration from environment"""
    global config
    config = EngineConfig()
    return config
