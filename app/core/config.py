"""
Configuration management using Pydantic Settings
"""
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Quiz Relay"
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="text", description="Log format: 'json' or 'text'")

    # Telegram
    telegram_bot_token: Optional[str] = Field(default=None, description="Telegram bot token")
    telegram_chat_id: Optional[str] = Field(default=None, description="Chat that receives results")
    telegram_api_base: str = Field(default="https://api.telegram.org", description="Bot API host")
    telegram_parse_mode: Optional[str] = Field(default="HTML", description="parse_mode sent with messages")
    telegram_timeout_seconds: float = Field(default=30.0, gt=0, description="Outbound request timeout")
    telegram_max_message_length: int = Field(default=4096, ge=200, description="Bot API text length limit")

    # Message rendering
    relay_title: str = Field(default="New Past Continuous Test Result", description="Message title")
    relay_detail_style: str = Field(default="grouped", description="'grouped' or 'flat'")
    relay_max_detail_lines: int = Field(default=10, ge=1, description="Answers shown in flat mode")

    @field_validator("telegram_bot_token", "telegram_chat_id", "telegram_parse_mode", mode="before")
    @classmethod
    def blank_as_missing(cls, v):
        """Treat empty env values as unset"""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("relay_detail_style")
    @classmethod
    def validate_detail_style(cls, v: str) -> str:
        style = v.strip().lower()
        if style not in ("grouped", "flat"):
            raise ValueError("relay_detail_style must be 'grouped' or 'flat'")
        return style

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        fmt = v.strip().lower()
        if fmt not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return fmt


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
