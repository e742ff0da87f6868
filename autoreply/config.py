"""
Configuration for the auto-reply service, loaded from environment / .env
"""
from typing import List

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_KEYWORDS = [
    "kindly reply",
    "kindly reply to this mail.",
    "kindly reply with your resume.",
    "kindly reply with your email",
    "looking for your response.",
    "kindly reply back",
    "please respond",
    "awaiting your reply",
    "hearing from you",
    "look forward to hearing from you.",
]

DEFAULT_SCOPES = [
    "https://www.googleapis.com/auth/gmail.readonly",
    "https://www.googleapis.com/auth/gmail.send",
    "https://www.googleapis.com/auth/gmail.labels",
    "https://mail.google.com/",
    "https://www.googleapis.com/auth/gmail.compose",
    "https://www.googleapis.com/auth/gmail.modify",
]


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    keywords: List[str] = Field(default_factory=lambda: list(DEFAULT_KEYWORDS))
    label_name: str = "Auto Replied"

    # OAuth client secrets and the cached user token
    credentials_file: str = "credentials.json"
    token_file: str = "token.json"
    scopes: List[str] = Field(default_factory=lambda: list(DEFAULT_SCOPES))
    http_timeout: int = Field(60, ge=1, description="Socket timeout for Gmail API requests in seconds")

    max_results: int = Field(5, ge=1, le=500, description="Unread messages inspected per tick")
    min_interval: int = Field(45, description="Lower bound of the poll interval in seconds")
    max_interval: int = Field(120, description="Upper bound of the poll interval in seconds")

    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_prefix="AUTOREPLY_", extra="ignore")

    @model_validator(mode="after")
    def check_interval_bounds(self) -> "Settings":
        if self.min_interval < 1:
            raise ValueError("min_interval must be at least 1 second")
        if self.min_interval > self.max_interval:
            raise ValueError(
                f"min_interval ({self.min_interval}) must not exceed max_interval ({self.max_interval})"
            )
        return self
