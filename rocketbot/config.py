"""rocketbot configuration management."""

import logging
import os
from typing import Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from .context import DEFAULT_MODEL

logger = logging.getLogger("rocketbot.config")


class ConfigError(Exception):
    """Required configuration is missing or invalid."""
    pass


class BotSettings(BaseSettings):
    """Settings loaded from environment variables or .env file."""

    # Ollama
    ollama_url: str = Field(description="Ollama server base URL, e.g. http://localhost:11434")
    ollama_timeout: Optional[float] = Field(default=None, description="Chat request timeout in seconds (unset = no timeout)")
    default_model: str = Field(default=DEFAULT_MODEL, description="Model selected for new conversations")

    # Rocket.Chat
    rocketchat_url: str = Field(description="Rocket.Chat host, e.g. chat.example.org")
    rocketchat_user: str = Field(description="Bot account username")
    rocketchat_password: str = Field(description="Bot account password")
    rocketchat_use_ssl: bool = Field(default=True, description="Use https/wss to reach Rocket.Chat")

    # Admins: comma separated usernames
    admin_users: str = Field(default="", description="Comma separated admin usernames")

    # Logging
    log_file: str = Field(default="~/rocketbot.log", description="Log file path")
    debug: bool = Field(default=False, description="Debug logging")

    model_config = {"env_file": ".env", "extra": "ignore"}

    @field_validator("ollama_url")
    @classmethod
    def _normalize_ollama_url(cls, v: str) -> str:
        return v.strip().lower().rstrip("/")

    @field_validator("rocketchat_url")
    @classmethod
    def _normalize_rocketchat_url(cls, v: str) -> str:
        host = v.strip().lower()
        for scheme in ("https://", "http://"):
            if host.startswith(scheme):
                host = host[len(scheme):]
        return host.rstrip("/")

    @property
    def admins(self) -> frozenset[str]:
        return frozenset(u.strip() for u in self.admin_users.split(",") if u.strip())

    @property
    def rocketchat_base_url(self) -> str:
        scheme = "https" if self.rocketchat_use_ssl else "http"
        return f"{scheme}://{self.rocketchat_url}"

    @property
    def rocketchat_ws_url(self) -> str:
        scheme = "wss" if self.rocketchat_use_ssl else "ws"
        return f"{scheme}://{self.rocketchat_url}/websocket"

    @property
    def log_path(self) -> str:
        return os.path.expanduser(self.log_file)


def load_settings(**overrides) -> BotSettings:
    """Load settings from environment; missing required values are fatal."""
    try:
        settings = BotSettings(**overrides)
    except ValidationError as e:
        missing = [".".join(str(p) for p in err["loc"]).upper() for err in e.errors()]
        raise ConfigError(f"Invalid or missing configuration: {', '.join(missing)}") from e

    if not settings.admins:
        logger.warning("ADMIN_USERS is empty, admin commands (enable, disable, model) will reject everyone.")

    return settings
