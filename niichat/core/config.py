"""Chat bot configuration"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from niichat.errors import ConfigurationError

logger = logging.getLogger(__name__)

# === Path Configuration ===
PROJECT_DIR = Path(__file__).parent.parent.parent
# Later files win: a .env in the working directory overrides the source checkout one
ENV_FILES = (PROJECT_DIR / ".env", Path(".env"))

# === Protocol Constants ===
DEFAULT_IRC_HOST = "irc.chat.twitch.tv"
DEFAULT_IRC_PORT = 6697
TAGS_CAPABILITY = "twitch.tv/tags"


class ChatBotSettings(BaseSettings):
    """Chat bot settings"""

    model_config = SettingsConfigDict(
        env_file=ENV_FILES,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Identity
    nickname: str = Field(..., description="Bot account login name")
    oauth_token: str = Field(..., description="Chat OAuth token, e.g. oauth:abc123")

    # Target
    channel: str = Field(..., description="Channel to join, with or without '#'")

    # Commands
    filepath: str = Field(..., description="Path to the commands JSON file")

    # Server
    irc_host: str = Field(default=DEFAULT_IRC_HOST, description="IRC server host")
    irc_port: int = Field(default=DEFAULT_IRC_PORT, description="IRC server TLS port")

    # Health check server (0 disables it)
    health_port: int = Field(default=0, description="HTTP health check port")

    # Environment
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("nickname", "oauth_token", "channel", "filepath")
    @classmethod
    def validate_required(cls, v: str) -> str:
        """Reject blank required values"""
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v.strip()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            logger.warning(f"Invalid log level '{v}', defaulting to INFO")
            return "INFO"
        return v_upper


@lru_cache
def get_settings() -> ChatBotSettings:
    """Get cached settings instance"""
    return ChatBotSettings()  # type: ignore[call-arg]


def validate_env_vars() -> ChatBotSettings:
    """Load settings, turning validation failures into ``ConfigurationError``."""
    try:
        settings = get_settings()
    except ValidationError as e:
        missing = [".".join(str(loc) for loc in err["loc"]).upper() for err in e.errors()]
        error_msg = "Missing or invalid required environment variables:\n" + "\n".join(
            f"  - {var}" for var in missing
        )
        logging.getLogger("Bot").error(error_msg)
        raise ConfigurationError(error_msg) from e

    logger.info("All required environment variables validated successfully")
    return settings
