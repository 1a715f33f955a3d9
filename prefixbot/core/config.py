"""Bot configuration"""

import logging
from functools import lru_cache
from pathlib import Path

import discord
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("prefixbot.config")

# === Path Configuration ===
PACKAGE_DIR = Path(__file__).parent.parent

BOT_NAME = "prefixbot"
BOT_VERSION = "1.0.0"

STATUS_MAP = {
    "online": discord.Status.online,
    "idle": discord.Status.idle,
    "dnd": discord.Status.dnd,
    "invisible": discord.Status.invisible,
}

ACTIVITY_MAP = {
    "playing": discord.ActivityType.playing,
    "listening": discord.ActivityType.listening,
    "watching": discord.ActivityType.watching,
    "competing": discord.ActivityType.competing,
}


class BotSettings(BaseSettings):
    """Discord bot settings"""

    model_config = SettingsConfigDict(
        env_file=PACKAGE_DIR.parent / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Discord
    discord_bot_token: str = Field(default="", description="Discord bot token")
    bot_owner_id: str = Field(default="", description="User ID of the bot owner")
    bot_owner_name: str = Field(default="the Creator", description="Display name of the bot owner")

    # Commands
    command_prefix: str = Field(default="!", description="Prefix for text commands")
    leadership_role_names: str = Field(
        default="commander,co-commander,executive officer,xo,clan leader,deputy commander",
        description="Comma separated role name fragments allowed to assign roles",
    )

    # OpenRouter AI
    openrouter_api_key: str = Field(default="", description="OpenRouter API key")
    openrouter_model: str = Field(default="openrouter/free", description="OpenRouter model")

    # Health server
    health_host: str = Field(default="0.0.0.0", description="Health server bind address")
    health_port: int = Field(default=8080, description="Health server port")

    # Presence
    discord_status: str = Field(default="", description="online, idle, dnd or invisible")
    discord_activity_type: str = Field(default="", description="playing, listening, ...")
    discord_activity_name: str = Field(default="", description="Activity text")
    discord_activity_url: str = Field(default="", description="Twitch URL for streaming")

    # Environment
    log_level: str = Field(default="INFO", description="Logging level")

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

    @field_validator("command_prefix")
    @classmethod
    def validate_command_prefix(cls, v: str) -> str:
        v = v.strip()
        if not v or " " in v:
            raise ValueError("COMMAND_PREFIX must be a non-empty string without spaces")
        return v

    @property
    def leadership_roles(self) -> tuple[str, ...]:
        return tuple(
            part.strip().lower() for part in self.leadership_role_names.split(",") if part.strip()
        )

    def get_status(self) -> discord.Status:
        return STATUS_MAP.get(self.discord_status.lower(), discord.Status.online)

    def get_activity(self) -> discord.Activity | discord.Streaming | None:
        """Presence activity built from the DISCORD_ACTIVITY_* settings.

        Supports: playing, listening, watching, competing, streaming.
        Streaming needs a https://twitch.tv/ URL, otherwise it falls back to playing.
        """
        if not self.discord_activity_name:
            return None

        activity_type = self.discord_activity_type.lower()

        if activity_type == "streaming":
            if self.discord_activity_url.startswith("https://twitch.tv/"):
                return discord.Streaming(
                    name=self.discord_activity_name, url=self.discord_activity_url
                )
            logger.warning(
                f"Streaming activity requires a Twitch URL (https://twitch.tv/*), "
                f"got '{self.discord_activity_url}'. Falling back to 'playing' activity."
            )
            return discord.Activity(
                type=discord.ActivityType.playing, name=self.discord_activity_name
            )

        return discord.Activity(
            type=ACTIVITY_MAP.get(activity_type, discord.ActivityType.playing),
            name=self.discord_activity_name,
        )


@lru_cache
def get_settings() -> BotSettings:
    """Get cached settings instance"""
    return BotSettings()
