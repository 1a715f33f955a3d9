"""Per-guild voice lock held by the bot owner."""

import logging
import time
from dataclasses import dataclass, field

LOGGER = logging.getLogger("prefixbot.voice")


@dataclass(frozen=True)
class VoiceLock:
    guild_id: str
    locked_by: str
    locked_at: float = field(default_factory=time.time)
    channel_id: str | None = None


class VoiceLockTable:
    """While a guild is locked, only the bot owner may drive voice commands.

    In-memory only; a restart unlocks every guild.
    """

    def __init__(self, owner_id: str | None = None, owner_name: str = "the bot owner"):
        self.owner_id = owner_id
        self.owner_name = owner_name
        self._locks: dict[str, VoiceLock] = {}

    def is_owner(self, user_id: str) -> bool:
        return bool(self.owner_id) and user_id == self.owner_id

    def lock(self, guild_id: str, user_id: str, channel_id: str | None = None) -> bool:
        if not self.is_owner(user_id):
            return False
        self._locks[guild_id] = VoiceLock(guild_id=guild_id, locked_by=user_id, channel_id=channel_id)
        LOGGER.info(f"Voice locked in guild {guild_id}")
        return True

    def unlock(self, guild_id: str, user_id: str) -> bool:
        if not self.is_owner(user_id):
            return False
        self._locks.pop(guild_id, None)
        LOGGER.info(f"Voice unlocked in guild {guild_id}")
        return True

    def get(self, guild_id: str) -> VoiceLock | None:
        return self._locks.get(guild_id)

    def is_locked(self, guild_id: str) -> bool:
        return guild_id in self._locks

    def check(self, guild_id: str, user_id: str) -> str | None:
        """Return a denial message, or None when the user may use voice commands."""
        if guild_id not in self._locks or self.is_owner(user_id):
            return None
        return (
            f"Voice commands are currently locked by {self.owner_name}. "
            "Only the creator can control the bot right now."
        )

    def status(self, guild_id: str, now: float | None = None) -> str:
        lock = self._locks.get(guild_id)
        if lock is None:
            return "Voice commands are unlocked - anyone can control the bot."
        minutes = int(((now or time.time()) - lock.locked_at) // 60)
        return f"Voice locked by {self.owner_name} for {minutes} minute(s)."
