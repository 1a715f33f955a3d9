"""Per-(command, caller) cooldown tracking.

State is in-memory only and resets when the bot restarts.
"""

import logging
import math
import time
from collections.abc import Callable
from dataclasses import dataclass

LOGGER = logging.getLogger("prefixbot.cooldowns")

SWEEP_THRESHOLD = 1000
SWEEP_HORIZON_MS = 60_000


def _epoch_ms() -> float:
    return time.time() * 1000


@dataclass(frozen=True)
class CooldownResult:
    allowed: bool
    remaining_ms: float = 0

    @property
    def remaining_seconds(self) -> int:
        """Whole seconds to wait, rounded up."""
        if self.allowed:
            return 0
        return max(1, math.ceil(self.remaining_ms / 1000))


class CooldownStore:
    """Tracks when each caller last armed each command.

    ``check_and_arm`` never awaits, so two tasks racing on the same key cannot
    both pass the check under asyncio's cooperative scheduling.
    """

    def __init__(
        self,
        clock: Callable[[], float] = _epoch_ms,
        sweep_threshold: int = SWEEP_THRESHOLD,
        sweep_horizon_ms: float = SWEEP_HORIZON_MS,
    ):
        self._clock = clock
        self.sweep_threshold = sweep_threshold
        self.sweep_horizon_ms = sweep_horizon_ms
        # key: command name -> {caller id: armed at (epoch ms)}
        self._armed: dict[str, dict[str, float]] = {}

    def check_and_arm(self, caller_id: str, command_name: str, cooldown_ms: float) -> CooldownResult:
        """Deny if the caller is still inside the window, otherwise arm and allow.

        Arming happens on the check itself, so an attempt that later fails
        still consumes the window.
        """
        if cooldown_ms <= 0:
            return CooldownResult(allowed=True)

        now = self._clock()
        per_command = self._armed.setdefault(command_name, {})
        last = per_command.get(caller_id)

        if last is not None:
            elapsed = now - last
            if elapsed < cooldown_ms:
                return CooldownResult(allowed=False, remaining_ms=cooldown_ms - elapsed)

        per_command[caller_id] = now

        if len(per_command) > self.sweep_threshold:
            self._sweep(command_name, per_command, now, cooldown_ms)

        return CooldownResult(allowed=True)

    def _sweep(self, command_name: str, per_command: dict[str, float], now: float, cooldown_ms: float) -> None:
        # Never evict an entry that is still inside its own window
        cutoff = now - max(self.sweep_horizon_ms, cooldown_ms)
        stale = [caller_id for caller_id, armed_at in per_command.items() if armed_at < cutoff]
        for caller_id in stale:
            del per_command[caller_id]
        if stale:
            LOGGER.debug(f"Cooldown sweep: command={command_name}, evicted={len(stale)}")

    def release(self, caller_id: str, command_name: str) -> None:
        """Forget one caller's entry so their next attempt is not throttled."""
        per_command = self._armed.get(command_name)
        if per_command is not None:
            per_command.pop(caller_id, None)

    def reset(self, command_name: str | None = None) -> None:
        if command_name is None:
            self._armed.clear()
        else:
            self._armed.pop(command_name, None)

    def tracked_entries(self) -> int:
        return sum(len(per_command) for per_command in self._armed.values())
