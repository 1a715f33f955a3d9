"""
Tests for the cooldown store.
"""

from hypothesis import given
from hypothesis import strategies as st

from conftest import FakeClock
from prefixbot.commands import CooldownStore


class TestCheckAndArm:
    def test_second_call_inside_window_is_denied(self, cooldowns, clock):
        assert cooldowns.check_and_arm("u", "ban", 5000).allowed
        clock.advance(1200)
        result = cooldowns.check_and_arm("u", "ban", 5000)
        assert not result.allowed
        assert result.remaining_ms == 3800
        assert result.remaining_seconds == 4

    def test_allowed_again_after_window(self, cooldowns, clock):
        cooldowns.check_and_arm("u", "ban", 5000)
        clock.advance(1000)
        denied = cooldowns.check_and_arm("u", "ban", 5000)
        clock.advance(denied.remaining_ms)
        assert cooldowns.check_and_arm("u", "ban", 5000).allowed

    def test_denied_attempt_does_not_rearm(self, cooldowns, clock):
        cooldowns.check_and_arm("u", "ban", 5000)
        clock.advance(4000)
        cooldowns.check_and_arm("u", "ban", 5000)
        clock.advance(1000)
        assert cooldowns.check_and_arm("u", "ban", 5000).allowed

    def test_zero_cooldown_is_untracked(self, cooldowns):
        for _ in range(3):
            assert cooldowns.check_and_arm("u", "ping", 0).allowed
        assert cooldowns.tracked_entries() == 0

    def test_keys_are_independent(self, cooldowns):
        cooldowns.check_and_arm("u1", "ban", 5000)
        assert cooldowns.check_and_arm("u2", "ban", 5000).allowed
        assert cooldowns.check_and_arm("u1", "kick", 5000).allowed

    def test_reset(self, cooldowns):
        cooldowns.check_and_arm("u", "ban", 5000)
        cooldowns.check_and_arm("u", "kick", 5000)
        cooldowns.reset("ban")
        assert cooldowns.check_and_arm("u", "ban", 5000).allowed
        assert not cooldowns.check_and_arm("u", "kick", 5000).allowed
        cooldowns.reset()
        assert cooldowns.tracked_entries() == 0

    def test_release_frees_one_caller(self, cooldowns):
        cooldowns.check_and_arm("u1", "prune", 60_000)
        cooldowns.check_and_arm("u2", "prune", 60_000)
        cooldowns.release("u1", "prune")
        cooldowns.release("u1", "never-armed")
        assert cooldowns.check_and_arm("u1", "prune", 60_000).allowed
        assert not cooldowns.check_and_arm("u2", "prune", 60_000).allowed

    @given(
        cooldown_ms=st.integers(min_value=1, max_value=600_000),
        gap=st.integers(min_value=0, max_value=1_200_000),
    )
    def test_monotonic(self, cooldown_ms, gap):
        clock = FakeClock()
        store = CooldownStore(clock=clock)
        assert store.check_and_arm("u", "c", cooldown_ms).allowed
        clock.advance(gap)
        second = store.check_and_arm("u", "c", cooldown_ms)
        assert second.allowed == (gap >= cooldown_ms)
        if not second.allowed:
            assert 0 < second.remaining_ms <= cooldown_ms


class TestSweep:
    def test_sweep_evicts_stale_entries_only(self, clock):
        store = CooldownStore(clock=clock, sweep_threshold=3, sweep_horizon_ms=60_000)
        store.check_and_arm("old1", "c", 1000)
        store.check_and_arm("old2", "c", 1000)
        clock.advance(61_000)
        store.check_and_arm("new1", "c", 1000)
        store.check_and_arm("new2", "c", 1000)
        assert store.tracked_entries() == 2

    def test_sweep_keeps_entries_inside_long_window(self, clock):
        store = CooldownStore(clock=clock, sweep_threshold=1, sweep_horizon_ms=60_000)
        store.check_and_arm("a", "prune", 120_000)
        clock.advance(90_000)
        store.check_and_arm("b", "prune", 120_000)
        assert not store.check_and_arm("a", "prune", 120_000).allowed
