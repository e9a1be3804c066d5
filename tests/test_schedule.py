"""Tests for next_fire_delay and next_occurrence."""

from datetime import datetime

import pytest

from moodlog.helpers.schedule import MIN_FIRE_DELAY_SECONDS, next_fire_delay, next_occurrence


class TestNextFireDelay:
    """Tests for the delay until the next hour:minute."""

    def test_later_today(self) -> None:
        now = datetime(2025, 11, 26, 8, 0, 0)
        assert next_fire_delay(9, 0, now) == 3600

    def test_earlier_time_rolls_to_tomorrow(self) -> None:
        now = datetime(2025, 11, 26, 10, 0, 0)
        assert next_fire_delay(9, 0, now) == 23 * 3600

    def test_exactly_now_rolls_to_tomorrow(self) -> None:
        now = datetime(2025, 11, 26, 9, 0, 0)
        assert next_fire_delay(9, 0, now) == 24 * 3600

    def test_floor_of_five_seconds(self) -> None:
        now = datetime(2025, 11, 26, 8, 59, 58)
        assert next_fire_delay(9, 0, now) == MIN_FIRE_DELAY_SECONDS

    def test_rounds_to_nearest_second(self) -> None:
        now = datetime(2025, 11, 26, 8, 0, 0, 600000)
        assert next_fire_delay(9, 0, now) == 3599

    def test_crosses_midnight(self) -> None:
        now = datetime(2025, 12, 31, 23, 30, 0)
        assert next_fire_delay(0, 15, now) == 45 * 60

    def test_deterministic(self) -> None:
        now = datetime(2025, 11, 26, 13, 12, 11)
        assert next_fire_delay(21, 0, now) == next_fire_delay(21, 0, now)

    @pytest.mark.parametrize("hour,minute", [(0, 0), (8, 59), (9, 0), (12, 30), (23, 59)])
    @pytest.mark.parametrize("now", [
        datetime(2025, 11, 26, 0, 0, 0),
        datetime(2025, 11, 26, 8, 59, 59, 999999),
        datetime(2025, 11, 26, 23, 59, 59),
    ])
    def test_always_at_least_floor(self, hour, minute, now) -> None:
        delay = next_fire_delay(hour, minute, now)
        assert MIN_FIRE_DELAY_SECONDS <= delay <= 24 * 3600


class TestNextOccurrence:
    def test_fractional_second_before_trigger(self) -> None:
        after = datetime(2025, 11, 26, 8, 59, 49, 600000)
        assert next_occurrence(9, 0, after) == datetime(2025, 11, 26, 9, 0)

    def test_strictly_after_delivered_target(self) -> None:
        delivered = datetime(2025, 11, 26, 9, 0)
        assert next_occurrence(9, 0, delivered) == datetime(2025, 11, 27, 9, 0)

    def test_just_past_trigger_rolls_to_tomorrow(self) -> None:
        after = datetime(2025, 12, 31, 9, 0, 0, 1)
        assert next_occurrence(9, 0, after) == datetime(2026, 1, 1, 9, 0)
