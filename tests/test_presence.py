"""Tests for presence records and their derived display fields."""

from datetime import datetime, timedelta, timezone

import pytest

from app.schemas.presence import (
    ConnectedUser,
    ConnectedUsersStats,
    format_online_time,
    classify_activity,
    status_class_for,
    status_icon_for,
)
from tests.conftest import FIXED_NOW


def make_user(connected_ago=timedelta(0), idle=timedelta(0), **kwargs):
    return ConnectedUser(
        connection_id=kwargs.pop("connection_id", "conn-1"),
        user_id=kwargs.pop("user_id", "user-1"),
        user_name=kwargs.pop("user_name", "Ana"),
        connected_at=FIXED_NOW - connected_ago,
        last_activity=FIXED_NOW - idle,
        **kwargs,
    )


class TestOnlineTime:
    """Test formatting of time since connection."""

    def test_hours_and_minutes(self, frozen_clock):
        """61 minutes online reads as 1h 1m."""
        user = make_user(connected_ago=timedelta(minutes=61))
        assert user.online_time == "1h 1m"

    def test_under_a_minute(self, frozen_clock):
        """45 seconds online reads as agora."""
        user = make_user(connected_ago=timedelta(seconds=45))
        assert user.online_time == "agora"

    def test_minutes_only(self, frozen_clock):
        """Between one minute and one hour shows minutes only."""
        user = make_user(connected_ago=timedelta(minutes=59, seconds=59))
        assert user.online_time == "59m"

    def test_exactly_one_hour(self):
        """The hour boundary switches to the hours format."""
        assert format_online_time(FIXED_NOW - timedelta(hours=1), FIXED_NOW) == "1h 0m"

    def test_exactly_one_minute(self):
        """The minute boundary switches to the minutes format."""
        assert format_online_time(FIXED_NOW - timedelta(minutes=1), FIXED_NOW) == "1m"

    def test_hours_do_not_wrap_after_a_day(self):
        """Sessions longer than a day keep counting hours."""
        result = format_online_time(FIXED_NOW - timedelta(hours=26, minutes=5), FIXED_NOW)
        assert result == "26h 5m"

    def test_future_connection_reads_as_now(self):
        """Clock skew never produces negative durations."""
        assert format_online_time(FIXED_NOW + timedelta(minutes=3), FIXED_NOW) == "agora"

    def test_follows_the_clock(self, frozen_clock):
        """The value is recomputed on every access."""
        user = make_user()
        assert user.online_time == "agora"

        frozen_clock.advance(minutes=2, seconds=10)
        assert user.online_time == "2m"


class TestActivityStatus:
    """Test recency buckets and their CSS decorations."""

    def test_active(self, frozen_clock):
        """90 seconds idle is Ativo."""
        user = make_user(idle=timedelta(seconds=90))
        assert user.activity_status == "Ativo"
        assert user.status_class == "text-success"
        assert user.status_icon == "fas fa-circle"

    def test_inactive(self, frozen_clock):
        """5 minutes idle is Inativo."""
        user = make_user(idle=timedelta(minutes=5))
        assert user.activity_status == "Inativo"
        assert user.status_class == "text-warning"
        assert user.status_icon == "fas fa-circle"

    def test_absent(self, frozen_clock):
        """15 minutes idle is Ausente."""
        user = make_user(idle=timedelta(minutes=15))
        assert user.activity_status == "Ausente"
        assert user.status_class == "text-muted"
        assert user.status_icon == "far fa-circle"

    @pytest.mark.parametrize(
        "idle,expected",
        [
            (timedelta(minutes=2) - timedelta(microseconds=1), "Ativo"),
            (timedelta(minutes=2), "Inativo"),
            (timedelta(minutes=10) - timedelta(microseconds=1), "Inativo"),
            (timedelta(minutes=10), "Ausente"),
        ],
    )
    def test_boundaries(self, idle, expected):
        """Thresholds are exclusive upper bounds."""
        assert classify_activity(FIXED_NOW - idle, FIXED_NOW) == expected

    def test_unknown_status_falls_back(self):
        """Lookups never fail on unexpected labels."""
        assert status_class_for("Offline") == "text-secondary"
        assert status_icon_for("Offline") == "far fa-circle"

    def test_naive_timestamps_are_utc(self):
        """Naive datetimes are read as UTC."""
        naive = datetime(2026, 3, 10, 14, 25, 0)
        user = ConnectedUser(last_activity=naive, connected_at=naive)

        assert user.last_activity.tzinfo == timezone.utc
        assert user.activity_status_at(FIXED_NOW) == "Inativo"

    def test_serialized_output_includes_derived_fields(self, frozen_clock):
        """API payloads carry the display strings."""
        data = make_user(connected_ago=timedelta(minutes=61)).model_dump()

        assert data["online_time"] == "1h 1m"
        assert data["activity_status"] == "Ativo"
        assert data["status_class"] == "text-success"
        assert data["status_icon"] == "fas fa-circle"


class TestConnectedUsersStats:
    """Test the aggregate presence snapshot."""

    def test_defaults(self, frozen_clock):
        """Empty stats have zero counts and an empty list."""
        stats = ConnectedUsersStats()

        assert stats.total_connected == 0
        assert stats.users == []
        assert stats.last_updated == FIXED_NOW

    def test_constructor_trusts_caller_counts(self):
        """Totals given directly are not checked against the list."""
        stats = ConnectedUsersStats(total_connected=5, active_users=5)
        assert stats.total_connected == 5
        assert stats.users == []

    def test_from_users_counts_each_bucket(self, frozen_clock):
        """The factory derives every count from the list."""
        users = [
            make_user(user_id="a", idle=timedelta(seconds=10)),
            make_user(user_id="b", idle=timedelta(seconds=100)),
            make_user(user_id="c", idle=timedelta(minutes=4)),
            make_user(user_id="d", idle=timedelta(minutes=25)),
        ]

        stats = ConnectedUsersStats.from_users(users)

        assert stats.total_connected == 4
        assert stats.active_users == 2
        assert stats.inactive_users == 1
        assert stats.absent_users == 1
        assert [u.user_id for u in stats.users] == ["a", "b", "c", "d"]
        assert stats.last_updated == FIXED_NOW
