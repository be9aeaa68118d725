"""Unit tests for local time-window handling and the UTC wire format."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from videostore.core.time_range import (
    TimeWindow,
    default_window,
    format_local,
    parse_wire_format,
    to_wire_format,
)

UTC = timezone.utc
PLUS_TWO = timezone(timedelta(hours=2))
MINUS_FIVE = timezone(timedelta(hours=-5))


class TestToWireFormat:
    def test_utc_window_bounds(self):
        assert to_wire_format("2024-01-01T00:00:00", UTC) == "2024-01-01_00-00-00Z"
        assert to_wire_format("2024-01-01T00:01:00", UTC) == "2024-01-01_00-01-00Z"

    def test_positive_offset_rolls_back_a_day(self):
        assert to_wire_format("2024-01-01T01:30:15", PLUS_TWO) == "2023-12-31_23-30-15Z"

    def test_negative_offset_rolls_forward(self):
        assert to_wire_format("2024-02-29T22:05:09", MINUS_FIVE) == "2024-03-01_03-05-09Z"

    def test_minute_precision_input(self):
        assert to_wire_format("2024-06-15T12:34", UTC) == "2024-06-15_12-34-00Z"

    def test_surrounding_whitespace_ignored(self):
        assert to_wire_format("  2024-06-15T12:34:56 ", UTC) == "2024-06-15_12-34-56Z"

    @pytest.mark.parametrize(
        "text",
        [
            "",
            None,
            "garbage",
            "2024-13-01T00:00:00",
            "2024-02-30T00:00:00",
            "2024-01-01T25:00:00",
            "2024-01-01 00:00:00",
            "2024-01-01",
            "2024-01-01_00-00-00Z",
        ],
    )
    def test_unparseable_returns_empty(self, text):
        assert to_wire_format(text, UTC) == ""

    def test_non_string_returns_empty(self):
        assert to_wire_format(12345) == ""  # type: ignore[arg-type]

    def test_deterministic(self):
        first = to_wire_format("2024-03-10T08:09:10", PLUS_TWO)
        assert first == to_wire_format("2024-03-10T08:09:10", PLUS_TWO)

    def test_process_zone_matches_astimezone(self):
        text = "2024-07-04T18:30:45"
        expected = (
            datetime(2024, 7, 4, 18, 30, 45).astimezone().astimezone(UTC)
            .strftime("%Y-%m-%d_%H-%M-%SZ")
        )
        assert to_wire_format(text) == expected

    def test_wire_shape(self):
        wire = to_wire_format("2024-01-02T03:04:05", UTC)
        assert len(wire) == len("YYYY-MM-DD_HH-MM-SSZ")
        assert wire[10] == "_"
        assert wire.endswith("Z")


class TestRoundTrip:
    @pytest.mark.parametrize(
        "moment",
        [
            datetime(2024, 1, 1, 0, 0, 0, tzinfo=UTC),
            datetime(1999, 12, 31, 23, 59, 59, tzinfo=UTC),
            datetime(2030, 7, 15, 9, 5, 1, tzinfo=UTC),
        ],
    )
    def test_utc_calendar_fields_survive(self, moment):
        wire = to_wire_format(format_local(moment, UTC), UTC)
        parsed = parse_wire_format(wire)

        assert parsed == moment
        assert parsed.tzinfo is UTC

    def test_parse_rejects_local_text(self):
        with pytest.raises(ValueError):
            parse_wire_format("2024-01-01T00:00:00")


class TestDefaultWindow:
    def test_last_minute_from_naive_now(self):
        window = default_window(now=datetime(2024, 5, 6, 7, 8, 9))

        assert window.from_local == "2024-05-06T07:07:09"
        assert window.to_local == "2024-05-06T07:08:09"

    def test_zero_padded_components(self):
        window = default_window(now=datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC), tz=UTC)

        assert window.from_local == "2024-01-02T03:03:05"
        assert window.to_local == "2024-01-02T03:04:05"

    def test_crosses_midnight(self):
        window = default_window(now=datetime(2024, 1, 1, 0, 0, 30))
        assert window.from_local == "2023-12-31T23:59:30"

    def test_default_window_is_parseable(self):
        window = default_window()
        assert to_wire_format(window.from_local)
        assert to_wire_format(window.to_local)


class TestTimeWindow:
    def test_wire_bounds_recomputed_from_text(self):
        window = TimeWindow(from_local="2024-01-01T00:00:00", to_local="2024-01-01T00:01:00")
        assert window.wire_bounds(UTC) == ("2024-01-01_00-00-00Z", "2024-01-01_00-01-00Z")

        window = window.model_copy(update={"to_local": "nope"})
        assert window.wire_bounds(UTC) == ("2024-01-01_00-00-00Z", "")

    def test_wire_bounds_follow_given_zone(self):
        window = TimeWindow(from_local="2024-01-01T01:30:15", to_local="")

        assert window.wire_bounds(PLUS_TWO) == ("2023-12-31_23-30-15Z", "")
        assert window.wire_bounds() == (to_wire_format("2024-01-01T01:30:15"), "")
