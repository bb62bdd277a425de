import pytest
from datetime import date, datetime, timedelta, timezone

import tzlocal

from habitica_resync.utils.datetime import (
    convert_datetime_to_iso,
    convert_datetime_to_local_timezone,
    parse_api_datetime,
    to_local_date,
)


@pytest.mark.unit
class TestParseApiDatetime:
    """Test cases for timestamp parsing."""

    def test_iso_with_z(self):
        assert parse_api_datetime("2026-01-05T12:30:00.000Z") == datetime(2026, 1, 5, 12, 30, tzinfo=timezone.utc)

    def test_iso_with_offset(self):
        parsed = parse_api_datetime("2026-01-05T12:30:00+02:00")
        assert parsed == datetime(2026, 1, 5, 10, 30, tzinfo=timezone.utc)

    def test_naive_iso_is_utc(self):
        assert parse_api_datetime("2026-01-05T12:30:00").tzinfo == timezone.utc

    def test_javascript_date_string(self):
        parsed = parse_api_datetime("Mon Jan 05 2026 12:01:00 GMT+0000 (Coordinated Universal Time)")
        assert parsed == datetime(2026, 1, 5, 12, 1, tzinfo=timezone.utc)

    def test_javascript_date_string_with_offset(self):
        parsed = parse_api_datetime("Mon Jan 05 2026 14:01:00 GMT+0200 (Eastern European Standard Time)")
        assert parsed == datetime(2026, 1, 5, 12, 1, tzinfo=timezone.utc)

    def test_epoch_seconds(self):
        assert parse_api_datetime("0") == datetime(1970, 1, 1, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty(self, value):
        assert parse_api_datetime(value) is None

    def test_garbage(self):
        with pytest.raises(ValueError, match="Unrecognised datetime format"):
            parse_api_datetime("soon")


@pytest.mark.unit
class TestConversions:
    """Test cases for timezone conversions and formatting."""

    def test_iso_output_is_utc_with_millis(self):
        dt = datetime(2026, 1, 5, 14, 0, 0, 123456, tzinfo=timezone(timedelta(hours=2)))
        assert convert_datetime_to_iso(dt) == "2026-01-05T12:00:00.123Z"

    def test_iso_output_naive(self):
        assert convert_datetime_to_iso(datetime(2026, 1, 5)) == "2026-01-05T00:00:00.000Z"

    def test_local_timezone(self):
        converted = convert_datetime_to_local_timezone(datetime(2026, 1, 5, 12, tzinfo=timezone.utc))

        assert converted.utcoffset() == converted.astimezone(tzlocal.get_localzone()).utcoffset()
        assert converted == datetime(2026, 1, 5, 12, tzinfo=timezone.utc)

    def test_to_local_date(self):
        local_noon = datetime(2026, 3, 1, 12, tzinfo=tzlocal.get_localzone())
        assert to_local_date(local_noon) == date(2026, 3, 1)
