"""Tests for date/time utilities."""

import pytest
from datetime import datetime, timezone

from gnss_sitemeta.utils.dates import (
    FAR_FUTURE,
    date_from_doy,
    datetime_from_year_doy_sod,
    doy_from_date,
    expand_two_digit_year,
    format_sitelog_date,
    format_sitelog_datetime,
)


class TestDOYConversions:
    """Test day of year conversion functions."""

    def test_doy_from_date(self):
        """Test DOY calculation."""
        assert doy_from_date(2024, 1, 1) == 1
        assert doy_from_date(2024, 12, 31) == 366  # Leap year
        assert doy_from_date(2023, 12, 31) == 365  # Non-leap year

    def test_date_from_doy(self):
        """Test month and day from DOY."""
        assert date_from_doy(2020, 38) == (2, 7)
        assert date_from_doy(2020, 60) == (2, 29)
        assert date_from_doy(2019, 60) == (3, 1)


class TestTwoDigitYears:
    """Test SINEX two digit year expansion."""

    def test_years_above_50_are_1900s(self):
        assert expand_two_digit_year(95) == 1995
        assert expand_two_digit_year(51) == 1951

    def test_years_up_to_50_are_2000s(self):
        assert expand_two_digit_year(0) == 2000
        assert expand_two_digit_year(20) == 2020
        assert expand_two_digit_year(50) == 2050


class TestYearDoySod:
    """Test datetime construction from year, DOY and seconds of day."""

    def test_known_epoch(self):
        """Creation time of an IGN combined solution."""
        dt = datetime_from_year_doy_sod(2020, 225, 43202)
        assert dt == datetime(2020, 8, 12, 12, 0, 2, tzinfo=timezone.utc)

    def test_result_is_utc(self):
        dt = datetime_from_year_doy_sod(2020, 1, 0)
        assert dt.tzinfo is not None
        assert dt.utcoffset().total_seconds() == 0

    def test_full_day_rolls_over(self):
        """86400 seconds of day is the next midnight."""
        dt = datetime_from_year_doy_sod(2020, 1, 86400)
        assert dt == datetime(2020, 1, 2, tzinfo=timezone.utc)

    @pytest.mark.parametrize("year,doy,sod", [
        (2020, 0, 0),
        (2019, 366, 0),
        (2020, 367, 0),
        (2020, 10, 86401),
        (2020, 10, -1),
    ])
    def test_out_of_range(self, year, doy, sod):
        """Invalid DOY or seconds of day should raise ValueError."""
        with pytest.raises(ValueError):
            datetime_from_year_doy_sod(year, doy, sod)


class TestSitelogFormatting:
    """Test sitelog date rendering."""

    def test_format_datetime(self):
        dt = datetime(2020, 2, 25, 13, 30, tzinfo=timezone.utc)
        assert format_sitelog_datetime(dt) == "2020-02-25T13:30Z"

    def test_format_date(self):
        dt = datetime(2020, 2, 25, 13, 30, tzinfo=timezone.utc)
        assert format_sitelog_date(dt) == "2020-02-25"

    def test_unset_values_render_placeholder(self):
        """None renders as the sitelog template text."""
        assert format_sitelog_datetime(None) == "(CCYY-MM-DDThh:mmZ)"
        assert format_sitelog_date(None) == "(CCYY-MM-DD)"

    def test_far_future_sentinel(self):
        assert FAR_FUTURE == datetime(2099, 12, 31, tzinfo=timezone.utc)
