"""
Tests for period resolution and long-date handling
"""

from datetime import date, datetime

import pytest

from rekapan.reporting.periods import (
    DateWindow,
    Period,
    format_long_date,
    format_timestamp,
    parse_explicit_date,
    parse_long_date,
    resolve_period
)

WEDNESDAY = date(2024, 6, 12)


class TestResolvePeriod:
    """Test window computation"""

    def test_daily_today(self):
        window = resolve_period(Period.DAILY, today=WEDNESDAY)

        assert window.start == datetime(2024, 6, 12, 0, 0, 0)
        assert window.end == datetime(2024, 6, 12, 23, 59, 59)

    def test_daily_explicit_date(self):
        window = resolve_period('daily', '5/6/2024', today=WEDNESDAY)
        assert window.start_date == window.end_date == date(2024, 6, 5)

    def test_dash_separated_date(self):
        window = resolve_period('daily', '05-06-2024', today=WEDNESDAY)
        assert window.start_date == date(2024, 6, 5)

    def test_weekly_starts_on_monday(self):
        window = resolve_period(Period.WEEKLY, today=WEDNESDAY)

        assert window.start_date == date(2024, 6, 10)
        assert window.end_date == date(2024, 6, 16)

    def test_weekly_sunday_belongs_to_previous_monday(self):
        window = resolve_period(Period.WEEKLY, '16/6/2024')
        assert window.start_date == date(2024, 6, 10)
        assert window.end_date == date(2024, 6, 16)

    def test_weekly_on_monday(self):
        window = resolve_period(Period.WEEKLY, '10/6/2024')
        assert window.start_date == date(2024, 6, 10)

    def test_weekly_across_month_end(self):
        window = resolve_period(Period.WEEKLY, '1/6/2024')
        assert window.start_date == date(2024, 5, 27)
        assert window.end_date == date(2024, 6, 2)

    def test_monthly_leap_february(self):
        window = resolve_period(Period.MONTHLY, '15/2/2024')
        assert window.start_date == date(2024, 2, 1)
        assert window.end_date == date(2024, 2, 29)

    def test_monthly_common_february(self):
        window = resolve_period(Period.MONTHLY, '15/2/2023')
        assert window.end_date == date(2023, 2, 28)

    def test_monthly_december(self):
        window = resolve_period(Period.MONTHLY, today=date(2024, 12, 3))
        assert window.start_date == date(2024, 12, 1)
        assert window.end_date == date(2024, 12, 31)

    @pytest.mark.parametrize('value', ['2024-06-05', 'besok', '31/02/2024', '12/13/2024'])
    def test_malformed_date(self, value):
        assert resolve_period(Period.DAILY, value, today=WEDNESDAY) is None

    def test_all_has_no_window(self):
        assert resolve_period(Period.ALL, '5/6/2024') is None
        assert resolve_period('anything', today=WEDNESDAY) is None


class TestPeriodParse:
    """Test period keyword parsing"""

    @pytest.mark.parametrize('value,expected', [
        ('daily', Period.DAILY),
        ('WEEKLY', Period.WEEKLY),
        (' monthly ', Period.MONTHLY),
        ('all', Period.ALL),
        ('tahunan', Period.ALL),
        (None, Period.ALL),
    ])
    def test_parse(self, value, expected):
        assert Period.parse(value) == expected


class TestLongDates:
    """Test Indonesian long date formatting and parsing"""

    def test_format(self):
        assert format_long_date(date(2025, 5, 5)) == 'Senin, 5 Mei 2025'
        assert format_long_date(date(2024, 6, 16)) == 'Minggu, 16 Juni 2024'

    def test_format_datetime(self):
        assert format_long_date(datetime(2024, 8, 17, 23, 0)) == 'Sabtu, 17 Agustus 2024'

    def test_parse(self):
        assert parse_long_date('Senin, 5 Mei 2025') == date(2025, 5, 5)

    def test_parse_ignores_day_name_and_case(self):
        assert parse_long_date('Jumat, 12 juni 2024') == date(2024, 6, 12)

    def test_parse_reads_back_formatted_date(self):
        day = date(2024, 11, 30)
        assert parse_long_date(format_long_date(day)) == day

    @pytest.mark.parametrize('value', ['', None, 'Senin, 5 May 2025', '5/5/2025', 'Senin, 31 Februari 2024'])
    def test_parse_invalid(self, value):
        assert parse_long_date(value) is None

    def test_parse_explicit_date(self):
        assert parse_explicit_date('7/8/2024') == date(2024, 8, 7)
        assert parse_explicit_date('') is None

    def test_format_timestamp(self):
        assert format_timestamp(datetime(2025, 5, 5, 14, 30, 0)) == '05/05/2025 14.30.00'


class TestDateWindow:
    """Test window membership"""

    def test_inclusive_bounds(self):
        window = DateWindow.between(date(2024, 6, 10), date(2024, 6, 16))

        assert window.contains(date(2024, 6, 10))
        assert window.contains(date(2024, 6, 16))
        assert window.contains(datetime(2024, 6, 16, 23, 59, 59))
        assert not window.contains(date(2024, 6, 9))
        assert not window.contains(date(2024, 6, 17))
