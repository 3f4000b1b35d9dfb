"""
test_timescale.py — Calendars, Julian Days, Delta-T, Sidereal Time
==================================================================
"""

import numpy as np
import numpy.testing as npt
import pytest

from skyephem.constants import JD_J2000
from skyephem.timescale import (
    Calendar, add_days, calendar_date, day_number, day_of_week, days_in_month,
    delta_t, gmst_degrees, is_valid_date, julian_day, last_date_in_month, tdb_to_ut,
    ut_to_tdb,
)


# ═══════════════════════════════════════════════════════════════════════════
#  Calendar
# ═══════════════════════════════════════════════════════════════════════════

def test_day_number_epoch():
    assert day_number(1970, 1, 1) == 0
    assert day_of_week(0) == 4      # Thursday


def test_julian_day_j2000():
    npt.assert_allclose(julian_day(2000, 1, 1, 12), JD_J2000, atol=1e-9)


def test_julian_day_meeus_examples():
    # Meeus Example 7.a and 7.b
    npt.assert_allclose(julian_day(1957, 10, 4, 19, 26, 24), 2_436_116.31, atol=1e-6)
    npt.assert_allclose(julian_day(333, 1, 27, 12), 1_842_713.0, atol=1e-9)


def test_calendar_date_inverse():
    date, hours = calendar_date(JD_J2000)
    assert (date.year, date.month, date.day) == (2000, 1, 1)
    npt.assert_allclose(hours, 12.0, atol=1e-6)

    date, hours = calendar_date(julian_day(-44, 3, 15, 6))
    assert (date.year, date.month, date.day) == (-44, 3, 15)
    assert date.julian
    npt.assert_allclose(hours, 6.0, atol=1e-6)


def test_gregorian_change():
    nxt = add_days(1, 1582, 10, 4)
    assert (nxt.year, nxt.month, nxt.day) == (1582, 10, 15)
    assert not is_valid_date(1582, 10, 10)
    assert is_valid_date(1582, 10, 10, Calendar.GREGORIAN)
    assert days_in_month(1582, 10) == 21
    assert last_date_in_month(1582, 10) == 31
    assert days_in_month(1582, 10, Calendar.JULIAN) == 31


def test_leap_years():
    assert last_date_in_month(1900, 2) == 28
    assert last_date_in_month(1900, 2, Calendar.JULIAN) == 29
    assert last_date_in_month(2000, 2) == 29
    assert last_date_in_month(1500, 2) == 29
    assert last_date_in_month(1500, 2, Calendar.GREGORIAN) == 28
    assert not is_valid_date(2021, 2, 29)


def test_calendar_selectors_agree_after_change():
    for cal in (Calendar.STANDARD, Calendar.GREGORIAN):
        assert day_number(2024, 3, 1, cal) == day_number(2024, 3, 1)
    assert day_number(2024, 3, 1, Calendar.JULIAN) - day_number(2024, 3, 1) == 13


# ═══════════════════════════════════════════════════════════════════════════
#  Delta-T & Time Scales
# ═══════════════════════════════════════════════════════════════════════════

def test_delta_t_table_values():
    assert 63.0 < delta_t(JD_J2000) < 65.0
    assert 40.0 < delta_t(julian_day(1970, 1, 1)) < 41.5


def test_delta_t_continuous_at_table_edges():
    for year in (1600, 2018):
        jd = julian_day(year, 1, 1)
        npt.assert_allclose(delta_t(jd - 1.0), delta_t(jd + 1.0), atol=0.05)


def test_ut_tdb_round_trip():
    for jdu in (1_000_000.5, 2_299_160.5, JD_J2000, 2_500_000.25):
        npt.assert_allclose(tdb_to_ut(ut_to_tdb(jdu)), jdu, atol=1e-7)
        assert ut_to_tdb(jdu) != jdu


# ═══════════════════════════════════════════════════════════════════════════
#  Sidereal Time
# ═══════════════════════════════════════════════════════════════════════════

def test_gmst_meeus_12a():
    # 1987-04-10 0h UT → 13h10m46.3668s
    npt.assert_allclose(gmst_degrees(2_446_895.5), 197.693195, atol=1e-5)


def test_gmst_meeus_12b():
    # 1987-04-10 19:21 UT → 8h34m57.0896s
    npt.assert_allclose(gmst_degrees(julian_day(1987, 4, 10, 19, 21)), 128.7378734, atol=1e-5)


@pytest.mark.parametrize("jdu", [2_400_000.5, JD_J2000, 2_470_000.3])
def test_gmst_range(jdu):
    assert 0.0 <= gmst_degrees(jdu) < 360.0
    assert np.isfinite(gmst_degrees(jdu))
