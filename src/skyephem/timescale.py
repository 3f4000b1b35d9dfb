"""
skyephem.timescale — Calendars, Julian Days & Delta-T
=====================================================

Conversions between calendar dates, day numbers and Julian Days, and
between Universal Time (UT) and Barycentric Dynamical Time (TDB).

Capabilities
------------
- Day numbers relative to 1970-01-01 on the proleptic Julian and
  Gregorian calendars, with the standard 1582-10-15 Gregorian change.
- Calendar date ↔ Julian Day, days in month, day of week, date validity.
- Delta-T (TT − UT) from a yearly table 1600–2018 with polynomial
  extrapolation outside it, and UT ↔ TDB built on it.
- Greenwich mean sidereal time.

Reference
---------
Meeus, J., *Astronomical Algorithms*, 2nd ed. (Willmann-Bell, 1998), ch. 7, 10, 12.
Espenak, F. & Meeus, J., *Polynomial Expressions for Delta T*, NASA (2006).
"""

from dataclasses import dataclass
from enum import Enum

import numpy as np

from .constants import DAYS_PER_CENTURY, JD_J2000
from .utils import div_rd, div_tt0, mod


# ════════════════════════════════════════════════════════════════════════════
#  Calendar
# ════════════════════════════════════════════════════════════════════════════

class Calendar(Enum):
    STANDARD = 0    # Julian before 1582-10-15, Gregorian from then on
    GREGORIAN = 1   # proleptic Gregorian
    JULIAN = 2      # proleptic Julian


JD_UNIX_EPOCH = 2_440_587.5     # 1970-01-01 00:00 UT
FIRST_GREGORIAN_DAY = -141_427  # 1582-10-15 as a day number

SUNDAY, MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY = range(7)


@dataclass(frozen=True)
class CalendarDate:
    year: int
    month: int
    day: int
    day_number: int         # days since 1970-01-01
    julian: bool = False    # True when expressed on the Julian calendar


def _normalize_month(year: int, month: int) -> tuple[int, int]:
    while month < 1:
        month += 12
        year -= 1
    while month > 12:
        month -= 12
        year += 1
    return year, month


def is_julian_calendar_date(year: int, month: int, day: int) -> bool:
    """True if the date precedes the standard Gregorian change."""
    return year < 1582 or (year == 1582 and (month < 10 or (month == 10 and day < 15)))


def day_number_gregorian(year: int, month: int, day: int) -> int:
    year, month = _normalize_month(year, month)
    return (367 * year - div_rd(7 * (year + div_tt0(month + 9, 12)), 4)
            - div_tt0(3 * (div_tt0(year + div_tt0(month - 9, 7), 100) + 1), 4)
            + div_tt0(275 * month, 9) + day - 719_559)


def day_number_julian(year: int, month: int, day: int) -> int:
    year, month = _normalize_month(year, month)
    return (367 * year - div_rd(7 * (year + div_tt0(month + 9, 12)), 4)
            + div_tt0(275 * month, 9) + day - 719_561)


def day_number(year: int, month: int, day: int,
               calendar: Calendar = Calendar.STANDARD) -> int:
    """Day number (1970-01-01 = 0) of a calendar date.

    Months outside 1..12 roll over into adjacent years, and days beyond the
    end of a month simply count forward.
    """
    if calendar == Calendar.GREGORIAN:
        return day_number_gregorian(year, month, day)
    if calendar == Calendar.JULIAN:
        return day_number_julian(year, month, day)

    year, month = _normalize_month(year, month)
    if is_julian_calendar_date(year, month, day):
        return day_number_julian(year, month, day)
    return day_number_gregorian(year, month, day)


def last_date_in_month(year: int, month: int,
                       calendar: Calendar = Calendar.STANDARD) -> int:
    """Number of the last day of a month (31 for October 1582 too)."""
    if month in (4, 6, 9, 11):
        return 30
    if month != 2:
        return 31
    if year % 4 != 0:
        return 28
    if calendar == Calendar.JULIAN or (calendar == Calendar.STANDARD and year < 1583):
        return 29
    return 29 if (year % 100 != 0 or year % 400 == 0) else 28


def days_in_month(year: int, month: int,
                  calendar: Calendar = Calendar.STANDARD) -> int:
    """Count of days actually in a month; October 1582 has 21 under STANDARD."""
    if calendar == Calendar.STANDARD and year == 1582 and month == 10:
        return 21
    return last_date_in_month(year, month, calendar)


def days_in_year(year: int, calendar: Calendar = Calendar.STANDARD) -> int:
    return day_number(year + 1, 1, 1, calendar) - day_number(year, 1, 1, calendar)


def day_of_week(day_num: int) -> int:
    """Day of week of a day number: 0 = Sunday … 6 = Saturday."""
    return int(mod(day_num + 4, 7))


def _date_from_day_number(day_num: int, julian: bool) -> CalendarDate:
    if julian:
        year = int(np.floor((day_num + 719_530) / 365.25))
        first_day = day_number_julian
        calendar = Calendar.JULIAN
    else:
        year = int(np.floor((day_num + 719_528) / 365.2425))
        first_day = day_number_gregorian
        calendar = Calendar.GREGORIAN

    while day_num < first_day(year, 1, 1):
        year -= 1
    while day_num >= first_day(year + 1, 1, 1):
        year += 1

    day = day_num - first_day(year, 1, 1) + 1
    month = 1
    while day > last_date_in_month(year, month, calendar):
        day -= last_date_in_month(year, month, calendar)
        month += 1

    return CalendarDate(year, month, day, day_num, julian)


def date_from_day_number(day_num: int,
                         calendar: Calendar = Calendar.STANDARD) -> CalendarDate:
    """Inverse of :func:`day_number`."""
    if calendar == Calendar.GREGORIAN:
        julian = False
    elif calendar == Calendar.JULIAN:
        julian = True
    else:
        julian = day_num < FIRST_GREGORIAN_DAY
    return _date_from_day_number(int(day_num), julian)


def add_days(delta_days: int, year: int, month: int, day: int,
             calendar: Calendar = Calendar.STANDARD) -> CalendarDate:
    return date_from_day_number(day_number(year, month, day, calendar) + delta_days, calendar)


def is_valid_date(year: int, month: int, day: int,
                  calendar: Calendar = Calendar.STANDARD) -> bool:
    """False for impossible dates, including 1582-10-05..14 under STANDARD."""
    ymd = date_from_day_number(day_number(year, month, day, calendar), calendar)
    return (ymd.year, ymd.month, ymd.day) == (year, month, day)


# ════════════════════════════════════════════════════════════════════════════
#  Julian Day
# ════════════════════════════════════════════════════════════════════════════

def julian_day(year: int, month: int, day: int,
               hour: float = 0.0, minute: float = 0.0, second: float = 0.0,
               calendar: Calendar = Calendar.STANDARD) -> float:
    """Julian Day of a calendar date and time of day.

    Parameters
    ----------
    year, month, day : int — calendar date (astronomical year numbering)
    hour, minute, second : float — time of day
    calendar : Calendar — which calendar the date is expressed in

    Returns
    -------
    jd : float
    """
    return (day_number(year, month, day, calendar) + JD_UNIX_EPOCH
            + (hour + minute / 60.0 + second / 3600.0) / 24.0)


def calendar_date(jd: float,
                  calendar: Calendar = Calendar.STANDARD) -> tuple[CalendarDate, float]:
    """Calendar date and hours into the day for a Julian Day.

    Returns
    -------
    date : CalendarDate
    hours : float — in [0, 24)
    """
    days = jd - JD_UNIX_EPOCH
    day_num = int(np.floor(days))
    hours = (days - day_num) * 24.0
    return date_from_day_number(day_num, calendar), hours


# ════════════════════════════════════════════════════════════════════════════
#  Delta-T and UT ↔ TDB
# ════════════════════════════════════════════════════════════════════════════

# TT − UT [s] at the start of each year from 1600
_HISTORIC_DELTA_T = (
    120.3, 120.3, 120.5, 120.6, 120.7, 120.9, 121.0, 121.1, 121.3, 121.5,
    121.6, 121.9, 122.0, 122.2, 122.5, 122.7, 122.9, 123.2, 123.4, 123.7,
    124, 119, 115, 110, 106, 102, 98, 95, 91, 88,
    85, 82, 79, 77, 74, 72, 70, 67, 65, 63,
    62, 60, 58, 57, 55, 54, 53, 51, 50, 49,
    48, 47, 46, 45, 44, 43, 42, 41, 40, 39,
    38, 37, 36, 37, 38, 36, 35, 34, 33, 32,
    31, 30, 29, 29, 28, 27, 26, 25, 25, 26,
    26, 25, 24, 24, 24, 24, 24, 23, 23, 22,
    22, 22, 21, 21, 21, 21, 20, 20, 20, 20,
    21, 21, 20, 20, 19, 19, 19, 20, 20, 20,
    20, 20, 21, 21, 21, 21, 21, 21, 21, 21,
    21.1, 21.0, 20.9, 20.7, 20.4, 20.0, 19.4, 18.7, 17.8, 17.0,
    16.6, 16.1, 15.7, 15.3, 14.7, 14.3, 14.1, 14.1, 13.7, 13.5,
    13.5, 13.4, 13.4, 13.3, 13.2, 13.2, 13.1, 13.0, 13.3, 13.5,
    13.7, 13.9, 14.0, 14.1, 14.1, 14.3, 14.4, 14.6, 14.7, 14.7,
    14.8, 14.9, 15.0, 15.2, 15.4, 15.6, 15.6, 15.9, 15.9, 15.7,
    15.7, 15.7, 15.9, 16.1, 15.9, 15.7, 15.3, 15.5, 15.6, 15.6,
    15.6, 15.5, 15.4, 15.2, 14.9, 14.6, 14.3, 14.1, 14.2, 13.7,
    13.3, 13.0, 13.2, 13.1, 13.3, 13.5, 13.2, 13.1, 13.0, 12.6,
    12.6, 12.0, 11.8, 11.4, 11.1, 11.1, 11.1, 11.1, 11.2, 11.5,
    11.2, 11.7, 11.9, 11.8, 11.8, 11.8, 11.6, 11.5, 11.4, 11.3,
    11.13, 10.94, 10.29, 9.94, 9.88, 9.72, 9.66, 9.51, 9.21, 8.60,
    7.95, 7.59, 7.36, 7.10, 6.89, 6.73, 6.39, 6.25, 6.25, 6.22,
    6.22, 6.30, 6.35, 6.32, 6.33, 6.37, 6.40, 6.46, 6.48, 6.53,
    6.55, 6.69, 6.84, 7.03, 7.15, 7.26, 7.23, 7.21, 6.99, 7.19,
    7.35, 7.41, 7.36, 6.95, 6.45, 5.92, 5.15, 4.11, 2.94, 1.97,
    1.04, 0.11, -0.82, -1.70, -2.48, -3.19, -3.84, -4.43, -4.79, -5.09,
    -5.36, -5.37, -5.34, -5.40, -5.58, -5.74, -5.69, -5.67, -5.73, -5.78,
    -5.86, -6.01, -6.28, -6.53, -6.50, -6.41, -6.11, -5.63, -4.68, -3.72,
    -2.70, -1.48, -0.08, 1.26, 2.59, 3.92, 5.20, 6.29, 7.68, 9.13,
    10.38, 11.64, 13.23, 14.69, 16.00, 17.19, 18.19, 19.13, 20.14, 20.86,
    21.41, 22.06, 22.51, 23.01, 23.46, 23.63, 23.95, 24.39, 24.34, 24.10,
    24.02, 23.98, 23.89, 23.93, 23.88, 23.91, 23.76, 23.91, 23.96, 24.04,
    24.35, 24.82, 25.30, 25.77, 26.27, 26.76, 27.27, 27.77, 28.25, 28.70,
    29.15, 29.57, 29.97, 30.36, 30.72, 31.07, 31.35, 31.68, 32.17, 32.67,
    33.15, 33.58, 33.99, 34.47, 35.03, 35.74, 36.55, 37.43, 38.29, 39.20,
    40.18, 41.17, 42.23, 43.37, 44.48, 45.48, 46.46, 47.52, 48.53, 49.59,
    50.54, 51.38, 52.17, 52.96, 53.79, 54.34, 54.87, 55.32, 55.82, 56.30,
    56.86, 57.57, 58.31, 59.12, 59.98, 60.79, 61.63, 62.30, 62.97, 63.47,
    63.83, 64.09, 64.30, 64.47, 64.57, 64.69, 64.85, 65.15, 65.46, 65.78,
    66.07, 66.32, 66.60, 66.91, 67.28, 67.64, 68.10, 68.59, 68.97,
)

FIRST_TABLE_YEAR = 1600
LAST_TABLE_YEAR = FIRST_TABLE_YEAR + len(_HISTORIC_DELTA_T) - 1


def _delta_t_polynomial(year: float, calibration: float) -> float:
    if year < -500:
        u = (year - 1820.0) / 100.0
        return -20.0 + 32.0 * u**2
    if year < 500:
        u = year / 100.0
        return (10583.6 - 1014.41 * u + 33.78311 * u**2 - 5.952053 * u**3
                - 0.1798452 * u**4 + 0.022174192 * u**5 + 0.0090316521 * u**6)
    if year < FIRST_TABLE_YEAR:
        u = (year - 1000.0) / 100.0
        return (1574.2 - 556.01 * u + 71.23472 * u**2 + 0.319781 * u**3
                - 0.8503463 * u**4 - 0.005050998 * u**5 + 0.0083572073 * u**6)
    if year < 2050:
        t = year - 2000.0
        return calibration + 0.32217 * t + 0.005589 * t**2
    u = (year - 1820.0) / 100.0
    if year < 2150:
        return calibration - 81.76 + 32.0 * u**2 - 0.5628 * (2150.0 - year)
    return calibration - 81.76 + 32.0 * u**2


# Offset that joins the post-table polynomials onto the last tabulated value
_CALIBRATION = _HISTORIC_DELTA_T[-1] - _delta_t_polynomial(LAST_TABLE_YEAR, 0.0)


def _delta_t_at_start_of_year(year: int) -> float:
    if FIRST_TABLE_YEAR <= year <= LAST_TABLE_YEAR:
        return _HISTORIC_DELTA_T[year - FIRST_TABLE_YEAR]
    return _delta_t_polynomial(year, _CALIBRATION)


def delta_t(jde: float) -> float:
    """Delta-T (TT − UT) [s] at a Julian Day.

    Three-point interpolation between start-of-year values, so the result
    is smooth across year boundaries and across the table edges.
    """
    year = (jde - JD_J2000) / 365.25 + 2000.0
    mid = int(np.floor(year))
    dt1 = _delta_t_at_start_of_year(mid - 1)
    dt2 = _delta_t_at_start_of_year(mid)
    dt3 = _delta_t_at_start_of_year(mid + 1)
    a = dt2 - dt1
    b = dt3 - dt2
    c = b - a
    n = year - mid
    return dt2 + n * (a + b + n * c) / 2.0


def ut_to_tdb(jdu: float) -> float:
    """Universal Time JD → dynamical time JDE."""
    jde = jdu
    for _ in range(5):
        jde = jdu + delta_t(jde) / 86_400.0
    return jde


def tdb_to_ut(jde: float) -> float:
    """Dynamical time JDE → Universal Time JD."""
    return jde - delta_t(jde) / 86_400.0


# ════════════════════════════════════════════════════════════════════════════
#  Sidereal Time
# ════════════════════════════════════════════════════════════════════════════

def gmst_degrees(jdu: float) -> float:
    """Greenwich mean sidereal time [deg] in [0, 360) for a UT Julian Day."""
    t = jdu - JD_J2000
    T = t / DAYS_PER_CENTURY
    theta = (280.46061837 + 360.98564736629 * t
             + 0.000387933 * T**2 - T**3 / 38_710_000.0)
    return mod(theta, 360.0)
