"""
test_events.py — Event Records and Event Searches
=================================================

Event times checked against published almanac values (UT).
"""

import numpy.testing as npt
import pytest

from skyephem import EventFinder
from skyephem.constants import (
    APHELION, EARTH, FULL_MOON, GALILEAN_MOON_EVENT, GREATEST_ELONGATION, GRS_TRANSIT_EVENT,
    INFERIOR_CONJUNCTION, JUPITER, LUNAR_ECLIPSE, MARS, MERCURY, MOON, NEW_MOON, OPPOSITION,
    PERIHELION, QUADRATURE, RISE_EVENT, SET_EVENT, SOLAR_ECLIPSE, SPRING_EQUINOX, SUN,
    SUPERIOR_CONJUNCTION, TRANSIT_EVENT, TWILIGHT_BEGINS, TWILIGHT_ENDS, UNSEEN_ALL_DAY, VENUS,
    VISIBLE_ALL_DAY,
)
from skyephem.events import AstroEvent
from skyephem.satellites import MoonEvents
from skyephem.timescale import julian_day, ut_to_tdb


def _minutes(event):
    return event.hour * 60 + event.minute


def _by_type(events, event_type):
    return [event for event in events if event.event_type == event_type]


# ═══════════════════════════════════════════════════════════════════════════
#  AstroEvent
# ═══════════════════════════════════════════════════════════════════════════

def test_on_day_clamps_to_last_minute():
    event = AstroEvent.on_day(RISE_EVENT, 'rise', 2020, 6, 21, 25.0)
    assert (event.hour, event.minute) == (23, 59)
    event = AstroEvent.on_day(RISE_EVENT, 'rise', 2020, 6, 21, -1.0)
    assert (event.hour, event.minute) == (0, 0)


def test_on_day_floors_to_minute():
    event = AstroEvent.on_day(RISE_EVENT, 'rise', 2020, 6, 21, 6.51)
    assert (event.hour, event.minute) == (6, 30)
    npt.assert_allclose(event.ut, julian_day(2020, 6, 21, 6, 30), atol=1e-9)


def test_from_jdu_applies_zone():
    event = AstroEvent.from_jdu(SET_EVENT, 'set', julian_day(2020, 6, 21, 23, 30, 20), zone=2.0)
    assert (event.year, event.month, event.day) == (2020, 6, 22)
    assert (event.hour, event.minute) == (1, 30)
    npt.assert_allclose(event.ut, julian_day(2020, 6, 21, 23, 30), atol=1e-9)


def test_str():
    event = AstroEvent.on_day(RISE_EVENT, 'rise', 2020, 6, 21, 6.5)
    assert str(event) == "200; rise; 2020-06-21 06:30"
    event.value = 1.5
    event.misc_info = "extra"
    assert str(event) == "200; rise; 2020-06-21 06:30; 1.5; extra"


# ═══════════════════════════════════════════════════════════════════════════
#  Seasons & Lunar Phases
# ═══════════════════════════════════════════════════════════════════════════

def test_autumnal_equinox_2023(finder):
    event = finder.get_equinox_solstice_event(2023, 9, 23)
    assert event is not None and event.event_text == 'autumnal equinox'
    assert abs(_minutes(event) - (6 * 60 + 50)) <= 1
    assert finder.get_equinox_solstice_event(2023, 9, 22) is None
    assert finder.get_equinox_solstice_event(2023, 8, 23) is None


def test_seasons_of_one_year(finder):
    events = finder.get_equinoxes_and_solstices_for_one_year(2024)
    assert [(e.month, e.day) for e in events] == [(3, 20), (6, 20), (9, 22), (12, 21)]


def test_seasons_in_local_zone(finder):
    # 2024-12-21 09:20 UT is already the 21st in Tokyo and still the 21st in UT
    event = finder.get_equinox_solstice_event(2024, 12, 21, zone=9.0)
    assert event is not None and event.hour == 18


def test_new_moon_2000(finder):
    event = finder.get_lunar_phase_event(2000, 1, 6)
    assert event.event_type == NEW_MOON and event.event_text == 'new moon'
    assert abs(_minutes(event) - (18 * 60 + 14)) <= 2


def test_phases_of_a_month(finder):
    events = finder.get_lunar_phases_for_month(2000, 1)
    assert [(e.event_type, e.day) for e in events] == [
        (NEW_MOON, 6), (NEW_MOON + 1, 14), (FULL_MOON, 21), (NEW_MOON + 3, 28)]


def test_new_moons_of_a_year(finder):
    new_moons = _by_type(finder.get_lunar_phases_by_year(2000, 2000), NEW_MOON)
    assert len(new_moons) == 13
    assert (new_moons[-1].month, new_moons[-1].day) == (12, 25)


def test_next_and_previous_new_moon(finder):
    start = finder.get_lunar_phase_event(2000, 1, 6)
    nxt = finder.find_event(SUN, NEW_MOON, start.ut)
    assert (nxt.year, nxt.month, nxt.day) == (2000, 2, 5)
    prev = finder.find_event(SUN, NEW_MOON, start.ut, do_previous=True)
    assert (prev.year, prev.month, prev.day) == (1999, 12, 7)


def test_next_spring_equinox(finder):
    event = finder.find_event(SUN, SPRING_EQUINOX, julian_day(2024, 1, 1))
    assert (event.year, event.month, event.day) == (2024, 3, 20)


# ═══════════════════════════════════════════════════════════════════════════
#  Rising, Setting & Transit
# ═══════════════════════════════════════════════════════════════════════════

def test_sunrise_sunset_greenwich(finder, greenwich):
    events = finder.get_rise_and_set_times(SUN, 2020, 6, 21, greenwich)
    rises, sets = _by_type(events, RISE_EVENT), _by_type(events, SET_EVENT)
    assert len(rises) == 1 and len(sets) == 1
    assert abs(_minutes(rises[0]) - (3 * 60 + 43)) <= 2
    assert abs(_minutes(sets[0]) - (20 * 60 + 21)) <= 2


def test_solar_transit_greenwich(finder, greenwich):
    events = finder.get_transit_times(SUN, 2020, 6, 21, greenwich)
    assert len(events) == 1 and events[0].event_type == TRANSIT_EVENT
    assert abs(_minutes(events[0]) - (12 * 60 + 1)) <= 1


def test_minutes_of_daylight(finder, greenwich, tromso):
    npt.assert_allclose(finder.get_minutes_of_daylight(2020, 6, 21, greenwich), 998, atol=3)
    assert finder.get_minutes_of_daylight(2020, 6, 21, tromso) == 1440
    assert finder.get_minutes_of_daylight(2020, 12, 21, tromso) == 0


def test_midnight_sun_and_polar_night(finder, tromso):
    summer = finder.get_rise_and_set_times(SUN, 2020, 6, 21, tromso)
    assert [e.event_type for e in summer] == [VISIBLE_ALL_DAY]
    winter = finder.get_rise_and_set_times(SUN, 2020, 12, 21, tromso)
    assert [e.event_type for e in winter] == [UNSEEN_ALL_DAY]


def test_nautical_twilight(finder, greenwich):
    events = finder.get_rise_and_set_times(SUN, 2020, 6, 21, greenwich, target_altitude=-12.0)
    assert [e.event_type for e in events] == [TWILIGHT_BEGINS, TWILIGHT_ENDS]
    assert events[0].hour < 3 and events[1].hour >= 21


def test_next_twilight_end(finder, greenwich):
    event = finder.find_event(SUN, TWILIGHT_ENDS, julian_day(2020, 6, 21), greenwich, argument=-12.0)
    assert event.day == 21 and event.hour >= 21


def test_moonrise_found_within_days(finder, greenwich):
    event = finder.find_event(MOON, RISE_EVENT, julian_day(2020, 6, 21), greenwich)
    assert event is not None and 0.0 < event.ut - julian_day(2020, 6, 21) < 2.0


def test_rise_and_set_events_by_day(finder, greenwich):
    days = list(finder.get_rise_and_set_events(SUN, 2020, 6, 20, 3, greenwich))
    assert len(days) == 3
    for events in days:
        assert [e.event_type for e in events] == [RISE_EVENT, TRANSIT_EVENT, SET_EVENT]
    assert days[-1][0].day == 22


def test_month_of_events_is_sorted(finder, greenwich):
    events = finder.get_month_of_events(SUN, 2000, 1, greenwich)
    assert [e.ut for e in events] == sorted(e.ut for e in events)
    assert len(_by_type(events, RISE_EVENT)) == 31
    assert len(_by_type(events, FULL_MOON)) == 1


# ═══════════════════════════════════════════════════════════════════════════
#  Planetary Phenomena & Eclipses
# ═══════════════════════════════════════════════════════════════════════════

def test_mars_opposition_2020(finder):
    event = finder.find_event(MARS, OPPOSITION, julian_day(2020, 6, 1))
    assert event.event_text == 'opposition'
    assert (event.year, event.month) == (2020, 10) and event.day in (13, 14)


def test_total_lunar_eclipse_2019(finder):
    event = finder.find_event(SUN, LUNAR_ECLIPSE, julian_day(2019, 1, 1))
    assert (event.year, event.month, event.day) == (2019, 1, 21)
    assert event.event_text == 'total lunar eclipse'
    assert event.misc_info.total


def test_venus_greatest_elongation_2020(finder):
    event = finder.find_event(VENUS, GREATEST_ELONGATION, julian_day(2020, 1, 1))
    assert (event.year, event.month) == (2020, 3) and abs(event.day - 24) <= 1
    npt.assert_allclose(event.value, 46.1, atol=0.2)
    assert event.misc_info.startswith("Venus in evening sky")


def test_inferior_planet(finder):
    # Venus at inferior conjunction on 2020 June 3
    assert finder.is_inferior(VENUS, julian_day(2020, 6, 3))
    assert not finder.is_inferior(VENUS, julian_day(2021, 3, 26))
    assert not finder.is_inferior(MARS, julian_day(2020, 6, 3))


def test_unsupported_searches(finder):
    assert finder.find_event(JUPITER, GRS_TRANSIT_EVENT, julian_day(2020, 6, 1)) is None
    assert finder.find_event(SUN, 9999, julian_day(2020, 6, 1)) is None


def _chain(finder, planet, event_type, start, count):
    events = []
    for _ in range(count):
        event = finder.find_event(planet, event_type, start)
        events.append(event)
        start = event.ut
    return events


@pytest.mark.parametrize("month", range(2, 13))
def test_perihelion_from_any_month(finder, month):
    event = finder.find_event(EARTH, PERIHELION, julian_day(2020, month, 5))
    assert event.event_text == 'perihelion'
    assert (event.year, event.month, event.day) == (2021, 1, 2)


def test_consecutive_perihelia(finder):
    events = _chain(finder, EARTH, PERIHELION, julian_day(2020, 6, 5), 3)
    assert [(e.year, e.month, e.day) for e in events] == [(2021, 1, 2), (2022, 1, 4), (2023, 1, 4)]


def test_aphelion_2021(finder):
    event = finder.find_event(EARTH, APHELION, julian_day(2021, 1, 1))
    assert event.event_text == 'aphelion'
    assert abs(event.ut - julian_day(2021, 7, 5, 22, 27)) < 0.25


def test_mercury_elongations_2019(finder):
    # Almanac dates, with east (evening) or west (morning) and the angle
    expected = [((2, 27), 'evening', 18.1), ((4, 11), 'morning', 27.7),
                ((6, 23), 'evening', 25.2), ((8, 9), 'morning', 19.0),
                ((10, 20), 'evening', 24.6), ((11, 28), 'morning', 20.1)]
    events = _chain(finder, MERCURY, GREATEST_ELONGATION, julian_day(2019, 1, 1), len(expected))
    for event, ((month, day), sky, angle) in zip(events, expected):
        assert event.year == 2019
        assert abs(event.ut - julian_day(2019, month, day, 12)) < 1.0
        assert f"in {sky} sky" in event.misc_info
        npt.assert_allclose(event.value, angle, atol=0.3)


def test_previous_mercury_elongation(finder):
    event = finder.find_event(MERCURY, GREATEST_ELONGATION, julian_day(2019, 4, 1), do_previous=True)
    assert (event.year, event.month, event.day) == (2019, 2, 27)


def test_jupiter_perihelion_on_midnight_grid(finder):
    # Outer planets resolve to whole days
    event = finder.find_event(JUPITER, PERIHELION, julian_day(2020, 1, 1))
    assert abs(event.ut - julian_day(2023, 1, 21)) < 10.0
    assert (event.hour, event.minute) == (0, 0)


@pytest.mark.parametrize("planet, event_type, start, date", [
    (VENUS, INFERIOR_CONJUNCTION, (2020, 1, 1), (2020, 6, 3)),
    (VENUS, SUPERIOR_CONJUNCTION, (2020, 1, 1), (2021, 3, 26)),
    (MERCURY, SUPERIOR_CONJUNCTION, (2019, 8, 1), (2019, 9, 4)),
    (MERCURY, INFERIOR_CONJUNCTION, (2019, 8, 1), (2019, 11, 11)),
])
def test_conjunction_kind_filter(finder, planet, event_type, start, date):
    event = finder.find_event(planet, event_type, julian_day(*start))
    assert abs(event.ut - julian_day(*date, 12)) < 1.0
    assert finder.is_inferior(planet, event.ut) == (event_type == INFERIOR_CONJUNCTION)


def test_mars_quadrature(finder, solar_system):
    start = julian_day(2020, 1, 1)
    event = finder.find_event(MARS, QUADRATURE, start)
    assert event.event_text == 'quadrature'
    assert 0.0 < event.ut - start < 366.0
    elongation = solar_system.get_solar_elongation_in_longitude(MARS, ut_to_tdb(event.ut))
    npt.assert_allclose(abs(elongation), 90.0, atol=0.05)


def test_total_solar_eclipse_2017(finder):
    event = finder.find_event(SUN, SOLAR_ECLIPSE, julian_day(2017, 8, 1))
    assert (event.year, event.month, event.day) == (2017, 8, 21)
    assert event.event_text == 'total solar eclipse'
    assert event.misc_info.is_solar and event.misc_info.surface_shadow is not None


def test_previous_solar_eclipse_is_annular(finder):
    event = finder.find_event(SUN, SOLAR_ECLIPSE, julian_day(2017, 8, 1), do_previous=True)
    assert (event.year, event.month, event.day) == (2017, 2, 26)
    assert event.event_text == 'annular solar eclipse'


def test_lunar_eclipses_2022_2023(finder):
    events = _chain(finder, SUN, LUNAR_ECLIPSE, julian_day(2022, 10, 1), 2)
    assert (events[0].year, events[0].month, events[0].day) == (2022, 11, 8)
    assert events[0].event_text == 'total lunar eclipse'
    assert (events[1].year, events[1].month, events[1].day) == (2023, 5, 5)
    assert events[1].event_text == 'penumbral lunar eclipse'


# ═══════════════════════════════════════════════════════════════════════════
#  Jupiter
# ═══════════════════════════════════════════════════════════════════════════

def test_galilean_moon_events(finder):
    start = julian_day(2020, 6, 1)
    events = list(finder.get_galilean_moon_events(start, start + 1.0))
    assert events
    for event in events:
        assert event.event_type == GALILEAN_MOON_EVENT
        assert isinstance(event.misc_info, MoonEvents) and event.misc_info.text
        assert start - 1.0 / 1440.0 <= event.ut <= start + 1.0 + 1e-6
    assert [e.ut for e in events] == sorted(e.ut for e in events)


def test_grs_transits_in_galilean_stream(solar_system, jupiter_info):
    finder = EventFinder(jupiter_info, solar_system)
    start = julian_day(2020, 6, 1)
    events = list(finder.get_galilean_moon_events(start, start + 1.0, include_grs_transits=True))
    assert sum('GRS transit' in e.event_text for e in events) in (2, 3)


def test_next_grs_transit(solar_system, jupiter_info):
    finder = EventFinder(jupiter_info, solar_system)
    start = julian_day(2020, 6, 1)
    event = finder.find_event(JUPITER, GRS_TRANSIT_EVENT, start)
    assert event is not None and event.event_text == 'GRS transit'
    assert 0.0 < event.ut - start < 0.42
    offset = jupiter_info.get_grs_cm_offset(ut_to_tdb(event.ut)).degrees
    assert abs(offset) < 1.0


@pytest.mark.parametrize("event_type, expected, atol", [
    (OPPOSITION, 0.0, 0.2),
    (GREATEST_ELONGATION, 180.0, 5.0),
])
def test_search_value_at_opposition(finder, event_type, expected, atol):
    value = finder.get_event_search_value(MARS, event_type, julian_day(2020, 10, 14))
    npt.assert_allclose(abs(value), expected, atol=atol)
