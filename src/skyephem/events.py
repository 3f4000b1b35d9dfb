"""
skyephem.events — Astronomical Event Finder
===========================================

Locates the instants of events defined by positions: lunar phases,
equinoxes and solstices, rising, setting, transit and twilight, planetary
phenomena, eclipses, Galilean satellite phenomena and Great Red Spot
transits.

Capabilities
------------
- ``AstroEvent`` — event code, label and wall-clock minute in a fixed
  UTC-offset time zone, with an optional value and payload
- Per-day searches: lunar phase, equinox/solstice, rise/set/twilight,
  transits, minutes of daylight
- Month and multi-year scans; the long ones are generators, so the caller
  decides how to slice the work
- ``find_event`` — the next (or previous) event of any type from an
  instant, stepping a day, a year or a synodic/orbital period at a time

Every search samples a quantity on a grid, brackets a sign change or an
extremum, and refines it with :func:`~skyephem.solvers.find_zero` or
:func:`~skyephem.solvers.find_min_max`.  Planetary phenomena are then
resampled on a fixed grid around the refined instant, so that repeated
searches from nearby starting points report the same minute.

Times passed in and out are UT Julian Days unless a name says ``jde``.
Zones are hours east of UTC; calendars are ``Calendar`` selectors.

Reference
---------
Meeus, J. (1998). *Astronomical Algorithms*, 2nd ed., Willmann-Bell,
Ch. 15, 27, 36, 49, 54.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterator

import numpy as np

from .angle import FMT_DD, FMT_MINS, Angle, Unit
from .constants import (
    APHELION, AVG_SUN_MOON_RADIUS, FALL_EQUINOX, FIRST_QUARTER, FULL_MOON, GALILEAN_MOON_EVENT,
    GREATEST_ELONGATION, GRS_TRANSIT_EVENT, HALF_MINUTE, INFERIOR_CONJUNCTION, LAST_QUARTER,
    LUNAR_ECLIPSE, MARS, MAX_ALT_FOR_TWILIGHT, MEAN_JUPITER_SYS_II, MEAN_SYNODIC_MONTH, MERCURY,
    MINUTE, MOON, NAUTICAL_TWILIGHT, NEPTUNE, NEW_MOON, NON_EVENT, OPPOSITION, PERIHELION,
    QUADRATURE, QUICK_PLANET, REFRACTION_AT_HORIZON, RISE_EVENT, SET_EVENT,
    SET_EVENT_MINUS_1_MIN, SIGNED_HOUR_ANGLE, SOLAR_ECLIPSE, SPRING_EQUINOX, SUMMER_SOLSTICE, SUN,
    SUPERIOR_CONJUNCTION, TRANSIT_EVENT, TWILIGHT_BEGINS, TWILIGHT_ENDS, UNSEEN_ALL_DAY, URANUS,
    VENUS, VISIBLE_ALL_DAY, WINTER_SOLSTICE,
)
from .jupiter import JupiterInfo, JupitersMoons
from .orbits import mean_conjunction_period, mean_orbital_period
from .solar_system import EclipseInfo, SolarSystem
from .solvers import find_min_max, find_zero
from .timescale import (
    Calendar, add_days, calendar_date, days_in_month, is_valid_date, julian_day,
    last_date_in_month, ut_to_tdb,
)
from .utils import div_rd, mod, mod2, sin_deg

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 1440
PHASE_NAMES = ('new moon', 'first quarter', 'full moon', 'last quarter')
EQUINOX_SOLSTICE_NAMES = ('vernal equinox', 'summer solstice', 'autumnal equinox', 'winter solstice')
PLANET_EVENT_NAMES = {
    OPPOSITION: 'opposition',
    SUPERIOR_CONJUNCTION: 'superior conjunction',
    INFERIOR_CONJUNCTION: 'inferior conjunction',
    GREATEST_ELONGATION: 'greatest elongation',
    PERIHELION: 'perihelion',
    APHELION: 'aphelion',
    QUADRATURE: 'quadrature',
    GRS_TRANSIT_EVENT: 'GRS transit',
}

# Equinoxes and solstices stay in months divisible by three in this range
SAFE_SEASON_YEARS = (-500, 2700)

FIRST_EVENT_GAP = 0.49          # [minutes]
MIN_EVENT_GAP = 5.0             # [minutes]
MAX_SEARCH_TRIES = 1000


# ════════════════════════════════════════════════════════════════════════════
#  Events
# ════════════════════════════════════════════════════════════════════════════

@dataclass
class AstroEvent:
    """One event, stamped to the minute in a fixed-offset time zone."""
    event_type: int
    event_text: str
    year: int
    month: int
    day: int
    hour: int
    minute: int
    ut: float                          # Julian Day (UT) of the stamped minute
    zone: float = 0.0                  # hours east of UTC
    calendar: Calendar = Calendar.STANDARD
    value: float | None = None
    misc_info: Any = None

    @classmethod
    def on_day(cls, event_type: int, event_text: str, year: int, month: int, day: int,
               hour_offset: float, zone: float = 0.0, calendar: Calendar = Calendar.STANDARD,
               value: float | None = None) -> 'AstroEvent':
        """An event ``hour_offset`` hours after local midnight, floored to the minute."""
        minutes = int(min(max(np.floor(hour_offset * 60.0), 0), MINUTES_PER_DAY - 1))
        ut = _start_of_day(year, month, day, zone, calendar) + minutes * MINUTE
        return cls(event_type, event_text, year, month, day, minutes // 60, minutes % 60,
                   ut, zone, calendar, value)

    @classmethod
    def from_jdu(cls, event_type: int, event_text: str, jdu: float, zone: float = 0.0,
                 calendar: Calendar = Calendar.STANDARD,
                 value: float | None = None) -> 'AstroEvent':
        date, hours = calendar_date(jdu + zone / 24.0, calendar)
        return cls.on_day(event_type, event_text, date.year, date.month, date.day, hours,
                          zone, calendar, value)

    def __str__(self) -> str:
        text = (f"{self.event_type}; {self.event_text}; "
                f"{self.year:04d}-{self.month:02d}-{self.day:02d} {self.hour:02d}:{self.minute:02d}")
        if self.value is not None:
            text += f"; {self.value}"
        if isinstance(self.misc_info, str):
            text += f"; {self.misc_info}"
        return text


def _start_of_day(year: int, month: int, day: int, zone: float, calendar: Calendar) -> float:
    return julian_day(year, month, day, calendar=calendar) - zone / 24.0


def _minutes_in_day(year: int, month: int, day: int, calendar: Calendar) -> int:
    """1440, or 0 for dates the calendar skips."""
    return MINUTES_PER_DAY if is_valid_date(year, month, day, calendar) else 0


def _days_of_month(year: int, month: int, calendar: Calendar) -> Iterator[int]:
    for day in range(1, last_date_in_month(year, month, calendar) + 1):
        if is_valid_date(year, month, day, calendar):
            yield day


def _eclipse_text(info: EclipseInfo) -> str:
    if info.total:
        kind = 'total'
    elif info.annular:
        kind = 'annular'
    elif info.hybrid:
        kind = 'hybrid'
    elif info.in_umbra or info.is_solar:
        kind = 'partial'
    else:
        kind = 'penumbral'
    return f"{kind} {'solar' if info.is_solar else 'lunar'} eclipse"


# ════════════════════════════════════════════════════════════════════════════
#  Event Finder
# ════════════════════════════════════════════════════════════════════════════

class EventFinder:
    """Searches for astronomical events.

    Parameters
    ----------
    jupiter_info : JupiterInfo, optional — needed for Great Red Spot transits
    solar_system : SolarSystem, optional — shared ephemeris facade
    """

    def __init__(self, jupiter_info: JupiterInfo | None = None,
                 solar_system: SolarSystem | None = None):
        self.ss = solar_system if solar_system is not None else SolarSystem()
        self.jupiters_moons = JupitersMoons(self.ss)
        self.jupiter_info = jupiter_info

    # ── Lunar Phases ──

    def get_lunar_phase_event(self, year: int, month: int, day: int, zone: float = 0.0,
                              calendar: Calendar = Calendar.STANDARD) -> AstroEvent | None:
        """The principal lunar phase falling on a local calendar day, if any."""
        if _minutes_in_day(year, month, day, calendar) == 0:
            return None

        start = _start_of_day(year, month, day, zone, calendar) - HALF_MINUTE
        start_jde = ut_to_tdb(start)
        end_jde = ut_to_tdb(start + 1.0)
        low = self.ss.get_lunar_phase(start_jde)
        high = self.ss.get_lunar_phase(end_jde)

        # Keep low < high when the day straddles 0°
        if low > 315.0:
            low -= 360.0
        if high > 315.0:
            high -= 360.0

        for index in range(4):
            angle = index * 90.0
            if low <= angle < high:
                result = find_zero(lambda x: mod2(self.ss.get_lunar_phase(x) - angle, 360.0),
                                   0.0001, 6, start_jde, low - angle, end_jde, high - angle)
                hours = (result.x - start_jde) * 24.0
                return AstroEvent.on_day(NEW_MOON + index, PHASE_NAMES[index], year, month, day,
                                         hours, zone, calendar)

        return None

    def get_lunar_phases_for_month(self, year: int, month: int, zone: float = 0.0,
                                   calendar: Calendar = Calendar.STANDARD) -> list[AstroEvent]:
        results = []
        # No two principal phases fall within 4 days, except across a calendar gap
        gap = days_in_month(year, month, calendar) != last_date_in_month(year, month, calendar)
        skip = 0

        for day in _days_of_month(year, month, calendar):
            if skip > 0:
                skip -= 1
                continue
            event = self.get_lunar_phase_event(year, month, day, zone, calendar)
            if event is not None:
                results.append(event)
                if not gap:
                    skip = 4

        return results

    def get_lunar_phases_by_year(self, start_year: int, end_year: int, zone: float = 0.0,
                                 calendar: Calendar = Calendar.STANDARD,
                                 add_padding_months: bool = False) -> Iterator[AstroEvent]:
        """Principal phases from ``start_year`` through ``end_year``, in order.

        With ``add_padding_months`` the scan also covers the month before and
        the month after the range.
        """
        padding = 1 if add_padding_months else 0
        for month_year in range(start_year * 12 - padding, (end_year + 1) * 12 + padding):
            year = div_rd(month_year, 12)
            month = int(mod(month_year, 12)) + 1
            yield from self.get_lunar_phases_for_month(year, month, zone, calendar)

    # ── Equinoxes & Solstices ──

    def get_equinox_solstice_event(self, year: int, month: int, day: int, zone: float = 0.0,
                                   calendar: Calendar = Calendar.STANDARD) -> AstroEvent | None:
        """The equinox or solstice falling on a local calendar day, if any."""
        if month % 3 != 0 and SAFE_SEASON_YEARS[0] < year < SAFE_SEASON_YEARS[1]:
            return None
        if _minutes_in_day(year, month, day, calendar) == 0:
            return None

        start = _start_of_day(year, month, day, zone, calendar) - HALF_MINUTE
        start_jde = ut_to_tdb(start)
        end_jde = ut_to_tdb(start + 1.0)
        low = self._solar_longitude(start_jde)
        high = self._solar_longitude(end_jde)

        if low > 315.0:
            low -= 360.0
        if high > 315.0:
            high -= 360.0

        for index in range(4):
            angle = index * 90.0
            if low <= angle < high:
                result = find_zero(lambda x: mod2(self._solar_longitude(x) - angle, 360.0),
                                   0.00001, 6, start_jde, low - angle, end_jde, high - angle)
                hours = (result.x - start_jde) * 24.0
                return AstroEvent.on_day(SPRING_EQUINOX + index, EQUINOX_SOLSTICE_NAMES[index],
                                         year, month, day, hours, zone, calendar)

        return None

    def _solar_longitude(self, jde: float) -> float:
        return self.ss.get_ecliptic_position(SUN, jde).longitude.degrees

    def _equinox_solstice_in_month(self, year: int, month: int, zone: float,
                                   calendar: Calendar) -> AstroEvent | None:
        for day in _days_of_month(year, month, calendar):
            event = self.get_equinox_solstice_event(year, month, day, zone, calendar)
            if event is not None:
                return event
        return None

    def get_equinoxes_and_solstices_for_one_year(self, year: int, zone: float = 0.0,
                                                 calendar: Calendar = Calendar.STANDARD) -> list[AstroEvent]:
        if SAFE_SEASON_YEARS[0] <= year <= SAFE_SEASON_YEARS[1]:
            months = range(3, 13, 3)
        else:
            months = range(1, 13)

        results = []
        for month in months:
            event = self._equinox_solstice_in_month(year, month, zone, calendar)
            if event is not None:
                results.append(event)
        return results

    def get_equinoxes_and_solstices_by_year(self, start_year: int, end_year: int,
                                            zone: float = 0.0,
                                            calendar: Calendar = Calendar.STANDARD) -> Iterator[AstroEvent]:
        for year in range(start_year, end_year + 1):
            yield from self.get_equinoxes_and_solstices_for_one_year(year, zone, calendar)

    # ── Rising, Setting & Transit ──

    def _altitude(self, body: int, jdu: float, observer) -> float:
        return self.ss.get_horizontal_position(body, jdu, observer).altitude.degrees

    def get_rise_and_set_times(self, body: int, year: int, month: int, day: int, observer,
                               zone: float = 0.0, calendar: Calendar = Calendar.STANDARD,
                               minutes_before: float = 0.0, target_altitude: float | None = None,
                               do_twilight: bool | None = None) -> list[AstroEvent]:
        """Rise and set (or twilight) events on a local calendar day.

        The day is cut into segments (more for the Moon and at high
        latitudes) and each segment in which the altitude passes through
        the target is refined.  A segment in which the body skims the
        target altitude is split into ten.  Two rises or two sets in a day
        are reported as such; a day with neither gives ``VISIBLE_ALL_DAY``
        or ``UNSEEN_ALL_DAY`` (never for twilight).

        Parameters
        ----------
        body : int — body id
        year, month, day : int — local calendar date
        observer : SkyObserverProtocol
        zone : float — hours east of UTC
        calendar : Calendar
        minutes_before : float — shift the day's window by this many minutes
        target_altitude : float, optional — degrees; defaults to the
            refracted horizon, lowered by the mean radius for the Sun and Moon
        do_twilight : bool, optional — label crossings as twilight; defaults
            to True for the Sun with a target at or below civil twilight
        """
        if target_altitude is None:
            target_altitude = -REFRACTION_AT_HORIZON
            if body in (SUN, MOON):
                target_altitude -= AVG_SUN_MOON_RADIUS

        if do_twilight is None:
            do_twilight = body == SUN and target_altitude <= MAX_ALT_FOR_TWILIGHT

        results = []
        minutes_in_day = _minutes_in_day(year, month, day, calendar)
        if minutes_in_day == 0:
            return results

        day_length = minutes_in_day / MINUTES_PER_DAY
        segments = 6
        if body == MOON:
            segments *= 2
        if abs(observer.latitude.degrees) > 60.0:
            segments *= 2

        start_of_day = (_start_of_day(year, month, day, zone, calendar) - HALF_MINUTE
                        + minutes_before * MINUTE)
        start_time = start_of_day
        start_alt = self._altitude(body, start_time, observer)
        midday_alt = -90.0

        for i in range(1, segments + 1):
            if i == segments // 2:
                midday_alt = start_alt

            segment_end = start_of_day + i / segments * day_length
            segment_end_alt = self._altitude(body, segment_end, observer)

            skimming = ((abs(start_alt - target_altitude) < 1.0
                         or abs(segment_end_alt - target_altitude) < 1.0)
                        and abs(start_alt - segment_end_alt) < 2.0)
            subsegments = 10 if skimming else 1

            for j in range(1, subsegments + 1):
                if j < subsegments:
                    end_time = start_of_day + ((i - 1.0) + j / subsegments) / segments * day_length
                    end_alt = self._altitude(body, end_time, observer)
                else:
                    end_time, end_alt = segment_end, segment_end_alt

                if (start_alt <= target_altitude < end_alt
                        or end_alt < target_altitude <= start_alt):
                    if start_alt < end_alt:
                        event_type = TWILIGHT_BEGINS if do_twilight else RISE_EVENT
                        text = 'twilight begins' if do_twilight else 'rise'
                    elif do_twilight:
                        event_type, text = TWILIGHT_ENDS, 'twilight ends'
                    elif minutes_before != 0:
                        event_type, text = SET_EVENT_MINUS_1_MIN, 'set - 1'
                    else:
                        event_type, text = SET_EVENT, 'set'

                    result = find_zero(
                        lambda x: self._altitude(body, x, observer) - target_altitude, 0.001, 8,
                        start_time, start_alt - target_altitude, end_time, end_alt - target_altitude)
                    hours = (result.x - start_of_day) * 24.0
                    results.append(AstroEvent.on_day(event_type, text, year, month, day, hours,
                                                     zone, calendar))

                start_time, start_alt = end_time, end_alt

        if not do_twilight and not results:
            if midday_alt > target_altitude:
                results.append(AstroEvent.on_day(VISIBLE_ALL_DAY, 'visible all day',
                                                 year, month, day, 0.0, zone, calendar))
            else:
                results.append(AstroEvent.on_day(UNSEEN_ALL_DAY, 'unseen all day',
                                                 year, month, day, 0.0, zone, calendar))

        return results

    def _hour_angle(self, body: int, jdu: float, observer) -> float:
        return self.ss.get_hour_angle(body, jdu, observer, SIGNED_HOUR_ANGLE).radians

    def get_transit_times(self, body: int, year: int, month: int, day: int, observer,
                          zone: float = 0.0,
                          calendar: Calendar = Calendar.STANDARD) -> list[AstroEvent]:
        """Upper transits on a local day while the body is above the horizon."""
        results = []
        minutes_in_day = _minutes_in_day(year, month, day, calendar)
        if minutes_in_day == 0:
            return results

        min_altitude = -0.8333 if body in (SUN, MOON) else -REFRACTION_AT_HORIZON
        day_length = minutes_in_day / MINUTES_PER_DAY
        segments = 5
        start_of_day = _start_of_day(year, month, day, zone, calendar) - HALF_MINUTE
        start_time = start_of_day
        start_angle = self._hour_angle(body, start_time, observer)

        for i in range(1, segments + 1):
            end_time = start_of_day + i / segments * day_length
            end_angle = self._hour_angle(body, end_time, observer)

            # No change at all: too close to a pole
            if start_angle == end_angle:
                break

            if start_angle <= 0.0 < end_angle:
                result = find_zero(lambda x: self._hour_angle(body, x, observer), 0.0001, 8,
                                   start_time, start_angle, end_time, end_angle)
                if self._altitude(body, result.x, observer) >= min_altitude:
                    hours = (result.x - start_of_day) * 24.0
                    results.append(AstroEvent.on_day(TRANSIT_EVENT, 'transit', year, month, day,
                                                     hours, zone, calendar))

            start_time, start_angle = end_time, end_angle

        return results

    def get_minutes_of_daylight(self, year: int, month: int, day: int, observer,
                                zone: float = 0.0, calendar: Calendar = Calendar.STANDARD) -> int:
        events = self.get_rise_and_set_times(SUN, year, month, day, observer, zone, calendar)
        minutes_in_day = _minutes_in_day(year, month, day, calendar)

        if len(events) == 1 and events[0].event_type == UNSEEN_ALL_DAY:
            return 0
        if len(events) == 1 and events[0].event_type == VISIBLE_ALL_DAY:
            return minutes_in_day

        start_of_day = _start_of_day(year, month, day, zone, calendar)
        last_time = start_of_day
        last_event = NON_EVENT
        total = 0.0

        for event in events:
            if event.event_type == RISE_EVENT:
                last_event = RISE_EVENT
                last_time = event.ut
            elif event.event_type == SET_EVENT:
                total += event.ut - last_time
                last_event = SET_EVENT

        if last_event == RISE_EVENT:
            total += start_of_day + minutes_in_day / MINUTES_PER_DAY - last_time

        return min(int(round(total * MINUTES_PER_DAY)), minutes_in_day)

    def get_month_of_events(self, body: int, year: int, month: int, observer,
                            zone: float = 0.0, calendar: Calendar = Calendar.STANDARD,
                            target_altitude: float | None = None) -> list[AstroEvent]:
        """A month's equinox/solstice, lunar phases, rises, sets and transits, in time order.

        Giving ``target_altitude`` turns the rise/set search into a twilight search.
        """
        events = []
        for event in self.get_equinoxes_and_solstices_for_one_year(year, zone, calendar):
            if event.month == month:
                events.append(event)
                break

        events.extend(self.get_lunar_phases_for_month(year, month, zone, calendar))

        do_twilight = target_altitude is not None
        if target_altitude is None:
            target_altitude = -REFRACTION_AT_HORIZON
            if body in (SUN, MOON):
                target_altitude -= AVG_SUN_MOON_RADIUS

        for day in _days_of_month(year, month, calendar):
            events.extend(self.get_rise_and_set_times(body, year, month, day, observer, zone,
                                                      calendar, 0, target_altitude, do_twilight))
            events.extend(self.get_transit_times(body, year, month, day, observer, zone, calendar))

        events.sort(key=lambda event: event.ut)
        return events

    def get_rise_and_set_events(self, body: int, year: int, month: int, day: int, day_count: int,
                                observer, zone: float = 0.0,
                                calendar: Calendar = Calendar.STANDARD,
                                twilight_altitude: float | None = None) -> Iterator[list[AstroEvent]]:
        """Per-day lists of rise, set, transit (and Sun twilight) events for ``day_count`` days."""
        for offset in range(day_count):
            date = add_days(offset, year, month, day, calendar)
            y, m, d = date.year, date.month, date.day
            events = self.get_rise_and_set_times(body, y, m, d, observer, zone, calendar,
                                                 0, None, False)
            if body == SUN and twilight_altitude is not None:
                events.extend(self.get_rise_and_set_times(body, y, m, d, observer, zone, calendar,
                                                          0, twilight_altitude, True))
            events.extend(self.get_transit_times(body, y, m, d, observer, zone, calendar))

            if events:
                events.sort(key=lambda event: event.ut)
                yield events

    # ── Galilean Satellites ──

    def get_galilean_moon_events(self, start_jdu: float, end_jdu: float,
                                 include_grs_transits: bool = False, zone: float = 0.0,
                                 calendar: Calendar = Calendar.STANDARD) -> Iterator[AstroEvent]:
        """Transits, occultations, eclipses and shadow transits of the Galilean moons.

        Steps minute by minute, or further when no moon is near a disc
        edge.  Each event carries its ``MoonEvents`` record as
        ``misc_info`` and the skip estimate as ``value``.
        """
        jupiter_info = self.jupiter_info if include_grs_transits else None
        t = np.floor(start_jdu * MINUTES_PER_DAY) / MINUTES_PER_DAY

        while t < end_jdu:
            moon_events = self.jupiters_moons.get_moon_events_for_one_minute_span(
                t, True, jupiter_info)

            if moon_events.count > 0:
                # Stamped to the nearest minute
                event = AstroEvent.from_jdu(GALILEAN_MOON_EVENT, moon_events.text,
                                            t + HALF_MINUTE, zone, calendar,
                                            moon_events.search_delta_t)
                event.misc_info = moon_events
                yield event

            t += moon_events.search_delta_t * MINUTE

    # ── Next / Previous Event ──

    def find_event(self, planet: int, event_type: int, original_time: float, observer=None,
                   zone: float = 0.0, calendar: Calendar = Calendar.STANDARD,
                   do_previous: bool = False, argument: float | None = None) -> AstroEvent | None:
        """The first event of a type after (or before) a UT instant.

        An event counts only if it lies at least half a minute from
        ``original_time`` on the first pass, and five minutes on later
        passes, so that searching from an event's own time finds the next
        one rather than the same one again.

        Parameters
        ----------
        planet : int — body id (ignored for phases, seasons and satellites)
        event_type : int — any event code
        original_time : float — Julian Day (UT) to search from
        observer : SkyObserverProtocol — needed for rise/set/transit/twilight
        zone : float — hours east of UTC
        calendar : Calendar
        do_previous : bool — search backward
        argument : float, optional — for twilight: a negative value is the
            Sun's altitude; a non-negative one shifts the window by minutes

        Returns
        -------
        AstroEvent, or None when the type is unknown or nothing was found
        """
        delta = -1 if do_previous else 1

        # Bias half a minute toward the search direction
        original_time += delta * HALF_MINUTE
        date, _ = calendar_date(original_time + zone / 24.0, calendar)
        year, month, day = date.year, date.month, date.day

        test_time = original_time
        min_event_gap = MIN_EVENT_GAP

        if event_type == GRS_TRANSIT_EVENT and self.jupiter_info is None:
            return None

        for tries in range(MAX_SEARCH_TRIES):
            if event_type in (RISE_EVENT, SET_EVENT, SET_EVENT_MINUS_1_MIN, TRANSIT_EVENT,
                              TWILIGHT_BEGINS, TWILIGHT_ENDS):
                if tries > 0:
                    date = add_days(delta, year, month, day, calendar)
                    year, month, day = date.year, date.month, date.day
                events = self._day_events(planet, event_type, year, month, day, observer,
                                          zone, calendar, argument)

            elif event_type in (SPRING_EQUINOX, SUMMER_SOLSTICE, FALL_EQUINOX, WINTER_SOLSTICE):
                if tries == 1:
                    year += delta
                elif tries > 1:
                    return None
                events = self.get_equinoxes_and_solstices_for_one_year(year, zone, calendar)

            elif event_type in (NEW_MOON, FIRST_QUARTER, FULL_MOON, LAST_QUARTER):
                if tries > 0:
                    date = add_days(delta, year, month, day, calendar)
                    year, month, day = date.year, date.month, date.day
                event = self.get_lunar_phase_event(year, month, day, zone, calendar)
                events = [event] if event is not None else []

            elif event_type in (OPPOSITION, SUPERIOR_CONJUNCTION, INFERIOR_CONJUNCTION,
                                GREATEST_ELONGATION, QUADRATURE, LUNAR_ECLIPSE, SOLAR_ECLIPSE,
                                APHELION, PERIHELION, GRS_TRANSIT_EVENT):
                events, period = self._periodic_events(planet, event_type, test_time, zone, calendar)
                if period <= 0.0:
                    return None
                test_time += period * delta * 0.95

            elif event_type == GALILEAN_MOON_EVENT:
                min_event_gap = FIRST_EVENT_GAP
                test_time = np.floor(test_time * MINUTES_PER_DAY) / MINUTES_PER_DAY
                events = []
                moon_events = self.jupiters_moons.get_moon_events_for_one_minute_span(test_time, True)
                if moon_events.count > 0:
                    event = AstroEvent.from_jdu(GALILEAN_MOON_EVENT, 'Galilean moon', test_time,
                                                zone, calendar, moon_events.search_delta_t)
                    event.misc_info = moon_events.text
                    events.append(event)
                test_time += (delta * moon_events.search_delta_t + 0.1) * MINUTE

            else:
                return None

            event_gap = FIRST_EVENT_GAP if tries == 0 else min_event_gap
            for event in (reversed(events) if do_previous else events):
                if (event.event_type == event_type
                        and (event.ut - original_time) * delta >= event_gap * MINUTE):
                    if event_type == GREATEST_ELONGATION:
                        event.misc_info = self._elongation_text(planet, event)
                    return event

        logger.debug("No event %s for body %s within %s tries of JD %s",
                     event_type, planet, MAX_SEARCH_TRIES, original_time)
        return None

    def _day_events(self, planet: int, event_type: int, year: int, month: int, day: int,
                    observer, zone: float, calendar: Calendar,
                    argument: float | None) -> list[AstroEvent]:
        if event_type in (TWILIGHT_BEGINS, TWILIGHT_ENDS):
            minutes_before = 0.0
            target_altitude = None
            if argument is None:
                target_altitude = NAUTICAL_TWILIGHT
            elif argument < 0:
                target_altitude = argument
            else:
                minutes_before = -argument if event_type == TWILIGHT_ENDS else argument
            return self.get_rise_and_set_times(SUN, year, month, day, observer, zone, calendar,
                                               minutes_before, target_altitude, True)
        if event_type == TRANSIT_EVENT:
            return self.get_transit_times(planet, year, month, day, observer, zone, calendar)
        return self.get_rise_and_set_times(planet, year, month, day, observer, zone, calendar,
                                           1 if event_type == SET_EVENT_MINUS_1_MIN else 0)

    def _periodic_events(self, planet: int, event_type: int, test_time: float, zone: float,
                         calendar: Calendar) -> tuple[list[AstroEvent], float]:
        """Events of one type within a period centred on ``test_time``.

        Returns the events and the period searched [days].
        """
        period = mean_conjunction_period(planet)
        resolution = 1.0 / 24.0 if planet <= MARS else 1.0       # hours or days
        tolerance = 0.0001
        seek_min = seek_max = seek_zero = False
        divisions = 10

        if event_type in (OPPOSITION, SUPERIOR_CONJUNCTION, INFERIOR_CONJUNCTION):
            resolution = MINUTE
            seek_zero = True
        elif event_type == GREATEST_ELONGATION:
            seek_max = True
        elif event_type in (PERIHELION, APHELION):
            period = mean_orbital_period(planet) * 1.25
            if planet >= URANUS:
                divisions = 20
            seek_min = event_type == PERIHELION
            seek_max = event_type == APHELION
        elif event_type in (LUNAR_ECLIPSE, SOLAR_ECLIPSE):
            period = MEAN_SYNODIC_MONTH * 1.25
            resolution = MINUTE
            divisions = 30
            seek_min = True
        elif event_type == QUADRATURE:
            resolution = MINUTE
            seek_max = True
        elif event_type == GRS_TRANSIT_EVENT:
            period = MEAN_JUPITER_SYS_II * 1.25
            resolution = MINUTE
            seek_zero = True

        if period <= 0.0:
            return [], period

        def search_value(x: float) -> float:
            return self.get_event_search_value(planet, event_type, x)

        # One division of padding either side, so an extremum near the edge of
        # the period still has a sample on each side of it.
        step = period / divisions
        times = [test_time - period / 2.0 + (i - 1) * step for i in range(divisions + 3)]
        values = [search_value(t) for t in times]
        events = []

        for i in range(1, len(times)):
            v0, v1 = values[i - 1], values[i]

            if seek_zero and (v0 <= 0.0 < v1 or v1 <= 0.0 < v0):
                # A wrap through ±180°, not a zero
                if abs(v0 - v1) > 180.0:
                    continue
                event_time = find_zero(search_value, tolerance, 10,
                                       times[i - 1], v0, times[i], v1).x
            elif i >= 2 and ((seek_min and values[i - 2] > v0 < v1)
                             or (seek_max and values[i - 2] < v0 > v1)):
                event_time = find_min_max(search_value, 1.0e-10, 100,
                                          times[i - 2], times[i - 1], times[i]).x
            else:
                continue

            if planet in (MERCURY, VENUS) and event_type in (SUPERIOR_CONJUNCTION,
                                                              INFERIOR_CONJUNCTION):
                if self.is_inferior(planet, event_time) != (event_type == INFERIOR_CONJUNCTION):
                    continue

            event_time, best_value = self._resample(search_value, event_time, resolution,
                                                    seek_zero, seek_min)

            info = None
            if event_type == LUNAR_ECLIPSE:
                info = self.ss.get_lunar_eclipse_info(ut_to_tdb(event_time))
                if not info.in_penumbra:
                    continue
            elif event_type == SOLAR_ECLIPSE:
                info = self.ss.get_solar_eclipse_info(ut_to_tdb(event_time))
                if not info.in_penumbra:
                    continue
                # Where the shadow is at the minute the event is stamped with
                info = self.ss.get_solar_eclipse_info(ut_to_tdb(event_time + HALF_MINUTE), True)

            text = _eclipse_text(info) if info is not None else PLANET_EVENT_NAMES[event_type]
            event = AstroEvent.from_jdu(event_type, text, event_time, zone, calendar, best_value)
            event.misc_info = info
            events.append(event)

        return events, period

    @staticmethod
    def _resample(search_value, event_time: float, resolution: float, seek_zero: bool,
                  seek_min: bool) -> tuple[float, float]:
        """Best of eleven fixed-grid samples around ``event_time``.

        The optimizer settles on slightly different instants from slightly
        different brackets; snapping to a grid makes repeated searches agree.
        """
        if resolution == 1.0:
            # Whole days: eleven midnights centred on the event, not starting at it
            moment = np.floor(event_time + 0.5) - 0.5 - 5.0
        else:
            moment = np.floor(event_time / resolution - 4.5) * resolution

        best_time = event_time
        best_value = 0.0
        for j in range(11):
            value = search_value(moment)
            if (j == 0
                    or (seek_zero and abs(best_value) > abs(value))
                    or (seek_min and best_value > value)
                    or (not seek_zero and not seek_min and best_value < value)):
                best_value = value
                best_time = moment
            moment += resolution

        return float(best_time), float(best_value)

    def _elongation_text(self, planet: int, event: AstroEvent) -> str:
        angle = Angle(event.value, Unit.DEGREES).to_string(FMT_DD | FMT_MINS, 0)
        name = self.ss.get_planet_name(planet)
        if self.ss.get_solar_elongation_in_longitude(planet, ut_to_tdb(event.ut)) > 0:
            return f"{name} in evening sky, {angle} east of Sun"
        return f"{name} in morning sky, {angle} west of Sun"

    # ── Search Functions ──

    def get_event_search_value(self, planet: int, event_type: int, jdu: float) -> float:
        """The quantity whose zero or extremum marks an event, at a UT instant."""
        jde = ut_to_tdb(jdu)

        if event_type == OPPOSITION:
            return mod2(self.ss.get_solar_elongation_in_longitude(planet, jde) + 180.0, 360.0)
        if event_type in (SUPERIOR_CONJUNCTION, INFERIOR_CONJUNCTION):
            return mod2(self.ss.get_solar_elongation_in_longitude(planet, jde), 360.0)
        if event_type == GREATEST_ELONGATION:
            return self.ss.get_solar_elongation(planet, jde)
        if event_type in (PERIHELION, APHELION):
            flags = QUICK_PLANET if planet >= NEPTUNE else 0
            return self.ss.get_heliocentric_position(planet, jde, flags).radius
        if event_type == LUNAR_ECLIPSE:
            return self.ss.get_lunar_eclipse_info(jde).center_separation
        if event_type == SOLAR_ECLIPSE:
            return self.ss.get_solar_eclipse_info(jde).center_separation
        if event_type == QUADRATURE:
            return sin_deg(self.ss.get_solar_elongation_in_longitude(planet, jde))**2
        if event_type == GRS_TRANSIT_EVENT and self.jupiter_info is not None:
            return self.jupiter_info.get_grs_cm_offset(jde).degrees
        return 0.0

    def is_inferior(self, planet: int, jdu: float) -> bool:
        """Whether Mercury or Venus is nearer than the Sun."""
        if planet not in (MERCURY, VENUS):
            return False
        jde = ut_to_tdb(jdu)
        sun = self.ss.get_ecliptic_position(SUN, jde)
        body = self.ss.get_ecliptic_position(planet, jde)
        return body.radius < sun.radius
