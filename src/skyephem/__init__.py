"""
skyephem — Solar-System Ephemeris & Event Finder
================================================

A NumPy library for computing where solar-system bodies appear in the sky
and when astronomical events happen: positions of the Sun, Moon, planets,
Pluto, catalog asteroids and comets, the Galilean and major Saturnian
satellites, and the instants of lunar phases, equinoxes and solstices,
rising/setting/transit/twilight, planetary phenomena, eclipses and Great
Red Spot transits.

Frames and time scales::

    heliocentric ecliptic  →  geocentric ecliptic (light time, aberration)
                           →  + nutation  →  equatorial  →  topocentric
                           →  horizontal (azimuth from north, refraction)

    UT (Julian Day)  ←→  TDB/TT (JDE)  via Delta-T

Positions are ``SphericalPosition3D`` (longitude, latitude, radius in AU)
with ``Angle`` components; event times are UT Julian Days stamped to the
minute in a fixed UTC-offset zone.

Reference
---------
Meeus, J. (1998). *Astronomical Algorithms*, 2nd ed., Willmann-Bell.
"""

from .angle import (
    Angle, Unit, Mode,
    FMT_DD, FMT_HH, FMT_DDD, FMT_MINS, FMT_SECS, FMT_SIGNED,
)

from .spherical import SphericalPosition, SphericalPosition3D

from .timescale import (
    Calendar, CalendarDate,
    day_number, date_from_day_number, julian_day, calendar_date,
    days_in_month, last_date_in_month, add_days, is_valid_date, day_of_week,
    delta_t, ut_to_tdb, tdb_to_ut, gmst_degrees,
)

from .solvers import SolverResult, find_zero, find_min_max

from .ecliptic import (
    Ecliptic, Nutation, NutationMode,
    precess_equatorial, precess_ecliptical,
    equatorial_to_galactic, galactic_to_equatorial,
)

from .kepler import KeplerConvergenceError, Regime, solve_orbit

from .orbits import (
    OrbitalElements,
    get_mean_orbital_elements, heliocentric_from_elements,
    mean_orbital_period, mean_conjunction_period,
)

from .minor_bodies import MinorBodies, ObjectInfo, ConvergenceMemo, is_asteroid, is_comet

from .satellites import MoonEvent, MoonEvents, MoonInfo, get_moon_name, get_moon_by_name
from .jupiter import JupitersMoons, JupiterInfo, DataQuality
from .saturn import SaturnMoons

from .solar_system import (
    SolarSystem, EclipseInfo, RingInfo,
    is_nominal_planet, is_true_planet, is_asteroid_or_comet, orbits_sun,
)

from .observer import SkyObserver, SkyObserverProtocol
from .refraction import refracted_altitude, unrefracted_altitude
from .events import AstroEvent, EventFinder
from .config import configure_logging

__version__ = "1.0.0"
__all__ = [
    # ── Angles & positions ──
    "Angle", "Unit", "Mode",
    "FMT_DD", "FMT_HH", "FMT_DDD", "FMT_MINS", "FMT_SECS", "FMT_SIGNED",
    "SphericalPosition", "SphericalPosition3D",
    # ── Calendar & time scales ──
    "Calendar", "CalendarDate",
    "day_number", "date_from_day_number", "julian_day", "calendar_date",
    "days_in_month", "last_date_in_month", "add_days", "is_valid_date", "day_of_week",
    "delta_t", "ut_to_tdb", "tdb_to_ut", "gmst_degrees",
    # ── Solvers ──
    "SolverResult", "find_zero", "find_min_max",
    # ── Frames ──
    "Ecliptic", "Nutation", "NutationMode",
    "precess_equatorial", "precess_ecliptical",
    "equatorial_to_galactic", "galactic_to_equatorial",
    # ── Orbits ──
    "KeplerConvergenceError", "Regime", "solve_orbit",
    "OrbitalElements", "get_mean_orbital_elements", "heliocentric_from_elements",
    "mean_orbital_period", "mean_conjunction_period",
    "MinorBodies", "ObjectInfo", "ConvergenceMemo", "is_asteroid", "is_comet",
    # ── Satellites ──
    "MoonEvent", "MoonEvents", "MoonInfo", "get_moon_name", "get_moon_by_name",
    "JupitersMoons", "JupiterInfo", "DataQuality", "SaturnMoons",
    # ── Facade ──
    "SolarSystem", "EclipseInfo", "RingInfo",
    "is_nominal_planet", "is_true_planet", "is_asteroid_or_comet", "orbits_sun",
    "SkyObserver", "SkyObserverProtocol",
    "refracted_altitude", "unrefracted_altitude",
    # ── Events ──
    "AstroEvent", "EventFinder",
    "configure_logging",
]
