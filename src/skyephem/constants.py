"""
skyephem.constants — Body Identifiers, Flags & Physical Constants
=================================================================

Shared integer codes and numeric constants used across the ephemeris
engine: body ids, coordinate-calculation flags, event type codes, epoch
Julian dates, radii and time units.

Body ids are small integers for the Sun, planets, Pluto and the Moon;
satellites live in the 5000/6000 ranges and catalog minor bodies above
``ASTEROID_BASE`` / ``COMET_BASE``.
"""

import numpy as np

# ── Epochs ──────────────────────────────────────────────────────────────────
JD_J2000 = 2_451_545.0          # J2000.0
JD_B1950 = 2_433_282.4235       # B1950.0

# ── Body Identifiers ────────────────────────────────────────────────────────
FIRST_PLANET = 0
SUN = 0
MERCURY = 1
VENUS = 2
EARTH = 3
MARS = 4
JUPITER = 5
SATURN = 6
URANUS = 7
NEPTUNE = 8
PLUTO = 9
MOON = 10
LAST_PLANET = 10

FIRST_JUPITER_MOON = 5001
IO = 5001
EUROPA = 5002
GANYMEDE = 5003
CALLISTO = 5004
LAST_JUPITER_MOON = 5004

FIRST_SATURN_MOON = 6001
MIMAS = 6001
ENCELADUS = 6002
TETHYS = 6003
DIONE = 6004
RHEA = 6005
TITAN = 6006
HYPERION = 6007
IAPETUS = 6008
LAST_SATURN_MOON = 6008

ASTEROID_BASE = 20_000          # first asteroid is ASTEROID_BASE + 1
ASTEROID_MAX = 29_999
COMET_BASE = 30_000             # first comet is COMET_BASE + 1
COMET_MAX = 39_999

NO_MATCH = -(2 ** 53 - 1)

# ── Calculation Flags ───────────────────────────────────────────────────────
LOW_PRECISION = 0x0001          # several arcseconds of error acceptable
HIGH_PRECISION = 0x0002
NUTATION = 0x0004
TOPOCENTRIC = 0x0008            # as opposed to geocentric
REFRACTION = 0x0010             # horizontal coordinates only
QUICK_SUN = 0x0020              # closed-form solar formula
QUICK_PLANET = 0x0040           # mean orbital elements instead of series
ABERRATION = 0x0080             # full planetary aberration
ASTROMETRIC = 0x0100            # light delay without aberration
TRUE_DISTANCE = 0x0200          # undelayed distance with delayed position
DELAYED_TIME = 0x0400           # report T − τ in place of distance
SIGNED_HOUR_ANGLE = 0x0800      # ±12h instead of 0..24h
NO_PRECESSION = 0x1000          # J2000 equinox rather than equinox of date
DEFAULT_FLAGS = 0x4000_0000     # derive flags from context

MIN_YEAR = -6000
MAX_YEAR = 9999

# ── Event Codes ─────────────────────────────────────────────────────────────
NON_EVENT = -1

IN_BETWEEN_PHASES = -1
PHASE_EVENT_BASE = 0
NEW_MOON = 0
FIRST_QUARTER = 1
FULL_MOON = 2
LAST_QUARTER = 3

NOT_EQUINOX_OR_SOLSTICE = -2
EQ_SOLSTICE_EVENT_BASE = 100
SPRING_EQUINOX = 100
SUMMER_SOLSTICE = 101
FALL_EQUINOX = 102
WINTER_SOLSTICE = 103

RISE_SET_EVENT_BASE = 200
RISE_EVENT = 200
SET_EVENT = 201
VISIBLE_ALL_DAY = 202
UNSEEN_ALL_DAY = 203
TRANSIT_EVENT = 204
TWILIGHT_BEGINS = 205
TWILIGHT_ENDS = 206
SET_EVENT_MINUS_1_MIN = 207

PLANET_EVENT_BASE = 300
OPPOSITION = 300
SUPERIOR_CONJUNCTION = 301
INFERIOR_CONJUNCTION = 302
GREATEST_ELONGATION = 303
PERIHELION = 304
APHELION = 305
QUADRATURE = 306

LUNAR_ECLIPSE = 400
SOLAR_ECLIPSE = 401
GALILEAN_MOON_EVENT = 500
GRS_TRANSIT_EVENT = 600

# ── Twilight Altitudes [deg] ────────────────────────────────────────────────
CIVIL_TWILIGHT = -6.0
NAUTICAL_TWILIGHT = -12.0
ASTRONOMICAL_TWILIGHT = -18.0
MAX_ALT_FOR_TWILIGHT = CIVIL_TWILIGHT

# ── Physical Constants ──────────────────────────────────────────────────────
EARTH_RADIUS_KM = 6378.14       # equatorial
EARTH_RADIUS_POLAR_KM = 6356.755
SUN_RADIUS_KM = 696_000.0
MOON_RADIUS_KM = 1737.4
KM_PER_AU = 1.49597870691e8
LIGHT_DAYS_PER_AU = 0.005775518328
MEAN_JUPITER_SYS_II = 0.4137042242  # rotation period [days]
MEAN_SYNODIC_MONTH = 29.530589      # [days]
REFRACTION_AT_HORIZON = 0.5833      # [deg]
AVG_SUN_MOON_RADIUS = 0.25          # [deg]
UNKNOWN_MAGNITUDE = 10_000.0
OBLIQUITY_J2000 = 23.43929111       # [deg]
K_DEG = 0.98560766860142            # Gaussian gravitational constant [deg/day]
K_RAD = np.deg2rad(K_DEG)

JUPITER_FLATTENING = 1.069303       # equatorial / polar radius
SATURN_FLATTENING = 1.120699

GALACTIC_NORTH_B1950 = (192.25, 27.4)   # RA, Dec [deg]
GALACTIC_ASCENDING_NODE_B1950 = 33.0    # [deg]

# ── Time Units [days] ───────────────────────────────────────────────────────
DAY = 1.0
HALF_DAY = 0.5
HOUR = 1.0 / 24.0
HALF_HOUR = 1.0 / 48.0
MINUTE = 1.0 / 1440.0
HALF_MINUTE = 1.0 / 2880.0
SECOND = 1.0 / 86400.0
DAYS_PER_CENTURY = 36_525.0
