"""
skyephem.moon — Lunar Ephemeris
===============================

Geocentric ecliptic position of the Moon from the principal terms of the
ELP-2000/82 theory as abridged by Meeus: 60 periodic terms in longitude
and distance, 60 in latitude, plus the additive Venus, Jupiter and
flattening terms.  Accuracy is about 10″ in longitude and 4″ in latitude.

Terms whose solar-anomaly multiplier is ±1 or ±2 are scaled by E or E²
to account for the decreasing eccentricity of Earth's orbit.

The returned position is geometric (the 0.7″ light-time correction built
into the mean longitude is removed), referred to the mean equinox of date,
with the distance in AU.

Reference
---------
Meeus, J. (1998). *Astronomical Algorithms*, 2nd ed., Willmann-Bell,
Ch. 47, Tables 47.A and 47.B.
"""

import numpy as np

from .angle import Unit
from .cache import RingCache
from .constants import DAYS_PER_CENTURY, JD_J2000, KM_PER_AU
from .spherical import SphericalPosition3D
from .utils import sin_deg

# ── Periodic Terms ──────────────────────────────────────────────────────────
# (D, M, M', F, Σl coeff [1e-6 deg], Σr coeff [1e-3 km])
_LON_DIST_TERMS = np.array([
    (0, 0, 1, 0, 6288774, -20905355),
    (2, 0, -1, 0, 1274027, -3699111),
    (2, 0, 0, 0, 658314, -2955968),
    (0, 0, 2, 0, 213618, -569925),
    (0, 1, 0, 0, -185116, 48888),
    (0, 0, 0, 2, -114332, -3149),
    (2, 0, -2, 0, 58793, 246158),
    (2, -1, -1, 0, 57066, -152138),
    (2, 0, 1, 0, 53322, -170733),
    (2, -1, 0, 0, 45758, -204586),
    (0, 1, -1, 0, -40923, -129620),
    (1, 0, 0, 0, -34720, 108743),
    (0, 1, 1, 0, -30383, 104755),
    (2, 0, 0, -2, 15327, 10321),
    (0, 0, 1, 2, -12528, 0),
    (0, 0, 1, -2, 10980, 79661),
    (4, 0, -1, 0, 10675, -34782),
    (0, 0, 3, 0, 10034, -23210),
    (4, 0, -2, 0, 8548, -21636),
    (2, 1, -1, 0, -7888, 24208),
    (2, 1, 0, 0, -6766, 30824),
    (1, 0, -1, 0, -5163, -8379),
    (1, 1, 0, 0, 4987, -16675),
    (2, -1, 1, 0, 4036, -12831),
    (2, 0, 2, 0, 3994, -10445),
    (4, 0, 0, 0, 3861, -11650),
    (2, 0, -3, 0, 3665, 14403),
    (0, 1, -2, 0, -2689, -7003),
    (2, 0, -1, 2, -2602, 0),
    (2, -1, -2, 0, 2390, 10056),
    (1, 0, 1, 0, -2348, 6322),
    (2, -2, 0, 0, 2236, -9884),
    (0, 1, 2, 0, -2120, 5751),
    (0, 2, 0, 0, -2069, 0),
    (2, -2, -1, 0, 2048, -4950),
    (2, 0, 1, -2, -1773, 4130),
    (2, 0, 0, 2, -1595, 0),
    (4, -1, -1, 0, 1215, -3958),
    (0, 0, 2, 2, -1110, 0),
    (3, 0, -1, 0, -892, 3258),
    (2, 1, 1, 0, -810, 2616),
    (4, -1, -2, 0, 759, -1897),
    (0, 2, -1, 0, -713, -2117),
    (2, 2, -1, 0, -700, 2354),
    (2, 1, -2, 0, 691, 0),
    (2, -1, 0, -2, 596, 0),
    (4, 0, 1, 0, 549, -1423),
    (0, 0, 4, 0, 537, -1117),
    (4, -1, 0, 0, 520, -1571),
    (1, 0, -2, 0, -487, -1739),
    (2, 1, 0, -2, -399, 0),
    (0, 0, 2, -2, -381, -4421),
    (1, 1, 1, 0, 351, 0),
    (3, 0, -2, 0, -340, 0),
    (4, 0, -3, 0, 330, 0),
    (2, -1, 2, 0, 327, 0),
    (0, 2, 1, 0, -323, 1165),
    (1, 1, -1, 0, 299, 0),
    (2, 0, 3, 0, 294, 0),
    (2, 0, -1, -2, 0, 8752),
])

# (D, M, M', F, Σb coeff [1e-6 deg])
_LAT_TERMS = np.array([
    (0, 0, 0, 1, 5128122),
    (0, 0, 1, 1, 280602),
    (0, 0, 1, -1, 277693),
    (2, 0, 0, -1, 173237),
    (2, 0, -1, 1, 55413),
    (2, 0, -1, -1, 46271),
    (2, 0, 0, 1, 32573),
    (0, 0, 2, 1, 17198),
    (2, 0, 1, -1, 9266),
    (0, 0, 2, -1, 8822),
    (2, -1, 0, -1, 8216),
    (2, 0, -2, -1, 4324),
    (2, 0, 1, 1, 4200),
    (2, 1, 0, -1, -3359),
    (2, -1, -1, 1, 2463),
    (2, -1, 0, 1, 2211),
    (2, -1, -1, -1, 2065),
    (0, 1, -1, -1, -1870),
    (4, 0, -1, -1, 1828),
    (0, 1, 0, 1, -1794),
    (0, 0, 0, 3, -1749),
    (0, 1, -1, 1, -1565),
    (1, 0, 0, 1, -1491),
    (0, 1, 1, 1, -1475),
    (0, 1, 1, -1, -1410),
    (0, 1, 0, -1, -1344),
    (1, 0, 0, -1, -1335),
    (0, 0, 3, 1, 1107),
    (4, 0, 0, -1, 1021),
    (4, 0, -1, 1, 833),
    (0, 0, 1, -3, 777),
    (4, 0, -2, 1, 671),
    (2, 0, 0, -3, 607),
    (2, 0, 2, -1, 596),
    (2, -1, 1, -1, 491),
    (2, 0, -2, 1, -451),
    (0, 0, 3, -1, 439),
    (2, 0, 2, 1, 422),
    (2, 0, -3, -1, 421),
    (2, 1, -1, 1, -366),
    (2, 1, 0, 1, -351),
    (4, 0, 0, 1, 331),
    (2, -1, 1, 1, 315),
    (2, -2, 0, -1, 302),
    (0, 0, 1, 3, -283),
    (2, 1, 1, -1, -229),
    (1, 1, 0, -1, 223),
    (1, 1, 0, 1, 223),
    (0, 1, -2, -1, -220),
    (2, 1, -1, -1, -220),
    (1, 0, 1, 1, -185),
    (2, -1, -2, -1, 181),
    (0, 1, 2, 1, -177),
    (4, 0, -2, -1, 176),
    (4, -1, -1, -1, 166),
    (1, 0, 1, -1, -164),
    (4, 0, 1, -1, 132),
    (1, 0, -1, -1, -119),
    (4, -1, 0, -1, 115),
    (2, -2, 0, 1, 107),
])

MEAN_DISTANCE_KM = 385_000.56
CACHE_SIZE = 6


def _eccentricity_factor(multipliers, E: float):
    """E^|m| for solar-anomaly multipliers m ∈ {-2..2}."""
    return E ** np.abs(multipliers)


def lunar_position(jde: float) -> SphericalPosition3D:
    """Geocentric ecliptic longitude, latitude [deg] and distance [AU].

    Parameters
    ----------
    jde : float — Julian Ephemeris Day (dynamical time)

    Returns
    -------
    SphericalPosition3D — mean equinox of date, radius in AU
    """
    T = (jde - JD_J2000) / DAYS_PER_CENTURY

    # Fundamental arguments [deg]
    # L' — mean longitude, with the 0.7″ light-time term taken back out
    L1 = (218.3164477 + 481267.88123421 * T - 0.0015786 * T**2
          + T**3 / 538841.0 - T**4 / 65194000.0 + 0.0001944)
    # D — mean elongation
    D = (297.8501921 + 445267.1114034 * T - 0.0018819 * T**2
         + T**3 / 545868.0 - T**4 / 113065000.0)
    # M — Sun's mean anomaly
    M = 357.5291092 + 35999.0502909 * T - 0.0001536 * T**2 + T**3 / 24490000.0
    # M' — Moon's mean anomaly
    M1 = (134.9633964 + 477198.8675055 * T + 0.0087414 * T**2
          + T**3 / 69699.0 - T**4 / 14712000.0)
    # F — argument of latitude
    F = (93.2720950 + 483202.0175233 * T - 0.0036539 * T**2
         - T**3 / 3526000.0 + T**4 / 863310000.0)

    A1 = 119.75 + 131.849 * T
    A2 = 53.09 + 479264.290 * T
    A3 = 313.45 + 481266.484 * T
    E = 1.0 - 0.002516 * T - 0.0000074 * T**2

    fundamentals = np.array([D, M, M1, F])

    lr = _LON_DIST_TERMS
    arg = np.deg2rad(lr[:, :4] @ fundamentals)
    ecc = _eccentricity_factor(lr[:, 1], E)
    sum_l = np.sum(lr[:, 4] * ecc * np.sin(arg))
    sum_r = np.sum(lr[:, 5] * ecc * np.cos(arg))

    b = _LAT_TERMS
    arg = np.deg2rad(b[:, :4] @ fundamentals)
    sum_b = np.sum(b[:, 4] * _eccentricity_factor(b[:, 1], E) * np.sin(arg))

    sum_l += 3958.0 * sin_deg(A1) + 1962.0 * sin_deg(L1 - F) + 318.0 * sin_deg(A2)
    sum_b += (-2235.0 * sin_deg(L1) + 382.0 * sin_deg(A3) + 175.0 * sin_deg(A1 - F)
              + 175.0 * sin_deg(A1 + F) + 127.0 * sin_deg(L1 - M1) - 115.0 * sin_deg(L1 + M1))

    longitude = L1 + sum_l / 1.0e6
    latitude = sum_b / 1.0e6
    distance_km = MEAN_DISTANCE_KM + sum_r / 1000.0

    return SphericalPosition3D(longitude, latitude, distance_km / KM_PER_AU,
                               Unit.DEGREES, Unit.DEGREES)


class MeeusMoon:
    """Lunar position provider memoizing the most recent instants."""

    def __init__(self, cache_size: int = CACHE_SIZE):
        self._cache: RingCache[float, SphericalPosition3D] = RingCache(cache_size)

    def get_ecliptic_position(self, jde: float) -> SphericalPosition3D:
        return self._cache.get_or_compute(jde, lambda: lunar_position(jde))
