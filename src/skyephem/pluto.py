"""
skyephem.pluto — Heliocentric Position of Pluto
===============================================

Vitagliano's periodic-term theory for Pluto: 43 terms in three slow
arguments (the mean longitudes of Jupiter, Saturn and Pluto) giving
heliocentric longitude, latitude and radius vector for the J2000.0
equinox, which are then precessed to the equinox of date.

Valid between 1885 and 2099; outside that span the result degrades
gradually rather than failing.

Reference
---------
Meeus, J. (1998). *Astronomical Algorithms*, 2nd ed., Willmann-Bell,
Ch. 37, Table 37.A.
"""

import numpy as np

from .angle import Unit
from .cache import RingCache
from .constants import DAYS_PER_CENTURY, JD_J2000
from .ecliptic import precess_ecliptical_3d
from .spherical import SphericalPosition3D

# (J, S, P, lon sin, lon cos, lat sin, lat cos [1e-6 deg], rad sin, rad cos [1e-7 AU])
_TERMS = np.array([
    (0, 0, 1, -19799805, 19850055, -5452852, -14974862, 66865439, 68951812),
    (0, 0, 2, 897144, -4954829, 3527812, 1672790, -11827535, -332538),
    (0, 0, 3, 611149, 1211027, -1050748, 327647, 1593179, -1438890),
    (0, 0, 4, -341243, -189585, 178690, -292153, -18444, 483220),
    (0, 0, 5, 129287, -34992, 18650, 100340, -65977, -85431),
    (0, 0, 6, -38164, 30893, -30697, -25823, 31174, -6032),
    (0, 1, -1, 20442, -9987, 4878, 11248, -5794, 22161),
    (0, 1, 0, -4063, -5071, 226, -64, 4601, 4032),
    (0, 1, 1, -6016, -3336, 2030, -836, -1729, 234),
    (0, 1, 2, -3956, 3039, 69, -604, -415, 702),
    (0, 1, 3, -667, 3572, -247, -567, 239, 723),
    (0, 2, -2, 1276, 501, -57, 1, 67, -67),
    (0, 2, -1, 1152, -917, -122, 175, 1034, -451),
    (0, 2, 0, 630, -1277, -49, -164, -129, 504),
    (1, -1, 0, 2571, -459, -197, 199, 480, -231),
    (1, -1, 1, 899, -1449, -25, 217, 2, -441),
    (1, 0, -3, -1016, 1043, 589, -248, -3359, 265),
    (1, 0, -2, -2343, -1012, -269, 711, 7856, -7832),
    (1, 0, -1, 7042, 788, 185, 193, 36, 45763),
    (1, 0, 0, 1199, -338, 315, 807, 8663, 8547),
    (1, 0, 1, 418, -67, -130, -43, -809, -769),
    (1, 0, 2, 120, -274, 5, 3, 263, -144),
    (1, 0, 3, -60, -159, 2, 17, -126, 32),
    (1, 0, 4, -82, -29, 2, 5, -35, -16),
    (1, 1, -3, -36, -29, 2, 3, -19, -4),
    (1, 1, -2, -40, 7, 3, 1, -15, 8),
    (1, 1, -1, -14, 22, 2, -1, -4, 12),
    (1, 1, 0, 4, 13, 1, -1, 5, 6),
    (1, 1, 1, 5, 2, 0, -1, 3, 1),
    (1, 1, 3, -1, 0, 0, 0, 6, -2),
    (2, 0, -6, 2, 0, 0, -2, 2, 2),
    (2, 0, -5, -4, 5, 2, 2, -2, -2),
    (2, 0, -4, 4, -7, -7, 0, 14, 13),
    (2, 0, -3, 14, 24, 10, -8, -63, 13),
    (2, 0, -2, -49, -34, -3, 20, 136, -236),
    (2, 0, -1, 163, -48, 6, 5, 273, 1065),
    (2, 0, 0, 9, -24, 14, 17, 251, 149),
    (2, 0, 1, -4, 1, -2, 0, -25, -9),
    (2, 0, 2, -3, 1, 0, 0, 9, -2),
    (2, 0, 3, 1, 3, 0, 0, -8, 7),
    (3, 0, -2, -3, -1, 0, 1, 2, -10),
    (3, 0, -1, 5, -3, 0, 0, 19, 35),
    (3, 0, 0, 0, 0, 1, 0, 10, 3),
])

_ANGLE_SCALE = 1.0e-6
_RADIUS_SCALE = 1.0e-7


def pluto_position(jde: float) -> SphericalPosition3D:
    """Heliocentric ecliptic position of Pluto, equinox of date.

    Parameters
    ----------
    jde : float — Julian Ephemeris Day

    Returns
    -------
    SphericalPosition3D — longitude/latitude, radius in AU
    """
    T = (jde - JD_J2000) / DAYS_PER_CENTURY
    J = 34.35 + 3034.9057 * T
    S = 50.08 + 1222.1138 * T
    P = 238.96 + 144.9600 * T

    arg = np.deg2rad(_TERMS[:, :3] @ np.array([J, S, P]))
    sin_a = np.sin(arg)
    cos_a = np.cos(arg)

    L = 238.958116 + 144.96 * T + _ANGLE_SCALE * np.sum(_TERMS[:, 3] * sin_a + _TERMS[:, 4] * cos_a)
    B = -3.908239 + _ANGLE_SCALE * np.sum(_TERMS[:, 5] * sin_a + _TERMS[:, 6] * cos_a)
    R = 40.7241346 + _RADIUS_SCALE * np.sum(_TERMS[:, 7] * sin_a + _TERMS[:, 8] * cos_a)

    j2000 = SphericalPosition3D(L, B, R, Unit.DEGREES, Unit.DEGREES)
    return precess_ecliptical_3d(j2000, jde)


class Pluto:
    """Pluto position provider remembering the most recent instant."""

    def __init__(self, cache_size: int = 1):
        self._cache: RingCache[float, SphericalPosition3D] = RingCache(cache_size)

    def get_heliocentric_position(self, jde: float) -> SphericalPosition3D:
        return self._cache.get_or_compute(jde, lambda: pluto_position(jde))
