"""
skyephem.jupiter — Galilean Satellites & Jupiter's Rotation
===========================================================

Capabilities
------------
- ``JupitersMoons`` — positions of Io, Europa, Ganymede and Callisto from
  Lieske's E5 theory, with transit, occultation, eclipse and shadow events
  and optional Great Red Spot transits
- ``JupiterInfo`` — System I and System II central-meridian longitudes,
  and the longitude of the Great Red Spot from an observed drift table

Great Red Spot table format (text)::

    <drift before the table, deg/year>
    <drift after the table, deg/year>
    <interpolation span, days>
    YYYY-MM-DD,<System II longitude>
    ...

Reference
---------
Meeus, J. (1998). *Astronomical Algorithms*, 2nd ed., Willmann-Bell,
Ch. 43, 44.
Lieske, J.H. (1998). *A&AS* 129, 205–217.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import IntEnum

import numpy as np

from .angle import Angle, Unit
from .config import get_grs_file
from .constants import (
    DELAYED_TIME, FIRST_JUPITER_MOON, JD_J2000, JUPITER, JUPITER_FLATTENING,
    LAST_JUPITER_MOON, MEAN_JUPITER_SYS_II,
)
from .orbits import get_mean_orbital_elements
from .satellites import MoonEvents, PlanetaryMoons, extend_delimited, register_moon_names, rotate
from .timescale import Calendar, julian_day, tdb_to_ut
from .utils import asin_deg, atan_deg, cos_deg, interpolate_tabular, limit_neg1_to1, sin_deg

logger = logging.getLogger(__name__)

MOON_NAMES = ('Io', 'Europa', 'Ganymede', 'Callisto')
register_moon_names(FIRST_JUPITER_MOON, LAST_JUPITER_MOON, MOON_NAMES,
                    [f'Shadow of {name}' for name in MOON_NAMES])

PI_J = 13.469942                # longitude of Jupiter's perihelion [deg]
JUPITER_RADII_PER_AU = 2095.0


# ════════════════════════════════════════════════════════════════════════════
#  E5 Periodic Terms
# ════════════════════════════════════════════════════════════════════════════
# Each returns the moon's Jovicentric longitude L and latitude B [deg],
# radius R [Jupiter radii] and the light-time constant K.

def _io(l1, l2, l3, l4, p1, p2, p3, p4, w1, w2, w3, w4, psi, G, G1, PHI_l):
    S = (0.47259 * sin_deg(2.0 * (l1 - l2))
        - 0.03478 * sin_deg(p3 - p4)
        + 0.01081 * sin_deg(l2 - 2.0 * l3 + p3)
        + 0.00738 * sin_deg(PHI_l)
        + 0.00713 * sin_deg(l2 - 2.0 * l3 + p2)
        - 0.00674 * sin_deg(p1 + p3 - 2.0 * PI_J - 2.0 * G)
        + 0.00666 * sin_deg(l2 - 2.0 * l3 + p4)
        + 0.00445 * sin_deg(l1 - p3)
        - 0.00354 * sin_deg(l1 - l2)
        - 0.00317 * sin_deg(2.0 * psi - 2.0 * PI_J)
        + 0.00265 * sin_deg(l1 - p4)
        - 0.00186 * sin_deg(G)
        + 0.00162 * sin_deg(p2 - p3)
        + 0.00158 * sin_deg(4.0 * (l1 - l2))
        - 0.00155 * sin_deg(l1 - l3)
        - 0.00138 * sin_deg(psi + w3 - 2.0 * PI_J - 2.0 * G)
        - 0.00115 * sin_deg(2.0 * (l1 - 2.0 * l2 + w2))
        + 0.00089 * sin_deg(p2 - p4)
        + 0.00085 * sin_deg(l1 + p3 - 2.0 * PI_J - 2.0 * G)
        + 0.00083 * sin_deg(w2 - w3)
        + 0.00053 * sin_deg(psi - w2))

    L = l1 + S

    B = atan_deg(
        + 0.0006393 * sin_deg(L - w1)
        + 0.0001825 * sin_deg(L - w2)
        + 0.0000329 * sin_deg(L - w3)
        - 0.0000311 * sin_deg(L - psi)
        + 0.0000093 * sin_deg(L - w4)
        + 0.0000075 * sin_deg(3.0 * L - 4.0 * l2 - 1.9927 * S + w2)
        + 0.0000046 * sin_deg(L + psi - 2.0 * PI_J - 2.0 * G))

    R = 5.90569 * (1.0
        - 0.0041339 * cos_deg(2.0 * (l1 - l2))
        - 0.0000387 * cos_deg(l1 - p3)
        - 0.0000214 * cos_deg(l1 - p4)
        + 0.0000170 * cos_deg(l1 - l2)
        - 0.0000131 * cos_deg(4.0 * (l1 - l2))
        + 0.0000106 * cos_deg(l1 - l3)
        - 0.0000066 * cos_deg(l1 + p3 - 2.0 * PI_J - 2.0 * G))

    K = 17295.0
    return L, B, R, K


def _europa(l1, l2, l3, l4, p1, p2, p3, p4, w1, w2, w3, w4, psi, G, G1, PHI_l):
    S = (1.06476 * sin_deg(2.0 * (l2 - l3))
        + 0.04256 * sin_deg(l1 - 2.0 * l2 + p3)
        + 0.03581 * sin_deg(l2 - p3)
        + 0.02395 * sin_deg(l1 - 2.0 * l2 + p4)
        + 0.01984 * sin_deg(l2 - p4)
        - 0.01778 * sin_deg(PHI_l)
        + 0.01654 * sin_deg(l2 - p2)
        + 0.01334 * sin_deg(l2 - 2.0 * l3 + p2)
        + 0.01294 * sin_deg(p3 - p4)
        - 0.01142 * sin_deg(l2 - l3)
        - 0.01057 * sin_deg(G)
        - 0.00775 * sin_deg(2.0 * (psi - PI_J))
        + 0.00524 * sin_deg(2.0 * (l1 - l2))
        - 0.00460 * sin_deg(l1 - l3)
        + 0.00316 * sin_deg(psi - 2.0 * G + w3 - 2.0 * PI_J)
        - 0.00203 * sin_deg(p1 + p3 - 2.0 * PI_J - 2.0 * G)
        + 0.00146 * sin_deg(psi - w3)
        - 0.00145 * sin_deg(2.0 * G)
        + 0.00125 * sin_deg(psi - w4)
        - 0.00115 * sin_deg(l1 - 2.0 * l3 + p3)
        - 0.00094 * sin_deg(2.0 * (l2 - w2))
        + 0.00086 * sin_deg(2.0 * (l1 - 2.0 * l2 + w2))
        - 0.00086 * sin_deg(5.0 * G1 - 2.0 * G + 52.225)
        - 0.00078 * sin_deg(l2 - l4)
        - 0.00064 * sin_deg(3.0 * l3 - 7.0 * l4 + 4.0 * p4)
        + 0.00064 * sin_deg(p1 - p4)
        - 0.00063 * sin_deg(l1 - 2.0 * l3 + p4)
        + 0.00058 * sin_deg(w3 - w4)
        + 0.00056 * sin_deg(2.0 * (psi - PI_J - G))
        + 0.00056 * sin_deg(2.0 * (l2 - l4))
        + 0.00055 * sin_deg(2.0 * (l1 - l3))
        + 0.00052 * sin_deg(3.0 * l3 - 7.0 * l4 + p3 + 3.0 * p4)
        - 0.00043 * sin_deg(l1 - p3)
        + 0.00041 * sin_deg(5.0 * (l2 - l3))
        + 0.00041 * sin_deg(p4 - PI_J)
        + 0.00032 * sin_deg(w2 - w3)
        + 0.00032 * sin_deg(2.0 * (l3 - G - PI_J)))

    L = l2 + S

    B = atan_deg(
        + 0.0081004 * sin_deg(L - w2)
        + 0.0004512 * sin_deg(L - w3)
        - 0.0003284 * sin_deg(L - psi)
        + 0.0001160 * sin_deg(L - w4)
        + 0.0000272 * sin_deg(l1 - 2.0 * l3 + 1.0146 * S + w2)
        - 0.0000144 * sin_deg(L - w1)
        + 0.0000143 * sin_deg(L + psi - 2.0 * PI_J - 2.0 * G)
        + 0.0000035 * sin_deg(L - psi + G)
        - 0.0000028 * sin_deg(l1 - 2.0 * l3 + 1.0146 * S + w3))

    R = 9.39657 * (1.0
        + 0.0093848 * cos_deg(l1 - l2)
        - 0.0003116 * cos_deg(l2 - p3)
        - 0.0001744 * cos_deg(l2 - p4)
        - 0.0001442 * cos_deg(l2 - p2)
        + 0.0000553 * cos_deg(l2 - l3)
        + 0.0000523 * cos_deg(l1 - l3)
        - 0.0000290 * cos_deg(2.0 * (l1 - l2))
        + 0.0000164 * cos_deg(2.0 * (l2 - w2))
        + 0.0000107 * cos_deg(l1 - 2.0 * l3 + p3)
        - 0.0000102 * cos_deg(l2 - p1)
        - 0.0000091 * cos_deg(2.0 * (l1 - l3)))

    K = 21819.0
    return L, B, R, K


def _ganymede(l1, l2, l3, l4, p1, p2, p3, p4, w1, w2, w3, w4, psi, G, G1, PHI_l):
    S = (0.16490 * sin_deg(l3 - p3)
        + 0.09081 * sin_deg(l3 - p4)
        - 0.06907 * sin_deg(l2 - l3)
        + 0.03784 * sin_deg(p3 - p4)
        + 0.01846 * sin_deg(2.0 * (l3 - l4))
        - 0.01340 * sin_deg(G)
        - 0.01014 * sin_deg(2.0 * (psi - PI_J))
        + 0.00704 * sin_deg(l2 - 2.0 * l3 + p3)
        - 0.00620 * sin_deg(l2 - 2.0 * l3 + p2)
        - 0.00541 * sin_deg(l3 - l4)
        + 0.00381 * sin_deg(l2 - 2.0 * l3 + p4)
        + 0.00235 * sin_deg(psi - w3)
        + 0.00198 * sin_deg(psi - w4)
        + 0.00176 * sin_deg(PHI_l)
        + 0.00130 * sin_deg(3.0 * (l3 - l4))
        + 0.00125 * sin_deg(l1 - l3)
        - 0.00119 * sin_deg(5.0 * G1 - 2.0 * G + 52.225)
        + 0.00109 * sin_deg(l1 - l2)
        - 0.00100 * sin_deg(3.0 * l3 - 7.0 * l4 + 4.0 * p4)
        + 0.00091 * sin_deg(w3 - w4)
        + 0.00080 * sin_deg(3.0 * l3 - 7.0 * l4 + p3 + 3.0 * p4)
        - 0.00075 * sin_deg(2.0 * l2 - 3.0 * l3 + p3)
        + 0.00072 * sin_deg(p1 + p3 - 2.0 * PI_J - 2.0 * G)
        + 0.00069 * sin_deg(p4 - PI_J)
        - 0.00058 * sin_deg(2.0 * l3 - 3.0 * l4 + p4)
        - 0.00057 * sin_deg(l3 - 2.0 * l4 + p4)
        + 0.00056 * sin_deg(l3 + p3 - 2.0 * PI_J - 2.0 * G)
        - 0.00052 * sin_deg(l2 - 2.0 * l3 + p1)
        - 0.00050 * sin_deg(p2 - p3)
        + 0.00048 * sin_deg(l3 - 2.0 * l4 + p3)
        - 0.00045 * sin_deg(2.0 * l2 - 3.0 * l3 + p4)
        - 0.00041 * sin_deg(p2 - p4)
        - 0.00038 * sin_deg(2.0 * G)
        - 0.00037 * sin_deg(p3 - p4 + w3 - w4)
        - 0.00032 * sin_deg(3.0 * l3 - 7.0 * l4 + 2.0 * p3 + 2.0 * p4)
        + 0.00030 * sin_deg(4.0 * (l3 - l4))
        + 0.00029 * sin_deg(l3 + p4 - 2.0 * PI_J - 2.0 * G)
        - 0.00028 * sin_deg(w3 + psi - 2.0 * PI_J - 2.0 * G)
        + 0.00026 * sin_deg(l3 - PI_J - G)
        + 0.00024 * sin_deg(l2 - 3.0 * l3 + 2.0 * l4)
        + 0.00021 * sin_deg(2.0 * (l3 - PI_J - G))
        - 0.00021 * sin_deg(l3 - p2)
        + 0.00017 * sin_deg(2.0 * (l3 - p3)))

    L = l3 + S

    B = atan_deg(
        + 0.0032402 * sin_deg(L - w3)
        - 0.0016911 * sin_deg(L - psi)
        + 0.0006847 * sin_deg(L - w4)
        - 0.0002797 * sin_deg(L - w2)
        + 0.0000321 * sin_deg(L + psi - 2.0 * PI_J - 2.0 * G)
        + 0.0000051 * sin_deg(L - psi + G)
        - 0.0000045 * sin_deg(L - psi - G)
        - 0.0000045 * sin_deg(L + psi - 2.0 * PI_J)
        + 0.0000037 * sin_deg(L + psi - 2.0 * PI_J - 3.0 * G)
        + 0.0000030 * sin_deg(2.0 * l2 - 3.0 * L + 4.03 * S + w2)
        - 0.0000021 * sin_deg(2.0 * l2 - 3.0 * L + 4.03 * S + w3))

    R = 14.98832 * (1.0
        - 0.0014388 * cos_deg(l3 - p3)
        - 0.0007919 * cos_deg(l3 - p4)
        + 0.0006342 * cos_deg(l2 - l3)
        - 0.0001761 * cos_deg(2.0 * (l3 - l4))
        + 0.0000294 * cos_deg(l3 - l4)
        - 0.0000156 * cos_deg(3.0 * (l3 - l4))
        + 0.0000156 * cos_deg(l1 - l3)
        - 0.0000153 * cos_deg(l1 - l2)
        + 0.0000070 * cos_deg(2.0 * l2 - 3.0 * l3 + p3)
        - 0.0000051 * cos_deg(l3 + p3 - 2.0 * PI_J - 2.0 * G))

    K = 27558.0
    return L, B, R, K


def _callisto(l1, l2, l3, l4, p1, p2, p3, p4, w1, w2, w3, w4, psi, G, G1, PHI_l):
    S = (0.84287 * sin_deg(l4 - p4)
        + 0.03431 * sin_deg(p4 - p3)
        - 0.03305 * sin_deg(2.0 * (psi - PI_J))
        - 0.03211 * sin_deg(G)
        - 0.01862 * sin_deg(l4 - p3)
        + 0.01186 * sin_deg(psi - w4)
        + 0.00623 * sin_deg(l4 + p4 - 2.0 * G - 2.0 * PI_J)
        + 0.00387 * sin_deg(2.0 * (l4 - p4))
        - 0.00284 * sin_deg(5.0 * G1 - 2.0 * G + 52.225)
        - 0.00234 * sin_deg(2.0 * (psi - p4))
        - 0.00223 * sin_deg(l3 - l4)
        - 0.00208 * sin_deg(l4 - PI_J)
        + 0.00178 * sin_deg(psi + w4 - 2.0 * p4)
        + 0.00134 * sin_deg(p4 - PI_J)
        + 0.00125 * sin_deg(2.0 * (l4 - G - PI_J))
        - 0.00117 * sin_deg(2.0 * G)
        - 0.00112 * sin_deg(2.0 * (l3 - l4))
        + 0.00107 * sin_deg(3.0 * l3 - 7.0 * l4 + 4.0 * p4)
        + 0.00102 * sin_deg(l4 - G - PI_J)
        + 0.00096 * sin_deg(2.0 * l4 - psi - w4)
        + 0.00087 * sin_deg(2.0 * (psi - w4))
        - 0.00085 * sin_deg(3.0 * l3 - 7.0 * l4 + p3 + 3.0 * p4)
        + 0.00085 * sin_deg(l3 - 2.0 * l4 + p4)
        - 0.00081 * sin_deg(2.0 * (l4 - psi))
        + 0.00071 * sin_deg(l4 + p4 - 2.0 * PI_J - 3.0 * G)
        + 0.00061 * sin_deg(l1 - l4)
        - 0.00056 * sin_deg(psi - w3)
        - 0.00054 * sin_deg(l3 - 2.0 * l4 + p3)
        + 0.00051 * sin_deg(l2 - l4)
        + 0.00042 * sin_deg(2.0 * (psi - G - PI_J))
        + 0.00039 * sin_deg(2.0 * (p4 - w4))
        + 0.00036 * sin_deg(psi + PI_J - p4 - w4)
        + 0.00035 * sin_deg(2.0 * G1 - G + 188.37)
        - 0.00035 * sin_deg(l4 - p4 + 2.0 * PI_J - 2.0 * psi)
        - 0.00032 * sin_deg(l4 + p4 - 2.0 * PI_J - G)
        + 0.00030 * sin_deg(2.0 * G1 - 2.0 * G + 149.15)
        + 0.00029 * sin_deg(3.0 * l3 - 7.0 * l4 + 2.0 * p3 + 2.0 * p4)
        + 0.00028 * sin_deg(l4 - p4 + 2.0 * psi - 2.0 * PI_J)
        - 0.00028 * sin_deg(2.0 * (l4 - w4))
        - 0.00027 * sin_deg(p3 - p4 + w3 - w4)
        - 0.00026 * sin_deg(5.0 * G1 - 3.0 * G + 188.37)
        + 0.00025 * sin_deg(w4 - w3)
        - 0.00025 * sin_deg(l2 - 3.0 * l3 + 2.0 * l4)
        - 0.00023 * sin_deg(3.0 * (l3 - l4))
        + 0.00021 * sin_deg(2.0 * l4 - 2.0 * PI_J - 3.0 * G)
        - 0.00021 * sin_deg(2.0 * l3 - 3.0 * l4 + p4)
        + 0.00019 * sin_deg(l4 - p4 - G)
        - 0.00019 * sin_deg(2.0 * l4 - p3 - p4)
        - 0.00018 * sin_deg(l4 - p4 + G)
        - 0.00016 * sin_deg(l4 + p3 - 2.0 * PI_J - 2.0 * G))

    L = l4 + S

    B = atan_deg(
        - 0.0076579 * sin_deg(L - psi)
        + 0.0044134 * sin_deg(L - w4)
        - 0.0005112 * sin_deg(L - w3)
        + 0.0000773 * sin_deg(L + psi - 2.0 * PI_J - 2.0 * G)
        + 0.0000104 * sin_deg(L - psi + G)
        - 0.0000102 * sin_deg(L - psi - G)
        + 0.0000088 * sin_deg(L + psi - 2.0 * PI_J - 3.0 * G)
        - 0.0000038 * sin_deg(L + psi - 2.0 * PI_J - G))

    R = 26.36273 * (1.0
        - 0.0073546 * cos_deg(l4 - p4)
        + 0.0001621 * cos_deg(l4 - p3)
        + 0.0000974 * cos_deg(l3 - l4)
        - 0.0000543 * cos_deg(l4 + p4 - 2.0 * PI_J - 2.0 * G)
        - 0.0000271 * cos_deg(2.0 * (l4 - p4))
        + 0.0000182 * cos_deg(l4 - PI_J)
        + 0.0000177 * cos_deg(2.0 * (l3 - l4))
        - 0.0000167 * cos_deg(2.0 * l4 - psi - w4)
        + 0.0000167 * cos_deg(psi - w4)
        - 0.0000155 * cos_deg(2.0 * (l4 - PI_J - G))
        + 0.0000142 * cos_deg(2.0 * (l4 - psi))
        + 0.0000105 * cos_deg(l1 - l4)
        + 0.0000092 * cos_deg(l2 - l4)
        - 0.0000089 * cos_deg(l4 - PI_J - G)
        - 0.0000062 * cos_deg(l4 + p4 - 2.0 * PI_J - 3.0 * G)
        + 0.0000048 * cos_deg(2.0 * (l4 - w4)))

    K = 36548.0
    return L, B, R, K


_SERIES = (_io, _europa, _ganymede, _callisto)


# ════════════════════════════════════════════════════════════════════════════
#  Galilean Moons
# ════════════════════════════════════════════════════════════════════════════

class JupitersMoons(PlanetaryMoons):
    """Galilean satellites from the E5 theory (Meeus Ch. 44, pp. 304–315)."""

    first_moon = FIRST_JUPITER_MOON
    flattening = JUPITER_FLATTENING
    v_max = (0.0147, 0.0117, 0.0092, 0.0070)

    def _compute_positions(self, jde, sun_perspective):
        ss = self.solar_system
        light_delay = jde - ss.get_ecliptic_position(JUPITER, jde, None, DELAYED_TIME).radius

        if sun_perspective:
            jpos = ss.get_heliocentric_position(JUPITER, jde - light_delay)
        else:
            jpos = ss.get_ecliptic_position(JUPITER, jde - light_delay, None, 0, jde)

        L0 = jpos.longitude.degrees
        B0 = jpos.latitude.degrees
        DELTA = jpos.radius
        t = jde - 2443000.5 - light_delay

        # Mean longitudes, perijove longitudes and nodes
        l1 = 106.07719 + 203.488955790 * t
        l2 = 175.73161 + 101.374724735 * t
        l3 = 120.55883 + 50.317609207 * t
        l4 = 84.44459 + 21.571071177 * t

        p1 = 97.0881 + 0.16138586 * t
        p2 = 154.8663 + 0.04726307 * t
        p3 = 188.1840 + 0.00712734 * t
        p4 = 335.2868 + 0.00184000 * t

        w1 = 312.3346 - 0.13279386 * t
        w2 = 100.4411 - 0.03263064 * t
        w3 = 119.1942 - 0.00717703 * t
        w4 = 322.6186 - 0.00175934 * t

        GAMMA = (0.33033 * sin_deg(163.679 + 0.0010512 * t)
                 + 0.03439 * sin_deg(34.486 - 0.0161713 * t))
        PHI_l = 199.6766 + 0.17379190 * t
        psi = 316.5182 - 0.00000208 * t
        G = 30.23756 + 0.0830925701 * t + GAMMA
        G1 = 31.97853 + 0.0334597339 * t

        args = (l1, l2, l3, l4, p1, p2, p3, p4, w1, w2, w3, w4, psi, G, G1, PHI_l)
        L, B, R, K = np.array([series(*args) for series in _SERIES]).T

        # The precessional term P cancels in L − ψ; it only enters Φ below
        L = np.deg2rad(L - psi)
        B = np.deg2rad(B)
        X = np.append(R * np.cos(L) * np.cos(B), 0.0)
        Y = np.append(R * np.sin(L) * np.cos(B), 0.0)
        Z = np.append(R * np.sin(B), 1.0)       # fictitious pole moon last

        T0 = (jde - 2433282.423) / 36525.0
        P = 1.3966626 * T0 + 0.0003088 * T0**2
        T = (jde - 2415020.0) / 36525.0
        I = 3.120262 + 0.0006 * T
        oe = get_mean_orbital_elements(JUPITER, jde - light_delay)
        PHI = psi + P - oe.OMEGA

        # Jupiter's equator → its orbit → the ecliptic → the equinox
        B1, C1 = rotate(Y, Z, I)
        A2, B2 = rotate(X, B1, PHI)
        B3, C3 = rotate(B2, C1, oe.i)
        A4, B4 = rotate(A2, B3, oe.OMEGA)
        # then toward the direction of Jupiter from the observer
        A5 = A4 * sin_deg(L0) - B4 * cos_deg(L0)
        B5 = A4 * cos_deg(L0) + B4 * sin_deg(L0)
        C6, B6 = rotate(C3, B5, B0)

        return self._project(A5, B6, C6, DELTA, JUPITER_RADII_PER_AU, R, K)

    def get_moon_events_for_one_minute_span(self, jdu: float, long_format: bool = False,
                                            jupiter_info: 'JupiterInfo | None' = None) -> MoonEvents:
        """As the base method, optionally also reporting Great Red Spot transits."""
        events = super().get_moon_events_for_one_minute_span(jdu, long_format)

        if jupiter_info is not None:
            grs0 = jupiter_info.get_grs_cm_offset(events.t0).degrees
            grs1 = jupiter_info.get_grs_cm_offset(events.t1).degrees

            if grs0 < 0.0 <= grs1:
                events.text = extend_delimited(events.text, 'GRS transit')
                events.count += 1
            elif grs1 < 0.0:
                minutes_to_transit = int(np.floor(-grs1 / 360.0 * MEAN_JUPITER_SYS_II * 1440.0 * 0.9))
                events.search_delta_t = min(events.search_delta_t, max(minutes_to_transit, 1))

        return events


# ════════════════════════════════════════════════════════════════════════════
#  Rotation & Great Red Spot
# ════════════════════════════════════════════════════════════════════════════

class DataQuality(IntEnum):
    GOOD = 1
    FAIR = 2
    POOR = 3


@dataclass
class GrsTable:
    pre_table_drift: float          # [deg/day]
    post_table_drift: float         # [deg/day]
    interpolation_span: float       # [days]
    times: list = field(default_factory=list)           # JD (UT) of each sample
    longitudes: list = field(default_factory=list)      # System II [deg]
    first_date: str = ''
    last_date: str = ''

    @property
    def min_time(self) -> float:
        return self.times[0]

    @property
    def max_time(self) -> float:
        return self.times[-1]


def parse_grs_table(text: str) -> GrsTable:
    """Parse the Great Red Spot longitude table.

    Raises
    ------
    ValueError — if the three header values are missing or not numeric,
        or the table has no dated samples
    """
    lines = [line.strip() for line in text.splitlines()]
    if len(lines) < 3:
        raise ValueError("GRS table needs three header lines")

    table = GrsTable(float(lines[0]) / 365.2425, float(lines[1]) / 365.2425, float(lines[2]))
    samples = []

    for line in lines[3:]:
        parts = re.split(r'[-,]', line)
        if len(parts) != 4:
            continue
        year, month, day = int(parts[0]), int(parts[1]), int(parts[2])
        jd = julian_day(year, month, day, calendar=Calendar.STANDARD)
        samples.append((jd, float(parts[3]), f'{parts[0]}-{parts[1]}-{parts[2]}'))

    if not samples:
        raise ValueError("GRS table contains no dated longitudes")

    samples.sort(key=lambda s: s[0])
    table.times = [s[0] for s in samples]
    table.longitudes = [s[1] for s in samples]
    table.first_date = samples[0][2]
    table.last_date = samples[-1][2]
    return table


class JupiterInfo:
    """Jupiter's central-meridian longitudes and the Great Red Spot.

    Until a table is loaded the GRS longitude is ``DEFAULT_GRS_LONG``; a
    fixed longitude set by the caller overrides both.
    """

    DEFAULT_GRS_LONG = Angle(-93.0, Unit.DEGREES)

    def __init__(self, table: GrsTable | None = None):
        self.table = table
        self.initialized: bool | None = None if table is None else True
        self._fixed_grs_long: Angle | None = None
        self._cache_time: float | None = None
        self._sys1 = self._sys2 = self._grs = self._grs_cm_offset = None

    # ── Loading ──

    def _load_failed(self, message: str, *args) -> bool:
        logger.warning(message, *args)
        # A first failure is permanent; a failed reload keeps the loaded table
        if not self.initialized:
            self.initialized = False
        return False

    def load(self, text: str) -> bool:
        """Load a GRS table from its text; False (and logged) on failure.

        After a failed first load the table stays unavailable.
        """
        if self.initialized is False:
            logger.warning("Great Red Spot table unavailable after a failed load")
            return False
        try:
            table = parse_grs_table(text)
        except ValueError as exc:
            return self._load_failed("Failed to load Great Red Spot table: %s", exc)

        self.table = table
        self.initialized = True
        self._cache_time = None
        logger.info("Loaded Great Red Spot table %s to %s (%s samples)",
                    table.first_date, table.last_date, len(table.times))
        return True

    def load_file(self, path: str | None = None) -> bool:
        path = path or get_grs_file()
        try:
            with open(path, encoding='utf-8') as f:
                text = f.read()
        except OSError as exc:
            return self._load_failed("Cannot read Great Red Spot table %s: %s", path, exc)
        return self.load(text)

    # ── Table Metadata ──

    def grs_data_quality(self, jdu: float) -> DataQuality:
        if not self.initialized:
            return DataQuality.POOR
        if jdu < self.table.min_time - 730.0 or jdu > self.table.max_time + 730.0:
            return DataQuality.POOR
        if jdu < self.table.min_time - 365.0 or jdu > self.table.max_time + 365.0:
            return DataQuality.FAIR
        return DataQuality.GOOD

    def get_first_grs_date(self) -> str | None:
        return self.table.first_date if self.initialized else None

    def get_last_grs_date(self) -> str | None:
        return self.table.last_date if self.initialized else None

    def get_last_known_grs_longitude(self) -> Angle | None:
        if not self.initialized:
            return None
        return Angle(self.table.longitudes[-1], Unit.DEGREES)

    # ── Fixed Longitude ──

    def set_fixed_grs_longitude(self, longitude: Angle | float) -> None:
        if not isinstance(longitude, Angle):
            longitude = Angle(longitude, Unit.DEGREES)
        self._fixed_grs_long = longitude
        self._cache_time = None

    def get_fixed_grs_longitude(self) -> Angle | None:
        return self._fixed_grs_long

    def clear_fixed_grs_longitude(self) -> None:
        self._fixed_grs_long = None
        self._cache_time = None

    def get_effective_fixed_grs_longitude(self) -> Angle:
        """The fixed longitude, or the table's if it can only give one value."""
        if self._fixed_grs_long is not None:
            return self._fixed_grs_long
        table = self.table
        if (self.initialized and table.min_time == table.max_time
                and table.pre_table_drift == 0.0 and table.post_table_drift == 0.0):
            return Angle(table.longitudes[0], Unit.DEGREES)
        return self.DEFAULT_GRS_LONG

    # ── Longitudes ──

    def get_system_i_longitude(self, jde: float) -> Angle:
        self._update(jde)
        return self._sys1

    def get_system_ii_longitude(self, jde: float) -> Angle:
        self._update(jde)
        return self._sys2

    def get_grs_longitude(self, jde: float) -> Angle:
        if self._fixed_grs_long is not None:
            return self._fixed_grs_long
        if not self.initialized:
            return self.DEFAULT_GRS_LONG
        self._update(jde)
        return self._grs

    def get_grs_cm_offset(self, jde: float) -> Angle:
        """System II central meridian minus the GRS longitude, signed."""
        self._update(jde)
        return self._grs_cm_offset

    def _table_grs_longitude(self, jde: float) -> float:
        table = self.table
        jdu = tdb_to_ut(jde)
        if jdu < table.min_time:
            return table.longitudes[0] - (table.min_time - jdu) * table.pre_table_drift
        if jdu > table.max_time:
            return table.longitudes[-1] + (jdu - table.max_time) * table.post_table_drift
        return interpolate_tabular(table.times, table.longitudes, jdu, table.interpolation_span)

    def _update(self, jde: float) -> None:
        if jde == self._cache_time:
            return

        # Low-accuracy rotation model, Meeus pp. 297–298
        d = jde - JD_J2000
        V = 172.74 + 0.00111588 * d
        M = 357.529 + 0.9856003 * d
        N = 20.020 + 0.0830853 * d + 0.329 * sin_deg(V)
        J = 66.115 + 0.9025179 * d - 0.329 * sin_deg(V)
        A = 1.915 * sin_deg(M) + 0.020 * sin_deg(2.0 * M)
        B = 5.555 * sin_deg(N) + 0.168 * sin_deg(2.0 * N)
        K = J + A - B
        R = 1.00014 - 0.01671 * cos_deg(M) - 0.00014 * cos_deg(2.0 * M)
        r = 5.20872 - 0.25208 * cos_deg(N) - 0.00611 * cos_deg(2.0 * N)
        delta = np.sqrt(r * r + R * R - 2.0 * r * R * cos_deg(K))
        psi = asin_deg(limit_neg1_to1(R / delta * sin_deg(K)))
        omega1 = 210.98 + 877.8169088 * (d - delta / 173.0) + psi - B
        omega2 = 187.23 + 870.1869088 * (d - delta / 173.0) + psi - B
        phase_correction = 57.3 * sin_deg(psi / 2.0)**2 * np.sign(sin_deg(K))

        self._sys1 = Angle(omega1 + phase_correction, Unit.DEGREES)
        self._sys2 = Angle(omega2 + phase_correction, Unit.DEGREES)

        if self._fixed_grs_long is not None:
            self._grs = self._fixed_grs_long
        elif self.initialized:
            self._grs = Angle(self._table_grs_longitude(jde), Unit.DEGREES)
        else:
            self._grs = self.DEFAULT_GRS_LONG

        self._grs_cm_offset = self._sys2.subtract(self._grs)
        self._cache_time = jde
