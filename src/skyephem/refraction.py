"""
skyephem.refraction — Atmospheric Refraction
============================================

Refracted (apparent) altitude from true altitude, and the inverse, in
degrees.  Both formulas are scaled so that refraction at the horizon is
the standard 0.5833° and zero at the zenith.

Below −4° the altitude is returned unchanged; between −4° and −2° the
result blends linearly into that identity so the functions stay smooth
for bodies far below the horizon.

Reference
---------
Sæmundsson, T. (1986). *Sky & Telescope* 72, 70.
Bennett, G.G. (1982). *Journal of Navigation* 35, 255–259.
Meeus, J. (1998). *Astronomical Algorithms*, 2nd ed., Ch. 16.
"""

from .utils import interpolate, tan_deg

IDENTITY_BELOW = -4.0
BLEND_ABOVE = -2.0


def _refraction(h: float) -> float:
    return 1.033879 / tan_deg(h + 10.3 / (h + 5.11)) / 60.0


def _unrefraction(h0: float) -> float:
    return 1.015056 / tan_deg(h0 + 7.31 / (h0 + 4.4)) / 60.0


_H_ADJ = _refraction(90.0)
_H0_ADJ = _unrefraction(90.0)


def refracted_altitude(true_altitude: float) -> float:
    """Apparent altitude [deg] of a body at ``true_altitude`` [deg]."""
    if true_altitude < IDENTITY_BELOW:
        return true_altitude

    h = true_altitude + _refraction(true_altitude) - _H_ADJ
    if true_altitude < BLEND_ABOVE:
        return interpolate(IDENTITY_BELOW, true_altitude, BLEND_ABOVE, true_altitude, h)
    return h


def unrefracted_altitude(apparent_altitude: float) -> float:
    """True altitude [deg] of a body seen at ``apparent_altitude`` [deg]."""
    if apparent_altitude < IDENTITY_BELOW:
        return apparent_altitude

    h = apparent_altitude - _unrefraction(apparent_altitude) + _H0_ADJ
    if apparent_altitude < BLEND_ABOVE:
        return interpolate(IDENTITY_BELOW, apparent_altitude, BLEND_ABOVE, apparent_altitude, h)
    return h
