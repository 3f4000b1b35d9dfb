"""
skyephem.ecliptic — Precession, Nutation & Frame Conversion
===========================================================

Transforms between the ecliptic, equatorial and galactic frames, and
between the equinoxes of different epochs.

Capabilities
------------
- Rigorous precession of equatorial (ζ, z, θ) and ecliptical (η, Π, p)
  coordinates between any two epochs, 2-D and 3-D
- Nutation in longitude and obliquity (63-term IAU 1980 series), mean
  obliquity of the ecliptic (Laskar polynomial)
- Ecliptic ↔ equatorial conversion under a selectable obliquity mode
- Equatorial ↔ galactic (B1950 galactic pole)

The ``Ecliptic`` object keeps the most recent nutation result and
recomputes only when the time or mode changes.

Reference
---------
Meeus, J. (1998). *Astronomical Algorithms*, 2nd ed., Willmann-Bell,
Ch. 13, 21, 22.
"""

from dataclasses import dataclass
from enum import Enum

import numpy as np

from .angle import Angle, HALF_PI, Mode, Unit
from .constants import (
    DAYS_PER_CENTURY, GALACTIC_ASCENDING_NODE_B1950, GALACTIC_NORTH_B1950,
    JD_B1950, JD_J2000, OBLIQUITY_J2000,
)
from .spherical import SphericalPosition, SphericalPosition3D
from .timescale import gmst_degrees, ut_to_tdb
from .utils import limit_neg1_to1, mod

ARCSEC_TO_RAD = np.pi / 648_000.0

# Within this many radians (~1″) of a pole, declination comes from A, B
NEAR_POLE = 4.85e-6


# ════════════════════════════════════════════════════════════════════════════
#  Precession
# ════════════════════════════════════════════════════════════════════════════

def _epochs(initial_epoch: float, final_epoch: float | None) -> tuple[float, float]:
    if final_epoch is None:
        return JD_J2000, initial_epoch
    return initial_epoch, final_epoch


def precess_equatorial(pos: SphericalPosition, initial_epoch: float,
                       final_epoch: float | None = None) -> SphericalPosition:
    """Precess right ascension / declination between two epochs.

    With a single epoch argument the position is taken as J2000.0 and
    precessed to that epoch.

    Parameters
    ----------
    pos : SphericalPosition — RA/Dec at ``initial_epoch``
    initial_epoch : float — JDE of the input equinox (or the target, see above)
    final_epoch : float, optional — JDE of the output equinox

    Returns
    -------
    SphericalPosition — RA/Dec at ``final_epoch``
    """
    initial_epoch, final_epoch = _epochs(initial_epoch, final_epoch)
    T = (initial_epoch - JD_J2000) / DAYS_PER_CENTURY
    t = (final_epoch - initial_epoch) / DAYS_PER_CENTURY
    ra0 = pos.right_ascension.radians
    dec0 = pos.declination.radians

    # Arcseconds → radians
    base = 2306.2181 + 1.39656 * T - 0.000139 * T**2
    zeta = (base * t + (0.30188 - 0.000344 * T) * t**2 + 0.017998 * t**3) * ARCSEC_TO_RAD
    z = (base * t + (1.09468 + 0.000066 * T) * t**2 + 0.018203 * t**3) * ARCSEC_TO_RAD
    theta = ((2004.3109 - 0.85330 * T - 0.000217 * T**2) * t
             - (0.42665 + 0.000217 * T) * t**2 - 0.041833 * t**3) * ARCSEC_TO_RAD

    A = np.cos(dec0) * np.sin(ra0 + zeta)
    B = np.cos(theta) * np.cos(dec0) * np.cos(ra0 + zeta) - np.sin(theta) * np.sin(dec0)
    C = np.sin(theta) * np.cos(dec0) * np.cos(ra0 + zeta) + np.cos(theta) * np.sin(dec0)

    ra = np.arctan2(A, B) + z
    if HALF_PI - abs(dec0) > NEAR_POLE:
        dec = np.arcsin(limit_neg1_to1(C))
    else:
        dec = np.copysign(np.arccos(limit_neg1_to1(np.hypot(A, B))), C)

    return SphericalPosition(ra, dec)


def precess_equatorial_3d(pos: SphericalPosition3D, initial_epoch: float,
                          final_epoch: float | None = None) -> SphericalPosition3D:
    return SphericalPosition3D.from_2d(precess_equatorial(pos, initial_epoch, final_epoch),
                                       pos.radius)


def precess_ecliptical(pos: SphericalPosition, initial_epoch: float,
                       final_epoch: float | None = None) -> SphericalPosition:
    """Precess ecliptic longitude / latitude between two epochs.

    Epoch arguments behave as in :func:`precess_equatorial`.
    """
    initial_epoch, final_epoch = _epochs(initial_epoch, final_epoch)
    T = (initial_epoch - JD_J2000) / DAYS_PER_CENTURY
    t = (final_epoch - initial_epoch) / DAYS_PER_CENTURY
    L0 = pos.longitude.radians
    B0 = pos.latitude.radians

    eta = ((47.0029 - 0.06603 * T + 0.000598 * T**2) * t
           + (-0.03302 + 0.000598 * T) * t**2 + 0.000060 * t**3) * ARCSEC_TO_RAD
    P1 = (174.876384 * 3600.0 + 3289.4789 * T + 0.60622 * T**2
          - (869.8089 + 0.50491 * T) * t + 0.03536 * t**2) * ARCSEC_TO_RAD
    p = ((5029.0966 + 2.22226 * T - 0.000042 * T**2) * t
         + (1.11113 - 0.000042 * T) * t**2 - 0.000006 * t**3) * ARCSEC_TO_RAD

    A1 = np.cos(eta) * np.cos(B0) * np.sin(P1 - L0) - np.sin(eta) * np.sin(B0)
    B1 = np.cos(B0) * np.cos(P1 - L0)
    C1 = np.cos(eta) * np.sin(B0) + np.sin(eta) * np.cos(B0) * np.sin(P1 - L0)

    return SphericalPosition(p + P1 - np.arctan2(A1, B1), np.arcsin(limit_neg1_to1(C1)))


def precess_ecliptical_3d(pos: SphericalPosition3D, initial_epoch: float,
                          final_epoch: float | None = None) -> SphericalPosition3D:
    return SphericalPosition3D.from_2d(precess_ecliptical(pos, initial_epoch, final_epoch),
                                       pos.radius)


# ════════════════════════════════════════════════════════════════════════════
#  Nutation
# ════════════════════════════════════════════════════════════════════════════

class NutationMode(Enum):
    NUTATED = 0          # nutation in longitude and true obliquity
    MEAN_OBLIQUITY = 1   # no nutation, mean obliquity of date
    J2000 = 2            # no nutation, fixed J2000.0 obliquity
    ANTI_NUTATED = 3     # remove nutation from already-nutated coordinates


@dataclass(frozen=True)
class Nutation:
    delta_psi: Angle       # nutation in longitude
    delta_epsilon: Angle   # nutation in obliquity
    obliquity: Angle       # true obliquity (mean for non-nutated modes)


# Mean obliquity polynomial in U = T/100, arcseconds (Meeus 22.3)
_OBLIQUITY_COEFFS = (-4680.93, -1.55, 1999.25, -51.38, -249.67,
                     -39.05, 7.12, 27.87, 5.79, 2.45)

# Meeus Table 22.A
# (D, M, M', F, Ω, sin coeff, sin T-rate, cos coeff, cos T-rate) [0.0001″]
_NUTATION_TERMS = np.array([
    [0, 0, 0, 0, 1, -171996, -174.2, 92025, 8.9],
    [-2, 0, 0, 2, 2, -13187, -1.6, 5736, -3.1],
    [0, 0, 0, 2, 2, -2274, -0.2, 977, -0.5],
    [0, 0, 0, 0, 2, 2062, 0.2, -895, 0.5],
    [0, 1, 0, 0, 0, 1426, -3.4, 54, -0.1],
    [0, 0, 1, 0, 0, 712, 0.1, -7, 0],
    [-2, 1, 0, 2, 2, -517, 1.2, 224, -0.6],
    [0, 0, 0, 2, 1, -386, -0.4, 200, 0],
    [0, 0, 1, 2, 2, -301, 0, 129, -0.1],
    [-2, -1, 0, 2, 2, 217, -0.5, -95, 0.3],
    [-2, 0, 1, 0, 0, -158, 0, 0, 0],
    [-2, 0, 0, 2, 1, 129, 0.1, -70, 0],
    [0, 0, -1, 2, 2, 123, 0, -53, 0],
    [2, 0, 0, 0, 0, 63, 0, 0, 0],
    [0, 0, 1, 0, 1, 63, 0.1, -33, 0],
    [2, 0, -1, 2, 2, -59, 0, 26, 0],
    [0, 0, -1, 0, 1, -58, -0.1, 32, 0],
    [0, 0, 1, 2, 1, -51, 0, 27, 0],
    [-2, 0, 2, 0, 0, 48, 0, 0, 0],
    [0, 0, -2, 2, 1, 46, 0, -24, 0],
    [2, 0, 0, 2, 2, -38, 0, 16, 0],
    [0, 0, 2, 2, 2, -31, 0, 13, 0],
    [0, 0, 2, 0, 0, 29, 0, 0, 0],
    [-2, 0, 1, 2, 2, 29, 0, -12, 0],
    [0, 0, 0, 2, 0, 26, 0, 0, 0],
    [-2, 0, 0, 2, 0, -22, 0, 0, 0],
    [0, 0, -1, 2, 1, 21, 0, -10, 0],
    [0, 2, 0, 0, 0, 17, -0.1, 0, 0],
    [2, 0, -1, 0, 1, 16, 0, -8, 0],
    [-2, 2, 0, 2, 2, -16, 0.1, 7, 0],
    [0, 1, 0, 0, 1, -15, 0, 9, 0],
    [-2, 0, 1, 0, 1, -13, 0, 7, 0],
    [0, -1, 0, 0, 1, -12, 0, 6, 0],
    [0, 0, 2, -2, 0, 11, 0, 0, 0],
    [2, 0, -1, 2, 1, -10, 0, 5, 0],
    [2, 0, 1, 2, 2, -8, 0, 3, 0],
    [0, 1, 0, 2, 2, 7, 0, -3, 0],
    [-2, 1, 1, 0, 0, -7, 0, 0, 0],
    [0, -1, 0, 2, 2, -7, 0, 3, 0],
    [2, 0, 0, 2, 1, -7, 0, 3, 0],
    [2, 0, 1, 0, 0, 6, 0, 0, 0],
    [-2, 0, 2, 2, 2, 6, 0, -3, 0],
    [-2, 0, 1, 2, 1, 6, 0, -3, 0],
    [2, 0, -2, 0, 1, -6, 0, 3, 0],
    [2, 0, 0, 0, 1, -6, 0, 3, 0],
    [0, -1, 1, 0, 0, 5, 0, 0, 0],
    [-2, -1, 0, 2, 1, -5, 0, 3, 0],
    [-2, 0, 0, 0, 1, -5, 0, 3, 0],
    [0, 0, 2, 2, 1, -5, 0, 3, 0],
    [-2, 0, 2, 0, 1, 4, 0, 0, 0],
    [-2, 1, 0, 2, 1, 4, 0, 0, 0],
    [0, 0, 1, -2, 0, 4, 0, 0, 0],
    [-1, 0, 1, 0, 0, -4, 0, 0, 0],
    [-2, 1, 0, 0, 0, -4, 0, 0, 0],
    [1, 0, 0, 0, 0, -4, 0, 0, 0],
    [0, 0, 1, 2, 0, 3, 0, 0, 0],
    [0, 0, -2, 2, 2, -3, 0, 0, 0],
    [-1, -1, 1, 0, 0, -3, 0, 0, 0],
    [0, 1, 1, 0, 0, -3, 0, 0, 0],
    [0, -1, 1, 2, 2, -3, 0, 0, 0],
    [2, -1, -1, 2, 2, -3, 0, 0, 0],
    [0, 0, 3, 2, 2, -3, 0, 0, 0],
    [2, -1, 0, 2, 2, -3, 0, 0, 0],
])


def mean_obliquity(jde: float) -> float:
    """Mean obliquity of the ecliptic [deg] at a dynamical-time Julian Day."""
    U = (jde - JD_J2000) / DAYS_PER_CENTURY / 100.0
    arcsec = sum(c * U**(n + 1) for n, c in enumerate(_OBLIQUITY_COEFFS))
    return OBLIQUITY_J2000 + arcsec / 3600.0


def compute_nutation(jde: float) -> tuple[float, float]:
    """Nutation in longitude and obliquity, both in arcseconds."""
    T = (jde - JD_J2000) / DAYS_PER_CENTURY

    # Fundamental arguments [deg]
    D = 297.85036 + 445267.111480 * T - 0.0019142 * T**2 + T**3 / 189474.0
    M = 357.52772 + 35999.050340 * T - 0.0001603 * T**2 - T**3 / 300000.0
    M1 = 134.96298 + 477198.867398 * T + 0.0086972 * T**2 + T**3 / 56250.0
    F = 93.27191 + 483202.017538 * T + 0.0036825 * T**2 + T**3 / 327270.0
    Q = 125.04452 - 1934.136261 * T + 0.0020708 * T**2 + T**3 / 450000.0

    terms = _NUTATION_TERMS
    arg = np.deg2rad(terms[:, :5] @ np.array([D, M, M1, F, Q]))
    delta_psi = np.sum(np.sin(arg) * (terms[:, 5] + terms[:, 6] * T))
    delta_epsilon = np.sum(np.cos(arg) * (terms[:, 7] + terms[:, 8] * T))

    return float(delta_psi) / 10_000.0, float(delta_epsilon) / 10_000.0


class Ecliptic:
    """Nutation and ecliptic/equatorial conversion with a one-entry cache."""

    def __init__(self):
        self._cached_time: float | None = None
        self._cached_mode: NutationMode | None = None
        self._cached_nutation: Nutation | None = None

    def get_nutation(self, jde: float, mode: NutationMode = NutationMode.NUTATED) -> Nutation:
        """Nutation and obliquity at ``jde`` for the given mode.

        ``ANTI_NUTATED`` returns the same values as ``NUTATED``; the sign is
        applied by the callers that nutate positions.
        """
        if mode is NutationMode.ANTI_NUTATED:
            mode = NutationMode.NUTATED

        if jde == self._cached_time and mode is self._cached_mode:
            return self._cached_nutation

        zero = Angle(0.0)
        if mode is NutationMode.J2000:
            result = Nutation(zero, zero, Angle(OBLIQUITY_J2000, Unit.DEGREES))
        else:
            obliquity = Angle(mean_obliquity(jde), Unit.DEGREES)
            if mode is NutationMode.MEAN_OBLIQUITY:
                result = Nutation(zero, zero, obliquity)
            else:
                d_psi, d_eps = compute_nutation(jde)
                delta_epsilon = Angle(d_eps, Unit.ARC_SECONDS)
                result = Nutation(Angle(d_psi, Unit.ARC_SECONDS), delta_epsilon,
                                  obliquity.add(delta_epsilon))

        self._cached_time = jde
        self._cached_mode = mode
        self._cached_nutation = result
        return result

    def apparent_sidereal_time(self, jdu: float) -> float:
        """Greenwich apparent sidereal time [deg] for a UT Julian Day."""
        nutation = self.get_nutation(ut_to_tdb(jdu))
        return mod(gmst_degrees(jdu) + nutation.delta_psi.degrees * nutation.obliquity.cos, 360.0)

    # ── Nutating Positions ──

    def nutate_ecliptic_position(self, pos: SphericalPosition, jde: float,
                                 mode: NutationMode = NutationMode.NUTATED) -> SphericalPosition:
        if mode is NutationMode.J2000:
            return pos

        delta_psi = self.get_nutation(jde, mode).delta_psi
        if mode is NutationMode.ANTI_NUTATED:
            delta_psi = delta_psi.negate()

        nutated = SphericalPosition(pos.longitude.add_nonneg(delta_psi), pos.latitude)
        if isinstance(pos, SphericalPosition3D):
            return SphericalPosition3D.from_2d(nutated, pos.radius)
        return nutated

    def nutate_equatorial_position(self, pos: SphericalPosition, jde: float,
                                   mode: NutationMode = NutationMode.NUTATED) -> SphericalPosition:
        if mode is NutationMode.J2000:
            return pos

        ecliptic = self.equatorial_to_ecliptic(pos, jde, mode)
        ecliptic = self.nutate_ecliptic_position(ecliptic, jde, mode)
        return self.ecliptic_to_equatorial(ecliptic, jde, mode)

    # ── Frame Conversion ──

    def ecliptic_to_equatorial(self, pos: SphericalPosition, jde: float = JD_J2000,
                               mode: NutationMode = NutationMode.J2000) -> SphericalPosition:
        """Ecliptic longitude/latitude → right ascension/declination.

        A ``SphericalPosition3D`` keeps its radius unchanged.
        """
        E = self.get_nutation(jde, mode).obliquity
        L = pos.longitude
        B = pos.latitude
        result = SphericalPosition(
            Angle.atan2_nonneg(L.sin * E.cos - B.tan * E.sin, L.cos),
            Angle.asin(limit_neg1_to1(B.sin * E.cos + B.cos * E.sin * L.sin)))
        if isinstance(pos, SphericalPosition3D):
            return SphericalPosition3D.from_2d(result, pos.radius)
        return result

    def equatorial_to_ecliptic(self, pos: SphericalPosition, jde: float = JD_J2000,
                               mode: NutationMode = NutationMode.J2000) -> SphericalPosition:
        """Right ascension/declination → ecliptic longitude/latitude."""
        E = self.get_nutation(jde, mode).obliquity
        ra = pos.right_ascension
        dec = pos.declination
        result = SphericalPosition(
            Angle.atan2_nonneg(ra.sin * E.cos + dec.tan * E.sin, ra.cos),
            Angle.asin(limit_neg1_to1(dec.sin * E.cos - dec.cos * E.sin * ra.sin)))
        if isinstance(pos, SphericalPosition3D):
            return SphericalPosition3D.from_2d(result, pos.radius)
        return result


# ════════════════════════════════════════════════════════════════════════════
#  Galactic Coordinates
# ════════════════════════════════════════════════════════════════════════════

_GAL_RA = Angle(GALACTIC_NORTH_B1950[0], Unit.DEGREES)
_GAL_DEC = Angle(GALACTIC_NORTH_B1950[1], Unit.DEGREES)
_GAL_NODE = Angle(GALACTIC_ASCENDING_NODE_B1950, Unit.DEGREES)
_AN1 = _GAL_NODE.add(Angle(270.0, Unit.DEGREES))
_AN2 = _GAL_NODE.add(Angle(90.0, Unit.DEGREES))
_AG2 = _GAL_RA.subtract(Angle(180.0, Unit.DEGREES))


def equatorial_to_galactic(pos: SphericalPosition, jde: float = JD_J2000) -> SphericalPosition:
    """RA/Dec at the equinox of ``jde`` → galactic longitude/latitude."""
    pos = precess_equatorial(pos, jde, JD_B1950)
    ga_a = _GAL_RA.subtract(pos.right_ascension)
    d = pos.declination
    return SphericalPosition(
        _AN1.subtract(Angle.atan2_nonneg(ga_a.sin, ga_a.cos * _GAL_DEC.sin - d.tan * _GAL_DEC.cos),
                      Mode.RANGE_LIMIT_NONNEGATIVE),
        Angle.asin(limit_neg1_to1(d.sin * _GAL_DEC.sin + d.cos * _GAL_DEC.cos * ga_a.cos)))


def galactic_to_equatorial(pos: SphericalPosition, jde: float = JD_J2000) -> SphericalPosition:
    """Galactic longitude/latitude → RA/Dec at the equinox of ``jde``."""
    l_an2 = pos.longitude.subtract(_AN2)
    b = pos.latitude
    b1950 = SphericalPosition(
        _AG2.add(Angle.atan2_nonneg(l_an2.sin, l_an2.cos * _GAL_DEC.sin - b.tan * _GAL_DEC.cos),
                 Mode.RANGE_LIMIT_NONNEGATIVE),
        Angle.asin(limit_neg1_to1(b.sin * _GAL_DEC.sin + b.cos * _GAL_DEC.cos * l_an2.cos)))
    return precess_equatorial(b1950, JD_B1950, jde)
