"""
skyephem.utils — Foundational Utilities
=======================================

Modular arithmetic for angles, clamping for inverse trig, degree-based
trig helpers and the linear / modular / Lagrange interpolators used by
the body providers and the Great Red Spot table.
All functions are pure NumPy on scalars.
"""

import logging

import numpy as np

logger = logging.getLogger(__name__)


# ── Modular Arithmetic ──────────────────────────────────────────────────────

def mod(x: float, y: float) -> float:
    """Modulo with the sign of the divisor, result in [0, y) for y > 0."""
    m = x % y
    # float % can round up to the divisor itself for tiny negative x
    if m == y:
        return 0.0
    return m


def mod2(x: float, y: float) -> float:
    """Modulo split around zero, result in [-y/2, y/2).

    For angles in degrees with y = 360 the result ranges from -180 up to
    (but not including) 180.
    """
    result = x - np.floor(x / y) * y
    if result >= y / 2.0:
        result -= y
    return float(result)


def limit_neg1_to1(x: float, tolerance: float = 0.01) -> float:
    """Clamp an inverse-trig argument to [-1, 1].

    Values beyond the tolerance are still clamped, but logged, since they
    point at a real error rather than rounding.
    """
    if x < -1.0 - tolerance or x > 1.0 + tolerance:
        logger.debug("Value out of range for inverse trig: %s", x)
    return float(np.clip(x, -1.0, 1.0))


def sign_zp(x: float) -> float:
    """Sign with zero treated as positive."""
    return -1.0 if x < 0.0 else 1.0


def div_rd(x: int, y: int) -> int:
    """Integer division rounded toward negative infinity."""
    return x // y


def div_tt0(x: int, y: int) -> int:
    """Integer division truncated toward zero."""
    q = abs(x) // abs(y)
    return q if (x < 0) == (y < 0) else -q


# ── Degree Trig ─────────────────────────────────────────────────────────────

def sin_deg(x: float) -> float:
    return float(np.sin(np.deg2rad(x)))


def cos_deg(x: float) -> float:
    return float(np.cos(np.deg2rad(x)))


def tan_deg(x: float) -> float:
    return float(np.tan(np.deg2rad(x)))


def asin_deg(x: float) -> float:
    return float(np.rad2deg(np.arcsin(x)))


def acos_deg(x: float) -> float:
    return float(np.rad2deg(np.arccos(x)))


def atan_deg(x: float) -> float:
    return float(np.rad2deg(np.arctan(x)))


def atan2_deg(y: float, x: float) -> float:
    return float(np.rad2deg(np.arctan2(y, x)))


# ── Interpolation ───────────────────────────────────────────────────────────

def interpolate(x0: float, x: float, x1: float, y0: float, y1: float) -> float:
    """Linear interpolation of y at x between (x0, y0) and (x1, y1)."""
    if x0 == x1:
        return y0
    return y0 + (x - x0) * (y1 - y0) / (x1 - x0)


def interpolate_modular(x0: float, x: float, x1: float, y0: float, y1: float,
                        modulus: float, signed_result: bool = False) -> float:
    """Linear interpolation of a cyclic quantity such as an angle.

    The second value is shifted by whole moduli until it lies within half a
    modulus of the first, so interpolation always takes the short way round.

    Parameters
    ----------
    modulus : float — cycle length (e.g. 360.0)
    signed_result : bool — return in [-modulus/2, modulus/2) instead of
        [0, modulus)
    """
    m2 = modulus / 2.0
    if y0 < 0.0 or y0 >= modulus:
        y0 = mod(y0, modulus)
    while y1 < y0 - m2:
        y1 += modulus
    while y1 >= y0 + m2:
        y1 -= modulus

    y = interpolate(x0, x, x1, y0, y1)
    if signed_result:
        return mod2(y, modulus)
    return mod(y, modulus)


def _lagrange(xx, yy, x: float, a: int, b: int) -> float:
    y = 0.0
    for i in range(a, b + 1):
        c = 1.0
        for j in range(a, b + 1):
            if j != i:
                c *= (x - xx[j]) / (xx[i] - xx[j])
        y += c * yy[i]
    return y


def _lagrange_over_span(xx, yy, x: float, max_span: float, xc: float) -> float:
    n = min(len(xx), len(yy))
    a = -1
    b = n - 1
    for i in range(n):
        if a < 0 and xx[i] >= xc - max_span:
            a = i
        if xx[i] >= xc + max_span:
            b = i
            break
    return _lagrange(xx, yy, x, max(a, 0), b)


def interpolate_tabular(xx, yy, x: float, max_span: float) -> float:
    """Lagrange interpolation over tabulated, ascending-x data.

    With ``max_span > 0`` only samples within ``max_span`` of the two table
    points bracketing x take part; the two local interpolations are blended
    by the position of x between those points so the result has no jumps
    when x crosses a table entry. Outside the table the end values are held.
    """
    n = min(len(xx), len(yy))
    if max_span <= 0.0:
        return _lagrange(xx, yy, x, 0, n - 1)

    ca = -1
    cb = -1
    for i in range(n):
        xi = xx[i]
        if xi == x:
            return yy[i]
        if xi < x:
            ca = i
        else:
            cb = i
            break

    if ca < 0:
        return yy[0]
    if cb < 0:
        return yy[n - 1]

    xa = xx[ca]
    xb = xx[cb]
    weight = (x - xa) / (xb - xa)
    ya = _lagrange_over_span(xx, yy, x, max_span, xa)
    yb = _lagrange_over_span(xx, yy, x, max_span, xb)
    return ya * (1.0 - weight) + yb * weight
