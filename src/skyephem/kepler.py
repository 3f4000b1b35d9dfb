"""
skyephem.kepler — Kepler Equation Solvers for Heliocentric Orbits
=================================================================

True anomaly and radius from perihelion distance, eccentricity and time
since perihelion, with a separate algorithm for each eccentricity regime:

- elliptical (e < 0.98): Sinnott's binary search, always 60 halvings
- hyperbolic (e > 1.1): Laguerre-Conway iteration, capped
- parabolic (e = 1): closed-form solution of Barker's equation
- near-parabolic (0.98 ≤ e ≤ 1.1): Meeus's series iteration, capped

The capped solvers raise ``KeplerConvergenceError`` instead of returning a
poor answer; ``solve_orbit(..., fallback=True)`` re-solves on the
elliptical or hyperbolic branch.

Reference
---------
Meeus, J. (1998). *Astronomical Algorithms*, 2nd ed., Willmann-Bell,
Ch. 30, 34, 35.
"""

from enum import Enum

import numpy as np

from .constants import K_DEG, K_RAD
from .utils import mod, sign_zp


# ── Constants ───────────────────────────────────────────────────────────────
NEAR_PARABOLIC_E_LOW = 0.98
NEAR_PARABOLIC_E_HIGH = 1.1
PARABOLIC_FALLBACK_BAND = 0.0001     # |e − 1| treated as parabolic on fallback
ELLIPTICAL_ITERATIONS = 60
MAX_ITERATIONS = 50
MAX_ERROR = 1.0e-10
HYPERBOLIC_MAX_ERROR = 1.0e-12


class KeplerConvergenceError(RuntimeError):
    """An iterative Kepler solver exceeded its iteration cap.

    ``code`` identifies the loop that gave up: 1–3 for the three nested
    near-parabolic loops, 4 for the hyperbolic iteration.
    """

    def __init__(self, code: int, message: str):
        super().__init__(message)
        self.code = code


class Regime(Enum):
    ELLIPTICAL = 'elliptical'
    HYPERBOLIC = 'hyperbolic'
    PARABOLIC = 'parabolic'
    NEAR_PARABOLIC = 'near-parabolic'


def select_regime(e: float, fallback: bool = False) -> Regime:
    """Solver regime for an eccentricity.

    With ``fallback`` the near-parabolic band is split between the
    elliptical and hyperbolic solvers, and eccentricities within
    ``PARABOLIC_FALLBACK_BAND`` of 1 use the parabolic formula.
    """
    if e == 1.0 or (fallback and abs(e - 1.0) < PARABOLIC_FALLBACK_BAND):
        return Regime.PARABOLIC
    if e < NEAR_PARABOLIC_E_LOW or (fallback and e < 1.0):
        return Regime.ELLIPTICAL
    if e > NEAR_PARABOLIC_E_HIGH or fallback:
        return Regime.HYPERBOLIC
    return Regime.NEAR_PARABOLIC


# ════════════════════════════════════════════════════════════════════════════
#  Anomaly Solvers
# ════════════════════════════════════════════════════════════════════════════

def solve_elliptical(e: float, M: float) -> float:
    """Eccentric anomaly E [rad] with  M = E − e sin E.

    Binary search of fixed length, accurate for any e < 1.

    Parameters
    ----------
    e : float — eccentricity
    M : float — mean anomaly [rad]

    Returns
    -------
    E : float — eccentric anomaly [rad], in [-π, π]
    """
    M = mod(M, 2.0 * np.pi)
    f = 1.0
    if M > np.pi:
        M = 2.0 * np.pi - M
        f = -1.0

    E = np.pi / 2.0
    d = np.pi / 4.0
    for _ in range(ELLIPTICAL_ITERATIONS):
        m1 = E - e * np.sin(E)
        E += d * np.sign(M - m1)
        d /= 2.0

    return float(E * f)


def solve_hyperbolic(e: float, M: float, max_iterations: int = MAX_ITERATIONS) -> float:
    """Hyperbolic anomaly H [rad] with  M = e sinh H − H.

    Raises
    ------
    KeplerConvergenceError — if the step is still above 1e-12 after
        ``max_iterations`` updates
    """
    mean_a = abs(M)
    h = np.log(2.0 * mean_a / e + 1.85)

    for _ in range(max_iterations):
        sinh_h = np.sinh(h)
        f = e * sinh_h - h - mean_a
        f1 = e * np.cosh(h) - 1.0
        f2 = e * sinh_h
        dh = -5.0 * f / (f1 + sign_zp(f1) * np.sqrt(abs(16.0 * f1 * f1 - 20.0 * f * f2)))
        h += dh
        if abs(dh) < HYPERBOLIC_MAX_ERROR:
            return float(-h if M < 0.0 else h)

    raise KeplerConvergenceError(
        4, f"hyperbolic Kepler solver did not converge (e={e}, M={M})")


# ════════════════════════════════════════════════════════════════════════════
#  True Anomaly & Radius
# ════════════════════════════════════════════════════════════════════════════

def elliptical(a: float, e: float, M: float) -> tuple[float, float]:
    """True anomaly [rad] and radius for an elliptical orbit."""
    E = solve_elliptical(e, M)
    if abs(E) == np.pi:
        v = np.pi
    else:
        v = 2.0 * np.arctan(np.sqrt((1.0 + e) / (1.0 - e)) * np.tan(E / 2.0))
    r = a * (1.0 - e * e) / (1.0 + e * np.cos(v))
    return float(v), float(r)


def hyperbolic(a: float, e: float, M: float,
               max_iterations: int = MAX_ITERATIONS) -> tuple[float, float]:
    """True anomaly [rad] and radius for a hyperbolic orbit."""
    H = solve_hyperbolic(e, M, max_iterations)
    r_sin_v = abs(a) * np.sqrt(e * e - 1.0) * np.sinh(H)
    r_cos_v = abs(a) * (e - np.cosh(H))
    return float(np.arctan2(r_sin_v, r_cos_v)), float(np.hypot(r_sin_v, r_cos_v))


def parabolic(q: float, t: float) -> tuple[float, float]:
    """True anomaly [rad] and radius for a parabolic orbit.

    Parameters
    ----------
    q : float — perihelion distance [AU]
    t : float — days since perihelion
    """
    W = 0.03649116245 * t / q / np.sqrt(q)
    G = W / 2.0
    Y = np.cbrt(G + np.sqrt(G * G + 1.0))
    s = Y - 1.0 / Y
    return float(2.0 * np.arctan(s)), float(q * (1.0 + s * s))


def near_parabolic(q: float, e: float, t: float,
                   max_iterations: int = MAX_ITERATIONS) -> tuple[float, float]:
    """True anomaly [rad] and radius for 0.98 ≤ e ≤ 1.1.

    Raises
    ------
    KeplerConvergenceError — when any of the three nested loops needs more
        than ``max_iterations`` passes, or the series diverges
    """
    if t == 0.0:
        return 0.0, q

    q1 = K_RAD * np.sqrt((1.0 + e) / q) / 2.0 / q
    q2 = q1 * t
    s = 2.0 / 3.0 / abs(q2)
    s = 2.0 / np.tan(2.0 * np.arctan(np.cbrt(np.tan(np.arctan(s) / 2.0)))) * np.sign(t)

    divergence = 10_000.0
    g = (1.0 - e) / (1.0 + e)
    outer = 0

    while True:
        s0 = s
        y = s * s
        g1 = -y * s
        q3 = q2 + 2.0 * g * s * y / 3.0

        z = 1
        while True:
            z += 1
            g1 = -g1 * g * y
            f = (z - (z + 1) * g) / (2.0 * z + 1.0) * g1
            q3 += f
            if z > max_iterations or abs(f) > divergence:
                raise KeplerConvergenceError(1, f"near-parabolic series diverged (e={e}, t={t})")
            if abs(f) <= MAX_ERROR:
                break

        outer += 1
        if outer > max_iterations:
            raise KeplerConvergenceError(2, f"near-parabolic outer loop stalled (e={e}, t={t})")

        z = 0
        while True:
            z += 1
            if z > max_iterations:
                raise KeplerConvergenceError(3, f"near-parabolic refinement stalled (e={e}, t={t})")
            s1 = s
            s = (2.0 * s**3 / 3.0 + q3) / (s * s + 1.0)
            if abs(s - s1) <= MAX_ERROR:
                break

        if abs(s - s0) <= MAX_ERROR:
            break

    v = 2.0 * np.arctan(s)
    return float(v), float(q * (1.0 + e) / (1.0 + e * np.cos(v)))


# ════════════════════════════════════════════════════════════════════════════
#  Orbit Solution
# ════════════════════════════════════════════════════════════════════════════

def semi_major_axis(q: float, e: float) -> float:
    """a = q / (1 − e); infinite for a parabola, negative for a hyperbola."""
    if e == 1.0:
        return float('inf')
    return q / (1.0 - e)


def mean_motion(a: float) -> float:
    """Mean daily motion [deg/day] for semi-major axis ``a`` [AU]."""
    return float(K_DEG / abs(a)**1.5)


def solve_orbit(q: float, e: float, t: float, fallback: bool = False,
                max_iterations: int = MAX_ITERATIONS) -> tuple[float, float]:
    """True anomaly [rad] and heliocentric distance [AU] of an orbiting body.

    Parameters
    ----------
    q : float — perihelion distance [AU]
    e : float — eccentricity
    t : float — days since perihelion passage
    fallback : bool — never use the near-parabolic solver
    max_iterations : int — cap for the iterative solvers

    Raises
    ------
    KeplerConvergenceError — from the near-parabolic or hyperbolic solver
    """
    if max_iterations < 1:
        raise ValueError(f"max_iterations must be at least 1, got {max_iterations}")

    regime = select_regime(e, fallback)
    if regime is Regime.PARABOLIC:
        return parabolic(q, t)
    if regime is Regime.NEAR_PARABOLIC:
        return near_parabolic(q, e, t, max_iterations)

    a = semi_major_axis(q, e)
    n = mean_motion(a)
    if regime is Regime.ELLIPTICAL:
        return elliptical(a, e, np.deg2rad(mod(n * t, 360.0)))

    # hyperbolic mean anomaly grows without bound
    return hyperbolic(a, e, np.deg2rad(n * t), max_iterations)
