"""
skyephem.solvers — Bracketed Root & Extremum Finders
====================================================

The two scalar searches every event type is built on:

- ``find_zero`` — secant / false-position iteration between two samples
  of opposite sign.
- ``find_min_max`` — Brent's method (golden section with parabolic
  acceleration) over a bracketing triple, searching for a minimum or a
  maximum depending on the shape of the bracket.

Both are best effort: when the iteration cap is reached the last point
tried is returned, and ``SolverResult.iterations`` tells the caller so.

Reference
---------
Press, W.H. et al., *Numerical Recipes*, Cambridge University Press (1986),
§9.2 and §10.2.
"""

from dataclasses import dataclass
from typing import Callable

import numpy as np

CGOLD = 0.3819660
ZEPS = 1.0e-20


@dataclass
class SolverResult:
    x: float                     # abscissa found
    y: float                     # function value there
    iterations: int              # iterations used (> max_iterations if capped)
    found_maximum: bool = False  # min/max search only


def _check_iterations(max_iterations: int) -> None:
    if max_iterations < 1:
        raise ValueError(f"max_iterations must be at least 1, got {max_iterations}")


def find_zero(func: Callable[[float], float], tolerance: float, max_iterations: int,
              x1: float, y1: float, x2: float, y2: float) -> SolverResult:
    """Locate a zero crossing between two bracketing samples.

    Parameters
    ----------
    func : callable — f(x) → float
    tolerance : float — stop once |f(x)| ≤ tolerance
    max_iterations : int — iteration cap
    x1, y1, x2, y2 : float — samples with y1 and y2 of opposite sign

    Returns
    -------
    SolverResult with the last x tried
    """
    _check_iterations(max_iterations)

    x = x1
    y = y1
    iterations = 0

    while iterations < max_iterations:
        iterations += 1
        if y2 == y1:
            break

        x = x1 - y1 / (y2 - y1) * (x2 - x1)
        y = func(x)

        if abs(y) <= tolerance:
            break

        if (y1 < y2 and y < 0.0) or (y1 > y2 and y > 0.0):
            x1, y1 = x, y
        else:
            x2, y2 = x, y
    else:
        iterations += 1

    return SolverResult(x, y, iterations)


def find_min_max(func: Callable[[float], float], tolerance: float, max_iterations: int,
                 ax: float, bx: float, cx: float) -> SolverResult:
    """Locate the extremum bracketed by ``ax < bx < cx`` (or reversed).

    A maximum is sought when f(bx) > f(ax), otherwise a minimum; the
    function is negated internally so both cases minimize.

    Parameters
    ----------
    func : callable — f(x) → float
    tolerance : float — fractional precision in x
    max_iterations : int — iteration cap
    ax, bx, cx : float — bracket with bx between ax and cx

    Returns
    -------
    SolverResult, ``found_maximum`` telling which kind of extremum
    """
    _check_iterations(max_iterations)

    a = min(ax, cx)
    b = max(ax, cx)
    x = w = v = bx
    fx = func(x)
    d = 0.0
    e = 0.0

    sign = 1.0
    if fx > func(ax):
        sign = -1.0
        fx = -fx
    fw = fv = fx

    iterations = 0
    while iterations < max_iterations:
        iterations += 1
        xm = 0.5 * (a + b)
        tol1 = tolerance * abs(x) + ZEPS
        tol2 = 2.0 * tol1

        if abs(x - xm) <= tol2 - 0.5 * (b - a):
            return SolverResult(x, sign * fx, iterations, sign < 0.0)

        if abs(e) > tol1:
            # trial parabolic fit
            r = (x - w) * (fx - fv)
            q = (x - v) * (fx - fw)
            p = (x - v) * q - (x - w) * r
            q = 2.0 * (q - r)
            if q > 0.0:
                p = -p
            q = abs(q)
            etemp = e
            e = d

            if abs(p) >= abs(0.5 * q * etemp) or p <= q * (a - x) or p >= q * (b - x):
                e = a - x if x >= xm else b - x
                d = CGOLD * e
            else:
                d = p / q
                u = x + d
                if u - a < tol2 or b - u < tol2:
                    d = float(np.sign(xm - x) * tol1)
        else:
            e = a - x if x >= xm else b - x
            d = CGOLD * e

        u = x + d if abs(d) >= tol1 else x + float(np.sign(d) * tol1)
        fu = sign * func(u)

        if fu <= fx:
            if u >= x:
                a = x
            else:
                b = x
            v, w, x = w, x, u
            fv, fw, fx = fw, fx, fu
        else:
            if u < x:
                a = u
            else:
                b = u
            if fu <= fw or w == x:
                v, w = w, u
                fv, fw = fw, fu
            elif fu <= fv or v == x or v == w:
                v = u
                fv = fu

    return SolverResult(x, sign * fx, iterations + 1, sign < 0.0)
