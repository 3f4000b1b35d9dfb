"""
skyephem.saturn — Saturn's Major Satellites
===========================================

Positions of Mimas, Enceladus, Tethys, Dione, Rhea, Titan, Hyperion and
Iapetus relative to Saturn from Dourneau's theory.  The four inner moons
have their own element expressions; Rhea and the outer moons share an
equation-of-center solution.

All angles are degrees.  The theory is referred to B1950.0, so Saturn's
own position is precessed back to that equinox before the final
rotations.

Reference
---------
Meeus, J. (1998). *Astronomical Algorithms*, 2nd ed., Willmann-Bell,
Ch. 46, pp. 323–333.
Dourneau, G. (1987). Thèse, Observatoire de Bordeaux.
"""

from dataclasses import dataclass

import numpy as np

from .constants import (
    DELAYED_TIME, FIRST_SATURN_MOON, JD_B1950, LAST_SATURN_MOON, SATURN, SATURN_FLATTENING,
)
from .ecliptic import precess_ecliptical_3d
from .satellites import PlanetaryMoons, register_moon_names, rotate
from .utils import asin_deg, atan2_deg, cos_deg, sin_deg

MOON_NAMES = ('Mimas', 'Enceladus', 'Tethys', 'Dione', 'Rhea', 'Titan', 'Hyperion', 'Iapetus')
register_moon_names(FIRST_SATURN_MOON, LAST_SATURN_MOON, MOON_NAMES)

SATURN_RADII_PER_AU = 2475.0
EQUATOR_INCLINATION = 28.0817   # Saturn's equator to the B1950 ecliptic
EQUATOR_NODE = 168.8112

_S1 = sin_deg(EQUATOR_INCLINATION)
_C1 = cos_deg(EQUATOR_INCLINATION)


@dataclass(frozen=True)
class _Arguments:
    t1: float
    t2: float
    t4: float
    t6: float
    t7: float
    t8: float
    t9: float
    t10: float
    t11: float
    W0: float
    W1: float
    W2: float
    W3: float
    W4: float
    W5: float
    W6: float
    W7: float
    W8: float

    @classmethod
    def at(cls, t: float) -> '_Arguments':
        """Time arguments for a light-time corrected JDE."""
        t1 = t - 2411093.0
        t2 = t1 / 365.25
        t3 = (t - 2433282.423) / 365.25 + 1950.0
        t4 = t - 2411368.0
        t5 = t4 / 365.25
        t6 = t - 2415020.0
        t7 = t6 / 36525.0
        t8 = t6 / 365.25
        t9 = (t - 2442000.5) / 365.25
        t10 = t - 2409786.0
        t11 = t10 / 36525.0

        return cls(
            t1, t2, t4, t6, t7, t8, t9, t10, t11,
            W0=5.095 * (t3 - 1866.39),
            W1=74.4 + 32.39 * t2,
            W2=134.3 + 92.62 * t2,
            W3=42.0 - 0.5118 * t5,
            W4=276.59 + 0.5118 * t5,
            W5=267.2635 + 1222.1136 * t7,
            W6=175.4762 + 1221.5515 * t7,
            W7=2.4891 + 0.002435 * t7,
            W8=113.35 - 0.2597 * t7,
        )


# ════════════════════════════════════════════════════════════════════════════
#  Inner Moons
# ════════════════════════════════════════════════════════════════════════════
# Each returns (λ, r, γ, Ω, K): longitude in orbit, radius [Saturn radii],
# inclination and node on Saturn's equator, light-time constant.

def _mimas(s: _Arguments):
    L = (127.64 + 381.994497 * s.t1 - 43.57 * sin_deg(s.W0) - 0.720 * sin_deg(3.0 * s.W0)
         - 0.02144 * sin_deg(5.0 * s.W0))
    p = 106.1 + 365.549 * s.t2
    M = L - p
    C = 2.18287 * sin_deg(M) + 0.025988 * sin_deg(2.0 * M) + 0.00043 * sin_deg(3.0 * M)
    r = 3.06879 / (1.0 + 0.01905 * cos_deg(M + C))
    return L + C, r, 1.563, 54.5 - 365.072 * s.t2, 20947.0


def _enceladus(s: _Arguments):
    L = 200.317 + 262.7319002 * s.t1 + 0.25667 * sin_deg(s.W1) + 0.20883 * sin_deg(s.W2)
    p = 309.107 + 123.44121 * s.t2
    M = L - p
    C = 0.55577 * sin_deg(M) + 0.00168 * sin_deg(2.0 * M)
    r = 3.94118 / (1.0 + 0.00485 * cos_deg(M + C))
    return L + C, r, 0.0262, 348.0 - 151.95 * s.t2, 23715.0


def _tethys(s: _Arguments):
    lam = (285.306 + 190.69791226 * s.t1 + 2.063 * sin_deg(s.W0)
           + 0.03409 * sin_deg(3.0 * s.W0) + 0.001015 * sin_deg(5.0 * s.W0))
    return lam, 4.880998, 1.0976, 111.33 - 72.2441 * s.t2, 26382.0


def _dione(s: _Arguments):
    L = 254.712 + 131.53493193 * s.t1 - 0.0215 * sin_deg(s.W1) - 0.01733 * sin_deg(s.W2)
    p = 174.8 + 30.820 * s.t2
    M = L - p
    C = 0.24717 * sin_deg(M) + 0.00033 * sin_deg(2.0 * M)
    r = 6.24871 / (1.0 + 0.002157 * cos_deg(M + C))
    return L + C, r, 0.0139, 232.0 - 30.27 * s.t2, 29876.0


# ════════════════════════════════════════════════════════════════════════════
#  Outer Moons
# ════════════════════════════════════════════════════════════════════════════
# Each returns (e, p, a, Ω, i, λ', K) for solve_outer_moon.

def _rhea(s: _Arguments):
    p1 = 342.7 + 10.057 * s.t2
    a1 = 0.000265 * sin_deg(p1) + 0.001 * sin_deg(s.W4)
    a2 = 0.000265 * cos_deg(p1) + 0.001 * cos_deg(s.W4)
    e = np.hypot(a1, a2)
    p = atan2_deg(a1, a2)
    N = 345.0 - 10.057 * s.t2
    lam1 = 359.244 + 79.69004720 * s.t1 + 0.086754 * sin_deg(N)
    i = 28.0362 + 0.346890 * cos_deg(N) + 0.01930 * cos_deg(s.W3)
    OMEGA = 168.8034 + 0.73693 * sin_deg(N) + 0.041 * sin_deg(s.W3)
    return e, p, 8.725924, OMEGA, i, lam1, 35313.0


def _titan(s: _Arguments):
    L = 261.1582 + 22.57697855 * s.t4 + 0.074025 * sin_deg(s.W3)
    i1 = 27.45141 + 0.295999 * cos_deg(s.W3)
    OMEGA1 = 168.66925 + 0.628808 * sin_deg(s.W3)
    a1 = sin_deg(s.W7) * sin_deg(OMEGA1 - s.W8)
    a2 = cos_deg(s.W7) * sin_deg(i1) - sin_deg(s.W7) * cos_deg(i1) * cos_deg(OMEGA1 - s.W8)
    g0 = 102.8623
    psi = atan2_deg(a1, a2)
    sigma = np.hypot(a1, a2)
    g = s.W4 - OMEGA1 - psi

    ww = s.W4
    for _ in range(3):
        ww = s.W4 + 0.37515 * (sin_deg(2.0 * g) - sin_deg(2.0 * g0))
        g = ww - OMEGA1 - psi

    e1 = 0.029092 + 0.00019048 * (cos_deg(2.0 * g) - cos_deg(2.0 * g0))
    q = 2.0 * (s.W5 - ww)
    b1 = sin_deg(i1) * sin_deg(OMEGA1 - s.W8)
    b2 = cos_deg(s.W7) * sin_deg(i1) * cos_deg(OMEGA1 - s.W8) - sin_deg(s.W7) * cos_deg(i1)
    theta = atan2_deg(b1, b2) + s.W8
    e = e1 + 0.002778797 * e1 * cos_deg(q)
    p = ww + 0.159215 * sin_deg(q)
    u = 2.0 * s.W5 - 2.0 * theta + psi
    h = 0.9375 * e1 * e1 * sin_deg(q) + 0.1875 * sigma * sigma * sin_deg(2.0 * (s.W5 - theta))
    lam1 = L - 0.254744 * (e1 * sin_deg(s.W6) + 0.75 * e1 * e1 * sin_deg(2.0 * s.W6) + h)
    i = i1 + 0.031843 * sigma * cos_deg(u)
    OMEGA = OMEGA1 + 0.031843 * sigma * sin_deg(u) / sin_deg(i1)
    return e, p, 20.216193, OMEGA, i, lam1, 53800.0


def _hyperion(s: _Arguments):
    eta = 92.39 + 0.5621071 * s.t6
    zeta = 148.19 - 19.18 * s.t8
    theta = 184.8 - 35.41 * s.t9
    theta1 = theta - 7.5
    a_s = 176.0 + 12.22 * s.t8
    b_s = 8.0 + 24.44 * s.t8
    c_s = b_s + 5.0
    ww = 69.898 - 18.67088 * s.t8
    phi = 2.0 * (ww - s.W5)
    chi = 94.9 - 2.292 * s.t8

    a = (24.50601 - 0.08686 * cos_deg(eta) - 0.00166 * cos_deg(zeta + eta)
         + 0.00175 * cos_deg(zeta - eta))
    e = (0.103458 - 0.004099 * cos_deg(eta) - 0.000167 * cos_deg(zeta + eta)
         + 0.000235 * cos_deg(zeta - eta) + 0.02303 * cos_deg(zeta)
         - 0.00212 * cos_deg(2.0 * zeta) + 0.000151 * cos_deg(3.0 * zeta)
         + 0.00013 * cos_deg(phi))
    p = (ww + 0.15648 * sin_deg(chi) - 0.4457 * sin_deg(eta) - 0.2657 * sin_deg(zeta + eta)
         - 0.3573 * sin_deg(zeta - eta) - 12.872 * sin_deg(zeta) + 1.668 * sin_deg(2.0 * zeta)
         - 0.2419 * sin_deg(3.0 * zeta) - 0.07 * sin_deg(phi))
    lam1 = (177.047 + 16.91993829 * s.t6 + 0.15648 * sin_deg(chi) + 9.142 * sin_deg(eta)
            + 0.007 * sin_deg(2.0 * eta) - 0.014 * sin_deg(3.0 * eta)
            + 0.2275 * sin_deg(zeta + eta) + 0.2112 * sin_deg(zeta - eta)
            - 0.26 * sin_deg(zeta) - 0.0098 * sin_deg(2.0 * zeta)
            - 0.013 * sin_deg(a_s) + 0.017 * sin_deg(b_s) - 0.0303 * sin_deg(phi))
    i = (27.3347 + 0.643486 * cos_deg(chi) + 0.315 * cos_deg(s.W3) + 0.018 * cos_deg(theta)
         - 0.018 * cos_deg(c_s))
    OMEGA = (168.6812 + 1.40136 * cos_deg(chi) + 0.68599 * sin_deg(s.W3)
             - 0.0392 * sin_deg(c_s) + 0.0366 * sin_deg(theta1))
    return e, p, a, OMEGA, i, lam1, 59222.0


def _iapetus(s: _Arguments):
    L = 261.1582 + 22.57697855 * s.t4
    ww1 = 91.769 + 0.562 * s.t7
    psi = 4.367 - 0.195 * s.t7
    theta = 146.819 - 3.198 * s.t7
    phi = 60.470 + 1.521 * s.t7
    PHI = 205.055 - 2.091 * s.t7
    e1 = 0.028298 + 0.001156 * s.t11
    ww0 = 352.91 + 11.71 * s.t11
    mu = 76.3852 + 4.53795125 * s.t10
    t11 = s.t11
    i1 = 18.4602 - 0.9518 * t11 - 0.072 * t11**2 + 0.0054 * t11**3
    OMEGA1 = 143.198 - 3.919 * t11 + 0.116 * t11**2 + 0.008 * t11**3

    l = mu - ww0
    g = ww0 - OMEGA1 - psi
    g1 = ww0 - OMEGA1 - phi
    ls = s.W5 - ww1
    gs = ww1 - theta
    lT = L - s.W4
    gT = s.W4 - PHI
    u1 = 2.0 * (l + g - ls - gs)
    u2 = l + g1 - lT - gT
    u3 = l + 2.0 * (g - ls - gs)
    u4 = lT + gT - g1
    u5 = 2.0 * (ls + gs)

    a = 58.935028 + 0.004638 * cos_deg(u1) + 0.058222 * cos_deg(u2)
    e = (e1 - 0.0014097 * cos_deg(g1 - gT) + 0.0003733 * cos_deg(u5 - 2.0 * g)
         + 0.0001180 * cos_deg(u3) + 0.0002408 * cos_deg(l)
         + 0.0002849 * cos_deg(l + u2) + 0.0006190 * cos_deg(u4))
    w = (0.08077 * sin_deg(g1 - gT) + 0.02139 * sin_deg(u5 - 2.0 * g) - 0.00676 * sin_deg(u3)
         + 0.01380 * sin_deg(l) + 0.01632 * sin_deg(l + u2) + 0.03547 * sin_deg(u4))
    p = ww0 + w / e1
    lam1 = (mu - 0.04299 * sin_deg(u2) - 0.00789 * sin_deg(u1) - 0.06312 * sin_deg(ls)
            - 0.00295 * sin_deg(2.0 * ls) - 0.02231 * sin_deg(u5) + 0.00650 * sin_deg(u5 + psi))
    i = (i1 + 0.04204 * cos_deg(u5 + psi) + 0.00235 * cos_deg(l + g1 + lT + gT + phi)
         + 0.00360 * cos_deg(u2 + phi))
    w1 = (0.04204 * sin_deg(u5 + psi) + 0.00235 * sin_deg(l + g1 + lT + gT + phi)
          + 0.00358 * sin_deg(u2 + phi))
    OMEGA = OMEGA1 + w1 / sin_deg(i1)
    return e, p, a, OMEGA, i, lam1, 91820.0


def solve_outer_moon(e: float, M: float, a: float, OMEGA: float, i: float,
                     lam1: float) -> tuple[float, float, float, float]:
    """Equation of center and reduction to Saturn's equator.

    Returns
    -------
    lam : float — longitude in orbit [deg]
    r : float — radius [Saturn radii]
    gamma : float — inclination to Saturn's equator [deg]
    w : float — node on Saturn's equator [deg]
    """
    e2 = e * e
    e3 = e2 * e
    e4 = e3 * e
    e5 = e4 * e

    C = np.rad2deg((2.0 * e - 0.25 * e3 + 0.0520833333 * e5) * sin_deg(M)
                   + (1.25 * e2 - 0.458333333 * e4) * sin_deg(2.0 * M)
                   + (1.083333333 * e3 - 0.671875 * e5) * sin_deg(3.0 * M)
                   + 1.072917 * e4 * sin_deg(4.0 * M) + 1.142708 * e5 * sin_deg(5.0 * M))

    r = a * (1.0 - e2) / (1.0 + e * cos_deg(M + C))

    g = OMEGA - EQUATOR_NODE
    a1 = sin_deg(i) * sin_deg(g)
    a2 = _C1 * sin_deg(i) * cos_deg(g) - _S1 * cos_deg(i)
    gamma = asin_deg(np.hypot(a1, a2))
    u = atan2_deg(a1, a2)

    h = _C1 * sin_deg(i) - _S1 * cos_deg(i) * cos_deg(g)
    psi = atan2_deg(_S1 * sin_deg(g), h)

    return float(lam1 + C + u - g - psi), float(r), gamma, EQUATOR_NODE + u


_INNER = (_mimas, _enceladus, _tethys, _dione)
_OUTER = (_rhea, _titan, _hyperion, _iapetus)


class SaturnMoons(PlanetaryMoons):
    """Eight major satellites of Saturn.

    No rate table is available, so event searches step minute by minute.
    """

    first_moon = FIRST_SATURN_MOON
    flattening = SATURN_FLATTENING

    def _compute_positions(self, jde, sun_perspective):
        ss = self.solar_system
        light_delay = jde - ss.get_ecliptic_position(SATURN, jde, None, DELAYED_TIME).radius

        if sun_perspective:
            spos = ss.get_heliocentric_position(SATURN, jde - light_delay)
        else:
            spos = ss.get_ecliptic_position(SATURN, jde - light_delay, None, 0, jde)

        spos = precess_ecliptical_3d(spos, jde, JD_B1950)
        L0 = spos.longitude.degrees
        B0 = spos.latitude.degrees
        DELTA = spos.radius

        s = _Arguments.at(jde - light_delay)
        elements = [series(s) for series in _INNER]
        for series in _OUTER:
            e, p, a, OMEGA, i, lam1, K = series(s)
            lam, r, gamma, w = solve_outer_moon(e, lam1 - p, a, OMEGA, i, lam1)
            elements.append((lam, r, gamma, w, K))

        lam, r, gamma, OMEGA, K = np.array(elements).T
        u = np.deg2rad(lam - OMEGA)
        w = np.deg2rad(OMEGA - EQUATOR_NODE)
        gamma = np.deg2rad(gamma)

        X = np.append(r * (np.cos(u) * np.cos(w) - np.sin(u) * np.cos(gamma) * np.sin(w)), 0.0)
        Y = np.append(r * (np.sin(u) * np.cos(w) * np.cos(gamma) + np.cos(u) * np.sin(w)), 0.0)
        Z = np.append(r * np.sin(u) * np.sin(gamma), 1.0)      # fictitious pole moon last

        # Saturn's equator → the B1950 ecliptic → the equinox
        B1, C1 = rotate(Y, Z, EQUATOR_INCLINATION)
        A2, B2 = rotate(X, B1, EQUATOR_NODE)
        # then toward the direction of Saturn from the observer
        A3 = A2 * sin_deg(L0) - B2 * cos_deg(L0)
        B3 = A2 * cos_deg(L0) + B2 * sin_deg(L0)
        C4, B4 = rotate(C1, B3, B0)

        return self._project(A3, B4, C4, DELTA, SATURN_RADII_PER_AU, r, K)
