"""
skyephem.orbits — Mean Orbital Elements of the Major Planets
============================================================

Polynomial mean elements for Mercury..Pluto, a one-pass Kepler solution
giving true anomaly and equation of center, and the heliocentric position
that follows from a set of elements.  This is the "quick" planet model
used when full series accuracy is not needed, and the source of mean
orbital and synodic periods for event searches.

Elements are referred to the mean equinox of date, except Pluto's, which
are J2000.0 values precessed here to the date.

Reference
---------
Meeus, J. (1998). *Astronomical Algorithms*, 2nd ed., Willmann-Bell,
Ch. 31, Table 31.A.
"""

from dataclasses import dataclass

import numpy as np

from .angle import Angle
from .constants import DAYS_PER_CENTURY, EARTH, FIRST_PLANET, JD_J2000, LAST_PLANET, MERCURY, PLUTO
from .ecliptic import precess_ecliptical
from .spherical import SphericalPosition, SphericalPosition3D
from .utils import atan_deg, cos_deg, mod, mod2, sin_deg


@dataclass
class OrbitalElements:
    """Classical heliocentric orbital elements, angles in degrees.

    ``partial`` marks element sets (from minor-body interpolation) where
    only a, e, i, Ω and ϖ are filled in.
    """
    a: float                 # semi-major axis [AU]
    e: float                 # eccentricity
    i: float                 # inclination
    OMEGA: float             # longitude of the ascending node
    pi: float                # longitude of perihelion
    L: float = 0.0           # mean longitude
    omega: float = 0.0       # argument of perihelion (ϖ − Ω)
    M: float = 0.0           # mean anomaly
    C: float = 0.0           # equation of center
    v: float = 0.0           # true anomaly
    partial: bool = False


# ── Mean Elements ───────────────────────────────────────────────────────────
# Per planet: L, a, e, i, Ω, ϖ, each as coefficients of T⁰..T³ with
# T in Julian centuries from J2000.0.
_MEAN_ELEMENTS = np.array([
    # Mercury
    [[252.250906, 149474.0722491, 0.00030350, 0.000000018],
     [0.387098310, 0.0, 0.0, 0.0],
     [0.20563175, 0.000020407, -0.0000000283, -0.00000000018],
     [7.004986, 0.0018215, -0.00001810, 0.000000056],
     [48.330893, 1.1861883, 0.00017542, 0.000000215],
     [77.456119, 1.5564776, 0.00029544, 0.000000009]],
    # Venus
    [[181.979801, 58519.2130302, 0.00031014, 0.000000015],
     [0.723329820, 0.0, 0.0, 0.0],
     [0.00677192, -0.000047765, 0.0000000981, 0.00000000046],
     [3.394662, 0.0010037, -0.00000088, -0.000000007],
     [76.679920, 0.9011206, 0.00040618, -0.000000093],
     [131.563703, 1.4022288, -0.00107618, -0.000005678]],
    # Earth
    [[100.466457, 36000.7698278, 0.00030322, 0.000000020],
     [1.000001018, 0.0, 0.0, 0.0],
     [0.01670863, -0.000042037, -0.0000001267, 0.00000000014],
     [0.0, 0.0, 0.0, 0.0],
     [0.0, 0.0, 0.0, 0.0],
     [102.937348, 1.7195366, 0.00045688, -0.000000018]],
    # Mars
    [[355.433000, 19141.6964471, 0.00031052, 0.000000016],
     [1.523679342, 0.0, 0.0, 0.0],
     [0.09340065, 0.000090484, -0.0000000806, -0.00000000025],
     [1.849726, -0.0006011, 0.00001276, -0.000000007],
     [49.558093, 0.7720959, 0.00001557, 0.000002267],
     [336.060234, 1.8410449, 0.00013477, 0.000000536]],
    # Jupiter
    [[34.351519, 3036.3027748, 0.00022330, 0.000000037],
     [5.202603209, 0.0000001913, 0.0, 0.0],
     [0.04849793, 0.000163225, -0.0000004714, -0.00000000201],
     [1.303267, -0.0054965, 0.00000466, -0.000000002],
     [100.464407, 1.0209774, 0.00040315, 0.000000404],
     [14.331207, 1.6126352, 0.00103042, -0.000004464]],
    # Saturn
    [[50.077444, 1223.5110686, 0.00051908, -0.000000030],
     [9.554909192, -0.0000021390, 0.000000004, 0.0],
     [0.05554814, -0.000346641, -0.0000006436, 0.00000000340],
     [2.488879, -0.0037362, -0.00001519, 0.000000087],
     [113.665503, 0.8770880, -0.00012176, -0.000002249],
     [93.057237, 1.9637613, 0.00083753, 0.000004928]],
    # Uranus
    [[314.055005, 429.8640561, 0.00030390, 0.000000026],
     [19.218446062, -0.0000000372, 0.00000000098, 0.0],
     [0.04638122, -0.000027293, 0.0000000789, 0.00000000024],
     [0.773197, 0.0007744, 0.00003749, -0.000000092],
     [74.005957, 0.5211278, 0.00133947, 0.000018484],
     [173.005291, 1.4863790, 0.00021406, 0.000000434]],
    # Neptune
    [[304.348665, 219.8833092, 0.00030882, 0.000000018],
     [30.110386869, -0.0000001663, 0.00000000069, 0.0],
     [0.00945575, 0.000006033, 0.0, -0.00000000005],
     [1.769953, -0.0093082, -0.00000708, 0.000000027],
     [131.784057, 1.1022039, 0.00025952, -0.000000637],
     [48.120276, 1.4262957, 0.00038434, 0.000000020]],
    # Pluto (J2000.0)
    [[238.96, 144.96, 0.0, 0.0],
     [39.543, 0.0, 0.0, 0.0],
     [0.2490, 0.0, 0.0, 0.0],
     [17.140, 0.0, 0.0, 0.0],
     [110.307, 0.0, 0.0, 0.0],
     [224.075, 0.0, 0.0, 0.0]],
])

KEPLER_TOLERANCE = 1.0e-6
KEPLER_MAX_ITERATIONS = 100


def precession_in_longitude(jde: float) -> float:
    """Accumulated general precession in ecliptic longitude [deg] since J2000."""
    return precess_ecliptical(SphericalPosition(), jde).longitude.degrees


def get_mean_orbital_elements(planet: int, jde: float) -> OrbitalElements | None:
    """Mean orbital elements of a planet (Mercury..Pluto) at ``jde``.

    Returns
    -------
    OrbitalElements, or None for any other body id
    """
    if planet < MERCURY or planet > PLUTO:
        return None

    T = (jde - JD_J2000) / DAYS_PER_CENTURY
    L, a, e, i, OMEGA, pi = _MEAN_ELEMENTS[planet - MERCURY] @ np.array([1.0, T, T**2, T**3])

    L = mod(L, 360.0)
    OMEGA = mod(OMEGA, 360.0)
    pi = mod(pi, 360.0)

    if planet == PLUTO:
        delta_l = precession_in_longitude(jde)
        L = mod(L + delta_l, 360.0)
        OMEGA = mod(OMEGA + delta_l, 360.0)
        pi = mod(pi + delta_l, 360.0)

    omega = mod(pi - OMEGA, 360.0)
    M = mod(L - pi, 360.0)

    # Fixed-point iteration on Kepler's equation, ample for planetary e
    M_rad = np.deg2rad(M)
    E0 = E1 = M_rad
    for _ in range(KEPLER_MAX_ITERATIONS):
        E1 = M_rad + e * np.sin(E0)
        if abs(mod2(E1 - E0, 2.0 * np.pi)) < KEPLER_TOLERANCE:
            break
        E0 = E1

    v = mod(2.0 * atan_deg(np.sqrt((1.0 + e) / (1.0 - e)) * np.tan(E1 / 2.0)), 360.0)
    C = mod(v - M, 360.0)

    return OrbitalElements(a=float(a), e=float(e), i=float(i), OMEGA=OMEGA, pi=pi,
                           L=L, omega=omega, M=M, C=C, v=v)


def heliocentric_from_elements(oe: OrbitalElements) -> SphericalPosition3D:
    """Heliocentric ecliptic position from a complete set of elements."""
    cos_i = cos_deg(oe.i)
    sin_i = sin_deg(oe.i)
    cos_o = cos_deg(oe.OMEGA)
    sin_o = sin_deg(oe.OMEGA)
    r = oe.a * (1.0 - oe.e**2) / (1.0 + oe.e * cos_deg(oe.v))
    vpo = oe.v + oe.pi - oe.OMEGA
    cos_vpo = cos_deg(vpo)
    sin_vpo = sin_deg(vpo)

    x = r * (cos_o * cos_vpo - sin_o * sin_vpo * cos_i)
    y = r * (sin_o * cos_vpo + cos_o * sin_vpo * cos_i)
    z = r * sin_vpo * sin_i

    return SphericalPosition3D(Angle.atan2_nonneg(y, x), Angle.atan2(z, np.hypot(x, y)), r)


# ════════════════════════════════════════════════════════════════════════════
#  Periods
# ════════════════════════════════════════════════════════════════════════════

def mean_orbital_period(planet: int) -> float:
    """Sidereal period [days], 0 for anything but Mercury..Pluto."""
    if planet < MERCURY or planet > PLUTO:
        return 0.0
    # degrees per Julian century → days per revolution
    return DAYS_PER_CENTURY * 360.0 / _MEAN_ELEMENTS[planet - MERCURY][0][1]


def mean_conjunction_period(planet: int) -> float:
    """Mean synodic period [days] relative to Earth, 0 where undefined."""
    if planet == EARTH or planet < FIRST_PLANET or planet > LAST_PLANET:
        return 0.0

    p0 = mean_orbital_period(planet)
    p1 = mean_orbital_period(EARTH)
    if p0 == 0.0:
        return 0.0
    if p1 < p0:
        p0, p1 = p1, p0

    # Geometric series for how long the faster body takes to lap the slower
    catch_up = 1.0
    total = 0.0
    for _ in range(25):
        total += catch_up * p0
        catch_up *= p0 / p1

    return float(total)
