"""
test_observer.py — Observer Geometry, Parallax, Horizontal Coordinates
======================================================================
"""

import numpy as np
import numpy.testing as npt
import pytest

from skyephem.angle import Angle, Unit
from skyephem.constants import NUTATION, REFRACTION, SUN, TOPOCENTRIC
from skyephem.observer import SkyObserver, SkyObserverProtocol
from skyephem.spherical import SphericalPosition, SphericalPosition3D
from skyephem.timescale import julian_day, ut_to_tdb

# Meeus Example 13.b
WASHINGTON = (-77.065556, 38.921389)
JDU_1987 = julian_day(1987, 4, 10, 19, 21)


def test_geocentric_values_meeus_11a(palomar):
    npt.assert_allclose(palomar.rho_sin_gcl, 0.546861, atol=1e-6)
    npt.assert_allclose(palomar.rho_cos_gcl, 0.836339, atol=1e-6)


def test_geocentric_values_at_pole():
    pole = SkyObserver(0.0, 90.0)
    npt.assert_allclose(pole.rho_cos_gcl, 0.0, atol=1e-6)
    npt.assert_allclose(pole.rho_sin_gcl, 0.996647, atol=1e-6)
    near = SkyObserver(0.0, 90.0 - 1.5 / 3600.0)
    assert 0.0 < near.rho_cos_gcl < 1e-4


def test_observer_protocol(greenwich):
    assert isinstance(greenwich, SkyObserverProtocol)
    assert isinstance(greenwich.longitude, Angle)


def test_local_hour_angle_cached():
    observer = SkyObserver(*WASHINGTON)
    first = observer.get_local_hour_angle(JDU_1987, True)
    assert observer.get_local_hour_angle(JDU_1987, True) is first
    assert observer.get_local_hour_angle(JDU_1987, False) is not first
    # 8h34m56.853s apparent Greenwich sidereal time, less 77°03′56″
    npt.assert_allclose(first.degrees, 128.7368875 - 77.065556, atol=2e-5)


def test_horizontal_meeus_13b():
    observer = SkyObserver(*WASHINGTON)
    venus = SphericalPosition(347.3193375, -6.719892, Unit.DEGREES, Unit.DEGREES)
    horizontal = observer.equatorial_to_horizontal(venus, JDU_1987, NUTATION)
    npt.assert_allclose(horizontal.azimuth.degrees, 248.0337, atol=1e-3)
    npt.assert_allclose(horizontal.altitude.degrees, 15.1249, atol=1e-3)


@pytest.mark.parametrize("flags", [0, NUTATION])
def test_horizontal_round_trip(greenwich, flags):
    jdu = julian_day(2021, 3, 14, 22, 5)
    for ra, dec in [(10.0, 20.0), (200.0, -10.0), (300.0, 60.0)]:
        pos = SphericalPosition(ra, dec, Unit.DEGREES, Unit.DEGREES)
        horizontal = greenwich.equatorial_to_horizontal(pos, jdu, flags)
        back = greenwich.horizontal_to_equatorial(horizontal, jdu, flags)
        atol = 1e-8
        npt.assert_allclose(back.declination.degrees, dec, atol=atol)
        npt.assert_allclose(back.right_ascension.subtract(pos.right_ascension).degrees,
                            0.0, atol=atol / np.cos(np.deg2rad(dec)))


def test_refraction_raises_altitude(greenwich):
    jdu = julian_day(2021, 3, 14, 22, 5)
    pos = SphericalPosition(10.0, 20.0, Unit.DEGREES, Unit.DEGREES)
    plain = greenwich.equatorial_to_horizontal(pos, jdu)
    refracted = greenwich.equatorial_to_horizontal(pos, jdu, REFRACTION)
    if plain.altitude.degrees > 0.0:
        assert refracted.altitude.degrees > plain.altitude.degrees


def test_topocentric_parallax_meeus_40a(palomar):
    # Mars, 2003 Aug 28 3:17 UT
    jde = ut_to_tdb(julian_day(2003, 8, 28, 3, 17))
    mars = SphericalPosition3D(339.530208, -15.771083, 0.37276, Unit.DEGREES, Unit.DEGREES)
    topo = palomar.equatorial_topocentric_adjustment(mars, jde, 0)
    npt.assert_allclose(topo.right_ascension.degrees, 339.535583, atol=1e-4)
    npt.assert_allclose(topo.declination.degrees, -15.775, atol=3e-4)
    assert topo.radius == 0.37276


def test_topocentric_distance_shrinks_overhead(greenwich):
    jdu = julian_day(2021, 3, 14, 22, 5)
    lst = greenwich.get_local_hour_angle(jdu, False).degrees
    overhead = SphericalPosition3D(lst, 51.4779, 0.0025, Unit.DEGREES, Unit.DEGREES)
    horizontal = greenwich.equatorial_to_horizontal(overhead, jdu, TOPOCENTRIC)
    npt.assert_allclose(horizontal.altitude.degrees, 90.0, atol=1e-5)
    assert horizontal.radius < 0.0025


def test_apparent_solar_time_near_noon(greenwich):
    # Greenwich, equation of time about -1.7 min on 2020 June 21
    solar_time = greenwich.get_apparent_solar_time(julian_day(2020, 6, 21, 12))
    npt.assert_allclose(solar_time.hours, 12.0, atol=0.05)


def test_sun_horizontal_at_noon(solar_system, greenwich):
    pos = solar_system.get_horizontal_position(SUN, julian_day(2020, 6, 21, 12, 2), greenwich)
    npt.assert_allclose(pos.altitude.degrees, 90.0 - 51.4779 + 23.44, atol=0.1)
