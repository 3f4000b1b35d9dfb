"""
test_angle.py — Angles, Spherical Positions, Refraction
=======================================================
"""

import numpy as np
import numpy.testing as npt
import pytest

from skyephem.angle import (
    FMT_DD, FMT_MINS, FMT_SECS, FMT_SIGNED, Angle, Mode, Unit, convert_to_radians,
)
from skyephem.refraction import refracted_altitude, unrefracted_altitude
from skyephem.spherical import SphericalPosition, SphericalPosition3D


# ═══════════════════════════════════════════════════════════════════════════
#  Angle
# ═══════════════════════════════════════════════════════════════════════════

def test_range_modes():
    npt.assert_allclose(Angle(370.0, Unit.DEGREES).degrees, 10.0, atol=1e-12)
    npt.assert_allclose(Angle(190.0, Unit.DEGREES).degrees, -170.0, atol=1e-12)
    npt.assert_allclose(Angle(-10.0, Unit.DEGREES, Mode.RANGE_LIMIT_NONNEGATIVE).degrees,
                        350.0, atol=1e-12)
    npt.assert_allclose(Angle(725.0, Unit.DEGREES, Mode.RANGE_UNLIMITED).degrees, 725.0)


def test_unit_views():
    a = Angle(6.0, Unit.HOURS)
    npt.assert_allclose(a.degrees, 90.0)
    npt.assert_allclose(a.radians, np.pi / 2)
    npt.assert_allclose(a.arc_minutes, 5400.0)
    npt.assert_allclose(a.rotations, 0.25)
    npt.assert_allclose(Angle(1.0, Unit.ARC_SECONDS).degrees, 1.0 / 3600.0)
    npt.assert_allclose(Angle(100.0, Unit.GRADS).degrees, 90.0)


def test_unknown_unit_rejected():
    with pytest.raises(ValueError):
        convert_to_radians(1.0, "furlongs")


def test_arithmetic():
    a = Angle(350.0, Unit.DEGREES)
    b = Angle(20.0, Unit.DEGREES)
    npt.assert_allclose(a.add(b).degrees, 10.0, atol=1e-12)
    npt.assert_allclose(b.subtract(a).degrees, 30.0, atol=1e-12)
    npt.assert_allclose(b.subtract_nonneg(Angle(30.0, Unit.DEGREES)).degrees, 350.0, atol=1e-12)
    npt.assert_allclose(b.complement().degrees, 70.0, atol=1e-12)
    npt.assert_allclose(b.supplement().degrees, 160.0, atol=1e-12)
    npt.assert_allclose(b.opposite_nonneg().degrees, 200.0, atol=1e-12)
    npt.assert_allclose(b.negate_nonneg().degrees, 340.0, atol=1e-12)
    npt.assert_allclose(b.multiply(3.0).degrees, 60.0, atol=1e-12)
    npt.assert_allclose(b.divide(4.0).degrees, 5.0, atol=1e-12)


def test_trig_factories():
    npt.assert_allclose(Angle.atan2(1.0, -1.0).degrees, 135.0)
    npt.assert_allclose(Angle.atan2_nonneg(-1.0, 1.0).degrees, 315.0)
    npt.assert_allclose(Angle.asin(0.5).degrees, 30.0)
    npt.assert_allclose(Angle(30.0, Unit.DEGREES).sin, 0.5)
    assert Angle(0.0).tan == 0.0


def test_formatting():
    assert Angle(23.5, Unit.DEGREES).to_string(FMT_DD | FMT_MINS, 0) == "23°30'"
    assert Angle(5.25, Unit.DEGREES).to_string(FMT_DD | FMT_MINS, 0) == "05°15'"
    assert Angle(90.0, Unit.DEGREES).to_hour_string(FMT_SECS, 0) == "6h00m00s"
    assert Angle(12.5, Unit.DEGREES).to_string(FMT_SIGNED, 1) == "+12.5°"
    assert Angle(-12.5, Unit.DEGREES).to_string(0, 1) == "-12.5°"
    assert Angle(-33.5, Unit.DEGREES).to_suffixed_string("N", "S", FMT_MINS, 0) == "33°30'S"


# ═══════════════════════════════════════════════════════════════════════════
#  Spherical Positions
# ═══════════════════════════════════════════════════════════════════════════

def test_distance_from():
    a = SphericalPosition(0.0, 0.0)
    b = SphericalPosition(90.0, 0.0, Unit.DEGREES, Unit.DEGREES)
    npt.assert_allclose(a.distance_from(b).degrees, 90.0, atol=1e-12)
    c = SphericalPosition(180.0, 45.0, Unit.DEGREES, Unit.DEGREES)
    npt.assert_allclose(a.distance_from(c).degrees, 135.0, atol=1e-9)


def test_longitude_nonnegative_latitude_signed():
    pos = SphericalPosition(-90.0, -30.0, Unit.DEGREES, Unit.DEGREES)
    npt.assert_allclose(pos.right_ascension.degrees, 270.0)
    npt.assert_allclose(pos.declination.degrees, -30.0)


def test_rectangular_round_trip():
    pos = SphericalPosition3D.from_rectangular(1.0, -2.0, 0.5)
    npt.assert_allclose(pos.xyz, [1.0, -2.0, 0.5], atol=1e-12)
    npt.assert_allclose(pos.radius, np.sqrt(5.25))
    assert 0.0 <= pos.longitude.radians < 2 * np.pi


def test_translate():
    earth = SphericalPosition3D(0.0, 0.0, 1.0)
    mars = SphericalPosition3D(np.pi, 0.0, 1.5)
    seen = mars.translate(earth)
    npt.assert_allclose(seen.radius, 2.5, atol=1e-12)
    npt.assert_allclose(seen.longitude.degrees, 180.0, atol=1e-9)


# ═══════════════════════════════════════════════════════════════════════════
#  Refraction
# ═══════════════════════════════════════════════════════════════════════════

def test_refraction_zenith_and_horizon():
    npt.assert_allclose(refracted_altitude(90.0), 90.0, atol=1e-12)
    npt.assert_allclose(refracted_altitude(-0.5833), 0.0, atol=1e-3)
    npt.assert_allclose(unrefracted_altitude(0.0), -0.5833, atol=1e-2)


def test_refraction_identity_below_horizon():
    assert refracted_altitude(-10.0) == -10.0
    assert unrefracted_altitude(-5.0) == -5.0


@pytest.mark.parametrize("h", [0.0, 2.0, 10.0, 30.0, 60.0, 85.0])
def test_refraction_inverse(h):
    npt.assert_allclose(unrefracted_altitude(refracted_altitude(h)), h, atol=0.01)
    assert refracted_altitude(h) >= h


def test_refraction_blend_is_continuous():
    npt.assert_allclose(refracted_altitude(-4.0 + 1e-9), -4.0, atol=1e-6)
    below = refracted_altitude(-2.0 - 1e-9)
    above = refracted_altitude(-2.0 + 1e-9)
    npt.assert_allclose(below, above, atol=1e-6)
