"""
skyephem.spherical — Spherical Positions
========================================

Two-angle positions on the celestial sphere and their 3-D extension with a
radius (distance in AU).  The same structure serves ecliptic (longitude /
latitude), equatorial (right ascension / declination) and horizontal
(azimuth / altitude) coordinates; the alias properties are only views.

Longitude is always stored non-negative in [0, 2π); latitude is signed.
"""

import numpy as np
from numpy.typing import NDArray

from .angle import Angle, Mode, TWO_PI, Unit
from .utils import limit_neg1_to1, mod2


def _as_angle(value, unit: Unit, mode: Mode) -> Angle:
    if isinstance(value, Angle):
        if mode is Mode.RANGE_LIMIT_NONNEGATIVE and value.radians < 0.0:
            return Angle(value.radians, Unit.RADIANS, mode)
        return value
    return Angle(value, unit, mode)


class SphericalPosition:
    """Longitude/latitude pair.

    Parameters
    ----------
    longitude : Angle or float — in ``long_unit`` when a float
    latitude : Angle or float — in ``lat_unit`` when a float
    """

    __slots__ = ('_longitude', '_latitude')

    def __init__(self, longitude: Angle | float = 0.0, latitude: Angle | float = 0.0,
                 long_unit: Unit = Unit.RADIANS, lat_unit: Unit = Unit.RADIANS):
        self._longitude = _as_angle(longitude, long_unit, Mode.RANGE_LIMIT_NONNEGATIVE)
        self._latitude = _as_angle(latitude, lat_unit, Mode.RANGE_LIMIT_SIGNED)

    @property
    def longitude(self) -> Angle:
        return self._longitude

    @property
    def latitude(self) -> Angle:
        return self._latitude

    # Views for equatorial and horizontal use
    right_ascension = longitude
    azimuth = longitude
    declination = latitude
    altitude = latitude

    def distance_from(self, other: 'SphericalPosition') -> Angle:
        """Great-circle separation, non-negative, in [0, π]."""
        d = np.arccos(limit_neg1_to1(
            self._latitude.sin * other._latitude.sin
            + self._latitude.cos * other._latitude.cos
            * self._longitude.subtract(other._longitude).cos))
        return Angle(abs(mod2(d, TWO_PI)))

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(lon={self._longitude.degrees:.6f}°, "
                f"lat={self._latitude.degrees:.6f}°)")


class SphericalPosition3D(SphericalPosition):
    """Spherical position with a radius (AU unless stated otherwise)."""

    __slots__ = ('_radius',)

    def __init__(self, longitude: Angle | float = 0.0, latitude: Angle | float = 0.0,
                 radius: float = 0.0, long_unit: Unit = Unit.RADIANS,
                 lat_unit: Unit = Unit.RADIANS):
        super().__init__(longitude, latitude, long_unit, lat_unit)
        self._radius = float(radius)

    @classmethod
    def from_rectangular(cls, x: float, y: float, z: float) -> 'SphericalPosition3D':
        rho = np.hypot(x, y)
        return cls(Angle.atan2_nonneg(y, x), Angle.atan2(z, rho), float(np.sqrt(rho**2 + z**2)))

    @classmethod
    def from_2d(cls, pos: SphericalPosition, radius: float) -> 'SphericalPosition3D':
        return cls(pos.longitude, pos.latitude, radius)

    @property
    def radius(self) -> float:
        return self._radius

    @property
    def xyz(self) -> NDArray:
        """Rectangular coordinates, (3,) array in the units of ``radius``."""
        lon, lat, r = self._longitude, self._latitude, self._radius
        return np.array([r * lat.cos * lon.cos,
                         r * lat.cos * lon.sin,
                         r * lat.sin])

    def translate(self, new_origin: 'SphericalPosition3D') -> 'SphericalPosition3D':
        """This position as seen from ``new_origin`` (both in the same frame)."""
        x, y, z = self.xyz - new_origin.xyz
        return SphericalPosition3D.from_rectangular(x, y, z)

    def __repr__(self) -> str:
        return (f"SphericalPosition3D(lon={self._longitude.degrees:.6f}°, "
                f"lat={self._latitude.degrees:.6f}°, r={self._radius:.8f})")
