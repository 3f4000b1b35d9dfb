"""
skyephem.observer — Observer on the Earth's Surface
===================================================

Transforms that depend on where the observer stands: local hour angle,
topocentric parallax and diurnal aberration, and conversion between
equatorial and horizontal coordinates.

Capabilities
------------
- Geocentric ρ·sinφ′ and ρ·cosφ′ from geodetic latitude and elevation,
  with the reduced latitude blended smoothly within 2″ of a pole
- Local mean or apparent hour angle (one-entry cache), apparent solar time
- Topocentric adjustment of an equatorial position
- Equatorial → horizontal (optional refraction, topocentric distance) and
  the inverse

Azimuth is measured from north through east.

Any object providing the ``SkyObserverProtocol`` members can stand in for
``SkyObserver`` wherever the ephemeris needs an observer.

Reference
---------
Meeus, J. (1998). *Astronomical Algorithms*, 2nd ed., Willmann-Bell,
Ch. 11, 13, 40.
"""

from typing import Protocol, runtime_checkable

import numpy as np

from .angle import Angle, HALF_PI, PI, TWO_PI, Unit
from .constants import (
    ABERRATION, EARTH_RADIUS_KM, EARTH_RADIUS_POLAR_KM, KM_PER_AU, NUTATION, REFRACTION,
    SUN, TOPOCENTRIC,
)
from .ecliptic import Ecliptic
from .refraction import refracted_altitude, unrefracted_altitude
from .spherical import SphericalPosition, SphericalPosition3D
from .timescale import gmst_degrees, tdb_to_ut, ut_to_tdb
from .utils import interpolate, limit_neg1_to1, mod

A90_1SEC = 1.5707915            # 90° less 1″ [rad]
A90_2SEC = 1.5707866            # 90° less 2″ [rad]
NEAR_POLE = 4.85e-6             # 1″ [rad]
SIN_HORIZONTAL_PARALLAX = np.sin(np.deg2rad(8.79412 / 3600.0))   # at 1 AU
DIURNAL_ABERRATION = 1.551e-6   # [rad] at the equator


@runtime_checkable
class SkyObserverProtocol(Protocol):
    """What the ephemeris needs from an observer."""

    @property
    def longitude(self) -> Angle: ...

    @property
    def latitude(self) -> Angle: ...

    def get_local_hour_angle(self, jdu: float, apparent: bool) -> Angle: ...

    def get_apparent_solar_time(self, jdu: float) -> Angle: ...

    def equatorial_topocentric_adjustment(self, pos: SphericalPosition3D, jde: float,
                                          flags: int) -> SphericalPosition3D: ...

    def equatorial_to_horizontal(self, pos: SphericalPosition, jdu: float,
                                 flags: int = 0) -> SphericalPosition: ...

    def horizontal_to_equatorial(self, pos: SphericalPosition, jdu: float,
                                 flags: int = 0) -> SphericalPosition: ...


def _as_degrees_angle(value) -> Angle:
    return value if isinstance(value, Angle) else Angle(value, Unit.DEGREES)


class SkyObserver:
    """Observer at a fixed geographic location.

    Parameters
    ----------
    longitude : float or Angle — east positive, degrees when a float
    latitude : float or Angle — north positive, degrees when a float
    elevation : float — height above sea level [m]
    solar_system : SolarSystem, optional — used for the Sun's position in
        apparent solar time; created on first use when omitted
    """

    def __init__(self, longitude, latitude, elevation: float = 0.0, solar_system=None):
        self._longitude = _as_degrees_angle(longitude)
        self._latitude = _as_degrees_angle(latitude)
        self.elevation = float(elevation)
        self._solar_system = solar_system
        self._ecliptic = Ecliptic()
        self._hour_angle_key: tuple[float, bool] | None = None
        self._hour_angle: Angle | None = None
        self._compute_geocentric_values()

    @classmethod
    def from_position(cls, pos: SphericalPosition, elevation: float = 0.0,
                      solar_system=None) -> 'SkyObserver':
        return cls(pos.longitude, pos.latitude, elevation, solar_system)

    @property
    def longitude(self) -> Angle:
        return self._longitude

    @property
    def latitude(self) -> Angle:
        return self._latitude

    @property
    def solar_system(self):
        if self._solar_system is None:
            from .solar_system import SolarSystem
            self._solar_system = SolarSystem()
        return self._solar_system

    def _compute_geocentric_values(self) -> None:
        pe_ratio = EARTH_RADIUS_POLAR_KM / EARTH_RADIUS_KM
        lat = self._latitude.radians

        if abs(lat) > A90_1SEC:
            u = lat
        elif abs(lat) > A90_2SEC:
            s = np.sign(lat)
            u = interpolate(s * A90_1SEC, lat, s * A90_2SEC, lat,
                            np.arctan(pe_ratio * np.tan(A90_2SEC)))
        else:
            u = np.arctan(pe_ratio * self._latitude.tan)

        height = self.elevation / EARTH_RADIUS_KM / 1000.0
        self.rho_sin_gcl = float(pe_ratio * np.sin(u) + height * self._latitude.sin)
        self.rho_cos_gcl = float(np.cos(u) + height * self._latitude.cos)

    # ── Time ──

    def get_local_hour_angle(self, jdu: float, apparent: bool) -> Angle:
        """Local sidereal time as an angle, non-negative."""
        key = (jdu, apparent)
        if key != self._hour_angle_key:
            if apparent:
                gst = self._ecliptic.apparent_sidereal_time(jdu)
            else:
                gst = gmst_degrees(jdu)
            self._hour_angle = Angle(gst, Unit.DEGREES).add_nonneg(self._longitude)
            self._hour_angle_key = key
        return self._hour_angle

    def get_apparent_solar_time(self, jdu: float) -> Angle:
        lha = self.get_local_hour_angle(jdu, True)
        sun = self.solar_system.get_equatorial_position(SUN, ut_to_tdb(jdu), self)
        return lha.subtract(sun.right_ascension).add_nonneg(Angle(PI))

    # ── Transforms ──

    def equatorial_topocentric_adjustment(self, pos: SphericalPosition3D, jde: float,
                                          flags: int) -> SphericalPosition3D:
        """Geocentric → topocentric right ascension and declination.

        The distance is left geocentric; ``equatorial_to_horizontal`` adjusts
        it.  With ``ABERRATION`` diurnal aberration is applied as well.
        """
        lha = self.get_local_hour_angle(tdb_to_ut(jde), bool(flags & NUTATION)).radians
        distance = pos.radius
        sinp = SIN_HORIZONTAL_PARALLAX / distance
        ra = pos.right_ascension.radians
        d = pos.declination.radians
        H = lha - ra

        delta_ra = np.arctan2(-self.rho_cos_gcl * sinp * np.sin(H),
                              np.cos(d) - self.rho_cos_gcl * sinp * np.cos(H))
        d1 = np.arctan2((np.sin(d) - self.rho_sin_gcl * sinp) * np.cos(delta_ra),
                        np.cos(d) - self.rho_cos_gcl * sinp * np.cos(H))

        if flags & ABERRATION:
            ra += delta_ra
            cos_lat = self._latitude.cos

            if abs(d1) > HALF_PI - NEAR_POLE:
                delta_ra = 0.0
                rd = HALF_PI - abs(d1)
                rl = DIURNAL_ABERRATION * cos_lat
                x = np.cos(ra) * rd - np.sin(lha) * rl
                y = np.sin(ra) * rd + np.cos(lha) * rl
                ra = np.arctan2(y, x)
                d1 = (HALF_PI - np.hypot(x, y)) * np.sign(d1)
            else:
                delta_ra = DIURNAL_ABERRATION * cos_lat * np.cos(H) / np.cos(d1)
                d1 += DIURNAL_ABERRATION * cos_lat * np.sin(d1) * np.sin(H)

        return SphericalPosition3D(float(ra + delta_ra), float(d1), distance)

    def equatorial_to_horizontal(self, pos: SphericalPosition, jdu: float,
                                 flags: int = 0) -> SphericalPosition:
        """Right ascension/declination → azimuth/altitude.

        Parameters
        ----------
        pos : SphericalPosition — a 3-D position also yields a distance,
            topocentric when ``TOPOCENTRIC`` is set
        jdu : float — Julian Day (UT)
        flags : int — NUTATION (apparent hour angle), REFRACTION, TOPOCENTRIC
        """
        lha = self.get_local_hour_angle(jdu, bool(flags & NUTATION)).radians
        lat = self._latitude
        d = pos.declination.radians
        H = lha - pos.right_ascension.radians

        # atan2 gives the azimuth from the south
        azimuth = np.arctan2(np.sin(H), np.cos(H) * lat.sin - np.tan(d) * lat.cos) + PI
        altitude = np.arcsin(limit_neg1_to1(lat.sin * np.sin(d) + lat.cos * np.cos(d) * np.cos(H)))
        unrefracted = altitude

        if flags & REFRACTION:
            altitude = np.deg2rad(refracted_altitude(np.rad2deg(altitude)))

        if isinstance(pos, SphericalPosition3D):
            distance = pos.radius
            if flags & TOPOCENTRIC:
                center_distance_km = (EARTH_RADIUS_POLAR_KM
                                      + (EARTH_RADIUS_KM - EARTH_RADIUS_POLAR_KM) * lat.cos
                                      + self.elevation / 1000.0)
                distance -= np.sin(unrefracted) * center_distance_km / KM_PER_AU
            return SphericalPosition3D(float(azimuth), float(altitude), float(distance))

        return SphericalPosition(float(azimuth), float(altitude))

    def horizontal_to_equatorial(self, pos: SphericalPosition, jdu: float,
                                 flags: int = 0) -> SphericalPosition:
        """Azimuth/altitude → right ascension/declination."""
        lha = self.get_local_hour_angle(jdu, bool(flags & NUTATION)).radians
        lat = self._latitude
        altitude = pos.altitude.radians
        azimuth = pos.azimuth.radians - PI      # from the south

        if flags & REFRACTION:
            altitude = np.deg2rad(unrefracted_altitude(np.rad2deg(altitude)))

        ra = lha - np.arctan2(np.sin(azimuth),
                              np.cos(azimuth) * lat.sin + np.tan(altitude) * lat.cos)
        dec = np.arcsin(limit_neg1_to1(lat.sin * np.sin(altitude)
                                       - lat.cos * np.cos(altitude) * np.cos(azimuth)))

        return SphericalPosition(mod(float(ra), TWO_PI), float(dec))

    def __repr__(self) -> str:
        return (f"SkyObserver(lon={self._longitude.degrees:.4f}°, "
                f"lat={self._latitude.degrees:.4f}°, elev={self.elevation:g} m)")
