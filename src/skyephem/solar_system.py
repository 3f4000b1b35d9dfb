"""
skyephem.solar_system — Ephemeris Facade for the Sun, Moon & Planets
====================================================================

One object answering every position query the event finder and the
satellite theories need, for the Sun, the Moon, Mercury..Pluto and any
loaded asteroids and comets, and the physical quantities derived from those
positions.

Capabilities
------------
- Heliocentric, geocentric ecliptic (light time, aberration, nutation),
  equatorial and horizontal positions selected by calculation flags
- Greenwich mean and apparent sidereal time, hour and parallactic angles
- Lunar phase, phase angle, illuminated fraction, solar elongation
- Visual magnitudes, angular diameters and Saturn's ring geometry
- Lunar and solar eclipse geometry, annular and hybrid detection, and the
  point on the Earth under the centre of the Moon's shadow
- Body names, symbols and classification

Times are Julian Days: ``jde`` in dynamical time (TDB), ``jdu`` in
Universal Time.  Ecliptic and equatorial results are geocentric unless an
observer is given with ``TOPOCENTRIC``.

Reference
---------
Meeus, J. (1998). *Astronomical Algorithms*, 2nd ed., Willmann-Bell,
Ch. 12, 25, 33, 41, 45, 48, 54.
Hilton, J.L. (2005). *AJ* 129, 2902–2906 (Mercury and Venus magnitudes).
"""

import logging
from dataclasses import dataclass

import numpy as np

from .angle import Angle, Unit
from .constants import (
    ABERRATION, ASTROMETRIC, DEFAULT_FLAGS, DELAYED_TIME, EARTH, EARTH_RADIUS_KM,
    EARTH_RADIUS_POLAR_KM, FIRST_PLANET, HIGH_PRECISION, JD_J2000, JUPITER, KM_PER_AU,
    LAST_PLANET, LIGHT_DAYS_PER_AU, LOW_PRECISION, MARS, MERCURY, MOON, MOON_RADIUS_KM,
    NEPTUNE, NO_MATCH, NUTATION, PLUTO, QUICK_PLANET, QUICK_SUN, SATURN, SIGNED_HOUR_ANGLE,
    SUN, SUN_RADIUS_KM, TOPOCENTRIC, TRUE_DISTANCE, UNKNOWN_MAGNITUDE, URANUS, VENUS,
)
from .ecliptic import Ecliptic, NutationMode
from .minor_bodies import MinorBodies, is_asteroid, is_comet
from .moon import MeeusMoon
from .observer import SkyObserver
from .orbits import OrbitalElements, get_mean_orbital_elements, heliocentric_from_elements
from .planets import PlanetSeries
from .pluto import Pluto
from .spherical import SphericalPosition, SphericalPosition3D
from .timescale import gmst_degrees, tdb_to_ut, ut_to_tdb
from .utils import (
    acos_deg, asin_deg, atan2_deg, atan_deg, cos_deg, limit_neg1_to1, mod, sin_deg, tan_deg,
)

logger = logging.getLogger(__name__)

PLANET_NAMES = ('Sun', 'Mercury', 'Venus', 'Earth', 'Mars', 'Jupiter', 'Saturn',
                'Uranus', 'Neptune', 'Pluto', 'Moon')
PLANET_SYMBOLS = ('☉', '☿', '♀', '♁', '♂', '♃', '♄',
                  '♅', '♆', '♇', '☽')

SUN_RADIUS_ARCSEC = 959.63          # at 1 AU
MOON_RADIUS_ARCSEC_KM = 358_473_400.0
# Equatorial (polar) semi-diameters at 1 AU [arcsec]
_SEMI_DIAMETERS = {
    MERCURY: (3.36, 3.36), VENUS: (8.34, 8.34), MARS: (4.68, 4.68),
    JUPITER: (98.44, 92.06), SATURN: (82.73, 73.82), URANUS: (35.02, 35.02),
    NEPTUNE: (33.50, 33.50), PLUTO: (2.07, 2.07),
}
# Moon's disc, flattened for the curvature seen in the umbra
LUNAR_UMBRA_PERSPECTIVE = 0.9844
TIME_FOR_DEGREES_ITERATIONS = 200


# ════════════════════════════════════════════════════════════════════════════
#  Classification
# ════════════════════════════════════════════════════════════════════════════

def is_nominal_planet(planet: int) -> bool:
    """Sun, Moon, Pluto and the eight planets."""
    return FIRST_PLANET <= planet <= LAST_PLANET


def is_true_planet(planet: int) -> bool:
    return MERCURY <= planet <= NEPTUNE


def is_asteroid_or_comet(planet: int) -> bool:
    return is_asteroid(planet) or is_comet(planet)


def orbits_sun(planet: int) -> bool:
    return MERCURY <= planet <= PLUTO or is_asteroid_or_comet(planet)


def low_precision_sun(jde: float) -> SphericalPosition3D:
    """Geocentric Sun from the closed-form solar theory (Meeus Ch. 25)."""
    T = (jde - JD_J2000) / 36525.0
    T2 = T * T
    e = 0.016708634 - 0.000042037 * T - 0.0000001267 * T2
    L0 = 280.46646 + 36000.76983 * T + 0.0003032 * T2
    M = 357.52911 + 35999.05029 * T - 0.0001537 * T2
    C = ((1.914602 - 0.004817 * T - 0.000014 * T2) * sin_deg(M)
         + (0.019993 - 0.000101 * T) * sin_deg(2.0 * M)
         + 0.000289 * sin_deg(3.0 * M))
    L = mod(L0 + C, 360.0)
    R = 1.000001018 * (1.0 - e * e) / (1.0 + e * cos_deg(M + C))

    return SphericalPosition3D(L, 0.0, R, Unit.DEGREES, Unit.RADIANS)


# ════════════════════════════════════════════════════════════════════════════
#  Result Records
# ════════════════════════════════════════════════════════════════════════════

@dataclass
class EclipseInfo:
    """Shadow geometry at one instant.  Angular quantities in arcseconds.

    For a lunar eclipse the shadow is the Earth's, cast on the Moon; for a
    solar eclipse it is the Moon's, cast on the Earth and seen from the
    Moon.  Separations are zero at contact and negative with overlap.
    """
    is_solar: bool
    pos: SphericalPosition3D            # body the shadow may fall on
    radius: float                       # its angular radius
    shadow_pos: SphericalPosition       # anti-solar direction
    penumbra_radius: float
    umbra_radius: float
    center_separation: float
    penumbral_separation: float
    in_penumbra: bool
    umbral_separation: float
    in_umbra: bool
    total: bool = False
    annular: bool = False
    hybrid: bool = False
    surface_shadow: SkyObserver | None = None   # solar only, when located

    @classmethod
    def from_geometry(cls, is_solar: bool, pos: SphericalPosition3D, radius: float,
                      shadow_pos: SphericalPosition, penumbra_radius: float,
                      umbra_radius: float) -> 'EclipseInfo':
        """Derive separations and containment from the angular sizes."""
        center_separation = pos.distance_from(shadow_pos).arc_seconds
        penumbral_separation = center_separation - radius - penumbra_radius
        umbral_separation = center_separation - radius - umbra_radius
        in_umbra = umbral_separation <= 0.0
        return cls(is_solar, pos, radius, shadow_pos, penumbra_radius, umbra_radius,
                   center_separation, penumbral_separation,
                   in_umbra or penumbral_separation <= 0.0,
                   umbral_separation, in_umbra)


@dataclass
class RingInfo:
    """Saturn's ring geometry (Meeus Ch. 45), angles in degrees."""
    B: float        # Saturnicentric latitude of the Earth; > 0: north face visible
    B1: float       # Saturnicentric latitude of the Sun; > 0: north face lit
    P: float        # geocentric position angle of the northern semiminor axis
    a: float        # major axis [arcsec]
    b: float        # minor axis [arcsec]
    dU: float       # difference of the Sun's and Earth's Saturnicentric longitudes


# ════════════════════════════════════════════════════════════════════════════
#  Facade
# ════════════════════════════════════════════════════════════════════════════

class SolarSystem:
    """Positions and derived quantities for solar-system bodies.

    Parameters
    ----------
    minor_bodies : MinorBodies, optional — asteroid and comet provider;
        without it (or before it loads) minor-body queries return None
    """

    def __init__(self, minor_bodies: MinorBodies | None = None):
        self.ecliptic = Ecliptic()
        self.moon = MeeusMoon()
        self.planets = PlanetSeries()
        self.pluto = Pluto()
        self.minor_bodies = minor_bodies

    # ── Sidereal Time ──

    @staticmethod
    def get_greenwich_mean_sidereal_time(jdu: float) -> float:
        """GMST [deg] for a UT Julian Day."""
        return gmst_degrees(jdu)

    def get_greenwich_apparent_sidereal_time(self, jdu: float) -> float:
        """GAST [deg] for a UT Julian Day."""
        return self.ecliptic.apparent_sidereal_time(jdu)

    # ── Names & Catalog ──

    def _minor_bodies_ready(self) -> bool:
        return self.minor_bodies is not None and bool(self.minor_bodies.initialized)

    def get_planet_name(self, planet: int) -> str | None:
        if is_asteroid_or_comet(planet):
            return self.minor_bodies.get_object_name(planet) if self._minor_bodies_ready() else None
        if 0 <= planet < len(PLANET_NAMES):
            return PLANET_NAMES[planet]
        return None

    def get_planet_by_name(self, name: str) -> int:
        lower = name.lower()
        for i, planet_name in enumerate(PLANET_NAMES):
            if planet_name.lower() == lower:
                return i
        if self._minor_bodies_ready():
            return self.minor_bodies.get_object_by_name(name)
        return NO_MATCH

    @staticmethod
    def get_planet_symbol(planet: int) -> str | None:
        if 0 <= planet < len(PLANET_SYMBOLS):
            return PLANET_SYMBOLS[planet]
        return None

    def get_asteroid_count(self) -> int:
        return self.minor_bodies.asteroid_count if self._minor_bodies_ready() else 0

    def get_comet_count(self) -> int:
        return self.minor_bodies.comet_count if self._minor_bodies_ready() else 0

    def get_asteroid_and_comet_names(self) -> list[str]:
        return self.minor_bodies.object_names() if self._minor_bodies_ready() else []

    def get_orbital_elements(self, planet: int, jde: float) -> OrbitalElements | None:
        """Mean elements for Mercury..Pluto, partial elements for minor bodies."""
        if MERCURY <= planet <= PLUTO:
            return get_mean_orbital_elements(planet, jde)
        if is_asteroid_or_comet(planet) and self._minor_bodies_ready():
            return self.minor_bodies.get_orbital_elements(planet, jde)
        return None

    # ── Positions ──

    def get_heliocentric_position(self, planet: int, jde: float,
                                  flags: int = 0) -> SphericalPosition3D | None:
        """Heliocentric ecliptic position, equinox of date, radius in AU.

        ``QUICK_PLANET`` replaces the planetary series with mean elements.
        """
        series_flags = flags & ~(LOW_PRECISION | HIGH_PRECISION)

        if MERCURY <= planet <= NEPTUNE:
            if flags & QUICK_PLANET:
                return heliocentric_from_elements(get_mean_orbital_elements(planet, jde))
            return self.planets.get_heliocentric_position(planet, jde, series_flags)
        if planet == SUN:
            return SphericalPosition3D()
        if planet == MOON:
            sun = self.get_ecliptic_position(SUN, jde, None, series_flags)
            return self.get_ecliptic_position(MOON, jde, None, series_flags).translate(sun)
        if planet == PLUTO:
            if flags & QUICK_PLANET:
                return heliocentric_from_elements(get_mean_orbital_elements(PLUTO, jde))
            return self.pluto.get_heliocentric_position(jde)
        if is_asteroid_or_comet(planet) and self._minor_bodies_ready():
            return self.minor_bodies.get_heliocentric_position(planet, jde)
        return None

    def get_ecliptic_position(self, planet: int, jde: float, observer=None,
                              flags: int = DEFAULT_FLAGS,
                              earth_time: float | None = None) -> SphericalPosition3D | None:
        """Geocentric (or topocentric) ecliptic position.

        Parameters
        ----------
        planet : int — body id
        jde : float — Julian Ephemeris Day
        observer : SkyObserverProtocol, optional — used with ``TOPOCENTRIC``
        flags : int — ``DEFAULT_FLAGS`` means ABERRATION | NUTATION, plus
            TOPOCENTRIC when an observer is given
        earth_time : float, optional — instant for the Earth's position,
            ``jde`` when omitted

        Returns
        -------
        SphericalPosition3D in AU; with ``DELAYED_TIME`` the radius holds
        the instant the light left the body.  None when unavailable.
        """
        if earth_time is None:
            earth_time = jde

        if flags == DEFAULT_FLAGS:
            flags = ABERRATION | NUTATION
            if observer is not None:
                flags |= TOPOCENTRIC

        # Topocentric correction is applied in equatorial coordinates; the
        # equatorial query drops TOPOCENTRIC before it comes back here.
        if flags & TOPOCENTRIC and observer is not None:
            equatorial = self.get_equatorial_position(planet, jde, observer, flags)
            if equatorial is None:
                return None
            mode = NutationMode.NUTATED if flags & NUTATION else NutationMode.MEAN_OBLIQUITY
            return self.ecliptic.equatorial_to_ecliptic(equatorial, jde, mode)

        if planet == EARTH:
            return SphericalPosition3D()
        if planet == MOON:
            result = self.moon.get_ecliptic_position(jde)
        elif planet == SUN and flags & QUICK_SUN:
            result = low_precision_sun(jde)
        elif is_nominal_planet(planet) or is_asteroid_or_comet(planet):
            earth = self.get_heliocentric_position(EARTH, earth_time, flags)
            body = self.get_heliocentric_position(planet, jde, flags)
            if body is None:
                return None
            result = body.translate(earth)
        else:
            return None

        if flags & (ABERRATION | ASTROMETRIC | DELAYED_TIME):
            inner_flags = flags & ~(ABERRATION | ASTROMETRIC | DELAYED_TIME | NUTATION)
            distance = result.radius
            delayed = jde
            adjusted = result

            # Converges in three passes, one for the Moon
            for _ in range(1 if planet == MOON else 3):
                delayed = jde - LIGHT_DAYS_PER_AU * distance
                adjusted = self.get_ecliptic_position(
                    planet, delayed, None, inner_flags,
                    earth_time if flags & ASTROMETRIC else delayed)
                if adjusted is None:
                    return None
                distance = adjusted.radius

            if flags & TRUE_DISTANCE:
                result = SphericalPosition3D(adjusted.longitude, adjusted.latitude, result.radius)
            elif flags & DELAYED_TIME:
                result = SphericalPosition3D(adjusted.longitude, adjusted.latitude, delayed)
            else:
                result = adjusted

        if flags & NUTATION:
            result = self.ecliptic.nutate_ecliptic_position(result, jde)

        return result

    def get_equatorial_position(self, planet: int, jde: float, observer=None,
                                flags: int = DEFAULT_FLAGS) -> SphericalPosition3D | None:
        """Right ascension and declination, true equator of date with NUTATION."""
        if planet == EARTH:
            return SphericalPosition3D()

        if flags == DEFAULT_FLAGS:
            flags = ABERRATION | NUTATION
            if observer is not None:
                flags |= TOPOCENTRIC

        mode = NutationMode.NUTATED if flags & NUTATION else NutationMode.MEAN_OBLIQUITY
        ecliptic_pos = self.get_ecliptic_position(planet, jde, None, flags & ~TOPOCENTRIC)
        if ecliptic_pos is None:
            return None

        pos = self.ecliptic.ecliptic_to_equatorial(ecliptic_pos, jde, mode)
        if flags & TOPOCENTRIC and observer is not None:
            pos = observer.equatorial_topocentric_adjustment(pos, jde, flags)
        return pos

    def get_horizontal_position(self, planet: int, jdu: float, observer,
                                flags: int = ABERRATION | LOW_PRECISION) -> SphericalPosition3D | None:
        """Azimuth (from north) and altitude for a UT instant.

        Always topocentric for the Moon.  Nutation is never applied.
        """
        if observer is None or not (is_nominal_planet(planet) or is_asteroid_or_comet(planet)):
            return None
        if planet == EARTH:
            return SphericalPosition3D()

        flags &= ~NUTATION
        if planet == MOON:
            flags |= TOPOCENTRIC

        pos = self.get_equatorial_position(planet, ut_to_tdb(jdu), observer, flags)
        if pos is None:
            return None
        return observer.equatorial_to_horizontal(pos, jdu, flags)

    # ── Hour & Parallactic Angles ──

    def get_hour_angle(self, planet: int, jdu: float, observer,
                       flags: int = DEFAULT_FLAGS) -> Angle | None:
        """Local hour angle; ±12h with ``SIGNED_HOUR_ANGLE``, else 0..24h."""
        if flags == DEFAULT_FLAGS:
            flags = ABERRATION
            if observer is not None:
                flags |= TOPOCENTRIC
        flags &= ~NUTATION

        pos = self.get_equatorial_position(planet, ut_to_tdb(jdu), observer, flags)
        if pos is None:
            return None

        lha = observer.get_local_hour_angle(jdu, False)
        if flags & SIGNED_HOUR_ANGLE:
            return lha.subtract(pos.right_ascension)
        return lha.subtract_nonneg(pos.right_ascension)

    def get_parallactic_angle(self, planet: int, jdu: float, observer,
                              flags: int = DEFAULT_FLAGS) -> Angle | None:
        if planet < SUN or planet > MOON:
            return None

        if flags == DEFAULT_FLAGS:
            flags = ABERRATION
            if observer is not None:
                flags |= TOPOCENTRIC
        flags &= ~NUTATION

        pos = self.get_equatorial_position(planet, ut_to_tdb(jdu), observer, flags)
        hour_angle = self.get_hour_angle(planet, jdu, observer, flags)
        denominator = (observer.latitude.tan * pos.declination.cos
                       - pos.declination.sin * hour_angle.cos)
        if denominator == 0.0:
            return None
        return Angle.atan2(hour_angle.sin, denominator)

    # ── Phase & Elongation ──

    def get_lunar_phase(self, jde: float) -> float:
        """Moon's elongation in longitude [deg]: 0 new, 90 first quarter, 180 full, 270 last."""
        moon = self.get_ecliptic_position(MOON, jde, None, ABERRATION | LOW_PRECISION)
        sun = self.get_ecliptic_position(SUN, jde, None, ABERRATION | LOW_PRECISION)
        return mod(moon.longitude.degrees - sun.longitude.degrees, 360.0)

    def get_lunar_illuminated_fraction(self, jde: float) -> float:
        """Illuminated fraction from the longitude difference alone."""
        return (1.0 - cos_deg(self.get_lunar_phase(jde))) / 2.0

    def _cos_phase_angle(self, planet: int, jde: float) -> float | None:
        body = self.get_heliocentric_position(planet, jde, LOW_PRECISION)
        geocentric = self.get_ecliptic_position(planet, jde, None, ABERRATION | LOW_PRECISION)
        if body is None or geocentric is None:
            return None

        r = body.radius
        D = geocentric.radius
        R = self.get_heliocentric_position(EARTH, jde, LOW_PRECISION).radius
        return limit_neg1_to1((r * r + D * D - R * R) / (2.0 * r * D))

    def _has_phase(self, planet: int) -> bool:
        return (MERCURY <= planet <= MOON and planet != EARTH) or is_asteroid_or_comet(planet)

    def get_phase_angle(self, planet: int, jde: float) -> float:
        """Sun–body–Earth angle [deg], 0 for the Sun and the Earth."""
        if not self._has_phase(planet):
            return 0.0
        cos_phase = self._cos_phase_angle(planet, jde)
        return 0.0 if cos_phase is None else acos_deg(cos_phase)

    def get_illuminated_fraction(self, planet: int, jde: float) -> float:
        if not self._has_phase(planet):
            return 0.0
        cos_phase = self._cos_phase_angle(planet, jde)
        return 0.0 if cos_phase is None else (1.0 + cos_phase) / 2.0

    def get_solar_elongation(self, planet: int, jde: float, observer=None,
                             flags: int = DEFAULT_FLAGS) -> float | None:
        """Great-circle distance from the Sun [deg], non-negative; None if unavailable."""
        if planet in (SUN, EARTH):
            return 0.0

        if flags == DEFAULT_FLAGS:
            flags = ABERRATION
            if observer is not None:
                flags |= TOPOCENTRIC

        sun = self.get_ecliptic_position(SUN, jde, observer, flags)
        body = self.get_ecliptic_position(planet, jde, observer, flags)
        if body is None:
            return None
        return sun.distance_from(body).degrees

    def get_solar_elongation_in_longitude(self, planet: int, jde: float) -> float | None:
        """Apparent longitude minus the Sun's [deg]; positive east of the Sun."""
        sun = self.get_ecliptic_position(SUN, jde)
        body = self.get_ecliptic_position(planet, jde)
        if body is None:
            return None
        return body.longitude.subtract(sun.longitude).degrees

    # ── Saturn's Rings ──

    def get_saturn_ring_info(self, jde: float) -> RingInfo:
        T = (jde - JD_J2000) / 36525.0
        i = 28.075216 - 0.012998 * T + 0.000004 * T * T
        sin_i = sin_deg(i)
        cos_i = cos_deg(i)
        OMEGA = 169.508470 + 1.394681 * T + 0.000412 * T * T

        delayed = self.get_ecliptic_position(SATURN, jde, None, DELAYED_TIME | LOW_PRECISION).radius
        helio = self.get_heliocentric_position(SATURN, delayed, LOW_PRECISION)
        N = 113.6655 + 0.8771 * T
        r = helio.radius
        l = helio.longitude.degrees
        l1 = l - 0.01759 / r
        b1 = helio.latitude.degrees - 0.000764 * cos_deg(l - N) / r
        geo = self.get_ecliptic_position(SATURN, delayed, None, LOW_PRECISION, jde)
        lam = geo.longitude.degrees
        beta = geo.latitude.degrees
        sin_beta = sin_deg(beta)
        cos_beta = cos_deg(beta)
        sin_b1 = sin_deg(b1)
        cos_b1 = cos_deg(b1)

        B = asin_deg(limit_neg1_to1(sin_i * cos_beta * sin_deg(lam - OMEGA) - cos_i * sin_beta))
        a = 375.35 / geo.radius
        b = a * sin_deg(abs(B))
        B1 = asin_deg(limit_neg1_to1(sin_i * cos_b1 * sin_deg(l1 - OMEGA) - cos_i * sin_b1))

        U1 = atan2_deg(sin_i * sin_b1 + cos_i * cos_b1 * sin_deg(l1 - OMEGA),
                       cos_b1 * cos_deg(l1 - OMEGA))
        U2 = atan2_deg(sin_i * sin_beta + cos_i * cos_beta * sin_deg(lam - OMEGA),
                       cos_beta * cos_deg(lam - OMEGA))

        # Saturn with aberration, and the north pole of the ring plane
        eq = self.get_equatorial_position(SATURN, jde, None, ABERRATION | LOW_PRECISION)
        pole = self.ecliptic.ecliptic_to_equatorial(
            SphericalPosition(OMEGA - 90.0, 90.0 - i, Unit.DEGREES, Unit.DEGREES),
            jde, NutationMode.MEAN_OBLIQUITY)
        ra, dec = eq.right_ascension.radians, eq.declination.radians
        ra0, dec0 = pole.right_ascension.radians, pole.declination.radians
        P = np.rad2deg(np.arctan2(np.cos(dec0) * np.sin(ra0 - ra),
                                  np.sin(dec0) * np.cos(dec)
                                  - np.cos(dec0) * np.sin(dec) * np.cos(ra0 - ra)))

        return RingInfo(B=B, B1=B1, P=float(P), a=a, b=b, dU=abs(U1 - U2))

    # ── Magnitude & Size ──

    def get_magnitude(self, planet: int, jde: float) -> float:
        """Visual magnitude, ``UNKNOWN_MAGNITUDE`` where no model applies."""
        helio = self.get_heliocentric_position(planet, jde, QUICK_SUN | LOW_PRECISION)
        geo = self.get_ecliptic_position(planet, jde, None, QUICK_SUN | LOW_PRECISION)
        if helio is None or geo is None:
            return UNKNOWN_MAGNITUDE

        DELTA = geo.radius
        if planet == SUN:
            return -26.74 + 5.0 * np.log10(DELTA)

        i = self.get_phase_angle(planet, jde)
        m = 5.0 * np.log10(helio.radius * DELTA)

        if planet == MERCURY:
            return m - 0.60 + 0.0498 * i - 0.000488 * i**2 + 0.00000302 * i**3
        if planet == VENUS:
            if i < 163.3:
                return m - 4.47 + 0.0103 * i + 0.000057 * i**2 + 0.00000013 * i**3
            return m + 0.98 - 0.0102 * i
        if planet == MARS:
            return m - 1.52 + 0.016 * i
        if planet == JUPITER:
            return m - 9.40 + 0.005 * i
        if planet == SATURN:
            rings = self.get_saturn_ring_info(jde)
            sin_B = sin_deg(abs(rings.B))
            return m - 8.88 + 0.044 * rings.dU - 2.60 * sin_B + 1.25 * sin_B**2
        if planet == URANUS:
            return m - 7.19
        if planet == NEPTUNE:
            return m - 6.87
        if planet == PLUTO:
            return m - 1.00
        if planet == MOON:
            return m + 0.23 + 0.026 * i + 4.0e-9 * i**4

        if is_asteroid_or_comet(planet) and self._minor_bodies_ready():
            params = self.minor_bodies.get_magnitude_parameters(planet)
            if params is not None:
                H, G = params
                tan_half = tan_deg(i / 2.0)
                phi1 = np.exp(-3.33 * tan_half**0.63)
                phi2 = np.exp(-1.87 * tan_half**1.22)
                return H + m - 2.5 * np.log10((1.0 - G) * phi1 + G * phi2)

        return UNKNOWN_MAGNITUDE

    def get_angular_diameter(self, planet: int, jde: float, observer=None,
                             polar: bool = False) -> float:
        """Apparent diameter [arcsec]; topocentric for the Moon with an observer."""
        if planet < SUN or planet == EARTH or planet > MOON:
            return 0.0

        if observer is not None and planet == MOON:
            DELTA = self.get_horizontal_position(MOON, tdb_to_ut(jde), observer).radius
        else:
            DELTA = self.get_ecliptic_position(planet, jde, None, ABERRATION | QUICK_SUN).radius

        if planet == SUN:
            radius = SUN_RADIUS_ARCSEC / DELTA
        elif planet == MOON:
            radius = MOON_RADIUS_ARCSEC_KM / (DELTA * KM_PER_AU)
        else:
            radius = _SEMI_DIAMETERS[planet][1 if polar else 0] / DELTA

        return radius * 2.0

    # ── Eclipses ──

    def get_lunar_eclipse_info(self, jde: float) -> EclipseInfo:
        """The Earth's shadow, as circles at the Moon's distance opposite the Sun.

        Umbra and penumbra sizes follow from similar triangles between the
        Sun, the Earth and the Moon's distance.
        """
        moon = self.get_ecliptic_position(MOON, jde, None, ABERRATION | NUTATION)
        sun = self.get_ecliptic_position(SUN, jde, None, ABERRATION | NUTATION)
        sun_km = sun.radius * KM_PER_AU
        moon_km = moon.radius * KM_PER_AU

        umbra = EARTH_RADIUS_KM - (SUN_RADIUS_KM - EARTH_RADIUS_KM) * moon_km / sun_km
        penumbra = EARTH_RADIUS_KM + (SUN_RADIUS_KM + EARTH_RADIUS_KM) * moon_km / sun_km

        info = EclipseInfo.from_geometry(
            False, moon,
            atan_deg(MOON_RADIUS_KM / moon_km) * 3600.0,
            SphericalPosition(sun.longitude.opposite_nonneg(), sun.latitude.negate()),
            atan_deg(penumbra / moon_km) * 3600.0,
            atan_deg(umbra / moon_km) * 3600.0)
        info.total = ((info.center_separation + info.radius) * LUNAR_UMBRA_PERSPECTIVE
                      <= info.umbra_radius)
        return info

    def get_solar_eclipse_info(self, jde: float, locate_shadow: bool = False) -> EclipseInfo:
        """The Moon's shadow on the Earth, seen from the Moon.

        Hybrid eclipses can only be told apart from annular ones by
        surveying several moments of an eclipse, not just its peak.

        Parameters
        ----------
        jde : float — Julian Ephemeris Day
        locate_shadow : bool — also find the point on the Earth under the
            shadow's centre, returned as ``surface_shadow``
        """
        moon = self.get_ecliptic_position(MOON, jde, None, ABERRATION)
        earth = SphericalPosition3D().translate(moon)      # selenocentric
        sun = self.get_ecliptic_position(SUN, jde, None, ABERRATION).translate(moon)
        sun_km = sun.radius * KM_PER_AU
        earth_km = earth.radius * KM_PER_AU
        umbra_taper = SUN_RADIUS_KM - MOON_RADIUS_KM

        umbra = MOON_RADIUS_KM - umbra_taper * earth_km / sun_km
        annular = umbra < 0.0
        penumbra = MOON_RADIUS_KM + (SUN_RADIUS_KM + MOON_RADIUS_KM) * earth_km / sun_km

        info = EclipseInfo.from_geometry(
            True, earth,
            atan_deg(EARTH_RADIUS_KM / earth_km) * 3600.0,
            SphericalPosition(sun.longitude.opposite_nonneg(), sun.latitude.negate()),
            atan_deg(penumbra / earth_km) * 3600.0,
            atan_deg(abs(umbra) / earth_km) * 3600.0)
        info.total = info.in_umbra and not annular
        info.annular = info.in_umbra and annular

        # The Earth's curvature brings part of its surface nearer the Moon,
        # possibly out of the antumbra and into the umbra.
        umbra_from_center = max(info.center_separation - info.umbra_radius, 0.0)
        if info.annular and umbra_from_center < info.radius:
            curve = EARTH_RADIUS_KM * np.sin(np.arccos(limit_neg1_to1(umbra_from_center / info.radius)))
            if MOON_RADIUS_KM - umbra_taper * (earth_km - curve) / sun_km >= 0.0:
                info.annular = False
                info.hybrid = True
                info.total = False

        if locate_shadow:
            info.surface_shadow = self._locate_shadow(jde)

        return info

    def _locate_shadow(self, jde: float) -> SkyObserver:
        """Where the Sun–Moon line meets the (oblate) Earth."""
        flattening = EARTH_RADIUS_KM / EARTH_RADIUS_POLAR_KM
        scale = np.array([1.0, 1.0, flattening])
        sun = self.get_equatorial_position(SUN, jde, None, ABERRATION).xyz * scale
        moon = self.get_equatorial_position(MOON, jde, None, ABERRATION).xyz * scale
        r = EARTH_RADIUS_KM / KM_PER_AU
        d = sun - moon

        a = d @ d
        b = 2.0 * (moon @ d)
        c = moon @ moon - r * r
        u = (-b + np.sqrt(max(b * b - 4.0 * a * c, 0.0))) / (2.0 * a)
        x, y, z = (moon + u * d) / scale

        center = SphericalPosition3D.from_rectangular(x, y, z)
        sidereal_time = gmst_degrees(tdb_to_ut(jde))
        return SkyObserver(center.longitude.degrees - sidereal_time, center.latitude.degrees,
                           solar_system=self)

    def get_local_solar_eclipse_totality(self, jde: float, observer) -> float:
        """Fraction (0..1) of the Sun's diameter covered, seen by ``observer``."""
        separation = self.get_solar_elongation(MOON, jde, observer)
        if separation > 1.0:
            return 0.0

        moon_radius = self.get_angular_diameter(MOON, jde, observer) / 7200.0
        sun_radius = self.get_angular_diameter(SUN, jde) / 7200.0
        overlap = sun_radius + moon_radius - separation
        return min(max(overlap / sun_radius / 2.0, 0.0), 1.0)

    # ── Motion ──

    def get_time_for_degrees_of_change(self, body: int, start_jde: float, degrees: float,
                                       max_jde: float) -> float | None:
        """When a body's heliocentric direction has moved ``degrees`` from its start.

        Searches forward, or backward when ``max_jde`` precedes ``start_jde``,
        never past ``max_jde``.  None if no answer within the iteration cap, or
        if the body has no position.
        """
        start = self.get_heliocentric_position(body, start_jde)
        if start is None:
            return None
        tolerance = degrees / 100_000.0
        sign = -1.0 if max_jde < start_jde else 1.0
        limit = max if sign < 0.0 else min
        low = start_jde
        delta = sign
        result = start_jde + delta

        for _ in range(TIME_FOR_DEGREES_ITERATIONS):
            change = start.distance_from(self.get_heliocentric_position(body, result)).degrees

            if abs(change - degrees) < tolerance or result == max_jde:
                return result
            if change < degrees:
                low = result
                delta *= 2.0
                result = limit(result + delta, max_jde)
            else:
                result = (result + low) / 2.0
                delta /= 2.0

        logger.debug("No time found for %s° of change of body %s from JDE %s",
                     degrees, body, start_jde)
        return None
