"""
skyephem.planets — Major-Planet Series Provider
===============================================

Heliocentric ecliptic positions of Mercury..Neptune and the Earth from
analytic planetary theories provided by ERFA:

- ``erfa.plan94`` — Simon et al. (1994) mean elements with periodic
  perturbations for Mercury..Neptune (the Earth slot of that theory is
  the Earth-Moon barycentre, so it is not used for the Earth)
- ``erfa.epv00`` — the Earth's heliocentric position and velocity

Both return J2000.0 mean equatorial vectors; these are rotated onto the
J2000.0 ecliptic and precessed to the equinox of date unless
``NO_PRECESSION`` is requested.

plan94 is specified for 1000–3000 CE; beyond that ERFA warns that the
accuracy is degraded.  That warning is captured and logged at DEBUG.

Reference
---------
Simon, J.L. et al. (1994). *A&A* 282, 663–683.
Bretagnon, P. & Francou, G. (1988). *A&A* 202, 309 (VSOP87, via epv00).
"""

import logging
import warnings

import erfa
import numpy as np

from .constants import EARTH, MERCURY, NEPTUNE, NO_PRECESSION, OBLIQUITY_J2000
from .ecliptic import precess_ecliptical_3d
from .spherical import SphericalPosition3D

logger = logging.getLogger(__name__)

_COS_E = np.cos(np.deg2rad(OBLIQUITY_J2000))
_SIN_E = np.sin(np.deg2rad(OBLIQUITY_J2000))


def _position_part(pv) -> np.ndarray:
    """Position row of an ERFA pv-vector (structured or plain (2, 3))."""
    pv = np.asarray(pv)
    if pv.dtype.names:
        return np.asarray(pv['p'], dtype=np.float64)
    return np.asarray(pv[0], dtype=np.float64)


def equatorial_to_ecliptic_j2000(xyz: np.ndarray) -> np.ndarray:
    """Rotate a J2000 equatorial vector about x onto the J2000 ecliptic."""
    x, y, z = xyz
    return np.array([x, _COS_E * y + _SIN_E * z, -_SIN_E * y + _COS_E * z])


class PlanetSeries:
    """Heliocentric positions of Mercury..Neptune from ERFA."""

    def __init__(self):
        self._last_warned_jde: float | None = None

    def _heliocentric_j2000_equatorial(self, planet: int, jde: float) -> np.ndarray:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter('always', erfa.ErfaWarning)
            if planet == EARTH:
                pvh, _ = erfa.epv00(jde, 0.0)
                xyz = _position_part(pvh)
            else:
                xyz = _position_part(erfa.plan94(jde, 0.0, planet))

        if caught and jde != self._last_warned_jde:
            self._last_warned_jde = jde
            logger.debug("Reduced planetary series accuracy at JDE %s: %s",
                         jde, caught[0].message)
        return xyz

    def get_heliocentric_position(self, planet: int, jde: float,
                                  flags: int = 0) -> SphericalPosition3D | None:
        """Heliocentric ecliptic position of a planet.

        Parameters
        ----------
        planet : int — MERCURY..NEPTUNE (EARTH included)
        jde : float — Julian Ephemeris Day (TDB)
        flags : int — NO_PRECESSION keeps the J2000.0 equinox

        Returns
        -------
        SphericalPosition3D in AU, or None for any other body id
        """
        if planet < MERCURY or planet > NEPTUNE:
            return None

        x, y, z = equatorial_to_ecliptic_j2000(self._heliocentric_j2000_equatorial(planet, jde))
        pos = SphericalPosition3D.from_rectangular(x, y, z)

        if flags & NO_PRECESSION:
            return pos
        return precess_ecliptical_3d(pos, jde)
