"""
skyephem.satellites — Planetary Satellite Framework
===================================================

Common machinery for analytic satellite theories: per-moon positions
relative to the primary (in equatorial radii of the primary), disc
classification, and detection of satellite phenomena within a one-minute
window.

Capabilities
------------
- ``MoonInfo`` — X, Y, Z offsets and disc relations of one satellite
- ``MoonEvent`` — transit, occultation, eclipse and shadow transitions
- ``PlanetaryMoons`` — base class caching the last six position sets per
  perspective (as seen from the Earth and from the Sun) and turning two
  samples one minute apart into ``MoonEvents``
- Satellite name registry with Roman-numeral designations

Positions are X toward the west along the primary's equator, Y toward its
north pole, and Z negative when the moon is nearer the observer than the
primary.  As seen from the Sun, "in
front of the disc" is a shadow transit and "behind the disc" an eclipse.

Reference
---------
Meeus, J. (1998). *Astronomical Algorithms*, 2nd ed., Willmann-Bell,
Ch. 44, 46.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import IntEnum

import numpy as np

from .cache import RingCache
from .constants import MINUTE, NO_MATCH
from .timescale import ut_to_tdb
from .utils import cos_deg, sin_deg

AS_SEEN_FROM_EARTH = False
AS_SEEN_FROM_SUN = True

CACHE_SIZE = 6
MAX_SEARCH_STEP = 120               # [minutes]


class MoonEvent(IntEnum):
    TR_I = 1     # transit ingress
    TR_E = 2     # transit egress
    OC_D = 3     # occultation disappearance
    OC_R = 4     # occultation reappearance
    EC_D = 5     # eclipse disappearance
    EC_R = 6     # eclipse reappearance
    SH_I = 7     # shadow ingress
    SH_E = 8     # shadow egress


MOON_NUMBERS = ('', 'I', 'II', 'III', 'IV', 'V', 'VI', 'VII', 'VIII', 'IX', 'X',
                'XI', 'XII', 'XIII', 'XIV', 'XV', 'XVI', 'XVII', 'XVIII', 'XIX', 'XX')

_SHORT_TEXT = {
    MoonEvent.TR_I: '{0} Tr.I.', MoonEvent.TR_E: '{0} Tr.E.',
    MoonEvent.OC_D: '{0} Oc.D.', MoonEvent.OC_R: '{0} Oc.R.',
    MoonEvent.EC_D: '{0} Ec.D.', MoonEvent.EC_R: '{0} Ec.R.',
    MoonEvent.SH_I: '{0} Sh.I.', MoonEvent.SH_E: '{0} Sh.E.',
}
_LONG_TEXT = {
    MoonEvent.TR_I: '{0} begins transit', MoonEvent.TR_E: '{0} ends transit',
    MoonEvent.OC_D: '{0} becomes occulted', MoonEvent.OC_R: '{0} emerges from occultation',
    MoonEvent.EC_D: '{0} becomes eclipsed', MoonEvent.EC_R: '{0} emerges from eclipse',
    MoonEvent.SH_I: 'Shadow of {0} appears', MoonEvent.SH_E: 'Shadow of {0} ends',
}


def extend_delimited(base: str, item: str, delimiter: str = ', ') -> str:
    return item if not base else base + delimiter + item


# ════════════════════════════════════════════════════════════════════════════
#  Satellite Names
# ════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class _MoonNames:
    first: int
    last: int
    names: tuple[str, ...]
    shadow_names: tuple[str, ...]


_registry: list[_MoonNames] = []


def register_moon_names(first: int, last: int, names, shadow_names=()) -> None:
    """Make a block of satellite ids known to the name lookups."""
    if any(entry.first == first for entry in _registry):
        return
    _registry.append(_MoonNames(first, last, tuple(names), tuple(shadow_names)))


def get_moon_name(moon_id: int, shadow: bool = False) -> str | None:
    for entry in _registry:
        if entry.first <= moon_id <= entry.last:
            names = entry.shadow_names if shadow else entry.names
            offset = moon_id - entry.first
            return names[offset] if offset < len(names) else None
    return None


def get_moon_number(moon_id: int) -> str:
    """Roman-numeral designation, e.g. 5003 → 'III'."""
    n = moon_id % 1000
    if n <= 0 or n >= len(MOON_NUMBERS):
        return str(n)
    return MOON_NUMBERS[n]


def get_moon_by_name(name: str) -> int:
    name = name.lower()
    for entry in _registry:
        for j, moon_name in enumerate(entry.names):
            if moon_name.lower() == name:
                return entry.first + j
    return NO_MATCH


# ════════════════════════════════════════════════════════════════════════════
#  Positions & Events
# ════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class MoonInfo:
    moon_index: int              # satellite id, e.g. IO
    X: float                     # [primary equatorial radii]
    Y: float
    Z: float
    inferior: bool               # nearer than the primary
    within_disc: bool
    in_front_of_disc: bool       # transit (Earth) / shadow transit (Sun)
    behind_disc: bool            # occultation (Earth) / eclipse (Sun)

    @classmethod
    def classify(cls, moon_index: int, X: float, Y: float, Z: float,
                 flattening: float) -> 'MoonInfo':
        """Build a record and derive the disc relations from X, Y, Z."""
        inferior = Z <= 0.0
        within = bool(np.hypot(X, Y * flattening) < 1.0)
        return cls(moon_index, float(X), float(Y), float(Z), inferior, within,
                   within and inferior, within and not inferior)


@dataclass
class MoonEvents:
    t0: float = 0.0              # JDE at the start of the window
    t1: float = 0.0              # JDE at the end of the window
    count: int = 0
    events: dict[int, MoonEvent] = field(default_factory=dict)          # by moon offset
    shadow_events: dict[int, MoonEvent] = field(default_factory=dict)
    text: str = ''
    search_delta_t: int = 1      # minutes until another event is possible


class PlanetaryMoons(ABC):
    """Base for analytic satellite theories of one primary.

    Parameters
    ----------
    solar_system : SolarSystem — supplies the primary's positions; a new
        facade is created when omitted
    """

    first_moon: int = 0
    flattening: float = 1.0
    # Maximum rate of change of X per moon [radii/min]; None means the
    # event search must step minute by minute
    v_max: tuple[float, ...] | None = None

    def __init__(self, solar_system=None):
        if solar_system is None:
            from .solar_system import SolarSystem
            solar_system = SolarSystem()
        self.solar_system = solar_system
        self._caches = {
            AS_SEEN_FROM_EARTH: RingCache(CACHE_SIZE),
            AS_SEEN_FROM_SUN: RingCache(CACHE_SIZE),
        }

    @abstractmethod
    def _compute_positions(self, jde: float, sun_perspective: bool) -> tuple[MoonInfo, ...]:
        ...

    def _project(self, A, B, C, delta: float, radii_per_au: float, R, K) -> tuple[MoonInfo, ...]:
        """Final rotation about the line of sight and the perspective terms.

        Parameters
        ----------
        A, B, C : ndarray — rotated coordinates, the fictitious pole moon
            (0, 0, 1 before rotation) last
        delta : float — distance of the primary from the observer [AU]
        radii_per_au : float — primary equatorial radii per AU
        R, K : ndarray — orbital radius [primary radii] and the light-time
            constant per moon
        """
        D = np.arctan2(A[-1], C[-1])
        X = A[:-1] * np.cos(D) - C[:-1] * np.sin(D)
        Y = A[:-1] * np.sin(D) + C[:-1] * np.cos(D)
        Z = B[:-1]

        W = delta / (delta + Z / radii_per_au)
        X = (X + np.abs(Z) / K * np.sqrt(np.clip(1.0 - (X / R)**2, 0.0, None))) * W
        Y = Y * W

        return tuple(MoonInfo.classify(self.first_moon + j, X[j], Y[j], Z[j], self.flattening)
                     for j in range(len(Z)))

    def get_moon_positions(self, jde: float,
                           sun_perspective: bool = AS_SEEN_FROM_EARTH) -> tuple[MoonInfo, ...]:
        """All satellites at ``jde``, as seen from the Earth or the Sun."""
        return self._caches[sun_perspective].get_or_compute(
            jde, lambda: self._compute_positions(jde, sun_perspective))

    def get_moon_position(self, moon_id: int, jde: float,
                          sun_perspective: bool = AS_SEEN_FROM_EARTH) -> MoonInfo | None:
        for moon in self.get_moon_positions(jde, sun_perspective):
            if moon.moon_index == moon_id:
                return moon
        return None

    def _search_step(self, samples) -> int:
        if self.v_max is None:
            return 1

        step = MAX_SEARCH_STEP
        for i, v_max in enumerate(self.v_max):
            for positions in samples:
                moon = positions[i]
                d = abs(np.hypot(moon.X, moon.Y * self.flattening) - 1.0)
                delta = max(int(np.floor(d / v_max * 0.75)), 1)
                step = min(step, delta)
                if delta == 1:
                    return 1
        return step

    def get_moon_events_for_one_minute_span(self, jdu: float,
                                            long_format: bool = False) -> MoonEvents:
        """Satellite phenomena between ``jdu`` ± 30 s (Universal Time).

        Parameters
        ----------
        jdu : float — Julian Day (UT) at the middle of the window
        long_format : bool — "Io begins transit" rather than "I Tr.I."

        Returns
        -------
        MoonEvents, ``search_delta_t`` holding the number of minutes that
        can be skipped before another event could begin
        """
        t0 = ut_to_tdb(jdu - MINUTE / 2.0)
        t1 = ut_to_tdb(jdu + MINUTE / 2.0)
        pos0 = self.get_moon_positions(t0)
        pos1 = self.get_moon_positions(t1)
        sun0 = self.get_moon_positions(t0, AS_SEEN_FROM_SUN)
        sun1 = self.get_moon_positions(t1, AS_SEEN_FROM_SUN)

        result = MoonEvents(t0=t0, t1=t1)
        result.search_delta_t = self._search_step((pos0, pos1, sun0, sun1))

        for i in range(len(pos0)):
            tr0, tr1 = pos0[i].in_front_of_disc, pos1[i].in_front_of_disc
            oc0, oc1 = pos0[i].behind_disc, pos1[i].behind_disc
            ec0, ec1 = sun0[i].behind_disc, sun1[i].behind_disc
            sh0, sh1 = sun0[i].in_front_of_disc, sun1[i].in_front_of_disc

            event = None
            if not tr0 and tr1:
                event = MoonEvent.TR_I
            elif tr0 and not tr1:
                event = MoonEvent.TR_E
            elif not oc0 and oc1 and not ec0:
                event = MoonEvent.OC_D
            elif oc0 and not oc1 and not ec1:
                event = MoonEvent.OC_R
            elif not ec0 and ec1 and not oc0:
                event = MoonEvent.EC_D
            elif ec0 and not ec1 and not oc1:
                event = MoonEvent.EC_R
            if event is not None:
                result.events[i] = event
                result.count += 1

            if not sh0 and sh1:
                result.shadow_events[i] = MoonEvent.SH_I
                result.count += 1
            elif sh0 and not sh1:
                result.shadow_events[i] = MoonEvent.SH_E
                result.count += 1

        if result.count > 0:
            result.text = self._describe(result, len(pos0), long_format)

        return result

    def _describe(self, events: MoonEvents, moon_count: int, long_format: bool) -> str:
        templates = _LONG_TEXT if long_format else _SHORT_TEXT
        width = max(len(MOON_NUMBERS[i + 1]) for i in range(moon_count))
        text = ''

        for i in range(moon_count):
            if long_format:
                name = get_moon_name(self.first_moon + i)
            else:
                name = MOON_NUMBERS[i + 1].rjust(width)
            for table in (events.events, events.shadow_events):
                if i in table:
                    text = extend_delimited(text, templates[table[i]].format(name))

        return text


def rotate(a, b, degrees: float):
    """Rotate the (a, b) components by an angle in degrees."""
    c = cos_deg(degrees)
    s = sin_deg(degrees)
    return a * c - b * s, a * s + b * c
