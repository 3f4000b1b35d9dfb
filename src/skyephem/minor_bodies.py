"""
skyephem.minor_bodies — Asteroids & Comets
==========================================

Heliocentric positions of catalogued asteroids and comets from tabulated
osculating elements at a series of epochs.

Capabilities
------------
- Element-table loading from JSON (one entry per body, several epochs)
- Selection of the two epochs bracketing a time and interpolation
  between them: q and e linearly, i / ω / Ω modulo 360°, and the time of
  perihelion after moving both values onto the same orbital cycle
- Orbit solution in every eccentricity regime with a per-body memo of
  the time spans where the near-parabolic solver failed to converge, so
  later queries there go straight to the fallback solver
- Name lookup, counts, and H / G magnitude parameters

Element tables are J2000.0 ecliptic; positions are precessed to the
equinox of date.

Reference
---------
Meeus, J. (1998). *Astronomical Algorithms*, 2nd ed., Willmann-Bell,
Ch. 33–35.
"""

import json
import logging
import re
from dataclasses import dataclass, field, replace

import numpy as np

from .config import get_asteroid_file, get_comet_file
from .constants import ASTEROID_BASE, ASTEROID_MAX, COMET_BASE, COMET_MAX, NO_MATCH
from .ecliptic import precess_ecliptical_3d
from .kepler import KeplerConvergenceError, mean_motion, semi_major_axis, solve_orbit
from .orbits import OrbitalElements, precession_in_longitude
from .spherical import SphericalPosition3D
from .timescale import julian_day
from .utils import cos_deg, interpolate, interpolate_modular, mod, sin_deg

logger = logging.getLogger(__name__)

_DESIGNATION_SUFFIX = re.compile(r'([^(]+) \([^()]+\)')
_ISO_DATE = re.compile(r'^([+-]?\d+)-(\d{1,2})-(\d{1,2})')


# ════════════════════════════════════════════════════════════════════════════
#  Element Records
# ════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ObjectInfo:
    """Osculating elements of one body at one epoch (angles in degrees).

    Tabulated records carry their position in the body's epoch list as
    ``index``.  Interpolated records have no index of their own; ``prev``
    and ``next`` are the indices of the two bracketing records.
    """
    name: str
    menu_name: str
    id: int
    epoch: float            # JDE
    asteroid: bool
    q: float                # perihelion distance [AU]
    e: float                # eccentricity
    i: float                # inclination
    w: float                # argument of perihelion
    L: float                # longitude of the ascending node
    Tp: float               # time of perihelion passage [JDE]
    H: float | None = None  # absolute magnitude
    G: float | None = None  # slope parameter
    index: int | None = None
    prev: int | None = None
    next: int | None = None

    @property
    def a(self) -> float:
        return semi_major_axis(self.q, self.e)

    @property
    def n(self) -> float:
        """Mean daily motion [deg/day]."""
        return mean_motion(self.a)

    @property
    def has_mag(self) -> bool:
        return self.H is not None

    @classmethod
    def interpolated(cls, before: 'ObjectInfo', after: 'ObjectInfo', jde: float) -> 'ObjectInfo':
        """Elements at ``jde`` strictly between two tabulated epochs."""
        ta, tb = before.epoch, after.epoch
        q = interpolate(ta, jde, tb, before.q, after.q)
        e = interpolate(ta, jde, tb, before.e, after.e)

        # Tp can jump by a whole orbit between epochs; compare like with like
        tp_after = after.Tp
        if e < 1.0:
            period = 360.0 / mean_motion(semi_major_axis(q, e))
            while tp_after >= before.Tp + period / 2.0:
                tp_after -= period
            while tp_after < before.Tp - period / 2.0:
                tp_after += period

        return replace(
            before,
            epoch=jde,
            q=q,
            e=e,
            i=interpolate_modular(ta, jde, tb, before.i, after.i, 360.0, signed_result=True),
            w=interpolate_modular(ta, jde, tb, before.w, after.w, 360.0),
            L=interpolate_modular(ta, jde, tb, before.L, after.L, 360.0),
            Tp=interpolate(ta, jde, tb, before.Tp, tp_after),
            index=None,
            prev=before.index,
            next=after.index,
        )


# ── Convergence Memo ────────────────────────────────────────────────────────

@dataclass
class FailureSpan:
    """Time span [JDE] over which the near-parabolic solver has failed."""
    start: float = float('inf')
    end: float = float('-inf')

    def widen(self, jde: float) -> None:
        self.start = min(self.start, jde)
        self.end = max(self.end, jde)

    def contains(self, jde: float) -> bool:
        return self.start <= jde <= self.end


@dataclass
class ConvergenceMemo:
    """Per-record record of near-parabolic convergence failures.

    Keys are ``(body id, record index)``.  Spans only ever widen.  A memo
    is owned by one ``MinorBodies`` provider and is not thread-safe.
    """
    spans: dict = field(default_factory=dict)

    def _keys(self, info: ObjectInfo) -> list[tuple[int, int]]:
        if info.index is not None:
            return [(info.id, info.index)]
        return [(info.id, idx) for idx in (info.prev, info.next) if idx is not None]

    def record_failure(self, info: ObjectInfo, jde: float) -> None:
        """Widen the spans of ``info`` (or of both its brackets) to cover jde."""
        for key in self._keys(info):
            self.spans.setdefault(key, FailureSpan()).widen(jde)

    def has_failed(self, info: ObjectInfo, jde: float) -> bool:
        """True if jde lies in the combined failure span of the record(s)."""
        spans = [self.spans[key] for key in self._keys(info) if key in self.spans]
        if not spans:
            return False
        return min(s.start for s in spans) <= jde <= max(s.end for s in spans)

    def __len__(self) -> int:
        return len(self.spans)


# ── Body References ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ById:
    body_id: int


@dataclass(frozen=True)
class Resolved:
    info: ObjectInfo


BodyRef = ById | Resolved


# ════════════════════════════════════════════════════════════════════════════
#  Parsing
# ════════════════════════════════════════════════════════════════════════════

def parse_epoch(epoch) -> float:
    """Epoch as a Julian Day from an ISO ``[±]Y-M-D`` string or a number."""
    if isinstance(epoch, (int, float)):
        return float(epoch)
    match = _ISO_DATE.match(str(epoch).strip())
    if not match:
        raise ValueError(f"Unrecognized element epoch {epoch!r}")
    y, m, d = (int(g) for g in match.groups())
    return julian_day(y, m, d)


def strip_designation(name: str) -> str:
    """'Ceres (A801 AA)' → 'Ceres'."""
    match = _DESIGNATION_SUFFIX.search(name)
    return match.group(1) if match else name


def parse_minor_body(record: dict, body_id: int, asteroid: bool) -> list[ObjectInfo]:
    """Element records of one body from its JSON description.

    Parameters
    ----------
    record : dict — ``{"body": {"name", "H", "G", ...}, "elements": [...]}``
    body_id : int — id to assign
    asteroid : bool — asteroid (with magnitude parameters) or comet

    Returns
    -------
    list[ObjectInfo] — sorted by epoch, each with its ``index``

    Raises
    ------
    ValueError — if a required field is missing or malformed
    """
    try:
        body = record['body']
        name = strip_designation(body['name'])
        menu_name = ('Asteroid: ' if asteroid else 'Comet: ') + name
        H = float(body['H']) if asteroid and body.get('H') is not None else None
        G = float(body['G']) if asteroid and body.get('G') is not None else None

        infos = [
            ObjectInfo(name=name, menu_name=menu_name, id=body_id,
                       epoch=parse_epoch(el['epoch']), asteroid=asteroid,
                       q=float(el['q']), e=float(el['e']), i=float(el['i']),
                       w=float(el['w']), L=float(el['L']), Tp=float(el['Tp']),
                       H=H, G=G)
            for el in record['elements']
        ]
    except (KeyError, TypeError) as err:
        raise ValueError(f"Malformed minor-body record: {err}") from err

    infos.sort(key=lambda oi: oi.epoch)
    return [replace(oi, index=idx) for idx, oi in enumerate(infos)]


# ════════════════════════════════════════════════════════════════════════════
#  Provider
# ════════════════════════════════════════════════════════════════════════════

class MinorBodies:
    """Asteroid and comet position provider.

    Parameters
    ----------
    memo : ConvergenceMemo, optional — convergence-failure side table; a
        fresh one is created when omitted
    """

    def __init__(self, memo: ConvergenceMemo | None = None):
        self.memo = memo if memo is not None else ConvergenceMemo()
        self._objects: dict[int, list[ObjectInfo]] = {}
        self._last_asteroid_id = ASTEROID_BASE
        self._last_comet_id = COMET_BASE
        self.initialized: bool | None = None   # None until a load is attempted

    # ── Loading ──

    def _load_failed(self, message: str, err: Exception) -> bool:
        logger.warning(message, err)
        # A first failure is permanent; a failed reload keeps what was loaded
        if not self.initialized:
            self.initialized = False
        return False

    def load(self, asteroids: list[dict], comets: list[dict]) -> bool:
        """Install element tables; False (and nothing installed) on bad data.

        Once a load has failed the provider stays unavailable, and every
        later load returns False.
        """
        if self.initialized is False:
            logger.warning("Asteroids and comets unavailable after a failed load")
            return False
        try:
            objects = {}
            last_asteroid, last_comet = self._last_asteroid_id, self._last_comet_id
            for record in asteroids:
                last_asteroid += 1
                objects[last_asteroid] = parse_minor_body(record, last_asteroid, True)
            for record in comets:
                last_comet += 1
                objects[last_comet] = parse_minor_body(record, last_comet, False)
        except ValueError as err:
            return self._load_failed("Failed to initialize asteroids and comets: %s", err)

        self._objects.update(objects)
        self._last_asteroid_id, self._last_comet_id = last_asteroid, last_comet
        self.initialized = True
        logger.info("Loaded %d asteroids and %d comets",
                    self.asteroid_count, self.comet_count)
        return True

    def load_files(self, asteroid_file: str | None = None,
                   comet_file: str | None = None) -> bool:
        """Load both JSON element files (paths default from configuration)."""
        asteroid_file = asteroid_file or get_asteroid_file()
        comet_file = comet_file or get_comet_file()
        try:
            with open(asteroid_file, encoding='utf-8') as f:
                asteroids = json.load(f)
            with open(comet_file, encoding='utf-8') as f:
                comets = json.load(f)
        except (OSError, json.JSONDecodeError) as err:
            return self._load_failed("Failed to read minor-body elements: %s", err)

        return self.load(asteroids, comets)

    # ── Catalog ──

    @property
    def object_count(self) -> int:
        return len(self._objects)

    @property
    def asteroid_count(self) -> int:
        return self._last_asteroid_id - ASTEROID_BASE

    @property
    def comet_count(self) -> int:
        return self._last_comet_id - COMET_BASE

    def object_ids(self) -> list[int]:
        return list(self._objects)

    def object_names(self) -> list[str]:
        names = [records[0].name for records in self._objects.values() if records]
        return sorted(names, key=lambda s: (s.lower(), s))

    def get_object_name(self, body_id: int) -> str | None:
        info = self.get_object_info(body_id)
        return info.name if info else None

    def get_object_by_name(self, name: str) -> int:
        name = name.lower()
        for body_id, records in self._objects.items():
            if records and name in (records[0].name.lower(), records[0].menu_name.lower()):
                return body_id
        return NO_MATCH

    def get_magnitude_parameters(self, body_id: int) -> tuple[float, float] | None:
        info = self.get_object_info(body_id)
        if info is None or not info.has_mag:
            return None
        return info.H, info.G

    # ── Elements ──

    def get_object_info(self, body_id: int, jde: float | None = None) -> ObjectInfo | None:
        """Elements of a body, interpolated to ``jde`` when given.

        Outside the tabulated span the nearest end record is returned; at
        a tabulated epoch that record itself is returned unchanged.
        """
        if not self.initialized:
            return None

        records = self._objects.get(body_id)
        if not records:
            return None
        if jde is None or jde <= records[0].epoch:
            return records[0]
        if jde >= records[-1].epoch:
            return records[-1]

        for before, after in zip(records, records[1:]):
            if after.epoch == jde:
                return after
            if before.epoch < jde < after.epoch:
                return ObjectInfo.interpolated(before, after, jde)

        return None

    def get_orbital_elements(self, body_id: int, jde: float) -> OrbitalElements | None:
        """Partial elements (a, e, i, Ω, ϖ) referred to the equinox of date."""
        info = self.get_object_info(body_id, jde)
        if info is None:
            return None

        delta_l = precession_in_longitude(jde)
        return OrbitalElements(a=info.a, e=info.e, i=info.i,
                               OMEGA=mod(info.L + delta_l, 360.0),
                               pi=mod(info.w + info.L + delta_l, 360.0),
                               partial=True)

    def _resolve(self, body: BodyRef | int, jde: float) -> ObjectInfo | None:
        if isinstance(body, int):
            body = ById(body)
        match body:
            case ById(body_id=body_id):
                return self.get_object_info(body_id, jde)
            case Resolved(info=info):
                return info
        raise ValueError(f"Not a body reference: {body!r}")

    # ── Positions ──

    def get_heliocentric_position(self, body: BodyRef | int, jde: float,
                                  fallback: bool = False) -> SphericalPosition3D | None:
        """Heliocentric ecliptic position, equinox of date.

        Parameters
        ----------
        body : ById, Resolved or int — which body / element record
        jde : float — Julian Ephemeris Day
        fallback : bool — skip the near-parabolic solver

        Returns
        -------
        SphericalPosition3D in AU, or None if unavailable
        """
        info = self._resolve(body, jde)
        if info is None:
            return None

        t = jde - info.Tp
        fallback = fallback or self.memo.has_failed(info, jde)

        try:
            v, r = solve_orbit(info.q, info.e, t, fallback)
        except KeplerConvergenceError as err:
            if fallback:
                logger.debug("No solution for %s at JDE %s: %s", info.name, jde, err)
                return None
            self.memo.record_failure(info, jde)
            logger.debug("Failed to converge (%d) for %s at JDE %s", err.code, info.name, jde)
            return self.get_heliocentric_position(Resolved(info), jde, fallback=True)

        # Meeus p. 233
        u = np.deg2rad(info.w) + v
        cos_i, sin_i = cos_deg(info.i), sin_deg(info.i)
        cos_l, sin_l = cos_deg(info.L), sin_deg(info.L)
        x = r * (cos_l * np.cos(u) - sin_l * np.sin(u) * cos_i)
        y = r * (sin_l * np.cos(u) + cos_l * np.sin(u) * cos_i)
        z = r * sin_i * np.sin(u)

        return precess_ecliptical_3d(SphericalPosition3D.from_rectangular(x, y, z), jde)


def is_asteroid(body_id: int) -> bool:
    return ASTEROID_BASE < body_id <= ASTEROID_MAX


def is_comet(body_id: int) -> bool:
    return COMET_BASE < body_id <= COMET_MAX
