"""
skyephem.angle — Angle Value Type
=================================

Immutable angle stored in radians, normalized on construction according
to a range mode, with lazily cached sine / cosine / tangent and views in
every common astronomical unit.

Capabilities
------------
- Units: radians, degrees, arcminutes, arcseconds, hours, hour-angle
  minutes and seconds, rotations, grads
- Range modes: signed (-π, π], non-negative [0, 2π), unlimited
- Inverse-trig factories and angle arithmetic (each with a non-negative
  variant)
- Sexagesimal formatting for degrees, hours and clock time
"""

from enum import Enum

import numpy as np

from .utils import mod, mod2

PI = np.pi
HALF_PI = PI / 2.0
TWO_PI = PI * 2.0

# ── Format Flags ────────────────────────────────────────────────────────────
FMT_DD = 0x01
FMT_HH = 0x01
FMT_DDD = 0x02
FMT_MINS = 0x04
FMT_SECS = 0x08
FMT_SIGNED = 0x10


class Unit(Enum):
    RADIANS = 0
    DEGREES = 1
    ARC_MINUTES = 2
    ARC_SECONDS = 3
    HOURS = 4
    HOUR_ANGLE_MINUTES = 5
    HOUR_ANGLE_SECONDS = 6
    ROTATIONS = 7
    GRADS = 8


class Mode(Enum):
    RANGE_LIMIT_SIGNED = 0
    RANGE_LIMIT_NONNEGATIVE = 1
    RANGE_UNLIMITED = 2


# Units per half rotation (π radians)
_PER_PI = {
    Unit.RADIANS: PI,
    Unit.DEGREES: 180.0,
    Unit.ARC_MINUTES: 10_800.0,
    Unit.ARC_SECONDS: 648_000.0,
    Unit.HOURS: 12.0,
    Unit.HOUR_ANGLE_MINUTES: 720.0,
    Unit.HOUR_ANGLE_SECONDS: 43_200.0,
    Unit.ROTATIONS: 0.5,
    Unit.GRADS: 200.0,
}


def convert_to_radians(angle: float, unit: Unit) -> float:
    if unit not in _PER_PI:
        raise ValueError(f"Unknown angle unit {unit!r}")
    if unit is Unit.RADIANS:
        return angle
    return angle / _PER_PI[unit] * PI


def convert_from_radians(angle: float, unit: Unit) -> float:
    if unit not in _PER_PI:
        raise ValueError(f"Unknown angle unit {unit!r}")
    if unit is Unit.RADIANS:
        return angle
    return angle * _PER_PI[unit] / PI


class Angle:
    """An angle in radians, normalized by ``mode`` at construction.

    Parameters
    ----------
    angle : float — magnitude expressed in ``unit``
    unit : Unit — unit of ``angle`` (default radians)
    mode : Mode — normalization (default signed range)
    """

    __slots__ = ('_angle', '_sin', '_cos', '_tan')

    def __init__(self, angle: float = 0.0, unit: Unit = Unit.RADIANS,
                 mode: Mode = Mode.RANGE_LIMIT_SIGNED):
        radians = convert_to_radians(float(angle), unit)
        if mode is Mode.RANGE_LIMIT_SIGNED:
            radians = mod2(radians, TWO_PI)
        elif mode is Mode.RANGE_LIMIT_NONNEGATIVE:
            radians = mod(radians, TWO_PI)
        self._angle = float(radians)
        self._sin = None
        self._cos = None
        self._tan = None

    # ── Factories ──

    @classmethod
    def from_degrees(cls, degrees: float, mode: Mode = Mode.RANGE_LIMIT_SIGNED) -> 'Angle':
        return cls(degrees, Unit.DEGREES, mode)

    @classmethod
    def asin(cls, x: float) -> 'Angle':
        return cls(np.arcsin(x))

    @classmethod
    def asin_nonneg(cls, x: float) -> 'Angle':
        return cls(np.arcsin(x), Unit.RADIANS, Mode.RANGE_LIMIT_NONNEGATIVE)

    @classmethod
    def acos(cls, x: float) -> 'Angle':
        return cls(np.arccos(x))

    @classmethod
    def atan(cls, x: float) -> 'Angle':
        return cls(np.arctan(x))

    @classmethod
    def atan_nonneg(cls, x: float) -> 'Angle':
        return cls(np.arctan(x), Unit.RADIANS, Mode.RANGE_LIMIT_NONNEGATIVE)

    @classmethod
    def atan2(cls, y: float, x: float) -> 'Angle':
        return cls(np.arctan2(y, x))

    @classmethod
    def atan2_nonneg(cls, y: float, x: float) -> 'Angle':
        return cls(np.arctan2(y, x), Unit.RADIANS, Mode.RANGE_LIMIT_NONNEGATIVE)

    # ── Unit Views ──

    @property
    def radians(self) -> float:
        return self._angle

    @property
    def degrees(self) -> float:
        return convert_from_radians(self._angle, Unit.DEGREES)

    @property
    def arc_minutes(self) -> float:
        return convert_from_radians(self._angle, Unit.ARC_MINUTES)

    @property
    def arc_seconds(self) -> float:
        return convert_from_radians(self._angle, Unit.ARC_SECONDS)

    @property
    def hours(self) -> float:
        return convert_from_radians(self._angle, Unit.HOURS)

    @property
    def rotations(self) -> float:
        return convert_from_radians(self._angle, Unit.ROTATIONS)

    @property
    def grads(self) -> float:
        return convert_from_radians(self._angle, Unit.GRADS)

    def get_angle(self, unit: Unit = Unit.RADIANS) -> float:
        return convert_from_radians(self._angle, unit)

    # ── Cached Trig ──

    @property
    def sin(self) -> float:
        if self._sin is None:
            self._sin = float(np.sin(self._angle))
        return self._sin

    @property
    def cos(self) -> float:
        if self._cos is None:
            self._cos = float(np.cos(self._angle))
        return self._cos

    @property
    def tan(self) -> float:
        if self._angle == 0.0:
            return 0.0
        if self._tan is None:
            self._tan = float(np.tan(self._angle))
        return self._tan

    # ── Arithmetic ──

    def add(self, other: 'Angle', mode: Mode = Mode.RANGE_LIMIT_SIGNED) -> 'Angle':
        return Angle(self._angle + other._angle, Unit.RADIANS, mode)

    def add_nonneg(self, other: 'Angle') -> 'Angle':
        return self.add(other, Mode.RANGE_LIMIT_NONNEGATIVE)

    def subtract(self, other: 'Angle', mode: Mode = Mode.RANGE_LIMIT_SIGNED) -> 'Angle':
        return Angle(self._angle - other._angle, Unit.RADIANS, mode)

    def subtract_nonneg(self, other: 'Angle') -> 'Angle':
        return self.subtract(other, Mode.RANGE_LIMIT_NONNEGATIVE)

    def complement(self, mode: Mode = Mode.RANGE_LIMIT_SIGNED) -> 'Angle':
        return Angle(HALF_PI - self._angle, Unit.RADIANS, mode)

    def complement_nonneg(self) -> 'Angle':
        return self.complement(Mode.RANGE_LIMIT_NONNEGATIVE)

    def supplement(self, mode: Mode = Mode.RANGE_LIMIT_SIGNED) -> 'Angle':
        return Angle(PI - self._angle, Unit.RADIANS, mode)

    def supplement_nonneg(self) -> 'Angle':
        return self.supplement(Mode.RANGE_LIMIT_NONNEGATIVE)

    def opposite(self, mode: Mode = Mode.RANGE_LIMIT_SIGNED) -> 'Angle':
        return Angle(self._angle + PI, Unit.RADIANS, mode)

    def opposite_nonneg(self) -> 'Angle':
        return self.opposite(Mode.RANGE_LIMIT_NONNEGATIVE)

    def negate(self, mode: Mode = Mode.RANGE_LIMIT_SIGNED) -> 'Angle':
        return Angle(-self._angle, Unit.RADIANS, mode)

    def negate_nonneg(self) -> 'Angle':
        return self.negate(Mode.RANGE_LIMIT_NONNEGATIVE)

    def multiply(self, x: float, mode: Mode = Mode.RANGE_LIMIT_SIGNED) -> 'Angle':
        return Angle(self._angle * x, Unit.RADIANS, mode)

    def multiply_nonneg(self, x: float) -> 'Angle':
        return self.multiply(x, Mode.RANGE_LIMIT_NONNEGATIVE)

    def divide(self, x: float, mode: Mode = Mode.RANGE_LIMIT_SIGNED) -> 'Angle':
        return Angle(self._angle / x, Unit.RADIANS, mode)

    def divide_nonneg(self, x: float) -> 'Angle':
        return self.divide(x, Mode.RANGE_LIMIT_NONNEGATIVE)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Angle):
            return NotImplemented
        return self._angle == other._angle

    def __hash__(self) -> int:
        return hash(self._angle)

    def __repr__(self) -> str:
        return f"Angle({self.degrees:.6f}°)"

    # ── Formatting ──

    def to_string(self, fmt: int = 0, precision: int | None = None) -> str:
        """Degrees, e.g. ``12.500°`` or with FMT_MINS ``12°30'``."""
        return _format_units(self.degrees, '°', "'", '"', fmt, precision)

    def to_suffixed_string(self, positive_suffix: str, negative_suffix: str,
                           fmt: int = 0, precision: int | None = None) -> str:
        """Unsigned degrees followed by a hemisphere suffix such as N / S."""
        degrees = self.degrees
        return (_format_units(abs(degrees), '°', "'", '"', fmt, precision)
                + (negative_suffix if degrees < 0 else positive_suffix))

    def to_hour_string(self, fmt: int = 0, precision: int | None = None) -> str:
        """Hours, e.g. ``5h30m00s`` with FMT_SECS."""
        return _format_units(self.hours, 'h', 'm', 's', fmt, precision)

    def to_time_string(self, fmt: int = 0, precision: int | None = None) -> str:
        """Clock time, e.g. ``05:30`` with FMT_MINS."""
        return _format_units(self.hours, ':', '' if fmt == FMT_MINS else ':', '',
                             fmt, precision, 2)


def _format_units(units: float, delim1: str, delim2: str, delim3: str,
                  fmt: int, precision: int | None, units_padding: int = 0) -> str:
    fmt = fmt or 0
    sexagesimal = (fmt & (FMT_MINS | FMT_SECS)) != 0

    if fmt & FMT_DD:
        units_padding = 2
    elif fmt & FMT_DDD:
        units_padding = 3

    if precision is None:
        precision = 0 if sexagesimal else 3

    negative = units < 0
    units = abs(units)

    if sexagesimal:
        pwr = 10 ** precision
        if fmt & FMT_MINS:
            mins = round(units * 60 * pwr) / pwr
            whole = int(mins // 60)
            mins = mins % 60
            result = f"{whole}{delim1}{'0' if mins < 10 else ''}{mins:.{precision}f}{delim2}"
        else:
            secs = round(units * 3600 * pwr) / pwr
            mins = int(secs // 60)
            secs = secs % 60
            whole = mins // 60
            mins = mins % 60
            result = (f"{whole}{delim1}{'0' if mins < 10 else ''}{mins}{delim2}"
                      f"{'0' if secs < 10 else ''}{secs:.{precision}f}{delim3}")
    else:
        result = f"{units:.{precision}f}{delim1}"

    if units_padding:
        digits = len(result) - len(result.lstrip('0123456789'))
        result = '0' * max(units_padding - digits, 0) + result

    if negative:
        result = '-' + result
    elif fmt & FMT_SIGNED:
        result = '+' + result

    return result
