"""
test_satellites.py — Galilean & Saturnian Satellites, Jupiter Rotation
======================================================================

Positions checked against Meeus Examples 44.b and 46.a.
"""

import numpy.testing as npt
import pytest

from skyephem.constants import (
    CALLISTO, EUROPA, GANYMEDE, IAPETUS, IO, MIMAS, NO_MATCH, TITAN,
)
from skyephem.jupiter import DataQuality, JupiterInfo, JupitersMoons, parse_grs_table
from skyephem.saturn import SaturnMoons
from skyephem.satellites import (
    AS_SEEN_FROM_SUN, MoonEvent, MoonEvents, MoonInfo, get_moon_by_name, get_moon_name,
    get_moon_number, register_moon_names,
)
from skyephem.timescale import julian_day, ut_to_tdb

JDE_44B = 2_448_972.50068
JDE_46A = 2_451_439.50074


@pytest.fixture(scope="module")
def jupiters_moons(solar_system):
    return JupitersMoons(solar_system)


@pytest.fixture(scope="module")
def saturns_moons(solar_system):
    return SaturnMoons(solar_system)


# ═══════════════════════════════════════════════════════════════════════════
#  Names
# ═══════════════════════════════════════════════════════════════════════════

def test_moon_names():
    assert get_moon_name(IO) == 'Io'
    assert get_moon_name(IO, shadow=True) == 'Shadow of Io'
    assert get_moon_name(TITAN) == 'Titan'
    assert get_moon_name(9001) is None


def test_moon_numbers():
    assert get_moon_number(GANYMEDE) == 'III'
    assert get_moon_number(IAPETUS) == 'VIII'


def test_moon_by_name():
    assert get_moon_by_name('titan') == TITAN
    assert get_moon_by_name('CALLISTO') == CALLISTO
    assert get_moon_by_name('Phobos') == NO_MATCH


def test_duplicate_registration_ignored():
    register_moon_names(IO, CALLISTO, ('A', 'B', 'C', 'D'))
    assert get_moon_name(IO) == 'Io'


# ═══════════════════════════════════════════════════════════════════════════
#  Positions
# ═══════════════════════════════════════════════════════════════════════════

@pytest.mark.parametrize("moon, X, Y", [
    (IO, -3.4502, 0.2137),
    (EUROPA, 7.4418, 0.2753),
    (GANYMEDE, 1.2011, 0.5900),
    (CALLISTO, 7.0720, 1.0291),
])
def test_galilean_positions_meeus_44b(jupiters_moons, moon, X, Y):
    info = jupiters_moons.get_moon_position(moon, JDE_44B)
    npt.assert_allclose(info.X, X, atol=0.01)
    npt.assert_allclose(info.Y, Y, atol=0.01)


@pytest.mark.parametrize("offset, X, Y, atol", [
    (0, 3.102, -0.204, 0.02),
    (1, 3.823, 0.318, 0.02),
    (2, 4.027, -1.061, 0.02),
    (3, -5.365, -1.148, 0.02),
    (4, -0.972, -3.136, 0.02),
    (5, 14.568, 4.738, 0.03),
    (6, -18.001, -5.328, 0.05),
    (7, -48.760, 4.137, 0.05),
])
def test_saturnian_positions_meeus_46a(saturns_moons, offset, X, Y, atol):
    info = saturns_moons.get_moon_position(MIMAS + offset, JDE_46A)
    npt.assert_allclose(info.X, X, atol=atol)
    npt.assert_allclose(info.Y, Y, atol=atol)


def test_positions_cached(jupiters_moons):
    first = jupiters_moons.get_moon_positions(JDE_44B)
    assert jupiters_moons.get_moon_positions(JDE_44B) is first
    assert jupiters_moons.get_moon_positions(JDE_44B, AS_SEEN_FROM_SUN) is not first
    assert [m.moon_index for m in first] == [IO, EUROPA, GANYMEDE, CALLISTO]


def test_sun_perspective_differs(jupiters_moons):
    earth = jupiters_moons.get_moon_position(IO, JDE_44B)
    sun = jupiters_moons.get_moon_position(IO, JDE_44B, AS_SEEN_FROM_SUN)
    assert abs(earth.X - sun.X) > 1e-4


def test_unknown_moon(jupiters_moons):
    assert jupiters_moons.get_moon_position(TITAN, JDE_44B) is None


# ═══════════════════════════════════════════════════════════════════════════
#  Disc Relations
# ═══════════════════════════════════════════════════════════════════════════

def test_classify_in_front():
    info = MoonInfo.classify(IO, 0.5, 0.0, -1.0, 1.069)
    assert info.inferior and info.within_disc
    assert info.in_front_of_disc and not info.behind_disc


def test_classify_behind():
    info = MoonInfo.classify(IO, 0.5, 0.0, 1.0, 1.069)
    assert not info.inferior and info.behind_disc and not info.in_front_of_disc


def test_classify_clear_of_disc():
    info = MoonInfo.classify(IO, 2.0, 0.0, -1.0, 1.069)
    assert not info.within_disc
    assert not info.in_front_of_disc and not info.behind_disc


def test_classify_uses_flattening():
    assert MoonInfo.classify(IO, 0.0, 0.95, 1.0, 1.0).within_disc
    assert not MoonInfo.classify(IO, 0.0, 0.95, 1.0, 1.069).within_disc


# ═══════════════════════════════════════════════════════════════════════════
#  Events
# ═══════════════════════════════════════════════════════════════════════════

def test_describe_short_and_long(jupiters_moons):
    events = MoonEvents(count=2, events={0: MoonEvent.TR_I}, shadow_events={2: MoonEvent.SH_E})
    assert jupiters_moons._describe(events, 4, False) == "  I Tr.I., III Sh.E."
    assert jupiters_moons._describe(events, 4, True) == "Io begins transit, Shadow of Ganymede ends"


def test_one_minute_span_window(jupiters_moons):
    jdu = julian_day(2020, 6, 1, 3, 0)
    events = jupiters_moons.get_moon_events_for_one_minute_span(jdu)
    npt.assert_allclose(events.t1 - events.t0, 1.0 / 1440.0, rtol=1e-6)
    assert events.search_delta_t >= 1
    assert (events.count > 0) == bool(events.text)


def test_saturn_steps_minute_by_minute(saturns_moons):
    events = saturns_moons.get_moon_events_for_one_minute_span(julian_day(2020, 6, 1))
    assert events.search_delta_t == 1


def test_transit_ingress_found(jupiters_moons):
    # Longer than one orbit of Io
    t = julian_day(2020, 6, 1)
    end = t + 2.0
    kinds = set()
    while t < end:
        events = jupiters_moons.get_moon_events_for_one_minute_span(t)
        kinds.update(events.events.values())
        kinds.update(events.shadow_events.values())
        t += events.search_delta_t / 1440.0
    assert MoonEvent.TR_I in kinds and MoonEvent.TR_E in kinds


# ═══════════════════════════════════════════════════════════════════════════
#  Jupiter Rotation & Great Red Spot
# ═══════════════════════════════════════════════════════════════════════════

def test_central_meridians_with_phase_correction():
    info = JupiterInfo()
    npt.assert_allclose(info.get_system_i_longitude(JDE_44B).degrees % 360.0, 267.265, atol=0.01)
    npt.assert_allclose(info.get_system_ii_longitude(JDE_44B).degrees % 360.0, 71.934, atol=0.01)


def test_parse_grs_table(grs_text):
    table = parse_grs_table(grs_text)
    npt.assert_allclose(table.pre_table_drift, 15.0 / 365.2425)
    assert table.interpolation_span == 90.0
    assert table.first_date == '2020-01-01' and table.last_date == '2021-01-01'
    assert len(table.times) == 3


@pytest.mark.parametrize("text", ["x", "15\n15\n90\n", "15\n15\n90\nnot a date\n"])
def test_bad_grs_table(text):
    with pytest.raises(ValueError):
        parse_grs_table(text)
    info = JupiterInfo()
    assert not info.load(text)
    assert info.initialized is False


def test_missing_grs_file(tmp_path):
    info = JupiterInfo()
    assert not info.load_file(str(tmp_path / "missing.txt"))


def test_grs_failure_is_permanent(grs_text):
    info = JupiterInfo()
    assert not info.load("x")
    assert not info.load(grs_text)
    assert info.table is None and info.initialized is False


def test_failed_grs_reload_keeps_table(jupiter_info):
    table = jupiter_info.table
    assert not jupiter_info.load("x")
    assert jupiter_info.table is table and jupiter_info.initialized


def test_grs_data_quality(jupiter_info):
    table = jupiter_info.table
    assert jupiter_info.grs_data_quality(julian_day(2020, 6, 1)) is DataQuality.GOOD
    assert jupiter_info.grs_data_quality(table.max_time + 400.0) is DataQuality.FAIR
    assert jupiter_info.grs_data_quality(table.min_time - 800.0) is DataQuality.POOR
    assert JupiterInfo().grs_data_quality(julian_day(2020, 6, 1)) is DataQuality.POOR


def test_grs_table_metadata(jupiter_info):
    assert jupiter_info.get_first_grs_date() == '2020-01-01'
    assert jupiter_info.get_last_grs_date() == '2021-01-01'
    npt.assert_allclose(jupiter_info.get_last_known_grs_longitude().degrees % 360.0, 340.0)
    assert JupiterInfo().get_first_grs_date() is None


def test_grs_longitude_from_table(jupiter_info):
    at_first = jupiter_info.get_grs_longitude(ut_to_tdb(julian_day(2020, 1, 1)))
    npt.assert_allclose(at_first.degrees % 360.0, 330.0, atol=1e-4)
    after = jupiter_info.get_grs_longitude(ut_to_tdb(julian_day(2022, 1, 1)))
    npt.assert_allclose(after.degrees % 360.0, 340.0 + 365.0 * 15.0 / 365.2425, atol=1e-4)


def test_fixed_grs_longitude(jupiter_info):
    jde = ut_to_tdb(julian_day(2020, 6, 1))
    jupiter_info.set_fixed_grs_longitude(10.0)
    npt.assert_allclose(jupiter_info.get_grs_longitude(jde).degrees, 10.0)
    npt.assert_allclose(jupiter_info.get_effective_fixed_grs_longitude().degrees, 10.0)
    jupiter_info.clear_fixed_grs_longitude()
    assert jupiter_info.get_fixed_grs_longitude() is None
    npt.assert_allclose(jupiter_info.get_effective_fixed_grs_longitude().degrees, -93.0)


def test_grs_default_without_table():
    info = JupiterInfo()
    npt.assert_allclose(info.get_grs_longitude(JDE_44B).degrees, -93.0)


def test_grs_cm_offset(jupiter_info):
    jde = ut_to_tdb(julian_day(2020, 6, 1))
    offset = jupiter_info.get_grs_cm_offset(jde).degrees
    expected = (jupiter_info.get_system_ii_longitude(jde).degrees
                - jupiter_info.get_grs_longitude(jde).degrees)
    npt.assert_allclose(offset, (expected + 180.0) % 360.0 - 180.0, atol=1e-9)
    assert -180.0 < offset <= 180.0
