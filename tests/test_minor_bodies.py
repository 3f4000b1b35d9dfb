"""
test_minor_bodies.py — Asteroid & Comet Elements and Positions
==============================================================
"""

import json

import numpy.testing as npt
import pytest

from skyephem.constants import ASTEROID_BASE, COMET_BASE, NO_MATCH
from skyephem.kepler import mean_motion, semi_major_axis
from skyephem.minor_bodies import (
    ConvergenceMemo, MinorBodies, ObjectInfo, Resolved, is_asteroid, is_comet,
    parse_epoch, strip_designation,
)
from skyephem.timescale import julian_day

CERES_TP = 2_458_849.5

CERES = ASTEROID_BASE + 1
PALLAS = ASTEROID_BASE + 2
HALLEY = COMET_BASE + 1
JAN_2020 = 2_458_849.5
JUL_2020 = 2_459_031.5


# ═══════════════════════════════════════════════════════════════════════════
#  Parsing
# ═══════════════════════════════════════════════════════════════════════════

def test_parse_epoch():
    assert parse_epoch("2020-07-01") == JUL_2020
    assert parse_epoch(2_451_545.0) == 2_451_545.0
    assert parse_epoch("-100-03-01") == julian_day(-100, 3, 1)
    with pytest.raises(ValueError):
        parse_epoch("July 2020")


def test_strip_designation():
    assert strip_designation("Ceres (A801 AA)") == "Ceres"
    assert strip_designation("1P/Halley") == "1P/Halley"


def test_ids_and_classification(minor_bodies):
    assert minor_bodies.asteroid_count == 2
    assert minor_bodies.comet_count == 1
    assert is_asteroid(CERES) and is_asteroid(PALLAS)
    assert is_comet(HALLEY) and not is_asteroid(HALLEY)


def test_names(minor_bodies):
    assert minor_bodies.object_names() == ["1P/Halley", "Ceres", "Pallas"]
    assert minor_bodies.get_object_name(CERES) == "Ceres"
    assert minor_bodies.get_object_by_name("CERES") == CERES
    assert minor_bodies.get_object_by_name("Asteroid: Ceres") == CERES
    assert minor_bodies.get_object_by_name("Comet: 1P/Halley") == HALLEY
    assert minor_bodies.get_object_by_name("Vesta") == NO_MATCH


def test_magnitude_parameters(minor_bodies):
    assert minor_bodies.get_magnitude_parameters(CERES) == (3.34, 0.12)
    assert minor_bodies.get_magnitude_parameters(HALLEY) is None


def test_malformed_record_rejected(asteroid_records):
    del asteroid_records[1]["elements"][0]["q"]
    bodies = MinorBodies()
    assert not bodies.load(asteroid_records, [])
    assert bodies.initialized is False
    assert bodies.get_object_info(CERES) is None


def test_failed_load_is_permanent(asteroid_records, comet_records):
    bad = [{"body": {"name": "Broken"}}]
    bodies = MinorBodies()
    assert not bodies.load(bad, [])
    assert not bodies.load(asteroid_records, comet_records)
    assert bodies.initialized is False
    assert bodies.object_count == 0


def test_failed_reload_keeps_loaded_bodies(minor_bodies):
    assert not minor_bodies.load([{"body": {"name": "Broken"}}], [])
    assert minor_bodies.initialized is True
    assert minor_bodies.get_object_by_name("Ceres") == CERES


def test_load_files_from_data_path(tmp_path, monkeypatch, asteroid_records, comet_records):
    (tmp_path / "asteroids.json").write_text(json.dumps(asteroid_records))
    (tmp_path / "comets.json").write_text(json.dumps(comet_records))
    monkeypatch.setenv("SKYEPHEM_DATA_PATH", str(tmp_path))

    bodies = MinorBodies()
    assert bodies.load_files()
    assert bodies.object_count == 3


def test_load_files_missing(tmp_path, monkeypatch):
    monkeypatch.setenv("SKYEPHEM_DATA_PATH", str(tmp_path))
    bodies = MinorBodies()
    assert not bodies.load_files()
    assert bodies.initialized is False


# ═══════════════════════════════════════════════════════════════════════════
#  Element Interpolation
# ═══════════════════════════════════════════════════════════════════════════

def test_records_sorted_by_epoch(minor_bodies):
    first = minor_bodies.get_object_info(CERES)
    assert first.epoch == JAN_2020 and first.index == 0


def test_boundary_records_returned_exactly(minor_bodies):
    early = minor_bodies.get_object_info(CERES, JAN_2020 - 500.0)
    assert early.epoch == JAN_2020 and early.q == 2.54
    late = minor_bodies.get_object_info(CERES, JUL_2020)
    assert late.index == 1 and late.Tp == CERES_TP + 40.0
    assert minor_bodies.get_object_info(CERES, JUL_2020 + 900.0) is late


def test_midpoint_interpolation(minor_bodies):
    mid = (JAN_2020 + JUL_2020) / 2.0
    info = minor_bodies.get_object_info(CERES, mid)
    npt.assert_allclose(info.q, 2.545)
    npt.assert_allclose(info.e, 0.075)
    npt.assert_allclose(info.i, 10.595)
    npt.assert_allclose(info.Tp, CERES_TP + 20.0)
    assert info.index is None and (info.prev, info.next) == (0, 1)
    assert info.epoch == mid


def test_perihelion_time_taken_from_same_orbit():
    q, e = 2.5, 0.1
    period = 360.0 / mean_motion(semi_major_axis(q, e))
    common = dict(name="Test", menu_name="Asteroid: Test", id=CERES, asteroid=True,
                  q=q, e=e, i=5.0, w=10.0, L=20.0)
    before = ObjectInfo(epoch=0.0, Tp=100.0, index=0, **common)
    after = ObjectInfo(epoch=10.0, Tp=100.0 + period + 10.0, index=1, **common)

    mid = ObjectInfo.interpolated(before, after, 5.0)
    npt.assert_allclose(mid.Tp, 105.0, atol=1e-6)
    assert abs(mid.Tp - before.Tp) < period / 2.0


def test_orbital_elements(minor_bodies):
    elements = minor_bodies.get_orbital_elements(PALLAS, 2_451_545.0)
    npt.assert_allclose(elements.a, 2.13 / 0.77)
    npt.assert_allclose(elements.e, 0.23)
    assert minor_bodies.get_orbital_elements(COMET_BASE + 9, 2_451_545.0) is None


# ═══════════════════════════════════════════════════════════════════════════
#  Positions
# ═══════════════════════════════════════════════════════════════════════════

def test_radius_at_perihelion(minor_bodies):
    pos = minor_bodies.get_heliocentric_position(PALLAS, 2_458_700.0)
    npt.assert_allclose(pos.radius, 2.13, rtol=1e-9)

    halley = minor_bodies.get_heliocentric_position(HALLEY, 2_446_470.95)
    npt.assert_allclose(halley.radius, 0.5871, rtol=1e-9)


def test_radius_between_perihelion_and_aphelion(minor_bodies):
    pos = minor_bodies.get_heliocentric_position(CERES, 2_459_200.0)
    info = minor_bodies.get_object_info(CERES, 2_459_200.0)
    assert info.q <= pos.radius <= info.a * (1.0 + info.e)


def test_resolved_reference(minor_bodies):
    info = minor_bodies.get_object_info(PALLAS)
    by_id = minor_bodies.get_heliocentric_position(PALLAS, 2_459_000.0)
    resolved = minor_bodies.get_heliocentric_position(Resolved(info), 2_459_000.0)
    npt.assert_allclose(resolved.xyz, by_id.xyz)


def test_unknown_body_has_no_position(minor_bodies):
    assert minor_bodies.get_heliocentric_position(ASTEROID_BASE + 99, 2_459_000.0) is None


# ═══════════════════════════════════════════════════════════════════════════
#  Convergence Memo
# ═══════════════════════════════════════════════════════════════════════════

def _info(**kwargs):
    return ObjectInfo(name="Test", menu_name="Comet: Test", id=HALLEY, epoch=0.0,
                      asteroid=False, q=1.0, e=0.99, i=0.0, w=0.0, L=0.0, Tp=0.0, **kwargs)


def test_memo_spans_widen():
    memo = ConvergenceMemo()
    record = _info(index=0)
    assert not memo.has_failed(record, 10.0)

    memo.record_failure(record, 10.0)
    memo.record_failure(record, 20.0)
    assert memo.has_failed(record, 15.0)
    assert not memo.has_failed(record, 25.0)
    assert len(memo) == 1


def test_memo_interpolated_record_uses_brackets():
    memo = ConvergenceMemo()
    memo.record_failure(_info(prev=0, next=1), 5.0)
    assert set(memo.spans) == {(HALLEY, 0), (HALLEY, 1)}
    assert memo.has_failed(_info(index=1), 5.0)
    assert not memo.has_failed(_info(index=2), 5.0)


def test_memo_forces_fallback(minor_bodies):
    info = minor_bodies.get_object_info(HALLEY)
    plain = minor_bodies.get_heliocentric_position(HALLEY, 2_446_500.0)
    minor_bodies.memo.record_failure(info, 2_446_500.0)
    fallback = minor_bodies.get_heliocentric_position(HALLEY, 2_446_500.0)
    npt.assert_allclose(fallback.xyz, plain.xyz, atol=1e-8)
