"""
test_support.py — Solvers, Caching, Configuration, Numeric Helpers
==================================================================
"""

import logging
import os

import numpy as np
import numpy.testing as npt
import pytest

from skyephem import config
from skyephem.cache import RingCache
from skyephem.solvers import find_min_max, find_zero
from skyephem.utils import (
    div_tt0, interpolate_modular, interpolate_tabular, limit_neg1_to1, mod, mod2,
)


# ═══════════════════════════════════════════════════════════════════════════
#  Solvers
# ═══════════════════════════════════════════════════════════════════════════

def test_find_zero():
    result = find_zero(np.cos, 1e-10, 100, 1.0, np.cos(1.0), 2.0, np.cos(2.0))
    npt.assert_allclose(result.x, np.pi / 2.0, atol=1e-8)
    assert result.iterations <= 100


def test_find_zero_flat_bracket():
    result = find_zero(lambda x: 1.0, 1e-10, 10, 0.0, 1.0, 1.0, 1.0)
    assert result.x == 0.0 and result.iterations == 1


def test_find_zero_cap_exceeded():
    result = find_zero(np.cos, 1e-15, 1, 1.0, np.cos(1.0), 2.0, np.cos(2.0))
    assert result.iterations > 1


def test_find_minimum():
    result = find_min_max(lambda x: (x - 1.0)**2, 1e-10, 100, 0.0, 0.5, 3.0)
    npt.assert_allclose(result.x, 1.0, atol=1e-6)
    assert not result.found_maximum


def test_find_maximum():
    result = find_min_max(lambda x: 2.0 - (x - 1.0)**2, 1e-10, 100, 0.0, 0.5, 3.0)
    npt.assert_allclose(result.x, 1.0, atol=1e-6)
    npt.assert_allclose(result.y, 2.0, atol=1e-9)
    assert result.found_maximum


def test_find_minimum_at_middle_sample():
    result = find_min_max(lambda x: (x - 1.0)**2, 1e-10, 500, 0.0, 1.0, 2.0)
    npt.assert_allclose(result.x, 1.0, atol=1e-9)
    npt.assert_allclose(result.y, 0.0, atol=1e-12)


@pytest.mark.parametrize("solver, args", [
    (find_zero, (0.0, -1.0, 1.0, 1.0)),
    (find_min_max, (0.0, 0.5, 1.0)),
])
def test_iteration_cap_must_be_positive(solver, args):
    with pytest.raises(ValueError):
        solver(lambda x: x, 1e-6, 0, *args)


# ═══════════════════════════════════════════════════════════════════════════
#  Cache
# ═══════════════════════════════════════════════════════════════════════════

def test_ring_cache_evicts_oldest():
    cache = RingCache(2)
    cache.put(1, 'a')
    cache.put(2, 'b')
    cache.put(3, 'c')
    assert 1 not in cache and 2 in cache and 3 in cache
    assert len(cache) == 2
    assert cache.get(1, 'missing') == 'missing'


def test_ring_cache_get_or_compute():
    cache = RingCache()
    calls = []

    def compute():
        calls.append(1)
        return 42

    assert cache.get_or_compute('k', compute) == 42
    assert cache.get_or_compute('k', compute) == 42
    assert len(calls) == 1
    cache.clear()
    assert len(cache) == 0


def test_ring_cache_capacity():
    with pytest.raises(ValueError):
        RingCache(0)


# ═══════════════════════════════════════════════════════════════════════════
#  Configuration
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def clean_env(monkeypatch):
    for name in ('SKYEPHEM_DATA_PATH', 'SKYEPHEM_ASTEROIDS', 'SKYEPHEM_COMETS',
                 'SKYEPHEM_GRS', 'SKYEPHEM_LOG_LEVEL'):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_config_defaults(clean_env):
    assert config.get_data_path() == config.DEFAULT_DATA_PATH
    assert config.get_asteroid_file() == os.path.join('data', 'asteroids.json')
    assert config.get_grs_file().endswith('grs_longitude.txt')
    assert config.get_log_level() == logging.WARNING


def test_config_overrides(clean_env, tmp_path):
    clean_env.setenv('SKYEPHEM_DATA_PATH', str(tmp_path))
    clean_env.setenv('SKYEPHEM_COMETS', 'mine.json')
    clean_env.setenv('SKYEPHEM_GRS', str(tmp_path / 'elsewhere' / 'grs.txt'))
    assert config.get_comet_file() == str(tmp_path / 'mine.json')
    assert config.get_grs_file() == str(tmp_path / 'elsewhere' / 'grs.txt')


@pytest.mark.parametrize("value, level", [
    ('debug', logging.DEBUG),
    (' Error ', logging.ERROR),
    ('verbose', logging.WARNING),
])
def test_log_level(clean_env, value, level):
    clean_env.setenv('SKYEPHEM_LOG_LEVEL', value)
    assert config.get_log_level() == level


def test_configure_logging(clean_env):
    logger = logging.getLogger('skyephem')
    previous = logger.level
    try:
        clean_env.setenv('SKYEPHEM_LOG_LEVEL', 'INFO')
        config.configure_logging()
        assert logger.level == logging.INFO
        config.configure_logging(logging.DEBUG)
        assert logger.level == logging.DEBUG
    finally:
        logger.setLevel(previous)


# ═══════════════════════════════════════════════════════════════════════════
#  Numeric Helpers
# ═══════════════════════════════════════════════════════════════════════════

def test_mod_ranges():
    assert mod(-30.0, 360.0) == 330.0
    assert mod(-1e-20, 360.0) == 0.0
    assert mod2(190.0, 360.0) == -170.0
    assert mod2(180.0, 360.0) == -180.0
    assert mod2(-180.0, 360.0) == -180.0


def test_integer_division():
    assert div_tt0(-7, 2) == -3
    assert div_tt0(7, -2) == -3
    assert div_tt0(7, 2) == 3


def test_limit_neg1_to1():
    assert limit_neg1_to1(1.0000001) == 1.0
    assert limit_neg1_to1(-3.0) == -1.0


def test_interpolate_modular_short_way():
    npt.assert_allclose(interpolate_modular(0.0, 0.5, 1.0, 350.0, 10.0, 360.0), 0.0, atol=1e-12)
    npt.assert_allclose(interpolate_modular(0.0, 0.25, 1.0, 350.0, 10.0, 360.0, True), -5.0)


def test_interpolate_tabular():
    xx = [0.0, 1.0, 2.0, 3.0]
    yy = [x * x for x in xx]
    assert interpolate_tabular(xx, yy, 2.0, 1.5) == 4.0
    npt.assert_allclose(interpolate_tabular(xx, yy, 1.5, 0.0), 2.25)
    npt.assert_allclose(interpolate_tabular(xx, yy, 1.5, 1.5), 2.25)
    assert interpolate_tabular(xx, yy, -1.0, 1.5) == 0.0
    assert interpolate_tabular(xx, yy, 5.0, 1.5) == 9.0
