"""
test_kepler.py — Kepler Equation Solvers
========================================
"""

import numpy as np
import numpy.testing as npt
import pytest

from skyephem.kepler import (
    KeplerConvergenceError, Regime, near_parabolic, parabolic, select_regime,
    semi_major_axis, solve_elliptical, solve_hyperbolic, solve_orbit,
)


def _wrapped(x):
    return (x + np.pi) % (2.0 * np.pi) - np.pi


# ═══════════════════════════════════════════════════════════════════════════
#  Regime Selection
# ═══════════════════════════════════════════════════════════════════════════

@pytest.mark.parametrize("e, regime", [
    (0.5, Regime.ELLIPTICAL),
    (0.98, Regime.NEAR_PARABOLIC),
    (0.99, Regime.NEAR_PARABOLIC),
    (1.0, Regime.PARABOLIC),
    (1.1, Regime.NEAR_PARABOLIC),
    (1.2, Regime.HYPERBOLIC),
])
def test_select_regime(e, regime):
    assert select_regime(e) is regime


@pytest.mark.parametrize("e, regime", [
    (0.99, Regime.ELLIPTICAL),
    (1.05, Regime.HYPERBOLIC),
    (1.00005, Regime.PARABOLIC),
    (0.99995, Regime.PARABOLIC),
])
def test_select_regime_with_fallback(e, regime):
    assert select_regime(e, fallback=True) is regime


def test_semi_major_axis():
    assert semi_major_axis(1.0, 1.0) == float('inf')
    npt.assert_allclose(semi_major_axis(1.0, 0.5), 2.0)
    assert semi_major_axis(1.0, 1.5) < 0.0


# ═══════════════════════════════════════════════════════════════════════════
#  Elliptical
# ═══════════════════════════════════════════════════════════════════════════

def test_solve_elliptical_meeus_30a():
    E = solve_elliptical(0.1, np.deg2rad(5.0))
    npt.assert_allclose(np.rad2deg(E), 5.554589, atol=1e-5)


@pytest.mark.parametrize("e", [0.0, 0.2, 0.5, 0.8, 0.95])
def test_solve_elliptical_residual(e):
    for M in np.linspace(-3.0 * np.pi, 3.0 * np.pi, 37):
        E = solve_elliptical(e, M)
        assert -np.pi <= E <= np.pi
        assert abs(_wrapped(M - (E - e * np.sin(E)))) < 1e-6


def test_elliptical_at_perihelion():
    v, r = solve_orbit(2.5, 0.3, 0.0)
    npt.assert_allclose(v, 0.0, atol=1e-9)
    npt.assert_allclose(r, 2.5, rtol=1e-9)


# ═══════════════════════════════════════════════════════════════════════════
#  Hyperbolic
# ═══════════════════════════════════════════════════════════════════════════

@pytest.mark.parametrize("M", [-20.0, -0.5, 0.1, 3.0, 150.0])
def test_solve_hyperbolic_residual(M):
    H = solve_hyperbolic(1.5, M)
    npt.assert_allclose(1.5 * np.sinh(H) - H, M, rtol=1e-10, atol=1e-10)


def test_hyperbolic_at_perihelion():
    v, r = solve_orbit(0.8, 1.5, 0.0)
    npt.assert_allclose(v, 0.0, atol=1e-9)
    npt.assert_allclose(r, 0.8, rtol=1e-9)


def test_hyperbolic_iteration_cap():
    with pytest.raises(KeplerConvergenceError) as err:
        solve_orbit(1.0, 1.5, 100.0, max_iterations=1)
    assert err.value.code == 4


def test_iteration_cap_must_be_positive():
    with pytest.raises(ValueError):
        solve_orbit(1.0, 0.5, 10.0, max_iterations=0)


# ═══════════════════════════════════════════════════════════════════════════
#  Parabolic & Near-Parabolic
# ═══════════════════════════════════════════════════════════════════════════

def test_parabolic_meeus_34a():
    # Comet Stonehouse, perihelion 1998 Apr 14.4358 TD, seen 1998 Aug 5.0 TD
    v, r = parabolic(1.487469, 2_451_030.5 - 2_450_917.9358)
    npt.assert_allclose(np.rad2deg(v), 66.78862, atol=2e-3)
    npt.assert_allclose(r, 2.133911, atol=1e-4)


def test_near_parabolic_reduces_to_parabolic():
    for t in (-200.0, -5.0, 12.0, 400.0):
        npt.assert_allclose(near_parabolic(1.2, 1.0, t), parabolic(1.2, t), atol=1e-8)


def test_near_parabolic_agrees_with_elliptical():
    v_near, r_near = near_parabolic(1.0, 0.979, 30.0)
    v_ell, r_ell = solve_orbit(1.0, 0.979, 30.0)
    npt.assert_allclose(v_near, v_ell, atol=1e-6)
    npt.assert_allclose(r_near, r_ell, rtol=1e-6)


def test_near_parabolic_agrees_with_hyperbolic():
    v_near, r_near = near_parabolic(1.0, 1.101, 30.0)
    v_hyp, r_hyp = solve_orbit(1.0, 1.101, 30.0)
    npt.assert_allclose(v_near, v_hyp, atol=1e-6)
    npt.assert_allclose(r_near, r_hyp, rtol=1e-6)


def test_near_parabolic_at_perihelion():
    assert near_parabolic(0.6, 0.995, 0.0) == (0.0, 0.6)


def test_fallback_matches_near_parabolic():
    v, r = solve_orbit(1.0, 0.99, 50.0)
    v_fb, r_fb = solve_orbit(1.0, 0.99, 50.0, fallback=True)
    npt.assert_allclose(v, v_fb, atol=1e-6)
    npt.assert_allclose(r, r_fb, rtol=1e-6)


def test_near_parabolic_sign_follows_time():
    v_before, _ = solve_orbit(1.0, 0.99, -50.0)
    v_after, _ = solve_orbit(1.0, 0.99, 50.0)
    assert v_before < 0.0 < v_after
    npt.assert_allclose(v_before, -v_after, atol=1e-9)
