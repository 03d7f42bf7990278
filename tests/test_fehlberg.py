"""Tests for the fixed-step RKF integrator and its decoupled update."""

import numpy as np
import pytest

from similarity.equations import SimilarityParameters, StateVector, dy3, dy5
from similarity.errors import NonPhysicalStateError
from similarity.analysis import transform_coordinate
from similarity.fehlberg import (
    A, B, C, UPDATE_ORDER, component_increment, step, integrate,
)


class TestTableau:
    """Cash-Karp embedded RK coefficients (Numerical Recipes §16.2)."""

    def test_weights_sum_to_one(self):
        assert sum(C) == pytest.approx(1.0, abs=1e-14)

    def test_unused_weights(self):
        assert C[1] == 0.0
        assert C[4] == 0.0

    def test_row_sums_match_nodes(self):
        for b, row in zip(B, A):
            assert sum(row) == pytest.approx(b, abs=1e-14)

    def test_nodes(self):
        assert B == (0.0, 0.2, 0.3, 0.6, 1.0, 0.875)

    def test_update_order(self):
        """y5 first, then y4, y3, y2, y1."""
        assert UPDATE_ORDER == (4, 3, 2, 1, 0)


class TestComponentIncrement:

    def test_frozen_linear_component(self, default_params):
        """y1' = y2 with y2 frozen: increment is exactly Δη·y2."""
        s = StateVector(0.3, 0.8, 0.2, 1.1, 0.05)
        inc = component_increment(0, 0.0, s, 0.2, default_params)
        assert inc == pytest.approx(0.2 * 0.8, rel=1e-14)

    def test_linear_decay_is_fifth_order(self):
        """Isothermal momentum with f frozen: y3' = -f·y3, exact exp(-f·Δη).

        A 4th-order combination would be off by ~(fΔη)^5/120 ≈ 9e-5 here.
        """
        params = SimilarityParameters()
        f, h = 2.0, 0.2
        s = StateVector(f, 0.5, 1.0, 1.0, 0.0)
        inc = component_increment(2, 0.0, s, h, params)
        assert 1.0 + inc == pytest.approx(np.exp(-f * h), abs=1e-5)

    def test_zero_step(self, default_params):
        s = StateVector(0.3, 0.8, 0.2, 1.1, 0.05)
        for k in range(5):
            assert component_increment(k, 0.0, s, 0.0, default_params) == 0.0


class TestDecoupledStep:

    def test_uses_pre_step_values(self, default_params):
        """Each component reads the other components' values before the step."""
        s = StateVector(0.3, 0.8, 0.2, 1.1, 0.05)
        h = 0.2
        new = step(0.0, s, h, default_params)
        # y1 advances with the old y2, y2 with the old y3, y4 with the old y5
        assert new.f == pytest.approx(s.f + h * s.fp, rel=1e-14)
        assert new.fp == pytest.approx(s.fp + h * s.fpp, rel=1e-14)
        assert new.T == pytest.approx(s.T + h * s.Tp, rel=1e-14)

    def test_components_independent(self, default_params):
        s = StateVector(0.3, 0.8, 0.2, 1.1, 0.05)
        h = 0.2
        new = step(0.0, s, h, default_params)
        for k in range(5):
            expected = s[k] + component_increment(k, 0.0, s, h, default_params)
            assert new[k] == expected

    def test_returns_state_vector(self, default_params):
        new = step(0.0, StateVector(0.0, 0.0, 0.1, 3.0, 0.0), 0.2, default_params)
        assert isinstance(new, StateVector)

    def test_differs_from_coupled_step(self, default_params):
        """A coupled vector RK step would move y1 by more than Δη·y2(0)."""
        s = StateVector(0.0, 0.0, 0.5, 1.2, 0.0)
        new = step(0.0, s, 0.2, default_params)
        # y1 only sees the frozen f'(0) = 0
        assert new.f == 0.0
        assert new.fp > 0.0


class TestIntegrate:

    def test_shape_and_wall_values(self, default_params):
        grid = default_params.grid
        profile = integrate(grid, default_params, 0.1, 3.0)
        assert profile.shape == (5, 51)
        assert profile[0, 0] == 0.0
        assert profile[1, 0] == 0.0
        assert profile[2, 0] == 0.1
        assert profile[3, 0] == 3.0
        assert profile[4, 0] == 0.0

    def test_fresh_buffer_each_call(self, default_params):
        grid = default_params.grid
        p1 = integrate(grid, default_params, 0.1, 3.0)
        p2 = integrate(grid, default_params, 0.1, 3.0)
        assert p1 is not p2
        np.testing.assert_array_equal(p1, p2)

    def test_matches_repeated_steps(self, default_params):
        grid = default_params.grid
        profile = integrate(grid, default_params, 0.2, 1.5)
        state = StateVector(0.0, 0.0, 0.2, 1.5, 0.0)
        for i in range(3):
            state = step(grid[i], state, default_params.d_eta, default_params)
        np.testing.assert_array_equal(profile[:, 3], state)

    def test_single_point_grid(self, default_params):
        profile = integrate(np.array([0.0]), default_params, 0.3, 1.1)
        assert profile.shape == (5, 1)
        assert profile[2, 0] == 0.3

    def test_velocity_increases_from_wall(self):
        params = SimilarityParameters(eta_max=2.0, n=10)
        profile = integrate(params.grid, params, 0.4, 1.2)
        assert np.all(np.diff(profile[1]) > 0)
        assert np.all(profile[3] > 0)
        y = transform_coordinate(params.grid, profile[3])
        assert np.all(np.diff(y) >= 0)

    def test_negative_wall_temperature(self, default_params):
        with pytest.raises(NonPhysicalStateError) as info:
            integrate(default_params.grid, default_params, 0.1, -1.0)
        err = info.value
        assert err.index == 0
        assert err.eta == 0.0
        assert "step 0" in str(err)

    def test_temperature_driven_negative(self):
        """Strong dissipation cools the layer through T = 0 away from the wall."""
        params = SimilarityParameters(mach=5.0)
        with pytest.raises(NonPhysicalStateError) as info:
            integrate(params.grid, params, 1.0, 0.3)
        err = info.value
        assert not err.temperature > 0
        assert err.index > 0
        assert err.eta == pytest.approx(err.index * params.d_eta)

    def test_crossing_at_last_point(self):
        """T goes through zero on the final step of the grid."""
        params = SimilarityParameters(mach=5.0, eta_max=0.6, n=3)
        with pytest.raises(NonPhysicalStateError) as info:
            integrate(params.grid, params, 1.0, 0.3)
        err = info.value
        assert err.index == params.n
        assert err.eta == pytest.approx(params.eta_max)
        assert not err.temperature > 0
        assert "step 3" in str(err)

    @pytest.mark.parametrize("n", [1, 2, 3, 4, 6, 12])
    def test_returned_temperature_positive(self, n):
        params = SimilarityParameters(mach=5.0, eta_max=0.6, n=n)
        try:
            profile = integrate(params.grid, params, 1.0, 0.3)
        except NonPhysicalStateError:
            return
        assert np.all(profile[3] > 0)
        y = transform_coordinate(params.grid, profile[3])
        assert np.all(np.diff(y) >= 0)
