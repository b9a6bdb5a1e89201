import math
import pytest
from cellcycle.kinetics import *
from cellcycle import Place, RateTransition


def test_nan_to_zero():
    assert nan_to_zero(float('nan')) == 0.0
    assert nan_to_zero(1.5) == 1.5
    assert nan_to_zero(2) == 2.0


def test_clamp():
    assert clamp(-1.0) == 0.0
    assert clamp(0.5) == 0.5
    assert clamp(0.5, lower=1.0) == 1.0


def test_saturating_ratio():
    assert saturating_ratio(1.0, 4.0) == 0.25
    assert saturating_ratio(1.0, 0.0) == 0.0
    assert saturating_ratio(1.0, -1.0) == 0.0
    assert saturating_ratio(float('inf'), 1.0) == 0.0
    assert saturating_ratio(1.0, float('nan')) == 0.0


def test_goldbeter_koshland():
    # G(a1, a2, a3, a4) = 2 a4 a1 / (B + sqrt(B^2 - 4 (a2 - a1) a4 a1))
    a1, a2, a3, a4 = 0.5, 0.2, 0.1, 0.1
    b = goldbeter_koshland_b(a1, a2, a3, a4)
    assert b == pytest.approx(a2 - a1 + a3 * a2 + a4 * a1)
    expected = 2 * a4 * a1 / (b + math.sqrt(b ** 2 - 4 * (a2 - a1) * a4 * a1))
    assert goldbeter_koshland(a1, a2, a3, a4) == pytest.approx(expected)
    # Switch-like: between 0 and 1, mostly on when activation dominates
    assert 0.0 < goldbeter_koshland(1.0, 0.01, 0.01, 0.01) <= 1.0
    assert goldbeter_koshland(1.0, 0.01, 0.01, 0.01) > 0.9
    assert goldbeter_koshland(0.01, 1.0, 0.01, 0.01) < 0.1


def test_goldbeter_koshland_degenerate():
    assert goldbeter_koshland(0.0, 0.0, 0.0, 0.0) == 0.0
    assert goldbeter_koshland(0.0, 0.5, 0.0, 0.0) == 0.0


def test_fine_step_single_substep_is_euler():
    k, v, step = 0.3, 2.0, 0.5
    assert fine_step(lambda x: -k * x, v, step, 1) == pytest.approx(-k * v)


def test_fine_step_converges_to_analytic_average():
    k, v, step = 0.2, 3.0, 1.0
    exact = (v * math.exp(-k * step) - v) / step
    errors = [abs(fine_step(lambda x: -k * x, v, step, n) - exact)
              for n in (1, 10, 100, 1000)]
    assert errors == sorted(errors, reverse=True)
    assert errors[-1] < 1e-4


def test_fine_step_small_step_tends_to_instantaneous_rate():
    k, v = 0.2, 3.0
    assert fine_step(lambda x: -k * x, v, 1e-6, 50) == \
        pytest.approx(-k * v, rel=1e-5)


def test_fine_step_invalid_substeps():
    pytest.raises(ValueError, fine_step, lambda x: x, 1.0, 1.0, 0)


def test_fine_stepped_rate():
    calls = []

    def derivative(other, v):
        calls.append(other)
        return other - v

    rate = FineSteppedRate(derivative, substeps=10)
    result = rate.average_rate([1.0, 0.0], 0.1, position=1)
    assert result == pytest.approx(fine_step(lambda v: 1.0 - v, 0.0, 0.1, 10))
    # Other inputs are frozen across sub-steps
    assert calls == [1.0] * 10
    # Division by the stoichiometry coefficient
    assert rate.average_rate([1.0, 0.0], 0.1, 1, coefficient=-1) == \
        pytest.approx(-result)
    assert rate(1.0, 0.25) == 0.75


def test_fine_stepped_rate_invalid():
    pytest.raises(ValueError, FineSteppedRate, 'not callable')
    pytest.raises(ValueError, FineSteppedRate, lambda v: v, 0)
    pytest.raises(ValueError, FineSteppedRate, lambda v: v, 1.5)


def test_first_order_degradation():
    fod = FirstOrderDegradation(0.1)
    assert fod.substeps == DEFAULT_SUBSTEPS
    assert fod.fine_step(1.0, 1)(2.0) == pytest.approx(0.2)
    # Positive degradation rate, below the Euler estimate for many substeps
    rate = fod.fine_step(1.0)(2.0)
    assert 0 < rate < 0.2
    assert rate == pytest.approx(2.0 * (1 - math.exp(-0.1)), rel=1e-3)


def test_first_order_degradation_in_rate_transition_position():
    # k computed from the other inputs, evaluated once per coarse step
    fod = FirstOrderDegradation(lambda v, free: v + 2 * free, substeps=1)
    values = [0.1, 0.2, 3.0]
    assert fod.average_rate(values, 1.0, 2) == pytest.approx(-0.5 * 3.0)
    assert fod.average_rate(values, 1.0, 2, coefficient=-1) == \
        pytest.approx(0.5 * 3.0)
    assert fod(*values) == pytest.approx(-1.5)


def test_first_order_degradation_position():
    # Degraded place first, rate constant read from the second input
    fod = FirstOrderDegradation(lambda v: v, substeps=1, position=0)
    assert fod(2.0, 3.0) == pytest.approx(-6.0)
    assert fod.average_rate([2.0, 3.0], 1.0, 0) == pytest.approx(-6.0)
    a = Place('A', 2.0)
    v = Place('V', 3.0)
    t = RateTransition('decay', {a: -1}, fod, domain=[a, v])
    assert t.rate_law()([2.0, 3.0], 1.0) == pytest.approx(6.0)
    pytest.raises(ValueError, RateTransition, 'decay', {a: -1}, fod,
                  domain=[v, a])
    pytest.raises(ValueError, RateTransition, 'decay', {a: -1},
                  FirstOrderDegradation(lambda v: v), domain=[a, v])
