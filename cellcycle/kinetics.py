"""
Numeric building blocks for rate and assignment laws.

Stiff first-order processes are integrated with a fine-stepping scheme: one
coarse simulation step is split into many explicit Euler sub-steps on the
local value of a single place, with every other input frozen at its value at
the start of the coarse step. The result is handed back to the simulator as
an average *rate*, so the simulator's contract (every rate transition returns
a rate) is unchanged.

Rate laws are expected to guard their own singularities. The helpers below
clamp before dividing instead of relying on exceptions or NaN propagation.
"""

import math
import numbers

DEFAULT_SUBSTEPS = 50


def nan_to_zero(x):
    """Return ``x`` as a float, with NaN replaced by 0.0."""
    x = float(x)
    return 0.0 if math.isnan(x) else x


def clamp(x, lower=0.0):
    """Return ``max(x, lower)``."""
    return x if x > lower else lower


def saturating_ratio(numerator, denominator):
    """
    Divide, returning 0.0 when the quotient is undefined

    A non-positive denominator or a non-finite quotient gives 0.0. Used for
    Michaelis-Menten style saturation terms whose denominator is a sum of
    non-negative quantities.
    """
    if not denominator > 0:
        return 0.0
    ratio = numerator / denominator
    if not math.isfinite(ratio):
        return 0.0
    return ratio


def goldbeter_koshland_b(a1, a2, a3, a4):
    """The auxiliary ``B`` function of the Goldbeter-Koshland function."""
    return a2 - a1 + a3 * a2 + a4 * a1


def goldbeter_koshland(a1, a2, a3, a4):
    """
    Goldbeter-Koshland function, as used by Csikasz-Nagy et al. (2006)

    .. math:: G(a_1, a_2, a_3, a_4) = \\frac{2 a_4 a_1}{B + \\sqrt{B^2 -
              4 (a_2 - a_1) a_4 a_1}}

    with :math:`B = a_2 - a_1 + a_3 a_2 + a_4 a_1`.

    A negative discriminant is clamped to zero and a degenerate denominator
    (e.g. all arguments zero, as happens for modules absent from a parameter
    set) gives 0.0.
    """
    b = goldbeter_koshland_b(a1, a2, a3, a4)
    discriminant = clamp(b * b - 4 * (a2 - a1) * a4 * a1)
    return saturating_ratio(2 * a4 * a1, b + math.sqrt(discriminant))


def fine_step(derivative, value, step, substeps=DEFAULT_SUBSTEPS):
    """
    Integrate ``dv/dt = derivative(v)`` over one coarse step by sub-stepping

    Parameters
    ----------
    derivative : callable
        Function of the current local value returning its time derivative.
        Any other inputs must already be bound (frozen) by the caller.
    value : float
        Value at the start of the coarse step.
    step : float
        Coarse step size.
    substeps : int
        Number of explicit Euler sub-steps of size ``step / substeps``.

    Returns
    -------
    float
        The average rate of change over the coarse step,
        ``(v_final - v_initial) / step``. With ``substeps=1`` this is
        ``derivative(value)``, i.e. plain first-order Euler.
    """
    if substeps < 1:
        raise ValueError('substeps must be a positive integer')
    step = float(step)
    fine = step / substeps
    v = initial = value
    for _ in range(substeps):
        v += derivative(v) * fine
    return (v - initial) / step


class FineSteppedRate(object):
    """
    Rate law of a transition whose single codomain place is fine-stepped

    Parameters
    ----------
    derivative : callable
        Called with the transition's domain values, in domain order, and
        returns the time derivative of the fine-stepped place. During
        sub-stepping the fine-stepped place's argument receives the evolving
        local value while all other arguments stay frozen.
    substeps : int
        Number of sub-steps per coarse step.

    Notes
    -----
    The simulator calls :meth:`average_rate`, which divides the fine-stepped
    average change by the place's stoichiometry coefficient, so that the
    usual "coefficient x rate x step" update reproduces the fine-stepped
    change exactly.
    """

    def __init__(self, derivative, substeps=DEFAULT_SUBSTEPS):
        if not callable(derivative):
            raise ValueError('derivative must be callable')
        if not isinstance(substeps, numbers.Integral) or substeps < 1:
            raise ValueError('substeps must be a positive integer')
        self.derivative = derivative
        self.substeps = substeps

    def local_derivative(self, values, position):
        """Bind all inputs but the one at ``position``."""
        frozen = list(values)

        def derivative(v):
            frozen[position] = v
            return self.derivative(*frozen)
        return derivative

    def average_rate(self, values, step, position, coefficient=1):
        change_rate = fine_step(self.local_derivative(values, position),
                                values[position], step, self.substeps)
        return change_rate / coefficient

    def __call__(self, *values):
        # Instantaneous derivative, for inspection outside a simulation
        return self.derivative(*values)

    def __repr__(self):
        return '%s(%r, substeps=%d)' % (self.__class__.__name__,
                                        self.derivative, self.substeps)


class FirstOrderDegradation(FineSteppedRate):
    """
    Fine-stepped first-order degradation, ``dv/dt = -k * v``

    Parameters
    ----------
    k : callable or float
        Degradation rate constant. A callable receives the domain values
        other than the degraded place (in domain order). It is evaluated once
        per coarse step and held fixed across sub-steps.
    substeps : int
        Number of sub-steps per coarse step.
    position : int
        Index of the degraded place in the domain. Defaults to the last
        place; a :class:`cellcycle.RateTransition` using this rate checks
        that its degraded place is at this index.

    Examples
    --------
    Stand-alone use returns the positive degradation rate:

    >>> fod = FirstOrderDegradation(0.1)
    >>> round(fod.fine_step(1.0, 1)(2.0), 12)
    0.2
    """

    def __init__(self, k, substeps=DEFAULT_SUBSTEPS, position=-1):
        if callable(k):
            self.k = k
        else:
            self.k = lambda *inputs: k
        self.position = position
        super(FirstOrderDegradation, self).__init__(self._instantaneous,
                                                    substeps)

    def _instantaneous(self, *values):
        position = self.position % len(values)
        others = [x for i, x in enumerate(values) if i != position]
        return -self.k(*others) * values[position]

    def local_derivative(self, values, position):
        position = position % len(values)
        rate_constant = self.k(*[x for i, x in enumerate(values)
                                 if i != position])

        def derivative(v):
            return -rate_constant * v
        return derivative

    def fine_step(self, step, substeps=None, *inputs):
        """
        Return a function ``v -> (v_initial - v_final) / step``

        ``inputs`` are passed to ``k``; the returned value is the positive
        degradation rate averaged over the step.
        """
        if substeps is None:
            substeps = self.substeps
        rate_constant = self.k(*inputs)

        def degradation_rate(v):
            return -fine_step(lambda x: -rate_constant * x, v, step,
                              substeps)
        return degradation_rate
