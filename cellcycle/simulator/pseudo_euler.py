import math
import numpy as np
from cellcycle.core import ArityMismatchError, NumericDomainError
from cellcycle.simulator.base import Simulator


class PseudoEulerSimulator(Simulator):
    """
    Simulate a network with explicit Euler steps and exact assignments

    Each tick of size ``S``:

    1. every rate transition's rate is evaluated against the marking at the
       start of the tick (no rate transition sees another's update);
    2. the rates are multiplied by ``S`` and by the stoichiometry matrix to
       give one delta per place;
    3. the deltas are added to the marking as one batch;
    4. assignment transitions fire in network order, each one reading the
       marking as left by the previous one and overwriting its codomain
       immediately.

    Fine-stepped rate laws (:class:`cellcycle.kinetics.FineSteppedRate`)
    integrate their own place over the tick and return the average rate, so
    they fit in steps 1-3 unchanged.

    Parameters
    ----------
    network : cellcycle.Network
        Network to simulate.
    time, step, sampling, initial_marking, param_values, verbose
        See :class:`cellcycle.simulator.base.Simulator`.

    Examples
    --------
    Exponential growth of a single place:

    >>> from cellcycle import Network, Place, RateTransition
    >>> mass = Place('Mass', 1.0)
    >>> net = Network('growth', [mass, RateTransition(
    ...     'growth', {mass: 1}, lambda m: 0.1 * m)])
    >>> sim = PseudoEulerSimulator(net, time=2, step=1)
    >>> sim.run_until(1).get('Mass')
    1.1
    >>> round(sim.step().get(mass), 12)
    1.21
    >>> sim.state
    'finished'
    """

    simulation_method = 'pseudo_euler'

    def __init__(self, network, time=None, step=None, sampling=None,
                 initial_marking=None, param_values=None, verbose=False,
                 **kwargs):
        super(PseudoEulerSimulator, self).__init__(
            network, time=time, step=step, sampling=sampling,
            initial_marking=initial_marking, param_values=param_values,
            verbose=verbose, **kwargs)
        if kwargs:
            raise ValueError('Unknown keyword argument(s): {}'.format(
                ', '.join(kwargs.keys())
            ))
        self._compile()

    def _compile(self):
        """Resolve domains to marking indices and compile transition laws."""
        marking = self._marking
        self._rate_laws = [
            (t, t.rate_law(self.param_values), marking.indices(t.domain))
            for t in self._network.rate_transitions]
        self._assignment_laws = [
            (t, t.assignment_law(self.param_values),
             marking.indices(t.domain), marking.indices(t.codomain))
            for t in self._network.assignment_transitions]
        self._stoichiometry = self._network.stoichiometry_matrix
        self._logger.debug('Compiled %d rate and %d assignment transitions',
                           len(self._rate_laws), len(self._assignment_laws))

    def _tick(self, step):
        values = self._marking.tolist()
        rates = np.empty(len(self._rate_laws))
        for i, (t, law, domain) in enumerate(self._rate_laws):
            rates[i] = self._evaluate_rate(
                t, law, [values[j] for j in domain], step)
        if len(rates):
            self._marking.apply_deltas(self._stoichiometry.dot(rates) * step)

        for t, law, domain, codomain in self._assignment_laws:
            result = self._evaluate_assignment(
                t, law, self._marking.values_at(domain))
            self._marking.assign(codomain, result)

    def _evaluate_rate(self, transition, law, values, step):
        try:
            rate = law(values, step)
        except (ArithmeticError, ValueError) as e:
            raise NumericDomainError(
                'Rate of transition %s is undefined at %s: %s' %
                (transition.name, _format_values(transition, values), e)
            ) from e
        return _checked_float(rate, 'Rate of transition %s' %
                              transition.name, transition, values)

    def _evaluate_assignment(self, transition, law, values):
        try:
            result = law(values)
        except ArityMismatchError:
            raise
        except (ArithmeticError, ValueError, TypeError) as e:
            if isinstance(e, TypeError) and 'complex' not in str(e):
                raise
            raise NumericDomainError(
                'Assignment %s is undefined at %s: %s' %
                (transition.name, _format_values(transition, values), e)
            ) from e
        for value in result:
            if not math.isfinite(value):
                raise NumericDomainError(
                    'Assignment %s produced %r at %s' %
                    (transition.name, value,
                     _format_values(transition, values)))
        return result


def _format_values(transition, values):
    return ', '.join('%s=%g' % (p.name, v) for p, v in
                     zip(transition.domain, values))


def _checked_float(value, description, transition, values):
    if isinstance(value, complex):
        raise NumericDomainError('%s is complex (%r) at %s' % (
            description, value, _format_values(transition, values)))
    value = float(value)
    if not math.isfinite(value):
        raise NumericDomainError('%s is %r at %s' % (
            description, value, _format_values(transition, values)))
    return value
