"""
A simplistic, timer-driven cell cycle

The network has a single input, the ``Timer`` place advanced by the ``Clock``
transition at one unit per second, and three outputs:

* ``A_phase``: the phase when the cell cycle enzyme machinery is synthesized,
* ``S_phase``: DNA synthesis phase,
* ``Cdc20A``: the anaphase promoting complex. When present, it degrades the
  cell cycle enzyme machinery.

The outputs are 0/1 flags set by assignment transitions reading the timer.

Examples
--------

>>> from cellcycle.examples.simple import cell_cycle_network
>>> net = cell_cycle_network()
>>> sim = net.simulation(time=6 * 3600, step=60)
>>> sim.run_until(4 * 3600).current_marking()['A_phase']
1.0
>>> sim.current_marking()['S_phase']
0.0
"""

from cellcycle import Network, Place, RateTransition, AssignmentTransition
from cellcycle.parameters import SECONDS_PER_HOUR

S_PHASE_START = 5 * SECONDS_PER_HOUR
S_PHASE_DURATION = 12 * SECONDS_PER_HOUR
S_PHASE_END = S_PHASE_START + S_PHASE_DURATION
A_PHASE_START = 3 * SECONDS_PER_HOUR
A_PHASE_END = S_PHASE_END
CDC20A_START = 22 * SECONDS_PER_HOUR
CDC20A_END = 1 * SECONDS_PER_HOUR

DEFAULT_SIMULATION = {'time': 36 * SECONDS_PER_HOUR,
                      'step': 60,
                      'sampling': 1200}


def phase_indicator(start, end):
    """Return a function of time which is 1 strictly between start and end,
    0 elsewhere."""
    return lambda t: 1 if start < t < end else 0


def cell_cycle_network(name='simple_cell_cycle'):
    """Build the finalized simple cell cycle network."""
    timer = Place('Timer', 0)
    a_phase = Place('A_phase', 0)
    s_phase = Place('S_phase', 0)
    cdc20a = Place('Cdc20A', 1)
    net = Network(name)
    net << timer << RateTransition('Clock', {timer: 1}, 1)
    net << a_phase << s_phase << cdc20a
    net.add(
        AssignmentTransition('A_phase_f', a_phase,
                             phase_indicator(A_PHASE_START, A_PHASE_END),
                             domain=[timer]),
        AssignmentTransition('S_phase_f', s_phase,
                             phase_indicator(S_PHASE_START, S_PHASE_END),
                             domain=[timer]),
        # Active across midnight of the cycle
        AssignmentTransition('Cdc20A_f', cdc20a,
                             lambda t: 1 if t < CDC20A_END or
                             t > CDC20A_START else 0,
                             domain=[timer]),
    )
    return net.finalize()
