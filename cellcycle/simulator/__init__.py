from .base import SimulatorException, SimulationInvalidError, \
    SimulationFinishedError, OutOfOrderTimeError, Marking, Recording
from .pseudo_euler import PseudoEulerSimulator

__all__ = ['PseudoEulerSimulator', 'Recording', 'Marking',
           'SimulatorException', 'SimulationInvalidError',
           'SimulationFinishedError', 'OutOfOrderTimeError']
