from cellcycle._version import __version__
from cellcycle.core import *
from cellcycle.kinetics import FineSteppedRate, FirstOrderDegradation

__all__ = ['Place', 'Parameter', 'RateTransition', 'AssignmentTransition',
           'assignment_place', 'Network', 'ComponentSet',
           'FineSteppedRate', 'FirstOrderDegradation']
