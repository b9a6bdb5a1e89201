"""
Parameter sets of the generic cell-cycle model of Csikasz-Nagy et al. (2006)

The published supplementary table gives one column of constants per organism:

    BY -- budding yeast
    MA -- mammalian
    FY -- fission yeast
    G2 -- G2 module
    XE -- Xenopus embryo

Rate constants (names starting with ``K``) are given in min⁻¹. Use
:meth:`ParameterSet.choose` to pick one column, converted to the units used
by the simulator (seconds).

Examples
--------

>>> ma = ParameterSet.choose('MA')
>>> ma.J20
100.0
>>> round(ma.Ka20 * 60, 6)
0.0833
>>> ma.Kasb
0.0

"""

import math
from collections.abc import Mapping

SECONDS_PER_MINUTE = 60.0
SECONDS_PER_HOUR = 3600.0

ORGANISMS = ('BY', 'MA', 'FY', 'G2', 'XE')

CYCB_DIVISION_THRESHOLD = 0.3

# Seconds, keyed by model case
CELL_MASS_DOUBLING_TIME = {1: 24 * SECONDS_PER_HOUR,
                           2: 14 * SECONDS_PER_HOUR}

_COLUMNS = {
    #            BY      MA        FY     G2    XE
    'J20':      (100,    100,      0.05,  None, None),
    'Ja20':     (10,     0.005,    0.001, None, 0.1),
    'Ja25':     (None,   None,     0.01,  0.1,  0.1),
    'JaAPC':    (0.1,    0.01,     0.001, None, 0.01),
    'Jafb':     (0.1,    0.1,      None,  None, None),
    'Jafi':     (10,     None,     None,  None, None),
    'Jah1':     (0.03,   0.01,     0.01,  None, None),
    'Jatf':     (0.01,   0.01,     0.01,  None, None),
    'Jawee':    (None,   None,     0.01,  0.05, 0.3),
    'Ji20':     (10,     0.005,    0.001, None, 0.1),
    'Ji25':     (None,   None,     0.01,  0.1,  0.1),
    'JiAPC':    (0.1,    0.01,     0.001, None, 0.01),
    'Jifb':     (0.1,    0.1,      None,  None, None),
    'Jifi':     (10,     None,     None,  None, None),
    'Jih1':     (0.03,   0.01,     0.01,  None, None),
    'Jitf':     (0.01,   0.01,     0.01,  None, None),
    'Jiwee':    (None,   None,     0.01,  0.05, 0.3),
    'J14di':    (0.0833, None,     None,  None, None),
    'K25p':     (None,   None,     0.001, 0.05, 0.1),
    'K25pp':    (None,   None,     1,     5,    1.9),
    'Ka20':     (1,      0.0833,   0.2,   None, 0.1),
    'Ka25':     (None,   None,     1,     1,    1),
    'KaAPC':    (0.1,    0.0117,   0.2,   None, 2),
    'Kafb':     (1,      0.167,    None,  None, None),
    'Kafi':     (6,      None,     None,  None, None),
    'Kah1p':    (0.01,   0.175,    5,     None, None),
    'Kah1pp':   (0.8,    2.33,     50,    None, None),
    'Kasa':     (50,     16.7,     500,   None, None),
    'Kasb':     (65,     None,     1000,  None, None),
    'Kase':     (None,   16.7,     None,  None, None),
    'Katfp':    (None,   0.0,      1.5,   None, None),
    'Katfpp':   (0.76,   0.05,     None,  None, None),
    'Katfppp':  (0.76,   0.0833,   None,  None, None),
    'Katfpppp': (3.8,    0.055,    None,  None, None),
    'Kaweep':   (None,   None,     0.25,  0.3,  0.1),
    'Kaweepp':  (None,   None,     0.25,  None, None),
    'Kd20':     (0.05,   0.025,    0.1,   None, None),
    'Kdap':     (0.01,   0.000333, 0.01,  None, None),
    'Kdapp':    (0.16,   0.333,    2,     None, None),
    'Kdappp':   (None,   None,     0.02,  None, None),
    'Kdbp':     (0.003,  0.000833, 0.02,  None, 0.015),
    'Kdbpp':    (0.4,    0.333,    0.75,  None, None),
    'Kdbppp':   (0.15,   0.0167,   1.5,   None, None),
    'Kdep':     (0.12,   0.00167,  None,  None, None),
    'Kdepp':    (None,   0.0167,   None,  None, None),
    'Kdeppp':   (None,   0.167,    None,  None, None),
    'Kdepppp':  (None,   0.167,    None,  None, None),
    'Kdia':     (0.06,   0.167,    1,     None, None),
    'Kdib':     (0.05,   None,     1,     None, None),
    'Kdie':     (None,   0.167,    None,  None, None),
    'Kdip':     (0.02,   0.167,    0.1,   None, None),
    'Kdipp':    (0.2,    0.833,    2,     None, None),
    'Kdippp':   (0.9,    1.67,     100,   None, None),
    'Kdipppp':  (0.12,   0.833,    None,  None, None),
    'Kdippppp': (0.66,   None,     1,     None, None),
    'Ki20':     (0.05,   0.0417,   0.05,  None, 0.095),
    'Ki25p':    (None,   None,     0.25,  0.3,  0.125),
    'Ki25pp':   (None,   None,     0.25,  None, None),
    'KiAPC':    (0.15,   0.03,     0.08,  None, 0.15),
    'Kifb':     (0.15,   0.0167,   None,  None, None),
    'Kifip':    (0.008,  None,     None,  None, None),
    'Kifipp':   (0.05,   None,     None,  None, None),
    'Kih1p':    (0.001,  None,     1,     None, None),
    'Kih1pp':   (0.64,   0.2,      40,    None, None),
    'Kih1ppp':  (0.1,    0.667,    40,    None, None),
    'Kih1pppp': (0.032,  None,     None,  None, None),
    'Kih1ppppp': (0.01,  None,     40,    None, None),
    'Kitfp':    (0.6,    0.0417,   1,     None, None),
    'Kitfpp':   (8,      0.0167,   None,  None, None),
    'Kitfppp':  (None,   0.0167,   10,    None, None),
    'Kiwee':    (None,   None,     1,     1,    3),
    'Ks20p':    (0.001,  None,     0.005, None, 1),
    'Ks20pp':   (10,     2.5,      0.1,   None, None),
    'Ksap':     (0.0008, None,     None,  None, None),
    'Ksapp':    (0.005,  0.00417,  0.02,  None, None),
    'Ksbp':     (0.004,  0.00167,  0.02,  None, 0.1),
    'Ksbpp':    (0.04,   0.005,    None,  None, None),
    'Ksep':     (None,   0.00133,  None,  None, None),
    'Ksepp':    (0.15,   0.05,     None,  None, None),
    'Ksip':     (0.036,  0.333,    0.3,   None, None),
    'Ksipp':    (0.24,   None,     None,  None, None),
    'Kweep':    (None,   None,     0.05,  0.2,  0.1),
    'Kweepp':   (None,   None,     0.5,   2,    0.9),
    'N':        (1,      1,        4,     None, None),
    'CycD0':    (0.108,  0.5,      0.05,  None, None),
}

#: Raw published table: constant name => {organism => value or None}
DATA = dict((name, dict(zip(ORGANISMS, column)))
            for name, column in _COLUMNS.items())


def cell_growth_rate(case=1):
    """Exponential cell mass growth rate (s⁻¹) for the given model case."""
    try:
        doubling_time = CELL_MASS_DOUBLING_TIME[case]
    except KeyError:
        raise ValueError('Unknown model case %r, expected one of %s' %
                         (case, sorted(CELL_MASS_DOUBLING_TIME)))
    return math.log(2) / doubling_time


class ParameterSet(Mapping):

    """
    Immutable record of numeric model constants

    Constants are available both as mapping items and as attributes.

    Parameters
    ----------
    name : string
        Label of the set, e.g. the organism code it was chosen for.
    values : mapping of str => float
        The constants.

    """

    def __init__(self, name, values):
        self.__dict__['name'] = name
        self.__dict__['_values'] = dict((k, float(v)) for k, v in
                                        values.items())

    @classmethod
    def choose(cls, organism, data=None):
        """
        Build the parameter set of one organism

        Missing constants become 0.0 and rate constants (names starting
        with ``K``) are converted from min⁻¹ to s⁻¹.

        Parameters
        ----------
        organism : string
            One of ``'BY'``, ``'MA'``, ``'FY'``, ``'G2'``, ``'XE'``.
        data : dict, optional
            Table in the format of :data:`DATA` (the default).
        """
        if data is None:
            data = DATA
        if organism not in ORGANISMS:
            raise ValueError('Unknown organism %r, expected one of %s' %
                             (organism, ', '.join(ORGANISMS)))
        values = {}
        for key, column in data.items():
            value = column.get(organism)
            value = 0.0 if value is None else float(value)
            if key.startswith('K'):
                value /= SECONDS_PER_MINUTE
            values[key] = value
        return cls(organism, values)

    def replace(self, **changes):
        """Return a copy with some constants replaced."""
        unknown = set(changes) - set(self._values)
        if unknown:
            raise KeyError('Unknown constants: %s' %
                           ', '.join(sorted(unknown)))
        values = dict(self._values)
        values.update(changes)
        return self.__class__(self.name, values)

    def __getitem__(self, key):
        return self._values[key]

    def __iter__(self):
        return iter(sorted(self._values))

    def __len__(self):
        return len(self._values)

    def __getattr__(self, name):
        values = self.__dict__.get('_values')
        if values is None or name not in values:
            raise AttributeError("Parameter set '%s' has no constant '%s'" %
                                 (self.__dict__.get('name'), name))
        return values[name]

    def __setattr__(self, name, value):
        raise AttributeError('ParameterSet is immutable')

    def __reduce__(self):
        return self.__class__, (self.name, self._values)

    def __repr__(self):
        return '<%s %s (%d constants)>' % (self.__class__.__name__,
                                           self.name, len(self))
