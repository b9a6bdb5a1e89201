from abc import ABCMeta, abstractmethod
import numpy as np
import itertools
import collections
import numbers
import math
from cellcycle.core import Place, Network
from cellcycle.logging import get_logger, EXTENDED_DEBUG

try:
    import pandas as pd
except ImportError:
    pd = None

IDLE = 'idle'
RUNNING = 'running'
FINISHED = 'finished'
INVALID = 'invalid'

#: Relative tolerance used to decide whether the step divides the time range
TIME_EPSILON = 1e-9


class SimulatorException(Exception):
    pass


class SimulationInvalidError(SimulatorException):
    """A tick failed earlier; the simulation cannot be advanced."""
    pass


class SimulationFinishedError(SimulatorException):
    """The simulation already reached its end time."""
    pass


class OutOfOrderTimeError(SimulatorException, ValueError):
    """A target time at or before the elapsed time was requested."""
    pass


class Marking(object):
    """
    Current values of the places of a network

    Values are held in a numpy vector in the order of ``places``. Places can
    be addressed by object or by name; both are resolved once, when the
    marking is created, into a vector index.

    Parameters
    ----------
    places : sequence of Place
        The places, in network order.
    values : sequence of float, optional
        Initial values. Defaults to the places' own values. The values are
        copied; the places are never written to.
    """

    def __init__(self, places, values=None):
        self.places = tuple(places)
        if values is None:
            values = [p.value for p in self.places]
        self._values = np.array(values, dtype=float)
        if self._values.shape != (len(self.places), ):
            raise ValueError('Expected %d values, got %d' %
                             (len(self.places), len(self._values)))
        self._index = {}
        for i, p in enumerate(self.places):
            self._index[p] = i
            self._index[p.name] = i

    def index(self, place):
        try:
            return self._index[place]
        except KeyError:
            raise KeyError('Place not in marking: %s' %
                           getattr(place, 'name', place))

    def indices(self, places):
        return [self.index(p) for p in places]

    def get(self, place):
        return float(self._values[self.index(place)])

    def set(self, place, value):
        self._values[self.index(place)] = value

    def apply_delta(self, place, delta):
        self._values[self.index(place)] += delta

    def apply_deltas(self, deltas):
        """Add a vector of deltas (in place order) to the marking at once."""
        self._values += deltas

    def values_at(self, indices):
        return [float(self._values[i]) for i in indices]

    def assign(self, indices, values):
        for i, v in zip(indices, values):
            self._values[i] = v

    def snapshot(self):
        """A copy of the marking vector."""
        return self._values.copy()

    def tolist(self):
        return self._values.tolist()

    def as_dict(self):
        return collections.OrderedDict(
            (p.name, float(v)) for p, v in zip(self.places, self._values))

    def __len__(self):
        return len(self.places)

    def __repr__(self):
        return '%s(%s)' % (self.__class__.__name__, ', '.join(
            '%s=%g' % (name, v) for name, v in self.as_dict().items()))


class Simulator(metaclass=ABCMeta):
    """An abstract base class for simulation of networks.

    Parameters
    ----------
    network : cellcycle.Network
        Network to simulate. It is finalized if it is not already.
    time : number or pair of numbers
        End time, or ``(start, end)``, in seconds. The start defaults to 0.
    step : number
        Size of one tick, in seconds.
    sampling : number, optional
        Interval between samples of the recording, in seconds. Rounded to a
        whole number of ticks (at least one). Defaults to ``step``.
    initial_marking : dict, optional
        Initial values overriding the places' own values, keyed by Place or
        place name. Required for places created with
        ``marking_required=True``.
    param_values : dict, optional
        Values overriding the network parameters, keyed by parameter name.
    verbose : bool or int, optional (default: False)
        Sets the verbosity level of the logger. See the logging levels and
        constants from Python's logging module for interpretation of integer
        values. False is equal to the cellcycle default level (currently
        WARNING), True is equal to DEBUG.

    Attributes
    ----------
    verbose: bool
        Verbosity flag passed to the constructor.
    network : cellcycle.Network
        Network passed to the constructor.
    state : str
        One of ``'idle'``, ``'running'``, ``'finished'`` and ``'invalid'``.
    ticks : int
        Number of completed ticks.

    Notes
    -----
    The marking of a simulation is a copy of the initial marking; running it
    never modifies the network's places. Several simulations of the same
    network can be advanced independently.

    Elapsed time is computed as ``start + ticks * step`` rather than by
    summing steps. When ``step`` divides ``end - start`` (within a relative
    tolerance of ``TIME_EPSILON``) the last tick lands exactly on ``end``;
    otherwise the last tick overshoots ``end`` by less than one step.
    """

    simulation_method = None

    @abstractmethod
    def __init__(self, network, time=None, step=None, sampling=None,
                 initial_marking=None, param_values=None, verbose=False,
                 **kwargs):
        if not isinstance(network, Network):
            raise ValueError('network must be a cellcycle.Network')
        # Get or create base a cellcycle logger for this module and network
        self._logger = get_logger(self.__module__, network=network,
                                  log_level=verbose)
        self._logger.debug('Simulator created')
        self._network = network.finalize()
        self.verbose = verbose
        self._init_kwargs = kwargs

        self._start, self._end = self._process_time(time)
        self._step = self._process_step(step)
        if sampling is None:
            sampling = self._step
        self._sampling_ticks = self._process_sampling(sampling)

        ratio = (self._end - self._start) / self._step
        nearest = round(ratio)
        self._exact_end = nearest >= 1 and \
            abs(ratio - nearest) <= TIME_EPSILON * max(1.0, ratio)
        self._total_ticks = int(nearest) if self._exact_end else \
            int(math.ceil(ratio))

        self.param_values = self._process_param_values(param_values)
        values, explicit = self._process_initial_marking(initial_marking)
        self._marking = Marking(network.places, values)
        self._initialize_derived_places(explicit)
        self._ticks = 0
        self._state = IDLE
        self._recording = Recording(self, network.places)
        self._recording._append(self.elapsed_time(), self._marking.snapshot())

    @property
    def network(self):
        return self._network

    @property
    def state(self):
        return self._state

    @property
    def ticks(self):
        return self._ticks

    @property
    def total_ticks(self):
        """Number of ticks from start to end."""
        return self._total_ticks

    @property
    def time_range(self):
        return self._start, self._end

    @property
    def step_size(self):
        return self._step

    @property
    def sampling_interval(self):
        return self._sampling_ticks * self._step

    @property
    def recording(self):
        return self._recording

    @staticmethod
    def _process_time(time):
        if time is None:
            raise ValueError('time must be defined before simulation can run')
        if isinstance(time, numbers.Real):
            start, end = 0.0, time
        else:
            try:
                start, end = time
            except (TypeError, ValueError):
                raise ValueError('time must be an end time or a '
                                 '(start, end) pair')
        start, end = float(start), float(end)
        if not (math.isfinite(start) and math.isfinite(end)):
            raise ValueError('time range must be finite')
        if end <= start:
            raise ValueError('End time (%g) must be greater than start time '
                             '(%g)' % (end, start))
        return start, end

    @staticmethod
    def _process_step(step):
        if step is None:
            raise ValueError('step must be defined before simulation can run')
        step = float(step)
        if not (math.isfinite(step) and step > 0):
            raise ValueError('step must be a positive number, got %r' % step)
        return step

    def _process_sampling(self, sampling):
        sampling = float(sampling)
        if not (math.isfinite(sampling) and sampling > 0):
            raise ValueError('sampling must be a positive number, got %r' %
                             sampling)
        return max(1, int(round(sampling / self._step)))

    def _process_param_values(self, param_values):
        if param_values is None:
            return {}
        processed = {}
        for key, value in param_values.items():
            if key not in self._network.parameters.keys():
                raise IndexError("param_values dictionary has unknown "
                                 "parameter name (%s)" % key)
            self._network.parameters[key].check_value(value)
            processed[key] = float(value)
        return processed

    def _process_initial_marking(self, initial_marking):
        values = self._network.initial_marking()
        overridden = set()
        if initial_marking is not None:
            for key, value in initial_marking.items():
                name = key.name if isinstance(key, Place) else key
                if name not in values or (isinstance(key, Place) and
                                          key not in self._network.places):
                    raise ValueError('initial_marking has a place that is '
                                     'not in the network: %s' % name)
                value = float(value)
                if not math.isfinite(value):
                    raise ValueError('Please check initial marking of %s for '
                                     'non-finite values' % name)
                values[name] = value
                overridden.add(name)
        missing = [p.name for p in self._network.places
                   if p.marking_required and p.name not in overridden]
        if missing:
            raise SimulatorException('Initial marking required for: %s' %
                                     ', '.join(missing))
        return list(values.values()), overridden

    def _initialize_derived_places(self, explicit):
        """Recompute derived places not set explicitly, in network order."""
        marking = self._marking
        for t in self._network.assignment_transitions:
            if not t.derived or t.codomain[0].name in explicit:
                continue
            values = marking.values_at(marking.indices(t.domain))
            marking.assign(marking.indices(t.codomain),
                           t.assignment_law(self.param_values)(values))

    def elapsed_time(self):
        """Simulation time after the completed ticks."""
        if self._ticks == self._total_ticks and self._exact_end:
            return self._end
        return self._start + self._ticks * self._step

    def current_marking(self):
        """Return the current marking as a dict of place name => value."""
        return self._marking.as_dict()

    def get(self, place):
        """Return the current value of a place (object or name)."""
        return self._marking.get(place)

    def step(self):
        """
        Advance the simulation by one tick

        Raises
        ------
        SimulationFinishedError
            When the end time has already been reached.
        SimulationInvalidError
            When a previous tick failed.
        """
        if self._state == FINISHED:
            raise SimulationFinishedError(
                'Simulation finished at t=%g' % self.elapsed_time())
        if self._state == INVALID:
            raise SimulationInvalidError(
                'Simulation is invalid after a failed tick at t=%g' %
                self.elapsed_time())
        if self._state == IDLE:
            self._logger.info('Simulation started (%s, t=%g..%g, step=%g)',
                              self.simulation_method, self._start, self._end,
                              self._step)
            self._state = RUNNING
        try:
            self._tick(self._step)
        except Exception:
            self._state = INVALID
            self._logger.error('Tick %d failed at t=%g, simulation is invalid',
                               self._ticks + 1, self.elapsed_time())
            raise
        self._ticks += 1
        elapsed = self.elapsed_time()
        self._logger.log(EXTENDED_DEBUG, 'Tick %d completed, t=%g',
                         self._ticks, elapsed)
        finished = self._ticks >= self._total_ticks
        if finished or self._ticks % self._sampling_ticks == 0:
            self._recording._append(elapsed, self._marking.snapshot())
        if finished:
            self._state = FINISHED
            self._logger.info('Simulation finished after %d ticks, t=%g',
                              self._ticks, elapsed)
        return self

    def run_until(self, target):
        """
        Tick until the elapsed time reaches ``target`` or the end time

        Raises
        ------
        OutOfOrderTimeError
            When ``target`` is not after the elapsed time. The simulation is
            left untouched.
        """
        target = float(target)
        elapsed = self.elapsed_time()
        if target <= elapsed:
            raise OutOfOrderTimeError(
                'Target time %g is not after the elapsed time %g' %
                (target, elapsed))
        tolerance = TIME_EPSILON * self._step
        while self._state != FINISHED and \
                self.elapsed_time() < target - tolerance:
            self.step()
        return self

    def run(self):
        """Run the simulation to its end time and return the recording."""
        if self._state != FINISHED:
            self.run_until(self._end)
        return self._recording

    @abstractmethod
    def _tick(self, step):
        """Advance the marking by one step of size ``step``.

        Notes for developers implementing Simulator subclasses:

        Implementations update ``self._marking`` in place. Any exception
        makes the simulation invalid. Undefined numeric results should be
        raised as :class:`cellcycle.core.NumericDomainError`.
        """
        raise NotImplementedError

    def __repr__(self):
        return ("<%s '%s' (state: %s, t=%g, ticks: %d/%d) at 0x%x>" %
                (self.__class__.__name__, self._network.name, self._state,
                 self.elapsed_time(), self._ticks, self._total_ticks,
                 id(self)))


class Recording(object):
    """
    Samples of the marking of a simulation, in time order.

    A recording is filled by its simulator: the initial marking is sample 0,
    then a sample is taken every ``sampling`` interval and after the final
    tick. Iterating over a recording yields ``(time, marking)`` pairs, where
    marking is a dict of place name => value.

    Parameters
    ----------
    simulator : Simulator
        The simulator object that generates the samples
    places : sequence of Place
        Sampled places, in marking order.

    Examples
    --------

    >>> from cellcycle.examples.simple import cell_cycle_network
    >>> net = cell_cycle_network()
    >>> recording = net.simulation(time=7200, step=60, sampling=3600).run()
    >>> recording.tout
    array([   0., 3600., 7200.])
    >>> recording.marking('Timer')
    array([   0., 3600., 7200.])

    The recording can be accessed as a pandas DataFrame indexed by time
    (requires pandas):

    >>> df = recording.dataframe  # doctest: +SKIP
    """

    def __init__(self, simulator, places):
        self.network_name = simulator.network.name
        self.place_names = [p.name for p in places]
        self._times = []
        self._samples = []
        self._yfull = None

    def _append(self, time, marking):
        self._times.append(time)
        self._samples.append(marking)
        self._yfull = None

    @property
    def tout(self):
        """Sample times, as a numpy array."""
        return np.array(self._times, dtype=float)

    @property
    def trajectories(self):
        """2D numpy array, samples on the first axis and places on the
        second."""
        if not self._samples:
            return np.empty((0, len(self.place_names)))
        return np.array(self._samples)

    def marking(self, place):
        """Trajectory of a single place (object or name)."""
        name = place.name if isinstance(place, Place) else place
        try:
            i = self.place_names.index(name)
        except ValueError:
            raise KeyError('Place not in recording: %s' % name)
        return self.trajectories[:, i]

    @property
    def all(self):
        """
        Trajectories as a numpy.ndarray with a record-style data-type, one
        field per place.
        """
        if self._yfull is None:
            yfull_dtype = list(zip(self.place_names,
                                   itertools.repeat(float)))
            yfull = np.ndarray(len(self._samples), yfull_dtype)
            yfull_view = yfull.view(float).reshape((len(yfull), -1))
            yfull_view[:, :] = self.trajectories
            self._yfull = yfull
        return self._yfull

    @property
    def dataframe(self):
        """
        A conversion of the trajectories into a :py:class:`pandas.DataFrame`
        indexed by time.
        """
        if pd is None:
            raise Exception('Please "pip install pandas" for this feature')
        idx = pd.Index(self.tout, name='time')
        return pd.DataFrame(self.trajectories, index=idx,
                            columns=self.place_names)

    def __len__(self):
        return len(self._times)

    def __getitem__(self, i):
        return self._times[i], collections.OrderedDict(
            zip(self.place_names, (float(v) for v in self._samples[i])))

    def __iter__(self):
        for i in range(len(self)):
            yield self[i]

    def __repr__(self):
        return "<%s of '%s' (samples: %d, places: %d)>" % (
            self.__class__.__name__, self.network_name, len(self),
            len(self.place_names))
