import re
import math
import numbers
import collections
from collections.abc import Iterable, Mapping, Sequence, Set
import numpy as np
import sympy
import scipy.sparse
import networkx as nx
from cellcycle.kinetics import FineSteppedRate, FirstOrderDegradation
from cellcycle.logging import get_logger


class Symbol(sympy.Dummy):
    def __new__(cls, name, real=True, **kwargs):
        return super(Symbol, cls).__new__(cls, name, real=real, **kwargs)

    def __getnewargs_ex__(self):
        return self.__getnewargs__(), {}

    def _lambdacode(self, printer, **kwargs):
        """ custom printer method that ensures that the dummyid is not
        appended when printing code """
        return self.name


class Component(object):

    """
    The base class for all the named things contained within a network.

    Parameters
    ----------
    name : string
        Name of the component. Must be unique within the containing network.

    Attributes
    ----------
    name : string
        Name of the component.

    """
    _VARIABLE_NAME_REGEX = re.compile(r'[_a-z][_a-z0-9]*\Z', re.IGNORECASE)

    def __init__(self, name):
        if not isinstance(name, str) or \
                not self._VARIABLE_NAME_REGEX.match(name):
            raise InvalidComponentNameError(name)
        self.name = name


class Place(Component, Symbol):

    """
    Network component representing a named, real-valued state variable.

    A place is typically the concentration of a molecular species, but may
    also be an abstract control variable such as a license flag or a timer.
    Places are sympy symbols, so they can appear in rate and assignment
    expressions.

    Parameters
    ----------
    value : number, optional
        Initial marking of the place. Defaults to 0.0. Stored as a float;
        must be finite.
    marking_required : bool, optional
        If True, every simulation of a network containing this place must be
        given an explicit initial value for it.

    Attributes
    ----------
    value, marking_required (see Parameters above).

    Notes
    -----
    ``value`` is the canonical initial marking. Simulations copy it when they
    are created and never write it back.

    """

    def __new__(cls, name, value=0.0, marking_required=False):
        return super(Place, cls).__new__(cls, name)

    def __getnewargs__(self):
        return (self.name, self.value, self.marking_required)

    def __init__(self, name, value=0.0, marking_required=False):
        self.value = value
        self.marking_required = marking_required
        Component.__init__(self, name)

    @property
    def value(self):
        return self._value

    @value.setter
    def value(self, new_value):
        new_value = float(new_value)
        if not math.isfinite(new_value):
            raise ValueError('Place marking must be finite, got %r' %
                             new_value)
        self._value = new_value

    def __repr__(self):
        ret = '%s(%s, %s' % (self.__class__.__name__, repr(self.name),
                             repr(self.value))
        if self.marking_required:
            ret += ', marking_required=True'
        return ret + ')'

    def __str__(self):
        return repr(self)


class Parameter(Component, Symbol):

    """
    Network component representing a named constant floating point number.

    Parameters are used as rate constants in rate and assignment expressions.
    Their values can be overridden for a single simulation with the
    ``param_values`` simulator argument.

    Parameters
    ----------
    value : number, optional
        The numerical value of the parameter. Defaults to 0.0 if not specified.
        The provided value is converted to a float before being stored, so any
        value that cannot be coerced to a float will trigger an exception.
    nonnegative : bool, optional
        Sets the assumption whether this parameter is nonnegative (>=0).
        By default, parameters are assumed to be non-negative.

    Attributes
    ----------
    value (see Parameters above).

    """

    def __new__(cls, name, value=0.0, nonnegative=True):
        return super(Parameter, cls).__new__(cls, name,
                                             nonnegative=nonnegative)

    def __getnewargs__(self):
        return (self.name, self.value, self.assumptions0['nonnegative'])

    def __init__(self, name, value=0.0, nonnegative=True):
        self.value = value
        Component.__init__(self, name)

    @property
    def value(self):
        return self._value

    @value.setter
    def value(self, new_value):
        self.check_value(new_value)
        self._value = float(new_value)

    def check_value(self, value):
        if self.is_nonnegative:
            if float(value) < 0:
                raise ValueError('Cannot assign a negative value to a '
                                 'parameter assumed to be nonnegative')

    def __repr__(self):
        return '%s(%s, %s)' % (self.__class__.__name__, repr(self.name),
                               repr(self.value))

    def __str__(self):
        return repr(self)


def _as_place_tuple(places, description):
    """Coerce a place or a sequence of places into a tuple of places."""
    if isinstance(places, Place):
        places = (places, )
    elif not isinstance(places, Iterable) or isinstance(places, str):
        raise ValueError('%s must be a Place or a sequence of Places' %
                         description)
    places = tuple(places)
    for p in places:
        if not isinstance(p, Place):
            raise ValueError('%s contains %r, which is not a Place' %
                             (description, p))
    return places


def _expression_places(expr):
    """Places in a sympy expression, ordered by name."""
    return tuple(sorted(expr.atoms(Place), key=lambda p: p.name))


def _expression_parameters(expr):
    return tuple(sorted(expr.atoms(Parameter), key=lambda p: p.name))


def _substitute_parameters(expr, param_values=None):
    """Replace parameters in ``expr`` by their (possibly overridden) value."""
    subs = {}
    for p in _expression_parameters(expr):
        if param_values is not None and p.name in param_values:
            subs[p] = param_values[p.name]
        else:
            subs[p] = p.value
    return expr.xreplace(subs)


class Transition(Component):

    """
    Base class of the rules governing how places change.

    Parameters
    ----------
    domain : sequence of Place
        Places read by the transition, in the order their values are passed
        to the transition's function.
    codomain : sequence of Place
        Places affected by the transition.

    """

    def __init__(self, name, domain, codomain):
        self.domain = _as_place_tuple(domain, 'domain')
        self.codomain = _as_place_tuple(codomain, 'codomain')
        if not self.codomain:
            raise ValueError('Transition %s must affect at least one place' %
                             name)
        Component.__init__(self, name)

    @property
    def places(self):
        """Domain and codomain places, without duplicates."""
        return tuple(collections.OrderedDict.fromkeys(
            self.domain + self.codomain))

    @property
    def parameters(self):
        """Parameters referenced by the transition's expression, if any."""
        return ()


class RateTransition(Transition):

    """
    Network component representing a continuous, rate-typed transition.

    Over one simulation step of size ``S`` the transition changes each place
    ``p`` in its stoichiometry by ``stoichiometry[p] * rate * S``.

    Parameters
    ----------
    stoichiometry : dict of Place => int
        Integer change of each affected place per unit of rate. The keys
        form the codomain.
    rate : callable, sympy.Expr, Parameter, number or FineSteppedRate
        * callable: called with the domain values, returns the rate.
        * sympy expression over places and parameters: compiled with
          :func:`sympy.lambdify`; its places form the domain.
        * Parameter or number: mass-action rate constant ``k``. The rate is
          ``k`` times the product of each place with a negative coefficient
          raised to minus that coefficient (``k`` alone when there is none).
        * :class:`cellcycle.kinetics.FineSteppedRate`: the single place in
          the stoichiometry is fine-stepped over each simulation step.
    domain : sequence of Place, optional
        Places whose values are passed to a callable rate. Defaults to the
        stoichiometry keys. For expressions, fixes the argument order and
        must contain every place of the expression. Not allowed for mass
        action rates, whose domain is implied.

    Examples
    --------

    >>> mass = Place('Mass', 1.0)
    >>> growth = RateTransition('growth', {mass: 1}, lambda m: 0.1 * m)
    >>> growth.domain == (mass, )
    True

    """

    def __init__(self, name, stoichiometry, rate, domain=None):
        stoichiometry = _validate_stoichiometry(stoichiometry, name)
        self.stoichiometry = stoichiometry
        self.rate = rate
        self._expr = None
        if isinstance(rate, Parameter) or (
                isinstance(rate, numbers.Real) and
                not isinstance(rate, bool)):
            if domain is not None:
                raise ValueError('Transition %s: the domain of a mass action '
                                 'rate is implied by its stoichiometry' %
                                 name)
            reactants = [(p, -c) for p, c in stoichiometry.items() if c < 0]
            expr = rate if isinstance(rate, Parameter) else sympy.Float(rate)
            for p, order in reactants:
                expr = expr * p ** order
            self._expr = expr
            domain = tuple(p for p, _ in reactants)
        elif isinstance(rate, sympy.Expr):
            self._expr = rate
            places = _expression_places(rate)
            if domain is None:
                domain = places
            else:
                domain = _as_place_tuple(domain, 'domain')
                missing = set(places) - set(domain)
                if missing:
                    raise ValueError(
                        'Transition %s: rate expression uses places %s '
                        'missing from the domain' % (
                            name, ', '.join(sorted(p.name for p in missing))))
        elif isinstance(rate, FineSteppedRate):
            if len(stoichiometry) != 1:
                raise ValueError('Transition %s: a fine-stepped rate needs '
                                 'exactly one place in its stoichiometry' %
                                 name)
            if domain is None:
                domain = tuple(stoichiometry.keys())
        elif callable(rate):
            if domain is None:
                domain = tuple(stoichiometry.keys())
        else:
            raise ValueError('Transition %s: rate must be a callable, a '
                             'sympy expression, a Parameter or a number' %
                             name)
        Transition.__init__(self, name, domain, tuple(stoichiometry.keys()))
        if isinstance(rate, FineSteppedRate):
            target = self.codomain[0]
            if target not in self.domain:
                raise ValueError('Transition %s: the fine-stepped place %s '
                                 'must be in the domain' %
                                 (name, target.name))
            if isinstance(rate, FirstOrderDegradation) and \
                    self.domain.index(target) != \
                    rate.position % len(self.domain):
                raise ValueError('Transition %s: the degraded place %s must '
                                 'be at domain position %d' %
                                 (name, target.name, rate.position))

    @property
    def expr(self):
        """The rate as a sympy expression, or None for callable rates."""
        return self._expr

    @property
    def parameters(self):
        if self._expr is None:
            return ()
        return _expression_parameters(self._expr)

    def rate_law(self, param_values=None):
        """
        Compile the rate into a function of ``(values, step)``

        Parameters
        ----------
        param_values : dict of str => float, optional
            Overrides for the values of parameters used in the rate
            expression, keyed by parameter name.

        Returns
        -------
        callable
            ``f(values, step)`` returning the rate, where ``values`` holds
            the domain values in domain order and ``step`` is the coarse
            simulation step (only used by fine-stepped rates).
        """
        rate = self.rate
        if self._expr is not None:
            fn = sympy.lambdify(self.domain,
                                _substitute_parameters(self._expr,
                                                       param_values),
                                'math')
            return lambda values, step: fn(*values)
        elif isinstance(rate, FineSteppedRate):
            target = self.codomain[0]
            position = self.domain.index(target)
            coefficient = self.stoichiometry[target]
            return lambda values, step: rate.average_rate(
                values, step, position, coefficient)
        else:
            return lambda values, step: rate(*values)

    def __repr__(self):
        stoichiometry = ', '.join('%s: %d' % (p.name, c) for p, c in
                                  self.stoichiometry.items())
        if self._expr is not None:
            rate_repr = str(self.rate.name if isinstance(
                self.rate, Parameter) else self.rate)
        else:
            rate_repr = repr(self.rate)
        return '%s(%s, {%s}, %s, domain=[%s])' % (
            self.__class__.__name__, repr(self.name), stoichiometry,
            rate_repr, ', '.join(p.name for p in self.domain))


class AssignmentTransition(Transition):

    """
    Network component representing a discrete assignment transition.

    When it fires, the transition overwrites its codomain places with the
    values computed by its assignment function from the current values of
    its domain places.

    Parameters
    ----------
    codomain : Place or sequence of Place
        Places overwritten by the transition.
    assignment : callable or sympy.Expr
        A callable receives the domain values and returns the new value
        (single-place codomain) or a sequence of new values matching the
        codomain in length and order. A sympy expression is only allowed for
        a single-place codomain.
    domain : sequence of Place, optional
        Places passed to the assignment function. Defaults to the codomain
        for callables and to the places of the expression (ordered by name)
        for sympy expressions.
    derived : bool, optional
        True when the codomain is a derived place (see
        :func:`assignment_place`). Simulators recompute it from the initial
        marking of the domain before the first sample.

    Examples
    --------

    >>> timer = Place('Timer')
    >>> s_phase = Place('S_phase')
    >>> t = AssignmentTransition('S_phase_f', s_phase,
    ...                          lambda t: 1 if 18000 < t < 61200 else 0,
    ...                          domain=[timer])
    >>> t.fire([20000.0])
    (1.0,)

    """

    def __init__(self, name, codomain, assignment, domain=None,
                 derived=False):
        codomain = _as_place_tuple(codomain, 'codomain')
        self.assignment = assignment
        self.derived = derived
        self._expr = None
        if isinstance(assignment, sympy.Expr):
            if len(codomain) != 1:
                raise ArityMismatchError(
                    'Transition %s: an assignment expression can only assign '
                    'a single place' % name)
            self._expr = assignment
            places = _expression_places(assignment)
            if domain is None:
                domain = places
            else:
                domain = _as_place_tuple(domain, 'domain')
                if set(places) - set(domain):
                    raise ValueError('Transition %s: assignment expression '
                                     'uses places missing from the domain' %
                                     name)
        elif callable(assignment):
            if domain is None:
                domain = codomain
        else:
            raise ValueError('Transition %s: assignment must be a callable '
                             'or a sympy expression' % name)
        Transition.__init__(self, name, domain, codomain)

    @property
    def expr(self):
        return self._expr

    @property
    def parameters(self):
        if self._expr is None:
            return ()
        return _expression_parameters(self._expr)

    def assignment_law(self, param_values=None):
        """
        Compile the assignment into a function of the domain values

        The returned function always returns a tuple of floats, one per
        codomain place, and raises :class:`ArityMismatchError` when the
        assignment function returns the wrong number of values.
        """
        if self._expr is not None:
            fn = sympy.lambdify(self.domain,
                                _substitute_parameters(self._expr,
                                                       param_values),
                                'math')
        else:
            fn = self.assignment
        return lambda values: self._as_codomain_values(fn(*values))

    def fire(self, values):
        """Evaluate the assignment for the given domain values."""
        return self.assignment_law()(values)

    def _as_codomain_values(self, result):
        arity = len(self.codomain)
        if isinstance(result, (Sequence, np.ndarray)) and \
                not isinstance(result, str):
            if len(result) != arity:
                raise ArityMismatchError(
                    'Transition %s returned %d values for a codomain of %d '
                    'places' % (self.name, len(result), arity))
            return tuple(float(v) for v in result)
        if arity != 1:
            raise ArityMismatchError(
                'Transition %s returned a single value for a codomain of %d '
                'places' % (self.name, arity))
        return (float(result), )

    def __repr__(self):
        return '%s(%s, [%s], %r, domain=[%s])' % (
            self.__class__.__name__, repr(self.name),
            ', '.join(p.name for p in self.codomain),
            self.assignment, ', '.join(p.name for p in self.domain))


def assignment_place(name, domain, function, marking_required=False):
    """
    Create a place whose value is assigned from other places

    The place's initial value is computed by calling ``function`` on the
    current values of the ``domain`` places, and an
    :class:`AssignmentTransition` named ``<name>_assignment`` keeps it up to
    date during simulation. Simulations recompute the place from their own
    initial marking, so overriding a domain place also updates it.

    Returns
    -------
    tuple of (Place, AssignmentTransition)

    Examples
    --------

    >>> mass = Place('Mass', 2.0)
    >>> cycd, cycd_assignment = assignment_place('CycD', [mass],
    ...                                          lambda m: 0.5 * m)
    >>> cycd.value
    1.0
    >>> cycd_assignment.name
    'CycD_assignment'

    """
    domain = _as_place_tuple(domain, 'domain')
    place = Place(name, function(*[p.value for p in domain]),
                  marking_required=marking_required)
    transition = AssignmentTransition(name + '_assignment', place, function,
                                      domain=domain, derived=True)
    return place, transition


def _validate_stoichiometry(stoichiometry, name):
    if not isinstance(stoichiometry, Mapping) or not stoichiometry:
        raise ValueError('Transition %s: stoichiometry must be a non-empty '
                         'mapping of Place to int' % name)
    validated = collections.OrderedDict()
    for place, coefficient in stoichiometry.items():
        if not isinstance(place, Place):
            raise ValueError('Transition %s: stoichiometry key %r is not a '
                             'Place' % (name, place))
        if isinstance(coefficient, bool) or \
                not isinstance(coefficient, numbers.Integral):
            raise ValueError('Transition %s: stoichiometry coefficient of %s '
                             'must be an integer' % (name, place.name))
        if coefficient == 0:
            raise ValueError('Transition %s: stoichiometry coefficient of %s '
                             'must not be zero' % (name, place.name))
        validated[place] = int(coefficient)
    return validated


class Network(object):

    """
    An ordered collection of places, parameters and transitions.

    A network is the closed system a simulator works on. Members are kept in
    insertion order, which is the order in which assignment transitions fire
    during simulation. The same component object may belong to several
    networks (e.g. a full network and a sub-network of it); simulations never
    modify components, so networks sharing them stay consistent.

    Parameters
    ----------
    name : string, optional
        Name of the network, used in log messages.
    components : iterable of Component, optional
        Initial members.

    Attributes
    ----------
    name : string
        See Parameters above.
    places, parameters, transitions : ComponentSet
        The components which make up the network.

    Examples
    --------

    >>> mass = Place('Mass', 1.0)
    >>> net = Network('growth') << mass << RateTransition(
    ...     'growth', {mass: 1}, lambda m: 0.1 * m)
    >>> net.finalize()
    <Network 'growth' (places: 1, transitions: 1, parameters: 0, finalized)>

    """

    _component_types = (Place, Parameter, Transition)

    def __init__(self, name=None, components=None):
        self.name = name if name is not None else 'network'
        self.places = ComponentSet()
        self.parameters = ComponentSet()
        self.transitions = ComponentSet()
        self._finalized = False
        self._stoichiometry_matrix = None
        self._logger = get_logger(self.__module__, network=self)
        if components is not None:
            self.add(*components)

    def all_component_sets(self):
        """Return a list of all ComponentSet objects."""
        return [self.places, self.parameters, self.transitions]

    def all_components(self):
        """Return a ComponentSet containing all components in the network."""
        cset_all = ComponentSet()
        for cset in self.all_component_sets():
            cset_all |= cset
        return cset_all

    @property
    def components(self):
        return self.all_components()

    @property
    def is_finalized(self):
        return self._finalized

    def add(self, *components):
        """Add components to the network."""
        if self._finalized:
            raise NetworkFinalizedError(
                'Network %s is finalized; no components can be added' %
                self.name)
        for other in components:
            for cset in self.all_component_sets():
                existing = cset.get(other.name) if isinstance(
                    other, Component) else None
                if existing is not None and existing is not other:
                    raise ComponentDuplicateNameError(
                        "Tried to add a component with a duplicate name: %s"
                        % other.name)
            for t, cset in zip(Network._component_types,
                               self.all_component_sets()):
                if isinstance(other, t):
                    cset.add(other)
                    break
            else:
                raise TypeError("Tried to add component of unknown type '%s' "
                                "to network" % type(other))
        return self

    def __lshift__(self, other):
        return self.add(other)

    def __contains__(self, c):
        return any(isinstance(c, t) and c in cset for t, cset in
                   zip(Network._component_types, self.all_component_sets()))

    @property
    def rate_transitions(self):
        """Rate transitions, in declaration order."""
        return self.transitions.filter(
            lambda t: isinstance(t, RateTransition))

    @property
    def assignment_transitions(self):
        """Assignment transitions, in declaration (firing) order."""
        return self.transitions.filter(
            lambda t: isinstance(t, AssignmentTransition))

    def unlinked_components(self):
        """
        Places and parameters referenced by transitions but not members

        Returns
        -------
        dict of str => list of str
            Transition name to the names of the components it references
            that are missing from this network.
        """
        missing = collections.OrderedDict()
        for t in self.transitions:
            names = [c.name for c in t.places + tuple(t.parameters)
                     if c not in self]
            if names:
                missing[t.name] = names
        return missing

    def finalize(self):
        """
        Check that the network is closed and freeze its topology

        Every place and parameter referenced by a transition must belong to
        the network, otherwise a :class:`TopologyError` is raised and the
        network stays open. Calling finalize on a finalized network does
        nothing.
        """
        if self._finalized:
            self._logger.debug('Network already finalized')
            return self
        missing = self.unlinked_components()
        if missing:
            raise TopologyError(
                'Network %s is not closed. Transitions reference components '
                'missing from the network: %s' % (
                    self.name, '; '.join('%s -> %s' % (t, ', '.join(names))
                                         for t, names in missing.items())))
        self._finalized = True
        self._stoichiometry_matrix = None
        self._logger.info('Network finalized (places: %d, rate transitions: '
                          '%d, assignment transitions: %d)',
                          len(self.places), len(self.rate_transitions),
                          len(self.assignment_transitions))
        return self

    @property
    def stoichiometry_matrix(self):
        """
        Return the stoichiometry matrix of the rate transitions

        A scipy sparse CSR matrix with one row per place and one column per
        rate transition.
        """
        if self._stoichiometry_matrix is not None:
            return self._stoichiometry_matrix
        rate_transitions = self.rate_transitions
        shape = (len(self.places), len(rate_transitions))
        sm = scipy.sparse.lil_matrix(shape, dtype='int')
        for i, t in enumerate(rate_transitions):
            for p, c in t.stoichiometry.items():
                sm[self.places.index(p), i] = c
        sm = sm.tocsr()
        if self._finalized:
            self._stoichiometry_matrix = sm
        return sm

    def initial_marking(self):
        """Return the canonical initial marking, keyed by place name."""
        return collections.OrderedDict((p.name, p.value)
                                       for p in self.places)

    def merge(self, other, name=None):
        """
        Return a new network containing the members of both networks

        Members are compared by identity. Two different components with the
        same name raise :class:`ComponentDuplicateNameError`.
        """
        if name is None:
            name = '%s_%s' % (self.name, other.name)
        merged = Network(name)
        merged.add(*self.components)
        merged.add(*other.components)
        return merged

    def __or__(self, other):
        return self.merge(other)

    def update(self, other):
        """Add the members of ``other`` to this network in place."""
        return self.add(*[c for c in other.components if c not in self])

    def subnetwork(self, name, components):
        """
        Return a finalized network made of some of this network's members

        The sub-network holds the very same component objects. A component
        that does not belong to this network raises :class:`TopologyError`.
        """
        components = list(components)
        foreign = [c.name for c in components if c not in self]
        if foreign:
            raise TopologyError('Components %s do not belong to network %s' %
                                (', '.join(foreign), self.name))
        return Network(name, components).finalize()

    def graph(self):
        """
        Return the network topology as a networkx DiGraph

        Nodes are component names with a ``kind`` attribute (``'place'``,
        ``'rate'`` or ``'assignment'``). Edges go from each domain place to
        the transition, and from the transition to each codomain place.
        """
        g = nx.DiGraph(name=self.name)
        for p in self.places:
            g.add_node(p.name, kind='place')
        for t in self.transitions:
            if isinstance(t, RateTransition):
                g.add_node(t.name, kind='rate')
                for p, c in t.stoichiometry.items():
                    g.add_edge(t.name, p.name, stoichiometry=c)
            else:
                g.add_node(t.name, kind='assignment')
                for p in t.codomain:
                    g.add_edge(t.name, p.name)
            for p in t.domain:
                g.add_edge(p.name, t.name)
        return g

    def upstream(self, name, places):
        """
        Return the sub-network of everything that can influence ``places``

        Includes the given places, every transition with a directed path to
        them, and every place and parameter those transitions touch.
        """
        places = _as_place_tuple(places, 'places')
        g = self.graph()
        selected = set()
        for p in places:
            if p not in self.places:
                raise TopologyError('Place %s does not belong to network %s'
                                    % (p.name, self.name))
            selected.add(p.name)
            selected |= nx.ancestors(g, p.name)
        for t in self.transitions:
            if t.name in selected:
                selected.update(c.name for c in t.places)
                selected.update(c.name for c in t.parameters)
        return self.subnetwork(name, [c for c in self.components
                                      if c.name in selected])

    def simulation(self, **kwargs):
        """Return a :class:`PseudoEulerSimulator` for this network."""
        from cellcycle.simulator.pseudo_euler import PseudoEulerSimulator
        return PseudoEulerSimulator(self, **kwargs)

    def __repr__(self):
        return ("<%s '%s' (places: %d, transitions: %d, parameters: %d%s)>" %
                (self.__class__.__name__, self.name, len(self.places),
                 len(self.transitions), len(self.parameters),
                 ', finalized' if self._finalized else ''))


class InvalidComponentNameError(ValueError):
    """Inappropriate component name."""
    def __init__(self, name):
        ValueError.__init__(self, "Not a valid component name: '%s'" % name)


class ComponentDuplicateNameError(ValueError):
    """A component was added with the same name as an existing one."""
    pass


class TopologyError(ValueError):
    """A network references components that are not among its members."""
    pass


class NetworkFinalizedError(TopologyError):
    """A component was added to a finalized network."""
    pass


class ArityMismatchError(ValueError):
    """An assignment returned a number of values unlike its codomain."""
    pass


class NumericDomainError(ArithmeticError):
    """A rate or assignment produced an undefined or non-finite value."""
    pass


class ComponentSet(Set, Mapping, Sequence):
    """
    An add-and-read-only container for storing network Components.

    It behaves mostly like an ordered set, but components can also be retrieved
    by name *or* index by using the [] operator (like a combination of a dict
    and a list). Components cannot be removed or replaced. Iteration returns
    the component objects.

    Parameters
    ----------
    iterable : iterable of Components, optional
        Initial contents of the set.

    """

    # The implementation is based on a list instead of a linked list (as
    # OrderedSet is), since we only allow add and retrieve, not delete.

    def __init__(self, iterable=None):
        self._elements = []
        self._map = {}
        self._index_map = {}
        if iterable is not None:
            for value in iterable:
                self.add(value)

    def __iter__(self):
        return iter(self._elements)

    def __contains__(self, c):
        if not isinstance(c, Component):
            raise TypeError("Can only work with Components, got a %s" % type(c))
        return c.name in self._map and self[c.name] is c

    def __len__(self):
        return len(self._elements)

    def add(self, c):
        if c not in self:
            if c.name in self._map:
                raise ComponentDuplicateNameError(
                    "Tried to add a component with a duplicate name: %s"
                    % c.name)
            self._elements.append(c)
            self._map[c.name] = c
            self._index_map[c.name] = len(self._elements) - 1

    def __getitem__(self, key):
        # Must support both Sequence and Mapping behavior. This means
        # stringified integer Mapping keys (like "0") are forbidden, but since
        # all Component names must be valid Python identifiers, integers are
        # ruled out anyway.
        if isinstance(key, (int, slice)):
            return self._elements[key]
        else:
            return self._map[key]

    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError:
            raise AttributeError("Network has no component '%s'" % name)

    def __setstate__(self, state):
        # Bypasses __getattr__, which needs _map
        self.__dict__ = state

    def __dir__(self):
        return self.keys()

    def get(self, key, default=None):
        if isinstance(key, int):
            raise ValueError("get is undefined for integer arguments, use []"
                             "instead")
        try:
            return self[key]
        except KeyError:
            return default

    def filter(self, filter_predicate):
        """
        Filter a ComponentSet using a predicate

        Parameters
        ----------
        filter_predicate: callable
            A predicate (condition) to test each Component in the
            ComponentSet against. The argument is a single Component and the
            return value is a boolean indicating a match or not.

        Returns
        -------
        ComponentSet
            A ComponentSet containing Components matching the predicate

        Examples
        --------

        >>> cs = ComponentSet([Place('A', 1.0), Place('B', 0.0)])
        >>> cs.filter(lambda c: c.value > 0)  \
            # doctest:+NORMALIZE_WHITESPACE
        ComponentSet([
         Place('A', 1.0),
         ])

        """
        return ComponentSet(filter(filter_predicate, self))

    def keys(self):
        return [c.name for c in self]

    def values(self):
        return [c for c in self]

    def items(self):
        return list(zip(self.keys(), self))

    def index(self, c):
        # We can implement this in O(1) ourselves, whereas the Sequence mixin
        # implements it in O(n).
        if not c in self:
            raise ValueError("%s is not in ComponentSet" % c)
        return self._index_map[c.name]

    def __and__(self, other):
        # We reimplement this because collections.Set's __and__ mixin iterates
        # over other, not self. That implementation ends up retaining the
        # ordering of other, but we'd like to keep the ordering of self instead.
        # We require other to be a ComponentSet too so we know it will support
        # "in" efficiently.
        if not isinstance(other, ComponentSet):
            return Set.__and__(self, other)
        return ComponentSet(value for value in self if value in other)

    def __repr__(self):
        return 'ComponentSet([\n' + \
            ''.join(' %s,\n' % repr(x) for x in self) + \
            ' ])'
