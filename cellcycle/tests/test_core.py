import copy
import pytest
import sympy
import networkx as nx
from cellcycle.core import *


def _growth_network(name='growth'):
    mass = Place('Mass', 1.0)
    growth = RateTransition('growth', {mass: 1}, lambda m: 0.1 * m)
    return Network(name, [mass, growth])


def test_component_names_valid():
    for name in 'a', 'B', 'AbC', 'dEf', '_', '_7', '__a01b__999x_x___':
        c = Place(name)
        assert c.name == name
        net = Network()
        assert name not in net.places.keys()
        net.add(c)
        assert net.places[name] is c
        assert getattr(net.places, name) is c


def test_component_names_invalid():
    for name in 'a!', '!B', 'A!bC~`\\', '_!', '_!7', '__a01b  999x_x___!':
        pytest.raises(InvalidComponentNameError, Place, name)


def test_place():
    p = Place('A', 2)
    assert p.value == 2.0
    assert isinstance(p.value, float)
    assert not p.marking_required
    assert isinstance(p, sympy.Symbol)
    assert repr(p) == "Place('A', 2.0)"
    assert repr(Place('B', marking_required=True)) == \
        "Place('B', 0.0, marking_required=True)"
    pytest.raises(ValueError, Place, 'C', float('nan'))
    pytest.raises(ValueError, Place, 'C', float('inf'))


def test_parameter():
    k = Parameter('k', 3)
    assert k.value == 3.0
    assert repr(k) == "Parameter('k', 3.0)"
    pytest.raises(ValueError, Parameter, 'k', -1)
    assert Parameter('k', -1, nonnegative=False).value == -1.0


def test_places_are_distinct_symbols():
    a1 = Place('A')
    a2 = Place('A')
    assert a1 != a2
    assert len({a1, a2}) == 2


def test_rate_transition_callable():
    a = Place('A')
    b = Place('B')
    t = RateTransition('conversion', {a: -1, b: 1}, lambda a, b: a)
    assert t.domain == (a, b)
    assert t.codomain == (a, b)
    assert t.expr is None
    assert t.rate_law()([2.0, 5.0], 1.0) == 2.0


def test_rate_transition_domain():
    a = Place('A')
    b = Place('B')
    t = RateTransition('production', {b: 1}, lambda a: 2 * a, domain=[a])
    assert t.domain == (a, )
    assert t.places == (a, b)
    assert t.rate_law()([3.0], 1.0) == 6.0


def test_rate_transition_mass_action():
    a = Place('A')
    b = Place('B')
    c = Place('C')
    k = Parameter('k', 0.5)
    t = RateTransition('binding', {a: -1, b: -2, c: 1}, k)
    assert t.domain == (a, b)
    assert t.parameters == (k, )
    assert t.rate_law()([2.0, 3.0], 1.0) == pytest.approx(0.5 * 2 * 9)
    # Overridden parameter value
    assert t.rate_law({'k': 1.0})([2.0, 3.0], 1.0) == pytest.approx(18)


def test_rate_transition_constant():
    timer = Place('Timer')
    t = RateTransition('clock', {timer: 1}, 1)
    assert t.domain == ()
    assert t.rate_law()([], 60.0) == 1.0
    pytest.raises(ValueError, RateTransition, 'clock', {timer: 1}, 1,
                  domain=[timer])


def test_rate_transition_expression():
    mass = Place('Mass', 1.0)
    other = Place('Other')
    k = Parameter('k', 0.25)
    t = RateTransition('growth', {mass: 1}, k * mass)
    assert t.domain == (mass, )
    assert t.rate_law()([4.0], 1.0) == pytest.approx(1.0)
    t = RateTransition('growth', {mass: 1}, k * mass, domain=[other, mass])
    assert t.rate_law()([100.0, 4.0], 1.0) == pytest.approx(1.0)
    pytest.raises(ValueError, RateTransition, 'growth', {mass: 1}, k * mass,
                  domain=[other])


def test_rate_transition_invalid_stoichiometry():
    a = Place('A')
    rate = lambda a: a
    pytest.raises(ValueError, RateTransition, 't', {}, rate)
    pytest.raises(ValueError, RateTransition, 't', {a: 0}, rate)
    pytest.raises(ValueError, RateTransition, 't', {a: 0.5}, rate)
    pytest.raises(ValueError, RateTransition, 't', {'A': 1}, rate)
    pytest.raises(ValueError, RateTransition, 't', {a: 1}, 'not a rate')


def test_rate_transition_fine_stepped():
    from cellcycle.kinetics import FineSteppedRate
    a = Place('A')
    b = Place('B')
    rate = FineSteppedRate(lambda x: -x, substeps=1)
    pytest.raises(ValueError, RateTransition, 't', {a: -1, b: 1}, rate)
    pytest.raises(ValueError, RateTransition, 't', {a: 1}, rate, domain=[b])
    t = RateTransition('t', {a: 1}, rate)
    # One sub-step is plain Euler
    assert t.rate_law()([2.0], 0.1) == pytest.approx(-2.0)


def test_assignment_transition():
    a = Place('A')
    b = Place('B')
    t = AssignmentTransition('swap', [a, b], lambda a, b: (b, a))
    assert t.domain == (a, b)
    assert t.fire([1, 2]) == (2.0, 1.0)
    single = AssignmentTransition('double', a, lambda a: 2 * a)
    assert single.fire([3]) == (6.0, )


def test_assignment_transition_arity():
    a = Place('A')
    b = Place('B')
    t = AssignmentTransition('bad', [a, b], lambda a, b: (a, b, a))
    pytest.raises(ArityMismatchError, t.fire, [1, 2])
    t = AssignmentTransition('scalar', [a, b], lambda a, b: a)
    pytest.raises(ArityMismatchError, t.fire, [1, 2])
    t = AssignmentTransition('one', a, lambda a: (a, a))
    pytest.raises(ArityMismatchError, t.fire, [1])


def test_assignment_transition_expression():
    a = Place('A')
    b = Place('B')
    k = Parameter('k', 3)
    t = AssignmentTransition('scaled', b, k * a)
    assert t.domain == (a, )
    assert t.fire([2]) == (6.0, )
    assert t.assignment_law({'k': 0.5})([2]) == (1.0, )
    pytest.raises(ArityMismatchError, AssignmentTransition, 'both', [a, b],
                  k * a)


def test_assignment_place():
    mass = Place('Mass', 2.0)
    cycd, t = assignment_place('CycD', [mass], lambda m: 0.5 * m)
    assert cycd.value == 1.0
    assert t.name == 'CycD_assignment'
    assert t.codomain == (cycd, )
    assert t.domain == (mass, )


def test_component_set():
    a = Place('A', 1.0)
    b = Place('B', 0.0)
    cs = ComponentSet([a, b])
    assert cs[0] is a
    assert cs['B'] is b
    assert cs.B is b
    assert cs.index(b) == 1
    assert cs.get('C') is None
    cs.add(a)
    assert len(cs) == 2
    pytest.raises(ComponentDuplicateNameError, cs.add, Place('A'))
    assert cs.filter(lambda c: c.value > 0).keys() == ['A']
    pytest.raises(AttributeError, getattr, cs, 'C')
    assert (cs & ComponentSet([b, a])).keys() == ['A', 'B']
    cs_copy = copy.copy(cs)
    assert cs_copy.keys() == ['A', 'B']
    assert cs_copy.A is a


def test_network_add():
    net = _growth_network()
    assert net.places.keys() == ['Mass']
    assert net.transitions.keys() == ['growth']
    assert net.rate_transitions.keys() == ['growth']
    assert len(net.assignment_transitions) == 0
    pytest.raises(TypeError, net.add, 'not a component')
    k = Parameter('k')
    net << k
    assert net.parameters.k is k
    assert k in net


def test_network_add_name_clash_across_kinds():
    a = Place('A', 1.0)
    net = Network('net', [a])
    clash = RateTransition('A', {a: 1}, lambda a: a)
    pytest.raises(ComponentDuplicateNameError, net.add, clash)
    pytest.raises(ComponentDuplicateNameError, net.add, Parameter('A'))
    assert net.transitions.keys() == []
    assert net.parameters.keys() == []
    assert net.components.keys() == ['A']
    pytest.raises(ComponentDuplicateNameError, Network, 'net',
                  [Place('B'), Parameter('B')])


def test_network_finalize():
    net = _growth_network()
    assert not net.is_finalized
    assert net.finalize() is net
    assert net.is_finalized
    # A second call is a no-op
    assert net.finalize() is net
    assert net.is_finalized
    assert net.places.keys() == ['Mass']
    pytest.raises(NetworkFinalizedError, net.add, Place('Other'))
    pytest.raises(TopologyError, net.add, Place('Other'))


def test_network_closure_check():
    a = Place('A')
    b = Place('B')
    net = Network('open', [a, RateTransition('t', {a: -1, b: 1},
                                             lambda a, b: a)])
    assert net.unlinked_components() == {'t': ['B']}
    with pytest.raises(TopologyError) as excinfo:
        net.finalize()
    assert 'B' in str(excinfo.value)
    assert not net.is_finalized
    net.add(b)
    net.finalize()


def test_network_closure_check_parameters():
    a = Place('A')
    k = Parameter('k', 1)
    net = Network('open', [a, RateTransition('decay', {a: -1}, k)])
    pytest.raises(TopologyError, net.finalize)


def test_network_merge():
    net1 = _growth_network('net1')
    mass = net1.places.Mass
    license = Place('License')
    net2 = Network('net2', [mass, license])
    merged = net1.merge(net2)
    assert merged.name == 'net1_net2'
    assert merged.places.keys() == ['Mass', 'License']
    assert merged.places.Mass is mass
    assert merged.transitions.growth is net1.transitions.growth
    assert (net1 | net2).places.keys() == ['Mass', 'License']


def test_network_merge_conflict():
    net1 = _growth_network('net1')
    net2 = _growth_network('net2')
    pytest.raises(ComponentDuplicateNameError, net1.merge, net2)


def test_network_update():
    net = _growth_network()
    other = Network('other', [net.places.Mass, Place('License')])
    net.update(other)
    assert net.places.keys() == ['Mass', 'License']
    net.finalize()
    pytest.raises(NetworkFinalizedError, net.update,
                  Network('third', [Place('X')]))


def test_subnetwork_shares_components():
    a = Place('A', 1.0)
    b = Place('B', 2.0)
    t = RateTransition('t', {a: -1, b: 1}, lambda a, b: a)
    c = Place('C')
    net = Network('full', [a, b, t, c])
    sub = net.subnetwork('part', [a, b, t])
    assert sub.is_finalized
    assert sub.places.A is a
    assert sub.transitions.t is t
    a.value = 5.0
    assert sub.places.A.value == 5.0
    pytest.raises(TopologyError, net.subnetwork, 'bad', [Place('D')])
    pytest.raises(TopologyError, net.subnetwork, 'open', [a, t])


def test_graph():
    a = Place('A')
    b = Place('B')
    t = RateTransition('t', {a: -1, b: 2}, lambda a, b: a)
    f = AssignmentTransition('f', a, lambda b: b, domain=[b])
    g = Network('net', [a, b, t, f]).graph()
    assert isinstance(g, nx.DiGraph)
    assert g.nodes['A']['kind'] == 'place'
    assert g.nodes['t']['kind'] == 'rate'
    assert g.nodes['f']['kind'] == 'assignment'
    assert g.edges['t', 'B']['stoichiometry'] == 2
    assert g.has_edge('A', 't')
    assert g.has_edge('B', 'f')
    assert g.has_edge('f', 'A')


def test_upstream():
    a = Place('A')
    b = Place('B')
    c = Place('C')
    d = Place('D')
    t1 = RateTransition('t1', {b: 1}, lambda a: a, domain=[a])
    t2 = RateTransition('t2', {d: 1}, lambda c: c, domain=[c])
    net = Network('net', [a, b, c, d, t1, t2])
    up = net.upstream('up', [b])
    assert up.places.keys() == ['A', 'B']
    assert up.transitions.keys() == ['t1']
    assert up.transitions.t1 is t1


def test_stoichiometry_matrix():
    a = Place('A')
    b = Place('B')
    t1 = RateTransition('t1', {a: -1, b: 1}, lambda a, b: a)
    t2 = RateTransition('t2', {b: -2}, lambda b: b)
    f = AssignmentTransition('f', a, lambda a: a)
    net = Network('net', [a, b, t1, f, t2])
    sm = net.stoichiometry_matrix.toarray()
    assert sm.tolist() == [[-1, 0], [1, -2]]


def test_initial_marking():
    net = _growth_network()
    assert net.initial_marking() == {'Mass': 1.0}


def test_network_repr():
    net = _growth_network()
    assert repr(net) == ("<Network 'growth' (places: 1, transitions: 1, "
                         "parameters: 0)>")
