"""
Generic cell cycle model of Csikasz-Nagy et al. (2006), mammalian variant

A continuous/discrete hybrid network: cyclin, kinase and phosphatase
concentrations follow rate laws, while cytokinesis and license cocking reset
the cell mass and the cytokinesis license instantaneously. Stiff rate laws are
fine-stepped (50 sub-steps per simulation step, 500 for Cdh1), degradations
use :class:`cellcycle.kinetics.FirstOrderDegradation`.

Auxiliary quantities of the published model (transcription factors, synthesis
and degradation rates, trimers, free CKI...) are assignment places, updated
after every step in the order in which they are declared below.

The default constants are the mammalian (``'MA'``) parameter set; constants
absent from a set are 0.0, which switches off the modules it does not use
(G2 module, TFI).

Reference: Csikasz-Nagy A, Battogtokh D, Chen KC, Novak B, Tyson JJ.
Analysis of a generic model of eukaryotic cell-cycle regulation. Biophys J.
2006;90(12):4361-79.

Examples
--------

>>> from cellcycle.examples.virginia_tech import cell_cycle_network
>>> net = cell_cycle_network()
>>> net.places.Mass.value
1.098
>>> sim = net.simulation(time=3600, step=5, sampling=300)
>>> recording = sim.run()
>>> len(recording)
13
"""

from cellcycle import Network, Place, Parameter, RateTransition, \
    AssignmentTransition, assignment_place
from cellcycle.kinetics import FineSteppedRate, FirstOrderDegradation, \
    goldbeter_koshland, saturating_ratio, clamp, nan_to_zero
from cellcycle.parameters import ParameterSet, CYCB_DIVISION_THRESHOLD, \
    SECONDS_PER_HOUR, cell_growth_rate

#: Margin above the division threshold at which the license is cocked
LICENSE_MARGIN = 1.1

CDH1_SUBSTEPS = 500

DEFAULT_SIMULATION = {'time': 96 * SECONDS_PER_HOUR,
                      'step': 5,
                      'sampling': 300}

# Initial marking per model case
INITIAL_VALUES = {
    #            case 1  case 2
    'Mass':     (1.098,  1.568),
    'Ck_license': (0,    0),
    'Cdc20T':   (2.66,   2.7),
    'Cdc20A':   (0.708,  0.76),
    'APCP':     (0.717,  0.78),
    'Cdh1':     (0.999,  0.999),
    'CycB':     (0.289,  0.5),
    'ActCycB':  (0.289,  0.22),
    'PreMPF':   (0,      0.29),
    'TriB':     (0,      0),
    'CKI':      (0.343,  0.26),
    'CycE':     (0.414,  0.73),
    'ActCycE':  (0.181,  0.53),
    'CycA':     (0.0280, 0.062),
    'ActCycA':  (0.0124, 0.045),
}


def cytokinesis(mass, license, b, threshold=CYCB_DIVISION_THRESHOLD):
    """
    Divide the cell when active cyclin B drops below the threshold

    Returns the new ``(mass, license)``: the mass is halved and the license
    consumed when the license is cocked (1) and ``b < threshold``, otherwise
    both are returned unchanged.
    """
    if license == 1 and b < threshold:
        return mass / 2, 0.0
    return mass, license


def license_cocking(license, b, threshold=CYCB_DIVISION_THRESHOLD):
    """Cock the license (1) once active cyclin B exceeds the threshold by
    :data:`LICENSE_MARGIN`, otherwise keep it."""
    if b > threshold * LICENSE_MARGIN:
        return 1.0
    return license


def _places(case):
    try:
        column = (1, 2).index(case)
    except ValueError:
        raise ValueError('Unknown model case %r, expected 1 or 2' % case)
    return [Place(name, values[column])
            for name, values in INITIAL_VALUES.items()]


def cell_cycle_network(parameters=None, case=1, name='cell_cycle'):
    """
    Build the finalized mammalian cell cycle network

    Parameters
    ----------
    parameters : cellcycle.parameters.ParameterSet, optional
        Model constants. Defaults to ``ParameterSet.choose('MA')``.
    case : int, optional
        Model case (1 or 2), selecting the initial marking and the cell mass
        doubling time (24 h or 14 h).
    name : string, optional
        Network name.

    Returns
    -------
    cellcycle.Network
    """
    p = parameters if parameters is not None else ParameterSet.choose('MA')
    places = _places(case)
    mass, ck_license, cdc20t, cdc20a, apcp, cdh1, cycb, act_cycb, pre_mpf, \
        trib, cki, cyce, act_cyce, cyca, act_cyca = places

    growth_rate = Parameter('CELL_GROWTH_RATE', cell_growth_rate(case))
    kdib = Parameter('Kdib', p.Kdib)

    derived = []

    def derive(place_name, domain, function):
        place, transition = assignment_place(place_name, domain, function)
        derived.extend((place, transition))
        return place

    cycd = derive('CycD', [mass], lambda m: m * p.CycD0)

    # Module 1
    cdc14 = derive('Cdc14', [cdc20a], lambda a: a)

    # Module 3
    tfb = derive('TFB', [act_cycb], lambda b: goldbeter_koshland(
        p.Kafb * b, p.Kifb, p.Jafb, p.Jifb))

    # Module 4
    vsb = derive('Vsb', [tfb], lambda tfb: p.Ksbp + p.Ksbpp * tfb)
    vdb = derive('Vdb', [cdh1, cdc20a], lambda cdh1, a:
                 p.Kdbp + p.Kdbpp * cdh1 + p.Kdbppp * a)
    derive('Cdk1P_CycB', [cycb, act_cycb, trib],
           lambda b, ab, trib: b - ab - trib)
    derive('Cdk1_CycB_CKI', [cycb, act_cycb, pre_mpf],
           lambda b, ab, f: b - ab - f)

    # Module 5 (G2 module), switched off by the mammalian constants
    cdc25 = derive('Cdc25', [act_cycb, cdc14], lambda b, cdc14: nan_to_zero(
        goldbeter_koshland(p.Ka25 * b, p.Ki25p + p.Ki25pp * cdc14, p.Ja25,
                           p.Ji25)))
    v25 = derive('V25', [cdc25], lambda cdc25: p.K25p + p.K25pp * cdc25)
    wee1 = derive('Wee1', [cdc14, act_cycb], lambda cdc14, b: nan_to_zero(
        goldbeter_koshland(p.Kaweep + p.Kaweepp * cdc14, p.Kiwee * b,
                           p.Jawee, p.Jiwee)))
    vwee = derive('Vwee', [wee1], lambda wee1: p.Kweep + p.Kweepp * wee1)

    # Module 7, switched off by the mammalian constants
    tfi = derive('TFI', [cdc14, act_cycb], lambda cdc14, b: nan_to_zero(
        goldbeter_koshland(p.Kafi * cdc14, p.Kifip + p.Kifipp * b, p.Jafi,
                           p.Jifi)))

    # Module 12
    tria = derive('TriA', [cyca, act_cyca], lambda a, act_a: clamp(a - act_a))

    # Module 8
    vsi = derive('Vsi', [tfi], lambda tfi: p.Ksip + p.Ksipp * tfi)
    if p.name == 'BY':
        def vdi_function(a, b, e, d, cdc14):
            return (p.Kdip + p.Kdipp * a + p.Kdippp * b + p.Kdipppp * e +
                    p.Kdippppp * d) / (1 + saturating_ratio(cdc14, p.J14di))
    else:
        def vdi_function(a, b, e, d, cdc14):
            return (p.Kdip + p.Kdipp * a + p.Kdippp * b + p.Kdipppp * e +
                    p.Kdippppp * d)
    vdi = derive('Vdi', [act_cyca, act_cycb, act_cyce, cycd, cdc14],
                 vdi_function)

    # Module 9
    trie = derive('TriE', [cyce, act_cyce], lambda e, act_e: clamp(e - act_e))

    free_cki = derive('FreeCKI', [cki, tria, trib, trie],
                      lambda cki, a, b, e: clamp(cki - a - b - e))

    # Module 10
    vde = derive('Vde', [act_cyca, act_cycb, act_cyce], lambda a, b, e:
                 p.Kdep + p.Kdepp * e + p.Kdeppp * a + p.Kdepppp * b)

    # Module 11
    vatf = derive('Vatf', [act_cyca, act_cyce, cycd], lambda a, e, d:
                  p.Katfp + p.Katfpp * a + p.Katfppp * e + p.Katfpppp * d)
    tfe = derive('TFE', [vatf, act_cyca, act_cycb], lambda v, a, b:
                 goldbeter_koshland(v, p.Kitfp + p.Kitfpp * b +
                                    p.Kitfppp * a, p.Jatf, p.Jitf))

    # Module 13
    vda = derive('Vda', [cdc20a, cdc20t], lambda a, t:
                 p.Kdap + p.Kdapp * a + p.Kdappp * t)

    # Growth and division
    cell_growth = RateTransition('Cell_growth', {mass: 1}, mass * growth_rate)
    cytokinesis_transition = AssignmentTransition(
        'Cytokinesis', [mass, ck_license], cytokinesis,
        domain=[mass, ck_license, act_cycb])
    license_cocking_transition = AssignmentTransition(
        'License_cocking', ck_license, license_cocking,
        domain=[ck_license, act_cycb])

    def fod(k):
        return FirstOrderDegradation(k)

    def synthesis(k_basal, k_induced):
        return lambda f, m: (k_basal + k_induced * f) * m

    # Module 1
    def cdc20t_change(b, t):
        x = clamp(b) ** p.N
        produced = saturating_ratio(p.Ks20p + p.Ks20pp * x, p.J20 ** p.N + x)
        return produced - p.Kd20 * t

    def cdc20a_change(t, a, apcp):
        x = clamp(t - a)
        activation = p.Ka20 * apcp * saturating_ratio(x, p.Ja20 + x)
        inactivation = p.Ki20 * saturating_ratio(a, p.Ji20 + a)
        return activation - inactivation - p.Kd20 * a

    def apc_change(b, apcp):
        x = clamp(1 - apcp)
        activation = p.KaAPC * b * saturating_ratio(x, p.JaAPC + x)
        inactivation = p.KiAPC * saturating_ratio(apcp, p.JiAPC + apcp)
        return activation - inactivation

    # Module 2
    def cdh1_change(a, b, d, e, cdc14, cdh1):
        x = clamp(1 - cdh1)
        activation = (p.Kah1p + p.Kah1pp * cdc14) * saturating_ratio(
            x, p.Jah1 + x)
        inactivation = (p.Kih1p + p.Kih1pp * a + p.Kih1ppp * b +
                        p.Kih1pppp * e + p.Kih1ppppp * d) * saturating_ratio(
            cdh1, p.Jih1 + cdh1)
        return activation - inactivation

    transitions = [
        cell_growth,
        cytokinesis_transition,
        license_cocking_transition,

        # Module 1
        RateTransition('Cdc20T_change', {cdc20t: 1},
                       FineSteppedRate(cdc20t_change),
                       domain=[act_cycb, cdc20t]),
        RateTransition('Cdc20A_change', {cdc20a: 1},
                       FineSteppedRate(cdc20a_change),
                       domain=[cdc20t, cdc20a, apcp]),
        RateTransition('APC_change', {apcp: 1}, FineSteppedRate(apc_change),
                       domain=[act_cycb, apcp]),

        # Module 2
        RateTransition('Cdh1_change', {cdh1: 1},
                       FineSteppedRate(cdh1_change, CDH1_SUBSTEPS),
                       domain=[act_cyca, act_cycb, cycd, act_cyce, cdc14,
                               cdh1]),

        # Module 4
        RateTransition('CycB_synthesis', {cycb: 1}, lambda v, m: v * m,
                       domain=[vsb, mass]),
        RateTransition('CycB_degradation', {cycb: -1}, fod(lambda v: v),
                       domain=[vdb, cycb]),
        RateTransition('ActCycB_synthesis', {act_cycb: 1}, lambda v, m: v * m,
                       domain=[vsb, mass]),
        RateTransition('ActCycB_freeing_due_to_degradation_of_CKI',
                       {act_cycb: 1},
                       lambda v, b, pre_mpf, act_b: v * (b - pre_mpf - act_b),
                       domain=[vdi, cycb, pre_mpf, act_cycb]),
        RateTransition('ActCycB_freeing_due_to_dissociation_from_CKI',
                       {act_cycb: 1}, kdib * (cycb - pre_mpf + act_cycb)),
        RateTransition('ActCycB_creation_by_dephosphorylation_of_CycB',
                       {act_cycb: 1},
                       lambda v, b, trib, act_b: v * (b - trib - act_b),
                       domain=[v25, cycb, trib, act_cycb]),
        RateTransition('ActCycB_phosphorylation_by_Wee1', {act_cycb: -1},
                       lambda v, b: v * b, domain=[vwee, act_cycb]),
        RateTransition('ActCycB_association_with_CKI', {act_cycb: -1},
                       lambda free, b: free * b * p.Kasb,
                       domain=[free_cki, act_cycb]),
        RateTransition('ActCycB_degradation', {act_cycb: -1},
                       fod(lambda v: v), domain=[vdb, act_cycb]),

        # Module 5
        RateTransition('MPF_phosphorylation', {pre_mpf: 1},
                       lambda v, b, pre_mpf: v * (b - pre_mpf),
                       domain=[vwee, cycb, pre_mpf]),
        RateTransition('PreMPF_dephosphorylation', {pre_mpf: -1},
                       lambda v, pre_mpf: v * pre_mpf, domain=[v25, pre_mpf]),
        RateTransition('PreMPF_degradation', {pre_mpf: -1},
                       lambda v, pre_mpf: v * pre_mpf, domain=[vdb, pre_mpf]),

        # Module 6
        RateTransition('TriB_assembly', {trib: 1},
                       lambda b, trib, free: p.Kasb * (b - trib) * free,
                       domain=[cycb, trib, free_cki]),
        RateTransition('TriB_dissociation', {trib: -1}, kdib),
        RateTransition('TriB_decrease_due_to_CycB_degradation', {trib: -1},
                       lambda v, trib: v * trib, domain=[vdb, trib]),
        RateTransition('TriB_decrease_due_to_CKI_degradation', {trib: -1},
                       lambda v, trib: v * trib, domain=[vdi, trib]),

        # Module 8
        RateTransition('CKI_synthesis', {cki: 1}, lambda v: v, domain=[vsi]),
        RateTransition('CKI_degradation', {cki: -1}, fod(lambda v: v),
                       domain=[vdi, cki]),

        # Module 10
        RateTransition('CycE_synthesis', {cyce: 1},
                       synthesis(p.Ksep, p.Ksepp), domain=[tfe, mass]),
        RateTransition('CycE_degradation', {cyce: -1}, fod(lambda v: v),
                       domain=[vde, cyce]),
        RateTransition('ActCycE_synthesis', {act_cyce: 1},
                       synthesis(p.Ksep, p.Ksepp), domain=[tfe, mass]),
        RateTransition('ActCycE_freeing_due_to_degradation_of_CKI',
                       {act_cyce: 1}, lambda v, trie: v * trie,
                       domain=[vdi, trie]),
        RateTransition('ActCycE_freeing_due_to_dissociation_from_CKI',
                       {act_cyce: 1}, lambda trie: p.Kdie * trie,
                       domain=[trie]),
        RateTransition('ActCycE_degradation', {act_cyce: -1},
                       fod(lambda v, free: v + p.Kase * free),
                       domain=[vde, free_cki, act_cyce]),

        # Module 13
        RateTransition('CycA_synthesis', {cyca: 1},
                       synthesis(p.Ksap, p.Ksapp), domain=[tfe, mass]),
        RateTransition('CycA_degradation', {cyca: -1}, fod(lambda v: v),
                       domain=[vda, cyca]),
        RateTransition('ActCycA_synthesis', {act_cyca: 1},
                       synthesis(p.Ksap, p.Ksapp), domain=[tfe, mass]),
        # Frees ActCycE, as published
        RateTransition('ActCycA_freeing_due_to_degradation_of_CKI',
                       {act_cyce: 1}, lambda v, tria: v * tria,
                       domain=[vdi, tria]),
        RateTransition('ActCycA_freeing_due_to_dissociation_from_CKI',
                       {act_cyca: 1}, lambda tria: p.Kdia * tria,
                       domain=[tria]),
        RateTransition('ActCycA_degradation', {act_cyca: -1},
                       fod(lambda v, free: v + p.Kasa * free),
                       domain=[vda, free_cki, act_cyca]),
    ]

    net = Network(name)
    net.add(*places)
    net.add(growth_rate, kdib)
    net.add(*derived)
    net.add(*transitions)
    return net.finalize()


def cell_growth_network(network, name='cell_growth'):
    """
    Return the growth and division sub-network of a cell cycle network

    The sub-network shares its places and transitions with ``network``: cell
    mass growth, cyclin D, cyclin B, the cytokinesis license and the
    cytokinesis and license cocking transitions.
    """
    names = ['Mass', 'CELL_GROWTH_RATE', 'Cell_growth', 'CycD',
             'CycD_assignment', 'CycB', 'ActCycB', 'Ck_license',
             'Cytokinesis', 'License_cocking']
    return network.subnetwork(name, [c for c in network.components
                                     if c.name in names])
