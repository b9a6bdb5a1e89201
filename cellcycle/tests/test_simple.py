from cellcycle.examples.simple import cell_cycle_network, phase_indicator, \
    DEFAULT_SIMULATION, S_PHASE_START, S_PHASE_END, A_PHASE_START, \
    CDC20A_START, CDC20A_END


def test_phase_indicator():
    f = phase_indicator(10, 20)
    assert f(10) == 0
    assert f(15) == 1
    assert f(20) == 0


def test_network():
    net = cell_cycle_network()
    assert net.is_finalized
    assert net.places.keys() == ['Timer', 'A_phase', 'S_phase', 'Cdc20A']
    assert net.assignment_transitions.keys() == ['A_phase_f', 'S_phase_f',
                                                 'Cdc20A_f']
    assert net.initial_marking()['Cdc20A'] == 1.0


def test_default_simulation():
    net = cell_cycle_network()
    sim = net.simulation(**DEFAULT_SIMULATION)
    recording = sim.run()
    assert sim.ticks == 36 * 60
    assert sim.elapsed_time() == 36 * 3600
    assert len(recording) == 36 * 3 + 1
    timer = recording.marking('Timer')
    assert list(timer) == list(recording.tout)
    for t, marking in recording:
        if t == 0:
            # Initial marking, before any assignment fired
            assert marking['Cdc20A'] == 1.0
            continue
        assert marking['S_phase'] == (1.0 if S_PHASE_START < t < S_PHASE_END
                                      else 0.0)
        assert marking['A_phase'] == (1.0 if A_PHASE_START < t < S_PHASE_END
                                      else 0.0)
        assert marking['Cdc20A'] == (1.0 if t < CDC20A_END or
                                     t > CDC20A_START else 0.0)


def test_phases_over_time():
    sim = cell_cycle_network().simulation(time=24 * 3600, step=60)
    sim.run_until(2 * 3600)
    assert sim.current_marking() == {'Timer': 7200.0, 'A_phase': 0.0,
                                     'S_phase': 0.0, 'Cdc20A': 0.0}
    sim.run_until(10 * 3600)
    assert sim.current_marking() == {'Timer': 36000.0, 'A_phase': 1.0,
                                     'S_phase': 1.0, 'Cdc20A': 0.0}
    sim.run_until(23 * 3600)
    assert sim.current_marking() == {'Timer': 82800.0, 'A_phase': 0.0,
                                     'S_phase': 0.0, 'Cdc20A': 1.0}
