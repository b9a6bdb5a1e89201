from cellcycle import ComponentSet
import cellcycle.core
__all__ = ['transitions_using_place', 'transitions_affecting_place',
           'transitions_using_parameter', 'update_param_vals']


def _as_place(network, place):
    if not isinstance(place, cellcycle.core.Place):
        # Try getting the place by name
        place = network.places[place]
    return place


def transitions_using_place(network, place):
    """Return a ComponentSet of transitions which read the given place"""
    place = _as_place(network, place)
    return network.transitions.filter(lambda t: place in t.domain)


def transitions_affecting_place(network, place):
    """Return a ComponentSet of transitions which change the given place"""
    place = _as_place(network, place)
    return network.transitions.filter(lambda t: place in t.codomain)


def transitions_using_parameter(network, parameter):
    """Return a ComponentSet of transitions whose rate or assignment expression
    makes use of the given parameter"""
    if not isinstance(parameter, cellcycle.core.Parameter):
        # Try getting the parameter by name
        parameter = network.parameters.get(parameter)
    cset = ComponentSet()
    for t in network.transitions:
        if parameter in t.parameters:
            cset.add(t)
    return cset


def update_param_vals(network, newvals):
    """update the values of network parameters with the values from a dict.
    the keys in the dict must match the parameter names
    """
    update = []
    noupdate = []
    for i in network.parameters:
        if i.name in newvals:
            i.value = newvals[i.name]
            update.append(i.name)
        else:
            noupdate.append(i.name)
    return update, noupdate
