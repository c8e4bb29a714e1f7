# Copyright 2026 50Hertz Transmission GmbH and Elia Transmission Belgium
#
# This Source Code Form is subject to the terms of the Mozilla Public License, v. 2.0.
# If a copy of the MPL was not distributed with this file,
# you can obtain one at https://mozilla.org/MPL/2.0/.
# Mozilla Public License, version 2.0

"""Holds functions to build the branch-bus incidence matrix of the network."""

import numpy as np
from beartype.typing import Hashable, Sequence
from scipy.sparse import csc_matrix

from network_sensitivities.exceptions import ConfigurationError, DataError


def make_index_lookup(names: Sequence[Hashable], kind: str = "element") -> dict[Hashable, int]:
    """Map every name of an index set to its position.

    Parameters
    ----------
    names : Sequence[Hashable]
        The ordered, unique names of the index set
    kind : str
        What the names refer to, only used in the error message

    Returns
    -------
    dict[Hashable, int]
        The position of each name

    Raises
    ------
    ConfigurationError
        If a name is repeated, as the position of that name would be ambiguous
    """
    lookup = {}
    for position, name in enumerate(names):
        if name in lookup:
            raise ConfigurationError(f"Repeated {kind} name {name!r}. Index sets must have unique elements.")
        lookup[name] = position
    return lookup


def _lookup_endpoints(bus_lookup: dict[Hashable, int], endpoint_names: Sequence[str], side: str) -> list[int]:
    indices = []
    for branch_position, bus_name in enumerate(endpoint_names):
        if bus_name not in bus_lookup:
            raise DataError(f"The {side} bus {bus_name!r} of branch number {branch_position} is not in the bus list")
        indices.append(bus_lookup[bus_name])
    return indices


def compute_incidence(
    bus_names: Sequence[str],
    from_buses: Sequence[str],
    to_buses: Sequence[str],
) -> csc_matrix:
    """Build the sparse edge-node incidence matrix of the network.

    The row of a branch holds a +1 in the column of its from-bus and a -1 in the column of its
    to-bus, so every row sums to zero.

    Parameters
    ----------
    bus_names : Sequence[str]
        The bus names, defining the column order
    from_buses : Sequence[str]
        The from-bus name of every branch, defining the row order
    to_buses : Sequence[str]
        The to-bus name of every branch

    Returns
    -------
    csc_matrix
        The n_branch x n_bus incidence matrix

    Raises
    ------
    ConfigurationError
        If a bus name appears more than once in bus_names
    DataError
        If a branch references a bus which is not in bus_names or connects a bus to itself
    """
    assert len(from_buses) == len(to_buses), "Every branch needs a from and a to bus"
    bus_lookup = make_index_lookup(bus_names, kind="bus")
    number_of_branches = len(from_buses)

    from_index = _lookup_endpoints(bus_lookup, from_buses, "from")
    to_index = _lookup_endpoints(bus_lookup, to_buses, "to")
    loops = [position for position, (start, end) in enumerate(zip(from_index, to_index)) if start == end]
    if loops:
        raise DataError(f"Branches number {loops} start and end at the same bus")

    data = np.r_[np.ones(number_of_branches), -np.ones(number_of_branches)]
    row_indices = np.r_[np.arange(number_of_branches), np.arange(number_of_branches)]
    column_indices = np.r_[np.array(from_index, dtype=int), np.array(to_index, dtype=int)]
    return csc_matrix(
        (data, (row_indices, column_indices)),
        shape=(number_of_branches, len(bus_names)),
        dtype=int,
    )
