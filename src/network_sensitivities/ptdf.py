# Copyright 2026 50Hertz Transmission GmbH and Elia Transmission Belgium
#
# This Source Code Form is subject to the terms of the Mozilla Public License, v. 2.0.
# If a copy of the MPL was not distributed with this file,
# you can obtain one at https://mozilla.org/MPL/2.0/.
# Mozilla Public License, version 2.0

"""Holds functions to compute the PTDF (Power Transfer Distribution Factors).

Loadflow = PTDF * injection_vector, for a single slack at the reference bus.

For a ~15 000 bus system with aggregated borders, the computation is expected to take about a
minute, most of it spent in the inversion of the bus admittance matrix.

The input data must not contain isolated buses or islands, otherwise the bus admittance matrix is
singular.
"""

import logbook
import numpy as np
import pandas as pd
from beartype.typing import Optional, Sequence, Union
from jaxtyping import Float
from scipy.sparse import csc_matrix, diags

from network_sensitivities.block_inverse import DEFAULT_BLOCK_SIZE, invert
from network_sensitivities.exceptions import ConfigurationError
from network_sensitivities.incidence import compute_incidence
from network_sensitivities.schemas import as_branch_records, as_bus_records
from network_sensitivities.susceptance import series_susceptance
from network_sensitivities.system import Branch, Bus, System

logger = logbook.Logger(__name__)


def resolve_reference_bus(bus_names: Sequence[str], reference_bus: Optional[str]) -> int:
    """Find the column of the reference bus.

    Parameters
    ----------
    bus_names : Sequence[str]
        The ordered bus names
    reference_bus : Optional[str]
        The name of the reference bus, if None the first bus is used

    Returns
    -------
    int
        The position of the reference bus in bus_names

    Raises
    ------
    ConfigurationError
        If there are no buses or the reference bus is not among them
    """
    if not bus_names:
        raise ConfigurationError("The network has no buses, there is no reference bus to pick.")
    if reference_bus is None:
        return 0
    if reference_bus not in bus_names:
        raise ConfigurationError(f"Reference bus '{reference_bus}' not found.")
    return list(bus_names).index(reference_bus)


def ptdf_from_incidence(
    incidence: csc_matrix,
    susceptances: Float[np.ndarray, " n_branch"],
    reference_index: int,
    block_size: int = DEFAULT_BLOCK_SIZE,
) -> Float[np.ndarray, " n_branch n_bus"]:
    """Compute the PTDF from the network topology and the branch susceptances.

    Parameters
    ----------
    incidence : csc_matrix
        The n_branch x n_bus incidence matrix, see compute_incidence
    susceptances : Float[np.ndarray, " n_branch"]
        The series susceptance of every branch
    reference_index : int
        The column of the reference bus, which will be all zeros
    block_size : int
        The block size for the inversion of the bus admittance matrix

    Returns
    -------
    Float[np.ndarray, " n_branch n_bus"]
        BranchxNode Matrix showing the influence of nodal injections
    """
    number_of_busses = incidence.shape[1]
    non_reference = np.flatnonzero(np.arange(number_of_busses) != reference_index)
    incidence_reduced = incidence[:, non_reference]

    branch_node_susceptance = csc_matrix(diags(susceptances) @ incidence_reduced)
    # The reduced admittance matrix is dense anyway after inversion
    node_node_susceptance = (incidence_reduced.T @ branch_node_susceptance).toarray()
    node_node_inverse = invert(node_node_susceptance, block_size=block_size)

    ptdf_reduced = np.asarray(branch_node_susceptance @ node_node_inverse)
    return np.insert(ptdf_reduced, reference_index, 0.0, axis=1)


def compute_ptdf(
    buses: Union[Sequence[Bus], pd.DataFrame],
    branches: Union[Sequence[Branch], pd.DataFrame],
    block_size: int = DEFAULT_BLOCK_SIZE,
    reference_bus: Optional[str] = None,
) -> pd.DataFrame:
    """Compute the branch x bus DC-PTDF matrix of the network.

    Parameters
    ----------
    buses : Union[Sequence[Bus], pd.DataFrame]
        The buses, their order is the column order of the result
    branches : Union[Sequence[Branch], pd.DataFrame]
        The lines and transformers, their order is the row order of the result
    block_size : int
        Block size to be used when partitioning the bus admittance matrix for inversion
    reference_bus : Optional[str]
        The name of the reference bus. Defaults to the first bus.

    Returns
    -------
    pd.DataFrame
        The PTDF, indexed by branch name with one column per bus name

    Raises
    ------
    ConfigurationError
        If there are no buses, the reference bus does not exist or bus names are repeated
    DataError
        If a branch references an unknown bus
    NumericalError
        If a branch has zero impedance or the network is not connected
    """
    buses = as_bus_records(buses)
    branches = as_branch_records(branches)
    bus_names = [bus.name for bus in buses]
    branch_names = [branch.name for branch in branches]
    reference_index = resolve_reference_bus(bus_names, reference_bus)

    incidence = compute_incidence(
        bus_names,
        [branch.from_bus for branch in branches],
        [branch.to_bus for branch in branches],
    )
    susceptances = series_susceptance(branches)

    ptdf = ptdf_from_incidence(incidence, susceptances, reference_index, block_size=block_size)
    logger.info(
        f"Computed the PTDF for {len(branch_names)} branches and {len(bus_names)} buses "
        f"with reference bus {bus_names[reference_index]}"
    )
    return pd.DataFrame(
        ptdf,
        index=pd.Index(branch_names, name="branch"),
        columns=pd.Index(bus_names, name="bus"),
    )


def compute_ptdf_from_system(
    system: System,
    block_size: int = DEFAULT_BLOCK_SIZE,
    reference_bus: Optional[str] = None,
) -> pd.DataFrame:
    """Compute the PTDF of a system's network. The PTDF cached in the system is neither read nor set.

    Parameters
    ----------
    system : System
        The day-ahead or real-time system
    block_size : int
        Block size to be used when partitioning the bus admittance matrix for inversion
    reference_bus : Optional[str]
        The name of the reference bus. Defaults to the first bus.

    Returns
    -------
    pd.DataFrame
        The PTDF, indexed by branch name with one column per bus name
    """
    return compute_ptdf(
        list(system.buses.values()),
        list(system.branches.values()),
        block_size=block_size,
        reference_bus=reference_bus,
    )
