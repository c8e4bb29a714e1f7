# Copyright 2026 50Hertz Transmission GmbH and Elia Transmission Belgium
#
# This Source Code Form is subject to the terms of the Mozilla Public License, v. 2.0.
# If a copy of the MPL was not distributed with this file,
# you can obtain one at https://mozilla.org/MPL/2.0/.
# Mozilla Public License, version 2.0

"""Contains the functions to calculate the Line Outage Distribution Factors (LODFs) of a multi-outage.

All branches of the outage set go out at once, the LODF relates the pre-contingency flow on each
outaged branch to the change of flow on every branch of the network:

LODF = PTDF_{M,O} * (I - PTDF_{O,O})^-1

where PTDF_{M,O} = PTDF * A_O^T is the flow on all branches caused by a transfer over the outaged
branches and PTDF_{O,O} its rows of the outaged branches, see
"Direct Calculation of Line Outage Distribution Factors" by Guo et al.
https://doi.org/10.1109/TPWRS.2009.2023273

Only outages are supported: branches coming back into service within the contingency are ignored.
The result is sensitive to the input PTDF, a thresholded PTDF will lead to imprecise LODFs.
"""

import logbook
import numpy as np
import pandas as pd
from beartype.typing import Iterable, Optional, Sequence, Union
from jaxtyping import Float, Int
from scipy.sparse import csc_matrix

from network_sensitivities.block_inverse import direct_inverse
from network_sensitivities.exceptions import ConfigurationError, DataError
from network_sensitivities.incidence import compute_incidence, make_index_lookup
from network_sensitivities.schemas import as_branch_records, as_bus_records
from network_sensitivities.system import Branch, Bus, System

logger = logbook.Logger(__name__)


def empty_lodf() -> pd.DataFrame:
    """Get the 0x0 LODF of a contingency where all branches are already out of service"""
    return pd.DataFrame(
        np.empty((0, 0), dtype=float),
        index=pd.Index([], name="branch", dtype=object),
        columns=pd.Index([], name="outage", dtype=object),
    )


def lodf_from_ptdf(
    ptdf: Float[np.ndarray, " n_branch n_bus"],
    incidence_out: csc_matrix,
    outage_rows: Int[np.ndarray, " n_outage"],
) -> Float[np.ndarray, " n_branch n_outage"]:
    """Compute the raw LODF matrix of a multi-outage.

    Parameters
    ----------
    ptdf : Float[np.ndarray, " n_branch n_bus"]
        The pre-contingency PTDF of the whole network
    incidence_out : csc_matrix
        The n_outage x n_bus incidence matrix of the outaged branches
    outage_rows : Int[np.ndarray, " n_outage"]
        The rows of the outaged branches in the PTDF, in the same order as incidence_out

    Returns
    -------
    Float[np.ndarray, " n_branch n_outage"]
        The LODF of every branch with respect to every outaged branch. The rows of the outaged
        branches themselves are not corrected yet, see correct_lodf.

    Raises
    ------
    NumericalError
        If the outage splits the network, in which case I - PTDF_{O,O} is singular
    """
    # Flow on every branch for a transfer between the ends of each outaged branch
    ptdf_mo = np.asarray((incidence_out @ ptdf.T).T)
    ptdf_oo = ptdf_mo[outage_rows, :]
    return ptdf_mo @ direct_inverse(np.identity(len(outage_rows)) - ptdf_oo)


def correct_lodf(lodf: pd.DataFrame, branch_name: str) -> pd.DataFrame:
    """Force zero post-contingency flow on an outaged branch.

    Sets the row of the branch to zero, except for the element (branch, branch) which is set to
    -1. The change of flow on the branch then exactly cancels its pre-contingency flow. The matrix
    is modified in place.

    Parameters
    ----------
    lodf : pd.DataFrame
        The LODF matrix, the branch has to be both a row and a column
    branch_name : str
        The outaged branch

    Returns
    -------
    pd.DataFrame
        The same, corrected LODF matrix
    """
    lodf.loc[branch_name, :] = 0.0
    lodf.loc[branch_name, branch_name] = -1.0
    return lodf


def _aligned_ptdf(
    ptdf_matrix: pd.DataFrame, branch_names: Sequence[str], bus_names: Sequence[str]
) -> Float[np.ndarray, " n_branch n_bus"]:
    """Get the PTDF values in the order of the given branches and buses"""
    missing_branches = pd.Index(branch_names).difference(ptdf_matrix.index)
    missing_buses = pd.Index(bus_names).difference(ptdf_matrix.columns)
    if len(missing_branches) or len(missing_buses):
        raise DataError(
            f"The PTDF does not match the network, missing branches {list(missing_branches)} "
            f"and buses {list(missing_buses)}"
        )
    return ptdf_matrix.loc[list(branch_names), list(bus_names)].to_numpy(dtype=float)


def compute_lodf(
    buses: Union[Sequence[Bus], pd.DataFrame],
    branches: Union[Sequence[Branch], pd.DataFrame],
    ptdf_matrix: pd.DataFrame,
    outaged_branch_names: Union[str, Iterable[str]],
) -> pd.DataFrame:
    """Compute the branch x outage DC-LODF matrix for a contingency.

    Outage names which do not belong to any branch are ignored. If none of them does, the
    contingency is moot and an empty matrix is returned.

    Parameters
    ----------
    buses : Union[Sequence[Bus], pd.DataFrame]
        The buses of the network
    branches : Union[Sequence[Branch], pd.DataFrame]
        The branches of the network, their order is the row order of the result
    ptdf_matrix : pd.DataFrame
        The pre-calculated PTDF of the network, indexed by branch and bus names
    outaged_branch_names : Union[str, Iterable[str]]
        The names of the branches going out in the contingency

    Returns
    -------
    pd.DataFrame
        The LODF, indexed by branch name with one column per outaged branch. The columns follow
        the order of the branches, so the result does not depend on the order of the outage names.
        Rows of monitored outaged branches are zero except for -1 on the diagonal.

    Raises
    ------
    ConfigurationError
        If branch or bus names are repeated
    DataError
        If the PTDF does not cover all branches and buses
    NumericalError
        If the outage splits the network
    """
    if isinstance(outaged_branch_names, str):
        outaged_branch_names = [outaged_branch_names]
    requested = set(outaged_branch_names)

    buses = as_bus_records(buses)
    branches = as_branch_records(branches)
    branch_names = [branch.name for branch in branches]
    branch_lookup = make_index_lookup(branch_names, kind="branch")
    branches_out = [branch for branch in branches if branch.name in requested]

    unmatched = requested.difference(branch_lookup)
    if unmatched:
        logger.debug(f"The outaged branches {sorted(unmatched)} were not found in the branch data")
    if not branches_out:
        logger.debug("All the branches to go out are already out of service. This contingency can be ignored.")
        return empty_lodf()

    bus_names = [bus.name for bus in buses]
    ptdf = _aligned_ptdf(ptdf_matrix, branch_names, bus_names)
    incidence_out = compute_incidence(
        bus_names,
        [branch.from_bus for branch in branches_out],
        [branch.to_bus for branch in branches_out],
    )
    outage_rows = np.array([branch_lookup[branch.name] for branch in branches_out], dtype=int)

    lodf = pd.DataFrame(
        lodf_from_ptdf(ptdf, incidence_out, outage_rows),
        index=pd.Index(branch_names, name="branch"),
        columns=pd.Index([branch.name for branch in branches_out], name="outage"),
    )
    for branch in branches_out:
        if branch.is_monitored:
            correct_lodf(lodf, branch.name)
    return lodf


def compute_lodf_from_system(
    system: System,
    outaged_branch_names: Union[str, Iterable[str]],
    ptdf: Optional[pd.DataFrame] = None,
) -> pd.DataFrame:
    """Compute the LODF for a contingency of a system's network.

    Parameters
    ----------
    system : System
        The day-ahead or real-time system
    outaged_branch_names : Union[str, Iterable[str]]
        The names of the branches going out in the contingency
    ptdf : Optional[pd.DataFrame]
        The PTDF to use. If None, the PTDF cached in the system is used.

    Returns
    -------
    pd.DataFrame
        The LODF, see compute_lodf

    Raises
    ------
    ConfigurationError
        If no PTDF was given and the system has none cached
    """
    ptdf = ptdf if ptdf is not None else system.ptdf
    if ptdf is None:
        raise ConfigurationError("System PTDF is missing.")
    return compute_lodf(
        list(system.buses.values()),
        list(system.branches.values()),
        ptdf,
        outaged_branch_names,
    )
