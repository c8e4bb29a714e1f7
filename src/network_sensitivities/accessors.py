# Copyright 2026 50Hertz Transmission GmbH and Elia Transmission Belgium
#
# This Source Code Form is subject to the terms of the Mozilla Public License, v. 2.0.
# If a copy of the MPL was not distributed with this file,
# you can obtain one at https://mozilla.org/MPL/2.0/.
# Mozilla Public License, version 2.0

"""Accessors shared by the day-ahead and the real-time system.

The PTDF of a system is a cache: it is only computed on request and has to be invalidated by the
caller whenever the network changes.
"""

import pandas as pd
from beartype.typing import Iterable, Optional, Union

from network_sensitivities.block_inverse import DEFAULT_BLOCK_SIZE
from network_sensitivities.lodf import compute_lodf_from_system
from network_sensitivities.ptdf import compute_ptdf_from_system
from network_sensitivities.system import Branch, Bus, System, SystemDA


def get_buses(system: System) -> dict[str, Bus]:
    """Returns the buses of the system indexed by bus name."""
    return system.buses


def get_branches(system: System) -> dict[str, Branch]:
    """Returns the branches of the system indexed by branch name."""
    return system.branches


def get_lines(system: System) -> dict[str, Branch]:
    """Returns the branches that are not transformers, indexed by name."""
    return {name: branch for name, branch in system.branches.items() if not branch.is_transformer}


def get_transformers(system: System) -> dict[str, Branch]:
    """Returns the transformers of the system indexed by name."""
    return {name: branch for name, branch in system.branches.items() if branch.is_transformer}


def get_gens_per_bus(system: System) -> dict[str, list[int]]:
    """Returns the unit codes of the generators at each bus."""
    return system.gens_per_bus


def get_loads_per_bus(system: System) -> dict[str, list[str]]:
    """Returns the names of the fixed loads at each bus."""
    return system.loads_per_bus


def _day_ahead(system: System) -> SystemDA:
    if not isinstance(system, SystemDA):
        raise TypeError(f"Virtual and price sensitive bids only exist in the day-ahead system, got {type(system).__name__}")
    return system


def get_incs_per_bus(system: System) -> dict[str, list[str]]:
    """Returns the names of the increment bids at each bus of a day-ahead system."""
    return _day_ahead(system).incs_per_bus


def get_decs_per_bus(system: System) -> dict[str, list[str]]:
    """Returns the names of the decrement bids at each bus of a day-ahead system."""
    return _day_ahead(system).decs_per_bus


def get_psls_per_bus(system: System) -> dict[str, list[str]]:
    """Returns the names of the price sensitive loads at each bus of a day-ahead system."""
    return _day_ahead(system).psls_per_bus


def get_ptdf(system: System) -> Optional[pd.DataFrame]:
    """Returns the cached PTDF of the system, None if it was not computed yet."""
    return system.ptdf


def get_lodfs(system: System) -> dict[str, pd.DataFrame]:
    """Returns the LODF matrices of the system indexed by contingency name."""
    return system.lodfs


def retrieve_ptdf(
    system: System,
    block_size: int = DEFAULT_BLOCK_SIZE,
    reference_bus: Optional[str] = None,
) -> pd.DataFrame:
    """Returns the cached PTDF of the system, or computes it if missing without caching it.

    Parameters
    ----------
    system : System
        The system
    block_size : int
        The block size for the inversion, only used if the PTDF is computed
    reference_bus : Optional[str]
        The reference bus, only used if the PTDF is computed

    Returns
    -------
    pd.DataFrame
        The PTDF of the system
    """
    if system.ptdf is not None:
        return system.ptdf
    return compute_ptdf_from_system(system, block_size=block_size, reference_bus=reference_bus)


def cache_ptdf(
    system: System,
    block_size: int = DEFAULT_BLOCK_SIZE,
    reference_bus: Optional[str] = None,
) -> pd.DataFrame:
    """Compute the PTDF of the system and store it in the system, replacing any cached PTDF.

    Parameters
    ----------
    system : System
        The system, modified in place
    block_size : int
        The block size for the inversion
    reference_bus : Optional[str]
        The reference bus, defaults to the first bus

    Returns
    -------
    pd.DataFrame
        The freshly computed PTDF
    """
    system.ptdf = compute_ptdf_from_system(system, block_size=block_size, reference_bus=reference_bus)
    return system.ptdf


def invalidate_ptdf(system: System) -> None:
    """Drop the cached PTDF, e.g. after the network of the system was changed.

    The cached LODFs were derived from the PTDF, so they are dropped as well.
    """
    system.ptdf = None
    system.lodfs.clear()


def cache_lodf(
    system: System,
    contingency: str,
    outaged_branch_names: Union[str, Iterable[str]],
) -> pd.DataFrame:
    """Compute the LODF of a contingency from the cached PTDF and store it under the contingency name.

    Parameters
    ----------
    system : System
        The system, its lodfs are modified in place
    contingency : str
        The name of the contingency
    outaged_branch_names : Union[str, Iterable[str]]
        The branches going out in the contingency

    Returns
    -------
    pd.DataFrame
        The LODF of the contingency, empty if none of the branches exists

    Raises
    ------
    ConfigurationError
        If the system has no cached PTDF
    """
    lodf = compute_lodf_from_system(system, outaged_branch_names)
    system.lodfs[contingency] = lodf
    return lodf


def branches_by_breakpoints(system: System) -> tuple[list[str], list[str], list[str]]:
    """Returns the names of the monitored branches with 0, 1 and 2 break points.

    Missing break points count as zero. A branch has no break point if all are zero, one if only
    the second is zero and two otherwise, so (0, 5) counts as two break points.
    """
    zero_bp, one_bp, two_bp = [], [], []
    for branch in system.branches.values():
        if branch.is_monitored:
            first, second = (*branch.break_points, 0.0, 0.0)[:2]
            if first == 0 and second == 0:
                zero_bp.append(branch.name)
            elif second == 0:
                one_bp.append(branch.name)
            else:
                two_bp.append(branch.name)
    return zero_bp, one_bp, two_bp
