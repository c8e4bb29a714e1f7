# Copyright 2026 50Hertz Transmission GmbH and Elia Transmission Belgium
#
# This Source Code Form is subject to the terms of the Mozilla Public License, v. 2.0.
# If a copy of the MPL was not distributed with this file,
# you can obtain one at https://mozilla.org/MPL/2.0/.
# Mozilla Public License, version 2.0

"""DC sensitivity matrices (PTDF, LODF) of transmission grids and the block inversion behind them."""

from beartype.claw import beartype_this_package

# Make sure beartype_this_package is the only imported module
beartype_only_non_dunder_import = all(d.startswith("_") or d == "beartype_this_package" for d in dir())
if beartype_only_non_dunder_import:
    beartype_this_package()  # Leave this at the top. Otherwise the modules imported before wont be beartyped
else:
    raise ImportError(
        "Please make sure that beartype_this_package is the only imported module before calling beartype_this_package"
        "Please check the import statements."
    )

from .accessors import (
    branches_by_breakpoints,
    cache_lodf,
    cache_ptdf,
    get_branches,
    get_buses,
    get_decs_per_bus,
    get_gens_per_bus,
    get_incs_per_bus,
    get_lines,
    get_loads_per_bus,
    get_lodfs,
    get_psls_per_bus,
    get_ptdf,
    get_transformers,
    invalidate_ptdf,
    retrieve_ptdf,
)
from .block_inverse import DEFAULT_BLOCK_SIZE, invert
from .config import MatrixParameters, default_config
from .exceptions import ConfigurationError, DataError, NumericalError
from .incidence import compute_incidence
from .lodf import compute_lodf, compute_lodf_from_system
from .ptdf import compute_ptdf, compute_ptdf_from_system
from .schemas import BranchSchema, BusSchema, branches_from_frame, branches_to_frame, buses_from_frame
from .susceptance import series_susceptance
from .system import Branch, Bus, System, SystemDA, SystemRT, index_by_name

__all__ = [
    "DEFAULT_BLOCK_SIZE",
    "Branch",
    "BranchSchema",
    "Bus",
    "BusSchema",
    "ConfigurationError",
    "DataError",
    "MatrixParameters",
    "NumericalError",
    "System",
    "SystemDA",
    "SystemRT",
    "branches_by_breakpoints",
    "branches_from_frame",
    "branches_to_frame",
    "buses_from_frame",
    "cache_lodf",
    "cache_ptdf",
    "compute_incidence",
    "compute_lodf",
    "compute_lodf_from_system",
    "compute_ptdf",
    "compute_ptdf_from_system",
    "default_config",
    "get_branches",
    "get_buses",
    "get_decs_per_bus",
    "get_gens_per_bus",
    "get_incs_per_bus",
    "get_lines",
    "get_loads_per_bus",
    "get_lodfs",
    "get_psls_per_bus",
    "get_ptdf",
    "get_transformers",
    "index_by_name",
    "invalidate_ptdf",
    "invert",
    "retrieve_ptdf",
    "series_susceptance",
]
