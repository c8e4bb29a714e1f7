# Copyright 2026 50Hertz Transmission GmbH and Elia Transmission Belgium
#
# This Source Code Form is subject to the terms of the Mozilla Public License, v. 2.0.
# If a copy of the MPL was not distributed with this file,
# you can obtain one at https://mozilla.org/MPL/2.0/.
# Mozilla Public License, version 2.0

"""The knobs of the matrix computations, validated in one place.

The parameters are passed on as keyword arguments, e.g.
compute_ptdf(buses, branches, **config.model_dump())
"""

from beartype.typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from network_sensitivities.block_inverse import DEFAULT_BLOCK_SIZE


class MatrixParameters(BaseModel):
    """Holds the knobs of the PTDF computation."""

    model_config = ConfigDict(extra="forbid")

    block_size: int = Field(default=DEFAULT_BLOCK_SIZE, ge=1)
    """The largest matrix size which is inverted directly. Larger values mean fewer block folds,
    but a bigger direct inversion workspace."""

    reference_bus: Optional[str] = None
    """The name of the reference bus whose PTDF column is zero. If None, the first bus is used."""


def default_config() -> MatrixParameters:
    """Get the default parameters, suitable for grids of up to ~15 000 buses

    Returns
    -------
        MatrixParameters: The default parameters
    """
    return MatrixParameters()
