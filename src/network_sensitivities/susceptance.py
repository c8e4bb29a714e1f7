# Copyright 2026 50Hertz Transmission GmbH and Elia Transmission Belgium
#
# This Source Code Form is subject to the terms of the Mozilla Public License, v. 2.0.
# If a copy of the MPL was not distributed with this file,
# you can obtain one at https://mozilla.org/MPL/2.0/.
# Mozilla Public License, version 2.0

"""Series susceptance of lines and transformers for the DC approximation."""

import numpy as np
from beartype.typing import Sequence
from jaxtyping import Float

from network_sensitivities.exceptions import NumericalError
from network_sensitivities.system import Branch


def series_susceptance(branches: Sequence[Branch]) -> Float[np.ndarray, " n_branch"]:
    """Calculate the series susceptance of every branch.

    For lines (no tap) this is -1 / x. For transformers the off-nominal tap and the phase shift
    enter the admittance: Im(1 / ((r + jx) * tap * exp(j * angle))).

    Parameters
    ----------
    branches : Sequence[Branch]
        The branches, the result has the same order

    Returns
    -------
    Float[np.ndarray, " n_branch"]
        The susceptance of each branch

    Raises
    ------
    NumericalError
        If a line has zero reactance or a transformer has zero impedance or tap
    """
    resistance = np.array([branch.resistance for branch in branches], dtype=float)
    reactance = np.array([branch.reactance for branch in branches], dtype=float)
    is_transformer = np.array([branch.is_transformer for branch in branches], dtype=bool)
    tap = np.array([branch.tap if branch.is_transformer else 1.0 for branch in branches], dtype=float)
    angle = np.array([branch.angle if branch.is_transformer else 0.0 for branch in branches], dtype=float)

    # Lines only see their reactance, transformers their full scaled impedance
    scaled_impedance = (resistance + 1j * reactance) * tap * np.exp(1j * angle)
    degenerate = np.where(is_transformer, scaled_impedance == 0, reactance == 0)
    if np.any(degenerate):
        names = [branch.name for branch, zero in zip(branches, degenerate) if zero]
        raise NumericalError(f"Branches {names} have zero impedance, their susceptance is undefined")

    susceptance = np.empty(len(branches), dtype=float)
    susceptance[~is_transformer] = -1.0 / reactance[~is_transformer]
    susceptance[is_transformer] = np.imag(1.0 / scaled_impedance[is_transformer])
    return susceptance
