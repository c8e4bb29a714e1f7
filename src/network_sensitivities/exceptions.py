# Copyright 2026 50Hertz Transmission GmbH and Elia Transmission Belgium
#
# This Source Code Form is subject to the terms of the Mozilla Public License, v. 2.0.
# If a copy of the MPL was not distributed with this file,
# you can obtain one at https://mozilla.org/MPL/2.0/.
# Mozilla Public License, version 2.0

"""Exceptions raised by the sensitivity matrix computations.

None of these are retried anywhere in the package, they always propagate to the caller.
"""

import numpy as np


class ConfigurationError(ValueError):
    """The call was configured inconsistently.

    Raised for an unknown reference bus, repeated names in an index set, an invalid block size
    or a system without a PTDF where one is required.
    """


class DataError(ValueError):
    """The grid data is inconsistent, e.g. a branch references a bus that does not exist."""


class NumericalError(np.linalg.LinAlgError):
    """A matrix could not be inverted or a branch has zero impedance.

    Subclasses numpy's LinAlgError so callers already handling numpy failures catch it too.
    """
