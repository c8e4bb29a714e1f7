# Copyright 2026 50Hertz Transmission GmbH and Elia Transmission Belgium
#
# This Source Code Form is subject to the terms of the Mozilla Public License, v. 2.0.
# If a copy of the MPL was not distributed with this file,
# you can obtain one at https://mozilla.org/MPL/2.0/.
# Mozilla Public License, version 2.0

"""Tabular bus and branch data.

Grid data often comes as one table per element type. These schemas validate such tables and turn
their rows into Bus and Branch records. Columns that are not part of the records are ignored,
missing optional columns fall back to the record defaults.
"""

from typing import Optional

import numpy as np
import pandas as pd
import pandera as pa
import pandera.typing as pat
from beartype.typing import Any, Sequence, Union

from network_sensitivities.system import Branch, Bus


class BusSchema(pa.DataFrameModel):
    """A table with one bus per row."""

    name: pat.Series[str] = pa.Field(coerce=True)
    """The bus name, numeric ids are converted to strings"""

    base_voltage: Optional[pat.Series[float]] = pa.Field(gt=0, coerce=True)
    """The base voltage in kV"""


class BranchSchema(pa.DataFrameModel):
    """A table with one line or transformer per row.

    Rows without a tap (NaN) are lines, all others transformers.
    """

    name: pat.Series[str] = pa.Field(coerce=True)
    """The branch name"""

    to_bus: pat.Series[str] = pa.Field(coerce=True)
    """The name of the bus the branch ends at"""

    from_bus: pat.Series[str] = pa.Field(coerce=True)
    """The name of the bus the branch starts at"""

    reactance: pat.Series[float] = pa.Field(coerce=True)
    """The series reactance in p.u."""

    resistance: Optional[pat.Series[float]] = pa.Field(coerce=True)
    """The series resistance in p.u."""

    rate_a: Optional[pat.Series[float]] = pa.Field(coerce=True)
    """The long term rating"""

    rate_b: Optional[pat.Series[float]] = pa.Field(coerce=True)
    """The short term rating"""

    is_monitored: Optional[pat.Series[bool]] = pa.Field(coerce=True)
    """Whether the branch limits are enforced"""

    tap: Optional[pat.Series[float]] = pa.Field(nullable=True, coerce=True)
    """The off-nominal turns ratio, NaN for lines"""

    angle: Optional[pat.Series[float]] = pa.Field(nullable=True, coerce=True)
    """The phase shift angle in radians, NaN for lines"""


def _is_missing(value: Any) -> bool:
    return value is None or (np.isscalar(value) and bool(pd.isna(value)))


def _frame_records(frame: pd.DataFrame, fields: list[str]) -> list[dict[str, Any]]:
    """Get the rows of the frame as dicts, restricted to the given fields and without missing values"""
    columns = [column for column in frame.columns if column in fields]
    return [
        {key: value for key, value in row.items() if not _is_missing(value)}
        for row in frame[columns].to_dict(orient="records")
    ]


def buses_from_frame(frame: pd.DataFrame) -> list[Bus]:
    """Validate a bus table and convert it to records.

    Parameters
    ----------
    frame : pd.DataFrame
        The bus table, see BusSchema

    Returns
    -------
    list[Bus]
        One bus per row, in row order
    """
    frame = BusSchema.validate(frame)
    return [Bus(**row) for row in _frame_records(frame, list(Bus.model_fields))]


def branches_from_frame(frame: pd.DataFrame) -> list[Branch]:
    """Validate a branch table and convert it to records.

    Parameters
    ----------
    frame : pd.DataFrame
        The branch table, see BranchSchema

    Returns
    -------
    list[Branch]
        One branch per row, in row order
    """
    frame = BranchSchema.validate(frame)
    return [Branch(**row) for row in _frame_records(frame, list(Branch.model_fields))]


def branches_to_frame(branches: list[Branch]) -> pd.DataFrame:
    """Convert branch records to a table that satisfies BranchSchema.

    Parameters
    ----------
    branches : list[Branch]
        The branches

    Returns
    -------
    pd.DataFrame
        One row per branch, taps and angles of lines are NaN
    """
    frame = pd.DataFrame([branch.model_dump() for branch in branches], columns=list(Branch.model_fields))
    frame[["tap", "angle"]] = frame[["tap", "angle"]].astype(float)
    return BranchSchema.validate(frame)


def as_bus_records(buses: Union[Sequence[Bus], pd.DataFrame]) -> list[Bus]:
    """Accept buses as records or as a table, see BusSchema"""
    if isinstance(buses, pd.DataFrame):
        return buses_from_frame(buses)
    return list(buses)


def as_branch_records(branches: Union[Sequence[Branch], pd.DataFrame]) -> list[Branch]:
    """Accept branches as records or as a table, see BranchSchema"""
    if isinstance(branches, pd.DataFrame):
        return branches_from_frame(branches)
    return list(branches)
