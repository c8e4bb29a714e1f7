# Copyright 2026 50Hertz Transmission GmbH and Elia Transmission Belgium
#
# This Source Code Form is subject to the terms of the Mozilla Public License, v. 2.0.
# If a copy of the MPL was not distributed with this file,
# you can obtain one at https://mozilla.org/MPL/2.0/.
# Mozilla Public License, version 2.0

"""The static grid records and the two system variants that carry them.

Only the fields read by the PTDF/LODF computations and the topology maps are modelled here. The
market time series (offers, bids, availability, ...) live outside of this package.
"""

from dataclasses import dataclass, field

import pandas as pd
from beartype.typing import Any, Iterable, Optional, TypeAlias, TypeVar, Union
from pydantic import BaseModel, ConfigDict, Field, model_validator

from network_sensitivities.incidence import make_index_lookup


class Bus(BaseModel):
    """A bus of the node-branch model."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    """The unique name of the bus, used as column key of the PTDF"""

    base_voltage: float = Field(default=1.0, gt=0)
    """The base voltage of the bus in kV. Only carried along, not used numerically."""


class Branch(BaseModel):
    """A line or a two-winding transformer.

    A branch with a tap ratio is a transformer, everything else is a line. All electrical values
    are per-unit on the system base.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    """The unique name of the branch, used as row key of the PTDF and LODF"""

    to_bus: str
    """The name of the bus the branch ends at"""

    from_bus: str
    """The name of the bus the branch starts at"""

    reactance: float
    """The series reactance"""

    resistance: float = 0.0
    """The series resistance, only used for transformers"""

    rate_a: float = 0.0
    """The long term rating"""

    rate_b: float = 0.0
    """The short term rating"""

    is_monitored: bool = False
    """Whether the flow limits of this branch are enforced. If a monitored branch is outaged,
    its LODF row is forced to zero post-contingency flow."""

    break_points: tuple[float, ...] = ()
    """Up to two break points of the piecewise linear overload penalty, zeros mean unused"""

    penalties: tuple[float, ...] = ()
    """The penalties belonging to the break points"""

    tap: Optional[float] = None
    """The off-nominal turns ratio, None for lines"""

    angle: Optional[float] = None
    """The phase shift angle in radians, None for lines"""

    @model_validator(mode="before")
    @classmethod
    def default_phase_shift(cls, data: Any) -> Any:
        """A transformer given without a phase shift angle has an angle of zero."""
        if isinstance(data, dict) and data.get("tap") is not None and data.get("angle") is None:
            return {**data, "angle": 0.0}
        return data

    @model_validator(mode="after")
    def check_consistency(self: "Branch") -> "Branch":
        """Check the phase shift and the overload penalty of the branch."""
        if self.tap is None and self.angle is not None:
            raise ValueError(f"Branch {self.name} has a phase shift angle but no tap ratio")
        if len(self.break_points) > 2:
            raise ValueError(f"Branch {self.name} has more than two break points")
        if len(self.break_points) != len(self.penalties):
            raise ValueError(f"Branch {self.name} needs exactly one penalty per break point")
        return self

    @property
    def is_transformer(self) -> bool:
        """Whether the branch is a transformer (has a tap ratio)"""
        return self.tap is not None


@dataclass
class SystemDA:
    """The day-ahead variant of the power system.

    Next to the network it carries the virtual bids (increments, decrements) and price sensitive
    loads per bus, which only exist in the day-ahead market.
    """

    buses: dict[str, Bus]
    """The buses, indexed by name. The insertion order is the PTDF column order."""

    branches: dict[str, Branch]
    """The branches, indexed by name. The insertion order is the PTDF row order."""

    gens_per_bus: dict[str, list[int]] = field(default_factory=dict)
    """The unit codes of the generators at each bus"""

    loads_per_bus: dict[str, list[str]] = field(default_factory=dict)
    """The names of the fixed loads at each bus"""

    incs_per_bus: dict[str, list[str]] = field(default_factory=dict)
    """The names of the increment bids at each bus"""

    decs_per_bus: dict[str, list[str]] = field(default_factory=dict)
    """The names of the decrement bids at each bus"""

    psls_per_bus: dict[str, list[str]] = field(default_factory=dict)
    """The names of the price sensitive loads at each bus"""

    ptdf: Optional[pd.DataFrame] = None
    """The PTDF of the network if it was computed already. Set back to None whenever the
    network changes, see accessors.invalidate_ptdf"""

    lodfs: dict[str, pd.DataFrame] = field(default_factory=dict)
    """The LODF matrices, indexed by contingency name"""


@dataclass
class SystemRT:
    """The real-time variant of the power system, without any virtual bids."""

    buses: dict[str, Bus]
    """The buses, indexed by name. The insertion order is the PTDF column order."""

    branches: dict[str, Branch]
    """The branches, indexed by name. The insertion order is the PTDF row order."""

    gens_per_bus: dict[str, list[int]] = field(default_factory=dict)
    """The unit codes of the generators at each bus"""

    loads_per_bus: dict[str, list[str]] = field(default_factory=dict)
    """The names of the fixed loads at each bus"""

    ptdf: Optional[pd.DataFrame] = None
    """The PTDF of the network if it was computed already"""

    lodfs: dict[str, pd.DataFrame] = field(default_factory=dict)
    """The LODF matrices, indexed by contingency name"""


System: TypeAlias = Union[SystemDA, SystemRT]

_Record = TypeVar("_Record", Bus, Branch)


def index_by_name(records: Iterable[_Record]) -> dict[str, _Record]:
    """Index buses or branches by their name, preserving their order.

    Parameters
    ----------
    records : Iterable[Bus] | Iterable[Branch]
        The records to index

    Returns
    -------
    dict[str, Bus] | dict[str, Branch]
        The records keyed by name

    Raises
    ------
    ConfigurationError
        If a name appears more than once
    """
    records = list(records)
    kind = type(records[0]).__name__.lower() if records else "record"
    make_index_lookup([record.name for record in records], kind=kind)
    return {record.name: record for record in records}
