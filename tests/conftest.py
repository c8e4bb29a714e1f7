# Copyright 2026 50Hertz Transmission GmbH and Elia Transmission Belgium
#
# This Source Code Form is subject to the terms of the Mozilla Public License, v. 2.0.
# If a copy of the MPL was not distributed with this file,
# you can obtain one at https://mozilla.org/MPL/2.0/.
# Mozilla Public License, version 2.0

import pandas as pd
import pytest
from network_sensitivities import Branch, Bus, SystemDA, SystemRT, compute_ptdf, index_by_name

# IEEE 14 bus test case: name, to_bus, from_bus, resistance, reactance
IEEE14_BRANCH_DATA = [
    ("branch_1", "bus_2", "bus_1", 0.01938, 0.05917),
    ("branch_2", "bus_5", "bus_1", 0.05403, 0.22304),
    ("branch_3", "bus_3", "bus_2", 0.04699, 0.19797),
    ("branch_4", "bus_4", "bus_2", 0.05811, 0.17632),
    ("branch_5", "bus_5", "bus_2", 0.05695, 0.17388),
    ("branch_6", "bus_4", "bus_3", 0.06701, 0.17103),
    ("branch_7", "bus_5", "bus_4", 0.01335, 0.04211),
    ("branch_8", "bus_7", "bus_4", 0.0, 0.20912),
    ("branch_9", "bus_9", "bus_4", 0.0, 0.55618),
    ("branch_10", "bus_6", "bus_5", 0.0, 0.25202),
    ("branch_11", "bus_11", "bus_6", 0.09498, 0.1989),
    ("branch_12", "bus_12", "bus_6", 0.12291, 0.25581),
    ("branch_13", "bus_13", "bus_6", 0.06615, 0.13027),
    ("branch_14", "bus_8", "bus_7", 0.0, 0.17615),
    ("branch_15", "bus_9", "bus_7", 0.0, 0.11001),
    ("branch_16", "bus_10", "bus_9", 0.03181, 0.0845),
    ("branch_17", "bus_14", "bus_9", 0.12711, 0.27038),
    ("branch_18", "bus_11", "bus_10", 0.08205, 0.19207),
    ("branch_19", "bus_13", "bus_12", 0.22092, 0.19988),
    ("branch_20", "bus_14", "bus_13", 0.17093, 0.34802),
]


def make_ieee14_branches(is_monitored: bool = True) -> list[Branch]:
    return [
        Branch(
            name=name,
            to_bus=to_bus,
            from_bus=from_bus,
            resistance=resistance,
            reactance=reactance,
            is_monitored=is_monitored,
        )
        for name, to_bus, from_bus, resistance, reactance in IEEE14_BRANCH_DATA
    ]


@pytest.fixture
def ieee14_buses() -> list[Bus]:
    return [Bus(name=f"bus_{i}", base_voltage=1.0) for i in range(1, 15)]


@pytest.fixture
def ieee14_branches() -> list[Branch]:
    return make_ieee14_branches()


@pytest.fixture
def ieee14_bus_names(ieee14_buses: list[Bus]) -> list[str]:
    return [bus.name for bus in ieee14_buses]


@pytest.fixture
def ieee14_branch_names(ieee14_branches: list[Branch]) -> list[str]:
    return [branch.name for branch in ieee14_branches]


@pytest.fixture
def ieee14_ptdf(ieee14_buses: list[Bus], ieee14_branches: list[Branch]) -> pd.DataFrame:
    return compute_ptdf(ieee14_buses, ieee14_branches)


@pytest.fixture
def ieee14_system_rt(ieee14_buses: list[Bus], ieee14_branches: list[Branch]) -> SystemRT:
    return SystemRT(
        buses=index_by_name(ieee14_buses),
        branches=index_by_name(ieee14_branches),
        gens_per_bus={"bus_1": [111, 112], "bus_2": [113]},
        loads_per_bus={"bus_3": ["load_3"], "bus_4": ["load_4"]},
    )


@pytest.fixture
def small_system_da() -> SystemDA:
    buses = [Bus(name=name, base_voltage=100.0) for name in ["A", "B", "C"]]
    branches = [
        Branch(
            name="1",
            to_bus="A",
            from_bus="B",
            rate_a=10.0,
            rate_b=10.0,
            is_monitored=True,
            break_points=(100.0, 102.0),
            penalties=(5.0, 6.0),
            resistance=1.0,
            reactance=1.0,
        ),
        Branch(
            name="2",
            to_bus="B",
            from_bus="C",
            is_monitored=False,
            break_points=(100.0, 0.0),
            penalties=(5.0, 0.0),
            resistance=1.0,
            reactance=1.0,
        ),
        Branch(
            name="3",
            to_bus="C",
            from_bus="A",
            is_monitored=True,
            break_points=(0.0, 0.0),
            penalties=(0.0, 0.0),
            resistance=1.0,
            reactance=1.0,
        ),
        Branch(
            name="4",
            to_bus="A",
            from_bus="C",
            is_monitored=True,
            break_points=(100.0, 0.0),
            penalties=(5.0, 0.0),
            resistance=1.0,
            reactance=1.0,
            tap=0.5,
            angle=0.5,
        ),
    ]
    return SystemDA(
        buses=index_by_name(buses),
        branches=index_by_name(branches),
        gens_per_bus={"A": [111], "B": [112, 113], "C": []},
        incs_per_bus={"A": ["inc_1"]},
        decs_per_bus={"B": ["dec_1"]},
        psls_per_bus={"C": ["psl_1"]},
    )
