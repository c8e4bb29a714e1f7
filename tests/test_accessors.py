# Copyright 2026 50Hertz Transmission GmbH and Elia Transmission Belgium
#
# This Source Code Form is subject to the terms of the Mozilla Public License, v. 2.0.
# If a copy of the MPL was not distributed with this file,
# you can obtain one at https://mozilla.org/MPL/2.0/.
# Mozilla Public License, version 2.0

import numpy as np
import pandas as pd
import pytest
from network_sensitivities.accessors import (
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
from network_sensitivities.exceptions import ConfigurationError
from network_sensitivities.lodf import compute_lodf, compute_lodf_from_system
from network_sensitivities.ptdf import compute_ptdf, compute_ptdf_from_system
from network_sensitivities.system import Branch, Bus, SystemDA, SystemRT

OUTAGE = ["branch_2", "branch_6", "branch_11"]


def test_topology_accessors(small_system_da: SystemDA) -> None:
    assert list(get_buses(small_system_da)) == ["A", "B", "C"]
    assert list(get_branches(small_system_da)) == ["1", "2", "3", "4"]
    assert list(get_lines(small_system_da)) == ["1", "2", "3"]
    assert list(get_transformers(small_system_da)) == ["4"]
    assert get_gens_per_bus(small_system_da)["B"] == [112, 113]
    assert get_loads_per_bus(small_system_da) == {}


def test_day_ahead_accessors(small_system_da: SystemDA, ieee14_system_rt: SystemRT) -> None:
    assert get_incs_per_bus(small_system_da) == {"A": ["inc_1"]}
    assert get_decs_per_bus(small_system_da) == {"B": ["dec_1"]}
    assert get_psls_per_bus(small_system_da) == {"C": ["psl_1"]}

    assert get_loads_per_bus(ieee14_system_rt)["bus_3"] == ["load_3"]
    for accessor in (get_incs_per_bus, get_decs_per_bus, get_psls_per_bus):
        with pytest.raises(TypeError):
            accessor(ieee14_system_rt)


def test_branches_by_breakpoints(small_system_da: SystemDA) -> None:
    # Branch 2 has a break point but is not monitored
    assert branches_by_breakpoints(small_system_da) == (["3"], ["4"], ["1"])


def test_branches_by_breakpoints_without_break_points(ieee14_system_rt: SystemRT) -> None:
    no_break_points, one, two = branches_by_breakpoints(ieee14_system_rt)
    assert no_break_points == list(ieee14_system_rt.branches)
    assert one == []
    assert two == []


def test_ptdf_from_system(
    ieee14_system_rt: SystemRT,
    ieee14_buses: list[Bus],
    ieee14_branches: list[Branch],
) -> None:
    assert get_ptdf(ieee14_system_rt) is None
    assert get_lodfs(ieee14_system_rt) == {}

    expected = compute_ptdf(ieee14_buses, ieee14_branches)
    pd.testing.assert_frame_equal(compute_ptdf_from_system(ieee14_system_rt), expected)
    pd.testing.assert_frame_equal(retrieve_ptdf(ieee14_system_rt), expected)
    # Nothing has set the system PTDF
    assert get_ptdf(ieee14_system_rt) is None

    with pytest.raises(ConfigurationError, match="System PTDF is missing."):
        compute_lodf_from_system(ieee14_system_rt, OUTAGE)

    cached = cache_ptdf(ieee14_system_rt)
    assert get_ptdf(ieee14_system_rt) is cached
    assert retrieve_ptdf(ieee14_system_rt) is cached
    pd.testing.assert_frame_equal(cached, expected)


def test_lodf_from_system(
    ieee14_system_rt: SystemRT,
    ieee14_buses: list[Bus],
    ieee14_branches: list[Branch],
) -> None:
    ptdf = compute_ptdf_from_system(ieee14_system_rt)
    lodf_df = compute_lodf(ieee14_buses, ieee14_branches, ptdf, OUTAGE)
    lodf_input_ptdf = compute_lodf_from_system(ieee14_system_rt, OUTAGE, ptdf=ptdf)

    ieee14_system_rt.ptdf = ptdf
    lodf_sys = compute_lodf_from_system(ieee14_system_rt, OUTAGE)

    pd.testing.assert_frame_equal(lodf_sys, lodf_input_ptdf)
    pd.testing.assert_frame_equal(lodf_sys, lodf_df)


def test_cache_and_invalidate(ieee14_system_rt: SystemRT) -> None:
    with pytest.raises(ConfigurationError):
        cache_lodf(ieee14_system_rt, "c1", OUTAGE)
    assert get_lodfs(ieee14_system_rt) == {}

    cache_ptdf(ieee14_system_rt, reference_bus="bus_2")
    assert np.allclose(get_ptdf(ieee14_system_rt)["bus_2"], 0.0)

    lodf = cache_lodf(ieee14_system_rt, "c1", OUTAGE)
    cache_lodf(ieee14_system_rt, "c2", "not_a_branch")
    assert get_lodfs(ieee14_system_rt)["c1"] is lodf
    assert get_lodfs(ieee14_system_rt)["c2"].shape == (0, 0)

    invalidate_ptdf(ieee14_system_rt)
    assert get_ptdf(ieee14_system_rt) is None
    assert get_lodfs(ieee14_system_rt) == {}


def test_day_ahead_system_with_transformer(small_system_da: SystemDA) -> None:
    ptdf = cache_ptdf(small_system_da, block_size=1)
    assert ptdf.shape == (4, 3)
    assert np.allclose(ptdf["A"], 0.0)

    lodf = cache_lodf(small_system_da, "outage_3", ["3"])
    assert list(lodf.columns) == ["3"]
    assert lodf.loc["3", "3"] == -1.0


def test_branches_by_breakpoints_uses_last_break_point(small_system_da: SystemDA) -> None:
    branches = dict(small_system_da.branches)
    branches["5"] = Branch(
        name="5",
        to_bus="A",
        from_bus="B",
        reactance=1.0,
        is_monitored=True,
        break_points=(0.0, 105.0),
        penalties=(0.0, 7.0),
    )
    branches["6"] = Branch(
        name="6",
        to_bus="B",
        from_bus="C",
        reactance=1.0,
        is_monitored=True,
        break_points=(100.0,),
        penalties=(5.0,),
    )
    system = SystemDA(buses=small_system_da.buses, branches=branches)
    assert branches_by_breakpoints(system) == (["3"], ["4", "6"], ["1", "5"])
