# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the RedTopo web UI application."""

import dash
import plotly.graph_objects as go

from redtopo.model.types import Direction
from redtopo.runtime.snapshot import CoaxialState, ConcentratorState, MachineState, NetworkSnapshot, TapState
from redtopo.views.topology import build_topology
from redtopo.webui.app import APP_TITLE, build_figure, create_app

# ###############
# Helpers
# ###############

_SNAPSHOT = NetworkSnapshot(
    program="oficina",
    machines=(
        MachineState(name="pc1", x=0, y=0, placed=True, concentrator="hub", port=1),
        MachineState(name="pc2", coaxial="cable", position=3),
        MachineState(name="pc3"),
    ),
    concentrators=(ConcentratorState(name="hub", ports=4, x=10, y=10, placed=True, available=3),),
    coaxials=(
        CoaxialState(
            name="cable",
            length=10,
            x=0,
            y=40,
            placed=True,
            direction=Direction.DERECHA,
            taps=(TapState(machine="pc2", position=3),),
        ),
    ),
    output=("ok",),
)

# ###############
# Public Interface
# ###############


def test_create_app_returns_dash_instance() -> None:
    """create_app returns a Dash application instance."""
    app = create_app(_SNAPSHOT)
    assert isinstance(app, dash.Dash)


def test_create_app_has_layout() -> None:
    """create_app returns an app with a non-None layout."""
    app = create_app(_SNAPSHOT)
    assert app.layout is not None


def test_create_app_title() -> None:
    """create_app sets the application title."""
    app = create_app(_SNAPSHOT)
    assert app.title == APP_TITLE


def test_build_figure_traces() -> None:
    """The figure has traces for the cable, its taps, links and each node kind."""
    figure = build_figure(build_topology(_SNAPSHOT))
    assert isinstance(figure, go.Figure)
    names = [trace.name for trace in figure.data if trace.name]
    assert names == ["cable • 10m", "concentrador", "maquina"]
    assert figure.layout.title.text == "oficina"
    assert figure.layout.yaxis.autorange == "reversed"


def test_build_figure_empty_topology() -> None:
    """An empty topology yields an empty figure."""
    figure = build_figure(build_topology(NetworkSnapshot(program="vacio")))
    assert len(figure.data) == 0
