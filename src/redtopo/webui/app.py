# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Dash-based web UI for viewing the network built by a program."""

import dash
import plotly.graph_objects as go
from dash import dcc, html

from redtopo.runtime.snapshot import NetworkSnapshot
from redtopo.views.topology import TopologyData, build_topology

# ###############
# Public Interface
# ###############

APP_TITLE = "RedTopo Network Viewer"


def create_app(snapshot: NetworkSnapshot) -> dash.Dash:
    """Create and configure the viewer application for *snapshot*."""
    app = dash.Dash(
        __name__,
        title=APP_TITLE,
    )
    app.layout = _build_layout(build_topology(snapshot))
    return app


def build_figure(data: TopologyData) -> go.Figure:
    """Draw cables, links and devices of a topology as a plotly figure."""
    figure = go.Figure()

    for cable in data.cables:
        figure.add_trace(
            go.Scatter(
                x=[cable.start[0], cable.end[0]],
                y=[cable.start[1], cable.end[1]],
                mode="lines",
                name=f"{cable.name} • {cable.length}m",
                line={"width": 4, "color": "#c0392b" if cable.full else "#e67e22"},
            )
        )
        if cable.taps:
            figure.add_trace(
                go.Scatter(
                    x=[t.x for t in cable.taps],
                    y=[t.y for t in cable.taps],
                    mode="markers+text",
                    text=[f"{t.machine} ({t.position}m)" for t in cable.taps],
                    textposition="bottom center",
                    marker={"symbol": "line-ns-open", "size": 14},
                    showlegend=False,
                )
            )

    for link in data.links:
        figure.add_trace(
            go.Scatter(
                x=[link.start[0], link.end[0]],
                y=[link.start[1], link.end[1]],
                mode="lines",
                line={"width": 1, "dash": "dot", "color": "#7f8c8d"},
                hovertext=f"{link.source} → {link.target} ({link.label})",
                hoverinfo="text",
                showlegend=False,
            )
        )

    for kind, symbol, color in (("concentrador", "square", "#2980b9"), ("maquina", "circle", "#27ae60")):
        nodes = [n for n in data.nodes if n.kind == kind]
        if not nodes:
            continue
        figure.add_trace(
            go.Scatter(
                x=[n.x for n in nodes],
                y=[n.y for n in nodes],
                mode="markers+text",
                name=kind,
                text=[n.name for n in nodes],
                hovertext=[n.detail or n.name for n in nodes],
                hoverinfo="text",
                textposition="top center",
                marker={"symbol": symbol, "size": 16, "color": color},
            )
        )

    figure.update_layout(title=data.title, plot_bgcolor="white", margin={"l": 20, "r": 20, "t": 60, "b": 20})
    figure.update_yaxes(autorange="reversed", scaleanchor="x", showgrid=True, gridcolor="#eee")
    figure.update_xaxes(showgrid=True, gridcolor="#eee")
    return figure


# ################
# Implementation
# ################


def _build_layout(data: TopologyData) -> html.Div:
    """Build the application layout."""
    children = [
        html.H1(APP_TITLE),
        html.P(f"Programa: {data.title}"),
        html.Hr(),
        dcc.Graph(id="topology", figure=build_figure(data)),
        html.H2("Salida"),
        html.Pre("\n".join(data.output) or "(sin salida)"),
    ]
    if data.unplaced:
        children.append(
            html.P(
                f"Sin colocar: {', '.join(data.unplaced)}",
                style={"color": "#666"},
            )
        )
    return html.Div(children, style={"fontFamily": "sans-serif", "padding": "2rem"})
