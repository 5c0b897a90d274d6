# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Topology layout for RedTopo network snapshots.

Builds a renderer-neutral description of the final network from a
:class:`~redtopo.runtime.snapshot.NetworkSnapshot`:

- Every placed machine and concentrator as a node at its coordinates.
- Every placed coaxial segment as a straight cable running ``length`` units
  from its placement point in its direction, with the machines tapped onto it.
- Port connections, hub cascades and coaxial attachments as labelled links.
- The names of declared objects that were never placed.

Coordinates follow screen convention: ``y`` grows downwards, so ``arriba``
decreases ``y``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from redtopo.model.types import Direction
from redtopo.runtime.snapshot import CoaxialState, NetworkSnapshot

# ###############
# Public Interface
# ###############


@dataclass
class DeviceNode:
    """A placed machine or concentrator.

    Attributes:
        name: Declared name of the device.
        kind: ``"maquina"`` or ``"concentrador"``.
        x: Horizontal position.
        y: Vertical position.
        detail: Short status text (connection or free ports).
    """

    name: str
    kind: str  # "maquina" | "concentrador"
    x: float
    y: float
    detail: str = ""


@dataclass
class TapMark:
    """A machine tapped onto a cable, positioned along it."""

    machine: str
    position: int
    x: float
    y: float


@dataclass
class CableLine:
    """A placed coaxial segment drawn from ``start`` to ``end``."""

    name: str
    length: int
    start: tuple[float, float]
    end: tuple[float, float]
    taps: list[TapMark] = field(default_factory=list)
    full: bool = False


@dataclass
class LinkEdge:
    """A labelled connection between two positioned objects."""

    source: str
    target: str
    label: str
    start: tuple[float, float]
    end: tuple[float, float]


@dataclass
class TopologyData:
    """Full description of a topology to be rendered.

    Attributes:
        title: Program name.
        nodes: Placed machines and concentrators.
        cables: Placed coaxial segments.
        links: Connections whose both ends have a position.
        unplaced: Declared objects that were never placed.
        output: Lines written by the program.
    """

    title: str
    nodes: list[DeviceNode] = field(default_factory=list)
    cables: list[CableLine] = field(default_factory=list)
    links: list[LinkEdge] = field(default_factory=list)
    unplaced: list[str] = field(default_factory=list)
    output: list[str] = field(default_factory=list)


def build_topology(snapshot: NetworkSnapshot) -> TopologyData:
    """Build a :class:`TopologyData` description from a snapshot.

    Args:
        snapshot: The final network state of an execution.

    Returns:
        A :class:`TopologyData` instance describing the layout.
    """
    data = TopologyData(title=snapshot.program, output=list(snapshot.output))
    positions: dict[str, tuple[float, float]] = {}

    for hub in snapshot.concentrators:
        if not hub.placed:
            data.unplaced.append(hub.name)
            continue
        positions[hub.name] = (hub.x, hub.y)
        data.nodes.append(
            DeviceNode(
                name=hub.name,
                kind="concentrador",
                x=hub.x,
                y=hub.y,
                detail=f"{hub.available}/{hub.ports} puertos libres",
            )
        )

    for cable in snapshot.coaxials:
        if not cable.placed:
            data.unplaced.append(cable.name)
            continue
        line = _cable_line(cable)
        positions[cable.name] = line.start
        data.cables.append(line)
        for tap in line.taps:
            positions.setdefault(tap.machine, (tap.x, tap.y))

    for machine in snapshot.machines:
        if not machine.placed:
            if machine.name not in positions:
                data.unplaced.append(machine.name)
            continue
        positions[machine.name] = (machine.x, machine.y)
        detail = ""
        if machine.concentrator is not None:
            detail = f"{machine.concentrator} puerto {machine.port}"
        elif machine.coaxial is not None:
            detail = f"{machine.coaxial} a {machine.position}m"
        data.nodes.append(DeviceNode(name=machine.name, kind="maquina", x=machine.x, y=machine.y, detail=detail))

    for machine in snapshot.machines:
        if machine.concentrator is not None:
            _add_link(data, positions, machine.name, machine.concentrator, f"p{machine.port}")
    for hub in snapshot.concentrators:
        if hub.uplink_concentrator is not None:
            _add_link(data, positions, hub.name, hub.uplink_concentrator, f"p{hub.uplink_port}")
        if hub.coaxial is not None:
            _add_link(data, positions, hub.name, hub.coaxial, "coaxial")
    for cable in snapshot.coaxials:
        if cable.hub_concentrator is not None:
            _add_link(data, positions, cable.name, cable.hub_concentrator, f"p{cable.hub_port}")

    return data


# ################
# Implementation
# ################

_DIRECTION_VECTORS: dict[Direction, tuple[int, int]] = {
    Direction.DERECHA: (1, 0),
    Direction.IZQUIERDA: (-1, 0),
    Direction.ABAJO: (0, 1),
    Direction.ARRIBA: (0, -1),
}


def _cable_line(cable: CoaxialState) -> CableLine:
    dx, dy = _DIRECTION_VECTORS[cable.direction or Direction.DERECHA]
    start = (float(cable.x), float(cable.y))
    end = (float(cable.x + dx * cable.length), float(cable.y + dy * cable.length))
    taps = [
        TapMark(
            machine=tap.machine,
            position=tap.position,
            x=float(cable.x + dx * tap.position),
            y=float(cable.y + dy * tap.position),
        )
        for tap in cable.taps
    ]
    return CableLine(name=cable.name, length=cable.length, start=start, end=end, taps=taps, full=cable.full)


def _add_link(
    data: TopologyData,
    positions: dict[str, tuple[float, float]],
    source: str,
    target: str,
    label: str,
) -> None:
    """Append a link if both ends have a position."""
    if source in positions and target in positions:
        data.links.append(
            LinkEdge(source=source, target=target, label=label, start=positions[source], end=positions[target])
        )
