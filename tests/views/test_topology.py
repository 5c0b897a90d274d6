# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the topology layout builder."""

from redtopo.model.types import Direction
from redtopo.runtime.snapshot import (
    CoaxialState,
    ConcentratorState,
    MachineState,
    NetworkSnapshot,
    TapState,
)
from redtopo.views.topology import build_topology

# ###############
# Helpers
# ###############


def _hub(name: str = "hub", **kwargs) -> ConcentratorState:
    fields = {"ports": 4, "x": 10, "y": 10, "placed": True, "available": 4, "occupied": (False,) * 4}
    fields.update(kwargs)
    return ConcentratorState(name=name, **fields)


def _cable(name: str = "c", **kwargs) -> CoaxialState:
    fields = {"length": 12, "x": 0, "y": 50, "placed": True, "direction": Direction.DERECHA}
    fields.update(kwargs)
    return CoaxialState(name=name, **fields)


# ###############
# build_topology: nodes
# ###############


def test_title_and_output() -> None:
    """The title is the program name and the output is copied."""
    data = build_topology(NetworkSnapshot(program="red", output=("ok",)))
    assert data.title == "red"
    assert data.output == ["ok"]


def test_placed_hub_becomes_node() -> None:
    """A placed concentrator is a node showing its free ports."""
    data = build_topology(NetworkSnapshot(program="red", concentrators=(_hub(available=3),)))
    (node,) = data.nodes
    assert (node.name, node.kind, node.x, node.y) == ("hub", "concentrador", 10, 10)
    assert node.detail == "3/4 puertos libres"


def test_unplaced_objects_listed() -> None:
    """Objects that were never placed are listed instead of drawn."""
    snapshot = NetworkSnapshot(
        program="red",
        machines=(MachineState(name="pc"),),
        concentrators=(_hub(placed=False),),
        coaxials=(_cable(placed=False),),
    )
    data = build_topology(snapshot)
    assert data.nodes == []
    assert data.cables == []
    assert data.unplaced == ["hub", "c", "pc"]


def test_machine_detail_for_port() -> None:
    """A machine on a port shows the hub and port number."""
    machine = MachineState(name="pc", x=1, y=2, placed=True, concentrator="hub", port=2)
    data = build_topology(NetworkSnapshot(program="red", machines=(machine,)))
    assert data.nodes[0].detail == "hub puerto 2"


# ###############
# build_topology: cables
# ###############


def test_cable_extends_in_direction() -> None:
    """A cable runs its length from the placement point in its direction."""
    snapshot = NetworkSnapshot(program="red", coaxials=(_cable(x=5, y=20, length=30, direction=Direction.ARRIBA),))
    (line,) = build_topology(snapshot).cables
    assert line.start == (5.0, 20.0)
    assert line.end == (5.0, -10.0)


def test_taps_positioned_along_cable() -> None:
    """Tapped machines sit along the cable and are not reported as unplaced."""
    cable = _cable(taps=(TapState(machine="pc", position=6),), full=False)
    machine = MachineState(name="pc", coaxial="c", position=6)
    data = build_topology(NetworkSnapshot(program="red", machines=(machine,), coaxials=(cable,)))
    (line,) = data.cables
    assert [(t.machine, t.x, t.y) for t in line.taps] == [("pc", 6.0, 50.0)]
    assert data.unplaced == []


def test_cable_without_direction_runs_right() -> None:
    """A placed cable with no direction is drawn to the right."""
    snapshot = NetworkSnapshot(program="red", coaxials=(_cable(direction=None, length=3),))
    assert build_topology(snapshot).cables[0].end == (3.0, 50.0)


# ###############
# build_topology: links
# ###############


def test_links_between_positioned_objects() -> None:
    """Port, cascade and coaxial links are drawn between placed ends."""
    snapshot = NetworkSnapshot(
        program="red",
        machines=(MachineState(name="pc", x=0, y=0, placed=True, concentrator="hub", port=1),),
        concentrators=(
            _hub(coaxial="c"),
            _hub("sw", x=40, uplink_concentrator="hub", uplink_port=4),
        ),
        coaxials=(_cable(hub_concentrator="sw", hub_port=2),),
    )
    links = [(link.source, link.target, link.label) for link in build_topology(snapshot).links]
    assert links == [
        ("pc", "hub", "p1"),
        ("hub", "c", "coaxial"),
        ("sw", "hub", "p4"),
        ("c", "sw", "p2"),
    ]


def test_link_skipped_when_end_unplaced() -> None:
    """A link is omitted when one of its ends has no position."""
    machine = MachineState(name="pc", concentrator="hub", port=1)
    data = build_topology(NetworkSnapshot(program="red", machines=(machine,), concentrators=(_hub(),)))
    assert data.links == []
