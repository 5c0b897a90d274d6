# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Read-only snapshots of a finished execution and their JSON form.

A snapshot copies the final network state out of an :class:`Environment` so
that viewers can consume it without touching the interpreter. Snapshots are
stored as compact JSON; the format is versioned so future schema changes can
be detected.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict

from redtopo.model.types import Direction
from redtopo.runtime.environment import Coaxial, Concentrator, Environment, Machine, PortConnection, TapConnection

# ###############
# Public Interface
# ###############

SNAPSHOT_FORMAT_VERSION = "1"
SNAPSHOT_SUFFIX = ".redtopo.json"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class MachineState(_Frozen):
    """A machine and what it is wired into, if anything."""

    name: str
    x: int = 0
    y: int = 0
    placed: bool = False
    concentrator: str | None = None
    port: int | None = None
    coaxial: str | None = None
    position: int | None = None


class ConcentratorState(_Frozen):
    name: str
    ports: int
    has_coaxial: bool = False
    x: int = 0
    y: int = 0
    placed: bool = False
    occupied: tuple[bool, ...] = ()
    available: int = 0
    coaxial: str | None = None
    uplink_concentrator: str | None = None
    uplink_port: int | None = None


class TapState(_Frozen):
    machine: str
    position: int


class CoaxialState(_Frozen):
    """A coaxial segment, its taps in attachment order and its hub links."""

    name: str
    length: int
    x: int = 0
    y: int = 0
    direction: Direction | None = None
    placed: bool = False
    taps: tuple[TapState, ...] = ()
    full: bool = False
    concentrator: str | None = None
    hub_concentrator: str | None = None
    hub_port: int | None = None


class NetworkSnapshot(_Frozen):
    """Final state of every declared object plus the program output."""

    program: str
    machines: tuple[MachineState, ...] = ()
    concentrators: tuple[ConcentratorState, ...] = ()
    coaxials: tuple[CoaxialState, ...] = ()
    output: tuple[str, ...] = ()


def take_snapshot(env: Environment, program_name: str) -> NetworkSnapshot:
    """Copy the state of *env* into an immutable snapshot."""
    return NetworkSnapshot(
        program=program_name,
        machines=tuple(_machine_state(m) for m in env.machines.values()),
        concentrators=tuple(_concentrator_state(c) for c in env.concentrators.values()),
        coaxials=tuple(_coaxial_state(c) for c in env.coaxials.values()),
        output=tuple(env.output),
    )


def serialize(snapshot: NetworkSnapshot) -> str:
    """Serialize a snapshot to a compact JSON string."""
    return json.dumps(_snapshot_to_dict(snapshot), separators=(",", ":"), ensure_ascii=False)


def deserialize(data: str) -> NetworkSnapshot:
    """Deserialize a snapshot from a JSON string.

    Args:
        data: JSON string produced by :func:`serialize`.

    Returns:
        The reconstructed :class:`NetworkSnapshot`.

    Raises:
        ValueError: If the snapshot format version is not recognised.
    """
    obj = json.loads(data)
    version = obj.get("v")
    if version != SNAPSHOT_FORMAT_VERSION:
        raise ValueError(f"Unsupported snapshot format version: {version!r}")
    return _snapshot_from_dict(obj)


def write_snapshot(snapshot: NetworkSnapshot, path: Path) -> None:
    """Write a snapshot to *path*, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize(snapshot), encoding="utf-8")


def read_snapshot(path: Path) -> NetworkSnapshot:
    """Read and deserialize a snapshot from *path*."""
    return deserialize(path.read_text(encoding="utf-8"))


# ################
# Implementation
# ################


def _machine_state(machine: Machine) -> MachineState:
    link = machine.connection
    return MachineState(
        name=machine.name,
        x=machine.x,
        y=machine.y,
        placed=machine.placed,
        concentrator=link.concentrator if isinstance(link, PortConnection) else None,
        port=link.port if isinstance(link, PortConnection) else None,
        coaxial=link.coaxial if isinstance(link, TapConnection) else None,
        position=link.position if isinstance(link, TapConnection) else None,
    )


def _concentrator_state(hub: Concentrator) -> ConcentratorState:
    return ConcentratorState(
        name=hub.name,
        ports=hub.ports,
        has_coaxial=hub.has_coaxial,
        x=hub.x,
        y=hub.y,
        placed=hub.placed,
        occupied=tuple(hub.occupied),
        available=hub.available,
        coaxial=hub.coaxial,
        uplink_concentrator=hub.uplink.concentrator if hub.uplink else None,
        uplink_port=hub.uplink.port if hub.uplink else None,
    )


def _coaxial_state(cable: Coaxial) -> CoaxialState:
    return CoaxialState(
        name=cable.name,
        length=cable.length,
        x=cable.x,
        y=cable.y,
        direction=cable.direction,
        placed=cable.placed,
        taps=tuple(TapState(machine=m, position=p) for m, p in cable.taps),
        full=cable.full,
        concentrator=cable.concentrator,
        hub_concentrator=cable.hub_port.concentrator if cable.hub_port else None,
        hub_port=cable.hub_port.port if cable.hub_port else None,
    )


def _snapshot_to_dict(snapshot: NetworkSnapshot) -> dict[str, Any]:
    return {
        "v": SNAPSHOT_FORMAT_VERSION,
        "program": snapshot.program,
        "machines": [_machine_to_dict(m) for m in snapshot.machines],
        "concentrators": [_concentrator_to_dict(c) for c in snapshot.concentrators],
        "coaxials": [_coaxial_to_dict(c) for c in snapshot.coaxials],
        "output": list(snapshot.output),
    }


def _snapshot_from_dict(obj: dict[str, Any]) -> NetworkSnapshot:
    return NetworkSnapshot(
        program=obj["program"],
        machines=tuple(_machine_from_dict(m) for m in obj.get("machines", [])),
        concentrators=tuple(_concentrator_from_dict(c) for c in obj.get("concentrators", [])),
        coaxials=tuple(_coaxial_from_dict(c) for c in obj.get("coaxials", [])),
        output=tuple(obj.get("output", [])),
    )


def _placement_to_dict(x: int, y: int, placed: bool) -> dict[str, Any]:
    if not placed:
        return {}
    return {"at": [x, y]}


def _placement_from_dict(obj: dict[str, Any]) -> dict[str, Any]:
    if "at" not in obj:
        return {}
    x, y = obj["at"]
    return {"x": x, "y": y, "placed": True}


def _machine_to_dict(machine: MachineState) -> dict[str, Any]:
    d: dict[str, Any] = {"name": machine.name}
    d.update(_placement_to_dict(machine.x, machine.y, machine.placed))
    if machine.concentrator is not None:
        d["port"] = [machine.concentrator, machine.port]
    if machine.coaxial is not None:
        d["tap"] = [machine.coaxial, machine.position]
    return d


def _machine_from_dict(obj: dict[str, Any]) -> MachineState:
    kwargs: dict[str, Any] = {"name": obj["name"]}
    kwargs.update(_placement_from_dict(obj))
    if "port" in obj:
        kwargs["concentrator"], kwargs["port"] = obj["port"]
    if "tap" in obj:
        kwargs["coaxial"], kwargs["position"] = obj["tap"]
    return MachineState(**kwargs)


def _concentrator_to_dict(hub: ConcentratorState) -> dict[str, Any]:
    d: dict[str, Any] = {
        "name": hub.name,
        "ports": hub.ports,
        "occupied": [i for i, used in enumerate(hub.occupied, start=1) if used],
    }
    if hub.has_coaxial:
        d["has_coaxial"] = True
    d.update(_placement_to_dict(hub.x, hub.y, hub.placed))
    if hub.coaxial is not None:
        d["coaxial"] = hub.coaxial
    if hub.uplink_concentrator is not None:
        d["uplink"] = [hub.uplink_concentrator, hub.uplink_port]
    return d


def _concentrator_from_dict(obj: dict[str, Any]) -> ConcentratorState:
    ports = obj["ports"]
    used = set(obj.get("occupied", []))
    occupied = tuple(i in used for i in range(1, ports + 1))
    kwargs: dict[str, Any] = {
        "name": obj["name"],
        "ports": ports,
        "has_coaxial": obj.get("has_coaxial", False),
        "occupied": occupied,
        "available": occupied.count(False),
        "coaxial": obj.get("coaxial"),
    }
    kwargs.update(_placement_from_dict(obj))
    if "uplink" in obj:
        kwargs["uplink_concentrator"], kwargs["uplink_port"] = obj["uplink"]
    return ConcentratorState(**kwargs)


def _coaxial_to_dict(cable: CoaxialState) -> dict[str, Any]:
    d: dict[str, Any] = {
        "name": cable.name,
        "length": cable.length,
        "taps": [[t.machine, t.position] for t in cable.taps],
    }
    d.update(_placement_to_dict(cable.x, cable.y, cable.placed))
    if cable.direction is not None:
        d["direction"] = cable.direction.value
    if cable.full:
        d["full"] = True
    if cable.concentrator is not None:
        d["concentrator"] = cable.concentrator
    if cable.hub_concentrator is not None:
        d["hub_port"] = [cable.hub_concentrator, cable.hub_port]
    return d


def _coaxial_from_dict(obj: dict[str, Any]) -> CoaxialState:
    kwargs: dict[str, Any] = {
        "name": obj["name"],
        "length": obj["length"],
        "taps": tuple(TapState(machine=m, position=p) for m, p in obj.get("taps", [])),
        "full": obj.get("full", False),
        "concentrator": obj.get("concentrator"),
    }
    kwargs.update(_placement_from_dict(obj))
    if "direction" in obj:
        kwargs["direction"] = Direction(obj["direction"])
    if "hub_port" in obj:
        kwargs["hub_concentrator"], kwargs["hub_port"] = obj["hub_port"]
    return CoaxialState(**kwargs)
