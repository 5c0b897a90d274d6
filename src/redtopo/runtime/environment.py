# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Mutable network state of one program execution."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from redtopo.model.syntax import Statement
from redtopo.model.types import FULL_COAXIAL_MACHINES, MIN_SPACING, Direction

if TYPE_CHECKING:
    from redtopo.compiler.semantic_analysis import SymbolTable

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class PortConnection:
    """A link into a numbered (1-based) concentrator port."""

    concentrator: str
    port: int


@dataclass(frozen=True)
class TapConnection:
    """A machine tapped onto a coaxial segment at a position in meters."""

    coaxial: str
    position: int


@dataclass
class Machine:
    name: str
    x: int = 0
    y: int = 0
    placed: bool = False
    connection: PortConnection | TapConnection | None = None


@dataclass
class Concentrator:
    """A hub with a fixed number of ports and an optional coaxial uplink."""

    name: str
    ports: int
    has_coaxial: bool = False
    x: int = 0
    y: int = 0
    placed: bool = False
    occupied: list[bool] = field(default_factory=list)
    coaxial: str | None = None
    uplink: PortConnection | None = None

    def __post_init__(self) -> None:
        if not self.occupied:
            self.occupied = [False] * self.ports

    @property
    def available(self) -> int:
        return self.occupied.count(False)

    def occupy(self, port: int) -> bool:
        """Mark *port* (1-based) as used; return False if out of range or taken."""
        if not 1 <= port <= self.ports or self.occupied[port - 1]:
            return False
        self.occupied[port - 1] = True
        return True

    def release(self, port: int) -> None:
        self.occupied[port - 1] = False

    def first_free_port(self) -> int | None:
        for index, used in enumerate(self.occupied, start=1):
            if not used:
                return index
        return None


@dataclass
class Coaxial:
    """A coaxial segment and the machines tapped onto it, in attachment order."""

    name: str
    length: int
    x: int = 0
    y: int = 0
    direction: Direction | None = None
    placed: bool = False
    taps: list[tuple[str, int]] = field(default_factory=list)
    full: bool = False
    concentrator: str | None = None
    hub_port: PortConnection | None = None

    @property
    def machine_count(self) -> int:
        return len(self.taps)

    def conflict_at(self, position: int, exclude: str | None = None) -> tuple[str, int] | None:
        """Return the first tap closer than the minimum spacing to *position*, ignoring *exclude*."""
        for machine, tap_position in self.taps:
            if machine != exclude and abs(position - tap_position) < MIN_SPACING:
                return machine, tap_position
        return None

    def add_tap(self, machine: str, position: int) -> None:
        self.taps.append((machine, position))
        if len(self.taps) >= FULL_COAXIAL_MACHINES:
            self.full = True

    def remove_tap(self, machine: str) -> None:
        self.taps = [tap for tap in self.taps if tap[0] != machine]
        self.full = len(self.taps) >= FULL_COAXIAL_MACHINES


@dataclass
class Environment:
    """Runtime objects, named blocks and the output log of one execution."""

    machines: dict[str, Machine] = field(default_factory=dict)
    concentrators: dict[str, Concentrator] = field(default_factory=dict)
    coaxials: dict[str, Coaxial] = field(default_factory=dict)
    modules: dict[str, list[Statement]] = field(default_factory=dict)
    output: list[str] = field(default_factory=list)

    @classmethod
    def from_symbols(cls, symbols: SymbolTable) -> Environment:
        """Create fresh runtime records for every declared object."""
        return cls(
            machines={name: Machine(name) for name in symbols.machines},
            concentrators={
                name: Concentrator(name, symbol.ports, symbol.has_coaxial)
                for name, symbol in symbols.concentrators.items()
            },
            coaxials={name: Coaxial(name, symbol.length) for name, symbol in symbols.coaxials.items()},
        )

    def write(self, text: str) -> None:
        self.output.append(text)

    @property
    def output_text(self) -> str:
        return "\n".join(self.output)
