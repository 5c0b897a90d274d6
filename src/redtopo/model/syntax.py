# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Syntax tree of a RedTopo program.

Statements and expressions are closed unions discriminated by their ``kind``
field. Statement kinds are spelled like the DSL keyword that introduces them.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel
from pydantic import Field as _Field

from redtopo.model.types import Direction, LogicOp, RelOp

# ###############
# Public Interface
# ###############


class Location(BaseModel):
    """A 1-based source position and the number of characters it covers."""

    line: int
    column: int
    length: int = 1


# ------------------------------------------------------------------
# Declarations
# ------------------------------------------------------------------


class MachineDecl(BaseModel):
    """A machine declared in a ``define maquinas`` list."""

    name: str
    location: Location


class ConcentratorDecl(BaseModel):
    """A concentrator declared as ``Name = ports`` with an optional ``.1`` uplink marker."""

    name: str
    ports: int
    coaxial_marker: int | None = None
    location: Location

    @property
    def has_coaxial(self) -> bool:
        return self.coaxial_marker is not None


class CoaxialDecl(BaseModel):
    """A coaxial segment declared as ``Name = length``."""

    name: str
    length: int
    location: Location


class Definitions(BaseModel):
    """All declarations of a program, each list in source order."""

    machines: list[MachineDecl] = _Field(default_factory=list)
    concentrators: list[ConcentratorDecl] = _Field(default_factory=list)
    coaxials: list[CoaxialDecl] = _Field(default_factory=list)


# ------------------------------------------------------------------
# Expressions
# ------------------------------------------------------------------


class NumberLiteral(BaseModel):
    kind: Literal["numero"] = "numero"
    value: int
    location: Location


class StringLiteral(BaseModel):
    kind: Literal["cadena"] = "cadena"
    value: str
    location: Location


class Identifier(BaseModel):
    """A bare reference to a declared object."""

    kind: Literal["identificador"] = "identificador"
    name: str
    location: Location


class FieldAccess(BaseModel):
    """``object.field``."""

    kind: Literal["campo"] = "campo"
    object: str
    field: str
    location: Location


class IndexAccess(BaseModel):
    """``object[index]`` or ``object.field[index]``.

    For the second form ``object`` holds the dotted path ``"object.field"``.
    """

    kind: Literal["indice"] = "indice"
    object: str
    index: Expression
    location: Location


class RelationalExpr(BaseModel):
    kind: Literal["relacional"] = "relacional"
    op: RelOp
    left: Expression
    right: Expression
    location: Location


class LogicalExpr(BaseModel):
    kind: Literal["logico"] = "logico"
    op: LogicOp
    left: Expression
    right: Expression
    location: Location


class NotExpr(BaseModel):
    kind: Literal["no"] = "no"
    operand: Expression
    location: Location


Expression = Annotated[
    NumberLiteral | StringLiteral | Identifier | FieldAccess | IndexAccess | RelationalExpr | LogicalExpr | NotExpr,
    _Field(discriminator="kind"),
]


# ------------------------------------------------------------------
# Statements
# ------------------------------------------------------------------


class PlaceStmt(BaseModel):
    """``coloca(obj, x, y);``"""

    kind: Literal["coloca"] = "coloca"
    object: str
    x: Expression
    y: Expression
    location: Location


class PlaceCoaxialStmt(BaseModel):
    """``colocaCoaxial(cable, x, y, direction);``"""

    kind: Literal["colocaCoaxial"] = "colocaCoaxial"
    coaxial: str
    x: Expression
    y: Expression
    direction: Direction
    location: Location


class AttachCoaxialStmt(BaseModel):
    """``colocaCoaxialConcentrador(cable, hub);``"""

    kind: Literal["colocaCoaxialConcentrador"] = "colocaCoaxialConcentrador"
    coaxial: str
    concentrator: str
    location: Location


class ConnectPortStmt(BaseModel):
    """``uneMaquinaPuerto(obj, hub, port);``"""

    kind: Literal["uneMaquinaPuerto"] = "uneMaquinaPuerto"
    device: str
    concentrator: str
    port: Expression
    location: Location


class AssignPortStmt(BaseModel):
    """``asignaPuerto(obj, hub);``"""

    kind: Literal["asignaPuerto"] = "asignaPuerto"
    device: str
    concentrator: str
    location: Location


class CoaxialMachineStmt(BaseModel):
    """``maquinaCoaxial(machine, cable, position);``"""

    kind: Literal["maquinaCoaxial"] = "maquinaCoaxial"
    machine: str
    coaxial: str
    position: Expression
    location: Location


class AssignCoaxialMachineStmt(BaseModel):
    """``asignaMaquinaCoaxial(machine, cable);``"""

    kind: Literal["asignaMaquinaCoaxial"] = "asignaMaquinaCoaxial"
    machine: str
    coaxial: str
    location: Location


class WriteStmt(BaseModel):
    """``escribe(expr);``"""

    kind: Literal["escribe"] = "escribe"
    value: Expression
    location: Location


class IfStmt(BaseModel):
    """``si cond inicio ... fin [sino inicio ... fin]``"""

    kind: Literal["si"] = "si"
    condition: Expression
    then_body: list[Statement] = _Field(default_factory=list)
    else_body: list[Statement] | None = None
    location: Location


class ModuleCall(BaseModel):
    """``name;`` invoking a named block."""

    kind: Literal["llamada"] = "llamada"
    name: str
    location: Location


Statement = Annotated[
    PlaceStmt
    | PlaceCoaxialStmt
    | AttachCoaxialStmt
    | ConnectPortStmt
    | AssignPortStmt
    | CoaxialMachineStmt
    | AssignCoaxialMachineStmt
    | WriteStmt
    | IfStmt
    | ModuleCall,
    _Field(discriminator="kind"),
]


# ------------------------------------------------------------------
# Program
# ------------------------------------------------------------------


class Module(BaseModel):
    """A named, reusable statement block: ``modulo name; inicio ... fin``."""

    name: str
    body: list[Statement] = _Field(default_factory=list)
    location: Location


class Program(BaseModel):
    """Top-level model of a parsed RedTopo source file."""

    name: str
    definitions: Definitions = _Field(default_factory=Definitions)
    modules: list[Module] = _Field(default_factory=list)
    body: list[Statement] = _Field(default_factory=list)
    location: Location


# Resolve forward references in recursive models.
IndexAccess.model_rebuild()
RelationalExpr.model_rebuild()
LogicalExpr.model_rebuild()
NotExpr.model_rebuild()
IfStmt.model_rebuild()
Module.model_rebuild()
Program.model_rebuild()
