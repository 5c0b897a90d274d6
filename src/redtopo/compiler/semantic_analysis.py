# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Semantic analysis for parsed RedTopo programs.

Builds the symbol table from the declarations and checks every statement and
expression against it: undefined names, the kinds of object each statement
accepts, expression types, valid fields, and the Ethernet rules (port counts,
cable lengths, tap spacing). Errors are accumulated, never raised, so one run
reports every problem at once.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TypeVar

from redtopo.model.syntax import (
    AssignCoaxialMachineStmt,
    AssignPortStmt,
    AttachCoaxialStmt,
    CoaxialDecl,
    CoaxialMachineStmt,
    ConcentratorDecl,
    ConnectPortStmt,
    Expression,
    FieldAccess,
    Identifier,
    IfStmt,
    IndexAccess,
    Location,
    LogicalExpr,
    MachineDecl,
    ModuleCall,
    NotExpr,
    NumberLiteral,
    PlaceCoaxialStmt,
    PlaceStmt,
    Program,
    RelationalExpr,
    Statement,
    StringLiteral,
    WriteStmt,
)
from redtopo.model.types import (
    COAXIAL_FIELDS,
    CONCENTRATOR_FIELDS,
    MAX_COAXIAL_LENGTH,
    MIN_COAXIAL_LENGTH,
    MIN_SPACING,
    PORT_ARRAY_FIELD,
    VALID_PORT_COUNTS,
    ValueType,
    is_compatible,
)

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class SemanticError:
    """A rule violation detected during semantic analysis.

    Attributes:
        message: Human-readable description of the error.
        location: Where in the source the error was detected.
    """

    message: str
    location: Location


class DefinitionError(Exception):
    """Raised by :class:`SymbolTable` when a declaration cannot be registered."""


@dataclass
class MachineSymbol:
    name: str
    location: Location


@dataclass
class ConcentratorSymbol:
    """A declared concentrator: its port count and whether it has a coaxial uplink."""

    name: str
    ports: int
    has_coaxial: bool
    location: Location


@dataclass
class CoaxialSymbol:
    """A declared coaxial segment and the literal taps seen while checking statements."""

    name: str
    length: int
    location: Location
    machines: list[tuple[str, int]] = field(default_factory=list)


@dataclass
class SymbolTable:
    """Declared objects and named blocks, keyed by name in declaration order."""

    machines: dict[str, MachineSymbol] = field(default_factory=dict)
    concentrators: dict[str, ConcentratorSymbol] = field(default_factory=dict)
    coaxials: dict[str, CoaxialSymbol] = field(default_factory=dict)
    modules: dict[str, Location] = field(default_factory=dict)

    def define_machine(self, decl: MachineDecl) -> MachineSymbol:
        if decl.name in self.machines:
            raise DefinitionError(f"máquina '{decl.name}' ya fue definida")
        self._check_free(decl.name)
        symbol = MachineSymbol(decl.name, decl.location)
        self.machines[decl.name] = symbol
        return symbol

    def define_concentrator(self, decl: ConcentratorDecl) -> ConcentratorSymbol:
        if decl.name in self.concentrators:
            raise DefinitionError(f"concentrador '{decl.name}' ya fue definido")
        self._check_free(decl.name)
        if decl.ports not in VALID_PORT_COUNTS:
            raise DefinitionError(f"número de puertos inválido: {decl.ports}. Debe ser 4, 8 o 16")
        if decl.coaxial_marker is not None and decl.coaxial_marker != 1:
            raise DefinitionError(
                f"marcador de salida coaxial inválido: .{decl.coaxial_marker} en el concentrador '{decl.name}'. "
                "Use .1"
            )
        symbol = ConcentratorSymbol(decl.name, decl.ports, decl.has_coaxial, decl.location)
        self.concentrators[decl.name] = symbol
        return symbol

    def define_coaxial(self, decl: CoaxialDecl) -> CoaxialSymbol:
        if decl.name in self.coaxials:
            raise DefinitionError(f"coaxial '{decl.name}' ya fue definido")
        self._check_free(decl.name)
        if decl.length < MIN_COAXIAL_LENGTH:
            raise DefinitionError(
                f"longitud de cable coaxial inválida: {decl.length}m. "
                f"La longitud mínima según reglas Ethernet es {MIN_COAXIAL_LENGTH}m"
            )
        if decl.length > MAX_COAXIAL_LENGTH:
            raise DefinitionError(
                f"longitud de cable coaxial inválida: {decl.length}m. "
                f"La longitud máxima según reglas Ethernet es {MAX_COAXIAL_LENGTH}m"
            )
        symbol = CoaxialSymbol(decl.name, decl.length, decl.location)
        self.coaxials[decl.name] = symbol
        return symbol

    def define_module(self, name: str, location: Location) -> None:
        if name in self.modules:
            raise DefinitionError(f"módulo '{name}' ya fue definido")
        self.modules[name] = location

    def kind_of(self, name: str) -> ValueType | None:
        """Return the object type bound to *name*, or None if it is undeclared."""
        if name in self.machines:
            return ValueType.MACHINE
        if name in self.concentrators:
            return ValueType.CONCENTRATOR
        if name in self.coaxials:
            return ValueType.COAXIAL
        return None

    def _check_free(self, name: str) -> None:
        if name in self.machines:
            raise DefinitionError(f"el nombre '{name}' ya está en uso por una máquina")
        if name in self.concentrators:
            raise DefinitionError(f"el nombre '{name}' ya está en uso por un concentrador")
        if name in self.coaxials:
            raise DefinitionError(f"el nombre '{name}' ya está en uso por un coaxial")


@dataclass
class AnalysisResult:
    """The symbol table built for a program and the errors found in it."""

    symbols: SymbolTable
    errors: list[SemanticError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def analyze(program: Program) -> AnalysisResult:
    """Perform semantic analysis on a parsed program.

    Checks performed:
    - Duplicate names, within one kind and across machines, concentrators and
      coaxial segments; duplicate module names.
    - Concentrator port counts in {4, 8, 16} and the ``.1`` uplink marker.
    - Coaxial lengths within [3, 500] meters.
    - Each statement argument names an object of an accepted kind, and every
      called module exists.
    - Coordinates, ports and positions are integers; ``si`` conditions and
      logical operands are booleans; relational operands are comparable.
    - Field access uses a valid field of the object's kind; indexed access
      is only ``concentrador.p[i]``.
    - Coaxial taps at literal positions lie within the cable and keep the
      minimum spacing from taps recorded earlier in the program.

    Args:
        program: The parsed program to analyze.

    Returns:
        An :class:`AnalysisResult`; ``result.ok`` is True when no error was
        found.
    """
    return _SemanticAnalyzer(program).analyze()


# ################
# Implementation
# ################

_Decl = TypeVar("_Decl", MachineDecl, ConcentratorDecl, CoaxialDecl)


class _SemanticAnalyzer:
    """Performs semantic analysis on a single Program."""

    def __init__(self, program: Program) -> None:
        self._program = program
        self._symbols = SymbolTable()
        self._errors: list[SemanticError] = []

    def analyze(self) -> AnalysisResult:
        """Run all semantic checks and return the collected result."""
        # 1. Register declarations in source order.
        definitions = self._program.definitions
        for machine in definitions.machines:
            self._define(self._symbols.define_machine, machine, machine.location)
        for concentrator in definitions.concentrators:
            self._define(self._symbols.define_concentrator, concentrator, concentrator.location)
        for coaxial in definitions.coaxials:
            self._define(self._symbols.define_coaxial, coaxial, coaxial.location)

        # 2. Register every module before checking any body.
        for module in self._program.modules:
            try:
                self._symbols.define_module(module.name, module.location)
            except DefinitionError as exc:
                self._error(str(exc), module.location)

        # 3. Check module bodies, then the main block.
        for module in self._program.modules:
            self._check_block(module.body)
        self._check_block(self._program.body)

        return AnalysisResult(self._symbols, self._errors)

    def _define(self, register: Callable[[_Decl], object], decl: _Decl, location: Location) -> None:
        try:
            register(decl)
        except DefinitionError as exc:
            self._error(str(exc), location)

    def _error(self, message: str, location: Location) -> None:
        self._errors.append(SemanticError(message, location))

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _check_block(self, statements: list[Statement]) -> None:
        for stmt in statements:
            self._check_statement(stmt)

    def _check_statement(self, stmt: Statement) -> None:
        if isinstance(stmt, PlaceStmt):
            if self._symbols.kind_of(stmt.object) not in (ValueType.MACHINE, ValueType.CONCENTRATOR):
                self._error(
                    f"objeto '{stmt.object}' no está definido (no es máquina ni concentrador)",
                    stmt.location,
                )
            self._expect_type(stmt.x, ValueType.INT, "la coordenada x")
            self._expect_type(stmt.y, ValueType.INT, "la coordenada y")
        elif isinstance(stmt, PlaceCoaxialStmt):
            self._require_coaxial(stmt.coaxial, stmt.location)
            self._expect_type(stmt.x, ValueType.INT, "la coordenada x")
            self._expect_type(stmt.y, ValueType.INT, "la coordenada y")
        elif isinstance(stmt, AttachCoaxialStmt):
            self._require_coaxial(stmt.coaxial, stmt.location)
            hub = self._require_concentrator(stmt.concentrator, stmt.location)
            if hub is not None and not hub.has_coaxial:
                self._error(f"el concentrador '{hub.name}' no tiene salida para coaxial", stmt.location)
        elif isinstance(stmt, ConnectPortStmt):
            self._require_port_device(stmt.device, stmt.location)
            hub = self._require_concentrator(stmt.concentrator, stmt.location)
            self._expect_type(stmt.port, ValueType.INT, "el puerto")
            if hub is not None and isinstance(stmt.port, NumberLiteral):
                if not 1 <= stmt.port.value <= hub.ports:
                    self._error(
                        f"puerto {stmt.port.value} fuera de rango para el concentrador '{hub.name}' (1 a {hub.ports})",
                        stmt.port.location,
                    )
        elif isinstance(stmt, AssignPortStmt):
            self._require_port_device(stmt.device, stmt.location)
            self._require_concentrator(stmt.concentrator, stmt.location)
        elif isinstance(stmt, CoaxialMachineStmt):
            self._require_machine(stmt.machine, stmt.location)
            cable = self._require_coaxial(stmt.coaxial, stmt.location)
            self._expect_type(stmt.position, ValueType.INT, "la posición")
            if cable is not None and isinstance(stmt.position, NumberLiteral):
                self._check_tap(stmt.machine, cable, stmt.position.value, stmt.location)
        elif isinstance(stmt, AssignCoaxialMachineStmt):
            self._require_machine(stmt.machine, stmt.location)
            self._require_coaxial(stmt.coaxial, stmt.location)
        elif isinstance(stmt, WriteStmt):
            self._type_of(stmt.value)
        elif isinstance(stmt, IfStmt):
            self._expect_type(stmt.condition, ValueType.BOOL, "la condición de 'si'")
            self._check_block(stmt.then_body)
            if stmt.else_body is not None:
                self._check_block(stmt.else_body)
        elif isinstance(stmt, ModuleCall):
            if stmt.name not in self._symbols.modules:
                self._error(f"módulo '{stmt.name}' no está definido", stmt.location)

    def _require_machine(self, name: str, location: Location) -> MachineSymbol | None:
        symbol = self._symbols.machines.get(name)
        if symbol is None:
            self._error(f"máquina '{name}' no está definida", location)
        return symbol

    def _require_concentrator(self, name: str, location: Location) -> ConcentratorSymbol | None:
        symbol = self._symbols.concentrators.get(name)
        if symbol is None:
            self._error(f"concentrador '{name}' no está definido", location)
        return symbol

    def _require_coaxial(self, name: str, location: Location) -> CoaxialSymbol | None:
        symbol = self._symbols.coaxials.get(name)
        if symbol is None:
            self._error(f"coaxial '{name}' no está definido", location)
        return symbol

    def _require_port_device(self, name: str, location: Location) -> None:
        if self._symbols.kind_of(name) is None:
            self._error(
                f"'{name}' no está definido (debe ser una máquina, concentrador o coaxial)",
                location,
            )

    def _check_tap(self, machine: str, cable: CoaxialSymbol, position: int, location: Location) -> None:
        """Check a literal tap position against the cable and the taps recorded so far."""
        if position < 0 or position > cable.length:
            self._error(
                f"posición inválida: {position}m. La posición debe estar entre 0 y {cable.length} "
                f"(longitud del cable '{cable.name}')",
                location,
            )
            return
        for other, other_position in cable.machines:
            distance = abs(position - other_position)
            if other != machine and distance < MIN_SPACING:
                self._error(
                    f"violación de regla Ethernet: la máquina '{machine}' está demasiado cerca ({distance}m) "
                    f"de la máquina '{other}' en posición {other_position}m. "
                    f"La separación mínima es {MIN_SPACING}m",
                    location,
                )
                return
        for symbol in self._symbols.coaxials.values():
            symbol.machines = [tap for tap in symbol.machines if tap[0] != machine]
        cable.machines.append((machine, position))

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _expect_type(self, expr: Expression, expected: ValueType, what: str) -> None:
        actual = self._type_of(expr)
        if not is_compatible(actual, expected):
            self._error(f"{what} debe ser de tipo {expected.value}, se encontró {actual.value}", expr.location)

    def _type_of(self, expr: Expression) -> ValueType:
        if isinstance(expr, NumberLiteral):
            return ValueType.INT
        if isinstance(expr, StringLiteral):
            return ValueType.STRING
        if isinstance(expr, Identifier):
            kind = self._symbols.kind_of(expr.name)
            if kind is None:
                self._error(f"identificador '{expr.name}' no está definido", expr.location)
                return ValueType.UNKNOWN
            return kind
        if isinstance(expr, FieldAccess):
            return self._type_of_field(expr)
        if isinstance(expr, IndexAccess):
            return self._type_of_index(expr)
        if isinstance(expr, RelationalExpr):
            left = self._type_of(expr.left)
            right = self._type_of(expr.right)
            if not is_compatible(left, right):
                self._error(
                    f"no se pueden comparar tipos incompatibles: '{left.value}' {expr.op.value} '{right.value}'",
                    expr.location,
                )
            return ValueType.BOOL
        if isinstance(expr, LogicalExpr):
            for operand in (expr.left, expr.right):
                operand_type = self._type_of(operand)
                if not is_compatible(operand_type, ValueType.BOOL):
                    self._error(
                        f"el operador '{expr.op.value}' requiere operandos booleanos, "
                        f"se encontró {operand_type.value}",
                        operand.location,
                    )
            return ValueType.BOOL
        if isinstance(expr, NotExpr):
            operand_type = self._type_of(expr.operand)
            if not is_compatible(operand_type, ValueType.BOOL):
                self._error(
                    f"el operador '!' requiere un operando booleano, se encontró {operand_type.value}",
                    expr.location,
                )
            return ValueType.BOOL
        raise TypeError(f"Unexpected expression node: {type(expr).__name__}")

    def _type_of_field(self, expr: FieldAccess) -> ValueType:
        kind = self._symbols.kind_of(expr.object)
        if kind == ValueType.CONCENTRATOR:
            if expr.field not in CONCENTRATOR_FIELDS:
                self._error(
                    f"campo '{expr.field}' no existe en concentrador '{expr.object}'. "
                    f"Campos válidos: {', '.join(CONCENTRATOR_FIELDS)}",
                    expr.location,
                )
                return ValueType.UNKNOWN
            return CONCENTRATOR_FIELDS[expr.field]
        if kind == ValueType.COAXIAL:
            if expr.field not in COAXIAL_FIELDS:
                self._error(
                    f"campo '{expr.field}' no existe en coaxial '{expr.object}'. "
                    f"Campos válidos: {', '.join(COAXIAL_FIELDS)}",
                    expr.location,
                )
                return ValueType.UNKNOWN
            return COAXIAL_FIELDS[expr.field]
        self._error(f"objeto '{expr.object}' no está definido o no soporta acceso a campos", expr.location)
        return ValueType.UNKNOWN

    def _type_of_index(self, expr: IndexAccess) -> ValueType:
        self._expect_type(expr.index, ValueType.INT, "el índice")
        owner, _, field_name = expr.object.partition(".")
        if field_name != PORT_ARRAY_FIELD:
            self._error(f"acceso a arreglo inválido: '{expr.object}'", expr.location)
            return ValueType.UNKNOWN
        if owner not in self._symbols.concentrators:
            self._error(f"concentrador '{owner}' no está definido", expr.location)
            return ValueType.UNKNOWN
        return ValueType.BOOL
