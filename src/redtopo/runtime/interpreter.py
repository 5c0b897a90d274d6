# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tree-walking interpreter for analyzed RedTopo programs.

Executes statements in order against an :class:`Environment`. The first
runtime error aborts the execution; nothing after it runs.

Values are plain Python ``int``, ``str`` and ``bool``. Integers and booleans
coerce into each other (``True`` is 1, any nonzero integer is true); strings
never coerce.
"""

from __future__ import annotations

import logging

from redtopo.model.syntax import (
    AssignCoaxialMachineStmt,
    AssignPortStmt,
    AttachCoaxialStmt,
    CoaxialMachineStmt,
    ConnectPortStmt,
    Expression,
    FieldAccess,
    Identifier,
    IfStmt,
    IndexAccess,
    Location,
    LogicalExpr,
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
from redtopo.model.types import MIN_SPACING, PORT_ARRAY_FIELD, LogicOp, RelOp
from redtopo.runtime.environment import (
    Coaxial,
    Concentrator,
    Environment,
    Machine,
    PortConnection,
    TapConnection,
)

_LOGGER = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

Value = int | str | bool

MAX_CALL_DEPTH = 100


class InterpreterError(Exception):
    """Raised when a statement cannot be executed.

    Attributes:
        line: 1-based line number of the failing statement or expression.
        column: 1-based column number.
        length: Number of characters to underline.
    """

    def __init__(self, message: str, line: int, column: int, length: int = 1) -> None:
        super().__init__(f"Line {line}, column {column}: {message}")
        self.message = message
        self.line = line
        self.column = column
        self.length = length

    @classmethod
    def at(cls, location: Location, message: str) -> InterpreterError:
        return cls(message, location.line, location.column, location.length)


def execute(program: Program, env: Environment) -> Environment:
    """Run *program* against *env* and return the mutated environment.

    Modules are registered first, then the main block runs.

    Raises:
        InterpreterError: On the first statement that fails.
    """
    return _Interpreter(env).run(program)


def to_int(value: Value) -> int | None:
    """Coerce a value to an integer, or return None for strings."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    return None


def to_bool(value: Value) -> bool | None:
    """Coerce a value to a boolean, or return None for strings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    return None


def render_value(value: Value) -> str:
    """Render a value the way ``escribe`` prints it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


# ################
# Implementation
# ################


class _Interpreter:
    """Executes statements and evaluates expressions against one environment."""

    def __init__(self, env: Environment) -> None:
        self._env = env
        self._depth = 0

    def run(self, program: Program) -> Environment:
        for module in program.modules:
            self._env.modules[module.name] = module.body
        self._run_block(program.body)
        return self._env

    def _run_block(self, statements: list[Statement]) -> None:
        for stmt in statements:
            _LOGGER.debug("Execute %s at line %d", stmt.kind, stmt.location.line)
            self._execute(stmt)

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _execute(self, stmt: Statement) -> None:
        if isinstance(stmt, PlaceStmt):
            self._place(stmt)
        elif isinstance(stmt, PlaceCoaxialStmt):
            cable = self._coaxial(stmt.coaxial, stmt.location)
            cable.x = self._int(stmt.x, "la coordenada x")
            cable.y = self._int(stmt.y, "la coordenada y")
            cable.direction = stmt.direction
            cable.placed = True
        elif isinstance(stmt, AttachCoaxialStmt):
            hub = self._concentrator(stmt.concentrator, stmt.location)
            if not hub.has_coaxial:
                raise InterpreterError.at(stmt.location, f"el concentrador '{hub.name}' no tiene salida para coaxial")
            cable = self._coaxial(stmt.coaxial, stmt.location)
            hub.coaxial = cable.name
            cable.concentrator = hub.name
        elif isinstance(stmt, ConnectPortStmt):
            port = self._int(stmt.port, "el puerto")
            self._connect(stmt.device, stmt.concentrator, stmt.location, port)
        elif isinstance(stmt, AssignPortStmt):
            self._connect(stmt.device, stmt.concentrator, stmt.location, None)
        elif isinstance(stmt, CoaxialMachineStmt):
            position = self._int(stmt.position, "la posición")
            self._tap(stmt.machine, stmt.coaxial, stmt.location, position)
        elif isinstance(stmt, AssignCoaxialMachineStmt):
            self._tap(stmt.machine, stmt.coaxial, stmt.location, None)
        elif isinstance(stmt, WriteStmt):
            self._env.write(render_value(self._eval(stmt.value)))
        elif isinstance(stmt, IfStmt):
            condition = to_bool(self._eval(stmt.condition))
            if condition is None:
                raise InterpreterError.at(stmt.condition.location, "la condición debe ser booleana")
            if condition:
                self._run_block(stmt.then_body)
            elif stmt.else_body is not None:
                self._run_block(stmt.else_body)
        elif isinstance(stmt, ModuleCall):
            self._call(stmt)

    def _place(self, stmt: PlaceStmt) -> None:
        x = self._int(stmt.x, "la coordenada x")
        y = self._int(stmt.y, "la coordenada y")
        target = self._env.machines.get(stmt.object) or self._env.concentrators.get(stmt.object)
        if target is None:
            raise InterpreterError.at(stmt.location, f"objeto '{stmt.object}' no encontrado")
        target.x = x
        target.y = y
        target.placed = True

    def _connect(self, device: str, hub_name: str, location: Location, port: int | None) -> None:
        """Wire *device* into a port of *hub_name*; the first free port when *port* is None."""
        hub = self._concentrator(hub_name, location)
        if device == hub.name:
            raise InterpreterError.at(location, f"el concentrador '{hub.name}' no puede conectarse a sí mismo")
        record = self._port_device(device, location)
        if port is None:
            port = hub.first_free_port()
            if port is None:
                raise InterpreterError.at(location, f"no hay puertos disponibles en el concentrador '{hub.name}'")
        if not hub.occupy(port):
            raise InterpreterError.at(location, f"no se pudo asignar el puerto {port} del concentrador '{hub.name}'")
        connection = PortConnection(hub.name, port)
        self._unlink(record)
        if isinstance(record, Concentrator):
            record.uplink = connection
        elif isinstance(record, Coaxial):
            record.hub_port = connection
        else:
            record.connection = connection

    def _port_device(self, name: str, location: Location) -> Machine | Concentrator | Coaxial:
        if name in self._env.machines:
            return self._env.machines[name]
        if name in self._env.concentrators:
            return self._env.concentrators[name]
        if name in self._env.coaxials:
            return self._env.coaxials[name]
        raise InterpreterError.at(location, f"objeto '{name}' no encontrado")

    def _tap(self, machine_name: str, cable_name: str, location: Location, position: int | None) -> None:
        """Tap a machine onto a cable at *position*; the first free 3 m step when None."""
        machine = self._env.machines.get(machine_name)
        if machine is None:
            raise InterpreterError.at(location, f"máquina '{machine_name}' no encontrada")
        cable = self._coaxial(cable_name, location)
        if position is None:
            position = _first_free_position(cable, exclude=machine.name)
            if position is None:
                raise InterpreterError.at(location, f"no hay posiciones disponibles en el coaxial '{cable.name}'")
        else:
            if not 0 <= position <= cable.length:
                raise InterpreterError.at(
                    location,
                    f"posición inválida: {position}m. La posición debe estar entre 0 y {cable.length} "
                    f"(longitud del cable '{cable.name}')",
                )
            conflict = cable.conflict_at(position, exclude=machine.name)
            if conflict is not None:
                other, other_position = conflict
                raise InterpreterError.at(
                    location,
                    f"la máquina '{machine_name}' está demasiado cerca ({abs(position - other_position)}m) "
                    f"de la máquina '{other}' en posición {other_position}m del coaxial '{cable.name}'",
                )
        self._unlink(machine)
        cable.add_tap(machine.name, position)
        machine.connection = TapConnection(cable.name, position)

    def _unlink(self, record: Machine | Concentrator | Coaxial) -> None:
        """Release the port or tap *record* currently holds, so rewiring moves it."""
        previous: PortConnection | TapConnection | None
        if isinstance(record, Concentrator):
            previous = record.uplink
        elif isinstance(record, Coaxial):
            previous = record.hub_port
        else:
            previous = record.connection
        if isinstance(previous, PortConnection):
            _LOGGER.debug("Release port %d of %s held by %s", previous.port, previous.concentrator, record.name)
            self._env.concentrators[previous.concentrator].release(previous.port)
        elif isinstance(previous, TapConnection):
            _LOGGER.debug("Remove tap of %s from %s", record.name, previous.coaxial)
            self._env.coaxials[previous.coaxial].remove_tap(record.name)

    def _call(self, stmt: ModuleCall) -> None:
        body = self._env.modules.get(stmt.name)
        if body is None:
            raise InterpreterError.at(stmt.location, f"módulo '{stmt.name}' no encontrado")
        if self._depth >= MAX_CALL_DEPTH:
            raise InterpreterError.at(
                stmt.location,
                f"profundidad máxima de llamadas ({MAX_CALL_DEPTH}) excedida al invocar el módulo '{stmt.name}'",
            )
        self._depth += 1
        try:
            self._run_block(body)
        finally:
            self._depth -= 1

    def _concentrator(self, name: str, location: Location) -> Concentrator:
        hub = self._env.concentrators.get(name)
        if hub is None:
            raise InterpreterError.at(location, f"concentrador '{name}' no encontrado")
        return hub

    def _coaxial(self, name: str, location: Location) -> Coaxial:
        cable = self._env.coaxials.get(name)
        if cable is None:
            raise InterpreterError.at(location, f"coaxial '{name}' no encontrado")
        return cable

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _int(self, expr: Expression, what: str) -> int:
        value = to_int(self._eval(expr))
        if value is None:
            raise InterpreterError.at(expr.location, f"{what} debe ser un entero")
        return value

    def _eval(self, expr: Expression) -> Value:
        if isinstance(expr, NumberLiteral):
            return expr.value
        if isinstance(expr, StringLiteral):
            return expr.value
        if isinstance(expr, Identifier):
            raise InterpreterError.at(expr.location, f"no se puede evaluar el identificador '{expr.name}' como valor")
        if isinstance(expr, FieldAccess):
            return self._eval_field(expr)
        if isinstance(expr, IndexAccess):
            return self._eval_index(expr)
        if isinstance(expr, RelationalExpr):
            return self._eval_relational(expr)
        if isinstance(expr, LogicalExpr):
            # Both operands are always evaluated.
            left = to_bool(self._eval(expr.left))
            right = to_bool(self._eval(expr.right))
            if left is None:
                raise InterpreterError.at(expr.left.location, "el operando izquierdo no es booleano")
            if right is None:
                raise InterpreterError.at(expr.right.location, "el operando derecho no es booleano")
            return left and right if expr.op == LogicOp.AND else left or right
        if isinstance(expr, NotExpr):
            value = self._eval(expr.operand)
            operand = to_bool(value)
            if operand is None:
                raise InterpreterError.at(expr.location, f"no se puede aplicar '!' a {value!r}")
            return not operand
        raise TypeError(f"Unexpected expression node: {type(expr).__name__}")

    def _eval_field(self, expr: FieldAccess) -> Value:
        hub = self._env.concentrators.get(expr.object)
        if hub is not None:
            if expr.field == "puertos":
                return hub.ports
            if expr.field == "disponibles":
                return hub.available
            if expr.field == "presente":
                return hub.placed
            if expr.field == "coaxial":
                return 1 if hub.has_coaxial else 0
            raise InterpreterError.at(expr.location, f"campo '{expr.field}' no válido para concentrador")
        cable = self._env.coaxials.get(expr.object)
        if cable is not None:
            if expr.field == "longitud":
                return cable.length
            if expr.field == "completo":
                return cable.full
            if expr.field == "num":
                return cable.machine_count
            if expr.field == "presente":
                return cable.placed
            raise InterpreterError.at(expr.location, f"campo '{expr.field}' no válido para coaxial")
        raise InterpreterError.at(expr.location, f"objeto '{expr.object}' no encontrado")

    def _eval_index(self, expr: IndexAccess) -> Value:
        index = to_int(self._eval(expr.index))
        if index is None:
            raise InterpreterError.at(expr.index.location, "el índice debe ser entero")
        owner, _, field_name = expr.object.partition(".")
        hub = self._env.concentrators.get(owner)
        if field_name != PORT_ARRAY_FIELD or hub is None:
            raise InterpreterError.at(expr.location, f"acceso a arreglo inválido: '{expr.object}'")
        if not 1 <= index <= hub.ports:
            raise InterpreterError.at(expr.location, f"índice {index} fuera de rango para concentrador '{hub.name}'")
        return hub.occupied[index - 1]

    def _eval_relational(self, expr: RelationalExpr) -> Value:
        left = self._eval(expr.left)
        right = self._eval(expr.right)
        a, b = to_int(left), to_int(right)
        if a is not None and b is not None:
            return _compare(expr.op, a, b)
        if expr.op == RelOp.EQ:
            return render_value(left) == render_value(right)
        if expr.op == RelOp.NE:
            return render_value(left) != render_value(right)
        raise InterpreterError.at(expr.location, f"no se puede comparar {left!r} con {right!r}")


def _compare(op: RelOp, a: int, b: int) -> bool:
    if op == RelOp.EQ:
        return a == b
    if op == RelOp.NE:
        return a != b
    if op == RelOp.LT:
        return a < b
    if op == RelOp.GT:
        return a > b
    if op == RelOp.LE:
        return a <= b
    return a >= b


def _first_free_position(cable: Coaxial, exclude: str | None = None) -> int | None:
    """Return the first multiple of the spacing on *cable* clear of every tap but *exclude*."""
    for position in range(0, cable.length + 1, MIN_SPACING):
        if cable.conflict_at(position, exclude) is None:
            return position
    return None
