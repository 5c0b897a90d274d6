# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Enumerations and the value type lattice shared by the compiler and the runtime."""

from __future__ import annotations

from enum import Enum

# ###############
# Public Interface
# ###############

# Ethernet rules of the language, shared by the semantic checks and the runtime.
VALID_PORT_COUNTS: tuple[int, ...] = (4, 8, 16)
MIN_COAXIAL_LENGTH = 3
MAX_COAXIAL_LENGTH = 500
MIN_SPACING = 3
FULL_COAXIAL_MACHINES = 10

# Name of the port-occupancy array of a concentrator: ``hub.p[i]``.
PORT_ARRAY_FIELD = "p"


class Direction(Enum):
    """Direction a coaxial segment extends from its placement point."""

    ARRIBA = "arriba"
    ABAJO = "abajo"
    IZQUIERDA = "izquierda"
    DERECHA = "derecha"


class RelOp(Enum):
    """Relational operators."""

    EQ = "="
    LT = "<"
    GT = ">"
    LE = "<="
    GE = ">="
    NE = "<>"


class LogicOp(Enum):
    """Binary logical operators."""

    AND = "&&"
    OR = "||"


class ValueType(Enum):
    """Static types of expressions and names.

    ``UNKNOWN`` is assigned after an error has already been reported and is
    compatible with every other type, so one mistake is not reported twice.
    """

    INT = "Int"
    STRING = "String"
    BOOL = "Bool"
    VOID = "Void"
    MACHINE = "Maquina"
    CONCENTRATOR = "Concentrador"
    COAXIAL = "Coaxial"
    UNKNOWN = "Desconocido"


def is_compatible(left: ValueType, right: ValueType) -> bool:
    """Return True if a value of one type may be used where the other is expected.

    ``Int`` and ``Bool`` coerce into each other; no other cross-kind coercion
    exists.
    """
    if left == ValueType.UNKNOWN or right == ValueType.UNKNOWN:
        return True
    if left == right:
        return True
    return {left, right} == {ValueType.INT, ValueType.BOOL}


# Readable fields per object kind and the type each yields.
CONCENTRATOR_FIELDS: dict[str, ValueType] = {
    "puertos": ValueType.INT,
    "disponibles": ValueType.INT,
    "presente": ValueType.BOOL,
    "coaxial": ValueType.INT,
}

COAXIAL_FIELDS: dict[str, ValueType] = {
    "longitud": ValueType.INT,
    "completo": ValueType.BOOL,
    "num": ValueType.INT,
    "presente": ValueType.BOOL,
}
