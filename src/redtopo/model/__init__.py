# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Syntax tree and shared enumerations for RedTopo programs."""

from redtopo.model.syntax import (
    AssignCoaxialMachineStmt,
    AssignPortStmt,
    AttachCoaxialStmt,
    CoaxialDecl,
    CoaxialMachineStmt,
    ConcentratorDecl,
    ConnectPortStmt,
    Definitions,
    Expression,
    FieldAccess,
    Identifier,
    IfStmt,
    IndexAccess,
    Location,
    LogicalExpr,
    MachineDecl,
    Module,
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
    FULL_COAXIAL_MACHINES,
    MAX_COAXIAL_LENGTH,
    MIN_COAXIAL_LENGTH,
    MIN_SPACING,
    PORT_ARRAY_FIELD,
    VALID_PORT_COUNTS,
    Direction,
    LogicOp,
    RelOp,
    ValueType,
    is_compatible,
)

__all__ = [
    # Types
    "Direction",
    "RelOp",
    "LogicOp",
    "ValueType",
    "is_compatible",
    # Ethernet rules
    "VALID_PORT_COUNTS",
    "MIN_COAXIAL_LENGTH",
    "MAX_COAXIAL_LENGTH",
    "MIN_SPACING",
    "FULL_COAXIAL_MACHINES",
    "CONCENTRATOR_FIELDS",
    "COAXIAL_FIELDS",
    "PORT_ARRAY_FIELD",
    # Declarations
    "Location",
    "MachineDecl",
    "ConcentratorDecl",
    "CoaxialDecl",
    "Definitions",
    # Expressions
    "NumberLiteral",
    "StringLiteral",
    "Identifier",
    "FieldAccess",
    "IndexAccess",
    "RelationalExpr",
    "LogicalExpr",
    "NotExpr",
    "Expression",
    # Statements
    "PlaceStmt",
    "PlaceCoaxialStmt",
    "AttachCoaxialStmt",
    "ConnectPortStmt",
    "AssignPortStmt",
    "CoaxialMachineStmt",
    "AssignCoaxialMachineStmt",
    "WriteStmt",
    "IfStmt",
    "ModuleCall",
    "Statement",
    # Program
    "Module",
    "Program",
]
