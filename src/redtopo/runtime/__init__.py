# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Execution of analyzed RedTopo programs and snapshots of the resulting network."""

from redtopo.runtime.environment import (
    Coaxial,
    Concentrator,
    Environment,
    Machine,
    PortConnection,
    TapConnection,
)
from redtopo.runtime.interpreter import (
    MAX_CALL_DEPTH,
    InterpreterError,
    Value,
    execute,
    render_value,
    to_bool,
    to_int,
)
from redtopo.runtime.snapshot import (
    SNAPSHOT_SUFFIX,
    CoaxialState,
    ConcentratorState,
    MachineState,
    NetworkSnapshot,
    TapState,
    deserialize,
    read_snapshot,
    serialize,
    take_snapshot,
    write_snapshot,
)

__all__ = [
    # Environment
    "Environment",
    "Machine",
    "Concentrator",
    "Coaxial",
    "PortConnection",
    "TapConnection",
    # Interpreter
    "execute",
    "InterpreterError",
    "MAX_CALL_DEPTH",
    "Value",
    "to_int",
    "to_bool",
    "render_value",
    # Snapshots
    "NetworkSnapshot",
    "MachineState",
    "ConcentratorState",
    "CoaxialState",
    "TapState",
    "take_snapshot",
    "serialize",
    "deserialize",
    "write_snapshot",
    "read_snapshot",
    "SNAPSHOT_SUFFIX",
]
