# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""The compilation pipeline for RedTopo programs.

Stages run strictly in order and each one only sees the output of the
previous one:

1. Scanning with a loaded automaton.
2. Predictive validation against the LL(1) table.
3. Recursive-descent tree construction.
4. Semantic analysis.

A failing stage stops the pipeline and is reported as a :class:`CompilerError`
carrying one diagnostic (lexical, syntax) or all of them (semantic). No
partial token list or tree is handed on. :func:`run_program` then executes a
compiled program on a fresh environment.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from redtopo.compiler.diagnostics import Diagnostic, DiagnosticKind
from redtopo.compiler.parser import ParseError, parse
from redtopo.compiler.predictive import validate
from redtopo.compiler.semantic_analysis import SymbolTable, analyze
from redtopo.grammar.ll1_table import LL1Table, default_table
from redtopo.lexer.automaton import Automaton
from redtopo.lexer.scanner import LexerError, tokenize
from redtopo.lexer.tokens import Token
from redtopo.model.syntax import Program
from redtopo.runtime.environment import Environment
from redtopo.runtime.interpreter import InterpreterError, execute

_LOGGER = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class CompilerError(Exception):
    """Raised when a pipeline stage rejects the program.

    Attributes:
        diagnostics: The errors reported by the failing stage.
    """

    def __init__(self, diagnostics: list[Diagnostic]) -> None:
        super().__init__("\n".join(str(d) for d in diagnostics))
        self.diagnostics = diagnostics


@dataclass(frozen=True)
class CompiledProgram:
    """A program that passed every compile-time check."""

    program: Program
    symbols: SymbolTable


def scan_source(source: str, automaton: Automaton) -> list[Token]:
    """Tokenize *source*, converting a lexical error into a :class:`CompilerError`."""
    try:
        tokens = tokenize(source, automaton)
    except LexerError as exc:
        raise CompilerError([Diagnostic.from_exception(DiagnosticKind.LEXICAL, exc)]) from exc
    _LOGGER.debug("Scanned %d tokens", len(tokens))
    return tokens


def parse_source(source: str, automaton: Automaton, table: LL1Table | None = None) -> Program:
    """Scan and parse *source* with both parser passes.

    The recursive-descent pass only runs once the predictive pass accepted
    the token stream.

    Raises:
        CompilerError: On a lexical or syntax error.
    """
    tokens = scan_source(source, automaton)
    if table is None:
        table = default_table()
    try:
        applied = validate(tokens, table)
        _LOGGER.debug("Predictive validation applied %d productions", applied)
        program = parse(tokens)
    except ParseError as exc:
        raise CompilerError([Diagnostic.from_exception(DiagnosticKind.SYNTAX, exc)]) from exc
    _LOGGER.debug("Parsed program '%s'", program.name)
    return program


def compile_source(source: str, automaton: Automaton, table: LL1Table | None = None) -> CompiledProgram:
    """Run every compile-time stage on *source*.

    Raises:
        CompilerError: On a lexical or syntax error, or with every semantic
            error found.
    """
    program = parse_source(source, automaton, table)
    result = analyze(program)
    if not result.ok:
        raise CompilerError(
            [
                Diagnostic(
                    kind=DiagnosticKind.SEMANTIC,
                    message=e.message,
                    line=e.location.line,
                    column=e.location.column,
                    length=e.location.length,
                )
                for e in result.errors
            ]
        )
    _LOGGER.debug("Semantic analysis passed for '%s'", program.name)
    return CompiledProgram(program=program, symbols=result.symbols)


def compile_file(path: Path, automaton: Automaton, table: LL1Table | None = None) -> CompiledProgram:
    """Read a source file and compile it.

    Raises:
        OSError: If the file cannot be read.
        CompilerError: If the program is rejected.
    """
    return compile_source(path.read_text(encoding="utf-8"), automaton, table)


def run_program(compiled: CompiledProgram) -> Environment:
    """Execute a compiled program on a fresh environment.

    Raises:
        CompilerError: With the runtime diagnostic of the failing statement.
    """
    env = Environment.from_symbols(compiled.symbols)
    try:
        execute(compiled.program, env)
    except InterpreterError as exc:
        raise CompilerError([Diagnostic.from_exception(DiagnosticKind.RUNTIME, exc)]) from exc
    _LOGGER.debug("Executed '%s': %d output lines", compiled.program.name, len(env.output))
    return env
