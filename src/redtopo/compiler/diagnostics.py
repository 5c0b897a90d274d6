# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Location-tagged diagnostics and their caret-style rendering."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum

from yachalk import chalk

# ###############
# Public Interface
# ###############


class DiagnosticKind(Enum):
    """The pipeline stage that reported a diagnostic."""

    LEXICAL = "léxico"
    SYNTAX = "sintáctico"
    SEMANTIC = "semántico"
    RUNTIME = "ejecución"


@dataclass(frozen=True)
class Diagnostic:
    """One error, positioned in the source.

    Attributes:
        kind: The stage that reported it.
        message: Human-readable description.
        line: 1-based line number.
        column: 1-based column number.
        length: Number of characters to underline.
    """

    kind: DiagnosticKind
    message: str
    line: int
    column: int
    length: int = 1

    @classmethod
    def from_exception(cls, kind: DiagnosticKind, exc: Exception) -> Diagnostic:
        """Build a diagnostic from a stage exception carrying a source position."""
        return cls(
            kind=kind,
            message=getattr(exc, "message", str(exc)),
            line=getattr(exc, "line", 0),
            column=getattr(exc, "column", 0),
            length=max(getattr(exc, "length", 1), 1),
        )

    def __str__(self) -> str:
        return f"Line {self.line}, column {self.column}: error {self.kind.value}: {self.message}"


def render(diagnostic: Diagnostic, source: str, filename: str, *, color: bool = True) -> str:
    """Render a diagnostic as a caret report.

    Example (without color)::

        error[semántico]: número de puertos inválido: 6. Debe ser 4, 8 o 16
         --> red.topo:3:23
          |
        3 | define concentradores H = 6;
          |                       ^
    """
    paint = _Palette(color)
    lines = source.splitlines()
    number = str(diagnostic.line)
    gutter = " " * len(number)

    out = [
        f"{paint.error(f'error[{diagnostic.kind.value}]')}: {paint.bold(diagnostic.message)}",
        f"{gutter}{paint.frame('-->')} {filename}:{diagnostic.line}:{diagnostic.column}",
    ]
    if diagnostic.line >= 1:
        text = lines[diagnostic.line - 1] if diagnostic.line <= len(lines) else ""
        underline = "^" + "~" * (max(diagnostic.length, 1) - 1)
        padding = " " * max(diagnostic.column - 1, 0)
        out.append(f"{gutter} {paint.frame('|')}")
        out.append(f"{paint.frame(number)} {paint.frame('|')} {text}")
        out.append(f"{gutter} {paint.frame('|')} {padding}{paint.error(underline)}")
    return "\n".join(out)


def render_all(diagnostics: Iterable[Diagnostic], source: str, filename: str, *, color: bool = True) -> str:
    """Render several diagnostics separated by blank lines."""
    return "\n\n".join(render(d, source, filename, color=color) for d in diagnostics)


# ################
# Implementation
# ################


def _plain(text: str) -> str:
    return text


class _Palette:
    """Color functions, or identity functions when color is off."""

    def __init__(self, color: bool) -> None:
        self.error: Callable[[str], str] = chalk.red if color else _plain
        self.frame: Callable[[str], str] = chalk.blue if color else _plain
        self.bold: Callable[[str], str] = chalk.bold if color else _plain
