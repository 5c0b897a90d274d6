# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""LL(1) parse table construction and export.

The table maps a ``(non-terminal, token kind)`` pair to exactly one
production. Token kinds carrying a payload (identifiers, numbers, strings)
are keyed by kind only.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from redtopo.grammar.first_follow import FIRST, FOLLOW, FirstSet, FollowSet, first_of_sequence
from redtopo.grammar.productions import PRODUCTIONS
from redtopo.grammar.symbols import Marker, NonTerminal, Production, symbol_name
from redtopo.lexer.tokens import TokenType

# ###############
# Public Interface
# ###############


class GrammarConflictError(Exception):
    """Raised when two different productions claim the same table cell."""

    def __init__(self, nonterminal: NonTerminal, terminal: TokenType, existing: Production, new: Production) -> None:
        super().__init__(
            f"LL(1) conflict at M[{nonterminal.value}, {symbol_name(terminal)}]: "
            f"production {existing.id} and production {new.id}"
        )
        self.nonterminal = nonterminal
        self.terminal = terminal
        self.existing = existing
        self.new = new


class LL1Table:
    """A conflict-free LL(1) parse table.

    Instances are built by :func:`build_table`; cells can only be filled
    through :meth:`add`, which rejects a second production for a cell.
    """

    def __init__(self, productions: Iterable[Production]) -> None:
        self._productions = tuple(productions)
        self._cells: dict[tuple[NonTerminal, TokenType], Production] = {}

    @property
    def productions(self) -> tuple[Production, ...]:
        return self._productions

    def add(self, nonterminal: NonTerminal, terminal: TokenType, production: Production) -> None:
        existing = self._cells.get((nonterminal, terminal))
        if existing is not None and existing.id != production.id:
            raise GrammarConflictError(nonterminal, terminal, existing, production)
        self._cells[(nonterminal, terminal)] = production

    def lookup(self, nonterminal: NonTerminal, terminal: TokenType) -> Production | None:
        """Return the production for the cell, or ``None`` for an error entry."""
        return self._cells.get((nonterminal, terminal))

    def expected(self, nonterminal: NonTerminal) -> list[TokenType]:
        """Return the token kinds with a filled cell in the row of *nonterminal*."""
        return sorted(
            (t for (nt, t) in self._cells if nt == nonterminal),
            key=_terminal_order,
        )

    def cells(self) -> list[tuple[NonTerminal, TokenType, Production]]:
        """Return every filled cell in non-terminal then terminal order."""
        return [
            (nt, t, self._cells[(nt, t)])
            for nt in NonTerminal
            for t in TokenType
            if (nt, t) in self._cells
        ]

    def __len__(self) -> int:
        return len(self._cells)

    def export(self) -> str:
        """Render the productions and the filled cells as a text listing."""
        lines = ["# Productions", ""]
        lines.extend(str(p) for p in self._productions)
        lines.extend(["", "# Table", ""])
        for nonterminal, terminal, production in self.cells():
            lines.append(f"M[{nonterminal.value}, {_terminal_label(terminal)}] = {production}")
        lines.append("")
        return "\n".join(lines)


def build_table(
    productions: Iterable[Production],
    first: Mapping[NonTerminal, FirstSet],
    follow: Mapping[NonTerminal, FollowSet],
) -> LL1Table:
    """Build the LL(1) table from productions and their FIRST/FOLLOW sets.

    For every production ``A → α``, the cell ``M[A, t]`` receives the
    production for each terminal ``t`` in FIRST(α); when α is nullable, also
    for each ``t`` in FOLLOW(A).

    Raises:
        GrammarConflictError: If a cell would hold two different productions.
    """
    rules = tuple(productions)
    table = LL1Table(rules)
    for production in rules:
        body_first = first_of_sequence(production.rhs, first)
        for terminal in body_first:
            if isinstance(terminal, TokenType):
                table.add(production.lhs, terminal, production)
        if Marker.EPSILON in body_first:
            for terminal in follow[production.lhs]:
                table.add(production.lhs, terminal, production)
    return table


def default_table() -> LL1Table:
    """Build the table of the RedTopo grammar from the static sets."""
    return build_table(PRODUCTIONS, FIRST, FOLLOW)


# ################
# Implementation
# ################

_TERMINAL_ORDER = {t: index for index, t in enumerate(TokenType)}


def _terminal_order(terminal: TokenType) -> int:
    return _TERMINAL_ORDER[terminal]


def _terminal_label(terminal: TokenType) -> str:
    if terminal == TokenType.EOF:
        return Marker.END.value
    return symbol_name(terminal)
