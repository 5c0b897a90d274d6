# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Table-driven predictive validation of a token stream.

The validator runs an explicit symbol stack against the LL(1) table and
answers one question: does the token stream belong to the grammar? It builds
nothing. Tree construction is left to :mod:`redtopo.compiler.parser`.
"""

from __future__ import annotations

import logging

from redtopo.compiler.parser import FIELD_NAME_KEYWORDS, ParseError
from redtopo.grammar.ll1_table import LL1Table
from redtopo.grammar.productions import START_SYMBOL
from redtopo.grammar.symbols import Marker, NonTerminal, Symbol
from redtopo.lexer.tokens import Token, TokenType, describe_kind

_LOGGER = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


def validate(tokens: list[Token], table: LL1Table) -> int:
    """Check that *tokens* form a program of the grammar.

    Args:
        tokens: The scanner output, ending with an EOF token.
        table: The LL(1) table to drive the validation.

    Returns:
        The number of productions applied.

    Raises:
        ParseError: At the first token that no stack symbol accepts.
    """
    return _PredictiveValidator(tokens, table).run()


# ################
# Implementation
# ################


class _PredictiveValidator:
    """Stack machine walking a token stream against an LL(1) table."""

    def __init__(self, tokens: list[Token], table: LL1Table) -> None:
        if not tokens or tokens[-1].type != TokenType.EOF:
            raise ValueError("token stream must end with an EOF token")
        self._tokens = tokens
        self._table = table
        self._pos = 0
        self._stack: list[Symbol] = [Marker.END, START_SYMBOL]

    def run(self) -> int:
        applied = 0
        while self._stack:
            top = self._stack.pop()
            token = self._tokens[self._pos]

            if top == Marker.EPSILON:
                continue

            if top == Marker.END:
                if token.type != TokenType.EOF:
                    raise ParseError.at(token, f"se esperaba el fin de la entrada, se encontró {token.describe()}")
                _LOGGER.debug("Accepted after %d productions", applied)
                continue

            if isinstance(top, TokenType):
                if not _matches(top, token):
                    raise ParseError.at(token, f"se esperaba {describe_kind(top)}, se encontró {token.describe()}")
                _LOGGER.debug("Match %s at %d:%d", top.name, token.line, token.column)
                self._pos += 1
                continue

            self._expand(top, token)
            applied += 1
        return applied

    def _expand(self, nonterminal: NonTerminal, token: Token) -> None:
        production = self._table.lookup(nonterminal, token.type)
        if production is None:
            expected = ", ".join(describe_kind(t) for t in self._table.expected(nonterminal))
            raise ParseError.at(
                token,
                f"ninguna producción de {nonterminal.value} aplica a {token.describe()}; "
                f"se esperaba uno de: {expected}",
            )
        _LOGGER.debug("Apply %s", production)
        for symbol in reversed(production.rhs):
            self._stack.append(symbol)


def _matches(expected: TokenType, token: Token) -> bool:
    """Compare by kind; identifiers also accept the field-name keywords."""
    if token.type == expected:
        return True
    return expected == TokenType.IDENTIFICADOR and token.type in FIELD_NAME_KEYWORDS
