# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the FIRST/FOLLOW data of the grammar."""

import pytest

from redtopo.grammar.first_follow import FIRST, FOLLOW, compute_first_follow, first_of_sequence
from redtopo.grammar.productions import PRODUCTIONS, START_SYMBOL
from redtopo.grammar.symbols import Marker, NonTerminal, Production
from redtopo.lexer.tokens import TokenType

# ###############
# Static Data
# ###############


class TestStaticData:
    def test_every_nonterminal_has_sets(self) -> None:
        assert set(FIRST) == set(NonTerminal)
        assert set(FOLLOW) == set(NonTerminal)

    def test_static_first_matches_fixpoint(self) -> None:
        first, _ = compute_first_follow(PRODUCTIONS, START_SYMBOL)
        for nonterminal in NonTerminal:
            assert FIRST[nonterminal] == first[nonterminal], nonterminal

    def test_static_follow_matches_fixpoint(self) -> None:
        _, follow = compute_first_follow(PRODUCTIONS, START_SYMBOL)
        for nonterminal in NonTerminal:
            assert FOLLOW[nonterminal] == follow[nonterminal], nonterminal

    def test_program_ends_input(self) -> None:
        assert FOLLOW[NonTerminal.PROGRAMA] == frozenset({TokenType.EOF})

    @pytest.mark.parametrize(
        "nonterminal",
        [
            NonTerminal.DEFINICIONES,
            NonTerminal.MODULOS,
            NonTerminal.SENTENCIAS,
            NonTerminal.OPCION_SINO,
            NonTerminal.ACCESOS,
        ],
    )
    def test_nullable(self, nonterminal: NonTerminal) -> None:
        assert Marker.EPSILON in FIRST[nonterminal]

    def test_statement_start(self) -> None:
        assert TokenType.IDENTIFICADOR in FIRST[NonTerminal.SENTENCIA]
        assert TokenType.SI in FIRST[NonTerminal.SENTENCIA]
        assert Marker.EPSILON not in FIRST[NonTerminal.SENTENCIA]

    def test_condition_is_followed_by_block(self) -> None:
        assert TokenType.INICIO in FOLLOW[NonTerminal.EXPRESION]


# ###############
# Sequences
# ###############


class TestFirstOfSequence:
    def test_empty_sequence_is_nullable(self) -> None:
        assert first_of_sequence((), FIRST) == frozenset({Marker.EPSILON})

    def test_terminal_stops(self) -> None:
        result = first_of_sequence((TokenType.COMA, NonTerminal.SENTENCIAS), FIRST)
        assert result == frozenset({TokenType.COMA})

    def test_nullable_prefix_falls_through(self) -> None:
        result = first_of_sequence((NonTerminal.OPCION_SINO, TokenType.FIN), FIRST)
        assert result == frozenset({TokenType.SINO, TokenType.FIN})


class TestComputeFirstFollow:
    def test_small_grammar(self) -> None:
        # S → A b ; A → a | ε
        n = NonTerminal
        rules = [
            Production(1, n.PROGRAMA, (n.MODULOS, TokenType.PUNTO)),
            Production(2, n.MODULOS, (TokenType.MODULO,)),
            Production(3, n.MODULOS, (Marker.EPSILON,)),
        ]
        first, follow = compute_first_follow(rules, n.PROGRAMA)
        assert first[n.PROGRAMA] == frozenset({TokenType.MODULO, TokenType.PUNTO})
        assert first[n.MODULOS] == frozenset({TokenType.MODULO, Marker.EPSILON})
        assert follow[n.MODULOS] == frozenset({TokenType.PUNTO})
        assert follow[n.PROGRAMA] == frozenset({TokenType.EOF})
