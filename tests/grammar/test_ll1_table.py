# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the LL(1) parse table."""

from pathlib import Path

import pytest

from redtopo.grammar.first_follow import FIRST, FOLLOW, compute_first_follow
from redtopo.grammar.ll1_table import GrammarConflictError, LL1Table, build_table, default_table
from redtopo.grammar.productions import PRODUCTIONS, START_SYMBOL, productions_for
from redtopo.grammar.symbols import Marker, NonTerminal, Production
from redtopo.lexer.tokens import TokenType

# ###############
# Test Helpers
# ###############


def _production(number: int) -> Production:
    return PRODUCTIONS[number - 1]


# ###############
# Table Contents
# ###############


class TestDefaultTable:
    def test_builds_without_conflict(self) -> None:
        table = default_table()
        assert len(table) > 0
        assert table.productions == PRODUCTIONS

    def test_every_production_is_reachable(self) -> None:
        used = {production.id for _, _, production in default_table().cells()}
        assert used == {p.id for p in PRODUCTIONS}

    def test_matches_table_from_computed_sets(self) -> None:
        first, follow = compute_first_follow(PRODUCTIONS, START_SYMBOL)
        assert build_table(PRODUCTIONS, first, follow).cells() == default_table().cells()

    @pytest.mark.parametrize(
        "nonterminal",
        [
            NonTerminal.EXPRESION_OR_RESTO,
            NonTerminal.EXPRESION_AND_RESTO,
            NonTerminal.OPCION_RELACIONAL,
            NonTerminal.ACCESOS,
            NonTerminal.ACCESO_ARREGLO,
        ],
    )
    def test_expression_tails_not_ended_by_semicolon(self, nonterminal: NonTerminal) -> None:
        assert default_table().lookup(nonterminal, TokenType.PUNTO_Y_COMA) is None

    @pytest.mark.parametrize(
        "nonterminal,terminal,number",
        [
            (NonTerminal.PROGRAMA, TokenType.PROGRAMA, 1),
            (NonTerminal.DEFINICIONES, TokenType.DEFINE, 2),
            (NonTerminal.DEFINICIONES, TokenType.INICIO, 3),
            (NonTerminal.DEFINICIONES, TokenType.MODULO, 3),
            (NonTerminal.DEFINICION, TokenType.SEGMENTO, 6),
            (NonTerminal.OPCION_COAXIAL, TokenType.PUNTO, 16),
            (NonTerminal.OPCION_COAXIAL, TokenType.COMA, 17),
            (NonTerminal.SENTENCIAS, TokenType.FIN, 27),
            (NonTerminal.SENTENCIA, TokenType.IDENTIFICADOR, 37),
            (NonTerminal.OPCION_SINO, TokenType.SINO, 47),
            (NonTerminal.OPCION_SINO, TokenType.ESCRIBE, 48),
            (NonTerminal.EXPRESION_PRIMARIA, TokenType.PAREN_IZQ, 75),
            (NonTerminal.ACCESOS, TokenType.CORCHETE_IZQ, 77),
            (NonTerminal.ACCESOS, TokenType.MENOR, 78),
        ],
    )
    def test_cells(self, nonterminal: NonTerminal, terminal: TokenType, number: int) -> None:
        assert default_table().lookup(nonterminal, terminal) == _production(number)

    def test_error_entry(self) -> None:
        assert default_table().lookup(NonTerminal.PROGRAMA, TokenType.INICIO) is None

    def test_expected_in_token_order(self) -> None:
        expected = default_table().expected(NonTerminal.DIRECCION)
        assert expected == [TokenType.ARRIBA, TokenType.ABAJO, TokenType.IZQUIERDA, TokenType.DERECHA]


class TestConflicts:
    def test_second_production_in_cell_raises(self) -> None:
        table = LL1Table(PRODUCTIONS)
        first, second = productions_for(NonTerminal.TIPO_COAXIAL)
        table.add(NonTerminal.TIPO_COAXIAL, TokenType.COAXIAL, first)
        with pytest.raises(GrammarConflictError) as exc_info:
            table.add(NonTerminal.TIPO_COAXIAL, TokenType.COAXIAL, second)
        assert exc_info.value.existing == first
        assert "TipoCoaxial" in str(exc_info.value)

    def test_same_production_twice_is_allowed(self) -> None:
        table = LL1Table(PRODUCTIONS)
        production = _production(1)
        table.add(NonTerminal.PROGRAMA, TokenType.PROGRAMA, production)
        table.add(NonTerminal.PROGRAMA, TokenType.PROGRAMA, production)
        assert len(table) == 1

    def test_ambiguous_grammar_is_rejected(self) -> None:
        # Two nullable alternatives collide on FOLLOW.
        n = NonTerminal
        rules = [
            Production(1, n.PROGRAMA, (n.MODULOS, TokenType.PUNTO)),
            Production(2, n.MODULOS, (Marker.EPSILON,)),
            Production(3, n.MODULOS, (n.SENTENCIAS,)),
            Production(4, n.SENTENCIAS, (Marker.EPSILON,)),
        ]
        first = {
            n.PROGRAMA: frozenset({TokenType.PUNTO}),
            n.MODULOS: frozenset({Marker.EPSILON}),
            n.SENTENCIAS: frozenset({Marker.EPSILON}),
        }
        follow = {
            n.PROGRAMA: frozenset({TokenType.EOF}),
            n.MODULOS: frozenset({TokenType.PUNTO}),
            n.SENTENCIAS: frozenset({TokenType.PUNTO}),
        }
        with pytest.raises(GrammarConflictError):
            build_table(rules, first, follow)


class TestExport:
    def test_lists_productions_and_cells(self) -> None:
        text = default_table().export()
        assert text.startswith("# Productions")
        assert "# Table" in text
        assert str(_production(81)) in text
        assert "M[Programa, 'programa'] = 1: Programa →" in text

    def test_end_marker_label(self) -> None:
        table = build_table(PRODUCTIONS, FIRST, FOLLOW)
        lines = table.export().splitlines()
        assert not any(", EOF]" in line for line in lines)

    def test_export_can_be_written(self, tmp_path: Path) -> None:
        path = tmp_path / "table.txt"
        path.write_text(default_table().export(), encoding="utf-8")
        assert path.read_text(encoding="utf-8").count("\nM[") == len(default_table())
