# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""FIRST and FOLLOW sets of the RedTopo grammar.

The sets are static data: the parse table is built from :data:`FIRST` and
:data:`FOLLOW` as written here. :func:`compute_first_follow` derives both sets
from a production list by fixpoint iteration so the static data can be
checked against the grammar whenever either changes.

Conventions:
    - ``Marker.EPSILON`` in a FIRST set means the non-terminal is nullable.
    - ``TokenType.EOF`` in a FOLLOW set stands for end-of-input (``$``).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from redtopo.grammar.symbols import Marker, NonTerminal, Production, Symbol
from redtopo.lexer.tokens import RELATIONAL_TOKEN_TYPES, TokenType

FirstSet = frozenset[TokenType | Marker]
FollowSet = frozenset[TokenType]

# ###############
# Public Interface
# ###############


def first_of_sequence(
    symbols: Iterable[Symbol],
    first: Mapping[NonTerminal, FirstSet],
) -> FirstSet:
    """Return FIRST of a symbol sequence.

    The result contains ``Marker.EPSILON`` when every symbol of the sequence
    can derive the empty string (including the empty sequence itself).
    """
    result: set[TokenType | Marker] = set()
    for symbol in symbols:
        if symbol == Marker.EPSILON:
            continue
        if isinstance(symbol, TokenType):
            result.add(symbol)
            return frozenset(result)
        if isinstance(symbol, NonTerminal):
            symbol_first = first[symbol]
            result |= symbol_first - {Marker.EPSILON}
            if Marker.EPSILON not in symbol_first:
                return frozenset(result)
        else:
            raise ValueError(f"Unexpected symbol in production body: {symbol!r}")
    result.add(Marker.EPSILON)
    return frozenset(result)


def compute_first_follow(
    productions: Iterable[Production],
    start: NonTerminal,
) -> tuple[dict[NonTerminal, FirstSet], dict[NonTerminal, FollowSet]]:
    """Compute FIRST and FOLLOW for every non-terminal by fixpoint iteration.

    Args:
        productions: The grammar rules.
        start: The start symbol; ``EOF`` is added to its FOLLOW set.

    Returns:
        A ``(first, follow)`` pair keyed by non-terminal.
    """
    rules = list(productions)
    nonterminals = {p.lhs for p in rules}

    first: dict[NonTerminal, set[TokenType | Marker]] = {nt: set() for nt in nonterminals}
    changed = True
    while changed:
        changed = False
        for p in rules:
            body_first = first_of_sequence(p.rhs, _freeze(first))
            before = len(first[p.lhs])
            first[p.lhs] |= body_first
            if len(first[p.lhs]) != before:
                changed = True
    frozen_first = _freeze(first)

    follow: dict[NonTerminal, set[TokenType]] = {nt: set() for nt in nonterminals}
    follow[start].add(TokenType.EOF)
    changed = True
    while changed:
        changed = False
        for p in rules:
            body = [s for s in p.rhs if s != Marker.EPSILON]
            for index, symbol in enumerate(body):
                if not isinstance(symbol, NonTerminal):
                    continue
                trailer = first_of_sequence(body[index + 1 :], frozen_first)
                additions = {t for t in trailer if isinstance(t, TokenType)}
                if Marker.EPSILON in trailer:
                    additions |= follow[p.lhs]
                before = len(follow[symbol])
                follow[symbol] |= additions
                if len(follow[symbol]) != before:
                    changed = True

    return frozen_first, {nt: frozenset(s) for nt, s in follow.items()}


# ################
# Implementation
# ################


def _freeze(sets: Mapping[NonTerminal, set[TokenType | Marker]]) -> dict[NonTerminal, FirstSet]:
    return {nt: frozenset(s) for nt, s in sets.items()}


_N = NonTerminal
_T = TokenType
_EPS = Marker.EPSILON

_EXPRESSION_START = frozenset({_T.NOT, _T.NUMERO, _T.CADENA, _T.IDENTIFICADOR, _T.PAREN_IZQ})
_PRIMARY_START = frozenset({_T.NUMERO, _T.CADENA, _T.IDENTIFICADOR, _T.PAREN_IZQ})
_STATEMENT_START = frozenset(
    {
        _T.COLOCA,
        _T.COLOCA_COAXIAL,
        _T.COLOCA_COAXIAL_CONCENTRADOR,
        _T.UNE_MAQUINA_PUERTO,
        _T.ASIGNA_PUERTO,
        _T.MAQUINA_COAXIAL,
        _T.ASIGNA_MAQUINA_COAXIAL,
        _T.ESCRIBE,
        _T.SI,
        _T.IDENTIFICADOR,
    }
)
_DIRECTIONS = frozenset({_T.ARRIBA, _T.ABAJO, _T.IZQUIERDA, _T.DERECHA})

# Tokens that may follow a complete expression: argument separators, closing
# brackets and the "inicio" after a "si" condition.
_EXPRESSION_FOLLOW = frozenset({_T.PAREN_DER, _T.COMA, _T.CORCHETE_DER, _T.INICIO})
_AND_FOLLOW = _EXPRESSION_FOLLOW | {_T.OR}
_RELATIONAL_FOLLOW = _AND_FOLLOW | {_T.AND}
_OPERAND_FOLLOW = _RELATIONAL_FOLLOW | RELATIONAL_TOKEN_TYPES
_STATEMENT_FOLLOW = _STATEMENT_START | {_T.FIN}


FIRST: dict[NonTerminal, FirstSet] = {
    _N.PROGRAMA: frozenset({_T.PROGRAMA}),
    _N.DEFINICIONES: frozenset({_T.DEFINE, _EPS}),
    _N.DEFINICION: frozenset({_T.MAQUINAS, _T.CONCENTRADORES, _T.COAXIAL, _T.SEGMENTO}),
    _N.TIPO_COAXIAL: frozenset({_T.COAXIAL, _T.SEGMENTO}),
    _N.LISTA_MAQUINAS: frozenset({_T.IDENTIFICADOR}),
    _N.LISTA_MAQUINAS_RESTO: frozenset({_T.COMA, _EPS}),
    _N.LISTA_CONCENTRADORES: frozenset({_T.IDENTIFICADOR}),
    _N.LISTA_CONCENTRADORES_RESTO: frozenset({_T.COMA, _EPS}),
    _N.DECL_CONCENTRADOR: frozenset({_T.IDENTIFICADOR}),
    _N.OPCION_COAXIAL: frozenset({_T.PUNTO, _EPS}),
    _N.LISTA_COAXIALES: frozenset({_T.IDENTIFICADOR}),
    _N.LISTA_COAXIALES_RESTO: frozenset({_T.COMA, _EPS}),
    _N.DECL_COAXIAL: frozenset({_T.IDENTIFICADOR}),
    _N.MODULOS: frozenset({_T.MODULO, _EPS}),
    _N.MODULO: frozenset({_T.MODULO}),
    _N.BLOQUE_INICIO: frozenset({_T.INICIO}),
    _N.SENTENCIAS: _STATEMENT_START | {_EPS},
    _N.SENTENCIA: _STATEMENT_START,
    _N.SENT_COLOCA: frozenset({_T.COLOCA}),
    _N.SENT_COLOCA_COAXIAL: frozenset({_T.COLOCA_COAXIAL}),
    _N.SENT_COLOCA_COAXIAL_CONCENTRADOR: frozenset({_T.COLOCA_COAXIAL_CONCENTRADOR}),
    _N.SENT_UNE_MAQUINA_PUERTO: frozenset({_T.UNE_MAQUINA_PUERTO}),
    _N.SENT_ASIGNA_PUERTO: frozenset({_T.ASIGNA_PUERTO}),
    _N.SENT_MAQUINA_COAXIAL: frozenset({_T.MAQUINA_COAXIAL}),
    _N.SENT_ASIGNA_MAQUINA_COAXIAL: frozenset({_T.ASIGNA_MAQUINA_COAXIAL}),
    _N.SENT_ESCRIBE: frozenset({_T.ESCRIBE}),
    _N.SENT_SI: frozenset({_T.SI}),
    _N.OPCION_SINO: frozenset({_T.SINO, _EPS}),
    _N.LLAMADA_MODULO: frozenset({_T.IDENTIFICADOR}),
    _N.DIRECCION: _DIRECTIONS,
    _N.EXPRESION: _EXPRESSION_START,
    _N.EXPRESION_OR: _EXPRESSION_START,
    _N.EXPRESION_OR_RESTO: frozenset({_T.OR, _EPS}),
    _N.EXPRESION_AND: _EXPRESSION_START,
    _N.EXPRESION_AND_RESTO: frozenset({_T.AND, _EPS}),
    _N.EXPRESION_RELACIONAL: _EXPRESSION_START,
    _N.OPCION_RELACIONAL: RELATIONAL_TOKEN_TYPES | {_EPS},
    _N.OPERADOR_RELACIONAL: RELATIONAL_TOKEN_TYPES,
    _N.EXPRESION_NOT: _EXPRESSION_START,
    _N.EXPRESION_PRIMARIA: _PRIMARY_START,
    _N.ACCESOS: frozenset({_T.PUNTO, _T.CORCHETE_IZQ, _EPS}),
    _N.ACCESO_CAMPO: frozenset({_T.PUNTO}),
    _N.ACCESO_ARREGLO: frozenset({_T.CORCHETE_IZQ, _EPS}),
}

FOLLOW: dict[NonTerminal, FollowSet] = {
    _N.PROGRAMA: frozenset({_T.EOF}),
    _N.DEFINICIONES: frozenset({_T.MODULO, _T.INICIO}),
    _N.DEFINICION: frozenset({_T.DEFINE, _T.MODULO, _T.INICIO}),
    _N.TIPO_COAXIAL: frozenset({_T.IDENTIFICADOR}),
    _N.LISTA_MAQUINAS: frozenset({_T.PUNTO_Y_COMA}),
    _N.LISTA_MAQUINAS_RESTO: frozenset({_T.PUNTO_Y_COMA}),
    _N.LISTA_CONCENTRADORES: frozenset({_T.PUNTO_Y_COMA}),
    _N.LISTA_CONCENTRADORES_RESTO: frozenset({_T.PUNTO_Y_COMA}),
    _N.DECL_CONCENTRADOR: frozenset({_T.COMA, _T.PUNTO_Y_COMA}),
    _N.OPCION_COAXIAL: frozenset({_T.COMA, _T.PUNTO_Y_COMA}),
    _N.LISTA_COAXIALES: frozenset({_T.PUNTO_Y_COMA}),
    _N.LISTA_COAXIALES_RESTO: frozenset({_T.PUNTO_Y_COMA}),
    _N.DECL_COAXIAL: frozenset({_T.COMA, _T.PUNTO_Y_COMA}),
    _N.MODULOS: frozenset({_T.INICIO}),
    _N.MODULO: frozenset({_T.MODULO, _T.INICIO}),
    _N.BLOQUE_INICIO: frozenset({_T.PUNTO, _T.MODULO, _T.INICIO}),
    _N.SENTENCIAS: frozenset({_T.FIN}),
    _N.SENTENCIA: _STATEMENT_FOLLOW,
    _N.SENT_COLOCA: _STATEMENT_FOLLOW,
    _N.SENT_COLOCA_COAXIAL: _STATEMENT_FOLLOW,
    _N.SENT_COLOCA_COAXIAL_CONCENTRADOR: _STATEMENT_FOLLOW,
    _N.SENT_UNE_MAQUINA_PUERTO: _STATEMENT_FOLLOW,
    _N.SENT_ASIGNA_PUERTO: _STATEMENT_FOLLOW,
    _N.SENT_MAQUINA_COAXIAL: _STATEMENT_FOLLOW,
    _N.SENT_ASIGNA_MAQUINA_COAXIAL: _STATEMENT_FOLLOW,
    _N.SENT_ESCRIBE: _STATEMENT_FOLLOW,
    _N.SENT_SI: _STATEMENT_FOLLOW,
    _N.OPCION_SINO: _STATEMENT_FOLLOW,
    _N.LLAMADA_MODULO: _STATEMENT_FOLLOW,
    _N.DIRECCION: frozenset({_T.PAREN_DER}),
    _N.EXPRESION: _EXPRESSION_FOLLOW,
    _N.EXPRESION_OR: _EXPRESSION_FOLLOW,
    _N.EXPRESION_OR_RESTO: _EXPRESSION_FOLLOW,
    _N.EXPRESION_AND: _AND_FOLLOW,
    _N.EXPRESION_AND_RESTO: _AND_FOLLOW,
    _N.EXPRESION_RELACIONAL: _RELATIONAL_FOLLOW,
    _N.OPCION_RELACIONAL: _RELATIONAL_FOLLOW,
    _N.OPERADOR_RELACIONAL: _EXPRESSION_START,
    _N.EXPRESION_NOT: _OPERAND_FOLLOW,
    _N.EXPRESION_PRIMARIA: _OPERAND_FOLLOW,
    _N.ACCESOS: _OPERAND_FOLLOW,
    _N.ACCESO_CAMPO: _OPERAND_FOLLOW,
    _N.ACCESO_ARREGLO: _OPERAND_FOLLOW,
}
