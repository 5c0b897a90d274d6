# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""The enumerated production list of the RedTopo grammar."""

from __future__ import annotations

from redtopo.grammar.symbols import Marker, NonTerminal, Production, Symbol
from redtopo.lexer.tokens import TokenType

# ###############
# Public Interface
# ###############

START_SYMBOL = NonTerminal.PROGRAMA


def productions_for(nonterminal: NonTerminal) -> list[Production]:
    """Return the alternatives of *nonterminal* in production-id order."""
    return [p for p in PRODUCTIONS if p.lhs == nonterminal]


# ################
# Implementation
# ################

_N = NonTerminal
_T = TokenType
_EPS = Marker.EPSILON


def _rules(*rules: tuple[NonTerminal, tuple[Symbol, ...]]) -> tuple[Production, ...]:
    return tuple(Production(index, lhs, rhs) for index, (lhs, rhs) in enumerate(rules, start=1))


PRODUCTIONS: tuple[Production, ...] = _rules(
    # 1
    (
        _N.PROGRAMA,
        (
            _T.PROGRAMA,
            _T.IDENTIFICADOR,
            _T.PUNTO_Y_COMA,
            _N.DEFINICIONES,
            _N.MODULOS,
            _N.BLOQUE_INICIO,
            _T.PUNTO,
        ),
    ),
    # 2-8: definitions
    (_N.DEFINICIONES, (_T.DEFINE, _N.DEFINICION, _N.DEFINICIONES)),
    (_N.DEFINICIONES, (_EPS,)),
    (_N.DEFINICION, (_T.MAQUINAS, _N.LISTA_MAQUINAS, _T.PUNTO_Y_COMA)),
    (_N.DEFINICION, (_T.CONCENTRADORES, _N.LISTA_CONCENTRADORES, _T.PUNTO_Y_COMA)),
    (_N.DEFINICION, (_N.TIPO_COAXIAL, _N.LISTA_COAXIALES, _T.PUNTO_Y_COMA)),
    (_N.TIPO_COAXIAL, (_T.COAXIAL,)),
    (_N.TIPO_COAXIAL, (_T.SEGMENTO,)),
    # 9-11: machine list
    (_N.LISTA_MAQUINAS, (_T.IDENTIFICADOR, _N.LISTA_MAQUINAS_RESTO)),
    (_N.LISTA_MAQUINAS_RESTO, (_T.COMA, _T.IDENTIFICADOR, _N.LISTA_MAQUINAS_RESTO)),
    (_N.LISTA_MAQUINAS_RESTO, (_EPS,)),
    # 12-17: concentrator list
    (_N.LISTA_CONCENTRADORES, (_N.DECL_CONCENTRADOR, _N.LISTA_CONCENTRADORES_RESTO)),
    (_N.LISTA_CONCENTRADORES_RESTO, (_T.COMA, _N.DECL_CONCENTRADOR, _N.LISTA_CONCENTRADORES_RESTO)),
    (_N.LISTA_CONCENTRADORES_RESTO, (_EPS,)),
    (_N.DECL_CONCENTRADOR, (_T.IDENTIFICADOR, _T.IGUAL, _T.NUMERO, _N.OPCION_COAXIAL)),
    (_N.OPCION_COAXIAL, (_T.PUNTO, _T.NUMERO)),
    (_N.OPCION_COAXIAL, (_EPS,)),
    # 18-21: coaxial list
    (_N.LISTA_COAXIALES, (_N.DECL_COAXIAL, _N.LISTA_COAXIALES_RESTO)),
    (_N.LISTA_COAXIALES_RESTO, (_T.COMA, _N.DECL_COAXIAL, _N.LISTA_COAXIALES_RESTO)),
    (_N.LISTA_COAXIALES_RESTO, (_EPS,)),
    (_N.DECL_COAXIAL, (_T.IDENTIFICADOR, _T.IGUAL, _T.NUMERO)),
    # 22-25: modules and blocks
    (_N.MODULOS, (_N.MODULO, _N.MODULOS)),
    (_N.MODULOS, (_EPS,)),
    (_N.MODULO, (_T.MODULO, _T.IDENTIFICADOR, _T.PUNTO_Y_COMA, _N.BLOQUE_INICIO)),
    (_N.BLOQUE_INICIO, (_T.INICIO, _N.SENTENCIAS, _T.FIN)),
    # 26-37: statements
    (_N.SENTENCIAS, (_N.SENTENCIA, _N.SENTENCIAS)),
    (_N.SENTENCIAS, (_EPS,)),
    (_N.SENTENCIA, (_N.SENT_COLOCA,)),
    (_N.SENTENCIA, (_N.SENT_COLOCA_COAXIAL,)),
    (_N.SENTENCIA, (_N.SENT_COLOCA_COAXIAL_CONCENTRADOR,)),
    (_N.SENTENCIA, (_N.SENT_UNE_MAQUINA_PUERTO,)),
    (_N.SENTENCIA, (_N.SENT_ASIGNA_PUERTO,)),
    (_N.SENTENCIA, (_N.SENT_MAQUINA_COAXIAL,)),
    (_N.SENTENCIA, (_N.SENT_ASIGNA_MAQUINA_COAXIAL,)),
    (_N.SENTENCIA, (_N.SENT_ESCRIBE,)),
    (_N.SENTENCIA, (_N.SENT_SI,)),
    (_N.SENTENCIA, (_N.LLAMADA_MODULO,)),
    # 38-45: built-in statements
    (
        _N.SENT_COLOCA,
        (
            _T.COLOCA,
            _T.PAREN_IZQ,
            _T.IDENTIFICADOR,
            _T.COMA,
            _N.EXPRESION,
            _T.COMA,
            _N.EXPRESION,
            _T.PAREN_DER,
            _T.PUNTO_Y_COMA,
        ),
    ),
    (
        _N.SENT_COLOCA_COAXIAL,
        (
            _T.COLOCA_COAXIAL,
            _T.PAREN_IZQ,
            _T.IDENTIFICADOR,
            _T.COMA,
            _N.EXPRESION,
            _T.COMA,
            _N.EXPRESION,
            _T.COMA,
            _N.DIRECCION,
            _T.PAREN_DER,
            _T.PUNTO_Y_COMA,
        ),
    ),
    (
        _N.SENT_COLOCA_COAXIAL_CONCENTRADOR,
        (
            _T.COLOCA_COAXIAL_CONCENTRADOR,
            _T.PAREN_IZQ,
            _T.IDENTIFICADOR,
            _T.COMA,
            _T.IDENTIFICADOR,
            _T.PAREN_DER,
            _T.PUNTO_Y_COMA,
        ),
    ),
    (
        _N.SENT_UNE_MAQUINA_PUERTO,
        (
            _T.UNE_MAQUINA_PUERTO,
            _T.PAREN_IZQ,
            _T.IDENTIFICADOR,
            _T.COMA,
            _T.IDENTIFICADOR,
            _T.COMA,
            _N.EXPRESION,
            _T.PAREN_DER,
            _T.PUNTO_Y_COMA,
        ),
    ),
    (
        _N.SENT_ASIGNA_PUERTO,
        (
            _T.ASIGNA_PUERTO,
            _T.PAREN_IZQ,
            _T.IDENTIFICADOR,
            _T.COMA,
            _T.IDENTIFICADOR,
            _T.PAREN_DER,
            _T.PUNTO_Y_COMA,
        ),
    ),
    (
        _N.SENT_MAQUINA_COAXIAL,
        (
            _T.MAQUINA_COAXIAL,
            _T.PAREN_IZQ,
            _T.IDENTIFICADOR,
            _T.COMA,
            _T.IDENTIFICADOR,
            _T.COMA,
            _N.EXPRESION,
            _T.PAREN_DER,
            _T.PUNTO_Y_COMA,
        ),
    ),
    (
        _N.SENT_ASIGNA_MAQUINA_COAXIAL,
        (
            _T.ASIGNA_MAQUINA_COAXIAL,
            _T.PAREN_IZQ,
            _T.IDENTIFICADOR,
            _T.COMA,
            _T.IDENTIFICADOR,
            _T.PAREN_DER,
            _T.PUNTO_Y_COMA,
        ),
    ),
    (_N.SENT_ESCRIBE, (_T.ESCRIBE, _T.PAREN_IZQ, _N.EXPRESION, _T.PAREN_DER, _T.PUNTO_Y_COMA)),
    # 46-49: conditionals and module calls
    (_N.SENT_SI, (_T.SI, _N.EXPRESION, _T.INICIO, _N.SENTENCIAS, _T.FIN, _N.OPCION_SINO)),
    (_N.OPCION_SINO, (_T.SINO, _T.INICIO, _N.SENTENCIAS, _T.FIN)),
    (_N.OPCION_SINO, (_EPS,)),
    (_N.LLAMADA_MODULO, (_T.IDENTIFICADOR, _T.PUNTO_Y_COMA)),
    # 50-53: directions
    (_N.DIRECCION, (_T.ARRIBA,)),
    (_N.DIRECCION, (_T.ABAJO,)),
    (_N.DIRECCION, (_T.IZQUIERDA,)),
    (_N.DIRECCION, (_T.DERECHA,)),
    # 54-63: expression precedence levels
    (_N.EXPRESION, (_N.EXPRESION_OR,)),
    (_N.EXPRESION_OR, (_N.EXPRESION_AND, _N.EXPRESION_OR_RESTO)),
    (_N.EXPRESION_OR_RESTO, (_T.OR, _N.EXPRESION_AND, _N.EXPRESION_OR_RESTO)),
    (_N.EXPRESION_OR_RESTO, (_EPS,)),
    (_N.EXPRESION_AND, (_N.EXPRESION_RELACIONAL, _N.EXPRESION_AND_RESTO)),
    (_N.EXPRESION_AND_RESTO, (_T.AND, _N.EXPRESION_RELACIONAL, _N.EXPRESION_AND_RESTO)),
    (_N.EXPRESION_AND_RESTO, (_EPS,)),
    (_N.EXPRESION_RELACIONAL, (_N.EXPRESION_NOT, _N.OPCION_RELACIONAL)),
    (_N.OPCION_RELACIONAL, (_N.OPERADOR_RELACIONAL, _N.EXPRESION_NOT)),
    (_N.OPCION_RELACIONAL, (_EPS,)),
    # 64-69: relational operators
    (_N.OPERADOR_RELACIONAL, (_T.IGUAL,)),
    (_N.OPERADOR_RELACIONAL, (_T.MENOR,)),
    (_N.OPERADOR_RELACIONAL, (_T.MAYOR,)),
    (_N.OPERADOR_RELACIONAL, (_T.MENOR_IGUAL,)),
    (_N.OPERADOR_RELACIONAL, (_T.MAYOR_IGUAL,)),
    (_N.OPERADOR_RELACIONAL, (_T.DIFERENTE,)),
    # 70-75: unary and primary expressions
    (_N.EXPRESION_NOT, (_T.NOT, _N.EXPRESION_NOT)),
    (_N.EXPRESION_NOT, (_N.EXPRESION_PRIMARIA,)),
    (_N.EXPRESION_PRIMARIA, (_T.NUMERO,)),
    (_N.EXPRESION_PRIMARIA, (_T.CADENA,)),
    (_N.EXPRESION_PRIMARIA, (_T.IDENTIFICADOR, _N.ACCESOS)),
    (_N.EXPRESION_PRIMARIA, (_T.PAREN_IZQ, _N.EXPRESION, _T.PAREN_DER)),
    # 76-81: field and index access chains
    (_N.ACCESOS, (_N.ACCESO_CAMPO,)),
    (_N.ACCESOS, (_T.CORCHETE_IZQ, _N.EXPRESION, _T.CORCHETE_DER)),
    (_N.ACCESOS, (_EPS,)),
    (_N.ACCESO_CAMPO, (_T.PUNTO, _T.IDENTIFICADOR, _N.ACCESO_ARREGLO)),
    (_N.ACCESO_ARREGLO, (_T.CORCHETE_IZQ, _N.EXPRESION, _T.CORCHETE_DER)),
    (_N.ACCESO_ARREGLO, (_EPS,)),
)
