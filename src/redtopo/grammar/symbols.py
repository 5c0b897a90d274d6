# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Grammar symbols and productions.

A grammar symbol is one of: a terminal (a :class:`TokenType`), a
:class:`NonTerminal`, or one of the two :class:`Marker` values (epsilon and
end-of-input).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from redtopo.lexer.tokens import TokenType

# ###############
# Public Interface
# ###############


class NonTerminal(enum.Enum):
    """Non-terminals of the RedTopo grammar, valued by their display name."""

    PROGRAMA = "Programa"
    DEFINICIONES = "Definiciones"
    DEFINICION = "Definicion"
    TIPO_COAXIAL = "TipoCoaxial"
    LISTA_MAQUINAS = "ListaMaquinas"
    LISTA_MAQUINAS_RESTO = "ListaMaquinas'"
    LISTA_CONCENTRADORES = "ListaConcentradores"
    LISTA_CONCENTRADORES_RESTO = "ListaConcentradores'"
    DECL_CONCENTRADOR = "DeclConcentrador"
    OPCION_COAXIAL = "OpcionCoaxial"
    LISTA_COAXIALES = "ListaCoaxiales"
    LISTA_COAXIALES_RESTO = "ListaCoaxiales'"
    DECL_COAXIAL = "DeclCoaxial"
    MODULOS = "Modulos"
    MODULO = "Modulo"
    BLOQUE_INICIO = "BloqueInicio"
    SENTENCIAS = "Sentencias"
    SENTENCIA = "Sentencia"
    SENT_COLOCA = "SentColoca"
    SENT_COLOCA_COAXIAL = "SentColocaCoaxial"
    SENT_COLOCA_COAXIAL_CONCENTRADOR = "SentColocaCoaxialConcentrador"
    SENT_UNE_MAQUINA_PUERTO = "SentUneMaquinaPuerto"
    SENT_ASIGNA_PUERTO = "SentAsignaPuerto"
    SENT_MAQUINA_COAXIAL = "SentMaquinaCoaxial"
    SENT_ASIGNA_MAQUINA_COAXIAL = "SentAsignaMaquinaCoaxial"
    SENT_ESCRIBE = "SentEscribe"
    SENT_SI = "SentSi"
    OPCION_SINO = "OpcionSino"
    LLAMADA_MODULO = "LlamadaModulo"
    DIRECCION = "Direccion"
    EXPRESION = "Expresion"
    EXPRESION_OR = "ExpresionOr"
    EXPRESION_OR_RESTO = "ExpresionOr'"
    EXPRESION_AND = "ExpresionAnd"
    EXPRESION_AND_RESTO = "ExpresionAnd'"
    EXPRESION_RELACIONAL = "ExpresionRelacional"
    OPCION_RELACIONAL = "OpcionRelacional"
    OPERADOR_RELACIONAL = "OperadorRelacional"
    EXPRESION_NOT = "ExpresionNot"
    EXPRESION_PRIMARIA = "ExpresionPrimaria"
    ACCESOS = "Accesos"
    ACCESO_CAMPO = "AccesoCampo"
    ACCESO_ARREGLO = "AccesoArreglo"


class Marker(enum.Enum):
    """Symbols that are neither terminals nor non-terminals."""

    EPSILON = "ε"
    END = "$"


Symbol = TokenType | NonTerminal | Marker


@dataclass(frozen=True)
class Production:
    """A numbered grammar rule ``lhs → rhs``.

    Epsilon productions have the single-symbol right-hand side
    ``(Marker.EPSILON,)``.
    """

    id: int
    lhs: NonTerminal
    rhs: tuple[Symbol, ...]

    @property
    def is_epsilon(self) -> bool:
        return self.rhs == (Marker.EPSILON,)

    def __str__(self) -> str:
        body = " ".join(symbol_name(s) for s in self.rhs)
        return f"{self.id}: {self.lhs.value} → {body}"


def symbol_name(symbol: Symbol) -> str:
    """Return the display name of a grammar symbol."""
    if isinstance(symbol, TokenType):
        if symbol in _NAMED_TERMINALS:
            return symbol.value
        return repr(symbol.value)
    return symbol.value


def is_terminal(symbol: Symbol) -> bool:
    return isinstance(symbol, TokenType)


# ################
# Implementation
# ################

_NAMED_TERMINALS = frozenset({TokenType.IDENTIFICADOR, TokenType.NUMERO, TokenType.CADENA, TokenType.EOF})
