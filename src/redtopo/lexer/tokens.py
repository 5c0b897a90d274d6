# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Token kinds and the token record shared by the scanner and the parser."""

from __future__ import annotations

import enum
from dataclasses import dataclass

# ###############
# Public Interface
# ###############


class TokenType(enum.Enum):
    """All token kinds the automaton may produce.

    Automaton specification files refer to these by member name
    (e.g. ``FINAL:IDENTIFICADOR``).
    """

    # Keywords
    PROGRAMA = "programa"
    DEFINE = "define"
    MAQUINAS = "maquinas"
    CONCENTRADORES = "concentradores"
    COAXIAL = "coaxial"
    SEGMENTO = "segmento"
    MODULO = "modulo"
    INICIO = "inicio"
    FIN = "fin"
    SI = "si"
    SINO = "sino"

    # Built-in statements
    COLOCA = "coloca"
    COLOCA_COAXIAL = "colocaCoaxial"
    COLOCA_COAXIAL_CONCENTRADOR = "colocaCoaxialConcentrador"
    UNE_MAQUINA_PUERTO = "uneMaquinaPuerto"
    ASIGNA_PUERTO = "asignaPuerto"
    MAQUINA_COAXIAL = "maquinaCoaxial"
    ASIGNA_MAQUINA_COAXIAL = "asignaMaquinaCoaxial"
    ESCRIBE = "escribe"

    # Directions
    ARRIBA = "arriba"
    ABAJO = "abajo"
    IZQUIERDA = "izquierda"
    DERECHA = "derecha"

    # Relational operators
    IGUAL = "="
    MENOR = "<"
    MAYOR = ">"
    MENOR_IGUAL = "<="
    MAYOR_IGUAL = ">="
    DIFERENTE = "<>"

    # Logical operators
    AND = "&&"
    OR = "||"
    NOT = "!"

    # Delimiters
    COMA = ","
    PUNTO_Y_COMA = ";"
    PUNTO = "."
    PAREN_IZQ = "("
    PAREN_DER = ")"
    CORCHETE_IZQ = "["
    CORCHETE_DER = "]"

    # Literals
    IDENTIFICADOR = "IDENTIFICADOR"
    NUMERO = "NUMERO"
    CADENA = "CADENA"

    # Recognized but never handed to the parser
    WHITESPACE = "WHITESPACE"
    COMMENT = "COMMENT"

    # End of input
    EOF = "EOF"


IGNORED_TOKEN_TYPES: frozenset[TokenType] = frozenset({TokenType.WHITESPACE, TokenType.COMMENT})

RELATIONAL_TOKEN_TYPES: frozenset[TokenType] = frozenset(
    {
        TokenType.IGUAL,
        TokenType.MENOR,
        TokenType.MAYOR,
        TokenType.MENOR_IGUAL,
        TokenType.MAYOR_IGUAL,
        TokenType.DIFERENTE,
    }
)


def describe_kind(kind: TokenType) -> str:
    """Return how a token kind is named in "expected ..." error messages."""
    if kind in _KIND_DESCRIPTIONS:
        return _KIND_DESCRIPTIONS[kind]
    return repr(kind.value)


@dataclass(frozen=True)
class Token:
    """A lexical token with its source location.

    Attributes:
        type: The kind of token.
        lexeme: The exact source text of the token.
        line: 1-based line number where the token starts.
        column: 1-based column number where the token starts.
        length: Number of characters covered by the token.
        value: Literal payload: the integer for NUMERO, the unquoted text for
            CADENA, the name for IDENTIFICADOR, ``None`` for everything else.
    """

    type: TokenType
    lexeme: str
    line: int
    column: int
    length: int
    value: int | str | None = None

    def describe(self) -> str:
        """Return a short human-readable rendering used in error messages."""
        if self.type == TokenType.EOF:
            return "fin de archivo"
        return repr(self.lexeme)


# ################
# Implementation
# ################

_KIND_DESCRIPTIONS: dict[TokenType, str] = {
    TokenType.IDENTIFICADOR: "un identificador",
    TokenType.NUMERO: "un número",
    TokenType.CADENA: "una cadena",
    TokenType.EOF: "el fin de la entrada",
}
