# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Maximal-munch scanner driven by an :class:`~redtopo.lexer.automaton.Automaton`.

Converts raw source text into a sequence of tokens for subsequent parsing.
"""

from __future__ import annotations

from redtopo.lexer.automaton import Automaton
from redtopo.lexer.tokens import IGNORED_TOKEN_TYPES, Token, TokenType

# ###############
# Public Interface
# ###############

MAX_NUMBER = 2**31 - 1


class LexerError(Exception):
    """Raised when the scanner cannot form a token.

    Attributes:
        line: 1-based line number of the error.
        column: 1-based column number of the error.
        length: Number of characters the error covers.
    """

    def __init__(self, message: str, line: int, column: int, length: int = 1) -> None:
        super().__init__(f"Line {line}, column {column}: {message}")
        self.message = message
        self.line = line
        self.column = column
        self.length = length


def tokenize(source: str, automaton: Automaton) -> list[Token]:
    """Tokenize source text into a sequence of tokens.

    Whitespace and comments are recognized by the automaton but dropped from
    the result. The final token is always an EOF token.

    Args:
        source: The full text of a program.
        automaton: The loaded lexer automaton.

    Returns:
        A list of Token objects ending with a single EOF token.

    Raises:
        LexerError: On a character no transition accepts, or a number literal
            outside the signed 32-bit range.
    """
    return _Scanner(source, automaton).tokenize()


# ################
# Implementation
# ################

_STRING_ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "\\": "\\",
    '"': '"',
}


class _Scanner:
    """Runs the automaton from each token start to the longest accepted prefix."""

    def __init__(self, source: str, automaton: Automaton) -> None:
        self._source = source
        self._automaton = automaton
        self._pos = 0

    def tokenize(self) -> list[Token]:
        tokens: list[Token] = []
        while self._pos < len(self._source):
            token = self._scan_token()
            if token.type not in IGNORED_TOKEN_TYPES:
                tokens.append(token)
        line, column = self._location(len(self._source))
        tokens.append(Token(TokenType.EOF, "", line, column, 0))
        return tokens

    def _scan_token(self) -> Token:
        start = self._pos
        state = self._automaton.initial_state
        accepted: tuple[int, TokenType] | None = None

        cursor = start
        while cursor < len(self._source):
            next_state = self._automaton.step(state, self._source[cursor])
            if next_state is None:
                break
            state = next_state
            cursor += 1
            kind = self._automaton.accepts(state)
            if kind is not None:
                accepted = (cursor, kind)

        line, column = self._location(start)
        if accepted is None:
            raise LexerError(f"carácter inválido {self._source[start]!r}", line, column)

        end, kind = accepted
        # Rewind to the longest accepted boundary.
        self._pos = end
        lexeme = self._source[start:end]
        return self._make_token(kind, lexeme, line, column)

    def _make_token(self, kind: TokenType, lexeme: str, line: int, column: int) -> Token:
        value: int | str | None = None
        if kind == TokenType.IDENTIFICADOR:
            keyword = self._automaton.classify_word(lexeme)
            if keyword is not None:
                kind = keyword
            else:
                value = lexeme
        elif kind == TokenType.NUMERO:
            value = int(lexeme)
            if value > MAX_NUMBER:
                raise LexerError(f"número fuera de rango: {lexeme}", line, column, len(lexeme))
        elif kind == TokenType.CADENA:
            value = _decode_string(lexeme)
        return Token(kind, lexeme, line, column, len(lexeme), value)

    def _location(self, offset: int) -> tuple[int, int]:
        """Compute the 1-based line and column of *offset* from the start of input."""
        line = self._source.count("\n", 0, offset) + 1
        line_start = self._source.rfind("\n", 0, offset) + 1
        return line, offset - line_start + 1


def _decode_string(lexeme: str) -> str:
    """Strip the surrounding quotes and resolve backslash escapes."""
    body = lexeme[1:-1] if len(lexeme) >= 2 and lexeme[0] == lexeme[-1] == '"' else lexeme
    chars: list[str] = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\" and i + 1 < len(body):
            nxt = body[i + 1]
            chars.append(_STRING_ESCAPES.get(nxt, nxt))
            i += 2
        else:
            chars.append(ch)
            i += 1
    return "".join(chars)
