# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Automaton-driven lexical analysis for RedTopo programs."""

from redtopo.lexer.automaton import (
    Automaton,
    AutomatonSpecError,
    CharClass,
    load_automaton,
    load_automaton_file,
    load_default_automaton,
    parse_char_class,
)
from redtopo.lexer.scanner import LexerError, tokenize
from redtopo.lexer.tokens import Token, TokenType

__all__ = [
    "Automaton",
    "AutomatonSpecError",
    "CharClass",
    "load_automaton",
    "load_automaton_file",
    "load_default_automaton",
    "parse_char_class",
    "LexerError",
    "tokenize",
    "Token",
    "TokenType",
]
