# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""The RedTopo grammar: symbols, productions, FIRST/FOLLOW sets and the LL(1) table."""

from redtopo.grammar.first_follow import FIRST, FOLLOW, compute_first_follow, first_of_sequence
from redtopo.grammar.ll1_table import GrammarConflictError, LL1Table, build_table, default_table
from redtopo.grammar.productions import PRODUCTIONS, START_SYMBOL, productions_for
from redtopo.grammar.symbols import Marker, NonTerminal, Production, Symbol, is_terminal, symbol_name

__all__ = [
    "FIRST",
    "FOLLOW",
    "compute_first_follow",
    "first_of_sequence",
    "GrammarConflictError",
    "LL1Table",
    "build_table",
    "default_table",
    "PRODUCTIONS",
    "START_SYMBOL",
    "productions_for",
    "Marker",
    "NonTerminal",
    "Production",
    "Symbol",
    "is_terminal",
    "symbol_name",
]
