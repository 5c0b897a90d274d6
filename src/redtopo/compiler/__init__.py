# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Compiler pipeline for RedTopo programs: validation, parsing, and semantic analysis."""

from redtopo.compiler.build import (
    CompiledProgram,
    CompilerError,
    compile_file,
    compile_source,
    parse_source,
    run_program,
    scan_source,
)
from redtopo.compiler.diagnostics import Diagnostic, DiagnosticKind, render, render_all
from redtopo.compiler.parser import FIELD_NAME_KEYWORDS, ParseError, parse
from redtopo.compiler.predictive import validate
from redtopo.compiler.semantic_analysis import AnalysisResult, SemanticError, SymbolTable, analyze

__all__ = [
    "parse",
    "ParseError",
    "FIELD_NAME_KEYWORDS",
    "validate",
    "analyze",
    "AnalysisResult",
    "SemanticError",
    "SymbolTable",
    "Diagnostic",
    "DiagnosticKind",
    "render",
    "render_all",
    "scan_source",
    "parse_source",
    "compile_source",
    "compile_file",
    "run_program",
    "CompiledProgram",
    "CompilerError",
]
