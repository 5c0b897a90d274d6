# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Unit tests for the RedTopo semantic analysis module."""

import pytest

from redtopo.compiler.parser import parse
from redtopo.compiler.semantic_analysis import (
    AnalysisResult,
    DefinitionError,
    SemanticError,
    SymbolTable,
    analyze,
)
from redtopo.lexer.automaton import load_default_automaton
from redtopo.lexer.scanner import tokenize
from redtopo.model.syntax import ConcentratorDecl, Location, MachineDecl
from redtopo.model.types import ValueType

# ###############
# Test Helpers
# ###############

_AUTOMATON = load_default_automaton()

_DEFINITIONS = (
    "define maquinas a, b; "
    "define concentradores h = 4.1, g = 8; "
    "define coaxial c = 10; "
)


def _analyze(source: str) -> AnalysisResult:
    """Parse source and run semantic analysis."""
    return analyze(parse(tokenize(source, _AUTOMATON)))


def _analyze_body(body: str, definitions: str = _DEFINITIONS, modules: str = "") -> AnalysisResult:
    return _analyze(f"programa t; {definitions} {modules} inicio {body} fin.")


def _messages(errors: list[SemanticError]) -> list[str]:
    """Extract error messages from a list of SemanticError instances."""
    return [e.message for e in errors]


def _assert_clean(body: str, definitions: str = _DEFINITIONS, modules: str = "") -> None:
    """Assert that a program produces no semantic errors."""
    result = _analyze_body(body, definitions, modules)
    assert result.ok, f"Expected no errors but got: {_messages(result.errors)}"


def _assert_error(body: str, expected_fragment: str, definitions: str = _DEFINITIONS, modules: str = "") -> None:
    """Assert that some semantic error contains expected_fragment."""
    messages = _messages(_analyze_body(body, definitions, modules).errors)
    assert any(expected_fragment in m for m in messages), (
        f"Expected error containing {expected_fragment!r} but got: {messages}"
    )


def _loc() -> Location:
    return Location(line=1, column=1)


# ###############
# Declarations
# ###############


class TestDeclarations:
    def test_valid_declarations(self) -> None:
        result = _analyze_body("")
        assert result.ok
        assert list(result.symbols.machines) == ["a", "b"]
        assert result.symbols.concentrators["h"].has_coaxial
        assert result.symbols.coaxials["c"].length == 10

    @pytest.mark.parametrize("ports", [4, 8, 16])
    def test_valid_port_counts(self, ports: int) -> None:
        result = _analyze_body("", f"define concentradores h = {ports};")
        assert result.ok
        assert result.symbols.concentrators["h"].ports == ports

    def test_six_ports_rejected(self) -> None:
        _assert_error("", "número de puertos inválido: 6. Debe ser 4, 8 o 16", "define concentradores h = 6;")

    def test_invalid_coaxial_marker(self) -> None:
        _assert_error("", "marcador de salida coaxial inválido: .2", "define concentradores h = 4.2;")

    @pytest.mark.parametrize("length,fragment", [(2, "mínima"), (501, "máxima")])
    def test_coaxial_length_bounds(self, length: int, fragment: str) -> None:
        _assert_error("", fragment, f"define coaxial c = {length};")

    @pytest.mark.parametrize("length", [3, 500])
    def test_coaxial_length_limits_are_inclusive(self, length: int) -> None:
        _assert_clean("", f"define coaxial c = {length};")

    def test_duplicate_machine(self) -> None:
        _assert_error("", "máquina 'a' ya fue definida", "define maquinas a, a;")

    def test_name_shared_across_kinds(self) -> None:
        _assert_error("", "el nombre 'x' ya está en uso por una máquina", "define maquinas x; define coaxial x = 5;")

    def test_duplicate_module(self) -> None:
        _assert_error("", "módulo 'm' ya fue definido", modules="modulo m; inicio fin modulo m; inicio fin")

    def test_error_location_is_declaration(self) -> None:
        result = _analyze("programa t;\ndefine concentradores h = 6;\ninicio fin.")
        (error,) = result.errors
        assert (error.location.line, error.location.column) == (2, 23)


class TestSymbolTable:
    def test_define_machine_twice(self) -> None:
        table = SymbolTable()
        table.define_machine(MachineDecl(name="a", location=_loc()))
        with pytest.raises(DefinitionError):
            table.define_machine(MachineDecl(name="a", location=_loc()))

    def test_kind_of(self) -> None:
        table = SymbolTable()
        table.define_concentrator(ConcentratorDecl(name="h", ports=4, location=_loc()))
        assert table.kind_of("h") == ValueType.CONCENTRATOR
        assert table.kind_of("nadie") is None


# ###############
# Statements
# ###############


class TestStatements:
    def test_clean_program(self) -> None:
        _assert_clean(
            "coloca(a, 1, 2); coloca(h, 5, 5); colocaCoaxial(c, 0, 0, abajo); "
            "colocaCoaxialConcentrador(c, h); uneMaquinaPuerto(a, g, 1); asignaPuerto(b, g); "
            "uneMaquinaPuerto(h, g, 8); asignaPuerto(c, g); m;",
            modules="modulo m; inicio fin",
        )

    def test_place_rejects_coaxial(self) -> None:
        _assert_error("coloca(c, 1, 2);", "objeto 'c' no está definido (no es máquina ni concentrador)")

    def test_place_coordinates_must_be_int(self) -> None:
        _assert_error('coloca(a, "x", 2);', "la coordenada x debe ser de tipo Int, se encontró String")

    def test_undefined_port_device(self) -> None:
        _assert_error("asignaPuerto(z, h);", "'z' no está definido (debe ser una máquina, concentrador o coaxial)")

    def test_undefined_concentrator(self) -> None:
        _assert_error("asignaPuerto(a, z);", "concentrador 'z' no está definido")

    def test_literal_port_out_of_range(self) -> None:
        _assert_error("uneMaquinaPuerto(a, h, 5);", "puerto 5 fuera de rango para el concentrador 'h' (1 a 4)")

    def test_attach_requires_coaxial_output(self) -> None:
        _assert_error("colocaCoaxialConcentrador(c, g);", "el concentrador 'g' no tiene salida para coaxial")

    def test_tap_requires_machine(self) -> None:
        _assert_error("asignaMaquinaCoaxial(h, c);", "máquina 'h' no está definida")

    def test_tap_outside_cable(self) -> None:
        _assert_error("maquinaCoaxial(a, c, 11);", "posición inválida: 11m")

    def test_tap_spacing(self) -> None:
        _assert_error(
            "maquinaCoaxial(a, c, 4); maquinaCoaxial(b, c, 6);",
            "la máquina 'b' está demasiado cerca (2m) de la máquina 'a' en posición 4m",
        )

    def test_tap_spacing_of_three_is_allowed(self) -> None:
        _assert_clean("maquinaCoaxial(a, c, 0); maquinaCoaxial(b, c, 3);")

    def test_literal_taps_recorded_on_cable(self) -> None:
        result = _analyze_body("maquinaCoaxial(a, c, 0); maquinaCoaxial(b, c, 6);")
        assert result.symbols.coaxials["c"].machines == [("a", 0), ("b", 6)]

    def test_moved_tap_replaces_previous_position(self) -> None:
        result = _analyze_body("maquinaCoaxial(a, c, 0); maquinaCoaxial(a, c, 2); maquinaCoaxial(b, c, 6);")
        assert result.ok
        assert result.symbols.coaxials["c"].machines == [("a", 2), ("b", 6)]

    def test_undefined_module(self) -> None:
        _assert_error("nadie;", "módulo 'nadie' no está definido")

    def test_module_may_be_called_before_its_definition(self) -> None:
        _assert_clean("", modules="modulo a1; inicio b1; fin modulo b1; inicio fin")

    def test_module_bodies_are_checked(self) -> None:
        _assert_error(
            "", "coaxial 'z' no está definido", modules="modulo m; inicio colocaCoaxial(z, 0, 0, arriba); fin"
        )

    def test_if_condition_must_be_bool(self) -> None:
        _assert_error('si "x" inicio fin', "la condición de 'si' debe ser de tipo Bool, se encontró String")

    def test_int_condition_is_accepted(self) -> None:
        _assert_clean("si h.disponibles inicio fin")

    def test_branches_are_checked(self) -> None:
        _assert_error("si 1 = 1 inicio fin sino inicio nadie; fin", "módulo 'nadie' no está definido")


# ###############
# Expressions
# ###############


class TestExpressions:
    @pytest.mark.parametrize(
        "expression",
        [
            "h.puertos",
            "h.disponibles",
            "h.presente",
            "h.coaxial",
            "c.longitud",
            "c.completo",
            "c.num",
            "c.presente",
            "h.p[1]",
            "g.p[h.puertos]",
            "h.presente && !c.completo || 1 < 2",
        ],
    )
    def test_valid_expressions(self, expression: str) -> None:
        _assert_clean(f"escribe({expression});")

    def test_unknown_concentrator_field(self) -> None:
        _assert_error("escribe(h.longitud);", "campo 'longitud' no existe en concentrador 'h'")

    def test_unknown_coaxial_field(self) -> None:
        _assert_error("escribe(c.puertos);", "campo 'puertos' no existe en coaxial 'c'")

    def test_machines_have_no_fields(self) -> None:
        _assert_error("escribe(a.presente);", "objeto 'a' no está definido o no soporta acceso a campos")

    def test_bare_index_rejected(self) -> None:
        _assert_error("escribe(h[1]);", "acceso a arreglo inválido: 'h'")

    def test_index_on_other_field_rejected(self) -> None:
        _assert_error("escribe(h.puertos[1]);", "acceso a arreglo inválido: 'h.puertos'")

    def test_index_must_be_int(self) -> None:
        _assert_error('escribe(h.p["1"]);', "el índice debe ser de tipo Int, se encontró String")

    def test_undefined_identifier(self) -> None:
        _assert_error("escribe(zeta);", "identificador 'zeta' no está definido")

    def test_incompatible_comparison(self) -> None:
        _assert_error('escribe(1 = "a");', "no se pueden comparar tipos incompatibles: 'Int' = 'String'")

    def test_logical_operands_must_be_bool(self) -> None:
        _assert_error('escribe("a" && 1 = 1);', "el operador '&&' requiere operandos booleanos, se encontró String")

    def test_not_operand_must_be_bool(self) -> None:
        _assert_error('escribe(!"a");', "el operador '!' requiere un operando booleano, se encontró String")


# ###############
# Accumulation
# ###############


class TestAccumulation:
    def test_all_errors_are_reported(self) -> None:
        result = _analyze_body(
            "coloca(zz, 1, 2); escribe(h.nada); nadie;",
            "define concentradores h = 6; define coaxial c = 1;",
        )
        assert not result.ok
        assert len(result.errors) >= 5

    def test_errors_in_source_order_within_block(self) -> None:
        result = _analyze_body("nadie; coloca(zz, 1, 2);")
        assert _messages(result.errors) == [
            "módulo 'nadie' no está definido",
            "objeto 'zz' no está definido (no es máquina ni concentrador)",
        ]
