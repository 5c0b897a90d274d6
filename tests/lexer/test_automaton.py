# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for loading automaton specifications."""

from pathlib import Path

import pytest

from redtopo.lexer.automaton import (
    AutomatonSpecError,
    CharClass,
    load_automaton,
    load_automaton_file,
    load_default_automaton,
    parse_char_class,
)
from redtopo.lexer.tokens import TokenType

# ###############
# Test Helpers
# ###############

_MINIMAL = """\
METADATA
initial_state: q0
END_METADATA

STATES
q0
q_id   FINAL:IDENTIFICADOR   # identifiers
q_num  FINAL:NUMERO
END_STATES

TRANSITIONS
q0, ALPHA, q_id
q_id, [a-zA-Z0-9_], q_id
q0, DIGIT, q_num
q_num, DIGIT, q_num
END_TRANSITIONS

KEYWORDS
si, SI
END_KEYWORDS
"""


def _spec_error(text: str) -> AutomatonSpecError:
    with pytest.raises(AutomatonSpecError) as exc_info:
        load_automaton(text)
    return exc_info.value


# ###############
# Character Classes
# ###############


class TestCharClass:
    @pytest.mark.parametrize(
        "spec,inside,outside",
        [
            ("a", "a", "b"),
            (",", ",", ";"),
            ("\\n", "\n", "n"),
            ("\\s", " ", "s"),
            ('\\"', '"', "\\"),
            ("[a-z]", "q", "Q"),
            ("[a-zA-Z_]", "_", "1"),
            ("[0-9]", "7", "a"),
            ("DIGIT", "0", "x"),
            ("ALPHA", "Z", "_"),
            ("ANY_EXCEPT_NEWLINE", "#", "\n"),
            ("NOTNL", "x", "\n"),
        ],
    )
    def test_membership(self, spec: str, inside: str, outside: str) -> None:
        char_class = parse_char_class(spec)
        assert char_class.matches(inside)
        assert not char_class.matches(outside)

    def test_any_matches_newline(self) -> None:
        assert parse_char_class("ANY").matches("\n")

    def test_escape_inside_brackets(self) -> None:
        char_class = parse_char_class("[\\t\\s]")
        assert char_class == CharClass(ranges=(("\t", "\t"), (" ", " ")))

    @pytest.mark.parametrize("spec", ["ab", "\\q", "[z-a]", "[]", "ALPHANUM"])
    def test_invalid_specs(self, spec: str) -> None:
        with pytest.raises(AutomatonSpecError):
            parse_char_class(spec)


# ###############
# Loading
# ###############


class TestLoadAutomaton:
    def test_minimal_spec(self) -> None:
        automaton = load_automaton(_MINIMAL)
        assert automaton.state_names == ("q0", "q_id", "q_num")
        assert automaton.initial_state == 0
        assert automaton.accepts(1) == TokenType.IDENTIFICADOR
        assert automaton.accepts(0) is None
        assert automaton.keywords == {"si": TokenType.SI}
        assert automaton.metadata == {"initial_state": "q0"}

    def test_step_follows_declaration_order(self) -> None:
        text = _MINIMAL.replace("q0, ALPHA, q_id\n", "q0, a, q_num\nq0, ALPHA, q_id\n")
        automaton = load_automaton(text)
        assert automaton.step(0, "a") == 2
        assert automaton.step(0, "b") == 1
        assert automaton.step(0, "%") is None

    def test_keywords_are_case_insensitive(self) -> None:
        automaton = load_automaton(_MINIMAL)
        assert automaton.classify_word("SI") == TokenType.SI
        assert automaton.classify_word("sin") is None

    def test_missing_initial_state(self) -> None:
        error = _spec_error(_MINIMAL.replace("initial_state: q0", "name: x"))
        assert "initial_state" in error.message

    def test_unknown_initial_state(self) -> None:
        error = _spec_error(_MINIMAL.replace("initial_state: q0", "initial_state: nowhere"))
        assert "nowhere" in error.message

    def test_unknown_token_kind_reports_line(self) -> None:
        error = _spec_error(_MINIMAL.replace("FINAL:NUMERO", "FINAL:NUMBER"))
        assert error.line == 8
        assert "NUMBER" in error.message

    def test_malformed_transition_reports_line(self) -> None:
        error = _spec_error(_MINIMAL.replace("q0, DIGIT, q_num", "q0 DIGIT q_num"))
        assert error.line == 14

    def test_unknown_section(self) -> None:
        error = _spec_error("RULES\nEND_RULES\n")
        assert error.line == 1

    def test_unterminated_section(self) -> None:
        error = _spec_error(_MINIMAL.replace("END_KEYWORDS\n", ""))
        assert "KEYWORDS" in error.message

    def test_str_includes_line(self) -> None:
        error = _spec_error("RULES\n")
        assert str(error).startswith("Line 1: ")


class TestDefaultAutomaton:
    def test_loads(self) -> None:
        automaton = load_default_automaton()
        assert automaton.metadata["name"] == "redtopo"
        assert automaton.classify_word("colocaCoaxial") == TokenType.COLOCA_COAXIAL
        assert automaton.classify_word("maquinas") == TokenType.MAQUINAS

    def test_each_call_returns_fresh_value(self) -> None:
        assert load_default_automaton() is not load_default_automaton()

    def test_load_file(self, tmp_path: Path) -> None:
        path = tmp_path / "mini.aut"
        path.write_text(_MINIMAL, encoding="utf-8")
        assert load_automaton_file(path).keywords == {"si": TokenType.SI}

    def test_load_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(AutomatonSpecError, match="not found"):
            load_automaton_file(tmp_path / "missing.aut")
