# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Deterministic finite automaton driving the scanner.

The automaton is not hard-coded: it is read from a line-oriented
specification with four sections::

    METADATA
    initial_state: q0
    END_METADATA

    STATES
    q0
    q_id    FINAL:IDENTIFICADOR    # identifiers
    END_STATES

    TRANSITIONS
    q0, [a-zA-Z_], q_id
    q_id, [a-zA-Z0-9_], q_id
    END_TRANSITIONS

    KEYWORDS
    programa, PROGRAMA
    END_KEYWORDS

Blank lines and lines starting with ``#`` are ignored everywhere. Transitions
leaving a state are tried in declaration order and the first match wins.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path

from redtopo.lexer.tokens import TokenType

# ###############
# Public Interface
# ###############

DEFAULT_AUTOMATON_RESOURCE = "automaton.aut"


class AutomatonSpecError(Exception):
    """Raised when an automaton specification cannot be loaded.

    Attributes:
        line: 1-based line of the specification where the problem was found,
            or 0 when the problem is not tied to a single line.
    """

    def __init__(self, message: str, line: int = 0) -> None:
        super().__init__(f"Line {line}: {message}" if line else message)
        self.message = message
        self.line = line


@dataclass(frozen=True)
class CharClass:
    """A set of characters a transition can consume.

    Attributes:
        ranges: Inclusive ``(low, high)`` character ranges.
        any_char: Matches every character (subject to *exclude_newline*).
        exclude_newline: When *any_char* is set, ``\\n`` is not matched.
    """

    ranges: tuple[tuple[str, str], ...] = ()
    any_char: bool = False
    exclude_newline: bool = False

    def matches(self, ch: str) -> bool:
        if self.any_char:
            return not (self.exclude_newline and ch == "\n")
        return any(low <= ch <= high for low, high in self.ranges)


@dataclass(frozen=True)
class Transition:
    """One edge of the automaton."""

    source: int
    char_class: CharClass
    target: int


@dataclass(frozen=True)
class Automaton:
    """An immutable DFA plus its token classification tables.

    Attributes:
        initial_state: Id of the start state.
        state_names: State names indexed by state id.
        transitions: Outgoing transitions per state id, in declaration order.
        accepting: Token kind produced by each accepting state.
        keywords: Reserved lexemes overriding the identifier classification.
        metadata: Raw key/value pairs from the METADATA section.
    """

    initial_state: int
    state_names: tuple[str, ...]
    transitions: dict[int, tuple[Transition, ...]]
    accepting: dict[int, TokenType]
    keywords: dict[str, TokenType]
    metadata: dict[str, str] = field(default_factory=dict)

    def step(self, state: int, ch: str) -> int | None:
        """Return the state reached from *state* on *ch*, or None if stuck."""
        for transition in self.transitions.get(state, ()):
            if transition.char_class.matches(ch):
                return transition.target
        return None

    def accepts(self, state: int) -> TokenType | None:
        """Return the token kind accepted in *state*, or None for a non-final state."""
        return self.accepting.get(state)

    def classify_word(self, lexeme: str) -> TokenType | None:
        """Look *lexeme* up in the keyword table.

        Reserved words are case-insensitive; mixed-case function names such as
        ``colocaCoaxial`` are found through the exact-case fallback.
        """
        kind = self.keywords.get(lexeme.lower())
        if kind is None:
            kind = self.keywords.get(lexeme)
        return kind


def parse_char_class(spec: str) -> CharClass:
    """Parse a character-class specification.

    Accepted forms: a single character, an escape (``\\n``, ``\\t``, ``\\r``,
    ``\\s``, ``\\\\``, ``\\"``), a bracketed union of characters and ranges
    (``[a-zA-Z0-9_]``), ``ANY``, ``ANY_EXCEPT_NEWLINE`` (alias ``NOTNL``) and
    the predefined names ``ALPHA``, ``DIGIT`` and ``SPACE``.

    Raises:
        AutomatonSpecError: If *spec* is not a valid class.
    """
    if spec in _NAMED_CLASSES:
        return _NAMED_CLASSES[spec]
    if len(spec) == 1:
        return CharClass(ranges=((spec, spec),))
    if len(spec) == 2 and spec[0] == "\\":
        ch = _unescape(spec[1])
        return CharClass(ranges=((ch, ch),))
    if len(spec) > 2 and spec[0] == "[" and spec[-1] == "]":
        return CharClass(ranges=_parse_bracket_body(spec[1:-1], spec))
    raise AutomatonSpecError(f"clase de caracteres inválida: {spec!r}")


def load_automaton(text: str) -> Automaton:
    """Build an automaton from specification text.

    Args:
        text: The full specification.

    Returns:
        The loaded, immutable automaton.

    Raises:
        AutomatonSpecError: On any malformed section, state, transition,
            keyword or metadata entry.
    """
    return _SpecLoader(text).load()


def load_automaton_file(path: Path) -> Automaton:
    """Read and load an automaton specification file."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise AutomatonSpecError(f"Automaton specification not found: {path}") from None
    except OSError as exc:
        raise AutomatonSpecError(f"Cannot read automaton specification: {exc}") from exc
    return load_automaton(text)


def load_default_automaton() -> Automaton:
    """Load the automaton specification shipped with the package."""
    text = resources.files("redtopo.lexer").joinpath(DEFAULT_AUTOMATON_RESOURCE).read_text(encoding="utf-8")
    return load_automaton(text)


# ################
# Implementation
# ################

_SECTIONS = ("METADATA", "STATES", "TRANSITIONS", "KEYWORDS")

_ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "s": " ",
    "\\": "\\",
    '"': '"',
}

_NAMED_CLASSES: dict[str, CharClass] = {
    "ANY": CharClass(any_char=True),
    "ANY_EXCEPT_NEWLINE": CharClass(any_char=True, exclude_newline=True),
    "NOTNL": CharClass(any_char=True, exclude_newline=True),
    "ALPHA": CharClass(ranges=(("a", "z"), ("A", "Z"))),
    "DIGIT": CharClass(ranges=(("0", "9"),)),
    "SPACE": CharClass(ranges=((" ", " "), ("\t", "\t"), ("\r", "\r"), ("\n", "\n"))),
}

_TRAILING_COMMENT = re.compile(r"\s+#.*$")


def _unescape(ch: str) -> str:
    if ch not in _ESCAPES:
        raise AutomatonSpecError(f"secuencia de escape desconocida: '\\{ch}'")
    return _ESCAPES[ch]


def _parse_bracket_body(body: str, spec: str) -> tuple[tuple[str, str], ...]:
    """Split the inside of ``[...]`` into single characters and ranges."""
    chars: list[str] = []
    i = 0
    while i < len(body):
        if body[i] == "\\" and i + 1 < len(body):
            chars.append(_unescape(body[i + 1]))
            i += 2
        else:
            chars.append(body[i])
            i += 1
    # Escapes are resolved first so that "-" inside an escape never forms a range.
    ranges: list[tuple[str, str]] = []
    j = 0
    while j < len(chars):
        if j + 2 < len(chars) and chars[j + 1] == "-":
            low, high = chars[j], chars[j + 2]
            if low > high:
                raise AutomatonSpecError(f"rango vacío en la clase de caracteres {spec!r}")
            ranges.append((low, high))
            j += 3
        else:
            ranges.append((chars[j], chars[j]))
            j += 1
    if not ranges:
        raise AutomatonSpecError(f"clase de caracteres vacía: {spec!r}")
    return tuple(ranges)


class _SpecLoader:
    """Line-by-line reader for the automaton specification format."""

    def __init__(self, text: str) -> None:
        self._lines = text.splitlines()
        self._state_ids: dict[str, int] = {}
        self._transitions: dict[int, list[Transition]] = {}
        self._accepting: dict[int, TokenType] = {}
        self._keywords: dict[str, TokenType] = {}
        self._metadata: dict[str, str] = {}

    def load(self) -> Automaton:
        section: str | None = None
        section_start = 0
        for number, raw in enumerate(self._lines, start=1):
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            if section is None:
                if line not in _SECTIONS:
                    raise AutomatonSpecError(f"se esperaba el inicio de una sección, se encontró {line!r}", number)
                section = line
                section_start = number
                continue
            if line == f"END_{section}":
                section = None
                continue
            if line in _SECTIONS or line.startswith("END_"):
                raise AutomatonSpecError(f"sección {section} sin cerrar antes de {line!r}", number)
            self._parse_entry(section, line, number)

        if section is not None:
            raise AutomatonSpecError(f"sección {section} sin cerrar", section_start)

        initial_name = self._metadata.get("initial_state")
        if initial_name is None:
            raise AutomatonSpecError("falta 'initial_state' en METADATA")
        if initial_name not in self._state_ids:
            raise AutomatonSpecError(f"estado inicial desconocido: {initial_name!r}")

        return Automaton(
            initial_state=self._state_ids[initial_name],
            state_names=tuple(self._state_ids),
            transitions={state: tuple(edges) for state, edges in self._transitions.items()},
            accepting=dict(self._accepting),
            keywords=dict(self._keywords),
            metadata=dict(self._metadata),
        )

    # ------------------------------------------------------------------
    # Section entries
    # ------------------------------------------------------------------

    def _parse_entry(self, section: str, line: str, number: int) -> None:
        try:
            if section == "METADATA":
                self._parse_metadata(line)
            elif section == "STATES":
                self._parse_state(line)
            elif section == "TRANSITIONS":
                self._parse_transition(line)
            else:
                self._parse_keyword(line)
        except AutomatonSpecError as exc:
            if exc.line:
                raise
            raise AutomatonSpecError(exc.message, number) from None

    def _parse_metadata(self, line: str) -> None:
        key, sep, value = line.partition(":")
        if not sep or not key.strip():
            raise AutomatonSpecError(f"entrada de METADATA inválida: {line!r}")
        self._metadata[key.strip()] = _TRAILING_COMMENT.sub("", value).strip()

    def _parse_state(self, line: str) -> None:
        parts = line.split()
        name = parts[0]
        state = self._intern(name)
        for part in parts[1:]:
            if part.startswith("#"):
                break
            if not part.startswith("FINAL:"):
                raise AutomatonSpecError(f"atributo de estado desconocido: {part!r}")
            self._accepting[state] = _token_type(part[len("FINAL:") :])

    def _parse_transition(self, line: str) -> None:
        line = _TRAILING_COMMENT.sub("", line)
        first = line.find(",")
        last = line.rfind(",")
        if first == -1 or first == last:
            raise AutomatonSpecError(f"transición inválida: {line!r}")
        source = line[:first].strip()
        target = line[last + 1 :].strip()
        # A bare comma as the class leaves ", ," between the outer separators.
        class_spec = line[first + 1 : last].strip()
        if not source or not target or not class_spec:
            raise AutomatonSpecError(f"transición inválida: {line!r}")
        transition = Transition(
            source=self._intern(source),
            char_class=parse_char_class(class_spec),
            target=self._intern(target),
        )
        self._transitions.setdefault(transition.source, []).append(transition)

    def _parse_keyword(self, line: str) -> None:
        line = _TRAILING_COMMENT.sub("", line)
        lexeme, sep, kind = line.partition(",")
        if not sep or not lexeme.strip() or not kind.strip():
            raise AutomatonSpecError(f"palabra reservada inválida: {line!r}")
        self._keywords[lexeme.strip()] = _token_type(kind.strip())

    def _intern(self, name: str) -> int:
        if name not in self._state_ids:
            self._state_ids[name] = len(self._state_ids)
        return self._state_ids[name]


def _token_type(name: str) -> TokenType:
    try:
        return TokenType[name]
    except KeyError:
        raise AutomatonSpecError(f"tipo de token desconocido: {name!r}") from None
