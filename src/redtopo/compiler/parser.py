# Copyright 2026 RedTopo Contributors
# SPDX-License-Identifier: Apache-2.0

"""Recursive-descent parser for RedTopo programs.

Converts a token stream produced by the scanner into a :class:`Program`
syntax tree. The token stream is expected to have passed the predictive
validator (:mod:`redtopo.compiler.predictive`) first; this parser still
reports its own errors so it can be used on its own.
"""

from __future__ import annotations

from collections.abc import Callable

from redtopo.lexer.tokens import RELATIONAL_TOKEN_TYPES, Token, TokenType, describe_kind
from redtopo.model.syntax import (
    AssignCoaxialMachineStmt,
    AssignPortStmt,
    AttachCoaxialStmt,
    CoaxialDecl,
    CoaxialMachineStmt,
    ConcentratorDecl,
    ConnectPortStmt,
    Definitions,
    Expression,
    FieldAccess,
    Identifier,
    IfStmt,
    IndexAccess,
    Location,
    LogicalExpr,
    MachineDecl,
    Module,
    ModuleCall,
    NotExpr,
    NumberLiteral,
    PlaceCoaxialStmt,
    PlaceStmt,
    Program,
    RelationalExpr,
    Statement,
    StringLiteral,
    WriteStmt,
)
from redtopo.model.types import Direction, LogicOp, RelOp

# ###############
# Public Interface
# ###############

# Reserved words that are also accepted where the grammar matches an
# identifier terminal, so they can be used as field and object names.
FIELD_NAME_KEYWORDS: frozenset[TokenType] = frozenset(
    {
        TokenType.ARRIBA,
        TokenType.ABAJO,
        TokenType.IZQUIERDA,
        TokenType.DERECHA,
        TokenType.COAXIAL,
        TokenType.SEGMENTO,
        TokenType.MAQUINAS,
        TokenType.CONCENTRADORES,
        TokenType.MODULO,
    }
)


class ParseError(Exception):
    """Raised when the token stream is not a syntactically valid program.

    Attributes:
        line: 1-based line number of the error.
        column: 1-based column number of the error.
        length: Number of characters of the offending token.
    """

    def __init__(self, message: str, line: int, column: int, length: int = 1) -> None:
        super().__init__(f"Line {line}, column {column}: {message}")
        self.message = message
        self.line = line
        self.column = column
        self.length = length

    @classmethod
    def at(cls, token: Token, message: str) -> ParseError:
        return cls(message, token.line, token.column, max(token.length, 1))


def location_of(token: Token) -> Location:
    """Return the source location covered by *token*."""
    return Location(line=token.line, column=token.column, length=max(token.length, 1))


def parse(tokens: list[Token]) -> Program:
    """Build the syntax tree of a program from its tokens.

    Args:
        tokens: The scanner output, ending with an EOF token.

    Returns:
        The Program syntax tree.

    Raises:
        ParseError: If the tokens do not form a valid program.
    """
    return _Parser(tokens).parse()


# ################
# Implementation
# ################

_RELATIONAL_OPS: dict[TokenType, RelOp] = {
    TokenType.IGUAL: RelOp.EQ,
    TokenType.MENOR: RelOp.LT,
    TokenType.MAYOR: RelOp.GT,
    TokenType.MENOR_IGUAL: RelOp.LE,
    TokenType.MAYOR_IGUAL: RelOp.GE,
    TokenType.DIFERENTE: RelOp.NE,
}

_DIRECTIONS: dict[TokenType, Direction] = {
    TokenType.ARRIBA: Direction.ARRIBA,
    TokenType.ABAJO: Direction.ABAJO,
    TokenType.IZQUIERDA: Direction.IZQUIERDA,
    TokenType.DERECHA: Direction.DERECHA,
}


class _Parser:
    """Recursive-descent parser for RedTopo token streams."""

    def __init__(self, tokens: list[Token]) -> None:
        if not tokens or tokens[-1].type != TokenType.EOF:
            raise ValueError("token stream must end with an EOF token")
        self._tokens = tokens
        self._pos = 0
        self._statements: dict[TokenType, Callable[[], Statement]] = {
            TokenType.COLOCA: self._parse_place,
            TokenType.COLOCA_COAXIAL: self._parse_place_coaxial,
            TokenType.COLOCA_COAXIAL_CONCENTRADOR: self._parse_attach_coaxial,
            TokenType.UNE_MAQUINA_PUERTO: self._parse_connect_port,
            TokenType.ASIGNA_PUERTO: self._parse_assign_port,
            TokenType.MAQUINA_COAXIAL: self._parse_coaxial_machine,
            TokenType.ASIGNA_MAQUINA_COAXIAL: self._parse_assign_coaxial_machine,
            TokenType.ESCRIBE: self._parse_write,
            TokenType.SI: self._parse_if,
            TokenType.IDENTIFICADOR: self._parse_module_call,
        }

    def parse(self) -> Program:
        """Parse: programa <name> ; definitions modules inicio ... fin ."""
        self._expect(TokenType.PROGRAMA)
        name_tok = self._expect_name()
        self._expect(TokenType.PUNTO_Y_COMA)
        definitions = Definitions()
        while self._check(TokenType.DEFINE):
            self._parse_definition(definitions)
        modules: list[Module] = []
        while self._check(TokenType.MODULO):
            modules.append(self._parse_module())
        body = self._parse_block()
        self._expect(TokenType.PUNTO)
        self._expect(TokenType.EOF)
        return Program(
            name=name_tok.lexeme,
            definitions=definitions,
            modules=modules,
            body=body,
            location=location_of(name_tok),
        )

    # ------------------------------------------------------------------
    # Token access helpers
    # ------------------------------------------------------------------

    def _current(self) -> Token:
        return self._tokens[self._pos]

    def _check(self, *types: TokenType) -> bool:
        return self._current().type in types

    def _advance(self) -> Token:
        """Consume and return the current token, stopping at EOF."""
        tok = self._tokens[self._pos]
        if self._pos < len(self._tokens) - 1:
            self._pos += 1
        return tok

    def _expect(self, *types: TokenType) -> Token:
        """Consume the current token if it matches any of the given types.

        Raises ParseError if the current token does not match.
        """
        tok = self._current()
        if tok.type not in types:
            expected = " o ".join(describe_kind(t) for t in types)
            raise ParseError.at(tok, f"se esperaba {expected}, se encontró {tok.describe()}")
        return self._advance()

    def _expect_name(self) -> Token:
        """Consume an identifier, or a reserved word that doubles as a name."""
        tok = self._current()
        if tok.type != TokenType.IDENTIFICADOR and tok.type not in FIELD_NAME_KEYWORDS:
            raise ParseError.at(tok, f"se esperaba un identificador, se encontró {tok.describe()}")
        return self._advance()

    # ------------------------------------------------------------------
    # Definitions
    # ------------------------------------------------------------------

    def _parse_definition(self, definitions: Definitions) -> None:
        """Parse: define (maquinas | concentradores | coaxial | segmento) <list> ;"""
        self._expect(TokenType.DEFINE)
        tok = self._current()
        if tok.type == TokenType.MAQUINAS:
            self._advance()
            definitions.machines.extend(self._parse_machine_list())
        elif tok.type == TokenType.CONCENTRADORES:
            self._advance()
            definitions.concentrators.append(self._parse_concentrator_decl())
            while self._check(TokenType.COMA):
                self._advance()
                definitions.concentrators.append(self._parse_concentrator_decl())
        elif tok.type in (TokenType.COAXIAL, TokenType.SEGMENTO):
            self._advance()
            definitions.coaxials.append(self._parse_coaxial_decl())
            while self._check(TokenType.COMA):
                self._advance()
                definitions.coaxials.append(self._parse_coaxial_decl())
        else:
            raise ParseError.at(
                tok,
                f"se esperaba 'maquinas', 'concentradores', 'coaxial' o 'segmento', se encontró {tok.describe()}",
            )
        self._expect(TokenType.PUNTO_Y_COMA)

    def _parse_machine_list(self) -> list[MachineDecl]:
        first = self._expect(TokenType.IDENTIFICADOR)
        machines = [MachineDecl(name=first.lexeme, location=location_of(first))]
        while self._check(TokenType.COMA):
            self._advance()
            tok = self._expect_name()
            machines.append(MachineDecl(name=tok.lexeme, location=location_of(tok)))
        return machines

    def _parse_concentrator_decl(self) -> ConcentratorDecl:
        """Parse: <name> = <ports> [. <marker>]"""
        name_tok = self._expect(TokenType.IDENTIFICADOR)
        self._expect(TokenType.IGUAL)
        ports_tok = self._expect(TokenType.NUMERO)
        marker: int | None = None
        if self._check(TokenType.PUNTO):
            self._advance()
            marker_tok = self._expect(TokenType.NUMERO)
            marker = int(marker_tok.value)
        return ConcentratorDecl(
            name=name_tok.lexeme,
            ports=int(ports_tok.value),
            coaxial_marker=marker,
            location=location_of(name_tok),
        )

    def _parse_coaxial_decl(self) -> CoaxialDecl:
        """Parse: <name> = <length>"""
        name_tok = self._expect(TokenType.IDENTIFICADOR)
        self._expect(TokenType.IGUAL)
        length_tok = self._expect(TokenType.NUMERO)
        return CoaxialDecl(name=name_tok.lexeme, length=int(length_tok.value), location=location_of(name_tok))

    # ------------------------------------------------------------------
    # Modules and blocks
    # ------------------------------------------------------------------

    def _parse_module(self) -> Module:
        """Parse: modulo <name> ; inicio ... fin"""
        self._expect(TokenType.MODULO)
        name_tok = self._expect_name()
        self._expect(TokenType.PUNTO_Y_COMA)
        body = self._parse_block()
        return Module(name=name_tok.lexeme, body=body, location=location_of(name_tok))

    def _parse_block(self) -> list[Statement]:
        """Parse: inicio <statement>* fin"""
        self._expect(TokenType.INICIO)
        statements: list[Statement] = []
        while not self._check(TokenType.FIN, TokenType.EOF):
            statements.append(self._parse_statement())
        self._expect(TokenType.FIN)
        return statements

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _parse_statement(self) -> Statement:
        tok = self._current()
        handler = self._statements.get(tok.type)
        if handler is None:
            raise ParseError.at(tok, f"se esperaba una sentencia, se encontró {tok.describe()}")
        return handler()

    def _parse_place(self) -> PlaceStmt:
        """Parse: coloca ( <obj> , <x> , <y> ) ;"""
        tok = self._expect(TokenType.COLOCA)
        self._expect(TokenType.PAREN_IZQ)
        obj = self._expect_name()
        self._expect(TokenType.COMA)
        x = self._parse_expression()
        self._expect(TokenType.COMA)
        y = self._parse_expression()
        self._end_call()
        return PlaceStmt(object=obj.lexeme, x=x, y=y, location=location_of(tok))

    def _parse_place_coaxial(self) -> PlaceCoaxialStmt:
        """Parse: colocaCoaxial ( <cable> , <x> , <y> , <direction> ) ;"""
        tok = self._expect(TokenType.COLOCA_COAXIAL)
        self._expect(TokenType.PAREN_IZQ)
        cable = self._expect_name()
        self._expect(TokenType.COMA)
        x = self._parse_expression()
        self._expect(TokenType.COMA)
        y = self._parse_expression()
        self._expect(TokenType.COMA)
        direction_tok = self._expect(*_DIRECTIONS)
        self._end_call()
        return PlaceCoaxialStmt(
            coaxial=cable.lexeme,
            x=x,
            y=y,
            direction=_DIRECTIONS[direction_tok.type],
            location=location_of(tok),
        )

    def _parse_attach_coaxial(self) -> AttachCoaxialStmt:
        tok = self._expect(TokenType.COLOCA_COAXIAL_CONCENTRADOR)
        cable, hub = self._parse_name_pair()
        return AttachCoaxialStmt(coaxial=cable, concentrator=hub, location=location_of(tok))

    def _parse_connect_port(self) -> ConnectPortStmt:
        """Parse: uneMaquinaPuerto ( <obj> , <hub> , <port> ) ;"""
        tok = self._expect(TokenType.UNE_MAQUINA_PUERTO)
        self._expect(TokenType.PAREN_IZQ)
        device = self._expect_name()
        self._expect(TokenType.COMA)
        hub = self._expect_name()
        self._expect(TokenType.COMA)
        port = self._parse_expression()
        self._end_call()
        return ConnectPortStmt(device=device.lexeme, concentrator=hub.lexeme, port=port, location=location_of(tok))

    def _parse_assign_port(self) -> AssignPortStmt:
        tok = self._expect(TokenType.ASIGNA_PUERTO)
        device, hub = self._parse_name_pair()
        return AssignPortStmt(device=device, concentrator=hub, location=location_of(tok))

    def _parse_coaxial_machine(self) -> CoaxialMachineStmt:
        """Parse: maquinaCoaxial ( <machine> , <cable> , <position> ) ;"""
        tok = self._expect(TokenType.MAQUINA_COAXIAL)
        self._expect(TokenType.PAREN_IZQ)
        machine = self._expect_name()
        self._expect(TokenType.COMA)
        cable = self._expect_name()
        self._expect(TokenType.COMA)
        position = self._parse_expression()
        self._end_call()
        return CoaxialMachineStmt(
            machine=machine.lexeme,
            coaxial=cable.lexeme,
            position=position,
            location=location_of(tok),
        )

    def _parse_assign_coaxial_machine(self) -> AssignCoaxialMachineStmt:
        tok = self._expect(TokenType.ASIGNA_MAQUINA_COAXIAL)
        machine, cable = self._parse_name_pair()
        return AssignCoaxialMachineStmt(machine=machine, coaxial=cable, location=location_of(tok))

    def _parse_write(self) -> WriteStmt:
        tok = self._expect(TokenType.ESCRIBE)
        self._expect(TokenType.PAREN_IZQ)
        value = self._parse_expression()
        self._end_call()
        return WriteStmt(value=value, location=location_of(tok))

    def _parse_if(self) -> IfStmt:
        """Parse: si <cond> inicio ... fin [sino inicio ... fin]"""
        tok = self._expect(TokenType.SI)
        condition = self._parse_expression()
        then_body = self._parse_block()
        else_body: list[Statement] | None = None
        if self._check(TokenType.SINO):
            self._advance()
            else_body = self._parse_block()
        return IfStmt(condition=condition, then_body=then_body, else_body=else_body, location=location_of(tok))

    def _parse_module_call(self) -> ModuleCall:
        tok = self._expect(TokenType.IDENTIFICADOR)
        self._expect(TokenType.PUNTO_Y_COMA)
        return ModuleCall(name=tok.lexeme, location=location_of(tok))

    def _parse_name_pair(self) -> tuple[str, str]:
        """Parse: ( <name> , <name> ) ;"""
        self._expect(TokenType.PAREN_IZQ)
        first = self._expect_name()
        self._expect(TokenType.COMA)
        second = self._expect_name()
        self._end_call()
        return first.lexeme, second.lexeme

    def _end_call(self) -> None:
        self._expect(TokenType.PAREN_DER)
        self._expect(TokenType.PUNTO_Y_COMA)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _parse_expression(self) -> Expression:
        return self._parse_or()

    def _parse_or(self) -> Expression:
        left = self._parse_and()
        while self._check(TokenType.OR):
            op_tok = self._advance()
            right = self._parse_and()
            left = LogicalExpr(op=LogicOp.OR, left=left, right=right, location=location_of(op_tok))
        return left

    def _parse_and(self) -> Expression:
        left = self._parse_relational()
        while self._check(TokenType.AND):
            op_tok = self._advance()
            right = self._parse_relational()
            left = LogicalExpr(op=LogicOp.AND, left=left, right=right, location=location_of(op_tok))
        return left

    def _parse_relational(self) -> Expression:
        """Parse a single, non-associative comparison."""
        left = self._parse_not()
        if self._current().type in RELATIONAL_TOKEN_TYPES:
            op_tok = self._advance()
            right = self._parse_not()
            return RelationalExpr(
                op=_RELATIONAL_OPS[op_tok.type],
                left=left,
                right=right,
                location=location_of(op_tok),
            )
        return left

    def _parse_not(self) -> Expression:
        if self._check(TokenType.NOT):
            tok = self._advance()
            operand = self._parse_not()
            return NotExpr(operand=operand, location=location_of(tok))
        return self._parse_primary()

    def _parse_primary(self) -> Expression:
        tok = self._current()
        if tok.type == TokenType.NUMERO:
            self._advance()
            return NumberLiteral(value=int(tok.value), location=location_of(tok))
        if tok.type == TokenType.CADENA:
            self._advance()
            return StringLiteral(value=str(tok.value), location=location_of(tok))
        if tok.type == TokenType.IDENTIFICADOR:
            self._advance()
            return self._parse_accesses(tok)
        if tok.type == TokenType.PAREN_IZQ:
            self._advance()
            inner = self._parse_expression()
            self._expect(TokenType.PAREN_DER)
            return inner
        raise ParseError.at(tok, f"se esperaba una expresión, se encontró {tok.describe()}")

    def _parse_accesses(self, name_tok: Token) -> Expression:
        """Parse the access chain after an identifier: [.field] [[index]]."""
        name = name_tok.lexeme
        if self._check(TokenType.PUNTO):
            self._advance()
            field_tok = self._expect_name()
            if self._check(TokenType.CORCHETE_IZQ):
                self._advance()
                index = self._parse_expression()
                close = self._expect(TokenType.CORCHETE_DER)
                return IndexAccess(
                    object=f"{name}.{field_tok.lexeme}",
                    index=index,
                    location=_span(name_tok, close),
                )
            return FieldAccess(object=name, field=field_tok.lexeme, location=_span(name_tok, field_tok))
        if self._check(TokenType.CORCHETE_IZQ):
            self._advance()
            index = self._parse_expression()
            close = self._expect(TokenType.CORCHETE_DER)
            return IndexAccess(object=name, index=index, location=_span(name_tok, close))
        return Identifier(name=name, location=location_of(name_tok))


def _span(start: Token, end: Token) -> Location:
    """Return a location from *start* to the end of *end* when both share a line."""
    if start.line != end.line:
        return location_of(start)
    return Location(line=start.line, column=start.column, length=end.column + end.length - start.column)
