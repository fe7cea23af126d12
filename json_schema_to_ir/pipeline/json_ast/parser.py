"""
Position-aware JSON parser.

Builds the raw syntax tree from JSON text. The standard json module gives
no source positions, so the text is tokenized with a single regular
expression and parsed by recursive descent. Scalar token text is still
decoded with json.loads so escapes and number forms match the standard
library exactly.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass

from .location import Position, Range
from .nodes import ArrayNode, AstNode, IdentifierNode, LiteralNode, ObjectNode, PropertyNode

_STRING = r'"(?:[^"\\\x00-\x1F]|\\.)*"'
_NUMBER = r"-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?"

_TOKEN_RE = re.compile(
    rf"(?P<STRING>{_STRING})|"
    rf"(?P<NUMBER>{_NUMBER})|"
    r"(?P<LITERAL>true|false|null)|"
    r"(?P<PUNCT>[{}\[\]:,])|"
    r"(?P<WHITESPACE>[ \t\r\n]+)"
)

_LITERALS = {"true": True, "false": False, "null": None}


class JsonSyntaxError(ValueError):
    """Raised when the source text is not valid JSON."""

    def __init__(self, message: str, position: Position):
        super().__init__(f"{message} (line {position.line}, column {position.column})")
        self.position = position


@dataclass
class Token:
    kind: str
    text: str
    loc: Range


class JsonAstParser:
    """Parses JSON text into a tree of positioned nodes."""

    def parse(self, text: str) -> AstNode:
        """
        Parse a complete JSON document.

        Args:
            text: The JSON source text

        Returns:
            The root node of the document

        Raises:
            JsonSyntaxError: If the text is not a single valid JSON value
        """
        self._tokens = list(self._lex(text))
        self._index = 0
        self._end = self._end_position(text)

        node = self._parse_value()
        if self._index < len(self._tokens):
            token = self._tokens[self._index]
            raise JsonSyntaxError(f"Unexpected trailing token {token.text!r}", token.loc.start)
        return node

    def _lex(self, text: str):
        line = 1
        line_start = 0
        pos = 0
        while pos < len(text):
            match = _TOKEN_RE.match(text, pos)
            if not match:
                position = Position(line, pos - line_start + 1, pos)
                raise JsonSyntaxError(f"Unexpected character {text[pos]!r}", position)

            kind = match.lastgroup
            value = match.group(kind)
            start = Position(line, pos - line_start + 1, pos)

            if kind == "WHITESPACE":
                newlines = value.count("\n")
                if newlines:
                    line += newlines
                    line_start = pos + value.rindex("\n") + 1
                pos = match.end()
                continue

            pos = match.end()
            end = Position(line, pos - line_start + 1, pos)
            yield Token(kind, value, Range(start, end))

    def _end_position(self, text: str) -> Position:
        line = text.count("\n") + 1
        column = len(text) - (text.rfind("\n") + 1) + 1
        return Position(line, column, len(text))

    def _peek(self) -> Token | None:
        if self._index < len(self._tokens):
            return self._tokens[self._index]
        return None

    def _next(self) -> Token:
        token = self._peek()
        if token is None:
            raise JsonSyntaxError("Unexpected end of input", self._end)
        self._index += 1
        return token

    def _expect(self, text: str) -> Token:
        token = self._next()
        if token.kind != "PUNCT" or token.text != text:
            raise JsonSyntaxError(f"Expected {text!r} but found {token.text!r}", token.loc.start)
        return token

    def _parse_value(self) -> AstNode:
        token = self._next()

        if token.kind == "STRING":
            return LiteralNode(loc=token.loc, value=self._decode_string(token), raw=token.text)
        if token.kind == "NUMBER":
            return LiteralNode(loc=token.loc, value=json.loads(token.text), raw=token.text)
        if token.kind == "LITERAL":
            return LiteralNode(loc=token.loc, value=_LITERALS[token.text], raw=token.text)
        if token.text == "{":
            return self._parse_object(token)
        if token.text == "[":
            return self._parse_array(token)

        raise JsonSyntaxError(f"Unexpected token {token.text!r}", token.loc.start)

    def _parse_object(self, open_token: Token) -> ObjectNode:
        children: list[PropertyNode] = []

        token = self._peek()
        if token is not None and token.text == "}":
            close = self._next()
            return ObjectNode(loc=Range(open_token.loc.start, close.loc.end), children=children)

        while True:
            key_token = self._next()
            if key_token.kind != "STRING":
                raise JsonSyntaxError(f"Expected a string key but found {key_token.text!r}", key_token.loc.start)
            key = IdentifierNode(loc=key_token.loc, value=self._decode_string(key_token), raw=key_token.text)

            self._expect(":")
            value = self._parse_value()
            children.append(PropertyNode(loc=Range(key.loc.start, value.loc.end), key=key, value=value))

            separator = self._next()
            if separator.text == "}":
                return ObjectNode(loc=Range(open_token.loc.start, separator.loc.end), children=children)
            if separator.text != ",":
                raise JsonSyntaxError(f"Expected ',' or '}}' but found {separator.text!r}", separator.loc.start)

    def _parse_array(self, open_token: Token) -> ArrayNode:
        children: list[AstNode] = []

        token = self._peek()
        if token is not None and token.text == "]":
            close = self._next()
            return ArrayNode(loc=Range(open_token.loc.start, close.loc.end), children=children)

        while True:
            children.append(self._parse_value())

            separator = self._next()
            if separator.text == "]":
                return ArrayNode(loc=Range(open_token.loc.start, separator.loc.end), children=children)
            if separator.text != ",":
                raise JsonSyntaxError(f"Expected ',' or ']' but found {separator.text!r}", separator.loc.start)

    def _decode_string(self, token: Token) -> str:
        try:
            return json.loads(token.text)
        except json.JSONDecodeError as e:
            raise JsonSyntaxError(f"Invalid string literal: {e.msg}", token.loc.start) from e


def parse_json(text: str) -> AstNode:
    """Parse JSON text into a positioned syntax tree."""
    return JsonAstParser().parse(text)
