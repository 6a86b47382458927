"""Тесты для обработки модификаторов обрезки пробелов."""

from silhouette.scanner import scan_template
from silhouette.tokens import SourceLocation, Token, TokenType, TrimControlToken
from silhouette.whitespace import process_whitespace


def _process(source: str):
    return process_whitespace(scan_template(source))


def _pairs(tokens):
    return [(token.type, token.value) for token in tokens]


class TestProcessWhitespace:

    def test_no_modifiers_keeps_text(self):
        tokens = _process("  a {{ x }} b  ")

        assert _pairs(tokens) == [
            (TokenType.TEXT, "  a "),
            (TokenType.OPEN_TAG, "{{"),
            (TokenType.IDENTIFIER, "x"),
            (TokenType.CLOSE_TAG, "}}"),
            (TokenType.TEXT, " b  "),
            (TokenType.EOF, ""),
        ]

    def test_trim_before_strips_preceding_text(self):
        tokens = _process("Hello \t\n {{- name }}")

        assert tokens[0].type == TokenType.TEXT
        assert tokens[0].value == "Hello"

    def test_trim_after_strips_following_text(self):
        tokens = _process("{{ name -}} \r\n World")

        assert _pairs(tokens)[-2:] == [(TokenType.TEXT, "World"), (TokenType.EOF, "")]

    def test_whitespace_only_text_is_dropped(self):
        tokens = _process("   {{- x -}}   ")

        assert [t.type for t in tokens] == [
            TokenType.OPEN_TAG,
            TokenType.IDENTIFIER,
            TokenType.CLOSE_TAG,
            TokenType.EOF,
        ]

    def test_comment_modifiers(self):
        tokens = _process("a  {{#- note -#}}  b")

        assert _pairs(tokens) == [
            (TokenType.TEXT, "a"),
            (TokenType.OPEN_COMMENT, "{{#"),
            (TokenType.CLOSE_COMMENT, "#}}"),
            (TokenType.TEXT, "b"),
            (TokenType.EOF, ""),
        ]

    def test_only_adjacent_side_is_trimmed(self):
        tokens = _process(" a {{- x }} b ")

        assert tokens[0].value == " a"
        assert tokens[-2].value == " b "

    def test_trimmed_text_keeps_location(self):
        tokens = _process("ab  {{- x }}")

        assert tokens[0].location == SourceLocation(1, 1, 0, 4)

    def test_emits_only_plain_tokens(self):
        tokens = _process("{{- a -}} {{ b }} {{#- c -#}}")

        assert all(type(token) is Token for token in tokens)

    def test_input_is_not_mutated(self):
        raw = scan_template(" x {{- y -}} z ")
        snapshot = list(raw)

        process_whitespace(raw)

        assert raw == snapshot
        assert isinstance(raw[1], TrimControlToken)
        assert raw[0].value == " x "

    def test_empty_input(self):
        assert process_whitespace([]) == []
