"""Tests for the Dhall header parser."""

from __future__ import annotations

from pathlib import Path

import pytest

from treedocs.parsers import DhallHeaderParser, ParseError

PRELUDE_NOT = """\
{-|
@not@ flips the value of a `Bool`
-}
let not
    : Bool → Bool
    = λ(b : Bool) → b == False

let example0 = assert : not True ≡ False

in  not
"""


def _parse(text: str):
    return DhallHeaderParser().parse(Path("/pkg/file.dhall"), text.encode("utf-8"))


def test_parse_splits_line_comment_header_from_expression() -> None:
    parsed = _parse("-- | Docs\n\nlet x = 1 in x\n")
    assert parsed.header == "-- | Docs\n\n"
    assert parsed.document == "let x = 1 in x\n"


def test_parse_handles_nested_block_comments() -> None:
    parsed = _parse("{- outer {- inner -} still outer -}\n{ a = 1 }\n")
    assert parsed.header == "{- outer {- inner -} still outer -}\n"
    assert parsed.document == "{ a = 1 }\n"


def test_parse_accepts_prelude_style_file() -> None:
    parsed = _parse(PRELUDE_NOT)
    assert parsed.header.startswith("{-|")
    assert parsed.document.startswith("let not")


def test_parse_allows_missing_header() -> None:
    parsed = _parse("[ 1, 2, 3 ]")
    assert parsed.header == ""


def test_parse_ignores_punctuation_inside_text_literals() -> None:
    _parse('"it\'s $5; really ) fine"')
    _parse("''\n  don't (worry\n''")
    _parse('"${ "nested } brace" } done"')
    _parse("let `weird label` = 1 in `weird label`")


@pytest.mark.parametrize(
    "text",
    [
        "",
        "-- only a comment\n",
        "{- unterminated comment",
        "{ a = 1",
        "[ 1, 2 ) ",
        ")",
        '"unterminated text',
        "''\nunterminated multi-line",
        "# Title\n\nNot Dhall at all.\n",
    ],
)
def test_parse_rejects_invalid_input(text: str) -> None:
    with pytest.raises(ParseError):
        _parse(text)


def test_parse_rejects_non_utf8_content() -> None:
    with pytest.raises(ParseError):
        DhallHeaderParser().parse(Path("/pkg/image.png"), b"\x89PNG\r\n\x1a\n\xff\xfe")


def test_parse_error_reports_position() -> None:
    with pytest.raises(ParseError) as excinfo:
        _parse("x\n{- open")
    assert excinfo.value.line == 2
    assert excinfo.value.column == 1
    assert str(excinfo.value).startswith("2:1:")


@pytest.mark.parametrize(
    "text",
    [
        "let Natural/double = \\(n : Natural) -> n * 2 in Natural/double 21\n",
        "{ a : Text, b : List Natural }::{ a = \"x\", b = [] : List Natural }\n",
        "< Left : Natural | Right >.Right\n",
        "if True then +1 else -1.5e3\n",
        "toMap { a = 1 } : List { mapKey : Text, mapValue : Natural }\n",
        "merge { A = 0, B = \\(x : Text) -> 1 } u\n",
        "r.{ a, b } // { c = Some x@1 } with d.e = 2\n",
        "forall (a : Type) -> a -> a\n",
        "./Bool/not.dhall sha256:"
        + "0" * 64
        + " ? https://prelude.example.org/Bool/not ? env:NOT as Text\n",
        "''\n  Hello ${Natural/show (List/length Text names)}\n  ''\n",
        "{ x, y.z = 1 }\n",
        "{=}\n",
    ],
)
def test_parse_accepts_dhall_expressions(text: str) -> None:
    parsed = _parse(text)
    assert parsed.header == ""


README = "# Prelude\n\nThe standard library for the language.\n"
LICENSE = (
    "MIT License\n\n"
    "Copyright (c) 2024 Example Org\n\n"
    "Permission is hereby granted, free of charge, to any person obtaining a copy\n"
    "of this software and associated documentation files (the Software), to deal\n"
)
PACKAGE_JSON = '{"name": "x", "version": 1}\n'
GITIGNORE = "docs/\n*.tmp\n"
HTML_PAGE = '<!DOCTYPE html><html lang="en"><head><title>x</title></head></html>\n'
STYLESHEET = "body {\n  margin: 0;\n}\n"


@pytest.mark.parametrize(
    "text",
    [README, LICENSE, PACKAGE_JSON, GITIGNORE, HTML_PAGE, STYLESHEET],
    ids=["readme", "license", "json", "gitignore", "html", "css"],
)
def test_parse_rejects_common_non_dhall_files(text: str) -> None:
    with pytest.raises(ParseError):
        _parse(text)


@pytest.mark.parametrize(
    "text",
    [
        "a.",
        "1 +",
        "[ 1 2 ,, ]",
        "let x = 1",
        "{ if = 1 }",
        "./x sha256:abc",
        "\\(x : Bool) x",
        "a, b",
    ],
)
def test_parse_rejects_malformed_expressions(text: str) -> None:
    with pytest.raises(ParseError):
        _parse(text)
