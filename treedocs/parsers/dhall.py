"""Header extraction and syntax checking for Dhall sources."""

from __future__ import annotations

import string
from pathlib import Path
from typing import Optional, Tuple

from ..models import ParsedSource
from .base import ParseError, SourceParser

_DIGITS = set(string.digits)
_HEX_DIGITS = set(string.hexdigits)
_LABEL_START = set(string.ascii_letters + "_")
_LABEL_CHARS = _LABEL_START | _DIGITS | {"-", "/"}
_PATH_STOP = set(" \t\r\n()[]{}<>,#")
_URL_STOP = _PATH_STOP | {'"'}

_KEYWORDS = {
    "if",
    "then",
    "else",
    "let",
    "in",
    "as",
    "using",
    "merge",
    "missing",
    "Infinity",
    "NaN",
    "Some",
    "toMap",
    "assert",
    "forall",
    "with",
    "showConstructor",
}
_IMPORT_MODES = ("Text", "Location", "Bytes")
_IMPORT_PREFIXES = ("../", "./", "~/", "/")

# Longest first, so that "//" wins over "/\" and "===" over "==".
_OPERATORS = (
    "===",
    "//\\\\",
    "//",
    "/\\",
    "++",
    "||",
    "&&",
    "==",
    "!=",
    "≡",
    "∧",
    "⩓",
    "⫽",
    "#",
    "+",
    "*",
    "?",
)


class DhallHeaderParser(SourceParser):
    """Extracts the leading comment header of a Dhall file.

    The header is every blank line and comment before the first token of the
    expression. The rest of the file must then read as a Dhall expression:
    labels, keywords, literals, imports and operators in a shape the grammar
    allows. Nothing is type checked or resolved, but READMEs, licenses, JSON
    and markup files are rejected.
    """

    name = "dhall"

    def parse(self, path: Path, contents: bytes) -> ParsedSource:
        try:
            text = contents.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(f"file is not valid UTF-8 ({exc.reason})") from exc
        if text.startswith("\ufeff"):
            text = text[1:]

        scanner = _Scanner(text)
        header_end = scanner.skip_trivia()
        if scanner.at_end():
            raise ParseError("expected an expression", line=scanner.line, column=scanner.column)
        scanner.expression()
        scanner.skip_trivia()
        if not scanner.at_end():
            raise scanner.unexpected("end of input")
        return ParsedSource(header=text[:header_end], document=text[header_end:])


class _Scanner:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.line = 1
        self.column = 1

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        return self.text[index] if index < len(self.text) else ""

    def startswith(self, token: str | Tuple[str, ...]) -> bool:
        return self.text.startswith(token, self.pos)

    def advance(self, count: int = 1) -> None:
        for _ in range(count):
            if self.at_end():
                return
            if self.text[self.pos] == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def error(self, message: str, line: int | None = None, column: int | None = None) -> ParseError:
        return ParseError(
            message,
            line=self.line if line is None else line,
            column=self.column if column is None else column,
        )

    def skip_trivia(self) -> int:
        """Consume whitespace and comments, returning the offset where they end."""
        while not self.at_end():
            char = self.peek()
            if char in " \t\r\n":
                self.advance()
            elif self.startswith("--"):
                self._skip_line_comment()
            elif self.startswith("{-"):
                self._skip_block_comment()
            else:
                break
        return self.pos

    def _skip_line_comment(self) -> None:
        while not self.at_end() and self.peek() != "\n":
            self.advance()

    def _skip_block_comment(self) -> None:
        line, column = self.line, self.column
        depth = 0
        while not self.at_end():
            if self.startswith("{-"):
                depth += 1
                self.advance(2)
            elif self.startswith("-}"):
                depth -= 1
                self.advance(2)
                if depth == 0:
                    return
            else:
                self.advance()
        raise self.error("unterminated block comment", line, column)

    def unexpected(self, expected: str) -> ParseError:
        found = "end of input" if self.at_end() else repr(self.peek())
        return self.error(f"expected {expected}, found {found}")

    def expect(self, token: str) -> None:
        self.skip_trivia()
        if not self.startswith(token):
            raise self.unexpected(repr(token))
        self.advance(len(token))

    def keyword(self, word: str) -> None:
        self.skip_trivia()
        if not self.at_keyword(word):
            raise self.unexpected(repr(word))
        self.advance(len(word))

    def at_keyword(self, word: str) -> bool:
        return self.startswith(word) and self.peek(len(word)) not in _LABEL_CHARS

    def peek_word(self) -> str:
        if self.peek() not in _LABEL_START:
            return ""
        end = self.pos
        while end < len(self.text) and self.text[end] in _LABEL_CHARS:
            end += 1
        return self.text[self.pos:end]

    def arrow_length(self) -> int:
        if self.startswith("->"):
            return 2
        return 1 if self.startswith("→") else 0

    def at_annotation(self) -> bool:
        return self.peek() == ":" and self.peek(1) != ":"

    def label(self, allow_some: bool = False) -> None:
        self.skip_trivia()
        if self.peek() == "`":
            self._skip_quoted_label()
            return
        word = self.peek_word()
        if not word:
            raise self.unexpected("a label")
        if word in _KEYWORDS and not (allow_some and word == "Some"):
            raise self.error(f"unexpected keyword {word!r}")
        self.advance(len(word))

    def expression(self) -> None:
        self.skip_trivia()
        if self.startswith("\\") or self.startswith("λ"):
            self.advance()
            self._binder()
            self._arrow()
            self.expression()
        elif self.at_keyword("forall") or self.startswith("∀"):
            self.advance(1 if self.startswith("∀") else len("forall"))
            self._binder()
            self._arrow()
            self.expression()
        elif self.at_keyword("if"):
            self.advance(2)
            self.expression()
            self.keyword("then")
            self.expression()
            self.keyword("else")
            self.expression()
        elif self.at_keyword("let"):
            while self.at_keyword("let"):
                self.advance(3)
                self.label()
                self.skip_trivia()
                if self.at_annotation():
                    self.advance()
                    self.expression()
                self.expect("=")
                self.expression()
                self.skip_trivia()
            self.keyword("in")
            self.expression()
        elif self.at_keyword("assert"):
            self.advance(len("assert"))
            self.expect(":")
            self.expression()
        else:
            self.operator_expression()
            self.skip_trivia()
            while self.at_keyword("with"):
                self.advance(4)
                self.label(allow_some=True)
                self.skip_trivia()
                while self.peek() == ".":
                    self.advance()
                    self.label(allow_some=True)
                    self.skip_trivia()
                self.expect("=")
                self.operator_expression()
                self.skip_trivia()
            arrow = self.arrow_length()
            if arrow:
                self.advance(arrow)
                self.expression()
            elif self.at_annotation():
                self.advance()
                self.expression()

    def operator_expression(self) -> None:
        self.application_expression()
        while True:
            self.skip_trivia()
            operator = self._match_operator()
            if operator is None:
                return
            self.advance(len(operator))
            self.application_expression()

    def application_expression(self) -> None:
        self.skip_trivia()
        if self.at_keyword("merge"):
            self.advance(len("merge"))
            self.import_expression()
            self.import_expression()
        elif self.at_keyword("Some") or self.at_keyword("toMap"):
            self.advance(len(self.peek_word()))
            self.import_expression()
        elif self.at_keyword("showConstructor"):
            self.advance(len("showConstructor"))
            self.import_expression()
        else:
            self.import_expression()
        while True:
            self.skip_trivia()
            if not self._starts_argument():
                return
            self.import_expression()

    def import_expression(self) -> None:
        self.skip_trivia()
        if self._starts_import():
            self._import()
            return
        self.selector_expression()
        self.skip_trivia()
        if self.startswith("::"):
            self.advance(2)
            self.selector_expression()

    def selector_expression(self) -> None:
        self.primitive_expression()
        while True:
            self.skip_trivia()
            # "./" and "../" after a term start an import argument, not a field.
            if self.peek() != "." or self.peek(1) in (".", "/"):
                return
            self.advance()
            self.skip_trivia()
            if self.peek() == "{":
                self._projection()
            elif self.peek() == "(":
                self.advance()
                self.expression()
                self.expect(")")
            else:
                self.label(allow_some=True)

    def primitive_expression(self) -> None:
        self.skip_trivia()
        char = self.peek()
        if self.startswith('0x"'):
            self.advance(2)
            self._text_literal()
        elif char in _DIGITS or (char in ("+", "-") and self.peek(1) in _DIGITS):
            self._number()
        elif self.startswith("-Infinity"):
            self.advance(len("-Infinity"))
        elif char == '"':
            self._text_literal()
        elif self.startswith("''"):
            self._multiline_literal()
        elif char == "{":
            self._record()
        elif char == "<":
            self._union()
        elif char == "[":
            self._list()
        elif char == "(":
            self.advance()
            self.expression()
            self.expect(")")
        elif char == "`":
            self._skip_quoted_label()
            self._variable_index()
        elif char in _LABEL_START:
            word = self.peek_word()
            if word in ("Infinity", "NaN"):
                self.advance(len(word))
                return
            if word in _KEYWORDS:
                raise self.error(f"unexpected keyword {word!r}")
            self.advance(len(word))
            self._variable_index()
        else:
            raise self.unexpected("an expression")

    def _binder(self) -> None:
        self.expect("(")
        self.label()
        self.expect(":")
        self.expression()
        self.expect(")")

    def _arrow(self) -> None:
        self.skip_trivia()
        length = self.arrow_length()
        if not length:
            raise self.unexpected("'->'")
        self.advance(length)

    def _match_operator(self) -> Optional[str]:
        for operator in _OPERATORS:
            if self.startswith(operator):
                return operator
        return None

    def _starts_argument(self) -> bool:
        char = self.peek()
        if char in ('"', "(", "[", "{", "<", "`") or char in _DIGITS:
            return True
        if self.startswith("''") or self.startswith("-Infinity"):
            return True
        if char in ("+", "-") and self.peek(1) in _DIGITS:
            return True
        if self._starts_import():
            return True
        word = self.peek_word()
        return bool(word) and (word not in _KEYWORDS or word in ("Infinity", "NaN"))

    def _starts_import(self) -> bool:
        if self.startswith(("./", "../", "~/", "http://", "https://", "env:")):
            return True
        if self.peek() == "/":
            following = self.peek(1)
            return bool(following) and following not in _PATH_STOP and following not in ("/", "\\")
        return self.at_keyword("missing")

    def _import(self) -> None:
        if self.at_keyword("missing"):
            self.advance(len("missing"))
            return
        if self.startswith(("http://", "https://")):
            self._url()
        elif self.startswith("env:"):
            self._environment_variable()
        else:
            prefix = next(prefix for prefix in _IMPORT_PREFIXES if self.startswith(prefix))
            self._local_path(len(prefix))
        self._import_hash()
        self.skip_trivia()
        if self.at_keyword("as"):
            self.advance(2)
            self.skip_trivia()
            word = self.peek_word()
            if word not in _IMPORT_MODES:
                raise self.unexpected("an import mode")
            self.advance(len(word))

    def _url(self) -> None:
        self.advance(self.text.index("://", self.pos) + 3 - self.pos)
        start = self.pos
        while not self.at_end() and self.peek() not in _URL_STOP:
            self.advance()
        if self.pos == start:
            raise self.unexpected("a URL authority")
        self.skip_trivia()
        if self.at_keyword("using"):
            self.advance(len("using"))
            self.import_expression()

    def _environment_variable(self) -> None:
        self.advance(len("env:"))
        if self.peek() == '"':
            self._text_literal()
            return
        start = self.pos
        while self.peek() in _LABEL_START or self.peek() in _DIGITS:
            self.advance()
        if self.pos == start:
            raise self.unexpected("an environment variable name")

    def _local_path(self, prefix_length: int) -> None:
        self.advance(prefix_length)
        start = self.pos
        while not self.at_end():
            char = self.peek()
            if char == '"':
                line, column = self.line, self.column
                self.advance()
                while not self.at_end() and self.peek() not in ('"', "\n"):
                    self.advance()
                if self.peek() != '"':
                    raise self.error("unterminated quoted path component", line, column)
                self.advance()
            elif char in _PATH_STOP:
                break
            else:
                self.advance()
        if self.pos == start:
            raise self.unexpected("a path")

    def _import_hash(self) -> None:
        self.skip_trivia()
        if not self.startswith("sha256:"):
            return
        self.advance(len("sha256:"))
        start = self.pos
        while self.peek() in _HEX_DIGITS:
            self.advance()
        if self.pos - start != 64:
            raise self.error("expected a sha256 hash of 64 hex digits")

    def _variable_index(self) -> None:
        self.skip_trivia()
        if self.peek() == "@":
            self.advance()
            self.skip_trivia()
            self._digits(_DIGITS)

    def _digits(self, allowed: set) -> None:
        start = self.pos
        while self.peek() in allowed:
            self.advance()
        if self.pos == start:
            raise self.unexpected("a digit")

    def _number(self) -> None:
        if self.peek() in ("+", "-"):
            self.advance()
        if self.startswith("0x"):
            self.advance(2)
            self._digits(_HEX_DIGITS)
            return
        self._digits(_DIGITS)
        if self.peek() == "." and self.peek(1) in _DIGITS:
            self.advance()
            self._digits(_DIGITS)
        if self.peek() in ("e", "E"):
            self.advance()
            if self.peek() in ("+", "-"):
                self.advance()
            self._digits(_DIGITS)

    def _record(self) -> None:
        self.advance()
        self.skip_trivia()
        if self.peek() == "=":
            self.advance()
            self.skip_trivia()
            if self.peek() == ",":
                self.advance()
            self.expect("}")
            return
        if self.peek() == ",":
            self.advance()
            self.skip_trivia()
        if self.peek() == "}":
            self.advance()
            return

        self._record_key()
        self.skip_trivia()
        is_type = self.at_annotation()
        if is_type:
            self.advance()
            self.expression()
        else:
            self._record_value()
        while True:
            self.skip_trivia()
            if self.peek() == "}":
                self.advance()
                return
            if self.peek() != ",":
                raise self.unexpected("',' or '}'")
            self.advance()
            self.skip_trivia()
            if self.peek() == "}":
                self.advance()
                return
            if is_type:
                self.label(allow_some=True)
                self.expect(":")
                self.expression()
            else:
                self._record_key()
                self._record_value()

    def _record_key(self) -> None:
        self.label(allow_some=True)
        self.skip_trivia()
        while self.peek() == ".":
            self.advance()
            self.label(allow_some=True)
            self.skip_trivia()

    def _record_value(self) -> None:
        self.skip_trivia()
        # A field without "=" is punned: { x } means { x = x }.
        if self.peek() == "=" and self.peek(1) != "=":
            self.advance()
            self.expression()

    def _projection(self) -> None:
        self.advance()
        self.skip_trivia()
        if self.peek() == ",":
            self.advance()
        while True:
            self.skip_trivia()
            if self.peek() == "}":
                self.advance()
                return
            self.label(allow_some=True)
            self.skip_trivia()
            if self.peek() == ",":
                self.advance()
            elif self.peek() != "}":
                raise self.unexpected("',' or '}'")

    def _union(self) -> None:
        self.advance()
        self.skip_trivia()
        if self.peek() == "|":
            self.advance()
            self.skip_trivia()
        if self.peek() == ">":
            self.advance()
            return
        while True:
            self.label(allow_some=True)
            self.skip_trivia()
            if self.at_annotation():
                self.advance()
                self.expression()
                self.skip_trivia()
            if self.peek() == ">":
                self.advance()
                return
            if self.peek() != "|":
                raise self.unexpected("'|' or '>'")
            self.advance()
            self.skip_trivia()
            if self.peek() == ">":
                self.advance()
                return

    def _list(self) -> None:
        self.advance()
        self.skip_trivia()
        if self.peek() == ",":
            self.advance()
            self.skip_trivia()
        if self.peek() == "]":
            self.advance()
            return
        while True:
            self.expression()
            self.skip_trivia()
            if self.peek() == "]":
                self.advance()
                return
            if self.peek() != ",":
                raise self.unexpected("',' or ']'")
            self.advance()
            self.skip_trivia()
            if self.peek() == "]":
                self.advance()
                return

    def _text_literal(self) -> None:
        line, column = self.line, self.column
        self.advance()
        while not self.at_end():
            char = self.peek()
            if char == "\\":
                self.advance(2)
            elif char == '"':
                self.advance()
                return
            elif self.startswith("${"):
                self._interpolation()
            else:
                self.advance()
        raise self.error("unterminated text literal", line, column)

    def _multiline_literal(self) -> None:
        line, column = self.line, self.column
        self.advance(2)
        while not self.at_end():
            if self.startswith("''${"):
                self.advance(4)
            elif self.startswith("'''"):
                self.advance(3)
            elif self.startswith("''"):
                self.advance(2)
                return
            elif self.startswith("${"):
                self._interpolation()
            else:
                self.advance()
        raise self.error("unterminated multi-line text literal", line, column)

    def _interpolation(self) -> None:
        self.advance(2)
        self.expression()
        self.expect("}")

    def _skip_quoted_label(self) -> None:
        line, column = self.line, self.column
        self.advance()
        while not self.at_end():
            if self.peek() == "`":
                self.advance()
                return
            if self.peek() == "\n":
                break
            self.advance()
        raise self.error("unterminated quoted label", line, column)
