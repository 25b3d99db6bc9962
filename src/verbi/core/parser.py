"""Parse JavaScript/TypeScript sources and extract translatable messages.

Three syntactic forms are recognised:

* ``<Trans>Hello {name}</Trans>``: JSX text joined with single spaces,
  bare identifiers become ``{name}`` placeholders.
* ``t`Hello ${name}```: tagged templates, ``{name}`` for identifiers and
  ``{i}`` (expression index) for anything else.
* ``t("Hello")``: calls whose first argument is a string literal.

The source text doubles as the runtime lookup key.
"""

from __future__ import annotations

import html
import os
import re
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

import tree_sitter_typescript as tsts
from tree_sitter import Language, Node, Parser

from verbi.errors import SourceParseError

TRANSLATE_FUNCTION = "t"
TRANS_COMPONENT = "Trans"

_TSX = Language(tsts.language_tsx())
_TYPESCRIPT = Language(tsts.language_typescript())

# Plain .ts files cannot use the TSX grammar: `<T>value` casts clash with JSX.
_TYPESCRIPT_SUFFIXES = {".ts", ".mts", ".cts"}

_RE_ESCAPE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])")
_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}
_LINE_CONTINUATIONS = {"\n", "\r", "\r\n", "\u2028", "\u2029"}
_MAX_CODE_POINT = 0x10FFFF


@dataclass(frozen=True)
class Location:
    file: str
    line: int
    column: int

    def to_dict(self) -> dict:
        return {"file": self.file, "line": self.line, "column": self.column}


@dataclass(frozen=True)
class ExtractedMessage:
    """A translatable message found in source.

    ``key`` equals ``text`` unless an explicit key was supplied.
    """

    key: str
    text: str
    location: Location
    explicit_key: bool = False


def _language_for(path: Path) -> Language:
    return _TYPESCRIPT if path.suffix in _TYPESCRIPT_SUFFIXES else _TSX


def _walk(root: Node) -> Iterator[Node]:
    """Pre-order traversal (document order)."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def _unescape(match: re.Match[str]) -> str:
    seq = match.group(1)
    if seq.startswith("u{"):
        value = int(seq[2:-1], 16)
        if value > _MAX_CODE_POINT:
            raise ValueError(f"undefined Unicode code point escape \\{seq}")
        return chr(value)
    if seq[0] == "u" and len(seq) == 5:
        return chr(int(seq[1:], 16))
    if seq[0] == "x" and len(seq) == 3:
        return chr(int(seq[1:], 16))
    if seq in _LINE_CONTINUATIONS:
        return ""
    return _SIMPLE_ESCAPES.get(seq, seq)


def cook(raw: str) -> str:
    """Resolve JavaScript escape sequences in a string or template segment.

    Raises ValueError for a ``\\u{...}`` escape beyond U+10FFFF.
    """
    if "\\" not in raw:
        return raw
    cooked = _RE_ESCAPE.sub(_unescape, raw)
    # Recombine \uD83D\uDE00 style surrogate pairs
    return cooked.encode("utf-16", "surrogatepass").decode("utf-16", "replace")


class _FileScanner:
    """Walks one syntax tree and collects ExtractedMessage records."""

    def __init__(self, source: bytes, relative_path: str) -> None:
        self._source = source
        self._file = relative_path
        self.messages: list[ExtractedMessage] = []

    def _text(self, node: Node) -> str:
        return self._source[node.start_byte:node.end_byte].decode("utf-8")

    def _add(self, text: str, node: Node) -> None:
        row, column = node.start_point
        self.messages.append(
            ExtractedMessage(
                key=text,
                text=text,
                location=Location(file=self._file, line=row + 1, column=column),
            )
        )

    def scan(self, root: Node) -> list[ExtractedMessage]:
        for node in _walk(root):
            if node.type == "jsx_element":
                self._visit_jsx_element(node)
            elif node.type == "call_expression":
                self._visit_call(node)
        return self.messages

    # ── <Trans> ──

    def _visit_jsx_element(self, node: Node) -> None:
        opening = node.child_by_field_name("open_tag") or node.children[0]
        name = opening.child_by_field_name("name")
        if name is None or name.type != "identifier" or self._text(name) != TRANS_COMPONENT:
            return

        text = self._jsx_text(node)
        if text:
            self._add(text, node)

    def _jsx_text(self, node: Node) -> str | None:
        parts: list[str] = []
        for child in node.children:
            if child.type in ("jsx_opening_element", "jsx_closing_element", "comment"):
                continue
            if child.type in ("jsx_text", "html_character_reference"):
                text = html.unescape(self._text(child)).strip()
                if text:
                    parts.append(text)
            elif child.type == "jsx_expression":
                inner = [c for c in child.named_children if c.type != "comment"]
                if not inner:
                    continue
                if len(inner) == 1 and inner[0].type == "identifier":
                    parts.append(f"{{{self._text(inner[0])}}}")
                else:
                    # Complex expressions belong in t() calls
                    return None
            else:
                # Nested markup
                return None

        return " ".join(parts) if parts else None

    # ── t`...` and t("...") ──

    def _visit_call(self, node: Node) -> None:
        function = node.child_by_field_name("function")
        if function is None or function.type != "identifier":
            return
        if self._text(function) != TRANSLATE_FUNCTION:
            return

        arguments = node.child_by_field_name("arguments")
        if arguments is None:
            return

        if arguments.type == "template_string":
            self._add(self._template_text(arguments), node)
        elif arguments.type == "arguments":
            args = [c for c in arguments.named_children if c.type != "comment"]
            if args and args[0].type == "string":
                self._add(self._string_value(args[0]), node)

    def _cook(self, node: Node, start: int, end: int) -> str:
        raw = self._source[start:end].decode("utf-8")
        try:
            return cook(raw)
        except ValueError as e:
            row, column = node.start_point
            raise SourceParseError(self._file, row + 1, column, str(e)) from e

    def _string_value(self, node: Node) -> str:
        return self._cook(node, node.start_byte + 1, node.end_byte - 1)

    def _template_text(self, node: Node) -> str:
        parts: list[str] = []
        cursor = node.start_byte + 1
        index = 0
        for child in node.named_children:
            if child.type != "template_substitution":
                continue
            parts.append(self._cook(node, cursor, child.start_byte))
            expr = [c for c in child.named_children if c.type != "comment"]
            if len(expr) == 1 and expr[0].type == "identifier":
                parts.append(f"{{{self._text(expr[0])}}}")
            else:
                parts.append(f"{{{index}}}")
            index += 1
            cursor = child.end_byte
        parts.append(self._cook(node, cursor, node.end_byte - 1))
        return "".join(parts)


def _first_error(root: Node) -> Node:
    for node in _walk(root):
        if node.type == "ERROR" or node.is_missing:
            return node
    return root


def relative_path(path: Path, project_root: Path) -> str:
    return Path(os.path.relpath(path, project_root)).as_posix()


def parse_source(source: bytes, relative: str, language: Language = _TSX) -> list[ExtractedMessage]:
    """Extract messages from in-memory source. Raises SourceParseError on syntax errors."""
    tree = Parser(language).parse(source)
    root = tree.root_node
    if root.has_error:
        bad = _first_error(root)
        row, column = bad.start_point
        raise SourceParseError(relative, row + 1, column)

    return _FileScanner(source, relative).scan(root)


def parse_file(path: str | Path, project_root: str | Path) -> list[ExtractedMessage]:
    """Parse one source file and return its messages in document order.

    Raises:
        OSError: The file cannot be read.
        SourceParseError: The file does not parse.
    """
    path = Path(path)
    source = path.read_bytes()
    return parse_source(source, relative_path(path, Path(project_root)), _language_for(path))
