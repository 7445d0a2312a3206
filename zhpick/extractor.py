"""Syntax-tree extraction of translatable Chinese strings.

The walk records one candidate per string literal, template literal and
``+`` concatenation chain. Every node that contributed to a candidate is
claimed by its exact byte range, so a literal that already took part in a
concatenation is not reported a second time on its own.
"""

from __future__ import annotations

import html
import re
from typing import Dict, List, Set, Tuple

from .detection import contains_chinese
from .errors import ScriptParseError
from .parsing import describe_syntax_error, first_syntax_error, parse_source

PLACEHOLDER = "{}"

STRING_KINDS = frozenset({"string", "jsx_text"})
TEMPLATE_KIND = "template_string"
BINARY_KIND = "binary_expression"
JSX_ELEMENT_KIND = "jsx_element"
# Children of a JSX element that the JSX transform folds into one literal.
JSX_TEXT_KINDS = frozenset({"jsx_text", "html_character_reference"})

# Subtrees a transpiler erases; strings inside them never reach the bundle.
TYPE_ONLY_KINDS = frozenset(
    {
        "type_annotation",
        "opting_type_annotation",
        "omitting_type_annotation",
        "asserts_annotation",
        "type_predicate_annotation",
        "type_alias_declaration",
        "interface_declaration",
        "type_arguments",
        "type_parameters",
        "literal_type",
        "template_literal_type",
        "ambient_declaration",
    }
)

EDGE_PLACEHOLDER_PATTERN = re.compile(r"^\{\}|\{\}$")

_SIMPLE_ESCAPES = {
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}
_LINE_TERMINATORS = ("\r\n", "\n", "\r", "\u2028", "\u2029")
_OCTAL_DIGITS = "01234567"


def _decode_escape(sequence: str) -> str:
    """Decode a single JavaScript escape sequence such as ``\\u4e2d``."""

    body = sequence[1:]
    if body.startswith(_LINE_TERMINATORS):
        return ""
    head = body[0]
    if head == "x":
        return chr(int(body[1:3], 16))
    if head == "u":
        digits = body[2:-1] if body[1:2] == "{" else body[1:5]
        return chr(int(digits, 16))
    if head in _OCTAL_DIGITS:
        return chr(int(body, 8))
    return _SIMPLE_ESCAPES.get(head, head)


def _join_surrogates(value: str) -> str:
    return value.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "surrogatepass")


def _jsx_text_value(raw: str) -> str:
    lines = (line.strip() for line in raw.splitlines())
    return html.unescape(" ".join(line for line in lines if line))


def _unwrap_parentheses(node):
    while node.type == "parenthesized_expression":
        inner = [child for child in node.named_children if child.type != "comment"]
        if len(inner) != 1:
            break
        node = inner[0]
    return node


def _is_element_child(node) -> bool:
    parent = node.parent
    return parent is not None and parent.type == JSX_ELEMENT_KIND


def _is_concatenation(node) -> bool:
    if node.type != BINARY_KIND:
        return False
    operator = node.child_by_field_name("operator")
    return operator is not None and operator.type == "+"


class _Extraction:
    """State of one extraction call: claimed ranges and candidate strings."""

    def __init__(self, source: bytes) -> None:
        self.source = source
        self.claimed: Set[Tuple[int, int]] = set()
        self.candidates: Dict[str, None] = {}

    def walk(self, root) -> None:
        stack = [root]
        while stack:
            node = stack.pop()
            kind = node.type
            if kind in TYPE_ONLY_KINDS:
                continue
            if kind in JSX_TEXT_KINDS and _is_element_child(node):
                self._visit_jsx_text(node)
            elif kind in STRING_KINDS:
                self._visit_string(node)
            elif kind == TEMPLATE_KIND:
                self._visit_template(node)
            elif kind == BINARY_KIND:
                self._visit_binary(node)
            stack.extend(reversed(node.children))

    def results(self) -> List[str]:
        final: Dict[str, None] = {}
        for candidate in self.candidates:
            if not contains_chinese(candidate):
                continue
            value = EDGE_PLACEHOLDER_PATTERN.sub("", candidate.strip(), count=1)
            if value:
                final.setdefault(value)
        return list(final)

    # --- Claimed ranges ---------------------------------------------------

    def _is_claimed(self, node) -> bool:
        return (node.start_byte, node.end_byte) in self.claimed

    def _claim(self, node) -> None:
        self.claimed.add((node.start_byte, node.end_byte))

    def _add(self, candidate: str) -> None:
        self.candidates.setdefault(candidate)

    # --- Visitors ---------------------------------------------------------

    def _visit_string(self, node) -> None:
        if self._is_claimed(node):
            return
        self._claim(node)
        self._add(self._string_value(node).strip())

    def _visit_template(self, node) -> None:
        if self._is_claimed(node):
            return
        self._claim(node)
        self._add(self._template_value(node))

    def _visit_binary(self, node) -> None:
        if self._is_claimed(node):
            return
        self._claim(node)
        if not _is_concatenation(node) or not contains_chinese(self._decoded_text(node)):
            return

        parts: List[str] = []
        for leaf in self._flatten(node):
            if leaf.type == TEMPLATE_KIND:
                self._claim(leaf)
                parts.append(self._template_value(leaf))
            elif leaf.type in STRING_KINDS:
                self._claim(leaf)
                parts.append(self._string_value(leaf).strip())
            else:
                parts.append(PLACEHOLDER)
        self._add("".join(parts))

    def _visit_jsx_text(self, node) -> None:
        """Merge a run of adjacent text and entity children into one candidate."""

        if self._is_claimed(node):
            return
        run = [node]
        sibling = node.next_sibling
        while sibling is not None and sibling.type in JSX_TEXT_KINDS:
            run.append(sibling)
            sibling = sibling.next_sibling
        for member in run:
            self._claim(member)
        raw = self.source[run[0].start_byte:run[-1].end_byte].decode("utf-8")
        self._add(_jsx_text_value(raw).strip())

    def _flatten(self, node) -> list:
        """Collect the operands of a ``+`` chain from left to right."""

        leaves = []
        stack = [node]
        while stack:
            current = _unwrap_parentheses(stack.pop())
            if _is_concatenation(current):
                self._claim(current)
                stack.append(current.child_by_field_name("right"))
                stack.append(current.child_by_field_name("left"))
            else:
                leaves.append(current)
        return leaves

    # --- Literal values ---------------------------------------------------

    def _text(self, node) -> str:
        return self.source[node.start_byte:node.end_byte].decode("utf-8")

    def _decoded_text(self, node) -> str:
        """Source of *node* with every escape sequence in its literals decoded."""

        parts: List[str] = []
        cursor = node.start_byte
        stack = [node]
        while stack:
            current = stack.pop()
            if current.type == "escape_sequence":
                parts.append(self.source[cursor:current.start_byte].decode("utf-8"))
                parts.append(_decode_escape(self._text(current)))
                cursor = current.end_byte
                continue
            stack.extend(reversed(current.children))
        parts.append(self.source[cursor:node.end_byte].decode("utf-8"))
        return _join_surrogates("".join(parts))

    def _string_value(self, node) -> str:
        if node.type == "jsx_text":
            return _jsx_text_value(self._text(node))

        parts: List[str] = []
        cursor = node.start_byte + 1
        for child in node.children:
            if child.type == "escape_sequence":
                decoded = _decode_escape(self._text(child))
            elif child.type == "html_character_reference":
                decoded = html.unescape(self._text(child))
            else:
                continue
            parts.append(self.source[cursor:child.start_byte].decode("utf-8"))
            parts.append(decoded)
            cursor = child.end_byte
        parts.append(self.source[cursor:node.end_byte - 1].decode("utf-8"))
        return _join_surrogates("".join(parts))

    def _template_value(self, node) -> str:
        """Join the raw quasis of a template literal around placeholders."""

        quasis: List[str] = []
        cursor = node.start_byte + 1
        for child in node.named_children:
            if child.type == "template_substitution":
                quasis.append(self.source[cursor:child.start_byte].decode("utf-8"))
                cursor = child.end_byte
        quasis.append(self.source[cursor:node.end_byte - 1].decode("utf-8"))
        return PLACEHOLDER.join(quasi.strip() for quasi in quasis)


def extract_strings(text: str, dialect: str = "javascript") -> List[str]:
    """Return the distinct translatable strings found in *text*.

    Text without any Chinese character is rejected before parsing. Syntax
    errors raise :class:`ScriptParseError`; no partial result is produced.
    """

    if not contains_chinese(text):
        return []

    source = text.encode("utf-8")
    tree = parse_source(source, dialect)
    error = first_syntax_error(tree.root_node)
    if error is not None:
        message, line, column = describe_syntax_error(error)
        raise ScriptParseError(message, line=line, column=column)

    extraction = _Extraction(source)
    extraction.walk(tree.root_node)
    return extraction.results()
