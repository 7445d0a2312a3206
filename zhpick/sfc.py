"""Single-file component (``.vue``) splitting and template compilation.

The template compiler does not aim to render anything. It only turns the
markup into a script whose string literals, concatenations and expressions
mirror what the framework compiler would emit, so the extractor can treat
template text like any other script text.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import Dict, List, Optional, Tuple

from .errors import TransformError

INTERPOLATION_PATTERN = re.compile(r"\{\{(.*?)\}\}", re.DOTALL)
NEWLINE_PATTERN = re.compile(r"\n")
WHITESPACE_PATTERN = re.compile(r"[\t\r\n\f ]+")
FOR_ALIAS_PATTERN = re.compile(r"^.*?\s+(?:in|of)\s+(?P<source>.+)$", re.DOTALL)

Attributes = List[Tuple[str, Optional[str]]]


@dataclass
class SfcBlock:
    """A top-level ``<script>`` or ``<template>`` block."""

    tag: str
    content: str
    attrs: Dict[str, Optional[str]] = field(default_factory=dict)

    @property
    def lang(self) -> Optional[str]:
        return self.attrs.get("lang")

    @property
    def setup(self) -> bool:
        return "setup" in self.attrs


@dataclass
class SfcDescriptor:
    script: Optional[SfcBlock] = None
    script_setup: Optional[SfcBlock] = None
    template: Optional[SfcBlock] = None


class _BlockScanner(HTMLParser):
    """Locates top-level blocks and slices their raw content from the source."""

    def __init__(self, source: str) -> None:
        super().__init__(convert_charrefs=False)
        self.source = source
        self.blocks: List[SfcBlock] = []
        self._line_offsets = [0] + [match.end() for match in NEWLINE_PATTERN.finditer(source)]
        self._open_tag: Optional[str] = None
        self._open_attrs: Attributes = []
        self._content_start = 0
        self._depth = 0

    def _offset(self) -> int:
        line, column = self.getpos()
        return self._line_offsets[line - 1] + column

    def handle_starttag(self, tag: str, attrs: Attributes) -> None:
        if self._open_tag is None:
            self._open_tag = tag
            self._open_attrs = attrs
            self._content_start = self._offset() + len(self.get_starttag_text() or "")
            self._depth = 1
        elif tag == self._open_tag:
            self._depth += 1

    def handle_startendtag(self, tag: str, attrs: Attributes) -> None:
        pass

    def handle_endtag(self, tag: str) -> None:
        if tag != self._open_tag:
            return
        self._depth -= 1
        if self._depth:
            return
        content = self.source[self._content_start:self._offset()]
        self.blocks.append(SfcBlock(tag=tag, content=content, attrs=dict(self._open_attrs)))
        self._open_tag = None


def parse_sfc(source: str) -> SfcDescriptor:
    """Split a single-file component into its script and template blocks."""

    scanner = _BlockScanner(source)
    scanner.feed(source)
    scanner.close()

    descriptor = SfcDescriptor()
    for block in scanner.blocks:
        if block.tag == "template" and descriptor.template is None:
            descriptor.template = block
        elif block.tag == "script":
            if block.setup and descriptor.script_setup is None:
                descriptor.script_setup = block
            elif not block.setup and descriptor.script is None:
                descriptor.script = block
    return descriptor


def _text_expression(text: str) -> Optional[str]:
    """Compile template text into a concatenation of literals and interpolations."""

    if not text.strip(" \t\r\n\f"):
        return None
    parts: List[str] = []
    cursor = 0
    for match in INTERPOLATION_PATTERN.finditer(text):
        static = WHITESPACE_PATTERN.sub(" ", text[cursor:match.start()])
        if static:
            parts.append(json.dumps(static, ensure_ascii=False))
        parts.append(f"_toDisplayString({match.group(1).strip()})")
        cursor = match.end()
    static = WHITESPACE_PATTERN.sub(" ", text[cursor:])
    if static:
        parts.append(json.dumps(static, ensure_ascii=False))
    return " + ".join(parts)


class _TemplateCompiler(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.statements: List[str] = []
        self._pending_text: List[str] = []

    def _flush_text(self) -> None:
        expression = _text_expression("".join(self._pending_text))
        self._pending_text = []
        if expression:
            self.statements.append(f"_createTextVNode({expression});")

    def handle_starttag(self, tag: str, attrs: Attributes) -> None:
        self._flush_text()
        for name, value in attrs:
            statement = self._attribute_statement(name, value)
            if statement:
                self.statements.append(statement)

    def handle_endtag(self, tag: str) -> None:
        self._flush_text()

    def handle_comment(self, data: str) -> None:
        self._flush_text()

    def handle_data(self, data: str) -> None:
        self._pending_text.append(data)

    def close(self) -> None:
        super().close()
        self._flush_text()

    @staticmethod
    def _attribute_statement(name: str, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        if name.startswith(("v-slot", "#")):
            # Slot props are binding patterns, not expressions.
            return None
        if name.startswith(("v-on:", "@")):
            return f"_withHandler(() => {{\n{value}\n}});"
        if name == "v-for":
            match = FOR_ALIAS_PATTERN.match(value.strip())
            source = match.group("source") if match else value
            return f"_renderList(\n{source}\n);"
        if name.startswith(("v-", ":")):
            return f"_bind(\n{value}\n);"
        return f"_attr({json.dumps(value, ensure_ascii=False)});"


def compile_template(block: SfcBlock) -> str:
    """Compile a template block into analysable script text."""

    lang = block.lang
    if lang not in (None, "html"):
        raise TransformError(
            f"Template language '{lang}' is not supported.", source=block.content
        )
    compiler = _TemplateCompiler()
    compiler.feed(block.content)
    compiler.close()
    body = "\n".join(f"  {statement}" for statement in compiler.statements)
    return f"export function render(_ctx, _cache) {{\n{body}\n}}\n"
