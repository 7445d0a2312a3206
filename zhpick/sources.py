"""Normalisation of source files into analysable script units."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from .diagnostics import DiagnosticLog
from .errors import ErrorCategory, TransformError, UnsupportedFileTypeError
from .parsing import describe_syntax_error, first_syntax_error, parse_source
from .sfc import compile_template, parse_sfc
from .structures import SourceUnit

SCRIPT_DIALECTS = {
    "js": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "tsx": "tsx",
}
TEMPLATE_DIALECT = "typescript"


def match_extension(path: str, extensions: Sequence[str]) -> Optional[str]:
    """Return the first extension that *path* ends with, dot included."""

    for ext in extensions:
        if path.endswith(ext) and path[-len(ext) - 1:-len(ext)] == ".":
            return ext
    return None


def dialect_for_lang(lang: Optional[str]) -> str:
    """Map a ``<script lang>`` value to a parser dialect."""

    if lang in ("ts", "tsx", "jsx"):
        return SCRIPT_DIALECTS[lang]
    return SCRIPT_DIALECTS["js"]


def check_syntax(unit: SourceUnit) -> None:
    """Reject units the dialect grammar cannot parse cleanly."""

    tree = parse_source(unit.text.encode("utf-8"), unit.dialect)
    error = first_syntax_error(tree.root_node)
    if error is not None:
        message, _, _ = describe_syntax_error(error)
        raise TransformError(message, source=unit.text)


class BaseUnitHandler(ABC):
    """Common base class for source handlers."""

    def __init__(self, path: str, text: str, diagnostics: DiagnosticLog) -> None:
        self.path = path
        self.text = text
        self.diagnostics = diagnostics

    @abstractmethod
    def extract_units(self) -> List[SourceUnit]:
        """Return the script units of the file in processing order."""

    def transform(self, label: str, dialect: str, code: str) -> SourceUnit:
        """Normalise one unit; a failing unit is logged and yields no text."""

        unit = SourceUnit(path=self.path, label=label, dialect=dialect, text=code)
        try:
            check_syntax(unit)
        except TransformError as exc:
            self.diagnostics.record(
                ErrorCategory.TRANSFORM,
                str(exc),
                location=unit.identity,
                details=exc.source,
            )
            unit.text = ""
        return unit


class ScriptHandler(BaseUnitHandler):
    """Plain script files yield exactly one unit."""

    def __init__(self, path: str, text: str, diagnostics: DiagnosticLog, ext: str) -> None:
        super().__init__(path, text, diagnostics)
        self.ext = ext

    def extract_units(self) -> List[SourceUnit]:
        return [self.transform(self.ext, SCRIPT_DIALECTS[self.ext], self.text)]


class VueHandler(BaseUnitHandler):
    """Single-file components yield script, setup script and template units."""

    def extract_units(self) -> List[SourceUnit]:
        descriptor = parse_sfc(self.text)
        units: List[SourceUnit] = []
        if descriptor.script is not None:
            units.append(
                self.transform(
                    "script",
                    dialect_for_lang(descriptor.script.lang),
                    descriptor.script.content,
                )
            )
        if descriptor.script_setup is not None:
            units.append(
                self.transform(
                    "script setup",
                    dialect_for_lang(descriptor.script_setup.lang),
                    descriptor.script_setup.content,
                )
            )
        if descriptor.template is not None:
            try:
                code = compile_template(descriptor.template)
            except TransformError as exc:
                self.diagnostics.record(
                    ErrorCategory.TEMPLATE,
                    str(exc),
                    location=f"{self.path} [template]",
                    details=exc.source,
                )
                units.append(
                    SourceUnit(path=self.path, label="template", dialect=TEMPLATE_DIALECT, text="")
                )
            else:
                units.append(self.transform("template", TEMPLATE_DIALECT, code))
        return units


def build_handler(
    path: str,
    ext: str,
    text: str,
    diagnostics: DiagnosticLog,
) -> BaseUnitHandler:
    """Select an appropriate handler for the provided file."""

    if ext == "vue":
        return VueHandler(path, text, diagnostics)
    if ext in SCRIPT_DIALECTS:
        return ScriptHandler(path, text, diagnostics, ext)
    raise UnsupportedFileTypeError(
        f"Files with the '.{ext}' extension can't be analysed; use js, jsx, ts, tsx or vue."
    )
