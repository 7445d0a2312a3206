"""tree-sitter parser access for the supported script dialects."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from .errors import UnsupportedFileTypeError, ZhpickError

DIALECTS = ("javascript", "typescript", "tsx")


def _import_tree_sitter():
    try:
        import tree_sitter  # type: ignore
        import tree_sitter_javascript  # type: ignore
        import tree_sitter_typescript  # type: ignore
    except ImportError as exc:  # pragma: no cover - import guard
        raise ZhpickError(
            "tree-sitter grammars are required to analyse scripts. Install them with "
            "`pip install tree-sitter tree-sitter-javascript tree-sitter-typescript`."
        ) from exc
    return tree_sitter, tree_sitter_javascript, tree_sitter_typescript


@lru_cache(maxsize=None)
def get_parser(dialect: str):
    """Return a cached parser for *dialect* (javascript, typescript or tsx)."""

    tree_sitter, ts_javascript, ts_typescript = _import_tree_sitter()
    if dialect == "javascript":
        language = ts_javascript.language()
    elif dialect == "typescript":
        language = ts_typescript.language_typescript()
    elif dialect == "tsx":
        language = ts_typescript.language_tsx()
    else:
        raise UnsupportedFileTypeError(f"Unknown script dialect '{dialect}'.")
    return tree_sitter.Parser(tree_sitter.Language(language))


def parse_source(source: bytes, dialect: str):
    """Parse UTF-8 encoded *source* and return the tree-sitter tree."""

    return get_parser(dialect).parse(source)


def first_syntax_error(root) -> Optional[object]:
    """Return the first ``ERROR`` or missing node in document order."""

    if not root.has_error:
        return None
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        stack.extend(child for child in reversed(node.children) if child.has_error)
    return None


def describe_syntax_error(node) -> tuple[str, int, int]:
    """Build a readable message and 1-based position for an error node."""

    line, column = node.start_point
    if node.is_missing:
        message = f"Missing '{node.type}' at line {line + 1}, column {column + 1}"
    else:
        message = f"Unexpected syntax at line {line + 1}, column {column + 1}"
    return message, line + 1, column + 1
