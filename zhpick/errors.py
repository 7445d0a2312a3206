"""Error definitions for the zhpick extractor."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class ErrorCategory(Enum):
    """Categorises handled errors for the diagnostic log."""

    TRANSFORM = auto()
    TEMPLATE = auto()
    PARSE = auto()
    FILE_IO = auto()
    OTHER = auto()


class ZhpickError(Exception):
    """Base exception for all custom errors."""


class ConfigurationError(ZhpickError):
    """Raised when settings cannot be loaded or fail validation."""


class UnsupportedFileTypeError(ZhpickError):
    """Raised when a given file extension is not supported."""


class TransformError(ZhpickError):
    """Raised when a script unit cannot be normalised into analysable code.

    Recovered by the caller: the unit contributes no text.
    """

    def __init__(self, message: str, *, source: str = "") -> None:
        super().__init__(message)
        self.source = source


class ScriptParseError(ZhpickError):
    """Raised when already normalised script text is rejected by the parser."""

    def __init__(self, message: str, *, line: int = 0, column: int = 0) -> None:
        super().__init__(message)
        self.line = line
        self.column = column


@dataclass
class ErrorRecord:
    """Stores context for a handled error."""

    category: ErrorCategory
    message: str
    location: str = ""
    details: Optional[str] = None
