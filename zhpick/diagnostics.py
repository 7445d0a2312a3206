"""Diagnostic log for recovered failures."""

from __future__ import annotations

import logging
import pathlib
import sys
from typing import List, Optional

from .errors import ErrorCategory, ErrorRecord

logger = logging.getLogger(__name__)
logger.propagate = False
logger.setLevel(logging.INFO)

HEADINGS = {
    ErrorCategory.TRANSFORM: "transform error",
    ErrorCategory.TEMPLATE: "template compile error",
    ErrorCategory.PARSE: "parse error",
    ErrorCategory.FILE_IO: "file error",
    ErrorCategory.OTHER: "error",
}


class DiagnosticLog:
    """Append-only log of handled errors, passed explicitly through the pipeline."""

    def __init__(self, path: pathlib.Path, *, echo: bool = True) -> None:
        self.path = path
        self.echo = echo
        self.records: List[ErrorRecord] = []
        self._handler: Optional[logging.Handler] = None

    def __enter__(self) -> "DiagnosticLog":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def reset(self) -> None:
        """Remove the previous run's log; failures are ignored."""

        self.close()
        try:
            self.path.unlink()
        except OSError:
            pass

    def record(
        self,
        category: ErrorCategory,
        message: str,
        *,
        location: str,
        details: Optional[str] = None,
    ) -> ErrorRecord:
        """Store a handled error, append it to the log file and echo it."""

        entry = ErrorRecord(
            category=category,
            message=message,
            location=location,
            details=details,
        )
        self.records.append(entry)

        heading = HEADINGS[category]
        # The shared logger only carries this log's file handler while it emits.
        handler = self._file_handler()
        logger.addHandler(handler)
        try:
            logger.error("\n".join([heading, location, message, details or "", "\n" * 4]))
        finally:
            logger.removeHandler(handler)
        if self.echo:
            print("\n".join([heading, location, message, ""]), file=sys.stderr)
        return entry

    def close(self) -> None:
        if self._handler is None:
            return
        self._handler.close()
        self._handler = None

    def _file_handler(self) -> logging.Handler:
        if self._handler is None:
            handler = logging.FileHandler(self.path, mode="a", encoding="utf-8", delay=True)
            handler.setFormatter(logging.Formatter("%(message)s"))
            self._handler = handler
        return self._handler
