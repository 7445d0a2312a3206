"""Core data structures for the zhpick extractor."""

from __future__ import annotations

import pathlib
from dataclasses import dataclass, field
from typing import Dict, List


@dataclass
class SourceUnit:
    """A chunk of plain script text ready for extraction."""

    path: str
    label: str
    dialect: str
    text: str

    @property
    def identity(self) -> str:
        return f"{self.path} [{self.label}]"


@dataclass
class FileRecord:
    """Extracted strings of one file, keyed by generated key."""

    path: str
    data: Dict[str, str] = field(default_factory=dict)


@dataclass
class Catalog:
    """All file records collected beneath one root folder."""

    root: str
    name: str
    records: List[FileRecord] = field(default_factory=list)

    @property
    def file_count(self) -> int:
        return len(self.records)

    @property
    def word_count(self) -> int:
        """Number of distinct string values across every record."""

        return len({value for record in self.records for value in record.data.values()})

    def as_mapping(self) -> Dict[str, Dict[str, str]]:
        return {record.path: record.data for record in self.records}


@dataclass
class CatalogSummary:
    """Report returned after processing a root folder."""

    root: str
    output_path: pathlib.Path
    file_count: int
    word_count: int
    transform_errors: int
    elapsed_seconds: float
