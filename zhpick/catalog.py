"""High-level orchestration of catalog collection for a root folder."""

from __future__ import annotations

import json
import os
import pathlib
import time
from typing import Dict, List, Sequence

from .detection import contains_chinese
from .diagnostics import DiagnosticLog
from .errors import ScriptParseError
from .extractor import extract_strings
from .keys import key_for
from .sources import build_handler, match_extension
from .structures import Catalog, CatalogSummary, FileRecord
from .walker import exclude_names, posix_path, traverse_directory


def catalog_name(root: str) -> str:
    """Name a catalog after the final segment of its root folder."""

    name = os.path.basename(posix_path(root).rstrip("/"))
    if name in ("", ".", ".."):
        name = pathlib.Path(root).resolve().name
    return name


class CatalogBuilder:
    """Coordinates traversal, normalisation, and extraction for one root."""

    def __init__(
        self,
        *,
        root: str,
        extensions: Sequence[str],
        exclude_dirs: Sequence[str],
        diagnostics: DiagnosticLog,
        verbose: bool = False,
    ) -> None:
        self.root = posix_path(root)
        self.extensions = list(extensions)
        self.exclude_dirs = list(exclude_dirs)
        self.diagnostics = diagnostics
        self.verbose = verbose

    def collect(self) -> Catalog:
        catalog = Catalog(root=self.root, name=catalog_name(self.root))
        accept = exclude_names(self.exclude_dirs)
        for file_path in traverse_directory(self.root, accept):
            ext = match_extension(file_path, self.extensions)
            if ext is None:
                continue
            strings = self.collect_file(file_path, ext)
            if not strings:
                continue
            record = FileRecord(
                path=self._relative_path(file_path),
                data={key_for(value): value for value in strings},
            )
            catalog.records.append(record)
            if self.verbose:
                print(f"  {record.path}: {len(record.data)} strings")
        return catalog

    def collect_file(self, file_path: str, ext: str) -> List[str]:
        """Return the union of strings extracted from every unit of a file."""

        text = pathlib.Path(file_path).read_text(encoding="utf-8", errors="replace")
        if not contains_chinese(text):
            return []

        handler = build_handler(file_path, ext, text, self.diagnostics)
        units = [unit for unit in handler.extract_units() if contains_chinese(unit.text)]

        strings: Dict[str, None] = {}
        for unit in units:
            try:
                values = extract_strings(unit.text, unit.dialect)
            except ScriptParseError as exc:
                raise ScriptParseError(
                    f"{unit.identity}: {exc}", line=exc.line, column=exc.column
                ) from exc
            for value in values:
                strings.setdefault(value)
        return list(strings)

    def _relative_path(self, file_path: str) -> str:
        return posix_path(os.path.relpath(file_path, self.root))


def write_catalog(catalog: Catalog, output_dir: pathlib.Path) -> pathlib.Path:
    """Serialise the catalog as ``<output_dir>/<name>.zh.json``."""

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError:
        pass
    output_path = output_dir / f"{catalog.name}.zh.json"
    output_path.write_text(
        json.dumps(catalog.as_mapping(), ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    return output_path


def collect_folder(
    root: str,
    *,
    output_dir: pathlib.Path,
    extensions: Sequence[str],
    exclude_dirs: Sequence[str],
    diagnostics: DiagnosticLog,
    verbose: bool = False,
) -> CatalogSummary:
    """Collect, write, and summarise the catalog of one root folder."""

    start_time = time.time()
    errors_before = len(diagnostics.records)

    builder = CatalogBuilder(
        root=root,
        extensions=extensions,
        exclude_dirs=exclude_dirs,
        diagnostics=diagnostics,
        verbose=verbose,
    )
    catalog = builder.collect()
    output_path = write_catalog(catalog, output_dir)

    return CatalogSummary(
        root=catalog.root,
        output_path=output_path,
        file_count=catalog.file_count,
        word_count=catalog.word_count,
        transform_errors=len(diagnostics.records) - errors_before,
        elapsed_seconds=time.time() - start_time,
    )
