"""Command line interface for the zhpick extractor."""

from __future__ import annotations

import argparse
import pathlib
import sys
from typing import Iterable, List, Optional, Sequence

from .catalog import collect_folder
from .configuration import ZhpickConfig, get_settings
from .diagnostics import DiagnosticLog
from .errors import ConfigurationError, ScriptParseError, ZhpickError
from .structures import CatalogSummary
from .walker import posix_path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zhpick",
        description=(
            "Extract Chinese strings from .js, .jsx, .ts, .tsx and .vue sources "
            "into one JSON catalog per folder."
        ),
    )
    parser.add_argument(
        "folders",
        nargs="*",
        help="Root folders to scan. Defaults to the entries of the folder list file.",
    )
    parser.add_argument(
        "-l",
        "--folder-list",
        help="Text file with one root folder per line (default: folder.txt).",
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        help="Directory receiving the <folder>.zh.json catalogs (default: dist).",
    )
    parser.add_argument(
        "--error-log",
        help="Diagnostic log for transform failures (default: error.log).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="List every file that contributed strings.",
    )
    return parser


def read_folder_list(path: pathlib.Path) -> List[str]:
    """Read root folders from *path*; a missing file yields no folders."""

    try:
        content = path.read_text(encoding="utf-8")
    except OSError:
        return []
    folders = [posix_path(line.strip()) for line in content.split("\n")]
    return [folder for folder in folders if folder]


def print_summary(summary: CatalogSummary) -> None:
    """Report the outcome of one root folder."""

    print(summary.root)
    print(f"pick file count: {summary.file_count}")
    print(f"pick word count: {summary.word_count}\n")


def run_folders(
    folders: Sequence[str],
    *,
    settings: ZhpickConfig,
    output_dir: pathlib.Path,
    diagnostics: DiagnosticLog,
    verbose: bool = False,
) -> List[CatalogSummary]:
    """Process each root folder in turn and print its summary."""

    summaries: List[CatalogSummary] = []
    for folder in folders:
        summary = collect_folder(
            folder,
            output_dir=output_dir,
            extensions=settings.EXTENSIONS,
            exclude_dirs=settings.EXCLUDE_DIRS,
            diagnostics=diagnostics,
            verbose=verbose,
        )
        print_summary(summary)
        summaries.append(summary)
    return summaries


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        settings = get_settings()
    except ConfigurationError as exc:
        print(exc)
        return 1

    diagnostics = DiagnosticLog(pathlib.Path(args.error_log or settings.ERROR_LOG))
    diagnostics.reset()

    list_path = pathlib.Path(args.folder_list or settings.FOLDER_LIST)
    if args.folders:
        folders = [posix_path(folder) for folder in args.folders]
    else:
        folders = read_folder_list(list_path)
    if not folders:
        print(f"{list_path.name} is empty")
        return 0

    try:
        with diagnostics:
            run_folders(
                folders,
                settings=settings,
                output_dir=pathlib.Path(args.output_dir or settings.OUTPUT_DIR),
                diagnostics=diagnostics,
                verbose=args.verbose,
            )
    except ScriptParseError as exc:
        print(f"Could not parse script {exc}")
        return 1
    except ZhpickError as exc:
        print(exc)
        return 1
    except OSError as exc:
        print(f"Could not read folder: {exc}")
        return 1
    except KeyboardInterrupt:
        print("Extraction interrupted by user.")
        return 2

    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
