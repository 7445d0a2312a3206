"""Layered configuration loader for zhpick."""

from __future__ import annotations

import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Any, List, Mapping, Sequence

import yaml
from dotenv import dotenv_values
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .errors import ConfigurationError

ENV_PREFIX = "ZHPICK_"
CONFIG_FILE_NAME = "zhpick.yaml"

DEFAULT_EXCLUDE_DIRS = (
    "node_modules",
    "dist",
    "build",
    "public",
    "test",
    "tests",
    "scripts",
    ".git",
    ".vscode",
    ".idea",
)
DEFAULT_EXTENSIONS = ("js", "ts", "jsx", "tsx", "vue")

LIST_SEPARATOR = re.compile(r"[,\s]+")


class ZhpickConfig(BaseModel):
    """Schema describing all supported configuration options."""

    FOLDER_LIST: str = Field(
        default="folder.txt",
        description="Text file listing one root folder per line.",
    )
    OUTPUT_DIR: str = Field(
        default="dist",
        description="Directory receiving one <folder>.zh.json catalog per root.",
    )
    ERROR_LOG: str = Field(
        default="error.log",
        description="Diagnostic log, truncated at the start of each run.",
    )
    EXCLUDE_DIRS: List[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_DIRS),
        description="Directory basenames that are never entered.",
    )
    EXTENSIONS: List[str] = Field(
        default_factory=lambda: list(DEFAULT_EXTENSIONS),
        description="Recognised source file extensions, in matching order.",
    )

    @model_validator(mode="before")
    @classmethod
    def _split_lists(cls, data: Any) -> Any:
        if isinstance(data, dict):
            for name in ("EXCLUDE_DIRS", "EXTENSIONS"):
                raw_value = data.get(name)
                if isinstance(raw_value, str):
                    data[name] = [part for part in LIST_SEPARATOR.split(raw_value) if part]
        return data

    @field_validator("EXTENSIONS")
    @classmethod
    def _normalise_extensions(cls, value: List[str]) -> List[str]:
        normalised: List[str] = []
        for ext in value:
            cleaned = ext.strip().lstrip(".").lower()
            if cleaned and cleaned not in normalised:
                normalised.append(cleaned)
        if not normalised:
            raise ValueError("at least one source extension is required")
        return normalised


@lru_cache(maxsize=None)
def _load_settings(base_dir: Path) -> ZhpickConfig:
    """Load configuration layers once per directory and cache the validated model."""

    combined: dict[str, Any] = {}
    _merge_yaml_file(combined, base_dir / CONFIG_FILE_NAME)
    _merge_env_sources(combined, app_dir=base_dir)
    try:
        return ZhpickConfig.model_validate(combined)
    except ValidationError as exc:
        raise ConfigurationError(_format_validation_errors(exc.errors())) from exc


def _merge_yaml_file(target: dict[str, Any], path: Path) -> None:
    """Merge an optional YAML file whose keys match the schema fields."""

    if not path.is_file():
        return
    try:
        parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(
            f"Configuration file {path} could not be read: {exc}"
        ) from exc
    if parsed is None:
        return
    if not isinstance(parsed, Mapping):
        raise ConfigurationError(
            f"Invalid configuration file {path}: expected a mapping at the root."
        )
    allowed = set(ZhpickConfig.model_fields)
    for key, value in parsed.items():
        name = str(key).upper()
        if name in allowed:
            target[name] = value


def _merge_env_sources(target: dict[str, Any], *, app_dir: Path) -> None:
    """Merge .env and process environment variables into the target mapping."""

    allowed = set(ZhpickConfig.model_fields)

    def merge_values(values: Mapping[str, str]) -> None:
        for key, value in sorted(values.items()):
            if value is None or not key.upper().startswith(ENV_PREFIX):
                continue
            name = key.upper()[len(ENV_PREFIX):]
            if name in allowed:
                target[name] = value

    dotenv_path = app_dir / ".env"
    if dotenv_path.exists():
        dotenv_content = dotenv_values(dotenv_path)
        merge_values({k: v for k, v in dotenv_content.items() if v is not None})

    merge_values({k: v for k, v in os.environ.items() if isinstance(v, str)})


def _format_validation_errors(entries: Sequence[Mapping[str, Any]]) -> str:
    details: list[str] = []
    for entry in entries:
        location = ".".join(str(part) for part in entry.get("loc") or () if part != "")
        message = str(entry.get("msg") or "Invalid value")
        prefix = f"{location}: " if location else ""
        details.append(f"- {prefix}{message}")
    return "Configuration validation errors detected:\n" + "\n".join(details)


def get_settings(app_dir: Path | None = None) -> ZhpickConfig:
    """Return the validated settings for typed access."""

    return _load_settings(app_dir or Path.cwd())
