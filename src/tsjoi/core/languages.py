import os
from pathlib import Path, PurePath

from tsjoi.models import DEFAULT_INPUT_LABEL

_EXTENSION_LANGUAGE_MAP = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
}

# Longest first so that "types.d.ts" loses ".d.ts" rather than ".ts".
_SOURCE_SUFFIXES = (".d.ts", ".tsx", ".ts")

_DEFAULT_LANGUAGE = "typescript"
_SUPPORTED_LANGUAGES = {"typescript", "tsx"}


def normalize_language(language: str) -> str:
    normalized = language.strip().lower()
    resolved = _EXTENSION_LANGUAGE_MAP.get(f".{normalized}", normalized)
    if resolved not in _SUPPORTED_LANGUAGES:
        raise ValueError(f"Unsupported language '{language}'. Supported: {sorted(_SUPPORTED_LANGUAGES)}")
    return resolved


def detect_language_from_path(file_path: PurePath) -> str:
    return _EXTENSION_LANGUAGE_MAP.get(file_path.suffix.lower(), _DEFAULT_LANGUAGE)


def resolve_language(language: str | None, file_path: PurePath | None) -> str:
    if language:
        return normalize_language(language)
    if file_path:
        return detect_language_from_path(file_path)
    return _DEFAULT_LANGUAGE


def strip_source_suffix(label: str) -> str:
    for suffix in _SOURCE_SUFFIXES:
        if label.endswith(suffix):
            return label[: -len(suffix)]
    return label


def import_path(input_label: str) -> str:
    """Module specifier for ``import * as T from '...'`` derived from ``input_label``."""
    label = strip_source_suffix(input_label.replace("\\", "/")) or strip_source_suffix(DEFAULT_INPUT_LABEL)
    if label.startswith(("./", "../", "/")):
        return label
    return f"./{label}"


def relative_label(input_path: Path, output_path: Path | None) -> str:
    """Label for ``input_path`` as seen from the directory ``output_path`` is written to."""
    if output_path is None:
        return input_path.as_posix()
    relative = os.path.relpath(input_path, output_path.parent)
    return Path(relative).as_posix()
