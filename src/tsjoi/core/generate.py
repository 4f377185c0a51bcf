import logging
import sys
from pathlib import Path

from tsjoi.core.compiler import compile_module
from tsjoi.core.languages import relative_label, resolve_language
from tsjoi.models import DEFAULT_INPUT_LABEL, CompileOptions

logger = logging.getLogger(__name__)

STDIN_MARKER = "-"


def read_source(input_path: str) -> str:
    if input_path == STDIN_MARKER:
        return sys.stdin.read()
    try:
        return Path(input_path).read_text(encoding="utf-8")
    except FileNotFoundError:
        raise FileNotFoundError(f"File not found: {input_path}") from None


def build_options(input_path: str, output_path: str | None, suffix: str = "") -> CompileOptions:
    if input_path == STDIN_MARKER:
        label = DEFAULT_INPUT_LABEL
    else:
        label = relative_label(Path(input_path), Path(output_path) if output_path else None)
    return CompileOptions(suffix=suffix, input_label=label)


def generate(input_path: str, output_path: str | None = None, suffix: str = "") -> str:
    """Compile ``input_path`` (``-`` for stdin) and write the schemas to ``output_path`` or stdout.

    Returns the generated module text.
    """
    options = build_options(input_path, output_path, suffix)
    language = resolve_language(None, None if input_path == STDIN_MARKER else Path(input_path))
    logger.info("Compiling %s (language: %s, suffix: %r)", input_path, language, suffix)

    generated = compile_module(read_source(input_path), options, language)

    if output_path is None:
        sys.stdout.write(generated)
    else:
        Path(output_path).write_text(generated, encoding="utf-8")
        logger.info("Wrote schemas to %s", output_path)
    return generated
