"""Pipeline step functions: compile markdown events and write the container"""

import io
import logging
from pathlib import Path
from typing import BinaryIO, Optional

from mdteach.config import Settings
from mdteach.core.container import write_header, write_runs
from mdteach.core.errors import SinkError
from mdteach.core.interpreter import DocumentCompiler
from mdteach.core.models import ConversionResult
from mdteach.core.parse import parse_file, parse_text, walk_tokens
from mdteach.core.sink import OutputSink
from mdteach.core.styles import StyleRuns, build_style_table


logger = logging.getLogger(__name__)


def make_compiler(sink: OutputSink, settings: Settings) -> DocumentCompiler:
    return DocumentCompiler(
        sink,
        bullet_char=settings.bullet_char,
        hr_width=settings.hr_width,
        softbreak_as_space=settings.softbreak_as_space,
    )


def compile_tokens(tokens: list, sink: OutputSink, settings: Settings) -> tuple[StyleRuns, int]:
    """Stream document text for `tokens` into `sink`. Returns (runs, text_length)."""
    compiler = make_compiler(sink, settings)
    walk_tokens(tokens, compiler)
    runs = compiler.finish()
    return runs, compiler.emitted


def write_container(tokens: list, destination: BinaryIO, settings: Settings) -> tuple[int, int, int]:
    """Write header, text and style runs to a binary destination.

    Returns (text_length, run_count, file_size).
    """
    sink = OutputSink(destination, capacity=settings.buffer_size)
    styles = build_style_table(settings.heading_sizes, settings.text_size, settings.code_size)
    write_header(sink, styles)
    runs, text_length = compile_tokens(tokens, sink, settings)
    write_runs(sink, runs, text_length)
    sink.close()
    return text_length, max(len(runs), 1), sink.written


def convert_text(markdown: str, settings: Optional[Settings] = None) -> bytes:
    """Convert markdown held in memory; returns the container bytes."""
    settings = settings or Settings()
    out = io.BytesIO()
    write_container(parse_text(markdown, settings.parser_config), out, settings)
    return out.getvalue()


def compile_text(markdown: str, settings: Optional[Settings] = None) -> tuple[bytes, StyleRuns]:
    """Compile markdown to bare document text (CR line endings) and its style runs."""
    settings = settings or Settings()
    out = io.BytesIO()
    sink = OutputSink(out, capacity=settings.buffer_size)
    runs, _ = compile_tokens(parse_text(markdown, settings.parser_config), sink, settings)
    sink.close()
    return out.getvalue(), runs


def run_convert(input_path: Path, output_path: Path, settings: Settings) -> ConversionResult:
    """Convert one markdown file into a container file, replacing any existing output."""
    parsed = parse_file(input_path, settings.parser_config, settings.strip_frontmatter)
    logger.debug("Parsed %s: %d tokens", input_path, len(parsed.tokens))

    try:
        fh = output_path.open('wb')
    except OSError as e:
        raise SinkError(f"Unable to create output file {output_path}: {e}") from e
    with fh:
        text_length, run_count, file_size = write_container(parsed.tokens, fh, settings)

    logger.info("Converted %s -> %s (%d text bytes, %d style runs)", input_path, output_path, text_length, run_count)
    return ConversionResult(
        source=str(input_path),
        output=str(output_path),
        text_length=text_length,
        run_count=run_count,
        file_size=file_size,
        frontmatter=parsed.frontmatter,
    )
