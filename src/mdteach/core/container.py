"""Container serialization: header, ruler, style table, text and style runs

Layout (little-endian):

    int16   version
    int32   ruler size
    ruler   int16 leftMargin, leftIndent, rightMargin, just, extraLS, flags,
            int32 userData, int16 tabType, tabTerminator
    int32   style list length (bytes)
    style   uint16 family, uint8 style bits, uint8 size,
            uint16 foreColor, uint16 backColor, int32 userData   (x style count)
    uint32  style count
    ...     text bytes
    run     uint32 length, uint32 style index                    (x run count)
    uint32  run count

The header does not depend on the text, so it is written before the text is
streamed; the run list and its count close the file. The style count field
holds the table size and runs hold style indices, as laid out above; this
has not been checked against a TextEdit TEFormat written by Teach itself.
"""

import struct
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from mdteach.core.errors import ConversionError
from mdteach.core.sink import OutputSink
from mdteach.core.styles import TEXT_STYLE_BASE, StyleRun, TextStyle


FORMAT_VERSION = 0

HEADER = struct.Struct('<hi')
RULER = struct.Struct('<hhhhhhihh')
STYLE_LIST_LENGTH = struct.Struct('<i')
TE_STYLE = struct.Struct('<HBBHHi')
STYLE_COUNT = struct.Struct('<I')
RUN = struct.Struct('<II')
RUN_COUNT = struct.Struct('<I')

TAB_TYPE_NONE = 0
TAB_TYPE_REGULAR = 1


@dataclass(frozen=True)
class Ruler:
    """Paragraph ruler shared by the whole document."""
    left_margin: int = 0
    left_indent: int = 0
    right_margin: int = 560
    just: int = 0                   # 0 = left
    extra_line_spacing: int = 0
    flags: int = 0
    user_data: int = 0
    tab_type: int = TAB_TYPE_REGULAR
    tab_terminator: int = 32        # spacing between regular tab stops

    def pack(self) -> bytes:
        return RULER.pack(
            self.left_margin, self.left_indent, self.right_margin, self.just,
            self.extra_line_spacing, self.flags, self.user_data,
            self.tab_type, self.tab_terminator,
        )


@dataclass
class Container:
    """A parsed container file."""
    version: int
    ruler: Ruler
    styles: list[TextStyle]
    text: bytes
    runs: list[StyleRun] = field(default_factory=list)


def pack_header(styles: Sequence[TextStyle], ruler: Ruler = Ruler()) -> bytes:
    """Return header, ruler record and style table as bytes."""
    parts = [HEADER.pack(FORMAT_VERSION, RULER.size), ruler.pack()]
    parts.append(STYLE_LIST_LENGTH.pack(len(styles) * TE_STYLE.size))
    parts.extend(
        TE_STYLE.pack(s.family, s.style, s.size, s.fore_color, s.back_color, 0)
        for s in styles
    )
    parts.append(STYLE_COUNT.pack(len(styles)))
    return b''.join(parts)


def pack_runs(runs: Iterable[StyleRun]) -> bytes:
    """Return the run list followed by the run count.

    An empty document still gets a single zero-length body-text run.
    """
    runs = list(runs) or [StyleRun(0, TEXT_STYLE_BASE)]
    return b''.join(RUN.pack(r.length, r.style) for r in runs) + RUN_COUNT.pack(len(runs))


def write_header(sink: OutputSink, styles: Sequence[TextStyle], ruler: Ruler = Ruler()) -> int:
    """Write the header through the sink; return its size in bytes."""
    data = pack_header(styles, ruler)
    sink.write_record(data)
    return len(data)


def write_runs(sink: OutputSink, runs: Iterable[StyleRun], text_length: int) -> None:
    """Write the style runs, which must cover exactly `text_length` bytes."""
    runs = list(runs)
    covered = sum(r.length for r in runs)
    if covered != text_length:
        raise ConversionError(f"Style runs cover {covered} bytes but {text_length} text bytes were written")
    sink.write_record(pack_runs(runs))


def read_container(data: bytes) -> Container:
    """Parse a container produced by this module; raises ValueError if malformed."""
    try:
        version, ruler_size = HEADER.unpack_from(data, 0)
        if ruler_size != RULER.size:
            raise ValueError(f"Unexpected ruler size {ruler_size}")
        offset = HEADER.size
        ruler = Ruler(*RULER.unpack_from(data, offset))
        offset += RULER.size

        (style_list_length,) = STYLE_LIST_LENGTH.unpack_from(data, offset)
        offset += STYLE_LIST_LENGTH.size
        if style_list_length % TE_STYLE.size:
            raise ValueError(f"Style list length {style_list_length} is not a multiple of {TE_STYLE.size}")
        styles = []
        for _ in range(style_list_length // TE_STYLE.size):
            family, bits, size, fore, back, _user = TE_STYLE.unpack_from(data, offset)
            styles.append(TextStyle(family, bits, size, fore, back))
            offset += TE_STYLE.size
        (style_count,) = STYLE_COUNT.unpack_from(data, offset)
        offset += STYLE_COUNT.size
        if style_count != len(styles):
            raise ValueError(f"Style count {style_count} does not match style list ({len(styles)})")

        (run_count,) = RUN_COUNT.unpack_from(data, len(data) - RUN_COUNT.size)
        runs_start = len(data) - RUN_COUNT.size - run_count * RUN.size
        if runs_start < offset:
            raise ValueError(f"Run count {run_count} overlaps the header")
        runs = [StyleRun(*RUN.unpack_from(data, runs_start + i * RUN.size)) for i in range(run_count)]
    except struct.error as e:
        raise ValueError(f"Truncated container: {e}") from e

    text = data[offset:runs_start]
    if sum(r.length for r in runs) != len(text):
        raise ValueError(f"Style runs cover {sum(r.length for r in runs)} bytes but text is {len(text)} bytes")
    for r in runs:
        if r.style >= len(styles):
            raise ValueError(f"Style index {r.style} outside style table")
    return Container(version=version, ruler=ruler, styles=styles, text=text, runs=runs)
