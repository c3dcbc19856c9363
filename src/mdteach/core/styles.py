"""Style table definition and style-run accumulation"""

from dataclasses import dataclass
from typing import Iterator, Optional, Sequence


NUM_HEADING_SIZES = 6
NUM_TEXT_FORMATS = 4            # plain, em, strong, strong+em

NUM_HEADING_STYLES = NUM_HEADING_SIZES * NUM_TEXT_FORMATS
NUM_CODE_STYLES = 1
NUM_TEXT_STYLES = NUM_TEXT_FORMATS
NUM_QUOTE_STYLES = NUM_TEXT_FORMATS
TOTAL_STYLES = NUM_HEADING_STYLES + NUM_CODE_STYLES + NUM_TEXT_STYLES + NUM_QUOTE_STYLES

CODE_STYLE = NUM_HEADING_STYLES
TEXT_STYLE_BASE = CODE_STYLE + NUM_CODE_STYLES
QUOTE_STYLE_BASE = TEXT_STYLE_BASE + NUM_TEXT_STYLES

# QuickDraw II font families and style bits
FAMILY_TIMES = 0x0014
FAMILY_HELVETICA = 0x0015
FAMILY_COURIER = 0x0016
STYLE_BOLD = 0x01
STYLE_ITALIC = 0x02

FORE_COLOR = 0x0000
BACK_COLOR = 0xFFFF

DEFAULT_HEADING_SIZES = (36, 30, 27, 24, 20, 18)


@dataclass(frozen=True)
class TextStyle:
    """One style table entry (font family, style bits, point size, colours)."""
    family: int
    style: int
    size: int
    fore_color: int = FORE_COLOR
    back_color: int = BACK_COLOR


@dataclass(frozen=True)
class StyleRun:
    """A contiguous stretch of text sharing one style table entry."""
    length: int
    style: int


def text_format(emphasis: bool, strong: bool) -> int:
    """Format offset within a group of four: plain, em, strong, strong+em."""
    return (1 if emphasis else 0) | (2 if strong else 0)


def style_index(
    heading_level: Optional[int] = None,
    quote: bool = False,
    code: bool = False,
    emphasis: bool = False,
    strong: bool = False,
    ) -> int:
    """Pick the style table index; code beats heading beats quote beats body text."""
    fmt = text_format(emphasis, strong)
    if code:
        return CODE_STYLE
    if heading_level:
        level = min(max(heading_level, 1), NUM_HEADING_SIZES)
        return (level - 1) * NUM_TEXT_FORMATS + fmt
    if quote:
        return QUOTE_STYLE_BASE + fmt
    return TEXT_STYLE_BASE + fmt


def _format_bits(fmt: int) -> int:
    return (STYLE_ITALIC if fmt & 1 else 0) | (STYLE_BOLD if fmt & 2 else 0)


def build_style_table(
    heading_sizes: Sequence[int] = DEFAULT_HEADING_SIZES,
    text_size: int = 12,
    code_size: int = 12,
    ) -> list[TextStyle]:
    """Return the full style table in index order."""
    if len(heading_sizes) != NUM_HEADING_SIZES:
        raise ValueError(f"Expected {NUM_HEADING_SIZES} heading sizes, got {len(heading_sizes)}")
    table = [
        TextStyle(FAMILY_HELVETICA, _format_bits(fmt), size)
        for size in heading_sizes
        for fmt in range(NUM_TEXT_FORMATS)
    ]
    table.append(TextStyle(FAMILY_COURIER, 0, code_size))
    table.extend(TextStyle(FAMILY_HELVETICA, _format_bits(fmt), text_size) for fmt in range(NUM_TEXT_FORMATS))
    table.extend(TextStyle(FAMILY_TIMES, _format_bits(fmt), text_size) for fmt in range(NUM_TEXT_FORMATS))
    return table


class StyleRuns:
    """Emission-ordered style runs; neighbours with the same style merge."""

    def __init__(self):
        self._runs: list[StyleRun] = []
        self.total = 0

    def add(self, length: int, style: int) -> None:
        if length <= 0:
            return
        if not 0 <= style < TOTAL_STYLES:
            raise ValueError(f"Style index out of range: {style}")
        if self._runs and self._runs[-1].style == style:
            self._runs[-1] = StyleRun(self._runs[-1].length + length, style)
        else:
            self._runs.append(StyleRun(length, style))
        self.total += length

    def __iter__(self) -> Iterator[StyleRun]:
        return iter(self._runs)

    def __len__(self) -> int:
        return len(self._runs)

    def as_list(self) -> list[StyleRun]:
        return list(self._runs)
