"""Event interpreter: turns block/span/text events into normalized document bytes

A `DocumentCompiler` holds all per-document state (block stack, open spans,
line position, style runs) and writes through an `OutputSink`. It is driven
by nested calls from the markdown adapter; every enter must be matched by a
leave of the same kind before `finish` is called.
"""

import dataclasses
import logging

from mdteach.core.blocks import CONTAINER_BLOCKS, BlockStack, Separator
from mdteach.core.entities import encode_text, resolve_entity
from mdteach.core.errors import MalformedEventStreamError, NullCharacterError, UnsupportedEventError
from mdteach.core.events import BlockDetail, BlockType, SpanDetail, SpanType, TextType
from mdteach.core.sink import OutputSink
from mdteach.core.styles import StyleRuns, style_index


logger = logging.getLogger(__name__)

DEFAULT_BULLET = 0xA5           # bullet in Mac OS Roman
DEFAULT_HR_WIDTH = 30
LINE_END = b'\n'                # the sink writes it as CR

SUPPORTED_SPANS = frozenset({SpanType.em, SpanType.strong, SpanType.a, SpanType.img, SpanType.code})


def _describe(kind, detail) -> str:
    """Trace label for an event, e.g. 'OL (start=3, is_tight=True, mark_delimiter=.)'."""
    label = getattr(kind, 'value', str(kind)).upper()
    if detail is None or not dataclasses.is_dataclass(detail):
        return label
    fields = ", ".join(f"{k}={v}" for k, v in dataclasses.asdict(detail).items())
    return f"{label} ({fields})"


class DocumentCompiler:
    """Compile one document's event stream into text bytes and style runs."""

    def __init__(
        self,
        sink: OutputSink,
        bullet_char: int = DEFAULT_BULLET,
        hr_width: int = DEFAULT_HR_WIDTH,
        softbreak_as_space: bool = False,
        ):
        self.sink = sink
        self.bullet_char = bullet_char
        self.hr_width = hr_width
        self.softbreak_as_space = softbreak_as_space
        self.runs = StyleRuns()
        self.emitted = 0
        self._stack = BlockStack()
        self._spans: list[SpanType] = []
        self._at_line_start = True
        self._indent = 0

    # --- output ---

    def _style(self) -> int:
        return style_index(
            heading_level=self._stack.heading_level(),
            quote=self._stack.in_kind(BlockType.quote),
            code=SpanType.code in self._spans or self._stack.in_kind(BlockType.code),
            emphasis=SpanType.em in self._spans,
            strong=SpanType.strong in self._spans,
        )

    def _emit(self, data: bytes) -> None:
        if not data:
            return
        self.sink.write(data)
        self.runs.add(len(data), self._style())
        self.emitted += len(data)
        self._at_line_start = data[-1:] in (b'\n', b'\r')

    def _end_line(self) -> None:
        if not self._at_line_start:
            self._emit(LINE_END)

    def _separate(self, separator: Separator) -> None:
        if separator == Separator.none:
            return
        self._end_line()
        if separator == Separator.blank and self.emitted:
            self._emit(LINE_END)

    def _trace(self, message: str) -> None:
        logger.debug("%*s%s", self._indent, "", message)

    # --- events ---

    def enter_block(self, kind: BlockType, detail: BlockDetail = None) -> None:
        frame = self._stack.enter(kind, detail)
        self._trace(f"{_describe(kind, detail)} {{")
        self._indent += 2

        self._separate(frame.separator)
        if kind == BlockType.li:
            self._emit(self._stack.list_marker(self.bullet_char))
        elif kind == BlockType.hr:
            self._emit(b'_' * self.hr_width)

    def leave_block(self, kind: BlockType, detail: BlockDetail = None) -> None:
        self._stack.leave(kind)
        self._indent = max(self._indent - 2, 0)
        self._trace("}")
        if kind not in CONTAINER_BLOCKS:
            self._end_line()

    def enter_span(self, kind: SpanType, detail: SpanDetail = None) -> None:
        if kind not in SUPPORTED_SPANS:
            raise UnsupportedEventError(f"Invalid span type ({getattr(kind, 'value', kind)})")
        self._spans.append(kind)
        self._trace(f"{_describe(kind, detail)} {{")
        self._indent += 2

    def leave_span(self, kind: SpanType, detail: SpanDetail = None) -> None:
        if kind not in SUPPORTED_SPANS:
            raise UnsupportedEventError(f"Invalid span type ({getattr(kind, 'value', kind)})")
        if not self._spans or self._spans[-1] != kind:
            open_kind = self._spans[-1].value if self._spans else None
            raise MalformedEventStreamError(
                f"Expected to leave span of type {open_kind} but got type {kind.value}"
            )
        self._spans.pop()
        self._indent = max(self._indent - 2, 0)
        self._trace("}")

    def text(self, kind: TextType, text: str) -> None:
        if kind in (TextType.normal, TextType.code):
            self._trace(f"{'Code' if kind == TextType.code else 'Text'}: {text!r}")
            if '\x00' in text:
                raise NullCharacterError("Null character encountered on input")
            self._emit(encode_text(text))
        elif kind == TextType.entity:
            self._trace(f"Entity: {text!r}")
            byte = resolve_entity(text)
            if byte is not None:
                self._emit(bytes([byte]))
        elif kind == TextType.br:
            self._trace("BR")
            self._emit(LINE_END)
        elif kind == TextType.softbr:
            self._trace("SOFT BR")
            if self.softbreak_as_space:
                self._emit(b' ')
        elif kind == TextType.nullchar:
            raise NullCharacterError("Null character encountered on input")
        else:
            raise UnsupportedEventError(f"Invalid text type ({getattr(kind, 'value', kind)})")

    def trace(self, message: str) -> None:
        logger.debug("DEBUG: %s", message)

    def finish(self) -> StyleRuns:
        """Check that every block and span was closed; return the style runs."""
        if len(self._stack):
            still_open = ", ".join(frame.kind.value for frame in self._stack)
            raise MalformedEventStreamError(f"{len(self._stack)} block(s) left open: {still_open}")
        if self._spans:
            still_open = ", ".join(kind.value for kind in reversed(self._spans))
            raise MalformedEventStreamError(f"{len(self._spans)} span(s) left open: {still_open}")
        return self.runs
