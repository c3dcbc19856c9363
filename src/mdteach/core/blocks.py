"""Block context stack: nesting, indentation, list numbering and spacing"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from mdteach.core.errors import MalformedEventStreamError, UnsupportedEventError
from mdteach.core.events import BlockDetail, BlockType, HeadingDetail, OlDetail, UlDetail


SUPPORTED_BLOCKS = frozenset({
    BlockType.doc, BlockType.quote, BlockType.ul, BlockType.ol, BlockType.li,
    BlockType.hr, BlockType.h, BlockType.code, BlockType.p,
})
LIST_BLOCKS = frozenset({BlockType.ul, BlockType.ol})
CONTAINER_BLOCKS = frozenset({BlockType.doc, BlockType.quote, BlockType.ul, BlockType.ol})

REQUIRED_DETAIL = {
    BlockType.ul: UlDetail,
    BlockType.ol: OlDetail,
    BlockType.h:  HeadingDetail,
}


class Separator(str, Enum):
    """Spacing written before a block's own content"""
    none = "none"       # continue the current line
    line = "line"       # end the open line
    blank = "blank"     # end the open line, then one blank line


@dataclass
class BlockFrame:
    """One open block."""
    kind: BlockType
    detail: BlockDetail = None
    depth: int = 0                  # tab count for list items inside this block
    counter: int = 0                # next ordered-list number
    children: int = 0               # child blocks entered so far
    separator: Separator = Separator.none

    @property
    def is_list(self) -> bool:
        return self.kind in LIST_BLOCKS

    @property
    def is_tight(self) -> bool:
        return bool(getattr(self.detail, 'is_tight', False))


class BlockStack:
    """Stack of open blocks; the top is the most recently entered one."""

    def __init__(self):
        self._frames: list[BlockFrame] = []

    def __len__(self) -> int:
        return len(self._frames)

    def __iter__(self):
        return reversed(self._frames)

    @property
    def top(self) -> Optional[BlockFrame]:
        return self._frames[-1] if self._frames else None

    def _separator(self, kind: BlockType, parent: Optional[BlockFrame]) -> Separator:
        if kind in (BlockType.doc, BlockType.quote) or parent is None:
            return Separator.none
        if kind == BlockType.li:
            if not parent.is_tight and parent.children > 0:
                return Separator.blank
            return Separator.line
        if parent.kind == BlockType.li:
            if parent.children == 0 and kind not in LIST_BLOCKS:
                return Separator.none
            enclosing = self._frames[-2] if len(self._frames) > 1 else None
            if enclosing is not None and not enclosing.is_tight:
                return Separator.blank
            return Separator.line
        return Separator.blank

    def enter(self, kind: BlockType, detail: BlockDetail = None) -> BlockFrame:
        """Push a frame for `kind` and return it with its separator decided."""
        if kind not in SUPPORTED_BLOCKS:
            raise UnsupportedEventError(f"Invalid block type ({getattr(kind, 'value', kind)})")
        expected = REQUIRED_DETAIL.get(kind)
        if expected is not None and not isinstance(detail, expected):
            raise MalformedEventStreamError(
                f"Block {kind.value} requires {expected.__name__}, got {type(detail).__name__}"
            )

        parent = self.top
        if kind == BlockType.li and (parent is None or not parent.is_list):
            raise MalformedEventStreamError("Got a list item block without an enclosing list")

        frame = BlockFrame(
            kind=kind,
            detail=detail,
            depth=parent.depth if parent else 0,
            separator=self._separator(kind, parent),
        )
        if kind in LIST_BLOCKS:
            frame.depth += 1
        if kind == BlockType.ol:
            frame.counter = detail.start
        if parent is not None:
            parent.children += 1
        self._frames.append(frame)
        return frame

    def leave(self, kind: BlockType) -> BlockFrame:
        """Pop the top frame, which must be of `kind`."""
        if not self._frames:
            raise MalformedEventStreamError(
                f"Block list is empty but leaving block of type {getattr(kind, 'value', kind)}"
            )
        top = self._frames[-1]
        if top.kind != kind:
            raise MalformedEventStreamError(
                f"Expected to leave block of type {top.kind.value} "
                f"but got type {getattr(kind, 'value', kind)}"
            )
        return self._frames.pop()

    def enclosing_list(self) -> BlockFrame:
        """Return the list frame directly under the current list item."""
        if len(self._frames) < 2 or self._frames[-1].kind != BlockType.li:
            raise MalformedEventStreamError("No list item is open")
        parent = self._frames[-2]
        if not parent.is_list:
            raise MalformedEventStreamError("Got a list item block without an enclosing list")
        return parent

    def list_marker(self, bullet: int) -> bytes:
        """Render the indentation and marker for the current list item.

        Ordered lists render '<n><delim> ' and advance their counter;
        unordered lists render the bullet byte and a space.
        """
        item = self._frames[-1] if self._frames else None
        lst = self.enclosing_list()
        indent = b'\t' * item.depth
        if lst.kind == BlockType.ol:
            marker = f"{lst.counter}{lst.detail.mark_delimiter} ".encode('ascii')
            lst.counter += 1
        else:
            marker = bytes([bullet]) + b' '
        return indent + marker

    def heading_level(self) -> Optional[int]:
        """Level of the innermost open heading, if any."""
        for frame in self:
            if frame.kind == BlockType.h:
                return frame.detail.level
        return None

    def in_kind(self, kind: BlockType) -> bool:
        return any(frame.kind == kind for frame in self._frames)
