"""Unit tests for core/blocks.py"""

import pytest

from mdteach.core.blocks import BlockStack, Separator
from mdteach.core.errors import MalformedEventStreamError, UnsupportedEventError
from mdteach.core.events import BlockType, HeadingDetail, OlDetail, UlDetail


TIGHT_UL = UlDetail(is_tight=True, mark="-")
LOOSE_UL = UlDetail(is_tight=False, mark="*")


@pytest.fixture(name="stack")
def stack_fixture():
    stack = BlockStack()
    stack.enter(BlockType.doc)
    return stack


def test_enter_and_leave_balance(stack):
    """Every enter is undone by a matching leave."""
    stack.enter(BlockType.p)
    assert stack.top.kind == BlockType.p
    stack.leave(BlockType.p)
    stack.leave(BlockType.doc)
    assert len(stack) == 0


def test_leave_mismatch(stack):
    """Leaving a kind other than the top frame's is fatal."""
    stack.enter(BlockType.p)
    with pytest.raises(MalformedEventStreamError, match="Expected to leave block of type p"):
        stack.leave(BlockType.h)


def test_leave_empty_stack():
    """Leaving with no open block is fatal."""
    with pytest.raises(MalformedEventStreamError, match="empty"):
        BlockStack().leave(BlockType.p)


def test_unsupported_kind(stack):
    """Block kinds outside the supported set abort."""
    with pytest.raises(UnsupportedEventError, match="table"):
        stack.enter(BlockType.table)


def test_list_requires_detail(stack):
    """List and heading frames need their detail records."""
    with pytest.raises(MalformedEventStreamError):
        stack.enter(BlockType.ol)
    with pytest.raises(MalformedEventStreamError):
        stack.enter(BlockType.h, None)


def test_list_item_outside_list(stack):
    """A list item whose parent is not a list is fatal."""
    stack.enter(BlockType.quote)
    with pytest.raises(MalformedEventStreamError, match="without an enclosing list"):
        stack.enter(BlockType.li)


def test_depth_increases_for_list_children(stack):
    """Lists add one indentation level, seen by their items."""
    outer = stack.enter(BlockType.ul, TIGHT_UL)
    item = stack.enter(BlockType.li)
    inner = stack.enter(BlockType.ul, TIGHT_UL)
    inner_item = stack.enter(BlockType.li)
    para = stack.enter(BlockType.p)
    assert (outer.depth, item.depth, inner.depth, inner_item.depth, para.depth) == (1, 1, 2, 2, 2)


def test_ordered_marker_counts_from_start(stack):
    """Ordered markers start at the list's start value and advance per item."""
    stack.enter(BlockType.ol, OlDetail(start=3, is_tight=True, mark_delimiter="."))
    markers = []
    for _ in range(3):
        stack.enter(BlockType.li)
        markers.append(stack.list_marker(0xA5))
        stack.leave(BlockType.li)
    assert markers == [b"\t3. ", b"\t4. ", b"\t5. "]


def test_ordered_marker_paren_delimiter(stack):
    """The list's delimiter character follows the number."""
    stack.enter(BlockType.ol, OlDetail(start=1, is_tight=True, mark_delimiter=")"))
    stack.enter(BlockType.li)
    assert stack.list_marker(0xA5) == b"\t1) "


def test_unordered_marker_uses_bullet(stack):
    """Unordered items use the bullet byte, never a counter."""
    stack.enter(BlockType.ul, TIGHT_UL)
    stack.enter(BlockType.li)
    assert stack.list_marker(0xA5) == b"\t\xa5 "
    stack.leave(BlockType.li)
    stack.enter(BlockType.li)
    assert stack.list_marker(0xA5) == b"\t\xa5 "


def test_nested_ordered_counters_are_independent(stack):
    """Each ordered list keeps its own counter."""
    stack.enter(BlockType.ol, OlDetail(start=1, is_tight=True, mark_delimiter="."))
    stack.enter(BlockType.li)
    assert stack.list_marker(0xA5) == b"\t1. "
    stack.enter(BlockType.ol, OlDetail(start=7, is_tight=True, mark_delimiter="."))
    stack.enter(BlockType.li)
    assert stack.list_marker(0xA5) == b"\t\t7. "
    stack.leave(BlockType.li)
    stack.leave(BlockType.ol)
    stack.leave(BlockType.li)
    stack.enter(BlockType.li)
    assert stack.list_marker(0xA5) == b"\t2. "


def test_enclosing_list_requires_open_item(stack):
    """enclosing_list is only meaningful inside a list item."""
    with pytest.raises(MalformedEventStreamError):
        stack.enclosing_list()


@pytest.mark.parametrize("kind", [BlockType.quote])
def test_quote_never_separates(stack, kind):
    """Quote blocks do not emit their own separator."""
    assert stack.enter(kind).separator == Separator.none


def test_top_level_blocks_get_blank_line(stack):
    """Paragraphs, headings and lists at document level are set off by a blank line."""
    assert stack.enter(BlockType.p).separator == Separator.blank
    stack.leave(BlockType.p)
    assert stack.enter(BlockType.h, HeadingDetail(level=2)).separator == Separator.blank


def test_tight_items_only_end_the_line(stack):
    """Tight lists never put a blank line between items."""
    stack.enter(BlockType.ul, TIGHT_UL)
    assert stack.enter(BlockType.li).separator == Separator.line
    stack.leave(BlockType.li)
    assert stack.enter(BlockType.li).separator == Separator.line


def test_loose_items_get_blank_line_between(stack):
    """Loose lists separate items, but not before the first one."""
    stack.enter(BlockType.ul, LOOSE_UL)
    assert stack.enter(BlockType.li).separator == Separator.line
    stack.leave(BlockType.li)
    assert stack.enter(BlockType.li).separator == Separator.blank


def test_first_child_of_item_continues_marker_line(stack):
    """The first block in a list item stays on the marker line; later ones do not."""
    stack.enter(BlockType.ul, LOOSE_UL)
    stack.enter(BlockType.li)
    assert stack.enter(BlockType.p).separator == Separator.none
    stack.leave(BlockType.p)
    assert stack.enter(BlockType.p).separator == Separator.blank


def test_nested_list_in_tight_item_starts_new_line(stack):
    """A nested list ends the item's line without a blank line in tight lists."""
    stack.enter(BlockType.ul, TIGHT_UL)
    stack.enter(BlockType.li)
    assert stack.enter(BlockType.ul, TIGHT_UL).separator == Separator.line


def test_heading_level_and_in_kind(stack):
    """heading_level and in_kind look through the whole stack."""
    stack.enter(BlockType.quote)
    stack.enter(BlockType.h, HeadingDetail(level=3))
    assert stack.heading_level() == 3
    assert stack.in_kind(BlockType.quote)
    assert not stack.in_kind(BlockType.code)
