"""Event vocabulary shared by the markdown adapter and the document compiler"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Union


class BlockType(str, Enum):
    """Block-level structures a document can open and close"""
    doc = "doc"
    quote = "quote"
    ul = "ul"
    ol = "ol"
    li = "li"
    hr = "hr"
    h = "h"
    code = "code"
    html = "html"
    p = "p"
    table = "table"
    thead = "thead"
    tbody = "tbody"
    tr = "tr"
    th = "th"
    td = "td"


class SpanType(str, Enum):
    """Inline formatting regions inside a block"""
    em = "em"
    strong = "strong"
    a = "a"
    img = "img"
    code = "code"
    strike = "strike"


class TextType(str, Enum):
    """Kinds of text run delivered inside blocks and spans"""
    normal = "normal"
    nullchar = "nullchar"
    br = "br"
    softbr = "softbr"
    entity = "entity"
    code = "code"
    html = "html"
    latexmath = "latexmath"


@dataclass(frozen=True)
class UlDetail:
    is_tight: bool
    mark: str                       # '-', '*' or '+'


@dataclass(frozen=True)
class OlDetail:
    start: int
    is_tight: bool
    mark_delimiter: str             # '.' or ')'


@dataclass(frozen=True)
class HeadingDetail:
    level: int                      # 1-6


@dataclass(frozen=True)
class CodeDetail:
    fence_char: Optional[str] = None    # None for indented code
    info: str = ""


@dataclass(frozen=True)
class LinkDetail:
    href: str
    title: str = ""


BlockDetail = Union[UlDetail, OlDetail, HeadingDetail, CodeDetail, None]
SpanDetail = Union[LinkDetail, None]


class EventHandler(Protocol):
    """Receiver of the nested callbacks issued for one document."""

    def enter_block(self, kind: BlockType, detail: BlockDetail = None) -> None: ...

    def leave_block(self, kind: BlockType, detail: BlockDetail = None) -> None: ...

    def enter_span(self, kind: SpanType, detail: SpanDetail = None) -> None: ...

    def leave_span(self, kind: SpanType, detail: SpanDetail = None) -> None: ...

    def text(self, kind: TextType, text: str) -> None: ...

    def trace(self, message: str) -> None: ...
