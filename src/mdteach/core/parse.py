"""Frontmatter stripping, markdown-it tokenization, and token-to-event walking"""

import logging
import re
from pathlib import Path
from typing import Any

import yaml
from markdown_it import MarkdownIt

from mdteach.core.errors import NullCharacterError, UnsupportedEventError
from mdteach.core.events import (
    BlockType,
    CodeDetail,
    EventHandler,
    HeadingDetail,
    LinkDetail,
    OlDetail,
    SpanType,
    TextType,
    UlDetail,
)
from mdteach.core.models import ParsedDoc


logger = logging.getLogger(__name__)


FRONTMATTER_RE = re.compile(r'^---\s*\n(.*?)\n---\s*\n', re.DOTALL)

BLOCK_TOKENS: dict[str, BlockType] = {
    'paragraph':    BlockType.p,
    'heading':      BlockType.h,
    'bullet_list':  BlockType.ul,
    'ordered_list': BlockType.ol,
    'list_item':    BlockType.li,
    'blockquote':   BlockType.quote,
    'table':        BlockType.table,
    'thead':        BlockType.thead,
    'tbody':        BlockType.tbody,
    'tr':           BlockType.tr,
    'th':           BlockType.th,
    'td':           BlockType.td,
}

SPAN_TOKENS: dict[str, SpanType] = {
    'em':     SpanType.em,
    'strong': SpanType.strong,
    'link':   SpanType.a,
    's':      SpanType.strike,
}


def _make_parser(preset: str) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name.

    Raw HTML is left as text and entity tokens are kept apart from the
    surrounding text so they reach the compiler as references.
    """
    try:
        md = MarkdownIt(preset, options_update={"html": False, "linkify": False})
    except KeyError as e:
        raise ValueError(f"Unknown parser preset: {preset}") from e
    md.disable("text_join", ignoreInvalid=True)
    return md


def _strip_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body) with YAML header removed.

    A leading `---` block that is not a YAML mapping is ordinary markdown
    (a rule and a setext heading) and is left in the body.
    """
    m = FRONTMATTER_RE.match(text)
    if not m:
        return {}, text
    try:
        fm = yaml.safe_load(m.group(1))
    except yaml.YAMLError as e:
        logger.debug("Leading --- block is not YAML, keeping it as markdown: %s", e)
        return {}, text
    if not isinstance(fm, dict):
        logger.debug("Leading --- block is %s, not a mapping; keeping it as markdown", type(fm).__name__)
        return {}, text
    return fm, text[m.end():]


def _is_tight(tokens: list, i: int) -> bool:
    """Whether the list opened at tokens[i] is tight.

    markdown-it hides the paragraphs of tight lists, so the first direct
    paragraph decides. Lists without paragraphs (code-only items) are loose
    when a blank line separates two blocks of an item or follows any item
    but the last.
    """
    opener = tokens[i]
    closer = opener.type.replace('_open', '_close')
    items: list[tuple[list, list]] = []
    for tok in tokens[i + 1:]:
        if tok.type == closer and tok.level == opener.level:
            break
        if tok.type == 'paragraph_open' and tok.level == opener.level + 2:
            return tok.hidden
        if tok.type == 'list_item_open' and tok.level == opener.level + 1:
            items.append((tok.map, []))
        elif tok.level == opener.level + 2 and tok.nesting != -1 and tok.map and items:
            items[-1][1].append(tok.map)

    for n, (item_map, block_maps) in enumerate(items):
        if not item_map or not block_maps:
            continue
        for prev, nxt in zip(block_maps, block_maps[1:]):
            if prev[1] < nxt[0]:
                return False
        if n < len(items) - 1 and block_maps[-1][1] < item_map[1]:
            return False
    return True


def _block_detail(tokens: list, i: int):
    tok = tokens[i]
    if tok.type == 'heading_open':
        return HeadingDetail(level=int(tok.tag[1:]))
    if tok.type == 'bullet_list_open':
        return UlDetail(is_tight=_is_tight(tokens, i), mark=tok.markup or '-')
    if tok.type == 'ordered_list_open':
        start = tok.attrGet('start')
        return OlDetail(
            start=int(start) if start is not None else 1,
            is_tight=_is_tight(tokens, i),
            mark_delimiter=tok.markup or '.',
        )
    return None


def _link_detail(tok, attr: str) -> LinkDetail:
    return LinkDetail(href=str(tok.attrGet(attr) or ''), title=str(tok.attrGet('title') or ''))


def walk_inline(children: list, handler: EventHandler) -> None:
    """Issue span and text events for an inline token's children."""
    for tok in children:
        t = tok.type
        if t == 'text':
            handler.text(TextType.normal, tok.content)
        elif t == 'text_special':
            if tok.info == 'entity':
                handler.text(TextType.entity, tok.markup)
            else:
                handler.text(TextType.normal, tok.content)
        elif t == 'softbreak':
            handler.text(TextType.softbr, '\n')
        elif t == 'hardbreak':
            handler.text(TextType.br, '\n')
        elif t == 'code_inline':
            handler.enter_span(SpanType.code)
            handler.text(TextType.code, tok.content)
            handler.leave_span(SpanType.code)
        elif t == 'image':
            detail = _link_detail(tok, 'src')
            handler.enter_span(SpanType.img, detail)
            walk_inline(tok.children or [], handler)
            handler.leave_span(SpanType.img, detail)
        elif t == 'html_inline':
            handler.text(TextType.html, tok.content)
        elif t.endswith('_open') and t[:-5] in SPAN_TOKENS:
            detail = _link_detail(tok, 'href') if t == 'link_open' else None
            handler.enter_span(SPAN_TOKENS[t[:-5]], detail)
        elif t.endswith('_close') and t[:-6] in SPAN_TOKENS:
            handler.leave_span(SPAN_TOKENS[t[:-6]])
        else:
            raise UnsupportedEventError(f"Unsupported inline token type ({t})")


def walk_tokens(tokens: list, handler: EventHandler) -> None:
    """Replay a markdown-it token stream as nested block/span/text events."""
    handler.enter_block(BlockType.doc)
    for i, tok in enumerate(tokens):
        t = tok.type
        if tok.hidden:
            continue
        if t == 'inline':
            walk_inline(tok.children or [], handler)
        elif t in ('fence', 'code_block'):
            fence_char = tok.markup[0] if t == 'fence' and tok.markup else None
            detail = CodeDetail(fence_char=fence_char, info=tok.info.strip())
            handler.enter_block(BlockType.code, detail)
            if tok.content:
                handler.text(TextType.code, tok.content)
            handler.leave_block(BlockType.code, detail)
        elif t == 'hr':
            handler.enter_block(BlockType.hr)
            handler.leave_block(BlockType.hr)
        elif t == 'html_block':
            handler.enter_block(BlockType.html)
            handler.text(TextType.html, tok.content)
            handler.leave_block(BlockType.html)
        elif t.endswith('_open') and t[:-5] in BLOCK_TOKENS:
            handler.enter_block(BLOCK_TOKENS[t[:-5]], _block_detail(tokens, i))
        elif t.endswith('_close') and t[:-6] in BLOCK_TOKENS:
            handler.leave_block(BLOCK_TOKENS[t[:-6]])
        else:
            raise UnsupportedEventError(f"Unsupported block token type ({t})")
    handler.leave_block(BlockType.doc)


def parse_text(markdown: str, parser_config: str = 'commonmark') -> list:
    """Tokenize markdown; a NUL anywhere in the source is fatal."""
    if '\x00' in markdown:
        raise NullCharacterError("Null character encountered on input")
    return _make_parser(parser_config).parse(markdown)


def parse_file(path: Path, parser_config: str = 'commonmark', strip_frontmatter: bool = True) -> ParsedDoc:
    """Parse a single markdown file into a ParsedDoc with token stream."""
    raw = path.read_text(encoding='utf-8')
    frontmatter, body = _strip_frontmatter(raw) if strip_frontmatter else ({}, raw)
    return ParsedDoc(
        path=path,
        raw_markdown=raw,
        markdown=body,
        frontmatter=frontmatter,
        tokens=parse_text(body, parser_config),
    )
