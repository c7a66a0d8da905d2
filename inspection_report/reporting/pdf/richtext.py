"""
Rich-Text Parser.

Converts the HTML produced by the narrative editor (Quill / contenteditable)
into display Lines: an indentation level, an optional bullet label and a
list of styled Spans. The PDF canvas has no rich-text primitive, so the
layout engine draws these spans one by one.

Style context is an immutable SpanStyle passed down the node tree; every
nested element receives a merged copy.
"""
import logging
import re
from dataclasses import dataclass, field, replace
from html.parser import HTMLParser
from typing import Dict, List, Optional, Union

logger = logging.getLogger(__name__)

BULLET_GLYPHS = ("•", "–", "»", "·")

HEADING_TAGS = {"h1", "h2", "h3", "h4", "h5", "h6"}
LIST_TAGS = {"ul", "ol"}
BLOCK_TAGS = {
    "p", "div", "blockquote", "pre", "li", "section", "article",
    "table", "thead", "tbody", "tr", "td", "th", "figure",
} | HEADING_TAGS | LIST_TAGS
VOID_TAGS = {"br", "img", "hr", "meta", "link", "input", "wbr"}
SKIP_TAGS = {"script", "style", "img", "head", "title"}
IGNORED_VALUES = {"", "transparent", "inherit", "initial", "unset", "none", "currentcolor"}

_WS_RE = re.compile(r"\s+")
_TAG_RE = re.compile(r"<[^>]+>")
_QL_INDENT_RE = re.compile(r"\bql-indent-(\d+)\b")


@dataclass(frozen=True)
class SpanStyle:
    bold: bool = False
    italic: bool = False
    underline: bool = False
    color: Optional[str] = None
    background: Optional[str] = None


@dataclass(frozen=True)
class Span:
    text: str
    style: SpanStyle = SpanStyle()

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()


@dataclass
class Line:
    indent: int = 0
    bullet: Optional[str] = None
    spans: List[Span] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(s.text for s in self.spans)

    @property
    def is_blank(self) -> bool:
        return self.bullet is None and all(s.is_blank for s in self.spans)


# ============================================================================
# HTML → node tree
# ============================================================================

@dataclass
class _Node:
    tag: str
    attrs: Dict[str, str] = field(default_factory=dict)
    children: List[Union["_Node", str]] = field(default_factory=list)


class _TreeBuilder(HTMLParser):
    """Builds a lenient element tree (unclosed li/p are closed implicitly)."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.root = _Node("#root")
        self._stack = [self.root]

    def handle_starttag(self, tag, attrs):
        tag = tag.lower()
        if tag == "li":
            self._close_open("li", stop_at=LIST_TAGS)
        elif tag == "p" and self._stack[-1].tag == "p":
            self._stack.pop()

        node = _Node(tag, {k.lower(): (v or "") for k, v in attrs})
        self._stack[-1].children.append(node)
        if tag not in VOID_TAGS:
            self._stack.append(node)

    def handle_endtag(self, tag):
        tag = tag.lower()
        for i in range(len(self._stack) - 1, 0, -1):
            if self._stack[i].tag == tag:
                del self._stack[i:]
                return

    def handle_data(self, data):
        self._stack[-1].children.append(data)

    def _close_open(self, tag, stop_at):
        for i in range(len(self._stack) - 1, 0, -1):
            current = self._stack[i].tag
            if current in stop_at:
                return
            if current == tag:
                del self._stack[i:]
                return


def _build_tree(markup: str) -> _Node:
    builder = _TreeBuilder()
    builder.feed(markup)
    builder.close()
    return builder.root


# ============================================================================
# Style context
# ============================================================================

def _declarations(style_attr: str) -> Dict[str, str]:
    result = {}
    for decl in style_attr.split(";"):
        name, sep, value = decl.partition(":")
        if sep:
            result[name.strip().lower()] = value.strip().lower().replace("!important", "").strip()
    return result


def _element_style(node: _Node, style: SpanStyle) -> SpanStyle:
    """Merge the formatting carried by an element into the inherited style."""
    changes = {}
    tag = node.tag
    if tag in ("b", "strong") or tag in HEADING_TAGS:
        changes["bold"] = True
    elif tag in ("i", "em", "cite"):
        changes["italic"] = True
    elif tag in ("u", "ins"):
        changes["underline"] = True
    elif tag == "mark":
        changes["background"] = "yellow"
    elif tag == "font" and node.attrs.get("color", "").lower() not in IGNORED_VALUES:
        changes["color"] = node.attrs["color"]

    decls = _declarations(node.attrs.get("style", ""))
    if decls.get("color", "") not in IGNORED_VALUES:
        changes["color"] = decls["color"]
    for key in ("background-color", "background"):
        if decls.get(key, "") not in IGNORED_VALUES:
            changes["background"] = decls[key]
            break

    weight = decls.get("font-weight")
    if weight:
        if weight in ("bold", "bolder"):
            changes["bold"] = True
        elif weight.isdigit():
            changes["bold"] = int(weight) >= 600
        elif weight in ("normal", "lighter"):
            changes["bold"] = False

    font_style = decls.get("font-style")
    if font_style in ("italic", "oblique"):
        changes["italic"] = True
    elif font_style == "normal":
        changes["italic"] = False

    decoration = decls.get("text-decoration") or decls.get("text-decoration-line")
    if decoration and "underline" in decoration:
        changes["underline"] = True

    return replace(style, **changes) if changes else style


def _quill_indent(node: _Node) -> int:
    match = _QL_INDENT_RE.search(node.attrs.get("class", ""))
    return int(match.group(1)) if match else 0


# ============================================================================
# Inline content → spans
# ============================================================================

def _inline_spans(nodes, style: SpanStyle) -> List[Span]:
    spans = []
    for node in nodes:
        if isinstance(node, str):
            text = _WS_RE.sub(" ", node)
            if text:
                spans.append(Span(text, style))
        elif node.tag == "br":
            spans.append(Span(" ", style))
        elif node.tag in SKIP_TAGS:
            continue
        else:
            child_style = _element_style(node, style)
            spans.extend(_inline_spans(node.children, child_style))
            if node.tag in BLOCK_TAGS:
                spans.append(Span(" ", child_style))
    return spans


def merge_spans(spans: List[Span]) -> List[Span]:
    """Collapse whitespace across span boundaries, trim the line edges and
    merge neighbours that share a style."""
    cleaned = []
    for span in spans:
        text = span.text
        if cleaned and cleaned[-1].text.endswith(" ") and text.startswith(" "):
            text = text.lstrip(" ")
        elif not cleaned:
            text = text.lstrip(" ")
        if text:
            cleaned.append(Span(text, span.style))

    if cleaned:
        last = cleaned[-1]
        tail = last.text.rstrip(" ")
        cleaned[-1] = Span(tail, last.style)
        if not tail:
            cleaned.pop()

    merged = []
    for span in cleaned:
        if merged and merged[-1].style == span.style:
            merged[-1] = Span(merged[-1].text + span.text, span.style)
        else:
            merged.append(span)
    return merged


def _make_line(indent: int, bullet: Optional[str], spans: List[Span]) -> Line:
    return Line(indent=indent, bullet=bullet, spans=merge_spans(spans))


# ============================================================================
# Blocks → lines
# ============================================================================

def _has_block_children(node: _Node) -> bool:
    return any(not isinstance(c, str) and c.tag in BLOCK_TAGS for c in node.children)


def _block_lines(nodes, indent: int, style: SpanStyle) -> List[Line]:
    lines = []
    pending = []

    def flush():
        if pending:
            lines.append(_make_line(indent, None, _inline_spans(pending, style)))
            pending.clear()

    for node in nodes:
        if isinstance(node, str) or node.tag not in BLOCK_TAGS:
            pending.append(node)
            continue
        flush()
        lines.extend(_block_node_lines(node, indent, style))
    flush()
    return lines


def _block_node_lines(node: _Node, indent: int, style: SpanStyle) -> List[Line]:
    if node.tag in LIST_TAGS:
        return _list_lines(node, indent, style, ordered=node.tag == "ol")
    if node.tag == "li":
        item = _Node("ul", children=[node])
        return _list_lines(item, indent, style, ordered=False)

    node_style = _element_style(node, style)
    node_indent = indent + _quill_indent(node) + (1 if node.tag == "blockquote" else 0)
    if _has_block_children(node):
        return _block_lines(node.children, node_indent, node_style)
    return [_make_line(node_indent, None, _inline_spans(node.children, node_style))]


def _list_lines(list_node: _Node, base_indent: int, style: SpanStyle, ordered: bool) -> List[Line]:
    """One Line per item. Numbering restarts for every list element and is
    counted per nesting level."""
    lines = []
    counters: Dict[int, int] = {}
    list_style = _element_style(list_node, style)

    for child in list_node.children:
        if isinstance(child, str):
            if child.strip():
                lines.append(_make_line(base_indent, None, [Span(child, list_style)]))
            continue
        if child.tag in LIST_TAGS:
            lines.extend(_list_lines(child, base_indent + 1, list_style, child.tag == "ol"))
            continue
        if child.tag != "li":
            lines.extend(_block_node_lines(child, base_indent, list_style))
            continue

        level = _quill_indent(child)
        for deeper in [k for k in counters if k > level]:
            del counters[deeper]

        kind = child.attrs.get("data-list")
        item_ordered = {"ordered": True, "bullet": False}.get(kind, ordered)
        indent = base_indent + level
        if item_ordered:
            counters[level] = counters.get(level, 0) + 1
            bullet = f"{counters[level]}."
        else:
            counters.pop(level, None)
            bullet = BULLET_GLYPHS[indent % len(BULLET_GLYPHS)]

        item_style = _element_style(child, list_style)
        inline = [c for c in child.children if isinstance(c, str) or c.tag not in LIST_TAGS]
        nested = [c for c in child.children if not isinstance(c, str) and c.tag in LIST_TAGS]
        lines.append(_make_line(indent, bullet, _inline_spans(inline, item_style)))
        for sub in nested:
            lines.extend(_list_lines(sub, indent + 1, item_style, sub.tag == "ol"))

    return lines


# ============================================================================
# Public API
# ============================================================================

def _plain_lines(text: str) -> List[Line]:
    return [_make_line(0, None, [Span(part)]) for part in text.splitlines()]


def parse_rich_text(markup: Optional[str]) -> List[Line]:
    """Parse editor markup into display Lines.

    Empty input yields an empty list. Text without any tag is treated as
    plain text, one Line per input line.
    """
    if not markup or not markup.strip():
        return []

    if "<" not in markup:
        lines = _plain_lines(markup)
    else:
        try:
            root = _build_tree(markup)
            lines = _block_lines(root.children, 0, SpanStyle())
        except Exception as e:
            logger.warning(f"Rich text markup could not be parsed, using plain text: {e}")
            lines = _plain_lines(_TAG_RE.sub("\n", markup))

    return [line for line in lines if not line.is_blank]


def plain_text(markup: Optional[str]) -> str:
    """Text content of the markup, one line per display Line."""
    return "\n".join(
        (f"{line.bullet} " if line.bullet else "") + line.text
        for line in parse_rich_text(markup)
    )
