from __future__ import annotations

import html
from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import Iterator, Optional, Union

VOID_ELEMENTS = {
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
}


@dataclass
class Text:
    """Raw markup between tags (text, entities, comments), kept verbatim."""

    raw: str

    def serialize(self) -> str:
        return self.raw


@dataclass
class Element:
    tag: str
    attrs: list[tuple[str, Optional[str]]] = field(default_factory=list)
    children: list["Node"] = field(default_factory=list)
    self_closing: bool = False

    # ----------------------------
    # Attributes
    # ----------------------------

    def get(self, name: str) -> Optional[str]:
        for k, v in self.attrs:
            if k == name:
                return v
        return None

    def has(self, name: str) -> bool:
        return any(k == name for k, _ in self.attrs)

    def set(self, name: str, value: Optional[str]) -> None:
        for i, (k, _) in enumerate(self.attrs):
            if k == name:
                self.attrs[i] = (k, value)
                return
        self.attrs.append((name, value))

    @property
    def classes(self) -> list[str]:
        return (self.get("class") or "").split()

    def add_class(self, name: str) -> None:
        current = self.classes
        if name in current:
            return
        self.set("class", " ".join(current + [name]))

    # ----------------------------
    # Traversal
    # ----------------------------

    def iter(self) -> Iterator["Element"]:
        for child in self.children:
            if isinstance(child, Element):
                yield child
                yield from child.iter()

    def find(self, tag: Optional[str] = None) -> Optional["Element"]:
        """First descendant element (document order), optionally by tag name."""
        for el in self.iter():
            if tag is None or el.tag == tag:
                return el
        return None

    def serialize(self) -> str:
        parts = [f"<{self.tag}"]
        for k, v in self.attrs:
            if v is None:
                parts.append(f" {k}")
            else:
                parts.append(f' {k}="{html.escape(v, quote=True)}"')
        if self.self_closing:
            parts.append(" />")
            return "".join(parts)
        parts.append(">")
        if self.tag in VOID_ELEMENTS:
            return "".join(parts)
        parts.extend(child.serialize() for child in self.children)
        parts.append(f"</{self.tag}>")
        return "".join(parts)


Node = Union[Element, Text]


class Fragment(Element):
    """Parsed block markup. Serializes to its children only."""

    def __init__(self, children: Optional[list[Node]] = None):
        super().__init__(tag="#fragment", children=children or [])

    def serialize(self) -> str:
        return "".join(child.serialize() for child in self.children)


class _TreeBuilder(HTMLParser):
    def __init__(self) -> None:
        # keep entities as written; attribute values are unescaped by the
        # parser and re-escaped on output
        super().__init__(convert_charrefs=False)
        self.root = Fragment()
        self._stack: list[Element] = [self.root]

    @property
    def _current(self) -> Element:
        return self._stack[-1]

    def _append_text(self, raw: str) -> None:
        children = self._current.children
        if children and isinstance(children[-1], Text):
            children[-1].raw += raw
        else:
            children.append(Text(raw))

    def handle_starttag(self, tag, attrs):
        el = Element(tag=tag, attrs=list(attrs))
        self._current.children.append(el)
        if tag not in VOID_ELEMENTS:
            self._stack.append(el)

    def handle_startendtag(self, tag, attrs):
        self._current.children.append(Element(tag=tag, attrs=list(attrs), self_closing=True))

    def handle_endtag(self, tag):
        # close up to the matching open element; stray end tags are dropped
        for i in range(len(self._stack) - 1, 0, -1):
            if self._stack[i].tag == tag:
                del self._stack[i:]
                return

    def handle_data(self, data):
        self._append_text(data)

    def handle_entityref(self, name):
        self._append_text(f"&{name};")

    def handle_charref(self, name):
        self._append_text(f"&#{name};")

    def handle_comment(self, data):
        self._append_text(f"<!--{data}-->")

    def handle_decl(self, decl):
        self._append_text(f"<!{decl}>")

    def handle_pi(self, data):
        self._append_text(f"<?{data}>")

    def unknown_decl(self, data):
        self._append_text(f"<![{data}]>")


def parse_fragment(markup: str) -> Fragment:
    builder = _TreeBuilder()
    builder.feed(markup or "")
    builder.close()
    return builder.root
