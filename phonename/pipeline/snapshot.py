from __future__ import annotations

import re
from typing import List, Optional, Protocol

from playwright.sync_api import Page
from selectolax.parser import HTMLParser, Node


class PageSnapshot(Protocol):
    """Read-only view of a rendered page used by gate detection and extraction."""

    status_code: Optional[int]

    def html(self) -> str: ...

    def body_text(self) -> str: ...

    def query_texts(self, selector: str) -> List[str]: ...


class PlaywrightSnapshot:
    """Live view over a Playwright page; each call queries the current DOM."""

    def __init__(self, page: Page, status_code: Optional[int] = None) -> None:
        self.page = page
        self.status_code = status_code

    def html(self) -> str:
        return self.page.content()

    def body_text(self) -> str:
        return self.page.inner_text("body")

    def query_texts(self, selector: str) -> List[str]:
        texts: List[str] = []
        for el in self.page.query_selector_all(selector):
            texts.append(el.text_content() or "")
        return texts


class StaticSnapshot:
    """Snapshot over saved HTML, parsed with selectolax (no JavaScript)."""

    _NON_TEXT_TAGS = frozenset({"script", "style", "noscript", "template", "head"})
    # Elements that start and end a line in rendered text
    _BLOCK_TAGS = frozenset({
        "address", "article", "aside", "blockquote", "dd", "div", "dl", "dt",
        "fieldset", "figcaption", "figure", "footer", "form", "h1", "h2", "h3",
        "h4", "h5", "h6", "header", "hr", "li", "main", "nav", "ol", "p", "pre",
        "section", "table", "tr", "td", "th", "ul", "body", "html",
    })
    _SPACE_RE = re.compile(r"\s+")

    def __init__(self, html: str, status_code: Optional[int] = None) -> None:
        self._html = html or ""
        self.status_code = status_code
        self._tree = HTMLParser(self._html)

    def html(self) -> str:
        return self._html

    def body_text(self) -> str:
        if not self._html.strip():
            return ""
        root = self._tree.body or self._tree.root
        if root is None:
            return ""
        parts: List[str] = []
        self._render(root, parts)
        lines = (" ".join(line.split()) for line in "".join(parts).split("\n"))
        return "\n".join(line for line in lines if line)

    def _render(self, node: Node, parts: List[str]) -> None:
        """Approximate innerText: inline text joins, blocks and <br> break lines."""
        for child in node.iter(include_text=True):
            tag = child.tag
            if tag == "-text":
                parts.append(self._SPACE_RE.sub(" ", child.text(deep=False) or ""))
            elif tag == "br":
                parts.append("\n")
            elif tag in self._NON_TEXT_TAGS or tag.startswith("_"):
                continue
            elif tag in self._BLOCK_TAGS:
                parts.append("\n")
                self._render(child, parts)
                parts.append("\n")
            else:
                self._render(child, parts)

    def query_texts(self, selector: str) -> List[str]:
        if not self._html.strip():
            return []
        return [node.text() or "" for node in self._tree.css(selector)]
