"""
Bullet extractor for free-form experience descriptions.

Snapshots sometimes store an entry's responsibilities as one description
string instead of a list: either rich-text HTML or plain text with bullet
markers. This splits such a string into individual bullets.
"""

import re

from bs4 import BeautifulSoup, Comment

# Leading markers stripped from plain-text bullet lines
_BULLET_MARKER = re.compile(r"^(?:[•\-*>▸▹◦‣]\s*|\d+[.)]\s+)")
_HTML_TAG = re.compile(r"<[a-zA-Z][^>]*>")
_WHITESPACE = re.compile(r"\s+")


class BulletExtractor:
    """
    Splits a description into bullets.

    HTML list items become one bullet each; block elements without list
    items are split per paragraph. Plain text is split per line.
    """

    # Tags that never carry description text
    IGNORED_TAGS = ["script", "style", "noscript", "iframe", "svg"]

    # Block-level tags treated as separate bullets when no list is present
    BLOCK_TAGS = ["p", "div", "h1", "h2", "h3", "h4", "h5", "h6"]

    def extract(self, description: str | None) -> list[str]:
        """
        Extract bullets from a description.

        Args:
            description: HTML or plain-text description

        Returns:
            List of non-empty bullet strings in document order
        """
        if not description or not description.strip():
            return []

        if _HTML_TAG.search(description):
            return self._extract_from_html(description)
        return self._extract_from_text(description)

    def _extract_from_html(self, html: str) -> list[str]:
        soup = BeautifulSoup(html, "lxml")

        for tag in soup.find_all(self.IGNORED_TAGS):
            tag.decompose()
        for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
            comment.extract()

        list_items = soup.find_all("li")
        if list_items:
            elements = list_items
        else:
            elements = soup.find_all(self.BLOCK_TAGS)

        if not elements:
            text = soup.get_text("\n")
            return self._extract_from_text(text)

        bullets: list[str] = []
        for element in elements:
            # Nested lists are emitted as their own items
            if element.find(["li", *self.BLOCK_TAGS]) is not None and element.name != "li":
                continue
            text = self._normalize_whitespace(self._own_text(element))
            if text:
                bullets.append(self._strip_marker(text))
        return [bullet for bullet in bullets if bullet]

    def _own_text(self, element) -> str:
        """Text of an element excluding nested list items."""
        parts = []
        for child in element.children:
            if getattr(child, "name", None) in ("ul", "ol"):
                continue
            if hasattr(child, "get_text"):
                parts.append(child.get_text(" "))
            else:
                parts.append(str(child))
        return " ".join(parts)

    def _extract_from_text(self, text: str) -> list[str]:
        bullets = []
        for line in text.splitlines():
            line = self._normalize_whitespace(line)
            if not line:
                continue
            bullet = self._strip_marker(line)
            if bullet:
                bullets.append(bullet)
        return bullets

    def _strip_marker(self, line: str) -> str:
        return _BULLET_MARKER.sub("", line, count=1).strip()

    def _normalize_whitespace(self, text: str) -> str:
        return _WHITESPACE.sub(" ", text).strip()
