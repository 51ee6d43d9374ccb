"""
Sanitizer module for rule-based HTML cleanup.

Reduces a fetched page to the markup that matters for classification and
Markdown conversion:
- Drops scripts, styles, page chrome (header/nav/footer) and comments
- Narrows the document to its most likely main-content region
- Strips every tag outside a small structural allow-list

Design principle: NEVER FAIL on bad HTML. Everything is pattern-based, so
malformed markup just yields less (or empty) output.

Pipeline position: between the fetcher and the classifier.
Input:  raw HTML string
Output: trimmed "plainish" HTML, or "" when no body content survives
"""

import re
from abc import ABC, abstractmethod

from .logger import get_module_logger

logger = get_module_logger("sanitizer")


class BaseSanitizer(ABC):
    """Turns raw page HTML into the content sent to the backend."""

    @abstractmethod
    def clean(self, html: str) -> str:
        """Return sanitized HTML; an empty string means no usable content."""
        pass


class RegexSanitizer(BaseSanitizer):
    """
    Pattern-based sanitizer.

    Non-greedy matches mean nested elements of the same tag end at the first
    closing tag; this is accepted in exchange for never choking on bad HTML.
    """

    # Elements removed together with everything inside them
    REMOVE_ELEMENTS = ['script', 'style', 'header', 'nav', 'footer']

    # Tags kept (with attributes) for the Markdown conversion prompt
    ALLOWED_TAGS = frozenset([
        'p', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'ul', 'ol', 'li', 'pre', 'code',
        'table', 'thead', 'tbody', 'tr', 'td', 'th', 'blockquote', 'strong', 'em',
        'dl', 'dt', 'dd', 'figure', 'figcaption',
    ])

    _REMOVE_PATTERNS = [
        re.compile(rf'<{tag}\b[^>]*>.*?</{tag}\s*>', re.IGNORECASE | re.DOTALL)
        for tag in REMOVE_ELEMENTS
    ]
    _COMMENT_PATTERN = re.compile(r'<!--.*?-->', re.DOTALL)

    # Main-content candidates, tried in order
    _ARTICLE_PATTERN = re.compile(r'<article\b[^>]*>(.*?)</article\s*>', re.IGNORECASE | re.DOTALL)
    _CONTENT_CLASS_PATTERN = re.compile(
        r'<([a-z][a-z0-9]*)\b[^>]*(?<![\w-])class\s*=\s*(["\'])[^"\']*'
        r'(?:entry-content|content|main)[^"\']*\2[^>]*>(.*?)</\1\s*>',
        re.IGNORECASE | re.DOTALL
    )

    _TAG_PATTERN = re.compile(r'<(/?)([a-z][a-z0-9]*)\b[^>]*>', re.IGNORECASE)
    # <!DOCTYPE ...>, <![CDATA[ ...]]> and <?xml ...?> never carry content we keep
    _DECLARATION_PATTERN = re.compile(r'<![^>]*>|<\?.*?\?>', re.DOTALL)

    def clean(self, html: str) -> str:
        """
        Sanitize raw page HTML.

        Args:
            html: Raw HTML string

        Returns:
            Trimmed HTML containing only allow-listed tags
        """
        if not html:
            return ""

        stripped = self._remove_noise(html)
        content = self._extract_main(stripped)
        cleaned = self._strip_tags(content).strip()

        logger.debug(f"Sanitized {len(html)} chars down to {len(cleaned)}")
        return cleaned

    def _remove_noise(self, html: str) -> str:
        """Remove non-content elements and comments."""
        for pattern in self._REMOVE_PATTERNS:
            html = pattern.sub('', html)
        return self._COMMENT_PATTERN.sub('', html)

    def _extract_main(self, html: str) -> str:
        """Narrow to <article>, then a content/main classed element, else keep all."""
        m = self._ARTICLE_PATTERN.search(html)
        if m:
            return m.group(1)

        m = self._CONTENT_CLASS_PATTERN.search(html)
        if m:
            return m.group(3)

        return html

    def _strip_tags(self, html: str) -> str:
        """Drop every tag not in ALLOWED_TAGS; text content is kept."""
        def keep_allowed(m: re.Match) -> str:
            return m.group(0) if m.group(2).lower() in self.ALLOWED_TAGS else ''

        html = self._DECLARATION_PATTERN.sub('', html)
        return self._TAG_PATTERN.sub(keep_allowed, html)


def clean_html(html: str) -> str:
    """Convenience function to sanitize HTML with the default sanitizer."""
    return RegexSanitizer().clean(html)
