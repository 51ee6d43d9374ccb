"""
Pydantic schemas passed between the scanner stages.

Data flow for one URL:
  URL → PageEntry (slug) → FreshnessCache decision → fetch + sanitize
      → PageClassifier (verdict, markdown, description) → IndexEntry

ScanResult collects the IndexEntry list plus bookkeeping for the whole run.
"""

import re
from enum import Enum
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field

# Characters that survive slugging as-is; everything else becomes "-"
_SLUG_UNSAFE = re.compile(r"[^a-z0-9\-_.]", re.IGNORECASE)
_SLUG_DASHES = re.compile(r"-+")


def url_to_slug(url: str) -> str:
    """
    Derive the artifact slug from a URL path.

    "/docs/Getting Started/" → "docs-getting-started"
    "/" or ""                → "index"
    """
    path = urlparse(url).path.strip("/")
    if not path:
        return "index"
    slug = _SLUG_UNSAFE.sub("-", path)
    slug = _SLUG_DASHES.sub("-", slug)
    return slug.strip("-").lower() or "index"


class CacheDecision(Enum):
    """Outcome of the freshness check for one slug."""
    SKIP_KEEP = "skip_keep"        # fresh .html.md on disk, keep it in the index
    SKIP_REJECT = "skip_reject"    # fresh .not_technical marker, leave it out
    REPROCESS = "reprocess"        # nothing usable cached, run the full pipeline


class PageEntry(BaseModel):
    """A sitemap URL as it moves through one scanner iteration."""
    url: str
    slug: str
    html: str = ""                          # sanitized HTML
    technical: Optional[bool] = None        # None until the relevance check ran
    markdown: str = ""
    description: str = ""

    @classmethod
    def from_url(cls, url: str) -> "PageEntry":
        return cls(url=url, slug=url_to_slug(url))


class IndexEntry(BaseModel):
    """One line of the llms.txt Documentation section."""
    slug: str
    description: str


class ScanResult(BaseModel):
    """Output of LLMScanner.run(): what ended up in the index and why."""
    entries: list[IndexEntry] = Field(default_factory=list)  # in processing order
    cached: list[str] = Field(default_factory=list)          # SKIP_KEEP slugs
    rejected: list[str] = Field(default_factory=list)        # non-technical (fresh marker or new verdict)
    skipped: list[str] = Field(default_factory=list)         # fetch/sanitize/transform failures
    index_path: Optional[Path] = None
