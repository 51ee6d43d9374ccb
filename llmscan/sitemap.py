"""
Sitemap URL discovery.

URLs are read with a <loc> pattern rather than an XML parser, so sitemap
index files, namespaced documents and slightly broken XML all yield whatever
<loc> entries they contain.
"""

import re

from .exceptions import FetchError, SitemapError
from .fetcher import Fetcher
from .logger import get_module_logger

logger = get_module_logger("sitemap")

LOC_PATTERN = re.compile(r"<loc>\s*(https?://[^\s<]+)\s*</loc>", re.IGNORECASE)


def extract_sitemap_urls(xml: str) -> list[str]:
    """Return every <loc> URL in document order, duplicates removed."""
    seen = set()
    urls = []
    for match in LOC_PATTERN.finditer(xml):
        url = match.group(1).strip()
        if url not in seen:
            seen.add(url)
            urls.append(url)
    return urls


def fetch_sitemap_urls(fetcher: Fetcher, sitemap_url: str) -> list[str]:
    """
    Fetch a sitemap and return its page URLs.

    Raises:
        SitemapError: if the sitemap cannot be fetched or lists no URLs
    """
    try:
        xml = fetcher.fetch(sitemap_url)
    except FetchError as e:
        raise SitemapError(
            f"Failed to fetch sitemap: {e.message}",
            sitemap_url=sitemap_url,
            details={"status_code": e.status_code}
        )

    urls = extract_sitemap_urls(xml)
    if not urls:
        raise SitemapError("No <loc> tags found in sitemap", sitemap_url=sitemap_url)

    logger.info(f"Found {len(urls)} URLs in sitemap")
    return urls
