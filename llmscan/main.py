"""
Main orchestrator for llmscan.

Drives one run over a sitemap:

    sitemap → for each URL:
        freshness check → fetch → sanitize → relevance → markdown → description → persist
    → llms.txt

URLs are processed strictly one after another.  Only setup failures
(directories, sitemap, index write) raise out of run(); anything that goes
wrong for a single page is logged and that page is skipped.
"""

import logging
from typing import Optional

from .classifier import PageClassifier
from .config import LLMScanConfig
from .exceptions import LLMScanError, FetchError
from .fetcher import Fetcher
from .freshness_cache import FreshnessCache
from .index_writer import IndexWriter
from .llm_client import BaseLLMClient
from .sanitizer import BaseSanitizer, RegexSanitizer
from .schemas import CacheDecision, IndexEntry, PageEntry, ScanResult, url_to_slug
from .sitemap import fetch_sitemap_urls
from .logger import get_module_logger

CACHED_DESCRIPTION = "Technical documentation page (cached)."


class LLMScanner:
    """
    Main orchestrator for llms.txt generation.

    Coordinates the per-page pipeline:
    1. FreshnessCache: skip slugs with fresh artifacts
    2. Fetcher + Sanitizer: reduce the page to its main content
    3. PageClassifier: relevance, Markdown, description
    4. IndexWriter: regenerate llms.txt from the accumulated entries
    """

    def __init__(
        self,
        config: LLMScanConfig,
        llm_client: BaseLLMClient,
        fetcher: Optional[Fetcher] = None,
        sanitizer: Optional[BaseSanitizer] = None,
        logger: Optional[logging.Logger] = None,
        force_refresh: bool = False
    ):
        self.config = config
        self.logger = logger or get_module_logger("main")

        self.fetcher = fetcher or Fetcher(config.user_agent)
        self.sanitizer = sanitizer or RegexSanitizer()
        self.classifier = PageClassifier(llm_client)
        self.cache = FreshnessCache(
            config.llms_output_dir,
            max_age_days=0 if force_refresh else config.regenerate_after_days
        )
        self.index_writer = IndexWriter(config)

    def run(self) -> ScanResult:
        """
        Process every sitemap URL and write llms.txt.

        Returns:
            ScanResult with the index entries and per-slug bookkeeping

        Raises:
            FatalError: directory, sitemap or index write failure
        """
        self.config.ensure_directories()

        self.logger.info("Starting LLM documentation generation...")
        self.logger.info(f"Project: {self.config.project_name}")
        self.logger.info(f"Sitemap: {self.config.sitemap_url}")

        urls = fetch_sitemap_urls(self.fetcher, self.config.sitemap_url)

        result = ScanResult()
        seen_slugs = set()
        for url in urls:
            # "/docs" and "/docs/" share an artifact; only the first URL is handled
            slug = url_to_slug(url)
            if slug in seen_slugs:
                self.logger.info(f"Skipping (duplicate slug {slug}): {url}")
                continue
            seen_slugs.add(slug)

            entry = self.process_url(url, result)
            if entry is not None:
                result.entries.append(entry)

        result.index_path = self.index_writer.write(result.entries)
        self.logger.info(f"Done! Processed {len(result.entries)} documentation pages.")
        return result

    def process_url(self, url: str, result: ScanResult) -> Optional[IndexEntry]:
        """
        Run the per-page pipeline for one URL.

        Returns:
            The IndexEntry to list in llms.txt, or None if the page is left out.
            Skips and rejections are recorded on *result*.
        """
        self.logger.info(f"Evaluating: {url}")
        page = PageEntry.from_url(url)

        try:
            # --- Freshness check happens before any network call ---
            decision = self.cache.decide(page.slug)
            if decision == CacheDecision.SKIP_KEEP:
                result.cached.append(page.slug)
                return IndexEntry(slug=page.slug, description=CACHED_DESCRIPTION)
            if decision == CacheDecision.SKIP_REJECT:
                result.rejected.append(page.slug)
                return None

            return self._process_page(page, result)
        except FetchError as e:
            self.logger.info(f"Skipping (fetch failed: {e.message}): {url}")
        except LLMScanError as e:
            self.logger.info(f"Skipping ({e.message}): {url}")
        except Exception as e:
            self.logger.error(f"Skipping (unexpected error: {e}): {url}")

        result.skipped.append(page.slug)
        return None

    def _process_page(self, page: PageEntry, result: ScanResult) -> Optional[IndexEntry]:
        raw_html = self.fetcher.fetch(page.url)

        page.html = self.sanitizer.clean(raw_html)
        if not page.html:
            self.logger.info(f"Skipping (no body content): {page.url}")
            result.skipped.append(page.slug)
            return None

        # Step 1: relevance
        page.technical = self.classifier.is_technical(page.html)
        if not page.technical:
            self.logger.info(f"Page marked as non-technical: {page.url}")
            if self.config.skip_non_technical_cache:
                self.cache.mark_rejected(page.slug)
            else:
                # A technical artifact from an earlier run must not outlive the new verdict
                self.cache.markdown_path(page.slug).unlink(missing_ok=True)
            result.rejected.append(page.slug)
            return None

        # Step 2: markdown (TransformError propagates to process_url → skip)
        page.markdown = self.classifier.to_markdown(page.html)

        # Step 3: description (never fails)
        page.description = self.classifier.describe(page.markdown)

        self.cache.save_markdown(page.slug, page.markdown)
        return IndexEntry(slug=page.slug, description=page.description)


def run_scan(config: LLMScanConfig, llm_client: BaseLLMClient, force_refresh: bool = False) -> ScanResult:
    """Convenience function to run a scan with default fetcher and sanitizer."""
    return LLMScanner(config, llm_client, force_refresh=force_refresh).run()
