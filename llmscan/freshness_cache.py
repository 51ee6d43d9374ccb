"""
File-based freshness cache for generated documentation.

The output directory itself is the cache: per slug there is at most one of
  <slug>.html.md               : converted technical page
  <slug>.not_technical.html.md : empty marker for a rejected page
and the file's mtime says how old the decision is.

Benefits:
- Cost savings: fresh slugs never reach the fetcher or the backend
- Manual override: delete a file to force that page to be re-evaluated
"""

import time
from pathlib import Path
from typing import Callable, Optional, Union

from .schemas import CacheDecision
from .logger import get_module_logger

logger = get_module_logger("freshness_cache")

MARKDOWN_SUFFIX = ".html.md"
MARKER_SUFFIX = ".not_technical.html.md"

SECONDS_PER_DAY = 24 * 60 * 60


class FreshnessCache:
    """
    Decides per slug whether cached output can be reused.

    A max age of 0 days disables reuse: every slug is reprocessed and
    existing files are simply overwritten.
    """

    def __init__(
        self,
        output_dir: Union[str, Path],
        max_age_days: int = 0,
        clock: Callable[[], float] = time.time
    ):
        """
        Initialize freshness cache.

        Args:
            output_dir: Directory holding the .html.md artifacts
            max_age_days: Reuse artifacts younger than this many days
            clock: Returns "now" as a Unix timestamp (injectable for tests)
        """
        self.output_dir = Path(output_dir)
        self.max_age_days = max_age_days
        self.clock = clock

    @property
    def enabled(self) -> bool:
        return self.max_age_days > 0

    @property
    def max_age_seconds(self) -> int:
        return self.max_age_days * SECONDS_PER_DAY

    def markdown_path(self, slug: str) -> Path:
        return self.output_dir / f"{slug}{MARKDOWN_SUFFIX}"

    def marker_path(self, slug: str) -> Path:
        return self.output_dir / f"{slug}{MARKER_SUFFIX}"

    def age(self, path: Path) -> Optional[float]:
        """Seconds since *path* was last written, None if it doesn't exist."""
        try:
            return self.clock() - path.stat().st_mtime
        except FileNotFoundError:
            return None

    def decide(self, slug: str) -> CacheDecision:
        """
        Check cached artifacts for *slug*.

        Stale artifacts (age >= max age) are deleted so the slug starts
        from scratch.

        Returns:
            SKIP_KEEP, SKIP_REJECT or REPROCESS
        """
        if not self.enabled:
            return CacheDecision.REPROCESS

        markdown_file = self.markdown_path(slug)
        marker_file = self.marker_path(slug)

        # The technical file wins if both somehow exist
        markdown_age = self.age(markdown_file)
        existing, file_age = (markdown_file, markdown_age)
        if markdown_age is None:
            existing, file_age = (marker_file, self.age(marker_file))

        if file_age is None:
            return CacheDecision.REPROCESS

        if file_age < self.max_age_seconds:
            if existing == markdown_file:
                logger.info(f"Skipping (fresh technical file): {existing.name} (age: {file_age / 3600:.1f}h)")
                return CacheDecision.SKIP_KEEP
            logger.info(f"Skipping (recently marked non-technical): {existing.name} (age: {file_age / 3600:.1f}h)")
            return CacheDecision.SKIP_REJECT

        logger.info(f"Cached decision outdated (age: {file_age / SECONDS_PER_DAY:.1f}d), re-evaluating: {slug}")
        self.discard(slug)
        return CacheDecision.REPROCESS

    def save_markdown(self, slug: str, markdown: str) -> Path:
        """Write the technical artifact, replacing any rejection marker."""
        path = self.markdown_path(slug)
        path.write_text(markdown, encoding="utf-8")
        self.marker_path(slug).unlink(missing_ok=True)
        logger.info(f"Saved: {path.name}")
        return path

    def mark_rejected(self, slug: str) -> Path:
        """Write an empty rejection marker, replacing any technical artifact."""
        path = self.marker_path(slug)
        path.write_bytes(b"")
        self.markdown_path(slug).unlink(missing_ok=True)
        logger.info(f"Created marker: {path.name}")
        return path

    def discard(self, slug: str) -> bool:
        """Delete both artifacts for *slug*. Returns True if anything was removed."""
        removed = False
        for path in (self.markdown_path(slug), self.marker_path(slug)):
            if path.exists():
                path.unlink()
                logger.debug(f"Deleted {path.name}")
                removed = True
        return removed
