"""
Custom exceptions for llmscan.

Error philosophy:
  - FatalError (ConfigError, SitemapError, OutputError) → FAIL HARD: the run
    stops and the CLI exits with status 1.
  - FetchError, LLMClientError, TransformError → SKIP: the scanner logs the
    failure and moves on to the next URL. Nothing is written for that page.
  - Description failures never raise past the classifier; a generic
    description is used instead.
"""

from typing import Optional


class LLMScanError(Exception):
    """Base exception for all llmscan errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


# --- FAIL HARD: stops the run ---

class FatalError(LLMScanError):
    """Setup or output failure that aborts the whole run."""
    pass


class ConfigError(FatalError):
    """Missing or invalid config file, API key, or output directory."""
    pass


class SitemapError(FatalError):
    """Sitemap could not be fetched or contained no <loc> URLs."""

    def __init__(self, message: str, sitemap_url: str, details: Optional[dict] = None):
        super().__init__(message, details)
        self.sitemap_url = sitemap_url


class OutputError(FatalError):
    """The llms.txt index could not be written."""
    pass


# --- SKIP: per-page, the scanner continues with the next URL ---

class FetchError(LLMScanError):
    """Raised when a URL cannot be retrieved with HTTP 200."""

    def __init__(
        self,
        message: str,
        url: str,
        status_code: Optional[int] = None,
        details: Optional[dict] = None
    ):
        super().__init__(message, details)
        self.url = url
        self.status_code = status_code  # None for transport errors (DNS, timeout, TLS)


class LLMClientError(LLMScanError):
    """Raised when a text-generation backend call fails."""

    def __init__(
        self,
        message: str,
        provider: str,
        details: Optional[dict] = None
    ):
        super().__init__(message, details)
        self.provider = provider  # "openai" or "deepseek"


class TransformError(LLMScanError):
    """Raised when the backend produced no usable Markdown for a page."""
    pass
