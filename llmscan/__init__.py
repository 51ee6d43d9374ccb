"""
llmscan

Generates llms.txt documentation for a website from its sitemap.
- Sanitizer: regex-based reduction of pages to their main content
- PageClassifier: LLM relevance check, Markdown conversion, description
- FreshnessCache: reuse of recent .html.md output between runs
- LLMScanner: the per-page pipeline and llms.txt index

Public API surface:
  Orchestration       : LLMScanner, run_scan
  Configuration       : LLMScanConfig, load_config, load_api_key
  Components          : Fetcher, RegexSanitizer, PageClassifier, FreshnessCache, IndexWriter
  LLM backends        : Backend, LLMClient, BaseLLMClient
  Data models         : PageEntry, IndexEntry, ScanResult, CacheDecision
  Error types         : FatalError (aborts the run), FetchError / LLMClientError / TransformError (skip page)
"""

# --- Orchestration ---
from .main import LLMScanner, run_scan

# --- Configuration ---
from .config import LLMScanConfig, load_config, load_api_key

# --- Pipeline components ---
from .fetcher import Fetcher
from .sanitizer import BaseSanitizer, RegexSanitizer
from .classifier import PageClassifier
from .freshness_cache import FreshnessCache
from .index_writer import IndexWriter
from .llm_client import Backend, LLMClient, BaseLLMClient

# --- Data models ---
from .schemas import PageEntry, IndexEntry, ScanResult, CacheDecision, url_to_slug

# --- Exceptions ---
from .exceptions import (
    LLMScanError,
    FatalError,
    ConfigError,
    SitemapError,
    OutputError,
    FetchError,
    LLMClientError,
    TransformError,
)

__version__ = "1.0.0"
__all__ = [
    "LLMScanner",
    "run_scan",
    "LLMScanConfig",
    "load_config",
    "load_api_key",
    "Fetcher",
    "BaseSanitizer",
    "RegexSanitizer",
    "PageClassifier",
    "FreshnessCache",
    "IndexWriter",
    "Backend",
    "LLMClient",
    "BaseLLMClient",
    "PageEntry",
    "IndexEntry",
    "ScanResult",
    "CacheDecision",
    "url_to_slug",
    "LLMScanError",
    "FatalError",
    "ConfigError",
    "SitemapError",
    "OutputError",
    "FetchError",
    "LLMClientError",
    "TransformError",
]
