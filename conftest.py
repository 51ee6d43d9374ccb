"""
Shared fixtures: a scripted LLM backend, an in-memory fetcher and a config
factory rooted in pytest's tmp_path.  None of them touch the network.
"""

from pathlib import Path

import pytest

from llmscan.config import LLMScanConfig
from llmscan.exceptions import FetchError
from llmscan.llm_client import BaseLLMClient

SITEMAP_URL = "https://example.com/sitemap.xml"


def sitemap(*urls: str) -> str:
    locs = "\n".join(f"  <url><loc>{url}</loc></url>" for url in urls)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">\n'
        f"{locs}\n"
        "</urlset>\n"
    )


def prompt_role(prompt: str) -> str:
    """Tell the three classifier prompts apart by their fixed instructions."""
    if 'Answer ONLY "YES" or "NO"' in prompt:
        return "relevance"
    if prompt.startswith("You are a technical documentation writer"):
        return "markdown"
    return "description"


class FakeLLMClient(BaseLLMClient):
    """
    Scripted backend.

    Each role's response may be a string, an exception instance (raised), or
    a callable taking the prompt.  Every call is recorded as
    (role, max_tokens, temperature).
    """

    def __init__(self, relevance="YES", markdown="# Guide\n\nSteps.", description="Explains the guide."):
        self.responses = {
            "relevance": relevance,
            "markdown": markdown,
            "description": description,
        }
        self.calls = []

    def complete(self, prompt: str, max_tokens: int = 1000, temperature: float = 0.2) -> str:
        role = prompt_role(prompt)
        self.calls.append((role, max_tokens, temperature))
        response = self.responses[role]
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(prompt)
        return response

    def roles(self) -> list:
        return [role for role, _, _ in self.calls]


class FakeFetcher:
    """Serves bodies from a dict; an int value is returned as that HTTP status."""

    def __init__(self, pages: dict):
        self.pages = pages
        self.calls = []

    def fetch(self, url: str) -> str:
        self.calls.append(url)
        body = self.pages.get(url, 404)
        if isinstance(body, int):
            raise FetchError(f"HTTP {body}", url=url, status_code=body)
        return body


@pytest.fixture
def make_config(tmp_path: Path):
    """Build an LLMScanConfig writing under tmp_path/site."""
    def _make(**overrides) -> LLMScanConfig:
        values = {
            "sitemap_url": SITEMAP_URL,
            "llms_output_dir": tmp_path / "site" / "llms",
            "web_root": tmp_path / "site",
            "project_name": "Example",
            "project_summary": "Example product docs.",
            "site_url": "https://example.com",
            "regenerate_after_days": 90,
            "log_mode": "none",
        }
        values.update(overrides)
        return LLMScanConfig(**values)
    return _make
