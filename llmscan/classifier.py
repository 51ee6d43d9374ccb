"""
LLM-backed page classification and conversion.

Three independent prompt roles run against one BaseLLMClient:
  1. Relevance  : is this technical documentation?  (YES / NO)
  2. Markdown   : rewrite the sanitized HTML as neutral Markdown
  3. Description: one factual sentence for the llms.txt index

Each role degrades differently on failure: relevance falls back to "not
technical", Markdown raises TransformError (the page is skipped), and the
description falls back to a generic sentence.
"""

import re
from typing import Optional

from .llm_client import BaseLLMClient
from .exceptions import LLMClientError, TransformError
from .logger import get_module_logger

logger = get_module_logger("classifier")

FALLBACK_DESCRIPTION = "Technical documentation page."

# Token budgets per role: the verdict is a single word, the description a
# single sentence.
RELEVANCE_MAX_TOKENS = 10
MARKDOWN_MAX_TOKENS = 2000
DESCRIPTION_MAX_TOKENS = 60
DESCRIPTION_TEMPERATURE = 0.3


# --- Prompts ---
# Content is fenced with triple quotes so the model can tell page text from
# instructions.  The relevance prompt lists what to reject explicitly; models
# otherwise tend to accept any page that mentions a product feature.

RELEVANCE_PROMPT = '''Analyze the following webpage content. Determine if it contains **technical documentation, feature explanations, setup instructions, configuration details, or factual product behavior**.

Exclude pages that are:
- Marketing, sales, or promotional (e.g., "best", "free trial", "100% off", "download now")
- Pricing, testimonials, or calls to action
- Legal (terms, privacy policy, DMCA, refund policy)
- Contact pages, support forms, blog posts, changelogs, FAQs, or "about" pages
- Vague overviews without concrete technical details

Answer ONLY "YES" or "NO".
Do not explain.

Content:
"""
{content}
"""'''

MARKDOWN_PROMPT = '''You are a technical documentation writer. Convert the following content into concise, neutral Markdown for LLM training.

Rules:
- Remove ALL marketing, pricing, CTAs, emotional language, testimonials, and promotional phrases.
- Keep only factual information: features, how it works, inputs/outputs, setup steps, configuration options, technical behavior.
- Use clear headings (#, ##, ###) if structure exists.
- Never invent capabilities or details not present.
- Output ONLY valid Markdown — no intro, no outro, no disclaimers.

Content:
"""
{content}
"""'''

DESCRIPTION_PROMPT = '''Write a single-sentence, factual description of this technical page. Focus on what it does or explains. Avoid fluff, marketing, or subjective claims.

Example: "Adds Google Analytics via ID input without editing theme files."

Page content:
"""
{content}
"""'''

_FENCE_OPEN = re.compile(r'^```(?:markdown)?\s*', re.IGNORECASE)
_FENCE_CLOSE = re.compile(r'\s*```$')
_LINE_BREAK = re.compile(r'[\r\n]')


def is_affirmative(response: Optional[str]) -> bool:
    """Only a bare YES (any case, surrounding whitespace ignored) counts."""
    return bool(response) and response.strip().upper() == "YES"


def strip_code_fences(markdown: str) -> str:
    """
    Remove a ```markdown / ``` wrapper from a model response.

    Models often wrap the whole document in a fence even when told not to;
    the artifact should be the bare document.
    """
    markdown = markdown.strip()
    if markdown.startswith("```"):
        markdown = _FENCE_OPEN.sub('', markdown)
        markdown = _FENCE_CLOSE.sub('', markdown)
    return markdown.strip()


def first_line(text: str) -> str:
    """Text before the first line break, trimmed."""
    return _LINE_BREAK.split(text, maxsplit=1)[0].strip()


class PageClassifier:
    """Runs the relevance, Markdown and description prompts for one page."""

    def __init__(self, llm_client: BaseLLMClient):
        self.llm_client = llm_client

    def is_technical(self, html: str) -> bool:
        """Relevance check; a backend failure counts as "not technical"."""
        prompt = RELEVANCE_PROMPT.format(content=html)
        try:
            response = self.llm_client.complete(prompt, max_tokens=RELEVANCE_MAX_TOKENS)
        except LLMClientError as e:
            logger.warning(f"Relevance check failed: {e.message}")
            return False

        verdict = is_affirmative(response)
        logger.debug(f"Relevance verdict: {response!r} -> {verdict}")
        return verdict

    def to_markdown(self, html: str) -> str:
        """
        Convert sanitized HTML to Markdown.

        Raises:
            TransformError: if the backend fails or returns nothing usable
        """
        prompt = MARKDOWN_PROMPT.format(content=html)
        try:
            response = self.llm_client.complete(prompt, max_tokens=MARKDOWN_MAX_TOKENS)
        except LLMClientError as e:
            raise TransformError(
                f"AI failed to generate Markdown: {e.message}",
                details={"provider": e.provider}
            )

        markdown = strip_code_fences(response or "")
        if not markdown:
            raise TransformError("AI returned empty Markdown")
        return markdown

    def describe(self, markdown: str) -> str:
        """One-sentence description; never raises."""
        prompt = DESCRIPTION_PROMPT.format(content=markdown)
        try:
            response = self.llm_client.complete(
                prompt,
                max_tokens=DESCRIPTION_MAX_TOKENS,
                temperature=DESCRIPTION_TEMPERATURE
            )
        except LLMClientError as e:
            logger.warning(f"Description generation failed, using fallback: {e.message}")
            return FALLBACK_DESCRIPTION

        return first_line(response or "") or FALLBACK_DESCRIPTION
