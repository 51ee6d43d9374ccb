"""
Tests for the prompt roles (PageClassifier) and the chat-completions client.

Backend HTTP is mocked with respx; the OpenAI SDK sends its requests through
httpx, so no API key or network access is needed.
"""

import json

import httpx
import pytest
import respx

from conftest import FakeLLMClient
from llmscan.classifier import (
    FALLBACK_DESCRIPTION,
    PageClassifier,
    first_line,
    is_affirmative,
    strip_code_fences,
)
from llmscan.exceptions import LLMClientError, TransformError
from llmscan.llm_client import Backend, ChatCompletionClient, LLMClient

OPENAI_URL = "https://api.openai.com/v1/chat/completions"
DEEPSEEK_URL = "https://api.deepseek.com/chat/completions"


def _completion(content):
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 0,
        "model": "gpt-4o-mini",
        "choices": [{
            "index": 0,
            "message": {"role": "assistant", "content": content},
            "finish_reason": "stop",
        }],
    }


# --- Relevance ---

@pytest.mark.parametrize("response", ["YES", "yes", " Yes \n"])
def test_affirmative_responses(response):
    assert is_affirmative(response) is True
    assert PageClassifier(FakeLLMClient(relevance=response)).is_technical("<p>x</p>") is True


@pytest.mark.parametrize("response", ["no", "NO", "", "YES.", "Yes, it is documentation", None])
def test_anything_else_is_not_technical(response):
    assert is_affirmative(response) is False
    assert PageClassifier(FakeLLMClient(relevance=response)).is_technical("<p>x</p>") is False


def test_relevance_failure_counts_as_not_technical():
    client = FakeLLMClient(relevance=LLMClientError("HTTP 500", provider="openai"))
    assert PageClassifier(client).is_technical("<p>x</p>") is False


def test_relevance_prompt_embeds_content_and_uses_small_budget():
    seen = []
    client = FakeLLMClient(relevance=lambda prompt: seen.append(prompt) or "YES")
    PageClassifier(client).is_technical("<h1>Widget setup</h1>")

    assert '"""\n<h1>Widget setup</h1>\n"""' in seen[0]
    assert client.calls == [("relevance", 10, 0.2)]


# --- Markdown transform ---

@pytest.mark.parametrize("response, expected", [
    ("```markdown\n# Install\n\nRun it.\n```", "# Install\n\nRun it."),
    ("```Markdown\n# Install\n```", "# Install"),
    ("```\n# Install\n```\n", "# Install"),
    ("  # Install\n\nNo fences.  ", "# Install\n\nNo fences."),
    ("# Install\n\n```python\nx = 1\n```", "# Install\n\n```python\nx = 1\n```"),
])
def test_strip_code_fences(response, expected):
    assert strip_code_fences(response) == expected


def test_to_markdown_strips_fences():
    client = FakeLLMClient(markdown="```markdown\n# Install\n\nRun `widget`.\n```")
    assert PageClassifier(client).to_markdown("<p>x</p>") == "# Install\n\nRun `widget`."
    assert client.calls == [("markdown", 2000, 0.2)]


@pytest.mark.parametrize("markdown", ["", "   ", "```markdown\n```"])
def test_to_markdown_empty_result_raises(markdown):
    with pytest.raises(TransformError):
        PageClassifier(FakeLLMClient(markdown=markdown)).to_markdown("<p>x</p>")


def test_to_markdown_backend_failure_raises_transform_error():
    client = FakeLLMClient(markdown=LLMClientError("timeout", provider="deepseek"))
    with pytest.raises(TransformError) as exc_info:
        PageClassifier(client).to_markdown("<p>x</p>")
    assert exc_info.value.details["provider"] == "deepseek"


# --- Description ---

def test_describe_keeps_first_line_only():
    client = FakeLLMClient(description="  Explains widget setup.\nSecond line.\r\nThird.")
    assert PageClassifier(client).describe("# Install") == "Explains widget setup."
    assert client.calls == [("description", 60, 0.3)]


@pytest.mark.parametrize("description", ["", "\nStarts with a newline", "   "])
def test_describe_empty_first_line_falls_back(description):
    assert PageClassifier(FakeLLMClient(description=description)).describe("# x") == FALLBACK_DESCRIPTION


def test_describe_failure_falls_back():
    client = FakeLLMClient(description=LLMClientError("HTTP 429", provider="openai"))
    assert PageClassifier(client).describe("# x") == FALLBACK_DESCRIPTION


def test_first_line():
    assert first_line("a\rb") == "a"
    assert first_line("single") == "single"


# --- Backend selection ---

def test_backend_variants_carry_endpoint_and_model():
    assert Backend.OPENAI.base_url == "https://api.openai.com/v1"
    assert Backend.OPENAI.model == "gpt-4o-mini"
    assert Backend.DEEPSEEK.base_url == "https://api.deepseek.com"
    assert Backend.DEEPSEEK.model == "deepseek-coder"
    assert Backend.DEEPSEEK.api_key_env == "DEEPSEEK_API_KEY"


def test_unsupported_backend_fails_immediately():
    with pytest.raises(LLMClientError) as exc_info:
        LLMClient.create("anthropic", api_key="sk-test")
    assert "Unsupported AI engine" in exc_info.value.message


def test_missing_api_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(LLMClientError):
        LLMClient.create(Backend.OPENAI)


def test_api_key_from_environment(monkeypatch):
    monkeypatch.setenv("DEEPSEEK_API_KEY", "sk-env")
    client = LLMClient.create("DeepSeek")
    assert isinstance(client, ChatCompletionClient)
    assert client.backend is Backend.DEEPSEEK



# --- Chat completions over HTTP ---

def test_openai_request_shape_and_response():
    with respx.mock:
        route = respx.post(OPENAI_URL).mock(return_value=httpx.Response(200, json=_completion("YES")))

        client = LLMClient.create("openai", api_key="sk-test")
        assert client.complete("Is this documentation?", max_tokens=10) == "YES"

    request = route.calls.last.request
    body = json.loads(request.content)
    assert body["model"] == "gpt-4o-mini"
    assert body["messages"] == [{"role": "user", "content": "Is this documentation?"}]
    assert body["max_tokens"] == 10
    assert body["temperature"] == 0.2
    assert request.headers["Authorization"] == "Bearer sk-test"


def test_deepseek_endpoint_and_model():
    with respx.mock:
        route = respx.post(DEEPSEEK_URL).mock(return_value=httpx.Response(200, json=_completion("# Doc")))

        client = LLMClient.create(Backend.DEEPSEEK, api_key="sk-test")
        assert client.complete("Convert", max_tokens=2000, temperature=0.3) == "# Doc"

    body = json.loads(route.calls.last.request.content)
    assert body["model"] == "deepseek-coder"
    assert body["temperature"] == 0.3


@pytest.mark.parametrize("status", [400, 401, 429, 500, 503])
def test_error_status_raises_once(status):
    with respx.mock:
        route = respx.post(OPENAI_URL).mock(
            return_value=httpx.Response(status, json={"error": {"message": "nope"}})
        )

        client = LLMClient.create("openai", api_key="sk-test")
        with pytest.raises(LLMClientError) as exc_info:
            client.complete("prompt")

    assert exc_info.value.details["status_code"] == status
    assert route.call_count == 1  # no retries


def test_non_200_success_status_is_a_failure():
    with respx.mock:
        respx.post(OPENAI_URL).mock(return_value=httpx.Response(201, json=_completion("YES")))

        client = LLMClient.create("openai", api_key="sk-test")
        with pytest.raises(LLMClientError) as exc_info:
            client.complete("prompt")

    assert exc_info.value.details["status_code"] == 201


@pytest.mark.parametrize("payload", [
    {"id": "x", "object": "chat.completion", "created": 0, "model": "m", "choices": []},
    _completion(None),
])
def test_malformed_payload_raises(payload):
    with respx.mock:
        respx.post(OPENAI_URL).mock(return_value=httpx.Response(200, json=payload))

        client = LLMClient.create("openai", api_key="sk-test")
        with pytest.raises(LLMClientError):
            client.complete("prompt")


def test_transport_error_raises():
    with respx.mock:
        respx.post(OPENAI_URL).mock(side_effect=httpx.ConnectError("connection refused"))

        client = LLMClient.create("openai", api_key="sk-test")
        with pytest.raises(LLMClientError):
            client.complete("prompt")
