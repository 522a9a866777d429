"""Tests for generation providers and the provider factory."""

from types import SimpleNamespace

import httpx
import openai
import pytest
from google.genai import errors as genai_errors

from shakespeare_qa.errors import GenerationFailure
from shakespeare_qa.llm import (
    DemoProvider,
    GeminiProvider,
    LLMFactory,
    LLMConnectionError,
    LLMInvalidRequestError,
    LLMRateLimitError,
    LLMTimeoutError,
    OpenAIProvider,
    ProviderKind,
)
from shakespeare_qa.llm.demo_provider import find_relevant_info

from conftest import HAMLET_LINE, SAMPLE_CORPUS

OPENAI_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


class FakeCompletions:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    async def create(self, **params):
        self.calls.append(params)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content="Thou art answered."))])


def fake_openai_client(error=None):
    completions = FakeCompletions(error)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


class FakeGeminiModels:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    async def generate_content(self, model, contents, config):
        self.calls.append((model, contents, config))
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text="Gemini says hello.")


def fake_gemini_client(error=None):
    models = FakeGeminiModels(error)
    return SimpleNamespace(aio=SimpleNamespace(models=models)), models


def test_parse_kind_accepts_any_case():
    assert LLMFactory.parse_kind("OpenAI") is ProviderKind.OPENAI
    assert LLMFactory.parse_kind(ProviderKind.DEMO) is ProviderKind.DEMO


def test_unknown_provider_raises():
    with pytest.raises(ValueError) as exc_info:
        LLMFactory.create("ollama")
    assert "openai, gemini, demo" in str(exc_info.value)


def test_create_from_settings_uses_ranking_config(settings):
    provider = LLMFactory.create_from_settings(settings, "demo")

    assert isinstance(provider, DemoProvider)
    assert provider.max_length == settings.max_context_chars
    assert provider.ranker.config == settings.ranking_config


def test_create_from_settings_defaults_to_configured_provider(settings):
    provider = LLMFactory.create_from_settings(settings)
    assert isinstance(provider, OpenAIProvider)
    assert provider.model == settings.openai_model


@pytest.mark.parametrize("question,title", [
    ("What does Hamlet say about death?", "Hamlet"),
    ("Who kills Duncan in Macbeth?", "Macbeth"),
    ("Why does Juliet drink the potion?", "Romeo and Juliet"),
])
def test_knowledge_lookup_matches_title(question, title):
    assert find_relevant_info(question).startswith(f"{title} - Key Quotes:")


def test_knowledge_lookup_defaults_to_general():
    info = find_relevant_info("How many sonnets are there?")
    assert info.startswith("Shakespeare's Works")
    assert "154 sonnets" in info


def test_demo_answer_uses_corpus_when_available():
    answer = DemoProvider().answer("What does Hamlet say about death?", SAMPLE_CORPUS)

    assert answer.source == "MIT OpenCourseWare"
    assert HAMLET_LINE in answer.answer


def test_demo_answer_without_corpus_uses_knowledge():
    answer = DemoProvider().answer("Tell me about Macbeth")

    assert answer.source == "Demo Knowledge"
    assert "Is this a dagger which I see before me?" in answer.answer


async def test_demo_generate_matches_question():
    text = await DemoProvider().generate("ignored prompt", question="romeo")
    assert "Romeo and Juliet" in text


async def test_openai_generate_sends_single_user_message():
    client, completions = fake_openai_client()
    provider = OpenAIProvider({'client': client, 'model': 'gpt-test', 'temperature': 0.5})

    text = await provider.generate("prompt text")

    assert text == "Thou art answered."
    assert completions.calls == [{
        'model': 'gpt-test',
        'messages': [{'role': 'user', 'content': 'prompt text'}],
        'temperature': 0.5,
    }]


@pytest.mark.parametrize("error,expected", [
    (openai.APITimeoutError(request=OPENAI_REQUEST), LLMTimeoutError),
    (openai.APIConnectionError(request=OPENAI_REQUEST), LLMConnectionError),
    (
        openai.RateLimitError("quota", response=httpx.Response(429, request=OPENAI_REQUEST), body=None),
        LLMRateLimitError,
    ),
    (
        openai.AuthenticationError("bad key", response=httpx.Response(401, request=OPENAI_REQUEST), body=None),
        LLMInvalidRequestError,
    ),
])
async def test_openai_errors_are_generation_failures(error, expected):
    client, _ = fake_openai_client(error)
    provider = OpenAIProvider({'client': client})

    with pytest.raises(expected) as exc_info:
        await provider.generate("prompt")
    assert isinstance(exc_info.value, GenerationFailure)
    assert exc_info.value.hint


async def test_openai_without_key_fails_on_generate(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    provider = OpenAIProvider()

    with pytest.raises(LLMInvalidRequestError):
        await provider.generate("prompt")


async def test_gemini_generate_passes_config():
    client, models = fake_gemini_client()
    provider = GeminiProvider({'client': client, 'model': 'gemini-test'})

    text = await provider.generate("prompt text", temperature=0.3, max_tokens=256)

    assert text == "Gemini says hello."
    model, contents, config = models.calls[0]
    assert (model, contents) == ("gemini-test", "prompt text")
    assert config.temperature == 0.3
    assert config.max_output_tokens == 256


async def test_gemini_quota_maps_to_rate_limit():
    error = genai_errors.ClientError(
        429,
        {"error": {"code": 429, "message": "Resource exhausted", "status": "RESOURCE_EXHAUSTED"}}
    )
    client, _ = fake_gemini_client(error)

    with pytest.raises(LLMRateLimitError):
        await GeminiProvider({'client': client}).generate("prompt")


async def test_gemini_without_key_fails_on_generate(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)

    with pytest.raises(LLMInvalidRequestError):
        await GeminiProvider().generate("prompt")
