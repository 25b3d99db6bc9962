"""Tests for the OpenAI backend (mocked)."""

import asyncio
import json
from types import ModuleType, SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from verbi.backends.base import TranslationRequest
from verbi.translation.glossary import Glossary, GlossaryTerm


def _make_mock_openai(content):
    """Create a mock openai module whose client returns *content*."""
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
    ))
    client.models.list = AsyncMock(return_value=[])
    mock_mod = ModuleType("openai")
    mock_mod.AsyncOpenAI = MagicMock(return_value=client)  # type: ignore[attr-defined]
    return mock_mod, client


def _requests():
    glossary = Glossary([GlossaryTerm("Verbi", keep=True)])
    return [
        TranslationRequest("greet", "Hello {name}", "en", "fr", glossary=glossary),
        TranslationRequest("bye", "Goodbye", "en", "fr", glossary=glossary),
    ]


class TestOpenAIBackend:
    def test_translate(self):
        content = json.dumps({"translations": [
            {"key": "greet", "text": "Bonjour {name}"},
            {"key": "bye", "text": "Au revoir"},
        ]})
        mock_openai, client = _make_mock_openai(content)

        with patch.dict("sys.modules", {"openai": mock_openai}):
            from verbi.backends.openai import OpenAIBackend
            backend = OpenAIBackend(api_key="sk-test")
            results = asyncio.run(backend.translate(_requests()))

        assert {r.key: r.text for r in results} == {"greet": "Bonjour {name}", "bye": "Au revoir"}
        assert results[0].metadata["model"] == "gpt-4o-mini"

        kwargs = client.chat.completions.create.await_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["temperature"] == 0.3
        assert kwargs["response_format"] == {"type": "json_object"}
        system, user = kwargs["messages"]
        assert "from en to fr" in system["content"]
        assert "Verbi" in system["content"]
        assert json.loads(user["content"])[0] == {"key": "greet", "text": "Hello {name}"}

    def test_client_options(self):
        mock_openai, _ = _make_mock_openai("{}")
        with patch.dict("sys.modules", {"openai": mock_openai}):
            from verbi.backends.openai import OpenAIBackend
            OpenAIBackend(api_key="sk-test", max_retries=5, base_url="http://localhost:8080/v1")

        mock_openai.AsyncOpenAI.assert_called_once_with(
            api_key="sk-test", max_retries=5, base_url="http://localhost:8080/v1",
        )

    def test_empty_content_raises(self):
        mock_openai, _ = _make_mock_openai(None)
        with patch.dict("sys.modules", {"openai": mock_openai}):
            from verbi.backends.openai import OpenAIBackend
            backend = OpenAIBackend(api_key="sk-test")
            with pytest.raises(ValueError, match="Empty response"):
                asyncio.run(backend.translate(_requests()))

    def test_unparseable_content_raises(self):
        mock_openai, _ = _make_mock_openai("not json")
        with patch.dict("sys.modules", {"openai": mock_openai}):
            from verbi.backends.openai import OpenAIBackend
            backend = OpenAIBackend(api_key="sk-test")
            with pytest.raises(ValueError, match="Failed to parse AI response"):
                asyncio.run(backend.translate(_requests()))

    def test_empty_batch_no_call(self):
        mock_openai, client = _make_mock_openai("{}")
        with patch.dict("sys.modules", {"openai": mock_openai}):
            from verbi.backends.openai import OpenAIBackend
            assert asyncio.run(OpenAIBackend(api_key="sk-test").translate([])) == []
        client.chat.completions.create.assert_not_awaited()

    def test_validate_config(self):
        mock_openai, client = _make_mock_openai("{}")
        with patch.dict("sys.modules", {"openai": mock_openai}):
            from verbi.backends.openai import OpenAIBackend
            backend = OpenAIBackend(api_key="sk-test")
            assert asyncio.run(backend.validate_config()) is True
            client.models.list.side_effect = RuntimeError("401 Unauthorized")
            assert asyncio.run(backend.validate_config()) is False
