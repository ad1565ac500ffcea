import json
from unittest.mock import patch

import httpx
import openai
import pytest

from app.agent.artifacts import SiteAuditResult
from app.agent.exceptions import ConfigurationError, TransportError
from app.agent.llm_client import LLMClient, schema_descriptor
from app.tests.utils import openai_client_mock


@pytest.mark.asyncio
async def test_llm_client_returns_raw_text():
    mock_client_instance, mock_create = openai_client_mock('{"predicted_rank": "Top 5"}')

    with patch("app.agent.llm_client.AsyncOpenAI", return_value=mock_client_instance):
        with patch("app.agent.llm_client.settings.LLM_API_KEY", "dummy_key"):
            client = LLMClient(model_name="test-model")

            result = await client.generate(
                system_prompt="You are a helpful assistant.",
                user_prompt="Rank this draft",
            )

            assert result == '{"predicted_rank": "Top 5"}'
            mock_create.assert_called_once()
            kwargs = mock_create.call_args.kwargs
            assert kwargs["model"] == "test-model"
            assert "response_format" not in kwargs


@pytest.mark.asyncio
async def test_llm_client_sends_schema_as_response_format():
    mock_client_instance, mock_create = openai_client_mock("{}")
    schema = schema_descriptor(SiteAuditResult)

    with patch("app.agent.llm_client.AsyncOpenAI", return_value=mock_client_instance):
        with patch("app.agent.llm_client.settings.LLM_API_KEY", "dummy_key"), \
                patch("app.agent.llm_client.settings.LLM_RESPONSE_FORMAT", "json_schema"):
            client = LLMClient(model_name="test-model")
            await client.generate("system", "user", response_schema=schema, schema_name="site_audit")

    kwargs = mock_create.call_args.kwargs
    assert kwargs["response_format"]["type"] == "json_schema"
    assert kwargs["response_format"]["json_schema"]["name"] == "site_audit"
    assert kwargs["response_format"]["json_schema"]["schema"] == schema
    system_message = kwargs["messages"][0]["content"]
    assert system_message.startswith("system")
    assert json.dumps(schema) in system_message


@pytest.mark.asyncio
async def test_llm_client_prompt_only_mode_omits_response_format():
    mock_client_instance, mock_create = openai_client_mock("{}")

    with patch("app.agent.llm_client.AsyncOpenAI", return_value=mock_client_instance):
        with patch("app.agent.llm_client.settings.LLM_API_KEY", "dummy_key"), \
                patch("app.agent.llm_client.settings.LLM_RESPONSE_FORMAT", "prompt"):
            client = LLMClient(model_name="test-model")
            await client.generate("system", "user", response_schema={"type": "object"})

    assert "response_format" not in mock_create.call_args.kwargs


@pytest.mark.asyncio
async def test_llm_client_without_key_fails_before_any_call():
    with patch("app.agent.llm_client.AsyncOpenAI") as mock_openai:
        with patch("app.agent.llm_client.settings.LLM_API_KEY", ""), \
                patch("app.agent.llm_client.settings.GEMINI_API_KEY", ""):
            client = LLMClient(model_name="test-model")
            assert client.is_configured is False

            with pytest.raises(ConfigurationError):
                await client.generate("system", "user")

    mock_openai.assert_not_called()


@pytest.mark.asyncio
async def test_llm_client_falls_back_to_gemini_key():
    mock_client_instance, _ = openai_client_mock("ok")

    with patch("app.agent.llm_client.AsyncOpenAI", return_value=mock_client_instance) as mock_openai:
        with patch("app.agent.llm_client.settings.LLM_API_KEY", ""), \
                patch("app.agent.llm_client.settings.GEMINI_API_KEY", "gemini_key"):
            client = LLMClient(model_name="test-model")

    assert client.is_configured is True
    assert mock_openai.call_args.kwargs["api_key"] == "gemini_key"
    assert mock_openai.call_args.kwargs["max_retries"] == 0


@pytest.mark.asyncio
async def test_llm_client_wraps_provider_errors():
    error = openai.APIConnectionError(request=httpx.Request("POST", "https://llm.test/chat/completions"))
    mock_client_instance, mock_create = openai_client_mock(side_effect=error)

    with patch("app.agent.llm_client.AsyncOpenAI", return_value=mock_client_instance):
        with patch("app.agent.llm_client.settings.LLM_API_KEY", "dummy_key"):
            client = LLMClient(model_name="test-model")

            with pytest.raises(TransportError):
                await client.generate("system", "user")

    # One attempt only.
    mock_create.assert_called_once()


@pytest.mark.asyncio
async def test_llm_client_empty_choices_is_transport_error():
    mock_client_instance, mock_create = openai_client_mock("unused")
    mock_create.return_value.choices = []

    with patch("app.agent.llm_client.AsyncOpenAI", return_value=mock_client_instance):
        with patch("app.agent.llm_client.settings.LLM_API_KEY", "dummy_key"):
            client = LLMClient(model_name="test-model")

            with pytest.raises(TransportError):
                await client.generate("system", "user")


def test_gpt5_models_skip_temperature():
    with patch("app.agent.llm_client.settings.LLM_API_KEY", ""), \
            patch("app.agent.llm_client.settings.GEMINI_API_KEY", ""):
        assert LLMClient(model_name="gpt-5-mini")._chat_completion_kwargs(temperature=0.2) == {}
        assert LLMClient(model_name="gemini-2.5-flash")._chat_completion_kwargs(temperature=0.2) == {
            "temperature": 0.2
        }


def _walk(node):
    if isinstance(node, dict):
        yield node
        for value in node.values():
            yield from _walk(value)
    elif isinstance(node, list):
        for item in node:
            yield from _walk(item)


def test_schema_descriptor_inlines_nested_models():
    schema = schema_descriptor(SiteAuditResult)

    assert all("$ref" not in node and "$defs" not in node for node in _walk(schema))
    assert set(schema["required"]) == {"audit_summary", "findings"}

    summary = schema["properties"]["audit_summary"]
    assert summary["type"] == "object"
    assert summary["properties"]["overall_health_score"]["type"] == "integer"

    finding = schema["properties"]["findings"]["items"]
    # A field literally named "title" must survive.
    assert "title" in finding["properties"]
    assert finding["properties"]["severity"]["enum"] == ["Low", "Medium", "High", "Critical", "Opportunity"]
