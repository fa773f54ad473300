# tests/test_llm_client.py
import asyncio
import os

import httpx
import openai
import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage
from langchain_core.runnables import RunnableLambda

from aceai.models.content import ContentPart
from aceai.models.enums import ModelVariant
from aceai.services.llm_client import ChatCompletionClient, select_variant, to_message_content
from aceai.utils.config import LLMConfig
from aceai.utils.exceptions import (
    CredentialInvalidError,
    CredentialMissingError,
    LLMConnectionError,
    LLMServiceError,
)

REQUEST = httpx.Request("POST", "https://llm.example/v1/chat/completions")


def _status_error(cls, status_code, body):
    response = httpx.Response(status_code, request=REQUEST, text=body)
    return cls(f"Error code: {status_code}", response=response, body=None)


def _client_with(behaviour, config=None):
    """ChatCompletionClient whose underlying chat model is replaced by `behaviour`."""
    client = ChatCompletionClient(config or LLMConfig(api_key="test-key"))
    client._get_model = lambda variant: RunnableLambda(behaviour)
    return client


def test_select_variant():
    assert select_variant("plain prompt") == ModelVariant.TEXT
    assert select_variant([ContentPart.text("a")]) == ModelVariant.TEXT
    assert select_variant([ContentPart.text("a"), ContentPart.image("image/png", "AAAA")]) == ModelVariant.VISION


def test_to_message_content_blocks():
    blocks = to_message_content([ContentPart.image("image/png", "AAAA"), ContentPart.text("caption")])
    assert blocks == [
        {"type": "image_url", "image_url": {"url": "data:image/png;base64,AAAA"}},
        {"type": "text", "text": "caption"},
    ]
    assert to_message_content("just text") == "just text"


def test_model_names_follow_variant():
    client = ChatCompletionClient(LLMConfig(api_key="k", text_model="qwen-plus", vision_model="qwen-vl-max"))
    assert client._model_name(ModelVariant.TEXT) == "qwen-plus"
    assert client._model_name(ModelVariant.VISION) == "qwen-vl-max"


def test_missing_credential_raises_before_request():
    client = ChatCompletionClient(LLMConfig(api_key=None))
    with pytest.raises(CredentialMissingError):
        asyncio.run(client.complete("system", "hi", ModelVariant.TEXT))


def test_complete_sends_system_and_user_messages():
    seen = []

    def respond(messages):
        seen.extend(messages)
        return AIMessage(content="model says hi")

    result = asyncio.run(_client_with(respond).complete("be terse", "hello", ModelVariant.TEXT))
    assert result == "model says hi"
    assert isinstance(seen[0], SystemMessage) and seen[0].content == "be terse"
    assert isinstance(seen[1], HumanMessage) and seen[1].content == "hello"


def test_system_message_is_optional():
    seen = []

    def respond(messages):
        seen.extend(messages)
        return AIMessage(content="ok")

    asyncio.run(_client_with(respond).complete(None, "hello", ModelVariant.TEXT))
    assert len(seen) == 1 and isinstance(seen[0], HumanMessage)


@pytest.mark.parametrize(
    "error, expected",
    [
        (_status_error(openai.AuthenticationError, 401, '{"error": "invalid key"}'), CredentialInvalidError),
        (_status_error(openai.PermissionDeniedError, 403, "forbidden"), CredentialInvalidError),
        (_status_error(openai.InternalServerError, 500, "boom"), LLMServiceError),
        (_status_error(openai.RateLimitError, 429, "slow down"), LLMServiceError),
        (openai.APIConnectionError(request=REQUEST), LLMConnectionError),
    ],
    ids=["401", "403", "500", "429", "connection"],
)
def test_transport_errors_are_mapped(error, expected):
    def fail(messages):
        raise error

    with pytest.raises(expected):
        asyncio.run(_client_with(fail).complete(None, "hello", ModelVariant.TEXT))


def test_service_error_keeps_status_and_body():
    def fail(messages):
        raise _status_error(openai.InternalServerError, 503, "overloaded")

    with pytest.raises(LLMServiceError) as excinfo:
        asyncio.run(_client_with(fail).complete(None, "hello", ModelVariant.TEXT))
    assert excinfo.value.status_code == 503
    assert excinfo.value.body == "overloaded"


@pytest.mark.llm_integration
@pytest.mark.skipif(not os.getenv("ACEAI_LIVE_API_KEY"), reason="Requires ACEAI_LIVE_API_KEY for a real model call")
def test_real_model_round_trip():
    client = ChatCompletionClient(LLMConfig(api_key=os.environ["ACEAI_LIVE_API_KEY"]))
    reply = asyncio.run(client.complete("Reply with the single word: pong", "ping", ModelVariant.TEXT))
    assert "pong" in reply.lower()
