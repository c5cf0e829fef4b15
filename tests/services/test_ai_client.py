import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock

from patchspace.config.schema import AppConfig
from patchspace.services.ai_client import AnthropicChatClient, extract_response_text

def test_extract_from_plain_string():
    assert extract_response_text("hello") == "hello"

def test_extract_from_content_blocks():
    response = SimpleNamespace(content=[
        SimpleNamespace(type="thinking", text=None),
        SimpleNamespace(type="text", text="Hello "),
        SimpleNamespace(type="text", text="world"),
    ])
    assert extract_response_text(response) == "Hello world"

def test_extract_from_dict_blocks_and_string_content():
    assert extract_response_text({"content": [{"type": "text", "text": "a"}]}) == "a"
    assert extract_response_text({"content": "plain"}) == "plain"

def test_extract_from_message_and_text_attributes():
    assert extract_response_text(SimpleNamespace(message=SimpleNamespace(content="via message"))) == "via message"
    assert extract_response_text(SimpleNamespace(text="via text")) == "via text"

def test_extract_unknown_shape_is_serialized():
    assert extract_response_text({"unexpected": 1}) == '{"unexpected": 1}'

def test_complete_calls_messages_api():
    config = AppConfig(model="claude-test", max_response_tokens=123)
    client = AnthropicChatClient(config, api_key="test-key")
    create = AsyncMock(return_value=SimpleNamespace(content=[SimpleNamespace(type="text", text="ok")]))
    client.client.messages.create = create

    text = asyncio.run(client.complete("system prompt", [{"role": "user", "content": "hi"}]))

    assert text == "ok"
    create.assert_awaited_once_with(
        model="claude-test",
        max_tokens=123,
        system="system prompt",
        messages=[{"role": "user", "content": "hi"}],
    )

def test_client_is_created_lazily_once():
    client = AnthropicChatClient(AppConfig(), api_key="test-key")
    assert client._client is None
    assert client.client is client.client
