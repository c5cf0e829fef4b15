# patchspace/services/ai_client.py
import json
from typing import Any, Dict, List, Optional, Protocol

from anthropic import AsyncAnthropic
from loguru import logger

from ..config.schema import AppConfig

class ChatClient(Protocol):
    """Anything that turns a system prompt plus messages into response text."""
    async def complete(self, system: str, messages: List[Dict[str, str]]) -> str: ...

def extract_response_text(response: Any) -> str:
    """
    Pulls the text out of whatever a chat backend returned.

    Accepts a plain string, an object/dict with a list of content blocks, an
    object with ``.text`` or ``.message.content``; anything else is JSON-dumped.
    """
    if isinstance(response, str):
        return response

    content = response.get("content") if isinstance(response, dict) else getattr(response, "content", None)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        texts = []
        for block in content:
            block_type = block.get("type") if isinstance(block, dict) else getattr(block, "type", None)
            text = block.get("text") if isinstance(block, dict) else getattr(block, "text", None)
            if block_type == "text" and text:
                texts.append(text)
        return "".join(texts)

    message = getattr(response, "message", None)
    if message is not None and isinstance(getattr(message, "content", None), str):
        return message.content
    text = getattr(response, "text", None)
    if isinstance(text, str):
        return text

    try:
        return json.dumps(response, default=str)
    except (TypeError, ValueError):
        return str(response)

class AnthropicChatClient:
    """ChatClient backed by the Anthropic Messages API. Reads ANTHROPIC_API_KEY unless a key is given."""

    def __init__(self, config: AppConfig, api_key: Optional[str] = None):
        self.config = config
        self._api_key = api_key
        self._client: AsyncAnthropic | None = None # Lazy init

    @property
    def client(self) -> AsyncAnthropic:
        """Lazily initialize the Anthropic client on first access."""
        if self._client is None:
            self._client = AsyncAnthropic(api_key=self._api_key, timeout=self.config.request_timeout)
        return self._client

    async def complete(self, system: str, messages: List[Dict[str, str]]) -> str:
        logger.info(f"Sending request to {self.config.model} ({len(messages)} message(s)).")
        response = await self.client.messages.create(
            model=self.config.model,
            max_tokens=self.config.max_response_tokens,
            system=system,
            messages=messages,
        )
        text = extract_response_text(response)
        logger.info(f"Response received: {len(text)} characters.")
        return text
