# patchspace/core/chat.py
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple
from loguru import logger

from ..config.schema import AppConfig
from ..services.ai_client import ChatClient
from .change_parser import parse_file_changes
from .context_builder import SYSTEM_PROMPT, build_messages
from .errors import RequestInFlightError
from .models import ProposedChange
from .session import WorkspaceSession

EMPTY_PROJECT_REPLY = "Please upload a folder first so I can see your project files and help you modify them."

class ErrorKind(str, Enum):
    TIMEOUT = "timeout"
    AUTH = "auth"
    GENERIC = "generic"

_TIMEOUT_HINTS = ("timeout", "timed out")
_AUTH_HINTS = ("auth", "login", "api key", "api_key", "401", "403", "permission")

def classify_error(error: BaseException) -> Tuple[ErrorKind, str]:
    """Best-effort bucket and user-facing message for a failed AI request."""
    description = f"{type(error).__name__}: {error}".lower()
    if any(hint in description for hint in _TIMEOUT_HINTS):
        return ErrorKind.TIMEOUT, "The request timed out. Please try again with a simpler request."
    if any(hint in description for hint in _AUTH_HINTS):
        return ErrorKind.AUTH, "Authentication with the AI service failed. Check your API key and try again."
    return ErrorKind.GENERIC, f"Sorry, I encountered an error: {error}"

@dataclass
class ChatReply:
    text: str
    changes: List[ProposedChange] = field(default_factory=list)
    error_kind: Optional[ErrorKind] = None

    @property
    def failed(self) -> bool:
        return self.error_kind is not None

class ChatSession:
    """One interactive conversation about a workspace. At most one request is in flight at a time."""

    def __init__(self, workspace: WorkspaceSession, client: ChatClient, config: AppConfig):
        self.workspace = workspace
        self.client = client
        self.config = config
        self.history: List[Dict[str, str]] = []
        self.is_processing = False

    async def send_message(self, message: str) -> ChatReply:
        """
        Sends a request with the full project as context.

        The proposed changes are parsed and returned; applying them is left to
        the caller. Failures come back as a reply carrying a friendly message.
        """
        message = message.strip()
        if not message:
            raise ValueError("Message must not be empty")
        if self.is_processing:
            raise RequestInFlightError()
        if len(self.workspace.index) == 0:
            return ChatReply(text=EMPTY_PROJECT_REPLY)

        self.is_processing = True
        try:
            messages = build_messages(self.workspace.index, message, self.config)
            response = await self.client.complete(SYSTEM_PROMPT, messages)
        except Exception as e:
            kind, text = classify_error(e)
            logger.error(f"AI request failed ({kind.value}): {e}")
            return ChatReply(text=text, error_kind=kind)
        finally:
            self.is_processing = False

        self.history.append({"role": "user", "content": message})
        self.history.append({"role": "assistant", "content": response})
        changes = parse_file_changes(response)
        logger.info(f"AI proposed {len(changes)} file change(s).")
        return ChatReply(text=response, changes=changes)
