"""
Builds the outgoing message sequence for a chat request.
"""
from typing import List, Sequence

from models.api_models import ChatSettings, HistoryMessage
from models.chat_models import CanonicalMessage, Role
from utils.constants import (
    DEFAULT_SYSTEM_PROMPT,
    RAG_INSTRUCTION,
    SEARCH_INSTRUCTION,
    THINKING_INSTRUCTION,
)


class PromptComposer:
    """Composes system prompt, recent history and the new user message."""

    def __init__(self, max_history_messages: int = 6):
        self.max_history_messages = max_history_messages

    @staticmethod
    def build_system_prompt(settings: ChatSettings) -> str:
        """Custom or default system prompt plus one line per enabled flag."""
        prompt = settings.system_prompt or DEFAULT_SYSTEM_PROMPT

        if settings.enable_thinking:
            prompt += "\n" + THINKING_INSTRUCTION

        if settings.enable_search:
            prompt += "\n" + SEARCH_INSTRUCTION

        if settings.enable_rag:
            prompt += "\n" + RAG_INSTRUCTION

        return prompt

    def recent_history(self, history: Sequence[HistoryMessage]) -> List[HistoryMessage]:
        """Last N history entries, oldest first."""
        if self.max_history_messages <= 0:
            return []
        return list(history)[-self.max_history_messages:]

    def compose(self, settings: ChatSettings, history: Sequence[HistoryMessage], message: str) -> List[CanonicalMessage]:
        """
        Build the message list sent to the provider.

        No length truncation is applied; long histories and prompts are sent as is.
        """
        messages = [CanonicalMessage(Role.SYSTEM, self.build_system_prompt(settings))]

        for entry in self.recent_history(history):
            messages.append(CanonicalMessage(Role(entry.role), entry.content))

        messages.append(CanonicalMessage(Role.USER, message))
        return messages
