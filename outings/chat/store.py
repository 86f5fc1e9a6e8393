from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Protocol

from .models import ChatMessage

logger = logging.getLogger(__name__)

DEFAULT_CHAT_ID = "chat1"


class ChatStore(Protocol):
    def get_messages(self, chat_id: str, limit: int = 50) -> list[ChatMessage]:
        ...


def _placeholder_chats() -> dict[str, list[ChatMessage]]:
    now = datetime.now(timezone.utc)

    def _chat(*lines: tuple[str, str]) -> list[ChatMessage]:
        return [ChatMessage(sender=s, content=c, timestamp=now) for s, c in lines]

    return {
        "chat1": _chat(
            ("User1", "I love action movies with great fight scenes!"),
            ("User2", "Yeah, but some comedy would be nice too"),
            ("User3", "How about something with adventure and humor?"),
        ),
        "chat2": _chat(
            ("User1", "I want to watch something scary this weekend"),
            ("User2", "Horror movies are too intense for me"),
            ("User3", "Maybe a thriller instead? Something suspenseful but not too scary"),
        ),
        "chat3": _chat(
            ("User1", "Let's watch a romantic comedy"),
            ("User2", "I prefer sci-fi movies with great visuals"),
            ("User3", "How about something that has both romance and sci-fi?"),
        ),
    }


class InMemoryChatStore:
    """
    Chat store holding conversations in memory.

    Unknown chat ids resolve to the placeholder conversation, so callers
    always get a non-empty transcript back.
    """

    def __init__(self, chats: dict[str, list[ChatMessage]] | None = None) -> None:
        self._chats = dict(chats) if chats is not None else _placeholder_chats()
        self._placeholder = self._chats.get(DEFAULT_CHAT_ID) or _placeholder_chats()[DEFAULT_CHAT_ID]

    def get_messages(self, chat_id: str, limit: int = 50) -> list[ChatMessage]:
        messages = self._chats.get(chat_id)
        if not messages:
            logger.info("No messages found for chat %s, using placeholder data", chat_id)
            messages = self._placeholder
        if limit > 0:
            messages = messages[-limit:]
        return list(messages)
