from __future__ import annotations

import logging
from typing import Protocol

from groq import Groq

from ..errors import UpstreamUnavailable
from .config import DEFAULT_LLM_CONFIG, LLMConfig

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You help groups of friends plan outings. "
    "You read group chats and structured preference data and answer "
    "with ONLY valid JSON, no additional text."
)


class TextAnalyzer(Protocol):
    def generate(self, prompt: str) -> str:
        ...


class GroqAnalyzer:
    """Text analyzer backed by the Groq chat-completions API in JSON mode."""

    def __init__(self, config: LLMConfig = DEFAULT_LLM_CONFIG) -> None:
        self.config = config
        self._client: Groq | None = None

    def _get_client(self) -> Groq:
        if self._client is None:
            self._client = Groq(api_key=self.config.api_key, timeout=self.config.timeout)
        return self._client

    def generate(self, prompt: str) -> str:
        if not self.config.enabled or not self.config.api_key:
            raise UpstreamUnavailable("Groq analyzer is disabled or has no API key")

        options = {"response_format": {"type": "json_object"}} if self.config.json_mode else {}
        try:
            response = self._get_client().chat.completions.create(
                model=self.config.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
                **options,
            )
        except Exception as exc:
            raise UpstreamUnavailable(f"Groq request failed: {exc}") from exc

        content = response.choices[0].message.content or ""
        logger.debug("Groq returned %d characters", len(content))
        return content
