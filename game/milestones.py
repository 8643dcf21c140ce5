"""Milestone flavor text.

Levels 10 and 20 have fixed messages. Any other level asks an
OpenAI-compatible chat model for a short hype line and falls back to a
generic message on any failure.

The game itself only reaches levels 10 and 20, so the model path serves
milestone levels added beyond those two.
"""

import logging
import os
from typing import Any, Optional

from openai import AsyncOpenAI

logger = logging.getLogger(__name__)

FIXED_MESSAGES = {
    10: "niveau Kichta atteint",
    20: "vous avez débloquer le niveau PUCCI",
}

DEFAULT_MODEL = "gpt-4o-mini"


def _sanitize_env_value(value: Optional[str]) -> Optional[str]:
    """Strip whitespace and wrapping quotes from an env-provided string."""
    if value is None:
        return None
    cleaned = value.strip()
    if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] and cleaned[0] in ("'", '"'):
        cleaned = cleaned[1:-1].strip()
    return cleaned or None


def fallback_message(level: int) -> str:
    return f"NIVEAU {level} !"


def default_message(level: int) -> str:
    """Text shown as soon as a milestone is reached, before any lookup resolves."""
    return FIXED_MESSAGES.get(level, fallback_message(level))


class MilestoneMessageService:
    """Best-effort milestone text lookup.

    The client is created lazily; without an API key every lookup for a
    non-fixed level returns the fallback message.
    """

    def __init__(
        self,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        client: Any = None,
    ):
        self.model = model or _sanitize_env_value(os.getenv("SNAKE_MILESTONE_MODEL")) or DEFAULT_MODEL
        self.api_key = api_key or _sanitize_env_value(os.getenv("OPENAI_API_KEY"))
        self.base_url = base_url or _sanitize_env_value(os.getenv("OPENAI_BASE_URL"))
        self._client = client

    @property
    def client(self) -> Optional[Any]:
        if self._client is None and self.api_key:
            self._client = AsyncOpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    async def get_milestone_message(self, level: int) -> str:
        """Return the message for ``level``; never raises."""
        if level in FIXED_MESSAGES:
            return FIXED_MESSAGES[level]

        client = self.client
        if client is None:
            return fallback_message(level)

        prompt = f"Generate a very short hype message for level {level} in a snake game."
        try:
            response = await client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
            )
            text = (response.choices[0].message.content or "").strip()
        except Exception as e:
            logger.warning("Milestone message lookup failed for level %d: %s", level, e)
            return fallback_message(level)

        return text or fallback_message(level)
