"""
AI Enhancer

Optionally rewrites a generated event's title and description with an
OpenAI model using structured output. Any failure leaves the event as it
was generated.
"""

import json
import logging
import os
from typing import Optional, Type, TypeVar

from openai import OpenAI
from pydantic import BaseModel

from .models import AIEnhancementOptions, EnhancedNarrative, Event

logger = logging.getLogger(__name__)

T = TypeVar('T', bound=BaseModel)


class AIEnhancer:
    """Polishes event narrative text through the OpenAI chat completions API."""

    ENHANCED_TAG = "ai-enhanced"

    SYSTEM_PROMPT = """You are the narrator of a fantasy role-playing game.
You receive a procedurally generated event and rewrite its title and description.

RULES:
1. Keep the event's meaning, type and stakes. Do not invent new choices.
2. The title must stay under 80 characters.
3. The description should be two to four vivid sentences, second person ("you").
4. Reuse the key nouns of the original title in the description."""

    def __init__(self, options: Optional[AIEnhancementOptions] = None, client=None):
        self.options = options or AIEnhancementOptions()
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = OpenAI(api_key=self.options.api_key) if self.options.api_key else OpenAI()
        return self._client

    def is_enabled(self) -> bool:
        return self.options.enabled

    def is_available(self) -> bool:
        """Enabled, with a client or an API key to build one from."""
        if not self.options.enabled:
            return False
        return self._client is not None or bool(self.options.api_key or os.getenv("OPENAI_API_KEY"))

    def call_openai_structured(
        self,
        system_prompt: str,
        user_prompt: str,
        response_model: Type[T],
        model: Optional[str] = None,
    ) -> T:
        """Call OpenAI with Pydantic structured output."""
        response = self.client.chat.completions.parse(
            model=model or self.options.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt}
            ],
            response_format=response_model,
            temperature=self.options.temperature,
        )
        return response.choices[0].message.parsed

    def build_prompt(self, event: Event) -> str:
        payload = {
            "type": event.type,
            "difficulty": event.difficulty,
            "title": event.title,
            "description": event.description,
            "choices": [choice.text for choice in event.choices],
        }
        return f"""Rewrite this event.

EVENT:
{json.dumps(payload, indent=2)}"""

    def enhance(self, event: Event) -> Event:
        """Return an enhanced copy of the event, or the event itself on any failure."""
        if not self.is_available():
            return event

        try:
            narrative = self.call_openai_structured(
                system_prompt=self.SYSTEM_PROMPT,
                user_prompt=self.build_prompt(event),
                response_model=EnhancedNarrative,
            )
        except Exception:
            logger.warning("AI enhancement failed for event %s; keeping generated text",
                           event.id, exc_info=True)
            return event

        if narrative is None or not narrative.title.strip() or not narrative.description.strip():
            logger.warning("AI enhancement returned no usable text for event %s", event.id)
            return event

        tags = list(event.tags)
        if self.ENHANCED_TAG not in tags:
            tags.append(self.ENHANCED_TAG)
        return event.model_copy(update={
            "title": narrative.title.strip(),
            "description": narrative.description.strip(),
            "tags": tags,
        })
