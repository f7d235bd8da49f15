"""Deterministic tone-templated provider.

Used when no language model is configured. It ignores the rendered prompt
and phrases the next question (or the closing message) from the persona's
tone and the target field.
"""

import asyncio
from collections.abc import AsyncIterator

from agentforms.providers.llm.base import GenerationRequest, TextGenerationProvider
from agentforms.schema.enums import Tone
from agentforms.schema.models import BaseField

ASK_TEMPLATES: dict[Tone, str] = {
    Tone.FRIENDLY: "Hi! Could you please share your {label}?",
    Tone.PROFESSIONAL: "I'd like to collect your {label}. Could you provide that information?",
    Tone.CASUAL: "What's your {label}?",
}
DEFAULT_ASK_TEMPLATE = "Please provide your {label}."

CLOSING_MESSAGES: dict[Tone, str] = {
    Tone.FRIENDLY: (
        "Thank you so much! I have all the information I need. "
        "Is there anything else you'd like to share?"
    ),
    Tone.PROFESSIONAL: (
        "Thank you. All required information has been collected. "
        "Is there anything else I can help you with?"
    ),
}
DEFAULT_CLOSING_MESSAGE = "Thank you! All required information has been collected."


def render_question(tone: Tone, field: BaseField) -> str:
    """Phrase a request for one field in the given tone.

    A field placeholder replaces the tone template; help text is appended.
    """
    template = ASK_TEMPLATES.get(tone, DEFAULT_ASK_TEMPLATE)
    content = field.placeholder or template.format(label=field.label.lower())
    if field.help_text:
        content = f"{content} {field.help_text}"
    return content


def render_closing(tone: Tone) -> str:
    return CLOSING_MESSAGES.get(tone, DEFAULT_CLOSING_MESSAGE)


class TemplateTextProvider(TextGenerationProvider):
    """Streams a templated reply word by word."""

    def __init__(self, word_delay: float = 0.0) -> None:
        """Initialize template provider.

        Args:
            word_delay: Seconds to pause between words, for a typing effect
        """
        self._word_delay = word_delay

    @property
    def provider_name(self) -> str:
        return "template"

    def render(self, request: GenerationRequest) -> str:
        tone = request.persona.tone
        if request.next_field is None:
            return render_closing(tone)
        return render_question(tone, request.next_field)

    async def generate(self, request: GenerationRequest) -> AsyncIterator[str]:
        words = self.render(request).split(" ")
        for i, word in enumerate(words):
            yield word if i == 0 else f" {word}"
            await asyncio.sleep(self._word_delay)
