"""Prompt assembly for reply generation."""

from collections.abc import Sequence

from agentforms.conversation.models import Message, MessageRole
from agentforms.schema.models import BaseField, FormAgent


class PromptBuilder:
    """Render the generation prompt for one turn.

    The prompt states the persona, optional knowledge, the fields to collect,
    the transcript, what the visitor just said and what to ask for next.
    """

    def __init__(self, history_limit: int = 50) -> None:
        self._history_limit = history_limit

    def build(
        self,
        agent: FormAgent,
        history: Sequence[Message],
        visitor_message: str,
        next_field: BaseField | None,
    ) -> str:
        persona = agent.persona
        tone = persona.tone.value
        parts = [
            f"You are {persona.name}, a conversational AI agent with the following persona:\n",
            f"{persona.description}\n\n",
            f"Tone: {tone}\n\n",
        ]

        if persona.sample_messages:
            parts.append("Example messages in your voice:\n")
            parts.extend(f"- {sample}\n" for sample in persona.sample_messages)
            parts.append("\n")

        if agent.knowledge and agent.knowledge.content:
            parts.append(f"Context/Knowledge:\n{agent.knowledge.content}\n\n")

        parts.append("Your goal is to collect the following information through conversation:\n")
        for field in agent.field_schema.fields:
            required = " [REQUIRED]" if field.required else ""
            parts.append(f"- {field.label} ({field.type}){required}\n")
            if field.help_text:
                parts.append(f"  {field.help_text}\n")

        parts.append("\nConversation so far:\n")
        for message in self._visible_history(history):
            speaker = persona.name if message.role == MessageRole.AGENT else "User"
            parts.append(f"{speaker}: {message.content}\n")

        parts.append(f"\nUser just said: {visitor_message}\n\n")

        if next_field is not None:
            parts.append(f"Next, ask for: {next_field.label}\n")
            if next_field.placeholder:
                parts.append(f"Suggested phrasing: {next_field.placeholder}\n")
        else:
            parts.append(
                "All required fields have been collected. "
                "Thank the user and ask if there's anything else.\n"
            )

        parts.append(
            f"\nRespond naturally in a {tone} tone. "
            "Keep responses concise and conversational."
        )
        return "".join(parts)

    def _visible_history(self, history: Sequence[Message]) -> list[Message]:
        visible = [m for m in history if m.role != MessageRole.SYSTEM]
        return visible[-self._history_limit :]
