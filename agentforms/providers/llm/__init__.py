"""Text generation providers.

- TemplateTextProvider: deterministic tone templates, no model required
- AgnoTextProvider: language model via Agno (requires the llm extra)
- MockTextProvider: scripted chunks for tests
"""

from agentforms.providers.llm.agno_provider import AgnoTextProvider
from agentforms.providers.llm.base import (
    GenerationRequest,
    ProviderError,
    RateLimitError,
    TextGenerationProvider,
)
from agentforms.providers.llm.factory import create_text_provider
from agentforms.providers.llm.mock import MockTextProvider
from agentforms.providers.llm.template import (
    TemplateTextProvider,
    render_closing,
    render_question,
)

__all__ = [
    "AgnoTextProvider",
    "GenerationRequest",
    "MockTextProvider",
    "ProviderError",
    "RateLimitError",
    "TemplateTextProvider",
    "TextGenerationProvider",
    "create_text_provider",
    "render_closing",
    "render_question",
]
