"""Provider construction from configuration."""

from agentforms.config.models import GenerationConfig
from agentforms.observability.logging import get_logger
from agentforms.providers.llm.agno_provider import AgnoTextProvider
from agentforms.providers.llm.base import TextGenerationProvider
from agentforms.providers.llm.template import TemplateTextProvider

logger = get_logger(__name__)


def create_text_provider(config: GenerationConfig) -> TextGenerationProvider:
    """Create the configured text generation provider.

    Args:
        config: Generation configuration

    Returns:
        TemplateTextProvider, or AgnoTextProvider when provider is "agno"
    """
    if config.provider == "agno":
        logger.info("text_provider_created", provider="agno", model=config.model)
        return AgnoTextProvider(model=config.model, temperature=config.temperature)

    logger.info("text_provider_created", provider="template")
    return TemplateTextProvider()
