"""AI service capabilities, registry and selection."""

from flowgate.services.base import (
    AIService,
    ChatCompletionService,
    EmbeddingGenerationService,
    SupportsModelSettings,
    TextCompletionService,
)
from flowgate.services.registry import ServiceRegistry
from flowgate.services.selector import AIServiceSelector, OrderedAIServiceSelector

__all__ = [
    "AIService",
    "AIServiceSelector",
    "ChatCompletionService",
    "EmbeddingGenerationService",
    "OrderedAIServiceSelector",
    "ServiceRegistry",
    "SupportsModelSettings",
    "TextCompletionService",
]
