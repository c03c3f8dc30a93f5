"""AI service capability interfaces."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Protocol, TypeVar

from flowgate._types import ModelSettings


class AIService(ABC):
    """A backend the orchestrator can route calls to.

    Concrete capabilities (chat completion, text completion, embeddings)
    subclass this and are used as registry keys.
    """

    @property
    @abstractmethod
    def model_id(self) -> str | None:
        """Identifier of the model this service talks to, if known."""


class ChatCompletionService(AIService):
    """Capability marker for chat-completion backends."""


class TextCompletionService(AIService):
    """Capability marker for text-completion backends."""


class EmbeddingGenerationService(AIService):
    """Capability marker for embedding backends."""


S = TypeVar("S", bound=AIService)


class SupportsModelSettings(Protocol):
    """Anything exposing an ordered list of model preferences."""

    @property
    def model_settings(self) -> Sequence[ModelSettings] | None: ...
