"""Selection of an AI service and its execution settings per invocation."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from flowgate._errors import ServiceNotRegisteredError
from flowgate._types import ModelSettings
from flowgate.services.base import S, SupportsModelSettings
from flowgate.services.registry import ServiceRegistry

logger = logging.getLogger("flowgate")


class AIServiceSelector(ABC):
    """Maps a requested capability and a function's preferences to a backend."""

    @abstractmethod
    def select_ai_service(
        self,
        capability: type[S],
        registry: ServiceRegistry,
        function: SupportsModelSettings,
    ) -> tuple[S, ModelSettings | None]:
        """Return the service to call and the settings to call it with.

        Raises :class:`~flowgate.ServiceNotRegisteredError` when nothing
        matches.
        """


class OrderedAIServiceSelector(AIServiceSelector):
    """Walks the function's model preferences in declared order.

    For each preference: an explicit ``service_id`` is looked up by key; else a
    ``model_id`` is matched against the model of every registered service;
    else the first such unqualified preference is remembered. If nothing
    matched, the remembered preference is paired with the default service.
    A function without preferences gets the default service and no settings.
    """

    def select_ai_service(
        self,
        capability: type[S],
        registry: ServiceRegistry,
        function: SupportsModelSettings,
    ) -> tuple[S, ModelSettings | None]:
        preferences = function.model_settings
        if not preferences:
            service = registry.get_service(capability)
            if service is not None:
                return service, None
        else:
            fallback: ModelSettings | None = None
            for settings in preferences:
                if settings.service_id:
                    service = registry.get_keyed_service(capability, settings.service_id)
                    if service is not None:
                        logger.debug(
                            "Selected %s by service id %r",
                            capability.__name__,
                            settings.service_id,
                        )
                        return service, settings
                elif settings.model_id:
                    service = self._get_service_by_model_id(
                        capability, registry, settings.model_id
                    )
                    if service is not None:
                        logger.debug(
                            "Selected %s by model id %r",
                            capability.__name__,
                            settings.model_id,
                        )
                        return service, settings
                elif fallback is None:
                    fallback = settings

            if fallback is not None:
                service = registry.get_service(capability)
                if service is not None:
                    return service, fallback

        names = (
            "|".join(s.service_id or "" for s in preferences) if preferences else "<NONE>"
        )
        raise ServiceNotRegisteredError(capability, names)

    @staticmethod
    def _get_service_by_model_id(
        capability: type[S], registry: ServiceRegistry, model_id: str
    ) -> S | None:
        for service in registry.get_services(capability):
            if service.model_id and service.model_id == model_id:
                return service
        return None
