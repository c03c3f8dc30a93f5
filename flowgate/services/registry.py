"""Thread-safe registry of AI service instances keyed by capability."""

from __future__ import annotations

import threading
from dataclasses import dataclass

from flowgate.services.base import AIService, S


@dataclass(frozen=True, slots=True)
class _Registration:
    service: AIService
    service_id: str | None


class ServiceRegistry:
    """Stores service instances per capability type.

    A capability may hold one default service and any number of services
    keyed by ``service_id``. Lookups never raise; absent entries yield
    ``None`` (or an empty list).
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._services: dict[type[AIService], list[_Registration]] = {}
        self._defaults: dict[type[AIService], AIService] = {}

    def register(
        self,
        capability: type[S],
        service: S,
        *,
        service_id: str | None = None,
        default: bool = False,
    ) -> None:
        """Register *service* under *capability*.

        The first service registered for a capability becomes its default
        unless a later registration passes ``default=True``. Raises
        ``TypeError`` if *service* does not implement *capability* and
        ``ValueError`` if *service_id* is already taken.
        """
        if not isinstance(service, capability):
            raise TypeError(
                f"{type(service).__name__} does not implement {capability.__name__}"
            )
        with self._lock:
            entries = self._services.setdefault(capability, [])
            if service_id and any(e.service_id == service_id for e in entries):
                raise ValueError(
                    f"Service id '{service_id}' is already registered "
                    f"for {capability.__name__}"
                )
            entries.append(_Registration(service=service, service_id=service_id or None))
            if default or capability not in self._defaults:
                self._defaults[capability] = service

    def get_service(self, capability: type[S]) -> S | None:
        """Return the default service for *capability*, or ``None``."""
        with self._lock:
            return self._defaults.get(capability)  # type: ignore[return-value]

    def get_keyed_service(self, capability: type[S], service_id: str) -> S | None:
        """Return the service registered under *service_id*, or ``None``."""
        with self._lock:
            for entry in self._services.get(capability, ()):
                if entry.service_id == service_id:
                    return entry.service  # type: ignore[return-value]
        return None

    def get_services(self, capability: type[S]) -> list[S]:
        """Return every service of *capability* in registration order."""
        with self._lock:
            return [e.service for e in self._services.get(capability, ())]  # type: ignore[misc]

    def clear(self) -> None:
        """Remove all registrations. Intended for testing."""
        with self._lock:
            self._services.clear()
            self._defaults.clear()
