from typing import Any, Optional

from .capabilities import Capability, EntityReference
from .collaborators import Registry
from .logger import StructuredLogger, get_logger


class SampleEntityResolver:
    """
    Best-effort lookup of a representative entity for a prefix.

    Tries the Resolvable provider with an empty id first, then asks the
    Createable provider for its sample entity. Any provider error counts
    as "no entity" so one broken provider cannot break a describe page.
    """

    def __init__(self, registry: Registry, logger: Optional[StructuredLogger] = None):
        self.registry = registry
        self.logger = logger or get_logger()

    def resolve(self, prefix: str) -> Optional[Any]:
        entity = self._try(prefix, Capability.RESOLVABLE,
                           lambda p: p.get_entity(EntityReference(prefix, "")))
        if entity is None:
            entity = self._try(prefix, Capability.CREATEABLE,
                               lambda p: p.get_sample_entity())
        return entity

    def _try(self, prefix: str, capability: Capability, fetch) -> Optional[Any]:
        try:
            provider = self.registry.get_provider(prefix, capability)
            if provider is None:
                return None
            return fetch(provider)
        except Exception as e:
            self.logger.record_collaborator_failure(prefix, "sample_entity", type(e).__name__)
            self.logger.debug(
                "Sample entity lookup failed",
                prefix=prefix,
                capability=capability.short_name,
                error=str(e),
            )
            return None
