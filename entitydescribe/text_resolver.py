"""
Locale-aware lookup of entity descriptions.

Descriptions come from the provider itself when it is DescribeDefineable,
otherwise from the text store under the prefix namespace using keys like:

    blog                        (the prefix itself)
    blog.Createable             (a capability)
    blog.action.publish         (a custom action)
"""

from typing import Optional

from .capabilities import Capability
from .collaborators import Registry, TextStore
from .config import DESCRIBE
from .formatting import blank_to_none
from .logger import StructuredLogger, get_logger

ACTION_KEY_PREFIX = "action."

DEFAULT_LABELS = {
    "describe.all": "Describe all",
    "describe.registered.entities": "registered entities",
    "describe.entity.sample.urls": "Sample Entity URLs",
    "describe.entity.may.be.invalid": "may not be valid",
    "describe.entity.collection.url": "Collection URL",
    "describe.entity.create.url": "Create URL",
    "describe.entity.show.url": "Show URL",
    "describe.entity.update.url": "Update URL",
    "describe.entity.delete.url": "Delete URL",
    "describe.custom.actions": "Custom Actions",
    "describe.entity.output.formats": "Output formats",
    "describe.entity.input.formats": "Input formats",
    "describe.entity.class": "Entity class",
    "describe.capabilities": "Capabilities",
    "describe.capabilities.name": "Name",
    "describe.capabilities.type": "Type",
    "describe.capabilities.description": "Description",
}


def action_key(action: str) -> str:
    return ACTION_KEY_PREFIX + action


def composite_key(prefix: str, key: Optional[str]) -> str:
    return prefix if key is None else f"{prefix}.{key}"


class TextResolver:
    """Resolves descriptions and page labels for one locale by default."""

    def __init__(
        self,
        registry: Registry,
        text_store: TextStore,
        locale: str = "en",
        logger: Optional[StructuredLogger] = None,
    ):
        self.registry = registry
        self.text_store = text_store
        self.locale = locale
        self.logger = logger or get_logger()

    def resolve(self, prefix: str, key: Optional[str] = None, locale: Optional[str] = None) -> Optional[str]:
        """
        Get the description for a prefix, one of its capabilities or a custom action.

        Args:
            prefix: Entity prefix
            key: None for the prefix itself, a capability short name,
                or "action.<name>" for a custom action
            locale: Overrides the default locale

        Returns:
            The description, or None when there is none (empty counts as none)
        """
        locale = locale or self.locale
        value = self._from_provider(prefix, key, locale)
        if value is None:
            value = self._from_store(prefix, key, locale)
        return blank_to_none(value)

    def _from_provider(self, prefix: str, key: Optional[str], locale: str) -> Optional[str]:
        try:
            describer = self.registry.get_provider(prefix, Capability.DESCRIBE_DEFINEABLE)
            if describer is None:
                return None
            return describer.get_description(locale, key)
        except Exception as e:
            self._record_failure(prefix, "description", key, e)
            return None

    def _from_store(self, prefix: str, key: Optional[str], locale: str) -> Optional[str]:
        try:
            return self.text_store.get_property(prefix, composite_key(prefix, key), locale)
        except Exception as e:
            self._record_failure(prefix, "description", key, e)
            return None

    def label(self, key: str, locale: Optional[str] = None) -> str:
        """Localized page label from the describe namespace, English by default."""
        locale = locale or self.locale
        value = None
        try:
            value = self.text_store.get_property(DESCRIBE, key, locale)
        except Exception as e:
            self.logger.warning("Label lookup failed", key=key, locale=locale, error=str(e))
        return blank_to_none(value) or DEFAULT_LABELS.get(key, key)

    def _record_failure(self, prefix: str, section: str, key: Optional[str], error: Exception):
        self.logger.record_collaborator_failure(prefix, section, type(error).__name__)
        self.logger.warning(
            "Description lookup failed",
            prefix=prefix,
            key=key,
            error=str(error),
        )
