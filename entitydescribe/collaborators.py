"""
Interfaces of the services the describe documents are generated from.

None of these are implemented here; callers plug in their own registry,
text store, URL builder, action registry and type introspector.
"""

from typing import Any, Mapping, Optional, Protocol, Sequence

from .capabilities import Capability, CustomAction, EntityReference, ViewKind


class EntityProvider(Protocol):
    """
    Handle returned by the registry for a (prefix, capability) pair.

    A handle only has to implement the method matching the capability
    it was looked up with.
    """

    def get_entity(self, ref: EntityReference) -> Any: ...

    def get_sample_entity(self) -> Any: ...

    def get_handled_output_formats(self) -> Optional[Sequence[str]]: ...

    def get_handled_input_formats(self) -> Optional[Sequence[str]]: ...

    def get_description(self, locale: str, key: Optional[str]) -> Optional[str]: ...


class Registry(Protocol):
    def list_prefixes_with_capabilities(self) -> Mapping[str, Sequence[Capability]]: ...

    def get_capabilities(self, prefix: str) -> Sequence[Capability]:
        """Raises KeyError (or UnknownPrefixError) for unregistered prefixes."""
        ...

    def get_provider(self, prefix: str, capability: Capability) -> Optional[EntityProvider]: ...


class ActionRegistry(Protocol):
    def get_custom_actions(self, prefix: str) -> Sequence[CustomAction]: ...


class UrlBuilder(Protocol):
    def build_url(self, prefix: str, sample_id: str, view_kind: ViewKind) -> str: ...


class TypeIntrospector(Protocol):
    def field_types(self, entity: Any) -> Mapping[str, str]: ...


class TextStore(Protocol):
    def get_property(self, namespace: str, key: str, locale: str) -> Optional[str]: ...
