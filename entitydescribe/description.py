"""
Builds the description tree for a single entity prefix.

The tree is the same whether it ends up as XML or HTML. Bulk listings
build the minimal form (description and capability names); a single
prefix gets the full form with sample URLs, custom actions, formats
and the sample entity's fields.
"""

from typing import Optional, Sequence

from .capabilities import Capability, ViewKind
from .collaborators import ActionRegistry, Registry, TypeIntrospector, UrlBuilder
from .config import DescribeSettings
from .errors import UnknownPrefixError
from .formatting import clean_formats, qualified_type_name
from .logger import StructuredLogger, get_logger
from .nodes import ElementNode, LinkNode, ListNode, TextNode
from .sample_entity import SampleEntityResolver
from .text_resolver import TextResolver, action_key

# (element name, required capability or None for always, view kind)
URL_VIEWS = (
    ("collectionURL", Capability.COLLECTION_RESOLVABLE, ViewKind.LIST),
    ("createURL", Capability.CREATEABLE, ViewKind.NEW),
    ("showURL", None, ViewKind.SHOW),
    ("updateURL", Capability.UPDATEABLE, ViewKind.EDIT),
    ("deleteURL", Capability.DELETEABLE, ViewKind.DELETE),
)


class DescriptionBuilder:
    def __init__(
        self,
        registry: Registry,
        action_registry: ActionRegistry,
        url_builder: UrlBuilder,
        introspector: TypeIntrospector,
        text_resolver: TextResolver,
        sample_resolver: Optional[SampleEntityResolver] = None,
        settings: Optional[DescribeSettings] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        self.registry = registry
        self.action_registry = action_registry
        self.url_builder = url_builder
        self.introspector = introspector
        self.text_resolver = text_resolver
        self.logger = logger or get_logger()
        self.sample_resolver = sample_resolver or SampleEntityResolver(registry, self.logger)
        self.settings = settings or DescribeSettings()

    def capabilities_for(self, prefix: str) -> list[Capability]:
        """Registered capabilities of prefix in registry order."""
        try:
            caps = self.registry.get_capabilities(prefix)
        except KeyError:
            raise UnknownPrefixError(prefix) from None
        if caps is None:
            raise UnknownPrefixError(prefix)
        return list(caps)

    def build(
        self,
        prefix: str,
        sample_id: str,
        include_extra: bool,
        capabilities: Optional[Sequence[Capability]] = None,
    ) -> ElementNode:
        """
        Describe one prefix.

        Args:
            prefix: A registered entity prefix
            sample_id: Placeholder id used to build the example URLs
            include_extra: Full single-entity form instead of the bulk form
            capabilities: Skip the registry lookup when already known

        Raises:
            UnknownPrefixError: If the prefix is not registered
        """
        caps = list(capabilities) if capabilities is not None else self.capabilities_for(prefix)
        present = set(caps)

        root = ElementNode("prefix")
        root.add(TextNode("prefix", prefix))
        root.add(TextNode("describeURL", self.settings.prefix_describe_url(prefix)))

        description = self.text_resolver.resolve(prefix)
        if description is not None:
            root.add(TextNode("description", description))

        if include_extra:
            output_formats = self.formats(prefix, output=True)
            input_formats = self.formats(prefix, output=False)

            root.add(self._urls(prefix, sample_id, present, output_formats))
            actions = self._custom_actions(prefix)
            if actions is not None:
                root.add(actions)
            root.add(ListNode("outputFormats", "format", tuple(output_formats)))
            root.add(ListNode("inputFormats", "format", tuple(input_formats)))
            entity_class = self._entity_class(prefix)
            if entity_class is not None:
                root.add(entity_class)

        root.add(self._capabilities(prefix, caps, include_extra))
        return root

    def formats(self, prefix: str, output: bool) -> list[str]:
        """Output (or input) formats handled by prefix; empty when unsupported."""
        capability = Capability.OUTPUTABLE if output else Capability.INPUTABLE
        try:
            provider = self.registry.get_provider(prefix, capability)
            if provider is None:
                return []
            if output:
                return clean_formats(provider.get_handled_output_formats())
            return clean_formats(provider.get_handled_input_formats())
        except Exception as e:
            section = "output_formats" if output else "input_formats"
            self.logger.record_collaborator_failure(prefix, section, type(e).__name__)
            self.logger.warning("Format lookup failed", prefix=prefix, section=section, error=str(e))
            return []

    def _urls(self, prefix: str, sample_id: str, present: set, formats: list[str]) -> ElementNode:
        group = ElementNode("urls", transparent=True, attributes={"sampleId": sample_id})
        for name, required, view in URL_VIEWS:
            if required is not None and required not in present:
                continue
            path = self.url_builder.build_url(prefix, sample_id, view)
            group.add(LinkNode(name, path, tuple(formats)))
        return group

    def _custom_actions(self, prefix: str) -> Optional[ElementNode]:
        actions = self.action_registry.get_custom_actions(prefix) or []
        if not actions:
            return None
        group = ElementNode("customActions")
        for custom in actions:
            node = ElementNode("customAction")
            node.add(TextNode("action", custom.action))
            node.add(TextNode("viewKey", custom.view_key))
            desc = self.text_resolver.resolve(prefix, action_key(custom.action))
            if desc is not None:
                node.add(TextNode("description", desc))
            group.add(node)
        return group

    def _entity_class(self, prefix: str) -> Optional[ElementNode]:
        entity = self.sample_resolver.resolve(prefix)
        if entity is None:
            return None
        try:
            field_types = dict(self.introspector.field_types(entity))
        except Exception as e:
            self.logger.record_collaborator_failure(prefix, "entity_class", type(e).__name__)
            self.logger.warning("Field introspection failed", prefix=prefix, error=str(e))
            return None

        node = ElementNode("entityClass")
        node.add(TextNode("class", qualified_type_name(entity)))
        for field_name in sorted(field_types):
            node.add(TextNode(field_name, str(field_types[field_name])))
        return node

    def _capabilities(self, prefix: str, caps: list[Capability], include_extra: bool) -> ElementNode:
        group = ElementNode("capabilities")
        for capability in caps:
            node = ElementNode("capability")
            node.add(TextNode("name", capability.short_name))
            node.add(TextNode("type", capability.qualified_name))
            if include_extra:
                desc = self.text_resolver.resolve(prefix, capability.short_name)
                if desc is not None:
                    node.add(TextNode("description", desc))
            group.add(node)
        return group
