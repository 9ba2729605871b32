"""
Describe documents for all registered prefixes or a single one.

DocumentRenderer builds one description tree per prefix and hands the
trees to the XML or HTML serializer. Only UnknownPrefixError escapes a
render call; collaborator failures just leave their section out.
"""

import re
from html import escape as html_escape
from typing import Optional, Union
from xml.sax.saxutils import escape as xml_escape, quoteattr

from .collaborators import ActionRegistry, Registry, TextStore, TypeIntrospector, UrlBuilder
from .config import FAKE_ID, DescribeSettings
from .description import DescriptionBuilder
from .formatting import format_url_html, formats_string_html, formats_url_html
from .logger import StructuredLogger, get_logger
from .nodes import ElementNode, LinkNode, ListNode, Node, TextNode
from .sample_entity import SampleEntityResolver
from .templates import RESTFUL_URLS_NOTE, DocumentFormat, template_for
from .text_resolver import TextResolver

INDENT = "  "

# Letters or underscore first, then letters, digits, '.', '-' or '_'
XML_NAME = re.compile(r"^[^\W\d][\w.\-]*$")

URL_LABELS = {
    "collectionURL": "describe.entity.collection.url",
    "createURL": "describe.entity.create.url",
    "showURL": "describe.entity.show.url",
    "updateURL": "describe.entity.update.url",
    "deleteURL": "describe.entity.delete.url",
}

FORMAT_LABELS = {
    "outputFormats": "describe.entity.output.formats",
    "inputFormats": "describe.entity.input.formats",
}


class XmlSerializer:
    def describe_all(self, describe_url: str, trees: list[ElementNode]) -> str:
        lines = ["<describe>"]
        lines.append(f"{INDENT}<describeURL>{xml_escape(describe_url)}</describeURL>")
        lines.append(f"{INDENT}<prefixes>")
        for tree in trees:
            lines.extend(self.node(tree, 2))
        lines.append(f"{INDENT}</prefixes>")
        lines.append("</describe>")
        return "\n".join(lines) + "\n"

    def describe_one(self, tree: ElementNode) -> str:
        return "\n".join(self.node(tree, 0)) + "\n"

    def node(self, node: Node, depth: int) -> list[str]:
        pad = INDENT * depth
        if isinstance(node, TextNode):
            if not XML_NAME.match(node.name):
                # entity field names come from user classes and may not be valid tags
                return [f"{pad}<field name={quoteattr(node.name)}>{xml_escape(node.value)}</field>"]
            return [f"{pad}<{node.name}>{xml_escape(node.value)}</{node.name}>"]
        if isinstance(node, LinkNode):
            return [f"{pad}<{node.name}>{xml_escape(node.path)}</{node.name}>"]
        if isinstance(node, ListNode):
            lines = [f"{pad}<{node.name}>"]
            for item in node.items:
                lines.append(f"{pad}{INDENT}<{node.item_name}>{xml_escape(item)}</{node.item_name}>")
            lines.append(f"{pad}</{node.name}>")
            return lines

        if node.transparent:
            lines = []
            for child in node.children:
                lines.extend(self.node(child, depth))
            return lines
        lines = [f"{pad}<{node.name}>"]
        for child in node.children:
            lines.extend(self.node(child, depth + 1))
        lines.append(f"{pad}</{node.name}>")
        return lines


class HtmlSerializer:
    """Browsable XHTML; every entity URL also links to its output formats."""

    def __init__(self, text_resolver: TextResolver, settings: DescribeSettings):
        self.text = text_resolver
        self.settings = settings
        self._handlers = {
            "description": self._description,
            "urls": self._urls,
            "customActions": self._custom_actions,
            "outputFormats": self._formats,
            "inputFormats": self._formats,
            "entityClass": self._entity_class,
            "capabilities": self._capabilities,
        }

    def page_heading(self) -> str:
        url = self.settings.describe_url
        return (
            f"<h1><a href='{html_escape(url)}'>{html_escape(self.text.label('describe.all'))}</a> "
            f"{html_escape(self.text.label('describe.registered.entities'))}"
            f"{format_url_html(url, DocumentFormat.XML.value)}</h1>\n"
            f"  <i>{RESTFUL_URLS_NOTE}</i><br/>\n"
        )

    def describe_all(self, trees: list[ElementNode]) -> str:
        parts = [self.page_heading()]
        parts.append(
            f"  <h2>{html_escape(self.text.label('describe.all'))} "
            f"({html_escape(self.text.label('describe.registered.entities'))}): "
            f"<span class='count'>{len(trees)}</span></h2>\n"
        )
        parts.extend(self.prefix(tree) for tree in trees)
        return "".join(parts)

    def describe_one(self, tree: ElementNode) -> str:
        return self.page_heading() + self.prefix(tree)

    def prefix(self, tree: ElementNode) -> str:
        prefix = tree.text("prefix")
        describe_url = tree.text("describeURL")
        lines = [
            f"  <div class='prefix' id='{html_escape(prefix)}'>",
            f"    <h3><a href='{html_escape(describe_url)}'>{html_escape(prefix)}</a>"
            f"{format_url_html(describe_url, DocumentFormat.XML.value)}</h3>",
        ]
        for child in tree.children:
            handler = self._handlers.get(child.name)
            if handler is not None:
                lines.extend(handler(child))
        lines.append("  </div>")
        return "\n".join(lines) + "\n"

    def _description(self, node: TextNode) -> list[str]:
        return [
            "    <div class='description' style='font-style: italic; padding-left:0.5em; "
            f"padding-bottom:0.4em; width:90%;'>{html_escape(node.value)}</div>"
        ]

    def _urls(self, node: ElementNode) -> list[str]:
        sample_id = node.attributes.get("sampleId", "")
        lines = [
            f"    <h4 style='padding-left:0.5em;'>{html_escape(self.text.label('describe.entity.sample.urls'))}"
            f" (_id='{html_escape(sample_id)}') "
            f"[{html_escape(self.text.label('describe.entity.may.be.invalid'))}]:</h4>",
            "    <ul class='urls'>",
        ]
        for link in node.children:
            url = self.settings.full_url(link.path)
            label = self.text.label(URL_LABELS.get(link.name, link.name))
            lines.append(
                f"      <li class='{link.name}'>{html_escape(label)}: "
                f"<a href='{html_escape(url)}'>{html_escape(link.path)}</a>"
                f"{formats_url_html(url, link.formats)}</li>"
            )
        lines.append("    </ul>")
        return lines

    def _custom_actions(self, node: ElementNode) -> list[str]:
        lines = [
            f"    <h4 style='padding-left:0.5em;'>{html_escape(self.text.label('describe.custom.actions'))}</h4>",
            "    <div class='customActions' style='padding-left:0.5em;'>",
        ]
        for action in node.children:
            lines.append("      <div class='customAction'>")
            lines.append(
                f"        <span class='action' style='font-weight:bold;'>{html_escape(action.text('action'))}</span> : "
                f"<span class='viewKey'>{html_escape(action.text('viewKey'))}</span><br/>"
            )
            desc = action.text("description")
            if desc is not None:
                lines.append(
                    "        <div class='description' style='font-style:italic;font-size:0.9em;'>"
                    f"{html_escape(desc)}</div>"
                )
            lines.append("      </div>")
        lines.append("    </div>")
        return lines

    def _formats(self, node: ListNode) -> list[str]:
        label = self.text.label(FORMAT_LABELS[node.name])
        return [
            f"    <h4 class='{node.name}' style='padding-left:0.5em;'>{html_escape(label)} : "
            f"{formats_string_html(node.items)}</h4>"
        ]

    def _entity_class(self, node: ElementNode) -> list[str]:
        label = self.text.label("describe.entity.class")
        lines = [
            f"    <h4 style='padding-left:0.5em;'>{html_escape(label)} : "
            f"<span class='entityClass'>{html_escape(node.text('class'))}</span></h4>",
            "    <ul class='fields'>",
        ]
        for field in node.children[1:]:
            lines.append(
                f"      <li><span class='field'>{html_escape(field.name)}</span> : "
                f"<span class='type'>{html_escape(field.value)}</span></li>"
            )
        lines.append("    </ul>")
        return lines

    def _capabilities(self, node: ElementNode) -> list[str]:
        lines = [
            "    <div style='font-size:1.1em; font-weight:bold; font-style:italic; padding-left:0.5em;'>"
            f"{html_escape(self.text.label('describe.capabilities'))}: {len(node.children)}</div>",
            "    <table class='capabilities' width='95%' style='padding-left:1.5em;'>",
            "      <tr style='font-size:0.9em;'><th width='1%'></th>"
            f"<th width='14%'>{html_escape(self.text.label('describe.capabilities.name'))}</th>"
            f"<th width='30%'>{html_escape(self.text.label('describe.capabilities.type'))}</th>"
            f"<th width='55%'>{html_escape(self.text.label('describe.capabilities.description'))}</th></tr>",
        ]
        for index, capability in enumerate(node.children, start=1):
            lines.append(
                f"      <tr style='font-size:0.9em;'><td>{index}</td>"
                f"<td>{html_escape(capability.text('name'))}</td>"
                f"<td>{html_escape(capability.text('type'))}</td>"
                f"<td>{html_escape(capability.text('description') or '')}</td></tr>"
            )
        lines.append("    </table>")
        return lines

class DocumentRenderer:
    """
    Entry point for describe requests.

    When no logger is passed, explicit settings get a StructuredLogger
    built from their log level and log dir; otherwise the shared
    get_logger() instance is used.

    Example:
        renderer = DocumentRenderer(registry, store, actions, urls, introspector)
        html = renderer.render_all("html")
        xml = renderer.render_one("blog", "42", "xml")
    """

    def __init__(
        self,
        registry: Registry,
        text_store: TextStore,
        action_registry: ActionRegistry,
        url_builder: UrlBuilder,
        introspector: TypeIntrospector,
        settings: Optional[DescribeSettings] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        self.registry = registry
        self.settings = settings or DescribeSettings()
        if logger is None:
            # explicit settings get their own logger; the shared one may predate them
            logger = StructuredLogger(**settings.logger_kwargs()) if settings is not None else get_logger()
        self.logger = logger
        self.text_resolver = TextResolver(registry, text_store, self.settings.locale, self.logger)
        self.builder = DescriptionBuilder(
            registry,
            action_registry,
            url_builder,
            introspector,
            self.text_resolver,
            sample_resolver=SampleEntityResolver(registry, self.logger),
            settings=self.settings,
            logger=self.logger,
        )
        self.xml = XmlSerializer()
        self.html = HtmlSerializer(self.text_resolver, self.settings)

    def render_all(self, fmt: Union[DocumentFormat, str] = DocumentFormat.HTML) -> str:
        """Minimal description (description and capabilities) of every prefix, sorted."""
        fmt = DocumentFormat.parse(fmt)
        mapping = self.registry.list_prefixes_with_capabilities()
        trees = [
            self.builder.build(prefix, FAKE_ID, False, mapping[prefix])
            for prefix in sorted(mapping)
        ]

        if fmt is DocumentFormat.XML:
            body = self.xml.describe_all(self.settings.describe_url, trees)
        else:
            body = self.html.describe_all(trees)
        self.logger.record_document(len(trees))
        self.logger.debug("Rendered describe-all", format=fmt.value, prefixes=len(trees))
        return self._wrap(fmt, body)

    def render_one(
        self,
        prefix: str,
        sample_id: str = FAKE_ID,
        fmt: Union[DocumentFormat, str] = DocumentFormat.HTML,
    ) -> str:
        """
        Full description of a single prefix.

        Raises:
            UnknownPrefixError: If no provider is registered for prefix
        """
        fmt = DocumentFormat.parse(fmt)
        capabilities = self.builder.capabilities_for(prefix)
        tree = self.builder.build(prefix, sample_id, True, capabilities)

        if fmt is DocumentFormat.XML:
            body = self.xml.describe_one(tree)
        else:
            body = self.html.describe_one(tree)
        self.logger.record_document(1)
        self.logger.debug("Rendered describe", prefix=prefix, format=fmt.value)
        return self._wrap(fmt, body)

    def _wrap(self, fmt: DocumentFormat, body: str) -> str:
        template = template_for(fmt)
        return template.header + body + template.footer
