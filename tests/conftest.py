"""
Pytest configuration and shared fixtures.

The collaborators are in-memory fakes; the projection fixtures parse a
rendered describe page (XML or HTML) back into the same plain dict so
both formats can be compared.
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Any, Dict, Optional

import pytest
from bs4 import BeautifulSoup

from entitydescribe.capabilities import Capability, CustomAction, EntityReference, ViewKind
from entitydescribe.config import DescribeSettings
from entitydescribe.logger import StructuredLogger
from entitydescribe.render import DocumentRenderer

URL_NAMES = ["collectionURL", "createURL", "showURL", "updateURL", "deleteURL"]


@dataclass
class Widget:
    id: str
    name: str
    weight: float


@dataclass
class Post:
    id: str
    title: str
    body: str
    tags: list
    published: bool


class FakeProvider:
    """Provider that can be told to raise from any of its methods."""

    def __init__(
        self,
        prefix: str,
        capabilities: list,
        entity: Any = None,
        sample: Any = None,
        output_formats: Optional[list] = None,
        input_formats: Optional[list] = None,
        descriptions: Optional[Dict[Optional[str], str]] = None,
        failing: tuple = (),
    ):
        self.prefix = prefix
        self.capabilities = list(capabilities)
        self.entity = entity
        self.sample = sample
        self.output_formats = output_formats
        self.input_formats = input_formats
        self.descriptions = descriptions or {}
        self.failing = set(failing)
        self.calls = []

    def _call(self, name: str):
        self.calls.append(name)
        if name in self.failing:
            raise RuntimeError(f"{self.prefix}.{name} is broken")

    def get_entity(self, ref: EntityReference):
        self._call("get_entity")
        return self.entity if ref.id == "" else None

    def get_sample_entity(self):
        self._call("get_sample_entity")
        return self.sample

    def get_handled_output_formats(self):
        self._call("get_handled_output_formats")
        return self.output_formats

    def get_handled_input_formats(self):
        self._call("get_handled_input_formats")
        return self.input_formats

    def get_description(self, locale, key):
        self._call("get_description")
        return self.descriptions.get(key)


class FakeRegistry:
    def __init__(self, providers=()):
        self.providers = {}
        for provider in providers:
            self.register(provider)

    def register(self, provider: FakeProvider):
        self.providers[provider.prefix] = provider

    def list_prefixes_with_capabilities(self):
        return {p: list(pr.capabilities) for p, pr in self.providers.items()}

    def get_capabilities(self, prefix):
        return list(self.providers[prefix].capabilities)

    def get_provider(self, prefix, capability):
        provider = self.providers.get(prefix)
        if provider is None or capability not in provider.capabilities:
            return None
        return provider


class FakeTextStore:
    """(namespace, key) entries, optionally overridden per locale."""

    def __init__(self, entries=None, localized=None, failing=False):
        self.entries = dict(entries or {})
        self.localized = dict(localized or {})
        self.failing = failing
        self.lookups = []

    def get_property(self, namespace, key, locale):
        self.lookups.append((namespace, key, locale))
        if self.failing:
            raise IOError("text store unavailable")
        if (namespace, key, locale) in self.localized:
            return self.localized[(namespace, key, locale)]
        return self.entries.get((namespace, key))


class FakeActionRegistry:
    def __init__(self, actions=None):
        self.actions = dict(actions or {})

    def get_custom_actions(self, prefix):
        return list(self.actions.get(prefix, []))


class FakeUrlBuilder:
    def build_url(self, prefix, sample_id, view_kind):
        if view_kind is ViewKind.LIST:
            return f"/{prefix}"
        if view_kind is ViewKind.NEW:
            return f"/{prefix}/new"
        if view_kind is ViewKind.SHOW:
            return f"/{prefix}/{sample_id}"
        return f"/{prefix}/{sample_id}/{view_kind.value}"


class FakeIntrospector:
    """Reads instance attributes, or reports a fixed field map when given one."""

    def __init__(self, failing=False, fields=None):
        self.failing = failing
        self.fields = fields

    def field_types(self, entity):
        if self.failing:
            raise TypeError("cannot introspect")
        if self.fields is not None:
            return dict(self.fields)
        return {k: type(v).__name__ for k, v in vars(entity).items() if not k.startswith("_")}


@pytest.fixture
def quiet_logger() -> StructuredLogger:
    """Logger with no console or file output."""
    return StructuredLogger(name="entitydescribe.test", level="DEBUG", enable_console=False)


@pytest.fixture
def settings() -> DescribeSettings:
    return DescribeSettings(base_url="http://localhost:8080/direct", locale="en")


@pytest.fixture
def widget_provider() -> FakeProvider:
    return FakeProvider(
        "widget",
        [Capability.RESOLVABLE, Capability.CREATEABLE, Capability.OUTPUTABLE],
        entity=Widget(id="1", name="sprocket", weight=1.5),
        output_formats=["json", "xml"],
    )


@pytest.fixture
def blog_provider() -> FakeProvider:
    return FakeProvider(
        "blog",
        [
            Capability.DESCRIBE_DEFINEABLE,
            Capability.COLLECTION_RESOLVABLE,
            Capability.RESOLVABLE,
            Capability.CREATEABLE,
            Capability.UPDATEABLE,
            Capability.DELETEABLE,
            Capability.OUTPUTABLE,
            Capability.INPUTABLE,
        ],
        sample=Post(id="", title="", body="", tags=[], published=False),
        output_formats=["json", "xml", "html"],
        input_formats=["json"],
        descriptions={None: "Blog posts & comments", "Createable": "Creates a new post"},
    )


@pytest.fixture
def author_provider() -> FakeProvider:
    return FakeProvider("author", [Capability.RESOLVABLE])


@pytest.fixture
def registry(widget_provider, blog_provider, author_provider) -> FakeRegistry:
    # registration order is deliberately not sorted
    return FakeRegistry([widget_provider, blog_provider, author_provider])


@pytest.fixture
def text_store() -> FakeTextStore:
    return FakeTextStore(
        entries={
            ("widget", "widget"): "Widgets for testing",
            ("widget", "widget.Resolvable"): "Look up one widget",
            ("widget", "widget.Outputable"): "",
            ("blog", "blog.action.publish"): "Publishes the post",
            ("author", "author"): "   ",
        },
        localized={
            ("widget", "widget", "fr"): "Des widgets",
            ("describe", "describe.capabilities", "fr"): "Capacites",
        },
    )


@pytest.fixture
def action_registry() -> FakeActionRegistry:
    return FakeActionRegistry({
        "blog": [
            CustomAction("publish", "edit"),
            CustomAction("archive", "show"),
        ],
    })


@pytest.fixture
def url_builder() -> FakeUrlBuilder:
    return FakeUrlBuilder()


@pytest.fixture
def introspector() -> FakeIntrospector:
    return FakeIntrospector()


@pytest.fixture
def renderer(registry, text_store, action_registry, url_builder, introspector, settings, quiet_logger):
    return DocumentRenderer(
        registry,
        text_store,
        action_registry,
        url_builder,
        introspector,
        settings=settings,
        logger=quiet_logger,
    )


def _project_xml_prefix(el: ET.Element) -> Dict[str, Any]:
    entity = el.find("entityClass")
    return {
        "prefix": el.findtext("prefix"),
        "description": el.findtext("description"),
        "urls": {name: el.findtext(name) for name in URL_NAMES if el.find(name) is not None},
        "actions": [
            (a.findtext("action"), a.findtext("viewKey"), a.findtext("description"))
            for a in el.findall("customActions/customAction")
        ],
        "output_formats": [f.text for f in el.findall("outputFormats/format")],
        "input_formats": [f.text for f in el.findall("inputFormats/format")],
        "entity_class": entity.findtext("class") if entity is not None else None,
        "fields": [
            (c.get("name", c.tag), c.text) for c in entity if c.tag != "class"
        ] if entity is not None else [],
        "capabilities": [
            (c.findtext("name"), c.findtext("type"), c.findtext("description"))
            for c in el.findall("capabilities/capability")
        ],
    }


def _project_html_prefix(div) -> Dict[str, Any]:
    description = div.find("div", class_="description", recursive=False)
    entity = div.find("span", class_="entityClass")

    def formats(name):
        h4 = div.find("h4", class_=name)
        if h4 is None:
            return []
        return [s.get_text() for s in h4.find_all("span", class_="format")]

    actions = []
    for a in div.select("div.customAction"):
        desc = a.find("div", class_="description")
        actions.append((
            a.find("span", class_="action").get_text(),
            a.find("span", class_="viewKey").get_text(),
            desc.get_text() if desc is not None else None,
        ))

    capabilities = []
    table = div.find("table", class_="capabilities")
    for row in table.find_all("tr")[1:]:
        cells = [td.get_text() for td in row.find_all("td")]
        capabilities.append((cells[1], cells[2], cells[3] or None))

    return {
        "prefix": div["id"],
        "description": description.get_text() if description is not None else None,
        "urls": {li["class"][0]: li.find("a").get_text() for li in div.select("ul.urls > li")},
        "actions": actions,
        "output_formats": formats("outputFormats"),
        "input_formats": formats("inputFormats"),
        "entity_class": entity.get_text() if entity is not None else None,
        "fields": [
            (li.find("span", class_="field").get_text(), li.find("span", class_="type").get_text())
            for li in div.select("ul.fields > li")
        ],
        "capabilities": capabilities,
    }


@pytest.fixture
def project_xml():
    """Parse an XML describe document into a list of canonical prefix dicts."""
    def project(document: str) -> list:
        root = ET.fromstring(document)
        if root.tag == "prefix":
            return [_project_xml_prefix(root)]
        return [_project_xml_prefix(el) for el in root.findall("prefixes/prefix")]
    return project


@pytest.fixture
def project_html():
    """Parse an HTML describe document into a list of canonical prefix dicts."""
    def project(document: str) -> list:
        soup = BeautifulSoup(document, "html.parser")
        return [_project_html_prefix(div) for div in soup.find_all("div", class_="prefix")]
    return project
