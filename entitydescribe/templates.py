from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Union

XML_HEADER = '<?xml version="1.0" encoding="UTF-8" ?>\n'
XHTML_HEADER = (
    '<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.0 Transitional//EN" '
    '"http://www.w3.org/TR/xhtml1/DTD/xhtml1-transitional.dtd">\n'
    '<html xmlns="http://www.w3.org/1999/xhtml">\n'
    "<head>\n"
    '  <meta http-equiv="Content-Type" content="text/html; charset=UTF-8" />\n'
    "  <title>Describe Entities</title>\n"
    "</head>\n"
    "<body>\n"
)
XHTML_FOOTER = "\n</body>\n</html>\n"

RESTFUL_URLS_NOTE = (
    "RESTful URLs: <a href='http://microformats.org/wiki/rest/urls'>"
    "http://microformats.org/wiki/rest/urls</a>"
)


class DocumentFormat(Enum):
    XML = "xml"
    HTML = "html"

    @classmethod
    def parse(cls, value: Union["DocumentFormat", str, None]) -> "DocumentFormat":
        """Anything other than xml is rendered as HTML."""
        if isinstance(value, cls):
            return value
        if value is not None and str(value).strip().lower() == cls.XML.value:
            return cls.XML
        return cls.HTML


@dataclass(frozen=True)
class FormatTemplate:
    header: str
    footer: str


TEMPLATES = MappingProxyType({
    DocumentFormat.XML: FormatTemplate(header=XML_HEADER, footer=""),
    DocumentFormat.HTML: FormatTemplate(header=XML_HEADER + XHTML_HEADER, footer=XHTML_FOOTER),
})


def template_for(fmt: DocumentFormat) -> FormatTemplate:
    return TEMPLATES[fmt]
