from html import escape
from typing import Any, Iterable, Optional

NONE_MARKUP = "<i>NONE</i>"


def blank_to_none(value: Optional[str]) -> Optional[str]:
    """Treat empty and whitespace-only text as absent."""
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    return value if value.strip() != "" else None


def qualified_type_name(obj: Any) -> str:
    cls = obj if isinstance(obj, type) else type(obj)
    module = cls.__module__
    if module in (None, "builtins"):
        return cls.__qualname__
    return f"{module}.{cls.__qualname__}"


def clean_formats(formats: Optional[Iterable[Any]]) -> list[str]:
    """Format tags as strings, order kept, blanks and duplicates dropped."""
    if formats is None:
        return []
    seen = set()
    result = []
    for f in formats:
        tag = blank_to_none(f)
        if tag is None:
            continue
        tag = tag.strip()
        if tag not in seen:
            seen.add(tag)
            result.append(tag)
    return result


def format_url_html(url: str, fmt: str) -> str:
    return f" (<a href='{escape(url)}.{escape(fmt)}'>{escape(fmt)}</a>)"


def formats_url_html(url: str, formats: Iterable[str]) -> str:
    return "".join(format_url_html(url, f) for f in formats)


def formats_string_html(formats: Iterable[str]) -> str:
    items = [f"<span class='format'>{escape(f)}</span>" for f in formats]
    return ", ".join(items) if items else NONE_MARKUP
