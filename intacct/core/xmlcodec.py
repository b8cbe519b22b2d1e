"""Helpers for building and reading gateway XML with ElementTree."""

from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping, Optional, Union
from xml.etree import ElementTree as ET

from pydantic import BaseModel

from intacct.core.errors import ResponseParseError

XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'
ATTR_PREFIX = "@"
TEXT_KEY = ""


def local_name(tag: str) -> str:
    """Strip a ``{namespace}`` prefix from an ElementTree tag."""
    if tag.startswith("{"):
        return tag.rsplit("}", 1)[1]
    return tag


def format_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def sub_element(parent: ET.Element, tag: str, text: Optional[Any] = None) -> ET.Element:
    """Append ``<tag>text</tag>`` to parent and return it."""
    child = ET.SubElement(parent, tag)
    if text is not None:
        child.text = format_scalar(text)
    return child


def dump_model(model: BaseModel) -> dict:
    """Dump the fields a caller set on a model, keyed by their XML aliases."""
    return model.model_dump(mode="json", by_alias=True, exclude_none=True, exclude_unset=True)


def append_value(parent: ET.Element, tag: str, value: Any) -> None:
    """Serialize value under parent as one or more ``tag`` elements.

    Models and mappings become nested elements (``@name`` keys become
    attributes and the empty key becomes text), lists repeat the tag and
    ``None`` is skipped.
    """
    if value is None:
        return
    if isinstance(value, ET.Element):
        if local_name(value.tag) == tag:
            parent.append(value)
        else:
            ET.SubElement(parent, tag).append(value)
        return
    if isinstance(value, BaseModel):
        value = dump_model(value)
    if isinstance(value, Mapping):
        fill_element(ET.SubElement(parent, tag), value)
        return
    if isinstance(value, (list, tuple)):
        for item in value:
            append_value(parent, tag, item)
        return
    sub_element(parent, tag, value)


def fill_element(element: ET.Element, values: Mapping[str, Any]) -> ET.Element:
    for key, value in values.items():
        if value is None:
            continue
        if key.startswith(ATTR_PREFIX):
            element.set(key[len(ATTR_PREFIX):], format_scalar(value))
        elif key == TEXT_KEY:
            element.text = format_scalar(value)
        elif "/" in key:
            head, rest = key.split("/", 1)
            child = element.find(head)
            if child is None:
                child = ET.SubElement(element, head)
            fill_element(child, {rest: value})
        else:
            append_value(element, key, value)
    return element


def to_xml(element: ET.Element) -> str:
    """Serialize an element; empty elements are written as ``<a></a>``."""
    return ET.tostring(element, encoding="unicode", short_empty_elements=False)


def parse_document(data: Union[bytes, str]) -> ET.Element:
    try:
        return ET.fromstring(data)
    except ET.ParseError as e:
        raise ResponseParseError(f"Malformed response XML: {e}") from e
