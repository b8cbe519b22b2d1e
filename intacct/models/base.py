"""Base model for typed Intacct XML payloads."""

import inspect
import types
from typing import Annotated, Any, ClassVar, List, Mapping, Optional, Sequence, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict, model_validator

from intacct.core.xmlcodec import TEXT_KEY


def _strip_annotation(annotation: Any) -> Any:
    origin = get_origin(annotation)
    if origin is Annotated:
        return _strip_annotation(get_args(annotation)[0])
    if origin is Union or origin is types.UnionType:
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return _strip_annotation(args[0])
    return annotation


def _list_item(annotation: Any) -> Optional[Any]:
    """Return the item annotation when annotation is a list, else None."""
    annotation = _strip_annotation(annotation)
    if get_origin(annotation) in (list, List):
        args = get_args(annotation)
        return _strip_annotation(args[0]) if args else Any
    return None


def _wants_mapping(annotation: Any) -> bool:
    annotation = _strip_annotation(annotation)
    if inspect.isclass(annotation):
        return issubclass(annotation, (BaseModel, dict))
    return get_origin(annotation) in (dict, Mapping)


def _unwrap_text(value: Any, annotation: Any) -> Any:
    if isinstance(value, Mapping) and TEXT_KEY in value and not _wants_mapping(annotation):
        return value[TEXT_KEY]
    return value


def _walk(data: Any, parts: Sequence[str]) -> Any:
    for part in parts:
        if not isinstance(data, Mapping):
            return None
        data = data.get(part)
        if data is None:
            return None
    return data


class XMLModel(BaseModel):
    """A pydantic model that validates from a decoded ResultMap.

    Field aliases name XML tags; ``"@name"`` addresses an attribute, ``""``
    the element text and ``"A/B"`` the B child of an A child. A list field
    accepts a single occurrence, and a scalar field reading an attributed
    element takes its text. ``xml_tag`` names the element when a model is
    written as a function payload and ``text_field`` names the field that
    receives the element's own text.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    xml_tag: ClassVar[Optional[str]] = None
    text_field: ClassVar[Optional[str]] = None

    @classmethod
    def element_tag(cls) -> str:
        return cls.xml_tag or cls.__name__

    @model_validator(mode="before")
    @classmethod
    def _from_result_map(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        values = dict(data)
        if cls.text_field and TEXT_KEY in values and cls.text_field not in values:
            values[cls.text_field] = values.pop(TEXT_KEY)
        for name, field in cls.model_fields.items():
            key = field.alias or name
            if key not in values and "/" in key:
                found = _walk(data, key.split("/"))
                if found is not None:
                    values[key] = found
            if key not in values or values[key] is None:
                continue
            value = values[key]
            item = _list_item(field.annotation)
            if item is not None:
                if not isinstance(value, list):
                    value = [value]
                values[key] = [_unwrap_text(v, item) for v in value]
            else:
                values[key] = _unwrap_text(value, field.annotation)
        return values
