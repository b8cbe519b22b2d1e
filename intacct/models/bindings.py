"""Decode targets for function results.

A binding tells Response.decode how to turn a result's payload elements
into Python values:

    vendors = ListOf(Vendor)        # every element, appended in order
    project = One(Project)          # the first element only
    rows = ListOf(ResultMap)        # schema-less
    await service.exec(read("VENDOR"), read_by_name("PROJECT", "P1"))
    response.decode(vendors, project)

The model may be an XMLModel (or any pydantic model), ResultMap or str.
"""

from abc import ABC, abstractmethod
from typing import Generic, Iterator, List, Optional, Sequence, Type, TypeVar
from xml.etree import ElementTree as ET

from pydantic import BaseModel

from intacct.core.errors import ConfigurationError
from intacct.models.result_map import ResultMap

T = TypeVar("T")


def decode_element(model: Type[T], element: ET.Element) -> T:
    """Decode one payload element into model."""
    if model is str:
        return "".join(element.itertext())
    if isinstance(model, type) and issubclass(model, ResultMap):
        return ResultMap.from_element(element) if model is ResultMap else model(ResultMap.from_element(element))
    if isinstance(model, type) and issubclass(model, BaseModel):
        return model.model_validate(ResultMap.from_element(element))
    raise ConfigurationError(f"Unsupported decode target: {model!r}")


class Binding(ABC, Generic[T]):
    """Base class for decode targets."""

    def __init__(self, model: Type[T]):
        self.model = model

    @abstractmethod
    def bind(self, elements: Sequence[ET.Element]) -> None:
        """Decode elements into this binding."""


class ListOf(Binding[T]):
    """Append every payload element to ``items``.

    Pass ``into`` to accumulate into a list the caller owns; the list is
    extended, never replaced. A page that fails to decode leaves ``items``
    unchanged.
    """

    def __init__(self, model: Type[T], into: Optional[List[T]] = None):
        super().__init__(model)
        self.items: List[T] = into if into is not None else []

    def bind(self, elements: Sequence[ET.Element]) -> None:
        decoded = [decode_element(self.model, element) for element in elements]
        self.items.extend(decoded)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __getitem__(self, idx: int) -> T:
        return self.items[idx]


class One(Binding[T]):
    """Decode the first payload element into ``value``; the rest are ignored."""

    def __init__(self, model: Type[T]):
        super().__init__(model)
        self.value: Optional[T] = None

    def bind(self, elements: Sequence[ET.Element]) -> None:
        if elements:
            self.value = decode_element(self.model, elements[0])
