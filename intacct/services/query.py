"""The ``query`` and ``lookup`` functions.

query supersedes readByQuery with a structured filter tree:

    f = Filter().equal_to("STATUS", "active")
    any_of = f.or_()
    any_of.like("NAME", "A%").is_null("PARENTID")
    q = Query(object="PROJECT", select=Select(fields=["PROJECTID", "NAME"]), filter=f)
    projects = ListOf(ResultMap)
    await q.get_all(service, projects)
"""

from datetime import date
from typing import TYPE_CHECKING, ClassVar, List, Optional
from xml.etree import ElementTree as ET

from pydantic import BaseModel, ConfigDict, Field

from intacct.core.xmlcodec import sub_element
from intacct.services.functions import Function

if TYPE_CHECKING:
    from intacct.models.bindings import ListOf
    from intacct.services.service import Service

FILTER_DATE_LAYOUT = "%m/%d/%Y"


class Filter:
    """A tree of query criteria.

    Condition methods add a criterion and return the receiver for chaining.
    ``and_`` and ``or_`` add a group and return the new group. A filter
    without criteria is not written.
    """

    def __init__(self, tag: str = "filter", field: str = "", values: Optional[List[str]] = None):
        self.tag = tag
        self.field = field
        self.values = values or []
        self.children: List["Filter"] = []

    def and_(self) -> "Filter":
        return self._group("and")

    def or_(self) -> "Filter":
        return self._group("or")

    def _group(self, tag: str) -> "Filter":
        group = Filter(tag)
        self.children.append(group)
        return group

    def _add(self, tag: str, field: str, *values: str) -> "Filter":
        self.children.append(Filter(tag, field, list(values)))
        return self

    def equal_to(self, field: str, value: str) -> "Filter":
        return self._add("equalto", field, value)

    def not_equal_to(self, field: str, value: str) -> "Filter":
        return self._add("notequalto", field, value)

    def less_than(self, field: str, value: str) -> "Filter":
        return self._add("lessthan", field, value)

    def less_than_or_equal_to(self, field: str, value: str) -> "Filter":
        return self._add("lessthanorequalto", field, value)

    def greater_than(self, field: str, value: str) -> "Filter":
        return self._add("greaterthan", field, value)

    def greater_than_or_equal_to(self, field: str, value: str) -> "Filter":
        return self._add("greaterthanorequalto", field, value)

    def between(self, field: str, start: date, end: date) -> "Filter":
        """Date range, inclusive; dates are written as MM/DD/YYYY."""
        return self._add(
            "between", field, start.strftime(FILTER_DATE_LAYOUT), end.strftime(FILTER_DATE_LAYOUT)
        )

    def in_(self, field: str, *values: str) -> "Filter":
        return self._add("in", field, *values)

    def not_in(self, field: str, *values: str) -> "Filter":
        return self._add("notin", field, *values)

    def like(self, field: str, value: str) -> "Filter":
        return self._add("like", field, value)

    def not_like(self, field: str, value: str) -> "Filter":
        return self._add("notlike", field, value)

    def is_null(self, field: str) -> "Filter":
        return self._add("isnull", field)

    def is_not_null(self, field: str) -> "Filter":
        return self._add("isnotnull", field)

    def is_empty(self) -> bool:
        """True when the tree holds no condition at any depth."""
        if self.field:
            return False
        return all(child.is_empty() for child in self.children)

    def to_element(self) -> Optional[ET.Element]:
        if self.is_empty():
            return None
        element = ET.Element(self.tag)
        if self.field:
            sub_element(element, "field", self.field)
            for value in self.values:
                sub_element(element, "value", value)
        for child in self.children:
            child_element = child.to_element()
            if child_element is not None:
                element.append(child_element)
        return element

    def __repr__(self) -> str:
        if self.field:
            return f"Filter({self.tag}, {self.field}={self.values!r})"
        return f"Filter({self.tag}, {self.children!r})"


class Select(BaseModel):
    """Fields and aggregates to return."""

    fields: List[str] = Field(default_factory=list)
    count: str = ""
    avg: str = ""
    min: str = ""
    max: str = ""
    sum: str = ""

    def to_element(self) -> ET.Element:
        element = ET.Element("select")
        for name in self.fields:
            sub_element(element, "field", name)
        for tag in ("count", "avg", "min", "max", "sum"):
            value = getattr(self, tag)
            if value:
                sub_element(element, tag, value)
        return element


class OrderBy(BaseModel):
    field: str
    descending: bool = False


class QuerySort(BaseModel):
    orders: List[OrderBy] = Field(default_factory=list)

    def to_element(self) -> ET.Element:
        element = ET.Element("orderby")
        for order in self.orders:
            order_element = ET.SubElement(element, "order")
            sub_element(order_element, "field", order.field)
            if order.descending:
                sub_element(order_element, "descending", "")
        return element


class QueryOptions(BaseModel):
    case_insensitive: bool = False
    show_private: bool = False

    def to_element(self) -> Optional[ET.Element]:
        if not (self.case_insensitive or self.show_private):
            return None
        element = ET.Element("options")
        if self.case_insensitive:
            sub_element(element, "caseinsensitive", True)
        if self.show_private:
            sub_element(element, "showprivate", True)
        return element


class Query(BaseModel, Function):
    """A ``query`` call.

    Paging re-issues a copy with an advanced ``offset``; the instance the
    caller built is never changed.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    wire_tag: ClassVar[str] = "query"

    object: str
    select: Select = Field(default_factory=Select)
    filter: Optional[Filter] = None
    order_by: Optional[QuerySort] = None
    options: Optional[QueryOptions] = None
    page_size: int = 0
    offset: int = 0
    transaction_type: str = ""  # docparid
    control_id: str = ""

    def to_element(self) -> ET.Element:
        element = ET.Element(self.wire_tag)
        sub_element(element, "object", self.object)
        element.append(self.select.to_element())
        if self.filter is not None:
            filter_element = self.filter.to_element()
            if filter_element is not None:
                element.append(filter_element)
        if self.order_by is not None and self.order_by.orders:
            element.append(self.order_by.to_element())
        if self.options is not None:
            options_element = self.options.to_element()
            if options_element is not None:
                element.append(options_element)
        if self.page_size:
            sub_element(element, "pagesize", self.page_size)
        if self.offset:
            sub_element(element, "offset", self.offset)
        if self.transaction_type:
            sub_element(element, "docparid", self.transaction_type)
        return element

    async def get_all(self, service: "Service", into: "ListOf") -> None:
        """Run the query page by page, appending every row to ``into``."""
        from intacct.services.pagination import fetch_all

        await fetch_all(service, self, into)


class Lookup(BaseModel, Function):
    """A ``lookup`` call; decode the result into ObjectType."""

    wire_tag: ClassVar[str] = "lookup"

    object_name: str
    control_id: str = ""

    def to_element(self) -> ET.Element:
        element = ET.Element(self.wire_tag)
        sub_element(element, "object", self.object_name)
        return element
