"""Function calls that can be batched into one request.

Each call kind declares its wire tag up front: readers take it from
ReadKind, writers from their command name and the inspector is always
``inspect``. Use the builder functions rather than constructing the
classes directly:

    await service.exec(
        read_by_query("VENDOR", "STATUS = 'T'").fields("VENDORID", "NAME"),
        create("PROJECT", project),
        get_api_session(""),
    )
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Mapping, Tuple
from xml.etree import ElementTree as ET

from pydantic import BaseModel

from intacct.core.errors import ConfigurationError
from intacct.core.xmlcodec import append_value, fill_element, local_name, sub_element
from intacct.models.base import XMLModel

if TYPE_CHECKING:
    from intacct.models.bindings import ListOf
    from intacct.services.service import Service

READ_ALL_FIELDS = "*"
READ_RETURN_FORMAT = "xml"


class Function(ABC):
    """A call that serializes to the payload of one ``function`` element.

    Subclasses set ``control_id`` to tag the call in the request; when
    blank, the request's control id is used.
    """

    wire_tag = ""

    @abstractmethod
    def to_element(self) -> ET.Element:
        """Return the payload element for this call."""

    def set_control_id(self, control_id: str):
        self.control_id = control_id
        return self


# =============================================================================
# Readers
# =============================================================================


class ReadKind(str, Enum):
    """Read call kinds; the value is the wire tag."""

    READ = "read"
    READ_BY_NAME = "readByName"
    READ_BY_QUERY = "readByQuery"
    READ_MORE = "readMore"
    READ_RELATED = "readRelated"


# Children each kind writes, in wire order. Tags in _ALWAYS_EMITTED are
# written even when blank; the rest only when set.
_READ_LAYOUT: Dict[ReadKind, Tuple[str, ...]] = {
    ReadKind.READ: ("object", "keys", "fields", "returnFormat", "docparid"),
    ReadKind.READ_BY_NAME: ("object", "keys", "fields", "returnFormat", "docparid"),
    ReadKind.READ_BY_QUERY: ("object", "query", "fields", "pagesize", "returnFormat", "docparid"),
    ReadKind.READ_MORE: ("resultId",),
    ReadKind.READ_RELATED: ("object", "keys", "fields", "returnFormat", "relationship_id"),
}
_ALWAYS_EMITTED = {"keys", "query"}

PAGINATED_READS = {ReadKind.READ_BY_QUERY, ReadKind.READ_MORE}


class Reader(Function):
    """A read, readByName, readByQuery, readMore or readRelated call."""

    def __init__(
        self,
        kind: ReadKind,
        object_name: str = "",
        keys: str = "",
        query: str = "",
        fields: str = "",
        page_size: int = 0,
        return_format: str = "",
        docparid: str = "",
        relationship: str = "",
        result_id: str = "",
        control_id: str = "",
    ):
        self.kind = kind
        self.object_name = object_name
        self.keys = keys
        self.query = query
        self.field_list = fields
        self.max_records = page_size
        self.return_format = return_format
        self.docparid = docparid
        self.relationship = relationship
        self.result_id = result_id
        self.control_id = control_id

    @property
    def wire_tag(self) -> str:
        return self.kind.value

    def fields(self, *names: str) -> "Reader":
        """Limit the returned fields; all fields are returned by default.

        Ignored on readMore, which continues with the original field list.
        """
        if self.kind is not ReadKind.READ_MORE:
            self.field_list = ",".join(names)
        return self

    def page_size(self, num_records: int) -> "Reader":
        """Set the number of records per page (the gateway defaults to 100).

        Only readByQuery pages; other kinds ignore it.
        """
        if self.kind is ReadKind.READ_BY_QUERY:
            self.max_records = num_records
        return self

    def _value(self, tag: str) -> Any:
        return {
            "object": self.object_name,
            "keys": self.keys,
            "query": self.query,
            "fields": self.field_list,
            "pagesize": self.max_records or None,
            "returnFormat": self.return_format,
            "docparid": self.docparid,
            "relationship_id": self.relationship,
            "resultId": self.result_id,
        }[tag]

    def to_element(self) -> ET.Element:
        element = ET.Element(self.wire_tag)
        for tag in _READ_LAYOUT[self.kind]:
            value = self._value(tag)
            if value or tag in _ALWAYS_EMITTED:
                sub_element(element, tag, value)
        return element

    async def get_all(self, service: "Service", into: "ListOf") -> None:
        """Read every page of a readByQuery or readMore call into ``into``."""
        from intacct.services.pagination import fetch_all

        await fetch_all(service, self, into)

    def __repr__(self) -> str:
        return f"Reader({self.kind.value}, object={self.object_name!r})"


def read(object_name: str, *keys: str) -> Reader:
    """Read records by key; without keys the gateway returns its first page."""
    return Reader(
        ReadKind.READ,
        object_name=object_name,
        keys=",".join(keys),
        fields=READ_ALL_FIELDS,
        return_format=READ_RETURN_FORMAT,
    )


def read_by_name(object_name: str, *names: str) -> Reader:
    return Reader(
        ReadKind.READ_BY_NAME,
        object_name=object_name,
        keys=",".join(names),
        fields=READ_ALL_FIELDS,
        return_format=READ_RETURN_FORMAT,
    )


def read_by_query(object_name: str, query: str, docparid: str = "") -> Reader:
    """Read records matching an SQL-like statement.

    Supports <, >, >=, <=, =, like, not like, in, not in, IS NULL and
    IS NOT NULL joined with AND/OR. Quotes inside operands are escaped with
    a backslash, e.g. 'Erik\\'s Deli'.
    """
    return Reader(
        ReadKind.READ_BY_QUERY,
        object_name=object_name,
        query=query,
        fields=READ_ALL_FIELDS,
        return_format=READ_RETURN_FORMAT,
        docparid=docparid,
    )


def read_more(result_id: str) -> Reader:
    """Continue a readByQuery from its result id."""
    return Reader(ReadKind.READ_MORE, result_id=result_id)


def read_related(object_name: str, relationship: str, *keys: str) -> Reader:
    """Read records related to keys by relationship (custom objects only)."""
    return Reader(
        ReadKind.READ_RELATED,
        object_name=object_name,
        keys=",".join(keys),
        fields=READ_ALL_FIELDS,
        return_format=READ_RETURN_FORMAT,
        relationship=relationship,
    )


# =============================================================================
# Writers
# =============================================================================


def _rename(element: ET.Element, tag: str) -> ET.Element:
    renamed = ET.Element(tag, element.attrib)
    renamed.text = element.text
    renamed.extend(list(element))
    return renamed


class Writer(Function):
    """A write-style call: ``<cmd>payload</cmd>``.

    The payload may be an XMLModel, any pydantic model, a mapping, an
    Element or a list of those. With ``object_name`` every item is written
    under that tag; otherwise models use their own ``xml_tag``, elements
    are written as they are and mapping keys become child tags.
    """

    def __init__(self, cmd: str, payload: Any = None, object_name: str = "", control_id: str = ""):
        self.cmd = cmd
        self.payload = payload
        self.object_name = object_name
        self.control_id = control_id

    @property
    def wire_tag(self) -> str:
        return self.cmd

    def to_element(self) -> ET.Element:
        element = ET.Element(self.cmd)
        if self.payload is None:
            return element
        items = self.payload if isinstance(self.payload, (list, tuple)) else [self.payload]
        for item in items:
            self._append(element, item)
        return element

    def _append(self, parent: ET.Element, item: Any) -> None:
        if isinstance(item, ET.Element):
            if self.object_name and local_name(item.tag) != self.object_name:
                item = _rename(item, self.object_name)
            parent.append(item)
        elif self.object_name:
            append_value(parent, self.object_name, item)
        elif isinstance(item, XMLModel):
            append_value(parent, item.element_tag(), item)
        elif isinstance(item, BaseModel):
            append_value(parent, type(item).__name__, item)
        elif isinstance(item, Mapping):
            fill_element(parent, item)
        else:
            raise ConfigurationError(
                f"{self.cmd} payload of type {type(item).__name__} needs an object name"
            )

    def __repr__(self) -> str:
        return f"Writer({self.cmd!r}, object={self.object_name!r})"


def create(object_name: str, payload: Any) -> Writer:
    return Writer("create", payload, object_name=object_name)


def update(object_name: str, payload: Any) -> Writer:
    """Update records; each payload item must carry the record's key."""
    return Writer("update", payload, object_name=object_name)


def delete(object_name: str, payload: Any) -> Writer:
    """Delete records; each payload item must carry the record's key."""
    return Writer("delete", payload, object_name=object_name)


def get_api_session(location: str = "") -> Writer:
    """Request a session id for location (blank for the top-level company).

    Decode the result into a SessionResult.
    """
    return Writer("getAPISession", {"location_id": location})


def install_app(definition: str) -> Writer:
    """Install a Platform Services application definition."""
    return Writer("installApp", {"appxml": definition})


def get_financial_setup() -> Writer:
    """Base currency, first fiscal month, multi-currency setting and the like."""
    return Writer("getFinancialSetup")


def get_dimensions() -> Writer:
    """List the standard dimensions and UDDs of the company."""
    return Writer("getDimensions")


def get_dimension_relationships() -> Writer:
    """List dimensions with their to-one and to-many relationships; decode into Relationship."""
    return Writer("getDimensionRelationships")


def get_dimension_autofill_details() -> Writer:
    return Writer("getDimensionAutofillDetails")


def get_dimension_restricted_data(dimension: str, value: str) -> Writer:
    """List related dimension ids restricted by one dimension value; decode into Restriction."""
    return Writer(
        "getDimensionRestrictedData",
        {"DimensionValue": {"dimension": dimension, "value": value}},
    )


# =============================================================================
# Inspector
# =============================================================================


class Inspector(Function):
    """Describe an object, or list every object when the name is ``*``."""

    wire_tag = "inspect"

    def __init__(self, object_name: str, detail: bool = False, control_id: str = ""):
        self.object_name = object_name
        self.detail = detail
        self.control_id = control_id

    def to_element(self) -> ET.Element:
        element = ET.Element(self.wire_tag)
        if self.detail:
            element.set("detail", "1")
        sub_element(element, "object", self.object_name)
        return element


def object_fields(object_name: str, show_detail: bool = False) -> Inspector:
    """Inspect one object: decode into InspectDetailResult with detail, else InspectResult."""
    return Inspector(object_name, detail=show_detail)


def object_list() -> Inspector:
    """Inspect all objects; decode into ListOf(InspectName)."""
    return Inspector("*")
