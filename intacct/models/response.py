"""Response envelope parsing and result decoding.

A response either failed before anything ran (a ``control`` or
``operation`` error, raised as a fatal error) or carries one ``result`` per
submitted function, in submission order. Per-function errors and decode
failures are collected by position and raised together as ResultsError,
so one bad result never stops its siblings from decoding.
"""

from datetime import datetime
from typing import List, Optional, Sequence, Union
from xml.etree import ElementTree as ET

from pydantic import BaseModel, ConfigDict, Field

from intacct.core.errors import (
    ControlError,
    ErrorDetail,
    IntacctError,
    OperationError,
    ResultsError,
)
from intacct.core.xmlcodec import parse_document
from intacct.models.bindings import Binding
from intacct.models.fields import parse_rfc3339
from intacct.models.request import Control

DECODE_ERROR = "Decode Error"


def _text(element: Optional[ET.Element], tag: str) -> str:
    if element is None:
        return ""
    return (element.findtext(tag) or "").strip()


def _int_attr(element: ET.Element, name: str) -> int:
    try:
        return int(element.get(name, "0"))
    except ValueError:
        return 0


def parse_errors(element: Optional[ET.Element]) -> List[ErrorDetail]:
    """Read the ``error`` entries of an ``errormessage`` block."""
    if element is None:
        return []
    return [
        ErrorDetail(
            errorno=_text(error, "errorno"),
            description=_text(error, "description"),
            description2=_text(error, "description2"),
            correction=_text(error, "correction"),
        )
        for error in element.findall("error")
    ]


class ResponseAuth(BaseModel):
    """The ``authentication`` block of an operation."""

    status: str = ""
    user_id: str = ""
    company_id: str = ""
    location_id: str = ""
    session_timestamp: Optional[datetime] = None
    session_timeout: Optional[datetime] = None

    @classmethod
    def from_element(cls, element: Optional[ET.Element]) -> Optional["ResponseAuth"]:
        if element is None:
            return None
        return cls(
            status=_text(element, "status"),
            user_id=_text(element, "userid"),
            company_id=_text(element, "companyid"),
            location_id=_text(element, "locationid"),
            session_timestamp=parse_rfc3339(_text(element, "sessiontimestamp")),
            session_timeout=parse_rfc3339(_text(element, "sessiontimeout")),
        )


class ResultData(BaseModel):
    """The ``data`` element of a result: paging counters plus the payload."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    list_type: str = ""
    count: int = 0
    total_count: int = 0
    num_remaining: int = 0
    result_id: str = ""
    elements: List[ET.Element] = Field(default_factory=list)

    @classmethod
    def from_element(cls, element: ET.Element) -> "ResultData":
        return cls(
            list_type=element.get("listtype", ""),
            count=_int_attr(element, "count"),
            total_count=_int_attr(element, "totalcount"),
            num_remaining=_int_attr(element, "numremaining"),
            result_id=element.get("resultId", ""),
            elements=list(element),
        )


class Result(BaseModel):
    """The outcome of one submitted function."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    status: str = ""
    function: str = ""
    control_id: str = ""
    errors: List[ErrorDetail] = Field(default_factory=list)
    data: Optional[ResultData] = None

    @classmethod
    def from_element(cls, element: ET.Element) -> "Result":
        data = element.find("data")
        return cls(
            status=_text(element, "status"),
            function=_text(element, "function"),
            control_id=_text(element, "controlid"),
            errors=parse_errors(element.find("errormessage")),
            data=ResultData.from_element(data) if data is not None else None,
        )

    def decode(self, target: Optional[Binding]) -> Optional[List[ErrorDetail]]:
        """Decode the payload into target.

        Returns this result's errors, a single decode error when the
        payload does not fit target, or None on success. A None target only
        checks for errors.
        """
        if self.errors:
            return self.errors
        if target is None or self.data is None:
            return None
        try:
            target.bind(self.data.elements)
        except (ValueError, TypeError, IntacctError) as e:
            return [ErrorDetail(description=DECODE_ERROR, error=e)]
        return None


class Response(BaseModel):
    """A parsed response document."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    control: Control = Field(default_factory=Control)
    errors: List[ErrorDetail] = Field(default_factory=list)
    auth: Optional[ResponseAuth] = None
    operation_errors: List[ErrorDetail] = Field(default_factory=list)
    results: List[Result] = Field(default_factory=list)

    @classmethod
    def from_element(cls, root: ET.Element) -> "Response":
        operation = root.find("operation")
        if operation is None:
            return cls(
                control=Control.from_element(root.find("control")),
                errors=parse_errors(root.find("errormessage")),
            )
        return cls(
            control=Control.from_element(root.find("control")),
            errors=parse_errors(root.find("errormessage")),
            auth=ResponseAuth.from_element(operation.find("authentication")),
            operation_errors=parse_errors(operation.find("errormessage")),
            results=[Result.from_element(r) for r in operation.findall("result")],
        )

    @classmethod
    def from_xml(cls, data: Union[bytes, str]) -> "Response":
        return cls.from_element(parse_document(data))

    def exec_error(self) -> Optional[IntacctError]:
        """Return the fatal error of a request that did not execute, if any."""
        if self.errors:
            return ControlError(self.errors, response=self)
        if self.operation_errors:
            return OperationError(self.operation_errors, response=self)
        return None

    def error(self) -> Optional[IntacctError]:
        """Return the fatal or per-result error without decoding any payload."""
        return self._check([])

    def decode(self, *targets: Optional[Binding]) -> None:
        """Decode result i into targets[i].

        Raises the fatal error first if the request did not execute. Every
        result is attempted; failing positions are raised together as a
        ResultsError once all targets have been visited.
        """
        error = self._check(targets)
        if error is not None:
            raise error

    def _check(self, targets: Sequence[Optional[Binding]]) -> Optional[IntacctError]:
        fatal = self.exec_error()
        if fatal is not None:
            return fatal
        failures: Optional[List[Optional[List[ErrorDetail]]]] = None
        for idx, result in enumerate(self.results):
            target = targets[idx] if idx < len(targets) else None
            details = result.decode(target)
            if details:
                if failures is None:
                    failures = [None] * len(self.results)
                failures[idx] = details
        if failures is None:
            return None
        return ResultsError(failures)
