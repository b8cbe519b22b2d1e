"""Wire models, typed fields and decode targets.

Request and response envelopes are read and written with ElementTree;
payloads decode into XMLModel subclasses or schema-less ResultMaps.
"""

from intacct.models.base import XMLModel
from intacct.models.bindings import Binding, ListOf, One, decode_element
from intacct.models.fields import IntacctBool, IntacctDate, IntacctDatetime, IntacctFloat, IntacctInt
from intacct.models.request import Control, ControlConfig, Preference, Request, RequestFunction
from intacct.models.response import Response, ResponseAuth, Result, ResultData
from intacct.models.result_map import ResultMap
from intacct.models.results import (
    AutoFill,
    DimensionRelationship,
    FieldDetail,
    InspectDetailResult,
    InspectName,
    InspectResult,
    ObjectField,
    ObjectRelationship,
    ObjectType,
    Related,
    Relationship,
    Restriction,
    SessionResult,
)

__all__ = [
    "XMLModel",
    "Binding",
    "ListOf",
    "One",
    "decode_element",
    "IntacctBool",
    "IntacctDate",
    "IntacctDatetime",
    "IntacctFloat",
    "IntacctInt",
    "Control",
    "ControlConfig",
    "Preference",
    "Request",
    "RequestFunction",
    "Response",
    "ResponseAuth",
    "Result",
    "ResultData",
    "ResultMap",
    "AutoFill",
    "DimensionRelationship",
    "FieldDetail",
    "InspectDetailResult",
    "InspectName",
    "InspectResult",
    "ObjectField",
    "ObjectRelationship",
    "ObjectType",
    "Related",
    "Relationship",
    "Restriction",
    "SessionResult",
]
