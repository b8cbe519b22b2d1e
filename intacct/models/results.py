"""Typed results of the built-in functions."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from intacct.models.base import XMLModel
from intacct.models.fields import IntacctBool


class SessionResult(XMLModel):
    """Result of getAPISession.

    ``expires`` is not part of the payload; it is filled from the
    authentication block's session timeout.
    """

    xml_tag = "api"

    session_id: str = Field(default="", alias="sessionid")
    endpoint: str = ""
    location_id: str = Field(default="", alias="locationid")
    expires: Optional[datetime] = Field(default=None, exclude=True)


# inspect


class InspectName(XMLModel):
    """One entry of an object list inspection."""

    xml_tag = "type"
    text_field = "name"

    type_name: str = Field(default="", alias="@typename")
    name: str = ""


class InspectResult(XMLModel):
    xml_tag = "Type"

    name: str = Field(default="", alias="@Name")
    fields: List[str] = Field(default_factory=list, alias="Fields/Field")


class FieldDetail(XMLModel):
    xml_tag = "Field"

    name: str = Field(default="", alias="Name")
    group_name: str = Field(default="", alias="GroupName")
    data_name: str = Field(default="", alias="dataName")
    external_data_name: str = Field(default="", alias="externalDataName")
    is_required: IntacctBool = Field(default=False, alias="isRequired")
    is_read_only: IntacctBool = Field(default=False, alias="isReadOnly")
    max_length: str = Field(default="", alias="maxLength")
    display_label: str = Field(default="", alias="DisplayLabel")
    description: str = Field(default="", alias="Description")
    id: str = ""
    relationship: str = ""
    related_object: str = Field(default="", alias="relatedObject")


class InspectDetailResult(XMLModel):
    """Full object definition from ``<inspect detail="1">``."""

    xml_tag = "Type"

    name: str = Field(default="", alias="@Name")
    singular_name: str = Field(default="", alias="Attributes/SingularName")
    plural_name: str = Field(default="", alias="Attributes/PluralName")
    description: str = Field(default="", alias="Attributes/Description")
    fields: List[FieldDetail] = Field(default_factory=list, alias="Fields/Field")


# lookup


class ObjectRelationship(XMLModel):
    path: str = Field(default="", alias="OBJECTPATH")
    name: str = Field(default="", alias="OBJECTNAME")
    label: str = Field(default="", alias="LABEL")
    type: str = Field(default="", alias="RELATIONSHIPTYPE")
    related_by: str = Field(default="", alias="RELATEDBY")


class ObjectField(XMLModel):
    id: str = Field(default="", alias="ID")
    label: str = Field(default="", alias="LABEL")
    description: str = Field(default="", alias="DESCRIPTION")
    required: IntacctBool = Field(default=False, alias="REQUIRED")
    read_only: IntacctBool = Field(default=False, alias="READONLY")
    data_type: str = Field(default="", alias="DATATYPE")
    is_custom: IntacctBool = Field(default=False, alias="ISCUSTOM")
    valid_values: List[str] = Field(default_factory=list, alias="VALIDVALUES/VALIDVALUE")


class ObjectType(XMLModel):
    """Object definition returned by a lookup."""

    xml_tag = "Type"

    name: str = Field(default="", alias="@Name")
    document_type: str = Field(default="", alias="@DocumentType")
    fields: List[ObjectField] = Field(default_factory=list, alias="Fields/Field")
    relationships: List[ObjectRelationship] = Field(
        default_factory=list, alias="Relationships/Relationship"
    )


# dimensions


class DimensionRelationship(XMLModel):
    dimension: str = ""
    object_id: str = ""
    relationship_id: str = ""


class Related(DimensionRelationship):
    source_side: str = ""
    related_side: str = ""


class AutoFill(DimensionRelationship):
    type: str = ""


class Relationship(XMLModel):
    """Relationships of one dimension, from getDimensionRelationships."""

    dimension: str = ""
    object_id: str = ""
    autofill_related: IntacctBool = Field(default=False, alias="autofillrelated")
    enable_override: IntacctBool = Field(default=False, alias="enableoverride")
    related: List[Related] = Field(default_factory=list)
    autofill: List[AutoFill] = Field(default_factory=list, alias="autofil")


class Restriction(XMLModel):
    """Restricted values of a dimension, from getDimensionRestrictedData."""

    dimension: str = ""
    object_id: str = ""
    restrictions: List[DimensionRelationship] = Field(default_factory=list, alias="restrictedby")
