"""Request envelope models.

    <request>
      <control>senderid, password, controlid, uniqueid, dtdversion, ...</control>
      <operation transaction="true">
        <authentication><login>...</login> | <sessionid>...</sessionid></authentication>
        <preference>...</preference>
        <content>
          <function controlid="...">payload</function>
        </content>
      </operation>
    </request>
"""

from typing import List, Optional
from xml.etree import ElementTree as ET

from pydantic import BaseModel, ConfigDict, Field

from intacct.core.config import DEFAULT_DTD_VERSION
from intacct.core.xmlcodec import XML_HEADER, sub_element, to_xml


class Preference(BaseModel):
    """Company or module preference sent with an operation."""

    application: str
    name: str
    value: str

    def to_element(self, tag: str) -> ET.Element:
        element = ET.Element(tag)
        sub_element(element, "application", self.application)
        sub_element(element, "preference", self.name)
        sub_element(element, "prefvalue", self.value)
        return element


class ControlConfig(BaseModel):
    """Transaction and header options for Service.exec_with_control."""

    is_transaction: bool = False
    is_unique: bool = False
    include_whitespace: bool = False
    debug: bool = False
    control_id: str = ""
    policy_id: str = ""
    dtd_version: str = ""  # DEFAULT_DTD_VERSION when blank
    company_prefs: List[Preference] = Field(default_factory=list)
    module_prefs: List[Preference] = Field(default_factory=list)


class Control(BaseModel):
    """The ``control`` header of a request, echoed back in the response."""

    sender_id: str = ""
    password: str = ""
    control_id: str = ""
    unique_id: bool = False
    dtd_version: str = DEFAULT_DTD_VERSION
    policy_id: str = ""
    debug: bool = False
    include_whitespace: bool = False
    status: str = ""

    def to_element(self) -> ET.Element:
        element = ET.Element("control")
        if self.sender_id:
            sub_element(element, "senderid", self.sender_id)
        sub_element(element, "password", self.password)
        if self.control_id:
            sub_element(element, "controlid", self.control_id)
        sub_element(element, "uniqueid", self.unique_id)
        sub_element(element, "dtdversion", self.dtd_version)
        if self.policy_id:
            sub_element(element, "policyid", self.policy_id)
        if self.debug:
            sub_element(element, "debug", self.debug)
        sub_element(element, "includewhitespace", self.include_whitespace)
        return element

    @classmethod
    def from_element(cls, element: Optional[ET.Element]) -> "Control":
        if element is None:
            return cls()

        def text(tag: str) -> str:
            return (element.findtext(tag) or "").strip()

        return cls(
            sender_id=text("senderid"),
            control_id=text("controlid"),
            unique_id=text("uniqueid") == "true",
            dtd_version=text("dtdversion") or DEFAULT_DTD_VERSION,
            policy_id=text("policyid"),
            status=text("status"),
        )


class RequestFunction(BaseModel):
    """A serialized function call and the control id it is tagged with."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    control_id: str
    payload: ET.Element


class Request(BaseModel):
    """A batch of function calls sent in one round trip."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    control: Control
    auth: ET.Element
    functions: List[RequestFunction]
    is_transaction: bool = False
    company_prefs: List[Preference] = Field(default_factory=list)
    module_prefs: List[Preference] = Field(default_factory=list)

    def to_element(self) -> ET.Element:
        root = ET.Element("request")
        root.append(self.control.to_element())
        operation = ET.SubElement(root, "operation")
        if self.is_transaction:
            operation.set("transaction", "true")
        ET.SubElement(operation, "authentication").append(self.auth)
        if self.company_prefs or self.module_prefs:
            preference = ET.SubElement(operation, "preference")
            if self.company_prefs:
                group = ET.SubElement(preference, "companyprefs")
                group.extend(p.to_element("companypref") for p in self.company_prefs)
            if self.module_prefs:
                group = ET.SubElement(preference, "moduleprefs")
                group.extend(p.to_element("modulepref") for p in self.module_prefs)
        content = ET.SubElement(operation, "content")
        for function in self.functions:
            wrapper = ET.SubElement(content, "function", {"controlid": function.control_id})
            wrapper.append(function.payload)
        return root

    def to_bytes(self) -> bytes:
        return (XML_HEADER + to_xml(self.to_element())).encode("utf-8")
