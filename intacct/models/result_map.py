"""Schema-less decoding of response XML.

ResultMap turns any element into an ordered dict. Attributes are stored as
``"@name"`` and inline text under ``""``. A child holding only text folds
into a plain string; repeated tags become lists.

    <VENDOR><NAME type="short">Jim</NAME></VENDOR>
        -> {"NAME": {"@type": "short", "": "Jim"}}
    <VENDOR><NAME>Jim</NAME><NAME>Bob</NAME></VENDOR>
        -> {"NAME": ["Jim", "Bob"]}
"""

from datetime import date, datetime, timezone
from typing import Any, List, Optional, Union
from xml.etree import ElementTree as ET

from intacct.core.errors import ResultMapError
from intacct.core.xmlcodec import ATTR_PREFIX, TEXT_KEY, local_name, parse_document
from intacct.models.fields import DATE_LAYOUT, US_DATETIME_LAYOUT, parse_rfc3339

_WHITESPACE = " \n\t\r"
_DATE_PART_KEYS = {
    "Year": "year", "year": "year",
    "Month": "month", "month": "month",
    "Day": "day", "day": "day",
}


def _atoi(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


class ResultMap(dict):
    """An XML element decoded into a dict of strings, ResultMaps and lists."""

    @classmethod
    def from_element(cls, element: ET.Element) -> "ResultMap":
        node = cls()
        for name, value in element.attrib.items():
            node[ATTR_PREFIX + local_name(name)] = value
        node._set_text(element.text)
        for child in element:
            node._add_child(local_name(child.tag), cls.from_element(child))
            node._set_text(child.tail)
        return node

    @classmethod
    def from_xml(cls, data: Union[bytes, str]) -> "ResultMap":
        return cls.from_element(parse_document(data))

    def _set_text(self, text: Optional[str]) -> None:
        if text and text.strip(_WHITESPACE):
            self[TEXT_KEY] = text

    def _text_only(self) -> Optional[str]:
        if len(self) == 1:
            value = self.get(TEXT_KEY)
            if isinstance(value, str):
                return value
        return None

    def _add_child(self, tag: str, node: "ResultMap") -> None:
        if not node:
            return
        text = node._text_only()
        current = self.get(tag)
        if current is None:
            self[tag] = text if text is not None else node
        elif isinstance(current, ResultMap):
            self[tag] = [current, node]
        elif isinstance(current, str):
            if text is not None:
                self[tag] = [current, text]
            else:
                self[tag] = [ResultMap({TEXT_KEY: current}), node]
        elif current and isinstance(current[0], ResultMap):
            current.append(node)
        elif text is not None:
            current.append(text)
        else:
            # a structured occurrence turns the whole tag into nodes
            self[tag] = [ResultMap({TEXT_KEY: s}) for s in current] + [node]

    def get_str(self, name: str) -> str:
        """Return the string at name, or "" for anything else."""
        value = self.get(name)
        return value if isinstance(value, str) else ""

    def get_int(self, name: str) -> int:
        """Parse name as a number truncated to int; 0 when it does not parse."""
        value = self.get(name)
        if isinstance(value, str):
            try:
                return int(float(value))
            except (ValueError, OverflowError):
                return 0
        return 0

    def get_float(self, name: str) -> float:
        value = self.get(name)
        if isinstance(value, str):
            try:
                return float(value)
            except ValueError:
                return 0.0
        return 0.0

    def get_bool(self, name: str, *true_values: str) -> bool:
        """Compare name against "true", or against true_values when given."""
        value = self.get_str(name)
        if not true_values:
            return value == "true"
        return value in true_values

    def get_date(self, name: str) -> Optional[date]:
        """Read a date from Year/Month/Day children, YYYY-MM-DD or MM-DD-YYYY.

        Returns None when no form matches or a part is not positive.
        """
        value = self.get(name)
        if isinstance(value, ResultMap):
            parts = {"year": -1, "month": -1, "day": -1}
            for key, part in value.items():
                if key in _DATE_PART_KEYS:
                    parts[_DATE_PART_KEYS[key]] = _atoi(part)
            if min(parts.values()) <= 0:
                return None
            try:
                return date(parts["year"], parts["month"], parts["day"])
            except ValueError:
                return None
        if isinstance(value, str):
            for layout in (DATE_LAYOUT, "%m-%d-%Y"):
                try:
                    return datetime.strptime(value, layout).date()
                except ValueError:
                    continue
        return None

    def get_timestamp(self, name: str) -> Optional[datetime]:
        """Parse an RFC 3339 timestamp, None on failure."""
        return parse_rfc3339(self.get_str(name))

    def get_datetime(self, name: str) -> Optional[datetime]:
        """Parse a legacy ``MM/DD/YYYY HH:MM:SS`` value as UTC, None on failure."""
        try:
            parsed = datetime.strptime(self.get_str(name), US_DATETIME_LAYOUT)
        except ValueError:
            return None
        return parsed.replace(tzinfo=timezone.utc)

    def get_strings(self, name: str) -> List[str]:
        """Return a list of strings.

        A single string is wrapped in a one element list. Nodes, mixed lists
        and missing values give an empty list.
        """
        value = self.get(name)
        if isinstance(value, str):
            return [value]
        if isinstance(value, list) and all(isinstance(v, str) for v in value):
            return list(value)
        return []

    def read_array(self, path: str) -> List["ResultMap"]:
        """Resolve a ``/`` separated path to a list of ResultMaps.

        Missing values give an empty list and a single node a one element
        list. Raises ResultMapError when the path hits strings, or passes
        through a list before its last segment.
        """
        head, _, rest = path.partition("/")
        value = self.get(head)
        if value is None:
            return []
        if isinstance(value, ResultMap):
            return value.read_array(rest) if rest else [value]
        if isinstance(value, list):
            if rest:
                raise ResultMapError(f"{head} is an array not a ResultMap")
            if all(isinstance(v, ResultMap) for v in value):
                return list(value)
        raise ResultMapError(f"{head} is not a ResultMap: {value!r}")
