"""Unit tests for ResultMap, the schema-less XML decoder.

Tests cover:
- Attribute, text and child folding
- Promotion of repeated tags to lists
- Typed accessors and their fallbacks
- Path reads with read_array
"""

from datetime import date, datetime, timezone

import pytest

from intacct.core.errors import ResultMapError
from intacct.models.result_map import ResultMap


# =============================================================================
# Decoding
# =============================================================================


class TestDecoding:
    """Tests for ResultMap.from_xml."""

    def test_text_children_fold_to_strings(self):
        """Test that text-only children become plain strings."""
        rm = ResultMap.from_xml("<VENDOR><VENDORID>V1</VENDORID><NAME>Acme</NAME></VENDOR>")

        assert rm == {"VENDORID": "V1", "NAME": "Acme"}

    def test_attributes_use_prefix(self):
        """Test that attributes are stored under @name."""
        rm = ResultMap.from_xml('<Type Name="VENDOR" DocumentType="x"><a>1</a></Type>')

        assert rm["@Name"] == "VENDOR"
        assert rm["@DocumentType"] == "x"
        assert rm["a"] == "1"

    def test_attributed_child_stays_structured(self):
        """Test that a child with attributes keeps its text under the empty key."""
        rm = ResultMap.from_xml('<VENDOR><NAME type="short">Jim</NAME></VENDOR>')

        assert rm["NAME"] == {"@type": "short", "": "Jim"}
        assert isinstance(rm["NAME"], ResultMap)

    def test_whitespace_text_is_ignored(self):
        """Test that indentation does not create text entries."""
        rm = ResultMap.from_xml("<VENDOR>\n  <NAME>Jim</NAME>\n</VENDOR>")

        assert "" not in rm
        assert rm["NAME"] == "Jim"

    def test_empty_elements_are_skipped(self):
        """Test that empty children leave no entry."""
        rm = ResultMap.from_xml("<VENDOR><NAME></NAME><ID>1</ID><NOTE/></VENDOR>")

        assert rm == {"ID": "1"}

    def test_nested_structures(self):
        """Test that nested elements decode recursively."""
        rm = ResultMap.from_xml(
            "<PROJECT><CONTACT><NAME>Ann</NAME><MAIL>a@example.com</MAIL></CONTACT></PROJECT>"
        )

        assert rm["CONTACT"] == {"NAME": "Ann", "MAIL": "a@example.com"}

    def test_namespaces_are_stripped(self):
        """Test that namespaced tags use their local name."""
        rm = ResultMap.from_xml('<a xmlns:x="urn:x"><x:b>1</x:b></a>')

        assert rm == {"b": "1"}


# =============================================================================
# Promotion
# =============================================================================


class TestPromotion:
    """Tests for repeated tags."""

    def test_repeated_text_becomes_list(self):
        """Test that a second text occurrence promotes to a list of strings."""
        rm = ResultMap.from_xml("<r><v>1</v><v>2</v><v>3</v></r>")

        assert rm["v"] == ["1", "2", "3"]

    def test_repeated_nodes_become_list(self):
        """Test that repeated structured children become a list of nodes."""
        rm = ResultMap.from_xml("<r><i><a>1</a><b>2</b></i><i><a>3</a><b>4</b></i></r>")

        assert rm["i"] == [{"a": "1", "b": "2"}, {"a": "3", "b": "4"}]

    def test_structured_never_reverts_to_text(self):
        """Test that a tag holding a node stays a node list when text follows."""
        rm = ResultMap.from_xml('<r><i k="1">x</i><i>y</i></r>')

        assert rm["i"] == [{"@k": "1", "": "x"}, {"": "y"}]
        assert all(isinstance(node, ResultMap) for node in rm["i"])

    def test_structured_after_text_converts_strings(self):
        """Test that a structured occurrence after text keeps every value."""
        rm = ResultMap.from_xml('<r><i>a</i><i>b</i><i k="1">c</i></r>')

        assert rm["i"] == [{"": "a"}, {"": "b"}, {"@k": "1", "": "c"}]


# =============================================================================
# Accessors
# =============================================================================


class TestAccessors:
    """Tests for typed accessors."""

    @pytest.fixture
    def rm(self):
        return ResultMap.from_xml(
            "<r>"
            "<s>hello</s><n>42</n><f>3.5</f><neg>-7.9</neg><bad>abc</bad>"
            "<t>true</t><y>Y</y>"
            "<d1>2026-03-04</d1><d2>03-04-2026</d2>"
            "<d3><Year>2026</Year><Month>3</Month><Day>4</Day></d3>"
            "<d4><year>2026</year><month>0</month><day>4</day></d4>"
            "<ts>2026-03-04T10:20:30Z</ts><dt>03/04/2026 10:20:30</dt>"
            "<list>a</list><list>b</list>"
            "<node><x>1</x></node>"
            "</r>"
        )

    def test_get_str(self, rm):
        """Test that get_str returns strings and "" otherwise."""
        assert rm.get_str("s") == "hello"
        assert rm.get_str("node") == ""
        assert rm.get_str("missing") == ""

    def test_get_int(self, rm):
        """Test that get_int truncates and falls back to 0."""
        assert rm.get_int("n") == 42
        assert rm.get_int("f") == 3
        assert rm.get_int("neg") == -7
        assert rm.get_int("bad") == 0
        assert rm.get_int("missing") == 0

    def test_get_float(self, rm):
        """Test that get_float falls back to 0.0."""
        assert rm.get_float("f") == 3.5
        assert rm.get_float("bad") == 0.0

    def test_get_bool(self, rm):
        """Test that get_bool compares against "true" or the given values."""
        assert rm.get_bool("t") is True
        assert rm.get_bool("y") is False
        assert rm.get_bool("y", "Y", "yes") is True
        assert rm.get_bool("missing") is False

    def test_get_date_forms_agree(self, rm):
        """Test that every date form gives the same calendar date."""
        expected = date(2026, 3, 4)

        assert rm.get_date("d1") == expected
        assert rm.get_date("d2") == expected
        assert rm.get_date("d3") == expected

    def test_get_date_invalid_is_none(self, rm):
        """Test that invalid or absent dates are None, never an epoch."""
        assert rm.get_date("d4") is None
        assert rm.get_date("bad") is None
        assert rm.get_date("missing") is None

    def test_get_timestamp(self, rm):
        """Test RFC 3339 parsing."""
        assert rm.get_timestamp("ts") == datetime(2026, 3, 4, 10, 20, 30, tzinfo=timezone.utc)
        assert rm.get_timestamp("dt") is None

    def test_get_datetime(self, rm):
        """Test the US date-time layout, read as UTC."""
        assert rm.get_datetime("dt") == datetime(2026, 3, 4, 10, 20, 30, tzinfo=timezone.utc)
        assert rm.get_datetime("ts") is None

    def test_get_strings(self, rm):
        """Test that get_strings wraps single strings and rejects nodes."""
        assert rm.get_strings("list") == ["a", "b"]
        assert rm.get_strings("s") == ["hello"]
        assert rm.get_strings("node") == []
        assert rm.get_strings("missing") == []


# =============================================================================
# Path reads
# =============================================================================


class TestReadArray:
    """Tests for read_array."""

    @pytest.fixture
    def rm(self):
        return ResultMap.from_xml(
            "<Type>"
            "<Fields><Field><ID>A</ID></Field><Field><ID>B</ID></Field></Fields>"
            "<One><Field><ID>C</ID></Field></One>"
            "<Name>x</Name>"
            "</Type>"
        )

    def test_list_is_returned(self, rm):
        """Test that a repeated path gives every node."""
        fields = rm.read_array("Fields/Field")

        assert [f.get_str("ID") for f in fields] == ["A", "B"]

    def test_single_node_is_wrapped(self, rm):
        """Test that a single node gives a one element list."""
        assert rm.read_array("One/Field") == [{"ID": "C"}]

    def test_missing_is_empty(self, rm):
        """Test that a missing path gives an empty list."""
        assert rm.read_array("Nope/Field") == []
        assert rm.read_array("One/Nope") == []

    def test_string_raises(self, rm):
        """Test that addressing a string raises ResultMapError."""
        with pytest.raises(ResultMapError):
            rm.read_array("Name")

    def test_path_through_list_raises(self, rm):
        """Test that a path continuing through a list raises."""
        with pytest.raises(ResultMapError, match="is an array"):
            rm.read_array("Fields/Field/ID")
