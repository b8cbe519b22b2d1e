"""Unit tests for the lenient scalar field types."""

from datetime import date, datetime, timezone

import pytest
from pydantic import Field, ValidationError

from intacct.core.xmlcodec import dump_model
from intacct.models.base import XMLModel
from intacct.models.fields import (
    IntacctBool,
    IntacctDate,
    IntacctDatetime,
    IntacctFloat,
    IntacctInt,
    parse_date,
    parse_datetime,
    parse_rfc3339,
)
from intacct.models.result_map import ResultMap


class Entry(XMLModel):
    count: IntacctInt = Field(default=0, alias="COUNT")
    amount: IntacctFloat = Field(default=0.0, alias="AMOUNT")
    active: IntacctBool = Field(default=False, alias="ACTIVE")
    posted: IntacctDate = Field(default=None, alias="POSTED")
    modified: IntacctDatetime = Field(default=None, alias="MODIFIED")


def entry(xml: str) -> Entry:
    return Entry.model_validate(ResultMap.from_xml(f"<ENTRY>{xml}</ENTRY>"))


class TestLenientScalars:
    """Tests for numbers and flags."""

    def test_parsed_values(self):
        """Test that text values are converted."""
        e = entry("<COUNT>3</COUNT><AMOUNT>-1.25</AMOUNT><ACTIVE>T</ACTIVE>")

        assert e.count == 3
        assert e.amount == -1.25
        assert e.active is True

    def test_blanks_fall_back(self):
        """Test that blank or garbage text falls back to zero values."""
        e = Entry.model_validate({"COUNT": " ", "AMOUNT": "n/a", "ACTIVE": "false"})

        assert e.count == 0
        assert e.amount == 0.0
        assert e.active is False

    @pytest.mark.parametrize("raw", ["1", "t", "T", "true", "TRUE", "True"])
    def test_true_values(self, raw):
        """Test every accepted spelling of true."""
        assert Entry.model_validate({"ACTIVE": raw}).active is True

    def test_attributed_value_uses_text(self):
        """Test that an attributed element contributes its text."""
        e = entry('<COUNT unit="ea">7</COUNT>')

        assert e.count == 7


class TestDates:
    """Tests for date and timestamp fields."""

    def test_date_layouts(self):
        """Test ISO and US dates."""
        assert parse_date("2026-03-04") == date(2026, 3, 4)
        assert parse_date("03/04/2026") == date(2026, 3, 4)
        assert parse_date("2026-03-04T10:00:00Z") == date(2026, 3, 4)
        assert parse_date("") is None

    def test_invalid_date_fails_validation(self):
        """Test that an unparseable date is a validation error."""
        with pytest.raises(ValidationError):
            Entry.model_validate({"POSTED": "yesterday"})

    def test_datetime_layouts(self):
        """Test every accepted timestamp form."""
        utc = timezone.utc
        assert parse_datetime("2026-03-04T10:20:30Z") == datetime(2026, 3, 4, 10, 20, 30, tzinfo=utc)
        assert parse_datetime("03/04/2026 10:20:30") == datetime(2026, 3, 4, 10, 20, 30, tzinfo=utc)
        assert parse_datetime("03/04/2026") == datetime(2026, 3, 4, tzinfo=utc)
        assert parse_datetime("2026-03-04") == datetime(2026, 3, 4, tzinfo=utc)
        assert parse_datetime(" ") is None
        with pytest.raises(ValueError):
            parse_datetime("2026-03-04 10:20")

    def test_rfc3339_requires_zone(self):
        """Test that naive timestamps are rejected."""
        assert parse_rfc3339("2026-03-04T10:20:30+02:00").utcoffset().total_seconds() == 7200
        assert parse_rfc3339("2026-03-04T10:20:30") is None
        assert parse_rfc3339("2026-03-04") is None
        assert parse_rfc3339("") is None

    def test_dates_serialize_for_the_wire(self):
        """Test that dates are written as YYYY-MM-DD."""
        e = Entry(posted=date(2026, 3, 4), modified=datetime(2026, 3, 4, 1, 2, 3, tzinfo=timezone.utc))

        assert dump_model(e) == {"POSTED": "2026-03-04", "MODIFIED": "2026-03-04T01:02:03+00:00"}
