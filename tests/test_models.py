"""Tests for print_request_pipeline.core.models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from print_request_pipeline.core.models import (
    AIExtractionResult,
    AnalysisResult,
    AnalyzedEmailRecord,
    EmailRecord,
)

from tests.conftest import make_email


class TestEmailRecord:
    def test_dump_uses_external_names_in_column_order(self):
        assert list(make_email().to_row_dict()) == [
            "id", "href", "date", "subject", "from", "to", "content",
        ]

    def test_accepts_external_from_name(self):
        email = EmailRecord.model_validate({"id": "1", "href": "x", "date": "d", "from": "H"})
        assert email.sender == "H"
        assert email.content is None


class TestAIExtractionResult:
    def test_valid(self):
        parsed = AIExtractionResult.model_validate({"whatIsBeingPrinted": "flyer", "whoIsPrinting": "Jane Doe"})
        assert parsed.what_is_being_printed == "flyer"
        assert parsed.who_is_printing == "Jane Doe"

    @pytest.mark.parametrize("data", [
        {"whatIsBeingPrinted": "flyer"},
        {"whoIsPrinting": "Jane"},
        {"whatIsBeingPrinted": 1, "whoIsPrinting": "Jane"},
        {"whatIsBeingPrinted": "flyer", "whoIsPrinting": ["Jane"]},
        "flyer",
    ])
    def test_rejects_missing_or_non_string(self, data):
        with pytest.raises(ValidationError):
            AIExtractionResult.model_validate(data)


class TestAnalysisResult:
    def test_success_renders_both_fields(self):
        email = make_email("C1")
        record = AnalysisResult(
            email_id="C1", success=True, what_is_being_printed="memo", who_is_printing="Lona"
        ).to_record(email)

        assert isinstance(record, AnalyzedEmailRecord)
        assert record.what_is_being_printed == "memo"
        assert record.who_is_printing == "Lona"
        assert record.sender == email.sender

    def test_failure_renders_both_none(self):
        record = AnalysisResult(
            email_id="C1", success=False, what_is_being_printed="partial", error="bad json"
        ).to_record(make_email("C1"))

        assert record.what_is_being_printed is None
        assert record.who_is_printing is None

    def test_to_dict(self):
        result = AnalysisResult(email_id="C1", success=False, error="no content")
        assert result.to_dict() == {
            "email_id": "C1",
            "success": False,
            "whatIsBeingPrinted": None,
            "whoIsPrinting": None,
            "error": "no content",
        }
