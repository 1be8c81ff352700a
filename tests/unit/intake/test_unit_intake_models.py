# tests/unit/intake/test_unit_intake_models.py — v1
"""Tests for intake/models.py — RequestInput validation, SubmissionOutcome."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from reqintake.core.models import DuplicateVerdict
from reqintake.intake.models import RequestInput, SubmissionOutcome


def _request(**overrides) -> RequestInput:
    data = {
        "title": "Extended library hours",
        "department": "Culture",
        "type": "Policy Review",
        "content": "Keep the central library open until ten in the evening.",
    }
    data.update(overrides)
    return RequestInput(**data)


class TestRequestInput:
    def test_valid(self):
        request = _request(title="  Extended library hours  ")
        assert request.title == "Extended library hours"

    def test_title_too_long(self):
        with pytest.raises(ValidationError):
            _request(title="x" * 201)

    def test_content_too_short_after_strip(self):
        with pytest.raises(ValidationError):
            _request(content="   short    ")

    def test_content_too_long(self):
        with pytest.raises(ValidationError):
            _request(content="a" * 10001)

    def test_blank_department(self):
        with pytest.raises(ValidationError):
            _request(department="   ")


class TestSubmissionOutcome:
    def test_duplicate_original(self, road_repair_submission):
        verdict = DuplicateVerdict(is_duplicate=True, matched_submission=road_repair_submission)
        outcome = SubmissionOutcome(status="duplicate", verdict=verdict)
        assert outcome.is_duplicate
        assert outcome.original.id == "REQ-ROAD01"

    def test_accepted_without_verdict(self):
        outcome = SubmissionOutcome(status="accepted", check_bypassed=True)
        assert not outcome.is_duplicate
        assert outcome.original is None
