"""
Tests for Pydantic schemas - LookupRequest, ExtractionCandidate, LookupResult.
"""

import json

import pytest
from pydantic import ValidationError

from phonename.schemas import (
    ExtractionCandidate,
    LookupRequest,
    LookupResult,
    NameSource,
    Provenance,
)


class TestLookupRequest:
    """Test LookupRequest model."""

    def test_defaults_and_trimming(self):
        req = LookupRequest(phone_number="  +254712345678 ")
        assert req.phone_number == "+254712345678"
        assert req.region_code == "ke"

    def test_empty_phone_rejected(self):
        with pytest.raises(ValidationError):
            LookupRequest(phone_number="   ")

    def test_request_is_immutable(self):
        req = LookupRequest(phone_number="0712345678")
        with pytest.raises(ValidationError):
            req.phone_number = "0799999999"


class TestLookupResult:
    """Test the success/failure contract."""

    def test_success_from_web_candidate(self):
        cand = ExtractionCandidate(value="John Otieno", provenance=Provenance.WEB, strategy="selector", locator=".profile-name")
        result = LookupResult.from_candidate(cand)
        assert json.loads(result.to_json()) == {"success": True, "name": "John Otieno", "source": "truecaller_web"}

    def test_success_from_partial_candidate(self):
        cand = ExtractionCandidate(value="Jane Mwangi", provenance=Provenance.PARTIAL, strategy="partial_text", locator="Owner")
        assert LookupResult.from_candidate(cand).source == NameSource.TRUECALLER_PARTIAL

    def test_failure_omits_missing_debug(self):
        assert json.loads(LookupResult.failed("boom").to_json()) == {"success": False, "error": "boom"}

    def test_success_requires_name_and_source(self):
        with pytest.raises(ValueError):
            LookupResult(success=True, name="Jane Mwangi")

    def test_failure_requires_error(self):
        with pytest.raises(ValueError):
            LookupResult(success=False)

    def test_failure_cannot_carry_name(self):
        with pytest.raises(ValueError):
            LookupResult(success=False, error="x", name="Jane Mwangi")

    def test_success_cannot_carry_debug(self):
        with pytest.raises(ValueError):
            LookupResult(success=True, name="Jane", source=NameSource.TRUECALLER_WEB, debug="/tmp/x.png")
