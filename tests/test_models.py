"""Tests for the result model and taxonomy helpers."""

import pytest

from builders import malicious, mastercopy_change, safe_tx, unofficial_fallback_handler
from safeshield.constants import (
    CommonSharedStatus,
    ContractStatus,
    RecipientStatus,
    Severity,
    StatusGroup,
    ThreatStatus,
    parse_group,
    parse_status,
    validate_group_type,
)
from safeshield.failures import ErrorType, get_error_info
from safeshield.models import AnalysisResult, coerce_result, is_threat_analysis_result


class TestTaxonomy:
    def test_parse_status_finds_owning_enum(self):
        assert parse_status("KNOWN_RECIPIENT") is RecipientStatus.KNOWN_RECIPIENT
        assert parse_status("UNOFFICIAL_FALLBACK_HANDLER") is ContractStatus.UNOFFICIAL_FALLBACK_HANDLER
        assert parse_status("FAILED") is CommonSharedStatus.FAILED
        assert parse_status("NOPE") is None
        assert parse_status(None) is None

    def test_parse_group(self):
        assert parse_group("THREAT") is StatusGroup.THREAT
        assert parse_group("BOGUS") is None

    def test_validate_group_type(self):
        validate_group_type(StatusGroup.ADDRESS_BOOK, RecipientStatus.KNOWN_RECIPIENT)
        validate_group_type(StatusGroup.CONTRACT_VERIFICATION, CommonSharedStatus.FAILED)
        with pytest.raises(ValueError):
            validate_group_type(StatusGroup.ADDRESS_BOOK, CommonSharedStatus.FAILED)
        with pytest.raises(ValueError):
            validate_group_type(StatusGroup.CUSTOM_CHECKS, ThreatStatus.MALICIOUS)

    def test_severity_from_string(self):
        assert Severity.from_string("warn") is Severity.WARN
        assert Severity.from_string("") is None
        assert Severity.from_string("loud") is None


class TestAnalysisResult:
    def test_mastercopy_requires_addresses(self):
        with pytest.raises(ValueError):
            AnalysisResult(
                severity=Severity.CRITICAL,
                type=ThreatStatus.MASTERCOPY_CHANGE,
                title="Mastercopy change",
                description="Verify",
            )

    def test_variant_fields_are_rejected_on_other_types(self):
        with pytest.raises(ValueError):
            AnalysisResult(
                severity=Severity.OK,
                type=ThreatStatus.NO_THREAT,
                title="No threat",
                description="Fine",
                before="0x1",
                after="0x2",
            )
        with pytest.raises(ValueError):
            AnalysisResult(
                severity=Severity.OK,
                type=ThreatStatus.NO_THREAT,
                title="No threat",
                description="Fine",
                issues={},
            )

    def test_raw_strings_are_coerced(self):
        result = AnalysisResult(severity="warn", type="LOW_ACTIVITY", title="t", description="d")
        assert result.severity is Severity.WARN
        assert result.type is RecipientStatus.LOW_ACTIVITY

    def test_dict_round_trip_keeps_variants(self):
        for result in (
            malicious(),
            mastercopy_change("0x" + "1" * 40, "0x" + "2" * 40),
            unofficial_fallback_handler("0x" + "3" * 40, name="Handler"),
        ):
            assert AnalysisResult.from_dict(result.to_dict()) == result

    def test_coerce_result_skips_malformed(self):
        assert coerce_result({"severity": "OK"}) is None
        assert coerce_result("text") is None
        assert coerce_result(malicious()) is not None

    def test_is_threat_analysis_result(self):
        assert is_threat_analysis_result(malicious().to_dict())
        assert not is_threat_analysis_result("req-1")
        assert not is_threat_analysis_result({"asset": {"type": "NATIVE"}})


def test_without_nonce():
    assert "nonce" not in safe_tx().without_nonce()
    assert safe_tx(nonce=1).without_nonce() == safe_tx(nonce=2).without_nonce()


@pytest.mark.parametrize(
    "error_type,title",
    [
        (ErrorType.RECIPIENT, "Recipient analysis failed"),
        (ErrorType.CONTRACT, "Contract analysis failed"),
        (ErrorType.THREAT, "Threat analysis failed"),
    ],
)
def test_get_error_info(error_type, title):
    result = get_error_info(error_type, "timeout")
    assert result.severity == Severity.WARN
    assert result.type == CommonSharedStatus.FAILED
    assert result.title == title
    assert result.description == f"{title}. Review before processing."
    assert result.error == "timeout"
