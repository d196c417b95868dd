"""Tests for Hypernative response normalization."""

import pytest

from safeshield.constants import BALANCE_CHANGE_KEY, ContractStatus, Severity, StatusGroup, ThreatStatus
from safeshield.providers.hypernative_mapping import (
    is_failed_response,
    map_balance_changes,
    map_hypernative_response,
    map_risk,
)
from safeshield.providers.hypernative_types import FULL_REPORT_SUFFIX

SAFE = "0x" + "a" * 40


def _assessment(threat_risks=None, custom_risks=None, balance_changes=None):
    assessment = {
        "findings": {
            "THREAT_ANALYSIS": {"status": "Passed", "severity": "accept", "risks": threat_risks or []},
            "CUSTOM_CHECKS": {"status": "Passed", "severity": "accept", "risks": custom_risks or []},
        }
    }
    if balance_changes is not None:
        assessment["balanceChanges"] = balance_changes
    return {"safeTxHash": "0x" + "1" * 64, "status": "OK", "assessmentData": assessment}


class TestMapRisk:
    def test_unmapped_deny_becomes_malicious_guard_result(self):
        result = map_risk({"safeCheckId": "F-99999", "severity": "deny", "title": "Drainer", "details": "x"})

        assert result.severity == Severity.CRITICAL
        assert result.type == ThreatStatus.HYPERNATIVE_GUARD
        assert result.title == "Malicious threat detected"
        assert result.description == f"Drainer. {FULL_REPORT_SUFFIX}"

    def test_unmapped_warn_is_moderate(self):
        result = map_risk({"safeCheckId": "F-1", "severity": "warn", "title": "Suspicious approval."})
        assert result.severity == Severity.WARN
        assert result.title == "Moderate threat detected"
        assert result.description == f"Suspicious approval. {FULL_REPORT_SUFFIX}"

    def test_unknown_severity_uses_provider_details(self):
        result = map_risk({"safeCheckId": "F-1", "severity": "weird", "title": "Odd", "details": "Check it"})
        assert result.severity == Severity.INFO
        assert result.title == "Odd"
        assert result.description == f"Check it. {FULL_REPORT_SUFFIX}"

    def test_empty_details_leave_only_report_suffix(self):
        result = map_risk({"safeCheckId": "F-1", "severity": "weird"})
        assert result.description == FULL_REPORT_SUFFIX

    def test_mapped_type_uses_fixed_title_and_description(self):
        result = map_risk({"safeCheckId": "F-33063", "severity": "warn", "title": "Owner added"})

        assert result.type == ThreatStatus.OWNERSHIP_CHANGE
        assert result.title == "Ownership change"
        assert result.description == (
            "Verify this change before proceeding as it will change the Safe's ownership. " + FULL_REPORT_SUFFIX
        )

    def test_fallback_handler_risk(self):
        result = map_risk({"safeCheckId": "F-33042", "severity": "warn", "title": "Handler"})
        assert result.type == ContractStatus.UNOFFICIAL_FALLBACK_HANDLER
        assert result.title == "Unofficial fallback handler"

    def test_mastercopy_falls_back_to_guard(self):
        result = map_risk({"safeCheckId": "F-33095", "severity": "deny", "title": "Mastercopy swapped"})
        assert result.type == ThreatStatus.HYPERNATIVE_GUARD
        assert result.before is None
        assert result.title == "Malicious threat detected"

    def test_custom_type_table(self):
        result = map_risk(
            {"safeCheckId": "F-33063", "severity": "warn", "title": "Owner added"},
            {"F-33063": ThreatStatus.MODULE_CHANGE},
        )
        assert result.type == ThreatStatus.MODULE_CHANGE


class TestMapHypernativeResponse:
    def test_no_risks_yield_no_threat_results(self):
        results = map_hypernative_response(_assessment(), SAFE)

        threat = results[StatusGroup.THREAT]
        custom = results[StatusGroup.CUSTOM_CHECKS]
        assert [r.type for r in threat] == [ThreatStatus.NO_THREAT]
        assert threat[0].severity == Severity.OK
        assert [r.type for r in custom] == [ThreatStatus.NO_THREAT]
        assert BALANCE_CHANGE_KEY not in results

    def test_risks_are_sorted_by_severity(self):
        results = map_hypernative_response(
            _assessment(
                threat_risks=[
                    {"safeCheckId": "F-1", "severity": "accept", "title": "Fine"},
                    {"safeCheckId": "F-2", "severity": "deny", "title": "Bad"},
                    {"safeCheckId": "F-3", "severity": "warn", "title": "Meh"},
                ]
            ),
            SAFE,
        )
        severities = [r.severity for r in results[StatusGroup.THREAT]]
        assert severities == [Severity.CRITICAL, Severity.WARN, Severity.OK]

    def test_malformed_risks_are_skipped(self):
        results = map_hypernative_response(
            _assessment(custom_risks=["garbage", {"safeCheckId": "F-33083", "severity": "warn", "title": "Module"}]),
            SAFE,
        )
        assert [r.type for r in results[StatusGroup.CUSTOM_CHECKS]] == [ThreatStatus.MODULE_CHANGE]

    def test_failure_envelope(self):
        response = {"error": "Rate limited", "errorCode": 429, "success": False}
        assert is_failed_response(response)

        results = map_hypernative_response(response, SAFE)

        assert list(results) == [StatusGroup.THREAT]
        failed = results[StatusGroup.THREAT][0]
        assert failed.severity == Severity.CRITICAL
        assert failed.type == ThreatStatus.HYPERNATIVE_GUARD
        assert failed.title == "Hypernative analysis failed"
        assert failed.description == "Rate limited"

    def test_failure_envelope_with_empty_error_keeps_empty_description(self):
        results = map_hypernative_response({"error": "", "success": False}, SAFE)
        assert results[StatusGroup.THREAT][0].description == ""

    def test_failure_envelope_with_null_error(self):
        results = map_hypernative_response({"error": None, "success": False}, SAFE)
        assert results[StatusGroup.THREAT][0].description == "The threat analysis failed."

    def test_missing_assessment_data_raises(self):
        with pytest.raises(ValueError):
            map_hypernative_response({"safeTxHash": "0x1", "status": "OK"}, SAFE)

    def test_balance_changes_included_for_safe(self):
        results = map_hypernative_response(
            _assessment(
                balance_changes={
                    SAFE.upper().replace("0X", "0x"): [
                        {"changeType": "send", "tokenSymbol": "ETH", "amount": "1.5"},
                    ]
                }
            ),
            SAFE,
        )
        changes = results[BALANCE_CHANGE_KEY]
        assert len(changes) == 1
        assert changes[0].asset.type == "NATIVE"
        assert changes[0].outgoing == ["1.5"]


class TestMapBalanceChanges:
    def test_groups_by_token_case_insensitively(self):
        token = "0x" + "C" * 40
        changes = map_balance_changes(
            SAFE,
            {
                SAFE: [
                    {"changeType": "receive", "tokenSymbol": "USDC", "tokenAddress": token, "amount": "100"},
                    {"changeType": "send", "tokenSymbol": "USDC", "tokenAddress": token.lower(), "amount": "40"},
                    {"changeType": "send", "tokenSymbol": "ETH", "amount": "1"},
                ]
            },
        )

        assert len(changes) == 2
        usdc, eth = changes
        assert usdc.asset.type == "ERC20"
        assert usdc.asset.address == token.lower()
        assert usdc.incoming == ["100"]
        assert usdc.outgoing == ["40"]
        assert eth.asset.type == "NATIVE"
        assert eth.asset.address is None
        assert eth.to_dict()["out"] == [{"value": "1"}]

    def test_other_addresses_are_ignored(self):
        other = "0x" + "d" * 40
        changes = map_balance_changes(SAFE, {other: [{"changeType": "send", "amount": "5"}]})
        assert changes == []

    def test_malformed_entries_are_skipped(self):
        changes = map_balance_changes(SAFE, {SAFE: [None, {"changeType": "receive", "amount": "2"}]})
        assert [c.incoming for c in changes] == [["2"]]
