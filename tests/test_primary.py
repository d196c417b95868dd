"""Tests for primary-result selection and severity ordering."""

import pytest

from builders import known_recipient, low_activity, malicious, moderate, unknown_recipient
from safeshield.analysis import get_primary_result, severity_rank, sort_by_severity
from safeshield.constants import SEVERITY_TO_TITLE, Severity


class TestSeverityRank:
    def test_total_order(self):
        assert severity_rank(Severity.CRITICAL) < severity_rank(Severity.WARN)
        assert severity_rank(Severity.WARN) < severity_rank(Severity.INFO)
        assert severity_rank(Severity.INFO) < severity_rank(Severity.OK)

    def test_warn_and_error_share_a_rank(self):
        assert severity_rank(Severity.WARN) == severity_rank(Severity.ERROR)

    def test_accepts_raw_strings(self):
        assert severity_rank("critical") == severity_rank(Severity.CRITICAL)

    def test_unknown_sorts_last(self):
        assert severity_rank("BOGUS") > severity_rank(Severity.OK)


class TestGetPrimaryResult:
    def test_empty_returns_none(self):
        assert get_primary_result([]) is None

    def test_picks_most_severe(self):
        results = [known_recipient(), unknown_recipient(), malicious(), low_activity()]
        assert get_primary_result(results).severity == Severity.CRITICAL

    @pytest.mark.parametrize(
        "first,second",
        [
            (known_recipient, unknown_recipient),
            (unknown_recipient, low_activity),
            (low_activity, malicious),
            (malicious, known_recipient),
        ],
    )
    def test_pairwise_selection_follows_rank(self, first, second):
        a, b = first(), second()
        expected = a if severity_rank(a.severity) <= severity_rank(b.severity) else b
        assert get_primary_result([a, b]) is expected

    def test_ties_keep_first_occurrence(self):
        first = low_activity()
        second = moderate()
        assert get_primary_result([first, second]) is first
        assert get_primary_result([second, first]) is second

    def test_error_ties_with_warn(self):
        warn = low_activity()
        error = warn.replace(severity=Severity.ERROR, title="Checks unavailable")
        assert get_primary_result([error, warn]) is error


def test_sort_by_severity_is_stable():
    a = low_activity()
    b = moderate()
    c = known_recipient()
    d = malicious()
    assert sort_by_severity([c, a, b, d]) == [d, a, b, c]


def test_severity_titles():
    assert SEVERITY_TO_TITLE == {
        Severity.CRITICAL: "Risk detected",
        Severity.WARN: "Issues found",
        Severity.INFO: "Review details",
        Severity.OK: "Checks passed",
        Severity.ERROR: "Checks unavailable",
    }
