"""Tests for title, status and label gates."""

import pytest

from mergekeeper.gates import check_labels, check_statuses, check_title
from mergekeeper.models import CheckRun, CheckRunList, PullRequest


def _pr(title: str = "New Crowdin updates", labels: list[str] | None = None) -> PullRequest:
    return PullRequest(id=1234, number=7, title=title, labels=labels or [])


def _checks(*conclusions: str | None) -> CheckRunList:
    return CheckRunList(
        total_count=len(conclusions),
        check_runs=[CheckRun(id=i, name=f"check-{i}", conclusion=c) for i, c in enumerate(conclusions)],
    )


class TestTitleGate:
    def test_substring_match_passes(self) -> None:
        result = check_title(_pr("chore: New Crowdin updates (#12)"), "New Crowdin updates")
        assert result.failed is False
        assert "contains" in result.message

    def test_missing_marker_fails_and_names_pr_id(self) -> None:
        result = check_title(_pr("Fix typo"), "New Crowdin updates")
        assert result.failed is True
        assert "1234" in result.message
        assert "does not contain" in result.message

    def test_match_is_case_sensitive(self) -> None:
        assert check_title(_pr("new crowdin updates"), "New Crowdin updates").failed is True

    def test_empty_marker_always_passes(self) -> None:
        assert check_title(_pr(""), "").failed is False
        assert check_title(_pr("anything"), "").failed is False


class TestStatusGate:
    def test_all_but_own_check_succeeded_passes(self) -> None:
        result = check_statuses(_checks("success", "success", "success", "success", None))
        assert result.failed is False

    def test_skipped_counts_as_success(self) -> None:
        assert check_statuses(_checks("success", "skipped", None)).failed is False

    def test_one_missing_success_fails(self) -> None:
        result = check_statuses(_checks("success", "success", "success", "failure", None))
        assert result.failed is True
        assert "3 out of 4" in result.message

    @pytest.mark.parametrize("conclusion", ["failure", "cancelled", "neutral", "timed_out", None])
    def test_other_conclusions_do_not_count(self, conclusion: str | None) -> None:
        assert check_statuses(_checks("success", conclusion, None)).failed is True

    def test_only_own_check_passes(self) -> None:
        assert check_statuses(_checks(None)).failed is False

    def test_total_count_is_taken_from_api(self) -> None:
        checks = CheckRunList(total_count=6, check_runs=[CheckRun(conclusion="success")] * 4)
        assert check_statuses(checks).failed is True


class TestLabelGate:
    def test_no_ignore_labels_passes(self) -> None:
        assert check_labels(_pr(labels=["wip"]), []).failed is False

    def test_all_strategy_needs_every_label(self) -> None:
        assert check_labels(_pr(labels=["wip"]), ["wip", "hold"], "all").failed is False
        assert check_labels(_pr(labels=["hold", "wip", "docs"]), ["wip", "hold"], "all").failed is True

    def test_at_least_one_strategy_blocks_on_any(self) -> None:
        result = check_labels(_pr(labels=["hold"]), ["wip", "hold"], "atLeastOne")
        assert result.failed is True
        assert "hold" in result.message
        assert check_labels(_pr(labels=["docs"]), ["wip", "hold"], "atLeastOne").failed is False
