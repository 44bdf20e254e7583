"""Merge-readiness gates evaluated on every attempt.

Each gate is a pure function over a freshly fetched snapshot and returns
a ValidationResult; the caller decides whether a failure is retried.
"""

from typing import List

from pydantic import BaseModel

from mergekeeper.models import CheckRunList, PullRequest

# Conclusions that count as a passed check run
PASSING_CONCLUSIONS = ("success", "skipped")


class ValidationResult(BaseModel):
    """Outcome of one gate evaluation."""

    failed: bool
    message: str


def check_title(pr: PullRequest, title: str) -> ValidationResult:
    """Pass iff the PR title contains ``title`` (case-sensitive substring).

    An empty marker always passes.
    """
    failed = title not in pr.title
    return ValidationResult(
        failed=failed,
        message=(
            f"The title of the PR with id {pr.id} "
            f"{'does not contain' if failed else 'contains'} the proper title to be automatically merged"
        ),
    )


def check_statuses(checks: CheckRunList) -> ValidationResult:
    """Pass iff every check run except one has succeeded or been skipped.

    The excluded run is the one executing this merge: it is counted in
    total_count but has no conclusion yet.
    """
    total = checks.total_count
    succeeded = sum(1 for run in checks.check_runs if run.conclusion in PASSING_CONCLUSIONS)
    if total - 1 != succeeded:
        return ValidationResult(
            failed=True,
            message=f"Not all status succeeded, {succeeded} out of {total - 1} (ignored this check) success",
        )
    return ValidationResult(failed=False, message=f"All {total} status success")


def check_labels(pr: PullRequest, ignore_labels: List[str], strategy: str = "all") -> ValidationResult:
    """Fail when the PR carries the labels that block merging.

    strategy ``all``: blocked only if every label in ``ignore_labels`` is
    present. ``atLeastOne``: blocked if any of them is present. An empty
    ``ignore_labels`` never blocks.
    """
    if not ignore_labels:
        return ValidationResult(failed=False, message="No ignore labels configured")
    present = [label for label in ignore_labels if label in pr.labels]
    if strategy == "atLeastOne":
        failed = bool(present)
    else:
        failed = len(present) == len(ignore_labels)
    if failed:
        return ValidationResult(
            failed=True,
            message=f"The PR with id {pr.id} has ignored labels {', '.join(present)} ({strategy})",
        )
    return ValidationResult(failed=False, message=f"The PR with id {pr.id} has no ignored labels ({strategy})")
