"""
Gated merge of one pull request.

Merger polls the pull request until its title carries the configured
marker and every other check run on the head commit has passed, then
posts the optional comment and merges. Gate failures and API errors are
retried until the timeout; fail_step decides whether running out of time
(or any later error) fails the invocation or is only logged.
"""

import logging

from mergekeeper.adapters.base import GitPlatformAdapter
from mergekeeper.config import MergeConfig
from mergekeeper.gates import check_labels, check_statuses, check_title
from mergekeeper.observer import LoggingObserver, MergeObserver, MergeResult
from mergekeeper.retry import AttemptResult, RetryEngine, RetryPolicy

LOG = logging.getLogger("mergekeeper.merger")

DEFAULT_MERGE_METHOD = "squash"


class Merger:
    """Runs the gates through a RetryEngine and performs the merge."""

    def __init__(
        self,
        cfg: MergeConfig,
        adapter: GitPlatformAdapter,
        observer: MergeObserver | None = None,
        retry: RetryEngine | None = None,
    ) -> None:
        self.cfg = cfg
        self._adapter = adapter
        self._observer = observer or LoggingObserver(LOG)
        self._retry = retry or RetryEngine(
            RetryPolicy(
                timeout_seconds=cfg.timeout_seconds,
                interval_seconds=cfg.interval_seconds,
                fail_step=cfg.fail_step,
            )
        )

    @property
    def merge_method(self) -> str:
        if self.cfg.honor_strategy:
            return self.cfg.strategy
        return DEFAULT_MERGE_METHOD

    def _evaluate(self) -> AttemptResult:
        cfg = self.cfg
        repo = cfg.full_name
        pr = self._adapter.get_pull_request(repo, cfg.pull_request_number)

        labels = check_labels(pr, cfg.ignore_labels, cfg.ignore_labels_strategy)
        if labels.failed:
            return AttemptResult.fatal(f"Label checking failed: {labels.message}")

        title = check_title(pr, cfg.title)
        if title.failed:
            return AttemptResult.retry(f"Title checking failed: {title.message}")

        if cfg.check_status:
            statuses = check_statuses(self._adapter.list_checks_for_ref(repo, cfg.sha))
            if statuses.failed:
                return AttemptResult.retry(statuses.message)
            LOG.debug(statuses.message)

        LOG.debug("Merge PR %s", pr.number)
        return AttemptResult.ok()

    def _attempt(self, count: int) -> AttemptResult:
        try:
            result = self._evaluate()
        except Exception as e:
            self._observer.on_attempt(count, e)
            raise
        if result.kind != "ok":
            self._observer.on_attempt(count, result.reason)
        return result

    def _comment_and_merge(self, result: MergeResult) -> None:
        cfg = self.cfg
        repo = cfg.full_name
        if cfg.comment:
            comment = self._adapter.create_issue_comment(repo, cfg.pull_request_number, cfg.comment)
            LOG.debug("Posting comment %r", cfg.comment)
            result.comment_id = comment.id

        if not cfg.dry_run:
            self._adapter.merge_pull_request(repo, cfg.pull_request_number, self.merge_method)
            result.merged = True
        else:
            LOG.info("dry run merge action")
            result.merged = False

    def merge(self) -> MergeResult:
        """Wait for the gates, then comment and merge.

        Returns:
            MergeResult with the outputs that were set. Empty when the
            gates never passed and fail_step is off.

        Raises:
            RetryExhausted, RetryAborted, GitPlatformError: only with fail_step.
        """
        cfg = self.cfg
        result = MergeResult()
        try:
            outcome = self._retry.exec(self._attempt)
            if outcome.succeeded:
                self._comment_and_merge(result)
            else:
                LOG.debug("Error on retry:%r", outcome.last_error)
                LOG.info(
                    "Gates %s after %s attempt(s) but passed because fail_step is false",
                    outcome.state.replace("_", " "),
                    outcome.attempts,
                )
        except Exception as e:
            LOG.debug("Error on retry:%r", e)
            if cfg.fail_step:
                raise
            LOG.warning("Merge of PR #%s failed but passed because fail_step is false: %s", cfg.pull_request_number, e)

        self._observer.on_outcome(result)
        return result
