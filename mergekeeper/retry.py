"""
Bounded-duration retry loop.

RetryEngine runs an operation until it reports success, until it reports
a fatal failure, or until the time budget of its RetryPolicy runs out.
The operation receives the 1-based attempt number and returns an
AttemptResult (None counts as ok). Any Exception it raises is a failed
attempt like ``AttemptResult.retry``; errors are not told apart here.

The deadline is fixed once per ``exec`` call. Attempts are scheduled at
``start + k * interval`` and one is only started when its slot is no later
than the deadline, so time spent inside attempts does not cost a slot.
An always-failing operation runs ``floor(timeout / interval) + 1`` times.
"""

import time
from typing import Callable, Literal

from pydantic import BaseModel, ConfigDict, Field

from mergekeeper.errors import MergeKeeperError

AttemptKind = Literal["ok", "retry", "fatal"]
OutcomeState = Literal["succeeded", "timed_out", "aborted"]


class RetryPolicy(BaseModel):
    """Timing and failure policy for one retry loop."""

    model_config = ConfigDict(frozen=True)

    timeout_seconds: float = Field(ge=0)
    interval_seconds: float = Field(ge=0)
    fail_step: bool = True


class AttemptResult(BaseModel):
    """What one attempt reports back to the loop."""

    model_config = ConfigDict(frozen=True)

    kind: AttemptKind
    reason: str = ""

    @classmethod
    def ok(cls) -> "AttemptResult":
        return cls(kind="ok")

    @classmethod
    def retry(cls, reason: str) -> "AttemptResult":
        return cls(kind="retry", reason=reason)

    @classmethod
    def fatal(cls, reason: str) -> "AttemptResult":
        return cls(kind="fatal", reason=reason)


class AttemptFailed(MergeKeeperError):
    """A retryable attempt failure reported as a result, not raised."""

    pass


class RetryExhausted(MergeKeeperError):
    """Deadline passed while the last attempt was still failing."""

    def __init__(self, attempts: int, last_error: BaseException | None) -> None:
        super().__init__(f"Retry exhausted after {attempts} attempt(s): {last_error}")
        self.attempts = attempts
        self.last_error = last_error


class RetryAborted(MergeKeeperError):
    """An attempt reported a fatal failure."""

    def __init__(self, attempts: int, reason: str) -> None:
        super().__init__(f"Aborted on attempt {attempts}: {reason}")
        self.attempts = attempts
        self.reason = reason


class RetryOutcome(BaseModel):
    """Terminal state of one exec call."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    state: OutcomeState
    attempts: int
    last_error: BaseException | None = None

    @property
    def succeeded(self) -> bool:
        return self.state == "succeeded"


Operation = Callable[[int], AttemptResult | None]


class RetryEngine:
    """Runs an operation repeatedly under a RetryPolicy.

    ``clock`` and ``sleep`` default to ``time.monotonic`` and ``time.sleep``.
    """

    def __init__(
        self,
        policy: RetryPolicy,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.policy = policy
        self._clock = clock
        self._sleep = sleep

    def exec(self, operation: Operation) -> RetryOutcome:
        """Run ``operation`` until it succeeds, aborts, or the budget is spent.

        Returns:
            RetryOutcome. Without fail_step it may be timed_out or aborted;
            with fail_step only succeeded outcomes are returned.

        Raises:
            RetryExhausted: fail_step is set and the deadline passed; chained
                from the last observed error.
            RetryAborted: fail_step is set and an attempt returned fatal.
        """
        policy = self.policy
        start = self._clock()
        deadline = start + policy.timeout_seconds
        count = 0
        while True:
            count += 1
            try:
                result = operation(count) or AttemptResult.ok()
            except Exception as e:
                last_error: BaseException = e
            else:
                if result.kind == "ok":
                    return RetryOutcome(state="succeeded", attempts=count)
                if result.kind == "fatal":
                    if policy.fail_step:
                        raise RetryAborted(count, result.reason)
                    return RetryOutcome(state="aborted", attempts=count, last_error=AttemptFailed(result.reason))
                last_error = AttemptFailed(result.reason)

            # Attempt k+1 is due at start + k * interval, however long attempt k took
            now = self._clock()
            next_start = start + count * policy.interval_seconds
            if now >= deadline or next_start > deadline:
                if policy.fail_step:
                    raise RetryExhausted(count, last_error) from last_error
                return RetryOutcome(state="timed_out", attempts=count, last_error=last_error)
            delay = next_start - now
            if delay > 0:
                self._sleep(delay)
