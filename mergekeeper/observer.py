"""Observers notified of attempt failures and the final merge result.

LoggingObserver only logs. GitHubOutputObserver also writes the
``merged`` and ``commentID`` outputs to the GitHub Actions output file.
"""

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict

from pydantic import BaseModel


class MergeResult(BaseModel):
    """Values produced by one merge run; None means the output is not set."""

    merged: bool | None = None
    comment_id: int | None = None

    def outputs(self) -> Dict[str, str]:
        """Output name -> value for the values that are set."""
        out: Dict[str, str] = {}
        if self.comment_id is not None:
            out["commentID"] = str(self.comment_id)
        if self.merged is not None:
            out["merged"] = "true" if self.merged else "false"
        return out


class MergeObserver(ABC):
    """Receives per-attempt failures and the final result."""

    @abstractmethod
    def on_attempt(self, count: int, error: BaseException | str) -> None:
        """Called after attempt ``count`` failed."""
        ...

    @abstractmethod
    def on_outcome(self, result: MergeResult) -> None:
        """Called once when merge() returns normally."""
        ...


class LoggingObserver(MergeObserver):
    """Logs attempts at DEBUG and the outcome at INFO."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self.log = log or logging.getLogger("mergekeeper.merger")

    def on_attempt(self, count: int, error: BaseException | str) -> None:
        self.log.debug("Failed, retry count:%s with error %r", count, error)

    def on_outcome(self, result: MergeResult) -> None:
        self.log.info("Merge finished: %s", result.outputs() or "no outputs")


class GitHubOutputObserver(LoggingObserver):
    """LoggingObserver that also appends outputs as ``name=value`` lines.

    The file defaults to $GITHUB_OUTPUT; without one outputs are only logged.
    """

    def __init__(self, output_path: Path | None = None, log: logging.Logger | None = None) -> None:
        super().__init__(log)
        if output_path is None and os.environ.get("GITHUB_OUTPUT"):
            output_path = Path(os.environ["GITHUB_OUTPUT"])
        self.output_path = output_path

    def on_outcome(self, result: MergeResult) -> None:
        super().on_outcome(result)
        outputs = result.outputs()
        if not outputs or self.output_path is None:
            return
        with self.output_path.open("a", encoding="utf-8") as f:
            for name, value in outputs.items():
                f.write(f"{name}={value}\n")
