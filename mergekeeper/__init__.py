"""mergekeeper - merge one pull request once its title and checks are ready."""

from mergekeeper.merger import Merger
from mergekeeper.observer import MergeResult
from mergekeeper.retry import RetryEngine, RetryPolicy

__all__ = ["Merger", "MergeResult", "RetryEngine", "RetryPolicy"]
