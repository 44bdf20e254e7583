"""Data models for pull requests, check runs and comments (Pydantic)."""

from mergekeeper.models.checks import CheckRun, CheckRunList
from mergekeeper.models.comment import Comment
from mergekeeper.models.pr import PullRequest

__all__ = ["CheckRun", "CheckRunList", "Comment", "PullRequest"]
