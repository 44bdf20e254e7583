"""Abstract base for Git platform adapters."""

from abc import ABC, abstractmethod

from mergekeeper.errors import MergeKeeperError
from mergekeeper.models import CheckRunList, Comment, PullRequest


class GitPlatformError(MergeKeeperError):
    """Raised when a Git platform API call fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GitPlatformAdapter(ABC):
    """Pull request operations needed to gate and perform a merge.

    ``repo`` is always the full ``owner/name``.
    """

    @abstractmethod
    def get_pull_request(self, repo: str, pr_number: int) -> PullRequest:
        """Fetch PR by number."""
        ...

    @abstractmethod
    def list_checks_for_ref(self, repo: str, ref: str) -> CheckRunList:
        """List check runs reported for a commit SHA, branch or tag."""
        ...

    @abstractmethod
    def create_issue_comment(self, repo: str, issue_number: int, body: str) -> Comment:
        """Post a comment on the PR's issue thread."""
        ...

    @abstractmethod
    def merge_pull_request(self, repo: str, pr_number: int, merge_method: str) -> None:
        """Merge the PR with merge, squash or rebase."""
        ...
