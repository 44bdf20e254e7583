"""Git platform adapters (base and implementations)."""

from mergekeeper.adapters.base import GitPlatformAdapter, GitPlatformError
from mergekeeper.adapters.github import GitHubAdapter

__all__ = ["GitPlatformAdapter", "GitPlatformError", "GitHubAdapter"]
