"""GitHub API adapter."""

from typing import Any, Dict, List

import requests

from mergekeeper.adapters.base import GitPlatformAdapter, GitPlatformError
from mergekeeper.models import CheckRun, CheckRunList, Comment, PullRequest

CHECKS_PAGE_SIZE = 100


def _pr_from_api(data: Dict[str, Any]) -> PullRequest:
    head = data.get("head") or {}
    labels = [lb["name"] for lb in (data.get("labels") or []) if isinstance(lb, dict) and "name" in lb]
    return PullRequest(
        id=data["id"],
        number=data["number"],
        title=data.get("title") or "",
        state=data.get("state", "open"),
        labels=labels,
        head_sha=head.get("sha", ""),
        html_url=data.get("html_url"),
    )


def _check_run_from_api(data: Dict[str, Any]) -> CheckRun:
    return CheckRun(
        id=data.get("id", 0),
        name=data.get("name") or "",
        status=data.get("status") or "completed",
        conclusion=data.get("conclusion"),
    )


def _comment_from_api(data: Dict[str, Any]) -> Comment:
    user = data.get("user") or {}
    return Comment(
        id=data["id"],
        body=data.get("body") or "",
        author=user.get("login", ""),
    )


class GitHubAdapter(GitPlatformAdapter):
    """GitHub REST API implementation."""

    def __init__(self, token: str, api_url: str = "https://api.github.com") -> None:
        self._api_url = api_url.rstrip("/")
        self._session = requests.Session()
        self._session.headers["Authorization"] = f"token {token}"
        self._session.headers["Accept"] = "application/vnd.github.v3+json"

    def _request(
        self,
        method: str,
        path: str,
        params: Dict[str, Any] | None = None,
        json: Dict[str, Any] | None = None,
    ) -> requests.Response:
        url = f"{self._api_url}{path}" if path.startswith("/") else f"{self._api_url}/{path}"
        try:
            resp = self._session.request(method, url, params=params, json=json, timeout=30)
        except requests.RequestException as e:
            raise GitPlatformError(f"{method} {path} failed: {e}") from e
        if resp.status_code >= 400:
            msg = resp.text or resp.reason or str(resp.status_code)
            try:
                msg = resp.json().get("message", msg)
            except ValueError:
                pass
            raise GitPlatformError(f"{resp.status_code}: {msg}", status_code=resp.status_code)
        return resp

    def get_pull_request(self, repo: str, pr_number: int) -> PullRequest:
        resp = self._request("GET", f"/repos/{repo}/pulls/{pr_number}")
        return _pr_from_api(resp.json())

    def list_checks_for_ref(self, repo: str, ref: str) -> CheckRunList:
        path = f"/repos/{repo}/commits/{ref}/check-runs"
        runs: List[CheckRun] = []
        page = 1
        while True:
            data = self._request("GET", path, params={"per_page": CHECKS_PAGE_SIZE, "page": page}).json()
            total = data.get("total_count", 0)
            batch = data.get("check_runs") or []
            runs.extend(_check_run_from_api(d) for d in batch)
            if not batch or len(runs) >= total:
                return CheckRunList(total_count=total, check_runs=runs)
            page += 1

    def create_issue_comment(self, repo: str, issue_number: int, body: str) -> Comment:
        resp = self._request("POST", f"/repos/{repo}/issues/{issue_number}/comments", json={"body": body})
        return _comment_from_api(resp.json())

    def merge_pull_request(self, repo: str, pr_number: int, merge_method: str) -> None:
        self._request("PUT", f"/repos/{repo}/pulls/{pr_number}/merge", json={"merge_method": merge_method})
