"""Pull request snapshot model."""

from typing import List

from pydantic import BaseModel, Field


class PullRequest(BaseModel):
    """Pull request as returned by the hosting API at one point in time."""

    id: int
    number: int
    title: str
    state: str = "open"
    labels: List[str] = Field(default_factory=list)
    head_sha: str = ""
    html_url: str | None = None
