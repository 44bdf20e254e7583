"""Check runs reported for a commit."""

from typing import List

from pydantic import BaseModel, Field


class CheckRun(BaseModel):
    """One CI check run.

    conclusion is None while the run is queued or in progress.
    """

    id: int = 0
    name: str = ""
    status: str = "completed"
    conclusion: str | None = None


class CheckRunList(BaseModel):
    """All check runs for a ref.

    total_count comes from the API and may exceed len(check_runs) when
    pages were not fetched.
    """

    total_count: int
    check_runs: List[CheckRun] = Field(default_factory=list)
