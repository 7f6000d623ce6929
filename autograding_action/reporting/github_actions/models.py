"""Pydantic models for GitHub REST API responses."""

from collections.abc import Sequence

from pydantic import BaseModel


class WorkflowRun(BaseModel):
    """A workflow run from GitHub Actions API."""

    id: int
    check_suite_url: str


class CheckRun(BaseModel):
    """A check run from the Checks API."""

    id: int
    name: str


class CheckRunsResponse(BaseModel):
    """Response from list check runs for a check suite API."""

    total_count: int
    check_runs: Sequence[CheckRun]
