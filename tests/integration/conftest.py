"""Fixtures for integration tests."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from autograding_action.reporting.github_actions import (
    GitHubActionsConfig,
    GitHubActionsReporter,
)


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create the directory the graded commands run in."""
    path = tmp_path / "workspace"
    path.mkdir()
    return path


@pytest.fixture
def output_file(tmp_path: Path) -> Path:
    """Path of the GITHUB_OUTPUT file."""
    return tmp_path / "github_output"


@pytest.fixture
async def github_reporter(
    output_file: Path,
) -> AsyncGenerator[GitHubActionsReporter, None]:
    """Create a GitHub Actions reporter that never calls the API."""
    config = GitHubActionsConfig(
        token=None, repository=None, run_id=None, output_file=str(output_file)
    )
    async with GitHubActionsReporter.from_config(config) as reporter:
        yield reporter
