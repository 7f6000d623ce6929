"""GitHub Actions reporter module."""

from autograding_action.reporting.github_actions.config import GitHubActionsConfig
from autograding_action.reporting.github_actions.manifest import (
    github_actions_manifest,
)
from autograding_action.reporting.github_actions.reporter import (
    GitHubActionsReporter,
)

__all__ = ["GitHubActionsConfig", "GitHubActionsReporter", "github_actions_manifest"]
