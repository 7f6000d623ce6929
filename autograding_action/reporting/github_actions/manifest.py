"""GitHub Actions reporter manifest."""

from autograding_action.reporting.github_actions.config import GitHubActionsConfig
from autograding_action.reporting.github_actions.reporter import (
    GitHubActionsReporter,
)
from autograding_action.reporting.manifest import ReporterManifest

github_actions_manifest = ReporterManifest(
    config_cls=GitHubActionsConfig,
    reporter_factory=GitHubActionsReporter.from_config,
)
