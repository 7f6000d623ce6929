"""Configuration for GitHub Actions reporter."""

import os

from pydantic import BaseModel, Field, SecretStr


def _token_from_env() -> SecretStr | None:
    token = os.environ.get("GITHUB_TOKEN")
    return SecretStr(token) if token else None


class GitHubActionsConfig(BaseModel):
    """Configuration for GitHub Actions reporter.

    Every field defaults to the variable the Actions runner sets for the job.
    """

    token: SecretStr | None = Field(default_factory=_token_from_env)
    repository: str | None = Field(
        default_factory=lambda: os.environ.get("GITHUB_REPOSITORY")
    )
    run_id: str | None = Field(default_factory=lambda: os.environ.get("GITHUB_RUN_ID"))
    output_file: str | None = Field(
        default_factory=lambda: os.environ.get("GITHUB_OUTPUT")
    )
    api_base_url: str = Field(
        default_factory=lambda: os.environ.get(
            "GITHUB_API_URL", "https://api.github.com"
        )
    )
    check_name: str = "Autograding"
