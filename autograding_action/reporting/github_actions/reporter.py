"""GitHub Actions reporter implementation."""

import logging
import re
import sys
import uuid
from collections.abc import AsyncGenerator, Iterator, Mapping
from contextlib import asynccontextmanager, contextmanager
from dataclasses import dataclass, field
from typing import Any

import aiohttp

from autograding_action.reporting.base import Reporter
from autograding_action.reporting.github_actions.config import GitHubActionsConfig
from autograding_action.reporting.github_actions.models import (
    CheckRun,
    CheckRunsResponse,
    WorkflowRun,
)

log = logging.getLogger(__name__)

CHECK_SUITE_ID_PATTERN = re.compile(r"(\d+)$")


def escape_data(value: str) -> str:
    """Escape a workflow command message."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    """Escape a workflow command property value."""
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


def format_command(
    command: str, message: str, properties: Mapping[str, str] | None = None
) -> str:
    """Format a workflow command line, e.g. ``::warning::message``."""
    props = ",".join(
        f"{key}={escape_property(value)}" for key, value in (properties or {}).items()
    )
    head = f"{command} {props}" if props else command
    return f"::{head}::{escape_data(message)}"


@dataclass(kw_only=True)
class GitHubActionsReporter(Reporter):
    """Report to the GitHub Actions runner through workflow commands.

    Commands issued while command processing is stopped would be ignored by
    the runner, so they are held back and issued once processing resumes.
    """

    config: GitHubActionsConfig
    session: aiohttp.ClientSession = field(repr=False)
    failed: bool = field(default=False, init=False)
    _pending: list[str] | None = field(default=None, init=False, repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: GitHubActionsConfig
    ) -> AsyncGenerator["GitHubActionsReporter", None]:
        """Create reporter with managed session lifecycle."""
        headers = {"Accept": "application/vnd.github+json"}
        if config.token is not None:
            headers["Authorization"] = f"Bearer {config.token.get_secret_value()}"
        async with aiohttp.ClientSession(headers=headers) as session:
            yield cls(config=config, session=session)

    def warning(self, message: str) -> None:
        self._issue(format_command("warning", message))

    def set_failed(self, message: str) -> None:
        self.failed = True
        self._issue(format_command("error", message))

    def set_output(self, name: str, value: str) -> None:
        if not self.config.output_file:
            self._issue(format_command("set-output", value, {"name": name}))
            return

        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        with open(self.config.output_file, "a", encoding="utf-8") as output_file:
            output_file.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")

    @contextmanager
    def stop_commands(self) -> Iterator[None]:
        """Stop command processing with a fresh, unguessable resume token."""
        token = str(uuid.uuid4())
        self._write("")
        self._write(f"::stop-commands::{token}")
        self._write("")
        self._pending = []
        try:
            yield
        finally:
            pending, self._pending = self._pending, None
            self._write("")
            self._write(f"::{token}::")
            for line in pending:
                self._write(line)

    async def publish_score(self, text: str) -> None:
        """Attach the score summary to this job's check run."""
        if self.config.token is None or not (
            self.config.repository and self.config.run_id
        ):
            log.info("Check run not updated: token, repository or run id not set")
            return

        check_suite_id = await self.get_check_suite_id()
        check_run = await self.find_check_run(check_suite_id)
        if check_run is None:
            log.info(
                "No unique '%s' check run found in check suite %d",
                self.config.check_name,
                check_suite_id,
            )
            return

        await self.update_check_run(check_run.id, text)

    async def get_check_suite_id(self) -> int:
        """Look up the check suite of the current workflow run."""
        url = self._url(f"/actions/runs/{self.config.run_id}")
        async with self.session.get(url) as response:
            if response.status != 200:
                text = await response.text()
                raise RuntimeError(
                    f"Failed to get workflow run: {response.status} {text}"
                )
            data = await response.json()

        run = WorkflowRun.model_validate(data)
        if (match := CHECK_SUITE_ID_PATTERN.search(run.check_suite_url)) is None:
            raise RuntimeError(f"Unexpected check suite URL: {run.check_suite_url}")
        return int(match.group(1))

    async def find_check_run(self, check_suite_id: int) -> CheckRun | None:
        """Find the check run named after the autograding job."""
        url = self._url(f"/check-suites/{check_suite_id}/check-runs")
        params = {"check_name": self.config.check_name}
        async with self.session.get(url, params=params) as response:
            if response.status != 200:
                text = await response.text()
                raise RuntimeError(
                    f"Failed to list check runs: {response.status} {text}"
                )
            data = await response.json()

        runs_response = CheckRunsResponse.model_validate(data)
        if runs_response.total_count != 1 or not runs_response.check_runs:
            return None
        return runs_response.check_runs[0]

    async def update_check_run(self, check_run_id: int, text: str) -> None:
        """Replace the check run output with the score summary."""
        url = self._url(f"/check-runs/{check_run_id}")
        payload: dict[str, Any] = {
            "output": {
                "title": self.config.check_name,
                "summary": text,
                "text": text,
                "annotations": [
                    {
                        "path": ".github",
                        "start_line": 1,
                        "end_line": 1,
                        "annotation_level": "notice",
                        "message": text,
                        "title": f"{self.config.check_name} complete",
                    }
                ],
            }
        }

        log.info("Updating check run %d with score summary", check_run_id)
        async with self.session.patch(url, json=payload) as response:
            if response.status != 200:
                body = await response.text()
                raise RuntimeError(
                    f"Failed to update check run: {response.status} {body}"
                )

    def _url(self, path: str) -> str:
        base = self.config.api_base_url.rstrip("/")
        return f"{base}/repos/{self.config.repository}{path}"

    def _issue(self, line: str) -> None:
        if self._pending is not None:
            self._pending.append(line)
        else:
            self._write(line)

    def _write(self, line: str) -> None:
        sys.stdout.write(line + "\n")
        sys.stdout.flush()
