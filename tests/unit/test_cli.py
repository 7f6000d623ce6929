"""Tests for CLI module."""

import json
import logging
from pathlib import Path

import pytest

from autograding_action.cli import (
    EXIT_CONFIG_ERROR,
    default_reporter,
    log_results_summary,
    run,
)
from autograding_action.models.result import ScoreAccumulator, SuiteResult, TestOutcome


def write_definition(path: Path, tests: list[dict[str, object]]) -> Path:
    """Write an autograding.json into the default location."""
    definition = path / ".github" / "classroom" / "autograding.json"
    definition.parent.mkdir(parents=True)
    definition.write_text(json.dumps({"tests": tests}))
    return definition


def test_log_results_summary(caplog: pytest.LogCaptureFixture) -> None:
    """Logs each outcome with its symbol and the score."""
    result = SuiteResult(
        outcomes=[
            TestOutcome(name="first", status="passed", duration=1.5),
            TestOutcome(
                name="second",
                status="failed",
                duration=0.25,
                message="Error: Exit with code: 1 and signal: None\nmore",
            ),
        ],
        score=ScoreAccumulator(earned_points=1, available_points=2, has_points=True),
    )

    with caplog.at_level(logging.INFO):
        log_results_summary(logging.getLogger(), result)

    assert "Test Results Summary:" in caplog.text
    assert "✅ first: passed (1.50s)" in caplog.text
    assert "❌ second: failed (0.25s)" in caplog.text
    assert "Message: Error: Exit with code: 1 and signal: None" in caplog.text
    assert "more" not in caplog.text
    assert "Passed 1/2 test(s)" in caplog.text
    assert "Score: 1/2" in caplog.text


def test_log_results_summary_without_points(caplog: pytest.LogCaptureFixture) -> None:
    """Omits the score when no points were used."""
    result = SuiteResult(outcomes=[], score=ScoreAccumulator())

    with caplog.at_level(logging.INFO):
        log_results_summary(logging.getLogger(), result)

    assert "Score:" not in caplog.text


@pytest.mark.parametrize(
    ("env", "expected"),
    [("true", "github-actions"), ("", "console")],
)
def test_default_reporter(
    monkeypatch: pytest.MonkeyPatch, env: str, expected: str
) -> None:
    """Detects GitHub Actions from the environment."""
    monkeypatch.setenv("GITHUB_ACTIONS", env)

    assert default_reporter() == expected


async def test_run_returns_zero_when_all_pass(tmp_path: Path) -> None:
    """Returns 0 when every test passes."""
    write_definition(tmp_path, [{"name": "echo", "run": "echo hi", "output": "hi"}])

    exit_code = await run(path=tmp_path, reporter_key="console")

    assert exit_code == 0


async def test_run_returns_one_on_failure(tmp_path: Path) -> None:
    """Returns 1 when any test fails."""
    write_definition(
        tmp_path,
        [
            {"name": "broken", "run": "exit 1"},
            {"name": "fine", "run": "true"},
        ],
    )

    exit_code = await run(path=tmp_path, reporter_key="console")

    assert exit_code == 1


async def test_run_with_custom_config_path(tmp_path: Path) -> None:
    """Loads the definition from an explicit path."""
    config = tmp_path / "tests.json"
    config.write_text(json.dumps({"tests": [{"name": "ok", "run": "true"}]}))

    exit_code = await run(
        path=tmp_path, config_path=Path("tests.json"), reporter_key="console"
    )

    assert exit_code == 0


async def test_run_writes_outputs_with_reporter_config(tmp_path: Path) -> None:
    """Passes the reporter configuration to the reporter."""
    write_definition(tmp_path, [{"name": "ok", "run": "true", "points": 4}])
    outputs_file = tmp_path / "outputs.json"

    exit_code = await run(
        path=tmp_path,
        reporter_key="console",
        reporter_config_json=json.dumps({"outputs_file": str(outputs_file)}),
    )

    assert exit_code == 0
    assert json.loads(outputs_file.read_text()) == {"Points": "4/4"}


async def test_run_missing_definition(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    """Returns the configuration error code for a missing definition."""
    with caplog.at_level(logging.ERROR):
        exit_code = await run(path=tmp_path, reporter_key="console")

    assert exit_code == EXIT_CONFIG_ERROR
    assert "Test file not found" in caplog.text


async def test_run_unknown_reporter(tmp_path: Path) -> None:
    """Returns the configuration error code for an unknown reporter."""
    write_definition(tmp_path, [{"name": "ok", "run": "true"}])

    exit_code = await run(path=tmp_path, reporter_key="carrier-pigeon")

    assert exit_code == EXIT_CONFIG_ERROR


async def test_run_invalid_reporter_config(tmp_path: Path) -> None:
    """Returns the configuration error code for malformed reporter config."""
    write_definition(tmp_path, [{"name": "ok", "run": "true"}])

    exit_code = await run(
        path=tmp_path, reporter_key="console", reporter_config_json="{oops"
    )

    assert exit_code == EXIT_CONFIG_ERROR


async def test_run_reporter_config_not_an_object(tmp_path: Path) -> None:
    """A JSON reporter config that is not an object is a configuration error."""
    write_definition(tmp_path, [{"name": "ok", "run": "true"}])

    exit_code = await run(
        path=tmp_path, reporter_key="console", reporter_config_json="[1]"
    )

    assert exit_code == EXIT_CONFIG_ERROR
