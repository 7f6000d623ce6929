"""Read score artifacts written by external tests."""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from autograding_action.models.definition import DEFAULT_RESULT_FILE, ExternalTest
from autograding_action.models.result import ExternalResult, ScoreAccumulator
from autograding_action.reporting.base import Reporter

log = logging.getLogger(__name__)


def resolve_result_file(test: ExternalTest, cwd: Path) -> Path:
    """Result file location, relative paths taken from the working directory."""
    return cwd / test.resolved_result_file


def check_stale_result_file(test: ExternalTest, cwd: Path, reporter: Reporter) -> None:
    """Warn when a result file is already present before the test runs."""
    path = resolve_result_file(test, cwd)
    if path.exists():
        reporter.warning(
            f"Result file {test.resolved_result_file} already exists at start of "
            "test run"
        )


def ingest_result_file(
    test: ExternalTest, cwd: Path, reporter: Reporter, score: ScoreAccumulator
) -> ScoreAccumulator:
    """Add an external test's reported score to the running totals.

    Reading problems are reported as warnings and never raise; the score is
    then returned unchanged.
    """
    result_file = test.resolved_result_file
    path = resolve_result_file(test, cwd)

    try:
        result = ExternalResult.model_validate(
            json.loads(path.read_text(encoding="utf-8"))
        )
        if result.score is not None and result.max_score is not None:
            log.info(
                "Result file %s reports %s/%s",
                result_file,
                result.score,
                result.max_score,
            )
            score = score.add(result.score, result.max_score)
        if result.execution_time is not None:
            log.info(
                "Test %s reported execution time %s", test.name, result.execution_time
            )

        if test.keep_result_file is None:
            reporter.warning(
                'Please explicitly set "keepResultFile: false" in autograding.json'
            )
        if test.keep_result_file is True and result_file == DEFAULT_RESULT_FILE:
            reporter.warning("Keeping result file with default filename; are you sure?")
        if test.keep_result_file is not True:
            path.unlink(missing_ok=True)
    except (OSError, ValueError, ValidationError) as e:
        reporter.warning(f"Error reading {result_file}: {e}")

    return score
