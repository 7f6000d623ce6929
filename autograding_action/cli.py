"""CLI entry point for the autograding action."""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from autograding_action.definition_loader import (
    DEFAULT_DEFINITION_PATH,
    load_test_definition,
)
from autograding_action.models.result import SuiteResult, format_number
from autograding_action.orchestrator import TestOrchestrator
from autograding_action.reporting.loading import (
    ReporterNotFoundError,
    load_reporter_manifest,
)

EXIT_CONFIG_ERROR = 2

STATUS_SYMBOLS = {
    "passed": "✅",
    "failed": "❌",
}


def log_results_summary(log: logging.Logger, result: SuiteResult) -> None:
    """Log a formatted summary of test outcomes and the score."""
    log.info("=" * 80)
    log.info("Test Results Summary:")
    log.info("=" * 80)

    for outcome in result.outcomes:
        symbol = STATUS_SYMBOLS.get(outcome.status, "?")
        log.info(
            "%s %s: %s (%.2fs)", symbol, outcome.name, outcome.status, outcome.duration
        )
        if outcome.message:
            log.info("  Message: %s", outcome.message.splitlines()[0])

    log.info(
        "Passed %d/%d test(s)",
        len(result.outcomes) - len(result.failed),
        len(result.outcomes),
    )
    if result.score.has_points:
        log.info(
            "Score: %s/%s",
            format_number(result.score.earned_points),
            format_number(result.score.available_points),
        )


def default_reporter() -> str:
    """Pick the GitHub Actions reporter when running inside a workflow."""
    return "github-actions" if os.environ.get("GITHUB_ACTIONS") == "true" else "console"


async def run(
    path: Path,
    config_path: Path = DEFAULT_DEFINITION_PATH,
    reporter_key: str | None = None,
    reporter_config_json: str = "{}",
) -> int:
    """Run the tests of a definition file and return exit code."""
    log = logging.getLogger("autograding_action")
    reporter_key = reporter_key or default_reporter()
    definition_path = config_path if config_path.is_absolute() else path / config_path

    try:
        log.info("Loading test definition: %s", definition_path)
        definition = await load_test_definition(definition_path)

        log.info("Loading reporter: %s", reporter_key)
        manifest = load_reporter_manifest(reporter_key)
        reporter_config = manifest.parse_config(reporter_config_json)
    except (FileNotFoundError, ValueError, ReporterNotFoundError) as e:
        log.error("%s", e)
        return EXIT_CONFIG_ERROR

    async with manifest.open(reporter_config) as reporter:
        orchestrator = TestOrchestrator(reporter=reporter)
        result = await orchestrator.run_all(definition.tests, path)

    log_results_summary(log, result)

    return 0 if result.all_passed else 1


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Run autograding tests and report the score"
    )
    parser.add_argument(
        "--path",
        type=Path,
        default=Path.cwd(),
        help="Working directory the tests run in (default: current directory)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_DEFINITION_PATH,
        help="Test definition file, relative to --path unless absolute",
    )
    parser.add_argument(
        "--reporter",
        default=None,
        help="Reporter key (github-actions, console); detected when omitted",
    )
    parser.add_argument(
        "--reporter-config",
        default="{}",
        help="JSON configuration for the reporter",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level for diagnostic output on stderr",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    exit_code = asyncio.run(
        run(
            path=args.path.resolve(),
            config_path=args.config,
            reporter_key=args.reporter,
            reporter_config_json=args.reporter_config,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
