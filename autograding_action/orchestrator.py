"""Suite orchestrator running tests sequentially and aggregating the score."""

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from autograding_action.executor import run_test
from autograding_action.ingestor import check_stale_result_file, ingest_result_file
from autograding_action.models.definition import ExternalTest, SimpleTest, Test
from autograding_action.models.result import ScoreAccumulator, SuiteResult, TestOutcome
from autograding_action.reporting.base import Reporter

log = logging.getLogger(__name__)

console = Console(highlight=False, soft_wrap=True, emoji=False)

CELEBRATION = "✨🌟💖💎🦄💎💖🌟✨🌟💖💎🦄💎💖🌟✨"


@dataclass(frozen=True, kw_only=True)
class TestOrchestrator:
    """Runs a list of tests in order inside one working directory.

    A failing test is reported and the suite moves on to the next one; tests
    never run concurrently since later tests may rely on files left behind by
    earlier ones.
    """

    __test__ = False

    reporter: Reporter

    async def run_all(self, tests: Sequence[Test], cwd: Path) -> SuiteResult:
        """Run all tests and report the outcome and score to the host.

        Args:
            tests: Tests in declaration order
            cwd: Working directory for every command

        Returns:
            Per-test outcomes and the final score

        """
        log.info("Running %d test(s) in %s", len(tests), cwd)
        score = ScoreAccumulator()
        outcomes: list[TestOutcome] = []

        with self.reporter.stop_commands():
            for test in tests:
                outcome, score = await self._run_test(test, cwd, score)
                outcomes.append(outcome)

        result = SuiteResult(outcomes=outcomes, score=score)
        await self._report_summary(result)
        return result

    async def _run_test(
        self, test: Test, cwd: Path, score: ScoreAccumulator
    ) -> tuple[TestOutcome, ScoreAccumulator]:
        """Run one test, returning its outcome and the updated score."""
        if isinstance(test, ExternalTest):
            check_stale_result_file(test, cwd, self.reporter)

        console.print(f"[cyan]📝 {escape(test.name)}[/cyan]")
        console.print()

        points = test.points if isinstance(test, SimpleTest) else None
        if points:
            score = score.add(available=points)

        start = time.perf_counter()
        try:
            output = await run_test(test, cwd)
        except Exception as e:
            message = str(e) or f"Failed to run test '{test.name}'"
            outcome = TestOutcome(
                name=test.name,
                status="failed",
                duration=time.perf_counter() - start,
                message=message,
            )
            console.print()
            console.print(f"[red]❌ {escape(test.name)}[/red]")
            self.reporter.set_failed(message)
        else:
            if points:
                score = score.add(earned=points)
            outcome = TestOutcome(
                name=test.name,
                status="passed",
                duration=time.perf_counter() - start,
                output=output if isinstance(test, SimpleTest) else None,
            )
            console.print()
            console.print(f"[green]✅ {escape(test.name)}[/green]")
            console.print()

        # Ingestion runs whatever the outcome: a failing external test may
        # still report partial credit.
        if isinstance(test, ExternalTest):
            score = ingest_result_file(test, cwd, self.reporter, score)

        log.info(
            "Test completed: name=%s status=%s duration=%.2fs",
            outcome.name,
            outcome.status,
            outcome.duration,
        )
        return outcome, score

    async def _report_summary(self, result: SuiteResult) -> None:
        if result.all_passed:
            console.print()
            console.print("[green]All tests passed[/green]")
            console.print()
            console.print(CELEBRATION)
            console.print()
        else:
            log.info(
                "%d of %d test(s) failed", len(result.failed), len(result.outcomes)
            )

        if not result.score.has_points:
            return

        score = result.score
        console.print(f"[bold black on cyan]{score.text}[/]")
        self.reporter.set_output("Points", score.value)
        try:
            await self.reporter.publish_score(score.text)
        except Exception as e:
            log.warning("Publishing score failed", exc_info=e)
            self.reporter.warning(f"Failed to publish score: {e}")
