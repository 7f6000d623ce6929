"""Run one test: optional setup, then the graded command, then comparison."""

import logging
import math
import re
import time
from pathlib import Path

from autograding_action.errors import TestError, TestOutputError
from autograding_action.models.definition import ExternalTest, SimpleTest, Test
from autograding_action.process import run_process

log = logging.getLogger(__name__)


def normalize_line_endings(text: str) -> str:
    return text.replace("\r\n", "\n").strip()


async def run_test(test: Test, cwd: Path) -> str:
    """Run a test's setup and run phases under one shared time budget.

    Setup and run share the test's timeout: whatever the setup phase uses is
    no longer available to the graded command.

    Returns:
        Captured stdout of the run phase (empty for external tests)

    """
    timeout_ms = test.timeout_ms
    start = time.perf_counter()
    await run_setup(test, cwd, timeout_ms)
    elapsed_ms = math.floor((time.perf_counter() - start) * 1000)
    return await run_command(test, cwd, timeout_ms - elapsed_ms)


async def run_setup(test: Test, cwd: Path, timeout_ms: int) -> None:
    if not test.setup:
        return

    log.debug("Running setup for %s with %d ms budget", test.name, timeout_ms)
    await run_process(test.setup, cwd=cwd, timeout_ms=timeout_ms, label="Setup")


async def run_command(test: Test, cwd: Path, timeout_ms: int) -> str:
    """Run the graded command and check its output where the test asks for it."""
    log.debug("Running %s with %d ms remaining", test.name, timeout_ms)
    label = f"Test {test.name}"

    match test:
        case ExternalTest():
            await run_process(test.run, cwd=cwd, timeout_ms=timeout_ms, label=label)
            return ""
        case SimpleTest():
            output = await run_process(
                test.run,
                cwd=cwd,
                timeout_ms=timeout_ms,
                input=test.input or None,
                capture=True,
                label=label,
            )
            if not test.output and not test.input:
                return output
            compare_output(test, output)
            return output


def compare_output(test: SimpleTest, output: str) -> None:
    """Check captured output against the expected output.

    Raises:
        TestOutputError: If the output does not satisfy the comparison mode
        TestError: If a regex comparison uses an invalid pattern

    """
    expected = normalize_line_endings(test.output or "")
    actual = normalize_line_endings(output)
    message = f"The output for test {test.name} did not match"

    match test.comparison:
        case "exact":
            if actual != expected:
                raise TestOutputError(message, expected, actual)
        case "regex":
            # The raw expected output is the pattern, not the normalized one.
            pattern = test.output or ""
            try:
                matched = re.search(pattern, actual)
            except re.error as e:
                raise TestError(
                    f"Invalid regular expression for test {test.name}: {e}"
                ) from e
            if matched is None:
                raise TestOutputError(message, pattern, actual)
        case _:
            if expected not in actual:
                raise TestOutputError(message, expected, actual)
