"""Console reporter for running outside a CI host."""

import json
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path

from autograding_action.reporting.base import Reporter
from autograding_action.reporting.console.config import ConsoleConfig

log = logging.getLogger(__name__)


@dataclass(kw_only=True)
class ConsoleReporter(Reporter):
    """Report warnings and failures as log records and keep outputs in memory."""

    config: ConsoleConfig = field(default_factory=ConsoleConfig)
    failures: list[str] = field(default_factory=list)
    outputs: dict[str, str] = field(default_factory=dict)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: ConsoleConfig
    ) -> AsyncGenerator["ConsoleReporter", None]:
        """Create reporter and write collected outputs on exit."""
        reporter = cls(config=config)
        try:
            yield reporter
        finally:
            if config.outputs_file and reporter.outputs:
                Path(config.outputs_file).write_text(
                    json.dumps(reporter.outputs, indent=2), encoding="utf-8"
                )

    def warning(self, message: str) -> None:
        log.warning("%s", message)

    def set_failed(self, message: str) -> None:
        self.failures.append(message)
        log.error("%s", message)

    def set_output(self, name: str, value: str) -> None:
        log.info("Output %s=%s", name, value)
        self.outputs[name] = value
