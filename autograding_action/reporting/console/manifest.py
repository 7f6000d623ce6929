"""Console reporter manifest."""

from autograding_action.reporting.console.config import ConsoleConfig
from autograding_action.reporting.console.reporter import ConsoleReporter
from autograding_action.reporting.manifest import ReporterManifest

console_manifest = ReporterManifest(
    config_cls=ConsoleConfig,
    reporter_factory=ConsoleReporter.from_config,
)
