"""Console reporter module."""

from autograding_action.reporting.console.config import ConsoleConfig
from autograding_action.reporting.console.manifest import console_manifest
from autograding_action.reporting.console.reporter import ConsoleReporter

__all__ = ["ConsoleConfig", "ConsoleReporter", "console_manifest"]
