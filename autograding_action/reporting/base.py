"""Abstract base class for host environment reporters."""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass


@dataclass(kw_only=True)
class Reporter(ABC):
    """Capability set the suite uses to signal results to its host environment.

    Implementations decide how warnings, failures and named outputs reach the
    host (CI annotations, log records, files). The core never talks to the
    host directly.
    """

    @abstractmethod
    def warning(self, message: str) -> None:
        """Report a non-fatal problem."""

    @abstractmethod
    def set_failed(self, message: str) -> None:
        """Report a test failure and mark the run as failed."""

    @abstractmethod
    def set_output(self, name: str, value: str) -> None:
        """Expose a named output value to the host."""

    @contextmanager
    def stop_commands(self) -> Iterator[None]:
        """Suspend host command processing while test output is streamed."""
        yield

    async def publish_score(self, text: str) -> None:
        """Publish the final score summary to the host, if supported."""
