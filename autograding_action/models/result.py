"""Models for test execution results and scoring."""

from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Literal

from pydantic import Field, StrictFloat, StrictInt

from autograding_action.models.base import Model

type Number = int | float
type StrictNumber = StrictInt | StrictFloat


def format_number(value: Number) -> str:
    """Render a point value without a trailing '.0' for whole numbers."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True, kw_only=True)
class TestOutcome:
    """Result of a single test execution."""

    __test__ = False

    name: str
    status: Literal["passed", "failed"]
    duration: float
    output: str | None = None
    message: str | None = None

    @property
    def passed(self) -> bool:
        return self.status == "passed"


@dataclass(frozen=True, kw_only=True)
class ScoreAccumulator:
    """Running point totals for one suite run.

    ``has_points`` distinguishes "no points system used" from "scored zero".
    """

    earned_points: Number = 0
    available_points: Number = 0
    has_points: bool = False

    def add(self, earned: Number = 0, available: Number = 0) -> "ScoreAccumulator":
        """Return a new accumulator with the given points added."""
        return replace(
            self,
            earned_points=self.earned_points + earned,
            available_points=self.available_points + available,
            has_points=True,
        )

    @property
    def value(self) -> str:
        return (
            f"{format_number(self.earned_points)}"
            f"/{format_number(self.available_points)}"
        )

    @property
    def text(self) -> str:
        return f"Points {self.value}"


class ExternalResult(Model):
    """Result artifact written by an external test."""

    score: StrictNumber | None = Field(default=None, description="Points earned")
    max_score: StrictNumber | None = Field(
        default=None, description="Points available"
    )
    execution_time: Number | None = Field(
        default=None, description="Self-reported execution time"
    )


@dataclass(frozen=True, kw_only=True)
class SuiteResult:
    """Outcome of a whole suite run."""

    outcomes: Sequence[TestOutcome]
    score: ScoreAccumulator

    @property
    def failed(self) -> Sequence[TestOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.passed]

    @property
    def all_passed(self) -> bool:
        return not self.failed
