"""Models for test definitions loaded from autograding.json files."""

import math
from collections.abc import Sequence
from typing import Annotated, Any, Literal

from pydantic import AliasChoices, Discriminator, Field, Tag, field_validator

from autograding_action.models.base import Model

DEFAULT_RESULT_FILE = "autograde.json"
DEFAULT_TIMEOUT_MINUTES = 1
FALLBACK_TIMEOUT_MS = 30_000

type TestComparison = Literal["exact", "included", "regex"]


class TestBase(Model):
    """Fields shared by every test variant."""

    __test__ = False

    name: str = Field(..., description="Human-readable test name")
    setup: str | None = Field(
        default=None, description="Shell command run before the graded command"
    )
    run: str = Field(..., description="Shell command being graded")
    timeout: float | None = Field(
        default=None,
        validation_alias=AliasChoices("timeout", "timeoutMinutes"),
        description="Timeout in minutes shared by setup and run",
    )

    @field_validator("timeout", mode="before")
    @classmethod
    def _coerce_timeout(cls, value: Any) -> float | None:
        """Treat anything that is not a finite number as unset."""
        if isinstance(value, bool):
            return None
        try:
            minutes = float(value)
        except (TypeError, ValueError):
            return None
        return minutes if math.isfinite(minutes) else None

    @property
    def timeout_ms(self) -> int:
        """Total time budget for the setup and run phases, in milliseconds."""
        return round((self.timeout or DEFAULT_TIMEOUT_MINUTES) * 60 * 1000) or (
            FALLBACK_TIMEOUT_MS
        )


class SimpleTest(TestBase):
    """Test judged by comparing captured stdout against an expected string."""

    __test__ = False

    type: Literal["simple"] = "simple"
    points: int | float | None = Field(
        default=None, ge=0, description="Points awarded when the test passes"
    )
    input: str | None = Field(
        default=None, description="Text piped to the command's standard input"
    )
    output: str | None = Field(default=None, description="Expected output")
    comparison: TestComparison | None = Field(
        default=None, description="Comparison mode, 'included' when unset"
    )

    @field_validator("type", mode="before")
    @classmethod
    def _default_type(cls, value: Any) -> Any:
        """An explicit null or empty type is a simple test."""
        return value or "simple"


class ExternalTest(TestBase):
    """Test whose score is reported through a JSON file written by the command."""

    __test__ = False

    type: Literal["external"]
    result_file: str | None = Field(
        default=None,
        alias="resultFile",
        description=f"Result file path, '{DEFAULT_RESULT_FILE}' when unset",
    )
    keep_result_file: bool | None = Field(
        default=None,
        alias="keepResultFile",
        description="Keep the result file after reading it",
    )

    @property
    def resolved_result_file(self) -> str:
        """Result file path with the default applied."""
        return self.result_file or DEFAULT_RESULT_FILE


def _test_type(value: Any) -> str:
    """Return the variant tag, defaulting to 'simple' for untyped tests."""
    if isinstance(value, dict):
        return value.get("type") or "simple"
    return getattr(value, "type", "simple")


Test = Annotated[
    Annotated[SimpleTest, Tag("simple")] | Annotated[ExternalTest, Tag("external")],
    Discriminator(_test_type),
]


class TestDefinition(Model):
    """Complete test definition loaded from autograding.json."""

    __test__ = False

    tests: Sequence[Test] = Field(default_factory=list, description="List of tests")
