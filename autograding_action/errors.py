"""Errors raised while running a single test."""


class TestError(Exception):
    """Generic test failure."""

    __test__ = False


class TestExitError(TestError):
    """The command ran but exited with a non-zero code or from a signal."""

    def __init__(
        self, message: str, code: int | None = None, signal: str | None = None
    ) -> None:
        super().__init__(message)
        self.code = code
        self.signal = signal


class TestTimeoutError(TestError):
    """The command exceeded its wall-clock budget and was killed."""


class TestOutputError(TestError):
    """The command succeeded but its output did not satisfy the comparison."""

    def __init__(self, message: str, expected: str, actual: str) -> None:
        super().__init__(f"{message}\nExpected:\n{expected}\nActual:\n{actual}")
        self.expected = expected
        self.actual = actual
