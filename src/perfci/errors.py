"""Exception types raised by perfci.

Every error propagates to the CLI unchanged; nothing in the package retries
or recovers locally.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:  # pragma: no cover
    from .detector import Regression


class PerfCIError(Exception):
    """Base class for all perfci failures."""


class ConfigurationError(PerfCIError):
    """A required setting is missing or invalid."""


class ResultFormatError(PerfCIError):
    """A stored result document does not match the JMH JSON layout."""


class AmbiguousResultError(PerfCIError):
    """The result store holds zero-or-one files per commit; this was violated."""

    def __init__(self, commit: str, count: int | None, keys: Sequence[str] = ()) -> None:
        self.commit = commit
        self.count = count
        self.keys = list(keys)
        shown = ", ".join(self.keys) if self.keys else "none listed"
        super().__init__(
            f"Expected at most one result file for commit {commit}, "
            f"listing reported {count if count is not None else 'no count'} ({shown})"
        )


class ToolInvocationError(PerfCIError):
    """An external command exited non-zero or wrote to stderr."""

    def __init__(
        self,
        cmd: Sequence[str],
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        self.cmd = list(cmd)
        self.returncode = returncode
        self.stderr = stderr
        message = f"{' '.join(self.cmd)} failed"
        if returncode is not None:
            message += f" (exit {returncode})"
        if stderr.strip():
            message += f".\n\nSTDERR:\n{stderr.strip()}"
        super().__init__(message)


class UnsupportedModeError(PerfCIError):
    """No comparison rule exists for a benchmark's measurement mode."""

    def __init__(self, benchmark: str, mode: str) -> None:
        self.benchmark = benchmark
        self.mode = mode
        super().__init__(f"Comparing mode '{mode}' is not supported (benchmark {benchmark})")


class RegressionsDetected(PerfCIError):
    """Terminal signal used to fail the CI step."""

    def __init__(self, regressions: Sequence["Regression"]) -> None:
        self.regressions = list(regressions)
        super().__init__(f"{len(self.regressions)} performance regression(s) detected")
