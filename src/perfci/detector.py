"""
Performance regression detection against the nearest benchmarked ancestor.

Given a commit with stored JMH results, the detector walks the commit graph
breadth-first (one ancestry level at a time) until it finds an ancestor that
also has results, then compares benchmarks present in both sets.

Comparison rules are keyed by the baseline's measurement mode:

- ``avgt``: regression when the baseline's confidence interval ends strictly
  below the start of the current one (the intervals do not overlap and the
  current run is slower).
- anything else, ``thrpt`` included: ``UnsupportedModeError``.

A missing current result set or a missing baseline is not a failure; the
pipeline must not be blocked by gaps in benchmark coverage.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .ancestry import ParentLookup
from .errors import ConfigurationError, UnsupportedModeError
from .result_store import ResultStore
from .results import BenchmarkMode, BenchmarkResult, ResultSet

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 10


@dataclass(frozen=True, slots=True)
class Regression:
    """One benchmark that got slower than its baseline."""

    benchmark: str
    baseline_high: float
    current_low: float

    @property
    def message(self) -> str:
        return (
            f"{self.benchmark}: baseline upper bound {self.baseline_high:g} "
            f"< current lower bound {self.current_low:g}"
        )

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class Baseline:
    """Nearest benchmarked ancestor and its distance from the target commit."""

    results: ResultSet
    depth: int

    @property
    def commit(self) -> str:
        return self.results.commit


@dataclass
class DetectionReport:
    """Outcome of one detector run."""

    commit: str
    current: ResultSet | None = None
    baseline: Baseline | None = None
    regressions: list[Regression] = field(default_factory=list)

    @property
    def status(self) -> str:
        if self.current is None:
            return "no-current-results"
        if self.baseline is None:
            return "no-baseline"
        return "regressed" if self.regressions else "passed"

    @property
    def passed(self) -> bool:
        return not self.regressions


def find_baseline(
    commit: str,
    store: ResultStore,
    ancestry: ParentLookup,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Baseline | None:
    """Return the nearest ancestor of *commit* with stored results.

    Each level is the parents of every commit on the previous level, in
    order.  Commits reachable through several branches are queried again;
    lookups are read-only so repeats only cost time.  The first commit with
    results on the shallowest level wins.
    """
    frontier = [commit]
    for depth in range(1, max_depth + 1):
        level: list[str] = []
        for candidate in frontier:
            level.extend(ancestry.get_parents(candidate))

        if not level:
            logger.info("Reached the root of history after %d level(s) without a baseline", depth - 1)
            return None

        logger.debug("Searching %d commit(s) at depth %d", len(level), depth)
        for candidate in level:
            results = store.find_results(candidate)
            if results is not None:
                logger.info("Found baseline %s at depth %d", candidate, depth)
                return Baseline(results=results, depth=depth)

        frontier = level

    logger.info("No baseline within %d level(s) of %s", max_depth, commit)
    return None


def _compare_benchmark(baseline: BenchmarkResult, current: BenchmarkResult) -> Regression | None:
    mode = baseline.known_mode
    if mode is BenchmarkMode.AVERAGE_TIME:
        baseline_high = baseline.primary_metric.high
        current_low = current.primary_metric.low
        if baseline_high < current_low:
            return Regression(
                benchmark=current.benchmark,
                baseline_high=baseline_high,
                current_low=current_low,
            )
        return None

    # Higher-is-better modes need their own rule; none is defined yet
    raise UnsupportedModeError(baseline.benchmark, baseline.mode)


def compare_results(baseline: ResultSet, current: ResultSet) -> list[Regression]:
    """Compare benchmarks present in both sets, in the current set's order."""
    baseline_by_name = baseline.by_name()
    regressions: list[Regression] = []

    for name, result in current.by_name().items():
        previous = baseline_by_name.get(name)
        if previous is None:
            logger.info("%s has no baseline measurement, skipping", name)
            continue

        regression = _compare_benchmark(previous, result)
        if regression is not None:
            logger.warning("Regression: %s", regression.message)
            regressions.append(regression)
        else:
            logger.debug(
                "%s ok: baseline %s, current %s",
                name,
                list(previous.primary_metric.score_confidence),
                list(result.primary_metric.score_confidence),
            )

    return regressions


class RegressionDetector:
    """Ties the result store and ancestry lookup together for one run."""

    def __init__(
        self,
        store: ResultStore,
        ancestry: ParentLookup,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        if max_depth < 1:
            raise ConfigurationError(f"max_depth must be at least 1, got {max_depth}")
        self.store = store
        self.ancestry = ancestry
        self.max_depth = max_depth

    def detect(self, commit: str) -> DetectionReport:
        report = DetectionReport(commit=commit)

        report.current = self.store.find_results(commit)
        if report.current is None:
            logger.info("No results stored for %s, nothing to compare", commit)
            return report

        report.baseline = find_baseline(commit, self.store, self.ancestry, self.max_depth)
        if report.baseline is None:
            return report

        logger.info(
            "Comparing %s (%d benchmarks) against %s (%d benchmarks)",
            commit,
            len(report.current),
            report.baseline.commit,
            len(report.baseline.results),
        )
        report.regressions = compare_results(report.baseline.results, report.current)
        return report

    def detect_regressions(self, commit: str) -> list[Regression]:
        """Return regressions for *commit*; an empty list means the gate passes."""
        return self.detect(commit).regressions
