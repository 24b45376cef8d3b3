import json

import pytest

from perfci.results import ResultSet, parse_results

# ---------------------------------------------------------------------------
# In-memory stand-ins for git and the result store
# ---------------------------------------------------------------------------


def make_record(
    benchmark: str,
    low: float,
    high: float,
    mode: str = "avgt",
    score: float | None = None,
) -> dict:
    """Return one JMH JSON record with the given confidence interval."""
    if score is None:
        score = (low + high) / 2
    return {
        "jmhVersion": "1.37",
        "benchmark": benchmark,
        "mode": mode,
        "threads": 1,
        "forks": 2,
        "jvm": "/usr/lib/jvm/java-11-openjdk/bin/java",
        "jvmArgs": ["-Xmx2g"],
        "jdkVersion": "11.0.20",
        "vmName": "OpenJDK 64-Bit Server VM",
        "vmVersion": "11.0.20+8",
        "primaryMetric": {
            "score": score,
            "scoreError": (high - low) / 2,
            "scoreConfidence": [low, high],
            "scoreUnit": "ms/op",
        },
    }


def make_result_set(commit: str, *records: dict) -> ResultSet:
    return ResultSet(
        commit=commit,
        key=f"jmh-results/jmh-{commit}-2024-01-01T00:00:00.json",
        results=tuple(parse_results(json.dumps(list(records)))),
    )


class FakeAncestry:
    """Parent lookup over a dict of commit -> parents, recording every call."""

    def __init__(self, graph: dict[str, list[str]]) -> None:
        self.graph = graph
        self.calls: list[str] = []

    def get_parents(self, commit: str) -> list[str]:
        self.calls.append(commit)
        return list(self.graph.get(commit, []))


class FakeStore:
    """Result store over a dict of commit -> ResultSet, recording every lookup."""

    def __init__(self, results: dict[str, ResultSet] | None = None) -> None:
        self.results = results or {}
        self.calls: list[str] = []

    def find_results(self, commit: str) -> ResultSet | None:
        self.calls.append(commit)
        return self.results.get(commit)


@pytest.fixture
def record():
    return make_record


@pytest.fixture
def result_set():
    return make_result_set


@pytest.fixture(autouse=True)
def _clean_perfci_env(monkeypatch):
    """Keep CI-provided variables from leaking into tests."""
    for name in (
        "PERFCI_COMMIT",
        "GITHUB_SHA",
        "GITHUB_REF_NAME",
        "PERFCI_MAX_DEPTH",
        "PERFCI_GIT_TIMEOUT",
        "PERFCI_S3_BUCKET",
        "PERFCI_S3_PREFIX",
        "PERFCI_TASKS_PROJECT",
        "PERFCI_TASKS_RUNNER_URL",
        "PERFCI_TASKS_SERVICE_ACCOUNT",
        "PERFCI_TASKS_CLASSES",
    ):
        monkeypatch.delenv(name, raising=False)
