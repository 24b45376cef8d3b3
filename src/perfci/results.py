"""JMH result records as loaded from the result store.

The documents are the JSON array JMH writes with ``-rf json``::

    [
      {
        "benchmark": "benchmark.SimpleQueryBenchmark.benchMarkSimpleQueriesThroughput",
        "mode": "thrpt",
        "threads": 1,
        "forks": 2,
        "jvm": "/usr/lib/jvm/java-11/bin/java",
        "jvmArgs": [],
        "jdkVersion": "11.0.16",
        "vmName": "OpenJDK 64-Bit Server VM",
        "vmVersion": "11.0.16+8",
        "primaryMetric": {
          "score": 1234.5,
          "scoreError": 12.3,
          "scoreConfidence": [1222.2, 1246.8],
          "scoreUnit": "ops/s"
        }
      }
    ]

Records are immutable once parsed; nothing is ever written back.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from .errors import ResultFormatError

__all__ = [
    "BenchmarkMode",
    "PrimaryMetric",
    "BenchmarkResult",
    "ResultSet",
    "parse_results",
]


class BenchmarkMode(str, Enum):
    """JMH measurement modes, keyed by the short names JMH serialises."""

    AVERAGE_TIME = "avgt"
    THROUGHPUT = "thrpt"
    SAMPLE_TIME = "sample"
    SINGLE_SHOT_TIME = "ss"

    @classmethod
    def from_label(cls, label: str) -> "BenchmarkMode | None":
        """Return the matching mode, or *None* for labels JMH may add later."""
        try:
            return cls(label)
        except ValueError:
            return None


class PrimaryMetric(BaseModel):
    """Point estimate plus error bounds for one benchmark."""

    score: float
    score_error: float = Field(default=math.nan, alias="scoreError")
    score_confidence: tuple[float, float] = Field(alias="scoreConfidence")
    score_unit: str | None = Field(default=None, alias="scoreUnit")

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    @field_validator("score_error", mode="before")
    @classmethod
    def _missing_error_is_nan(cls, value: Any) -> Any:
        # JMH writes "NaN" (or nothing) for the error of single-fork runs
        if value is None:
            return math.nan
        if isinstance(value, str):
            return float(value)
        return value

    @field_validator("score_confidence")
    @classmethod
    def _ordered_interval(cls, value: tuple[float, float]) -> tuple[float, float]:
        if value[0] > value[1]:
            raise ValueError(f"confidence interval low {value[0]} exceeds high {value[1]}")
        return value

    @property
    def low(self) -> float:
        return self.score_confidence[0]

    @property
    def high(self) -> float:
        return self.score_confidence[1]


class BenchmarkResult(BaseModel):
    """One measured benchmark from a JMH run.

    Keys not declared here (``jmhVersion``, ``secondaryMetrics``, ...) are
    kept as extras.
    """

    benchmark: str = Field(min_length=1)
    mode: str
    threads: int = Field(default=1, ge=1)
    forks: int = Field(default=1, ge=0)
    primary_metric: PrimaryMetric = Field(alias="primaryMetric")
    jvm: str = ""
    jvm_args: tuple[str, ...] = Field(default=(), alias="jvmArgs")
    jdk_version: str = Field(default="", alias="jdkVersion")
    vm_name: str = Field(default="", alias="vmName")
    vm_version: str = Field(default="", alias="vmVersion")
    params: dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    @property
    def known_mode(self) -> BenchmarkMode | None:
        return BenchmarkMode.from_label(self.mode)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BenchmarkResult":
        """Validate one element of a JMH JSON array."""
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ResultFormatError(_describe(e, "Benchmark record is invalid")) from e


@dataclass(frozen=True, slots=True)
class ResultSet:
    """All benchmark results captured for one commit."""

    commit: str
    key: str
    results: tuple[BenchmarkResult, ...]

    def by_name(self) -> dict[str, BenchmarkResult]:
        """Index results by benchmark name; later duplicates overwrite earlier ones."""
        return {result.benchmark: result for result in self.results}

    def __len__(self) -> int:
        return len(self.results)


_DOCUMENT = TypeAdapter(list[BenchmarkResult])


def _describe(error: ValidationError, heading: str) -> str:
    problems = "; ".join(
        f"{'.'.join(str(part) for part in item['loc']) or '<document>'}: {item['msg']}"
        for item in error.errors()
    )
    return f"{heading}: {problems}"


def parse_results(text: str | bytes) -> list[BenchmarkResult]:
    """Parse a JMH JSON document into benchmark records (in document order)."""
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise ResultFormatError(f"Result document is not valid JSON: {e}") from e

    try:
        return _DOCUMENT.validate_python(raw)
    except ValidationError as e:
        raise ResultFormatError(
            _describe(e, "Result document is not a JSON array of valid benchmark records")
        ) from e
