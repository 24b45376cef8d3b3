"""perfci - CI glue for the JMH performance-testing pipeline."""

__version__: str = "0.1.0"
__author__: str = "perfci maintainers"

# Public re-exports for convenience ---------------------------------------------------

from .ancestry import GitAncestry, ParentLookup
from .detector import (
    Baseline,
    DetectionReport,
    Regression,
    RegressionDetector,
    compare_results,
    find_baseline,
)
from .errors import (
    AmbiguousResultError,
    ConfigurationError,
    PerfCIError,
    RegressionsDetected,
    ResultFormatError,
    ToolInvocationError,
    UnsupportedModeError,
)
from .result_store import ResultStore, S3ResultStore
from .results import BenchmarkMode, BenchmarkResult, PrimaryMetric, ResultSet, parse_results
