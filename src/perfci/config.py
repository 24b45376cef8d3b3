"""Configuration settings for perfci.

Each section is a dataclass with defaults that can be overridden through
``PERFCI_*`` environment variables, applied in ``__post_init__``.
"""

import os
from dataclasses import dataclass, field

from .errors import ConfigurationError

# Environment variables consulted, in order, for the commit under test
COMMIT_ENV_VARS: tuple[str, ...] = ("PERFCI_COMMIT", "GITHUB_SHA")


def _apply_env_overrides(config: object, overrides: dict[str, str]) -> None:
    """Set *config* attributes from non-empty environment variables.

    The attribute's current type decides how the string is converted.
    """
    for attr_name, env_var_name in overrides.items():
        env_value = os.getenv(env_var_name)
        if not env_value:
            continue
        current = getattr(config, attr_name)
        if isinstance(current, bool):
            setattr(config, attr_name, env_value.strip().lower() in {"1", "true", "yes"})
        elif isinstance(current, int):
            try:
                setattr(config, attr_name, int(env_value))
            except ValueError as e:
                raise ConfigurationError(
                    f"{env_var_name} must be an integer, got {env_value!r}"
                ) from e
        elif isinstance(current, tuple):
            setattr(config, attr_name, tuple(p.strip() for p in env_value.split(",") if p.strip()))
        else:
            setattr(config, attr_name, env_value)


@dataclass
class StorageConfig:
    """Where JMH result documents live."""

    # Bucket holding the result documents
    # Override with: PERFCI_S3_BUCKET
    BUCKET: str = "graphql-java-jmh-results"

    # Key prefix; the commit id is appended to form the lookup prefix
    # Override with: PERFCI_S3_PREFIX
    PREFIX: str = "jmh-results/jmh-"

    # Override with: PERFCI_S3_REGION
    REGION: str | None = None

    # Custom endpoint (e.g. a local S3-compatible server)
    # Override with: PERFCI_S3_ENDPOINT
    ENDPOINT_URL: str | None = None

    def __post_init__(self) -> None:
        _apply_env_overrides(
            self,
            {
                "BUCKET": "PERFCI_S3_BUCKET",
                "PREFIX": "PERFCI_S3_PREFIX",
                "REGION": "PERFCI_S3_REGION",
                "ENDPOINT_URL": "PERFCI_S3_ENDPOINT",
            },
        )


@dataclass
class DetectorConfig:
    """Baseline search and ancestry lookup settings."""

    # Number of ancestry levels searched for a baseline before giving up
    # Override with: PERFCI_MAX_DEPTH
    MAX_DEPTH: int = 10

    # Path to git executable
    # Override with: PERFCI_GIT_PATH
    GIT_PATH: str = "git"

    # Working tree to run git in; None means the current directory
    # Override with: PERFCI_REPO_DIR
    REPO_DIR: str | None = None

    # Seconds before a git query is abandoned
    # Override with: PERFCI_GIT_TIMEOUT
    GIT_TIMEOUT: int = 30

    def __post_init__(self) -> None:
        _apply_env_overrides(
            self,
            {
                "MAX_DEPTH": "PERFCI_MAX_DEPTH",
                "GIT_PATH": "PERFCI_GIT_PATH",
                "REPO_DIR": "PERFCI_REPO_DIR",
                "GIT_TIMEOUT": "PERFCI_GIT_TIMEOUT",
            },
        )

        if self.MAX_DEPTH < 1:
            raise ConfigurationError(f"MAX_DEPTH must be at least 1, got {self.MAX_DEPTH}")
        if self.GIT_TIMEOUT <= 0:
            raise ConfigurationError(f"GIT_TIMEOUT must be positive, got {self.GIT_TIMEOUT}")


@dataclass
class TaskQueueConfig:
    """Cloud Tasks queue that feeds the benchmark runner."""

    # Override with: PERFCI_TASKS_PROJECT
    PROJECT: str = ""

    # Override with: PERFCI_TASKS_LOCATION
    LOCATION: str = "us-central1"

    # Override with: PERFCI_TASKS_QUEUE
    QUEUE: str = "test-runner-queue"

    # HTTP endpoint of the benchmark runner the task is delivered to
    # Override with: PERFCI_TASKS_RUNNER_URL
    RUNNER_URL: str = ""

    # Service account used to mint the OIDC token; empty disables auth
    # Override with: PERFCI_TASKS_SERVICE_ACCOUNT
    SERVICE_ACCOUNT_EMAIL: str = ""

    # Benchmark include patterns sent when none are given on the command line
    # Override with: PERFCI_TASKS_CLASSES (comma separated)
    DEFAULT_CLASSES: tuple[str, ...] = field(
        default_factory=lambda: ("benchmark.*", "performance.*")
    )

    def __post_init__(self) -> None:
        _apply_env_overrides(
            self,
            {
                "PROJECT": "PERFCI_TASKS_PROJECT",
                "LOCATION": "PERFCI_TASKS_LOCATION",
                "QUEUE": "PERFCI_TASKS_QUEUE",
                "RUNNER_URL": "PERFCI_TASKS_RUNNER_URL",
                "SERVICE_ACCOUNT_EMAIL": "PERFCI_TASKS_SERVICE_ACCOUNT",
                "DEFAULT_CLASSES": "PERFCI_TASKS_CLASSES",
            },
        )


def commit_from_environment() -> str | None:
    """Return the first non-empty commit id found in ``COMMIT_ENV_VARS``."""
    for name in COMMIT_ENV_VARS:
        value = os.getenv(name, "").strip()
        if value:
            return value
    return None
