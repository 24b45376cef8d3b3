"""Shared utilities for CLI commands."""

import logging
import sys

import click

from ..ancestry import GitAncestry
from ..config import DetectorConfig, StorageConfig, commit_from_environment
from ..detector import RegressionDetector
from ..result_store import build_result_store

logger = logging.getLogger(__name__)


def handle_generic_error(command_name: str, error: Exception) -> None:
    """Handle generic command errors with consistent formatting."""
    click.echo(f"❌ {command_name} failed: {error}", err=True)
    sys.exit(1)


def handle_keyboard_interrupt(command_name: str) -> None:
    """Handle keyboard interrupt with consistent formatting."""
    click.echo(f"\n⏹️  {command_name} interrupted by user", err=True)
    sys.exit(1)


def resolve_commit(commit: str | None) -> str | None:
    """Return the commit from the command line or the environment.

    A missing commit is not an error: the caller should log it and exit 0.
    """
    if commit and commit.strip():
        return commit.strip()
    return commit_from_environment()


def skip_missing_commit(command_name: str) -> None:
    """Log and report that no commit was supplied; the step succeeds."""
    logger.info("%s: no commit supplied, nothing to do", command_name)
    click.echo("⏭️  No commit given (--commit, PERFCI_COMMIT or GITHUB_SHA); skipping")


def build_detector(max_depth: int | None = None) -> RegressionDetector:
    """Build a detector wired to S3 and the local git checkout."""
    detector_config = DetectorConfig()
    store = build_result_store(StorageConfig())
    ancestry = GitAncestry(
        git_path=detector_config.GIT_PATH,
        repo_dir=detector_config.REPO_DIR,
        timeout=detector_config.GIT_TIMEOUT,
    )
    depth = max_depth if max_depth is not None else detector_config.MAX_DEPTH
    return RegressionDetector(store, ancestry, max_depth=depth)
