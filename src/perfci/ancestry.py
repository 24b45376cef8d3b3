from __future__ import annotations

"""Commit ancestry lookups.

The detector only needs one capability from version control: the immediate
parents of a commit.  ``ParentLookup`` describes that capability so tests can
substitute an in-memory graph for the git subprocess.
"""

import logging
import subprocess
from pathlib import Path
from typing import Protocol

from .errors import ToolInvocationError

__all__ = [
    "ParentLookup",
    "GitAncestry",
]

logger = logging.getLogger(__name__)


class ParentLookup(Protocol):
    """Anything that can answer "what are the parents of this commit?"."""

    def get_parents(self, commit: str) -> list[str]:
        """Return immediate parent ids in order; empty for a root commit."""


class GitAncestry:
    """Parent lookup backed by the ``git`` command line."""

    def __init__(
        self,
        git_path: str = "git",
        repo_dir: str | Path | None = None,
        timeout: int | None = 30,
    ) -> None:
        self.git_path = git_path
        self.repo_dir = Path(repo_dir) if repo_dir is not None else None
        self.timeout = timeout

    def _command(self, commit: str) -> list[str]:
        return [self.git_path, "show", "--no-patch", "--format=%P", commit]

    def get_parents(self, commit: str) -> list[str]:
        cmd = self._command(commit)
        try:
            completed = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                cwd=self.repo_dir,
            )
        except FileNotFoundError as e:
            raise ToolInvocationError(cmd, stderr=f"{self.git_path} not found in PATH") from e
        except subprocess.TimeoutExpired as e:
            raise ToolInvocationError(cmd, stderr=f"timed out after {self.timeout}s") from e

        # git prints warnings on stderr even with exit 0; either is a failure here
        if completed.returncode != 0 or completed.stderr.strip():
            raise ToolInvocationError(cmd, completed.returncode, completed.stderr)

        parents = [token.strip() for token in completed.stdout.split() if token.strip()]
        logger.debug("Parents of %s: %s", commit, parents or "none (root commit)")
        return parents
