"""Tests for perfci.ancestry module."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from perfci.ancestry import GitAncestry
from perfci.errors import ToolInvocationError


def _completed(stdout: str = "", stderr: str = "", returncode: int = 0) -> MagicMock:
    completed = MagicMock()
    completed.stdout = stdout
    completed.stderr = stderr
    completed.returncode = returncode
    return completed


class TestGitAncestry:
    """Tests for the git-backed parent lookup."""

    @patch("perfci.ancestry.subprocess.run")
    def test_single_parent(self, mock_run):
        mock_run.return_value = _completed("def456\n")

        assert GitAncestry().get_parents("abc123") == ["def456"]

        mock_run.assert_called_once_with(
            ["git", "show", "--no-patch", "--format=%P", "abc123"],
            capture_output=True,
            text=True,
            timeout=30,
            cwd=None,
        )

    @patch("perfci.ancestry.subprocess.run")
    def test_merge_commit_parents_are_trimmed(self, mock_run):
        mock_run.return_value = _completed("  p1   p2 \n")

        assert GitAncestry().get_parents("merge") == ["p1", "p2"]

    @patch("perfci.ancestry.subprocess.run")
    def test_root_commit_has_no_parents(self, mock_run):
        mock_run.return_value = _completed("\n")

        assert GitAncestry().get_parents("root") == []

    @patch("perfci.ancestry.subprocess.run")
    def test_custom_git_and_repo_dir(self, mock_run, tmp_path):
        mock_run.return_value = _completed("p1\n")

        GitAncestry(git_path="/opt/git/bin/git", repo_dir=tmp_path, timeout=5).get_parents("c")

        args, kwargs = mock_run.call_args
        assert args[0][0] == "/opt/git/bin/git"
        assert kwargs["cwd"] == tmp_path
        assert kwargs["timeout"] == 5

    @patch("perfci.ancestry.subprocess.run")
    def test_non_zero_exit_raises(self, mock_run):
        mock_run.return_value = _completed(
            stderr="fatal: ambiguous argument 'nope'", returncode=128
        )

        with pytest.raises(ToolInvocationError, match="exit 128") as excinfo:
            GitAncestry().get_parents("nope")

        assert excinfo.value.returncode == 128
        assert "ambiguous argument" in excinfo.value.stderr

    @patch("perfci.ancestry.subprocess.run")
    def test_stderr_output_raises_even_on_success(self, mock_run):
        mock_run.return_value = _completed(stdout="p1\n", stderr="warning: something odd\n")

        with pytest.raises(ToolInvocationError, match="something odd"):
            GitAncestry().get_parents("abc")

    @patch("perfci.ancestry.subprocess.run")
    def test_missing_git_binary(self, mock_run):
        mock_run.side_effect = FileNotFoundError()

        with pytest.raises(ToolInvocationError, match="not found in PATH"):
            GitAncestry(git_path="missing-git").get_parents("abc")

    @patch("perfci.ancestry.subprocess.run")
    def test_timeout(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="git", timeout=30)

        with pytest.raises(ToolInvocationError, match="timed out"):
            GitAncestry().get_parents("abc")
