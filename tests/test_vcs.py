"""Unit tests for git finalisation (next_scaffold.vcs).

Tests cover:
- Command order and the single initial commit
- Branch rename to the configured branch
- Failure mapping to StepFailure
- Missing project directory
"""

from __future__ import annotations

from pathlib import Path

import pytest

from next_scaffold.errors import GitError, StepFailure
from next_scaffold.vcs import GitFinalizer, _run_git


MESSAGE = "Initial commit: Next.js 15 + Dark MUI + tRPC + NextAuth + Prisma"


class TestGitFinalizer:
    @pytest.mark.unit
    async def test_runs_commands_in_order(self, tmp_path: Path, make_runner):
        runner = make_runner()
        branch = await GitFinalizer(tmp_path, MESSAGE, runner=runner).finalize()

        assert branch == "main"
        assert runner.commands == [
            ["git", "init"],
            ["git", "add", "."],
            ["git", "commit", "-m", MESSAGE],
            ["git", "branch", "-M", "main"],
        ]
        assert all(cwd == tmp_path for _, cwd in runner.calls)

    @pytest.mark.unit
    async def test_exactly_one_commit(self, tmp_path: Path, make_runner):
        runner = make_runner()
        await GitFinalizer(tmp_path, MESSAGE, runner=runner).finalize()
        assert runner.count("git", "commit") == 1

    @pytest.mark.unit
    async def test_custom_branch(self, tmp_path: Path, make_runner):
        runner = make_runner()
        branch = await GitFinalizer(tmp_path, MESSAGE, branch="trunk", runner=runner).finalize()
        assert branch == "trunk"
        assert runner.commands[-1] == ["git", "branch", "-M", "trunk"]

    @pytest.mark.unit
    async def test_failed_commit_raises_step_failure(self, tmp_path: Path, make_runner):
        runner = make_runner(fail_on=lambda argv: argv[1] == "commit", returncode=128)
        with pytest.raises(StepFailure) as exc_info:
            await GitFinalizer(tmp_path, MESSAGE, runner=runner).finalize(step="git")

        assert exc_info.value.step == "git"
        assert "exit 128" in str(exc_info.value)
        assert exc_info.value.command == ["git", "commit", "-m", MESSAGE]
        # Nothing runs after the failing command.
        assert runner.commands[-1][:2] == ["git", "commit"]

    @pytest.mark.unit
    async def test_missing_directory(self, tmp_path: Path, make_runner):
        runner = make_runner()
        with pytest.raises(StepFailure, match="not found"):
            await GitFinalizer(tmp_path / "gone", MESSAGE, runner=runner).finalize()
        assert runner.calls == []


class TestGitError:
    @pytest.mark.unit
    async def test_carries_argv(self, tmp_path: Path, make_runner):
        runner = make_runner(fail_on=lambda argv: True)
        with pytest.raises(GitError) as exc_info:
            await _run_git("commit", "-m", "two words", cwd=tmp_path, runner=runner)
        assert exc_info.value.command == ["git", "commit", "-m", "two words"]
