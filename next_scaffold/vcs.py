"""Git finalisation for a freshly scaffolded project.

Initialises the repository, stages every generated file, records exactly one
commit and renames the branch.
"""

from __future__ import annotations

from pathlib import Path

from rich.panel import Panel

from .errors import GitError, StepFailure
from .utils import CommandRunner, console, run_command


async def _run_git(
    *args: str,
    cwd: str | Path,
    runner: CommandRunner = run_command,
) -> tuple[str, str]:
    """Run a git command and return (stdout, stderr).

    Raises GitError if the command exits with a non-zero code.
    """
    cmd = ["git", *args]
    cmd_str = " ".join(cmd)

    returncode, stdout, stderr = await runner(cmd, cwd=cwd, capture=True)
    if returncode != 0:
        raise GitError(
            f"Git command failed (exit {returncode}): {cmd_str}\n{stderr}",
            command=cmd,
            stderr=stderr,
        )
    return stdout, stderr


class GitFinalizer:
    """Creates the initial commit of a generated project."""

    def __init__(
        self,
        repo_path: str | Path,
        commit_message: str,
        branch: str = "main",
        runner: CommandRunner = run_command,
    ) -> None:
        self.repo_path = Path(repo_path)
        self.commit_message = commit_message
        self.branch = branch
        self.runner = runner

    async def finalize(self, step: str = "git") -> str:
        """Run init / add / commit / branch rename.

        Returns:
            The branch name the commit ends up on.

        Raises:
            StepFailure: If the project directory is missing or any git
                command fails.
        """
        if not self.repo_path.is_dir():
            raise StepFailure(step, f"Project directory not found: {self.repo_path}")

        try:
            await _run_git("init", cwd=self.repo_path, runner=self.runner)
            await _run_git("add", ".", cwd=self.repo_path, runner=self.runner)
            await _run_git(
                "commit", "-m", self.commit_message, cwd=self.repo_path, runner=self.runner
            )
            await _run_git("branch", "-M", self.branch, cwd=self.repo_path, runner=self.runner)
        except GitError as exc:
            raise StepFailure(step, str(exc), command=exc.command) from exc

        console.print(
            Panel(
                f"[green]Repository initialised[/green]\n"
                f"  Path:   {self.repo_path}\n"
                f"  Branch: {self.branch}\n"
                f"  Commit: {self.commit_message}",
                title="Git Ready",
                border_style="green",
            )
        )
        return self.branch
