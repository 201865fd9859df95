"""Exceptions shared across next-scaffold."""

from __future__ import annotations

from typing import Optional


class StepFailure(Exception):
    """Raised when any scaffold step fails.

    Every subprocess that exits non-zero and every failed file operation is
    reported through this one type; the runner treats all of them as fatal.
    """

    def __init__(
        self,
        step: str,
        message: str,
        command: Optional[list[str]] = None,
        returncode: Optional[int] = None,
    ) -> None:
        self.step = step
        self.command = command
        self.returncode = returncode
        super().__init__(f"{step}: {message}")


class GitError(Exception):
    """Raised when a git command fails.  *command* is the argv as executed."""

    def __init__(self, message: str, command: Optional[list[str]] = None, stderr: str = ""):
        self.command = list(command or [])
        self.stderr = stderr
        super().__init__(message)
