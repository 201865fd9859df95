"""Run state for a single scaffold invocation.

A ``SetupSession`` is created when the process starts, updated by the runner
as each step completes, and discarded when the process exits.  Nothing here
is persisted.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from .errors import StepFailure
from .package_manager import PackageManager


class SessionStatus(str, Enum):
    """Lifecycle of a session.  ``running`` is the only non-terminal state."""
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    ROLLED_BACK = "rolled_back"


class StepResult(BaseModel):
    """A step that finished successfully."""

    name: str
    elapsed: float = Field(default=0.0, ge=0.0, description="Wall-clock seconds")
    detail: str = Field(default="")


class SetupSession(BaseModel):
    """Mutable state of the current run, owned by the runner."""

    package_manager: PackageManager
    project_name: str
    target_dir: Path
    completed_steps: list[StepResult] = Field(default_factory=list)
    status: SessionStatus = SessionStatus.RUNNING
    failed_step: Optional[str] = None
    error: Optional[str] = None
    started_at: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    finished_at: Optional[str] = None

    @property
    def project_dir(self) -> Path:
        return self.target_dir / self.project_name

    @property
    def step_names(self) -> list[str]:
        return [step.name for step in self.completed_steps]

    def record(self, name: str, elapsed: float, detail: str = "") -> StepResult:
        """Append a completed step and return it."""
        result = StepResult(name=name, elapsed=elapsed, detail=detail)
        self.completed_steps.append(result)
        return result

    def mark_succeeded(self) -> None:
        self.status = SessionStatus.SUCCEEDED
        self.finished_at = datetime.now(timezone.utc).isoformat()

    def mark_rolled_back(self, failure: StepFailure) -> None:
        self.status = SessionStatus.ROLLED_BACK
        self.failed_step = failure.step
        self.error = str(failure)
        self.finished_at = datetime.now(timezone.utc).isoformat()

    @property
    def exit_code(self) -> int:
        """Process exit status for this session: 0 only on full success."""
        return 0 if self.status == SessionStatus.SUCCEEDED else 1
