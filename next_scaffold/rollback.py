"""Best-effort cleanup after a failed scaffold run.

The handler has two states, ``running`` and ``failed``.  The first call to
:meth:`RollbackHandler.rollback` moves it to ``failed`` and performs the
cleanup; later calls do nothing.  No cleanup action is allowed to stop the
ones after it.
"""

from __future__ import annotations

import asyncio
import shutil
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from .package_manager import (
    LOCKFILE_PRECEDENCE,
    Operation,
    PackageManager,
    commands_for,
)
from .utils import CommandRunner, print_error, print_step, print_success, print_warning, run_command

# Dependency and build-output directories removed before the project itself.
BUILD_ARTIFACTS: tuple[str, ...] = ("node_modules", ".next")


class RollbackState(str, Enum):
    RUNNING = "running"
    FAILED = "failed"


class RollbackReport(BaseModel):
    """What the cleanup actually did."""

    lockfile: Optional[str] = None
    cache_cleaned: bool = False
    removed: list[str] = Field(default_factory=list)
    project_removed: bool = False
    warnings: list[str] = Field(default_factory=list)


def detect_lockfile(
    project_dir: Path,
    preferred: Optional[PackageManager] = None,
) -> Optional[PackageManager]:
    """Return the manager whose lockfile is present in *project_dir*.

    When several lockfiles exist the *preferred* manager wins, then the
    fixed :data:`LOCKFILE_PRECEDENCE` order applies.
    """
    order = list(LOCKFILE_PRECEDENCE)
    if preferred is not None:
        order.remove(preferred)
        order.insert(0, preferred)
    for manager in order:
        if (project_dir / manager.lockfile).is_file():
            return manager
    return None


class RollbackHandler:
    """Reverts the filesystem and cache changes of a failed run."""

    def __init__(
        self,
        project_dir: str | Path,
        package_manager: Optional[PackageManager] = None,
        runner: CommandRunner = run_command,
        keep_project_dir: bool = False,
    ) -> None:
        self.project_dir = Path(project_dir)
        self.package_manager = package_manager
        self.runner = runner
        self.keep_project_dir = keep_project_dir
        self.state = RollbackState.RUNNING
        self.report: Optional[RollbackReport] = None

    @property
    def triggered(self) -> bool:
        return self.state is RollbackState.FAILED

    async def rollback(self) -> RollbackReport:
        """Clean up once; return the report of the first (and only) cleanup."""
        if self.triggered and self.report is not None:
            return self.report
        self.state = RollbackState.FAILED
        self.report = RollbackReport()

        print_error("An error occurred. Rolling back changes...")
        if not self.project_dir.is_dir():
            print_warning(f"  Nothing to remove: {self.project_dir} does not exist.")
            return self.report

        await self._clean_lockfile(self.report)
        await self._remove_artifacts(self.report)
        await self._remove_project(self.report)
        return self.report

    # ------------------------------------------------------------------
    # Cleanup actions
    # ------------------------------------------------------------------

    async def _clean_lockfile(self, report: RollbackReport) -> None:
        manager = detect_lockfile(self.project_dir, self.package_manager)
        if manager is None:
            return
        report.lockfile = manager.lockfile

        for argv in commands_for(manager, Operation.CACHE_CLEAN):
            print_step(f"Cleaning {manager.value} cache...")
            try:
                returncode, _, stderr = await self.runner(argv, cwd=self.project_dir)
            except OSError as exc:
                returncode, stderr = 127, str(exc)
            if returncode == 0:
                report.cache_cleaned = True
            else:
                self._warn(report, f"`{' '.join(argv)}` exited with status {returncode} {stderr}".rstrip())

        try:
            (self.project_dir / manager.lockfile).unlink(missing_ok=True)
        except OSError as exc:
            self._warn(report, f"Could not delete {manager.lockfile}: {exc}")

    async def _remove_artifacts(self, report: RollbackReport) -> None:
        for name in BUILD_ARTIFACTS:
            path = self.project_dir / name
            if not path.exists():
                continue
            try:
                await asyncio.to_thread(shutil.rmtree, path)
                report.removed.append(name)
            except OSError as exc:
                self._warn(report, f"Could not remove {name}: {exc}")

    async def _remove_project(self, report: RollbackReport) -> None:
        if self.keep_project_dir:
            await self._empty_project(report)
            return
        try:
            await asyncio.to_thread(shutil.rmtree, self.project_dir)
        except OSError as exc:
            self._warn(report, f"Could not delete {self.project_dir}: {exc}")
            return
        report.project_removed = True
        print_success(f"Deleted project directory '{self.project_dir.name}'.")

    async def _empty_project(self, report: RollbackReport) -> None:
        """Remove everything inside a directory that existed before the run."""
        for child in sorted(self.project_dir.iterdir()):
            try:
                if child.is_dir() and not child.is_symlink():
                    await asyncio.to_thread(shutil.rmtree, child)
                else:
                    child.unlink()
            except OSError as exc:
                self._warn(report, f"Could not remove {child.name}: {exc}")
        print_success(f"Emptied pre-existing project directory '{self.project_dir.name}'.")

    @staticmethod
    def _warn(report: RollbackReport, message: str) -> None:
        report.warnings.append(message)
        print_warning(f"  {message}")
