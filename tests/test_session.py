"""Unit tests for SetupSession (next_scaffold.session)."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from next_scaffold.errors import StepFailure
from next_scaffold.package_manager import PackageManager
from next_scaffold.session import SessionStatus, SetupSession, StepResult


@pytest.fixture
def session(tmp_path: Path) -> SetupSession:
    return SetupSession(
        package_manager=PackageManager.PNPM,
        project_name="demo-app",
        target_dir=tmp_path,
    )


class TestSetupSession:
    @pytest.mark.unit
    def test_starts_running(self, session: SetupSession):
        assert session.status is SessionStatus.RUNNING
        assert session.completed_steps == []
        assert session.finished_at is None
        assert session.exit_code == 1

    @pytest.mark.unit
    def test_project_dir(self, session: SetupSession, tmp_path: Path):
        assert session.project_dir == tmp_path / "demo-app"

    @pytest.mark.unit
    def test_record_keeps_order(self, session: SetupSession):
        session.record("generate", 1.5)
        session.record("templates", 0.2, detail="16 files")
        assert session.step_names == ["generate", "templates"]
        assert session.completed_steps[1].detail == "16 files"

    @pytest.mark.unit
    def test_mark_succeeded(self, session: SetupSession):
        session.mark_succeeded()
        assert session.status is SessionStatus.SUCCEEDED
        assert session.exit_code == 0
        assert session.finished_at is not None

    @pytest.mark.unit
    def test_mark_rolled_back(self, session: SetupSession):
        session.mark_rolled_back(StepFailure("dependencies", "yarn add exited with status 1"))
        assert session.status is SessionStatus.ROLLED_BACK
        assert session.failed_step == "dependencies"
        assert session.error == "dependencies: yarn add exited with status 1"
        assert session.exit_code == 1


class TestStepResult:
    @pytest.mark.unit
    def test_negative_elapsed_rejected(self):
        with pytest.raises(ValidationError):
            StepResult(name="git", elapsed=-1.0)
