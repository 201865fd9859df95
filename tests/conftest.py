"""Shared pytest fixtures for the next-scaffold test suite.

Provides reusable fixtures for:
- Temporary target directories and configs that never touch the network
- A recording fake for the async command runner
- Tool discovery stubs so runner tests do not depend on node/git being installed
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Optional

import pytest

from next_scaffold.config import ScaffoldConfig


# ---------------------------------------------------------------------------
# Fake command runner
# ---------------------------------------------------------------------------


class FakeRunner:
    """Async stand-in for ``run_command`` that records every invocation.

    Args:
        fail_on: Predicate over the argv; matching commands return
            *returncode* instead of 0.
        returncode: Exit status reported for failing commands.
        side_effect: Optional hook called with ``(argv, cwd)`` before the
            result is returned, e.g. to create files a real tool would.
    """

    def __init__(
        self,
        fail_on: Optional[Callable[[list[str]], bool]] = None,
        returncode: int = 1,
        side_effect: Optional[Callable[[list[str], Optional[Path]], None]] = None,
    ) -> None:
        self.fail_on = fail_on
        self.returncode = returncode
        self.side_effect = side_effect
        self.calls: list[tuple[list[str], Optional[Path]]] = []

    async def __call__(self, cmd, cwd=None, **kwargs) -> tuple[int, str, str]:
        argv = list(cmd)
        workdir = Path(cwd) if cwd else None
        self.calls.append((argv, workdir))
        if self.side_effect is not None:
            self.side_effect(argv, workdir)
        if self.fail_on is not None and self.fail_on(argv):
            return (self.returncode, "", f"{argv[0]} failed")
        return (0, "", "")

    @property
    def commands(self) -> list[list[str]]:
        return [argv for argv, _ in self.calls]

    def count(self, *prefix: str) -> int:
        """Number of recorded commands starting with *prefix*."""
        n = len(prefix)
        return sum(1 for argv in self.commands if tuple(argv[:n]) == prefix)


@pytest.fixture
def fake_runner() -> FakeRunner:
    """A FakeRunner on which every command succeeds."""
    return FakeRunner()


# ---------------------------------------------------------------------------
# Paths & configs
# ---------------------------------------------------------------------------


@pytest.fixture
def target_dir(tmp_path: Path) -> Path:
    """Parent directory the scaffold creates its project in."""
    path = tmp_path / "workspace"
    path.mkdir()
    return path


@pytest.fixture
def scaffold_config(target_dir: Path) -> ScaffoldConfig:
    """Offline config rooted at ``target_dir``."""
    return ScaffoldConfig(
        project_name="demo-app",
        author_name="Ada Lovelace",
        author_email="ada@example.com",
        author_url="https://ada.example.com",
        github_user="ada",
        target_dir=target_dir,
        check_registry=False,
    )


@pytest.fixture
def project_dir(scaffold_config: ScaffoldConfig) -> Path:
    """The (not yet created) project directory of ``scaffold_config``."""
    return scaffold_config.project_dir


@pytest.fixture
def tools_available(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pretend npx, git and every package manager are on PATH."""
    monkeypatch.setattr("next_scaffold.runner.missing_tools", lambda tools: [])


@pytest.fixture
def make_runner() -> type[FakeRunner]:
    """The FakeRunner class, for tests that need failing commands."""
    return FakeRunner
