"""Scaffold runner.

Drives the fixed sequence of setup steps for one project.  The first failure
stops the sequence and hands control to the rollback handler; there is no
partial success.
"""

from __future__ import annotations

import asyncio
import os
import sys
import time
from pathlib import Path
from typing import Callable, Optional

from pydantic import ValidationError

from .config import ScaffoldConfig
from .errors import StepFailure
from .package_manager import CommandDispatcher, PackageManager, prompt_package_manager
from .rollback import RollbackHandler
from .scaffolder import ProjectGenerator
from .session import SessionStatus, SetupSession
from .utils import (
    CommandRunner,
    console,
    format_duration,
    missing_tools,
    print_banner,
    print_error,
    print_info,
    print_step,
    print_success,
    print_summary_table,
    print_warning,
    registry_reachable,
    run_command,
)
from .vcs import GitFinalizer


class ScaffoldRunner:
    """Runs every setup step in order and rolls back on the first failure.

    Attributes:
        config: Immutable configuration for this run.
        session: Mutable run state; the value returned by :meth:`run`.
        dispatcher: Package-manager command dispatcher bound to the project.
        generator: Directory and template writer.
        rollback: Cleanup handler, triggered at most once.
    """

    # (step name, method, progress message)
    _STEPS: list[tuple[str, str, str]] = [
        ("preflight", "step_preflight", "Running preflight checks"),
        ("generate", "step_generate", "Scaffolding Next.js app with create-next-app"),
        ("directories", "step_directories", "Ensuring folder structure"),
        ("templates", "step_templates", "Writing source, test and config templates"),
        ("dependencies", "step_dependencies", "Installing major dependencies"),
        ("dev-dependencies", "step_dev_dependencies", "Installing dev dependencies"),
        ("test-dependencies", "step_test_dependencies", "Installing test frameworks"),
        ("dedupe", "step_dedupe", "Deduplicating dependencies"),
        ("prisma-generate", "step_prisma_generate", "Generating Prisma client"),
        ("documents", "step_documents", "Writing LICENSE, README and community docs"),
        ("git", "step_git", "Initializing git repository"),
    ]

    def __init__(
        self,
        config: ScaffoldConfig,
        package_manager: PackageManager,
        runner: CommandRunner = run_command,
    ) -> None:
        self.config = config
        self.session = SetupSession(
            package_manager=package_manager,
            project_name=config.project_name,
            target_dir=config.target_dir,
        )
        self.project_dir = config.project_dir
        self.dispatcher = CommandDispatcher(package_manager, self.project_dir, runner)
        self.generator = ProjectGenerator(config, package_manager)
        self.git = GitFinalizer(
            self.project_dir,
            config.commit_message,
            branch=config.default_branch,
            runner=runner,
        )
        self.rollback = RollbackHandler(self.project_dir, package_manager, runner)
        # Set once this run may have created the project directory; before
        # that a failure must not touch anything on disk.
        self._owns_project_dir = False

    @property
    def package_manager(self) -> PackageManager:
        return self.session.package_manager

    # ------------------------------------------------------------------
    # Sequencing
    # ------------------------------------------------------------------

    async def run(self) -> SetupSession:
        """Execute every step; return the session in a terminal state."""
        print_banner(
            "next-scaffold",
            {
                "Project": self.config.project_name,
                "Target": str(self.project_dir.resolve()),
                "Manager": self.package_manager.value,
            },
        )
        run_start = time.monotonic()
        total = len(self._STEPS)

        for index, (name, method_name, message) in enumerate(self._STEPS, start=1):
            print_step(f"Step {index}/{total}: {message}...")
            step_start = time.monotonic()
            try:
                detail = await getattr(self, method_name)()
            except StepFailure as exc:
                await self._fail(exc)
                return self.session
            except asyncio.CancelledError:
                await self._fail(StepFailure(name, "interrupted"))
                raise
            except Exception as exc:
                await self._fail(StepFailure(name, f"{type(exc).__name__}: {exc}"))
                return self.session

            elapsed = time.monotonic() - step_start
            self.session.record(name, elapsed, detail or "")
            print_success(f"Step {index}/{total} completed ({format_duration(elapsed)}).")

        self.session.mark_succeeded()
        self._print_final_summary(time.monotonic() - run_start)
        return self.session

    async def _fail(self, failure: StepFailure) -> None:
        print_error(str(failure))
        if self._owns_project_dir:
            await self.rollback.rollback()
        else:
            print_warning("  Nothing was created; existing files are left untouched.")
        self.session.mark_rolled_back(failure)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def step_preflight(self) -> str:
        """Check tools, the target directory and (optionally) the registry."""
        needed = ["npx", "git", self.package_manager.value]
        missing = missing_tools(sorted(set(needed)))
        if missing:
            raise StepFailure("preflight", f"Required tools not found on PATH: {', '.join(missing)}")

        if self.project_dir.exists():
            if any(self.project_dir.iterdir()):
                raise StepFailure(
                    "preflight",
                    f"{self.project_dir} already exists and is not empty.",
                )
            # Pre-existing empty directory: rollback empties it but keeps it.
            self.rollback.keep_project_dir = True

        if self.config.check_registry:
            if await registry_reachable(self.config.registry_url):
                console.print(f"  [green]+[/green] Registry reachable: {self.config.registry_url}")
            else:
                print_warning(
                    f"  Registry {self.config.registry_url} is not reachable -- "
                    "dependency installation will probably fail."
                )
        return "tools found"

    async def step_generate(self) -> str:
        await asyncio.to_thread(self.config.target_dir.mkdir, parents=True, exist_ok=True)
        self._owns_project_dir = True
        await self.dispatcher.create_app(
            self.config.project_name,
            self.config.generator_package,
            self.config.generator_flags,
            step="generate",
        )
        return self.config.generator_package

    async def step_directories(self) -> str:
        created = await self.generator.create_directory_structure(self.project_dir)
        return f"{len(created)} directories"

    async def step_templates(self) -> str:
        written = await self.generator.write_templates(self.project_dir)
        return f"{len(written)} files"

    async def step_dependencies(self) -> str:
        await self.dispatcher.add(self.config.dependencies, step="dependencies")
        return f"{len(self.config.dependencies)} packages"

    async def step_dev_dependencies(self) -> str:
        await self.dispatcher.add(self.config.dev_dependencies, dev=True, step="dev-dependencies")
        return f"{len(self.config.dev_dependencies)} packages"

    async def step_test_dependencies(self) -> str:
        await self.dispatcher.add(self.config.test_dependencies, dev=True, step="test-dependencies")
        return f"{len(self.config.test_dependencies)} packages"

    async def step_dedupe(self) -> str:
        ran = await self.dispatcher.dedupe(step="dedupe")
        return "deduplicated" if ran else "not needed"

    async def step_prisma_generate(self) -> str:
        await self.dispatcher.exec("prisma", "generate", step="prisma-generate")
        return "client generated"

    async def step_documents(self) -> str:
        written = await self.generator.write_documents(self.project_dir)
        return ", ".join(path.name for path in written)

    async def step_git(self) -> str:
        branch = await self.git.finalize(step="git")
        return f"committed on {branch}"

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def _print_final_summary(self, total_elapsed: float) -> None:
        rows = {
            step.name: f"{format_duration(step.elapsed)}  {step.detail}".rstrip()
            for step in self.session.completed_steps
        }
        rows["total"] = format_duration(total_elapsed)
        print_summary_table(rows, title="Scaffold Results")

        print_success("Setup complete.")
        print_info("1. Optionally create a GitHub repo: https://github.com/new")
        print_info(
            f"2. git remote add origin {self.config.repo_url} && "
            f"git push -u origin {self.config.default_branch}"
        )
        print_info(f"3. cd {self.config.project_name} && {self.package_manager.run_prefix} dev")


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def load_config() -> ScaffoldConfig:
    """Read the config file named by ``NEXT_SCAFFOLD_CONFIG``, else the environment."""
    config_path = os.environ.get("NEXT_SCAFFOLD_CONFIG")
    if config_path:
        return ScaffoldConfig.load(Path(config_path))
    return ScaffoldConfig.from_env()


def main(
    argv: Optional[list[str]] = None,
    read_line: Optional[Callable[[], str]] = None,
) -> None:
    """CLI entry point for ``next-scaffold`` / ``python -m next_scaffold``."""
    import argparse

    parser = argparse.ArgumentParser(
        prog="next-scaffold",
        description="Scaffold a Next.js 15 app with tRPC, NextAuth, Prisma and dark-mode MUI.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Configuration comes from NEXT_SCAFFOLD_* environment variables, or\n"
            "from the JSON file named by NEXT_SCAFFOLD_CONFIG.\n"
            "Examples:\n"
            "  next-scaffold\n"
            "  NEXT_SCAFFOLD_PROJECT_NAME=my-app NEXT_SCAFFOLD_TARGET_DIR=~/code next-scaffold\n"
        ),
    )
    parser.parse_args(argv)

    try:
        config = load_config()
    except (ValidationError, OSError) as exc:
        console.print(f"[bold red]Error:[/bold red] Invalid configuration: {exc}")
        sys.exit(1)

    package_manager = prompt_package_manager(config.default_package_manager, read_line)
    runner = ScaffoldRunner(config, package_manager)

    try:
        session = asyncio.run(runner.run())
    except KeyboardInterrupt:
        console.print("[bold red]Interrupted.[/bold red]")
        sys.exit(1)

    if session.status is SessionStatus.SUCCEEDED:
        console.print("[bold green]Scaffold completed successfully![/bold green]")
    else:
        console.print("[bold red]Scaffold failed; changes were rolled back.[/bold red]")
    sys.exit(session.exit_code)


if __name__ == "__main__":
    main()
