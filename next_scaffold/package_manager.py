"""Package-manager selection and command dispatch.

The scaffold supports three JavaScript package managers.  Every step that
touches dependencies asks the :class:`CommandDispatcher` for the
manager-specific invocation of a logical operation instead of spelling the
command out itself.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from enum import Enum
from pathlib import Path

from .errors import StepFailure
from .utils import CommandRunner, console, print_error, print_info, print_step, run_command


class PackageManager(str, Enum):
    """Supported package managers."""
    YARN = "yarn"
    PNPM = "pnpm"
    NPM = "npm"

    @property
    def lockfile(self) -> str:
        """File name of the lockfile this manager writes."""
        return _LOCKFILES[self]

    @property
    def run_prefix(self) -> str:
        """How a ``package.json`` script is invoked (``yarn dev``, ``npm run dev``)."""
        return "npm run" if self is PackageManager.NPM else self.value

    @property
    def create_app_flag(self) -> str:
        """Flag telling create-next-app which manager to bootstrap with."""
        return f"--use-{self.value}"


_LOCKFILES: dict[PackageManager, str] = {
    PackageManager.YARN: "yarn.lock",
    PackageManager.PNPM: "pnpm-lock.yaml",
    PackageManager.NPM: "package-lock.json",
}

DEFAULT_PACKAGE_MANAGER = PackageManager.YARN

# Fixed order used when more than one lockfile is present.
LOCKFILE_PRECEDENCE: tuple[PackageManager, ...] = (
    PackageManager.YARN,
    PackageManager.PNPM,
    PackageManager.NPM,
)


class Operation(str, Enum):
    """Logical operations the dispatcher knows how to translate."""
    INSTALL = "install"
    ADD = "add"
    ADD_DEV = "add-dev"
    DEDUPE = "dedupe"
    EXEC = "exec"
    CACHE_CLEAN = "cache-clean"


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------


def select_package_manager(
    raw: str | None,
    default: PackageManager = DEFAULT_PACKAGE_MANAGER,
) -> PackageManager:
    """Normalise a user answer to a :class:`PackageManager`.

    Blank input selects *default*.  Matching is case-insensitive and ignores
    surrounding whitespace.  Anything unrecognised prints a warning and also
    selects *default*; it never raises.
    """
    answer = (raw or "").strip().lower()
    if not answer:
        return default
    try:
        return PackageManager(answer)
    except ValueError:
        print_error(f"Invalid selection '{raw.strip()}'. Defaulting to '{default.value}'.")
        return default


def prompt_package_manager(
    default: PackageManager = DEFAULT_PACKAGE_MANAGER,
    read_line: Callable[[], str] | None = None,
) -> PackageManager:
    """Ask once for a package manager and return the selection.

    Args:
        default: Manager used for a blank or invalid answer.
        read_line: Source of the answer; defaults to reading one line from
            the terminal.  End-of-input counts as a blank answer.
    """
    choices = " / ".join(pm.value for pm in PackageManager)
    print_info(f"Select a package manager: [{choices}] (default: {default.value})")
    reader = read_line or (lambda: console.input("> "))
    try:
        raw = reader()
    except EOFError:
        raw = ""
    return select_package_manager(raw, default)


# ---------------------------------------------------------------------------
# Command mapping
# ---------------------------------------------------------------------------


def commands_for(
    manager: PackageManager,
    operation: Operation,
    args: Sequence[str] = (),
) -> list[list[str]]:
    """Translate a logical operation into the argv list(s) to execute.

    Most operations map to exactly one command.  Deduplication is the
    exception: yarn needs a helper package installed and then run through
    ``npx``, and pnpm needs nothing at all, so an empty list is returned.
    """
    pm = manager.value
    extra = list(args)

    if operation is Operation.INSTALL:
        return [[pm, "install"]]

    if operation in (Operation.ADD, Operation.ADD_DEV):
        verb = "install" if manager is PackageManager.NPM else "add"
        dev_flag = ["-D"] if operation is Operation.ADD_DEV else []
        return [[pm, verb, *dev_flag, *extra]]

    if operation is Operation.DEDUPE:
        if manager is PackageManager.YARN:
            return [
                ["yarn", "add", "-D", "yarn-deduplicate"],
                ["npx", "yarn-deduplicate"],
            ]
        if manager is PackageManager.NPM:
            return [["npm", "dedupe"]]
        return []

    if operation is Operation.EXEC:
        if manager is PackageManager.NPM:
            return [["npx", *extra]]
        if manager is PackageManager.PNPM:
            return [["pnpm", "exec", *extra]]
        return [["yarn", *extra]]

    if operation is Operation.CACHE_CLEAN:
        if manager is PackageManager.YARN:
            return [["yarn", "cache", "clean", "--all"]]
        if manager is PackageManager.PNPM:
            return [["pnpm", "store", "prune"]]
        return [["npm", "cache", "clean", "--force"]]

    raise ValueError(f"Unknown operation: {operation!r}")


def create_app_command(
    manager: PackageManager,
    project_name: str,
    generator_package: str,
    flags: Sequence[str],
) -> list[str]:
    """Build the ``npx create-next-app`` invocation for *manager*."""
    return ["npx", "--yes", generator_package, project_name, *flags, manager.create_app_flag]


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------


class CommandDispatcher:
    """Executes logical package-manager operations for one project.

    Every command inherits the parent's stdout/stderr.  A non-zero exit code
    raises :class:`StepFailure`; there is no retry and no timeout.
    """

    def __init__(
        self,
        manager: PackageManager,
        cwd: str | Path,
        runner: CommandRunner = run_command,
    ) -> None:
        self.manager = manager
        self.cwd = Path(cwd)
        self.runner = runner

    async def execute(self, argv: list[str], step: str, cwd: str | Path | None = None) -> None:
        """Run a single command, raising ``StepFailure`` on a non-zero exit."""
        returncode, _, stderr = await self.runner(argv, cwd=cwd or self.cwd)
        if returncode != 0:
            detail = f"`{' '.join(argv)}` exited with status {returncode}"
            if stderr:
                detail = f"{detail}: {stderr}"
            raise StepFailure(step, detail, command=argv, returncode=returncode)

    async def dispatch(self, operation: Operation, step: str, args: Sequence[str] = ()) -> int:
        """Run every command *operation* maps to and return how many ran."""
        commands = commands_for(self.manager, operation, args)
        for argv in commands:
            print_step(f"Running {' '.join(argv[:4])}{' ...' if len(argv) > 4 else ''}")
            await self.execute(argv, step)
        return len(commands)

    async def install(self, step: str = "install") -> None:
        await self.dispatch(Operation.INSTALL, step)

    async def add(self, packages: Sequence[str], *, dev: bool = False, step: str = "add") -> None:
        if not packages:
            return
        await self.dispatch(Operation.ADD_DEV if dev else Operation.ADD, step, packages)

    async def dedupe(self, step: str = "dedupe") -> bool:
        """Deduplicate dependencies.  Returns ``False`` when the manager needs nothing."""
        ran = await self.dispatch(Operation.DEDUPE, step)
        if not ran:
            print_info(f"{self.manager.value} deduplicates dependencies automatically.")
        return bool(ran)

    async def exec(self, tool: str, *args: str, step: str = "exec") -> None:
        await self.dispatch(Operation.EXEC, step, [tool, *args])

    async def create_app(
        self,
        project_name: str,
        generator_package: str,
        flags: Sequence[str],
        step: str = "generate",
    ) -> None:
        """Invoke the project generator from the parent directory."""
        argv = create_app_command(self.manager, project_name, generator_package, flags)
        print_step(f"Running {' '.join(argv[:4])} ...")
        await self.execute(argv, step, cwd=self.cwd.parent)
