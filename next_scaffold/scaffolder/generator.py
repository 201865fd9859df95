"""Main scaffolding orchestrator.

Lays the fixed directory tree and every templated file over the Next.js app
that create-next-app produced.  All writes overwrite: running the generator
twice over the same project yields the same files and never fails on
directories that already exist.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from ..config import ScaffoldConfig
from ..package_manager import PackageManager
from .app_gen import AppGenerator
from .docs_gen import DocsGenerator
from .templates import TemplateRenderer
from .testing_gen import TestingGenerator


# ---------------------------------------------------------------------------
# Fixed layout
# ---------------------------------------------------------------------------

DIRECTORIES: list[str] = [
    "app/api/auth/[...nextauth]",
    "app/api/trpc/[trpc]",
    "app/components",
    "app/context",
    "app/hooks",
    "app/lib",
    "app/providers",
    "app/server/trpc/router",
    "app/theme",
    "app/types",
    "app/config",
    "cypress/e2e",
    "tests/unit",
    "tests/integration",
    "prisma",
]

# Tooling configuration at the project root.
CONFIG_FILES: dict[str, str] = {
    "config/gitignore.j2": ".gitignore",
    "config/tsconfig.json.j2": "tsconfig.json",
    "config/env.example.j2": ".env.example",
}


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Writes the directory tree, source templates and documents of a project.

    The generator never runs external commands; the runner decides when each
    of its phases happens relative to dependency installation.
    """

    def __init__(
        self,
        config: ScaffoldConfig,
        package_manager: PackageManager,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.config = config
        self.package_manager = package_manager
        self.renderer = renderer or TemplateRenderer()
        self.app_gen = AppGenerator(self.renderer)
        self.testing_gen = TestingGenerator(self.renderer)
        self.docs_gen = DocsGenerator(self.renderer)

    @property
    def context(self) -> dict[str, Any]:
        return self.config.template_context(self.package_manager)

    # -- Public API --------------------------------------------------------

    async def create_directory_structure(self, project_root: Path) -> list[Path]:
        """Create every directory of the fixed layout (existing ones are kept)."""
        created: list[Path] = []
        for rel in DIRECTORIES:
            path = project_root / rel
            await asyncio.to_thread(path.mkdir, parents=True, exist_ok=True)
            created.append(path)
        return created

    async def write_templates(self, project_root: Path) -> list[Path]:
        """Write application sources, test scaffolding and tooling config."""
        context = self.context
        written: list[Path] = []
        written += await self.app_gen.generate(project_root, context)
        written += await self.testing_gen.generate(project_root, context)
        written += await self.renderer.render_files(CONFIG_FILES, project_root, context)
        return written

    async def write_documents(self, project_root: Path) -> list[Path]:
        """Write LICENSE, README, CONTRIBUTING and CODE_OF_CONDUCT."""
        docs = await self.docs_gen.generate(project_root, self.context)
        return list(docs.values())

    @staticmethod
    def template_outputs() -> list[str]:
        """Relative paths written by :meth:`write_templates`."""
        return (
            AppGenerator.output_paths()
            + TestingGenerator.output_paths()
            + list(CONFIG_FILES.values())
        )

    @classmethod
    def expected_files(cls) -> list[str]:
        """Every relative path the generator writes."""
        return cls.template_outputs() + DocsGenerator.output_paths()
