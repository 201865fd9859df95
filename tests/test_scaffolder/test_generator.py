"""Tests for the project generator (next_scaffold.scaffolder.generator).

Covers:
- Directory structure creation over existing directories
- Every mapped template exists and every output is written
- Idempotent rewrites (byte-identical output on a second run)
- Generated content reflects config and package manager
"""

from __future__ import annotations

from pathlib import Path

import pytest

from next_scaffold.package_manager import PackageManager
from next_scaffold.scaffolder import CONFIG_FILES, DIRECTORIES, ProjectGenerator, TemplateRenderer
from next_scaffold.scaffolder.app_gen import AppGenerator
from next_scaffold.scaffolder.docs_gen import DocsGenerator
from next_scaffold.scaffolder.testing_gen import TestingGenerator


pytestmark = pytest.mark.unit


@pytest.fixture
def generator(scaffold_config) -> ProjectGenerator:
    return ProjectGenerator(scaffold_config, PackageManager.YARN)


def _snapshot(root: Path) -> dict[str, bytes]:
    return {
        p.relative_to(root).as_posix(): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


class TestLayout:
    async def test_creates_all_directories(self, generator, project_dir):
        created = await generator.create_directory_structure(project_dir)
        assert len(created) == len(DIRECTORIES)
        for rel in DIRECTORIES:
            assert (project_dir / rel).is_dir()

    async def test_existing_directories_are_fine(self, generator, project_dir):
        (project_dir / "app" / "components").mkdir(parents=True)
        marker = project_dir / "app" / "components" / "Keep.tsx"
        marker.write_text("keep", encoding="utf-8")

        await generator.create_directory_structure(project_dir)
        await generator.create_directory_structure(project_dir)

        assert marker.read_text(encoding="utf-8") == "keep"

    def test_dynamic_route_segments(self):
        assert "app/api/trpc/[trpc]" in DIRECTORIES
        assert "app/api/auth/[...nextauth]" in DIRECTORIES


class TestTemplateMapping:
    def test_every_mapped_template_exists(self):
        available = set(TemplateRenderer().list_templates())
        mapped = (
            list(AppGenerator._FILES)
            + list(TestingGenerator._FILES)
            + list(DocsGenerator._FILES)
            + list(CONFIG_FILES)
        )
        missing = [name for name in mapped if name not in available]
        assert missing == []

    def test_every_template_is_mapped(self):
        mapped = (
            set(AppGenerator._FILES)
            | set(TestingGenerator._FILES)
            | set(DocsGenerator._FILES)
            | set(CONFIG_FILES)
        )
        assert set(TemplateRenderer().list_templates()) == mapped

    def test_outputs_are_unique(self):
        outputs = ProjectGenerator.expected_files()
        assert len(outputs) == len(set(outputs))


class TestWriting:
    async def test_writes_every_template_output(self, generator, project_dir):
        written = await generator.write_templates(project_dir)
        assert [p.relative_to(project_dir).as_posix() for p in written] == (
            ProjectGenerator.template_outputs()
        )
        for path in written:
            assert path.is_file()

    async def test_replaces_create_next_app_files(self, generator, project_dir):
        (project_dir / "app").mkdir(parents=True)
        (project_dir / "app" / "page.tsx").write_text("export default () => null;", encoding="utf-8")
        await generator.write_templates(project_dir)
        assert "HomePage" in (project_dir / "app" / "page.tsx").read_text(encoding="utf-8")

    async def test_rerun_is_byte_identical(self, generator, project_dir):
        await generator.create_directory_structure(project_dir)
        await generator.write_templates(project_dir)
        await generator.write_documents(project_dir)
        first = _snapshot(project_dir)

        await generator.create_directory_structure(project_dir)
        await generator.write_templates(project_dir)
        await generator.write_documents(project_dir)

        assert _snapshot(project_dir) == first

    async def test_trpc_route_uses_fetch_adapter(self, generator, project_dir):
        await generator.write_templates(project_dir)
        route = (project_dir / "app/api/trpc/[trpc]/route.ts").read_text(encoding="utf-8")
        assert "fetchRequestHandler" in route

    async def test_env_example_written(self, generator, project_dir):
        await generator.write_templates(project_dir)
        assert (project_dir / ".env.example").is_file()
        assert (project_dir / ".gitignore").is_file()

    async def test_cypress_example_mentions_project(self, generator, project_dir):
        await generator.write_templates(project_dir)
        e2e = (project_dir / "cypress/e2e/example.cy.ts").read_text(encoding="utf-8")
        assert "demo-app" in e2e
