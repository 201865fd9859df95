"""Project document generation (LICENSE, README, CONTRIBUTING, CODE_OF_CONDUCT)."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from .templates import TemplateRenderer


class DocsGenerator:
    """Generates the repository documents."""

    _FILES: dict[str, str] = {
        "docs/LICENSE.j2": "LICENSE",
        "docs/README.md.j2": "README.md",
        "docs/CONTRIBUTING.md.j2": "CONTRIBUTING.md",
        "docs/CODE_OF_CONDUCT.md.j2": "CODE_OF_CONDUCT.md",
    }

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    @classmethod
    def output_paths(cls) -> list[str]:
        return list(cls._FILES.values())

    async def generate(self, output_dir: Path, context: dict[str, Any]) -> dict[str, Path]:
        """Generate all documents into *output_dir*.

        Args:
            output_dir: Project root directory.
            context: Template rendering context.  ``year`` and ``author_name``
                feed the LICENSE header; ``package_manager`` and
                ``run_prefix`` feed the README commands.

        Returns:
            Mapping of document file name to written path, e.g.
            ``{"LICENSE": Path(".../LICENSE"), ...}``.
        """
        written = await self.renderer.render_files(self._FILES, output_dir, context)
        return {path.name: path for path in written}
