"""Test scaffolding generation.

Generates:
- ``jest.config.js`` / ``jest.setup.js`` for unit tests under ``tests/unit``
- ``mocha.config.js`` / ``mocha.opts`` for integration tests under
  ``tests/integration``
- ``cypress/e2e/example.cy.ts`` as the end-to-end smoke test
- One example test per runner
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from .templates import TemplateRenderer


class TestingGenerator:
    """Generates test-runner configuration and example tests."""

    __test__ = False  # not a pytest test class

    _FILES: dict[str, str] = {
        "testing/jest.config.js.j2": "jest.config.js",
        "testing/jest.setup.js.j2": "jest.setup.js",
        "testing/mocha.config.js.j2": "mocha.config.js",
        "testing/mocha.opts.j2": "mocha.opts",
        "testing/example.cy.ts.j2": "cypress/e2e/example.cy.ts",
        "testing/unit.example.test.ts.j2": "tests/unit/example.test.ts",
        "testing/integration.example.test.ts.j2": "tests/integration/example.test.ts",
    }

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    @classmethod
    def output_paths(cls) -> list[str]:
        return list(cls._FILES.values())

    async def generate(self, output_dir: Path, context: dict[str, Any]) -> list[Path]:
        """Render the test configs and examples into *output_dir*."""
        return await self.renderer.render_files(self._FILES, output_dir, context)
