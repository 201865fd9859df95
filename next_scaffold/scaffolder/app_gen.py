"""Application source generation.

Writes the tRPC, NextAuth, Material UI, SEO and Prisma wiring of the
generated Next.js app on top of what create-next-app produced.  Existing
files such as ``app/layout.tsx`` and ``app/page.tsx`` are replaced.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from .templates import TemplateRenderer


class AppGenerator:
    """Generates the application source files."""

    # Template name -> output path relative to the project root
    _FILES: dict[str, str] = {
        "app/providers/TrpcProvider.tsx.j2": "app/providers/TrpcProvider.tsx",
        "app/hooks/useTRPC.ts.j2": "app/hooks/useTRPC.ts",
        "app/hooks/useTheme.ts.j2": "app/hooks/useTheme.ts",
        "app/server/trpc/trpc.ts.j2": "app/server/trpc/trpc.ts",
        "app/server/trpc/router/index.ts.j2": "app/server/trpc/router/index.ts",
        "app/api/trpc/route.ts.j2": "app/api/trpc/[trpc]/route.ts",
        "app/api/auth/route.ts.j2": "app/api/auth/[...nextauth]/route.ts",
        "app/types/auth.d.ts.j2": "app/types/auth.d.ts",
        "app/theme/theme.ts.j2": "app/theme/theme.ts",
        "app/config/next-seo.config.ts.j2": "app/config/next-seo.config.ts",
        "app/context/ThemeContext.tsx.j2": "app/context/ThemeContext.tsx",
        "app/components/ThemeToggle.tsx.j2": "app/components/ThemeToggle.tsx",
        "app/layout.tsx.j2": "app/layout.tsx",
        "app/page.tsx.j2": "app/page.tsx",
        "app/lib/prisma.ts.j2": "app/lib/prisma.ts",
        "prisma/schema.prisma.j2": "prisma/schema.prisma",
    }

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    @classmethod
    def output_paths(cls) -> list[str]:
        return list(cls._FILES.values())

    async def generate(self, output_dir: Path, context: dict[str, Any]) -> list[Path]:
        """Render every application template into *output_dir*.

        Args:
            output_dir: Project root directory.
            context: Template rendering context (project_name, author, etc.).

        Returns:
            List of written file paths.
        """
        return await self.renderer.render_files(self._FILES, output_dir, context)
