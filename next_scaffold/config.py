"""next-scaffold configuration.

A single immutable, typed configuration object built once at start-up and
handed to every component.  Pydantic v2 validates it at construction time
and serialises it to/from JSON, so a run can be reproduced from a saved file
or tuned through environment variables.
"""

from __future__ import annotations

import os
from datetime import date
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .package_manager import DEFAULT_PACKAGE_MANAGER, PackageManager


DEFAULT_DEPENDENCIES: list[str] = [
    "next-auth@latest",
    "next-seo",
    "@tanstack/react-query@^4.24",
    "@mui/material",
    "@mui/icons-material",
    "@emotion/react",
    "@emotion/styled",
    "@next-auth/prisma-adapter",
    "@prisma/client",
    "@trpc/client@latest",
    "@trpc/next@latest",
    "@trpc/react-query@latest",
    "@trpc/server@latest",
    "axios",
    "react-hook-form@^7.54.2",
    "@hookform/resolvers@^3.9.1",
    "superjson",
    "zod",
]

DEFAULT_DEV_DEPENDENCIES: list[str] = [
    "prisma",
    "typescript",
    "@types/node",
    "@types/react",
    "@types/react-dom",
    "eslint-config-prettier",
    "prettier",
    "tailwindcss",
    "postcss",
    "autoprefixer",
    "eslint-plugin-react",
    "eslint-plugin-react-hooks",
    "eslint-plugin-jsx-a11y",
    "eslint-plugin-import",
    "eslint-plugin-next",
    "rome",
]

DEFAULT_TEST_DEPENDENCIES: list[str] = [
    "jest",
    "@types/jest",
    "ts-jest",
    "@testing-library/react",
    "@testing-library/jest-dom",
    "mocha",
    "@types/mocha",
    "chai",
    "ts-node",
    "cypress",
]

DEFAULT_GENERATOR_FLAGS: list[str] = [
    "--typescript",
    "--eslint",
    "--tailwind",
    "--app",
    "--turbopack",
    "--no-src-dir",
    "--import-alias",
    "@/*",
]


class ScaffoldConfig(BaseModel):
    """Everything a scaffold run needs to know, fixed for the whole run.

    The model is frozen: any attempt to assign an attribute after
    construction raises a ``ValidationError``.
    """

    model_config = ConfigDict(frozen=True)

    project_name: str = Field(
        default="deveric-nextjs-15-scafold-app",
        min_length=1,
        pattern=r"^[a-z0-9][a-z0-9._-]*$",
        description="Directory and npm package name of the generated app",
    )
    description: str = Field(
        default=(
            "A Next.js 15 (App Router) project with TypeScript, dark-mode "
            "Material UI, tRPC, NextAuth, and Prisma."
        )
    )
    author_name: str = Field(default="Eric Gitangu")
    author_email: str = Field(default="developer.ericgitangu@gmail.com")
    author_url: str = Field(default="https://developer.ericgitangu.com")
    github_user: str = Field(default="ericgitangu")
    repo_url: str = Field(default="", description="Derived from github_user when empty")
    target_dir: Path = Field(default=Path("."), description="Parent of the project directory")

    default_package_manager: PackageManager = Field(default=DEFAULT_PACKAGE_MANAGER)
    commit_message: str = Field(
        default="Initial commit: Next.js 15 + Dark MUI + tRPC + NextAuth + Prisma"
    )
    default_branch: str = Field(default="main", min_length=1)

    generator_package: str = Field(default="create-next-app@latest")
    generator_flags: list[str] = Field(default_factory=lambda: list(DEFAULT_GENERATOR_FLAGS))
    dependencies: list[str] = Field(default_factory=lambda: list(DEFAULT_DEPENDENCIES))
    dev_dependencies: list[str] = Field(default_factory=lambda: list(DEFAULT_DEV_DEPENDENCIES))
    test_dependencies: list[str] = Field(default_factory=lambda: list(DEFAULT_TEST_DEPENDENCIES))

    check_registry: bool = Field(default=True, description="Probe the npm registry during preflight")
    registry_url: str = Field(default="https://registry.npmjs.org/")

    @model_validator(mode="before")
    @classmethod
    def _derive_repo_url(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("repo_url"):
            user = data.get("github_user") or cls.model_fields["github_user"].default
            name = data.get("project_name") or cls.model_fields["project_name"].default
            data = {**data, "repo_url": f"https://github.com/{user}/{name}.git"}
        return data

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def project_dir(self) -> Path:
        """Directory the generator creates and every later step works in."""
        return self.target_dir / self.project_name

    def template_context(self, package_manager: PackageManager) -> dict[str, Any]:
        """Variables exposed to every Jinja2 template."""
        return {
            "project_name": self.project_name,
            "description": self.description,
            "author_name": self.author_name,
            "author_email": self.author_email,
            "author_url": self.author_url,
            "github_user": self.github_user,
            "repo_url": self.repo_url,
            "default_branch": self.default_branch,
            "package_manager": package_manager.value,
            "run_prefix": package_manager.run_prefix,
            "year": date.today().year,
        }

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file and return its path."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "ScaffoldConfig":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "ScaffoldConfig":
        """Build a ``ScaffoldConfig`` from environment variables.

        Recognised variables (all optional):
            NEXT_SCAFFOLD_PROJECT_NAME, NEXT_SCAFFOLD_TARGET_DIR,
            NEXT_SCAFFOLD_AUTHOR_NAME, NEXT_SCAFFOLD_AUTHOR_EMAIL,
            NEXT_SCAFFOLD_AUTHOR_URL, NEXT_SCAFFOLD_GITHUB_USER,
            NEXT_SCAFFOLD_REPO_URL, NEXT_SCAFFOLD_DEFAULT_PM,
            NEXT_SCAFFOLD_CHECK_REGISTRY.
        """
        env_fields = {
            "NEXT_SCAFFOLD_PROJECT_NAME": "project_name",
            "NEXT_SCAFFOLD_TARGET_DIR": "target_dir",
            "NEXT_SCAFFOLD_AUTHOR_NAME": "author_name",
            "NEXT_SCAFFOLD_AUTHOR_EMAIL": "author_email",
            "NEXT_SCAFFOLD_AUTHOR_URL": "author_url",
            "NEXT_SCAFFOLD_GITHUB_USER": "github_user",
            "NEXT_SCAFFOLD_REPO_URL": "repo_url",
            "NEXT_SCAFFOLD_DEFAULT_PM": "default_package_manager",
        }
        kwargs: dict[str, Any] = {}
        for var, field_name in env_fields.items():
            if os.environ.get(var):
                kwargs[field_name] = os.environ[var]

        check = os.environ.get("NEXT_SCAFFOLD_CHECK_REGISTRY")
        if check:
            kwargs["check_registry"] = check.strip().lower() not in ("0", "false", "no", "off")

        if "default_package_manager" in kwargs:
            kwargs["default_package_manager"] = kwargs["default_package_manager"].strip().lower()

        return cls(**kwargs)
