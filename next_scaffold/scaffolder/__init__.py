"""next-scaffold scaffolder -- writes the generated project's files.

Template payloads live as Jinja2 files under ``templates/``; the classes here
only decide where each one is written.

Quick usage::

    from next_scaffold.config import ScaffoldConfig
    from next_scaffold.package_manager import PackageManager
    from next_scaffold.scaffolder import ProjectGenerator

    generator = ProjectGenerator(ScaffoldConfig(), PackageManager.YARN)
    await generator.create_directory_structure(project_root)
    await generator.write_templates(project_root)
"""

from next_scaffold.scaffolder.generator import CONFIG_FILES, DIRECTORIES, ProjectGenerator
from next_scaffold.scaffolder.templates import TemplateRenderer

__all__ = [
    "CONFIG_FILES",
    "DIRECTORIES",
    "ProjectGenerator",
    "TemplateRenderer",
]
