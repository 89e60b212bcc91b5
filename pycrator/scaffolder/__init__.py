"""pycrator scaffolder -- renders and writes new Python projects.

Quick usage::

    from pycrator.config import ProjectConfig
    from pycrator.log import ActionLog
    from pycrator.scaffolder import ProjectGenerator

    config = ProjectConfig(package_name="my_package", author_name="Ada")
    generator = ProjectGenerator(config, ActionLog())
    tree = await generator.scaffold("/tmp/output")
"""

from pycrator.scaffolder.builder import DirectoryBuilder, ProjectTree
from pycrator.scaffolder.generator import ProjectGenerator
from pycrator.scaffolder.license import LicenseFetcher, LicenseText
from pycrator.scaffolder.templates import TemplateRenderer

__all__ = [
    "DirectoryBuilder",
    "LicenseFetcher",
    "LicenseText",
    "ProjectGenerator",
    "ProjectTree",
    "TemplateRenderer",
]
