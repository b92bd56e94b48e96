"""ffbun-cli scaffolder -- generates API modules for an ffbun project.

A module is a vertical API slice (schema, interfaces, controller, repository,
routes) named after a single free-text name and registered in the project's
``src/router.ts``.

Quick usage::

    from ffbun_cli.config import Config
    from ffbun_cli.scaffolder import ModuleGenerator

    generator = ModuleGenerator(Config(project_root=Path("my-api")))
    result = await generator.generate("order item")
"""

from ffbun_cli.scaffolder.generator import ModuleGenerator, ModuleResult
from ffbun_cli.scaffolder.naming import IdentifierSet, derive
from ffbun_cli.scaffolder.registry import (
    RegistryPatcher,
    RouteRegistryDocument,
    patch_registry,
)
from ffbun_cli.scaffolder.templates import FileKind, TemplateRenderer

__all__ = [
    "FileKind",
    "IdentifierSet",
    "ModuleGenerator",
    "ModuleResult",
    "RegistryPatcher",
    "RouteRegistryDocument",
    "TemplateRenderer",
    "derive",
    "patch_registry",
]
