"""Module scaffolding orchestrator.

Takes a raw module name and generates ``src/modules/<TypeName>/`` with the
five module files (schema, interfaces, controller, repository, routes), then
registers the module's routes in the project's route registry.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from pydantic import BaseModel, Field

from ffbun_cli.config import Config
from ffbun_cli.errors import (
    InvalidModuleNameError,
    ModuleExistsError,
    ModuleWriteError,
    RegistryError,
)
from ffbun_cli.utils import print_warning

from .naming import IdentifierSet, derive
from .registry import RegistryPatcher
from .templates import FileKind, TemplateRenderer


# ---------------------------------------------------------------------------
# Result model
# ---------------------------------------------------------------------------


class ModuleResult(BaseModel):
    """Outcome of a single module generation."""

    identifiers: IdentifierSet
    module_path: Path
    files: list[Path] = Field(default_factory=list)
    registry_updated: bool = Field(default=False)
    registry_error: str | None = Field(
        default=None,
        description="Why the registry patch failed; the module files are kept",
    )


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ModuleGenerator:
    """Generates one module directory and wires it into the route registry.

    All five files are rendered in memory before anything touches the disk.
    If a write fails, the files written so far are removed again; a failed
    registry patch, on the other hand, leaves the written module in place.
    """

    def __init__(
        self,
        config: Config,
        renderer: TemplateRenderer | None = None,
        patcher: RegistryPatcher | None = None,
    ) -> None:
        self.config = config
        self.renderer = renderer or TemplateRenderer(config.template_dir)
        self.patcher = patcher or RegistryPatcher(
            config.registry_path, deduplicate=config.registry.deduplicate
        )

    # -- Public API --------------------------------------------------------

    def module_path_for(self, ids: IdentifierSet) -> Path:
        return self.config.modules_path / ids.type_name

    async def generate(self, raw_name: str) -> ModuleResult:
        """Generate the module named by *raw_name*.

        Args:
            raw_name: Free-text module name, e.g. ``"order item"``.

        Returns:
            A :class:`ModuleResult` describing the written files and the
            registry outcome.

        Raises:
            InvalidModuleNameError: If the derived type name is empty or not
                a single path segment.
            ModuleExistsError: If the module directory already exists.
                Nothing is written in that case.
            ModuleWriteError: If the module directory or a file cannot be
                written.
        """
        ids = derive(raw_name)
        _check_type_name(raw_name, ids.type_name)

        module_path = self.module_path_for(ids)
        if await asyncio.to_thread(module_path.exists):
            raise ModuleExistsError(ids.type_name, module_path)

        bundle = self.renderer.render_bundle(ids)
        files = await self._write_bundle(module_path, bundle)

        result = ModuleResult(identifiers=ids, module_path=module_path, files=files)
        try:
            await self.patcher.update(ids.type_name)
            result.registry_updated = True
        except RegistryError as exc:
            print_warning(f"Error updating routes file: {exc}")
            result.registry_error = str(exc)

        return result

    # -- File writing ------------------------------------------------------

    async def _write_bundle(
        self, module_path: Path, bundle: dict[FileKind, str]
    ) -> list[Path]:
        """Create *module_path* and write one file per kind into it."""
        created = False
        written: list[Path] = []
        try:
            await asyncio.to_thread(module_path.mkdir, parents=True)
            created = True
            for kind, content in bundle.items():
                path = module_path / kind.filename
                await asyncio.to_thread(path.write_text, content, encoding="utf-8")
                written.append(path)
        except (OSError, UnicodeError) as exc:
            await asyncio.to_thread(_discard, written, module_path if created else None)
            raise ModuleWriteError(
                f"Error generating module {module_path.name}: {exc}",
                path=module_path,
            ) from exc
        return written


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _check_type_name(raw_name: str, type_name: str) -> None:
    """Reject type names that cannot be used as a single directory name."""
    if not type_name.strip():
        raise InvalidModuleNameError(raw_name, "name is empty")
    if type_name in (".", "..") or "/" in type_name or "\\" in type_name:
        raise InvalidModuleNameError(raw_name, "name must not contain path separators")
    try:
        type_name.encode("utf-8")
    except UnicodeEncodeError:
        raise InvalidModuleNameError(raw_name, "name is not valid UTF-8") from None


def _discard(files: list[Path], directory: Path | None) -> None:
    """Best-effort removal of a partially written module."""
    for path in files:
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            print_warning(f"Could not remove {path}: {exc}")
    if directory is not None:
        try:
            directory.rmdir()
        except OSError as exc:
            print_warning(f"Could not remove {directory}: {exc}")
