"""Jinja2 template rendering for module scaffolding.

Provides the TemplateRenderer class which loads the per-kind module templates
from ``ffbun_cli/scaffolder/templates/module/`` and renders them with an
:class:`~ffbun_cli.scaffolder.naming.IdentifierSet`.  A user template
directory can shadow any of the built-in templates.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

from jinja2 import (
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    StrictUndefined,
    select_autoescape,
)

from .naming import IdentifierSet, to_camel_case, to_pascal_case


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# File kinds
# ---------------------------------------------------------------------------


class FileKind(str, Enum):
    """The five files every module is made of."""
    SCHEMA = "schema"
    INTERFACES = "interfaces"
    CONTROLLER = "controller"
    REPOSITORY = "repository"
    ROUTES = "routes"

    @property
    def filename(self) -> str:
        """Output file name inside the module directory."""
        return f"{self.value}.ts"

    @property
    def template_name(self) -> str:
        """Template path relative to the template root."""
        return f"module/{self.value}.ts.j2"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for module scaffolding.

    Templates are rendered with ``StrictUndefined`` so that a misspelled
    variable in a (possibly user-supplied) template fails loudly instead of
    producing an empty identifier.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        loaders = [FileSystemLoader(str(_DEFAULT_TEMPLATE_DIR))]
        self.template_dir = _DEFAULT_TEMPLATE_DIR
        if template_dir is not None:
            self.template_dir = Path(template_dir)
            loaders.insert(0, FileSystemLoader(str(self.template_dir)))
        self.env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape([]),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        # Register custom filters
        self.env.filters["pascal_case"] = to_pascal_case
        self.env.filters["camel_case"] = to_camel_case

    # -- Module rendering --------------------------------------------------

    def render(self, kind: FileKind, ids: IdentifierSet) -> str:
        """Render the template for *kind* with the identifiers in *ids*."""
        context = ids.model_dump()
        context["routes_name"] = ids.routes_name
        return self.render_template(kind.template_name, context)

    def render_bundle(self, ids: IdentifierSet) -> dict[FileKind, str]:
        """Render all five module files, keyed by kind, in declaration order."""
        return {kind: self.render(kind, ids) for kind in FileKind}

    # -- Generic rendering -------------------------------------------------

    def render_template(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template root (e.g.
                ``"module/routes.ts.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    def render_string(self, template_string: str, context: dict[str, Any]) -> str:
        """Render an inline template string with the provided context."""
        template = self.env.from_string(template_string)
        return template.render(**context)

    # -- Utility -----------------------------------------------------------

    def list_templates(self, prefix: str = "") -> list[str]:
        """Return a sorted list of all ``.j2`` template paths under *prefix*.

        Built-in and override templates are merged; paths are relative to
        their template root.
        """
        return sorted(
            name
            for name in self.env.list_templates(extensions=["j2"])
            if name.startswith(prefix)
        )
