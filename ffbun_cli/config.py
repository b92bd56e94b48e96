"""ffbun-cli configuration.

Typed configuration for both commands. All settings use Pydantic v2 models so
they are validated at construction time and can be round-tripped through JSON
or built from environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, model_validator

_TRUTHY = {"1", "true", "yes", "on"}


class TemplateConfig(BaseModel):
    """Where ``init`` fetches the project template from."""

    repo_url: str = Field(default="https://github.com/danielsrod/ffbun")
    name: str = Field(
        default="ffbun",
        min_length=1,
        description="Directory name of the cloned template and default init target",
    )
    variants: list[str] = Field(
        default_factory=lambda: ["main", "oracle"],
        min_length=1,
        description="Selectable template branches",
    )
    default_variant: str = Field(
        default="main",
        description="Variant that clones the repository's default branch",
    )
    prompt: str = Field(
        default="Which database you need? main for no database implemented."
    )

    @model_validator(mode="after")
    def _default_variant_is_listed(self) -> "TemplateConfig":
        if self.default_variant not in self.variants:
            raise ValueError(
                f"default_variant {self.default_variant!r} is not one of {self.variants}"
            )
        return self


class RegistryConfig(BaseModel):
    """Settings for the route registry patch."""

    file: str = Field(default="src/router.ts", description="Registry path, relative to the project root")
    deduplicate: bool = Field(
        default=False,
        description="Skip the registration call when the module is already registered",
    )


class Config(BaseModel):
    """Global ffbun-cli configuration.

    Created once by the CLI entry point and passed to the bootstrapper and the
    module generator.
    """

    project_root: Path = Field(default=Path("."))
    modules_dir: str = Field(default="src/modules")
    template_dir: Path | None = Field(
        default=None,
        description="Optional directory whose module/*.ts.j2 files override the built-in templates",
    )
    command_timeout: int = Field(default=300, ge=1, description="Per-command timeout in seconds")
    template: TemplateConfig = Field(default_factory=TemplateConfig)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def modules_path(self) -> Path:
        """Directory that holds one subdirectory per generated module."""
        return self.project_root / self.modules_dir

    @property
    def registry_path(self) -> Path:
        """Path to the route registry document."""
        return self.project_root / self.registry.file

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
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            FFBUN_REPO_URL, FFBUN_TEMPLATE_NAME, FFBUN_VARIANTS,
            FFBUN_DEFAULT_VARIANT, FFBUN_PROJECT_ROOT, FFBUN_MODULES_DIR,
            FFBUN_REGISTRY_FILE, FFBUN_DEDUPLICATE, FFBUN_COMMAND_TIMEOUT,
            FFBUN_TEMPLATE_DIR.
        """
        template_kwargs: dict[str, Any] = {}
        if os.environ.get("FFBUN_REPO_URL"):
            template_kwargs["repo_url"] = os.environ["FFBUN_REPO_URL"]
        if os.environ.get("FFBUN_TEMPLATE_NAME"):
            template_kwargs["name"] = os.environ["FFBUN_TEMPLATE_NAME"]
        if os.environ.get("FFBUN_VARIANTS"):
            template_kwargs["variants"] = [
                v.strip() for v in os.environ["FFBUN_VARIANTS"].split(",") if v.strip()
            ]
        if os.environ.get("FFBUN_DEFAULT_VARIANT"):
            template_kwargs["default_variant"] = os.environ["FFBUN_DEFAULT_VARIANT"]

        registry_kwargs: dict[str, Any] = {}
        if os.environ.get("FFBUN_REGISTRY_FILE"):
            registry_kwargs["file"] = os.environ["FFBUN_REGISTRY_FILE"]
        if os.environ.get("FFBUN_DEDUPLICATE"):
            registry_kwargs["deduplicate"] = (
                os.environ["FFBUN_DEDUPLICATE"].strip().lower() in _TRUTHY
            )

        kwargs: dict[str, Any] = {
            "template": TemplateConfig(**template_kwargs),
            "registry": RegistryConfig(**registry_kwargs),
        }
        if os.environ.get("FFBUN_PROJECT_ROOT"):
            kwargs["project_root"] = Path(os.environ["FFBUN_PROJECT_ROOT"])
        if os.environ.get("FFBUN_MODULES_DIR"):
            kwargs["modules_dir"] = os.environ["FFBUN_MODULES_DIR"]
        if os.environ.get("FFBUN_COMMAND_TIMEOUT"):
            kwargs["command_timeout"] = os.environ["FFBUN_COMMAND_TIMEOUT"]
        if os.environ.get("FFBUN_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["FFBUN_TEMPLATE_DIR"])

        return cls(**kwargs)
