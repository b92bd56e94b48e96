"""Project bootstrap from the ffbun template repository.

``init`` asks which template variant to use, clones that branch of the
template repository, moves the clone to the target directory and strips its
git history.  Prompting, fetching and command execution are injected so the
flow can be exercised without a terminal or network.
"""

from __future__ import annotations

import asyncio
import shutil
import tempfile
from pathlib import Path
from typing import Awaitable, Callable, Protocol

from pydantic import BaseModel, Field
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt

from ffbun_cli.config import Config
from ffbun_cli.errors import BootstrapError, TargetExistsError
from ffbun_cli.utils import console, run_checked

CommandRunner = Callable[..., Awaitable[str]]


class PromptSpec(BaseModel):
    """A single-choice question put to the user."""

    name: str
    message: str
    choices: list[str] = Field(..., min_length=1)
    default: str | None = None


# ---------------------------------------------------------------------------
# Capabilities
# ---------------------------------------------------------------------------


class Prompter(Protocol):
    def ask(self, spec: PromptSpec) -> str: ...


class TemplateFetcher(Protocol):
    async def fetch(self, variant: str, workdir: Path) -> Path: ...


class RichPrompter:
    """Asks questions on the terminal with ``rich.prompt.Prompt``."""

    def __init__(self, prompt_console: Console | None = None) -> None:
        self.console = prompt_console or console

    def ask(self, spec: PromptSpec) -> str:
        return Prompt.ask(
            spec.message,
            choices=spec.choices,
            default=spec.default,
            console=self.console,
        )


class GitTemplateFetcher:
    """Clones a template variant with ``git clone``.

    The default variant clones the repository's default branch; every other
    variant is cloned with ``-b <variant>``.
    """

    def __init__(
        self,
        repo_url: str,
        template_name: str,
        *,
        default_variant: str = "main",
        runner: CommandRunner = run_checked,
        timeout: float = 300.0,
    ) -> None:
        self.repo_url = repo_url
        self.template_name = template_name
        self.default_variant = default_variant
        self.runner = runner
        self.timeout = timeout

    def clone_command(self, variant: str, destination: Path) -> list[str]:
        cmd = ["git", "clone"]
        if variant != self.default_variant:
            cmd += ["-b", variant]
        return cmd + [self.repo_url, str(destination)]

    async def fetch(self, variant: str, workdir: Path) -> Path:
        """Clone *variant* into ``<workdir>/<template_name>`` and return that path.

        Raises:
            CommandError: If git fails.
        """
        destination = workdir / self.template_name
        await self.runner(self.clone_command(variant, destination), timeout=self.timeout)
        return destination


# ---------------------------------------------------------------------------
# Bootstrapper
# ---------------------------------------------------------------------------


class ProjectBootstrapper:
    """Creates a new project directory from the template repository."""

    def __init__(
        self,
        config: Config,
        *,
        prompter: Prompter | None = None,
        fetcher: TemplateFetcher | None = None,
    ) -> None:
        self.config = config
        self.prompter = prompter or RichPrompter()
        self.fetcher = fetcher or GitTemplateFetcher(
            config.template.repo_url,
            config.template.name,
            default_variant=config.template.default_variant,
            timeout=config.command_timeout,
        )

    def variant_prompt(self) -> PromptSpec:
        template = self.config.template
        return PromptSpec(
            name="branch",
            message=template.prompt,
            choices=list(template.variants),
            default=template.default_variant,
        )

    async def bootstrap(self, target_dir: str | Path | None = None) -> Path:
        """Create the project at *target_dir*.

        Args:
            target_dir: Directory to create. Defaults to ``./<template name>``
                (``./ffbun``) rather than the current directory, which
                always exists and would always be rejected.

        Returns:
            Path to the new project root.

        Raises:
            TargetExistsError: If *target_dir* already exists. Nothing is
                asked, fetched or run in that case.
            CommandError: If cloning the template fails.
            BootstrapError: If the chosen variant is unknown or the clone
                cannot be relocated.
        """
        target = Path(target_dir) if target_dir else Path(self.config.template.name)
        if await asyncio.to_thread(target.exists):
            raise TargetExistsError(target)

        variant = await asyncio.to_thread(self.prompter.ask, self.variant_prompt())
        if variant not in self.config.template.variants:
            raise BootstrapError(f"Unknown template variant: {variant}")

        console.print(f"Creating project [bold]{escape(target.name)}[/bold]...")
        await asyncio.to_thread(target.parent.mkdir, parents=True, exist_ok=True)

        # Staging next to the target keeps the final move on one filesystem.
        with tempfile.TemporaryDirectory(
            prefix=f".{self.config.template.name}-", dir=target.parent
        ) as staging:
            clone = await self.fetcher.fetch(variant, Path(staging))
            await asyncio.to_thread(_relocate, clone, target)

        console.print(
            Panel(
                f"[green]Project created[/green]\n"
                f"  Path:     {escape(str(target))}\n"
                f"  Template: {escape(self.config.template.repo_url)} ({escape(variant)})",
                title="Project Ready",
                border_style="green",
            )
        )
        return target


def _relocate(clone: Path, target: Path) -> None:
    """Move the cloned template to *target* and drop its ``.git`` directory."""
    try:
        shutil.move(str(clone), str(target))
        git_dir = target / ".git"
        if git_dir.exists():
            shutil.rmtree(git_dir)
    except OSError as exc:
        raise BootstrapError(f"Could not move template to {target}: {exc}") from exc
