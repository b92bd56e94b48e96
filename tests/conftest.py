"""Shared pytest fixtures for the ffbun-cli test suite.

Provides reusable fixtures for:
- A temporary ffbun project with a seeded ``src/router.ts``
- Configs pointing at that project
- Mock subprocess helpers
- Scripted prompter and fetcher doubles for ``init``
"""

from __future__ import annotations

import textwrap
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from ffbun_cli.bootstrap import PromptSpec
from ffbun_cli.config import Config


# ---------------------------------------------------------------------------
# Route registry
# ---------------------------------------------------------------------------

ROUTER_TS = textwrap.dedent(
    """\
    import type { FastifyInstance } from "fastify";
    import { HealthRoutes } from "./modules/Health/routes";

    export const router = async (fastify: FastifyInstance) => {
        fastify.register(HealthRoutes);
    };
    """
)


@pytest.fixture
def router_ts() -> str:
    """Content of a freshly initialised ffbun ``src/router.ts``."""
    return ROUTER_TS


@pytest.fixture
def tmp_project(tmp_path: Path) -> Path:
    """Temporary ffbun project root with ``src/router.ts`` and ``src/modules/Health``."""
    project = tmp_path / "my-api"
    health = project / "src" / "modules" / "Health"
    health.mkdir(parents=True)
    (health / "routes.ts").write_text("export const HealthRoutes = async () => {};\n", encoding="utf-8")
    (project / "src" / "router.ts").write_text(ROUTER_TS, encoding="utf-8")
    yield project


@pytest.fixture
def project_config(tmp_project: Path) -> Config:
    """A Config rooted at ``tmp_project``."""
    return Config(project_root=tmp_project)


# ---------------------------------------------------------------------------
# Subprocess
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory


# ---------------------------------------------------------------------------
# init collaborators
# ---------------------------------------------------------------------------

class ScriptedPrompter:
    """Prompter double that returns a fixed answer and records every question."""

    def __init__(self, answer: str) -> None:
        self.answer = answer
        self.asked: list[PromptSpec] = []

    def ask(self, spec: PromptSpec) -> str:
        self.asked.append(spec)
        return self.answer


class FakeFetcher:
    """Fetcher double that fabricates a template checkout instead of cloning."""

    def __init__(self, template_name: str = "ffbun") -> None:
        self.template_name = template_name
        self.calls: list[tuple[str, Path]] = []

    async def fetch(self, variant: str, workdir: Path) -> Path:
        self.calls.append((variant, workdir))
        clone = workdir / self.template_name
        (clone / ".git").mkdir(parents=True)
        (clone / ".git" / "HEAD").write_text("ref: refs/heads/main\n", encoding="utf-8")
        (clone / "src").mkdir()
        (clone / "src" / "router.ts").write_text(ROUTER_TS, encoding="utf-8")
        (clone / "package.json").write_text(f'{{"variant": "{variant}"}}\n', encoding="utf-8")
        return clone


@pytest.fixture
def prompter() -> ScriptedPrompter:
    return ScriptedPrompter("main")


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher()
