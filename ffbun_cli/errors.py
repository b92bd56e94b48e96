"""Exception hierarchy for ffbun-cli.

Core operations raise these; the CLI catches :class:`ScaffoldError` at the
command boundary and turns it into a console message plus an exit code.
"""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Base class for every error reported by ffbun-cli."""


# ---------------------------------------------------------------------------
# Module generation
# ---------------------------------------------------------------------------


class InvalidModuleNameError(ScaffoldError):
    """Raised when a raw module name cannot produce a usable directory name."""

    def __init__(self, raw_name: str, reason: str) -> None:
        self.raw_name = raw_name
        super().__init__(f"Invalid module name {raw_name!r}: {reason}")


class ModuleExistsError(ScaffoldError):
    """Raised when the target module directory is already present."""

    def __init__(self, module_name: str, module_path: Path) -> None:
        self.module_name = module_name
        self.module_path = module_path
        super().__init__(f"Module {module_name} already exists ({module_path})")


class ModuleWriteError(ScaffoldError):
    """Raised when the module directory or one of its files cannot be written."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        super().__init__(message)


class RegistryError(ScaffoldError):
    """Raised when the route registry cannot be read, parsed or written."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        super().__init__(message)


# ---------------------------------------------------------------------------
# Project bootstrap
# ---------------------------------------------------------------------------


class BootstrapError(ScaffoldError):
    """Raised when a new project cannot be created from the template."""


class TargetExistsError(BootstrapError):
    """Raised when the ``init`` target directory already exists."""

    def __init__(self, target: Path) -> None:
        self.target = target
        super().__init__(f"Directory already exists: {target}")


class CommandError(BootstrapError):
    """Raised when an external command exits non-zero, times out or cannot start."""

    def __init__(
        self,
        message: str,
        command: str = "",
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)
