"""Route registry patching.

The registry (``src/router.ts`` in an ffbun project) imports every module's
route export and registers it inside the ``router`` plugin::

    import type { FastifyInstance } from "fastify";
    import { HealthRoutes } from "./modules/Health/routes";

    export const router = async (fastify: FastifyInstance) => {
        fastify.register(HealthRoutes);
    };

:class:`RouteRegistryDocument` splits such a file into three line segments
(import section, router body, closing marker onward) so that adding a module
is a structural append rather than offset arithmetic.  Unmodified documents
serialize back byte for byte.
"""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass, field
from pathlib import Path

from rich.markup import escape

from ffbun_cli.errors import RegistryError
from ffbun_cli.utils import console

from .naming import ROUTES_SUFFIX, routes_export_name

ROUTER_DECLARATION = "export const router"

_REGISTER_RE = re.compile(rf"^\s*fastify\.register\(\s*(\w+?){ROUTES_SUFFIX}\b")
_IMPORT_FROM_RE = re.compile(r"""\bfrom\s*["']|^import\s*["']""")


def route_import_line(type_name: str) -> str:
    """Import statement for a module's route export."""
    export = routes_export_name(type_name)
    return f'import {{ {export} }} from "./modules/{type_name}/routes";'


def route_register_line(type_name: str) -> str:
    """Registration statement placed inside the router block."""
    return f"    fastify.register({routes_export_name(type_name)});"


def _line_ending(*segments: list[str]) -> str:
    """Line terminator of the nearest terminated line, scanning each segment backwards."""
    for segment in segments:
        for line in reversed(segment):
            if line.endswith("\r\n"):
                return "\r\n"
            if line.endswith("\n"):
                return "\n"
    return "\n"


def _with_newline(line: str, eol: str) -> str:
    return line if line.endswith("\n") else line + eol


@dataclass
class RouteRegistryDocument:
    """Line-segmented view of a route registry file."""

    imports: list[str] = field(default_factory=list)
    body: list[str] = field(default_factory=list)
    closing: list[str] = field(default_factory=list)

    # -- Parsing / serialisation -------------------------------------------

    @classmethod
    def parse(cls, text: str) -> "RouteRegistryDocument":
        """Split *text* into import section, router body and closing segment.

        Raises:
            RegistryError: If there is no router declaration after the
                imports, or its block is never closed.
        """
        lines = text.splitlines(keepends=True)
        imports_end = _find_imports_end(lines)

        declaration = next(
            (i for i, line in enumerate(lines) if ROUTER_DECLARATION in line),
            None,
        )
        if declaration is None:
            raise RegistryError(f"No '{ROUTER_DECLARATION}' declaration found")
        if declaration < imports_end:
            raise RegistryError(
                f"'{ROUTER_DECLARATION}' must be declared after the import section"
            )

        closing = _find_block_close(lines, declaration)
        if closing is None:
            raise RegistryError(
                f"Could not find the closing brace of '{ROUTER_DECLARATION}'"
            )

        return cls(
            imports=lines[:imports_end],
            body=lines[imports_end:closing],
            closing=lines[closing:],
        )

    def serialize(self) -> str:
        return "".join(self.imports + self.body + self.closing)

    # -- Queries -----------------------------------------------------------

    @property
    def registrations(self) -> list[str]:
        """Type names registered in the router body, in file order."""
        names = []
        for line in self.body:
            match = _REGISTER_RE.match(line)
            if match:
                names.append(match.group(1))
        return names

    def has_line(self, line: str) -> bool:
        """Whether any line of the document equals *line* (ignoring its newline)."""
        return any(
            existing.rstrip("\r\n") == line
            for existing in self.imports + self.body + self.closing
        )

    # -- Mutations ---------------------------------------------------------

    def add_import(self, type_name: str) -> bool:
        """Append the module's import after the last import, unless present.

        Returns ``True`` when the document changed.
        """
        line = route_import_line(type_name)
        if self.has_line(line):
            return False
        eol = _line_ending(self.imports, self.body, self.closing)
        if self.imports:
            self.imports[-1] = _with_newline(self.imports[-1], eol)
        self.imports.append(line + eol)
        return True

    def add_registration(self, type_name: str, *, deduplicate: bool = False) -> bool:
        """Append the registration call just before the router's closing brace.

        Without *deduplicate* the call is appended even when the module is
        already registered.  Returns ``True`` when the document changed.
        """
        if deduplicate and type_name in self.registrations:
            return False
        eol = _line_ending(self.body, self.closing, self.imports)
        if self.body:
            self.body[-1] = _with_newline(self.body[-1], eol)
        self.body.append(route_register_line(type_name) + eol)
        return True


def _find_imports_end(lines: list[str]) -> int:
    """Index of the line following the last (possibly multi-line) import."""
    last_start = None
    for i, line in enumerate(lines):
        if line.startswith("import "):
            last_start = i
    if last_start is None:
        return 0
    # import {\n  a,\n  b,\n} from "x";
    for i in range(last_start, len(lines)):
        if _IMPORT_FROM_RE.search(lines[i]):
            return i + 1
    return last_start + 1


def _find_block_close(lines: list[str], declaration: int) -> int | None:
    """Index of the line holding the brace that closes the router block."""
    depth = 0
    opened = False
    for i in range(declaration, len(lines)):
        line = lines[i]
        if opened and depth == 1 and line.lstrip().startswith("}"):
            return i
        depth += line.count("{") - line.count("}")
        if depth > 0:
            opened = True
        elif opened or depth < 0 or "{" in line:
            # Block closed on a line that also carries code, or on one line.
            return None
    return None


def patch_registry(document: str, type_name: str, *, deduplicate: bool = False) -> str:
    """Return *document* with *type_name*'s import and registration added.

    The import is added at most once; the registration is appended on every
    call unless *deduplicate* is set.
    """
    doc = RouteRegistryDocument.parse(document)
    doc.add_import(type_name)
    doc.add_registration(type_name, deduplicate=deduplicate)
    return doc.serialize()


class RegistryPatcher:
    """Applies :func:`patch_registry` to a registry file on disk.

    The file is read, patched and written back in one step; concurrent
    invocations against the same file are not guarded against.
    """

    def __init__(self, registry_path: str | Path, *, deduplicate: bool = False) -> None:
        self.registry_path = Path(registry_path)
        self.deduplicate = deduplicate

    async def update(self, type_name: str) -> str:
        """Patch the registry for *type_name* and return the new content.

        Raises:
            RegistryError: If the file cannot be read, parsed or written.
        """
        try:
            text = await asyncio.to_thread(_read_verbatim, self.registry_path)
        except (OSError, UnicodeError) as exc:
            raise RegistryError(
                f"Cannot read route registry {self.registry_path}: {exc}",
                path=self.registry_path,
            ) from exc

        try:
            patched = patch_registry(text, type_name, deduplicate=self.deduplicate)
        except RegistryError as exc:
            exc.path = self.registry_path
            raise

        try:
            await asyncio.to_thread(
                self.registry_path.write_text, patched, encoding="utf-8", newline=""
            )
        except (OSError, UnicodeError) as exc:
            raise RegistryError(
                f"Cannot write route registry {self.registry_path}: {exc}",
                path=self.registry_path,
            ) from exc

        console.print(f"Routes updated for module: [bold]{escape(type_name)}[/bold]")
        return patched


def _read_verbatim(path: Path) -> str:
    """Read *path* as UTF-8 without translating ``\\r\\n`` line endings."""
    with open(path, encoding="utf-8", newline="") as fh:
        return fh.read()
