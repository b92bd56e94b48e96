"""Command-line entry point for ffbun-cli.

Usage::

    ffbun init [targetDir]
    ffbun newmodule <name...> [--root DIR] [--dedupe]
    python -m ffbun_cli newmodule "order item"
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from pydantic import ValidationError
from rich.markup import escape

from ffbun_cli.bootstrap import ProjectBootstrapper
from ffbun_cli.config import Config
from ffbun_cli.errors import ScaffoldError
from ffbun_cli.scaffolder import ModuleGenerator
from ffbun_cli.utils import console, print_error, print_success, print_summary_table

USAGE_MESSAGE = (
    'Unknown command. Use "init" to create a project or '
    '"newmodule <ModuleName>" to generate a new module.'
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ffbun",
        description="ffbun project bootstrapper and module generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  ffbun init my-api\n"
            "  ffbun newmodule order item\n"
            '  ffbun newmodule "order item" --root ./my-api\n'
        ),
    )
    parser.add_argument(
        "--config",
        default=None,
        help="JSON configuration file (default: FFBUN_* environment variables)",
    )

    subparsers = parser.add_subparsers(dest="command")

    init_parser = subparsers.add_parser("init", help="Create a project from the template")
    init_parser.add_argument(
        "target",
        nargs="?",
        default=None,
        help="Directory to create (default: ./<template name>)",
    )

    module_parser = subparsers.add_parser("newmodule", help="Generate a new API module")
    module_parser.add_argument(
        "name",
        nargs="+",
        help="Module name; several words are joined with spaces",
    )
    module_parser.add_argument(
        "--root",
        default=None,
        help="Project root containing src/ (default: current directory)",
    )
    module_parser.add_argument(
        "--dedupe",
        action="store_true",
        help="Do not register the module again if the router already registers it",
    )
    return parser


def _load_config(path: str | None) -> Config:
    if path:
        return Config.load(Path(path))
    return Config.from_env()


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _cmd_init(config: Config, args: argparse.Namespace) -> int:
    bootstrapper = ProjectBootstrapper(config)
    try:
        target = asyncio.run(bootstrapper.bootstrap(args.target))
    except ScaffoldError as exc:
        print_error(str(exc))
        return 1

    print_success(f"Project {target.name} created successfully")
    console.print("\nNext steps:")
    console.print(f"  cd {escape(str(target))}")
    console.print("  bun install")
    return 0


def _cmd_newmodule(config: Config, args: argparse.Namespace) -> int:
    updates: dict[str, object] = {}
    if args.root:
        updates["project_root"] = Path(args.root)
    if args.dedupe:
        updates["registry"] = config.registry.model_copy(update={"deduplicate": True})
    if updates:
        config = config.model_copy(update=updates)

    generator = ModuleGenerator(config)
    raw_name = " ".join(args.name)
    try:
        result = asyncio.run(generator.generate(raw_name))
    except ScaffoldError as exc:
        print_error(str(exc))
        return 1

    ids = result.identifiers
    print_summary_table(
        {
            "Type": ids.type_name,
            "Instance": ids.instance_name,
            "Interface": ids.interface_name,
            "Path": str(result.module_path),
            "Files": ", ".join(p.name for p in result.files),
            "Registry": "updated" if result.registry_updated else "NOT updated",
        },
        title=f"Module {ids.type_name}",
    )
    if result.registry_error:
        print_error(f"Module {ids.type_name} created, but the router was not updated")
        return 1
    print_success(f"Module {ids.type_name} created successfully")
    return 0


_COMMANDS = {
    "init": _cmd_init,
    "newmodule": _cmd_newmodule,
}


def run(argv: list[str] | None = None) -> int:
    """Parse *argv*, dispatch the command and return the exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    handler = _COMMANDS.get(args.command)
    if handler is None:
        console.print(USAGE_MESSAGE)
        return 2

    try:
        config = _load_config(args.config)
    except (OSError, UnicodeError, ValidationError) as exc:
        print_error(f"Invalid configuration: {exc}")
        return 1

    return handler(config, args)


def main() -> None:
    """CLI entry point for ``ffbun`` and ``python -m ffbun_cli``."""
    sys.exit(run())


if __name__ == "__main__":
    main()
