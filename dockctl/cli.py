"""
dockctl-run - run a code snippet in a throwaway container.

Usage:
  dockctl-run python "print(1 + 1)"
  dockctl-run js --file script.js
  echo 'print("hi")' | dockctl-run py
  dockctl-run --list-languages
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

# Load .env file if it exists
from dotenv import load_dotenv

load_dotenv(Path.cwd() / ".env")

from rich.console import Console
from rich.table import Table

from .config.languages import LANGUAGES
from .models.errors import ContainerApiException, UnsupportedLanguageError
from .services import ContainerEngine, DockerClientFactory, EphemeralRunner

console = Console()
err_console = Console(stderr=True)

EXIT_ENGINE_ERROR = 1
EXIT_NO_EXIT_CODE = 1
EXIT_UNSUPPORTED_LANGUAGE = 2


def print_languages() -> None:
    table = Table(title="Supported Languages")
    table.add_column("Code", style="cyan")
    table.add_column("Name")
    table.add_column("Aliases", style="dim")
    table.add_column("Image", style="green")

    for lang in LANGUAGES.values():
        table.add_row(lang.code, lang.name, ", ".join(lang.aliases), lang.image)

    console.print(table)


def read_code(args: argparse.Namespace) -> str:
    """Resolve the snippet from the argument, a file, or stdin."""
    if args.code is not None:
        return args.code
    if args.file:
        return Path(args.file).read_text(encoding="utf-8")
    return sys.stdin.read()


async def run_snippet(language: str, code: str) -> int:
    factory = DockerClientFactory()
    client = factory.get_client()
    if client is None:
        err_console.print(
            f"[red]Error:[/red] Cannot connect to Docker: "
            f"{factory.get_initialization_error()}"
        )
        return EXIT_ENGINE_ERROR

    try:
        runner = EphemeralRunner(ContainerEngine(client))
        result = await runner.run(language, code)
    except UnsupportedLanguageError as e:
        err_console.print(f"[red]Error:[/red] {e.message}")
        return EXIT_UNSUPPORTED_LANGUAGE
    except ContainerApiException as e:
        err_console.print(f"[red]Error:[/red] {e.message}")
        return EXIT_ENGINE_ERROR
    finally:
        factory.close()

    # Output is printed verbatim, never as rich markup
    console.print(result.output, markup=False, highlight=False)
    if result.exit_code is None:
        err_console.print("[yellow]Warning:[/yellow] the engine reported no exit code")
        return EXIT_NO_EXIT_CODE
    return result.exit_code


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dockctl-run",
        description="Run a code snippet in a throwaway Docker container",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s python "print(1 + 1)"
  %(prog)s node --file script.js
  %(prog)s --list-languages
""",
    )
    parser.add_argument("language", nargs="?", help="Language tag (python, py, js, node, ...)")
    parser.add_argument("code", nargs="?", help="Code to run; read from stdin if omitted")
    parser.add_argument("-f", "--file", help="Read the code from a file")
    parser.add_argument(
        "--list-languages", action="store_true", help="List supported languages"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list_languages:
        print_languages()
        return 0

    if not args.language:
        parser.error("a language is required")
    if args.code is not None and args.file:
        parser.error("pass the code either inline or with --file, not both")

    try:
        return asyncio.run(run_snippet(args.language, read_code(args)))
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Cancelled.[/yellow]")
        return 130


if __name__ == "__main__":
    sys.exit(main())
