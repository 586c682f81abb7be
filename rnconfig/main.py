"""Main CLI entry point for rnconfig.

Provides commands: config, pods
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from rnconfig.errors import RnConfigError
from rnconfig.integrations.cocoapods import use_native_modules
from rnconfig.resolution.assembler import load_config

logger = logging.getLogger("rnconfig.cli")


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Setup logging configuration with Rich integration.

    Args:
        verbose: Enable verbose logging.
        console: Rich Console instance for coordinated output (optional).
    """
    level = logging.DEBUG if verbose else logging.WARNING

    handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        log_time_format="[%H:%M:%S]",
    )

    logging.basicConfig(
        level=level,
        format="[%(name)s] [%(levelname)s] %(message)s",
        handlers=[handler],
    )


class PodRecorder:
    """Podfile target stand-in that records activations (dry run)."""

    def __init__(self, dependencies: Optional[List[str]] = None) -> None:
        self.dependencies = list(dependencies or [])
        self.pods: List[Dict[str, str]] = []
        self.script_phases: List[Dict[str, Any]] = []

    def pod(self, name: str, path: str) -> None:
        self.pods.append({"name": name, "path": path})

    def script_phase(self, options: Dict[str, Any]) -> None:
        self.script_phases.append(options)


def config_command(args: argparse.Namespace) -> int:
    """Resolve and print the project configuration as JSON."""
    config = load_config(args.root, args.config)
    payload = config.to_dict()
    if args.pretty:
        Console().print_json(data=payload)
    else:
        sys.stdout.write(json.dumps(payload) + "\n")
    return 0


def pods_command(args: argparse.Namespace) -> int:
    """List the pods the Podfile integration would activate."""
    recorder = PodRecorder(args.exclude)
    console = Console()
    use_native_modules(
        recorder,
        project_root=args.root,
        settings=args.config,
        reporter=lambda message: console.print(message, markup=False, highlight=False),
    )

    if not recorder.pods:
        console.print("No native module pods detected")
        return 0

    table = Table(title="Native module pods")
    table.add_column("Pod")
    table.add_column("Path")
    for pod in recorder.pods:
        table.add_row(pod["name"], pod["path"])
    console.print(table)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rnconfig",
        description="rnconfig - React Native native module configuration resolver",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    def add_common(sub: argparse.ArgumentParser) -> None:
        sub.add_argument(
            "--root",
            default=None,
            help="Project root holding package.json (default: current directory)",
        )
        sub.add_argument(
            "-c",
            "--config",
            help=(
                "Optional resolver settings. Can be a path to a TOML/JSON "
                "file or an inline TOML/JSON string. When omitted, built-in "
                "defaults are used."
            ),
        )

    config_parser = subparsers.add_parser(
        "config",
        help="Print the resolved project configuration as JSON",
    )
    add_common(config_parser)
    config_parser.add_argument(
        "--pretty",
        action="store_true",
        help="Pretty-print and highlight the JSON output",
    )

    pods_parser = subparsers.add_parser(
        "pods",
        help="List native module pods the Podfile integration would activate",
    )
    add_common(pods_parser)
    pods_parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="POD",
        help="Treat POD as already declared in the Podfile (repeatable)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point.

    Returns:
        int: Exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 1

    if args.root is not None and not Path(args.root).exists():
        logger.error("Project root does not exist: %s", args.root)
        return 1

    commands = {
        "config": config_command,
        "pods": pods_command,
    }
    try:
        return commands[args.command](args)
    except RnConfigError as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
