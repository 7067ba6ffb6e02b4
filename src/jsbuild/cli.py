"""
Command-line interface for jsbuild.

This module provides the `jsbuild` CLI tool for building JavaScript and
TypeScript packages with esbuild.
"""

import argparse
import asyncio
import logging
import sys
from dataclasses import dataclass, field
from typing import Optional, Sequence

from jsbuild import __version__, output
from jsbuild.config import WATCH_FLAG, BuildConfiguration
from jsbuild.errors import JsbuildError
from jsbuild.orchestrator import Build


@dataclass
class BuildArgs:
    """Arguments for the build command."""

    out_name: str
    cwd: str = ""
    external: list[str] = field(default_factory=list)
    watch: bool = False
    verbose: bool = False


def build_command(args: BuildArgs) -> int:
    """Build the package and, with --watch, keep rebuilding on change.

    Examples:
        jsbuild my-lib                       # Build ./ into dist/my-lib.*
        jsbuild my-lib --cwd packages/core   # Build another package
        jsbuild my-lib --external react      # Leave react out of the CJS bundle
        jsbuild my-lib --watch               # Rebuild on change

    Returns:
        Process exit status
    """
    try:
        config = BuildConfiguration.create(
            out_name=args.out_name,
            cwd=args.cwd,
            external=args.external,
            watch=args.watch,
        )
        build = Build(config)
        started = asyncio.run(build.run())
        return 0 if started else 1

    except KeyboardInterrupt:
        output.log_blank()
        return 130  # Standard exit code for SIGINT

    except JsbuildError as e:
        output.log_error(str(e))
        output.log_blank()
        return 1


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    output.set_verbose(verbose)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """jsbuild - bundle a JavaScript/TypeScript package with esbuild."""
    parser = argparse.ArgumentParser(
        prog="jsbuild",
        description="Build a front-end (builds/browser + builds/module) or back-end (src/index) package",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"jsbuild {__version__}",
    )
    parser.add_argument(
        "out_name",
        help="Base name of the files written to dist/",
    )
    parser.add_argument(
        "--cwd",
        default="",
        help="Package directory (default: current directory)",
    )
    parser.add_argument(
        "--external",
        action="append",
        default=[],
        metavar="MODULE",
        help="Module to leave out of the CommonJS bundle (repeatable)",
    )
    parser.add_argument(
        WATCH_FLAG,
        dest="watch",
        action="store_true",
        help="Rebuild when source files change",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show debug logging",
    )

    parsed = parser.parse_args(argv)
    _configure_logging(parsed.verbose)

    sys.exit(
        build_command(
            BuildArgs(
                out_name=parsed.out_name,
                cwd=parsed.cwd,
                external=parsed.external,
                watch=parsed.watch,
                verbose=parsed.verbose,
            )
        )
    )


if __name__ == "__main__":
    main()
