"""
Centralized console output module for jsbuild.

All user-facing build output goes through this module so that colour,
verbosity and the destination stream are controlled in one place. Colour is
rendered with Rich; when the stream is not a terminal, markup is stripped.

Example output:
    ✔ Build successful: my-package
      dist/my-package.cjs: 1.2 KB

    ✖ Rebuild failed: my-package
      Error 1: src/index.ts:3:6: Expected ";" but found "x"
      Waiting for changes...

Usage:
    from jsbuild.output import log_success, log_failure, log_detail

    log_success("Build", "my-package")
    log_detail("dist/my-package.cjs: 1.2 KB")
"""

import sys
from typing import Optional, TextIO

from rich.console import Console
from rich.markup import escape

# Global state for the console
_output_stream: TextIO = sys.stdout
_console: Optional[Console] = None
_verbose: bool = False

SUCCESS_MARK = "✔"
FAILURE_MARK = "✖"


def set_output_stream(output_stream: Optional[TextIO]) -> None:
    """
    Redirect all output to another stream.

    Args:
        output_stream: Stream to write to, or None to restore sys.stdout
    """
    global _output_stream, _console
    _output_stream = output_stream if output_stream is not None else sys.stdout
    _console = None


def set_verbose(verbose: bool) -> None:
    """
    Set verbose mode for logging.

    Args:
        verbose: If True, verbose_only messages are printed too.
    """
    global _verbose
    _verbose = verbose


def get_console() -> Console:
    """
    Get the Rich console bound to the current output stream.

    Returns:
        The shared Console instance
    """
    global _console
    if _console is None:
        _console = Console(file=_output_stream, highlight=False, emoji=False, soft_wrap=True)
    return _console


def _print(markup: str) -> None:
    get_console().print(markup)


def log(message: str, verbose_only: bool = False) -> None:
    """
    Log a plain message.

    Args:
        message: Message to log
        verbose_only: If True, only print if verbose mode is enabled
    """
    if verbose_only and not _verbose:
        return
    _print(escape(message))


def log_detail(message: str, indent: int = 2, verbose_only: bool = False) -> None:
    """
    Log a detail message (indented).

    Args:
        message: Detail message, may contain Rich markup
        indent: Number of spaces to indent (default 2)
        verbose_only: If True, only print if verbose mode is enabled
    """
    if verbose_only and not _verbose:
        return
    _print(f"{' ' * indent}{message}")


def log_blank() -> None:
    """Print an empty line."""
    _print("")


def log_error(message: str) -> None:
    """
    Log an error message prefixed with the failure mark.

    Args:
        message: Error message
    """
    _print(f"[red]{FAILURE_MARK}[/red] {escape(message)}")


def log_failure(label: str, package_name: str) -> None:
    """
    Log a failure banner, e.g. "✖ Build failed: my-package".

    Args:
        label: "Build" or "Rebuild"
        package_name: Name of the package being built
    """
    _print(f"[red]{FAILURE_MARK}[/red] {label} failed: [bold red]{escape(package_name)}[/bold red]")


def log_success(label: str, package_name: str) -> None:
    """
    Log a success banner, e.g. "✔ Build successful: my-package".

    Args:
        label: "Build" or "Rebuild"
        package_name: Name of the package being built
    """
    _print(f"[green]{SUCCESS_MARK}[/green] {label} successful: [bold green]{escape(package_name)}[/bold green]")


def log_numbered_error(number: int, text: str) -> None:
    """
    Log one entry of a numbered error list.

    Args:
        number: 1-based position in the list
        text: Rendered error text
    """
    log_detail(f"[bold red]Error {number}:[/bold red] {escape(text)}")


def log_waiting() -> None:
    """Log the watch-mode notice."""
    log_detail("[bright_blue italic]Waiting for changes...[/bright_blue italic]")


def log_artifact(name: str, value: str) -> None:
    """
    Log an artifact line, e.g. "  dist/my-package.cjs: 1.2 KB".

    Args:
        name: Artifact path relative to the working directory
        value: Size or status text
    """
    log_detail(f"[bold]{escape(name)}[/bold]: [bright_black]{escape(value)}[/bright_black]")


def clear_prev_lines(n: int) -> None:
    """
    Move the cursor up and erase the previous output lines.

    Does nothing when the output stream is not a terminal, so redirected
    output keeps every line.

    Args:
        n: Number of lines to clear
    """
    console = get_console()
    if not console.is_terminal or n <= 0:
        return
    console.file.write("\x1b[1A\x1b[2K" * n)
    console.file.flush()


def is_terminal() -> bool:
    """True if output goes to an interactive terminal."""
    return get_console().is_terminal
