"""Bundler collaborator.

The orchestrator never bundles anything itself. It describes each bundle
with BundleOptions and hands it to a Bundler. EsbuildBundler is the
production implementation: it runs the esbuild command line tool and, for
watch-capable targets, keeps a SourceWatcher running that re-invokes the
same build on every change and reports the outcome to the target's
rebuild callback.
"""

import asyncio
import inspect
import logging
import os
import re
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Optional, Protocol, Union, runtime_checkable

from jsbuild.errors import BundleError
from jsbuild.models import BuildMessage
from jsbuild.subprocess_utils import safe_exec

from .watcher import SourceWatcher

logger = logging.getLogger(__name__)

ESBUILD_BINARY_ENV = "ESBUILD_BINARY_PATH"

RebuildCallback = Callable[[Optional[BundleError]], Union[None, Awaitable[None]]]

_ERROR_LINE = re.compile(r"^\s*(?:✘|X|×)\s+\[ERROR\]\s+(?P<text>.+?)\s*$")
_LOCATION_LINE = re.compile(r"^\s+(?P<file>\S.*?):(?P<line>\d+):(?P<column>\d+):\s*$")


@dataclass(frozen=True)
class BundleOptions:
    """Description of a single bundle.

    Attributes:
        entry_points: Source files to bundle (empty means nothing to build)
        outfile: Output file path
        bundle: Inline imported modules
        minify: Minify the output
        platform: "browser", "neutral" or "node"
        target: Environment version constraints, e.g. ("node16",)
        sourcemap: Emit a source map next to the output
        main_fields: package.json fields to resolve, in preference order
        external: Module specifiers to leave as imports
        watch: Callback invoked after every change-triggered rebuild, or None
    """

    entry_points: tuple[str, ...]
    outfile: str
    bundle: bool = True
    minify: bool = False
    platform: str = "browser"
    target: tuple[str, ...] = ()
    sourcemap: bool = False
    main_fields: tuple[str, ...] = ("module", "main")
    external: tuple[str, ...] = ()
    watch: Optional[RebuildCallback] = None


@runtime_checkable
class Bundler(Protocol):
    """Protocol for bundler collaborators."""

    async def build(self, options: BundleOptions) -> None:
        """Produce one bundle.

        When options.watch is set, keep watching the sources afterwards,
        whether or not this build succeeded, and call it with None after
        each successful rebuild, or with the BundleError of a failed one.

        Raises:
            BundleError: If the initial build fails.
        """
        ...

    async def wait_closed(self) -> None:
        """Wait until every watcher started by build() has stopped."""
        ...

    def close(self) -> None:
        """Stop all watchers."""
        ...


def parse_diagnostics(stderr: str) -> list[BuildMessage]:
    """Extract error messages from esbuild's text log.

    Each "[ERROR]" line starts a message; the first "file:line:column:"
    line after it gives its location.
    """
    messages: list[BuildMessage] = []
    text: Optional[str] = None
    located = False
    for raw in stderr.splitlines():
        match = _ERROR_LINE.match(raw)
        if match:
            if text is not None and not located:
                messages.append(BuildMessage(text))
            text = match.group("text")
            located = False
            continue
        if text is not None and not located:
            loc = _LOCATION_LINE.match(raw)
            if loc:
                messages.append(BuildMessage(text, loc.group("file"), int(loc.group("line")), int(loc.group("column"))))
                located = True
    if text is not None and not located:
        messages.append(BuildMessage(text))
    return messages


def build_args(options: BundleOptions) -> list[str]:
    """Translate bundle options into esbuild command line arguments."""
    args = list(options.entry_points)
    if options.bundle:
        args.append("--bundle")
    args.append(f"--outfile={options.outfile}")
    if options.minify:
        args.append("--minify")
    args.append(f"--platform={options.platform}")
    if options.target:
        args.append(f"--target={','.join(options.target)}")
    if options.sourcemap:
        args.append("--sourcemap")
    if options.main_fields:
        args.append(f"--main-fields={','.join(options.main_fields)}")
    args.extend(f"--external:{module}" for module in options.external)
    args.extend(["--log-level=error", "--color=false"])
    return args


def find_esbuild(cwd: str) -> list[str]:
    """Locate the esbuild executable.

    Priority: ESBUILD_BINARY_PATH > package-local node_modules/.bin >
    esbuild on PATH > npx.
    """
    override = os.environ.get(ESBUILD_BINARY_ENV)
    if override:
        return [override]
    local_name = "esbuild.cmd" if sys.platform == "win32" else "esbuild"
    local = Path(f"{cwd}node_modules/.bin/{local_name}")
    if local.exists():
        return [str(local)]
    on_path = shutil.which("esbuild")
    if on_path:
        return [on_path]
    return ["npx", "--yes", "esbuild"]


class EsbuildBundler:
    """Bundler backed by the esbuild command line tool.

    Args:
        cwd: Package directory, "" or ending with a path separator
        command: esbuild invocation; located with find_esbuild() if omitted
    """

    def __init__(self, cwd: str = "", command: Optional[list[str]] = None) -> None:
        self._cwd = cwd
        self._command = command
        self._watch_tasks: list[asyncio.Task[None]] = []

    @property
    def command(self) -> list[str]:
        if self._command is None:
            self._command = find_esbuild(self._cwd)
        return self._command

    async def build(self, options: BundleOptions) -> None:
        if not options.entry_points:
            logger.debug("No entry points for %s, nothing to bundle", options.outfile)
            return
        try:
            await self._run(options)
        finally:
            # A failed initial build is still watched so a fix triggers a rebuild
            if options.watch is not None:
                self._watch_tasks.append(asyncio.create_task(self._watch(options, options.watch)))

    async def _run(self, options: BundleOptions) -> None:
        cmd = [*self.command, *build_args(options)]
        logger.debug("Running %s", " ".join(cmd))
        try:
            process = await safe_exec(*cmd, stdout=asyncio.subprocess.PIPE, stderr=asyncio.subprocess.PIPE)
        except FileNotFoundError as e:
            raise BundleError([f"Cannot run esbuild: {e}"]) from e
        _, stderr = await process.communicate()
        if process.returncode != 0:
            text = stderr.decode("utf-8", errors="replace")
            messages: list[object] = list(parse_diagnostics(text))
            if not messages:
                messages = [text.strip() or f"esbuild exited with status {process.returncode}"]
            raise BundleError(messages)

    async def _watch(self, options: BundleOptions, callback: RebuildCallback) -> None:
        watcher = SourceWatcher(Path(self._cwd or "."))
        watcher.start()
        try:
            async for _ in watcher.changes():
                error: Optional[BundleError] = None
                try:
                    await self._run(options)
                except BundleError as e:
                    error = e
                try:
                    outcome = callback(error)
                    if inspect.isawaitable(outcome):
                        await outcome
                except Exception:
                    # Watch mode only ends when the process is terminated
                    logger.exception("Rebuild callback for %s failed", options.outfile)
        finally:
            watcher.stop()

    async def wait_closed(self) -> None:
        if self._watch_tasks:
            await asyncio.gather(*self._watch_tasks)

    def close(self) -> None:
        for task in self._watch_tasks:
            task.cancel()
