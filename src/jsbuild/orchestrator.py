"""Build orchestrator and watch state machine.

Build composes the target builders for the detected topology, runs them as
an initial build and, in watch mode, keeps running: every change picked up
by a watch-capable target starts a rebuild cycle for the targets that do
not watch on their own.

State machine:
    INITIAL_BUILD -> WAITING_FOR_CHANGES -> REBUILDING -> WAITING_FOR_CHANGES -> ...

Front-end packages (builds/browser + builds/module):
    build:  browser, browser.min, esm, cjs (+ types for builds/module.ts)
    watch:  browser (watching) -> esm + cjs on first settlement and on every change

Back-end packages (src/index):
    build:  cjs (+ esm if package.json has "module") (+ types if tsconfig.json)
    watch:  cjs (watching) -> esm/types on first settlement and on every change

The minified browser bundle and (front-end) type declarations are never
rebuilt in watch mode.
"""

import asyncio
import inspect
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, Union

from . import output
from .build.bundler import Bundler, EsbuildBundler
from .build.targets import TargetBuilder
from .build.typecheck import TypeChecker, run_tsc
from .config import BuildConfiguration, BuildHook
from .entry_points import EntryPointSet, select_topology
from .errors import BundleError
from .fs_utils import declares_module, empty_dir
from .models import ResultLedger, RunState, TargetKind, TargetResult, Topology
from .reporter import ResultReporter
from .supervisor import BUILD_DONE, ParentChannel

logger = logging.getLogger(__name__)

TargetFactory = Callable[[], Awaitable[TargetResult]]

_FROM_ENVIRONMENT = object()


async def apply_hook(hook: BuildHook, data: Any) -> Any:
    """Call a build hook, awaiting its result if it is awaitable."""
    result = hook(data)
    if inspect.isawaitable(result):
        result = await result
    return result


class Build:
    """Drives the build of one package.

    Args:
        config: Per-run configuration
        bundler: Bundler collaborator (defaults to EsbuildBundler)
        type_checker: Type checker collaborator (defaults to run_tsc)
        channel: Parent notification channel; read from the environment
            when omitted, None disables notifications
        entry_points: Entry point snapshot; discovered when omitted
    """

    def __init__(
        self,
        config: BuildConfiguration,
        bundler: Optional[Bundler] = None,
        type_checker: Optional[TypeChecker] = None,
        channel: Union[ParentChannel, None, object] = _FROM_ENVIRONMENT,
        entry_points: Optional[EntryPointSet] = None,
    ) -> None:
        self.config = config
        self.entry_points = entry_points if entry_points is not None else EntryPointSet.discover(config.cwd)
        self.ledger = ResultLedger()
        self.state = RunState.INITIAL_BUILD
        self.bundler: Bundler = bundler if bundler is not None else EsbuildBundler(config.cwd)
        self._channel: Optional[ParentChannel] = (
            ParentChannel.from_environment() if channel is _FROM_ENVIRONMENT else channel  # type: ignore[assignment]
        )
        self.reporter = ResultReporter(config.package_name, config.watch)
        self._secondary: list[TargetFactory] = []
        self.targets = TargetBuilder(
            config,
            self.entry_points,
            self.ledger,
            self.bundler,
            type_checker if type_checker is not None else run_tsc,
        )

    @property
    def watch(self) -> bool:
        return self.config.watch

    @property
    def rebuilding(self) -> bool:
        """False until the first build cycle has settled, True afterwards."""
        return self.state is not RunState.INITIAL_BUILD

    @property
    def topology(self) -> Topology:
        return select_topology(self.entry_points)

    async def run(self) -> bool:
        """Start building.

        Returns after the build in normal mode. In watch mode, returns only
        once every watcher has stopped.

        Returns:
            False if no entry files were found and nothing was built
        """
        topology = self.topology
        if topology is Topology.UNRESOLVED:
            output.log_error("Cannot find entry files")
            output.log_blank()
            return False

        empty_dir(self.config.dist_dir)
        if self.entry_points.tsconfig:
            empty_dir(self.config.types_dir)

        self.ledger.clear()
        logger.debug("Building %s package %s", topology.value, self.config.package_name)
        if topology is Topology.FRONT_END:
            await self._build_front_end()
        else:
            await self._build_back_end()

        if self.watch:
            try:
                await self.bundler.wait_closed()
            finally:
                self.bundler.close()
        return True

    async def _build_front_end(self) -> None:
        if self.watch:
            try:
                await self.targets.build_browser(False, on_rebuild=self._on_browser_rebuild)
                await self._settle([self.targets.build_esm, self.targets.build_cjs], self.config.on_build)
            finally:
                self._finalize()
            return

        builds: list[TargetFactory] = [
            lambda: self.targets.build_browser(False),
            lambda: self.targets.build_browser(True),
            self.targets.build_esm,
            self.targets.build_cjs,
        ]
        if self.entry_points.module_ts:
            builds.append(self.targets.build_types)
        try:
            await self._settle(builds, self.config.on_build, sizes=True)
        finally:
            self._finalize()

    async def _build_back_end(self) -> None:
        esm = declares_module(Path(self.config.cwd or "."))
        extension = "cjs.js" if esm else "cjs"

        secondary: list[TargetFactory] = []
        if esm:
            secondary.append(self.targets.build_esm)
        if self.entry_points.tsconfig:
            secondary.append(self.targets.build_types)
        self._secondary = secondary

        if self.watch:
            try:
                await self.targets.build_cjs(extension, on_rebuild=self._on_cjs_rebuild)
                await self._settle(secondary, self.config.on_build)
            finally:
                self._finalize()
            return

        builds: list[TargetFactory] = [lambda: self.targets.build_cjs(extension), *secondary]
        try:
            await self._settle(builds, self.config.on_build, sizes=True)
        finally:
            self._finalize()

    async def _settle(self, builds: list[TargetFactory], hook: BuildHook, sizes: bool = False) -> Any:
        """Run builds concurrently, wait for all of them, then report."""
        data = await apply_hook(hook, list(await asyncio.gather(*(build() for build in builds))))
        self.reporter.report(self.ledger, self.rebuilding)
        if sizes and not self.rebuilding:
            self.reporter.report_sizes(self.ledger, self.config.dist_dir)
        return data

    async def rebuild(self, builds: list[TargetFactory]) -> Any:
        """Run one rebuild cycle with a fresh ledger."""
        self.state = RunState.REBUILDING
        self.ledger.clear()
        try:
            return await self._settle(builds, self.config.on_rebuild)
        finally:
            self._finalize()

    async def _on_browser_rebuild(self, error: Optional[BundleError]) -> None:
        if error is not None:
            self._report_watch_failure(TargetKind.BROWSER, error)
            return
        await self.rebuild([self.targets.build_esm, self.targets.build_cjs])

    async def _on_cjs_rebuild(self, error: Optional[BundleError]) -> None:
        if error is not None:
            self._report_watch_failure(TargetKind.CJS, error)
            return
        await self.rebuild(self._secondary)

    def _report_watch_failure(self, target: TargetKind, error: BundleError) -> None:
        """Report a failed watch rebuild; no other target is rebuilt."""
        logger.debug("Watch rebuild of %s failed: %s", target.value, error)
        self.ledger.clear()
        self.ledger.append(TargetResult(target, list(error.errors) or [error]))
        self.reporter.report(self.ledger, rebuilding=True)

    def _finalize(self) -> None:
        """Mark the first cycle as done and notify a supervising parent."""
        if self.state is not RunState.WAITING_FOR_CHANGES:
            logger.debug("State %s -> %s", self.state.value, RunState.WAITING_FOR_CHANGES.value)
        self.state = RunState.WAITING_FOR_CHANGES
        if self._channel is not None:
            self._channel.send(BUILD_DONE)
