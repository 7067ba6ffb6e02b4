"""Target builders.

Each builder wraps exactly one bundler or type checker invocation, turns
its outcome into a TargetResult, appends that result to the ledger as its
last step and returns it unchanged. Failures are recorded, never raised,
so sibling targets running in the same gather() always settle.
"""

import logging
from typing import Optional

from jsbuild.config import BuildConfiguration
from jsbuild.entry_points import EntryPointSet
from jsbuild.errors import BundleError, TypeDeclarationError
from jsbuild.models import ResultLedger, TargetKind, TargetResult

from .bundler import BundleOptions, Bundler, RebuildCallback
from .typecheck import TypeChecker

logger = logging.getLogger(__name__)

NODE_TARGET = ("node16",)
MAIN_FIELDS = ("module", "main")


class TargetBuilder:
    """Builds the individual targets of a package.

    Args:
        config: Per-run configuration
        entry_points: Entry point snapshot of the package
        ledger: Ledger receiving every result
        bundler: Bundler collaborator
        type_checker: Type checker collaborator, returns an exit status
    """

    def __init__(
        self,
        config: BuildConfiguration,
        entry_points: EntryPointSet,
        ledger: ResultLedger,
        bundler: Bundler,
        type_checker: TypeChecker,
    ) -> None:
        self._config = config
        self._entry_points = entry_points
        self._ledger = ledger
        self._bundler = bundler
        self._type_checker = type_checker

    def _outfile(self, suffix: str) -> str:
        return f"{self._config.cwd}dist/{self._config.out_name}{suffix}"

    async def _bundle(self, target: TargetKind, options: BundleOptions) -> TargetResult:
        try:
            await self._bundler.build(options)
        except BundleError as e:
            logger.debug("%s bundle failed: %s", target.value, e)
            return self._ledger.append(TargetResult(target, list(e.errors) or [e]))
        return self._ledger.append(TargetResult(target))

    async def build_browser(self, minify: bool, on_rebuild: Optional[RebuildCallback] = None) -> TargetResult:
        """Browser bundle: dist/<name>.js or dist/<name>.min.js."""
        options = BundleOptions(
            entry_points=(self._entry_points.browser_entry_point(),),
            outfile=self._outfile(".min.js" if minify else ".js"),
            minify=minify,
            platform="browser",
            sourcemap=True,
            main_fields=MAIN_FIELDS,
            watch=on_rebuild,
        )
        return await self._bundle(TargetKind.BROWSER_MIN if minify else TargetKind.BROWSER, options)

    async def build_esm(self) -> TargetResult:
        """ECMAScript module bundle: dist/<name>.esm.js."""
        options = BundleOptions(
            entry_points=tuple(self._entry_points.module_entry_points()),
            outfile=self._outfile(".esm.js"),
            platform="neutral",
            main_fields=MAIN_FIELDS,
        )
        return await self._bundle(TargetKind.ESM, options)

    async def build_cjs(self, extension: str = "cjs.js", on_rebuild: Optional[RebuildCallback] = None) -> TargetResult:
        """CommonJS bundle: dist/<name>.<extension>, externals left unbundled."""
        options = BundleOptions(
            entry_points=tuple(self._entry_points.module_entry_points()),
            outfile=self._outfile(f".{extension}"),
            platform="node",
            target=NODE_TARGET,
            main_fields=MAIN_FIELDS,
            external=self._config.external,
            watch=on_rebuild,
        )
        return await self._bundle(TargetKind.CJS, options)

    async def build_types(self) -> TargetResult:
        """Type declarations via tsc. Blocks the event loop until tsc exits."""
        returncode = self._type_checker(self._config.cwd)
        if returncode == 0:
            return self._ledger.append(TargetResult(TargetKind.TYPES))
        return self._ledger.append(TargetResult(TargetKind.TYPES, [TypeDeclarationError(returncode)]))
