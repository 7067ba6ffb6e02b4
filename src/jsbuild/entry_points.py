"""Entry point discovery and topology selection.

The package layout is probed once, when the orchestrator is created. The
resulting EntryPointSet is a read-only snapshot: files appearing or
disappearing during a run do not change the chosen topology.

Layouts:
    front-end: builds/browser.{js,ts} + builds/module.{js,ts} (same kind)
    back-end:  src/index.{js,ts}
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .models import Topology

logger = logging.getLogger(__name__)

BROWSER_JS = "builds/browser.js"
BROWSER_TS = "builds/browser.ts"
MODULE_JS = "builds/module.js"
MODULE_TS = "builds/module.ts"
SRC_JS = "src/index.js"
SRC_TS = "src/index.ts"
TSCONFIG = "tsconfig.json"


@dataclass(frozen=True)
class EntryPointSet:
    """Snapshot of which canonical source files exist.

    Paths are kept as strings prefixed with the configured working
    directory, which is how they are handed to the bundler.
    """

    cwd: str
    browser_js: bool = False
    browser_ts: bool = False
    module_js: bool = False
    module_ts: bool = False
    src_js: bool = False
    src_ts: bool = False
    tsconfig: bool = False

    @classmethod
    def discover(cls, cwd: str) -> "EntryPointSet":
        """Probe the file system under cwd.

        Args:
            cwd: Working directory, "" or ending with a path separator
        """

        def exists(relative: str) -> bool:
            return Path(f"{cwd}{relative}").exists()

        snapshot = cls(
            cwd=cwd,
            browser_js=exists(BROWSER_JS),
            browser_ts=exists(BROWSER_TS),
            module_js=exists(MODULE_JS),
            module_ts=exists(MODULE_TS),
            src_js=exists(SRC_JS),
            src_ts=exists(SRC_TS),
            tsconfig=exists(TSCONFIG),
        )
        logger.debug("Discovered entry points: %s", snapshot)
        return snapshot

    def path(self, relative: str) -> str:
        """Prefix a canonical relative path with the working directory."""
        return f"{self.cwd}{relative}"

    def browser_entry_point(self) -> str:
        """Browser source: JS if present, otherwise TS."""
        return self.path(BROWSER_JS if self.browser_js else BROWSER_TS)

    def module_entry_point(self) -> Optional[str]:
        """Module source by priority: module JS, module TS, src JS, src TS."""
        for present, relative in (
            (self.module_js, MODULE_JS),
            (self.module_ts, MODULE_TS),
            (self.src_js, SRC_JS),
            (self.src_ts, SRC_TS),
        ):
            if present:
                return self.path(relative)
        return None

    def module_entry_points(self) -> list[str]:
        """Module entry as a list; empty when no module source exists."""
        entry = self.module_entry_point()
        return [entry] if entry is not None else []


def select_topology(entry_points: EntryPointSet) -> Topology:
    """Decide the package layout from an entry point snapshot.

    Browser and module sources must be of the same kind: a JS browser
    source with a TS module source is not a front-end package.
    """
    if (entry_points.browser_js and entry_points.module_js) or (entry_points.browser_ts and entry_points.module_ts):
        return Topology.FRONT_END
    if entry_points.src_js or entry_points.src_ts:
        return Topology.BACK_END
    return Topology.UNRESOLVED
