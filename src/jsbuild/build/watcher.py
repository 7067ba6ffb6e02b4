"""Source file watching for watch mode.

A watchdog Observer thread reports file system events; they are handed to
the asyncio event loop with call_soon_threadsafe and batched by a short
debounce window, so saving several files at once triggers one rebuild.

The whole package tree is watched, not just the inputs of a bundle. Only
dist/, types/, node_modules/ and dot-directories are ignored, so build
output written anywhere else (e.g. a tsconfig whose outDir is not types/)
triggers another rebuild after every rebuild.
"""

import asyncio
import logging
from pathlib import Path
from typing import AsyncIterator, Iterable, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

DEBOUNCE_SECONDS = 0.1
IGNORED_DIRS = frozenset({"dist", "types", "node_modules"})
_CHANGE_EVENTS = frozenset({"created", "modified", "deleted", "moved"})


class _QueueingHandler(FileSystemEventHandler):
    """Forwards relevant events from the observer thread to the loop."""

    def __init__(self, watcher: "SourceWatcher") -> None:
        super().__init__()
        self._watcher = watcher

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in _CHANGE_EVENTS:
            return
        path = Path(str(event.src_path))
        if self._watcher.is_ignored(path):
            return
        self._watcher.notify(path)


class SourceWatcher:
    """Watches a package directory and yields batches of changed paths.

    Usage:
        watcher = SourceWatcher(Path("."))
        watcher.start()
        try:
            async for changed in watcher.changes():
                ...
        finally:
            watcher.stop()
    """

    def __init__(
        self,
        root: Path,
        ignored_dirs: Iterable[str] = IGNORED_DIRS,
        debounce: float = DEBOUNCE_SECONDS,
    ) -> None:
        self._root = root.resolve()
        self._ignored_dirs = frozenset(ignored_dirs)
        self._debounce = debounce
        self._queue: Optional["asyncio.Queue[Path]"] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._observer: Optional[Observer] = None  # type: ignore[valid-type]

    def is_ignored(self, path: Path) -> bool:
        """True for paths in output, dependency or hidden directories."""
        try:
            parts = path.resolve().relative_to(self._root).parts
        except ValueError:
            return True
        for part in parts[:-1]:
            if part in self._ignored_dirs or part.startswith("."):
                return True
        return False

    def notify(self, path: Path) -> None:
        """Record a change. Safe to call from any thread."""
        if self._loop is None or self._queue is None:
            return
        self._loop.call_soon_threadsafe(self._queue.put_nowait, path)

    def start(self) -> None:
        """Start the observer thread. Must be called from the event loop."""
        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        observer = Observer()
        observer.schedule(_QueueingHandler(self), str(self._root), recursive=True)
        observer.daemon = True
        observer.start()
        self._observer = observer
        logger.debug("Watching %s", self._root)

    def stop(self) -> None:
        """Stop the observer thread."""
        if self._observer is not None:
            self._observer.stop()
            self._observer.join(timeout=2.0)
            self._observer = None

    async def changes(self) -> AsyncIterator[set[Path]]:
        """Yield sets of changed paths, one per debounced batch."""
        if self._queue is None:
            raise RuntimeError("SourceWatcher.start() must be called first")
        queue = self._queue
        while True:
            batch = {await queue.get()}
            while True:
                try:
                    batch.add(await asyncio.wait_for(queue.get(), timeout=self._debounce))
                except asyncio.TimeoutError:
                    break
            logger.debug("Changed: %s", sorted(str(p) for p in batch))
            yield batch
