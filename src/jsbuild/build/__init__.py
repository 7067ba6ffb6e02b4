"""Target builders and their external collaborators."""

from .bundler import Bundler, BundleOptions, EsbuildBundler, RebuildCallback
from .targets import TargetBuilder
from .typecheck import TypeChecker, run_tsc
from .watcher import SourceWatcher

__all__ = [
    "BundleOptions",
    "Bundler",
    "EsbuildBundler",
    "RebuildCallback",
    "SourceWatcher",
    "TargetBuilder",
    "TypeChecker",
    "run_tsc",
]
