"""jsbuild - build orchestrator for JavaScript and TypeScript packages.

Public API:
    Build: Orchestrates the targets of one package, optionally in watch mode.
    BuildConfiguration: Immutable per-run settings and build hooks.

Example:
    import asyncio
    from jsbuild import Build, BuildConfiguration

    config = BuildConfiguration.from_argv("my-lib", external=["react"])
    asyncio.run(Build(config).run())
"""

__version__ = "0.1.0"

from .config import BuildConfiguration  # noqa: E402
from .models import ResultLedger, RunState, TargetKind, TargetResult, Topology  # noqa: E402
from .orchestrator import Build  # noqa: E402

__all__ = [
    "Build",
    "BuildConfiguration",
    "ResultLedger",
    "RunState",
    "TargetKind",
    "TargetResult",
    "Topology",
    "__version__",
]
