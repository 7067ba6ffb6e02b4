"""Build Configuration - immutable per-run settings.

BuildConfiguration flows from the CLI (or a calling script) into the
orchestrator and is never mutated during a run. The two hooks let a
calling script post-process the gathered target results of a build
(on_build) or of a watch-mode rebuild (on_rebuild); both default to the
identity function and may be plain functions or coroutine functions.
"""

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, Sequence, Union

from .errors import ConfigurationError

BuildHook = Callable[[Any], Union[Any, Awaitable[Any]]]

WATCH_FLAG = "--watch"


def identity(data: Any) -> Any:
    """Default hook: return the payload unchanged."""
    return data


def normalize_cwd(cwd: str) -> str:
    """Ensure a non-empty working directory ends with a path separator.

    An empty string stays empty and means the process working directory.
    """
    if cwd and not cwd.endswith(("/", os.sep)):
        return cwd + "/"
    return cwd


@dataclass(frozen=True)
class BuildConfiguration:
    """Per-run build settings.

    Attributes:
        out_name: Base name of the files written to dist/
        cwd: Package directory, "" or ending with a path separator
        external: Module specifiers left out of the CommonJS bundle
        watch: Whether to keep running and rebuild on file change
        on_build: Hook applied to the gathered results of a build
        on_rebuild: Hook applied to the gathered results of a rebuild
    """

    out_name: str
    cwd: str = ""
    external: tuple[str, ...] = ()
    watch: bool = False
    on_build: BuildHook = field(default=identity, compare=False)
    on_rebuild: BuildHook = field(default=identity, compare=False)

    def __post_init__(self) -> None:
        if not self.out_name:
            raise ConfigurationError("Output name must not be empty")
        object.__setattr__(self, "cwd", normalize_cwd(self.cwd))
        object.__setattr__(self, "external", tuple(self.external))

    @classmethod
    def create(
        cls,
        out_name: str,
        cwd: str = "",
        external: Sequence[str] = (),
        watch: bool = False,
        on_build: Optional[BuildHook] = None,
        on_rebuild: Optional[BuildHook] = None,
    ) -> "BuildConfiguration":
        """Create a configuration, substituting identity for missing hooks."""
        return cls(
            out_name=out_name,
            cwd=cwd,
            external=tuple(external),
            watch=watch,
            on_build=on_build if on_build is not None else identity,
            on_rebuild=on_rebuild if on_rebuild is not None else identity,
        )

    @classmethod
    def from_argv(
        cls,
        out_name: str,
        cwd: str = "",
        argv: Optional[Sequence[str]] = None,
        **kwargs: Any,
    ) -> "BuildConfiguration":
        """Create a configuration whose watch flag comes from process arguments.

        Args:
            out_name: Base name of the output files
            cwd: Package directory
            argv: Arguments to inspect (defaults to sys.argv)
            **kwargs: Forwarded to create()
        """
        args = sys.argv if argv is None else argv
        return cls.create(out_name, cwd, watch=WATCH_FLAG in args, **kwargs)

    def path(self, relative: str) -> Path:
        """Resolve a path relative to the package directory."""
        return Path(f"{self.cwd}{relative}")

    @property
    def dist_dir(self) -> Path:
        """Directory receiving the bundles."""
        return self.path("dist")

    @property
    def types_dir(self) -> Path:
        """Directory receiving the type declarations."""
        return self.path("types")

    @property
    def package_name(self) -> str:
        """Display name of the package: the package directory's base name."""
        return Path(os.getcwd(), self.cwd).name
