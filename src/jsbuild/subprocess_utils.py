"""Subprocess utilities for platform-safe process execution.

This module provides wrappers around subprocess and asyncio subprocess
creation that automatically apply platform-specific flags to prevent
console window flashing on Windows.
"""

import asyncio
import subprocess
import sys
from typing import Any, Union


def get_subprocess_creation_flags() -> int:
    """Get platform-specific subprocess creation flags.

    Returns:
        - Windows: subprocess.CREATE_NO_WINDOW (prevents console window)
        - Other platforms: 0 (no special flags)
    """
    if sys.platform == "win32":
        return subprocess.CREATE_NO_WINDOW
    return 0


def _apply_platform_defaults(kwargs: dict[str, Any]) -> dict[str, Any]:
    default_flags = get_subprocess_creation_flags()

    if "creationflags" in kwargs:
        kwargs["creationflags"] = kwargs["creationflags"] | default_flags
    elif default_flags:
        kwargs["creationflags"] = default_flags

    # Child processes must not steal keystrokes from the parent terminal
    if "stdin" not in kwargs:
        kwargs["stdin"] = subprocess.DEVNULL

    return kwargs


def safe_run(cmd: Union[str, list[str]], **kwargs: Any) -> subprocess.CompletedProcess:
    """Execute subprocess.run with platform-specific flags.

    Automatically applies:
    - CREATE_NO_WINDOW on Windows (prevents console window)
    - stdin=DEVNULL (prevents console input handle inheritance)

    Args:
        cmd: Command and arguments (a string when shell=True)
        **kwargs: Additional arguments passed to subprocess.run

    Returns:
        CompletedProcess result from subprocess.run
    """
    return subprocess.run(cmd, **_apply_platform_defaults(kwargs))


async def safe_exec(*cmd: str, **kwargs: Any) -> asyncio.subprocess.Process:
    """Start a subprocess on the running event loop with platform-specific flags.

    Args:
        *cmd: Program and arguments
        **kwargs: Additional arguments passed to asyncio.create_subprocess_exec

    Returns:
        The started asyncio Process
    """
    return await asyncio.create_subprocess_exec(*cmd, **_apply_platform_defaults(kwargs))
