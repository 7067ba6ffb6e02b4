"""File system helpers used by the orchestrator."""

import json
import logging
import shutil
from pathlib import Path
from typing import Any

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


def empty_dir(path: Path) -> None:
    """Make sure a directory exists and is empty.

    The directory itself is kept; its contents are removed recursively.
    """
    if not path.exists():
        path.mkdir(parents=True)
        return
    for child in path.iterdir():
        if child.is_dir() and not child.is_symlink():
            shutil.rmtree(child)
        else:
            child.unlink()
    logger.debug("Emptied %s", path)


def read_package_json(package_dir: Path) -> dict[str, Any]:
    """Load package.json from a package directory.

    Returns:
        The parsed manifest, or an empty dict if there is none

    Raises:
        ConfigurationError: If the manifest is not a valid JSON object
    """
    manifest = package_dir / "package.json"
    if not manifest.exists():
        logger.warning("No package.json in %s", package_dir)
        return {}
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid {manifest}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Invalid {manifest}: expected a JSON object")
    return data


def declares_module(package_dir: Path) -> bool:
    """True if package.json has a truthy "module" field."""
    return bool(read_package_json(package_dir).get("module"))
