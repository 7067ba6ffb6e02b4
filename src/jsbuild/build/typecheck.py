"""Type declaration emission through the TypeScript compiler.

tsc reads tsconfig.json from the package directory and writes the
declarations wherever that configuration says (types/ by convention).
The call is synchronous: the whole build waits for tsc to exit.
"""

import logging
from typing import Callable

from jsbuild.subprocess_utils import safe_run

logger = logging.getLogger(__name__)

TSC_COMMAND = "tsc"

TypeChecker = Callable[[str], int]


def run_tsc(cwd: str) -> int:
    """Run tsc with the console inherited and return its exit status.

    Args:
        cwd: Package directory, "" for the process working directory
    """
    logger.debug("Running %s in %r", TSC_COMMAND, cwd or ".")
    # stdin=None keeps the console stdin instead of the DEVNULL default
    completed = safe_run(TSC_COMMAND, shell=True, cwd=cwd or None, stdin=None)
    return completed.returncode
