"""Result reporting.

Turns the ledger of a settled build or rebuild cycle into console output:
a failure banner with a numbered error list, or a success banner, followed
in watch mode by the "waiting for changes" notice. After the first
successful build the compressed size of every dist artifact is listed.
"""

from pathlib import Path
from typing import Any

from . import output
from .models import ResultLedger
from .sizes import dist_artifacts, output_size

UNKNOWN_ERROR = "(unknown)"


def render_error(error: Any) -> str:
    """String form of an error, "(unknown)" when there is none."""
    if error is None:
        return UNKNOWN_ERROR
    return str(error)


class ResultReporter:
    """Prints build outcomes for one package.

    Args:
        package_name: Name shown in the banners
        watch: Whether the run stays alive waiting for changes
    """

    def __init__(self, package_name: str, watch: bool) -> None:
        self._package_name = package_name
        self._watch = watch

    def report(self, ledger: ResultLedger, rebuilding: bool) -> bool:
        """Print the outcome of a cycle.

        Args:
            ledger: Results of the cycle
            rebuilding: Label the cycle "Rebuild" instead of "Build"

        Returns:
            True if the cycle had errors
        """
        label = "Rebuild" if rebuilding else "Build"
        has_errors = ledger.has_errors()
        if has_errors:
            output.log_failure(label, self._package_name)
            for number, error in enumerate(ledger.errors(), start=1):
                output.log_numbered_error(number, render_error(error))
        else:
            output.log_success(label, self._package_name)

        if self._watch:
            output.log_waiting()

        output.log_blank()
        return has_errors

    def report_sizes(self, ledger: ResultLedger, dist_dir: Path, display_dir: str = "dist") -> None:
        """List the compressed size of each artifact in dist_dir.

        Skipped entirely when the ledger has errors.
        """
        if ledger.has_errors():
            return

        # Replace the blank line closing the banner
        output.clear_prev_lines(1)

        for artifact in dist_artifacts(dist_dir):
            name = f"{display_dir}/{artifact.name}"
            if output.is_terminal():
                output.log_artifact(name, "calculating size...")
            size = output_size(artifact)
            output.clear_prev_lines(1)
            output.log_artifact(name, size)

        output.log_blank()
