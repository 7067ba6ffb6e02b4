"""Exception hierarchy for jsbuild."""

from typing import Any, Sequence


class JsbuildError(Exception):
    """Base class for all jsbuild errors."""

    pass


class ConfigurationError(JsbuildError):
    """Raised when the build configuration or package.json is invalid."""

    pass


class BundleError(JsbuildError):
    """Raised by a bundler when a bundle could not be produced.

    Attributes:
        errors: The individual diagnostics reported by the bundler
    """

    def __init__(self, errors: Sequence[Any], message: str = "Bundle failed") -> None:
        super().__init__(message)
        self.errors = list(errors)

    def __str__(self) -> str:
        if not self.errors:
            return self.args[0]
        return f"{self.args[0]} with {len(self.errors)} error{'s' if len(self.errors) != 1 else ''}"


class TypeDeclarationError(JsbuildError):
    """Opaque failure of the type declaration pass.

    Only the exit status of the type checker is known; which declaration
    failed is not.
    """

    def __init__(self, returncode: int) -> None:
        super().__init__(f"tsc exited with status {returncode}")
        self.returncode = returncode
