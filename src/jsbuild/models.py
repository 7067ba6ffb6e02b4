"""Data models for the build orchestrator.

Defines the core types shared by the target builders, the orchestrator and
the reporter:
- TargetKind: Which compilation target produced a result
- BuildMessage: A single diagnostic reported by the bundler
- TargetResult: Outcome of one target builder invocation
- ResultLedger: Ordered, append-only collection of results for one cycle
- RunState: Progress of the watch state machine
- Topology: Which package layout was detected
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Optional


class TargetKind(Enum):
    """Compilation target kinds."""

    BROWSER = "browser"
    BROWSER_MIN = "browser-min"
    ESM = "esm"
    CJS = "cjs"
    TYPES = "types"


class RunState(Enum):
    """State of the build/watch state machine.

    INITIAL_BUILD -> WAITING_FOR_CHANGES -> REBUILDING -> WAITING_FOR_CHANGES -> ...
    """

    INITIAL_BUILD = "initial_build"
    WAITING_FOR_CHANGES = "waiting_for_changes"
    REBUILDING = "rebuilding"


class Topology(Enum):
    """Detected package layout."""

    FRONT_END = "front_end"
    BACK_END = "back_end"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class BuildMessage:
    """A diagnostic reported by the bundler.

    Attributes:
        text: The diagnostic message
        file: Source file the diagnostic points at, if known
        line: 1-based line number, if known
        column: 0-based column, if known
    """

    text: str
    file: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None

    def __str__(self) -> str:
        if self.file is None:
            return self.text
        location = self.file
        if self.line is not None:
            location += f":{self.line}"
            if self.column is not None:
                location += f":{self.column}"
        return f"{location}: {self.text}"


@dataclass
class TargetResult:
    """Outcome of a single target build.

    An empty error list denotes success. Errors may be any object; the
    reporter renders them with str() and shows "(unknown)" for None.

    Attributes:
        target: The target that produced this result
        errors: Errors in the order they were reported
    """

    target: TargetKind
    errors: list[Any] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True if the target built without errors."""
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "target": self.target.value,
            "errors": [None if e is None else str(e) for e in self.errors],
        }


class ResultLedger:
    """Ordered collection of target results for one build or rebuild cycle.

    Target builders only append; the orchestrator clears it at the start
    of a cycle and the reporter reads it once the cycle has settled.
    """

    def __init__(self) -> None:
        self._results: list[TargetResult] = []

    def append(self, result: TargetResult) -> TargetResult:
        """Record a result and return it unchanged."""
        self._results.append(result)
        return result

    def clear(self) -> None:
        """Discard all recorded results."""
        self._results.clear()

    def has_errors(self) -> bool:
        """True iff at least one recorded result has errors."""
        return any(result.errors for result in self._results)

    def errors(self) -> list[Any]:
        """All errors of all results, flattened in ledger order."""
        flattened: list[Any] = []
        for result in self._results:
            flattened.extend(result.errors)
        return flattened

    @property
    def results(self) -> list[TargetResult]:
        """A copy of the recorded results."""
        return list(self._results)

    def __len__(self) -> int:
        return len(self._results)

    def __iter__(self) -> Iterator[TargetResult]:
        return iter(list(self._results))
