"""Value and discriminated union types for the git gateway.

Mutating operations return ``Success | Error`` pairs. Error types implement
the NonIdealState shape: a human-readable ``message`` plus a stable
``error_type`` string.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class LocalBranch:
    """A local branch as enumerated by the backend.

    Attributes:
        name: Short name, e.g. "feature"
        full_name: Fully qualified name, e.g. "refs/heads/feature"
        upstream: Fully qualified tracking ref (e.g. "refs/remotes/origin/feature"),
            or None when no upstream is configured
    """

    name: str
    full_name: str
    upstream: str | None


@dataclass(frozen=True)
class DiffStat:
    """Summary of the changes between two commits."""

    files_changed: int
    insertions: int
    deletions: int


@dataclass(frozen=True)
class RefUpdated:
    """Success result from a compare-and-swap ref update."""


@dataclass(frozen=True)
class RefUpdateError:
    """Error: the ref update was rejected. Implements NonIdealState."""

    ref: str
    message: str

    @property
    def error_type(self) -> str:
        return "update-ref-failed"


@dataclass(frozen=True)
class FastForwardMerged:
    """Success result from a fast-forward-only working tree update."""


@dataclass(frozen=True)
class FastForwardMergeError:
    """Error: the working tree could not be fast-forwarded. Implements NonIdealState."""

    message: str

    @property
    def error_type(self) -> str:
        return "ff-merge-failed"


@dataclass(frozen=True)
class Fetched:
    """Success result from fetching the remote."""


@dataclass(frozen=True)
class FetchError:
    """Error result from fetching the remote. Implements NonIdealState."""

    remote: str | None
    message: str

    @property
    def error_type(self) -> str:
        return "fetch-failed"
