# src/atomforge/exceptions.py
"""Exceptions raised by Atomforge services.

Transport layers map these to responses:
- AtomValidationError: the caller sent something unacceptable (bad request)
- NotFoundError: a game, atom or build does not exist (missing resource)
- UpstreamError: storage, embedding or blob upload failed (infrastructure)

Cycle errors live in atomforge.graph next to the sorter that raises them.
"""


class AtomforgeError(Exception):
    """Base class for all Atomforge errors."""


class AtomValidationError(AtomforgeError):
    """Raised when input fails validation (size, name, missing dependency)."""


class DependentsError(AtomValidationError):
    """Raised when deleting an atom that other atoms still depend on.

    Attributes:
        name: The atom that was going to be deleted.
        dependents: Names of the atoms that depend on it.
    """

    def __init__(self, name: str, dependents: list[str]) -> None:
        super().__init__(
            f'Cannot delete "{name}": used by [{", ".join(dependents)}]. '
            "Update or delete those atoms first."
        )
        self.name = name
        self.dependents = dependents


class NotFoundError(AtomforgeError):
    """Raised when a game, atom, build or registry entry does not exist."""


class UpstreamError(AtomforgeError):
    """Raised when an external collaborator fails.

    Attributes:
        status_code: Upstream status code when one is available.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class EmbeddingError(UpstreamError):
    """Raised when the embedding service returns an error."""


class UploadError(UpstreamError):
    """Raised when writing an artifact to blob storage fails."""
