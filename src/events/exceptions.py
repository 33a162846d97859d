import typing as t


class AuthorizationError(Exception):
    """Raised when the acting user lacks the role an operation requires.

    Also covers a creator trying to decide on their own event.
    """


class ConflictError(Exception):
    """Raised when a write lost a race. Callers should re-fetch and may retry."""


class StaleStateError(ConflictError):
    """Raised when an event was not in the expected status at write time."""

    def __init__(self, expected: t.Iterable[str], actual: str | None = None) -> None:
        """Store the expected and observed statuses."""
        self.expected = tuple(expected)
        self.actual = actual
        super().__init__(f"Expected status in {self.expected}, found {actual!r}.")


class VenueConflictError(ConflictError):
    """Raised when a venue slot is no longer free at commit time."""

    def __init__(self, conflicts: t.Sequence[t.Any]) -> None:
        """Store the conflicting bookings."""
        self.conflicts = list(conflicts)
        super().__init__(f"{len(self.conflicts)} conflicting booking(s) at this venue.")


class PreconditionError(Exception):
    """Raised when an operation is attempted on an event in the wrong lifecycle phase."""


class TokenInvalidError(PreconditionError):
    """Raised when a check-in token is unknown or has expired."""
