"""Error taxonomy for bootstrap-token operations.

Every error carries the operation context it was raised in: the
``action`` being performed (``"parse"``, ``"create"``, ``"delete"`` ...)
and the ``token_id`` it concerned, when one is known. Token secrets are
never part of an error message.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bootstrap_token.service import DeleteResult


class BootstrapTokenError(Exception):
    """Base class for all bootstrap-token errors.

    Parameters
    ----------
    message:
        Human-readable description of the failure.
    action:
        The operation that failed, if known.
    token_id:
        The public token ID involved, if known.
    """

    def __init__(
        self,
        message: str,
        *,
        action: str | None = None,
        token_id: str | None = None,
    ) -> None:
        self.action = action
        self.token_id = token_id
        super().__init__(message)


class InvalidFormatError(BootstrapTokenError, ValueError):
    """Raised when a token, token ID or duration string is malformed."""


class TokenValidationError(BootstrapTokenError, ValueError):
    """Raised when a BootstrapToken violates a semantic invariant."""


class MalformedRecordError(BootstrapTokenError):
    """Raised when a stored record cannot be decoded into a BootstrapToken."""

    def __init__(
        self,
        record_name: str,
        reason: str,
        *,
        token_id: str | None = None,
    ) -> None:
        self.record_name = record_name
        self.reason = reason
        super().__init__(
            f"record {record_name!r} is not a valid bootstrap token: {reason}",
            action="decode",
            token_id=token_id,
        )


# ---------------------------------------------------------------------------
# Store-level errors
# ---------------------------------------------------------------------------


class StoreError(BootstrapTokenError):
    """Raised when the credential store rejects or fails an operation."""


class AlreadyExistsError(StoreError):
    """Raised when a record with the same name already exists."""


class NotFoundError(StoreError):
    """Raised when the record to operate on does not exist."""


class DeleteFailedError(StoreError):
    """Raised when the store fails a delete for a reason other than absence."""


class DeleteTokensError(BootstrapTokenError):
    """Raised after a delete batch in which at least one item failed.

    ``results`` holds the outcome of every item in input order, the
    successful ones included.
    """

    def __init__(self, results: list[DeleteResult]) -> None:
        self.results = results
        failed = [r for r in results if r.error is not None]
        super().__init__(
            f"failed to delete {len(failed)} of {len(results)} bootstrap token(s)",
            action="delete",
        )

    @property
    def failures(self) -> list[DeleteResult]:
        """Return only the results that carry an error."""
        return [r for r in self.results if r.error is not None]
