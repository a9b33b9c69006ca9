from __future__ import annotations

from collections.abc import Sequence

ROLLBACK_MESSAGE = "Acquire failed and some releases also failed."
RELEASE_MESSAGE = "All acquires succeeded, but there were errors during final release."


class TransactionError(Exception):
    """Base exception for errors raised by transaction builders and runners."""


class DuplicateTagError(TransactionError, ValueError):
    """Raised by a strict builder when a tag is registered twice."""

    def __init__(self, tag: str):
        super().__init__(f"Tag {tag!r} is already registered in this transaction")
        self.tag = tag


class AggregateError(TransactionError, ExceptionGroup):
    """
    An ordered collection of errors raised while running a transaction.

    Two shapes exist:

    - rollback: ``[acquire_error, *release_errors]``, created when an acquire
      failed and at least one release failed during rollback.
    - release: ``[*release_errors]``, created when every acquire succeeded but
      at least one release failed afterwards.

    Being an ``ExceptionGroup``, it can be handled with ``except*``:

        try:
            await run()
        except* ConnectionError as group:
            ...
    """

    def __new__(
        cls,
        message: str,
        errors: Sequence[Exception],
        *,
        acquire_error: Exception | None = None,
    ):
        self = super().__new__(cls, message, errors)
        self._acquire_error = acquire_error
        return self

    def __init__(
        self,
        message: str,
        errors: Sequence[Exception],
        *,
        acquire_error: Exception | None = None,
    ):
        super().__init__(message, errors)

    @classmethod
    def from_rollback(
        cls, acquire_error: Exception, release_errors: Sequence[Exception]
    ) -> AggregateError:
        return cls(
            ROLLBACK_MESSAGE,
            [acquire_error, *release_errors],
            acquire_error=acquire_error,
        )

    @classmethod
    def from_release(cls, release_errors: Sequence[Exception]) -> AggregateError:
        return cls(RELEASE_MESSAGE, list(release_errors))

    @property
    def errors(self) -> list[Exception]:
        """All wrapped errors, in the order they were collected."""
        return list(self.exceptions)

    @property
    def acquire_error(self) -> Exception | None:
        """The acquire failure that triggered rollback, if any."""
        return self._acquire_error

    @property
    def release_errors(self) -> list[Exception]:
        if self._acquire_error is None:
            return self.errors
        return self.errors[1:]

    def derive(self, excs: Sequence[Exception]) -> AggregateError:
        acquire_error = self._acquire_error if self._acquire_error in excs else None
        return AggregateError(self.message, excs, acquire_error=acquire_error)
