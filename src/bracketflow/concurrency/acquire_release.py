"""
Step and exit types shared by transaction builders and runners.

A step pairs a tagged acquire callable with an optional release callable.
Either callable may be a plain function or a coroutine function; their return
values are normalized with :func:`resolve`.

Example:
    async def open_db(prev):
        return await connect(DSN)

    async def close_db(db, exit):
        if exit.is_error:
            await db.rollback()
        await db.close()

    step = Step("db", open_db, close_db)
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Exit:
    """Why a release is happening.

    Attributes:
        is_error: True when the release is part of a rollback after a failed acquire.
        error: The acquire failure that triggered the rollback, None otherwise.
    """

    is_error: bool
    error: BaseException | None = None

    def __post_init__(self) -> None:
        if not self.is_error and self.error is not None:
            raise ValueError("error must be None when is_error is False")
        if self.is_error and self.error is None:
            raise ValueError("error is required when is_error is True")

    @classmethod
    def success(cls) -> Exit:
        return cls(is_error=False)

    @classmethod
    def failure(cls, error: BaseException) -> Exit:
        return cls(is_error=True, error=error)


AcquireFunc = Callable[[Mapping[str, Any]], Any | Awaitable[Any]]
ReleaseFunc = Callable[[Any, Exit], None | Awaitable[None]]


@dataclass(frozen=True)
class Step:
    """A single acquire/release unit of a transaction.

    Attributes:
        tag: Key under which the acquired resource is stored in the results.
        acquire: Receives a read-only mapping of previously acquired resources
            and returns the resource, or an awaitable resolving to it.
        release: Optional cleanup receiving the resource and an :class:`Exit`.
    """

    tag: str
    acquire: AcquireFunc
    release: ReleaseFunc | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.tag, str):
            raise TypeError(f"tag must be a string, got {type(self.tag).__name__}")
        if not callable(self.acquire):
            raise TypeError(f"acquire for {self.tag!r} must be callable")
        if self.release is not None and not callable(self.release):
            raise TypeError(f"release for {self.tag!r} must be callable or None")


async def resolve(value: T | Awaitable[T]) -> T:
    """Await ``value`` if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value
