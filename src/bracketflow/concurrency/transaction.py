"""
Transaction runner: acquire a sequence of resources, then release them in reverse.

Each call of a :class:`Transaction` runs the whole protocol from scratch:

1. Acquire every step in declared order. Each acquire sees a read-only view
   of the resources acquired before it.
2. If an acquire fails, release the already-acquired resources in reverse
   order with ``Exit(is_error=True, error=...)`` and raise the original
   error, or an :class:`AggregateError` when some releases failed too.
3. Otherwise release every resource in reverse order with
   ``Exit(is_error=False)`` and return the results, or raise an
   :class:`AggregateError` of the release failures.

A failing release never stops the remaining releases.
"""

from __future__ import annotations

from collections.abc import Iterable
from types import MappingProxyType
from typing import Any

from bracketflow.concurrency.acquire_release import Exit, Step, resolve
from bracketflow.concurrency.errors import AggregateError
from bracketflow.config.logging_config import get_logger

log = get_logger(__name__)


class Transaction:
    """A reusable runner for a fixed list of steps.

    Example:
        run = (
            create_transaction()
            .add("db", open_db, close_db)
            .add("file", lambda prev: open_file(prev["db"]), close_file)
            .build()
        )
        resources = await run()
    """

    def __init__(self, steps: Iterable[Step]):
        self._steps: tuple[Step, ...] = tuple(steps)

    @property
    def steps(self) -> tuple[Step, ...]:
        return self._steps

    @property
    def tags(self) -> tuple[str, ...]:
        return tuple(step.tag for step in self._steps)

    def __len__(self) -> int:
        return len(self._steps)

    def __repr__(self) -> str:
        return f"Transaction(tags={list(self.tags)!r})"

    async def __call__(self) -> dict[str, Any]:
        """Run the transaction once.

        Returns:
            A new dict mapping every tag to its acquired resource.

        Raises:
            Exception: The original acquire failure when rollback was clean.
            AggregateError: When any release failed, during rollback or after
                a successful acquire pass.
        """
        results: dict[str, Any] = {}
        view = MappingProxyType(results)
        acquired: list[tuple[Step, Any]] = []

        for index, step in enumerate(self._steps):
            try:
                resource = await resolve(step.acquire(view))
            except Exception as acquire_error:
                log.warning(
                    f"Acquire of {step.tag!r} failed ({acquire_error!r}), "
                    f"rolling back {len(acquired)} resource(s)",
                    extra={"tag": step.tag, "step_index": index},
                )
                release_errors = await self._release_all(
                    acquired, Exit.failure(acquire_error)
                )
                if release_errors:
                    raise AggregateError.from_rollback(
                        acquire_error, release_errors
                    ) from acquire_error
                raise

            results[step.tag] = resource
            acquired.append((step, resource))
            log.debug(f"Acquired {step.tag!r} ({index + 1}/{len(self._steps)})")

        release_errors = await self._release_all(acquired, Exit.success())
        if release_errors:
            raise AggregateError.from_release(release_errors)

        return dict(results)

    @staticmethod
    async def _release_all(
        acquired: list[tuple[Step, Any]], exit: Exit
    ) -> list[Exception]:
        """Release acquired resources last-in first-out, collecting failures."""
        errors: list[Exception] = []
        for step, resource in reversed(acquired):
            if step.release is None:
                continue
            try:
                await resolve(step.release(resource, exit))
            except Exception as e:
                log.error(
                    f"Release of {step.tag!r} failed: {e!r}",
                    exc_info=True,
                    extra={"tag": step.tag, "is_error": exit.is_error},
                )
                errors.append(e)
            else:
                log.debug(f"Released {step.tag!r} (is_error={exit.is_error})")
        return errors
