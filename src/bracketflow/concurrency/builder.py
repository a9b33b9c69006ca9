from __future__ import annotations

from collections.abc import Iterable

import yaml

from bracketflow.concurrency.acquire_release import AcquireFunc, ReleaseFunc, Step
from bracketflow.concurrency.errors import DuplicateTagError
from bracketflow.concurrency.transaction import Transaction
from bracketflow.config.environment import Environment
from bracketflow.config.logging_config import get_logger

log = get_logger(__name__)


class Builder:
    """
    An append-only list of transaction steps.

    ``add`` never mutates the builder it is called on; it returns a new builder
    with one more step, so a partially built chain can be branched safely:

        base = create_transaction().add("db", open_db, close_db)
        with_cache = base.add("cache", open_cache, close_cache)
        with_file = base.add("file", open_file, close_file)

    Args:
        steps: Initial steps, in acquisition order.
        strict_tags: Raise :class:`DuplicateTagError` when a tag is added twice.
            None defers to ``BRACKETFLOW_STRICT_TAGS``, read only when a
            duplicate tag is actually added. When not strict, a duplicate tag
            overwrites the earlier entry in the results and a warning is logged.
    """

    def __init__(self, steps: Iterable[Step] = (), *, strict_tags: bool | None = None):
        self._steps: tuple[Step, ...] = tuple(steps)
        self._strict_tags = strict_tags

    @property
    def steps(self) -> tuple[Step, ...]:
        return self._steps

    @property
    def tags(self) -> tuple[str, ...]:
        return tuple(step.tag for step in self._steps)

    @property
    def strict_tags(self) -> bool:
        if self._strict_tags is not None:
            return self._strict_tags
        try:
            return Environment.is_strict_tags()
        except (OSError, ValueError, yaml.YAMLError) as e:
            log.warning(f"Could not read BRACKETFLOW_STRICT_TAGS, treating tags as permissive: {e}")
            return False

    def __len__(self) -> int:
        return len(self._steps)

    def __repr__(self) -> str:
        return f"Builder(tags={list(self.tags)!r}, strict_tags={self._strict_tags})"

    def add(
        self,
        tag: str,
        acquire: AcquireFunc,
        release: ReleaseFunc | None = None,
    ) -> Builder:
        """Return a new builder with an extra step appended.

        Args:
            tag: Key for the acquired resource in the results mapping.
            acquire: (a)sync callable receiving the resources acquired so far.
            release: Optional (a)sync callable receiving the resource and an Exit.

        Raises:
            DuplicateTagError: If ``tag`` is already used and the builder is strict.
            TypeError: If ``acquire`` or ``release`` is not callable.
        """
        step = Step(tag, acquire, release)
        if tag in self.tags:
            if self.strict_tags:
                raise DuplicateTagError(tag)
            log.warning(f"Tag {tag!r} added twice; the later resource replaces the earlier one in the results")
        return Builder((*self._steps, step), strict_tags=self._strict_tags)

    def build(self) -> Transaction:
        """Bind the current steps into a runnable :class:`Transaction`."""
        return Transaction(self._steps)


def create_transaction(*, strict_tags: bool | None = None) -> Builder:
    """Create an empty builder. Use ``.add(...)`` to declare steps, then ``.build()``."""
    return Builder(strict_tags=strict_tags)


def create_bracket(*, strict_tags: bool | None = None) -> Builder:
    """Alias of :func:`create_transaction`, for those who prefer "bracket"."""
    return Builder(strict_tags=strict_tags)


def create_scope(*, strict_tags: bool | None = None) -> Builder:
    """Alias of :func:`create_transaction`, for those who think in scopes."""
    return Builder(strict_tags=strict_tags)
