"""First-match evaluation over an ordered list of optional sources."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Source(Generic[T]):
    """One step of a fallback chain.

    ``fetch`` returns ``None`` when the source is not configured and raises
    when it is configured but unusable.
    """

    name: str
    fetch: Callable[[], T | None]


@dataclass(frozen=True, slots=True)
class Resolved(Generic[T]):
    source: str
    value: T


@dataclass(frozen=True, slots=True)
class SourceFailure:
    source: str
    error: str


@dataclass(frozen=True, slots=True)
class FallbackOutcome(Generic[T]):
    resolved: Resolved[T] | None
    failures: tuple[SourceFailure, ...]


def first_available(
    sources: Sequence[Source[T]],
    *,
    logger: logging.Logger,
    kind: str,
    strict: bool = False,
) -> FallbackOutcome[T]:
    """Evaluate ``sources`` in order and stop at the first usable value.

    Failing sources are logged and skipped unless ``strict`` is set, in which
    case the first failure propagates.
    """

    failures: list[SourceFailure] = []
    for source in sources:
        try:
            value = source.fetch()
        except Exception as exc:
            if strict:
                raise
            logger.warning(
                "%s source failed, trying next",
                kind,
                extra={"data": {"source": source.name, "error": str(exc)}},
            )
            failures.append(SourceFailure(source=source.name, error=str(exc)))
            continue
        if value is None:
            logger.debug("%s source not configured", kind, extra={"data": {"source": source.name}})
            continue
        logger.info("%s resolved", kind, extra={"data": {"source": source.name}})
        return FallbackOutcome(resolved=Resolved(source=source.name, value=value), failures=tuple(failures))
    return FallbackOutcome(resolved=None, failures=tuple(failures))


def describe_failures(failures: Sequence[SourceFailure]) -> str:
    if not failures:
        return ""
    return "; ".join(f"{failure.source}: {failure.error}" for failure in failures)


__all__ = ["FallbackOutcome", "Resolved", "Source", "SourceFailure", "describe_failures", "first_available"]
