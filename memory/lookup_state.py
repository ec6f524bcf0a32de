"""Transient, never-persisted state for the two external lookups.

Each lookup (place search while typing, weather per date) keeps a loading
flag, the last result and an error message. A monotonically increasing
generation makes "latest request wins": results from a superseded request
are dropped on arrival.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from closet_app.logging_config import get_logger, log_event

LOGGER = get_logger(__name__)
T = TypeVar("T")


@dataclass
class LookupState(Generic[T]):
    purpose: str = "lookup"
    is_loading: bool = False
    result: Optional[T] = None
    error_message: Optional[str] = None
    generation: int = 0

    def begin(self) -> int:
        self.generation += 1
        self.is_loading = True
        self.error_message = None
        return self.generation

    def is_current(self, generation: int) -> bool:
        return generation == self.generation

    def complete(self, generation: int, result: T) -> bool:
        if not self.is_current(generation):
            log_event(LOGGER, logging.DEBUG, "lookup_result_superseded", purpose=self.purpose, generation=generation)
            return False
        self.result = result
        self.error_message = None
        self.is_loading = False
        return True

    def fail(self, generation: int, message: str) -> bool:
        if not self.is_current(generation):
            return False
        self.error_message = message
        self.is_loading = False
        return True

    def reset(self) -> None:
        """Clear the result and invalidate anything still in flight."""

        self.generation += 1
        self.is_loading = False
        self.result = None
        self.error_message = None


@dataclass(frozen=True)
class LookupOutcome(Generic[T]):
    """What one request produced, whether or not it was the latest."""

    generation: int
    result: Optional[T] = None
    error_message: Optional[str] = None
    applied: bool = False


async def run_latest(
    state: LookupState[T],
    fetch: Callable[[], T],
    describe_error: Callable[[Exception], str],
    expected: tuple = (Exception,),
) -> LookupOutcome[T]:
    """Run a blocking ``fetch`` off the event loop and apply it if still current.

    The returned outcome always carries this request's own result or error;
    ``applied`` says whether it also became the state's current value.
    Exceptions listed in ``expected`` are reported, anything else propagates.
    """

    generation = state.begin()
    try:
        result = await asyncio.to_thread(fetch)
    except expected as exc:
        log_event(
            LOGGER,
            logging.WARNING,
            "lookup_failed",
            purpose=state.purpose,
            generation=generation,
            error=str(exc),
        )
        message = describe_error(exc)
        return LookupOutcome(generation, error_message=message, applied=state.fail(generation, message))
    return LookupOutcome(generation, result=result, applied=state.complete(generation, result))


__all__ = ["LookupOutcome", "LookupState", "run_latest"]
