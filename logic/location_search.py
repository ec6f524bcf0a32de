"""Search-as-you-type controller for the trip destination field."""

from __future__ import annotations

import logging
from typing import List, Optional

from closet_app.logging_config import get_logger, log_event
from memory.lookup_state import LookupOutcome, LookupState, run_latest
from tools.geocoding_provider import GeocodingError, GeocodingProvider, PlaceSuggestion, ResolvedPlace

LOGGER = get_logger(__name__)
RESOLVE_FAILED_MESSAGE = "Couldn't resolve that place."


class LocationSearch:
    """Holds suggestions for the current query and the place the user picked.

    Typing a new query supersedes any search still in flight; only the
    latest request's suggestions are applied.
    """

    def __init__(self, provider: GeocodingProvider, result_limit: int = 8) -> None:
        self.provider = provider
        self.result_limit = result_limit
        self.query = ""
        self.suggestions_state: LookupState[List[PlaceSuggestion]] = LookupState(purpose="location_search")
        self.selection_state: LookupState[ResolvedPlace] = LookupState(purpose="location_resolve")

    @property
    def suggestions(self) -> List[PlaceSuggestion]:
        return self.suggestions_state.result or []

    @property
    def selected(self) -> Optional[ResolvedPlace]:
        return self.selection_state.result

    @property
    def is_loading(self) -> bool:
        return self.suggestions_state.is_loading or self.selection_state.is_loading

    @property
    def error_message(self) -> Optional[str]:
        return self.selection_state.error_message or self.suggestions_state.error_message

    def _fetch(self, text: str) -> List[PlaceSuggestion]:
        results: List[PlaceSuggestion] = []
        for suggestion in self.provider.search(text):
            results.append(suggestion)
            if len(results) >= self.result_limit:
                break
        return results

    async def update_query(self, text: str) -> LookupOutcome[List[PlaceSuggestion]]:
        """Search for ``text``; the outcome holds this query's own suggestions."""

        self.query = text or ""
        # Editing the text invalidates a previously chosen place.
        self.selection_state.reset()
        if not self.query.strip():
            self.suggestions_state.reset()
            return LookupOutcome(self.suggestions_state.generation, result=[], applied=True)
        query = self.query
        return await run_latest(
            self.suggestions_state,
            lambda: self._fetch(query),
            lambda exc: f"Search failed: {exc}",
            expected=(GeocodingError,),
        )

    def is_latest(self, outcome: LookupOutcome) -> bool:
        """False once a newer query has started after ``outcome``'s."""

        return self.suggestions_state.is_current(outcome.generation)

    async def select(self, suggestion: PlaceSuggestion) -> LookupOutcome[ResolvedPlace]:
        outcome = await run_latest(
            self.selection_state,
            lambda: self.provider.resolve(suggestion),
            lambda exc: RESOLVE_FAILED_MESSAGE,
            expected=(GeocodingError,),
        )
        if outcome.applied and outcome.result is not None:
            self.query = outcome.result.display_name
            self.suggestions_state.reset()
            log_event(LOGGER, logging.INFO, "location_selected", display_name=outcome.result.display_name)
        return outcome


__all__ = ["LocationSearch", "RESOLVE_FAILED_MESSAGE"]
