"""Ordered fallback chains over the strategies of one logical source."""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime

from .handlers.base import BaseHandler
from .models import ChainResult, FetchOutcome, SourceError

logger = logging.getLogger(__name__)


@dataclass
class ChainEntry:
    """One strategy in a fallback chain.

    Attributes:
        handler: The strategy to run
        empty_is_terminal: True when the entry is an alternate transport of
            the same provider, so a healthy empty answer is authoritative.
            False when later entries are distinct providers that may still
            hold data.
    """

    handler: BaseHandler
    empty_is_terminal: bool = True


class FallbackChain:
    """Runs the strategies of one logical source in priority order.

    A failing strategy hands over to the next one; the first strategy with
    items wins. The chain is exhausted only when every strategy it tried
    failed.
    """

    def __init__(self, label: str, entries: list[ChainEntry]) -> None:
        """Initialize FallbackChain.

        Args:
            label: Logical source label reported in source errors
            entries: Strategies in priority order
        """
        self.label = label
        self.entries = entries

    def run(
        self,
        now: datetime,
        cancel_event: threading.Event | None = None,
    ) -> ChainResult:
        """Try each strategy until one produces a usable answer.

        Args:
            now: Reference instant for window filtering
            cancel_event: When set, no further strategies are started

        Returns:
            ChainResult with the winning items and every attempt made
        """
        attempts: list[FetchOutcome] = []

        for entry in self.entries:
            if cancel_event is not None and cancel_event.is_set():
                logger.info("[%s] Cancelled before %s", self.label, entry.handler.name)
                return ChainResult(label=self.label, attempts=attempts)

            outcome = self._attempt(entry.handler, now)
            attempts.append(outcome)

            if outcome.failed:
                logger.warning(
                    "[%s] %s failed (%s): %s",
                    self.label,
                    outcome.strategy,
                    outcome.error.error_type,
                    outcome.error.message,
                )
                continue

            if outcome.items:
                logger.info(
                    "[%s] %d items via %s", self.label, len(outcome.items), outcome.strategy
                )
                return ChainResult(label=self.label, items=outcome.items, attempts=attempts)

            if entry.empty_is_terminal:
                logger.info("[%s] 0 items via %s (healthy)", self.label, outcome.strategy)
                return ChainResult(label=self.label, attempts=attempts)

            logger.info(
                "[%s] 0 items via %s, trying next provider", self.label, outcome.strategy
            )

        exhausted = bool(attempts) and all(outcome.failed for outcome in attempts)
        if exhausted:
            logger.error("[%s] All %d strategies failed", self.label, len(attempts))
        return ChainResult(label=self.label, exhausted=exhausted, attempts=attempts)

    def _attempt(self, handler: BaseHandler, now: datetime) -> FetchOutcome:
        try:
            items = handler.fetch(now)
        except SourceError as e:
            return FetchOutcome(strategy=handler.name, error=e)
        return FetchOutcome(strategy=handler.name, items=items)
