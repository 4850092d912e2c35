"""Signal Fetcher orchestration module.

This module provides the SignalFetcher class for running every logical
source's fallback chain in parallel, isolating per-source failures and
assembling a single deduplicated RunResult.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from concurrent.futures import TimeoutError as FuturesTimeoutError
from datetime import datetime, timezone

from .config import DEDUP_PREFIX_LENGTH
from .dedup import deduplicate
from .fallback import FallbackChain
from .models import GatherTimeoutError, Item, RunResult

logger = logging.getLogger(__name__)


class SignalFetcher:
    """Orchestrates parallel fetching from every logical source.

    A source whose chain is exhausted is reported in source_errors without
    affecting any other source. A source answering with no items contributes
    nothing to either list.
    """

    def __init__(
        self,
        chains: list[FallbackChain],
        max_workers: int | None = None,
        run_timeout: float | None = None,
        prefix_length: int = DEDUP_PREFIX_LENGTH,
    ) -> None:
        """Initialize SignalFetcher.

        Args:
            chains: One fallback chain per logical source
            max_workers: Worker pool cap (None = one worker per chain)
            run_timeout: Deadline in seconds for a whole run (None = no deadline)
            prefix_length: Dedup key length

        Raises:
            ValueError: If two chains share a label
        """
        labels = [chain.label for chain in chains]
        duplicates = sorted({label for label in labels if labels.count(label) > 1})
        if duplicates:
            raise ValueError(f"Duplicate source labels: {', '.join(duplicates)}")

        self._chains = chains
        self._max_workers = max_workers
        self._run_timeout = run_timeout
        self._prefix_length = prefix_length

    @property
    def labels(self) -> list[str]:
        return [chain.label for chain in self._chains]

    def fetch(
        self,
        sources: list[str] | None = None,
        now: datetime | None = None,
    ) -> RunResult:
        """Fetch from all (or the selected) logical sources in parallel.

        Args:
            sources: Labels to run (None = all sources)
            now: Reference instant for window filtering (default: current UTC)

        Returns:
            RunResult with deduplicated items and exhausted source labels

        Raises:
            GatherTimeoutError: If the run exceeds its deadline
        """
        now = now or datetime.now(timezone.utc)
        chains = [c for c in self._chains if sources is None or c.label in sources]
        if not chains:
            return RunResult(items=[], source_errors=[], fetched_at=now)

        workers = len(chains)
        if self._max_workers is not None:
            workers = min(workers, self._max_workers)

        all_items: list[Item] = []
        source_errors: list[str] = []
        cancel_event = threading.Event()

        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="source")
        futures = {executor.submit(chain.run, now, cancel_event): chain for chain in chains}
        try:
            for future in as_completed(futures, timeout=self._run_timeout):
                chain = futures[future]
                try:
                    result = future.result()
                except Exception:
                    logger.exception("[%s] Unexpected error while fetching", chain.label)
                    source_errors.append(chain.label)
                    continue

                if result.exhausted:
                    source_errors.append(chain.label)
                else:
                    all_items.extend(result.items)
        except FuturesTimeoutError as e:
            cancel_event.set()
            executor.shutdown(wait=False, cancel_futures=True)
            raise GatherTimeoutError(
                f"Run exceeded {self._run_timeout}s; partial results discarded"
            ) from e
        executor.shutdown(wait=True)

        items = deduplicate(all_items, self._prefix_length)
        logger.info(
            "Fetched %d items (%d before dedup) from %d sources, %d source errors",
            len(items),
            len(all_items),
            len(chains),
            len(source_errors),
        )
        return RunResult(items=items, source_errors=source_errors, fetched_at=now)
