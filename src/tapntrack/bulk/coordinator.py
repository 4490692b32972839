"""Apply one mutation to many records without cross-record atomicity.

Every id gets its own store call. Calls run concurrently on a pool owned by
the coordinator, each bounded by its own timeout. A failing call is reported
right away through `on_item_error` and does not stop, roll back or retry the
others. The batch result is produced only after every item has resolved.
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Tuple

from ..core.constants import DEFAULT_BULK_MAX_WORKERS, DEFAULT_REMOTE_CALL_TIMEOUT_SECONDS
from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)

Mutation = Callable[[str], None]
ItemErrorHandler = Callable[[str, str], None]


@dataclass(frozen=True)
class BulkItemFailure:
    record_id: str
    message: str
    retryable: bool = False


@dataclass(frozen=True)
class BulkResult:
    total: int
    succeeded: Tuple[str, ...] = ()
    failed: Tuple[BulkItemFailure, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def retryable_ids(self) -> List[str]:
        return [f.record_id for f in self.failed if f.retryable]

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "ok": self.ok,
            "succeeded": list(self.succeeded),
            "failed": [
                {"id": f.record_id, "message": f.message, "retryable": f.retryable} for f in self.failed
            ],
            "retryableIds": self.retryable_ids,
        }


class BulkMutationCoordinator:
    def __init__(
        self,
        *,
        timeout_seconds: float = DEFAULT_REMOTE_CALL_TIMEOUT_SECONDS,
        max_workers: int = DEFAULT_BULK_MAX_WORKERS,
    ):
        self._timeout = float(timeout_seconds)
        self._max_workers = int(max_workers)
        self._executor = ThreadPoolExecutor(max_workers=self._max_workers, thread_name_prefix="bulk")

    def apply(
        self,
        record_ids: Iterable[str],
        mutation: Mutation,
        *,
        on_item_error: Optional[ItemErrorHandler] = None,
        refresh: Optional[Callable[[], None]] = None,
    ) -> BulkResult:
        """Blocking entry point for synchronous callers (services, Flask views)."""
        return asyncio.run(self.run(record_ids, mutation, on_item_error=on_item_error, refresh=refresh))

    async def run(
        self,
        record_ids: Iterable[str],
        mutation: Mutation,
        *,
        on_item_error: Optional[ItemErrorHandler] = None,
        refresh: Optional[Callable[[], None]] = None,
    ) -> BulkResult:
        ids = list(dict.fromkeys(record_ids))
        if not ids:
            return BulkResult(total=0)

        slots = asyncio.Semaphore(self._max_workers)

        async def run_one(record_id: str) -> Optional[BulkItemFailure]:
            loop = asyncio.get_running_loop()
            async with slots:
                try:
                    await asyncio.wait_for(
                        loop.run_in_executor(self._executor, mutation, record_id),
                        timeout=self._timeout,
                    )
                    return None
                except asyncio.TimeoutError:
                    failure = BulkItemFailure(
                        record_id, f"Timed out after {self._timeout:g}s", retryable=True
                    )
                except DomainError as e:
                    failure = BulkItemFailure(record_id, str(e))
                except Exception as e:
                    logger.exception("Bulk item %s raised unexpectedly", record_id)
                    failure = BulkItemFailure(record_id, str(e) or type(e).__name__)
            logger.warning("Bulk item %s failed: %s", record_id, failure.message)
            if on_item_error is not None:
                on_item_error(record_id, failure.message)
            return failure

        outcomes = await asyncio.gather(*(run_one(record_id) for record_id in ids))

        succeeded = tuple(rid for rid, failure in zip(ids, outcomes) if failure is None)
        result = BulkResult(
            total=len(ids),
            succeeded=succeeded,
            failed=tuple(f for f in outcomes if f is not None),
        )
        logger.info("Bulk mutation finished: %d/%d succeeded", len(succeeded), result.total)

        if succeeded and refresh is not None:
            refresh()
        return result

    def close(self) -> None:
        self._executor.shutdown(wait=False)
