"""Split work into fixed-size batches and run them in bounded waves."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from verbi.errors import BatchError

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class BatchProgress:
    total: int
    completed: int
    percentage: float


ProgressCallback = Callable[[BatchProgress], None]


def batch_requests(items: Sequence[T], batch_size: int) -> list[list[T]]:
    """Chunk ``items``; the last batch may be shorter."""
    if batch_size <= 0:
        raise ValueError("Batch size must be positive")
    return [list(items[i : i + batch_size]) for i in range(0, len(items), batch_size)]


class BatchProcessor(Generic[T, R]):
    """Run ``processor`` over batches, ``concurrency`` batches per wave.

    Waves run one after another; batches inside a wave are awaited together.
    A failing batch aborts ``process`` once the rest of its wave has settled,
    and no later wave starts. The first failure of the wave is raised; side
    effects of the batches that finished remain.
    """

    def __init__(
        self,
        processor: Callable[[list[T]], Awaitable[list[R]]],
        *,
        batch_size: int,
        concurrency: int = 1,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self._processor = processor
        self._batch_size = batch_size
        self._concurrency = max(1, concurrency)
        self._on_progress = on_progress

    async def process(self, items: Sequence[T]) -> list[R]:
        batches = batch_requests(items, self._batch_size)
        total_items = len(items)
        results: list[R] = []
        completed = 0

        for start in range(0, len(batches), self._concurrency):
            wave = batches[start : start + self._concurrency]
            # Every batch of the wave settles before a failure is raised
            wave_results = await asyncio.gather(*(
                self._process_batch(batch, start + i + 1, len(batches))
                for i, batch in enumerate(wave)
            ), return_exceptions=True)

            failure: BaseException | None = None
            for batch_result in wave_results:
                if isinstance(batch_result, BaseException):
                    failure = failure or batch_result
                    continue
                results.extend(batch_result)
                completed += len(batch_result)
                if self._on_progress is not None:
                    self._on_progress(BatchProgress(
                        total=total_items,
                        completed=completed,
                        percentage=completed / total_items * 100 if total_items else 100.0,
                    ))

            if failure is not None:
                raise failure

        return results

    async def _process_batch(self, batch: list[T], number: int, total: int) -> list[R]:
        try:
            return await self._processor(batch)
        except Exception as e:
            raise BatchError(f"Batch {number}/{total} failed: {e}", number, total) from e
