"""Order-preserving dispatch of per-light work.

Rays of one frame only read that frame's obstacles, so lights can be cast in
separate processes. Results are always returned in submission order, which
keeps the merged collision list identical to a sequential run and therefore
keeps the buffer's last-write-wins outcome reproducible.
"""

from __future__ import annotations

import logging
from concurrent.futures import ProcessPoolExecutor
from typing import Any, Callable, Iterable, List

logger = logging.getLogger(__name__)


class LightDispatcher:
    """Map work over lights using a lazily created process pool.

    Parameters
    ----------
    workers:
        Number of worker processes. ``1`` or less runs everything in the
        calling process.
    """

    def __init__(self, workers: int = 1) -> None:
        self.workers = max(1, int(workers))
        self._pool: ProcessPoolExecutor | None = None

    def __enter__(self) -> "LightDispatcher":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    @property
    def parallel(self) -> bool:
        return self.workers > 1

    def map(self, func: Callable[[Any], Any], items: Iterable[Any]) -> List[Any]:
        """Return ``[func(item) for item in items]``, possibly in parallel."""

        item_list = list(items)
        if not self.parallel or len(item_list) < 2:
            return [func(item) for item in item_list]
        if self._pool is None:
            logger.info("Starting %d ray casting workers", self.workers)
            self._pool = ProcessPoolExecutor(max_workers=self.workers)
        return list(self._pool.map(func, item_list))

    def close(self) -> None:
        """Shut down the worker pool if it was started."""

        if self._pool is not None:
            self._pool.shutdown()
            self._pool = None


__all__ = ["LightDispatcher"]
