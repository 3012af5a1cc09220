from __future__ import annotations

"""JSON lines render logs and per-frame metrics."""

import csv
import json
from collections import Counter
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from ...config import Config


class MetricAggregator:
    """Accumulate named counters for a frame and append them to ``metrics.csv``."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.counts: Counter[str] = Counter()
        self._fieldnames: list[str] | None = None

    def add(self, name: str, amount: int = 1) -> None:
        self.counts[name] += amount

    def flush(self, frame: int) -> None:
        """Write the counters for ``frame`` and reset them.

        The column set is fixed by the first row written to a new file;
        later counters without a column are dropped.
        """

        self.path.parent.mkdir(parents=True, exist_ok=True)
        file_exists = self.path.exists() and self.path.stat().st_size > 0
        if self._fieldnames is None:
            if file_exists:
                with self.path.open(newline="") as fh:
                    self._fieldnames = next(csv.reader(fh), None)
            if not self._fieldnames:
                self._fieldnames = ["frame", *sorted(self.counts)]
        with self.path.open("a", newline="") as fh:
            writer = csv.DictWriter(
                fh, fieldnames=self._fieldnames, extrasaction="ignore"
            )
            if not file_exists:
                writer.writeheader()
            writer.writerow({"frame": frame, **self.counts})
        self.counts.clear()


_AGGREGATOR: MetricAggregator | None = None


def _get_aggregator() -> MetricAggregator:
    global _AGGREGATOR
    path = Path(Config.output_path("metrics.csv"))
    if _AGGREGATOR is None or _AGGREGATOR.path != path:
        _AGGREGATOR = MetricAggregator(path)
    return _AGGREGATOR


def log_record(
    category: str,
    label: str,
    *,
    frame: int | None = None,
    value: dict[str, Any] | BaseModel | None = None,
    path: Path | None = None,
    **extra: Any,
) -> None:
    """Append a record to ``<output_dir>/<category>_log.jsonl``.

    ``value`` may be a mapping or a :class:`pydantic.BaseModel`; its fields
    are merged into the record next to ``label`` and ``frame``.
    """

    if path is None:
        path = Path(Config.output_path(f"{category}_log.jsonl"))
    path.parent.mkdir(parents=True, exist_ok=True)
    data: dict[str, Any] = {"label": label}
    if frame is not None:
        data["frame"] = frame
    if isinstance(value, BaseModel):
        data.update(value.model_dump(mode="json"))
    elif value is not None:
        data.update(value)
    if extra:
        data.update(extra)
    with path.open("a") as fh:
        fh.write(json.dumps(data) + "\n")


def add_metric(name: str, amount: int = 1) -> None:
    """Add ``amount`` to the current frame's ``name`` counter."""

    _get_aggregator().add(name, amount)


def flush_metrics(frame: int) -> None:
    """Flush aggregated metrics for ``frame`` to disk."""

    _get_aggregator().flush(frame)


def reset_metrics() -> None:
    """Forget the current aggregator so the next write starts a new file."""

    global _AGGREGATOR
    _AGGREGATOR = None


__all__ = [
    "MetricAggregator",
    "add_metric",
    "flush_metrics",
    "log_record",
    "reset_metrics",
]
