"""Affiliate performance counters backed by a local key-value store.

The counters live under a single key as a JSON object. A missing or
corrupt entry is never fatal: it is logged and the zero defaults are used.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Protocol

from dreamcar.models.performance import PerformanceCounters
from dreamcar.utils.converters import safe_float, safe_int

logger = logging.getLogger(__name__)

STORAGE_KEY = "amazonAffiliatePerformance"
_COUNTER_FIELDS = {"clicks", "impressions", "conversions", "revenue"}


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """Process-local store, used when nothing needs to survive a restart."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """String key/value pairs kept in a single JSON object on disk."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not hold a JSON object")
        return data

    def get(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read()
        except ValueError:
            logger.warning("Overwriting unreadable store at %s", self.path)
            data = {}
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
        tmp.replace(self.path)


class PerformanceTracker:
    """Click/impression/conversion tallies, saved after every mutation.

    Not thread-safe; the tracker is read-modify-written synchronously by
    a single caller at a time.
    """

    def __init__(self, store: KeyValueStore, key: str = STORAGE_KEY) -> None:
        self.store = store
        self.key = key
        self._counters = self._load()

    def _load(self) -> PerformanceCounters:
        counters = PerformanceCounters()
        try:
            raw = self.store.get(self.key)
            if not raw:
                return counters
            saved = json.loads(raw)
            if not isinstance(saved, dict):
                raise ValueError("saved counters are not a JSON object")
        except (OSError, ValueError) as e:
            logger.warning("Could not load affiliate performance data: %s", e)
            return counters

        return PerformanceCounters(
            clicks=safe_int(saved.get("clicks"), counters.clicks),
            impressions=safe_int(saved.get("impressions"), counters.impressions),
            conversions=safe_int(saved.get("conversions"), counters.conversions),
            revenue=safe_float(saved.get("revenue"), counters.revenue),
        )

    def _save(self) -> None:
        payload = self._counters.model_dump(include=_COUNTER_FIELDS)
        try:
            self.store.set(self.key, json.dumps(payload))
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Could not save affiliate performance data: %s", e)

    def record_click(self, product_id: str) -> PerformanceCounters:
        self._counters.clicks += 1
        self._save()
        logger.info("Amazon affiliate click tracked: %s", product_id)
        return self.snapshot()

    def record_impression(self, count: int) -> PerformanceCounters:
        if count < 0:
            raise ValueError("impression count must not be negative")
        self._counters.impressions += count
        self._save()
        return self.snapshot()

    def record_conversion(self, product_id: str, amount: float) -> PerformanceCounters:
        self._counters.conversions += 1
        self._counters.revenue += float(amount)
        self._save()
        logger.info("Amazon affiliate conversion tracked: %s amount=%s", product_id, amount)
        return self.snapshot()

    def snapshot(self) -> PerformanceCounters:
        """A copy of the current counters, including derived ratios."""
        return self._counters.model_copy()
