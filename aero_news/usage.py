"""
Daily usage cap for the metered summarization API.

The counter lives in a small JSON file:

    {"date": "2026-10-18", "callsToday": 42}

Every read reloads the file and resets the count when the stored UTC date
is not today. Every `record` rewrites the file before returning, so a
crashed run never loses calls it already made. A missing or corrupt file
counts as zero calls today.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
import json
import logging
import os
from pathlib import Path
import tempfile
from typing import Callable


logger = logging.getLogger("aero_news.usage")


def utc_today() -> str:
    """Today's UTC date as YYYY-MM-DD."""
    return datetime.now(timezone.utc).date().isoformat()


@dataclass
class UsageCounter:
    """Persisted counter state.

    Attributes:
        date: UTC date the count belongs to (YYYY-MM-DD)
        calls_today: Calls recorded on that date
    """

    date: str
    calls_today: int = 0

    def to_dict(self) -> dict[str, object]:
        return {"date": self.date, "callsToday": self.calls_today}


class UsageLimiter:
    """File-backed daily call counter.

    Attributes:
        path: Location of the counter JSON file
        today: Callable returning the current UTC date string; injectable for tests
    """

    def __init__(self, path: Path, today: Callable[[], str] | None = None):
        self.path = Path(path)
        self.today = today or utc_today

    def load(self) -> UsageCounter:
        """Read the counter, applying the day rollover."""
        current = self.today()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return UsageCounter(date=current)
        except (OSError, ValueError) as exc:
            logger.warning("Usage counter unreadable, treating as zero: %s", exc)
            return UsageCounter(date=current)

        if not isinstance(data, dict) or data.get("date") != current:
            return UsageCounter(date=current)
        calls = data.get("callsToday")
        if isinstance(calls, bool) or not isinstance(calls, int) or calls < 0:
            return UsageCounter(date=current)
        return UsageCounter(date=current, calls_today=calls)

    def save(self, counter: UsageCounter) -> None:
        """Durably replace the counter file (write, fsync, rename)."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=".usage-", suffix=".json", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(counter.to_dict(), handle, indent=2)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def calls_today(self) -> int:
        return self.load().calls_today

    def can_spend(self, calls_needed: int = 1, cap: int = 0) -> bool:
        """True when `calls_needed` more calls fit under `cap` today."""
        return self.load().calls_today + calls_needed <= cap

    def record(self, count: int = 1) -> int:
        """Add `count` calls to today's total, persist, and return the new total."""
        counter = self.load()
        counter.calls_today += count
        self.save(counter)
        return counter.calls_today

    def remaining(self, cap: int) -> int:
        return max(0, cap - self.load().calls_today)

    def simulate(self, calls: int) -> UsageCounter:
        """Force today's count to `calls` (operator testing of the cap)."""
        if calls < 0:
            raise ValueError("calls must be >= 0")
        counter = UsageCounter(date=self.today(), calls_today=calls)
        self.save(counter)
        return counter

    def reset(self) -> UsageCounter:
        return self.simulate(0)
