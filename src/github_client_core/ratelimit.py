"""Rate limit snapshots and the per-client rate limit tracker.

Every response carries ``X-RateLimit-*`` headers describing the quota of the
category the request belonged to. The tracker keeps the most recent snapshot
per category so a client can refuse to send a request it already knows would
be rejected:

```python
tracker = RateLimitTracker()
tracker.record(RateCategory.CORE, parse_rate(response.headers))

if (error := tracker.check_before_call(RateCategory.CORE)) is not None:
    raise error
```
"""

import enum
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from threading import Lock
from typing import Any

from github_client_core.errors.exceptions import RateLimitError

logger = logging.getLogger(__name__)

HEADER_RATE_LIMIT = "X-RateLimit-Limit"
HEADER_RATE_REMAINING = "X-RateLimit-Remaining"
HEADER_RATE_RESET = "X-RateLimit-Reset"


class RateCategory(enum.Enum):
    """Independent quotas tracked by the API."""

    CORE = "core"
    SEARCH = "search"


def category_for_path(path: str) -> RateCategory:
    """Map a request path to its rate limit category."""
    if path.startswith("/search/"):
        return RateCategory.SEARCH
    return RateCategory.CORE


def _timestamp(value: Any) -> datetime | None:
    try:
        seconds = int(value)
    except (TypeError, ValueError):
        return None
    if seconds == 0:
        return None
    try:
        return datetime.fromtimestamp(seconds, UTC)
    except (OverflowError, OSError, ValueError):
        logger.debug(f"Ignoring out-of-range rate limit reset {seconds}")
        return None


def _count(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


@dataclass(frozen=True)
class Rate:
    """Quota snapshot for one category.

    ``reset`` is the absolute UTC time the quota refills, None when unknown.
    """

    limit: int = 0
    remaining: int = 0
    reset: datetime | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Rate":
        """Build from a ``rate_limit`` endpoint resource entry."""
        return cls(
            limit=_count(data.get("limit")),
            remaining=_count(data.get("remaining")),
            reset=_timestamp(data.get("reset")),
        )

    def is_exhausted(self, now: datetime | None = None) -> bool:
        """True if no calls remain and the reset time is strictly in the future."""
        if self.reset is None or self.remaining != 0:
            return False
        if now is None:
            now = datetime.now(UTC)
        return now < self.reset


ZERO_RATE = Rate()


def parse_rate(headers: Mapping[str, str]) -> Rate:
    """Parse ``X-RateLimit-*`` headers.

    Missing or unparsable values are treated as zero; rate headers are
    advisory and never turn a response into a failure.
    """
    return Rate(
        limit=_count(headers.get(HEADER_RATE_LIMIT)),
        remaining=_count(headers.get(HEADER_RATE_REMAINING)),
        reset=_timestamp(headers.get(HEADER_RATE_RESET)),
    )


@dataclass(frozen=True)
class RateLimits:
    """Quota for every category, as reported by the ``rate_limit`` endpoint."""

    core: Rate | None = None
    search: Rate | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "RateLimits":
        resources = data.get("resources") if isinstance(data, Mapping) else None
        if not isinstance(resources, Mapping):
            return cls()
        core = resources.get("core")
        search = resources.get("search")
        return cls(
            core=Rate.from_dict(core) if isinstance(core, Mapping) else None,
            search=Rate.from_dict(search) if isinstance(search, Mapping) else None,
        )


class RateLimitTracker:
    """Most recently observed rate snapshot per category.

    Holds exactly one snapshot per RateCategory, starting from the zero
    snapshot. The lock is held only for the dictionary read or write; the
    snapshots themselves are immutable, so readers never see a partial update.
    Concurrent writers to the same category resolve last-write-wins.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._rates: dict[RateCategory, Rate] = {category: ZERO_RATE for category in RateCategory}

    def get(self, category: RateCategory) -> Rate:
        with self._lock:
            return self._rates[category]

    def snapshot(self) -> dict[RateCategory, Rate]:
        """Copy of the whole table."""
        with self._lock:
            return dict(self._rates)

    def record(self, category: RateCategory, rate: Rate) -> None:
        """Overwrite the snapshot for ``category``."""
        with self._lock:
            self._rates[category] = rate
        logger.debug(f"Recorded {category.value} rate: {rate.remaining}/{rate.limit}, reset {rate.reset}")

    def check_before_call(self, category: RateCategory, now: datetime | None = None) -> RateLimitError | None:
        """Return an error if a call in ``category`` is known to be rejected.

        This never touches the network. It fires only when the stored snapshot
        has no remaining calls and its reset time is strictly after ``now``.

        Args:
            category: Rate category of the request about to be sent
            now: Current time (UTC); defaults to ``datetime.now(UTC)``

        Returns:
            RateLimitError carrying the stored snapshot, or None to proceed
        """
        rate = self.get(category)
        if not rate.is_exhausted(now):
            return None
        return RateLimitError(
            f"API rate limit of {rate.limit} still exceeded until {rate.reset}, not making remote request.",
            rate=rate,
        )
