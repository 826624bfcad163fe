"""Retry policy for throttled (HTTP 429) Notion responses.

Notion signals throttling with status 429 and a ``Retry-After`` header
holding the number of seconds to wait. The client honours that delay and
re-sends the identical request.
"""

import math
from dataclasses import dataclass
from typing import Optional


@dataclass
class ThrottlePolicy:
    """Configuration for retrying throttled requests.

    Attributes:
        default_delay: Seconds to wait when Retry-After is absent or
            unparseable (default: 1.0)
        max_retries: Maximum number of 429 retries for one call. None
            (the default) keeps retrying for as long as the server throttles.

    Example:
        >>> policy = ThrottlePolicy()
        >>> policy.parse_retry_after("2")
        2.0
        >>> policy.parse_retry_after(None)
        1.0
    """

    default_delay: float = 1.0
    max_retries: Optional[int] = None

    def parse_retry_after(self, value: Optional[str]) -> float:
        """Convert a Retry-After header value to seconds.

        Only the delta-seconds form is understood; anything else falls back
        to ``default_delay``.
        """
        if value is None:
            return self.default_delay
        try:
            delay = float(value.strip())
        except ValueError:
            return self.default_delay
        if not math.isfinite(delay) or delay < 0:
            return self.default_delay
        return delay

    def exhausted(self, retries_done: int) -> bool:
        """Check whether another retry would exceed the cap."""
        return self.max_retries is not None and retries_done >= self.max_retries
