"""
Per-client submission quota for the order intake endpoint.

Clients are identified by a hash of their network address, so raw IPs are
never stored. Entries live in ``submission_rate_limits``; stale ones are
deleted eagerly at the start of every check instead of by a background job.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Mapping

from app.core.config import rate_limit_logger, settings
from app.core.exceptions import PersistenceException
from app.db.crud.rate_limit import RateLimitRepository
from app.db.mixins import utcnow

UNKNOWN_CLIENT = "unknown"


@dataclass
class RateLimitResult:
    """
    Result of a rate limit check.

    Attributes:
        allowed: Whether the submission may go ahead.
        ip_hash: Hash of the client identifier, needed later by ``record``.
        count: Submissions already seen inside the window.
        limit: The configured quota.
    """

    allowed: bool
    ip_hash: str
    count: int
    limit: int


def hash_ip(ip: str) -> str:
    """
    32-bit rolling hash (``h * 31 + code``) of the address, as signed hex.

    Only meant to keep raw addresses out of storage; collisions are harmless.
    """
    h = 0
    for ch in ip:
        h = ((h << 5) - h + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return format(h, "x")


def client_identifier(headers: Mapping[str, str]) -> str:
    """
    First ``X-Forwarded-For`` hop, else ``X-Real-IP``, else ``"unknown"``.

    Clients without either header share one bucket.
    """
    forwarded = headers.get("x-forwarded-for") or ""
    first_hop = forwarded.split(",")[0].strip()
    if first_hop:
        return first_hop
    real_ip = (headers.get("x-real-ip") or "").strip()
    return real_ip or UNKNOWN_CLIENT


class RateLimiter:
    def __init__(
        self,
        repo: RateLimitRepository,
        limit: int | None = None,
        window: timedelta | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.repo = repo
        self.limit = limit if limit is not None else settings.RATE_LIMIT_MAX
        self.window = window or timedelta(minutes=settings.RATE_LIMIT_WINDOW_MINUTES)
        self.clock = clock

    def check(self, identifier: str) -> RateLimitResult:
        """
        Purge expired entries, then count this client's entries in the window.

        Nothing is reserved here: the caller records the submission with
        ``record`` once the inquiry is stored, so a failed insert costs no
        quota. A storage error while purging or counting is logged and the
        request is let through.
        """
        ip_hash = hash_ip(identifier)
        cutoff = self.clock() - self.window

        try:
            purged = self.repo.purge_older_than(cutoff)
            if purged:
                rate_limit_logger.debug(f"Purged {purged} expired rate limit entries")
        except PersistenceException as e:
            rate_limit_logger.error(f"Rate limit cleanup failed: {e}")

        try:
            count = self.repo.count_since(ip_hash, cutoff)
        except PersistenceException as e:
            rate_limit_logger.error(f"Rate limit check failed for {ip_hash}: {e}")
            count = 0

        rate_limit_logger.info(
            f"IP hash {ip_hash} has {count} submissions in the current window"
        )
        allowed = count < self.limit
        if not allowed:
            rate_limit_logger.warning(f"Rate limit exceeded for IP hash: {ip_hash}")
        return RateLimitResult(allowed=allowed, ip_hash=ip_hash, count=count, limit=self.limit)

    def record(self, ip_hash: str) -> None:
        """Store one submission for ``ip_hash``. Raises PersistenceException."""
        self.repo.add(ip_hash, self.clock())
