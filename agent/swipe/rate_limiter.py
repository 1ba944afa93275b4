"""
Rate Limiter
플랫폼 429 이후 reset 시각까지 모든 원격 호출을 로컬에서 차단

One instance is shared by reference between the queue, the remote client and
the HTTP app, so a 429 seen by any of them blocks all of them.
"""
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from config.settings import settings

logger = logging.getLogger("agent.swipe.rate_limiter")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class RateLimitStatus:
    limited: bool
    reset_at: Optional[datetime] = None
    retry_after: Optional[int] = None  # seconds, rounded up


class RateLimiter:

    def __init__(self, default_backoff: float = None, clock: Callable[[], datetime] = _utcnow):
        if default_backoff is None:
            default_backoff = settings.RATE_LIMIT_BACKOFF_SECONDS
        self.default_backoff = timedelta(seconds=default_backoff)
        self._clock = clock
        self._reset_at: Optional[datetime] = None

    @property
    def reset_at(self) -> Optional[datetime]:
        return self._reset_at

    def check(self) -> RateLimitStatus:
        """현재 차단 여부 (reset 시각이 지나면 자동 해제)"""
        now = self._clock()
        if self._reset_at is not None and now < self._reset_at:
            remaining = (self._reset_at - now).total_seconds()
            return RateLimitStatus(
                limited=True,
                reset_at=self._reset_at,
                retry_after=max(1, math.ceil(remaining)),
            )
        return RateLimitStatus(limited=False)

    def record(self, reset_at: Optional[datetime] = None) -> datetime:
        """429 기록. reset 힌트가 없거나 이미 지난 시각이면 기본 backoff 적용"""
        now = self._clock()
        if reset_at is not None and reset_at.tzinfo is None:
            reset_at = reset_at.replace(tzinfo=timezone.utc)
        if reset_at is None or reset_at <= now:
            reset_at = now + self.default_backoff

        # 이미 더 늦은 reset 이 기록되어 있으면 유지
        if self._reset_at is None or reset_at > self._reset_at:
            self._reset_at = reset_at
        logger.warning(f"[RATE] Rate limited until {self._reset_at.isoformat()}")
        return self._reset_at

    def clear(self):
        self._reset_at = None
