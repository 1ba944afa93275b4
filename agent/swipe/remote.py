"""
Remote Client
TimelineProvider 호출을 결과 객체로 감싸는 계층 (rate limit 선차단 포함)

fetch_page  -> PageResult | RateLimited | Failure
delete_item -> DeleteResult | RateLimited | Failure
"""
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Union

from config.settings import settings
from agent.platforms.interface import SocialPost, TimelineProvider
from agent.swipe.errors import RateLimitExceeded, MalformedResponse
from agent.swipe.rate_limiter import RateLimiter

logger = logging.getLogger("agent.swipe.remote")


@dataclass(frozen=True)
class PageResult:
    items: List[SocialPost] = field(default_factory=list)
    next_cursor: Optional[str] = None


@dataclass(frozen=True)
class DeleteResult:
    deleted: bool
    id: str


@dataclass(frozen=True)
class RateLimited:
    reset_at: Optional[datetime] = None
    retry_after: Optional[int] = None


@dataclass(frozen=True)
class Failure:
    error: str
    malformed: bool = False


FetchOutcome = Union[PageResult, RateLimited, Failure]
DeleteOutcome = Union[DeleteResult, RateLimited, Failure]


class RemoteClient:

    def __init__(
        self,
        provider: TimelineProvider,
        rate_limiter: RateLimiter,
        page_size: int = None,
        timeout: float = None,
    ):
        self.provider = provider
        self.rate_limiter = rate_limiter
        self.page_size = page_size or settings.PAGE_SIZE
        self.timeout = timeout if timeout is not None else settings.REMOTE_TIMEOUT_SECONDS

    def _refused(self) -> Optional[RateLimited]:
        status = self.rate_limiter.check()
        if status.limited:
            return RateLimited(reset_at=status.reset_at, retry_after=status.retry_after)
        return None

    def _limited(self, error: RateLimitExceeded) -> RateLimited:
        reset_at = self.rate_limiter.record(error.reset_at)
        status = self.rate_limiter.check()
        return RateLimited(reset_at=reset_at, retry_after=status.retry_after or 1)

    async def fetch_page(self, cursor: Optional[str] = None) -> FetchOutcome:
        refused = self._refused()
        if refused:
            logger.info(f"[REMOTE] fetch refused locally (retry in {refused.retry_after}s)")
            return refused

        try:
            page = await asyncio.wait_for(
                self.provider.fetch_timeline(cursor=cursor, count=self.page_size),
                timeout=self.timeout,
            )
        except RateLimitExceeded as e:
            return self._limited(e)
        except MalformedResponse as e:
            logger.error(f"[REMOTE] malformed timeline page: {e}")
            return Failure(error=str(e), malformed=True)
        except Exception as e:
            logger.error(f"[REMOTE] fetch failed: {e!r}")
            return Failure(error=str(e) or type(e).__name__)

        logger.info(f"[REMOTE] fetched {len(page.posts)} posts (next={page.next_cursor})")
        return PageResult(items=list(page.posts), next_cursor=page.next_cursor or None)

    async def delete_item(self, item_id: str) -> DeleteOutcome:
        refused = self._refused()
        if refused:
            logger.info(f"[REMOTE] delete {item_id} refused locally (retry in {refused.retry_after}s)")
            return refused

        try:
            deleted = await asyncio.wait_for(self.provider.delete_post(item_id), timeout=self.timeout)
        except RateLimitExceeded as e:
            return self._limited(e)
        except Exception as e:
            logger.error(f"[REMOTE] delete {item_id} failed: {e!r}")
            return Failure(error=str(e) or type(e).__name__)

        return DeleteResult(deleted=bool(deleted), id=item_id)
