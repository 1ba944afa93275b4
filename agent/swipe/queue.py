"""
Queue Controller
리뷰 대기열 + 페이지 커서 + 자동 리필

- advance() 는 동기: front 제거 -> 카운터 갱신 -> (DELETE 면) 원격 삭제를 fire-and-forget
- 원격 삭제 실패는 로그만 남김 (로컬 제거는 롤백하지 않음)
- 리필은 동시에 하나만 (in-flight 플래그)
- 초기 fetch 가 실패하면 샘플로 대체하고 세션 끝까지 MOCK 모드 유지
"""
import asyncio
import logging
from collections import deque
from typing import Callable, Deque, Iterable, List, Optional, Set

from config.settings import settings
from agent.platforms.interface import SocialPost
from agent.swipe.counters import SessionCounters
from agent.swipe.gesture import Outcome
from agent.swipe.remote import (
    DeleteOutcome,
    DeleteResult,
    Failure,
    FetchOutcome,
    PageResult,
    RateLimited,
    RemoteClient,
)
from agent.swipe.samples import sample_posts

logger = logging.getLogger("agent.swipe.queue")


def _describe(result: FetchOutcome) -> str:
    if isinstance(result, RateLimited):
        return f"Rate limited by provider (retry in {result.retry_after}s)"
    if isinstance(result, Failure):
        return f"Failed to fetch posts: {result.error}"
    return ""


def _log_delete_result(item_id: str, result: DeleteOutcome):
    """기본 result sink - 로그만"""
    if isinstance(result, DeleteResult) and result.deleted:
        logger.info(f"[QUEUE] Remote delete OK: {item_id}")
    else:
        logger.warning(f"[QUEUE] Remote delete not confirmed for {item_id}: {result}")


class QueueController:

    def __init__(
        self,
        remote: RemoteClient,
        counters: SessionCounters = None,
        low_water_mark: int = None,
        fallback: Callable[[], List[SocialPost]] = sample_posts,
        on_delete_result: Callable[[str, DeleteOutcome], None] = _log_delete_result,
    ):
        self.remote = remote
        self.counters = counters or SessionCounters()
        self.low_water_mark = settings.LOW_WATER_MARK if low_water_mark is None else low_water_mark
        self.fallback = fallback
        self.on_delete_result = on_delete_result

        self.items: Deque[SocialPost] = deque()
        self.cursor: Optional[str] = None
        self.mock_mode = False
        self.started = False
        self.bootstrapping = False
        self.refilling = False
        self.last_error: Optional[str] = None

        self._seen: Set[str] = set()       # queued or committed this session
        self._committed: Set[str] = set()
        self._tasks: Set[asyncio.Task] = set()

    # ===========================================
    # 조회
    # ===========================================
    def current(self) -> Optional[SocialPost]:
        return self.items[0] if self.items else None

    def peek(self, n: int) -> List[SocialPost]:
        return list(self.items)[:n]

    def __len__(self) -> int:
        return len(self.items)

    @property
    def has_more(self) -> bool:
        return self.cursor is not None

    @property
    def exhausted(self) -> bool:
        """큐가 비었고 더 가져올 것도 없음 (정상 종료 상태)"""
        return not self.items and self.cursor is None and not self.refilling and not self.bootstrapping

    def is_committed(self, item_id: str) -> bool:
        return item_id in self._committed

    # ===========================================
    # 초기 로드
    # ===========================================
    async def start(self):
        """첫 페이지 로드. 두 번째 호출부터는 no-op"""
        if self.started:
            return
        self.started = True
        self.bootstrapping = True
        try:
            result = await self.remote.fetch_page(None)
        finally:
            self.bootstrapping = False

        if isinstance(result, PageResult):
            self._accept(result)
            logger.info(f"[QUEUE] LIVE mode: {len(self.items)} posts queued (more={self.has_more})")
            self._refill_if_empty()
            return

        self.last_error = _describe(result)
        self.mock_mode = True
        self.cursor = None
        self._enqueue(self.fallback())
        logger.warning(f"[QUEUE] Initial fetch failed ({self.last_error}); MOCK mode with {len(self.items)} samples")

    # ===========================================
    # commit
    # ===========================================
    def advance(self, outcome: Outcome) -> Optional[SocialPost]:
        if outcome not in (Outcome.DELETE, Outcome.KEEP):
            raise ValueError(f"advance() requires DELETE or KEEP, got {outcome!r}")
        if not self.items:
            logger.warning(f"[QUEUE] advance({outcome.value}) on empty queue ignored")
            return None

        item = self.items.popleft()
        self._committed.add(item.id)
        self.counters.record(outcome)
        logger.info(
            f"[QUEUE] {outcome.value.upper()} {item.id} "
            f"(deleted={self.counters.deleted}, kept={self.counters.kept}, queue={len(self.items)})"
        )

        if outcome == Outcome.DELETE:
            self._spawn(self._delete(item.id))

        if len(self.items) <= self.low_water_mark:
            self.request_refill()
        return item

    async def _delete(self, item_id: str):
        if self.mock_mode:
            result: DeleteOutcome = DeleteResult(deleted=True, id=item_id)
        else:
            result = await self.remote.delete_item(item_id)
        self.on_delete_result(item_id, result)

    # ===========================================
    # 리필
    # ===========================================
    def request_refill(self) -> bool:
        """리필 요청. 실제로 fetch 를 띄웠으면 True"""
        if self.mock_mode or not self.started or self.bootstrapping:
            return False
        if self.cursor is None or self.refilling:
            return False
        self.refilling = True
        self._spawn(self._refill(self.cursor))
        return True

    async def _refill(self, cursor: str):
        try:
            result = await self.remote.fetch_page(cursor)
        finally:
            self.refilling = False

        if not isinstance(result, PageResult):
            # 큐는 그대로 두고 에러만 기록
            self.last_error = _describe(result)
            logger.warning(f"[QUEUE] Refill failed: {self.last_error}")
            return

        added = self._accept(result)
        logger.info(f"[QUEUE] Refilled +{added} (queue={len(self.items)}, more={self.has_more})")
        self._refill_if_empty()

    def _refill_if_empty(self):
        if not self.items and self.cursor is not None:
            self.request_refill()

    def _accept(self, page: PageResult) -> int:
        self.last_error = None
        self.cursor = page.next_cursor
        return self._enqueue(page.items)

    def _enqueue(self, posts: Iterable[SocialPost]) -> int:
        added = 0
        for post in posts:
            if post.id in self._seen:
                logger.debug(f"[QUEUE] Duplicate {post.id} dropped")
                continue
            self._seen.add(post.id)
            self.items.append(post)
            added += 1
        return added

    # ===========================================
    # 백그라운드 태스크
    # ===========================================
    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task):
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"[QUEUE] Background task failed: {exc!r}")

    @property
    def pending_tasks(self) -> int:
        return len(self._tasks)

    async def drain(self):
        """남은 삭제/리필 태스크가 모두 끝날 때까지 대기"""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
