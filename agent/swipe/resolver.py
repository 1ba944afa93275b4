"""
Decision Resolver
release 시점의 dx 로 DELETE / KEEP / CANCEL 결정

Idle --start--> Dragging --release(|dx| <= threshold)--> Idle (snap back)
Dragging --release(|dx| > threshold)--> Committing --exit transition--> commit
Idle|Dragging --trigger(outcome)--> Committing --exit transition--> commit

Committing is terminal for the card: further release/trigger calls are
ignored, so on_commit runs at most once per card.
"""
import asyncio
import logging
from typing import Callable, Optional

from config.settings import settings
from agent.swipe.gesture import (
    CardRole,
    Direction,
    GesturePhase,
    GestureTracker,
    Outcome,
)

logger = logging.getLogger("agent.swipe.resolver")

# 버튼/키보드 트리거 시 카드를 화면 밖으로 밀어내는 거리
EXIT_OFFSET = 300.0


class DecisionResolver:

    def __init__(
        self,
        tracker: GestureTracker,
        on_commit: Callable[[Outcome], None],
        exit_duration_ms: int = None,
    ):
        self.tracker = tracker
        self.on_commit = on_commit
        self.exit_duration_ms = settings.EXIT_DURATION_MS if exit_duration_ms is None else exit_duration_ms
        self.outcome: Optional[Outcome] = None
        self.committed = False
        self._exit_task: Optional[asyncio.Task] = None

    @property
    def committing(self) -> bool:
        return self.tracker.state.phase == GesturePhase.COMMITTING

    def resolve(self, dx: float) -> Outcome:
        threshold = self.tracker.threshold
        if dx > threshold:
            return Outcome.KEEP
        if dx < -threshold:
            return Outcome.DELETE
        return Outcome.CANCEL

    def release(self) -> Optional[Outcome]:
        """드래그 종료. 드래그 중이 아니면 (Committing 포함) no-op -> None"""
        if self.tracker.state.phase != GesturePhase.DRAGGING:
            return None

        outcome = self.resolve(self.tracker.state.dx)
        if outcome == Outcome.CANCEL:
            self.tracker.snap_back()
            return outcome

        self._begin_commit(outcome)
        return outcome

    def trigger(self, outcome: Outcome) -> Optional[Outcome]:
        """키보드/버튼 트리거 - 드래그와 동일한 exit transition 경로"""
        if outcome == Outcome.CANCEL:
            raise ValueError("trigger() requires DELETE or KEEP")
        if self.committing or self.tracker.role != CardRole.FRONT:
            return None

        state = self.tracker.state
        if outcome == Outcome.KEEP:
            state.dx, state.direction = EXIT_OFFSET, Direction.RIGHT
        else:
            state.dx, state.direction = -EXIT_OFFSET, Direction.LEFT
        state.dy = 0.0

        self._begin_commit(outcome)
        return outcome

    def _begin_commit(self, outcome: Outcome):
        self.outcome = outcome
        self.tracker.state.phase = GesturePhase.COMMITTING
        logger.debug(f"[SWIPE] {outcome.value} - exit transition {self.exit_duration_ms}ms")
        loop = asyncio.get_running_loop()
        self._exit_task = loop.create_task(self._finish(outcome))

    async def _finish(self, outcome: Outcome):
        await asyncio.sleep(self.exit_duration_ms / 1000.0)
        if self.committed:
            return
        self.committed = True
        self.on_commit(outcome)

    async def wait(self):
        """exit transition 완료까지 대기 (commit 포함)"""
        if self._exit_task is not None:
            await self._exit_task
