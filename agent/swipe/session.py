"""
Swipe Session
큐 + 카드(트래커/리졸버) 조립, 입력 라우팅, 화면 상태 계산

A card is built per visible post. The front card receives input; the
stacked card behind it is inert. When the front card commits, the queue
advances and a new front card (fresh GestureState) is built.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from config.settings import settings
from agent.platforms.interface import SocialPost
from agent.swipe.gesture import CardRole, Direction, GestureTracker, Outcome
from agent.swipe.queue import QueueController
from agent.swipe.resolver import DecisionResolver

logger = logging.getLogger("agent.swipe.session")


class SessionStatus(str, Enum):
    LOADING = "loading"
    ERROR = "error"
    DONE = "done"
    ACTIVE = "active"


class SessionMode(str, Enum):
    LIVE = "live"
    MOCK = "mock"


@dataclass
class SwipeCard:
    post: SocialPost
    tracker: GestureTracker
    resolver: Optional[DecisionResolver] = None

    @property
    def role(self) -> CardRole:
        return self.tracker.role

    @property
    def direction(self) -> Direction:
        return self.tracker.state.direction


@dataclass(frozen=True)
class SessionView:
    status: SessionStatus
    mode: SessionMode
    deleted: int
    kept: int
    queue_length: int
    has_more: bool
    loading_more: bool
    error: Optional[str] = None
    cards: List[Dict] = field(default_factory=list)


class SwipeSession:

    def __init__(
        self,
        queue: QueueController,
        threshold: float = None,
        exit_duration_ms: int = None,
        visible: int = None,
    ):
        self.queue = queue
        self.threshold = threshold
        self.exit_duration_ms = exit_duration_ms
        self.visible = settings.VISIBLE_CARDS if visible is None else visible
        self._front: Optional[SwipeCard] = None

    @property
    def counters(self):
        return self.queue.counters

    async def start(self):
        await self.queue.start()
        self._sync_front()

    # ===========================================
    # 카드
    # ===========================================
    def _build_card(self, post: SocialPost, role: CardRole) -> SwipeCard:
        tracker = GestureTracker(role=role, threshold=self.threshold)
        card = SwipeCard(post=post, tracker=tracker)
        if role == CardRole.FRONT:
            card.resolver = DecisionResolver(
                tracker,
                on_commit=lambda outcome, c=card: self._commit(c, outcome),
                exit_duration_ms=self.exit_duration_ms,
            )
        return card

    def _sync_front(self):
        """front 포스트가 바뀌었으면 카드(제스처 상태)를 새로 만든다"""
        front_post = self.queue.current()
        if front_post is None:
            self._front = None
        elif self._front is None or self._front.post.id != front_post.id:
            self._front = self._build_card(front_post, CardRole.FRONT)

    @property
    def front(self) -> Optional[SwipeCard]:
        self._sync_front()
        return self._front

    def visible_cards(self) -> List[SwipeCard]:
        cards = []
        front = self.front
        if front is None:
            return cards
        cards.append(front)
        for post in self.queue.peek(self.visible)[1:]:
            cards.append(self._build_card(post, CardRole.STACKED))
        return cards

    def _commit(self, card: SwipeCard, outcome: Outcome):
        # commit 은 카드 단위로 한 번만 들어온다 (resolver 보장)
        if self.queue.current() is None or self.queue.current().id != card.post.id:
            logger.error(f"[SESSION] Commit for {card.post.id} does not match the front post; ignored")
            return
        self.queue.advance(outcome)
        self._sync_front()

    # ===========================================
    # 입력 (front 카드로 라우팅)
    # ===========================================
    def press(self, x: float, y: float) -> bool:
        card = self.front
        return card.tracker.start(x, y) if card else False

    def drag(self, x: float, y: float) -> Optional[Direction]:
        card = self.front
        return card.tracker.move(x, y) if card else None

    def release(self) -> Optional[Outcome]:
        card = self.front
        return card.resolver.release() if card else None

    def delete(self) -> Optional[Outcome]:
        card = self.front
        return card.resolver.trigger(Outcome.DELETE) if card else None

    def keep(self) -> Optional[Outcome]:
        card = self.front
        return card.resolver.trigger(Outcome.KEEP) if card else None

    async def settle(self):
        """진행 중인 exit transition 을 기다림"""
        card = self._front
        if card is not None and card.resolver is not None:
            await card.resolver.wait()

    # ===========================================
    # 화면 상태
    # ===========================================
    @property
    def status(self) -> SessionStatus:
        q = self.queue
        if not q.started or q.bootstrapping:
            return SessionStatus.LOADING
        if len(q):
            return SessionStatus.ACTIVE
        if q.refilling:
            return SessionStatus.LOADING
        if q.last_error:
            return SessionStatus.ERROR
        if q.cursor is None:
            return SessionStatus.DONE
        # 커서는 있는데 리필이 아직 안 뜬 상태 (직전 실패 없음)
        return SessionStatus.LOADING

    def view(self) -> SessionView:
        q = self.queue
        status = self.status
        return SessionView(
            status=status,
            mode=SessionMode.MOCK if q.mock_mode else SessionMode.LIVE,
            deleted=q.counters.deleted,
            kept=q.counters.kept,
            queue_length=len(q),
            has_more=q.has_more,
            loading_more=q.refilling and len(q) > 0,
            error=q.last_error if status == SessionStatus.ERROR else None,
            cards=[
                {
                    "id": c.post.id,
                    "role": c.role.value,
                    "dx": c.tracker.state.dx,
                    "dy": c.tracker.state.dy,
                    "rotation": c.tracker.rotation,
                    "phase": c.tracker.state.phase.value,
                    "direction": c.direction.value,
                }
                for c in self.visible_cards()
            ],
        )
