"""
Gesture Tracker
포인터 이동 -> 1차원 displacement + 방향 힌트

Direction is advisory only (drives the swipe indicator); nothing commits
until release, which is the DecisionResolver's job.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from config.settings import settings

logger = logging.getLogger("agent.swipe.gesture")


class GesturePhase(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    COMMITTING = "committing"


class Direction(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    NONE = "none"


class Outcome(str, Enum):
    DELETE = "delete"  # swipe left
    KEEP = "keep"      # swipe right
    CANCEL = "cancel"  # snap back


class CardRole(str, Enum):
    FRONT = "front"      # interactive
    STACKED = "stacked"  # rendered behind the front card, inert


@dataclass
class GestureState:
    dx: float = 0.0
    dy: float = 0.0
    phase: GesturePhase = GesturePhase.IDLE
    direction: Direction = Direction.NONE

    @property
    def displacement(self) -> Tuple[float, float]:
        return (self.dx, self.dy)


def classify(dx: float, threshold: float) -> Direction:
    if dx > threshold:
        return Direction.RIGHT
    if dx < -threshold:
        return Direction.LEFT
    return Direction.NONE


class GestureTracker:

    def __init__(self, role: CardRole = CardRole.FRONT, threshold: float = None, rotation_factor: float = None):
        self.role = role
        self.threshold = settings.SWIPE_THRESHOLD if threshold is None else threshold
        self.rotation_factor = settings.ROTATION_FACTOR if rotation_factor is None else rotation_factor
        self.state = GestureState()
        self._origin: Tuple[float, float] = (0.0, 0.0)

    @property
    def interactive(self) -> bool:
        return self.role == CardRole.FRONT and self.state.phase != GesturePhase.COMMITTING

    @property
    def rotation(self) -> float:
        """카드 회전 각도 (deg) - 렌더러용"""
        return self.state.dx * self.rotation_factor

    def start(self, x: float, y: float) -> bool:
        """드래그 시작. 현재 위치에서 이어 잡을 수 있도록 origin = pointer - displacement"""
        if not self.interactive:
            return False
        self._origin = (x - self.state.dx, y - self.state.dy)
        self.state.phase = GesturePhase.DRAGGING
        return True

    def move(self, x: float, y: float) -> Optional[Direction]:
        if self.state.phase != GesturePhase.DRAGGING or self.role != CardRole.FRONT:
            return None
        self.state.dx = x - self._origin[0]
        self.state.dy = y - self._origin[1]
        self.state.direction = classify(self.state.dx, self.threshold)
        return self.state.direction

    def snap_back(self):
        self.state.dx = 0.0
        self.state.dy = 0.0
        self.state.direction = Direction.NONE
        self.state.phase = GesturePhase.IDLE

    def reset(self):
        self.snap_back()
        self._origin = (0.0, 0.0)
