from dataclasses import dataclass
from typing import Dict

from agent.swipe.gesture import Outcome


@dataclass
class SessionCounters:
    """세션 집계 (commit 된 결정에서만 증가)"""
    deleted: int = 0
    kept: int = 0

    @property
    def total(self) -> int:
        return self.deleted + self.kept

    def record(self, outcome: Outcome):
        if outcome == Outcome.DELETE:
            self.deleted += 1
        elif outcome == Outcome.KEEP:
            self.kept += 1
        else:
            raise ValueError(f"Cannot count outcome {outcome!r}")

    def snapshot(self) -> Dict[str, int]:
        return {"deleted": self.deleted, "kept": self.kept}
