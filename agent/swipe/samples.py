"""
오프라인 샘플 (초기 fetch 실패 시 MOCK 모드)
"""
from datetime import datetime, timedelta, timezone
from typing import List

from agent.platforms.interface import SocialPost

_SAMPLE_TEXTS = [
    ("1234567890", "This is a sample tweet for testing the swipe interface. The milpunk aesthetic is looking good!",
     {"likes": 42, "reposts": 12, "replies": 5, "quotes": 3}),
    ("1234567891", "Another test tweet. Swipe left to delete, swipe right to keep. Simple as that.",
     {"likes": 128, "reposts": 45, "replies": 22, "quotes": 8}),
    ("1234567892", "Testing the card stack effect. Each card should appear stacked behind the top one with a subtle offset.",
     {"likes": 7, "reposts": 2, "replies": 1, "quotes": 0}),
    ("1234567893", "The auto-load feature should kick in when you have only 2 cards remaining. New cards will be fetched automatically.",
     {"likes": 89, "reposts": 34, "replies": 12, "quotes": 4}),
    ("1234567894", "Last card in the initial batch. Keep swiping to see more!",
     {"likes": 256, "reposts": 67, "replies": 31, "quotes": 15}),
]


def sample_posts(now: datetime = None) -> List[SocialPost]:
    """하루 간격으로 과거로 거슬러 가는 고정 샘플 5개"""
    now = now or datetime.now(timezone.utc)
    return [
        SocialPost(
            id=post_id,
            text=text,
            created_at=now - timedelta(days=i),
            metrics=dict(metrics),
        )
        for i, (post_id, text, metrics) in enumerate(_SAMPLE_TEXTS)
    ]
