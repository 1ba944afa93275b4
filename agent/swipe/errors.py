"""
Swipe session error taxonomy

RateLimitExceeded  - 플랫폼이 429 를 반환 (reset 시각까지 모든 호출 거부)
RemoteFailure      - 일시적 실패 (로그만 남기고 세션은 그대로)
MalformedResponse  - 응답 형식 오류 (RemoteFailure 로 취급)
"""
from datetime import datetime
from typing import Optional


class SwipeError(Exception):
    """Base class for swipe session errors"""


class RemoteFailure(SwipeError):
    """Transient remote error"""


class MalformedResponse(RemoteFailure):
    """Provider returned data we could not map"""


class RateLimitExceeded(SwipeError):
    """Provider signalled a rate limit.

    reset_at is None when the provider gave no reset hint; the rate limiter
    then applies its default backoff window.
    """

    def __init__(self, message: str = "Rate limited by provider", reset_at: Optional[datetime] = None):
        super().__init__(message)
        self.reset_at = reset_at
