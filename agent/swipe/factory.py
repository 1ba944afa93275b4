"""
Swipe Factory
세션 조립 (provider / rate limiter 공유)
"""
from typing import Optional

from agent.platforms.interface import TimelineProvider
from agent.swipe.queue import QueueController
from agent.swipe.rate_limiter import RateLimiter
from agent.swipe.remote import RemoteClient
from agent.swipe.session import SwipeSession


class SwipeFactory:
    _rate_limiter: Optional[RateLimiter] = None
    _provider: Optional[TimelineProvider] = None

    @classmethod
    def get_rate_limiter(cls) -> RateLimiter:
        """프로세스 공용 rate limiter (queue 와 HTTP API 가 같은 인스턴스 사용)"""
        if cls._rate_limiter is None:
            cls._rate_limiter = RateLimiter()
        return cls._rate_limiter

    @classmethod
    def get_provider(cls) -> TimelineProvider:
        if cls._provider is None:
            from agent.platforms.twitter.adapter import TwitterAdapter
            cls._provider = TwitterAdapter()
        return cls._provider

    @classmethod
    def create_session(cls, provider: TimelineProvider = None, rate_limiter: RateLimiter = None, **kwargs) -> SwipeSession:
        remote = RemoteClient(provider or cls.get_provider(), rate_limiter or cls.get_rate_limiter())
        return SwipeSession(QueueController(remote), **kwargs)

    @classmethod
    def reset(cls):
        """테스트용 리셋"""
        cls._rate_limiter = None
        cls._provider = None
