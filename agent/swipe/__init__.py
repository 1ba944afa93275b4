from agent.swipe.counters import SessionCounters
from agent.swipe.errors import RateLimitExceeded, RemoteFailure, MalformedResponse
from agent.swipe.gesture import CardRole, Direction, GesturePhase, GestureState, GestureTracker, Outcome
from agent.swipe.queue import QueueController
from agent.swipe.rate_limiter import RateLimiter, RateLimitStatus
from agent.swipe.remote import RemoteClient, PageResult, DeleteResult, RateLimited, Failure
from agent.swipe.resolver import DecisionResolver
from agent.swipe.session import SwipeSession, SessionStatus, SessionMode, SessionView

__all__ = [
    'SessionCounters',
    'RateLimitExceeded',
    'RemoteFailure',
    'MalformedResponse',
    'CardRole',
    'Direction',
    'GesturePhase',
    'GestureState',
    'GestureTracker',
    'Outcome',
    'QueueController',
    'RateLimiter',
    'RateLimitStatus',
    'RemoteClient',
    'PageResult',
    'DeleteResult',
    'RateLimited',
    'Failure',
    'DecisionResolver',
    'SwipeSession',
    'SessionStatus',
    'SessionMode',
    'SessionView',
]
