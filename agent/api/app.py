"""
HTTP API
GET /items, DELETE /items, GET /profile - TimelineProvider 프록시

Item routes go through the same RemoteClient / RateLimiter pair the swipe
queue uses, so a 429 from either side blocks both until the reset time.
"""
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config.settings import settings
from agent.platforms.interface import TimelineProvider
from agent.swipe.rate_limiter import RateLimiter
from agent.swipe.remote import Failure, RateLimited, RemoteClient

logger = logging.getLogger("agent.api")


def _rate_limited(result: RateLimited) -> JSONResponse:
    retry_after = result.retry_after or settings.RATE_LIMIT_BACKOFF_SECONDS
    return JSONResponse(
        status_code=429,
        content={
            "error": "Rate limited by provider",
            "retryAfter": retry_after,
            "resetAt": result.reset_at.isoformat() if result.reset_at else None,
        },
        headers={"Retry-After": str(retry_after)},
    )


def _failure(message: str, details: str, status_code: int = 500) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, "details": details})


def create_app(
    provider: TimelineProvider,
    rate_limiter: Optional[RateLimiter] = None,
    page_size: int = None,
) -> FastAPI:
    remote = RemoteClient(provider, rate_limiter or RateLimiter(), page_size=page_size)

    app = FastAPI(title="Tweet Swiper API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.provider = provider
    app.state.remote = remote

    @app.get("/items")
    async def list_items(cursor: Optional[str] = None):
        result = await remote.fetch_page(cursor)
        if isinstance(result, RateLimited):
            return _rate_limited(result)
        if isinstance(result, Failure):
            return _failure("Failed to fetch posts", result.error)

        body = {
            "items": [post.to_dict() for post in result.items],
            "meta": {"count": len(result.items)},
        }
        if result.next_cursor:
            body["nextCursor"] = result.next_cursor
        return body

    @app.delete("/items")
    async def delete_item(request: Request):
        try:
            payload = await request.json()
        except ValueError:
            payload = {}
        item_id = payload.get("id") if isinstance(payload, dict) else None
        if not item_id:
            return JSONResponse(status_code=400, content={"error": "Item ID is required"})

        result = await remote.delete_item(str(item_id))
        if isinstance(result, RateLimited):
            return _rate_limited(result)
        if isinstance(result, Failure):
            return _failure("Failed to delete item", result.error)
        return {"deleted": result.deleted, "id": result.id}

    @app.get("/profile")
    async def profile():
        try:
            user = await provider.get_profile()
        except Exception as e:
            logger.error(f"[API] Error fetching profile: {e!r}")
            return _failure("Failed to fetch user data", str(e))

        return {
            "id": user.id,
            "name": user.name,
            "username": user.username,
            "profile_image_url": user.profile_image_url,
            "public_metrics": dict(user.metrics),
        }

    return app
