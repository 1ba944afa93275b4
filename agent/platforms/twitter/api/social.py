"""
Twitter API via Twikit
내 타임라인 조회 / 트윗 삭제 / 프로필
"""
import os
import asyncio
import logging
from datetime import datetime, timezone
from typing import TypedDict, Optional, List, Tuple
from twikit import Client
from twikit.errors import TooManyRequests

from config.settings import settings
from agent.swipe.errors import RateLimitExceeded

logger = logging.getLogger("agent.platforms.twitter")


class TweetEngagement(TypedDict, total=False):
    """트윗 engagement 메트릭"""
    favorite_count: int
    retweet_count: int
    reply_count: int
    quote_count: int
    view_count: Optional[int]


class TweetMedia(TypedDict, total=False):
    media_key: str
    type: str
    url: Optional[str]
    preview_image_url: Optional[str]


class TweetData(TypedDict, total=False):
    """통합 트윗 데이터 구조 (twikit/Twitter API v2 공용)"""
    id: str
    user: str
    text: str
    created_at: str
    engagement: TweetEngagement
    media: List[TweetMedia]


# 전역 클라이언트 상태

_client_instance: Optional[Client] = None
_last_cookie_mtime: float = 0.0
_own_user_id: Optional[str] = None


async def _get_twikit_client() -> Client:
    """
    Twikit 클라이언트 가져오기 (Singleton + Hot Reload)
    쿠키 파일이 변경되면 클라이언트를 새로 생성합니다.
    """
    global _client_instance, _last_cookie_mtime

    cookies_file = settings.TWITTER_COOKIES_PATH

    # 1. 파일 변경 감지
    should_reload = False
    if os.path.exists(cookies_file):
        try:
            current_mtime = os.path.getmtime(cookies_file)
            if current_mtime > _last_cookie_mtime:
                logger.info(f"[TWITTER] Cookie file changed ({_last_cookie_mtime} -> {current_mtime})")
                should_reload = True
                _last_cookie_mtime = current_mtime
        except OSError:
            pass # 파일 읽기 실패 시 무시

    if _client_instance is not None and not should_reload:
        return _client_instance

    # 2. 클라이언트 초기화 또는 리로드
    logger.info(f"[TWITTER] Initializing client (cookies: {os.path.basename(cookies_file)})")
    client = Client('en-US')

    if os.path.exists(cookies_file):
        client.load_cookies(cookies_file)
    elif settings.has_session_cookies:
        # 환경변수 폴백 (파일 없을 때만)
        client.set_cookies({
            "auth_token": settings.TWITTER_AUTH_TOKEN,
            "ct0": settings.TWITTER_CT0
        })
        logger.info("[TWITTER] Using session cookies from environment")
    else:
        await _login_and_save(client)

    _client_instance = client
    return _client_instance


async def _login_and_save(client: Client):
    """로그인 후 쿠키 저장"""
    if not settings.has_login:
        raise ValueError("Twitter credentials missing in .env (TWITTER_AUTH_TOKEN/TWITTER_CT0 or TWITTER_USERNAME/TWITTER_PASSWORD)")

    logger.info("[TWITTER] Logging in...")
    await client.login(
        auth_info_1=settings.TWITTER_USERNAME,
        auth_info_2=settings.TWITTER_EMAIL,
        password=settings.TWITTER_PASSWORD,
    )
    cookies_file = settings.TWITTER_COOKIES_PATH
    os.makedirs(os.path.dirname(cookies_file) or ".", exist_ok=True)
    client.save_cookies(cookies_file)
    logger.info(f"[TWITTER] Logged in, cookies saved: {cookies_file}")


def reset_client():
    """클라이언트/캐시 초기화 (세션 만료 시)"""
    global _client_instance, _last_cookie_mtime, _own_user_id
    _client_instance = None
    _last_cookie_mtime = 0.0
    _own_user_id = None


def _is_session_expired(error: Exception) -> bool:
    """세션 만료 에러인지 확인"""
    err_str = str(error).lower()
    return any(kw in err_str for kw in ['unauthorized', '401', 'session', 'expired', 'login'])


def _reset_at_from(error: TooManyRequests) -> Optional[datetime]:
    reset = getattr(error, 'rate_limit_reset', None)
    if not reset:
        return None
    return datetime.fromtimestamp(int(reset), tz=timezone.utc)


async def _with_retry(func, *args, **kwargs):
    """세션 만료 시 1회 재시도, 429 는 RateLimitExceeded 로 변환"""
    try:
        return await func(*args, **kwargs)
    except TooManyRequests as e:
        raise RateLimitExceeded(str(e) or "Rate limited by Twitter API", reset_at=_reset_at_from(e)) from e
    except asyncio.TimeoutError:
        logger.warning("[TWITTER] Timeout")
        raise
    except Exception as e:
        if not _is_session_expired(e):
            raise
        logger.warning("[TWITTER] Session expired, resetting client...")
        reset_client()
        try:
            return await func(*args, **kwargs)
        except TooManyRequests as e2:
            raise RateLimitExceeded(str(e2) or "Rate limited by Twitter API", reset_at=_reset_at_from(e2)) from e2


async def _get_own_user_id(client: Client) -> str:
    """내 user id (첫 호출 후 캐시)"""
    global _own_user_id
    if _own_user_id is None:
        me = await client.user()
        _own_user_id = str(me.id)
    return _own_user_id


def _extract_engagement(tweet) -> TweetEngagement:
    """twikit Tweet 객체에서 engagement 추출"""
    return {
        'favorite_count': getattr(tweet, 'favorite_count', 0) or 0,
        'retweet_count': getattr(tweet, 'retweet_count', 0) or 0,
        'reply_count': getattr(tweet, 'reply_count', 0) or 0,
        'quote_count': getattr(tweet, 'quote_count', 0) or 0,
        'view_count': getattr(tweet, 'view_count', None),
    }


def _extract_media(tweet) -> List[TweetMedia]:
    """twikit 버전에 따라 media 가 dict 또는 객체"""
    results: List[TweetMedia] = []
    for m in getattr(tweet, 'media', None) or []:
        if isinstance(m, dict):
            media_type = m.get('type', 'photo')
            url = m.get('media_url_https') or m.get('media_url')
            results.append({
                'media_key': str(m.get('media_key') or m.get('id_str') or ''),
                'type': media_type,
                'url': url if media_type == 'photo' else None,
                'preview_image_url': url if media_type != 'photo' else None,
            })
        else:
            media_type = getattr(m, 'type', 'photo')
            url = getattr(m, 'media_url', None)
            results.append({
                'media_key': str(getattr(m, 'id', '')),
                'type': media_type,
                'url': url if media_type == 'photo' else None,
                'preview_image_url': url if media_type != 'photo' else None,
            })
    return results


async def fetch_own_tweets(cursor: Optional[str] = None, count: int = 5) -> Tuple[List[TweetData], Optional[str]]:
    """내 트윗 한 페이지 / Fetch one page of my own tweets -> (tweets, next_cursor)"""
    async def _do():
        client = await _get_twikit_client()
        user_id = await _get_own_user_id(client)
        result = await client.get_user_tweets(user_id, 'Tweets', count=count, cursor=cursor)
        tweets: List[TweetData] = []
        for t in result:
            tweets.append({
                "id": str(t.id),
                "user": t.user.screen_name if getattr(t, 'user', None) else "",
                "text": t.text,
                "created_at": t.created_at,
                "engagement": _extract_engagement(t),
                "media": _extract_media(t),
            })
        next_cursor = getattr(result, 'next_cursor', None)
        # 빈 페이지인데 커서만 돌아오면 끝으로 간주
        if not tweets:
            next_cursor = None
        return tweets, next_cursor
    return await _with_retry(_do)


async def delete_tweet(tweet_id: str) -> bool:
    """트윗 삭제 / Delete tweet"""
    async def _do():
        client = await _get_twikit_client()
        await client.delete_tweet(tweet_id)
        return True
    deleted = await _with_retry(_do)
    logger.info(f"[DELETE] {tweet_id}")
    return deleted


async def get_own_profile() -> dict:
    """내 프로필 / Get my profile"""
    async def _do():
        client = await _get_twikit_client()
        me = await client.user()
        return {
            "id": str(me.id),
            "name": me.name,
            "screen_name": me.screen_name,
            "profile_image_url": getattr(me, 'profile_image_url', '') or '',
            "followers_count": getattr(me, 'followers_count', 0) or 0,
            "following_count": getattr(me, 'following_count', 0) or 0,
            "statuses_count": getattr(me, 'statuses_count', 0) or 0,
            "favourites_count": getattr(me, 'favourites_count', 0) or 0,
        }
    return await _with_retry(_do)
