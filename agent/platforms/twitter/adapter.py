from typing import Optional
from datetime import datetime, timezone
from agent.platforms.interface import TimelineProvider, TimelinePage, SocialPost, SocialUser, SocialMedia
from agent.swipe.errors import MalformedResponse
import agent.platforms.twitter.api.social as twitter_api

class TwitterAdapter(TimelineProvider):
    """Adapter for Twitter using agent.platforms.twitter.api.social"""

    @staticmethod
    def _parse_date(date_str: str) -> Optional[datetime]:
        if not date_str: return None
        try:
            # Twitter "Wed Oct 10 20:19:24 +0000 2018"
            return datetime.strptime(date_str, "%a %b %d %H:%M:%S %z %Y")
        except ValueError:
            try:
                # ISO format fallback
                return datetime.fromisoformat(date_str.replace("Z", "+00:00"))
            except ValueError:
                return None

    def _to_post(self, item: dict) -> SocialPost:
        try:
            post_id = str(item['id'])
            text = item['text']
        except (KeyError, TypeError) as e:
            raise MalformedResponse(f"Tweet payload missing field: {e}") from e

        created_at = item.get('created_at')
        if isinstance(created_at, str):
            created_at_dt = self._parse_date(created_at) or datetime.now(timezone.utc)
        elif isinstance(created_at, datetime):
            created_at_dt = created_at
        else:
            created_at_dt = datetime.now(timezone.utc)

        engagement = item.get('engagement', {})
        metrics = {
            "likes": engagement.get('favorite_count', 0),
            "reposts": engagement.get('retweet_count', 0),
            "replies": engagement.get('reply_count', 0),
            "quotes": engagement.get('quote_count', 0),
        }
        if engagement.get('view_count') is not None:
            metrics["impressions"] = int(engagement['view_count'])

        media = [
            SocialMedia(
                media_key=m.get('media_key', ''),
                type=m.get('type', 'photo'),
                url=m.get('url'),
                preview_image_url=m.get('preview_image_url'),
            )
            for m in item.get('media') or []
        ]

        user = item.get('user') or 'i'
        return SocialPost(
            id=post_id,
            text=text,
            created_at=created_at_dt,
            metrics=metrics,
            media=media,
            url=f"https://twitter.com/{user}/status/{post_id}",
            raw_data=item
        )

    async def fetch_timeline(self, cursor: Optional[str] = None, count: int = 5) -> TimelinePage:
        tweets, next_cursor = await twitter_api.fetch_own_tweets(cursor=cursor, count=count)
        return TimelinePage(posts=[self._to_post(t) for t in tweets], next_cursor=next_cursor)

    async def delete_post(self, post_id: str) -> bool:
        return await twitter_api.delete_tweet(post_id)

    async def get_profile(self) -> SocialUser:
        profile = await twitter_api.get_own_profile()
        return SocialUser(
            id=profile.get('id', ''),
            username=profile.get('screen_name', ''),
            name=profile.get('name', ''),
            profile_image_url=profile.get('profile_image_url', ''),
            metrics={
                "followers_count": profile.get('followers_count', 0),
                "following_count": profile.get('following_count', 0),
                "tweet_count": profile.get('statuses_count', 0),
                "like_count": profile.get('favourites_count', 0),
            },
        )
