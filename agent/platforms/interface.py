from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Dict, Optional, Any
from datetime import datetime

@dataclass(frozen=True)
class SocialUser:
    id: str
    username: str  # @handle
    name: str      # Display Name
    profile_image_url: str = ""
    metrics: Dict[str, int] = field(default_factory=dict)

@dataclass(frozen=True)
class SocialMedia:
    media_key: str
    type: str  # photo | video | animated_gif
    url: Optional[str] = None
    preview_image_url: Optional[str] = None

@dataclass(frozen=True)
class SocialPost:
    """
    리뷰 큐의 단일 아이템 (fetch 이후 불변)
    id 만으로 중복 제거 / 삭제 요청
    """
    id: str
    text: str
    created_at: datetime
    metrics: Dict[str, int] = field(default_factory=lambda: {"likes": 0, "reposts": 0, "replies": 0, "quotes": 0})
    media: List[SocialMedia] = field(default_factory=list)
    url: str = ""
    raw_data: Dict[str, Any] = field(default_factory=dict) # Platform specific raw data

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "createdAt": self.created_at.isoformat(),
            "metrics": dict(self.metrics),
            "media": [
                {
                    "mediaKey": m.media_key,
                    "type": m.type,
                    "url": m.url,
                    "previewImageUrl": m.preview_image_url,
                }
                for m in self.media
            ],
            "url": self.url,
        }


@dataclass(frozen=True)
class TimelinePage:
    posts: List[SocialPost]
    next_cursor: Optional[str] = None


class TimelineProvider(ABC):
    """Own-timeline access for a social platform (fetch pages / delete / profile)"""

    @abstractmethod
    async def fetch_timeline(self, cursor: Optional[str] = None, count: int = 5) -> TimelinePage:
        """Fetch one page of the authenticated user's own posts.

        Raises RateLimitExceeded when the platform throttles the call.
        """
        pass

    @abstractmethod
    async def delete_post(self, post_id: str) -> bool:
        """Delete one of the authenticated user's posts"""
        pass

    @abstractmethod
    async def get_profile(self) -> SocialUser:
        """Get the authenticated user's profile"""
        pass
