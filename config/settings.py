import os
import yaml
from dotenv import load_dotenv

load_dotenv()

def _load_swipe_config():
    """swipe.yaml 로드"""
    config_path = os.path.join(os.path.dirname(__file__), "swipe.yaml")
    if os.path.exists(config_path):
        with open(config_path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}
    return {}

_swipe = _load_swipe_config()

class Settings:
    # ===========================================
    # 인증 정보 (.env에서 로드)
    # ===========================================
    TWITTER_AUTH_TOKEN = os.getenv("TWITTER_AUTH_TOKEN")
    TWITTER_CT0 = os.getenv("TWITTER_CT0")

    # 로그인 폴백 (쿠키가 없을 때만)
    TWITTER_USERNAME = os.getenv("TWITTER_USERNAME")
    TWITTER_EMAIL = os.getenv("TWITTER_EMAIL")
    TWITTER_PASSWORD = os.getenv("TWITTER_PASSWORD")

    # 데이터 저장 경로
    DATA_DIR = os.getenv("DATA_DIR", "data")
    TWITTER_COOKIES_PATH = os.getenv(
        "TWITTER_COOKIES_PATH", os.path.join(DATA_DIR, "twitter_cookies.json")
    )

    # HTTP API
    API_HOST = os.getenv("API_HOST", "127.0.0.1")
    API_PORT = int(os.getenv("API_PORT", "8000"))

    # 로그
    LOG_DIR = os.getenv("LOG_DIR", "logs")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # ===========================================
    # 스와이프 설정 (swipe.yaml에서 로드)
    # ===========================================
    _gesture = _swipe.get('gesture', {})
    SWIPE_THRESHOLD = float(_gesture.get('threshold', 100))
    EXIT_DURATION_MS = int(_gesture.get('exit_duration_ms', 300))
    ROTATION_FACTOR = float(_gesture.get('rotation_factor', 0.05))

    _queue = _swipe.get('queue', {})
    LOW_WATER_MARK = int(_queue.get('low_water_mark', 2))
    PAGE_SIZE = int(_queue.get('page_size', 5))  # provider minimum is 5
    VISIBLE_CARDS = int(_queue.get('visible_cards', 2))

    _rate = _swipe.get('rate_limit', {})
    RATE_LIMIT_BACKOFF_SECONDS = int(_rate.get('default_backoff_seconds', 15 * 60))

    _remote = _swipe.get('remote', {})
    REMOTE_TIMEOUT_SECONDS = float(_remote.get('timeout_seconds', 15.0))

    @property
    def has_session_cookies(self) -> bool:
        return bool(self.TWITTER_AUTH_TOKEN and self.TWITTER_CT0)

    @property
    def has_login(self) -> bool:
        return bool(self.TWITTER_USERNAME and self.TWITTER_PASSWORD)

settings = Settings()
