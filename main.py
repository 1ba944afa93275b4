"""
Tweet Swiper Entry Point
내 트윗을 한 장씩 보고 삭제(←) / 유지(→)

    python main.py           # 터미널 스와이프 세션
    python main.py serve     # HTTP API (GET/DELETE /items, GET /profile)
"""
import argparse
import asyncio
import logging
import sys
import threading
from typing import Optional

from config.settings import settings
from agent.core.logger import setup_logger
from agent.swipe.factory import SwipeFactory
from agent.swipe.session import SessionMode, SessionStatus, SessionView, SwipeSession

logger = logging.getLogger("agent.main")

KEYS = {
    "d": "delete", "h": "delete", "\x1b[d": "delete",
    "k": "keep", "l": "keep", "\x1b[c": "keep",
    "q": "quit",
    "r": "retry",
}


class LineReader:
    """
    stdin 을 daemon 스레드에서 읽어 asyncio.Queue 로 넘김
    Ctrl-C 로 루프가 끝나도 input() 에 묶인 executor 스레드를 기다리지 않음
    """

    def __init__(self, stream=None):
        self.stream = stream or sys.stdin
        self._lines: Optional[asyncio.Queue] = None
        self._thread: Optional[threading.Thread] = None

    def start(self):
        loop = asyncio.get_running_loop()
        self._lines = asyncio.Queue()
        self._thread = threading.Thread(target=self._pump, args=(loop,), name="stdin-reader", daemon=True)
        self._thread.start()

    def _pump(self, loop: asyncio.AbstractEventLoop):
        try:
            for line in iter(self.stream.readline, ""):
                loop.call_soon_threadsafe(self._lines.put_nowait, line)
            loop.call_soon_threadsafe(self._lines.put_nowait, None)
        except RuntimeError:
            # loop already closed
            return

    async def readline(self, prompt: str = "> ") -> str:
        print(prompt, end="", flush=True)
        line = await self._lines.get()
        if line is None:
            raise EOFError
        return line


def is_finished(view: SessionView) -> bool:
    """DONE, 또는 MOCK 샘플 소진 (MOCK 모드는 리필하지 않음)"""
    if view.status == SessionStatus.DONE:
        return True
    return view.status == SessionStatus.ERROR and view.mode == SessionMode.MOCK


def render(session: SwipeSession):
    view = session.view()
    print("")
    print(f"[{view.mode.value.upper()}_MODE] DELETED {view.deleted} | KEPT {view.kept} | QUEUE {view.queue_length}"
          f" | {'Loading more...' if view.loading_more else 'More available' if view.has_more else 'End of feed'}")

    if view.status == SessionStatus.LOADING:
        print("  Loading tweets...")
    elif view.status == SessionStatus.ERROR and view.mode == SessionMode.MOCK:
        print(f"  All sample tweets reviewed (offline: {view.error})")
    elif view.status == SessionStatus.ERROR:
        print(f"  Error: {view.error}  (r = retry)")
    elif view.status == SessionStatus.DONE:
        print("  All Done - no more tweets to review")
    else:
        post = session.front.post
        print(f"  TWEET_ID {post.id[-8:]}   CREATED {post.created_at.strftime('%b %d, %Y')}")
        print(f"  {post.text}")
        if post.media:
            print(f"  MEDIA {', '.join(m.type for m in post.media)}")
        m = post.metrics
        print(f"  LIKES {m.get('likes', 0)}  RTS {m.get('reposts', 0)}  REPLIES {m.get('replies', 0)}  QUOTES {m.get('quotes', 0)}")
        print("  [d/←] DELETE   [k/→] KEEP   [q] QUIT")


async def run_terminal(reader: LineReader = None):
    session = SwipeFactory.create_session()
    reader = reader or LineReader()

    logger.info("============ SWIPER START ============")
    await session.start()
    reader.start()

    while True:
        render(session)
        key = (await reader.readline()).strip().lower()
        action = KEYS.get(key)

        if action == "quit":
            break
        if action == "retry":
            session.queue.request_refill()
            await asyncio.sleep(0)
        elif action == "delete":
            session.delete()
            await session.settle()
        elif action == "keep":
            session.keep()
            await session.settle()

        if is_finished(session.view()):
            render(session)
            break

    # 남은 삭제 요청 정리
    await session.queue.drain()
    logger.info(f"[STOP] deleted={session.counters.deleted} kept={session.counters.kept}")


def serve():
    import uvicorn
    from agent.api.app import create_app

    app = create_app(SwipeFactory.get_provider(), SwipeFactory.get_rate_limiter())
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)


def main():
    parser = argparse.ArgumentParser(description="Review your own tweets one at a time: delete or keep.")
    parser.add_argument("command", nargs="?", choices=["swipe", "serve"], default="swipe")
    args = parser.parse_args()

    if args.command == "serve":
        setup_logger()
        serve()
        return

    # 터미널 화면은 카드 전용 -> 로그는 파일로만
    setup_logger(console=False)

    try:
        asyncio.run(run_terminal())
    except (KeyboardInterrupt, EOFError):
        logger.info("[STOP] Shutdown via KeyboardInterrupt")


if __name__ == "__main__":
    main()
