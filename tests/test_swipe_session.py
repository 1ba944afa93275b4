import unittest
import sys
import os

# Add project root to path
sys.path.append(os.getcwd())

from agent.swipe.factory import SwipeFactory
from agent.swipe.gesture import CardRole, Direction, GesturePhase, Outcome
from agent.swipe.queue import QueueController
from agent.swipe.rate_limiter import RateLimiter
from agent.swipe.remote import RemoteClient
from agent.swipe.session import SessionMode, SessionStatus, SwipeSession
from tests.fakes import FakeProvider, page


def build_session(pages, **kwargs):
    provider = FakeProvider(pages)
    queue = QueueController(RemoteClient(provider, RateLimiter()), low_water_mark=2)
    session = SwipeSession(queue, threshold=100, exit_duration_ms=0, visible=2, **kwargs)
    return session, provider


class TestSwipeSession(unittest.IsolatedAsyncioTestCase):

    async def test_drag_left_past_threshold_deletes_front(self):
        session, provider = build_session({None: page(["a", "b", "c", "d"])})
        await session.start()
        self.assertEqual(session.status, SessionStatus.ACTIVE)

        self.assertTrue(session.press(0, 0))
        self.assertEqual(session.drag(-150, 20), Direction.LEFT)
        self.assertEqual(session.release(), Outcome.DELETE)
        # 전환 중에는 아직 front 그대로
        self.assertEqual(session.front.post.id, "a")

        await session.settle()
        await session.queue.drain()
        self.assertEqual(session.front.post.id, "b")
        self.assertEqual(session.front.tracker.state.displacement, (0.0, 0.0))
        self.assertEqual(session.front.tracker.state.phase, GesturePhase.IDLE)
        self.assertEqual(session.counters.deleted, 1)
        self.assertEqual(provider.delete_calls, ["a"])

    async def test_short_drag_snaps_back_without_commit(self):
        session, provider = build_session({None: page(["a", "b", "c"])})
        await session.start()

        session.press(10, 10)
        session.drag(90, 10)
        self.assertEqual(session.release(), Outcome.CANCEL)
        await session.settle()
        self.assertEqual(session.front.post.id, "a")
        self.assertEqual(session.counters.total, 0)

    async def test_keyboard_keep_commits_once(self):
        session, provider = build_session({None: page(["a", "b", "c"])})
        await session.start()

        self.assertEqual(session.keep(), Outcome.KEEP)
        self.assertIsNone(session.keep())
        self.assertIsNone(session.delete())
        await session.settle()

        self.assertEqual(session.counters.kept, 1)
        self.assertEqual(session.counters.deleted, 0)
        self.assertEqual(session.front.post.id, "b")
        self.assertEqual(provider.delete_calls, [])

    async def test_stacked_card_is_inert(self):
        session, _ = build_session({None: page(["a", "b", "c"])})
        await session.start()

        cards = session.visible_cards()
        self.assertEqual([c.post.id for c in cards], ["a", "b"])
        self.assertEqual(cards[0].role, CardRole.FRONT)
        self.assertEqual(cards[1].role, CardRole.STACKED)
        self.assertIsNone(cards[1].resolver)
        self.assertFalse(cards[1].tracker.start(0, 0))

    async def test_explicit_visible_count_is_kept(self):
        session, _ = build_session({None: page(["a", "b", "c"])})
        self.assertEqual(SwipeSession(session.queue, visible=0).visible, 0)

        single = SwipeSession(session.queue, threshold=100, exit_duration_ms=0, visible=1)
        await single.start()
        self.assertEqual([c.post.id for c in single.visible_cards()], ["a"])

    async def test_status_before_start_is_loading(self):
        session, _ = build_session({None: page(["a"])})
        self.assertEqual(session.status, SessionStatus.LOADING)
        self.assertIsNone(session.release())

    async def test_done_when_feed_is_exhausted(self):
        session, _ = build_session({None: page(["a"], None)})
        await session.start()
        session.delete()
        await session.settle()
        await session.queue.drain()

        view = session.view()
        self.assertEqual(view.status, SessionStatus.DONE)
        self.assertEqual(view.mode, SessionMode.LIVE)
        self.assertEqual(view.deleted, 1)
        self.assertEqual(view.cards, [])
        self.assertIsNone(session.front)

    async def test_loading_then_error_when_refill_fails_on_empty_queue(self):
        session, _ = build_session({None: page(["a"], "c1"), "c1": RuntimeError("timeout")})
        await session.start()

        session.keep()
        await session.settle()
        # 리필 in-flight
        self.assertEqual(session.status, SessionStatus.LOADING)

        await session.queue.drain()
        view = session.view()
        self.assertEqual(view.status, SessionStatus.ERROR)
        self.assertIn("timeout", view.error)
        self.assertTrue(view.has_more)

    async def test_mock_mode_after_initial_failure(self):
        session, provider = build_session({None: RuntimeError("no credentials")})
        await session.start()

        view = session.view()
        self.assertEqual(view.mode, SessionMode.MOCK)
        self.assertEqual(view.status, SessionStatus.ACTIVE)
        self.assertEqual(view.queue_length, 5)
        self.assertFalse(view.has_more)
        self.assertIsNone(view.error)

        while session.front is not None:
            session.delete()
            await session.settle()
        await session.queue.drain()

        self.assertEqual(session.counters.deleted, 5)
        self.assertEqual(provider.delete_calls, [])
        # 초기 실패 메시지가 남아 있으므로 소진 후에는 ERROR
        self.assertEqual(session.status, SessionStatus.ERROR)

    async def test_view_exposes_card_geometry(self):
        session, _ = build_session({None: page(["a", "b"])})
        await session.start()
        session.press(0, 0)
        session.drag(40, 5)

        front = session.view().cards[0]
        self.assertEqual(front["id"], "a")
        self.assertEqual(front["role"], "front")
        self.assertEqual(front["dx"], 40)
        self.assertEqual(front["phase"], "dragging")
        self.assertEqual(front["direction"], "none")


class TestSwipeFactory(unittest.IsolatedAsyncioTestCase):
    def tearDown(self):
        SwipeFactory.reset()

    async def test_sessions_share_one_rate_limiter(self):
        provider = FakeProvider({None: page(["a", "b", "c"])})
        first = SwipeFactory.create_session(provider=provider, exit_duration_ms=0)
        second = SwipeFactory.create_session(provider=provider, exit_duration_ms=0)
        self.assertIs(first.queue.remote.rate_limiter, second.queue.remote.rate_limiter)
        self.assertIs(first.queue.remote.rate_limiter, SwipeFactory.get_rate_limiter())

        await first.start()
        self.assertEqual(first.front.post.id, "a")


if __name__ == '__main__':
    unittest.main()
