import unittest
import sys
import os

# Add project root to path
sys.path.append(os.getcwd())

from agent.swipe.gesture import CardRole, Direction, GesturePhase, GestureTracker, Outcome, classify
from agent.swipe.resolver import DecisionResolver, EXIT_OFFSET


class TestGestureTracker(unittest.TestCase):
    def setUp(self):
        self.tracker = GestureTracker(threshold=100)

    def test_direction_is_advisory_while_dragging(self):
        self.assertTrue(self.tracker.start(200, 300))

        self.assertEqual(self.tracker.move(250, 300), Direction.NONE)
        self.assertEqual(self.tracker.move(301, 310), Direction.RIGHT)
        self.assertEqual(self.tracker.state.displacement, (101, 10))
        self.assertEqual(self.tracker.move(99, 300), Direction.LEFT)
        self.assertEqual(self.tracker.state.phase, GesturePhase.DRAGGING)

    def test_threshold_is_exclusive(self):
        self.assertEqual(classify(100, 100), Direction.NONE)
        self.assertEqual(classify(-100, 100), Direction.NONE)
        self.assertEqual(classify(100.5, 100), Direction.RIGHT)
        self.assertEqual(classify(-100.5, 100), Direction.LEFT)

    def test_regrab_continues_from_current_displacement(self):
        self.tracker.start(0, 0)
        self.tracker.move(40, 0)
        self.tracker.state.phase = GesturePhase.IDLE

        self.tracker.start(500, 0)
        self.tracker.move(520, 0)
        self.assertEqual(self.tracker.state.dx, 60)

    def test_stacked_card_is_inert(self):
        stacked = GestureTracker(role=CardRole.STACKED, threshold=100)
        self.assertFalse(stacked.start(0, 0))
        self.assertIsNone(stacked.move(500, 0))
        self.assertEqual(stacked.state.displacement, (0.0, 0.0))

    def test_move_without_start_is_ignored(self):
        self.assertIsNone(self.tracker.move(500, 0))
        self.assertEqual(self.tracker.state.dx, 0.0)

    def test_rotation_follows_dx(self):
        tracker = GestureTracker(threshold=100, rotation_factor=0.05)
        tracker.start(0, 0)
        tracker.move(200, 0)
        self.assertAlmostEqual(tracker.rotation, 10.0)


class TestDecisionResolver(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.commits = []
        self.tracker = GestureTracker(threshold=100)
        self.resolver = DecisionResolver(self.tracker, on_commit=self.commits.append, exit_duration_ms=0)

    def _drag_to(self, dx, dy=0):
        self.tracker.start(0, 0)
        self.tracker.move(dx, dy)

    async def test_release_inside_threshold_cancels_and_snaps_back(self):
        for dx in (100, -100, 0, 42, -99.9):
            self._drag_to(dx, 15)
            self.assertEqual(self.resolver.release(), Outcome.CANCEL)
            self.assertEqual(self.tracker.state.displacement, (0.0, 0.0))
            self.assertEqual(self.tracker.state.direction, Direction.NONE)
            self.assertEqual(self.tracker.state.phase, GesturePhase.IDLE)
        self.assertEqual(self.commits, [])

    async def test_release_left_deletes_after_transition(self):
        self._drag_to(-150)
        self.assertEqual(self.resolver.release(), Outcome.DELETE)
        self.assertTrue(self.resolver.committing)
        # 전환이 끝나기 전에는 commit 없음
        self.assertEqual(self.commits, [])

        await self.resolver.wait()
        self.assertEqual(self.commits, [Outcome.DELETE])

    async def test_release_right_keeps(self):
        self._drag_to(101)
        self.assertEqual(self.resolver.release(), Outcome.KEEP)
        await self.resolver.wait()
        self.assertEqual(self.commits, [Outcome.KEEP])

    async def test_retrigger_while_committing_is_noop(self):
        self._drag_to(-300)
        self.resolver.release()

        self.assertIsNone(self.resolver.release())
        self.assertIsNone(self.resolver.trigger(Outcome.KEEP))
        self.assertIsNone(self.resolver.trigger(Outcome.DELETE))
        self.assertFalse(self.tracker.start(0, 0))

        await self.resolver.wait()
        self.assertEqual(self.commits, [Outcome.DELETE])

    async def test_keyboard_trigger_follows_same_path(self):
        self.assertEqual(self.resolver.trigger(Outcome.KEEP), Outcome.KEEP)
        self.assertEqual(self.tracker.state.displacement, (EXIT_OFFSET, 0.0))
        self.assertEqual(self.tracker.state.direction, Direction.RIGHT)
        self.assertTrue(self.resolver.committing)
        self.assertEqual(self.commits, [])

        self.assertIsNone(self.resolver.trigger(Outcome.KEEP))
        await self.resolver.wait()
        self.assertEqual(self.commits, [Outcome.KEEP])

    async def test_trigger_rejects_cancel(self):
        with self.assertRaises(ValueError):
            self.resolver.trigger(Outcome.CANCEL)

    async def test_release_without_drag_is_noop(self):
        self.assertIsNone(self.resolver.release())
        self.assertEqual(self.commits, [])


if __name__ == '__main__':
    unittest.main()
