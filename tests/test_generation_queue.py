# ==============================================================================
# Файл: tests/test_generation_queue.py
# Назначение: Очередь фоновой генерации: порядок, ошибки, backpressure.
# ==============================================================================
import threading
import unittest

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from terrain_engine.world.generation_queue import GenerationQueue


class TestGenerationQueue(unittest.TestCase):

    def test_results_arrive_in_completion_order(self):
        q = GenerationQueue()
        gate = threading.Event()
        received = []

        def slow():
            gate.wait(5)
            return "slow"

        q.submit(slow, received.append)
        q.submit(lambda: "fast", received.append)

        # ждём только быструю задачу
        for _ in range(500):
            if q.ready_count == 1:
                break
            threading.Event().wait(0.01)
        self.assertEqual(q.drain(), 1)
        self.assertEqual(received, ["fast"])

        gate.set()
        self.assertTrue(q.wait_idle(timeout=5))
        self.assertEqual(q.drain(), 1)
        self.assertEqual(received, ["fast", "slow"])

    def test_callbacks_run_on_draining_thread_only(self):
        q = GenerationQueue()
        seen = []
        q.submit(lambda: 1, lambda _: seen.append(threading.get_ident()))
        q.submit(lambda: 2, lambda _: seen.append(threading.get_ident()))
        self.assertTrue(q.wait_idle(timeout=5))
        self.assertEqual(seen, [], "callbacks must wait for drain()")
        q.drain()
        self.assertEqual(seen, [threading.get_ident()] * 2)
        self.assertEqual(q.drain(), 0)

    def test_failed_job_goes_to_on_error(self):
        q = GenerationQueue()
        results, errors = [], []

        def boom():
            raise RuntimeError("noise failed")

        with self.assertLogs("terrain_engine.world.generation_queue", level="ERROR"):
            q.submit(boom, results.append, on_error=errors.append)
            self.assertTrue(q.wait_idle(timeout=5))
        q.drain()
        self.assertEqual(results, [])
        self.assertEqual(len(errors), 1)
        self.assertIsInstance(errors[0], RuntimeError)

    def test_failed_job_without_handler_is_logged(self):
        q = GenerationQueue()
        results = []
        with self.assertLogs("terrain_engine.world.generation_queue", level="ERROR") as logs:
            q.submit(lambda: 1 / 0, results.append)
            self.assertTrue(q.wait_idle(timeout=5))
            q.drain()
        self.assertEqual(results, [])
        self.assertTrue(any("Dropped failed generation result" in line for line in logs.output))

    def test_raising_callback_does_not_lose_later_results(self):
        q = GenerationQueue()
        got = []

        def bad_consumer(_):
            raise RuntimeError("renderer rejected mesh")

        q.submit(lambda: 1, bad_consumer)
        self.assertTrue(q.wait_idle(timeout=5))
        q.submit(lambda: 2, got.append)
        self.assertTrue(q.wait_idle(timeout=5))

        with self.assertLogs("terrain_engine.world.generation_queue", level="ERROR") as logs:
            self.assertEqual(q.drain(), 2)
        self.assertEqual(got, [2])
        self.assertTrue(any("callback" in line for line in logs.output))
        self.assertEqual(q.drain(), 0)

    def test_pool_applies_backpressure(self):
        q = GenerationQueue(max_workers=1, max_pending=1)
        started, gate = threading.Event(), threading.Event()
        received = []

        def blocker():
            started.set()
            gate.wait(5)
            return "first"

        try:
            q.submit(blocker, received.append)
            self.assertTrue(started.wait(5))
            q.submit(lambda: "second", received.append)  # занимает единственное место

            third_submitted = threading.Event()

            def submit_third():
                q.submit(lambda: "third", received.append)
                third_submitted.set()

            t = threading.Thread(target=submit_third, daemon=True)
            t.start()
            self.assertFalse(third_submitted.wait(0.2), "submit should block when saturated")

            gate.set()
            self.assertTrue(third_submitted.wait(5))
            t.join(5)
            self.assertTrue(q.wait_idle(timeout=5))
            self.assertEqual(q.drain(), 3)
            self.assertEqual(received, ["first", "second", "third"])
        finally:
            gate.set()
            q.shutdown()


if __name__ == '__main__':
    unittest.main()
