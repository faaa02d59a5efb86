import unittest
from unittest.mock import MagicMock, patch

from portfolio.queue import InMemoryJobQueue, RedisJobQueue


class InMemoryJobQueueTests(unittest.TestCase):
    def test_delayed_jobs_release_in_due_order(self):
        now = [100.0]
        queue = InMemoryJobQueue(clock=lambda: now[0])
        queue.schedule("late", 30)
        queue.schedule("soon", 10)
        queue.enqueue("ready")

        self.assertEqual(queue.dequeue(block=False), "ready")
        self.assertIsNone(queue.dequeue(block=False))

        now[0] = 130.0
        self.assertEqual(queue.dequeue(block=False), "soon")
        self.assertEqual(queue.dequeue(block=False), "late")
        self.assertEqual(queue.delayed, {})


class RedisJobQueueTests(unittest.TestCase):
    def setUp(self):
        self.client = MagicMock()
        with patch("portfolio.queue.redis.Redis.from_url", return_value=self.client):
            self.queue = RedisJobQueue(url="redis://unused", clock=lambda: 100.0)

    def test_schedule_parks_job_in_sorted_set(self):
        self.queue.schedule("job-1", 60)
        self.client.zadd.assert_called_once_with("portfolio:emails:delayed", {"job-1": 160.0})

    def test_dequeue_moves_due_jobs_to_the_list(self):
        self.client.zrangebyscore.return_value = [b"job-1", b"job-2"]
        # Another worker already claimed job-2.
        self.client.zrem.side_effect = [1, 0]
        self.client.lpop.return_value = b"job-1"

        self.assertEqual(self.queue.dequeue(block=False), "job-1")
        self.client.zrangebyscore.assert_called_once_with(
            "portfolio:emails:delayed", "-inf", 100.0
        )
        self.client.rpush.assert_called_once_with("portfolio:emails", b"job-1")

    def test_blocking_dequeue_timeout(self):
        self.client.zrangebyscore.return_value = []
        self.client.blpop.return_value = None
        self.assertIsNone(self.queue.dequeue(block=True, timeout=2))
        self.client.blpop.assert_called_once_with("portfolio:emails", timeout=2)


if __name__ == "__main__":
    unittest.main()
