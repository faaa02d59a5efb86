"""
Queue of email job ids for the delivery worker.

Ready jobs sit in a FIFO list. Retries are parked with a due time and move
onto the list once it passes, so a failing provider is not hammered with
back-to-back attempts.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol

import redis
from redis import exceptions as redis_exceptions

logger = logging.getLogger(__name__)


class JobQueue(Protocol):
    def enqueue(self, job_id: str) -> None:
        ...

    def schedule(self, job_id: str, delay_seconds: float) -> None:
        """Make ``job_id`` available again after ``delay_seconds``."""
        ...

    def dequeue(self, *, block: bool = True, timeout: int | None = None) -> Optional[str]:
        ...


@dataclass
class InMemoryJobQueue:
    """Single-process queue for tests and local runs."""

    items: list[str] = field(default_factory=list)
    delayed: dict[str, float] = field(default_factory=dict)
    clock: Callable[[], float] = time.time

    def enqueue(self, job_id: str) -> None:
        self.items.append(job_id)

    def schedule(self, job_id: str, delay_seconds: float) -> None:
        self.delayed[job_id] = self.clock() + delay_seconds

    def _release_due(self) -> None:
        now = self.clock()
        for job_id, due_at in sorted(self.delayed.items(), key=lambda item: item[1]):
            if due_at <= now:
                del self.delayed[job_id]
                self.items.append(job_id)

    def dequeue(self, *, block: bool = True, timeout: int | None = None) -> Optional[str]:
        self._release_due()
        if not self.items:
            return None
        return self.items.pop(0)


@dataclass
class RedisJobQueue:
    """
    Redis list for ready jobs plus a sorted set (scored by due time) for
    delayed retries.
    """

    url: str
    queue_key: str = "portfolio:emails"
    clock: Callable[[], float] = time.time

    def __post_init__(self):
        self.client = redis.Redis.from_url(self.url)

    @property
    def delayed_key(self) -> str:
        return f"{self.queue_key}:delayed"

    def enqueue(self, job_id: str) -> None:
        self.client.rpush(self.queue_key, job_id)

    def schedule(self, job_id: str, delay_seconds: float) -> None:
        self.client.zadd(self.delayed_key, {job_id: self.clock() + delay_seconds})

    def _release_due(self) -> None:
        for raw in self.client.zrangebyscore(self.delayed_key, "-inf", self.clock()):
            # zrem succeeds for exactly one worker, which then owns the push.
            if self.client.zrem(self.delayed_key, raw):
                self.client.rpush(self.queue_key, raw)

    def dequeue(self, *, block: bool = True, timeout: int | None = None) -> Optional[str]:
        try:
            self._release_due()
            if block:
                result = self.client.blpop(self.queue_key, timeout=timeout or 0)
                if result is None:
                    return None
                _, job_id = result
            else:
                job_id = self.client.lpop(self.queue_key)
                if job_id is None:
                    return None
            return job_id.decode("utf-8")
        except redis_exceptions.ConnectionError:
            # Managed Redis drops idle connections; reconnect and let the
            # worker loop retry.
            logger.warning("Redis connection lost, reconnecting")
            self.client = redis.Redis.from_url(self.url)
            return None
