import unittest
from unittest.mock import patch

from content.types import EmailJob, EmailKind, EmailStatus
from portfolio.db import InMemoryDbClient
from portfolio.mailer import InMemoryMailer
from portfolio.queue import InMemoryJobQueue
from portfolio.worker import MAX_ATTEMPTS, UNQUEUED_GRACE_SECONDS, process_next, retry_delay


class WorkerTests(unittest.TestCase):
    def setUp(self):
        self.now = 1_700_000_000.0
        self.db = InMemoryDbClient()
        self.queue = InMemoryJobQueue(clock=lambda: self.now)
        self.mailer = InMemoryMailer()

    def add_confirmation(self, **overrides) -> EmailJob:
        values = dict(
            kind=EmailKind.USER_CONFIRMATION.value,
            to="ada@example.com",
            subject="We received your message",
            context={"full_name": "Ada", "site_name": "Portfolio"},
            created_at=self.now,
        )
        values.update(overrides)
        return self.db.add(EmailJob(**values))

    def enqueue_confirmation(self, **overrides) -> EmailJob:
        job = self.add_confirmation(**overrides)
        self.queue.enqueue(job.id)
        return job

    def process(self) -> bool:
        return process_next(
            db=self.db, queue=self.queue, mailer=self.mailer, block=False, now=self.now
        )

    def test_process_sends_and_marks_sent(self):
        job = self.enqueue_confirmation()
        self.assertTrue(self.process())

        updated = self.db.get(EmailJob, job.id)
        self.assertEqual(updated.status, EmailStatus.SENT.value)
        self.assertEqual(updated.attempts, 1)
        self.assertEqual(updated.provider_id, self.mailer.outbox[0].provider_id)
        self.assertIn("Dear Ada", self.mailer.outbox[0].html)

    def test_failed_job_is_retried_then_given_up(self):
        job = self.enqueue_confirmation()
        self.mailer.fail_with = "rate limited"

        for attempt in range(1, MAX_ATTEMPTS + 1):
            self.assertTrue(self.process())
            self.now += retry_delay(attempt)

        updated = self.db.get(EmailJob, job.id)
        self.assertEqual(updated.status, EmailStatus.FAILED.value)
        self.assertEqual(updated.attempts, MAX_ATTEMPTS)
        self.assertEqual(updated.error, "rate limited")
        self.assertEqual(self.queue.items, [])
        self.assertEqual(self.queue.delayed, {})
        self.assertFalse(self.process())

    def test_retry_waits_for_backoff(self):
        job = self.enqueue_confirmation()
        self.mailer.fail_with = "temporary"
        self.process()
        self.assertEqual(self.queue.items, [])
        self.assertIn(job.id, self.queue.delayed)

        self.mailer.fail_with = None
        self.now += retry_delay(1) - 1
        self.assertFalse(self.process())
        self.assertEqual(self.mailer.outbox, [])

        self.now += 1
        self.assertTrue(self.process())
        updated = self.db.get(EmailJob, job.id)
        self.assertEqual(updated.status, EmailStatus.SENT.value)
        self.assertEqual(updated.attempts, 2)
        self.assertIsNone(updated.error)

    def test_backoff_grows(self):
        self.assertLess(retry_delay(1), retry_delay(2))

        job = self.enqueue_confirmation()
        self.mailer.fail_with = "temporary"
        self.process()
        self.now += retry_delay(1)
        self.process()
        self.assertEqual(self.queue.delayed[job.id], self.now + retry_delay(2))

    def test_unexpected_send_error_is_recorded_and_retried(self):
        job = self.enqueue_confirmation()
        with patch.object(self.mailer, "send", side_effect=ValueError("not json")):
            self.assertTrue(self.process())

        updated = self.db.get(EmailJob, job.id)
        self.assertEqual(updated.status, EmailStatus.FAILED.value)
        self.assertEqual(updated.attempts, 1)
        self.assertEqual(updated.error, "ValueError: not json")
        self.assertIn(job.id, self.queue.delayed)

    def test_template_error_is_recorded(self):
        job = self.enqueue_confirmation(context={})
        self.assertTrue(self.process())

        updated = self.db.get(EmailJob, job.id)
        self.assertEqual(updated.status, EmailStatus.FAILED.value)
        self.assertTrue(updated.error.startswith("UndefinedError"))
        self.assertEqual(self.mailer.outbox, [])

    def test_sent_jobs_are_not_resent(self):
        job = self.enqueue_confirmation()
        self.process()
        self.queue.enqueue(job.id)
        self.assertTrue(self.process())
        self.assertEqual(len(self.mailer.outbox), 1)

    def test_no_jobs(self):
        self.assertFalse(self.process())

    def test_unknown_job_id_is_discarded(self):
        self.queue.enqueue("missing")
        job = self.enqueue_confirmation()

        processed = 0
        while self.process():
            processed += 1

        self.assertEqual(processed, 2)
        self.assertEqual(self.db.get(EmailJob, job.id).status, EmailStatus.SENT.value)

    def test_pending_job_that_was_never_queued_is_picked_up(self):
        job = self.add_confirmation(created_at=self.now - UNQUEUED_GRACE_SECONDS)
        fresh = self.add_confirmation()

        self.assertTrue(self.process())
        self.assertEqual(self.db.get(EmailJob, job.id).status, EmailStatus.SENT.value)

        # Too new; the API may still be about to queue it.
        self.assertFalse(self.process())
        self.assertEqual(self.db.get(EmailJob, fresh.id).status, EmailStatus.PENDING.value)

    def test_failed_unqueued_job_is_scheduled_not_swept_again(self):
        job = self.add_confirmation(created_at=self.now - UNQUEUED_GRACE_SECONDS)
        self.mailer.fail_with = "temporary"

        self.assertTrue(self.process())
        self.assertFalse(self.process())
        self.assertEqual(self.db.get(EmailJob, job.id).attempts, 1)
        self.assertIn(job.id, self.queue.delayed)


if __name__ == "__main__":
    unittest.main()
