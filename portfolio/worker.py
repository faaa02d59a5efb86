"""
Worker loop that delivers queued email jobs.

The API stores an ``EmailJob`` row and pushes its id onto the queue; the
worker renders the body, hands it to the mailer and records the outcome.
Failed attempts are retried with a growing delay. Pending rows that never
made it onto the queue are picked up once the queue runs dry.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

from content.email_templates import render_email
from content.types import EmailJob, EmailStatus
from portfolio.db import DbClient
from portfolio.dependencies import get_db_client, get_mailer, get_queue_client
from portfolio.mailer import Mailer, MailerError
from portfolio.queue import JobQueue

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3
RETRY_DELAY_SECONDS = 60.0
# A pending row younger than this may still be on its way onto the queue.
UNQUEUED_GRACE_SECONDS = 60.0


def retry_delay(attempts: int) -> float:
    """Delay before the next try after ``attempts`` failures: 60s, 120s, ..."""
    return RETRY_DELAY_SECONDS * 2 ** (attempts - 1)


def process_job(job: EmailJob, db: DbClient, mailer: Mailer) -> bool:
    """
    Sends one job. Returns True when the provider accepted it.

    Any failure is recorded on the job as ``failed`` with its error text.
    """
    attempts = job.attempts + 1
    try:
        html = render_email(job.kind, job.context)
        provider_id = mailer.send(job.to, job.subject, html)
    except MailerError as exc:
        logger.warning("[%s] Email delivery failed (attempt %d): %s", job.id, attempts, exc)
        error = str(exc)
    except Exception as exc:
        logger.exception("[%s] Email job crashed (attempt %d): %s", job.id, attempts, exc)
        error = f"{type(exc).__name__}: {exc}"
    else:
        db.update(
            EmailJob,
            job.id,
            {
                "status": EmailStatus.SENT.value,
                "attempts": attempts,
                "error": None,
                "provider_id": provider_id,
            },
        )
        logger.info("[%s] Sent %s email to %s", job.id, job.kind, job.to)
        return True

    db.update(
        EmailJob,
        job.id,
        {"status": EmailStatus.FAILED.value, "attempts": attempts, "error": error},
    )
    return False


def next_unqueued_job(db: DbClient, now: Optional[float] = None) -> Optional[EmailJob]:
    """Oldest pending job that has waited longer than the grace period."""
    cutoff = (now if now is not None else time.time()) - UNQUEUED_GRACE_SECONDS
    for job in db.list(EmailJob, order_by="created_at", status=EmailStatus.PENDING.value):
        if job.created_at <= cutoff:
            return job
    return None


def process_next(
    *,
    db: Optional[DbClient] = None,
    queue: Optional[JobQueue] = None,
    mailer: Optional[Mailer] = None,
    block: bool = True,
    timeout: Optional[int] = None,
    now: Optional[float] = None,
) -> bool:
    """
    Fetch and process one job from the queue, or a pending job that was never
    queued. Returns True if a job id was consumed.
    """
    db = db or get_db_client()
    queue = queue or get_queue_client()
    mailer = mailer or get_mailer()

    job_id = queue.dequeue(block=block, timeout=timeout)
    if job_id:
        job = db.get(EmailJob, job_id)
        if not job:
            logger.warning("Received job_id %s from queue but no DB record found", job_id)
            return True
        if job.status == EmailStatus.SENT.value:
            logger.info("[%s] Already sent, skipping", job_id)
            return True
    else:
        job = next_unqueued_job(db, now)
        if not job:
            return False
        logger.info("[%s] Picked up pending job that was never queued", job.id)

    if not process_job(job, db, mailer) and job.attempts + 1 < MAX_ATTEMPTS:
        delay = retry_delay(job.attempts + 1)
        queue.schedule(job.id, delay)
        logger.info("[%s] Retrying in %.0fs", job.id, delay)
    return True


def run_loop(poll_interval_seconds: float = 2.0) -> None:
    """
    Blocking loop over the queue. Intended to be run under systemd/supervisor.
    """
    db = get_db_client()
    queue = get_queue_client()
    mailer = get_mailer()
    while True:
        try:
            processed = process_next(
                db=db, queue=queue, mailer=mailer, block=True, timeout=int(poll_interval_seconds)
            )
        except Exception:
            logger.exception("Email worker iteration failed")
            processed = False
        if not processed:
            time.sleep(poll_interval_seconds)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run_loop()
