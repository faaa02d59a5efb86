"""
Contact form submissions and the notification emails they trigger.
"""

from __future__ import annotations

import logging
from typing import Optional

from content.email_templates import admin_notification_subject, user_confirmation_subject
from content.types import ContactSubmission, EmailJob, EmailKind, MessageStatus
from portfolio.db import DbClient
from portfolio.queue import JobQueue
from portfolio.schemas import ContactForm

logger = logging.getLogger(__name__)


def _notification_jobs(
    submission: ContactSubmission, admin_email: Optional[str], site_name: str
) -> list[EmailJob]:
    jobs = []
    if admin_email:
        jobs.append(
            EmailJob(
                kind=EmailKind.ADMIN_NOTIFICATION.value,
                to=admin_email,
                subject=admin_notification_subject(submission.subject),
                context={
                    "submission_id": submission.id,
                    "full_name": submission.full_name,
                    "email": submission.email,
                    "subject": submission.subject,
                    "message": submission.message,
                },
            )
        )
    else:
        logger.warning("ADMIN_EMAIL is not set; skipping admin notification for %s", submission.id)
    jobs.append(
        EmailJob(
            kind=EmailKind.USER_CONFIRMATION.value,
            to=submission.email,
            subject=user_confirmation_subject(),
            context={"full_name": submission.full_name, "site_name": site_name},
        )
    )
    return jobs


def submit_contact_form(
    db: DbClient,
    queue: JobQueue,
    form: ContactForm,
    *,
    admin_email: Optional[str],
    site_name: str,
) -> ContactSubmission:
    """
    Stores a new unread submission, then queues the admin notification and
    the confirmation to the sender.

    The submission is saved before any email work. Every job row is stored
    before anything is queued, so a queue outage leaves pending rows for the
    worker to pick up; it never fails the submission.
    """
    submission = db.add(
        ContactSubmission(
            full_name=form.full_name,
            email=str(form.email),
            subject=form.subject,
            message=form.message,
            is_read=False,
            status=MessageStatus.NEW.value,
        )
    )
    logger.info("Stored contact submission %s", submission.id)

    jobs = []
    for job in _notification_jobs(submission, admin_email, site_name):
        try:
            jobs.append(db.add(job))
        except Exception:
            logger.exception("Failed to store %s email for %s", job.kind, submission.id)

    for job in jobs:
        try:
            queue.enqueue(job.id)
        except Exception:
            logger.exception("Failed to queue %s email %s", job.kind, job.id)
    return submission
