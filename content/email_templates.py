"""
HTML bodies for contact form notifications and admin replies.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from jinja2 import Environment, StrictUndefined, select_autoescape

from content.types import EmailKind

_env = Environment(
    autoescape=select_autoescape(default_for_string=True, default=True),
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
)

ADMIN_NOTIFICATION = _env.from_string(
    """
<h1>New Contact Form Submission</h1>
{% if submission_id is defined and submission_id %}
<p><strong>Submission ID:</strong> {{ submission_id }}</p>
{% endif %}
<p><strong>Name:</strong> {{ full_name }}</p>
<p><strong>Email:</strong> {{ email }}</p>
<p><strong>Subject:</strong> {{ subject }}</p>
<p><strong>Message:</strong> {{ message }}</p>
<p>Please log in to your admin dashboard to view and respond to this message.</p>
"""
)

USER_CONFIRMATION = _env.from_string(
    """
<h1>Thank you for contacting us</h1>
<p>Dear {{ full_name }},</p>
<p>We have received your message and will get back to you soon.</p>
<p>Best regards,<br>{{ site_name }}</p>
"""
)

REPLY = _env.from_string(
    """
<div style="font-family: sans-serif; max-width: 600px; margin: 0 auto;">
  <h2>Response to Your Message</h2>
  <p style="margin: 16px 0; line-height: 1.5;">{{ reply_message }}</p>
  {% if original_message is defined and original_message %}
  <hr style="margin: 24px 0; border: 0; border-top: 1px solid #eee;">
  <div style="color: #666;">
    <p><strong>Original Message:</strong></p>
    <p>{{ original_message }}</p>
  </div>
  {% endif %}
  <p style="margin-top: 24px;">Best regards,<br>{{ site_name }} Team</p>
</div>
"""
)

_TEMPLATES = {
    EmailKind.ADMIN_NOTIFICATION.value: ADMIN_NOTIFICATION,
    EmailKind.USER_CONFIRMATION.value: USER_CONFIRMATION,
    EmailKind.REPLY.value: REPLY,
}


def admin_notification_subject(subject: str) -> str:
    return f"New Contact Form Submission: {subject}"


def user_confirmation_subject() -> str:
    return "We received your message"


def reply_subject(subject: Optional[str]) -> str:
    return f"Re: {subject}" if subject else "Re: Your Message"


def render_email(kind: str, context: Mapping[str, Any]) -> str:
    """Renders the HTML body for an email kind. Unknown kinds raise KeyError."""
    template = _TEMPLATES[kind]
    return template.render(**context).strip()
