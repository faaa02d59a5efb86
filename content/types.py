"""
Record types shared by the API, the worker and the scripts.

Each dataclass mirrors one table row. Timestamps are epoch seconds.
"""

from __future__ import annotations

import enum
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Optional


def new_id() -> str:
    return uuid.uuid4().hex


def _now() -> float:
    return time.time()


class PostStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class MessageStatus(str, enum.Enum):
    NEW = "new"
    READ = "read"
    REPLIED = "replied"
    ARCHIVED = "archived"


class EmailKind(str, enum.Enum):
    ADMIN_NOTIFICATION = "admin_notification"
    USER_CONFIRMATION = "user_confirmation"
    REPLY = "reply"


class EmailStatus(str, enum.Enum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


@dataclass
class BlogPost:
    """A blog post authored in the admin rich-text editor."""

    title: str
    content: str
    excerpt: str = ""
    slug: str = ""
    author: str = ""
    cover_image: Optional[str] = None
    tags: list[str] = field(default_factory=list)
    category: Optional[str] = None
    status: str = PostStatus.DRAFT.value
    published: bool = False
    published_at: Optional[float] = None
    is_featured: bool = False
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    meta_keywords: Optional[str] = None
    canonical_url: Optional[str] = None
    reading_time: int = 1
    view_count: int = 0
    like_count: int = 0
    comment_count: int = 0
    id: str = field(default_factory=new_id)
    created_at: float = field(default_factory=_now)
    updated_at: float = field(default_factory=_now)


@dataclass
class Project:
    title: str
    category: str
    description: Optional[str] = None
    long_description: Optional[str] = None
    image_url: Optional[str] = None
    tags: list[str] = field(default_factory=list)
    technologies: list[str] = field(default_factory=list)
    features: list[str] = field(default_factory=list)
    demo_link: Optional[str] = None
    github_link: Optional[str] = None
    live_link: Optional[str] = None
    sort_order: int = 0
    id: str = field(default_factory=new_id)
    created_at: float = field(default_factory=_now)
    updated_at: float = field(default_factory=_now)


@dataclass
class Experience:
    """One entry of the career timeline. Dates are ISO ``YYYY-MM-DD``."""

    title: str
    company: str
    start_date: str
    description: str
    location: str = ""
    type: str = ""
    end_date: Optional[str] = None
    current: bool = False
    company_url: Optional[str] = None
    achievements: list[str] = field(default_factory=list)
    skills: list[str] = field(default_factory=list)
    id: str = field(default_factory=new_id)
    created_at: float = field(default_factory=_now)
    updated_at: float = field(default_factory=_now)


@dataclass
class TechnicalSkill:
    category: str
    icon_key: str = "code"
    skills: list[str] = field(default_factory=list)
    id: str = field(default_factory=new_id)
    created_at: float = field(default_factory=_now)
    updated_at: float = field(default_factory=_now)


@dataclass
class TechnicalProficiency:
    skill: str
    proficiency: int
    id: str = field(default_factory=new_id)
    created_at: float = field(default_factory=_now)
    updated_at: float = field(default_factory=_now)


@dataclass
class Education:
    degree: str
    institution: str
    type: str
    year_start: str
    year_end: Optional[str] = None
    id: str = field(default_factory=new_id)
    created_at: float = field(default_factory=_now)
    updated_at: float = field(default_factory=_now)


@dataclass
class Hobby:
    name: str
    category: str
    icon_key: str = "heart"
    id: str = field(default_factory=new_id)
    created_at: float = field(default_factory=_now)
    updated_at: float = field(default_factory=_now)


@dataclass
class SocialLink:
    platform: str
    url: str
    is_active: bool = True
    id: str = field(default_factory=new_id)
    created_at: float = field(default_factory=_now)
    updated_at: float = field(default_factory=_now)


@dataclass
class Profile:
    """Singleton row holding the about section and downloadable resume."""

    about_text: Optional[str] = None
    profile_image_url: Optional[str] = None
    resume_url: Optional[str] = None
    id: str = field(default_factory=new_id)
    created_at: float = field(default_factory=_now)
    updated_at: float = field(default_factory=_now)


@dataclass
class ContactSubmission:
    full_name: str
    email: str
    subject: str
    message: str
    is_read: bool = False
    status: str = MessageStatus.NEW.value
    tags: list[str] = field(default_factory=list)
    reply_message: Optional[str] = None
    replied_at: Optional[float] = None
    id: str = field(default_factory=new_id)
    created_at: float = field(default_factory=_now)
    updated_at: float = field(default_factory=_now)


@dataclass
class PageView:
    path: str
    session_id: Optional[str] = None
    user_agent: Optional[str] = None
    referrer: Optional[str] = None
    country: Optional[str] = None
    device_type: Optional[str] = None
    browser: Optional[str] = None
    id: str = field(default_factory=new_id)
    created_at: float = field(default_factory=_now)


@dataclass
class AnalyticsEvent:
    event_name: str
    page_path: Optional[str] = None
    session_id: Optional[str] = None
    properties: dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=new_id)
    created_at: float = field(default_factory=_now)


@dataclass
class BlogLike:
    blog_id: str
    visitor_id: str
    id: str = field(default_factory=new_id)
    created_at: float = field(default_factory=_now)


@dataclass
class AdminUser:
    email: str
    password_hash: str
    last_login: Optional[float] = None
    id: str = field(default_factory=new_id)
    created_at: float = field(default_factory=_now)


@dataclass
class EmailJob:
    """An outgoing email waiting for the worker."""

    kind: str
    to: str
    subject: str
    context: dict[str, Any] = field(default_factory=dict)
    status: str = EmailStatus.PENDING.value
    attempts: int = 0
    error: Optional[str] = None
    provider_id: Optional[str] = None
    id: str = field(default_factory=new_id)
    created_at: float = field(default_factory=_now)
    updated_at: float = field(default_factory=_now)


RECORD_TYPES = (
    BlogPost,
    Project,
    Experience,
    TechnicalSkill,
    TechnicalProficiency,
    Education,
    Hobby,
    SocialLink,
    Profile,
    ContactSubmission,
    PageView,
    AnalyticsEvent,
    BlogLike,
    AdminUser,
    EmailJob,
)
