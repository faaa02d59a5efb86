"""
Pydantic schemas for the portfolio API.

Request models carry the form rules of the admin dashboard and the
contact form; stored records are returned as the dataclasses from
``content.types``.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Literal, Optional

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    EmailStr,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

from content.types import BlogPost, ContactSubmission

_http_url = TypeAdapter(AnyHttpUrl)


def _required(value: str, message: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError(message)
    return value


def _length(value: str, label: str, minimum: int = 0, maximum: int | None = None) -> str:
    value = (value or "").strip()
    if len(value) < minimum:
        raise ValueError(f"{label} must be at least {minimum} characters")
    if maximum is not None and len(value) > maximum:
        raise ValueError(f"{label} must not exceed {maximum} characters")
    return value


def _optional_url(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    if not value:
        return None
    try:
        _http_url.validate_python(value)
    except ValidationError:
        raise ValueError("Invalid URL") from None
    return value


def _clean_list(values: list[str]) -> list[str]:
    seen: dict[str, None] = {}
    for value in values or []:
        value = (value or "").strip()
        if value:
            seen.setdefault(value, None)
    return list(seen)


# Contact form


class ContactForm(BaseModel):
    full_name: str = Field(..., max_length=200)
    email: EmailStr
    subject: str = Field(..., max_length=200)
    message: str = Field(..., max_length=5000)

    @field_validator("full_name")
    @classmethod
    def _full_name(cls, value: str) -> str:
        return _length(value, "Name", minimum=2)

    @field_validator("subject")
    @classmethod
    def _subject(cls, value: str) -> str:
        return _length(value, "Subject", minimum=3)

    @field_validator("message")
    @classmethod
    def _message(cls, value: str) -> str:
        return _length(value, "Message", minimum=10)


class ContactResponse(BaseModel):
    success: bool
    id: str


# Blog


class BlogPostPayload(BaseModel):
    title: str
    content: str
    excerpt: str
    slug: Optional[str] = None
    cover_image: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    category: Optional[str] = None
    status: Literal["draft", "published"] = "draft"
    is_featured: bool = False
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    meta_keywords: Optional[str] = None
    author: Optional[str] = None
    canonical_url: Optional[str] = None

    @field_validator("title")
    @classmethod
    def _title(cls, value: str) -> str:
        return _required(value, "Title is required")

    @field_validator("content")
    @classmethod
    def _content(cls, value: str) -> str:
        return _required(value, "Content is required")

    @field_validator("excerpt")
    @classmethod
    def _excerpt(cls, value: str) -> str:
        value = _required(value, "Excerpt is required")
        if len(value) > 300:
            raise ValueError("Excerpt must be less than 300 characters")
        return value

    @field_validator("tags")
    @classmethod
    def _tags(cls, value: list[str]) -> list[str]:
        return _clean_list(value)

    @field_validator("canonical_url")
    @classmethod
    def _canonical_url(cls, value: Optional[str]) -> Optional[str]:
        return _optional_url(value)


class TocEntry(BaseModel):
    id: str
    title: str
    level: int
    children: list["TocEntry"] = Field(default_factory=list)


class BlogArchiveResponse(BaseModel):
    posts: list[BlogPost]
    tags: list[str]
    total: int


class BlogDetailResponse(BaseModel):
    post: BlogPost
    toc: list[TocEntry]
    related: list[BlogPost]


class ViewCountResponse(BaseModel):
    view_count: int


class LikeRequest(BaseModel):
    visitor_id: str = Field(..., min_length=1, max_length=128)


class LikeResponse(BaseModel):
    liked: bool
    like_count: int


class ShareResponse(BaseModel):
    platform: str
    url: str


class SlugBackfillResponse(BaseModel):
    updated: int


# Portfolio content


class ProjectPayload(BaseModel):
    title: str
    category: str
    description: Optional[str] = None
    long_description: Optional[str] = None
    image_url: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    technologies: list[str] = Field(default_factory=list)
    features: list[str] = Field(default_factory=list)
    demo_link: Optional[str] = None
    github_link: Optional[str] = None
    live_link: Optional[str] = None

    @field_validator("title")
    @classmethod
    def _title(cls, value: str) -> str:
        return _required(value, "Title is required")

    @field_validator("category")
    @classmethod
    def _category(cls, value: str) -> str:
        return _required(value, "Category is required")

    @field_validator("tags", "technologies", "features")
    @classmethod
    def _lists(cls, value: list[str]) -> list[str]:
        return _clean_list(value)

    @field_validator("demo_link", "github_link", "live_link")
    @classmethod
    def _links(cls, value: Optional[str]) -> Optional[str]:
        return _optional_url(value)


class ProjectOrder(BaseModel):
    ids: list[str] = Field(..., min_length=1)


class ExperiencePayload(BaseModel):
    title: str
    company: str
    location: str = ""
    type: str = ""
    start_date: date
    end_date: Optional[date] = None
    current: bool = False
    description: str
    company_url: Optional[str] = None
    achievements: list[str]
    skills: list[str] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def _title(cls, value: str) -> str:
        return _length(value, "Title", minimum=2, maximum=100)

    @field_validator("company")
    @classmethod
    def _company(cls, value: str) -> str:
        return _length(value, "Company name", minimum=2, maximum=100)

    @field_validator("location")
    @classmethod
    def _location(cls, value: str) -> str:
        return _length(value, "Location", maximum=100)

    @field_validator("type")
    @classmethod
    def _type(cls, value: str) -> str:
        return _length(value, "Type", maximum=50)

    @field_validator("description")
    @classmethod
    def _description(cls, value: str) -> str:
        return _length(value, "Description", minimum=10, maximum=1000)

    @field_validator("company_url")
    @classmethod
    def _company_url(cls, value: Optional[str]) -> Optional[str]:
        return _optional_url(value)

    @field_validator("achievements")
    @classmethod
    def _achievements(cls, value: list[str]) -> list[str]:
        value = _clean_list(value)
        if not value:
            raise ValueError("Add at least one achievement")
        if len(value) > 10:
            raise ValueError("Maximum 10 achievements allowed")
        return value

    @field_validator("skills")
    @classmethod
    def _skills(cls, value: list[str]) -> list[str]:
        value = _clean_list(value)
        if len(value) > 15:
            raise ValueError("Maximum 15 skills allowed")
        return value

    @model_validator(mode="after")
    def _dates(self) -> "ExperiencePayload":
        if self.current:
            self.end_date = None
        elif self.end_date and self.end_date < self.start_date:
            raise ValueError("End date must be after start date")
        return self

    def to_record_values(self) -> dict[str, Any]:
        values = self.model_dump()
        values["start_date"] = self.start_date.isoformat()
        values["end_date"] = self.end_date.isoformat() if self.end_date else None
        return values


class TechnicalSkillPayload(BaseModel):
    category: str
    icon_key: str = "code"
    skills: list[str] = Field(default_factory=list)

    @field_validator("category")
    @classmethod
    def _category(cls, value: str) -> str:
        return _required(value, "Category is required")

    @field_validator("skills")
    @classmethod
    def _skills(cls, value: list[str]) -> list[str]:
        return _clean_list(value)


class SkillToggle(BaseModel):
    skill: str

    @field_validator("skill")
    @classmethod
    def _skill(cls, value: str) -> str:
        return _required(value, "Skill is required")


class TechnicalProficiencyPayload(BaseModel):
    skill: str
    proficiency: int = Field(..., ge=0, le=100)

    @field_validator("skill")
    @classmethod
    def _skill(cls, value: str) -> str:
        return _required(value, "Skill is required")


class EducationPayload(BaseModel):
    degree: str
    institution: str
    type: str
    year_start: str
    year_end: Optional[str] = None

    @field_validator("degree", "institution", "type", "year_start")
    @classmethod
    def _required_fields(cls, value: str, info) -> str:
        return _required(value, f"{info.field_name.replace('_', ' ').capitalize()} is required")


class HobbyPayload(BaseModel):
    name: str
    category: str
    icon_key: str = "heart"

    @field_validator("name", "category")
    @classmethod
    def _required_fields(cls, value: str, info) -> str:
        return _required(value, f"{info.field_name.capitalize()} is required")


class SocialLinkPayload(BaseModel):
    platform: str
    url: str
    is_active: bool = True

    @field_validator("platform")
    @classmethod
    def _platform(cls, value: str) -> str:
        return _required(value, "Platform is required")

    @field_validator("url")
    @classmethod
    def _url(cls, value: str) -> str:
        url = _optional_url(value)
        if url is None:
            raise ValueError("URL is required")
        return url


class ProfilePayload(BaseModel):
    about_text: Optional[str] = None
    profile_image_url: Optional[str] = None
    resume_url: Optional[str] = None


class ResumeResponse(BaseModel):
    url: str


# Messages


class IdsPayload(BaseModel):
    ids: list[str] = Field(..., min_length=1)


class CountResponse(BaseModel):
    count: int


class TagPayload(BaseModel):
    tag: str


class ReplyPayload(BaseModel):
    reply_message: str = Field(..., max_length=10000)


class PaginationResponse(BaseModel):
    current_page: int
    total_pages: int
    page_size: int
    total_messages: int


class MessageListResponse(BaseModel):
    messages: list[ContactSubmission]
    pagination: PaginationResponse


class DailyCount(BaseModel):
    date: str
    count: int


class MessageAnalyticsResponse(BaseModel):
    total_messages: int
    unread_messages: int
    replied_messages: int
    archived_messages: int
    daily_message_trend: list[DailyCount]


# Auth


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class AdminUserResponse(BaseModel):
    id: str
    email: str
    last_login: Optional[float] = None


class LoginResponse(BaseModel):
    token: str
    token_type: Literal["bearer"] = "bearer"
    timeout_seconds: int
    user: AdminUserResponse


class SessionResponse(BaseModel):
    user: AdminUserResponse
    timeout_seconds: int


class StatusResponse(BaseModel):
    status: Literal["ok"]


# Analytics


class PageViewPayload(BaseModel):
    path: str = Field(..., min_length=1, max_length=2048)
    session_id: Optional[str] = Field(default=None, max_length=128)
    referrer: Optional[str] = Field(default=None, max_length=2048)
    country: Optional[str] = Field(default=None, max_length=64)


class EventPayload(BaseModel):
    event_name: str = Field(..., min_length=1, max_length=128)
    page_path: Optional[str] = Field(default=None, max_length=2048)
    session_id: Optional[str] = Field(default=None, max_length=128)
    properties: dict[str, Any] = Field(default_factory=dict)


class VisitorTrends(BaseModel):
    dates: list[str]
    visitors: list[int]
    page_views: list[int]


class DeviceStats(BaseModel):
    desktop: int
    mobile: int
    tablet: int


class GeoStat(BaseModel):
    country: str
    value: int


class BlogPerformance(BaseModel):
    id: str
    title: str
    views: int
    likes: int
    comments: int


class AnalyticsSummary(BaseModel):
    visitor_trends: VisitorTrends
    blog_performance: list[BlogPerformance]
    device_stats: DeviceStats
    geo_data: list[GeoStat]


# Media


class MediaUploadResponse(BaseModel):
    path: str
    url: str


class SignUrlResponse(BaseModel):
    url: str


class UploadUrlRequest(BaseModel):
    folder: str
    filename: str = Field(..., min_length=1, max_length=255)
    content_type: str = Field(..., min_length=1, max_length=255)


class UploadUrlResponse(BaseModel):
    path: str
    upload_url: str
    url: str
