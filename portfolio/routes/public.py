"""
Public routes used by the portfolio site.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from content.types import (
    Education,
    Experience,
    Hobby,
    Profile,
    Project,
    SocialLink,
    TechnicalProficiency,
    TechnicalSkill,
)
from portfolio.config import get_settings
from portfolio.db import DbClient
from portfolio.dependencies import get_db_client, get_queue_client
from portfolio.queue import JobQueue
from portfolio.schemas import (
    BlogArchiveResponse,
    BlogDetailResponse,
    ContactForm,
    ContactResponse,
    EventPayload,
    LikeRequest,
    LikeResponse,
    PageViewPayload,
    ResumeResponse,
    ShareResponse,
    StatusResponse,
    ViewCountResponse,
)
from portfolio.services import analytics, blog, catalog, contact

logger = logging.getLogger(__name__)

router = APIRouter()

COUNTRY_HEADER = "cf-ipcountry"


@router.get("/profile", response_model=Profile)
def get_profile(db: DbClient = Depends(get_db_client)):
    return catalog.get_profile(db)


@router.get("/resume", response_model=ResumeResponse)
def get_resume(db: DbClient = Depends(get_db_client)):
    return ResumeResponse(url=catalog.resume_url(db))


@router.get("/projects", response_model=list[Project])
def list_projects(
    category: Optional[str] = Query(default=None),
    db: DbClient = Depends(get_db_client),
):
    return catalog.list_projects(db, category=category)


@router.get("/projects/categories", response_model=list[str])
def list_project_categories(db: DbClient = Depends(get_db_client)):
    return catalog.project_categories(db)


@router.get("/experiences", response_model=list[Experience])
def list_experiences(db: DbClient = Depends(get_db_client)):
    return catalog.list_experiences(db)


@router.get("/technical-skills", response_model=list[TechnicalSkill])
def list_technical_skills(db: DbClient = Depends(get_db_client)):
    return catalog.list_technical_skills(db)


@router.get("/technical-proficiency", response_model=list[TechnicalProficiency])
def list_technical_proficiency(db: DbClient = Depends(get_db_client)):
    return catalog.list_proficiency(db)


@router.get("/education", response_model=list[Education])
def list_education(db: DbClient = Depends(get_db_client)):
    return catalog.list_education(db)


@router.get("/hobbies", response_model=list[Hobby])
def list_hobbies(db: DbClient = Depends(get_db_client)):
    return catalog.list_hobbies(db)


@router.get("/social-links", response_model=list[SocialLink])
def list_social_links(db: DbClient = Depends(get_db_client)):
    return catalog.list_social_links(db, active_only=True)


@router.get("/blogs", response_model=BlogArchiveResponse)
def list_blogs(
    q: Optional[str] = Query(default=None, max_length=200),
    tag: Optional[list[str]] = Query(default=None),
    db: DbClient = Depends(get_db_client),
):
    """
    Published posts, newest first. ``tag`` may repeat; a post must carry
    every selected tag.
    """
    posts, tags = blog.list_published_posts(db, query=q, tags=tag)
    return BlogArchiveResponse(posts=posts, tags=tags, total=len(posts))


@router.get("/blogs/{slug}", response_model=BlogDetailResponse)
def get_blog(slug: str, db: DbClient = Depends(get_db_client)):
    post, toc, related = blog.get_published_post(db, slug)
    return BlogDetailResponse(
        post=post, toc=[item.as_dict() for item in toc], related=related
    )


@router.post("/blogs/{slug}/view", response_model=ViewCountResponse)
def record_blog_view(slug: str, db: DbClient = Depends(get_db_client)):
    return ViewCountResponse(view_count=blog.record_view(db, slug))


@router.post("/blogs/{slug}/like", response_model=LikeResponse)
def toggle_blog_like(
    slug: str,
    payload: LikeRequest,
    db: DbClient = Depends(get_db_client),
):
    liked, like_count = blog.toggle_like(db, slug, payload.visitor_id)
    return LikeResponse(liked=liked, like_count=like_count)


@router.get("/blogs/{slug}/share", response_model=ShareResponse)
def share_blog(
    slug: str,
    platform: str = Query(...),
    db: DbClient = Depends(get_db_client),
):
    url = blog.share_link(db, slug, platform, get_settings().site_url)
    return ShareResponse(platform=platform, url=url)


@router.post("/contact", response_model=ContactResponse, status_code=201)
def submit_contact(
    form: ContactForm,
    db: DbClient = Depends(get_db_client),
    queue: JobQueue = Depends(get_queue_client),
):
    settings = get_settings()
    submission = contact.submit_contact_form(
        db,
        queue,
        form,
        admin_email=settings.admin_email,
        site_name=settings.site_name,
    )
    return ContactResponse(success=True, id=submission.id)


@router.post("/analytics/page-view", response_model=StatusResponse, status_code=201)
def track_page_view(
    payload: PageViewPayload,
    request: Request,
    db: DbClient = Depends(get_db_client),
):
    analytics.track_page_view(
        db,
        payload.path,
        user_agent=request.headers.get("user-agent"),
        referrer=payload.referrer,
        session_id=payload.session_id,
        country=payload.country or request.headers.get(COUNTRY_HEADER),
    )
    return StatusResponse(status="ok")


@router.post("/analytics/event", response_model=StatusResponse, status_code=201)
def track_event(payload: EventPayload, db: DbClient = Depends(get_db_client)):
    analytics.track_event(
        db,
        payload.event_name,
        page_path=payload.page_path,
        session_id=payload.session_id,
        properties=payload.properties,
    )
    return StatusResponse(status="ok")
