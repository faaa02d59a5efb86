"""
Blog operations for the admin editor and the public archive.
"""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import Optional, Sequence

from content.blog import collect_tags, filter_posts, reading_time, related_posts
from content.share import build_share_url
from content.slugs import generate_unique_slug, slugify
from content.toc import TocItem, generate_table_of_contents, inject_heading_ids
from content.types import BlogLike, BlogPost, PostStatus
from portfolio.db import DbClient, DuplicateRecordError
from portfolio.errors import NotFoundError, ValidationFailed
from portfolio.schemas import BlogPostPayload

logger = logging.getLogger(__name__)

FALLBACK_SLUG = "post"


def _unique_slug(db: DbClient, source: str, exclude_id: Optional[str] = None) -> str:
    base = slugify(source) or FALLBACK_SLUG
    existing = [post.slug for post in db.list(BlogPost) if post.id != exclude_id]
    return generate_unique_slug(base, existing)


def _post_values(payload: BlogPostPayload) -> dict:
    values = payload.model_dump(exclude={"slug"})
    values["author"] = values["author"] or ""
    values["published"] = payload.status == PostStatus.PUBLISHED.value
    values["reading_time"] = reading_time(payload.content)
    values["meta_title"] = payload.meta_title or payload.title
    values["meta_description"] = payload.meta_description or payload.excerpt
    return values


def create_post(db: DbClient, payload: BlogPostPayload) -> BlogPost:
    values = _post_values(payload)
    values["slug"] = _unique_slug(db, payload.slug or payload.title)
    if values["published"]:
        values["published_at"] = time.time()
    post = db.add(BlogPost(**values))
    logger.info("Created blog post %s (%s)", post.id, post.slug)
    return post


def update_post(db: DbClient, post_id: str, payload: BlogPostPayload) -> BlogPost:
    existing = db.get(BlogPost, post_id)
    if existing is None:
        raise NotFoundError("Blog post not found")

    values = _post_values(payload)
    values["slug"] = _unique_slug(db, payload.slug or payload.title, exclude_id=post_id)
    if values["published"] and existing.published_at is None:
        values["published_at"] = time.time()
    return db.update(BlogPost, post_id, values)


def delete_post(db: DbClient, post_id: str) -> None:
    if db.get(BlogPost, post_id) is None:
        raise NotFoundError("Blog post not found")
    db.delete(BlogPost, [post_id])
    likes = db.list(BlogLike, blog_id=post_id)
    db.delete(BlogLike, [like.id for like in likes])
    logger.info("Deleted blog post %s", post_id)


def get_admin_post(db: DbClient, post_id: str) -> BlogPost:
    post = db.get(BlogPost, post_id)
    if post is None:
        raise NotFoundError("Blog post not found")
    return post


def list_admin_posts(db: DbClient) -> list[BlogPost]:
    return db.list(BlogPost, order_by="created_at", descending=True)


def _published(db: DbClient) -> list[BlogPost]:
    return db.list(BlogPost, order_by="published_at", descending=True, published=True)


def list_published_posts(
    db: DbClient,
    query: Optional[str] = None,
    tags: Optional[Sequence[str]] = None,
) -> tuple[list[BlogPost], list[str]]:
    """
    Returns the archive page: posts matching the search and tag filters,
    plus every tag used across published posts.
    """
    posts = _published(db)
    return filter_posts(posts, query=query, tags=tags), collect_tags(posts)


def _get_published(db: DbClient, slug: str) -> BlogPost:
    post = db.find_one(BlogPost, slug=slug, published=True)
    if post is None:
        raise NotFoundError("Blog post not found")
    return post


def get_published_post(
    db: DbClient, slug: str
) -> tuple[BlogPost, list[TocItem], list[BlogPost]]:
    post = _get_published(db, slug)
    toc = generate_table_of_contents(post.content)
    related = related_posts(post, _published(db))
    return replace(post, content=inject_heading_ids(post.content)), toc, related


def record_view(db: DbClient, slug: str) -> int:
    post = _get_published(db, slug)
    updated = db.increment(BlogPost, post.id, "view_count")
    return updated.view_count if updated else post.view_count


def toggle_like(db: DbClient, slug: str, visitor_id: str) -> tuple[bool, int]:
    """
    Likes the post for ``visitor_id``, or removes the like when the visitor
    already liked it. Returns ``(liked, like_count)``.
    """
    post = _get_published(db, slug)
    existing = db.find_one(BlogLike, blog_id=post.id, visitor_id=visitor_id)
    if existing:
        if not db.delete(BlogLike, [existing.id]):
            # A concurrent unlike already removed it and decremented.
            return False, db.get(BlogPost, post.id).like_count
        updated = db.increment(BlogPost, post.id, "like_count", -1)
        if updated.like_count < 0:
            updated = db.update(BlogPost, post.id, {"like_count": 0})
        return False, updated.like_count
    try:
        db.add(BlogLike(blog_id=post.id, visitor_id=visitor_id))
    except DuplicateRecordError:
        return True, db.get(BlogPost, post.id).like_count
    updated = db.increment(BlogPost, post.id, "like_count")
    return True, updated.like_count


def share_link(db: DbClient, slug: str, platform: str, site_url: str) -> str:
    post = _get_published(db, slug)
    url = f"{site_url.rstrip('/')}/blog/{post.slug}"
    try:
        return build_share_url(platform, url, post.title)
    except ValueError as exc:
        raise ValidationFailed(str(exc)) from None


def backfill_slugs(db: DbClient) -> int:
    """Gives every post without a slug one derived from its title."""
    updated = 0
    for post in db.list(BlogPost, order_by="created_at"):
        if post.slug:
            continue
        slug = _unique_slug(db, post.title, exclude_id=post.id)
        db.update(BlogPost, post.id, {"slug": slug})
        logger.info("Backfilled slug %s for post %s", slug, post.id)
        updated += 1
    return updated
