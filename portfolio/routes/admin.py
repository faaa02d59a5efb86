"""
Admin dashboard routes for blog posts and the portfolio sections.

Every route here requires a signed-in admin.
"""

import logging
from typing import Any, Callable, Dict, Type

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from content.types import (
    BlogPost,
    Education,
    Experience,
    Hobby,
    Profile,
    Project,
    SocialLink,
    TechnicalProficiency,
    TechnicalSkill,
)
from portfolio.db import DbClient
from portfolio.dependencies import get_db_client, require_admin
from portfolio.schemas import (
    BlogPostPayload,
    EducationPayload,
    ExperiencePayload,
    HobbyPayload,
    ProfilePayload,
    ProjectOrder,
    ProjectPayload,
    SkillToggle,
    SlugBackfillResponse,
    SocialLinkPayload,
    StatusResponse,
    TechnicalProficiencyPayload,
    TechnicalSkillPayload,
)
from portfolio.services import blog, catalog

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", dependencies=[Depends(require_admin)])


def _dump(payload: BaseModel) -> Dict[str, Any]:
    return payload.model_dump()


def register_crud(
    path: str,
    kind: Type,
    payload_model: Type[BaseModel],
    list_records: Callable[[DbClient], list],
    to_values: Callable[[Any], Dict[str, Any]] = _dump,
) -> None:
    """Adds list/create/update/delete routes for one portfolio section."""
    name = path.strip("/").replace("-", "_")

    @router.get(path, response_model=list[kind], name=f"list_{name}")
    def list_all(db: DbClient = Depends(get_db_client)):
        return list_records(db)

    @router.post(path, response_model=kind, status_code=201, name=f"create_{name}")
    def create(payload: payload_model, db: DbClient = Depends(get_db_client)):
        return catalog.create_record(db, kind, to_values(payload))

    @router.put(f"{path}/{{record_id}}", response_model=kind, name=f"update_{name}")
    def update(record_id: str, payload: payload_model, db: DbClient = Depends(get_db_client)):
        return catalog.update_record(db, kind, record_id, to_values(payload))

    @router.delete(f"{path}/{{record_id}}", response_model=StatusResponse, name=f"delete_{name}")
    def delete(record_id: str, db: DbClient = Depends(get_db_client)):
        catalog.delete_record(db, kind, record_id)
        return StatusResponse(status="ok")


# Blog posts


@router.get("/blogs", response_model=list[BlogPost])
def list_blog_posts(db: DbClient = Depends(get_db_client)):
    return blog.list_admin_posts(db)


@router.post("/blogs/backfill-slugs", response_model=SlugBackfillResponse)
def backfill_blog_slugs(db: DbClient = Depends(get_db_client)):
    return SlugBackfillResponse(updated=blog.backfill_slugs(db))


@router.get("/blogs/{post_id}", response_model=BlogPost)
def get_blog_post(post_id: str, db: DbClient = Depends(get_db_client)):
    return blog.get_admin_post(db, post_id)


@router.post("/blogs", response_model=BlogPost, status_code=201)
def create_blog_post(payload: BlogPostPayload, db: DbClient = Depends(get_db_client)):
    return blog.create_post(db, payload)


@router.put("/blogs/{post_id}", response_model=BlogPost)
def update_blog_post(
    post_id: str, payload: BlogPostPayload, db: DbClient = Depends(get_db_client)
):
    return blog.update_post(db, post_id, payload)


@router.delete("/blogs/{post_id}", response_model=StatusResponse)
def delete_blog_post(post_id: str, db: DbClient = Depends(get_db_client)):
    blog.delete_post(db, post_id)
    return StatusResponse(status="ok")


# Portfolio sections

# Registered before the generic project routes so "order" is not read as an id.
@router.put("/projects/order", response_model=list[Project])
def reorder_projects(payload: ProjectOrder, db: DbClient = Depends(get_db_client)):
    return catalog.reorder_projects(db, payload.ids)


@router.post("/technical-skills/{record_id}/toggle", response_model=TechnicalSkill)
def toggle_technical_skill(
    record_id: str, payload: SkillToggle, db: DbClient = Depends(get_db_client)
):
    return catalog.toggle_skill(db, record_id, payload.skill)


register_crud("/projects", Project, ProjectPayload, catalog.list_projects)
register_crud(
    "/experiences",
    Experience,
    ExperiencePayload,
    catalog.list_experiences,
    to_values=lambda payload: payload.to_record_values(),
)
register_crud(
    "/technical-skills", TechnicalSkill, TechnicalSkillPayload, catalog.list_technical_skills
)
register_crud(
    "/technical-proficiency",
    TechnicalProficiency,
    TechnicalProficiencyPayload,
    catalog.list_proficiency,
)
register_crud("/education", Education, EducationPayload, catalog.list_education)
register_crud("/hobbies", Hobby, HobbyPayload, catalog.list_hobbies)
register_crud("/social-links", SocialLink, SocialLinkPayload, catalog.list_social_links)


@router.get("/profile", response_model=Profile)
def get_profile(db: DbClient = Depends(get_db_client)):
    return catalog.get_profile(db)


@router.put("/profile", response_model=Profile)
def update_profile(payload: ProfilePayload, db: DbClient = Depends(get_db_client)):
    return catalog.update_profile(db, payload.model_dump())
