"""
Portfolio sections edited in the admin dashboard: projects, experience,
skills, education, hobbies, social links and the profile.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional, Type, TypeVar

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
from portfolio.db import DbClient
from portfolio.errors import NotFoundError, ValidationFailed

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")

LABELS = {
    Project: "Project",
    Experience: "Experience",
    TechnicalSkill: "Technical skill",
    TechnicalProficiency: "Technical proficiency",
    Education: "Education",
    Hobby: "Hobby",
    SocialLink: "Social link",
    Profile: "Profile",
}


def _not_found(kind: type) -> NotFoundError:
    return NotFoundError(f"{LABELS.get(kind, kind.__name__)} not found")


def get_record(db: DbClient, kind: Type[RecordT], record_id: str) -> RecordT:
    record = db.get(kind, record_id)
    if record is None:
        raise _not_found(kind)
    return record


def create_record(db: DbClient, kind: Type[RecordT], values: Dict[str, Any]) -> RecordT:
    if kind is Project:
        return create_project(db, values)
    record = db.add(kind(**values))
    logger.info("Created %s %s", kind.__name__, record.id)
    return record


def update_record(
    db: DbClient, kind: Type[RecordT], record_id: str, values: Dict[str, Any]
) -> RecordT:
    record = db.update(kind, record_id, values)
    if record is None:
        raise _not_found(kind)
    return record


def delete_record(db: DbClient, kind: Type[RecordT], record_id: str) -> None:
    if not db.delete(kind, [record_id]):
        raise _not_found(kind)
    logger.info("Deleted %s %s", kind.__name__, record_id)


# Projects


def create_project(db: DbClient, values: Dict[str, Any]) -> Project:
    """New projects go to the end of the display order."""
    existing = db.list(Project)
    next_order = max((p.sort_order for p in existing), default=-1) + 1
    project = db.add(Project(**{**values, "sort_order": next_order}))
    logger.info("Created Project %s", project.id)
    return project


def list_projects(db: DbClient, category: Optional[str] = None) -> list[Project]:
    if category and category.lower() != "all":
        return db.list(Project, order_by="sort_order", category=category)
    return db.list(Project, order_by="sort_order")


def project_categories(db: DbClient) -> list[str]:
    seen: dict[str, None] = {}
    for project in list_projects(db):
        seen.setdefault(project.category, None)
    return list(seen)


def reorder_projects(db: DbClient, ids: Iterable[str]) -> list[Project]:
    """Assigns ``sort_order`` from each id's position in ``ids``."""
    ids = list(ids)
    if len(set(ids)) != len(ids):
        raise ValidationFailed("Project order contains duplicate ids")
    for project_id in ids:
        if db.get(Project, project_id) is None:
            raise _not_found(Project)
    for position, project_id in enumerate(ids):
        db.update(Project, project_id, {"sort_order": position})
    return list_projects(db)


# Experience, skills, education, hobbies


def list_experiences(db: DbClient) -> list[Experience]:
    return db.list(Experience, order_by="start_date", descending=True)


def list_technical_skills(db: DbClient) -> list[TechnicalSkill]:
    return db.list(TechnicalSkill, order_by="category")


def toggle_skill(db: DbClient, category_id: str, skill: str) -> TechnicalSkill:
    """Adds ``skill`` to the category, or removes it when already listed."""
    category = get_record(db, TechnicalSkill, category_id)
    if skill in category.skills:
        skills = [value for value in category.skills if value != skill]
    else:
        skills = [*category.skills, skill]
    return db.update(TechnicalSkill, category_id, {"skills": skills})


def list_proficiency(db: DbClient) -> list[TechnicalProficiency]:
    return db.list(TechnicalProficiency, order_by="proficiency", descending=True)


def list_education(db: DbClient) -> list[Education]:
    return db.list(Education, order_by="year_start", descending=True)


def list_hobbies(db: DbClient) -> list[Hobby]:
    hobbies = db.list(Hobby, order_by="name")
    hobbies.sort(key=lambda hobby: hobby.category)
    return hobbies


def list_social_links(db: DbClient, active_only: bool = False) -> list[SocialLink]:
    if active_only:
        return db.list(SocialLink, order_by="platform", is_active=True)
    return db.list(SocialLink, order_by="platform")


# Profile


def get_profile(db: DbClient) -> Profile:
    """Returns the profile row, or an empty profile before one is saved."""
    profile = db.find_one(Profile)
    return profile or Profile()


def update_profile(db: DbClient, values: Dict[str, Any]) -> Profile:
    profile = db.find_one(Profile)
    if profile is None:
        profile = db.add(Profile(**values))
        logger.info("Created profile %s", profile.id)
        return profile
    return db.update(Profile, profile.id, values)


def resume_url(db: DbClient) -> str:
    profile = get_profile(db)
    if not profile.resume_url:
        raise NotFoundError("Resume not found")
    return profile.resume_url
