"""
Database abstraction for Postgres and an in-memory test implementation.

Both clients work on the dataclass records from ``content.types``; the
record class doubles as the table selector.
"""

from __future__ import annotations

import copy
import time
from dataclasses import fields, is_dataclass
from typing import Any, Dict, Iterable, Optional, Protocol, Type, TypeVar

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Float,
    Integer,
    String,
    Text,
    UniqueConstraint,
    create_engine,
    nulls_last,
    select,
)
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from content.types import (
    AdminUser,
    AnalyticsEvent,
    BlogLike,
    BlogPost,
    ContactSubmission,
    Education,
    EmailJob,
    Experience,
    Hobby,
    PageView,
    Profile,
    Project,
    SocialLink,
    TechnicalProficiency,
    TechnicalSkill,
)

RecordT = TypeVar("RecordT")

# Field combinations that may appear at most once per table.
UNIQUE_FIELDS: Dict[type, tuple[str, ...]] = {BlogLike: ("blog_id", "visitor_id")}


class DuplicateRecordError(ValueError):
    """Raised by ``add`` when a record breaks a uniqueness rule."""


class DbClient(Protocol):
    """Interface for database access."""

    def add(self, record: RecordT) -> RecordT:
        ...

    def get(self, kind: Type[RecordT], record_id: str) -> Optional[RecordT]:
        ...

    def list(
        self,
        kind: Type[RecordT],
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
        **equals: Any,
    ) -> list[RecordT]:
        ...

    def find_one(self, kind: Type[RecordT], **equals: Any) -> Optional[RecordT]:
        ...

    def update(
        self, kind: Type[RecordT], record_id: str, changes: Dict[str, Any]
    ) -> Optional[RecordT]:
        ...

    def delete(self, kind: Type[RecordT], record_ids: Iterable[str]) -> int:
        ...

    def increment(
        self, kind: Type[RecordT], record_id: str, field_name: str, amount: int = 1
    ) -> Optional[RecordT]:
        ...


def _field_names(kind: type) -> set[str]:
    return {f.name for f in fields(kind)}


def _check_changes(kind: type, changes: Dict[str, Any]) -> None:
    unknown = set(changes) - _field_names(kind)
    if unknown:
        raise ValueError(f"Unknown {kind.__name__} fields: {sorted(unknown)}")


def _sort_records(records: list, order_by: str, descending: bool) -> list:
    present = [r for r in records if getattr(r, order_by) is not None]
    missing = [r for r in records if getattr(r, order_by) is None]
    present.sort(key=lambda r: getattr(r, order_by), reverse=descending)
    return present + missing


class InMemoryDbClient:
    """Simple in-memory database for development and tests."""

    def __init__(self):
        self.tables: Dict[type, Dict[str, Any]] = {}

    def _table(self, kind: type) -> Dict[str, Any]:
        return self.tables.setdefault(kind, {})

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.tables.clear()

    def add(self, record: RecordT) -> RecordT:
        if not is_dataclass(record):
            raise TypeError("records must be dataclass instances")
        unique = UNIQUE_FIELDS.get(type(record))
        if unique:
            key = tuple(getattr(record, name) for name in unique)
            for other in self._table(type(record)).values():
                if tuple(getattr(other, name) for name in unique) == key:
                    raise DuplicateRecordError(f"Duplicate {type(record).__name__}: {key}")
        self._table(type(record))[record.id] = copy.deepcopy(record)
        return copy.deepcopy(record)

    def get(self, kind: Type[RecordT], record_id: str) -> Optional[RecordT]:
        record = self._table(kind).get(record_id)
        return copy.deepcopy(record) if record else None

    def list(
        self,
        kind: Type[RecordT],
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
        **equals: Any,
    ) -> list[RecordT]:
        _check_changes(kind, equals)
        records = [
            r
            for r in self._table(kind).values()
            if all(getattr(r, key) == value for key, value in equals.items())
        ]
        if order_by:
            records = _sort_records(records, order_by, descending)
        if limit is not None:
            records = records[:limit]
        return [copy.deepcopy(r) for r in records]

    def find_one(self, kind: Type[RecordT], **equals: Any) -> Optional[RecordT]:
        matches = self.list(kind, limit=1, **equals)
        return matches[0] if matches else None

    def update(
        self, kind: Type[RecordT], record_id: str, changes: Dict[str, Any]
    ) -> Optional[RecordT]:
        _check_changes(kind, changes)
        record = self._table(kind).get(record_id)
        if not record:
            return None
        for key, value in changes.items():
            setattr(record, key, copy.deepcopy(value))
        if hasattr(record, "updated_at") and "updated_at" not in changes:
            record.updated_at = time.time()
        return copy.deepcopy(record)

    def delete(self, kind: Type[RecordT], record_ids: Iterable[str]) -> int:
        table = self._table(kind)
        removed = 0
        for record_id in record_ids:
            if table.pop(record_id, None) is not None:
                removed += 1
        return removed

    def increment(
        self, kind: Type[RecordT], record_id: str, field_name: str, amount: int = 1
    ) -> Optional[RecordT]:
        record = self._table(kind).get(record_id)
        if not record:
            return None
        setattr(record, field_name, (getattr(record, field_name) or 0) + amount)
        return copy.deepcopy(record)


class SqlDbClient:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for SqlDbClient")
        engine_kwargs: Dict[str, Any] = {"future": True, "pool_pre_ping": True}
        if database_url.startswith("sqlite") and ":memory:" in database_url:
            # One shared connection so every session sees the same database.
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs["pool_recycle"] = 1800
        self.engine = create_engine(database_url, **engine_kwargs)
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    @staticmethod
    def _row_class(kind: type):
        try:
            return ROW_CLASSES[kind]
        except KeyError:
            raise TypeError(f"No table for record type {kind.__name__}") from None

    @staticmethod
    def _to_record(kind: Type[RecordT], row) -> RecordT:
        return kind(**{name: copy.deepcopy(getattr(row, name)) for name in _field_names(kind)})

    def add(self, record: RecordT) -> RecordT:
        kind = type(record)
        row_class = self._row_class(kind)
        values = {name: getattr(record, name) for name in _field_names(kind)}
        with self.Session() as session:
            row = row_class(**values)
            session.add(row)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise DuplicateRecordError(str(exc.orig)) from exc
            session.refresh(row)
            return self._to_record(kind, row)

    def get(self, kind: Type[RecordT], record_id: str) -> Optional[RecordT]:
        with self.Session() as session:
            row = session.get(self._row_class(kind), record_id)
            if not row:
                return None
            return self._to_record(kind, row)

    def list(
        self,
        kind: Type[RecordT],
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
        **equals: Any,
    ) -> list[RecordT]:
        _check_changes(kind, equals)
        row_class = self._row_class(kind)
        stmt = select(row_class).filter_by(**equals)
        if order_by:
            column = getattr(row_class, order_by)
            stmt = stmt.order_by(nulls_last(column.desc() if descending else column.asc()))
        if limit is not None:
            stmt = stmt.limit(limit)
        with self.Session() as session:
            rows = session.execute(stmt).scalars().all()
            return [self._to_record(kind, row) for row in rows]

    def find_one(self, kind: Type[RecordT], **equals: Any) -> Optional[RecordT]:
        matches = self.list(kind, limit=1, **equals)
        return matches[0] if matches else None

    def update(
        self, kind: Type[RecordT], record_id: str, changes: Dict[str, Any]
    ) -> Optional[RecordT]:
        _check_changes(kind, changes)
        with self.Session() as session:
            row = session.get(self._row_class(kind), record_id)
            if not row:
                return None
            for key, value in changes.items():
                setattr(row, key, copy.deepcopy(value))
            if hasattr(row, "updated_at") and "updated_at" not in changes:
                row.updated_at = time.time()
            session.commit()
            session.refresh(row)
            return self._to_record(kind, row)

    def delete(self, kind: Type[RecordT], record_ids: Iterable[str]) -> int:
        ids = list(record_ids)
        if not ids:
            return 0
        row_class = self._row_class(kind)
        with self.Session() as session:
            removed = (
                session.query(row_class)
                .filter(row_class.id.in_(ids))
                .delete(synchronize_session=False)
            )
            session.commit()
            return removed or 0

    def increment(
        self, kind: Type[RecordT], record_id: str, field_name: str, amount: int = 1
    ) -> Optional[RecordT]:
        with self.Session() as session:
            row = session.get(self._row_class(kind), record_id, with_for_update=True)
            if not row:
                return None
            setattr(row, field_name, (getattr(row, field_name) or 0) + amount)
            session.commit()
            session.refresh(row)
            return self._to_record(kind, row)


Base = declarative_base()


class BlogRow(Base):
    __tablename__ = "blogs"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    slug = Column(String, nullable=False, index=True)
    content = Column(Text, nullable=False)
    excerpt = Column(Text, nullable=False, default="")
    author = Column(String, nullable=False, default="")
    cover_image = Column(String, nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    category = Column(String, nullable=True)
    status = Column(String, nullable=False, index=True)
    published = Column(Boolean, nullable=False, default=False, index=True)
    published_at = Column(Float, nullable=True)
    is_featured = Column(Boolean, nullable=False, default=False)
    meta_title = Column(String, nullable=True)
    meta_description = Column(Text, nullable=True)
    meta_keywords = Column(String, nullable=True)
    canonical_url = Column(String, nullable=True)
    reading_time = Column(Integer, nullable=False, default=1)
    view_count = Column(Integer, nullable=False, default=0)
    like_count = Column(Integer, nullable=False, default=0)
    comment_count = Column(Integer, nullable=False, default=0)
    created_at = Column(Float, nullable=False)
    updated_at = Column(Float, nullable=False)


class ProjectRow(Base):
    __tablename__ = "projects"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    category = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    long_description = Column(Text, nullable=True)
    image_url = Column(String, nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    technologies = Column(JSON, nullable=False, default=list)
    features = Column(JSON, nullable=False, default=list)
    demo_link = Column(String, nullable=True)
    github_link = Column(String, nullable=True)
    live_link = Column(String, nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(Float, nullable=False)
    updated_at = Column(Float, nullable=False)


class ExperienceRow(Base):
    __tablename__ = "experiences"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    company = Column(String, nullable=False)
    start_date = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    location = Column(String, nullable=False, default="")
    type = Column(String, nullable=False, default="")
    end_date = Column(String, nullable=True)
    current = Column(Boolean, nullable=False, default=False)
    company_url = Column(String, nullable=True)
    achievements = Column(JSON, nullable=False, default=list)
    skills = Column(JSON, nullable=False, default=list)
    created_at = Column(Float, nullable=False)
    updated_at = Column(Float, nullable=False)


class TechnicalSkillRow(Base):
    __tablename__ = "technical_skills"

    id = Column(String, primary_key=True)
    category = Column(String, nullable=False)
    icon_key = Column(String, nullable=False)
    skills = Column(JSON, nullable=False, default=list)
    created_at = Column(Float, nullable=False)
    updated_at = Column(Float, nullable=False)


class TechnicalProficiencyRow(Base):
    __tablename__ = "technical_proficiency"

    id = Column(String, primary_key=True)
    skill = Column(String, nullable=False)
    proficiency = Column(Integer, nullable=False)
    created_at = Column(Float, nullable=False)
    updated_at = Column(Float, nullable=False)


class EducationRow(Base):
    __tablename__ = "education"

    id = Column(String, primary_key=True)
    degree = Column(String, nullable=False)
    institution = Column(String, nullable=False)
    type = Column(String, nullable=False)
    year_start = Column(String, nullable=False)
    year_end = Column(String, nullable=True)
    created_at = Column(Float, nullable=False)
    updated_at = Column(Float, nullable=False)


class HobbyRow(Base):
    __tablename__ = "hobbies"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False)
    icon_key = Column(String, nullable=False)
    created_at = Column(Float, nullable=False)
    updated_at = Column(Float, nullable=False)


class SocialLinkRow(Base):
    __tablename__ = "social_links"

    id = Column(String, primary_key=True)
    platform = Column(String, nullable=False)
    url = Column(String, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(Float, nullable=False)
    updated_at = Column(Float, nullable=False)


class ProfileRow(Base):
    __tablename__ = "profile_data"

    id = Column(String, primary_key=True)
    about_text = Column(Text, nullable=True)
    profile_image_url = Column(String, nullable=True)
    resume_url = Column(String, nullable=True)
    created_at = Column(Float, nullable=False)
    updated_at = Column(Float, nullable=False)


class ContactSubmissionRow(Base):
    __tablename__ = "contact_submissions"

    id = Column(String, primary_key=True)
    full_name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    subject = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    status = Column(String, nullable=False, index=True)
    tags = Column(JSON, nullable=False, default=list)
    reply_message = Column(Text, nullable=True)
    replied_at = Column(Float, nullable=True)
    created_at = Column(Float, nullable=False, index=True)
    updated_at = Column(Float, nullable=False)


class PageViewRow(Base):
    __tablename__ = "page_views"

    id = Column(String, primary_key=True)
    path = Column(String, nullable=False)
    session_id = Column(String, nullable=True)
    user_agent = Column(String, nullable=True)
    referrer = Column(String, nullable=True)
    country = Column(String, nullable=True)
    device_type = Column(String, nullable=True)
    browser = Column(String, nullable=True)
    created_at = Column(Float, nullable=False, index=True)


class EventRow(Base):
    __tablename__ = "events"

    id = Column(String, primary_key=True)
    event_name = Column(String, nullable=False)
    page_path = Column(String, nullable=True)
    session_id = Column(String, nullable=True)
    properties = Column(JSON, nullable=False, default=dict)
    created_at = Column(Float, nullable=False)


class BlogLikeRow(Base):
    __tablename__ = "blog_likes"
    __table_args__ = (UniqueConstraint("blog_id", "visitor_id", name="uq_blog_likes_visitor"),)

    id = Column(String, primary_key=True)
    blog_id = Column(String, nullable=False, index=True)
    visitor_id = Column(String, nullable=False)
    created_at = Column(Float, nullable=False)


class AdminUserRow(Base):
    __tablename__ = "admin_users"

    id = Column(String, primary_key=True)
    email = Column(String, nullable=False, unique=True)
    password_hash = Column(String, nullable=False)
    last_login = Column(Float, nullable=True)
    created_at = Column(Float, nullable=False)


class EmailJobRow(Base):
    __tablename__ = "email_jobs"

    id = Column(String, primary_key=True)
    kind = Column(String, nullable=False)
    to = Column(String, nullable=False)
    subject = Column(String, nullable=False)
    context = Column(JSON, nullable=False, default=dict)
    status = Column(String, nullable=False, index=True)
    attempts = Column(Integer, nullable=False, default=0)
    error = Column(Text, nullable=True)
    provider_id = Column(String, nullable=True)
    created_at = Column(Float, nullable=False)
    updated_at = Column(Float, nullable=False)


ROW_CLASSES: Dict[type, type] = {
    BlogPost: BlogRow,
    Project: ProjectRow,
    Experience: ExperienceRow,
    TechnicalSkill: TechnicalSkillRow,
    TechnicalProficiency: TechnicalProficiencyRow,
    Education: EducationRow,
    Hobby: HobbyRow,
    SocialLink: SocialLinkRow,
    Profile: ProfileRow,
    ContactSubmission: ContactSubmissionRow,
    PageView: PageViewRow,
    AnalyticsEvent: EventRow,
    BlogLike: BlogLikeRow,
    AdminUser: AdminUserRow,
    EmailJob: EmailJobRow,
}
