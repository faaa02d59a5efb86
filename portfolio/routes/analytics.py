"""
Admin analytics dashboard routes.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from portfolio.db import DbClient
from portfolio.dependencies import get_db_client, require_admin
from portfolio.schemas import (
    AnalyticsSummary,
    BlogPerformance,
    DeviceStats,
    GeoStat,
    VisitorTrends,
)
from portfolio.services import analytics

router = APIRouter(prefix="/admin/analytics", dependencies=[Depends(require_admin)])


def _date_range(start: Optional[date], end: Optional[date]) -> tuple[date, date]:
    default_start, default_end = analytics.default_range()
    return start or default_start, end or default_end


@router.get("", response_model=AnalyticsSummary)
def analytics_summary(
    start: Optional[date] = Query(default=None),
    end: Optional[date] = Query(default=None),
    db: DbClient = Depends(get_db_client),
):
    return analytics.analytics_summary(db, *_date_range(start, end))


@router.get("/visitors", response_model=VisitorTrends)
def visitor_trends(
    start: Optional[date] = Query(default=None),
    end: Optional[date] = Query(default=None),
    db: DbClient = Depends(get_db_client),
):
    return analytics.dashboard_analytics(db, *_date_range(start, end))


@router.get("/devices", response_model=DeviceStats)
def device_stats(db: DbClient = Depends(get_db_client)):
    return analytics.device_stats(db)


@router.get("/geo", response_model=list[GeoStat])
def geo_stats(db: DbClient = Depends(get_db_client)):
    return analytics.geo_stats(db)


@router.get("/blogs", response_model=list[BlogPerformance])
def blog_performance(db: DbClient = Depends(get_db_client)):
    return analytics.blog_performance(db)
