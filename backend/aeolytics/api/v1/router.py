"""
API v1 router aggregating all endpoints.
"""
from fastapi import APIRouter

from aeolytics.api.v1.plan import router as plan_router
from aeolytics.api.v1.domains import router as domains_router
from aeolytics.api.v1.queries import router as queries_router
from aeolytics.api.v1.citations import router as citations_router
from aeolytics.api.v1.analytics import router as analytics_router
from aeolytics.api.v1.bulk import router as bulk_router
from aeolytics.api.v1.exports import router as exports_router
from aeolytics.api.v1.reports import router as reports_router
from aeolytics.api.v1.briefs import router as briefs_router
from aeolytics.api.v1.notifications import router as notifications_router
from aeolytics.api.v1.teams import router as teams_router

api_router = APIRouter()

api_router.include_router(plan_router)
api_router.include_router(domains_router)
api_router.include_router(queries_router)
api_router.include_router(citations_router)
api_router.include_router(analytics_router)
api_router.include_router(bulk_router)
api_router.include_router(exports_router)
api_router.include_router(reports_router)
api_router.include_router(briefs_router)
api_router.include_router(notifications_router)
api_router.include_router(teams_router)
