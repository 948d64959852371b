"""
Pydantic schemas for AEOlytics API.
"""
from aeolytics.schemas.common import (
    BaseSchema,
    IDSchema,
    TimestampSchema,
    MessageResponse,
)
from aeolytics.schemas.domain import (
    DomainCreate,
    DomainUpdate,
    DomainResponse,
)
from aeolytics.schemas.query import (
    QueryCreate,
    QueryUpdate,
    QueryResponse,
    QueryProcessRequest,
)
from aeolytics.schemas.citation import (
    CitationResponse,
    CitationFilter,
    CitationListResponse,
)
from aeolytics.schemas.brief import (
    FaqEntry,
    GeneratedBrief,
    CitationAnalysis,
    BriefGenerateRequest,
    BriefStatusUpdate,
    BriefResponse,
    BriefGenerateResponse,
)
from aeolytics.schemas.bulk import (
    BulkOperationType,
    BulkEntityType,
    QueryBulkUpdate,
    DomainBulkUpdate,
    BulkOperationRequest,
    BulkOperationResult,
    BulkProgress,
)
from aeolytics.schemas.report import (
    BrandConfig,
    ReportConfig,
    ReportMetrics,
    ReportResponse,
)
from aeolytics.schemas.analytics import (
    CitationStatsResponse,
    EnhancedAnalyticsResponse,
)
from aeolytics.schemas.plan import PlanResponse, PlanUsage
from aeolytics.schemas.notification import (
    CitationAlertRequest,
    NotificationSettings,
    NotificationResult,
    WeeklySummary,
    WeeklySummaryRequest,
)
from aeolytics.schemas.team import (
    InvitationCreate,
    TeamCreate,
    TeamInvitationResponse,
    TeamMemberResponse,
    TeamOverview,
    TeamResponse,
)
