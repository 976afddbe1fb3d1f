"""
Pydantic schemas for analytics reports.
These schemas capture benchmarks, the report DTOs produced by the engine and the
request/response payloads of the analytics API. Reports serialize with camelCase keys.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from app.core import settings
from app.schemas.records import CamelModel


class ReportType(str, Enum):
    job_search = "job_search"
    interview_performance = "interview_performance"
    networking = "networking"


class Priority(str, Enum):
    """Declaration order is the order recommendations are listed in."""

    high = "High"
    medium = "Medium"
    low = "Low"
    info = "Info"


class TrendDirection(str, Enum):
    improving = "improving"
    declining = "declining"
    stable = "stable"


class Benchmarks(CamelModel):
    """
    Reference constants and heuristic thresholds used by the recommendation rules.
    Defaults come from settings; callers may override any subset per request.
    """

    # Job-search industry averages
    response_rate: float = settings.BENCHMARK_RESPONSE_RATE
    interview_rate: float = settings.BENCHMARK_INTERVIEW_RATE
    offer_rate: float = settings.BENCHMARK_OFFER_RATE
    time_to_offer_days: float = settings.BENCHMARK_TIME_TO_OFFER_DAYS
    response_time_days: float = settings.BENCHMARK_RESPONSE_TIME_DAYS

    # Interview industry averages
    interview_success_rate: float = settings.BENCHMARK_INTERVIEW_SUCCESS_RATE
    interview_to_offer_rate: float = settings.BENCHMARK_INTERVIEW_TO_OFFER_RATE

    # Networking industry averages
    weekly_activity: float = settings.BENCHMARK_WEEKLY_ACTIVITY
    networking_response_rate: float = settings.BENCHMARK_NETWORKING_RESPONSE_RATE
    reciprocity_score: float = settings.BENCHMARK_RECIPROCITY_SCORE
    networking_conversion_rate: float = settings.BENCHMARK_NETWORKING_CONVERSION_RATE

    # Thresholds
    trend_threshold: float = Field(settings.TREND_THRESHOLD, ge=0)
    low_response_rate: float = settings.LOW_RESPONSE_RATE_THRESHOLD
    low_interview_rate: float = settings.LOW_INTERVIEW_RATE_THRESHOLD
    low_interview_rate_min_applied: int = settings.LOW_INTERVIEW_RATE_MIN_APPLIED
    low_offer_rate: float = settings.LOW_OFFER_RATE_THRESHOLD
    deadline_adherence_threshold: float = settings.DEADLINE_ADHERENCE_THRESHOLD
    cohort_min_size: int = Field(settings.COHORT_MIN_SIZE, ge=1)
    cohort_success_multiplier: float = settings.COHORT_SUCCESS_MULTIPLIER
    fast_response_days: float = settings.FAST_RESPONSE_DAYS

    # Goals
    weekly_application_goal: int = settings.WEEKLY_APPLICATION_GOAL
    monthly_application_goal: int = settings.MONTHLY_APPLICATION_GOAL
    monthly_interview_goal: int = settings.MONTHLY_INTERVIEW_GOAL
    monthly_offer_goal: int = settings.MONTHLY_OFFER_GOAL

    @classmethod
    def from_settings(cls, config=None) -> "Benchmarks":
        """Benchmarks for a settings object; the loaded application settings by default."""
        config = config or settings
        return cls(
            response_rate=config.BENCHMARK_RESPONSE_RATE,
            interview_rate=config.BENCHMARK_INTERVIEW_RATE,
            offer_rate=config.BENCHMARK_OFFER_RATE,
            time_to_offer_days=config.BENCHMARK_TIME_TO_OFFER_DAYS,
            response_time_days=config.BENCHMARK_RESPONSE_TIME_DAYS,
            interview_success_rate=config.BENCHMARK_INTERVIEW_SUCCESS_RATE,
            interview_to_offer_rate=config.BENCHMARK_INTERVIEW_TO_OFFER_RATE,
            weekly_activity=config.BENCHMARK_WEEKLY_ACTIVITY,
            networking_response_rate=config.BENCHMARK_NETWORKING_RESPONSE_RATE,
            reciprocity_score=config.BENCHMARK_RECIPROCITY_SCORE,
            networking_conversion_rate=config.BENCHMARK_NETWORKING_CONVERSION_RATE,
            trend_threshold=config.TREND_THRESHOLD,
            low_response_rate=config.LOW_RESPONSE_RATE_THRESHOLD,
            low_interview_rate=config.LOW_INTERVIEW_RATE_THRESHOLD,
            low_interview_rate_min_applied=config.LOW_INTERVIEW_RATE_MIN_APPLIED,
            low_offer_rate=config.LOW_OFFER_RATE_THRESHOLD,
            deadline_adherence_threshold=config.DEADLINE_ADHERENCE_THRESHOLD,
            cohort_min_size=config.COHORT_MIN_SIZE,
            cohort_success_multiplier=config.COHORT_SUCCESS_MULTIPLIER,
            fast_response_days=config.FAST_RESPONSE_DAYS,
            weekly_application_goal=config.WEEKLY_APPLICATION_GOAL,
            monthly_application_goal=config.MONTHLY_APPLICATION_GOAL,
            monthly_interview_goal=config.MONTHLY_INTERVIEW_GOAL,
            monthly_offer_goal=config.MONTHLY_OFFER_GOAL,
        )


class MonthlyVolume(CamelModel):
    month: str
    count: int
    timestamp: datetime


class ActivityVolume(CamelModel):
    last_30_days: int = 0
    last_90_days: int = 0
    average_per_week: float = 0.0
    by_type: Dict[str, int] = Field(default_factory=dict)


class FunnelStageResult(CamelModel):
    stage: str
    count: int
    percentage_of_first: int


class CohortEntry(CamelModel):
    key: str
    total: int
    success_rate: float
    offer_rate: Optional[float] = None
    avg_response_days: Optional[float] = None
    avg_rating: Optional[float] = None


class TrendWindow(CamelModel):
    label: str
    count: int
    success_rate: float
    avg_rating: Optional[float] = None


class TrendReport(CamelModel):
    recent_window: TrendWindow
    prior_window: TrendWindow
    improvement_score: float
    direction: TrendDirection


class Recommendation(CamelModel):
    priority: Priority
    title: str
    rationale: str
    category: Optional[str] = None
    action: Optional[str] = None


class BenchmarkComparison(CamelModel):
    metric: str
    user: float
    benchmark: float
    status: str


class AnalyticsReport(CamelModel):
    """
    Fields shared by every report kind. ``baseline_success_rate`` is the population
    success rate the cohort breakdowns are compared against.
    """

    report_type: ReportType
    generated_at: datetime
    skipped_records: int = 0
    distribution: Dict[str, int]
    avg_time_by_stage: Dict[str, Optional[float]]
    monthly_volume: List[MonthlyVolume]
    activity_volume: ActivityVolume
    funnel: List[FunnelStageResult]
    cohort_breakdowns: Dict[str, List[CohortEntry]]
    baseline_success_rate: float = 0.0
    trend: TrendReport
    benchmark_comparison: List[BenchmarkComparison] = Field(default_factory=list)
    recommendations: List[Recommendation] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Job search
# ---------------------------------------------------------------------------


class JobSearchOverview(CamelModel):
    total_applications: int = 0
    active_applications: int = 0
    archived_applications: int = 0
    applied_count: int = 0
    response_rate: float = 0.0
    interview_rate: float = 0.0
    offer_rate: float = 0.0
    deadline_adherence_rate: float = 0.0


class DeadlineTracking(CamelModel):
    total: int = 0
    met: int = 0
    missed: int = 0
    upcoming: int = 0
    past_due: int = 0
    adherence_rate: float = 0.0


class TimeToOffer(CamelModel):
    average: float = 0.0
    count: int = 0


class WeeklyTrend(CamelModel):
    week: str
    start: datetime
    applications: int
    responses: int


class GoalProgress(CamelModel):
    goal: int
    current: int
    percentage: int


class GoalTracking(CamelModel):
    applications: GoalProgress
    interviews: GoalProgress
    offers: GoalProgress


class JobSearchReport(AnalyticsReport):
    overview: JobSearchOverview
    deadline_tracking: DeadlineTracking
    time_to_offer: TimeToOffer
    weekly_trends: List[WeeklyTrend]
    goal_tracking: GoalTracking


# ---------------------------------------------------------------------------
# Interview performance
# ---------------------------------------------------------------------------


class InterviewOverview(CamelModel):
    total_interviews: int = 0
    completed_interviews: int = 0
    upcoming_interviews: int = 0
    average_rating: Optional[float] = None
    completion_rate: float = 0.0
    success_rate: float = 0.0
    offer_rate: float = 0.0
    progression_rate: float = 0.0


class StrengthsWeaknesses(CamelModel):
    strongest: List[CohortEntry] = Field(default_factory=list)
    weakest: List[CohortEntry] = Field(default_factory=list)


class InterviewPerformanceReport(AnalyticsReport):
    overview: InterviewOverview
    strengths_weaknesses: StrengthsWeaknesses


# ---------------------------------------------------------------------------
# Networking
# ---------------------------------------------------------------------------


class NetworkingOverview(CamelModel):
    total_activities: int = 0
    total_events: int = 0
    response_rate: float = 0.0
    opportunity_conversion_rate: float = 0.0
    positive_sentiment_rate: float = 0.0
    average_response_time: float = 0.0


class TopEvent(CamelModel):
    name: Optional[str]
    date: Optional[datetime]
    roi_rating: float
    connections_gained: int
    job_leads_generated: int


class EventRoi(CamelModel):
    total_events_attended: int = 0
    total_connections_gained: int = 0
    total_job_leads_generated: int = 0
    average_cost_per_connection: float = 0.0
    average_cost_per_job_lead: float = 0.0
    average_roi_rating: float = 0.0
    conversion_rate: float = 0.0
    top_events: List[TopEvent] = Field(default_factory=list)


class ValueExchange(CamelModel):
    total_value_given: int = 0
    total_value_received: int = 0
    reciprocity_score: float = 0.0
    by_type: Dict[str, int] = Field(default_factory=dict)


class NetworkingReport(AnalyticsReport):
    overview: NetworkingOverview
    event_roi: EventRoi
    value_exchange: ValueExchange


# ---------------------------------------------------------------------------
# API payloads
# ---------------------------------------------------------------------------


class AnalyticsRequest(BaseModel):
    records: List[Any] = Field(default_factory=list, description="Raw tracked records")
    now: Optional[datetime] = Field(None, description="Reference time; defaults to the current time")
    benchmarks: Optional[Benchmarks] = None


class ResponseEnvelope(BaseModel):
    success: bool = Field(..., description="true|false")
    message: str
    data: Optional[Any] = None
