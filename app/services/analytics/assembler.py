"""
Report assembler services.

Entry point of the analytics engine. Each builder parses the raw record collection,
runs the sub-computations against one reference time and returns a frozen report.
Nothing here reads the clock except :func:`assemble_report` when no ``now`` is given.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from app.schemas.analytics import (
    AnalyticsReport,
    Benchmarks,
    CohortEntry,
    GoalProgress,
    GoalTracking,
    InterviewOverview,
    InterviewPerformanceReport,
    JobSearchOverview,
    JobSearchReport,
    NetworkingReport,
    ReportType,
    StrengthsWeaknesses,
    TimeToOffer,
    WeeklyTrend,
)
from app.schemas.records import InterviewRecord, JobRecord, TrackedRecord
from app.services.analytics.benchmarks import compare_to_benchmark, compare_to_industry
from app.services.analytics.cohorts import ResponseWindow, attribute, average_rating, group_by
from app.services.analytics.exceptions import UnknownReportType
from app.services.analytics.funnel import INTERVIEW_FUNNEL, JOB_FUNNEL, build_funnel
from app.services.analytics.networking import (
    NETWORKING_FUNNEL,
    engagement_overview,
    event_roi,
    generated_opportunity,
    split_networking,
    value_exchange,
)
from app.services.analytics.rates import (
    completion_rate,
    count_where,
    deadline_tracking,
    interview_rate,
    offer_rate,
    percent,
    rate,
    response_rate,
)
from app.services.analytics.recommendations import generate_recommendations
from app.services.analytics.records import (
    parse_interview_records,
    parse_job_records,
    parse_networking_records,
)
from app.services.analytics.stage_durations import average_days_to_first, durations_by_stage
from app.services.analytics.stages import (
    EVENT_STATES,
    INTERVIEW_STATES,
    JOB_RESPONSE_STATES,
    JOB_STATES,
    has_applied,
    has_interviewed,
    has_offer,
    has_response,
    is_completed_interview,
    is_next_round_interview,
    is_offer_interview,
    is_successful_interview,
    is_upcoming_interview,
)
from app.services.analytics.time_buckets import (
    activity_volume,
    ensure_reference_time,
    in_window,
    month_start,
    monthly_volume,
    weekly_windows,
)
from app.services.analytics.trends import compare_trend, created_at, key_date

logger = logging.getLogger("app_logger")

JOB_RESPONSE_WINDOW = ResponseWindow(from_states={"Applied"}, response_states=JOB_RESPONSE_STATES)
STRENGTH_MIN_INTERVIEWS = 2
STRENGTH_LIMIT = 3


def state_distribution(records: Iterable[TrackedRecord], states: Sequence[str]) -> Dict[str, int]:
    """Count of records per current state; known states are zero-filled, unknown ones appended in name order."""
    tally = Counter(record.current_state for record in records)
    extras = sorted(state for state in tally if state not in states)
    return {state: tally.get(state, 0) for state in list(states) + extras}


def _finish(report: AnalyticsReport, benchmarks: Benchmarks) -> AnalyticsReport:
    recommendations = generate_recommendations(report, benchmarks)
    return report.model_copy(update={"recommendations": recommendations})


# ---------------------------------------------------------------------------
# Job search
# ---------------------------------------------------------------------------


def _weekly_trends(jobs: Sequence[JobRecord], now: datetime) -> List[WeeklyTrend]:
    trends = []
    for start, end in weekly_windows(now):
        week_jobs = [job for job in jobs if in_window(job.created_at, start, end)]
        trends.append(
            WeeklyTrend(
                week=f"Week of {start.strftime('%b')} {start.day}",
                start=start,
                applications=len(week_jobs),
                responses=count_where(week_jobs, has_response),
            )
        )
    return trends


def _goal_progress(current: int, goal: int) -> GoalProgress:
    return GoalProgress(goal=goal, current=current, percentage=percent(current, goal))


def _goal_tracking(jobs: Sequence[JobRecord], now: datetime, benchmarks: Benchmarks) -> GoalTracking:
    this_month = [
        job for job in jobs if job.created_at is not None and month_start(now) <= job.created_at <= now
    ]
    return GoalTracking(
        applications=_goal_progress(len(this_month), benchmarks.monthly_application_goal),
        interviews=_goal_progress(count_where(this_month, has_interviewed), benchmarks.monthly_interview_goal),
        offers=_goal_progress(count_where(this_month, has_offer), benchmarks.monthly_offer_goal),
    )


def assemble_job_search_report(
    records: Any, now: datetime, benchmarks: Optional[Benchmarks] = None
) -> JobSearchReport:
    now = ensure_reference_time(now)
    benchmarks = benchmarks or Benchmarks.from_settings()
    jobs, skipped = parse_job_records(records)

    total = len(jobs)
    archived = sum(1 for job in jobs if job.archived)
    deadlines = deadline_tracking(jobs, now)
    overview = JobSearchOverview(
        total_applications=total,
        active_applications=total - archived,
        archived_applications=archived,
        applied_count=count_where(jobs, has_applied),
        response_rate=response_rate(jobs),
        interview_rate=interview_rate(jobs),
        offer_rate=offer_rate(jobs),
        deadline_adherence_rate=deadlines.adherence_rate,
    )

    cohort_options = dict(success_fn=has_interviewed, offer_fn=has_offer, response_window=JOB_RESPONSE_WINDOW)
    offer_days, offer_count = average_days_to_first(jobs, {"Offer"})

    report = JobSearchReport(
        report_type=ReportType.job_search,
        generated_at=now,
        skipped_records=skipped,
        overview=overview,
        distribution=state_distribution(jobs, JOB_STATES),
        avg_time_by_stage=durations_by_stage(jobs, JOB_STATES),
        monthly_volume=monthly_volume((job.created_at for job in jobs), now),
        activity_volume=activity_volume((job.created_at for job in jobs), now),
        funnel=build_funnel(jobs, JOB_FUNNEL),
        cohort_breakdowns={
            "company": group_by(jobs, attribute("company"), **cohort_options),
            "industry": group_by(jobs, attribute("industry"), **cohort_options),
            "workMode": group_by(jobs, attribute("work_mode"), **cohort_options),
        },
        baseline_success_rate=rate(count_where(jobs, has_interviewed), total),
        trend=compare_trend(jobs, now, has_interviewed, timestamp_fn=created_at, threshold=benchmarks.trend_threshold),
        benchmark_comparison=[
            compare_to_benchmark("responseRate", overview.response_rate, benchmarks.response_rate),
            compare_to_benchmark("interviewRate", overview.interview_rate, benchmarks.interview_rate),
            compare_to_benchmark("offerRate", overview.offer_rate, benchmarks.offer_rate),
        ],
        deadline_tracking=deadlines,
        time_to_offer=TimeToOffer(average=offer_days or 0.0, count=offer_count),
        weekly_trends=_weekly_trends(jobs, now),
        goal_tracking=_goal_tracking(jobs, now, benchmarks),
    )
    report = _finish(report, benchmarks)
    logger.info(
        f"[ANALYTICS] job_search report: {total} records, {skipped} skipped, "
        f"{len(report.recommendations)} recommendations"
    )
    return report


# ---------------------------------------------------------------------------
# Interview performance
# ---------------------------------------------------------------------------


def _rating(record: TrackedRecord) -> Optional[float]:
    return getattr(record, "rating", None)


def _strengths_weaknesses(by_type: List[CohortEntry]) -> StrengthsWeaknesses:
    eligible = [entry for entry in by_type if entry.total >= STRENGTH_MIN_INTERVIEWS]
    ranked = sorted(eligible, key=lambda entry: (-entry.success_rate, entry.key))
    weakest = sorted(eligible, key=lambda entry: (entry.success_rate, entry.key))
    return StrengthsWeaknesses(strongest=ranked[:STRENGTH_LIMIT], weakest=weakest[:STRENGTH_LIMIT])


def assemble_interview_report(
    records: Any, now: datetime, benchmarks: Optional[Benchmarks] = None
) -> InterviewPerformanceReport:
    now = ensure_reference_time(now)
    benchmarks = benchmarks or Benchmarks.from_settings()
    interviews, skipped = parse_interview_records(records)

    completed: List[InterviewRecord] = [i for i in interviews if is_completed_interview(i)]
    success_rate = rate(count_where(completed, is_successful_interview), len(completed))
    interview_offer_rate = rate(count_where(completed, is_offer_interview), len(completed))
    overview = InterviewOverview(
        total_interviews=len(interviews),
        completed_interviews=len(completed),
        upcoming_interviews=sum(1 for i in interviews if is_upcoming_interview(i, now)),
        average_rating=average_rating(completed, _rating),
        completion_rate=completion_rate(interviews),
        success_rate=success_rate,
        offer_rate=interview_offer_rate,
        progression_rate=rate(count_where(completed, is_next_round_interview), len(completed)),
    )

    cohort_options = dict(success_fn=is_successful_interview, offer_fn=is_offer_interview, rating_fn=_rating)
    by_type = group_by(completed, attribute("interview_type"), **cohort_options)

    report = InterviewPerformanceReport(
        report_type=ReportType.interview_performance,
        generated_at=now,
        skipped_records=skipped,
        overview=overview,
        distribution=state_distribution(interviews, INTERVIEW_STATES),
        avg_time_by_stage=durations_by_stage(interviews, INTERVIEW_STATES),
        monthly_volume=monthly_volume((i.key_date for i in interviews), now),
        activity_volume=activity_volume(
            (i.key_date for i in interviews), now, types=(i.interview_type for i in interviews)
        ),
        funnel=build_funnel(interviews, INTERVIEW_FUNNEL),
        cohort_breakdowns={
            "industry": group_by(completed, attribute("industry"), **cohort_options),
            "company": group_by(completed, attribute("company"), **cohort_options),
            "interviewType": by_type,
        },
        baseline_success_rate=success_rate,
        trend=compare_trend(
            completed,
            now,
            is_successful_interview,
            timestamp_fn=key_date,
            threshold=benchmarks.trend_threshold,
            rating_fn=_rating,
        ),
        benchmark_comparison=[
            compare_to_industry("successRate", success_rate, benchmarks.interview_success_rate),
            compare_to_industry("offerRate", interview_offer_rate, benchmarks.interview_to_offer_rate),
        ],
        strengths_weaknesses=_strengths_weaknesses(by_type),
    )
    report = _finish(report, benchmarks)
    logger.info(
        f"[ANALYTICS] interview_performance report: {len(interviews)} records, {skipped} skipped, "
        f"{len(report.recommendations)} recommendations"
    )
    return report


# ---------------------------------------------------------------------------
# Networking
# ---------------------------------------------------------------------------


def _activity_date(record: TrackedRecord) -> Optional[datetime]:
    return record.key_date or record.created_at


def assemble_networking_report(
    records: Any, now: datetime, benchmarks: Optional[Benchmarks] = None
) -> NetworkingReport:
    now = ensure_reference_time(now)
    benchmarks = benchmarks or Benchmarks.from_settings()
    parsed, skipped = parse_networking_records(records)
    activities, events = split_networking(parsed)

    overview = engagement_overview(activities, events)
    volume = activity_volume(
        (_activity_date(a) for a in activities), now, types=(a.activity_type for a in activities)
    )
    exchange = value_exchange(activities)

    report = NetworkingReport(
        report_type=ReportType.networking,
        generated_at=now,
        skipped_records=skipped,
        overview=overview,
        distribution=state_distribution(parsed, EVENT_STATES),
        avg_time_by_stage=durations_by_stage(events, EVENT_STATES),
        monthly_volume=monthly_volume((_activity_date(r) for r in parsed), now),
        activity_volume=volume,
        funnel=build_funnel(activities, NETWORKING_FUNNEL),
        cohort_breakdowns={
            "activityType": group_by(activities, attribute("activity_type"), success_fn=generated_opportunity),
        },
        baseline_success_rate=overview.opportunity_conversion_rate,
        trend=compare_trend(
            activities,
            now,
            generated_opportunity,
            timestamp_fn=_activity_date,
            threshold=benchmarks.trend_threshold,
        ),
        benchmark_comparison=[
            compare_to_benchmark("weeklyActivity", volume.average_per_week, benchmarks.weekly_activity),
            compare_to_benchmark("responseRate", overview.response_rate, benchmarks.networking_response_rate),
            compare_to_benchmark("reciprocity", exchange.reciprocity_score, benchmarks.reciprocity_score),
        ],
        event_roi=event_roi(events),
        value_exchange=exchange,
    )
    report = _finish(report, benchmarks)
    logger.info(
        f"[ANALYTICS] networking report: {len(activities)} activities, {len(events)} events, "
        f"{skipped} skipped, {len(report.recommendations)} recommendations"
    )
    return report


ASSEMBLERS: Dict[ReportType, Callable[..., AnalyticsReport]] = {
    ReportType.job_search: assemble_job_search_report,
    ReportType.interview_performance: assemble_interview_report,
    ReportType.networking: assemble_networking_report,
}


def assemble_report(
    records: Any,
    now: Optional[datetime] = None,
    benchmarks: Optional[Benchmarks] = None,
    report_type: ReportType = ReportType.job_search,
) -> AnalyticsReport:
    """
    Build one report of ``report_type`` from a raw record collection.

    ``now`` defaults to the current UTC time; pass it explicitly for reproducible
    output. Records that fail validation are skipped and counted in
    ``skippedRecords``.
    """
    try:
        kind = ReportType(report_type)
    except ValueError:
        raise UnknownReportType(f"No report assembler for {report_type!r}")
    if now is None:
        now = datetime.now(timezone.utc)
    return ASSEMBLERS[kind](records, now, benchmarks)
