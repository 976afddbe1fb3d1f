"""
Recommendation generator.

Each report kind has an ordered rule table. Every rule is evaluated on its own
against the finished report and the benchmarks; all matching rules produce a
recommendation. The result is ordered by priority, then by position in the table.

Thresholds are read from ``Benchmarks`` so they can be tuned without touching the
rules.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from app.schemas.analytics import (
    AnalyticsReport,
    Benchmarks,
    CohortEntry,
    Priority,
    Recommendation,
    ReportType,
    TrendDirection,
)
from app.services.analytics.cohorts import UNKNOWN_COHORT

logger = logging.getLogger("app_logger")

Condition = Callable[[AnalyticsReport, Benchmarks], bool]
Text = Callable[[AnalyticsReport, Benchmarks], str]

PRIORITY_ORDER = {priority: index for index, priority in enumerate(Priority)}


@dataclass(frozen=True)
class RecommendationRule:
    name: str
    priority: Priority
    category: str
    applies: Condition
    title: Union[str, Text]
    rationale: Text
    action: Optional[str] = None

    def evaluate(self, report: AnalyticsReport, benchmarks: Benchmarks) -> Optional[Recommendation]:
        if not self.applies(report, benchmarks):
            return None
        title = self.title(report, benchmarks) if callable(self.title) else self.title
        return Recommendation(
            priority=self.priority,
            title=title,
            rationale=self.rationale(report, benchmarks),
            category=self.category,
            action=self.action,
        )


def generate_recommendations(
    report: AnalyticsReport,
    benchmarks: Benchmarks,
    rules: Optional[Sequence[RecommendationRule]] = None,
) -> List[Recommendation]:
    if rules is None:
        rules = RULES_BY_REPORT_TYPE[report.report_type]
    matched = []
    for rule in rules:
        recommendation = rule.evaluate(report, benchmarks)
        if recommendation is not None:
            matched.append(recommendation)
    logger.debug(f"[RECOMMENDATIONS] {len(matched)} of {len(rules)} rules matched for {report.report_type.value}")
    return sorted(matched, key=lambda r: PRIORITY_ORDER[r.priority])


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _declining(report: AnalyticsReport, benchmarks: Benchmarks) -> bool:
    return report.trend.direction == TrendDirection.declining


def _improving(report: AnalyticsReport, benchmarks: Benchmarks) -> bool:
    return report.trend.direction == TrendDirection.improving


def _trend_rationale(report: AnalyticsReport, benchmarks: Benchmarks) -> str:
    recent, prior = report.trend.recent_window, report.trend.prior_window
    return (
        f"Success rate moved from {prior.success_rate}% ({prior.label.lower()}) to "
        f"{recent.success_rate}% ({recent.label.lower()}), a change of {report.trend.improvement_score} points."
    )


def standout_cohorts(
    report: AnalyticsReport, benchmarks: Benchmarks, dimensions: Optional[Sequence[str]] = None
) -> List[Tuple[str, CohortEntry]]:
    """Cohorts large enough to trust whose success rate beats the baseline by the configured multiple."""
    bar = report.baseline_success_rate * benchmarks.cohort_success_multiplier
    found = []
    for dimension, entries in report.cohort_breakdowns.items():
        if dimensions is not None and dimension not in dimensions:
            continue
        for entry in entries:
            if entry.key == UNKNOWN_COHORT or entry.total < benchmarks.cohort_min_size:
                continue
            if entry.success_rate > bar:
                found.append((dimension, entry))
    return sorted(found, key=lambda item: (-item[1].success_rate, -item[1].total, item[1].key))


def _double_down_title(dimensions: Optional[Sequence[str]] = None) -> Text:
    def _title(report: AnalyticsReport, benchmarks: Benchmarks) -> str:
        _, entry = standout_cohorts(report, benchmarks, dimensions)[0]
        return f"Double down on {entry.key}"

    return _title


def _double_down_rationale(dimensions: Optional[Sequence[str]] = None) -> Text:
    def _rationale(report: AnalyticsReport, benchmarks: Benchmarks) -> str:
        parts = [
            f"{entry.key} ({dimension}: {entry.success_rate}% over {entry.total})"
            for dimension, entry in standout_cohorts(report, benchmarks, dimensions)
        ]
        return (
            f"These groups succeed at more than {benchmarks.cohort_success_multiplier:g}x your overall "
            f"rate of {report.baseline_success_rate}%: {', '.join(parts)}."
        )

    return _rationale


def _has_standouts(dimensions: Optional[Sequence[str]] = None) -> Condition:
    def _condition(report: AnalyticsReport, benchmarks: Benchmarks) -> bool:
        return bool(standout_cohorts(report, benchmarks, dimensions))

    return _condition


# ---------------------------------------------------------------------------
# Job search
# ---------------------------------------------------------------------------


def _has_applications(report) -> bool:
    return report.overview.applied_count > 0


def _fast_responders(report, benchmarks: Benchmarks) -> List[CohortEntry]:
    return [
        entry
        for entry in report.cohort_breakdowns.get("company", [])
        if entry.key != UNKNOWN_COHORT
        and entry.avg_response_days is not None
        and entry.avg_response_days < benchmarks.fast_response_days
    ]


JOB_SEARCH_RULES: Tuple[RecommendationRule, ...] = (
    RecommendationRule(
        name="low_response_rate",
        priority=Priority.high,
        category="Response Rate",
        applies=lambda r, b: _has_applications(r) and r.overview.response_rate < b.low_response_rate,
        title="Improve your response rate",
        rationale=lambda r, b: (
            f"Only {r.overview.response_rate}% of your applications got a response; "
            f"the industry average is {b.response_rate:g}%."
        ),
        action="Tailor your resume and cover letter to each application",
    ),
    RecommendationRule(
        name="declining_trend",
        priority=Priority.high,
        category="Momentum",
        applies=_declining,
        title="Your application success is declining",
        rationale=_trend_rationale,
        action="Review recent applications that went unanswered and adjust your targeting",
    ),
    RecommendationRule(
        name="low_interview_rate",
        priority=Priority.medium,
        category="Interview Conversion",
        applies=lambda r, b: (
            r.overview.applied_count >= b.low_interview_rate_min_applied
            and r.overview.interview_rate < b.low_interview_rate
        ),
        title="Convert more applications into interviews",
        rationale=lambda r, b: (
            f"{r.overview.interview_rate}% of {r.overview.applied_count} applications reached an interview; "
            f"the industry average is {b.interview_rate:g}%."
        ),
        action="Apply to fewer but more relevant positions",
    ),
    RecommendationRule(
        name="offer_rate_below_benchmark",
        priority=Priority.medium,
        category="Offers",
        applies=lambda r, b: _has_applications(r) and r.overview.offer_rate < b.offer_rate,
        title="Offer rate is below the industry average",
        rationale=lambda r, b: f"Your offer rate is {r.overview.offer_rate}% against an average of {b.offer_rate:g}%.",
        action="Prepare for final rounds and follow up after every interview",
    ),
    RecommendationRule(
        name="missed_deadlines",
        priority=Priority.medium,
        category="Deadlines",
        applies=lambda r, b: (
            r.deadline_tracking.past_due > 0 and r.deadline_tracking.adherence_rate < b.deadline_adherence_threshold
        ),
        title="Apply before deadlines",
        rationale=lambda r, b: (
            f"You met {r.deadline_tracking.adherence_rate}% of the deadlines that have passed "
            f"({r.deadline_tracking.past_due} in total)."
        ),
        action="Set a reminder a few days before each application deadline",
    ),
    RecommendationRule(
        name="low_weekly_volume",
        priority=Priority.low,
        category="Application Volume",
        applies=lambda r, b: (
            r.overview.total_applications > 0
            and bool(r.weekly_trends)
            and r.weekly_trends[-1].applications < b.weekly_application_goal
        ),
        title="Increase your weekly applications",
        rationale=lambda r, b: (
            f"You added {r.weekly_trends[-1].applications} applications in the last week; "
            f"the goal is {b.weekly_application_goal}."
        ),
        action="Block time each week for new applications",
    ),
    RecommendationRule(
        name="double_down_cohort",
        priority=Priority.info,
        category="Cohorts",
        applies=_has_standouts(),
        title=_double_down_title(),
        rationale=_double_down_rationale(),
        action="Focus more applications on these groups",
    ),
    RecommendationRule(
        name="fast_responders",
        priority=Priority.info,
        category="Quick Responders",
        applies=lambda r, b: bool(_fast_responders(r, b)),
        title="Some companies respond quickly",
        rationale=lambda r, b: (
            f"{', '.join(e.key for e in _fast_responders(r, b))} respond in under "
            f"{b.fast_response_days:g} days on average."
        ),
        action="Prioritize companies known for fast hiring processes",
    ),
    RecommendationRule(
        name="improving_trend",
        priority=Priority.info,
        category="Momentum",
        applies=_improving,
        title="Your application success is improving",
        rationale=_trend_rationale,
        action="Keep applying the approach that is working",
    ),
)


# ---------------------------------------------------------------------------
# Interview performance
# ---------------------------------------------------------------------------


def _has_completed(report) -> bool:
    return report.overview.completed_interviews > 0


INTERVIEW_RULES: Tuple[RecommendationRule, ...] = (
    RecommendationRule(
        name="low_offer_rate",
        priority=Priority.high,
        category="Conversion",
        applies=lambda r, b: _has_completed(r) and r.overview.offer_rate < b.low_offer_rate,
        title="Boost your offer rate",
        rationale=lambda r, b: (
            f"Your current offer rate is {r.overview.offer_rate}%; "
            f"the industry average is {b.interview_to_offer_rate:g}%."
        ),
        action="Prepare stronger closing statements and follow up within 24 hours",
    ),
    RecommendationRule(
        name="weakest_interview_type",
        priority=Priority.high,
        category="Skill Development",
        applies=lambda r, b: (
            bool(r.strengths_weaknesses.weakest)
            and r.strengths_weaknesses.weakest[0].success_rate < b.interview_success_rate
        ),
        title=lambda r, b: f"Improve {r.strengths_weaknesses.weakest[0].key} performance",
        rationale=lambda r, b: (
            f"Your {r.strengths_weaknesses.weakest[0].key} success rate is "
            f"{r.strengths_weaknesses.weakest[0].success_rate}%, your lowest performing area."
        ),
        action="Schedule mock sessions for this interview type",
    ),
    RecommendationRule(
        name="declining_trend",
        priority=Priority.high,
        category="Recovery",
        applies=_declining,
        title="Reverse declining performance",
        rationale=_trend_rationale,
        action="Review recent unsuccessful interviews and update your preparation routine",
    ),
    RecommendationRule(
        name="success_below_benchmark",
        priority=Priority.medium,
        category="Practice",
        applies=lambda r, b: _has_completed(r) and r.overview.success_rate < b.interview_success_rate,
        title="Increase interview practice",
        rationale=lambda r, b: (
            f"{r.overview.success_rate}% of completed interviews were successful; "
            f"the industry average is {b.interview_success_rate:g}%."
        ),
        action="Practice with different interview formats",
    ),
    RecommendationRule(
        name="leverage_strength",
        priority=Priority.low,
        category="Strategy",
        applies=lambda r, b: (
            bool(r.strengths_weaknesses.strongest)
            and r.strengths_weaknesses.strongest[0].success_rate >= b.interview_success_rate
        ),
        title="Leverage your strengths",
        rationale=lambda r, b: (
            f"You excel at {r.strengths_weaknesses.strongest[0].key} interviews with a "
            f"{r.strengths_weaknesses.strongest[0].success_rate}% success rate."
        ),
        action="Highlight this strength in applications",
    ),
    RecommendationRule(
        name="improving_trend",
        priority=Priority.info,
        category="Momentum",
        applies=_improving,
        title="Your interview performance is improving",
        rationale=_trend_rationale,
    ),
    RecommendationRule(
        name="double_down_industry",
        priority=Priority.info,
        category="Cohorts",
        applies=_has_standouts(("industry",)),
        title=_double_down_title(("industry",)),
        rationale=_double_down_rationale(("industry",)),
        action="Target more roles in this industry",
    ),
)


# ---------------------------------------------------------------------------
# Networking
# ---------------------------------------------------------------------------


def _outreach(report) -> int:
    return report.funnel[0].count if report.funnel else 0


def _best_activity_type(report, benchmarks: Benchmarks) -> Optional[CohortEntry]:
    candidates = [
        entry
        for entry in report.cohort_breakdowns.get("activityType", [])
        if entry.total >= benchmarks.cohort_min_size and entry.success_rate > 0
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda entry: entry.success_rate)


NETWORKING_RULES: Tuple[RecommendationRule, ...] = (
    RecommendationRule(
        name="low_response_rate",
        priority=Priority.high,
        category="Improvement Area",
        applies=lambda r, b: _outreach(r) > 0 and r.overview.response_rate < b.networking_response_rate,
        title="Low response rate",
        rationale=lambda r, b: (
            f"Your response rate ({r.overview.response_rate}%) is below the industry average "
            f"({b.networking_response_rate:g}%)."
        ),
        action="Personalize your outreach messages and follow up within 3 days",
    ),
    RecommendationRule(
        name="low_activity",
        priority=Priority.medium,
        category="Activity Volume",
        applies=lambda r, b: (
            r.overview.total_activities > 0 and r.activity_volume.average_per_week < b.weekly_activity
        ),
        title="Network more consistently",
        rationale=lambda r, b: (
            f"You average {r.activity_volume.average_per_week} activities per week; "
            f"the benchmark is {b.weekly_activity:g}."
        ),
        action="Schedule a few networking touchpoints every week",
    ),
    RecommendationRule(
        name="low_event_roi",
        priority=Priority.medium,
        category="Optimization",
        applies=lambda r, b: r.event_roi.total_events_attended > 3 and 0 < r.event_roi.average_roi_rating < 3,
        title="Event strategy",
        rationale=lambda r, b: f"Recent events averaged an ROI rating of {r.event_roi.average_roi_rating}.",
        action="Research attendee lists before registering for future events",
    ),
    RecommendationRule(
        name="low_reciprocity",
        priority=Priority.low,
        category="Value Exchange",
        applies=lambda r, b: (
            r.value_exchange.total_value_given + r.value_exchange.total_value_received > 0
            and r.value_exchange.reciprocity_score < b.reciprocity_score
        ),
        title="Balance the value you give and receive",
        rationale=lambda r, b: (
            f"You gave value {r.value_exchange.total_value_given} times and received it "
            f"{r.value_exchange.total_value_received} times (balance {r.value_exchange.reciprocity_score})."
        ),
        action="Offer help, introductions or leads before asking for them",
    ),
    RecommendationRule(
        name="high_event_roi",
        priority=Priority.info,
        category="Strength",
        applies=lambda r, b: r.event_roi.average_roi_rating > 4,
        title="High event ROI",
        rationale=lambda r, b: (
            f"Your attended events average an ROI rating of {r.event_roi.average_roi_rating}."
        ),
        action="Continue focusing on quality over quantity for events",
    ),
    RecommendationRule(
        name="high_impact_activity",
        priority=Priority.info,
        category="Success Driver",
        applies=lambda r, b: _best_activity_type(r, b) is not None,
        title=lambda r, b: f"{_best_activity_type(r, b).key} is your highest impact activity",
        rationale=lambda r, b: (
            f"{_best_activity_type(r, b).key} converts to opportunities "
            f"{_best_activity_type(r, b).success_rate}% of the time."
        ),
        action="Prioritize scheduling more of this activity",
    ),
)


RULES_BY_REPORT_TYPE: Dict[ReportType, Tuple[RecommendationRule, ...]] = {
    ReportType.job_search: JOB_SEARCH_RULES,
    ReportType.interview_performance: INTERVIEW_RULES,
    ReportType.networking: NETWORKING_RULES,
}
