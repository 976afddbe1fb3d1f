from app.schemas.analytics import Benchmarks, Priority
from app.services.analytics.assembler import (
    assemble_interview_report,
    assemble_job_search_report,
    assemble_networking_report,
)
from app.services.analytics.recommendations import (
    INTERVIEW_RULES,
    JOB_SEARCH_RULES,
    RecommendationRule,
    generate_recommendations,
)
from conftest import NOW, days_ago, interview, job, steps


def _rule(name, priority, applies=True):
    return RecommendationRule(
        name=name,
        priority=priority,
        category="Test",
        applies=lambda r, b: applies,
        title=name,
        rationale=lambda r, b: f"{name} matched",
    )


def _job_rule(name):
    return next(rule for rule in JOB_SEARCH_RULES if rule.name == name)


def _unanswered_applications(count):
    return [job(f"u{i}", "Applied", created=i + 1, history=steps(("Applied", i + 1))) for i in range(count)]


def test_recommendations_are_ordered_by_priority_then_declaration(now, benchmarks):
    report = assemble_job_search_report([], now, benchmarks)
    rules = [
        _rule("info", Priority.info),
        _rule("first high", Priority.high),
        _rule("skipped", Priority.high, applies=False),
        _rule("low", Priority.low),
        _rule("second high", Priority.high),
    ]

    recommendations = generate_recommendations(report, benchmarks, rules)

    assert [r.title for r in recommendations] == ["first high", "second high", "low", "info"]


def test_empty_report_has_no_recommendations(now, benchmarks):
    for assemble in (assemble_job_search_report, assemble_interview_report, assemble_networking_report):
        assert assemble([], now, benchmarks).recommendations == []


def test_job_rules_for_unanswered_applications(now, benchmarks):
    report = assemble_job_search_report(_unanswered_applications(4), now, benchmarks)

    assert [(r.priority, r.title) for r in report.recommendations] == [
        (Priority.high, "Improve your response rate"),
        (Priority.medium, "Offer rate is below the industry average"),
        (Priority.low, "Increase your weekly applications"),
    ]


def test_single_rule_in_isolation(now, benchmarks):
    report = assemble_job_search_report(_unanswered_applications(4), now, benchmarks)

    (recommendation,) = generate_recommendations(report, benchmarks, [_job_rule("low_response_rate")])

    assert recommendation.category == "Response Rate"
    assert "0.0%" in recommendation.rationale


def test_thresholds_come_from_benchmarks(now):
    lenient = Benchmarks(low_response_rate=0, offer_rate=0, weekly_application_goal=1)

    report = assemble_job_search_report(_unanswered_applications(4), now, lenient)

    assert report.recommendations == []


def test_low_interview_rate_needs_enough_applications(now, benchmarks):
    rule = _job_rule("low_interview_rate")

    few = assemble_job_search_report(_unanswered_applications(9), now, benchmarks)
    many = assemble_job_search_report(_unanswered_applications(10), now, benchmarks)

    assert rule.evaluate(few, benchmarks) is None
    assert rule.evaluate(many, benchmarks) is not None


def test_double_down_on_standout_cohort(now, benchmarks):
    documents = [job(f"a{i}", "Interview", created=5, company="Acme") for i in range(3)]
    documents += [job(f"o{i}", "Applied", created=5, company="Other") for i in range(7)]

    report = assemble_job_search_report(documents, now, benchmarks)
    recommendation = _job_rule("double_down_cohort").evaluate(report, benchmarks)

    assert report.baseline_success_rate == 30.0
    assert recommendation.priority is Priority.info
    assert recommendation.title == "Double down on Acme"


def test_small_cohorts_are_not_recommended(now, benchmarks):
    documents = [job(f"a{i}", "Interview", created=5, company="Acme") for i in range(2)]
    documents += [job(f"o{i}", "Applied", created=5, company="Other") for i in range(8)]

    report = assemble_job_search_report(documents, now, benchmarks)

    assert _job_rule("double_down_cohort").evaluate(report, benchmarks) is None


def test_declining_trend_is_high_priority(now, benchmarks):
    documents = [job("r", "Applied", created=10), job("p", "Interview", created=100)]

    report = assemble_job_search_report(documents, now, benchmarks)

    assert report.recommendations[0].title == "Your application success is declining"
    assert report.recommendations[0].priority is Priority.high


def test_interview_rules():
    documents = [
        interview("t1", "Completed", 10, "Rejected", 2, interviewType="Technical"),
        interview("t2", "Completed", 12, "Rejected", 3, interviewType="Technical"),
        interview("b1", "Completed", 14, "Passed", 4, interviewType="Behavioral"),
        interview("b2", "Completed", 16, "Passed", 5, interviewType="Behavioral"),
    ]

    report = assemble_interview_report(documents, NOW)

    assert [r.title for r in report.recommendations] == [
        "Boost your offer rate",
        "Improve Technical performance",
        "Leverage your strengths",
    ]
    assert [rule.name for rule in INTERVIEW_RULES][0] == "low_offer_rate"


def _events(ratings):
    return [
        {"id": f"e{i}", "attendanceStatus": "Attended", "eventDate": days_ago(10 + i), "roiRating": rating}
        for i, rating in enumerate(ratings)
    ]


def test_high_event_roi(now, benchmarks):
    report = assemble_networking_report(_events([5, 4.5]), now, benchmarks)

    assert report.event_roi.average_roi_rating == 4.8
    assert [r.title for r in report.recommendations] == ["High event ROI"]


def test_low_event_roi_needs_several_events(now, benchmarks):
    few = assemble_networking_report(_events([2, 2, 2]), now, benchmarks)
    many = assemble_networking_report(_events([2, 2, 2, 2]), now, benchmarks)

    assert few.recommendations == []
    assert [r.title for r in many.recommendations] == ["Event strategy"]
