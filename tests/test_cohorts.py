from app.services.analytics.assembler import JOB_RESPONSE_WINDOW
from app.services.analytics.cohorts import UNKNOWN_COHORT, attribute, group_by
from app.services.analytics.records import parse_interview_records, parse_job_records
from app.services.analytics.stages import has_interviewed, has_offer, is_successful_interview
from conftest import job, steps


def _jobs(documents):
    records, _ = parse_job_records(documents)
    return records


def test_largest_cohort_sorts_first():
    documents = [job(f"s{i}", "Applied", company=f"Company {i:02d}") for i in range(12)]
    documents += [job(f"a{i}", "Applied", company="Acme") for i in range(12)]

    cohorts = group_by(_jobs(documents), attribute("company"), has_interviewed)

    assert cohorts[0].key == "Acme"
    assert cohorts[0].total == 12
    assert len(cohorts) == 13


def test_ties_are_broken_by_key():
    documents = [
        job("1", "Applied", company="Beta"),
        job("2", "Applied", company="Beta"),
        job("3", "Applied", company="Alpha"),
        job("4", "Applied", company="Alpha"),
    ]

    cohorts = group_by(_jobs(documents), attribute("company"), has_interviewed)

    assert [c.key for c in cohorts] == ["Alpha", "Beta"]


def test_missing_dimension_goes_to_unknown():
    documents = [
        job("1", "Applied"),
        job("2", "Applied", company=""),
        job("3", "Applied", company="   "),
        job("4", "Applied", company="Acme"),
    ]

    cohorts = group_by(_jobs(documents), attribute("company"), has_interviewed)

    assert {c.key: c.total for c in cohorts} == {UNKNOWN_COHORT: 3, "Acme": 1}


def test_cohort_rates_and_response_days():
    documents = [
        job("1", "Phone Screen", company="X", history=steps(("Applied", 20), ("Phone Screen", 16))),
        job("2", "Offer", company="X", history=steps(("Applied", 20), ("Interview", 12), ("Offer", 2))),
    ]

    (entry,) = group_by(
        _jobs(documents),
        attribute("company"),
        has_interviewed,
        offer_fn=has_offer,
        response_window=JOB_RESPONSE_WINDOW,
    )

    assert entry.success_rate == 50.0
    assert entry.offer_rate == 50.0
    assert entry.avg_response_days == 6.0
    assert entry.avg_rating is None


def test_interview_cohorts_average_rating(interview_documents):
    records, _ = parse_interview_records(interview_documents)
    completed = [r for r in records if r.current_state == "Completed" and r.result != "Pending"]

    cohorts = group_by(
        completed, attribute("interview_type"), is_successful_interview, rating_fn=lambda r: r.rating
    )

    technical = next(c for c in cohorts if c.key == "Technical")
    assert technical.total == 2
    assert technical.success_rate == 50.0
    assert technical.avg_rating == 3.0


def test_empty_population_has_no_cohorts():
    assert group_by([], attribute("company"), has_interviewed) == []
