"""Turn application rows into the scoring engine's plain input types."""
from flask import current_app

from .scoring import Candidate, CandidateSignals


def signals_for_application(app_row) -> CandidateSignals:
    job = app_row.job_offer
    cand = app_row.candidate
    return CandidateSignals(
        required_skills=list(job.required_skills or []),
        candidate_skills=list(cand.skills or []),
        required_years=job.min_experience,
        candidate_years=cand.years_experience,
        interview_ratings=[i.rating for i in app_row.interviews if i.status != 'canceled'],
        manager_rating=cand.rating,
        interview_scale=float(current_app.config.get('INTERVIEW_RATING_SCALE', 5)),
        rating_scale=float(current_app.config.get('MANAGER_RATING_SCALE', 5)),
    )


def candidate_for_application(app_row) -> Candidate:
    cand = app_row.candidate
    return Candidate(
        id=cand.id if cand else None,
        name=cand.name if cand else '',
        email=cand.email if cand else None,
        stage=app_row.stage,
        submitted_at=app_row.submitted_at,
        application_id=app_row.id,
        signals=signals_for_application(app_row),
    )


def pool_for_job(job):
    return [candidate_for_application(a) for a in job.applications]
