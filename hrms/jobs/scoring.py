from datetime import datetime

from flask import current_app

from ..extensions import db
from ..models.job_offer import JobOffer
from ..services.scoring import rank_candidates
from ..services.settings import weights_for_job
from ..services.signals import pool_for_job


def current_ranking(job):
    """Rank a job offer's pool without persisting anything."""
    return rank_candidates(pool_for_job(job), weights_for_job(job))


def recalculate_job_ranking(job_offer_id: int):
    """Score every application of a job offer and store score, breakdown and rank.

    Running it twice on an unchanged pool writes the same scores and ranks.
    """
    job = db.session.get(JobOffer, job_offer_id)
    if not job:
        current_app.logger.warning('recalculate_job_ranking: job offer %s not found', job_offer_id)
        return None

    ranked = current_ranking(job)
    by_app = {a.id: a for a in job.applications}
    now = datetime.utcnow()
    try:
        for r in ranked:
            a = by_app[r.application_id]
            a.score = r.score
            a.score_breakdown = r.breakdown.as_dict()
            a.rank = r.rank
            a.scored_at = now
        job.ranked_at = now
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Failed to persist ranking for job offer %s', job_offer_id)
        raise

    current_app.logger.info('Ranked %d applications for job offer %s', len(ranked), job_offer_id)
    return [r.to_dict() for r in ranked]
