"""Scoring weight lookup: job override -> organisation setting -> app config."""
from flask import current_app

from ..extensions import db
from ..models.setting import Setting
from .errors import InvalidWeights
from .scoring import CRITERIA, ScoringWeights

SETTING_KEYS = {name: f"SCORING_WEIGHT_{name.upper()}" for name in CRITERIA}


def config_weights() -> ScoringWeights:
    raw = current_app.config.get('SCORING_WEIGHTS')
    if not raw:
        return ScoringWeights.default()
    try:
        return ScoringWeights.from_sequence(raw)
    except InvalidWeights:
        current_app.logger.exception('SCORING_WEIGHTS is invalid, using defaults')
        return ScoringWeights.default()


def org_weights(org_id: int) -> ScoringWeights:
    stored = Setting.values_for(org_id, SETTING_KEYS.values())
    if len(stored) < len(SETTING_KEYS):
        return config_weights()
    try:
        return ScoringWeights.from_mapping({name: stored[key] for name, key in SETTING_KEYS.items()})
    except InvalidWeights:
        current_app.logger.exception('stored scoring weights for org %s are invalid, using config', org_id)
        return config_weights()


def weights_for_job(job) -> ScoringWeights:
    if job.scoring_criteria:
        try:
            return ScoringWeights.from_mapping(job.scoring_criteria)
        except InvalidWeights:
            current_app.logger.warning('job offer %s has invalid scoring_criteria %r, using org weights',
                                       job.id, job.scoring_criteria)
    return org_weights(job.org_id)


def save_org_weights(org_id: int, weights: ScoringWeights):
    for name, value in weights.as_dict().items():
        Setting.put(org_id, SETTING_KEYS[name], repr(value))
    db.session.commit()
    return weights
