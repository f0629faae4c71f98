import pytest

from hrms.services.errors import InvalidWeights
from hrms.services.scoring import (
    CandidateSignals, ScoreBreakdown, ScoringWeights, compute_composite, experience_score,
    interview_score, round_half_up, scale_to_100, score_candidate, skills_score,
)
from hrms.services.scoring import Candidate


def test_skills_score():
    assert skills_score([], ["python"]) == 100
    assert skills_score(["Python", "SQL"], ["python", " sql "]) == 100
    assert skills_score(["Python", "SQL", "Docker"], ["python"]) == 33
    assert skills_score(["Python", "SQL"], []) == 0
    # duplicates in the requirement count once
    assert skills_score(["Python", "python", "SQL"], ["Python"]) == 50


def test_skills_score_requires_exact_names():
    assert skills_score(["Java"], ["JavaScript"]) == 0


def test_experience_score():
    assert experience_score(0, 3) == 100
    assert experience_score(None, None) == 100
    assert experience_score(4, 2) == 50
    assert experience_score(4, 10) == 100
    assert experience_score(4, None) == 0


def test_interview_score():
    assert interview_score([]) == 0
    assert interview_score([None, None]) == 0
    assert interview_score([4, 5]) == 90
    assert interview_score([10], scale=5) == 100
    assert interview_score([3, None]) == 60


def test_rating_scale():
    assert scale_to_100(None, 5) == 0
    assert scale_to_100(3, 5) == 60
    assert scale_to_100(7, 10) == 70


def test_round_half_up():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(77.49) == 77


def test_breakdown_is_clamped():
    b = ScoreBreakdown(skills=140, experience=-5, interview=49.5, rating=100)
    assert b.as_dict() == {"skills": 100, "experience": 0, "interview": 50, "rating": 100}


def test_score_candidate_defaults_when_signals_missing():
    b = score_candidate(Candidate(id=1, name="Nobody"))
    assert b.as_dict() == {"skills": 100, "experience": 100, "interview": 0, "rating": 0}


def test_score_candidate_from_signals():
    signals = CandidateSignals(required_skills=["a", "b"], candidate_skills=["a"],
                               required_years=5, candidate_years=4,
                               interview_ratings=[3.5], manager_rating=3)
    b = score_candidate(Candidate(id=1, name="x"), signals)
    assert b.as_dict() == {"skills": 50, "experience": 80, "interview": 70, "rating": 60}


def test_composite_with_default_weights():
    assert compute_composite(ScoreBreakdown(90, 80, 70, 60)) == 78
    assert compute_composite(ScoreBreakdown(50, 50, 50, 50)) == 50
    assert compute_composite(ScoreBreakdown(0, 0, 0, 0)) == 0
    assert compute_composite(ScoreBreakdown(100, 100, 100, 100)) == 100


def test_composite_rounds_half_up():
    w = ScoringWeights(0.5, 0.5, 0.0, 0.0)
    assert compute_composite(ScoreBreakdown(1, 0, 0, 0), w) == 1


def test_composite_is_monotonic():
    base = dict(skills=40, experience=40, interview=40, rating=40)
    before = compute_composite(ScoreBreakdown(**base))
    for name in base:
        bumped = dict(base, **{name: 41})
        assert compute_composite(ScoreBreakdown(**bumped)) >= before


def test_custom_weights_change_composite():
    w = ScoringWeights(1.0, 0.0, 0.0, 0.0)
    assert compute_composite(ScoreBreakdown(90, 0, 0, 0), w) == 90


def test_weights_must_sum_to_one():
    with pytest.raises(InvalidWeights):
        ScoringWeights(0.5, 0.5, 0.5, 0.0)
    with pytest.raises(InvalidWeights):
        ScoringWeights(1.2, -0.2, 0.0, 0.0)


def test_weights_from_percentages():
    w = ScoringWeights.from_mapping({"skills": 40, "experience": 25, "interview": 20, "rating": 15})
    assert w.skills == pytest.approx(0.40)
    assert w.rating == pytest.approx(0.15)
    assert sum(w.as_tuple()) == pytest.approx(1.0)


@pytest.mark.parametrize("mapping", [
    {"skills": 1, "experience": 1, "interview": 1},
    {"skills": 1, "experience": 1, "interview": 1, "rating": 1, "luck": 1},
    {"skills": 0, "experience": 0, "interview": 0, "rating": 0},
    {"skills": "a", "experience": 1, "interview": 1, "rating": 1},
    {"skills": -1, "experience": 1, "interview": 1, "rating": 1},
])
def test_weights_from_mapping_rejects(mapping):
    with pytest.raises(InvalidWeights):
        ScoringWeights.from_mapping(mapping)


def test_weights_from_sequence():
    w = ScoringWeights.from_sequence([0.35, 0.25, 0.25, 0.15])
    assert w.as_tuple() == pytest.approx(ScoringWeights.default().as_tuple())
    with pytest.raises(InvalidWeights):
        ScoringWeights.from_sequence([1.0])
