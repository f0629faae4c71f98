"""Candidate scoring and ranking for a job offer's applicant pool.

Four sub-scores in [0, 100] (skills, experience, interview, rating) are
combined with a configurable weight vector into a composite score, and a pool
is ranked with a total, deterministic tie-break order.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .errors import InvalidCandidatePool, InvalidWeights

logger = logging.getLogger(__name__)

CRITERIA = ("skills", "experience", "interview", "rating")
WEIGHT_TOLERANCE = 1e-6
DEFAULT_RATING_SCALE = 5.0

RANKING_COLUMNS = ("rank", "name", "email", "score", "skills", "experience", "interview", "rating", "stage")


def round_half_up(value) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def clamp(value, low=0, high=100):
    return max(low, min(high, value))


@dataclass(frozen=True)
class ScoringWeights:
    skills: float = 0.35
    experience: float = 0.25
    interview: float = 0.25
    rating: float = 0.15

    def __post_init__(self):
        values = self.as_tuple()
        for name, v in zip(CRITERIA, values):
            if v is None or v < 0:
                raise InvalidWeights(f"weight for {name} must be >= 0, got {v!r}")
        total = sum(values)
        if abs(total - 1.0) > WEIGHT_TOLERANCE:
            raise InvalidWeights(f"weights must sum to 1.0, got {total:.6f}")

    def as_tuple(self):
        return (self.skills, self.experience, self.interview, self.rating)

    def as_dict(self) -> Dict[str, float]:
        return dict(zip(CRITERIA, self.as_tuple()))

    @classmethod
    def default(cls) -> "ScoringWeights":
        return cls()

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> "ScoringWeights":
        values = list(values)
        if len(values) != len(CRITERIA):
            raise InvalidWeights(f"expected {len(CRITERIA)} weights, got {len(values)}")
        return cls.from_mapping(dict(zip(CRITERIA, values)))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "ScoringWeights":
        """Build weights from fractions or percentages.

        ``{"skills": 40, "experience": 25, "interview": 20, "rating": 15}`` and
        ``{"skills": 0.4, ...}`` give the same vector; values are divided by
        their total.
        """
        unknown = set(mapping) - set(CRITERIA)
        if unknown:
            raise InvalidWeights(f"unknown scoring criteria: {', '.join(sorted(unknown))}")
        missing = [c for c in CRITERIA if mapping.get(c) is None]
        if missing:
            raise InvalidWeights(f"missing weights for: {', '.join(missing)}")
        try:
            raw = [float(mapping[c]) for c in CRITERIA]
        except (TypeError, ValueError):
            raise InvalidWeights(f"weights must be numbers: {dict(mapping)!r}")
        if any(v < 0 for v in raw):
            raise InvalidWeights("weights must be >= 0")
        total = sum(raw)
        if total <= 0:
            raise InvalidWeights("weights must not all be zero")
        normalized = [v / total for v in raw]
        # absorb float drift so the vector sums to exactly 1.0
        normalized[-1] = max(0.0, 1.0 - sum(normalized[:-1]))
        return cls(*normalized)


@dataclass(frozen=True)
class ScoreBreakdown:
    skills: int = 0
    experience: int = 0
    interview: int = 0
    rating: int = 0

    def __post_init__(self):
        for name in CRITERIA:
            object.__setattr__(self, name, clamp(round_half_up(getattr(self, name))))

    def as_dict(self) -> Dict[str, int]:
        return {name: getattr(self, name) for name in CRITERIA}


@dataclass
class CandidateSignals:
    required_skills: List[str] = field(default_factory=list)
    candidate_skills: List[str] = field(default_factory=list)
    required_years: Optional[float] = None
    candidate_years: Optional[float] = None
    interview_ratings: List[Optional[float]] = field(default_factory=list)
    manager_rating: Optional[float] = None
    interview_scale: float = DEFAULT_RATING_SCALE
    rating_scale: float = DEFAULT_RATING_SCALE


@dataclass
class Candidate:
    id: Any
    name: str
    email: Optional[str] = None
    stage: str = "submitted"
    submitted_at: Optional[datetime] = None
    application_id: Any = None
    signals: CandidateSignals = field(default_factory=CandidateSignals)


@dataclass(frozen=True)
class RankedCandidate:
    rank: int
    candidate_id: Any
    application_id: Any
    name: str
    email: Optional[str]
    score: int
    breakdown: ScoreBreakdown
    stage: str
    submitted_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rank": self.rank,
            "candidate_id": self.candidate_id,
            "application_id": self.application_id,
            "name": self.name,
            "email": self.email,
            "score": self.score,
            "breakdown": self.breakdown.as_dict(),
            "stage": self.stage,
            "submitted_at": self.submitted_at.isoformat() if self.submitted_at else None,
        }


def _skill_set(skills: Optional[Iterable[str]]):
    return {s.strip().lower() for s in (skills or []) if isinstance(s, str) and s.strip()}


def skills_score(required: Optional[Iterable[str]], offered: Optional[Iterable[str]]) -> int:
    required = _skill_set(required)
    if not required:
        return 100
    matched = required & _skill_set(offered)
    return clamp(round_half_up(len(matched) * 100 / len(required)))


def experience_score(required_years, candidate_years) -> int:
    if not required_years or required_years <= 0:
        return 100
    years = candidate_years or 0
    return clamp(round_half_up(years * 100 / required_years))


def scale_to_100(value, scale) -> int:
    if value is None or not scale:
        return 0
    return clamp(round_half_up(value * 100 / scale))


def interview_score(ratings: Optional[Iterable[Optional[float]]], scale=DEFAULT_RATING_SCALE) -> int:
    done = [r for r in (ratings or []) if r is not None]
    if not done:
        return 0
    return scale_to_100(sum(done) / len(done), scale)


def score_candidate(candidate: Candidate, signals: Optional[CandidateSignals] = None) -> ScoreBreakdown:
    """Compute the four sub-scores. Missing signals fall back to their defaults."""
    s = signals or getattr(candidate, "signals", None) or CandidateSignals()
    return ScoreBreakdown(
        skills=skills_score(s.required_skills, s.candidate_skills),
        experience=experience_score(s.required_years, s.candidate_years),
        interview=interview_score(s.interview_ratings, s.interview_scale),
        rating=scale_to_100(s.manager_rating, s.rating_scale),
    )


def compute_composite(breakdown: ScoreBreakdown, weights: Optional[ScoringWeights] = None) -> int:
    weights = weights or ScoringWeights.default()
    total = sum(
        Decimal(str(w)) * getattr(breakdown, name)
        for name, w in zip(CRITERIA, weights.as_tuple())
    )
    return clamp(round_half_up(total))


def _check_pool(pool: Sequence[Candidate]):
    seen = set()
    for c in pool:
        cid = getattr(c, "id", None)
        if cid is None:
            raise InvalidCandidatePool(f"candidate without identity in pool: {c!r}")
        try:
            if cid in seen:
                raise InvalidCandidatePool(f"candidate {cid!r} appears more than once in pool")
        except TypeError:
            raise InvalidCandidatePool(f"candidate identity {cid!r} is not hashable")
        seen.add(cid)
    # tie-breaks compare ids and timestamps across the whole pool
    try:
        sorted(seen)
    except TypeError:
        raise InvalidCandidatePool(f"candidate ids are not mutually comparable: {sorted(map(repr, seen))}")
    stamps = [c.submitted_at for c in pool if c.submitted_at is not None]
    if any(not isinstance(ts, datetime) for ts in stamps):
        raise InvalidCandidatePool("submitted_at must be a datetime or None")
    if len({ts.tzinfo is None for ts in stamps}) > 1:
        raise InvalidCandidatePool("pool mixes timezone-aware and naive submitted_at values")


def _sort_key(entry):
    candidate, breakdown, composite = entry
    ts = candidate.submitted_at
    return (
        -composite,
        -breakdown.interview,
        -breakdown.skills,
        ts is None,
        ts or datetime.min,
        candidate.id,
    )


def rank_candidates(pool: Iterable[Candidate], weights: Optional[ScoringWeights] = None) -> List[RankedCandidate]:
    """Score every candidate and return standings-style ranks 1..N.

    Order: composite desc, then interview desc, skills desc, earlier
    ``submitted_at`` (missing timestamps last), lower id. Every candidate gets
    a distinct rank. The pool is validated before anything is scored: ids
    must be present, unique and comparable, timestamps all naive or all aware.
    """
    pool = list(pool or [])
    _check_pool(pool)
    weights = weights or ScoringWeights.default()

    scored = []
    for c in pool:
        breakdown = score_candidate(c)
        scored.append((c, breakdown, compute_composite(breakdown, weights)))
    scored.sort(key=_sort_key)

    ranked = [
        RankedCandidate(
            rank=i,
            candidate_id=c.id,
            application_id=c.application_id,
            name=c.name,
            email=c.email,
            score=composite,
            breakdown=breakdown,
            stage=c.stage,
            submitted_at=c.submitted_at,
        )
        for i, (c, breakdown, composite) in enumerate(scored, start=1)
    ]
    logger.debug("ranked %d candidates with weights %s", len(ranked), weights.as_dict())
    return ranked


def ranking_rows(ranked: Iterable[RankedCandidate]) -> List[Dict[str, Any]]:
    """Flatten a ranking for CSV export, keys in ``RANKING_COLUMNS`` order."""
    rows = []
    for r in ranked:
        rows.append({
            "rank": r.rank,
            "name": r.name,
            "email": r.email or "",
            "score": r.score,
            "skills": r.breakdown.skills,
            "experience": r.breakdown.experience,
            "interview": r.breakdown.interview,
            "rating": r.breakdown.rating,
            "stage": r.stage,
        })
    return rows
