from ..extensions import db
from .base import OrgScopedMixin, TimestampMixin

STAGES = ("submitted", "screening", "interviewing", "offer", "hired", "rejected")

class Application(db.Model, OrgScopedMixin, TimestampMixin):
    __tablename__ = "applications"
    id = db.Column(db.Integer, primary_key=True)
    candidate_id = db.Column(db.Integer, db.ForeignKey("candidates.id"), nullable=False)
    job_offer_id = db.Column(db.Integer, db.ForeignKey("job_offers.id"), nullable=False, index=True)
    stage = db.Column(db.String(30), default="submitted", nullable=False)
    submitted_at = db.Column(db.DateTime, server_default=db.func.now(), nullable=False)

    # written by jobs.scoring
    score = db.Column(db.Integer)
    score_breakdown = db.Column(db.JSON)
    rank = db.Column(db.Integer)
    scored_at = db.Column(db.DateTime)

    candidate = db.relationship("Candidate", back_populates="applications", lazy="joined")
    job_offer = db.relationship("JobOffer", back_populates="applications")
    interviews = db.relationship("Interview", back_populates="application", lazy="selectin",
                                 order_by="Interview.id")

    __table_args__ = (
        db.UniqueConstraint('candidate_id', 'job_offer_id', name='uq_applications_candidate_job'),
    )

    def __repr__(self) -> str:
        return f"<Application id={self.id} candidate_id={self.candidate_id} job_offer_id={self.job_offer_id}>"
