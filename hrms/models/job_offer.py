from ..extensions import db
from .base import OrgScopedMixin, TimestampMixin

class JobOffer(db.Model, OrgScopedMixin, TimestampMixin):
    __tablename__ = "job_offers"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    department = db.Column(db.String(120))
    status = db.Column(db.String(20), default="draft", index=True)  # draft/published/closed
    description = db.Column(db.Text)

    # scoring inputs
    required_skills = db.Column(db.JSON)   # ["Python","SQL"]
    min_experience = db.Column(db.Float)   # years
    scoring_criteria = db.Column(db.JSON)  # {"skills":40,"experience":25,"interview":20,"rating":15}
    ranked_at = db.Column(db.DateTime)

    applications = db.relationship("Application", back_populates="job_offer", lazy="selectin")

    def __repr__(self) -> str:
        return f"<JobOffer id={self.id} title={self.title!r}>"
