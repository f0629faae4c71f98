from ..extensions import db
from .base import OrgScopedMixin, TimestampMixin

class Interview(db.Model, OrgScopedMixin, TimestampMixin):
    __tablename__ = "interviews"

    id = db.Column(db.Integer, primary_key=True)
    application_id = db.Column(db.Integer, db.ForeignKey("applications.id"), nullable=False, index=True)
    scheduled_at = db.Column(db.DateTime)
    status = db.Column(db.String(20), default="scheduled")  # scheduled/done/no_show/canceled
    # scorecard rating on INTERVIEW_RATING_SCALE, NULL until done
    rating = db.Column(db.Float)
    comment = db.Column(db.Text)
    interviewer_id = db.Column(db.Integer)  # users.id

    application = db.relationship("Application", back_populates="interviews")

    def __repr__(self) -> str:
        return f"<Interview id={self.id} application_id={self.application_id}>"
