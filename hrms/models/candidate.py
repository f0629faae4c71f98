from ..extensions import db
from .base import OrgScopedMixin, TimestampMixin

class Candidate(db.Model, OrgScopedMixin, TimestampMixin):
    __tablename__ = "candidates"

    id = db.Column(db.Integer, primary_key=True)
    # OrgScopedMixin: org_id
    first_name = db.Column(db.String(80), nullable=False)
    last_name = db.Column(db.String(80), nullable=False)
    email = db.Column(db.String(254), index=True)
    phone = db.Column(db.String(40))

    skills = db.Column(db.JSON)           # ["Python","Flask","SQL"]
    years_experience = db.Column(db.Float)
    # latest manager rating on MANAGER_RATING_SCALE
    rating = db.Column(db.Float)

    applications = db.relationship("Application", back_populates="candidate", lazy="selectin")

    @property
    def name(self):
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self) -> str:
        return f"<Candidate id={self.id} name={self.name!r}>"
