from ..extensions import db
from .base import OrgScopedMixin, TimestampMixin


class Setting(db.Model, OrgScopedMixin, TimestampMixin):
    """Per-organisation key/value overrides of app config (e.g. scoring weights)."""
    __tablename__ = 'settings'
    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(128), nullable=False, index=True)
    value = db.Column(db.Text, nullable=True)

    __table_args__ = (
        db.UniqueConstraint('org_id', 'key', name='uq_settings_org_key'),
    )

    @classmethod
    def values_for(cls, org_id, keys):
        """{key: value} for the given keys that are set for ``org_id``."""
        rows = cls.query.filter(cls.org_id == org_id, cls.key.in_(list(keys))).all()
        return {r.key: r.value for r in rows if r.value is not None}

    @classmethod
    def put(cls, org_id, key, value):
        """Insert or update one key; the caller commits."""
        row = cls.query.filter_by(org_id=org_id, key=key).first()
        if row is None:
            row = cls(org_id=org_id, key=key)
            db.session.add(row)
        row.value = value
        return row

    def __repr__(self):
        return f"<Setting org_id={self.org_id} key={self.key!r}>"
