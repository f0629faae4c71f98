from ..extensions import db
from flask_login import UserMixin
from .base import TimestampMixin
from werkzeug.security import generate_password_hash, check_password_hash

class User(db.Model, UserMixin, TimestampMixin):
    __tablename__ = "users"
    id = db.Column(db.Integer, primary_key=True)
    org_id = db.Column(db.Integer, nullable=False, index=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    full_name = db.Column(db.String(160))
    # ROLE_EMPLOYEE / ROLE_MANAGER / ROLE_RH / ROLE_ADMIN / ROLE_SUPER_ADMIN
    role = db.Column(db.String(50), default="ROLE_EMPLOYEE", nullable=False)
    # optional custom role carrying granular permissions
    role_id = db.Column(db.Integer, db.ForeignKey("roles.id"))
    custom_role = db.relationship("Role", lazy="joined")

    def set_password(self, raw):
        self.password_hash = generate_password_hash(raw)

    def check_password(self, raw):
        return check_password_hash(self.password_hash, raw)

    def permission_names(self):
        if not self.custom_role:
            return []
        return sorted(p.name for p in self.custom_role.permissions)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} role={self.role}>"
