from ..extensions import db
from .base import OrgScopedMixin, TimestampMixin

role_permissions = db.Table(
    "role_permissions",
    db.Column("role_id", db.Integer, db.ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
    db.Column("permission_id", db.Integer, db.ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True),
)


class Permission(db.Model, TimestampMixin):
    __tablename__ = "permissions"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False, unique=True)  # e.g. "payroll.view"
    label = db.Column(db.String(200))
    group_name = db.Column(db.String(80))
    group_icon = db.Column(db.String(16))
    sort_order = db.Column(db.Integer, default=0)

    def __repr__(self) -> str:
        return f"<Permission {self.name}>"


class Role(db.Model, OrgScopedMixin, TimestampMixin):
    __tablename__ = "roles"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text)
    is_system = db.Column(db.Boolean, default=False, nullable=False)
    permissions = db.relationship("Permission", secondary=role_permissions, lazy="selectin")

    __table_args__ = (
        db.UniqueConstraint('org_id', 'name', name='uq_roles_org_name'),
    )

    def __repr__(self) -> str:
        return f"<Role id={self.id} name={self.name!r}>"
