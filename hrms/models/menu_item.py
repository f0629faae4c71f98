from ..extensions import db
from .base import OrgScopedMixin, TimestampMixin

class MenuItem(db.Model, OrgScopedMixin, TimestampMixin):
    __tablename__ = "menu_items"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    path = db.Column(db.String(255))      # NULL for section headers
    icon = db.Column(db.String(32))
    section = db.Column(db.String(50), default="main")
    description = db.Column(db.String(255))
    parent_id = db.Column(db.Integer, db.ForeignKey("menu_items.id"), index=True)
    # single permission name, or a comma-separated "any of" list
    required_permission = db.Column(db.String(255))
    allowed_roles = db.Column(db.JSON)    # ["ROLE_RH", "ROLE_ADMIN"]
    sort_order = db.Column(db.Integer, default=0, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    def to_row(self):
        return {
            "id": self.id,
            "name": self.name,
            "path": self.path,
            "icon": self.icon,
            "section": self.section,
            "description": self.description,
            "parent_id": self.parent_id,
            "required_permission": self.required_permission,
            "allowed_roles": list(self.allowed_roles or []),
            "sort_order": self.sort_order or 0,
            "is_active": bool(self.is_active),
        }

    def __repr__(self) -> str:
        return f"<MenuItem id={self.id} name={self.name!r} parent_id={self.parent_id}>"
