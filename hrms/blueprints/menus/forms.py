import re

from wtforms import StringField, IntegerField, BooleanField
from wtforms.validators import DataRequired, Length, Optional, ValidationError

from ...services.access import normalize_role, split_permissions
from ...services.errors import InvalidContext
from ...utils.forms import ApiForm, split_csv

PERMISSION_RE = re.compile(r"^[a-z][a-z0-9_]*(\.[a-z0-9_]+)+$")


def permission_names(form, field):
    for name in split_permissions(field.data):
        if not PERMISSION_RE.match(name):
            raise ValidationError(f"Nom de permission invalide: {name}")


def role_codes(form, field):
    for name in split_csv(field.data):
        try:
            normalize_role(name)
        except InvalidContext:
            raise ValidationError(f"Rôle inconnu: {name}")


def path_format(form, field):
    if field.data and not field.data.startswith("/"):
        raise ValidationError("Le chemin doit commencer par /")


class MenuItemForm(ApiForm):
    name = StringField("Nom", validators=[DataRequired(), Length(max=120)])
    path = StringField("Chemin", validators=[Optional(), Length(max=255), path_format])
    icon = StringField("Icône", validators=[Optional(), Length(max=32)])
    section = StringField("Section", validators=[Optional(), Length(max=50)])
    description = StringField("Description", validators=[Optional(), Length(max=255)])
    parent_id = IntegerField("Parent", validators=[Optional()])
    required_permission = StringField("Permission", validators=[Optional(), Length(max=255), permission_names])
    allowed_roles = StringField("Rôles autorisés", validators=[Optional(), role_codes])
    sort_order = IntegerField("Ordre", validators=[Optional()])
    is_active = BooleanField("Actif", default=True)

    def allowed_role_codes(self):
        return [normalize_role(r).value for r in split_csv(self.allowed_roles.data)]


class MenuItemUpdateForm(MenuItemForm):
    name = StringField("Nom", validators=[Optional(), Length(max=120)])
