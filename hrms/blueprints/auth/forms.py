from wtforms import StringField, PasswordField, SelectField, IntegerField
from wtforms.validators import DataRequired, Email, EqualTo, Length, Optional

from ...services.access import RoleCode
from ...utils.forms import ApiForm

ROLE_CHOICES = [(r.value, r.value) for r in RoleCode]


class SignupForm(ApiForm):
    org_name = StringField("Organisation", validators=[Optional(), Length(max=120)])
    full_name = StringField("Nom complet", validators=[Optional(), Length(max=160)])
    email = StringField("Email", validators=[DataRequired(), Email()])
    password = PasswordField("Mot de passe", validators=[DataRequired(), Length(min=8)])
    confirm = PasswordField("Mot de passe (confirmation)", validators=[DataRequired(), EqualTo('password')])
    role = SelectField("Rôle", choices=ROLE_CHOICES, default=RoleCode.EMPLOYEE.value)
    role_id = IntegerField("Rôle personnalisé", validators=[Optional()])


class LoginForm(ApiForm):
    email = StringField("Email", validators=[DataRequired(), Email()])
    password = PasswordField("Password", validators=[DataRequired()])
