from wtforms import StringField, FloatField, SelectField, TextAreaField, BooleanField, DateTimeField
from wtforms.validators import DataRequired, Email, Length, NumberRange, Optional, ValidationError

from ...models.application import STAGES
from ...services.errors import InvalidWeights
from ...services.scoring import ScoringWeights
from ...utils.forms import ApiForm, parse_json_field

DATETIME_FORMATS = ["%Y-%m-%dT%H:%M:%S", "%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M:%S", "%Y-%m-%d"]


def scoring_criteria(form, field):
    if not field.data:
        return
    parsed = parse_json_field(field.data)
    if not isinstance(parsed, dict):
        raise ValidationError("Critères de scoring: objet JSON attendu")
    try:
        ScoringWeights.from_mapping(parsed)
    except InvalidWeights as e:
        raise ValidationError(str(e))


class JobOfferForm(ApiForm):
    title = StringField("Intitulé", validators=[DataRequired(), Length(max=200)])
    department = StringField("Département", validators=[Optional(), Length(max=120)])
    status = SelectField("Statut", choices=[("draft", "Brouillon"), ("published", "Publiée"), ("closed", "Clôturée")],
                         default="draft")
    description = TextAreaField("Description", validators=[Optional()])
    required_skills = TextAreaField("Compétences requises", validators=[Optional()])
    min_experience = FloatField("Expérience minimale (années)", validators=[Optional(), NumberRange(min=0)])
    scoring_criteria = TextAreaField("Critères de scoring", validators=[Optional(), scoring_criteria])


class JobOfferUpdateForm(JobOfferForm):
    title = StringField("Intitulé", validators=[Optional(), Length(max=200)])


class ApplicationForm(ApiForm):
    first_name = StringField("Prénom", validators=[DataRequired(), Length(max=80)])
    last_name = StringField("Nom", validators=[DataRequired(), Length(max=80)])
    email = StringField("Email", validators=[Optional(), Email()])
    phone = StringField("Téléphone", validators=[Optional(), Length(max=40)])
    skills = TextAreaField("Compétences", validators=[Optional()])
    years_experience = FloatField("Années d'expérience", validators=[Optional(), NumberRange(min=0)])
    rating = FloatField("Note manager", validators=[Optional(), NumberRange(min=0)])
    submitted_at = DateTimeField("Date de candidature", format=DATETIME_FORMATS, validators=[Optional()])


class InterviewForm(ApiForm):
    scheduled_at = DateTimeField("Date", format=DATETIME_FORMATS, validators=[Optional()])
    status = SelectField("Statut", choices=[("scheduled", "Planifié"), ("done", "Réalisé"),
                                            ("no_show", "Absent"), ("canceled", "Annulé")], default="scheduled")
    rating = FloatField("Note", validators=[Optional(), NumberRange(min=0)])
    comment = TextAreaField("Commentaire", validators=[Optional()])


class StageForm(ApiForm):
    stage = SelectField("Étape", choices=[(s, s) for s in STAGES], validators=[DataRequired()])
    rating = FloatField("Note manager", validators=[Optional(), NumberRange(min=0)])
    notify = BooleanField("Notifier le candidat", default=False)


class RejectForm(ApiForm):
    send_email = BooleanField("Envoyer un email", default=False)
