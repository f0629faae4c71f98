from wtforms import FloatField
from wtforms.validators import InputRequired, NumberRange

from ...utils.forms import ApiForm


class ScoringWeightsForm(ApiForm):
    """Weights as fractions (0.35) or percentages (35); normalized on save."""
    skills = FloatField("Compétences", validators=[InputRequired(), NumberRange(min=0)])
    experience = FloatField("Expérience", validators=[InputRequired(), NumberRange(min=0)])
    interview = FloatField("Entretiens", validators=[InputRequired(), NumberRange(min=0)])
    rating = FloatField("Évaluation manager", validators=[InputRequired(), NumberRange(min=0)])
