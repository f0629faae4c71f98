from flask import jsonify, request
from flask_login import login_required, current_user
from . import bp
from .forms import ScoringWeightsForm
from ...services.errors import InvalidWeights
from ...services.scoring import CRITERIA, ScoringWeights
from ...services.settings import config_weights, org_weights, save_org_weights
from ...utils.decorators import admin_required
from ...utils.forms import request_formdata, validation_error


@bp.get("/me")
@login_required
def org_me():
    return jsonify({"org_id": current_user.org_id})


@bp.route('/scoring', methods=['GET', 'POST'])
@login_required
@admin_required
def scoring_settings():
    """Organisation-wide composite weights; job offers may still override them."""
    org_id = current_user.org_id
    if request.method == 'POST':
        form = ScoringWeightsForm(formdata=request_formdata())
        if not form.validate():
            return validation_error(form)
        try:
            weights = ScoringWeights.from_mapping({k: getattr(form, k).data for k in CRITERIA})
        except InvalidWeights as e:
            return jsonify({"error": "invalid_weights", "details": str(e)}), 422
        save_org_weights(org_id, weights)
    return jsonify({
        "weights": org_weights(org_id).as_dict(),
        "defaults": config_weights().as_dict(),
    })
