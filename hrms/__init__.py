from flask import Flask, jsonify
from .extensions import db, login_manager, migrate, rq
from .services.errors import InvalidCandidatePool, InvalidWeights, MalformedMenuNode


def _register_error_handlers(app):
    @app.errorhandler(MalformedMenuNode)
    def malformed_menu(e):
        app.logger.error('menu tree inconsistency: %s', e)
        return jsonify({"error": "menu_inconsistent", "details": str(e)}), 409

    @app.errorhandler(InvalidCandidatePool)
    def invalid_pool(e):
        app.logger.error('candidate pool rejected: %s', e)
        return jsonify({"error": "invalid_candidate_pool", "details": str(e)}), 409

    @app.errorhandler(InvalidWeights)
    def invalid_weights(e):
        return jsonify({"error": "invalid_weights", "details": str(e)}), 422

    for code, name in ((401, "unauthorized"), (403, "forbidden"), (404, "not_found")):
        def handler(e, name=name, code=code):
            return jsonify({"error": name}), code
        app.register_error_handler(code, handler)


def create_app(config_object='config.Config'):
    """App factory. ``config_object`` is a dotted path or a config class."""
    app = Flask(__name__)
    app.config.from_object(config_object)

    db.init_app(app)
    from . import models  # noqa: F401
    migrate.init_app(app, db)
    login_manager.init_app(app)
    rq.init_app(app)

    @login_manager.user_loader
    def load_user(user_id):
        from .models.user import User
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({"error": "unauthorized"}), 401

    from .blueprints.auth import bp as auth_bp
    from .blueprints.menus import bp as menus_bp
    from .blueprints.recruitment import bp as recruitment_bp
    from .blueprints.org import bp as org_bp
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(menus_bp, url_prefix="/menus")
    app.register_blueprint(recruitment_bp, url_prefix="/recruitment")
    app.register_blueprint(org_bp, url_prefix="/org")

    _register_error_handlers(app)

    @app.get('/health')
    def health():
        return jsonify({"status": "ok"})

    return app
