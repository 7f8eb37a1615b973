from flask import jsonify, current_app

from flatjudge.helpers.errors import ContestError
from .riders import riders_bp
from .judge import judge_bp
from .audience import audience_bp
from .scores import scores_bp
from .admin import admin_bp


def handle_contest_error(e: ContestError):
    if e.status_code >= 500:
        current_app.logger.error("%s: %s", e.code, e.message)
    return jsonify(e.to_dict()), e.status_code


def register_blueprints(app):
    app.register_blueprint(riders_bp)
    app.register_blueprint(judge_bp)
    app.register_blueprint(audience_bp)
    app.register_blueprint(scores_bp)
    app.register_blueprint(admin_bp)

    app.register_error_handler(ContestError, handle_contest_error)
