import uuid

from flask import Blueprint

main_bp = Blueprint('main', __name__)


@main_bp.route('/message')
def message():
    """Liveness check."""
    return 'Hello, World!'


@main_bp.route('/random')
def random_id():
    return str(uuid.uuid4())
