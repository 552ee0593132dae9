from .main import main_bp
from .forms import forms_bp

def register_blueprints(app):
    app.register_blueprint(main_bp)
    app.register_blueprint(forms_bp)
