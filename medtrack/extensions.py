# --- medtrack/extensions.py ---
from flask import current_app
from flask_cors import CORS
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
cors = CORS()
migrate = Migrate()

SERVICES_KEY = "medtrack.services"


def services():
    """Auth services bundle built by create_app for the current application."""
    return current_app.extensions[SERVICES_KEY]
