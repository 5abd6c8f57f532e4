from flask import Blueprint

doviz_bp = Blueprint('doviz', __name__)

from app.doviz import routes
