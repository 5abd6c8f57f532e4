from flask import Blueprint

musteriler_bp = Blueprint('musteriler', __name__)

from app.musteriler import routes
