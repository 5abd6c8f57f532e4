from flask import Blueprint

raporlar_bp = Blueprint('raporlar', __name__)

from app.raporlar import routes
