from flask import Blueprint

yedek_bp = Blueprint('yedek', __name__)

from app.yedek import routes
