from flask import Blueprint

# Finansal kayıtlar (gelir/gider) ve özet ekranı
cari_bp = Blueprint('cari', __name__)

from app.cari import routes
