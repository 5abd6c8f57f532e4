from flask import Blueprint

# Tur satışları (gider kalemleri ve aktivitelerle birlikte)
turlar_bp = Blueprint('turlar', __name__)

# Rotalar blueprint oluşturulduktan sonra bağlanır (circular import)
from app.turlar import routes
