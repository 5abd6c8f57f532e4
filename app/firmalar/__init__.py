from flask import Blueprint

# Tedarikçi firmalar, borçlar ve borç ödemeleri
firmalar_bp = Blueprint('firmalar', __name__)

# Rotalar blueprint oluşturulduktan sonra bağlanır (circular import)
from app.firmalar import routes
