from flask import Blueprint

# Ana panel (gelir/gider blokları ve son işlemler)
main_bp = Blueprint('main', __name__)

# Rotalar blueprint oluşturulduktan sonra bağlanır (circular import)
from app.main import routes
