# app/__init__.py
import logging
from datetime import date, datetime

from flask import Flask
from config import Config

# db, migrate ve csrf nesneleri extensions.py'da
from app.extensions import db, migrate, csrf
from app.utils import format_para, tutarlar_metni, para_birimi_sembolu


def tarihtr(value):
    if not value: return ""
    if isinstance(value, str):
        try: value = datetime.strptime(value[:10], '%Y-%m-%d')
        except ValueError: return value
    if isinstance(value, (date, datetime)):
        return value.strftime("%d.%m.%Y")
    return str(value)


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    if not app.testing:
        logging.basicConfig(
            level=app.config.get('LOG_SEVIYESI', 'INFO'),
            format='%(asctime)s %(levelname)s %(name)s: %(message)s',
        )

    # extensions'dan gelen nesneleri başlatıyoruz
    db.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)

    # Tabloların Flask-Migrate tarafından görülmesi için
    from app import models  # noqa: F401

    # --- ŞABLON FİLTRELERİ ---
    app.add_template_filter(format_para, 'para')
    app.add_template_filter(tutarlar_metni, 'tutarlar')
    app.add_template_filter(para_birimi_sembolu, 'sembol')
    app.add_template_filter(tarihtr, 'tarihtr')

    # --- BLUEPRINT (MODÜL) KAYITLARI ---

    # 1. Ana Sayfa (Panel)
    from app.main import main_bp
    app.register_blueprint(main_bp)

    # 2. Tur Satışları
    from app.turlar import turlar_bp
    app.register_blueprint(turlar_bp, url_prefix='/turlar')

    # 3. Finans (Gelir / Gider)
    from app.cari import cari_bp
    app.register_blueprint(cari_bp, url_prefix='/cari')

    # 4. Müşteriler
    from app.musteriler import musteriler_bp
    app.register_blueprint(musteriler_bp, url_prefix='/musteriler')

    # 5. Tedarikçi Firmalar ve Borçlar
    from app.firmalar import firmalar_bp
    app.register_blueprint(firmalar_bp, url_prefix='/firmalar')

    # 6. Döviz Kurları
    from app.doviz import doviz_bp
    app.register_blueprint(doviz_bp, url_prefix='/doviz')

    # 7. Analiz ve Raporlar
    from app.raporlar import raporlar_bp
    app.register_blueprint(raporlar_bp, url_prefix='/raporlar')

    # 8. Yedekleme
    from app.yedek import yedek_bp
    app.register_blueprint(yedek_bp, url_prefix='/yedek')

    return app
