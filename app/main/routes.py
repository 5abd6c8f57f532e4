import logging

from flask import render_template, request, current_app, flash

from app.main import main_bp
from app.cari.models import FinansKaydi
from app.turlar.models import TurSatisi
from app.musteriler.models import Musteri
from app.firmalar.models import Firma, genel_borc_ozeti
from app.hesaplama import panel_ozeti

logger = logging.getLogger(__name__)


@main_bp.route('/')
@main_bp.route('/index')
def index():
    """
    Ana Sayfa (Dashboard).
    Para birimi bazlı gelir/gider blokları ve son işlemler akışı.
    """
    sayfa = request.args.get('sayfa', 1, type=int)
    try:
        panel = panel_ozeti(
            FinansKaydi.query.all(),
            TurSatisi.query.all(),
            musteri_sayisi=Musteri.query.count(),
            sayfa=sayfa,
            sayfa_boyutu=current_app.config['SAYFA_BOYUTU'],
        )
        tedarikci_borcu = genel_borc_ozeti(Firma.query.filter_by(is_active=True).all())
    except Exception as e:
        logger.exception("Panel verileri hazırlanamadı")
        flash(f"Hata: {str(e)}", "danger")
        panel = panel_ozeti([], [], sayfa_boyutu=current_app.config['SAYFA_BOYUTU'])
        tedarikci_borcu = {}
    return render_template('main/index.html', panel=panel, tedarikci_borcu=tedarikci_borcu)
