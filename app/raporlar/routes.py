import logging
from datetime import datetime

from flask import render_template, request, flash, current_app

from app.raporlar import raporlar_bp
from app.cari.models import FinansKaydi
from app.turlar.models import TurSatisi
from app.hesaplama import (
    summarize_by_currency, kayitlari_filtrele, uyruk_dagilimi, referans_dagilimi,
    destinasyon_istatistikleri, aylik_istatistikler,
)
from app.hesaplama.doviz_ozeti import TUMU
from app.utils import PARA_BIRIMI_SECENEKLERI, REFERANS_KAYNAKLARI

logger = logging.getLogger(__name__)

BOS_ANALIZ = {
    'ozetler': {}, 'uyruklar': [], 'referanslar': [], 'destinasyonlar': [], 'aylar': [],
    'tur_sayisi': 0, 'kayit_sayisi': 0,
}


def analiz_verisi(para_birimi=TUMU, baslangic=None, bitis=None):
    kayitlar, turlar = kayitlari_filtrele(FinansKaydi.query.all(), TurSatisi.query.all(), baslangic, bitis)
    return {
        'ozetler': summarize_by_currency(kayitlar, turlar, para_birimi),
        'uyruklar': uyruk_dagilimi(turlar),
        'referanslar': referans_dagilimi(turlar, REFERANS_KAYNAKLARI),
        'destinasyonlar': destinasyon_istatistikleri(turlar),
        'aylar': aylik_istatistikler(turlar),
        'tur_sayisi': len(turlar),
        'kayit_sayisi': len(kayitlar),
    }


def _parametreler():
    para_birimi = request.args.get('para_birimi', TUMU, type=str) or TUMU
    baslangic = request.args.get('baslangic', '', type=str)
    bitis = request.args.get('bitis', '', type=str)
    return para_birimi, baslangic, bitis


@raporlar_bp.route('/')
@raporlar_bp.route('/index')
def index():
    para_birimi, baslangic, bitis = _parametreler()
    try:
        veri = analiz_verisi(para_birimi, baslangic or None, bitis or None)
    except Exception as e:
        logger.exception("Analiz verisi hazırlanamadı")
        flash(f"Hata: {str(e)}", "danger")
        veri = dict(BOS_ANALIZ)
    return render_template('raporlar/index.html', veri=veri, para_birimi=para_birimi,
                           baslangic=baslangic, bitis=bitis, secenekler=PARA_BIRIMI_SECENEKLERI)


@raporlar_bp.route('/yazdir')
def yazdir():
    """Analiz özetinin yazdırılabilir hali."""
    para_birimi, baslangic, bitis = _parametreler()
    veri = analiz_verisi(para_birimi, baslangic or None, bitis or None)
    return render_template('raporlar/yazdir.html', veri=veri, para_birimi=para_birimi,
                           baslangic=baslangic, bitis=bitis, sirket_adi=current_app.config['SIRKET_ADI'],
                           olusturma=datetime.now())
