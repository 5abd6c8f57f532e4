import logging
from datetime import date

from flask import render_template, redirect, url_for, flash, request, current_app

from app.cari import cari_bp
from app.extensions import db
from app.cari.models import FinansKaydi
from app.cari.forms import FinansKaydiForm, GELIR_KATEGORILERI, GIDER_KATEGORILERI
from app.turlar.models import TurSatisi
from app.hesaplama import (
    build_transaction_feed, tur_akisi, finans_akisi, sayfala, gruplu_sayfala,
    tarih_araligina_gore_filtrele,
    summarize_by_currency, kayitlari_filtrele,
)
from app.hesaplama.doviz_ozeti import TUMU
from app.utils import PARA_BIRIMI_SECENEKLERI

logger = logging.getLogger(__name__)


# -------------------------------------------------------------------------
# YARDIMCI FONKSİYONLAR
# -------------------------------------------------------------------------
def tur_secenekleri():
    turlar = TurSatisi.query.order_by(TurSatisi.tur_tarihi.desc()).all()
    secenekler = [('', '--- Tura Bağlı Değil ---')]
    secenekler += [(t.id, f"{t.seri_no or '-'} | {t.tur_adi or 'İsimsiz Tur'} | {t.musteri_adi or '-'}") for t in turlar]
    return secenekler


def formdan_kayda(form, kayit):
    kayit.tip = form.tip.data
    kayit.tarih = form.tarih.data
    kayit.kategori = (form.kategori.data or '').strip() or None
    kayit.aciklama = form.aciklama.data or None
    kayit.tutar = abs(form.tutar.data)
    kayit.para_birimi = form.para_birimi.data or 'TRY'
    kayit.odeme_yontemi = form.odeme_yontemi.data or None
    kayit.ilgili_tur_id = form.ilgili_tur_id.data or None
    return kayit


def _tarih_parametreleri():
    return request.args.get('baslangic', '', type=str), request.args.get('bitis', '', type=str)


# -------------------------------------------------------------------------
# 1. FİNANS LİSTESİ (Son İşlemler akışı)
# -------------------------------------------------------------------------
@cari_bp.route('/')
@cari_bp.route('/index')
def index():
    baslangic, bitis = _tarih_parametreleri()
    tur_sayfa = request.args.get('tur_sayfa', 1, type=int)
    finans_sayfa = request.args.get('finans_sayfa', 1, type=int)
    sayfa_boyutu = current_app.config['SAYFA_BOYUTU']

    try:
        akis = build_transaction_feed(FinansKaydi.query.all(), TurSatisi.query.all())
        akis = tarih_araligina_gore_filtrele(akis, baslangic or None, bitis or None)
        turlar = gruplu_sayfala(tur_akisi(akis), tur_sayfa, sayfa_boyutu)
        finanslar = sayfala(finans_akisi(akis), finans_sayfa, sayfa_boyutu)
    except Exception as e:
        logger.exception("Finans listesi hazırlanamadı")
        flash(f"Hata: {str(e)}", "danger")
        turlar = finanslar = sayfala([], 1, sayfa_boyutu)

    return render_template('cari/index.html', turlar=turlar, finanslar=finanslar,
                           baslangic=baslangic, bitis=bitis)


# -------------------------------------------------------------------------
# 2. YENİ FİNANS KAYDI
# -------------------------------------------------------------------------
@cari_bp.route('/ekle', methods=['GET', 'POST'])
def ekle():
    form = FinansKaydiForm()
    form.ilgili_tur_id.choices = tur_secenekleri()

    if request.method == 'GET':
        form.tarih.data = date.today()
        if request.args.get('tip') in ('income', 'expense'):
            form.tip.data = request.args.get('tip')
        if request.args.get('tur_id'):
            form.ilgili_tur_id.data = request.args.get('tur_id')

    if form.validate_on_submit():
        try:
            kayit = formdan_kayda(form, FinansKaydi())
            db.session.add(kayit)
            db.session.commit()
            flash('Finansal kayıt başarıyla kaydedildi.', 'success')
            return redirect(url_for('cari.index'))
        except Exception as e:
            db.session.rollback()
            logger.exception("Finansal kayıt eklenemedi")
            flash(f"Hata: {str(e)}", "danger")

    return render_template('cari/ekle.html', form=form,
                           gelir_kategorileri=GELIR_KATEGORILERI, gider_kategorileri=GIDER_KATEGORILERI)


# -------------------------------------------------------------------------
# 3. FİNANS KAYDI DÜZENLEME
# -------------------------------------------------------------------------
@cari_bp.route('/duzenle/<id>', methods=['GET', 'POST'])
def duzenle(id):
    kayit = FinansKaydi.query.get_or_404(id)
    if kayit.tur_gideri_mi:
        flash('Tur giderleri tur kaydı üzerinden düzenlenir.', 'warning')
        return redirect(url_for('turlar.duzenle', id=kayit.ilgili_tur_id))

    form = FinansKaydiForm(obj=kayit)
    form.ilgili_tur_id.choices = tur_secenekleri()
    if request.method == 'GET':
        form.ilgili_tur_id.data = kayit.ilgili_tur_id or ''

    if form.validate_on_submit():
        try:
            formdan_kayda(form, kayit)
            db.session.commit()
            flash('Güncellendi!', 'success')
            return redirect(url_for('cari.index'))
        except Exception as e:
            db.session.rollback()
            logger.exception("Finansal kayıt güncellenemedi: %s", id)
            flash(f"Hata: {str(e)}", "danger")

    return render_template('cari/duzenle.html', form=form, kayit=kayit,
                           gelir_kategorileri=GELIR_KATEGORILERI, gider_kategorileri=GIDER_KATEGORILERI)


# -------------------------------------------------------------------------
# 4. FİNANS KAYDI SİLME
# -------------------------------------------------------------------------
@cari_bp.route('/sil/<id>', methods=['POST'])
def sil(id):
    kayit = FinansKaydi.query.get_or_404(id)
    if kayit.tur_gideri_mi:
        flash('Tur giderleri tur kaydı üzerinden silinir.', 'warning')
        return redirect(url_for('cari.index'))
    try:
        db.session.delete(kayit)
        db.session.commit()
        flash('Finansal kayıt silindi.', 'success')
    except Exception as e:
        db.session.rollback()
        logger.exception("Finansal kayıt silinemedi: %s", id)
        flash(f"Hata: {str(e)}", 'danger')
    return redirect(url_for('cari.index'))


# -------------------------------------------------------------------------
# 5. PARA BİRİMİ BAZLI ÖZET
# -------------------------------------------------------------------------
@cari_bp.route('/ozet')
def ozet():
    para_birimi = request.args.get('para_birimi', TUMU, type=str) or TUMU
    baslangic, bitis = _tarih_parametreleri()
    try:
        kayitlar, turlar = kayitlari_filtrele(FinansKaydi.query.all(), TurSatisi.query.all(),
                                              baslangic or None, bitis or None)
        ozetler = summarize_by_currency(kayitlar, turlar, para_birimi)
    except Exception as e:
        logger.exception("Finansal özet hesaplanamadı")
        flash(f"Hata: {str(e)}", "danger")
        ozetler = {}

    return render_template('cari/ozet.html', ozetler=ozetler, para_birimi=para_birimi,
                           baslangic=baslangic, bitis=bitis, secenekler=PARA_BIRIMI_SECENEKLERI)
