import logging
from decimal import Decimal

from flask import render_template, redirect, url_for, flash, request, session, current_app
from sqlalchemy import or_
from sqlalchemy.orm import subqueryload
from werkzeug.datastructures import MultiDict

from app.turlar import turlar_bp
from app.extensions import db
from app.turlar.models import TurSatisi, TurGideri, TurAktivitesi
from app.turlar.forms import TurSatisiForm
from app.turlar.servis import TaslakDeposu, tur_kaydet, tur_sil
from app.hesaplama import tur_geliri, tur_gider_toplami
from app.utils import seri_no_uret, ODEME_DURUMLARI, REFERANS_KAYNAKLARI, secenek_etiketi

logger = logging.getLogger(__name__)


# -------------------------------------------------------------------------
# YARDIMCI FONKSİYONLAR
# -------------------------------------------------------------------------
def _bos_satir_mi(satir_form, tutar_alani):
    veri = satir_form.form
    return not (veri.ad.data or '').strip() and not getattr(veri, tutar_alani).data


def formdan_tura(form, tur):
    """Form verisini TurSatisi nesnesine aktarır; gider ve aktivite listeleri yeniden kurulur."""
    tur.seri_no = (form.seri_no.data or '').strip() or tur.seri_no or seri_no_uret()
    tur.tur_adi = form.tur_adi.data
    tur.destinasyon = form.destinasyon.data or None
    tur.tur_tarihi = form.tur_tarihi.data
    tur.tur_bitis_tarihi = form.tur_bitis_tarihi.data
    tur.kisi_sayisi = form.kisi_sayisi.data or 1
    tur.cocuk_sayisi = form.cocuk_sayisi.data or 0

    tur.musteri_adi = form.musteri_adi.data
    tur.musteri_telefon = form.musteri_telefon.data or None
    tur.musteri_eposta = form.musteri_eposta.data or None
    tur.musteri_kimlik_no = form.musteri_kimlik_no.data or None
    tur.musteri_adres = form.musteri_adres.data or None
    tur.uyruk = form.uyruk.data or None
    tur.referans_kaynagi = form.referans_kaynagi.data or None

    tur.kisi_basi_fiyat = form.kisi_basi_fiyat.data or Decimal('0')
    tur.toplam_fiyat = form.toplam_fiyat.data or Decimal('0')
    # Toplam girilmediyse kişi başı fiyattan hesapla
    if not tur.toplam_fiyat and tur.kisi_basi_fiyat:
        tur.toplam_fiyat = tur.kisi_basi_fiyat * tur.kisi_sayisi
    tur.para_birimi = form.para_birimi.data or 'TRY'
    tur.odeme_durumu = form.odeme_durumu.data
    tur.odeme_yontemi = form.odeme_yontemi.data or None
    if tur.odeme_durumu == 'partial':
        tur.kismi_odeme_tutari = form.kismi_odeme_tutari.data
        tur.kismi_odeme_para_birimi = form.kismi_odeme_para_birimi.data or None
    else:
        tur.kismi_odeme_tutari = None
        tur.kismi_odeme_para_birimi = None
    tur.notlar = form.notlar.data or None

    giderler = []
    for sira, satir in enumerate(form.giderler):
        if _bos_satir_mi(satir, 'tutar'):
            continue
        veri = satir.form
        giderler.append(TurGideri(
            sira=sira,
            gider_tipi=veri.gider_tipi.data,
            ad=veri.ad.data,
            tutar=veri.tutar.data or Decimal('0'),
            para_birimi=veri.para_birimi.data or tur.para_birimi,
            saglayici=veri.saglayici.data or None,
            aciklama=veri.aciklama.data or None,
        ))
    tur.giderler = giderler

    aktiviteler = []
    for sira, satir in enumerate(form.aktiviteler):
        if _bos_satir_mi(satir, 'fiyat'):
            continue
        veri = satir.form
        aktiviteler.append(TurAktivitesi(
            sira=sira,
            ad=veri.ad.data,
            tarih=veri.tarih.data,
            fiyat=veri.fiyat.data or Decimal('0'),
            para_birimi=veri.para_birimi.data or tur.para_birimi,
            kismi_odeme_tutari=veri.kismi_odeme_tutari.data,
            kismi_odeme_para_birimi=veri.kismi_odeme_para_birimi.data or None,
        ))
    tur.aktiviteler = aktiviteler
    return tur


def _kaydet_ve_bildir(tur):
    yeni_musteri, aktarilan = tur_kaydet(tur)
    db.session.commit()
    TaslakDeposu(session).temizle()
    flash('Tur satışı başarıyla kaydedildi.', 'success')
    if yeni_musteri:
        flash('Yeni müşteri kaydı otomatik olarak oluşturuldu.', 'info')
    if aktarilan:
        flash(f'{aktarilan} tur gideri finansal kayıtlara aktarıldı.', 'info')


@turlar_bp.app_template_filter('odeme_durumu')
def odeme_durumu_etiketi(value):
    return secenek_etiketi(ODEME_DURUMLARI, value)


@turlar_bp.app_template_filter('referans')
def referans_etiketi(value):
    return REFERANS_KAYNAKLARI.get(value, value or '-')


# -------------------------------------------------------------------------
# 1. TUR LİSTELEME
# -------------------------------------------------------------------------
@turlar_bp.route('/')
@turlar_bp.route('/index')
def index():
    page = request.args.get('page', 1, type=int)
    q = request.args.get('q', '', type=str)
    durum = request.args.get('durum', '', type=str)
    try:
        query = TurSatisi.query
        if q:
            search = f"%{q}%"
            query = query.filter(or_(
                TurSatisi.tur_adi.ilike(search), TurSatisi.musteri_adi.ilike(search),
                TurSatisi.seri_no.ilike(search), TurSatisi.destinasyon.ilike(search),
            ))
        if durum:
            query = query.filter(TurSatisi.odeme_durumu == durum)

        pagination = query.order_by(TurSatisi.tur_tarihi.desc(), TurSatisi.olusturma_tarihi.desc()).paginate(
            page=page, per_page=current_app.config['LISTE_SAYFA_BOYUTU'], error_out=False)
        return render_template('turlar/index.html', turlar=pagination.items, pagination=pagination, q=q, durum=durum,
                               durumlar=ODEME_DURUMLARI)
    except Exception as e:
        logger.exception("Tur listesi yüklenemedi")
        flash(f"Hata: {str(e)}", "danger")
        return render_template('turlar/index.html', turlar=[], pagination=None, q=q, durum=durum, durumlar=ODEME_DURUMLARI)


# -------------------------------------------------------------------------
# 2. YENİ TUR SATIŞI
# -------------------------------------------------------------------------
@turlar_bp.route('/ekle', methods=['GET', 'POST'])
def ekle():
    taslak = TaslakDeposu(session)

    if request.method == 'GET' and request.args.get('taslak') and taslak.var_mi():
        # Müşteri vb. ekrana gidip dönen kullanıcı için yarım kalan form
        form = TurSatisiForm(formdata=MultiDict(taslak.getir()))
        flash('Kaydedilmemiş tur taslağı geri yüklendi.', 'info')
    else:
        form = TurSatisiForm()

    if request.method == 'GET' and not form.seri_no.data:
        form.seri_no.data = seri_no_uret()
        if not form.giderler.entries:
            form.giderler.append_entry()
        if not form.aktiviteler.entries:
            form.aktiviteler.append_entry()

    if form.validate_on_submit():
        try:
            tur = formdan_tura(form, TurSatisi())
            _kaydet_ve_bildir(tur)
            return redirect(url_for('turlar.bilgi', id=tur.id))
        except Exception as e:
            db.session.rollback()
            logger.exception("Tur satışı kaydedilemedi")
            flash(f"Hata: {str(e)}", "danger")

    return render_template('turlar/ekle.html', form=form, taslak_var=taslak.var_mi())


@turlar_bp.route('/taslak', methods=['POST'])
def taslak_kaydet():
    """Formu taslak olarak saklayıp başka bir ekrana geçer."""
    veri = {k: v for k, v in request.form.items() if k != 'csrf_token'}
    TaslakDeposu(session).kaydet(veri)
    hedef = request.args.get('next') or ''
    # Sadece uygulama içi adreslere yönlendir
    if not hedef.startswith('/') or hedef.startswith('//'):
        hedef = url_for('musteriler.index')
    return redirect(hedef)


@turlar_bp.route('/taslak/sil', methods=['POST'])
def taslak_sil():
    TaslakDeposu(session).temizle()
    flash('Tur taslağı silindi.', 'success')
    return redirect(url_for('turlar.ekle'))


# -------------------------------------------------------------------------
# 3. TUR DÜZENLEME
# -------------------------------------------------------------------------
@turlar_bp.route('/duzenle/<id>', methods=['GET', 'POST'])
def duzenle(id):
    tur = TurSatisi.query.options(subqueryload(TurSatisi.giderler), subqueryload(TurSatisi.aktiviteler)).get_or_404(id)
    form = TurSatisiForm(obj=tur)
    if request.method == 'GET':
        if not form.giderler.entries:
            form.giderler.append_entry()
        if not form.aktiviteler.entries:
            form.aktiviteler.append_entry()

    if form.validate_on_submit():
        try:
            formdan_tura(form, tur)
            _kaydet_ve_bildir(tur)
            return redirect(url_for('turlar.bilgi', id=tur.id))
        except Exception as e:
            db.session.rollback()
            logger.exception("Tur güncellenemedi: %s", id)
            flash(f"Hata: {str(e)}", "danger")

    return render_template('turlar/duzenle.html', form=form, tur=tur)


# -------------------------------------------------------------------------
# 4. TUR SİLME
# -------------------------------------------------------------------------
@turlar_bp.route('/sil/<id>', methods=['POST'])
def sil(id):
    tur = TurSatisi.query.get_or_404(id)
    try:
        seri_no = tur.seri_no
        tur_sil(tur)
        db.session.commit()
        flash(f"'{seri_no}' numaralı tur ve tur giderleri silindi.", 'success')
    except Exception as e:
        db.session.rollback()
        logger.exception("Tur silinemedi: %s", id)
        flash(f"Hata: {str(e)}", 'danger')
    return redirect(url_for('turlar.index', page=request.args.get('page', 1, type=int), q=request.args.get('q', '')))


# -------------------------------------------------------------------------
# 5. TUR BİLGİ VE YAZDIRMA
# -------------------------------------------------------------------------
@turlar_bp.route('/bilgi/<id>')
def bilgi(id):
    tur = TurSatisi.query.get_or_404(id)
    return render_template('turlar/bilgi.html', tur=tur,
                           tahsilat=tur_geliri(tur), gider_toplami=tur_gider_toplami(tur))


@turlar_bp.route('/yazdir/<id>')
def yazdir(id):
    tur = TurSatisi.query.get_or_404(id)
    sirket = {
        'ad': current_app.config['SIRKET_ADI'],
        'adres': current_app.config['SIRKET_ADRES'],
        'telefon': current_app.config['SIRKET_TELEFON'],
        'eposta': current_app.config['SIRKET_EPOSTA'],
    }
    return render_template('turlar/yazdir.html', tur=tur, sirket=sirket, tahsilat=tur_geliri(tur))
