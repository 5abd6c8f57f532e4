import logging
from datetime import date
from decimal import Decimal

from flask import render_template, url_for, redirect, flash, request, current_app
from sqlalchemy import or_
from sqlalchemy.orm import subqueryload

from app.firmalar import firmalar_bp
from app.extensions import db
from app.firmalar.models import Firma, Borc, BorcOdemesi, ODENDI, genel_borc_ozeti
from app.firmalar.forms import FirmaForm, BorcForm, BorcOdemesiForm

logger = logging.getLogger(__name__)


# -------------------------------------------------------------------------
# YARDIMCI FONKSİYONLAR
# -------------------------------------------------------------------------

def odeme_kaydet(firma, tutar, para_birimi, odeme_tarihi=None, aciklama=None, borc=None):
    """Ödemeyi ekler; borca bağlıysa borcun ödenen tutarını ve durumunu günceller."""
    if borc is not None:
        if borc.firma_id != firma.id:
            raise ValueError("Seçilen borç bu firmaya ait değil.")
        # Bağlı ödeme borcun para biriminde sayılır
        para_birimi = borc.para_birimi
    odeme = BorcOdemesi(
        firma=firma,
        borc=borc,
        tutar=tutar,
        para_birimi=para_birimi,
        odeme_tarihi=odeme_tarihi or date.today(),
        aciklama=aciklama,
    )
    db.session.add(odeme)
    if borc is not None:
        durum = borc.odeme_isle(tutar)
        logger.info("Borç #%s ödemesi işlendi, yeni durum: %s", borc.id, durum)
    return odeme


def borc_secenekleri(firma):
    secenekler = [(0, '--- Borca Bağlı Değil ---')]
    for borc in firma.borclar:
        if borc.durum == ODENDI:
            continue
        secenekler.append((borc.id, f"{borc.aciklama or 'Borç'} | Kalan: {borc.kalan_tutar} {borc.para_birimi}"))
    return secenekler


# -------------------------------------------------------------------------
# 1. Firma Listeleme
# -------------------------------------------------------------------------
@firmalar_bp.route('/')
@firmalar_bp.route('/index')
def index():
    page = request.args.get('page', 1, type=int)
    q = request.args.get('q', '', type=str)
    try:
        base_query = Firma.query.options(subqueryload(Firma.borclar)).filter_by(is_active=True)
        if q:
            search_term = f'%{q}%'
            base_query = base_query.filter(or_(Firma.firma_adi.ilike(search_term), Firma.yetkili_adi.ilike(search_term), Firma.vergi_no.ilike(search_term)))

        pagination = base_query.order_by(Firma.firma_adi).paginate(
            page=page, per_page=current_app.config['LISTE_SAYFA_BOYUTU'], error_out=False)
        toplam_borc = genel_borc_ozeti(Firma.query.filter_by(is_active=True).all())
        return render_template('firmalar/index.html', firmalar=pagination.items, pagination=pagination, q=q,
                               toplam_borc=toplam_borc)
    except Exception as e:
        logger.exception("Firma listesi yüklenemedi")
        flash(f"Hata: {str(e)}", "danger")
        return render_template('firmalar/index.html', firmalar=[], pagination=None, q=q, toplam_borc={})


# -------------------------------------------------------------------------
# 2. Yeni Firma Ekleme
# -------------------------------------------------------------------------
@firmalar_bp.route('/ekle', methods=['GET', 'POST'])
def ekle():
    form = FirmaForm()
    if form.validate_on_submit():
        try:
            yeni_firma = Firma(is_active=True)
            form.populate_obj(yeni_firma)
            db.session.add(yeni_firma)
            db.session.commit()
            flash('Firma eklendi!', 'success')
            return redirect(url_for('firmalar.index'))
        except Exception as e:
            db.session.rollback()
            logger.exception("Firma eklenemedi")
            flash(f"Hata: {str(e)}", "danger")
    return render_template('firmalar/ekle.html', form=form)


# -------------------------------------------------------------------------
# 3. Firma Silme (Soft Delete)
# -------------------------------------------------------------------------
@firmalar_bp.route('/sil/<int:id>', methods=['POST'])
def sil(id):
    firma = Firma.query.get_or_404(id)
    try:
        firma.is_active = False
        db.session.commit()
        flash(f"'{firma.firma_adi}' arşive kaldırıldı.", 'success')
    except Exception as e:
        db.session.rollback()
        logger.exception("Firma arşivlenemedi: %s", id)
        flash(f"Hata: {str(e)}", 'danger')
    return redirect(url_for('firmalar.index', page=request.args.get('page', 1, type=int), q=request.args.get('q', '')))


# -------------------------------------------------------------------------
# 4. Firma Düzenleme
# -------------------------------------------------------------------------
@firmalar_bp.route('/duzelt/<int:id>', methods=['GET', 'POST'])
def duzelt(id):
    firma = Firma.query.filter_by(id=id, is_active=True).first_or_404()
    form = FirmaForm(obj=firma)
    if form.validate_on_submit():
        try:
            form.populate_obj(firma)
            db.session.commit()
            flash('Güncellendi!', 'success')
            return redirect(url_for('firmalar.bilgi', id=firma.id))
        except Exception as e:
            db.session.rollback()
            logger.exception("Firma güncellenemedi: %s", id)
            flash(f"Hata: {str(e)}", "danger")
    return render_template('firmalar/duzelt.html', form=form, firma=firma)


# -------------------------------------------------------------------------
# 5. Firma Bilgi Sayfası (BORÇ / ÖDEME DURUMU)
# -------------------------------------------------------------------------
@firmalar_bp.route('/bilgi/<int:id>', methods=['GET'])
def bilgi(id):
    firma = Firma.query.options(subqueryload(Firma.borclar), subqueryload(Firma.odemeler)).get_or_404(id)

    borc_form = BorcForm()
    odeme_form = BorcOdemesiForm()
    odeme_form.borc_id.choices = borc_secenekleri(firma)
    odeme_form.odeme_tarihi.data = date.today()

    return render_template('firmalar/bilgi.html', firma=firma,
                           kalan_borc=firma.kalan_borc_ozeti(),
                           borc_form=borc_form, odeme_form=odeme_form)


# -------------------------------------------------------------------------
# 6. Borç Ekleme / Silme
# -------------------------------------------------------------------------
@firmalar_bp.route('/<int:firma_id>/borc/ekle', methods=['POST'])
def borc_ekle(firma_id):
    firma = Firma.query.get_or_404(firma_id)
    form = BorcForm()
    if form.validate_on_submit():
        try:
            borc = Borc(firma=firma, tutar=form.tutar.data, para_birimi=form.para_birimi.data,
                        aciklama=form.aciklama.data, vade_tarihi=form.vade_tarihi.data,
                        notlar=form.notlar.data or None, odenen_tutar=Decimal('0'))
            db.session.add(borc)
            db.session.commit()
            flash('Borç eklendi.', 'success')
        except Exception as e:
            db.session.rollback()
            logger.exception("Borç eklenemedi")
            flash(f"Hata: {str(e)}", "danger")
    else:
        for hatalar in form.errors.values():
            for hata in hatalar:
                flash(hata, 'danger')
    return redirect(url_for('firmalar.bilgi', id=firma.id))


@firmalar_bp.route('/borc/sil/<int:borc_id>', methods=['POST'])
def borc_sil(borc_id):
    borc = Borc.query.get_or_404(borc_id)
    firma_id = borc.firma_id
    try:
        # Bağlı ödemeler firmada kalır, borç bağlantısı kalkar
        for odeme in borc.odemeler:
            odeme.borc = None
        db.session.delete(borc)
        db.session.commit()
        flash('Borç silindi.', 'success')
    except Exception as e:
        db.session.rollback()
        logger.exception("Borç silinemedi: %s", borc_id)
        flash(f"Hata: {str(e)}", 'danger')
    return redirect(url_for('firmalar.bilgi', id=firma_id))


# -------------------------------------------------------------------------
# 7. Ödeme Ekleme / Silme
# -------------------------------------------------------------------------
@firmalar_bp.route('/<int:firma_id>/odeme/ekle', methods=['POST'])
def odeme_ekle(firma_id):
    firma = Firma.query.get_or_404(firma_id)
    form = BorcOdemesiForm()
    form.borc_id.choices = borc_secenekleri(firma)
    if form.validate_on_submit():
        try:
            borc = Borc.query.get(form.borc_id.data) if form.borc_id.data else None
            odeme_kaydet(firma, form.tutar.data, form.para_birimi.data,
                         form.odeme_tarihi.data, form.aciklama.data or None, borc)
            db.session.commit()
            flash('Ödeme kaydedildi.', 'success')
        except Exception as e:
            db.session.rollback()
            logger.exception("Ödeme kaydedilemedi")
            flash(f"Hata: {str(e)}", "danger")
    else:
        for hatalar in form.errors.values():
            for hata in hatalar:
                flash(hata, 'danger')
    return redirect(url_for('firmalar.bilgi', id=firma.id))


@firmalar_bp.route('/odeme/sil/<int:odeme_id>', methods=['POST'])
def odeme_sil(odeme_id):
    odeme = BorcOdemesi.query.get_or_404(odeme_id)
    firma_id = odeme.firma_id
    try:
        if odeme.borc is not None:
            odeme.borc.odeme_geri_al(odeme.tutar)
        db.session.delete(odeme)
        db.session.commit()
        flash('Ödeme silindi, borç durumu güncellendi.', 'success')
    except Exception as e:
        db.session.rollback()
        logger.exception("Ödeme silinemedi: %s", odeme_id)
        flash(f"Hata: {str(e)}", 'danger')
    return redirect(url_for('firmalar.bilgi', id=firma_id))
