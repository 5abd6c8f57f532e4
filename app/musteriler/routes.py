import logging

from flask import render_template, url_for, redirect, flash, request, current_app
from sqlalchemy import or_

from app.musteriler import musteriler_bp
from app.extensions import db
from app.musteriler.models import Musteri
from app.musteriler.forms import MusteriForm
from app.turlar.models import TurSatisi
from app.hesaplama import summarize_by_currency

logger = logging.getLogger(__name__)


def musterinin_turlari(musteri):
    """Müşteri id'si ile bağlı turlar; eski kayıtlar için isim/telefon eşleşmesi."""
    kosullar = [TurSatisi.musteri_id == musteri.id]
    if musteri.telefon:
        kosullar.append(TurSatisi.musteri_telefon == musteri.telefon)
    if musteri.ad:
        kosullar.append(TurSatisi.musteri_adi == musteri.ad)
    return TurSatisi.query.filter(or_(*kosullar)).order_by(TurSatisi.tur_tarihi.desc()).all()


def formdan_musteriye(form, musteri):
    musteri.ad = form.ad.data
    musteri.telefon = form.telefon.data or None
    musteri.eposta = form.eposta.data or None
    musteri.kimlik_no = form.kimlik_no.data or None
    musteri.uyruk = form.uyruk.data or None
    musteri.adres = form.adres.data or None
    musteri.notlar = form.notlar.data or None
    return musteri


# -------------------------------------------------------------------------
# 1. Müşteri Listeleme
# -------------------------------------------------------------------------
@musteriler_bp.route('/')
@musteriler_bp.route('/index')
def index():
    page = request.args.get('page', 1, type=int)
    q = request.args.get('q', '', type=str)
    try:
        base_query = Musteri.query
        if q:
            search_term = f'%{q}%'
            base_query = base_query.filter(or_(
                Musteri.ad.ilike(search_term), Musteri.telefon.ilike(search_term),
                Musteri.eposta.ilike(search_term), Musteri.kimlik_no.ilike(search_term),
            ))
        pagination = base_query.order_by(Musteri.ad).paginate(
            page=page, per_page=current_app.config['LISTE_SAYFA_BOYUTU'], error_out=False)
        return render_template('musteriler/index.html', musteriler=pagination.items, pagination=pagination, q=q)
    except Exception as e:
        logger.exception("Müşteri listesi yüklenemedi")
        flash(f"Hata: {str(e)}", "danger")
        return render_template('musteriler/index.html', musteriler=[], pagination=None, q=q)


# -------------------------------------------------------------------------
# 2. Yeni Müşteri Ekleme
# -------------------------------------------------------------------------
@musteriler_bp.route('/ekle', methods=['GET', 'POST'])
def ekle():
    form = MusteriForm()
    if form.validate_on_submit():
        try:
            musteri = formdan_musteriye(form, Musteri())
            db.session.add(musteri)
            db.session.commit()
            flash('Müşteri eklendi!', 'success')
            # Tur formundan gelindiyse taslağa geri dön
            if request.args.get('tura_don'):
                return redirect(url_for('turlar.ekle', taslak=1))
            return redirect(url_for('musteriler.index'))
        except Exception as e:
            db.session.rollback()
            logger.exception("Müşteri eklenemedi")
            flash(f"Hata: {str(e)}", "danger")
    return render_template('musteriler/ekle.html', form=form)


# -------------------------------------------------------------------------
# 3. Müşteri Düzenleme
# -------------------------------------------------------------------------
@musteriler_bp.route('/duzelt/<id>', methods=['GET', 'POST'])
def duzelt(id):
    musteri = Musteri.query.get_or_404(id)
    form = MusteriForm(obj=musteri)
    if form.validate_on_submit():
        try:
            formdan_musteriye(form, musteri)
            db.session.commit()
            flash('Güncellendi!', 'success')
            return redirect(url_for('musteriler.bilgi', id=musteri.id))
        except Exception as e:
            db.session.rollback()
            logger.exception("Müşteri güncellenemedi: %s", id)
            flash(f"Hata: {str(e)}", "danger")
    return render_template('musteriler/duzelt.html', form=form, musteri=musteri)


# -------------------------------------------------------------------------
# 4. Müşteri Silme
# -------------------------------------------------------------------------
@musteriler_bp.route('/sil/<id>', methods=['POST'])
def sil(id):
    musteri = Musteri.query.get_or_404(id)
    try:
        ad = musteri.ad
        # Turlar silinmez, sadece bağlantı kalkar
        for tur in musteri.turlar:
            tur.musteri_id = None
        db.session.delete(musteri)
        db.session.commit()
        flash(f"'{ad}' silindi.", 'success')
    except Exception as e:
        db.session.rollback()
        logger.exception("Müşteri silinemedi: %s", id)
        flash(f"Hata: {str(e)}", 'danger')
    return redirect(url_for('musteriler.index', page=request.args.get('page', 1, type=int), q=request.args.get('q', '')))


# -------------------------------------------------------------------------
# 5. Müşteri Bilgi Sayfası
# -------------------------------------------------------------------------
@musteriler_bp.route('/bilgi/<id>')
def bilgi(id):
    musteri = Musteri.query.get_or_404(id)
    turlar = musterinin_turlari(musteri)
    # Müşterinin turlarından tahsil edilen tutarlar (finans kaydı yok)
    ozet = summarize_by_currency([], turlar)
    return render_template('musteriler/bilgi.html', musteri=musteri, turlar=turlar, ozet=ozet)
