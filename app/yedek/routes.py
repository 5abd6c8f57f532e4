import json
import logging
from datetime import date

from flask import render_template, redirect, url_for, flash, request, Response

from app.yedek import yedek_bp
from app.yedek.servis import yedek_olustur, yedek_yukle, YedekHatasi

logger = logging.getLogger(__name__)


@yedek_bp.route('/')
def index():
    return render_template('yedek/index.html')


@yedek_bp.route('/indir')
def indir():
    """Bütün verileri JSON dosyası olarak indirir."""
    veri = yedek_olustur()
    dosya_adi = f"acente_yedek_{date.today().isoformat()}.json"
    return Response(
        json.dumps(veri, ensure_ascii=False, indent=2),
        mimetype='application/json',
        headers={'Content-Disposition': f'attachment; filename={dosya_adi}'},
    )


@yedek_bp.route('/yukle', methods=['POST'])
def yukle():
    dosya = request.files.get('dosya')
    if not dosya or not dosya.filename:
        flash('Dosya seçilmedi.', 'warning')
        return redirect(url_for('yedek.index'))
    try:
        veri = json.load(dosya.stream)
        sonuc = yedek_yukle(veri)
        flash(f"Yedek yüklendi: {sonuc['tours']} tur, {sonuc['financials']} finans kaydı, "
              f"{sonuc['customers']} müşteri.", 'success')
    except (json.JSONDecodeError, UnicodeDecodeError, YedekHatasi) as e:
        logger.warning("Yedek dosyası reddedildi: %s", e)
        flash(f"Geçersiz yedek dosyası: {str(e)}", 'danger')
    except Exception as e:
        logger.exception("Yedek yüklenirken hata")
        flash(f"Hata: {str(e)}", 'danger')
    return redirect(url_for('yedek.index'))
