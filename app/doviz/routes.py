import logging

from flask import render_template, request, jsonify, current_app

from app.doviz import doviz_bp
from app.doviz.forms import DovizCeviriciForm
from app.doviz.servis import get_doviz_kurlari, convert_currency

logger = logging.getLogger(__name__)


def guncel_kurlar():
    return get_doviz_kurlari(
        url=current_app.config['DOVIZ_KAYNAK_URL'],
        timeout=current_app.config['DOVIZ_ZAMAN_ASIMI'],
        verify=current_app.config['DOVIZ_SSL_DOGRULA'],
    )


@doviz_bp.route('/')
@doviz_bp.route('/index')
def index():
    kurlar = guncel_kurlar()
    form = DovizCeviriciForm(formdata=request.args if request.args else None)
    sonuc = None
    if request.args and form.validate() and kurlar['rates']:
        sonuc = convert_currency(form.tutar.data, form.kaynak.data, form.hedef.data, kurlar['rates'])
    return render_template('doviz/index.html', kurlar=kurlar, form=form, sonuc=sonuc)


@doviz_bp.route('/api/kurlar')
def api_kurlar():
    kurlar = guncel_kurlar()
    if kurlar['error']:
        return jsonify({'error': kurlar['error']}), 503
    return jsonify({'rates': kurlar['rates'], 'lastUpdated': kurlar['lastUpdated']})
