"""
TCMB günlük kurları ve kurlar arası çevirme.

Finansal özetler dövizleri birbirine çevirmez; buradaki kurlar sadece
bilgi ekranı ve çevirici içindir.
"""
import logging
import xml.etree.ElementTree as ET
from datetime import datetime
from decimal import Decimal, InvalidOperation

import requests
import urllib3

from app.hesaplama.kayitlar import tutar_coz

# SSL uyarılarını gizle
urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

logger = logging.getLogger(__name__)

TCMB_URL = "https://www.tcmb.gov.tr/kurlar/today.xml"

DOVIZ_ADLARI = {
    'TRY': 'Türk Lirası',
    'USD': 'Amerikan Doları',
    'EUR': 'Euro',
    'GBP': 'İngiliz Sterlini',
    'SAR': 'Suudi Arabistan Riyali',
}
TAKIP_EDILEN = ('USD', 'EUR', 'GBP', 'SAR')


def _kur(deger, birim):
    if deger is None or not (deger.text or '').strip():
        return None
    try:
        return Decimal(deger.text.strip()) / Decimal(birim or 1)
    except (InvalidOperation, ValueError):
        return None


def tcmb_xml_coz(icerik):
    """TCMB today.xml içeriğinden [{code, name, buying, selling}] listesi; TRY 1/1 başta."""
    root = ET.fromstring(icerik)
    kurlar = [{'code': 'TRY', 'name': DOVIZ_ADLARI['TRY'], 'buying': 1.0, 'selling': 1.0}]
    for kod in TAKIP_EDILEN:
        dugum = root.find(f"./Currency[@CurrencyCode='{kod}']")
        if dugum is None:
            continue
        birim = (dugum.findtext('Unit') or '1').strip()
        alis = _kur(dugum.find('ForexBuying'), birim)
        satis = _kur(dugum.find('ForexSelling'), birim)
        if alis is None or satis is None:
            continue
        kurlar.append({
            'code': kod,
            'name': DOVIZ_ADLARI.get(kod, kod),
            'buying': float(round(alis, 4)),
            'selling': float(round(satis, 4)),
        })
    return kurlar


def get_doviz_kurlari(url=TCMB_URL, timeout=5, verify=False):
    """
    Güncel kurları çeker. Hata durumunda istisna fırlatmaz;
    {'rates': [], 'lastUpdated': None, 'error': '...'} döner.
    """
    try:
        response = requests.get(url, verify=verify, timeout=timeout)
        response.raise_for_status()
        kurlar = tcmb_xml_coz(response.content)
        if len(kurlar) < 2:
            raise ValueError("Kur verisi alınamadı")
        return {'rates': kurlar, 'lastUpdated': datetime.now().isoformat(), 'error': None}
    except (requests.RequestException, ET.ParseError, ValueError) as e:
        logger.error("Döviz kurları alınamadı: %s", e)
        return {
            'rates': [],
            'lastUpdated': None,
            'error': f"Canlı döviz kurları alınamadı. Hata: {e}",
        }


def convert_currency(tutar, kaynak, hedef, kurlar):
    """
    TRY üzerinden çevirir: TRY->X satış kuruna böler, X->TRY alış kuruyla çarpar,
    X->Y önce TRY'ye sonra Y'ye. Bilinmeyen kodda tutar aynen döner.
    """
    miktar = tutar_coz(tutar)
    kaynak = (kaynak or 'TRY').upper()
    hedef = (hedef or 'TRY').upper()
    tablo = {k['code']: k for k in (kurlar or [])}

    if kaynak == hedef:
        return miktar

    def alis(kod):
        return Decimal(str(tablo[kod]['buying']))

    def satis(kod):
        return Decimal(str(tablo[kod]['selling']))

    try:
        if kaynak == 'TRY' and hedef in tablo:
            return miktar / satis(hedef)
        if hedef == 'TRY' and kaynak in tablo:
            return miktar * alis(kaynak)
        if kaynak in tablo and hedef in tablo:
            return miktar * alis(kaynak) / satis(hedef)
    except (InvalidOperation, ZeroDivisionError, KeyError):
        logger.warning("Kur çevrimi yapılamadı: %s -> %s", kaynak, hedef)
    return miktar
