"""TCMB kurları ve çevirici. Ağ çağrısı mock'lanır."""
from decimal import Decimal
from unittest import mock

import requests

from app.doviz.servis import tcmb_xml_coz, get_doviz_kurlari, convert_currency

TCMB_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<Tarih_Date Tarih="14.03.2025" Date="03/14/2025">
  <Currency CrossOrder="0" Kod="USD" CurrencyCode="USD">
    <Unit>1</Unit><Isim>ABD DOLARI</Isim>
    <ForexBuying>36.5000</ForexBuying><ForexSelling>36.6000</ForexSelling>
  </Currency>
  <Currency CrossOrder="9" Kod="EUR" CurrencyCode="EUR">
    <Unit>1</Unit><Isim>EURO</Isim>
    <ForexBuying>39.8000</ForexBuying><ForexSelling>39.9000</ForexSelling>
  </Currency>
  <Currency CrossOrder="7" Kod="JPY" CurrencyCode="JPY">
    <Unit>100</Unit><Isim>JAPON YENI</Isim>
    <ForexBuying>24.5000</ForexBuying><ForexSelling>24.7000</ForexSelling>
  </Currency>
  <Currency CrossOrder="20" Kod="SAR" CurrencyCode="SAR">
    <Unit>1</Unit><Isim>SUUDI ARABISTAN RIYALI</Isim>
    <ForexBuying>9.7300</ForexBuying><ForexSelling></ForexSelling>
  </Currency>
</Tarih_Date>
"""

KURLAR = [
    {'code': 'TRY', 'name': 'Türk Lirası', 'buying': 1.0, 'selling': 1.0},
    {'code': 'USD', 'name': 'Amerikan Doları', 'buying': 36.5, 'selling': 36.6},
    {'code': 'EUR', 'name': 'Euro', 'buying': 39.8, 'selling': 40.0},
]


def _yanit(icerik=TCMB_XML, durum=200):
    yanit = mock.Mock()
    yanit.content = icerik
    yanit.status_code = durum
    if durum >= 400:
        yanit.raise_for_status.side_effect = requests.HTTPError(f"{durum} Server Error")
    return yanit


class TestTcmbXmlCoz:

    def test_takip_edilen_kurlar(self):
        kurlar = tcmb_xml_coz(TCMB_XML)
        assert [k['code'] for k in kurlar] == ['TRY', 'USD', 'EUR']
        assert kurlar[0]['buying'] == kurlar[0]['selling'] == 1.0
        assert kurlar[1] == {'code': 'USD', 'name': 'Amerikan Doları', 'buying': 36.5, 'selling': 36.6}

    def test_eksik_satis_kuru_atlanir(self):
        assert 'SAR' not in [k['code'] for k in tcmb_xml_coz(TCMB_XML)]


class TestGetDovizKurlari:

    def test_basarili_yanit(self):
        with mock.patch('app.doviz.servis.requests.get', return_value=_yanit()) as get:
            sonuc = get_doviz_kurlari(url='http://kur.test/today.xml', timeout=3)
        get.assert_called_once_with('http://kur.test/today.xml', verify=False, timeout=3)
        assert sonuc['error'] is None
        assert sonuc['lastUpdated']
        assert len(sonuc['rates']) == 3

    def test_ag_hatasi_hata_mesaji_doner(self):
        with mock.patch('app.doviz.servis.requests.get', side_effect=requests.ConnectionError('bağlantı yok')):
            sonuc = get_doviz_kurlari()
        assert sonuc['rates'] == []
        assert sonuc['lastUpdated'] is None
        assert sonuc['error'].startswith('Canlı döviz kurları alınamadı')

    def test_http_hatasi(self):
        with mock.patch('app.doviz.servis.requests.get', return_value=_yanit(durum=503)):
            assert get_doviz_kurlari()['rates'] == []

    def test_bozuk_xml(self):
        with mock.patch('app.doviz.servis.requests.get', return_value=_yanit(b'<Tarih_Date><Currency')):
            assert get_doviz_kurlari()['error']

    def test_kur_bulunamazsa_hata(self):
        with mock.patch('app.doviz.servis.requests.get', return_value=_yanit(b'<Tarih_Date/>')):
            assert get_doviz_kurlari()['error']


class TestConvertCurrency:

    def test_ayni_para_birimi(self):
        assert convert_currency(100, 'usd', 'USD', KURLAR) == Decimal('100')

    def test_tryden_dovize_satis_kuruna_bolunur(self):
        assert convert_currency(400, 'TRY', 'EUR', KURLAR) == Decimal('10')

    def test_dovizden_trye_alis_kuruyla_carpilir(self):
        assert convert_currency(10, 'USD', 'TRY', KURLAR) == Decimal('365.0')

    def test_capraz_kur_try_uzerinden(self):
        assert convert_currency(80, 'EUR', 'USD', KURLAR) == Decimal('80') * Decimal('39.8') / Decimal('36.6')

    def test_bilinmeyen_kod_tutari_aynen_dondurur(self):
        assert convert_currency(55, 'XYZ', 'TRY', KURLAR) == Decimal('55')
        assert convert_currency('1.000,00', 'TRY', 'JPY', []) == Decimal('1000.00')
