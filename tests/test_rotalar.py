"""Blueprint rotaları için Flask test client ile uçtan uca kontroller."""
from datetime import date
from decimal import Decimal
from unittest import mock

import requests

from app.cari.models import FinansKaydi
from app.firmalar.models import Firma, Borc, BorcOdemesi, KISMEN_ODENDI
from app.musteriler.models import Musteri
from app.turlar.models import TurSatisi, TurGideri
from tests.test_doviz import TCMB_XML

TUR_FORMU = {
    'musteri_adi': 'Maria Rossi',
    'musteri_telefon': '+39 333 1234',
    'uyruk': 'İtalya',
    'referans_kaynagi': 'hotel',
    'tur_adi': 'Pamukkale Günübirlik',
    'destinasyon': 'Pamukkale',
    'tur_tarihi': '2025-04-10',
    'kisi_sayisi': '2',
    'toplam_fiyat': '1.500,00',
    'para_birimi': 'EUR',
    'odeme_durumu': 'completed',
    'odeme_yontemi': 'cash',
    'giderler-0-gider_tipi': 'ulasim',
    'giderler-0-ad': 'Minibüs',
    'giderler-0-tutar': '250',
    'giderler-0-para_birimi': 'EUR',
    'giderler-1-ad': '',
    'giderler-1-tutar': '',
    'aktiviteler-0-ad': 'Antik Havuz',
    'aktiviteler-0-fiyat': '20',
    'aktiviteler-0-para_birimi': 'EUR',
}


def _tur_ekle(db, **kwargs):
    tur = TurSatisi(seri_no='25049999TF', tur_adi='Efes', musteri_adi='Test', toplam_fiyat=Decimal('500'),
                    para_birimi='USD', odeme_durumu=kwargs.pop('odeme_durumu', 'completed'),
                    tur_tarihi=date(2025, 4, 1), **kwargs)
    db.session.add(tur)
    db.session.commit()
    return tur


class TestPanelVeListeler:

    def test_bos_sayfalar_acilir(self, client):
        for adres in ('/', '/turlar/', '/cari/', '/cari/ozet', '/musteriler/', '/firmalar/',
                      '/raporlar/', '/yedek/', '/turlar/ekle', '/cari/ekle', '/musteriler/ekle', '/firmalar/ekle'):
            assert client.get(adres).status_code == 200, adres

    def test_panel_verilerle(self, client, db):
        tur = _tur_ekle(db)
        tur.giderler = [TurGideri(ad='Otel', tutar=Decimal('120'), para_birimi='USD')]
        db.session.add(FinansKaydi(tip='income', tutar=Decimal('75'), para_birimi='TRY', aciklama='Komisyon geliri'))
        db.session.commit()

        sayfa = client.get('/').get_data(as_text=True)
        assert '25049999TF' in sayfa
        assert 'F25049999TF' in sayfa
        assert 'Komisyon geliri' in sayfa

    def test_rapor_ve_yazdirma(self, client, db):
        tur = _tur_ekle(db, destinasyon='Efes', uyruk='Almanya')
        assert 'Almanya' in client.get('/raporlar/?para_birimi=USD').get_data(as_text=True)
        assert client.get('/raporlar/yazdir?baslangic=2025-01-01').status_code == 200
        assert client.get(f'/turlar/yazdir/{tur.id}').status_code == 200
        assert client.get(f'/turlar/bilgi/{tur.id}').status_code == 200

    def test_olmayan_kayit_404(self, client):
        assert client.get('/turlar/bilgi/yok').status_code == 404
        assert client.get('/musteriler/bilgi/yok').status_code == 404
        assert client.get('/firmalar/bilgi/999').status_code == 404


class TestTurRotalari:

    def test_tur_ekle(self, client, db):
        yanit = client.post('/turlar/ekle', data=TUR_FORMU, follow_redirects=True)
        metin = yanit.get_data(as_text=True)
        assert yanit.status_code == 200
        assert 'Tur satışı başarıyla kaydedildi.' in metin
        assert 'Yeni müşteri kaydı otomatik olarak oluşturuldu.' in metin

        tur = TurSatisi.query.one()
        assert tur.toplam_fiyat == Decimal('1500')
        assert tur.seri_no.endswith('TF')
        assert len(tur.giderler) == 1
        assert len(tur.aktiviteler) == 1
        assert tur.musteri.ad == 'Maria Rossi'

        kayit = FinansKaydi.query.one()
        assert kayit.kategori == 'Tur Gideri'
        assert kayit.para_birimi == 'EUR'
        assert kayit.tutar == Decimal('250')

    def test_toplam_bossa_kisi_basi_fiyattan_hesaplanir(self, client, db):
        veri = dict(TUR_FORMU, toplam_fiyat='', kisi_basi_fiyat='300', odeme_durumu='pending')
        client.post('/turlar/ekle', data=veri)
        assert TurSatisi.query.one().toplam_fiyat == Decimal('600')
        assert FinansKaydi.query.count() == 0

    def test_kismi_odemede_tutar_zorunlu(self, client, db):
        veri = dict(TUR_FORMU, odeme_durumu='partial')
        metin = client.post('/turlar/ekle', data=veri).get_data(as_text=True)
        assert 'Kısmi ödemede alınan tutar girilmelidir.' in metin
        assert TurSatisi.query.count() == 0

    def test_bitis_tarihi_once_olamaz(self, client, db):
        veri = dict(TUR_FORMU, tur_bitis_tarihi='2025-04-01')
        metin = client.post('/turlar/ekle', data=veri).get_data(as_text=True)
        assert 'Bitiş tarihi tur tarihinden önce olamaz!' in metin

    def test_duzenle_ve_sil(self, client, db):
        client.post('/turlar/ekle', data=TUR_FORMU)
        tur = TurSatisi.query.one()

        assert client.get(f'/turlar/duzenle/{tur.id}').status_code == 200
        client.post(f'/turlar/duzenle/{tur.id}', data=dict(TUR_FORMU, odeme_durumu='refunded'))
        assert FinansKaydi.query.count() == 0

        client.post(f'/turlar/sil/{tur.id}')
        assert TurSatisi.query.count() == 0
        assert Musteri.query.count() == 1

    def test_taslak_kaydet_ve_geri_yukle(self, client):
        yanit = client.post('/turlar/taslak?next=/musteriler/ekle?tura_don=1',
                            data={'tur_adi': 'Taslak Turu', 'musteri_adi': 'Ali'})
        assert yanit.status_code == 302
        assert yanit.headers['Location'].endswith('/musteriler/ekle?tura_don=1')

        metin = client.get('/turlar/ekle?taslak=1').get_data(as_text=True)
        assert 'Taslak Turu' in metin
        assert 'Taslağı Sil' in metin

    def test_taslak_dis_adrese_yonlendirmez(self, client):
        yanit = client.post('/turlar/taslak?next=//kotu.example.com', data={'tur_adi': 'X'})
        assert yanit.headers['Location'].endswith('/musteriler/')


class TestFinansRotalari:

    def test_gelir_ekle(self, client, db):
        yanit = client.post('/cari/ekle', data={
            'tip': 'income', 'tarih': '2025-03-01', 'kategori': 'Komisyon', 'tutar': '1.250,50',
            'para_birimi': 'USD', 'odeme_yontemi': 'bankTransfer', 'ilgili_tur_id': '',
        })
        assert yanit.status_code == 302
        kayit = FinansKaydi.query.one()
        assert kayit.tutar == Decimal('1250.50')
        assert kayit.ilgili_tur_id is None

    def test_tur_gideri_kategorisi_elle_secilemez(self, client, db):
        client.post('/cari/ekle', data={
            'tip': 'expense', 'tarih': '2025-03-01', 'kategori': 'Tur Gideri', 'tutar': '10',
            'para_birimi': 'TRY', 'odeme_yontemi': 'cash', 'ilgili_tur_id': '',
        })
        assert FinansKaydi.query.count() == 0

    def test_tur_gideri_duzenlenemez_ve_silinemez(self, client, db):
        tur = _tur_ekle(db)
        kayit = FinansKaydi(tip='expense', kategori='Tur Gideri', tutar=Decimal('5'), ilgili_tur_id=tur.id)
        db.session.add(kayit)
        db.session.commit()

        yanit = client.get(f'/cari/duzenle/{kayit.id}')
        assert yanit.status_code == 302
        assert f'/turlar/duzenle/{tur.id}' in yanit.headers['Location']

        client.post(f'/cari/sil/{kayit.id}')
        assert FinansKaydi.query.count() == 1

    def test_liste_tarih_filtresi(self, client, db):
        db.session.add(FinansKaydi(tip='expense', tarih=date(2025, 1, 5), tutar=Decimal('1'), aciklama='Ocak kirası'))
        db.session.add(FinansKaydi(tip='expense', tarih=date(2025, 2, 5), tutar=Decimal('1'), aciklama='Şubat kirası'))
        db.session.commit()
        metin = client.get('/cari/?baslangic=2025-02-01').get_data(as_text=True)
        assert 'Şubat kirası' in metin
        assert 'Ocak kirası' not in metin


class TestMusteriVeFirmaRotalari:

    def test_musteri_ekle_tura_don(self, client, db):
        yanit = client.post('/musteriler/ekle?tura_don=1', data={'ad': 'Yeni Müşteri', 'uyruk': ''})
        assert yanit.status_code == 302
        assert '/turlar/ekle?taslak=1' in yanit.headers['Location']
        assert Musteri.query.one().ad == 'Yeni Müşteri'

    def test_musteri_silinince_turlari_kalir(self, client, db):
        musteri = Musteri(ad='Silinecek')
        db.session.add(musteri)
        db.session.commit()
        tur = _tur_ekle(db, musteri_id=musteri.id)

        client.post(f'/musteriler/sil/{musteri.id}')
        assert Musteri.query.count() == 0
        assert db.session.get(TurSatisi, tur.id).musteri_id is None

    def test_firma_borc_ve_odeme(self, client, db):
        client.post('/firmalar/ekle', data={'firma_adi': 'Sultan Otel', 'kategori': 'otel'})
        firma = Firma.query.one()

        client.post(f'/firmalar/{firma.id}/borc/ekle',
                    data={'tutar': '1.000,00', 'para_birimi': 'TRY', 'aciklama': 'Nisan konaklama'})
        borc = Borc.query.one()

        client.post(f'/firmalar/{firma.id}/odeme/ekle', data={
            'borc_id': str(borc.id), 'tutar': '400', 'para_birimi': 'USD', 'odeme_tarihi': '2025-04-02',
        })
        db.session.expire_all()
        assert borc.durum == KISMEN_ODENDI
        assert BorcOdemesi.query.one().para_birimi == 'TRY'
        assert '600,00' in client.get(f'/firmalar/bilgi/{firma.id}').get_data(as_text=True)

        odeme = BorcOdemesi.query.one()
        client.post(f'/firmalar/odeme/sil/{odeme.id}')
        db.session.expire_all()
        assert borc.odenen_tutar == Decimal('0')

    def test_firma_arsivlenir(self, client, db):
        db.session.add(Firma(firma_adi='Eski Firma'))
        db.session.commit()
        firma = Firma.query.one()
        client.post(f'/firmalar/sil/{firma.id}', follow_redirects=True)
        db.session.expire_all()
        assert firma.is_active is False
        assert 'Eski Firma' not in client.get('/firmalar/').get_data(as_text=True)


class TestDovizRotalari:

    def test_cevirici(self, client):
        yanit = mock.Mock(content=TCMB_XML)
        with mock.patch('app.doviz.servis.requests.get', return_value=yanit):
            metin = client.get('/doviz/?tutar=100&kaynak=USD&hedef=TRY').get_data(as_text=True)
        assert '36.5000' in metin
        assert '3.650,00' in metin

    def test_api_hata_503(self, client):
        with mock.patch('app.doviz.servis.requests.get', side_effect=requests.Timeout('zaman aşımı')):
            yanit = client.get('/doviz/api/kurlar')
        assert yanit.status_code == 503
        assert 'error' in yanit.get_json()

    def test_api_kurlar(self, client):
        with mock.patch('app.doviz.servis.requests.get', return_value=mock.Mock(content=TCMB_XML)):
            veri = client.get('/doviz/api/kurlar').get_json()
        assert [k['code'] for k in veri['rates']] == ['TRY', 'USD', 'EUR']
