"""Panel ve analiz ekranlarının hesapları."""
from datetime import datetime
from decimal import Decimal

from app.hesaplama import (
    panel_ozeti, uyruk_dagilimi, referans_dagilimi, destinasyon_istatistikleri,
    aylik_istatistikler, kayitlari_filtrele,
)
from app.hesaplama.analiz import tarih_araliginda_mi, BELIRTILMEMIS
from app.utils import REFERANS_KAYNAKLARI
from tests.conftest import gelir, gider, tur, tur_gideri

BUGUN = datetime(2025, 6, 15)


class TestPanelOzeti:

    def _veri(self):
        ledger = [
            gelir(500, 'TRY'),
            gider(200, 'TRY', kategori='Tur Gideri', ilgili_tur_id='t1'),
            gider(50, 'TRY', kategori='Kira'),
        ]
        turlar = [
            tur(id='t1', toplam=1000, tarih=datetime(2025, 5, 1), giderler=[tur_gideri(200)]),
            tur(id='t2', durum='pending', toplam=300, para_birimi='USD', tarih=datetime(2025, 7, 1)),
        ]
        return ledger, turlar

    def test_para_bloklari(self):
        panel = panel_ozeti(*self._veri(), musteri_sayisi=4, bugun=BUGUN)
        assert panel['gelir'] == {'TRY': Decimal('500')}
        assert panel['gider'] == {'TRY': Decimal('50')}
        assert panel['tur_geliri'] == {'TRY': Decimal('1000')}
        assert panel['tur_gideri'] == {'TRY': Decimal('200')}
        assert panel['musteri_sayisi'] == 4

    def test_ozet_tum_para_birimlerini_icerir(self):
        panel = panel_ozeti(*self._veri(), bugun=BUGUN)
        assert list(panel['ozet']) == ['TRY', 'USD']
        assert panel['ozet']['TRY'].total_profit == Decimal('1250')

    def test_yaklasan_turlar(self):
        panel = panel_ozeti(*self._veri(), bugun=BUGUN)
        assert panel['yaklasan_tur_sayisi'] == 1

    def test_son_islemler_ilk_sayfa(self):
        panel = panel_ozeti(*self._veri(), bugun=BUGUN, sayfa_boyutu=2)
        sayfa = panel['son_islemler']
        assert sayfa.page == 1
        # t1 ile gider toplamı satırı aynı sayfada kalır
        assert [s.id for s in sayfa.items] == ['t2', 't1', 't1-giderler']
        assert sayfa.items[2].sentetik

    def test_bos_veri(self):
        panel = panel_ozeti([], [], bugun=BUGUN)
        assert panel['gelir'] == {}
        assert list(panel['ozet']) == ['TRY']
        assert panel['son_islemler'].total == 0


class TestDagilimlar:

    def test_uyruk_dagilimi_coktan_aza(self):
        turlar = [tur(id='1', uyruk='Almanya'), tur(id='2', uyruk='Rusya'),
                  tur(id='3', uyruk='Rusya'), tur(id='4')]
        assert uyruk_dagilimi(turlar) == [('Rusya', 2), ('Almanya', 1), (BELIRTILMEMIS, 1)]

    def test_referans_etiketleri_cevrilir(self):
        turlar = [tur(id='1', referans_kaynagi='hotel'), tur(id='2', referans_kaynagi='hotel'),
                  tur(id='3', referans_kaynagi='tiktok')]
        assert referans_dagilimi(turlar, REFERANS_KAYNAKLARI) == [('Otel Yönlendirmesi', 2), ('tiktok', 1)]

    def test_destinasyon_istatistikleri(self):
        turlar = [
            tur(id='1', destinasyon='Kapadokya', toplam=100, para_birimi='USD'),
            tur(id='2', destinasyon='Kapadokya', toplam=50, para_birimi='EUR'),
            tur(id='3', destinasyon='Efes', durum='pending', toplam=80),
        ]
        sonuc = destinasyon_istatistikleri(turlar)
        assert [d['ad'] for d in sonuc] == ['Kapadokya', 'Efes']
        assert sonuc[0]['tur_sayisi'] == 2
        assert sonuc[0]['gelir'] == {'USD': Decimal('100'), 'EUR': Decimal('50')}
        assert sonuc[1]['gelir'] == {}


class TestAylikIstatistikler:

    def test_son_on_iki_ay_eskiden_yeniye(self):
        aylar = aylik_istatistikler([], bugun=BUGUN)
        assert len(aylar) == 12
        assert aylar[0]['ad'] == 'Tem 2024'
        assert aylar[-1]['ad'] == 'Haz 2025'

    def test_turlar_aylara_dagilir(self):
        turlar = [
            tur(id='1', tarih=datetime(2025, 6, 2), toplam=100),
            tur(id='2', tarih=datetime(2025, 6, 20), toplam=50),
            tur(id='3', tarih=datetime(2023, 1, 1), toplam=999),
        ]
        aylar = aylik_istatistikler(turlar, bugun=BUGUN)
        assert aylar[-1]['tur_sayisi'] == 2
        assert aylar[-1]['gelir'] == {'TRY': Decimal('150')}
        assert sum(a['tur_sayisi'] for a in aylar) == 2


class TestTarihAraligi:

    def test_tarihsiz_kayit_her_araliga_girer(self):
        assert tarih_araliginda_mi(None, '2025-01-01', '2025-01-31')

    def test_kayit_ve_turlar_kendi_tarihleriyle_suzulur(self):
        ledger = [gelir(1, tarih=datetime(2025, 1, 5)), gelir(2, tarih=datetime(2025, 2, 5))]
        turlar = [tur(id='1', tarih=datetime(2025, 1, 31)), tur(id='2', tarih=datetime(2025, 3, 1))]
        kayitlar, secilen = kayitlari_filtrele(ledger, turlar, '2025-01-01', '2025-01-31')
        assert [k.tutar for k in kayitlar] == [Decimal('1')]
        assert [t.id for t in secilen] == ['1']
