"""Son İşlemler akışı: birleştirme, sıralama, sayfalama ve tarih filtresi."""
from datetime import datetime
from decimal import Decimal

from app.hesaplama import (
    build_transaction_feed, tur_akisi, finans_akisi, sayfala, gruplu_sayfala, tur_gruplari,
    tarih_araligina_gore_filtrele,
)
from tests.conftest import gelir, gider, tur, tur_gideri


class TestBuildTransactionFeed:

    def test_ayni_tarihte_tur_satiri_gider_satirindan_once(self):
        gun = datetime(2025, 5, 1)
        turlar = [
            tur(id='a', seri_no='A1', tarih=gun, giderler=[tur_gideri(10)]),
            tur(id='b', seri_no='B1', tarih=gun, giderler=[tur_gideri(20)]),
        ]
        akis = build_transaction_feed([], turlar)

        assert [s.seri_no for s in akis] == ['A1', 'FA1', 'B1', 'FB1']
        assert akis[1].sentetik and akis[1].ilgili_tur_id == 'a'

    def test_tarihe_gore_yeniden_eskiye(self):
        turlar = [
            tur(id='eski', seri_no='E', tarih=datetime(2025, 1, 1)),
            tur(id='yeni', seri_no='Y', tarih=datetime(2025, 6, 1)),
        ]
        ledger = [gelir(5, tarih=datetime(2025, 3, 1))]
        akis = build_transaction_feed(ledger, turlar)
        assert [s.seri_no for s in akis] == ['Y', 'F1', 'E']

    def test_gider_toplami_gomulu_ve_bagli_kayitlari_toplar(self):
        t = tur(id='t1', giderler=[tur_gideri(100, 'TRY'), tur_gideri(15, 'EUR')])
        ledger = [gider(40, 'TRY', ilgili_tur_id='t1', kategori='Rehber')]
        sentetik = [s for s in build_transaction_feed(ledger, [t]) if s.sentetik][0]
        assert sentetik.tutarlar == {'TRY': Decimal('140'), 'EUR': Decimal('15')}

    def test_tur_gideri_kopyalari_ikinci_kez_sayilmaz(self):
        t = tur(id='t1', giderler=[tur_gideri(100)])
        ledger = [gider(100, kategori='Tur Gideri', ilgili_tur_id='t1')]
        akis = build_transaction_feed(ledger, [t])
        assert len(akis) == 2

    def test_sozluk_olmayan_kayit_ve_skaler_gider_listesi(self):
        turlar = [{'id': 't', 'paymentStatus': 'completed', 'totalPrice': 1, 'expenses': 5}]
        akis = build_transaction_feed(['x', 5], turlar)
        assert [s.tur for s in akis].count('tour') == 1
        assert not any(s.sentetik for s in akis)
        assert all(s.tutarlar == {} for s in akis if s.tur == 'finance')
        assert akis[1].tutarlar == {'TRY': Decimal('100')}

    def test_sifir_giderli_turda_sentetik_satir_yok(self):
        akis = build_transaction_feed([], [tur(id='t1', giderler=[tur_gideri(0)])])
        assert len(akis) == 1 and akis[0].tur == 'tour'

    def test_bagimsiz_kayitlar_ayri_sayaclarla_numaralanir(self):
        gun = datetime(2025, 2, 1)
        ledger = [gelir(1, tarih=gun), gider(2, tarih=gun), gelir(3, tarih=gun), gider(4, tarih=gun)]
        etiketler = [(s.durum, s.seri_no) for s in build_transaction_feed(ledger, [])]
        assert etiketler == [('income', 'F1'), ('expense', 'F1'), ('income', 'F2'), ('expense', 'F2')]

    def test_bilinmeyen_tura_bagli_kayit_bagimsiz_kalir(self):
        akis = build_transaction_feed([gider(9, ilgili_tur_id='yok')], [])
        assert len(akis) == 1 and not akis[0].sentetik

    def test_bekleyen_tur_nominal_tutari_tasir(self):
        akis = build_transaction_feed([], [tur(durum='pending', toplam=750, para_birimi='USD')])
        assert akis[0].tutarlar == {}
        assert akis[0].nominal_tutar == Decimal('750')

    def test_bozuk_girdi_hata_vermez(self):
        akis = build_transaction_feed([{'type': 'income', 'amount': '$ 1x2'}], [{'id': 'x', 'totalPrice': None}])
        assert len(akis) == 2


class TestAkisBolmeVeSayfalama:

    def _akis(self):
        ledger = [gelir(i, tarih=datetime(2025, 1, i + 1)) for i in range(8)]
        turlar = [tur(id=f't{i}', tarih=datetime(2025, 2, i + 1), giderler=[tur_gideri(1)]) for i in range(4)]
        return build_transaction_feed(ledger, turlar)

    def test_tur_ve_finans_akislari_ayrisir(self):
        akis = self._akis()
        assert len(tur_akisi(akis)) == 8
        assert len(finans_akisi(akis)) == 8
        assert all(s.tur == 'finance' and not s.sentetik for s in finans_akisi(akis))

    def test_sayfala(self):
        sayfa = sayfala(list(range(13)), 3, 6)
        assert sayfa.items == [12]
        assert sayfa.pages == 3
        assert sayfa.has_prev and not sayfa.has_next

    def test_tur_ve_gider_toplami_ayni_sayfada_kalir(self):
        turlar = [tur(id=f't{i}', seri_no=f'T{i}', tarih=datetime(2025, 2, i + 1), giderler=[tur_gideri(1)])
                  for i in range(4)]
        akis = tur_akisi(build_transaction_feed([], turlar))
        assert len(tur_gruplari(akis)) == 4

        ilk = gruplu_sayfala(akis, 1, 3)
        assert [s.seri_no for s in ilk.items] == ['T3', 'FT3', 'T2', 'FT2', 'T1', 'FT1']
        assert ilk.total == 4 and ilk.pages == 2

        son = gruplu_sayfala(akis, 2, 3)
        assert [s.seri_no for s in son.items] == ['T0', 'FT0']

    def test_gider_satiri_olmayan_tur_tek_basina_grup(self):
        akis = build_transaction_feed([gelir(5, tarih=datetime(2025, 1, 1))], [tur(id='a', tarih=datetime(2025, 2, 1))])
        assert [len(g) for g in tur_gruplari(akis)] == [1, 1]

    def test_sayfa_numarasi_sinirlara_cekilir(self):
        assert sayfala(list(range(4)), 99, 6).page == 1
        assert sayfala(list(range(10)), 0, 6).page == 1
        assert sayfala([], 'abc', 6).items == []


class TestTarihFiltresi:

    def test_sinirlar_dahil(self):
        akis = build_transaction_feed([gelir(1, tarih=datetime(2025, 3, d)) for d in (1, 10, 20)], [])
        sonuc = tarih_araligina_gore_filtrele(akis, '2025-03-01', '2025-03-10')
        assert sorted(s.tarih.day for s in sonuc) == [1, 10]

    def test_sadece_baslangic(self):
        akis = build_transaction_feed([gelir(1, tarih=datetime(2025, 3, d)) for d in (1, 10, 20)], [])
        assert len(tarih_araligina_gore_filtrele(akis, '2025-03-10', None)) == 2

    def test_tarihsiz_satir_filtrelenmez(self):
        akis = build_transaction_feed([gelir(1)], [])
        assert len(tarih_araligina_gore_filtrele(akis, '2030-01-01', '2030-12-31')) == 1
