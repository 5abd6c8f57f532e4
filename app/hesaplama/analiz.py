"""
Panel ve analiz ekranlarının sayıları. Parasal bloklar doviz_ozeti ve
islem_akisi üzerinden hesaplanır, burada tekrar toplanmaz.
"""
from collections import OrderedDict
from datetime import datetime

from app.hesaplama.doviz_ozeti import (
    TUMU, summarize_by_currency, tur_geliri, tur_gider_toplami, para_birimlerini_sirala,
)
from app.hesaplama.islem_akisi import build_transaction_feed, gruplu_sayfala
from app.hesaplama.kayitlar import SIFIR, as_ledger_entry, as_tour_sale, tarih_coz

BELIRTILMEMIS = 'Belirtilmemiş'

AY_KISALTMALARI = ['Oca', 'Şub', 'Mar', 'Nis', 'May', 'Haz', 'Tem', 'Ağu', 'Eyl', 'Eki', 'Kas', 'Ara']


def _topla(hedef, kaynak):
    for kod, tutar in kaynak.items():
        hedef[kod] = hedef.get(kod, SIFIR) + tutar
    return hedef


def _sirali_sifirsiz(toplamlar):
    return OrderedDict((kod, toplamlar[kod]) for kod in para_birimlerini_sirala(toplamlar) if toplamlar[kod] != 0)


def tarih_araliginda_mi(tarih, baslangic=None, bitis=None):
    """Sınırlar dahil; tarihi olmayan kayıtlar her aralıkta sayılır."""
    if tarih is None:
        return True
    gun = tarih.date()
    bas = tarih_coz(baslangic)
    bit = tarih_coz(bitis)
    if bas and gun < bas.date():
        return False
    if bit and gun > bit.date():
        return False
    return True


def kayitlari_filtrele(ledger, tours, baslangic=None, bitis=None):
    """Finans kayıtlarını kendi tarihine, turları tur tarihine göre süzer."""
    kayitlar = [as_ledger_entry(k) for k in (ledger or [])]
    turlar = [as_tour_sale(t) for t in (tours or [])]
    return (
        [k for k in kayitlar if tarih_araliginda_mi(k.tarih, baslangic, bitis)],
        [t for t in turlar if tarih_araliginda_mi(t.tur_tarihi, baslangic, bitis)],
    )


def panel_ozeti(ledger, tours, musteri_sayisi=0, bugun=None, sayfa=1, sayfa_boyutu=6):
    """Ana panelin bütün blokları."""
    kayitlar = [as_ledger_entry(k) for k in (ledger or [])]
    turlar = [as_tour_sale(t) for t in (tours or [])]
    bugun = bugun or datetime.now()

    ozet = summarize_by_currency(kayitlar, turlar, TUMU)

    gomulu_giderler = {}
    for tur in turlar:
        _topla(gomulu_giderler, tur_gider_toplami(tur))

    return {
        'ozet': ozet,
        'gelir': _sirali_sifirsiz({kod: o.income for kod, o in ozet.items()}),
        # Finansal gider, tur giderleri hariç
        'gider': _sirali_sifirsiz({kod: o.other_expenses for kod, o in ozet.items()}),
        'tur_geliri': _sirali_sifirsiz({kod: o.tour_income for kod, o in ozet.items()}),
        'tur_gideri': _sirali_sifirsiz(gomulu_giderler),
        'musteri_sayisi': musteri_sayisi,
        'yaklasan_tur_sayisi': sum(1 for t in turlar if t.tur_tarihi and t.tur_tarihi > bugun),
        'son_islemler': gruplu_sayfala(build_transaction_feed(kayitlar, turlar), sayfa, sayfa_boyutu),
    }


def _dagilim(degerler):
    sayac = {}
    for deger in degerler:
        sayac[deger] = sayac.get(deger, 0) + 1
    # Çoktan aza; eşitlikte isim sırası
    return sorted(sayac.items(), key=lambda x: (-x[1], x[0]))


def uyruk_dagilimi(tours):
    """Her tur bir ana müşteri sayılır."""
    return _dagilim((as_tour_sale(t).uyruk or BELIRTILMEMIS) for t in (tours or []))


def referans_dagilimi(tours, etiketler=None):
    """Referans anahtarları etiketlere çevrilir; bilinmeyen anahtar olduğu gibi kalır."""
    etiketler = etiketler or {}
    degerler = []
    for t in (tours or []):
        kaynak = as_tour_sale(t).referans_kaynagi or BELIRTILMEMIS
        degerler.append(etiketler.get(kaynak, kaynak))
    return _dagilim(degerler)


def destinasyon_istatistikleri(tours):
    sonuc = {}
    for t in (tours or []):
        tur = as_tour_sale(t)
        ad = tur.destinasyon or BELIRTILMEMIS
        satir = sonuc.setdefault(ad, {'ad': ad, 'tur_sayisi': 0, 'gelir': {}})
        satir['tur_sayisi'] += 1
        _topla(satir['gelir'], tur_geliri(tur))
    for satir in sonuc.values():
        satir['gelir'] = _sirali_sifirsiz(satir['gelir'])
    return sorted(sonuc.values(), key=lambda s: (-s['tur_sayisi'], s['ad']))


def aylik_istatistikler(tours, bugun=None, ay_sayisi=12):
    """Son `ay_sayisi` ay (bu ay dahil), eskiden yeniye."""
    bugun = bugun or datetime.now()
    aylar = OrderedDict()
    yil, ay = bugun.year, bugun.month
    for _ in range(ay_sayisi):
        aylar[(yil, ay)] = {
            'yil': yil, 'ay': ay,
            'ad': f"{AY_KISALTMALARI[ay - 1]} {yil}",
            'tur_sayisi': 0, 'gelir': {},
        }
        ay -= 1
        if ay == 0:
            yil, ay = yil - 1, 12

    for t in (tours or []):
        tur = as_tour_sale(t)
        if not tur.tur_tarihi:
            continue
        satir = aylar.get((tur.tur_tarihi.year, tur.tur_tarihi.month))
        if satir is None:
            continue
        satir['tur_sayisi'] += 1
        _topla(satir['gelir'], tur_geliri(tur))

    sonuc = list(reversed(list(aylar.values())))
    for satir in sonuc:
        satir['gelir'] = _sirali_sifirsiz(satir['gelir'])
    return sonuc
