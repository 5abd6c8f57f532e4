"""
Para birimi bazlı finansal özet.

Panel, analiz, veri tablosu ve yazdırma ekranlarının hepsi aynı toplamları
buradan alır. Dövizler arası çevrim yapılmaz; her tutar kendi para birimi
kovasında kalır.
"""
from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List

from app.hesaplama.kayitlar import (
    KISMI, SIFIR, TAMAMLANDI, VARSAYILAN_PARA_BIRIMI,
    as_ledger_entry, as_tour_sale, para_birimi_normalize,
)

TUMU = 'all'
PARA_BIRIMI_SIRASI = ('TRY', 'USD', 'EUR', 'GBP')


@dataclass
class FinansalOzet:
    income: Decimal = SIFIR
    expense: Decimal = SIFIR
    tour_income: Decimal = SIFIR
    tour_expenses: Decimal = SIFIR

    @property
    def profit(self) -> Decimal:
        return self.income - self.expense

    @property
    def total_income(self) -> Decimal:
        return self.income + self.tour_income

    @property
    def total_profit(self) -> Decimal:
        # tour_expenses zaten expense içinde; ikinci kez düşülmez
        return self.total_income - self.expense

    @property
    def balance(self) -> Decimal:
        return self.total_profit

    @property
    def other_expenses(self) -> Decimal:
        return self.expense - self.tour_expenses

    def as_dict(self) -> Dict[str, Decimal]:
        return {
            'income': self.income,
            'expense': self.expense,
            'tourIncome': self.tour_income,
            'tourExpenses': self.tour_expenses,
            'otherExpenses': self.other_expenses,
            'profit': self.profit,
            'totalIncome': self.total_income,
            'totalProfit': self.total_profit,
            'balance': self.balance,
        }


def para_birimlerini_sirala(kodlar: Iterable[str]) -> List[str]:
    """Önce TRY, USD, EUR, GBP; kalanlar alfabetik."""
    def anahtar(kod):
        if kod in PARA_BIRIMI_SIRASI:
            return (0, PARA_BIRIMI_SIRASI.index(kod), '')
        return (1, 0, kod)
    return sorted(set(kodlar), key=anahtar)


def tur_geliri(tur) -> Dict[str, Decimal]:
    """
    Bir tur satışının tahsil edilmiş (tanınan) gelirini para birimine göre döndürür.

    - completed: toplam fiyat, tur para biriminde. Aktiviteler ayrıca EKLENMEZ,
      toplam fiyatın içinde sayılır.
    - partial: kısmi ödeme tutarı + kendi kısmi ödemesi olan her aktivitenin
      kısmi tutarı (aktivitenin para biriminde).
    - pending / refunded: gelir yok.
    """
    tur = as_tour_sale(tur)
    toplamlar: Dict[str, Decimal] = {}

    if tur.odeme_durumu == TAMAMLANDI:
        toplamlar[tur.para_birimi] = tur.toplam_fiyat
    elif tur.odeme_durumu == KISMI:
        if tur.kismi_odeme_tutari is not None:
            kod = tur.kismi_odeme_para_birimi or tur.para_birimi
            toplamlar[kod] = toplamlar.get(kod, SIFIR) + tur.kismi_odeme_tutari
        for aktivite in tur.aktiviteler:
            if not aktivite.kismi_odeme_tutari:
                continue
            kod = aktivite.kismi_odeme_para_birimi or aktivite.para_birimi
            toplamlar[kod] = toplamlar.get(kod, SIFIR) + aktivite.kismi_odeme_tutari

    return toplamlar


def tur_gider_toplami(tur) -> Dict[str, Decimal]:
    """Turun gömülü gider kalemlerinin para birimine göre toplamı."""
    tur = as_tour_sale(tur)
    toplamlar: Dict[str, Decimal] = {}
    for gider in tur.giderler:
        toplamlar[gider.para_birimi] = toplamlar.get(gider.para_birimi, SIFIR) + gider.tutar
    return toplamlar


def summarize_by_currency(ledger, tours, currency_filter=TUMU) -> Dict[str, FinansalOzet]:
    """
    Finans kayıtları ve tur satışlarından para birimi bazlı özet üretir.

    currency_filter belirli bir kod ise sadece o kod döner. 'all' ise girdide
    görülen bütün kodlar (büyük harfe çevrilmiş) döner; hiç kod yoksa sıfırlı
    bir TRY özeti döner.
    """
    kayitlar = [as_ledger_entry(k) for k in (ledger or [])]
    turlar = [as_tour_sale(t) for t in (tours or [])]

    gelir = defaultdict(lambda: SIFIR)
    gider = defaultdict(lambda: SIFIR)
    tur_gideri = defaultdict(lambda: SIFIR)
    tur_geliri_toplam = defaultdict(lambda: SIFIR)
    gorulen = set()

    for kayit in kayitlar:
        kod = kayit.para_birimi
        gorulen.add(kod)
        if kayit.gelir_mi:
            gelir[kod] += kayit.tutar
        elif kayit.gider_mi:
            gider[kod] += kayit.tutar
            if kayit.tur_gideri_mi:
                tur_gideri[kod] += kayit.tutar

    for tur in turlar:
        gorulen.add(tur.para_birimi)
        for kod, tutar in tur_geliri(tur).items():
            gorulen.add(kod)
            tur_geliri_toplam[kod] += tutar

    if currency_filter is not None and str(currency_filter).strip().lower() != TUMU:
        calisma_kumesi = [para_birimi_normalize(currency_filter)]
    else:
        calisma_kumesi = para_birimlerini_sirala(gorulen) or [VARSAYILAN_PARA_BIRIMI]

    return {
        kod: FinansalOzet(
            income=gelir[kod],
            expense=gider[kod],
            tour_income=tur_geliri_toplam[kod],
            tour_expenses=tur_gideri[kod],
        )
        for kod in calisma_kumesi
    }
