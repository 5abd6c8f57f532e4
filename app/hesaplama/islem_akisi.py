"""
Tur satışları ve finans kayıtlarını tek bir "Son İşlemler" akışında birleştirir.
"""
import math
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from app.hesaplama.doviz_ozeti import tur_gider_toplami, tur_geliri
from app.hesaplama.kayitlar import (
    GELIR, SIFIR, TUR_GIDERI_KATEGORISI,
    as_ledger_entry, as_tour_sale, tarih_coz,
)

TUR = 'tour'
FINANS = 'finance'


@dataclass
class FeedRow:
    tur: str
    id: Optional[str]
    tarih: Optional[datetime]
    seri_no: str
    ad: str
    musteri_adi: str
    tutarlar: Dict[str, Decimal] = field(default_factory=dict)
    nominal_tutar: Decimal = SIFIR
    para_birimi: Optional[str] = None
    durum: Optional[str] = None
    kategori: Optional[str] = None
    ilgili_tur_id: Optional[str] = None
    sentetik: bool = False

    @property
    def tur_akisinda_mi(self) -> bool:
        """Tur satırı veya turun gider toplamı satırı."""
        return self.tur == TUR or self.sentetik


@dataclass
class Sayfa:
    """flask_sqlalchemy Pagination ile aynı isimleri taşıyan basit sayfa nesnesi."""
    items: list
    page: int
    per_page: int
    total: int

    @property
    def pages(self) -> int:
        if self.per_page <= 0:
            return 0
        return int(math.ceil(self.total / float(self.per_page)))

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.pages

    @property
    def prev_num(self) -> Optional[int]:
        return self.page - 1 if self.has_prev else None

    @property
    def next_num(self) -> Optional[int]:
        return self.page + 1 if self.has_next else None


def _sifir_olmayanlar(toplamlar: Dict[str, Decimal]) -> Dict[str, Decimal]:
    return {kod: tutar for kod, tutar in toplamlar.items() if tutar != 0}


def _tur_seri_no(tur) -> str:
    if tur.seri_no:
        return tur.seri_no
    if tur.id:
        return tur.id[-4:]
    return 'INV'


def build_transaction_feed(ledger, tours) -> List[FeedRow]:
    """
    Tur satırları, her turun sentetik gider toplamı satırı ve tura bağlı
    olmayan finans kayıtlarından tarihe göre (yeniden eskiye) sıralı bir akış üretir.

    Aynı tarihte bir turun kendi satırı her zaman gider toplamı satırının
    hemen önünde durur.
    """
    kayitlar = [as_ledger_entry(k) for k in (ledger or [])]
    turlar = [as_tour_sale(t) for t in (tours or [])]
    tur_idleri = {t.id for t in turlar if t.id}

    # Tura bağlı gider kayıtlarını turlara dağıt. 'Tur Gideri' kayıtları gömülü
    # gider kalemlerinin kopyasıdır, ikinci kez eklenmez.
    tura_bagli = {}
    bagimsiz = []
    for kayit in kayitlar:
        if kayit.ilgili_tur_id and kayit.ilgili_tur_id in tur_idleri and kayit.gider_mi:
            if kayit.kategori != TUR_GIDERI_KATEGORISI:
                tura_bagli.setdefault(kayit.ilgili_tur_id, []).append(kayit)
            continue
        bagimsiz.append(kayit)

    satirlar: List[FeedRow] = []

    for tur in turlar:
        seri_no = _tur_seri_no(tur)
        musteri = tur.musteri_adi or '-'
        satirlar.append(FeedRow(
            tur=TUR,
            id=tur.id,
            tarih=tur.tur_tarihi,
            seri_no=seri_no,
            ad=tur.tur_adi or 'Tur Satışı',
            musteri_adi=musteri,
            tutarlar=_sifir_olmayanlar(tur_geliri(tur)),
            nominal_tutar=tur.toplam_fiyat,
            para_birimi=tur.para_birimi,
            durum=tur.odeme_durumu,
        ))

        giderler = dict(tur_gider_toplami(tur))
        for kayit in tura_bagli.get(tur.id, []):
            giderler[kayit.para_birimi] = giderler.get(kayit.para_birimi, SIFIR) + kayit.tutar
        giderler = _sifir_olmayanlar(giderler)
        if not giderler:
            continue

        satirlar.append(FeedRow(
            tur=FINANS,
            id=f"{tur.id}-giderler" if tur.id else None,
            tarih=tur.tur_tarihi,
            seri_no=f"F{seri_no}",
            ad='Tur Gider Toplamı',
            musteri_adi=musteri,
            tutarlar=giderler,
            para_birimi=next(iter(giderler)),
            durum='expense',
            kategori=TUR_GIDERI_KATEGORISI,
            ilgili_tur_id=tur.id,
            sentetik=True,
        ))

    # Gelir ve giderler için ayrı sayaçlar, ikisi de 1'den başlar
    gelir_sayaci = 1
    gider_sayaci = 1
    for kayit in bagimsiz:
        if kayit.tip == GELIR:
            seri_no = f"F{gelir_sayaci}"
            gelir_sayaci += 1
        else:
            seri_no = f"F{gider_sayaci}"
            gider_sayaci += 1

        satirlar.append(FeedRow(
            tur=FINANS,
            id=kayit.id,
            tarih=kayit.tarih,
            seri_no=seri_no,
            ad='Gelir Kaydı' if kayit.tip == GELIR else 'Gider Kaydı',
            musteri_adi=kayit.aciklama or '-',
            tutarlar=_sifir_olmayanlar({kayit.para_birimi: kayit.tutar}),
            nominal_tutar=kayit.tutar,
            para_birimi=kayit.para_birimi,
            durum=kayit.tip,
            kategori=kayit.kategori or 'Genel',
            ilgili_tur_id=kayit.ilgili_tur_id,
        ))

    # sort() kararlıdır (reverse=True iken de); eşit tarihlerde ekleme sırası korunur
    satirlar.sort(key=lambda s: (s.tarih is not None, s.tarih or datetime.min), reverse=True)
    return satirlar


def tur_akisi(akis: List[FeedRow]) -> List[FeedRow]:
    return [s for s in akis if s.tur_akisinda_mi]


def finans_akisi(akis: List[FeedRow]) -> List[FeedRow]:
    return [s for s in akis if not s.tur_akisinda_mi]


def sayfala(satirlar: List, sayfa: int = 1, sayfa_boyutu: int = 6) -> Sayfa:
    """Listeyi sabit boyutlu sayfalara böler; sayfa numarası sınırlara çekilir."""
    sayfa_boyutu = max(int(sayfa_boyutu or 1), 1)
    toplam = len(satirlar)
    son_sayfa = max(int(math.ceil(toplam / float(sayfa_boyutu))), 1)
    try:
        sayfa = int(sayfa)
    except (TypeError, ValueError):
        sayfa = 1
    sayfa = min(max(sayfa, 1), son_sayfa)
    bas = (sayfa - 1) * sayfa_boyutu
    return Sayfa(items=satirlar[bas:bas + sayfa_boyutu], page=sayfa, per_page=sayfa_boyutu, total=toplam)


def tur_gruplari(satirlar: List[FeedRow]) -> List[List[FeedRow]]:
    """Her turun gider toplamı satırını kendi tur satırıyla aynı gruba koyar."""
    gruplar: List[List[FeedRow]] = []
    for satir in satirlar:
        if satir.sentetik and gruplar:
            bas = gruplar[-1][0]
            if bas.tur == TUR and bas.id == satir.ilgili_tur_id:
                gruplar[-1].append(satir)
                continue
        gruplar.append([satir])
    return gruplar


def gruplu_sayfala(satirlar: List[FeedRow], sayfa: int = 1, sayfa_boyutu: int = 6) -> Sayfa:
    """
    Akışı tur gruplarına göre sayfalar: bir tur satırı ile gider toplamı
    satırı ayrı sayfalara düşmez. `total` ve `pages` grup sayısına göredir.
    """
    sonuc = sayfala(tur_gruplari(satirlar), sayfa, sayfa_boyutu)
    sonuc.items = [satir for grup in sonuc.items for satir in grup]
    return sonuc


def tarih_araligina_gore_filtrele(satirlar: List[FeedRow], baslangic=None, bitis=None) -> List[FeedRow]:
    """
    Sınırlar dahil tarih filtresi. Sadece başlangıç verilirse o günden sonraki
    her şey, sadece bitiş verilirse o güne kadarki her şey eşleşir.
    Tarihi olmayan satırlar filtrelenmez.
    """
    bas = tarih_coz(baslangic)
    bit = tarih_coz(bitis)
    bas_gun = bas.date() if bas else None
    bit_gun = bit.date() if bit else None

    sonuc = []
    for satir in satirlar:
        if satir.tarih is None:
            sonuc.append(satir)
            continue
        gun = satir.tarih.date()
        if bas_gun and gun < bas_gun:
            continue
        if bit_gun and gun > bit_gun:
            continue
        sonuc.append(satir)
    return sonuc
