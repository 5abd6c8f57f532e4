"""
Hesaplama çekirdeğinin tükettiği düz kayıt tipleri.

Veritabanı modelleri (TurSatisi, FinansKaydi, Musteri) bu kayıtlara
`to_kayit()` ile, yedek/JSON verileri ise `*_from_dict` fonksiyonlarıyla
çevrilir. Eksik veya bozuk alanlar burada bir kez varsayılana çekilir;
çekirdek fonksiyonlar tekrar `x or varsayilan` kontrolü yapmaz.
"""
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, List, Mapping, Optional

VARSAYILAN_PARA_BIRIMI = 'TRY'
TUR_GIDERI_KATEGORISI = 'Tur Gideri'

GELIR = 'income'
GIDER = 'expense'

BEKLEMEDE = 'pending'
KISMI = 'partial'
TAMAMLANDI = 'completed'
IADE = 'refunded'
ODEME_DURUMLARI = (BEKLEMEDE, KISMI, TAMAMLANDI, IADE)

SIFIR = Decimal('0')

_SAYI_DISI = re.compile(r'[^0-9.\-]')


# -------------------------------------------------------------------------
# YARDIMCI FONKSİYONLAR
# -------------------------------------------------------------------------
def tutar_coz(value) -> Decimal:
    """
    Her türlü tutar girdisini Decimal'e çevirir.
    TR formatı (1.500,50) desteklenir, sayı dışı karakterler atılır.
    Çözülemeyen değerler hata vermez, 0 döner.
    """
    if value is None or isinstance(value, bool):
        return SIFIR
    if isinstance(value, Decimal):
        return value if value.is_finite() else SIFIR
    if isinstance(value, (int, float)):
        try:
            sonuc = Decimal(str(value))
        except (InvalidOperation, ValueError):
            return SIFIR
        return sonuc if sonuc.is_finite() else SIFIR

    val = str(value).strip()
    if not val:
        return SIFIR
    # İkisi birden varsa sondaki ondalık ayracıdır (1.500,50 / 1,500.50);
    # sadece virgül varsa TR ondalığıdır
    if ',' in val and '.' in val:
        if val.rfind(',') > val.rfind('.'):
            val = val.replace('.', '').replace(',', '.')
        else:
            val = val.replace(',', '')
    elif ',' in val:
        val = val.replace(',', '.')
    val = _SAYI_DISI.sub('', val)
    try:
        sonuc = Decimal(val)
    except (InvalidOperation, ValueError):
        return SIFIR
    return sonuc if sonuc.is_finite() else SIFIR


def para_birimi_normalize(value, varsayilan=VARSAYILAN_PARA_BIRIMI) -> str:
    """'try ' -> 'TRY'; boşsa varsayılan."""
    if value is None:
        return varsayilan
    kod = str(value).strip().upper()
    return kod or varsayilan


def tarih_coz(value) -> Optional[datetime]:
    """String/date/datetime değerini saat dilimsiz datetime'a çevirir."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    metin = str(value).strip()
    for fmt in ('%Y-%m-%d', '%d.%m.%Y', '%d/%m/%Y'):
        try:
            return datetime.strptime(metin, fmt)
        except ValueError:
            continue
    try:
        return tarih_coz(datetime.fromisoformat(metin.replace('Z', '+00:00')))
    except ValueError:
        return None


def _metin(value) -> Optional[str]:
    if value is None:
        return None
    metin = str(value).strip()
    return metin or None


# -------------------------------------------------------------------------
# KAYIT TİPLERİ
# -------------------------------------------------------------------------
@dataclass
class LedgerEntry:
    """Tek bir gelir/gider kaydı."""
    id: Optional[str]
    tip: str
    tutar: Decimal = SIFIR
    para_birimi: str = VARSAYILAN_PARA_BIRIMI
    kategori: Optional[str] = None
    ilgili_tur_id: Optional[str] = None
    tarih: Optional[datetime] = None
    aciklama: Optional[str] = None
    odeme_yontemi: Optional[str] = None

    @property
    def gelir_mi(self) -> bool:
        return self.tip == GELIR

    @property
    def gider_mi(self) -> bool:
        return self.tip == GIDER

    @property
    def tur_gideri_mi(self) -> bool:
        return self.tip == GIDER and self.kategori == TUR_GIDERI_KATEGORISI


@dataclass
class TourExpense:
    tutar: Decimal = SIFIR
    para_birimi: str = VARSAYILAN_PARA_BIRIMI
    tip: Optional[str] = None
    ad: Optional[str] = None
    id: Optional[str] = None


@dataclass
class TourActivity:
    ad: Optional[str] = None
    fiyat: Decimal = SIFIR
    para_birimi: str = VARSAYILAN_PARA_BIRIMI
    kismi_odeme_tutari: Optional[Decimal] = None
    kismi_odeme_para_birimi: Optional[str] = None


@dataclass
class TourSale:
    id: Optional[str]
    seri_no: Optional[str] = None
    musteri_adi: Optional[str] = None
    tur_adi: Optional[str] = None
    tur_tarihi: Optional[datetime] = None
    para_birimi: str = VARSAYILAN_PARA_BIRIMI
    toplam_fiyat: Decimal = SIFIR
    kisi_basi_fiyat: Decimal = SIFIR
    odeme_durumu: str = BEKLEMEDE
    kismi_odeme_tutari: Optional[Decimal] = None
    kismi_odeme_para_birimi: Optional[str] = None
    giderler: List[TourExpense] = field(default_factory=list)
    aktiviteler: List[TourActivity] = field(default_factory=list)
    uyruk: Optional[str] = None
    referans_kaynagi: Optional[str] = None
    destinasyon: Optional[str] = None


@dataclass
class CustomerRecord:
    id: Optional[str]
    ad: Optional[str] = None
    telefon: Optional[str] = None
    eposta: Optional[str] = None
    kimlik_no: Optional[str] = None
    adres: Optional[str] = None
    uyruk: Optional[str] = None


# -------------------------------------------------------------------------
# SÖZLÜKTEN (JSON) KAYIT ÜRETME
# -------------------------------------------------------------------------
def ledger_entry_from_dict(veri: Mapping[str, Any]) -> LedgerEntry:
    return LedgerEntry(
        id=_metin(veri.get('id')),
        tip=(_metin(veri.get('type')) or '').lower(),
        tutar=tutar_coz(veri.get('amount')),
        para_birimi=para_birimi_normalize(veri.get('currency')),
        kategori=_metin(veri.get('category')),
        ilgili_tur_id=_metin(veri.get('relatedTourId')),
        tarih=tarih_coz(veri.get('date')),
        aciklama=_metin(veri.get('description')),
        odeme_yontemi=_metin(veri.get('paymentMethod')),
    )


def _liste(value) -> list:
    return list(value) if isinstance(value, (list, tuple)) else []


def _kismi_tutar(value) -> Optional[Decimal]:
    # Boş kısmi ödeme alanı "yok" demektir, 0 değil
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return tutar_coz(value)


def tour_sale_from_dict(veri: Mapping[str, Any]) -> TourSale:
    tur_para_birimi = para_birimi_normalize(veri.get('currency'))

    giderler = []
    for g in _liste(veri.get('expenses')):
        if not isinstance(g, Mapping):
            continue
        giderler.append(TourExpense(
            tutar=tutar_coz(g.get('amount')),
            para_birimi=para_birimi_normalize(g.get('currency'), tur_para_birimi),
            tip=_metin(g.get('type')) or _metin(g.get('category')),
            ad=_metin(g.get('name')),
            id=_metin(g.get('id')),
        ))

    aktiviteler = []
    for a in _liste(veri.get('activities')):
        if not isinstance(a, Mapping):
            continue
        aktivite_para_birimi = para_birimi_normalize(a.get('currency'), tur_para_birimi)
        kismi_pb = _metin(a.get('partialPaymentCurrency'))
        aktiviteler.append(TourActivity(
            ad=_metin(a.get('name')),
            fiyat=tutar_coz(a.get('price')),
            para_birimi=aktivite_para_birimi,
            kismi_odeme_tutari=_kismi_tutar(a.get('partialPaymentAmount')),
            kismi_odeme_para_birimi=para_birimi_normalize(kismi_pb) if kismi_pb else None,
        ))

    durum = (_metin(veri.get('paymentStatus')) or BEKLEMEDE).lower()
    kismi_pb = _metin(veri.get('partialPaymentCurrency'))

    return TourSale(
        id=_metin(veri.get('id')),
        seri_no=_metin(veri.get('serialNumber')),
        musteri_adi=_metin(veri.get('customerName')),
        tur_adi=_metin(veri.get('tourName')),
        tur_tarihi=tarih_coz(veri.get('tourDate')),
        para_birimi=tur_para_birimi,
        toplam_fiyat=tutar_coz(veri.get('totalPrice')),
        kisi_basi_fiyat=tutar_coz(veri.get('pricePerPerson')),
        odeme_durumu=durum,
        kismi_odeme_tutari=_kismi_tutar(veri.get('partialPaymentAmount')),
        kismi_odeme_para_birimi=para_birimi_normalize(kismi_pb) if kismi_pb else None,
        giderler=giderler,
        aktiviteler=aktiviteler,
        uyruk=_metin(veri.get('nationality')),
        referans_kaynagi=_metin(veri.get('referralSource')),
        destinasyon=_metin(veri.get('destination')) or _metin(veri.get('destinationName')),
    )


def as_ledger_entry(kayit) -> LedgerEntry:
    if isinstance(kayit, LedgerEntry):
        return kayit
    if hasattr(kayit, 'to_kayit'):
        return kayit.to_kayit()
    return ledger_entry_from_dict(kayit if isinstance(kayit, Mapping) else {})


def as_tour_sale(kayit) -> TourSale:
    if isinstance(kayit, TourSale):
        return kayit
    if hasattr(kayit, 'to_kayit'):
        return kayit.to_kayit()
    return tour_sale_from_dict(kayit if isinstance(kayit, Mapping) else {})
