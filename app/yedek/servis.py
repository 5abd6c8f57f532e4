"""
JSON yedek alma / geri yükleme.

Yükleme mevcut tur, finans ve müşteri kayıtlarını silip dosyadakileri
ekler; hepsi tek bir veritabanı işleminde yapılır.
"""
import logging
from datetime import datetime

from app.extensions import db
from app.cari.models import FinansKaydi
from app.musteriler.models import Musteri
from app.turlar.models import TurSatisi, TurGideri, TurAktivitesi
from app.hesaplama.kayitlar import tarih_coz, tutar_coz, para_birimi_normalize
from app.utils import yeni_id

logger = logging.getLogger(__name__)

YEDEK_SURUMU = '1.0'


class YedekHatasi(ValueError):
    pass


def _gun(value):
    tarih = tarih_coz(value)
    return tarih.date() if tarih else None


def _an(value):
    return tarih_coz(value) or datetime.utcnow()


def _metin(value):
    if value is None:
        return None
    metin = str(value).strip()
    return metin or None


def _kismi(value):
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return tutar_coz(value)


def _liste(value):
    return value if isinstance(value, (list, tuple)) else []


def _tam_sayi(value, varsayilan):
    try:
        return int(value)
    except (TypeError, ValueError):
        return varsayilan


def yedek_olustur():
    return {
        'exportDate': datetime.utcnow().isoformat(),
        'version': YEDEK_SURUMU,
        'toursData': [t.to_dict() for t in TurSatisi.query.order_by(TurSatisi.olusturma_tarihi).all()],
        'financialData': [f.to_dict() for f in FinansKaydi.query.order_by(FinansKaydi.olusturma_tarihi).all()],
        'customerData': [m.to_dict() for m in Musteri.query.order_by(Musteri.olusturma_tarihi).all()],
    }


def musteri_from_dict(veri):
    return Musteri(
        id=_metin(veri.get('id')) or yeni_id(),
        ad=_metin(veri.get('name')) or 'İsimsiz Müşteri',
        telefon=_metin(veri.get('phone')),
        eposta=_metin(veri.get('email')),
        kimlik_no=_metin(veri.get('idNumber')),
        uyruk=_metin(veri.get('citizenship')) or _metin(veri.get('nationality')),
        adres=_metin(veri.get('address')),
        notlar=_metin(veri.get('notes')),
        olusturma_tarihi=_an(veri.get('createdAt')),
    )


def tur_from_dict(veri, musteri_idleri=()):
    para_birimi = para_birimi_normalize(veri.get('currency'))
    musteri_id = _metin(veri.get('customerId'))
    tur = TurSatisi(
        id=_metin(veri.get('id')) or yeni_id(),
        seri_no=_metin(veri.get('serialNumber')),
        tur_adi=_metin(veri.get('tourName')),
        tur_tarihi=_gun(veri.get('tourDate')),
        tur_bitis_tarihi=_gun(veri.get('tourEndDate')),
        kisi_sayisi=_tam_sayi(veri.get('numberOfPeople'), 1),
        cocuk_sayisi=_tam_sayi(veri.get('numberOfChildren'), 0),
        musteri_id=musteri_id if musteri_id in musteri_idleri else None,
        musteri_adi=_metin(veri.get('customerName')),
        musteri_telefon=_metin(veri.get('customerPhone')),
        musteri_eposta=_metin(veri.get('customerEmail')),
        musteri_kimlik_no=_metin(veri.get('customerIdNumber')),
        musteri_adres=_metin(veri.get('customerAddress')),
        uyruk=_metin(veri.get('nationality')),
        referans_kaynagi=_metin(veri.get('referralSource')),
        destinasyon=_metin(veri.get('destination')) or _metin(veri.get('destinationName')),
        kisi_basi_fiyat=tutar_coz(veri.get('pricePerPerson')),
        toplam_fiyat=tutar_coz(veri.get('totalPrice')),
        para_birimi=para_birimi,
        odeme_durumu=(_metin(veri.get('paymentStatus')) or 'pending').lower(),
        odeme_yontemi=_metin(veri.get('paymentMethod')),
        kismi_odeme_tutari=_kismi(veri.get('partialPaymentAmount')),
        kismi_odeme_para_birimi=_metin(veri.get('partialPaymentCurrency')),
        notlar=_metin(veri.get('notes')),
        olusturma_tarihi=_an(veri.get('createdAt')),
    )
    for sira, g in enumerate(_liste(veri.get('expenses'))):
        if not isinstance(g, dict):
            continue
        tur.giderler.append(TurGideri(
            sira=sira,
            gider_tipi=_metin(g.get('type')) or _metin(g.get('category')),
            ad=_metin(g.get('name')),
            tutar=tutar_coz(g.get('amount')),
            para_birimi=para_birimi_normalize(g.get('currency'), para_birimi),
            saglayici=_metin(g.get('provider')),
            aciklama=_metin(g.get('description')) or _metin(g.get('details')),
        ))
    for sira, a in enumerate(_liste(veri.get('activities'))):
        if not isinstance(a, dict):
            continue
        tur.aktiviteler.append(TurAktivitesi(
            sira=sira,
            ad=_metin(a.get('name')),
            tarih=_gun(a.get('date')),
            fiyat=tutar_coz(a.get('price')),
            para_birimi=para_birimi_normalize(a.get('currency'), para_birimi),
            kismi_odeme_tutari=_kismi(a.get('partialPaymentAmount')),
            kismi_odeme_para_birimi=_metin(a.get('partialPaymentCurrency')),
        ))
    return tur


def finans_from_dict(veri, tur_idleri=()):
    tur_id = _metin(veri.get('relatedTourId'))
    return FinansKaydi(
        id=_metin(veri.get('id')) or yeni_id(),
        tip=(_metin(veri.get('type')) or 'expense').lower(),
        tarih=_gun(veri.get('date')),
        kategori=_metin(veri.get('category')),
        aciklama=_metin(veri.get('description')),
        tutar=tutar_coz(veri.get('amount')),
        para_birimi=para_birimi_normalize(veri.get('currency')),
        odeme_yontemi=_metin(veri.get('paymentMethod')),
        ilgili_tur_id=tur_id if tur_id in tur_idleri else None,
        olusturma_tarihi=_an(veri.get('createdAt')),
    )


def yedek_yukle(veri):
    """
    Yedeği yükler, eklenen kayıt sayılarını döndürür.
    Hata olursa hiçbir şey değişmez (rollback).
    """
    if not isinstance(veri, dict) or not isinstance(veri.get('financialData'), list) \
            or not isinstance(veri.get('toursData'), list):
        raise YedekHatasi("Geçersiz yedek dosyası")

    musteri_verisi = [m for m in (veri.get('customerData') or []) if isinstance(m, dict)]
    tur_verisi = [t for t in veri['toursData'] if isinstance(t, dict)]
    finans_verisi = [f for f in veri['financialData'] if isinstance(f, dict)]

    try:
        # Önce bağımlı tablolar
        FinansKaydi.query.delete()
        TurGideri.query.delete()
        TurAktivitesi.query.delete()
        TurSatisi.query.delete()
        Musteri.query.delete()

        musteriler = [musteri_from_dict(m) for m in musteri_verisi]
        db.session.add_all(musteriler)
        musteri_idleri = {m.id for m in musteriler}

        turlar = [tur_from_dict(t, musteri_idleri) for t in tur_verisi]
        db.session.add_all(turlar)
        tur_idleri = {t.id for t in turlar}

        finanslar = [finans_from_dict(f, tur_idleri) for f in finans_verisi]
        db.session.add_all(finanslar)

        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception("Yedek yüklenemedi")
        raise

    sonuc = {'tours': len(turlar), 'financials': len(finanslar), 'customers': len(musteriler)}
    logger.info("Yedek yüklendi: %s", sonuc)
    return sonuc
