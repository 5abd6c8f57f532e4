"""
Tur kaydı etrafındaki yan işlemler: tur gideri kayıtlarının finansa
aktarılması, müşterinin otomatik oluşturulması ve form taslağı.

Fonksiyonlar commit yapmaz; işlemi çağıran rota tamamlar.
"""
import logging
from datetime import date

from sqlalchemy import or_

from app.extensions import db
from app.cari.models import FinansKaydi
from app.musteriler.models import Musteri
from app.hesaplama.kayitlar import GIDER, TAMAMLANDI, TUR_GIDERI_KATEGORISI, tutar_coz

logger = logging.getLogger(__name__)


def _tur_gideri_sorgusu(tur_id):
    return FinansKaydi.query.filter(
        FinansKaydi.ilgili_tur_id == tur_id,
        FinansKaydi.kategori == TUR_GIDERI_KATEGORISI,
    )


def tur_giderlerini_esitle(tur, bugun=None):
    """
    Turun eski 'Tur Gideri' kayıtlarını siler, tur tamamlandıysa gömülü
    giderlerden (tutarı > 0 olanlar) yeniden oluşturur.
    Oluşturulan kayıt sayısını döndürür.
    """
    silinen = _tur_gideri_sorgusu(tur.id).delete(synchronize_session='fetch')

    if (tur.odeme_durumu or '').lower() != TAMAMLANDI:
        if silinen:
            logger.info("Tur %s tamamlanmadı, %s tur gideri kaydı kaldırıldı.", tur.seri_no, silinen)
        return 0

    bugun = bugun or date.today()
    eklenen = 0
    for gider in tur.giderler:
        tutar = tutar_coz(gider.tutar)
        if tutar <= 0:
            continue
        db.session.add(FinansKaydi(
            tip=GIDER,
            tarih=bugun,
            kategori=TUR_GIDERI_KATEGORISI,
            aciklama=f"{tur.tur_adi or 'İsimsiz Tur'} - {gider.ad or gider.gider_tipi or 'Gider'} ({tur.seri_no or 'No'})",
            tutar=tutar,
            para_birimi=(gider.para_birimi or tur.para_birimi or 'TRY').upper(),
            odeme_yontemi='cash',
            ilgili_tur_id=tur.id,
        ))
        eklenen += 1

    logger.info("Tur %s için %s gider kaydı finansa aktarıldı.", tur.seri_no, eklenen)
    return eklenen


def musteri_bul(telefon=None, kimlik_no=None, eposta=None):
    """Telefon, kimlik no veya e-postadan biri eşleşen ilk müşteri. Boş alanlar eşleşmez."""
    kosullar = []
    if telefon:
        kosullar.append(Musteri.telefon == telefon)
    if kimlik_no:
        kosullar.append(Musteri.kimlik_no == kimlik_no)
    if eposta:
        kosullar.append(Musteri.eposta == eposta)
    if not kosullar:
        return None
    return Musteri.query.filter(or_(*kosullar)).first()


def musteri_eslestir_veya_olustur(tur):
    """
    Tur müşterisini kayıtlı müşterilerle eşleştirir; bulunamazsa ve isim
    varsa yeni Musteri açar. (musteri, yeni_mi) döner.
    """
    musteri = musteri_bul(tur.musteri_telefon, tur.musteri_kimlik_no, tur.musteri_eposta)
    if musteri:
        tur.musteri = musteri
        return musteri, False

    if not tur.musteri_adi:
        return None, False

    musteri = Musteri(
        ad=tur.musteri_adi,
        telefon=tur.musteri_telefon,
        eposta=tur.musteri_eposta,
        kimlik_no=tur.musteri_kimlik_no,
        adres=tur.musteri_adres,
        uyruk=tur.uyruk,
    )
    db.session.add(musteri)
    tur.musteri = musteri
    logger.info("Yeni müşteri otomatik oluşturuldu: %s", musteri.ad)
    return musteri, True


def tur_kaydet(tur):
    """Kaydetme öncesi yan işlemler. (yeni_musteri_mi, aktarilan_gider_sayisi) döner."""
    if tur not in db.session:
        db.session.add(tur)
    # id, gider sorgusu için flush ile atanır
    db.session.flush()
    _, yeni_musteri = musteri_eslestir_veya_olustur(tur)
    aktarilan = tur_giderlerini_esitle(tur)
    return yeni_musteri, aktarilan


def tur_sil(tur):
    """Turu, türetilmiş gider kayıtlarıyla birlikte siler; diğer bağlı kayıtlar bağımsız kalır."""
    _tur_gideri_sorgusu(tur.id).delete(synchronize_session='fetch')
    FinansKaydi.query.filter(FinansKaydi.ilgili_tur_id == tur.id).update(
        {FinansKaydi.ilgili_tur_id: None}, synchronize_session='fetch'
    )
    db.session.delete(tur)


class TaslakDeposu:
    """
    Tur formunu terk edip geri dönebilmek için taslak saklar.
    Flask session gibi herhangi bir sözlük benzeri nesne ile çalışır.
    """
    ANAHTAR = 'tur_taslagi'

    def __init__(self, depo, anahtar=None):
        self.depo = depo
        self.anahtar = anahtar or self.ANAHTAR

    def kaydet(self, veri):
        self.depo[self.anahtar] = dict(veri)

    def getir(self):
        return self.depo.get(self.anahtar)

    def var_mi(self):
        return bool(self.depo.get(self.anahtar))

    def temizle(self):
        self.depo.pop(self.anahtar, None)
