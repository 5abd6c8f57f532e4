from datetime import datetime
from decimal import Decimal

from app.extensions import db
from app.hesaplama.kayitlar import (
    TourActivity, TourExpense, TourSale,
    para_birimi_normalize, tarih_coz, tutar_coz,
)
from app.utils import yeni_id


def _iso(value):
    return value.isoformat() if value else None


def _sayi(value):
    # JSON'a float değil string yazılır, kuruş kaybı olmasın
    return str(value) if value is not None else None


# 1. TUR SATIŞI (Ana Kayıt)
class TurSatisi(db.Model):
    __tablename__ = 'tur_satisi'
    id = db.Column(db.String(36), primary_key=True, default=yeni_id)
    seri_no = db.Column(db.String(20), nullable=True, index=True)
    tur_adi = db.Column(db.String(150), nullable=True)
    tur_tarihi = db.Column(db.Date, nullable=True, index=True)
    tur_bitis_tarihi = db.Column(db.Date, nullable=True)
    kisi_sayisi = db.Column(db.Integer, nullable=False, default=1)
    cocuk_sayisi = db.Column(db.Integer, nullable=False, default=0)

    # --- Müşteri (Tur kaydında denormalize tutulur) ---
    musteri_id = db.Column(db.String(36), db.ForeignKey('musteri.id'), nullable=True)
    musteri_adi = db.Column(db.String(150), nullable=True, index=True)
    musteri_telefon = db.Column(db.String(30), nullable=True)
    musteri_eposta = db.Column(db.String(120), nullable=True)
    musteri_kimlik_no = db.Column(db.String(50), nullable=True)
    musteri_adres = db.Column(db.String(250), nullable=True)
    uyruk = db.Column(db.String(80), nullable=True)
    referans_kaynagi = db.Column(db.String(80), nullable=True)
    destinasyon = db.Column(db.String(150), nullable=True)

    # --- Parasal Veriler ---
    kisi_basi_fiyat = db.Column(db.Numeric(15, 2), nullable=False, default=Decimal('0.00'))
    toplam_fiyat = db.Column(db.Numeric(15, 2), nullable=False, default=Decimal('0.00'))
    para_birimi = db.Column(db.String(10), nullable=False, default='TRY')
    odeme_durumu = db.Column(db.String(20), nullable=False, default='pending', index=True)
    odeme_yontemi = db.Column(db.String(30), nullable=True)
    kismi_odeme_tutari = db.Column(db.Numeric(15, 2), nullable=True)
    kismi_odeme_para_birimi = db.Column(db.String(10), nullable=True)

    notlar = db.Column(db.Text, nullable=True)
    olusturma_tarihi = db.Column(db.DateTime, default=datetime.utcnow)
    guncelleme_tarihi = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    musteri = db.relationship('Musteri', back_populates='turlar')
    giderler = db.relationship('TurGideri', back_populates='tur', cascade="all, delete-orphan", order_by='TurGideri.sira')
    aktiviteler = db.relationship('TurAktivitesi', back_populates='tur', cascade="all, delete-orphan", order_by='TurAktivitesi.sira')
    finans_kayitlari = db.relationship('FinansKaydi', back_populates='ilgili_tur')

    def to_kayit(self):
        return TourSale(
            id=self.id,
            seri_no=self.seri_no,
            musteri_adi=self.musteri_adi,
            tur_adi=self.tur_adi,
            tur_tarihi=tarih_coz(self.tur_tarihi),
            para_birimi=para_birimi_normalize(self.para_birimi),
            toplam_fiyat=tutar_coz(self.toplam_fiyat),
            kisi_basi_fiyat=tutar_coz(self.kisi_basi_fiyat),
            odeme_durumu=(self.odeme_durumu or 'pending').lower(),
            kismi_odeme_tutari=tutar_coz(self.kismi_odeme_tutari) if self.kismi_odeme_tutari is not None else None,
            kismi_odeme_para_birimi=para_birimi_normalize(self.kismi_odeme_para_birimi) if self.kismi_odeme_para_birimi else None,
            giderler=[g.to_kayit(self.para_birimi) for g in self.giderler],
            aktiviteler=[a.to_kayit(self.para_birimi) for a in self.aktiviteler],
            uyruk=self.uyruk,
            referans_kaynagi=self.referans_kaynagi,
            destinasyon=self.destinasyon,
        )

    def to_dict(self):
        """Yedekleme/JSON biçimi (tour_sale_from_dict ile geri okunabilir)."""
        return {
            'id': self.id,
            'serialNumber': self.seri_no,
            'tourName': self.tur_adi,
            'tourDate': _iso(self.tur_tarihi),
            'tourEndDate': _iso(self.tur_bitis_tarihi),
            'numberOfPeople': self.kisi_sayisi,
            'numberOfChildren': self.cocuk_sayisi,
            'customerId': self.musteri_id,
            'customerName': self.musteri_adi,
            'customerPhone': self.musteri_telefon,
            'customerEmail': self.musteri_eposta,
            'customerIdNumber': self.musteri_kimlik_no,
            'customerAddress': self.musteri_adres,
            'nationality': self.uyruk,
            'referralSource': self.referans_kaynagi,
            'destination': self.destinasyon,
            'pricePerPerson': _sayi(self.kisi_basi_fiyat),
            'totalPrice': _sayi(self.toplam_fiyat),
            'currency': self.para_birimi,
            'paymentStatus': self.odeme_durumu,
            'paymentMethod': self.odeme_yontemi,
            'partialPaymentAmount': _sayi(self.kismi_odeme_tutari),
            'partialPaymentCurrency': self.kismi_odeme_para_birimi,
            'notes': self.notlar,
            'expenses': [g.to_dict() for g in self.giderler],
            'activities': [a.to_dict() for a in self.aktiviteler],
            'createdAt': _iso(self.olusturma_tarihi),
            'updatedAt': _iso(self.guncelleme_tarihi),
        }

    def __repr__(self): return f'<TurSatisi {self.seri_no}>'


# 2. TUR GİDERİ (Gömülü gider kalemleri)
class TurGideri(db.Model):
    __tablename__ = 'tur_gideri'
    id = db.Column(db.String(36), primary_key=True, default=yeni_id)
    tur_id = db.Column(db.String(36), db.ForeignKey('tur_satisi.id'), nullable=False)
    sira = db.Column(db.Integer, nullable=False, default=0)
    gider_tipi = db.Column(db.String(50), nullable=True)
    ad = db.Column(db.String(150), nullable=True)
    tutar = db.Column(db.Numeric(15, 2), nullable=False, default=Decimal('0.00'))
    para_birimi = db.Column(db.String(10), nullable=True)
    saglayici = db.Column(db.String(150), nullable=True)
    aciklama = db.Column(db.String(250), nullable=True)

    tur = db.relationship('TurSatisi', back_populates='giderler')

    def to_kayit(self, tur_para_birimi='TRY'):
        return TourExpense(
            tutar=tutar_coz(self.tutar),
            para_birimi=para_birimi_normalize(self.para_birimi, para_birimi_normalize(tur_para_birimi)),
            tip=self.gider_tipi,
            ad=self.ad,
            id=self.id,
        )

    def to_dict(self):
        return {
            'id': self.id,
            'type': self.gider_tipi,
            'name': self.ad,
            'amount': _sayi(self.tutar),
            'currency': self.para_birimi,
            'provider': self.saglayici,
            'description': self.aciklama,
        }

    def __repr__(self): return f'<TurGideri {self.ad} {self.tutar}>'


# 3. TUR AKTİVİTESİ
class TurAktivitesi(db.Model):
    __tablename__ = 'tur_aktivitesi'
    id = db.Column(db.String(36), primary_key=True, default=yeni_id)
    tur_id = db.Column(db.String(36), db.ForeignKey('tur_satisi.id'), nullable=False)
    sira = db.Column(db.Integer, nullable=False, default=0)
    ad = db.Column(db.String(150), nullable=True)
    tarih = db.Column(db.Date, nullable=True)
    fiyat = db.Column(db.Numeric(15, 2), nullable=False, default=Decimal('0.00'))
    para_birimi = db.Column(db.String(10), nullable=True)
    kismi_odeme_tutari = db.Column(db.Numeric(15, 2), nullable=True)
    kismi_odeme_para_birimi = db.Column(db.String(10), nullable=True)

    tur = db.relationship('TurSatisi', back_populates='aktiviteler')

    def to_kayit(self, tur_para_birimi='TRY'):
        return TourActivity(
            ad=self.ad,
            fiyat=tutar_coz(self.fiyat),
            para_birimi=para_birimi_normalize(self.para_birimi, para_birimi_normalize(tur_para_birimi)),
            kismi_odeme_tutari=tutar_coz(self.kismi_odeme_tutari) if self.kismi_odeme_tutari is not None else None,
            kismi_odeme_para_birimi=para_birimi_normalize(self.kismi_odeme_para_birimi) if self.kismi_odeme_para_birimi else None,
        )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.ad,
            'date': _iso(self.tarih),
            'price': _sayi(self.fiyat),
            'currency': self.para_birimi,
            'partialPaymentAmount': _sayi(self.kismi_odeme_tutari),
            'partialPaymentCurrency': self.kismi_odeme_para_birimi,
        }

    def __repr__(self): return f'<TurAktivitesi {self.ad}>'
