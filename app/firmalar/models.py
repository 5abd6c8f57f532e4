from datetime import date, datetime
from decimal import Decimal

from app.extensions import db
from app.hesaplama.doviz_ozeti import para_birimlerini_sirala
from app.hesaplama.kayitlar import tutar_coz

ODENMEDI = 'unpaid'
KISMEN_ODENDI = 'partially_paid'
ODENDI = 'paid'

BORC_DURUMLARI = {
    ODENMEDI: 'Ödenmedi',
    KISMEN_ODENDI: 'Kısmen Ödendi',
    ODENDI: 'Ödendi',
}


def borc_durumu(odenen, tutar):
    """Ödenen miktara göre borç durumunu döndürür."""
    odenen = tutar_coz(odenen)
    if odenen >= tutar_coz(tutar):
        return ODENDI
    if odenen > 0:
        return KISMEN_ODENDI
    return ODENMEDI


# 1. FIRMA (Tedarikçi: otel, transfer, rehber vb.)
class Firma(db.Model):
    __tablename__ = 'firma'
    id = db.Column(db.Integer, primary_key=True)
    firma_adi = db.Column(db.String(150), nullable=False, index=True)
    yetkili_adi = db.Column(db.String(100), nullable=True)
    telefon = db.Column(db.String(30), nullable=True)
    eposta = db.Column(db.String(120), nullable=True)
    adres = db.Column(db.String(250), nullable=True)
    vergi_no = db.Column(db.String(50), nullable=True, index=True)
    kategori = db.Column(db.String(50), nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    borclar = db.relationship('Borc', back_populates='firma', cascade="all, delete-orphan", order_by='Borc.vade_tarihi')
    odemeler = db.relationship('BorcOdemesi', back_populates='firma', cascade="all, delete-orphan", order_by='BorcOdemesi.odeme_tarihi')

    def kalan_borc_ozeti(self):
        """{para_birimi: kalan} ; tamamen ödenmiş borçlar dahil edilmez."""
        ozet = {}
        for borc in self.borclar:
            kalan = borc.kalan_tutar
            if kalan <= 0:
                continue
            ozet[borc.para_birimi] = ozet.get(borc.para_birimi, Decimal('0')) + kalan
        return ozet

    def __repr__(self): return f'<Firma {self.firma_adi}>'


# 2. BORÇ
class Borc(db.Model):
    __tablename__ = 'borc'
    id = db.Column(db.Integer, primary_key=True)
    firma_id = db.Column(db.Integer, db.ForeignKey('firma.id'), nullable=False)
    tutar = db.Column(db.Numeric(15, 2), nullable=False, default=Decimal('0.00'))
    para_birimi = db.Column(db.String(10), nullable=False, default='TRY')
    aciklama = db.Column(db.String(250), nullable=True)
    vade_tarihi = db.Column(db.Date, nullable=True)
    durum = db.Column(db.String(20), nullable=False, default=ODENMEDI, index=True)
    odenen_tutar = db.Column(db.Numeric(15, 2), nullable=False, default=Decimal('0.00'))
    notlar = db.Column(db.Text, nullable=True)
    olusturma_tarihi = db.Column(db.DateTime, default=datetime.utcnow)
    guncelleme_tarihi = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    firma = db.relationship('Firma', back_populates='borclar')
    odemeler = db.relationship('BorcOdemesi', back_populates='borc')

    @property
    def kalan_tutar(self):
        return tutar_coz(self.tutar) - tutar_coz(self.odenen_tutar)

    @property
    def durum_etiketi(self):
        return BORC_DURUMLARI.get(self.durum, self.durum)

    def odeme_isle(self, miktar):
        """
        Ödenen tutarı artırır ve durumu yeniden hesaplar.
        Fazla ödeme reddedilmez, borç 'paid' olur.
        """
        self.odenen_tutar = tutar_coz(self.odenen_tutar) + tutar_coz(miktar)
        self.durum = borc_durumu(self.odenen_tutar, self.tutar)
        return self.durum

    def odeme_geri_al(self, miktar):
        self.odenen_tutar = max(tutar_coz(self.odenen_tutar) - tutar_coz(miktar), Decimal('0'))
        self.durum = borc_durumu(self.odenen_tutar, self.tutar)
        return self.durum

    def __repr__(self): return f'<Borc #{self.id} {self.tutar} {self.para_birimi} ({self.durum})>'


# 3. BORÇ ÖDEMESİ
class BorcOdemesi(db.Model):
    __tablename__ = 'borc_odemesi'
    id = db.Column(db.Integer, primary_key=True)
    firma_id = db.Column(db.Integer, db.ForeignKey('firma.id'), nullable=False)
    borc_id = db.Column(db.Integer, db.ForeignKey('borc.id'), nullable=True)
    tutar = db.Column(db.Numeric(15, 2), nullable=False, default=Decimal('0.00'))
    para_birimi = db.Column(db.String(10), nullable=False, default='TRY')
    aciklama = db.Column(db.String(250), nullable=True)
    odeme_tarihi = db.Column(db.Date, default=date.today, nullable=False)
    olusturma_tarihi = db.Column(db.DateTime, default=datetime.utcnow)

    firma = db.relationship('Firma', back_populates='odemeler')
    borc = db.relationship('Borc', back_populates='odemeler')

    def __repr__(self): return f'<BorcOdemesi {self.tutar} {self.para_birimi}>'


def genel_borc_ozeti(firmalar):
    """Verilen firmaların kalan borçları, para birimine göre sıralı."""
    toplam = {}
    for firma in firmalar:
        for kod, kalan in firma.kalan_borc_ozeti().items():
            toplam[kod] = toplam.get(kod, Decimal('0')) + kalan
    return {kod: toplam[kod] for kod in para_birimlerini_sirala(toplam)}
