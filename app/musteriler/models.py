from datetime import datetime

from app.extensions import db
from app.hesaplama.kayitlar import CustomerRecord
from app.utils import yeni_id


# 1. MÜŞTERİ
class Musteri(db.Model):
    __tablename__ = 'musteri'
    id = db.Column(db.String(36), primary_key=True, default=yeni_id)
    ad = db.Column(db.String(150), nullable=False, index=True)
    telefon = db.Column(db.String(30), nullable=True, index=True)
    eposta = db.Column(db.String(120), nullable=True, index=True)
    kimlik_no = db.Column(db.String(50), nullable=True, index=True)
    uyruk = db.Column(db.String(80), nullable=True)
    adres = db.Column(db.String(250), nullable=True)
    notlar = db.Column(db.Text, nullable=True)
    olusturma_tarihi = db.Column(db.DateTime, default=datetime.utcnow)
    guncelleme_tarihi = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    turlar = db.relationship('TurSatisi', back_populates='musteri')

    def to_kayit(self):
        return CustomerRecord(
            id=self.id,
            ad=self.ad,
            telefon=self.telefon,
            eposta=self.eposta,
            kimlik_no=self.kimlik_no,
            adres=self.adres,
            uyruk=self.uyruk,
        )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.ad,
            'phone': self.telefon,
            'email': self.eposta,
            'idNumber': self.kimlik_no,
            'citizenship': self.uyruk,
            'address': self.adres,
            'notes': self.notlar,
            'createdAt': self.olusturma_tarihi.isoformat() if self.olusturma_tarihi else None,
            'updatedAt': self.guncelleme_tarihi.isoformat() if self.guncelleme_tarihi else None,
        }

    def __repr__(self): return f'<Musteri {self.ad}>'
