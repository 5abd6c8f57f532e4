from datetime import datetime
from decimal import Decimal

from app.extensions import db
from app.hesaplama.kayitlar import (
    GELIR, GIDER, TUR_GIDERI_KATEGORISI,
    LedgerEntry, para_birimi_normalize, tarih_coz, tutar_coz,
)
from app.utils import yeni_id


# 1. FİNANS KAYDI (Gelir / Gider)
class FinansKaydi(db.Model):
    __tablename__ = 'finans_kaydi'
    id = db.Column(db.String(36), primary_key=True, default=yeni_id)
    tip = db.Column(db.String(10), nullable=False, default=GIDER, index=True)  # income / expense
    tarih = db.Column(db.Date, nullable=True, index=True)
    kategori = db.Column(db.String(80), nullable=True, index=True)
    aciklama = db.Column(db.String(250), nullable=True)
    tutar = db.Column(db.Numeric(15, 2), nullable=False, default=Decimal('0.00'))
    para_birimi = db.Column(db.String(10), nullable=False, default='TRY')
    odeme_yontemi = db.Column(db.String(30), nullable=True)
    # Tur gideri kayıtlarında sahibi olan tur
    ilgili_tur_id = db.Column(db.String(36), db.ForeignKey('tur_satisi.id'), nullable=True, index=True)
    olusturma_tarihi = db.Column(db.DateTime, default=datetime.utcnow)
    guncelleme_tarihi = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    ilgili_tur = db.relationship('TurSatisi', back_populates='finans_kayitlari')

    @property
    def gelir_mi(self):
        return self.tip == GELIR

    @property
    def tur_gideri_mi(self):
        """Turdan türetilen kayıtlar elle düzenlenmez."""
        return self.tip == GIDER and self.kategori == TUR_GIDERI_KATEGORISI and bool(self.ilgili_tur_id)

    def to_kayit(self):
        return LedgerEntry(
            id=self.id,
            tip=(self.tip or '').strip().lower(),
            tutar=tutar_coz(self.tutar),
            para_birimi=para_birimi_normalize(self.para_birimi),
            kategori=self.kategori,
            ilgili_tur_id=self.ilgili_tur_id,
            tarih=tarih_coz(self.tarih),
            aciklama=self.aciklama,
            odeme_yontemi=self.odeme_yontemi,
        )

    def to_dict(self):
        return {
            'id': self.id,
            'type': self.tip,
            'date': self.tarih.isoformat() if self.tarih else None,
            'category': self.kategori,
            'description': self.aciklama,
            'amount': str(self.tutar) if self.tutar is not None else None,
            'currency': self.para_birimi,
            'paymentMethod': self.odeme_yontemi,
            'relatedTourId': self.ilgili_tur_id,
            'createdAt': self.olusturma_tarihi.isoformat() if self.olusturma_tarihi else None,
            'updatedAt': self.guncelleme_tarihi.isoformat() if self.guncelleme_tarihi else None,
        }

    def __repr__(self): return f'<FinansKaydi {self.tip} {self.tutar} {self.para_birimi}>'
