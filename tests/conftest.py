"""
Ortak test fixture'ları.

Uygulama TestConfig ile (bellek içi SQLite, CSRF kapalı) kurulur; her test
temiz bir veritabanı ile başlar.
"""
from datetime import datetime
from decimal import Decimal

import pytest

from app import create_app
from app.extensions import db as _db
from app.hesaplama.kayitlar import LedgerEntry, TourSale, TourExpense, TourActivity
from config import TestConfig


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    return _db


# -------------------------------------------------------------------------
# Saf kayıt üreticileri (veritabanı gerektirmez)
# -------------------------------------------------------------------------
def gelir(tutar, para_birimi='TRY', **kwargs):
    return LedgerEntry(id=kwargs.pop('id', None), tip='income', tutar=Decimal(str(tutar)),
                       para_birimi=para_birimi, **kwargs)


def gider(tutar, para_birimi='TRY', **kwargs):
    return LedgerEntry(id=kwargs.pop('id', None), tip='expense', tutar=Decimal(str(tutar)),
                       para_birimi=para_birimi, **kwargs)


def tur(id='t1', durum='completed', toplam=0, para_birimi='TRY', tarih=None, **kwargs):
    return TourSale(
        id=id,
        odeme_durumu=durum,
        toplam_fiyat=Decimal(str(toplam)),
        para_birimi=para_birimi,
        tur_tarihi=tarih or datetime(2025, 3, 10),
        **kwargs
    )


def tur_gideri(tutar, para_birimi='TRY', ad=None):
    return TourExpense(tutar=Decimal(str(tutar)), para_birimi=para_birimi, ad=ad)


def aktivite(fiyat=0, para_birimi='TRY', kismi=None, kismi_para_birimi=None):
    return TourActivity(
        fiyat=Decimal(str(fiyat)),
        para_birimi=para_birimi,
        kismi_odeme_tutari=Decimal(str(kismi)) if kismi is not None else None,
        kismi_odeme_para_birimi=kismi_para_birimi,
    )
