"""Tedarikçi borçları ve ödemeleri."""
from decimal import Decimal

import pytest

from app.firmalar.models import Firma, Borc, borc_durumu, genel_borc_ozeti, ODENDI, KISMEN_ODENDI, ODENMEDI
from app.firmalar.routes import odeme_kaydet


@pytest.mark.parametrize('odenen, tutar, beklenen', [
    (0, 100, ODENMEDI),
    (40, 100, KISMEN_ODENDI),
    (100, 100, ODENDI),
    (150, 100, ODENDI),
])
def test_borc_durumu(odenen, tutar, beklenen):
    assert borc_durumu(odenen, tutar) == beklenen


def _borc(firma, kod):
    return next(b for b in firma.borclar if b.para_birimi == kod)


@pytest.fixture
def firma(db):
    firma = Firma(firma_adi='Kapadokya Otel')
    firma.borclar = [
        Borc(tutar=Decimal('1000'), para_birimi='TRY', aciklama='Mart konaklama'),
        Borc(tutar=Decimal('200'), para_birimi='EUR', aciklama='Transfer'),
    ]
    db.session.add(firma)
    db.session.commit()
    return firma


class TestOdemeKaydet:

    def test_bagli_odeme_borcu_gunceller(self, db, firma):
        borc = _borc(firma, 'TRY')
        odeme_kaydet(firma, Decimal('400'), 'TRY', borc=borc)
        db.session.commit()

        assert borc.odenen_tutar == Decimal('400')
        assert borc.durum == KISMEN_ODENDI
        assert borc.kalan_tutar == Decimal('600')

        odeme_kaydet(firma, Decimal('600'), 'TRY', borc=borc)
        db.session.commit()
        assert borc.durum == ODENDI

    def test_bagli_odeme_borcun_para_birimini_alir(self, db, firma):
        borc = _borc(firma, 'EUR')
        odeme = odeme_kaydet(firma, Decimal('50'), 'TRY', borc=borc)
        db.session.commit()
        assert odeme.para_birimi == 'EUR'

    def test_baska_firmanin_borcu_reddedilir(self, db, firma):
        diger = Firma(firma_adi='Rehber Ltd.')
        db.session.add(diger)
        db.session.commit()
        with pytest.raises(ValueError):
            odeme_kaydet(diger, Decimal('10'), 'TRY', borc=_borc(firma, 'TRY'))

    def test_bagimsiz_odeme_borcu_degistirmez(self, db, firma):
        odeme_kaydet(firma, Decimal('10'), 'USD')
        db.session.commit()
        assert all(b.durum == ODENMEDI for b in firma.borclar)
        assert len(firma.odemeler) == 1

    def test_odeme_geri_alinir(self, db, firma):
        borc = _borc(firma, 'TRY')
        borc.odeme_isle(Decimal('1000'))
        assert borc.odeme_geri_al(Decimal('300')) == KISMEN_ODENDI
        assert borc.odeme_geri_al(Decimal('5000')) == ODENMEDI
        assert borc.odenen_tutar == Decimal('0')


def test_kalan_borc_ozetleri(db, firma):
    _borc(firma, 'EUR').odeme_isle(Decimal('200'))
    db.session.commit()
    assert firma.kalan_borc_ozeti() == {'TRY': Decimal('1000')}

    diger = Firma(firma_adi='Rehber Ltd.')
    diger.borclar = [Borc(tutar=Decimal('70'), para_birimi='USD', aciklama='Rehberlik')]
    db.session.add(diger)
    db.session.commit()
    assert list(genel_borc_ozeti([firma, diger]).items()) == [('TRY', Decimal('1000')), ('USD', Decimal('70'))]
