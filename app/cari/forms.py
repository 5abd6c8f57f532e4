from flask_wtf import FlaskForm
from wtforms import StringField, SelectField, DateField, SubmitField
from wtforms.validators import DataRequired, InputRequired, NumberRange, Optional, Length, ValidationError

from app.forms import TRDecimalField, ParaBirimiField
from app.hesaplama.kayitlar import TUR_GIDERI_KATEGORISI
from app.utils import ODEME_YONTEMLERI

GELIR_KATEGORILERI = ['Tur Satışı', 'Komisyon', 'Aktivite Satışı', 'Diğer Gelir']
GIDER_KATEGORILERI = ['Kira', 'Maaş', 'Fatura', 'Reklam', 'Ofis', 'Vergi', 'Diğer Gider']


# -------------------------------------------------------------------------
# 1. FinansKaydiForm (Gelir / Gider)
# -------------------------------------------------------------------------
class FinansKaydiForm(FlaskForm):
    tip = SelectField('İşlem Türü', choices=[
        ('income', 'Gelir'),
        ('expense', 'Gider'),
    ], default='expense', validators=[InputRequired()])

    tarih = DateField('Tarih', format='%Y-%m-%d', validators=[DataRequired()])
    kategori = StringField('Kategori', validators=[Optional(), Length(max=80)])
    aciklama = StringField('Açıklama', validators=[Optional(), Length(max=250)])

    # Kuruşlu giriş (Virgül destekli)
    tutar = TRDecimalField('Tutar', places=2, validators=[
        DataRequired(message="Tutar alanı boş bırakılamaz."),
        NumberRange(min=0.01, message="Tutar 0'dan büyük olmalıdır.")
    ])
    para_birimi = ParaBirimiField()
    odeme_yontemi = SelectField('Ödeme Yöntemi', choices=ODEME_YONTEMLERI, default='cash', validators=[Optional()])
    ilgili_tur_id = SelectField('İlgili Tur', choices=[], default='', validators=[Optional()])

    submit = SubmitField('Kaydet')

    def validate_kategori(self, field):
        # Bu kategori turlardan otomatik üretilir
        if (field.data or '').strip() == TUR_GIDERI_KATEGORISI:
            raise ValidationError(f"'{TUR_GIDERI_KATEGORISI}' kategorisi tur kayıtlarına aittir, elle seçilemez.")
