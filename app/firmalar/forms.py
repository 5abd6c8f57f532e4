from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField, SubmitField, SelectField, DateField
from wtforms.validators import DataRequired, Length, Optional, NumberRange

from app.forms import TRDecimalField, ParaBirimiField

FIRMA_KATEGORILERI = [
    ('otel', 'Otel / Konaklama'),
    ('transfer', 'Transfer / Ulaşım'),
    ('rehber', 'Rehber'),
    ('restoran', 'Restoran'),
    ('acenta', 'Acenta'),
    ('diger', 'Diğer'),
]


class FirmaForm(FlaskForm):
    # Veritabanında max 150 karakter
    firma_adi = StringField('Firma Ünvanı', validators=[
        DataRequired(message="Firma adı boş bırakılamaz."),
        Length(max=150, message="Firma adı en fazla 150 karakter olabilir.")
    ])
    yetkili_adi = StringField('Yetkili Kişi', validators=[
        Optional(), Length(max=100, message="Yetkili adı en fazla 100 karakter olabilir.")
    ])
    telefon = StringField('Telefon', validators=[
        Optional(), Length(max=30, message="Telefon numarası en fazla 30 karakter olabilir.")
    ])
    eposta = StringField('E-posta', validators=[
        Optional(), Length(max=120, message="E-posta en fazla 120 karakter olabilir.")
    ])
    adres = TextAreaField('Adres', validators=[Optional(), Length(max=250)])
    vergi_no = StringField('Vergi Numarası', validators=[Optional(), Length(max=50, message="Vergi numarası çok uzun.")])
    kategori = SelectField('Firma Türü', choices=FIRMA_KATEGORILERI, default='diger', validators=[Optional()])

    submit = SubmitField('Kaydet')


class BorcForm(FlaskForm):
    tutar = TRDecimalField('Borç Tutarı', places=2, validators=[
        DataRequired(message="Tutar alanı boş bırakılamaz."),
        NumberRange(min=0.01, message="Tutar 0'dan büyük olmalıdır.")
    ])
    para_birimi = ParaBirimiField()
    aciklama = StringField('Açıklama', validators=[DataRequired(message="Açıklama zorunludur."), Length(max=250)])
    vade_tarihi = DateField('Vade Tarihi', format='%Y-%m-%d', validators=[Optional()])
    notlar = TextAreaField('Notlar', validators=[Optional()])

    submit = SubmitField('Borç Ekle')


class BorcOdemesiForm(FlaskForm):
    borc_id = SelectField('İlgili Borç', coerce=int, choices=[], default=0, validators=[Optional()])
    tutar = TRDecimalField('Ödeme Tutarı', places=2, validators=[
        DataRequired(message="Tutar alanı boş bırakılamaz."),
        NumberRange(min=0.01, message="Tutar 0'dan büyük olmalıdır.")
    ])
    para_birimi = ParaBirimiField()
    odeme_tarihi = DateField('Ödeme Tarihi', format='%Y-%m-%d', validators=[DataRequired()])
    aciklama = StringField('Açıklama', validators=[Optional(), Length(max=250)])

    submit = SubmitField('Ödeme Kaydet')
