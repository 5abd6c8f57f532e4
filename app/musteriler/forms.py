from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField, SelectField, SubmitField
from wtforms.validators import DataRequired, Length, Optional

from app.utils import UYRUKLAR


class MusteriForm(FlaskForm):
    ad = StringField('Ad Soyad', validators=[
        DataRequired(message="Müşteri adı boş bırakılamaz."),
        Length(max=150, message="Müşteri adı en fazla 150 karakter olabilir.")
    ])
    telefon = StringField('Telefon', validators=[
        Optional(), Length(max=30, message="Telefon numarası en fazla 30 karakter olabilir.")
    ])
    eposta = StringField('E-posta', validators=[
        Optional(), Length(max=120, message="E-posta en fazla 120 karakter olabilir.")
    ])
    kimlik_no = StringField('Kimlik / Pasaport No', validators=[Optional(), Length(max=50)])
    uyruk = SelectField('Uyruk', choices=[('', '--- Seçiniz ---')] + [(u, u) for u in UYRUKLAR], default='', validators=[Optional()])
    adres = TextAreaField('Adres', validators=[Optional(), Length(max=250)])
    notlar = TextAreaField('Notlar', validators=[Optional()])

    submit = SubmitField('Kaydet')
