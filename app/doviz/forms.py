from flask_wtf import FlaskForm
from wtforms import SubmitField
from wtforms.validators import DataRequired, NumberRange

from app.forms import TRDecimalField, ParaBirimiField


class DovizCeviriciForm(FlaskForm):
    class Meta:
        csrf = False  # GET ile gönderilir

    tutar = TRDecimalField('Tutar', places=2, validators=[
        DataRequired(message="Tutar giriniz."), NumberRange(min=0)
    ])
    kaynak = ParaBirimiField('Kaynak', default='USD')
    hedef = ParaBirimiField('Hedef', default='TRY')
    submit = SubmitField('Çevir')
