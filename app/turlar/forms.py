from flask_wtf import FlaskForm
from wtforms import (
    StringField, SubmitField, IntegerField, DateField, SelectField,
    HiddenField, FieldList, FormField, TextAreaField,
)
from wtforms.validators import DataRequired, Optional, InputRequired, NumberRange, Length, ValidationError

from app.forms import TRDecimalField, ParaBirimiField
from app.utils import (
    PARA_BIRIMI_SECENEKLERI, ODEME_DURUMLARI, ODEME_YONTEMLERI, GIDER_TIPLERI,
    REFERANS_KAYNAKLARI, UYRUKLAR,
)

KISMI_PARA_BIRIMI_SECENEKLERI = [('', '--- Tur Para Birimi ---')] + PARA_BIRIMI_SECENEKLERI


# 1. GİDER SATIRI
class TurGideriForm(FlaskForm):
    class Meta:
        csrf = False  # FieldList içinde kapalı

    id = HiddenField('Gider ID')
    gider_tipi = SelectField('Gider Tipi', choices=GIDER_TIPLERI, default='genel', validators=[Optional()])
    ad = StringField('Gider Adı', validators=[Optional(), Length(max=150)])
    tutar = TRDecimalField('Tutar', places=2, default=0, validators=[Optional(), NumberRange(min=0, message="Tutar negatif olamaz.")])
    para_birimi = ParaBirimiField()
    saglayici = StringField('Sağlayıcı', validators=[Optional(), Length(max=150)])
    aciklama = StringField('Açıklama', validators=[Optional(), Length(max=250)])


# 2. AKTİVİTE SATIRI
class TurAktivitesiForm(FlaskForm):
    class Meta:
        csrf = False

    id = HiddenField('Aktivite ID')
    ad = StringField('Aktivite', validators=[Optional(), Length(max=150)])
    tarih = DateField('Tarih', format='%Y-%m-%d', validators=[Optional()])
    fiyat = TRDecimalField('Fiyat', places=2, default=0, validators=[Optional(), NumberRange(min=0)])
    para_birimi = ParaBirimiField()
    kismi_odeme_tutari = TRDecimalField('Kısmi Ödeme', places=2, validators=[Optional(), NumberRange(min=0)])
    kismi_odeme_para_birimi = SelectField('Kısmi Ödeme Para Birimi', choices=KISMI_PARA_BIRIMI_SECENEKLERI, default='', validators=[Optional()])


# 3. ANA TUR SATIŞ FORMU
class TurSatisiForm(FlaskForm):
    seri_no = StringField('Seri No', validators=[Optional(), Length(max=20)])

    # --- Müşteri ---
    musteri_adi = StringField('Müşteri Adı', validators=[DataRequired(message="Müşteri adı boş bırakılamaz."), Length(max=150)])
    musteri_telefon = StringField('Telefon', validators=[Optional(), Length(max=30)])
    musteri_eposta = StringField('E-posta', validators=[Optional(), Length(max=120)])
    musteri_kimlik_no = StringField('Kimlik / Pasaport No', validators=[Optional(), Length(max=50)])
    musteri_adres = StringField('Adres', validators=[Optional(), Length(max=250)])
    uyruk = SelectField('Uyruk', choices=[('', '--- Seçiniz ---')] + [(u, u) for u in UYRUKLAR], default='', validators=[Optional()])
    referans_kaynagi = SelectField('Müşteri Nereden Geldi?', choices=[('', '--- Seçiniz ---')] + list(REFERANS_KAYNAKLARI.items()), default='', validators=[Optional()])

    # --- Tur ---
    tur_adi = StringField('Tur Adı', validators=[DataRequired(message="Tur adı boş bırakılamaz."), Length(max=150)])
    destinasyon = StringField('Destinasyon', validators=[Optional(), Length(max=150)])
    tur_tarihi = DateField('Tur Tarihi', format='%Y-%m-%d', validators=[Optional()])
    tur_bitis_tarihi = DateField('Bitiş Tarihi', format='%Y-%m-%d', validators=[Optional()])
    kisi_sayisi = IntegerField('Yetişkin', default=1, validators=[InputRequired(), NumberRange(min=1, message="En az 1 kişi olmalıdır.")])
    cocuk_sayisi = IntegerField('Çocuk', default=0, validators=[Optional(), NumberRange(min=0)])

    # --- Ödeme ---
    kisi_basi_fiyat = TRDecimalField('Kişi Başı Fiyat', places=2, default=0, validators=[Optional(), NumberRange(min=0)])
    toplam_fiyat = TRDecimalField('Toplam Fiyat', places=2, default=0, validators=[Optional(), NumberRange(min=0)])
    para_birimi = ParaBirimiField()
    odeme_durumu = SelectField('Ödeme Durumu', choices=ODEME_DURUMLARI, default='pending', validators=[InputRequired()])
    odeme_yontemi = SelectField('Ödeme Yöntemi', choices=ODEME_YONTEMLERI, default='cash', validators=[Optional()])
    kismi_odeme_tutari = TRDecimalField('Alınan Kısmi Ödeme', places=2, validators=[Optional(), NumberRange(min=0)])
    kismi_odeme_para_birimi = SelectField('Kısmi Ödeme Para Birimi', choices=KISMI_PARA_BIRIMI_SECENEKLERI, default='', validators=[Optional()])

    notlar = TextAreaField('Notlar', validators=[Optional()])

    giderler = FieldList(FormField(TurGideriForm), min_entries=0)
    aktiviteler = FieldList(FormField(TurAktivitesiForm), min_entries=0)
    submit = SubmitField('Tur Satışını Kaydet')

    def validate_tur_bitis_tarihi(self, field):
        if self.tur_tarihi.data and field.data:
            if field.data < self.tur_tarihi.data:
                raise ValidationError("Bitiş tarihi tur tarihinden önce olamaz!")

    def validate(self, extra_validators=None):
        if not super(TurSatisiForm, self).validate(extra_validators=extra_validators):
            return False
        # Optional() zinciri durdurduğu için boş alan kontrolü burada
        if self.odeme_durumu.data == 'partial' and self.kismi_odeme_tutari.data is None:
            self.kismi_odeme_tutari.errors.append("Kısmi ödemede alınan tutar girilmelidir.")
            return False
        return True
