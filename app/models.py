# Tüm modeller tek noktadan import edilebilsin diye toplanır
# (Flask-Migrate tabloları buradan görür)
from app.extensions import db
from app.turlar.models import TurSatisi, TurGideri, TurAktivitesi
from app.cari.models import FinansKaydi
from app.musteriler.models import Musteri
from app.firmalar.models import Firma, Borc, BorcOdemesi
