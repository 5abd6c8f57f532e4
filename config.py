import os

# Projemizin temel dizinini bul
basedir = os.path.abspath(os.path.dirname(__file__))

class Config:
    """
    Tüm yapılandırmalar için temel sınıf.
    """

    # --- Güvenlik Ayarları ---

    # Flask oturumu ve Flask-WTF'nin CSRF koruması için gizli anahtar
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'buraya-tahmin-edilmesi-zor-bir-sifre-yazin'

    # --- Veritabanı Ayarları ---

    # Varsayılan olarak ana dizinde 'acente.db' adında bir SQLite dosyası
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'acente.db')

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # --- Döviz Kurları ---
    DOVIZ_KAYNAK_URL = os.environ.get('DOVIZ_KAYNAK_URL') or 'https://www.tcmb.gov.tr/kurlar/today.xml'
    DOVIZ_ZAMAN_ASIMI = int(os.environ.get('DOVIZ_ZAMAN_ASIMI') or 5)
    # TCMB sertifika zinciri bazı sunucularda doğrulanamıyor
    DOVIZ_SSL_DOGRULA = (os.environ.get('DOVIZ_SSL_DOGRULA') or '0') == '1'

    # --- Listeleme ---
    SAYFA_BOYUTU = int(os.environ.get('SAYFA_BOYUTU') or 6)
    LISTE_SAYFA_BOYUTU = int(os.environ.get('LISTE_SAYFA_BOYUTU') or 25)
    VARSAYILAN_PARA_BIRIMI = 'TRY'

    # --- Loglama ---
    LOG_SEVIYESI = os.environ.get('LOG_SEVIYESI') or 'INFO'

    # --- Şirket Bilgileri (Yazdırma başlığı) ---
    SIRKET_ADI = os.environ.get('SIRKET_ADI') or 'PassionisTravel'
    SIRKET_ADRES = os.environ.get('SIRKET_ADRES') or 'Örnek Mahallesi, Örnek Caddesi No:123, İstanbul'
    SIRKET_TELEFON = os.environ.get('SIRKET_TELEFON') or '+90 212 123 4567'
    SIRKET_EPOSTA = os.environ.get('SIRKET_EPOSTA') or 'info@passionistour.com'


class TestConfig(Config):
    """Testler için bellek içi veritabanı, CSRF kapalı."""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    WTF_CSRF_ENABLED = False
