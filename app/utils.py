import random
import uuid
from datetime import datetime

from app.hesaplama.kayitlar import tutar_coz

PARA_BIRIMI_SEMBOLLERI = {
    'TRY': '₺',
    'USD': '$',
    'EUR': '€',
    'GBP': '£',
    'SAR': '﷼',
}

PARA_BIRIMI_SECENEKLERI = [
    ('TRY', 'TL (Türk Lirası)'),
    ('USD', 'USD (Amerikan Doları)'),
    ('EUR', 'EUR (Euro)'),
    ('GBP', 'GBP (İngiliz Sterlini)'),
    ('SAR', 'SAR (Suudi Riyali)'),
]


def para_birimi_sembolu(kod):
    if not kod:
        return ''
    return PARA_BIRIMI_SEMBOLLERI.get(str(kod).upper(), str(kod).upper())


def format_para(tutar, kod='TRY'):
    """1500.5, 'TRY' -> '₺ 1.500,50'"""
    deger = tutar_coz(tutar)
    metin = f"{deger:,.2f}".replace(',', '_').replace('.', ',').replace('_', '.')
    return f"{para_birimi_sembolu(kod)} {metin}"


def tutarlar_metni(tutarlar):
    """{'USD': 1000, 'EUR': 50} -> '$ 1.000,00 + € 50,00'; boşsa '-'"""
    parcalar = [format_para(tutar, kod) for kod, tutar in (tutarlar or {}).items() if tutar_coz(tutar) > 0]
    return ' + '.join(parcalar) or '-'


def seri_no_uret(simdi=None, rastgele=None):
    """
    Tur seri numarası: YYMM + rastgele 4 hane + 'TF' (örn: 25031234TF).
    Mevcut kayıtlarla çakışma kontrolü yapılmaz.
    """
    simdi = simdi or datetime.now()
    rastgele = rastgele or random
    return f"{simdi:%y%m}{rastgele.randint(1000, 9999)}TF"


def yeni_id():
    return str(uuid.uuid4())


# --- SEÇİM LİSTELERİ (Formlar ve raporlar ortak kullanır) ---
ODEME_DURUMLARI = [
    ('pending', 'Beklemede'),
    ('partial', 'Kısmi Ödeme'),
    ('completed', 'Tamamlandı'),
    ('refunded', 'İade Edildi'),
]

ODEME_YONTEMLERI = [
    ('cash', 'Nakit'),
    ('creditCard', 'Kredi Kartı'),
    ('bankTransfer', 'Banka Transferi'),
    ('other', 'Diğer'),
]

GIDER_TIPLERI = [
    ('konaklama', 'Konaklama'),
    ('ulasim', 'Ulaşım'),
    ('rehber', 'Rehber'),
    ('acenta', 'Acenta / Hanutçu'),
    ('aktivite', 'Aktivite'),
    ('yemek', 'Yemek'),
    ('genel', 'Genel'),
    ('diger', 'Diğer'),
]

REFERANS_KAYNAKLARI = {
    'website': 'İnternet Sitemiz',
    'hotel': 'Otel Yönlendirmesi',
    'local_guide': 'Hanutçu / Yerel Rehber',
    'walk_in': 'Kapı Önü Müşterisi',
    'repeat': 'Tekrar Gelen Müşteri',
    'recommendation': 'Tavsiye',
    'social_media': 'Sosyal Medya',
    'other': 'Diğer',
}

UYRUKLAR = ['Türkiye', 'Almanya', 'Birleşik Krallık', 'Amerika Birleşik Devletleri',
            'Rusya', 'Fransa', 'Hollanda', 'Ukrayna', 'İtalya', 'Diğer']


def secenek_etiketi(secenekler, deger):
    """[(deger, etiket)] listesinden etiketi bulur, yoksa değerin kendisi."""
    return dict(secenekler).get(deger, deger or '-')
