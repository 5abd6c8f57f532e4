# Veritabanından bağımsız hesaplama çekirdeği (saf fonksiyonlar)
from app.hesaplama.doviz_ozeti import (
    FinansalOzet, summarize_by_currency, tur_geliri, tur_gider_toplami, para_birimlerini_sirala,
)
from app.hesaplama.islem_akisi import (
    FeedRow, Sayfa, build_transaction_feed, tur_akisi, finans_akisi, sayfala, gruplu_sayfala,
    tur_gruplari, tarih_araligina_gore_filtrele,
)
from app.hesaplama.analiz import (
    panel_ozeti, uyruk_dagilimi, referans_dagilimi, destinasyon_istatistikleri,
    aylik_istatistikler, kayitlari_filtrele,
)
