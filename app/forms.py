# Modüllerin ortak kullandığı form alanları
from wtforms import DecimalField, SelectField

from app.utils import PARA_BIRIMI_SECENEKLERI


# --- ÖZEL ALAN: VİRGÜLÜ NOKTAYA ÇEVİREN DECIMAL FIELD ---
class TRDecimalField(DecimalField):
    def process_formdata(self, valuelist):
        if valuelist and valuelist[0]:
            # Örn gelen: "1.500,50", "1500,50" veya "1500.50"
            val = valuelist[0].strip().replace(' ', '')

            # Hem nokta hem virgül varsa sondaki ondalık ayracıdır (1.500,50 / 1,500.50)
            if '.' in val and ',' in val:
                if val.rfind(',') > val.rfind('.'):
                    val = val.replace('.', '').replace(',', '.')
                else:
                    val = val.replace(',', '')
            # Sadece virgül varsa (1500,50)
            elif ',' in val:
                val = val.replace(',', '.')

            valuelist[0] = val

        return super(TRDecimalField, self).process_formdata(valuelist)


class ParaBirimiField(SelectField):
    """TRY/USD/EUR/GBP/SAR seçimi; varsayılan TRY."""
    def __init__(self, label='Para Birimi', validators=None, **kwargs):
        kwargs.setdefault('choices', PARA_BIRIMI_SECENEKLERI)
        kwargs.setdefault('default', 'TRY')
        super(ParaBirimiField, self).__init__(label, validators, **kwargs)
