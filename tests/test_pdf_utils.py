"""Tests for text shaping, paragraph markup and the small PDF helpers."""
import logging

import pytest
from PIL import Image
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, LETTER

from shared.field_labels import field_label, page_label, no_items_text
from utils.pdf_utils import (
    FontSet,
    contains_arabic,
    shape_text_for_arabic,
    paragraph_markup,
    truncate_text,
    format_column_name,
    hex_to_color,
    get_page_size,
    resolve_fonts,
    read_logo_size
)


class TestArabicShaping:
    def test_detects_arabic(self):
        assert contains_arabic('السعر')
        assert contains_arabic('Total الإجمالي')
        assert not contains_arabic('Total 123')

    def test_latin_text_unchanged(self):
        assert shape_text_for_arabic('Invoice 42') == 'Invoice 42'

    def test_numbers_and_latin_keep_their_order(self):
        shaped = shape_text_for_arabic('السعر: 123.45 USD')
        assert shaped.startswith('USD 123.45')
        assert 'USD' in shaped and '123.45' in shaped

    def test_letters_are_reshaped(self):
        shaped = shape_text_for_arabic('عرض')
        assert shaped != 'عرض'
        assert len(shaped) == 3


class TestParagraphMarkup:
    def test_latin_text_is_escaped(self):
        assert paragraph_markup('Tom & Jerry <Ltd>', 'Helvetica', 10, 500) == 'Tom &amp; Jerry &lt;Ltd&gt;'

    def test_newlines_become_line_breaks(self):
        assert paragraph_markup('a\nb', 'Helvetica', 10, 500) == 'a<br/>b'

    def test_arabic_lines_keep_logical_order(self):
        words = ['منتج', 'أول', 'منتج', 'ثاني']
        markup = paragraph_markup(' '.join(words), 'Helvetica', 10, 1)
        assert markup.split('<br/>') == [shape_text_for_arabic(w) for w in words]

    def test_arabic_on_one_line(self):
        text = 'التاريخ: 2024-01-15'
        assert paragraph_markup(text, 'Helvetica', 10, 500) == shape_text_for_arabic(text)

    def test_long_text_is_truncated(self):
        assert truncate_text('x' * 20, 5) == 'xxxxx…'
        assert truncate_text('short', 5) == 'short'
        assert truncate_text('no limit', 0) == 'no limit'


class TestHelpers:
    @pytest.mark.parametrize('key,expected', [
        ('unit_price', 'Unit Price'),
        ('taxRate', 'Tax Rate'),
        ('name', 'Name'),
    ])
    def test_format_column_name(self, key, expected):
        assert format_column_name(key) == expected

    def test_hex_to_color(self):
        color = hex_to_color('#ff0000')
        assert (color.red, color.green, color.blue) == (1.0, 0.0, 0.0)

    def test_invalid_color_falls_back_to_black(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert hex_to_color('#zzzzzz') == colors.black
        assert 'Invalid color' in caplog.text

    def test_page_sizes(self):
        assert get_page_size('a4') == A4
        assert get_page_size('LETTER') == LETTER
        with pytest.raises(ValueError):
            get_page_size('B7')


class TestFonts:
    def test_pick_uses_arabic_font_for_arabic_text(self):
        fonts = FontSet(regular='Helvetica', bold='Helvetica-Bold', arabic='ArabicX')
        assert fonts.pick('مرحبا') == 'ArabicX'
        assert fonts.pick('مرحبا', bold=True) == 'ArabicX'
        assert fonts.pick('hello') == 'Helvetica'
        assert fonts.pick('hello', bold=True) == 'Helvetica-Bold'

    def test_pick_without_arabic_font(self):
        fonts = FontSet(regular='Helvetica', bold='Helvetica-Bold')
        assert fonts.pick('مرحبا') == 'Helvetica'

    def test_standard_family_gets_bold_variant(self):
        fonts = resolve_fonts('en', 'Times-Roman')
        assert (fonts.regular, fonts.bold) == ('Times-Roman', 'Times-Bold')

    def test_unknown_family_falls_back(self, caplog):
        with caplog.at_level(logging.WARNING):
            fonts = resolve_fonts('en', 'NoSuchFont')
        assert fonts.regular == 'Helvetica'
        assert 'NoSuchFont' in caplog.text


class TestLogo:
    def test_scaled_to_target_height(self, tmp_path):
        path = tmp_path / 'logo.png'
        Image.new('RGB', (200, 100), 'white').save(path)
        assert read_logo_size(str(path), 50) == (100.0, 50.0)

    def test_missing_logo(self, tmp_path):
        assert read_logo_size(str(tmp_path / 'none.png'), 50) is None
        assert read_logo_size('', 50) is None

    def test_unreadable_logo(self, tmp_path):
        path = tmp_path / 'logo.png'
        path.write_bytes(b'not an image')
        assert read_logo_size(str(path), 50) is None


class TestLabels:
    def test_known_and_unknown_fields(self):
        assert field_label('offerNumber', 'ar') == 'رقم العرض'
        assert field_label('offerNumber', 'en') == 'Offer No.'
        assert field_label('warrantyPeriod', 'en') == 'Warranty Period'

    def test_page_label(self):
        assert page_label(2, 3, 'en') == 'Page 2 of 3'
        assert page_label(1, 2, 'ar') == 'صفحة 1 من 2'

    def test_no_items_text(self):
        assert no_items_text('ar') == 'لا توجد عناصر'
        assert no_items_text('fr') == 'No items'
