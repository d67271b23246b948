"""
PDF text utilities: Arabic font discovery, shaping, measuring and markup.

Fonts are discovered from the bundled fonts dir, configured paths and common
Linux and Windows locations, and registered once under 'ArabicMain'.
"""
import html
import logging
import os
import re
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, Optional, List, Tuple

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, A5, LETTER, LEGAL
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont, TTFError
from PIL import Image as PILImage, UnidentifiedImageError
import arabic_reshaper
from bidi.algorithm import get_display

from config.settings import PDF_CONFIG

logger = logging.getLogger(__name__)

ARABIC_FONT_NAME = 'ArabicMain'
ARABIC_BOLD_FONT_NAME = 'ArabicMain-Bold'
DEFAULT_FONT_NAME = 'Helvetica'

PAGE_SIZES = {'A4': A4, 'A5': A5, 'LETTER': LETTER, 'LEGAL': LEGAL}

# Bold counterparts of the standard PDF fonts
STANDARD_BOLD_FONTS = {
    'Helvetica': 'Helvetica-Bold',
    'Times-Roman': 'Times-Bold',
    'Courier': 'Courier-Bold',
}

_ARABIC_RANGES = (
    ('\u0600', '\u06FF'),
    ('\u0750', '\u077F'),
    ('\uFB50', '\uFDFF'),
    ('\uFE70', '\uFEFF'),
)

_font_lock = threading.Lock()
_font_state: Dict[str, Any] = {'checked': False, 'regular': None, 'bold': None}


def candidate_font_paths(fonts_dir: Optional[str] = None, extra_paths: Optional[List[str]] = None) -> List[Path]:
    """Arabic-capable font files in preference order (only existing files)"""
    fonts_dir_path = Path(fonts_dir or PDF_CONFIG['fonts_dir'])
    extra = extra_paths if extra_paths is not None else PDF_CONFIG['extra_font_paths']

    candidates: List[Path] = [Path(p) for p in extra]
    for name in ('NotoNaskhArabic-Regular.ttf', 'Amiri-Regular.ttf', 'Tahoma.ttf'):
        candidates.append(fonts_dir_path / name)
    if fonts_dir_path.is_dir():
        candidates.extend(sorted(fonts_dir_path.glob('*.ttf')))

    candidates.extend([
        Path('/usr/share/fonts/truetype/noto/NotoNaskhArabic-Regular.ttf'),
        Path('/usr/share/fonts/truetype/noto/NotoSansArabic-Regular.ttf'),
        Path('/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf'),
        Path('/usr/local/share/fonts/NotoNaskhArabic-Regular.ttf'),
    ])

    windows_fonts = Path('C:/Windows/Fonts')
    if windows_fonts.exists():
        candidates.extend([
            windows_fonts / 'tahoma.ttf',
            windows_fonts / 'segoeui.ttf',
            windows_fonts / 'arial.ttf',
        ])

    seen = set()
    existing = []
    for path in candidates:
        if path in seen or not path.is_file():
            continue
        seen.add(path)
        existing.append(path)
    return existing


def _bold_variant(path: Path) -> Optional[Path]:
    name = path.name
    if 'Regular' not in name:
        return None
    bold = path.with_name(name.replace('-Regular', '-Bold').replace('Regular', 'Bold'))
    return bold if bold.is_file() else None


def ensure_fonts_available() -> Optional[str]:
    """Register the Arabic font once; returns its name or None when none was found"""
    with _font_lock:
        if _font_state['checked']:
            return _font_state['regular']

        for path in candidate_font_paths():
            try:
                pdfmetrics.registerFont(TTFont(ARABIC_FONT_NAME, str(path)))
            except (TTFError, OSError) as e:
                logger.debug(f"Failed to register font {path}: {e}")
                continue
            _font_state['regular'] = ARABIC_FONT_NAME
            logger.info(f"PDF Fonts: registered Arabic font {path}")

            bold_path = _bold_variant(path)
            if bold_path is not None:
                try:
                    pdfmetrics.registerFont(TTFont(ARABIC_BOLD_FONT_NAME, str(bold_path)))
                    _font_state['bold'] = ARABIC_BOLD_FONT_NAME
                    logger.info(f"PDF Fonts: registered Arabic bold font {bold_path}")
                except (TTFError, OSError) as e:
                    logger.debug(f"Failed to register bold font {bold_path}: {e}")
            break
        else:
            logger.warning('PDF Fonts: no Arabic-capable font found, Arabic text will not render correctly')

        _font_state['checked'] = True
        return _font_state['regular']


@dataclass(frozen=True)
class FontSet:
    """Fonts used for one document"""
    regular: str
    bold: str
    arabic: Optional[str] = None
    arabic_bold: Optional[str] = None

    def pick(self, text: str, bold: bool = False) -> str:
        """Arabic font for text with Arabic characters (when available), else the base font"""
        if self.arabic and contains_arabic(text):
            return (self.arabic_bold or self.arabic) if bold else self.arabic
        return self.bold if bold else self.regular


def resolve_fonts(language: str, font_family: str) -> FontSet:
    arabic = ensure_fonts_available()
    arabic_bold = _font_state['bold'] or arabic

    if language == 'ar' and arabic:
        return FontSet(regular=arabic, bold=arabic_bold, arabic=arabic, arabic_bold=arabic_bold)

    registered = pdfmetrics.getRegisteredFontNames()
    if font_family in STANDARD_BOLD_FONTS:
        regular, bold = font_family, STANDARD_BOLD_FONTS[font_family]
    elif font_family in pdfmetrics.standardFonts or font_family in registered:
        regular = bold = font_family
    else:
        logger.warning(f"Font {font_family!r} is not available, using {DEFAULT_FONT_NAME}")
        regular, bold = DEFAULT_FONT_NAME, STANDARD_BOLD_FONTS[DEFAULT_FONT_NAME]
    return FontSet(regular=regular, bold=bold, arabic=arabic, arabic_bold=arabic_bold)


def get_page_size(name: Optional[str] = None) -> Tuple[float, float]:
    name = (name or PDF_CONFIG['page_size']).upper()
    if name not in PAGE_SIZES:
        raise ValueError(f"Unsupported page size {name!r}; expected one of {', '.join(PAGE_SIZES)}")
    return PAGE_SIZES[name]


def contains_arabic(text: str) -> bool:
    return any(lo <= ch <= hi for ch in text for lo, hi in _ARABIC_RANGES)


def shape_text_for_arabic(text: str, rtl: bool = True) -> str:
    """Reshape Arabic letters and reorder one line into visual order.

    Numbers and Latin runs keep their left-to-right order inside the line.
    """
    if not text or not contains_arabic(text):
        return text
    reshaped = arabic_reshaper.reshape(text)
    return get_display(reshaped, base_dir='R' if rtl else 'L')


def text_width(text: str, font_name: str, font_size: float) -> float:
    return pdfmetrics.stringWidth(shape_text_for_arabic(text), font_name, font_size)


def paragraph_markup(text: str, font_name: str, font_size: float, max_width: float, rtl: bool = True) -> str:
    """Escaped Paragraph markup for plain `text`.

    Text with Arabic is broken into lines in logical order first and each line
    is then shaped on its own, so wrapped lines still read top to bottom.
    """
    lines: List[str] = []
    for part in text.split('\n'):
        if not contains_arabic(part):
            lines.append(part)
            continue
        reshaped = arabic_reshaper.reshape(part)
        for line in simpleSplit(reshaped, font_name, font_size, max_width):
            lines.append(get_display(line, base_dir='R' if rtl else 'L'))
    return '<br/>'.join(html.escape(line, quote=False) for line in lines)


def truncate_text(text: str, max_chars: int) -> str:
    """Cut cell text longer than `max_chars` so a table row stays shorter than a page"""
    if max_chars and len(text) > max_chars:
        return text[:max_chars] + '…'
    return text


def format_column_name(key: str) -> str:
    """Convert snake_case or camelCase to Title Case"""
    formatted = re.sub(r'[_]|([a-z])([A-Z])', r'\1 \2', key)
    return formatted.title()


def hex_to_color(hex_color: str):
    """Convert hex color to ReportLab color object"""
    value = hex_color[1:] if hex_color.startswith('#') else hex_color
    try:
        r = int(value[0:2], 16) / 255.0
        g = int(value[2:4], 16) / 255.0
        b = int(value[4:6], 16) / 255.0
    except ValueError:
        logger.warning(f"Invalid color {hex_color!r}, using black")
        return colors.black
    return colors.Color(r, g, b)


def read_logo_size(path: str, target_height: float) -> Optional[Tuple[float, float]]:
    """Logo width/height scaled to `target_height`, or None when the file is unusable"""
    if not path or not os.path.isfile(path):
        return None
    try:
        with PILImage.open(path) as img:
            orig_w, orig_h = img.size
    except (UnidentifiedImageError, OSError) as e:
        logger.warning(f"Cannot read logo {path}: {e}")
        return None
    if orig_h <= 0:
        return None
    scale = float(target_height) / float(orig_h)
    return orig_w * scale, float(target_height)
