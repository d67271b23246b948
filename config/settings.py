"""
Configuration settings for the document rendering service
"""
import os
from typing import Dict, Any, List
from dotenv import load_dotenv

# Load environment variables from .env or environment.env file
# Try .env first (standard), then fallback to environment.env
env_file = '.env' if os.path.exists('.env') else 'environment.env'
load_dotenv(env_file, override=False)  # override=False means existing env vars take precedence


def _split_paths(value: str) -> List[str]:
    return [p.strip() for p in value.split(os.pathsep) if p.strip()]


# PDF Configuration - page geometry, fonts and logo
PDF_CONFIG = {
    'page_size': os.getenv('PDF_PAGE_SIZE', 'A4'),
    'fonts_dir': os.getenv('PDF_FONTS_DIR', os.path.join(os.path.dirname(os.path.dirname(__file__)), 'fonts')),
    'extra_font_paths': _split_paths(os.getenv('PDF_EXTRA_FONT_PATHS', '')),
    'logo_path': os.getenv('PDF_LOGO_PATH', ''),
    'logo_height': float(os.getenv('PDF_LOGO_HEIGHT', '60')),
    'page_compression': os.getenv('PDF_PAGE_COMPRESSION', 'yes').lower() == 'yes',
    # table cell text longer than this is cut and ends with an ellipsis
    'max_cell_chars': int(os.getenv('PDF_MAX_CELL_CHARS', '300')),
}

# Template Configuration
TEMPLATE_CONFIG = {
    # Optional JSON file with extra templates (same camelCase shape as the built-ins)
    'templates_file': os.getenv('TEMPLATES_FILE', ''),
    # Raise instead of falling back when a category's default template is missing/ambiguous
    'strict_defaults': os.getenv('TEMPLATES_STRICT_DEFAULTS', 'no').lower() == 'yes',
}

# Company profile used when building binding contexts from business entities
COMPANY_CONFIG = {
    'nameAr': os.getenv('COMPANY_NAME_AR', 'شركة القاضي التجارية'),
    'nameEn': os.getenv('COMPANY_NAME_EN', 'Al Qadi Trading Company'),
    'addressAr': os.getenv('COMPANY_ADDRESS_AR', 'الرياض، المملكة العربية السعودية'),
    'addressEn': os.getenv('COMPANY_ADDRESS_EN', 'Riyadh, Kingdom of Saudi Arabia'),
    'phone': os.getenv('COMPANY_PHONE', '+966 11 000 0000'),
    'email': os.getenv('COMPANY_EMAIL', 'info@alqadi.com'),
    'taxNumber': os.getenv('COMPANY_TAX_NUMBER', '300000000000003'),
    'currency': os.getenv('COMPANY_CURRENCY', 'SAR'),
    'taxRate': os.getenv('COMPANY_TAX_RATE', '15'),
}

# API Configuration
API_CONFIG = {
    'title': 'Procurement Documents API',
    'version': '1.0.0',
    'allowed_origins': [o.strip() for o in os.getenv('FRONTEND_ORIGINS', 'http://127.0.0.1:3000').split(',') if o.strip()],
}

# Logging Configuration
LOGGING_CONFIG = {
    'level': os.getenv('LOG_LEVEL', 'INFO').upper(),
    'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
}

# Style applied when a template omits optional style values
DEFAULT_STYLE_CONFIG = {
    'primaryColor': '#2563eb',
    'secondaryColor': '#64748b',
    'accentColor': '#10b981',
    'fontSize': 10,
    'fontFamily': 'Helvetica',
    'headerHeight': 100,
    'footerHeight': 60,
    'margins': {
        'top': 120,
        'bottom': 80,
        'left': 50,
        'right': 50,
    },
    'repeatHeader': True,
    'repeatFooter': True,
}


def get_default_style_config() -> Dict[str, Any]:
    """Get a copy of the default template style"""
    style = dict(DEFAULT_STYLE_CONFIG)
    style['margins'] = dict(DEFAULT_STYLE_CONFIG['margins'])
    return style


def get_company_config() -> Dict[str, Any]:
    """Get a copy of the company profile"""
    return COMPANY_CONFIG.copy()
