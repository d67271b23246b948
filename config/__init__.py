"""
Configuration package for the document rendering service
"""
from .settings import (
    PDF_CONFIG,
    TEMPLATE_CONFIG,
    COMPANY_CONFIG,
    API_CONFIG,
    LOGGING_CONFIG,
    DEFAULT_STYLE_CONFIG,
    get_default_style_config,
    get_company_config
)

__all__ = [
    'PDF_CONFIG',
    'TEMPLATE_CONFIG',
    'COMPANY_CONFIG',
    'API_CONFIG',
    'LOGGING_CONFIG',
    'DEFAULT_STYLE_CONFIG',
    'get_default_style_config',
    'get_company_config'
]
