"""
Data models package for the document rendering service
"""
from .data_models import (
    DocumentMetadata,
    RenderedDocument
)
from .template_models import (
    TEMPLATE_CATEGORIES,
    SECTION_TYPES,
    ROW_NUMBER_FIELD,
    Margins,
    StyleSheet,
    HeaderContent,
    BodyContent,
    TableColumn,
    TableContent,
    SpacerContent,
    TermsContent,
    FooterContent,
    Section,
    DocumentTemplate,
    validate_template,
    ensure_valid_template
)

__all__ = [
    'DocumentMetadata',
    'RenderedDocument',
    'TEMPLATE_CATEGORIES',
    'SECTION_TYPES',
    'ROW_NUMBER_FIELD',
    'Margins',
    'StyleSheet',
    'HeaderContent',
    'BodyContent',
    'TableColumn',
    'TableContent',
    'SpacerContent',
    'TermsContent',
    'FooterContent',
    'Section',
    'DocumentTemplate',
    'validate_template',
    'ensure_valid_template'
]
