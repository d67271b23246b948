"""
Utilities package: errors, placeholder parsing and PDF text helpers
"""
from .errors import (
    DocumentGenerationError,
    TemplateValidationError,
    PlaceholderSyntaxError,
    TemplateNotFound,
    NoDefaultTemplate,
    AmbiguousDefaultTemplate,
    MissingVariables,
    TypeMismatch,
    SectionRenderError,
    InvalidEntity
)

__all__ = [
    'DocumentGenerationError',
    'TemplateValidationError',
    'PlaceholderSyntaxError',
    'TemplateNotFound',
    'NoDefaultTemplate',
    'AmbiguousDefaultTemplate',
    'MissingVariables',
    'TypeMismatch',
    'SectionRenderError',
    'InvalidEntity'
]
