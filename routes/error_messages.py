"""
Bilingual error bodies and HTTP status mapping for document errors
"""
from typing import Dict, Any, Tuple

from utils.errors import (
    DocumentGenerationError,
    TemplateValidationError,
    TemplateNotFound,
    NoDefaultTemplate,
    AmbiguousDefaultTemplate,
    MissingVariables,
    TypeMismatch,
    SectionRenderError,
    InvalidEntity
)

STATUS_CODES = {
    TemplateNotFound: 404,
    NoDefaultTemplate: 409,
    AmbiguousDefaultTemplate: 409,
    MissingVariables: 422,
    TypeMismatch: 422,
    InvalidEntity: 422,
    TemplateValidationError: 422,
    SectionRenderError: 500,
}

ARABIC_MESSAGES = {
    'TemplateNotFound': 'القالب المطلوب غير موجود',
    'NoDefaultTemplate': 'لا يوجد قالب افتراضي نشط لهذه الفئة',
    'AmbiguousDefault': 'يوجد أكثر من قالب افتراضي نشط لهذه الفئة',
    'MissingVariables': 'متغيرات القالب التالية مفقودة: {names}',
    'TypeMismatch': 'قيمة المتغير {field} من نوع غير صحيح',
    'InvalidEntity': 'بيانات المستند غير مكتملة أو غير صحيحة',
    'TemplateValidationError': 'القالب غير صالح',
    'PlaceholderSyntaxError': 'صيغة المتغيرات في القالب غير صحيحة',
    'SectionRenderError': 'فشل إنشاء المستند',
}

DEFAULT_ARABIC_MESSAGE = 'حدث خطأ أثناء إنشاء المستند'


def status_for(exc: DocumentGenerationError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in STATUS_CODES:
            return STATUS_CODES[error_type]
    return 500


def arabic_message(exc: DocumentGenerationError) -> str:
    template = ARABIC_MESSAGES.get(exc.code, DEFAULT_ARABIC_MESSAGE)
    if isinstance(exc, MissingVariables):
        return template.format(names='، '.join(exc.names))
    if isinstance(exc, TypeMismatch):
        return template.format(field=exc.field)
    return template


def error_body(exc: DocumentGenerationError) -> Tuple[int, Dict[str, Any]]:
    """HTTP status plus {code, message: {en, ar}, details}"""
    return status_for(exc), {
        'code': exc.code,
        'message': {
            'en': str(exc),
            'ar': arabic_message(exc)
        },
        'details': exc.details()
    }
