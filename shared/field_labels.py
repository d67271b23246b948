"""
Bilingual labels for body fields and fixed document strings
"""
from typing import Dict

from utils.pdf_utils import format_column_name

FIELD_LABELS: Dict[str, Dict[str, str]] = {
    'date': {'ar': 'التاريخ', 'en': 'Date'},
    'offerNumber': {'ar': 'رقم العرض', 'en': 'Offer No.'},
    'orderNumber': {'ar': 'رقم الطلب', 'en': 'Order No.'},
    'invoiceNumber': {'ar': 'رقم الفاتورة', 'en': 'Invoice No.'},
    'contractNumber': {'ar': 'رقم العقد', 'en': 'Contract No.'},
    'clientName': {'ar': 'العميل', 'en': 'Client'},
    'clientAddress': {'ar': 'عنوان العميل', 'en': 'Client Address'},
    'ltaName': {'ar': 'الاتفاقية', 'en': 'Agreement'},
    'validUntil': {'ar': 'صالح حتى', 'en': 'Valid Until'},
    'dueDate': {'ar': 'تاريخ الاستحقاق', 'en': 'Due Date'},
    'startDate': {'ar': 'تاريخ البدء', 'en': 'Start Date'},
    'endDate': {'ar': 'تاريخ الانتهاء', 'en': 'End Date'},
    'department': {'ar': 'القسم', 'en': 'Department'},
    'location': {'ar': 'الموقع', 'en': 'Location'},
    'subtotal': {'ar': 'المجموع الفرعي', 'en': 'Subtotal'},
    'tax': {'ar': 'الضريبة', 'en': 'Tax'},
    'taxRate': {'ar': 'نسبة الضريبة %', 'en': 'Tax Rate %'},
    'discount': {'ar': 'الخصم', 'en': 'Discount'},
    'total': {'ar': 'الإجمالي', 'en': 'Total'},
    'currency': {'ar': 'العملة', 'en': 'Currency'},
    'taxNumber': {'ar': 'الرقم الضريبي', 'en': 'Tax No.'},
}

NO_ITEMS_TEXT = {'ar': 'لا توجد عناصر', 'en': 'No items'}

PAGE_LABEL = {'ar': 'صفحة {page} من {pages}', 'en': 'Page {page} of {pages}'}


def field_label(key: str, language: str) -> str:
    """Label for a body field; unknown keys are title-cased"""
    labels = FIELD_LABELS.get(key)
    if labels is None:
        return format_column_name(key)
    return labels.get(language) or labels['en']


def no_items_text(language: str) -> str:
    return NO_ITEMS_TEXT.get(language, NO_ITEMS_TEXT['en'])


def page_label(page_number: int, page_count: int, language: str) -> str:
    pattern = PAGE_LABEL.get(language, PAGE_LABEL['en'])
    return pattern.format(page=page_number, pages=page_count)
