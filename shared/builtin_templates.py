"""
Built-in document templates, one Arabic default per category plus English variants
"""
import copy
from typing import Dict, List, Any, Tuple

from models.template_models import DocumentTemplate

PRODUCT_COLUMNS = [
    {'field': '#'},
    {'field': 'sku'},
    {'field': ['nameAr', 'nameEn', 'name']},
    {'field': ['unitAr', 'unitEn', 'unit'], 'default': '-'},
    {'field': ['quantity', 'qty']},
    {'field': ['unitPrice', 'price']},
    {'field': ['total', 'lineTotal'], 'default': '-'},
]

PRODUCT_COLUMNS_EN = [
    {'field': '#'},
    {'field': 'sku'},
    {'field': ['nameEn', 'name', 'nameAr']},
    {'field': ['unitEn', 'unit', 'unitAr'], 'default': '-'},
    {'field': ['quantity', 'qty']},
    {'field': ['unitPrice', 'price']},
    {'field': ['total', 'lineTotal'], 'default': '-'},
]

INVOICE_COLUMNS = [
    {'field': '#'},
    {'field': ['descriptionAr', 'nameAr', 'description', 'nameEn']},
    {'field': ['quantity', 'qty']},
    {'field': ['unitPrice', 'price']},
    {'field': ['total', 'lineTotal'], 'default': '-'},
]

CONTRACT_COLUMNS = [
    {'field': '#'},
    {'field': ['nameAr', 'nameEn', 'name']},
    {'field': ['contractedQuantity', 'quantity', 'qty']},
    {'field': ['unitPrice', 'price']},
    {'field': ['notesAr', 'notes'], 'default': ''},
]

COMPANY_VARIABLES_AR = ['companyNameAr', 'companyAddressAr', 'companyPhone', 'companyEmail']
COMPANY_VARIABLES_EN = ['companyName', 'companyAddress', 'companyPhone', 'companyEmail']


def _header(language: str, **extra: Any) -> Dict[str, Any]:
    suffix = 'Ar' if language == 'ar' else ''
    content = {
        'companyName': f'{{{{companyName{suffix}}}}}',
        'address': f'{{{{companyAddress{suffix}}}}}',
        'phone': '{{companyPhone}}',
        'email': '{{companyEmail}}',
    }
    content.update(extra)
    content['logo'] = True
    return {'type': 'header', 'content': content, 'order': 0}


def _table(headers: List[str], columns: List[Dict[str, Any]], order: int) -> Dict[str, Any]:
    return {
        'type': 'table',
        'content': {
            'headers': headers,
            'dataSource': '{{products}}',
            'columns': copy.deepcopy(columns),
            'showBorders': True,
            'alternateRowColors': True,
        },
        'order': order,
    }


def _footer(text: str, order: int) -> Dict[str, Any]:
    return {
        'type': 'footer',
        'content': {
            'text': text,
            'contact': '{{companyPhone}} | {{companyEmail}}',
            'pageNumbers': True,
        },
        'order': order,
    }


def _styles(primary: str, accent: str) -> Dict[str, Any]:
    return {
        'primaryColor': primary,
        'secondaryColor': '#64748b',
        'accentColor': accent,
        'fontSize': 10,
        'fontFamily': 'Helvetica',
        'headerHeight': 120,
        'footerHeight': 70,
        'margins': {'top': 140, 'bottom': 90, 'left': 50, 'right': 50},
    }


BUILTIN_TEMPLATES: List[Dict[str, Any]] = [
    {
        'id': 'price-offer-ar',
        'name': 'قالب عرض السعر القياسي',
        'description': 'قالب عرض سعر احترافي لمنتجات الاتفاقية طويلة الأجل',
        'category': 'price_offer',
        'language': 'ar',
        'sections': [
            _header('ar'),
            {
                'type': 'body',
                'content': {
                    'title': 'عرض السعر',
                    'date': '{{date}}',
                    'offerNumber': '{{offerNumber}}',
                    'clientName': '{{clientNameAr}}',
                    'ltaName': '{{ltaNameAr}}',
                    'validUntil': '{{validUntil}}',
                },
                'order': 1,
            },
            _table(['#', 'الرمز', 'اسم المنتج', 'الوحدة', 'الكمية', 'سعر الوحدة', 'المجموع'], PRODUCT_COLUMNS, 2),
            {'type': 'spacer', 'content': {'height': 20}, 'order': 3},
            {
                'type': 'body',
                'content': {
                    'subtotal': '{{subtotal}}',
                    'tax': '{{tax}}',
                    'taxRate': '{{taxRate}}',
                    'discount': '{{discount}}',
                    'total': '{{total}}',
                    'currency': '{{currency}}',
                },
                'order': 4,
            },
            {
                'type': 'terms',
                'content': {
                    'title': 'الشروط والأحكام',
                    'items': [
                        'هذا العرض صالح حتى {{validUntil}}',
                        'الأسعار مبنية على الاتفاقية: {{ltaNameAr}}',
                        'شروط الدفع: {{paymentTermsAr}}',
                        'وقت التسليم: {{deliveryTimeAr}}',
                        'جميع الأسعار بـ {{currency}}',
                    ],
                },
                'order': 5,
            },
            _footer('شكراً لتعاملكم معنا', 6),
        ],
        'variables': COMPANY_VARIABLES_AR + [
            'date', 'offerNumber', 'clientNameAr', 'ltaNameAr', 'validUntil',
            'products', 'subtotal', 'tax', 'taxRate', 'discount', 'total',
            'currency', 'paymentTermsAr', 'deliveryTimeAr',
        ],
        'styles': _styles('#2563eb', '#10b981'),
        'isActive': True,
        'isDefault': True,
        'version': 1,
    },
    {
        'id': 'price-offer-en',
        'name': 'Standard Price Offer',
        'description': 'Price offer for long-term agreement products',
        'category': 'price_offer',
        'language': 'en',
        'sections': [
            _header('en'),
            {
                'type': 'body',
                'content': {
                    'title': 'Price Offer',
                    'date': '{{date}}',
                    'offerNumber': '{{offerNumber}}',
                    'clientName': '{{clientName}}',
                    'ltaName': '{{ltaName}}',
                    'validUntil': '{{validUntil}}',
                },
                'order': 1,
            },
            _table(['#', 'SKU', 'Product', 'Unit', 'Qty', 'Unit Price', 'Total'], PRODUCT_COLUMNS_EN, 2),
            {'type': 'spacer', 'content': {'height': 20}, 'order': 3},
            {
                'type': 'body',
                'content': {
                    'subtotal': '{{subtotal}}',
                    'tax': '{{tax}}',
                    'taxRate': '{{taxRate}}',
                    'discount': '{{discount}}',
                    'total': '{{total}}',
                    'currency': '{{currency}}',
                },
                'order': 4,
            },
            {
                'type': 'terms',
                'content': {
                    'title': 'Terms and Conditions',
                    'items': [
                        'This offer is valid until {{validUntil}}',
                        'Prices are based on agreement: {{ltaName}}',
                        'Payment terms: {{paymentTerms}}',
                        'Delivery time: {{deliveryTime}}',
                        'All prices are in {{currency}}',
                    ],
                },
                'order': 5,
            },
            _footer('Thank you for your business', 6),
        ],
        'variables': COMPANY_VARIABLES_EN + [
            'date', 'offerNumber', 'clientName', 'ltaName', 'validUntil',
            'products', 'subtotal', 'tax', 'taxRate', 'discount', 'total',
            'currency', 'paymentTerms', 'deliveryTime',
        ],
        'styles': _styles('#2563eb', '#10b981'),
        'isActive': True,
        'isDefault': False,
        'version': 1,
    },
    {
        'id': 'order-ar',
        'name': 'قالب تأكيد الطلب',
        'description': 'قالب تأكيد طلب احترافي مع تفاصيل التسليم',
        'category': 'order',
        'language': 'ar',
        'sections': [
            _header('ar'),
            {
                'type': 'body',
                'content': {
                    'title': 'تأكيد الطلب',
                    'orderNumber': '{{orderNumber}}',
                    'date': '{{date}}',
                    'clientName': '{{clientNameAr}}',
                    'department': '{{department}}',
                    'location': '{{locationAr}}',
                },
                'order': 1,
            },
            _table(['#', 'الرمز', 'اسم المنتج', 'الوحدة', 'الكمية', 'سعر الوحدة', 'المجموع'], PRODUCT_COLUMNS, 2),
            {'type': 'spacer', 'content': {'height': 20}, 'order': 3},
            {
                'type': 'body',
                'content': {
                    'subtotal': '{{subtotal}}',
                    'tax': '{{tax}}',
                    'total': '{{total}}',
                    'currency': '{{currency}}',
                },
                'order': 4,
            },
            {
                'type': 'terms',
                'content': {
                    'title': 'معلومات التسليم',
                    'items': [
                        'عنوان التسليم: {{deliveryAddressAr}}',
                        'الشخص المسؤول: {{contactPersonAr}}',
                        'التسليم المتوقع: {{expectedDeliveryAr}}',
                        'تعليمات خاصة: {{specialInstructionsAr}}',
                    ],
                },
                'order': 5,
            },
            _footer('شكراً لطلبكم', 6),
        ],
        'variables': COMPANY_VARIABLES_AR + [
            'orderNumber', 'date', 'clientNameAr', 'department', 'locationAr',
            'products', 'subtotal', 'tax', 'total', 'currency',
            'deliveryAddressAr', 'contactPersonAr', 'expectedDeliveryAr',
            'specialInstructionsAr',
        ],
        'styles': _styles('#059669', '#10b981'),
        'isActive': True,
        'isDefault': True,
        'version': 1,
    },
    {
        'id': 'order-en',
        'name': 'Order Confirmation',
        'description': 'Order confirmation with delivery details',
        'category': 'order',
        'language': 'en',
        'sections': [
            _header('en'),
            {
                'type': 'body',
                'content': {
                    'title': 'Order Confirmation',
                    'orderNumber': '{{orderNumber}}',
                    'date': '{{date}}',
                    'clientName': '{{clientName}}',
                    'department': '{{department}}',
                    'location': '{{location}}',
                },
                'order': 1,
            },
            _table(['#', 'SKU', 'Product', 'Unit', 'Qty', 'Unit Price', 'Total'], PRODUCT_COLUMNS_EN, 2),
            {'type': 'spacer', 'content': {'height': 20}, 'order': 3},
            {
                'type': 'body',
                'content': {
                    'subtotal': '{{subtotal}}',
                    'tax': '{{tax}}',
                    'total': '{{total}}',
                    'currency': '{{currency}}',
                },
                'order': 4,
            },
            {
                'type': 'terms',
                'content': {
                    'title': 'Delivery Information',
                    'items': [
                        'Delivery address: {{deliveryAddress}}',
                        'Contact person: {{contactPerson}}',
                        'Expected delivery: {{expectedDelivery}}',
                        'Special instructions: {{specialInstructions}}',
                    ],
                },
                'order': 5,
            },
            _footer('Thank you for your order', 6),
        ],
        'variables': COMPANY_VARIABLES_EN + [
            'orderNumber', 'date', 'clientName', 'department', 'location',
            'products', 'subtotal', 'tax', 'total', 'currency',
            'deliveryAddress', 'contactPerson', 'expectedDelivery',
            'specialInstructions',
        ],
        'styles': _styles('#059669', '#10b981'),
        'isActive': True,
        'isDefault': False,
        'version': 1,
    },
    {
        'id': 'invoice-ar',
        'name': 'قالب الفاتورة',
        'description': 'قالب فاتورة احترافي مع شروط الدفع وتفاصيل البنك',
        'category': 'invoice',
        'language': 'ar',
        'sections': [
            _header('ar', taxNumber='{{taxNumber}}'),
            {
                'type': 'body',
                'content': {
                    'title': 'فاتورة',
                    'invoiceNumber': '{{invoiceNumber}}',
                    'date': '{{date}}',
                    'dueDate': '{{dueDate}}',
                    'clientName': '{{clientNameAr}}',
                    'clientAddress': '{{clientAddressAr}}',
                },
                'order': 1,
            },
            _table(['#', 'الوصف', 'الكمية', 'سعر الوحدة', 'المجموع'], INVOICE_COLUMNS, 2),
            {'type': 'spacer', 'content': {'height': 20}, 'order': 3},
            {
                'type': 'body',
                'content': {
                    'subtotal': '{{subtotal}}',
                    'tax': '{{tax}}',
                    'taxRate': '{{taxRate}}',
                    'total': '{{total}}',
                    'currency': '{{currency}}',
                },
                'order': 4,
            },
            {
                'type': 'terms',
                'content': {
                    'title': 'شروط الدفع',
                    'items': [
                        'تاريخ الاستحقاق: {{dueDate}}',
                        'طريقة الدفع: {{paymentMethodAr}}',
                        'تفاصيل البنك: {{bankDetailsAr}}',
                        'ملاحظات: {{notesAr}}',
                    ],
                },
                'order': 5,
            },
            _footer('شكراً لثقتكم بنا', 6),
        ],
        'variables': COMPANY_VARIABLES_AR + [
            'taxNumber', 'invoiceNumber', 'date', 'dueDate', 'clientNameAr',
            'clientAddressAr', 'products', 'subtotal', 'tax', 'taxRate', 'total',
            'currency', 'paymentMethodAr', 'bankDetailsAr', 'notesAr',
        ],
        'styles': _styles('#dc2626', '#f97316'),
        'isActive': True,
        'isDefault': True,
        'version': 1,
    },
    {
        'id': 'contract-ar',
        'name': 'قالب عقد الاتفاقية',
        'description': 'قالب عقد الاتفاقية طويلة الأجل (LTA)',
        'category': 'contract',
        'language': 'ar',
        'sections': [
            _header('ar'),
            {
                'type': 'body',
                'content': {
                    'title': 'عقد اتفاقية طويلة الأجل',
                    'contractNumber': '{{contractNumber}}',
                    'date': '{{date}}',
                    'clientName': '{{clientNameAr}}',
                    'ltaName': '{{ltaNameAr}}',
                    'startDate': '{{startDate}}',
                    'endDate': '{{endDate}}',
                },
                'order': 1,
            },
            {
                'type': 'terms',
                'content': {
                    'title': 'بنود الاتفاقية',
                    'items': [
                        'مدة الاتفاقية: من {{startDate}} إلى {{endDate}}',
                        'نطاق الاتفاقية: {{scopeAr}}',
                        'شروط التسعير: {{pricingTermsAr}}',
                        'شروط الدفع: {{paymentTermsAr}}',
                        'شروط التسليم: {{deliveryTermsAr}}',
                    ],
                },
                'order': 2,
            },
            _table(['#', 'اسم المنتج', 'الكمية المتعاقد عليها', 'السعر', 'ملاحظات'], CONTRACT_COLUMNS, 3),
            _footer('التوقيعات', 4),
        ],
        'variables': COMPANY_VARIABLES_AR + [
            'contractNumber', 'date', 'clientNameAr', 'ltaNameAr', 'startDate',
            'endDate', 'scopeAr', 'pricingTermsAr', 'paymentTermsAr',
            'deliveryTermsAr', 'products',
        ],
        'styles': _styles('#7c3aed', '#8b5cf6'),
        'isActive': True,
        'isDefault': True,
        'version': 1,
    },
]


def get_builtin_template_dicts() -> List[Dict[str, Any]]:
    """Deep copies of the built-in template definitions"""
    return copy.deepcopy(BUILTIN_TEMPLATES)


def load_builtin_templates() -> Tuple[DocumentTemplate, ...]:
    return tuple(DocumentTemplate.from_dict(data) for data in BUILTIN_TEMPLATES)
