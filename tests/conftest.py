"""
Shared fixtures for the document rendering tests
"""
import copy
from datetime import datetime, timezone

import pytest
from reportlab.lib.pagesizes import A4

from models.template_models import DocumentTemplate
from services.pdf_service import PDFService
from services.section_renderer import RenderContext
from shared.builtin_templates import load_builtin_templates
from shared.template_registry import TemplateRegistry, TemplateRegistryConfig
from utils.pdf_utils import FontSet

FIXED_TIME = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)

BASE_TEMPLATE = {
    'id': 'tpl-test',
    'name': 'Test template',
    'category': 'price_offer',
    'language': 'en',
    'sections': [
        {'type': 'header', 'content': {'companyName': '{{companyName}}'}, 'order': 0},
        {'type': 'body', 'content': {'title': 'Offer', 'date': '{{date}}'}, 'order': 1},
        {'type': 'footer', 'content': {'text': 'Thanks', 'pageNumbers': True}, 'order': 2},
    ],
    'variables': ['companyName', 'date'],
    'isActive': True,
    'isDefault': True,
}


@pytest.fixture
def fixed_time():
    return FIXED_TIME


@pytest.fixture
def make_template():
    """Factory building a DocumentTemplate from the minimal base definition"""
    def factory(**overrides) -> DocumentTemplate:
        data = copy.deepcopy(BASE_TEMPLATE)
        data.update(overrides)
        return DocumentTemplate.from_dict(data)
    return factory


@pytest.fixture
def table_template(make_template):
    """Minimal English template with a products table"""
    def factory(**overrides) -> DocumentTemplate:
        sections = copy.deepcopy(BASE_TEMPLATE['sections'])
        sections.insert(2, {
            'type': 'table',
            'content': {
                'headers': ['#', 'Product Name', 'Qty'],
                'dataSource': '{{products}}',
                'columns': ['#', ['nameEn', 'name'], {'field': ['quantity', 'qty'], 'default': '0'}],
                'alternateRowColors': True,
            },
            'order': 2,
        })
        sections[-1]['order'] = 3
        data = {
            'sections': sections,
            'variables': ['companyName', 'date', 'products'],
        }
        data.update(overrides)
        return make_template(**data)
    return factory


@pytest.fixture
def registry():
    return TemplateRegistry(TemplateRegistryConfig(templates=load_builtin_templates()))


@pytest.fixture
def pdf_service(registry):
    return PDFService(registry, clock=lambda: FIXED_TIME, logo_path='')


@pytest.fixture
def plain_fonts():
    return FontSet(regular='Helvetica', bold='Helvetica-Bold')


@pytest.fixture
def make_ctx(plain_fonts):
    def factory(template: DocumentTemplate) -> RenderContext:
        return RenderContext(
            page_width=A4[0],
            page_height=A4[1],
            styles=template.styles,
            language=template.language,
            fonts=plain_fonts,
        )
    return factory


def sample_products(count: int):
    return [
        {
            'sku': f'SKU-{i}',
            'nameAr': f'منتج {i}',
            'nameEn': f'Product {i}',
            'unitEn': 'pcs',
            'quantity': i,
            'unitPrice': '10.00',
            'total': f'{i * 10:.2f}',
        }
        for i in range(1, count + 1)
    ]


@pytest.fixture
def price_offer_context():
    """Complete variables for the Arabic price offer template"""
    return {
        'companyNameAr': 'شركة القاضي التجارية',
        'companyAddressAr': 'الرياض، المملكة العربية السعودية',
        'companyPhone': '+966 11 000 0000',
        'companyEmail': 'info@alqadi.com',
        'date': '2024-01-15',
        'offerNumber': 'PO-2024-001',
        'clientNameAr': 'شركة العميل',
        'ltaNameAr': 'اتفاقية التوريد',
        'validUntil': '2024-02-15',
        'products': sample_products(1),
        'subtotal': '10.00',
        'tax': '1.50',
        'taxRate': '15',
        'discount': '0.00',
        'total': '11.50',
        'currency': 'SAR',
        'paymentTermsAr': 'خلال 30 يوماً',
        'deliveryTimeAr': 'أسبوعان',
    }


@pytest.fixture
def price_offer_context_en():
    """Complete variables for the English price offer template"""
    return {
        'companyName': 'Al Qadi Trading Company',
        'companyAddress': 'Riyadh, Kingdom of Saudi Arabia',
        'companyPhone': '+966 11 000 0000',
        'companyEmail': 'info@alqadi.com',
        'date': '2024-01-15',
        'offerNumber': 'PO-2024-001',
        'clientName': 'Client Co.',
        'ltaName': 'Supply agreement',
        'validUntil': '2024-02-15',
        'products': sample_products(1),
        'subtotal': '10.00',
        'tax': '1.50',
        'taxRate': '15',
        'discount': '0.00',
        'total': '11.50',
        'currency': 'SAR',
        'paymentTerms': 'Net 30',
        'deliveryTime': 'Two weeks',
    }


@pytest.fixture
def make_products():
    return sample_products
