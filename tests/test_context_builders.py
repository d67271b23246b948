"""Tests for building binding contexts from business entities."""
from datetime import date, datetime
from decimal import Decimal

import pytest

from services.context_builders import (
    build_context,
    build_line_items,
    build_contract_context,
    totals_variables,
    format_money,
    format_quantity,
    format_date,
    CONTEXT_BUILDERS
)
from services.variable_resolver import VariableResolver

COMPANY = {
    'nameAr': 'شركة القاضي التجارية',
    'nameEn': 'Al Qadi Trading Company',
    'addressAr': 'الرياض',
    'addressEn': 'Riyadh',
    'phone': '+966 11 000 0000',
    'email': 'info@alqadi.com',
    'taxNumber': '300000000000003',
    'currency': 'SAR',
    'taxRate': '15',
}

CLIENT = {'nameAr': 'شركة العميل', 'nameEn': 'Client Co.', 'addressAr': 'جدة', 'email': 'c@client.com'}
LTA = {'nameAr': 'اتفاقية التوريد', 'nameEn': 'Supply agreement'}

ITEMS = [
    {'sku': 'SKU-1', 'nameAr': 'ورق طباعة', 'nameEn': 'Printing paper', 'unitAr': 'كرتون', 'quantity': 10,
     'unitPrice': '123.45'},
    {'sku': 'SKU-2', 'nameAr': 'حبر', 'nameEn': 'Ink', 'quantity': '5', 'unitPrice': 246.9},
]

ENTITIES = {
    'price_offer': {
        'offerNumber': 'PO-2024-001', 'createdAt': '2024-01-15T09:00:00Z', 'validUntil': '2024-02-15',
        'items': ITEMS, 'paymentTermsAr': 'خلال 30 يوماً', 'deliveryTime': 'Two weeks',
    },
    'order': {
        'orderNumber': 'ORD-7', 'date': '2024-01-20', 'department': 'IT', 'locationAr': 'المستودع',
        'items': ITEMS, 'deliveryAddress': 'Warehouse 3',
    },
    'invoice': {
        'invoiceNumber': 'INV-9', 'date': date(2024, 1, 25), 'dueDate': '2024-02-25',
        'items': ITEMS, 'paymentMethodAr': 'تحويل بنكي',
    },
    'contract': {
        'contractNumber': 'C-1', 'date': '2024-01-01', 'startDate': '2024-01-01', 'endDate': '2024-12-31',
        'items': ITEMS, 'scopeAr': 'توريد الأدوات المكتبية',
    },
}


class TestLineItems:
    def test_totals_and_formatting(self):
        records, subtotal = build_line_items(ITEMS)
        assert subtotal == Decimal('2469.00')
        assert records[0] == {
            'sku': 'SKU-1', 'nameAr': 'ورق طباعة', 'nameEn': 'Printing paper', 'unitAr': 'كرتون',
            'quantity': '10', 'unitPrice': '123.45', 'total': '1,234.50',
        }
        assert records[1]['unitPrice'] == '246.90'

        totals = totals_variables(subtotal, {}, COMPANY)
        assert totals == {
            'subtotal': '2,469.00',
            'discount': '0.00',
            'taxRate': '15',
            'tax': '370.35',
            'total': '2,839.35',
            'currency': 'SAR',
        }

    def test_line_totals_round_half_up(self):
        records, subtotal = build_line_items([{'nameEn': 'x', 'quantity': 1, 'unitPrice': '0.125'}])
        assert records[0]['total'] == '0.13'
        assert subtotal == Decimal('0.13')
        assert totals_variables(subtotal, {}, COMPANY)['tax'] == '0.02'

    def test_discount_before_tax(self):
        totals = totals_variables(Decimal('100'), {'discount': '10', 'taxRate': 5, 'currency': 'USD'}, COMPANY)
        assert totals['tax'] == '4.50'
        assert totals['total'] == '94.50'
        assert totals['currency'] == 'USD'

    @pytest.mark.parametrize('tax_rate', [None, ''])
    def test_blank_tax_rate_uses_company_rate(self, tax_rate):
        totals = totals_variables(Decimal('100'), {'taxRate': tax_rate}, COMPANY)
        assert totals['taxRate'] == '15'
        assert totals['tax'] == '15.00'
        assert totals['total'] == '115.00'

    @pytest.mark.parametrize('items', [
        'not a list',
        [['x', 1]],
        [{'quantity': 1, 'unitPrice': 1}],
        [{'nameEn': 'x', 'unitPrice': 1}],
        [{'nameEn': 'x', 'quantity': 'many', 'unitPrice': 1}],
        [{'nameEn': 'x', 'quantity': 1, 'unitPrice': 'NaN'}],
    ])
    def test_invalid_items(self, items):
        with pytest.raises(ValueError):
            build_line_items(items)


class TestFormatting:
    def test_money(self):
        assert format_money(Decimal('1234.5')) == '1,234.50'
        assert format_money(Decimal('0.005')) == '0.01'

    def test_quantity(self):
        assert format_quantity(Decimal('3')) == '3'
        assert format_quantity(Decimal('3.00')) == '3'
        assert format_quantity(Decimal('2.50')) == '2.5'

    def test_dates(self):
        assert format_date('2024-01-15T09:00:00Z', 'date') == '2024-01-15'
        assert format_date(datetime(2024, 3, 1, 12, 0), 'date') == '2024-03-01'
        assert format_date(date(2024, 3, 1), 'date') == '2024-03-01'
        with pytest.raises(ValueError):
            format_date('15/01/2024', 'date')
        with pytest.raises(ValueError):
            format_date(None, 'date')


class TestBuilders:
    @pytest.mark.parametrize('category', sorted(ENTITIES))
    def test_context_satisfies_every_template(self, category, registry):
        context = build_context(category, ENTITIES[category], CLIENT, LTA, company=COMPANY)
        for template in registry.list_templates(category):
            assert VariableResolver().find_missing(template, context) == [], template.id

    @pytest.mark.parametrize('category', sorted(ENTITIES))
    def test_renders(self, category, pdf_service):
        context = build_context(category, ENTITIES[category], CLIENT, LTA, company=COMPANY)
        document = pdf_service.generate_document(category, context)
        assert document.content.startswith(b'%PDF')
        assert document.page_count >= 1

    def test_price_offer_values(self):
        context = build_context('price_offer', ENTITIES['price_offer'], CLIENT, LTA, company=COMPANY)
        assert context['date'] == '2024-01-15'
        assert context['clientNameAr'] == 'شركة العميل'
        assert context['clientAddress'] == 'جدة'
        assert context['ltaName'] == 'Supply agreement'
        assert context['paymentTerms'] == 'خلال 30 يوماً'
        assert context['deliveryTimeAr'] == 'Two weeks'
        assert context['total'] == '2,839.35'

    def test_contract_uses_contracted_quantity_and_own_agreement_name(self):
        entity = dict(ENTITIES['contract'], nameAr='اتفاقية 2024', items=[
            {'nameAr': 'قلم', 'contractedQuantity': 100, 'quantity': 5, 'unitPrice': 2},
        ])
        context = build_contract_context(entity, CLIENT, company=COMPANY)
        assert context['products'][0]['quantity'] == '100'
        assert context['ltaNameAr'] == 'اتفاقية 2024'

    def test_order_number_falls_back_to_id(self):
        entity = dict(ENTITIES['order'])
        del entity['orderNumber']
        entity['id'] = 42
        assert build_context('order', entity, CLIENT, company=COMPANY)['orderNumber'] == '42'

    def test_missing_required_fields(self):
        entity = dict(ENTITIES['invoice'])
        del entity['dueDate']
        with pytest.raises(ValueError, match='dueDate'):
            build_context('invoice', entity, CLIENT, company=COMPANY)
        with pytest.raises(ValueError, match='client'):
            build_context('invoice', ENTITIES['invoice'], {'email': 'x'}, company=COMPANY)

    def test_unknown_category(self):
        assert sorted(CONTEXT_BUILDERS) == ['contract', 'invoice', 'order', 'price_offer']
        with pytest.raises(ValueError):
            build_context('receipt', {}, CLIENT)
