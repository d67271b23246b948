"""
Binding-context builders: business entities -> flat template variables.

Each builder takes plain mappings (the entity, its client and optionally the
long-term agreement) and returns the variables used by the category's
templates, in both Arabic and English naming.
"""
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Dict, Any, List, Optional, Mapping, Callable, Tuple

from config.settings import get_company_config

CENT = Decimal('0.01')


def to_decimal(value: Any, field: str) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise ValueError(f"{field} must be a number")
    try:
        result = Decimal(str(value).replace(',', ''))
    except InvalidOperation:
        raise ValueError(f"{field} must be a number, got {value!r}")
    if not result.is_finite():
        raise ValueError(f"{field} must be a finite number")
    return result


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(value: Decimal) -> str:
    """2 decimal places, thousands separators: 1234.5 -> '1,234.50'"""
    return f"{round_money(value):,.2f}"


def format_quantity(value: Decimal) -> str:
    if value == value.to_integral_value():
        return str(int(value))
    return format(value.normalize(), 'f')


def format_date(value: Any, field: str) -> str:
    """ISO YYYY-MM-DD from a date, datetime or ISO string"""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            return datetime.fromisoformat(text).date().isoformat()
        except ValueError:
            raise ValueError(f"{field} must be an ISO date, got {value!r}")
    raise ValueError(f"{field} is required")


def _require(data: Mapping, *names: str, label: str) -> Any:
    """First present, non-empty value among `names`"""
    for name in names:
        value = data.get(name)
        if value not in (None, ''):
            return value
    raise ValueError(f"{label}: missing required field {' or '.join(repr(n) for n in names)}")


def _text(data: Optional[Mapping], *names: str) -> str:
    if not data:
        return ''
    for name in names:
        value = data.get(name)
        if value not in (None, ''):
            return str(value)
    return ''


def company_variables(company: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    company = company or get_company_config()
    return {
        'companyName': company['nameEn'],
        'companyNameAr': company['nameAr'],
        'companyAddress': company['addressEn'],
        'companyAddressAr': company['addressAr'],
        'companyPhone': company['phone'],
        'companyEmail': company['email'],
        'taxNumber': company.get('taxNumber', ''),
    }


def client_variables(client: Mapping) -> Dict[str, Any]:
    _require(client, 'nameAr', 'nameEn', label='client')
    return {
        'clientName': _text(client, 'nameEn', 'nameAr'),
        'clientNameAr': _text(client, 'nameAr', 'nameEn'),
        'clientAddress': _text(client, 'addressEn', 'address', 'addressAr'),
        'clientAddressAr': _text(client, 'addressAr', 'addressEn', 'address'),
        'clientEmail': _text(client, 'email'),
        'clientPhone': _text(client, 'phone'),
    }


def lta_variables(lta: Optional[Mapping]) -> Dict[str, Any]:
    return {
        'ltaName': _text(lta, 'nameEn', 'nameAr'),
        'ltaNameAr': _text(lta, 'nameAr', 'nameEn'),
    }


def build_line_items(items: Any, quantity_fields=('quantity', 'qty')) -> Tuple[List[Dict[str, Any]], Decimal]:
    """Table records with computed line totals, plus the subtotal"""
    if not isinstance(items, (list, tuple)):
        raise ValueError('items must be a list')
    records = []
    subtotal = Decimal('0')
    for i, item in enumerate(items):
        label = f"items[{i}]"
        if not isinstance(item, Mapping):
            raise ValueError(f"{label} must be an object")
        _require(item, 'nameAr', 'nameEn', 'name', 'descriptionAr', 'description', label=label)
        quantity = to_decimal(_require(item, *quantity_fields, label=label), f"{label}.quantity")
        unit_price = to_decimal(_require(item, 'unitPrice', 'price', label=label), f"{label}.unitPrice")
        line_total = round_money(quantity * unit_price)
        subtotal += line_total

        record = {
            'sku': _text(item, 'sku'),
            'nameAr': _text(item, 'nameAr', 'nameEn', 'name', 'descriptionAr', 'description'),
            'nameEn': _text(item, 'nameEn', 'name', 'nameAr', 'description', 'descriptionAr'),
            'quantity': format_quantity(quantity),
            'unitPrice': format_money(unit_price),
            'total': format_money(line_total),
        }
        for optional in ('unitAr', 'unitEn', 'descriptionAr', 'description', 'notesAr', 'notes'):
            if item.get(optional) not in (None, ''):
                record[optional] = str(item[optional])
        records.append(record)
    return records, subtotal


def totals_variables(subtotal: Decimal, entity: Mapping, company: Dict[str, Any]) -> Dict[str, Any]:
    discount = round_money(to_decimal(entity.get('discount') or 0, 'discount'))
    tax_rate = entity.get('taxRate') if entity.get('taxRate') not in (None, '') else company.get('taxRate', 0)
    tax_rate = to_decimal(tax_rate, 'taxRate')
    taxable = subtotal - discount
    tax = round_money(taxable * tax_rate / Decimal(100))
    total = taxable + tax
    return {
        'subtotal': format_money(subtotal),
        'discount': format_money(discount),
        'taxRate': format_quantity(tax_rate),
        'tax': format_money(tax),
        'total': format_money(total),
        'currency': entity.get('currency') or company.get('currency', 'SAR'),
    }


def _base_context(entity: Mapping, client: Mapping, lta: Optional[Mapping],
                  company: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if not isinstance(entity, Mapping):
        raise ValueError('entity must be an object')
    if not isinstance(client, Mapping):
        raise ValueError('client must be an object')
    context: Dict[str, Any] = {}
    context.update(company_variables(company))
    context.update(client_variables(client))
    context.update(lta_variables(lta))
    return context


def _bilingual(context: Dict[str, Any], entity: Mapping, *names: str):
    """Copy `name` / `nameAr` pairs, each falling back to the other language"""
    for name in names:
        context[name] = _text(entity, name, name + 'Ar')
        context[name + 'Ar'] = _text(entity, name + 'Ar', name)


def build_price_offer_context(entity: Mapping, client: Mapping, lta: Optional[Mapping] = None,
                              company: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    company = company or get_company_config()
    context = _base_context(entity, client, lta, company)
    products, subtotal = build_line_items(_require(entity, 'items', 'products', label='price offer'))
    context.update({
        'offerNumber': str(_require(entity, 'offerNumber', label='price offer')),
        'date': format_date(_require(entity, 'date', 'createdAt', label='price offer'), 'date'),
        'validUntil': format_date(_require(entity, 'validUntil', label='price offer'), 'validUntil'),
        'products': products,
    })
    context.update(totals_variables(subtotal, entity, company))
    _bilingual(context, entity, 'paymentTerms', 'deliveryTime', 'notes')
    return context


def build_order_context(entity: Mapping, client: Mapping, lta: Optional[Mapping] = None,
                        company: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    company = company or get_company_config()
    context = _base_context(entity, client, lta, company)
    products, subtotal = build_line_items(_require(entity, 'items', 'products', label='order'))
    context.update({
        'orderNumber': str(_require(entity, 'orderNumber', 'id', label='order')),
        'date': format_date(_require(entity, 'date', 'createdAt', label='order'), 'date'),
        'department': _text(entity, 'department', 'departmentAr'),
        'products': products,
    })
    context.update(totals_variables(subtotal, entity, company))
    _bilingual(context, entity, 'location', 'deliveryAddress', 'contactPerson',
               'expectedDelivery', 'specialInstructions')
    return context


def build_invoice_context(entity: Mapping, client: Mapping, lta: Optional[Mapping] = None,
                          company: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    company = company or get_company_config()
    context = _base_context(entity, client, lta, company)
    products, subtotal = build_line_items(_require(entity, 'items', 'products', label='invoice'))
    context.update({
        'invoiceNumber': str(_require(entity, 'invoiceNumber', 'id', label='invoice')),
        'date': format_date(_require(entity, 'date', 'createdAt', label='invoice'), 'date'),
        'dueDate': format_date(_require(entity, 'dueDate', label='invoice'), 'dueDate'),
        'products': products,
    })
    context.update(totals_variables(subtotal, entity, company))
    _bilingual(context, entity, 'paymentMethod', 'bankDetails', 'notes')
    return context


def build_contract_context(entity: Mapping, client: Mapping, lta: Optional[Mapping] = None,
                           company: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    company = company or get_company_config()
    context = _base_context(entity, client, lta or entity, company)
    products, subtotal = build_line_items(
        _require(entity, 'items', 'products', label='contract'),
        quantity_fields=('contractedQuantity', 'quantity', 'qty'),
    )
    context.update({
        'contractNumber': str(_require(entity, 'contractNumber', 'id', label='contract')),
        'date': format_date(_require(entity, 'date', 'createdAt', label='contract'), 'date'),
        'startDate': format_date(_require(entity, 'startDate', label='contract'), 'startDate'),
        'endDate': format_date(_require(entity, 'endDate', label='contract'), 'endDate'),
        'products': products,
    })
    context.update(totals_variables(subtotal, entity, company))
    _bilingual(context, entity, 'scope', 'pricingTerms', 'paymentTerms', 'deliveryTerms')
    return context


CONTEXT_BUILDERS: Dict[str, Callable[..., Dict[str, Any]]] = {
    'price_offer': build_price_offer_context,
    'order': build_order_context,
    'invoice': build_invoice_context,
    'contract': build_contract_context,
}


def build_context(category: str, entity: Mapping, client: Mapping, lta: Optional[Mapping] = None,
                  company: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    builder = CONTEXT_BUILDERS.get(category)
    if builder is None:
        raise ValueError(f"No context builder for category '{category}'")
    return builder(entity, client, lta, company)
