"""Tests for template lookup and default selection."""
import json
import logging

import pytest

from shared.builtin_templates import get_builtin_template_dicts
from shared.template_registry import (
    TemplateRegistry,
    TemplateRegistryConfig,
    load_registry_config,
    read_templates_file
)
from utils.errors import (
    TemplateNotFound,
    NoDefaultTemplate,
    AmbiguousDefaultTemplate,
    TemplateValidationError
)

REGISTRY_LOGGER = 'shared.template_registry'


def build_registry(*templates, strict=False):
    return TemplateRegistry(TemplateRegistryConfig(templates=tuple(templates), strict_defaults=strict))


class TestLookup:
    def test_default_template_per_category(self, registry):
        assert registry.get_template('price_offer').id == 'price-offer-ar'
        assert registry.get_template('order').id == 'order-ar'
        assert registry.get_template('invoice').id == 'invoice-ar'
        assert registry.get_template('contract').id == 'contract-ar'

    def test_exact_template_by_id(self, registry):
        template = registry.get_template('price_offer', 'price-offer-en')
        assert template.language == 'en'
        assert not template.is_default

    def test_id_from_another_category(self, registry):
        with pytest.raises(TemplateNotFound):
            registry.get_template('order', 'price-offer-en')

    def test_unknown_id(self, registry):
        with pytest.raises(TemplateNotFound) as exc_info:
            registry.get_template('price_offer', 'nope')
        assert exc_info.value.template_id == 'nope'

    def test_unknown_category(self, registry):
        with pytest.raises(TemplateNotFound):
            registry.get_template('receipt')

    def test_list_categories_sorted(self, registry):
        assert registry.list_categories() == ['contract', 'invoice', 'order', 'price_offer']

    def test_list_variables_is_union(self, registry):
        variables = registry.list_variables('order')
        assert isinstance(variables, frozenset)
        assert {'locationAr', 'location', 'orderNumber', 'products'} <= variables

    def test_list_variables_unknown_category(self, registry):
        with pytest.raises(TemplateNotFound):
            registry.list_variables('receipt')

    def test_list_templates(self, registry):
        assert [t.id for t in registry.list_templates('order')] == ['order-ar', 'order-en']
        assert len(registry.list_templates()) == 6

    def test_builtin_defaults_are_consistent(self, registry):
        assert registry.check_defaults() == {}


class TestDefaultSelection:
    def test_no_default_falls_back_to_lowest_id(self, make_template, caplog):
        registry = build_registry(
            make_template(id='b-tpl', isDefault=False),
            make_template(id='a-tpl', isDefault=False),
        )
        with caplog.at_level(logging.WARNING, logger=REGISTRY_LOGGER):
            assert registry.get_template('price_offer').id == 'a-tpl'
        assert 'no default template' in caplog.text

    def test_multiple_defaults_pick_lowest_id(self, make_template, caplog):
        registry = build_registry(
            make_template(id='z-tpl'),
            make_template(id='m-tpl'),
        )
        with caplog.at_level(logging.WARNING, logger=REGISTRY_LOGGER):
            assert registry.get_template('price_offer').id == 'm-tpl'
        assert 'm-tpl, z-tpl' in caplog.text
        assert registry.check_defaults() == {'price_offer': ['multiple defaults: m-tpl, z-tpl']}

    def test_inactive_default_is_ignored(self, make_template):
        registry = build_registry(
            make_template(id='a-tpl', isActive=False),
            make_template(id='b-tpl'),
        )
        assert registry.get_template('price_offer').id == 'b-tpl'

    def test_no_active_template(self, make_template):
        registry = build_registry(make_template(isActive=False))
        with pytest.raises(NoDefaultTemplate):
            registry.get_template('price_offer')

    def test_inactive_template_still_reachable_by_id(self, make_template):
        registry = build_registry(make_template(id='old', isActive=False))
        assert registry.get_template('price_offer', 'old').id == 'old'

    def test_strict_mode_raises(self, make_template):
        ambiguous = build_registry(make_template(id='a'), make_template(id='b'), strict=True)
        with pytest.raises(AmbiguousDefaultTemplate) as exc_info:
            ambiguous.get_template('price_offer')
        assert exc_info.value.template_ids == ['a', 'b']

        missing = build_registry(make_template(id='a', isDefault=False), strict=True)
        with pytest.raises(NoDefaultTemplate):
            missing.get_template('price_offer')


class TestConstruction:
    def test_invalid_template_rejected(self, make_template):
        with pytest.raises(TemplateValidationError):
            build_registry(make_template(variables=[]))

    def test_duplicate_id_rejected(self, make_template):
        with pytest.raises(TemplateValidationError, match='Duplicate'):
            build_registry(make_template(), make_template())

    def test_templates_file_overrides_builtin(self, tmp_path):
        data = get_builtin_template_dicts()[0]
        data['version'] = 2
        path = tmp_path / 'templates.json'
        path.write_text(json.dumps([data], ensure_ascii=False), encoding='utf-8')

        config = load_registry_config(templates_file=str(path), strict_defaults=False)
        registry = TemplateRegistry(config)
        assert registry.get_template('price_offer').version == 2
        assert len(registry.list_templates()) == 6

    def test_templates_file_object_form(self, tmp_path):
        data = get_builtin_template_dicts()[0]
        data['id'] = 'custom-offer'
        data['isDefault'] = False
        path = tmp_path / 'templates.json'
        path.write_text(json.dumps({'templates': [data]}, ensure_ascii=False), encoding='utf-8')

        templates = read_templates_file(str(path))
        assert [t.id for t in templates] == ['custom-offer']

    def test_missing_templates_file(self, tmp_path):
        with pytest.raises(TemplateValidationError):
            load_registry_config(templates_file=str(tmp_path / 'missing.json'))
