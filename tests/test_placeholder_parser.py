"""Tests for the `{{variable}}` placeholder parser."""
import pytest

from utils.errors import PlaceholderSyntaxError
from utils.placeholder_parser import (
    LiteralSegment,
    PlaceholderSegment,
    parse_template_text,
    extract_placeholders,
    render_text,
    is_valid_name
)


class TestParse:
    def test_segments_in_source_order(self):
        parsed = parse_template_text('Hello {{ name }}!')
        assert parsed.segments == (
            LiteralSegment('Hello '),
            PlaceholderSegment('name'),
            LiteralSegment('!'),
        )

    def test_extract_placeholders(self):
        assert extract_placeholders('{{a}} and {{b}} and {{a}}') == ('a', 'b', 'a')

    def test_plain_text_has_no_placeholders(self):
        assert extract_placeholders('شكراً لتعاملكم معنا') == ()

    def test_standalone_placeholder(self):
        assert parse_template_text('{{products}}').is_standalone_placeholder
        assert not parse_template_text(' {{products}}').is_standalone_placeholder
        assert not parse_template_text('{{a}}{{b}}').is_standalone_placeholder

    @pytest.mark.parametrize('text', ['Price {{total', '{{1abc}}', '{{first-name}}', '{{}}'])
    def test_strict_mode_rejects_malformed(self, text):
        with pytest.raises(PlaceholderSyntaxError):
            parse_template_text(text)

    def test_lenient_mode_keeps_malformed_text(self):
        parsed = parse_template_text('{{bad name}} and {{ok}}', strict=False)
        assert parsed.placeholders == ('ok',)
        assert parsed.render(lambda name: 'X') == '{{bad name}} and X'

    def test_lenient_unclosed_is_literal(self):
        parsed = parse_template_text('a {{b', strict=False)
        assert parsed.placeholders == ()
        assert parsed.render(lambda name: 'X') == 'a {{b'


class TestRender:
    def test_values_are_stringified_and_none_is_empty(self):
        assert render_text('{{x}} / {{y}}', {'x': 12.5, 'y': None}) == '12.5 / '

    def test_substituted_values_are_not_expanded_again(self):
        assert render_text('{{a}}', {'a': '{{b}}', 'b': 'no'}) == '{{b}}'

    def test_arabic_literal_around_placeholder(self):
        assert render_text('هذا العرض صالح حتى {{validUntil}}', {'validUntil': '2024-02-15'}) == \
            'هذا العرض صالح حتى 2024-02-15'


class TestNames:
    @pytest.mark.parametrize('name', ['x', '_x1', 'clientNameAr'])
    def test_valid(self, name):
        assert is_valid_name(name)

    @pytest.mark.parametrize('name', ['', '1x', 'a-b', 'a b', 'عربي'])
    def test_invalid(self, name):
        assert not is_valid_name(name)
