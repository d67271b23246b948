"""
Declarative document template model.

A template is an ordered list of typed sections plus a style sheet. Each
section type has its own content class, so renderers dispatch on the class
instead of poking at an untyped bag of fields.
"""
from dataclasses import dataclass, field, replace
from typing import Dict, Any, List, Optional, Tuple, Callable, Union, ClassVar, Set

from reportlab.lib.pagesizes import A4

from config.settings import get_default_style_config
from utils.errors import TemplateValidationError
from utils.placeholder_parser import parse_template_text

TEMPLATE_CATEGORIES = ('price_offer', 'order', 'invoice', 'contract')
TEMPLATE_LANGUAGES = ('ar', 'en')
ROW_NUMBER_FIELD = '#'

TextMapper = Callable[[str], str]


def _as_text(value: Any) -> str:
    return '' if value is None else str(value)


def _as_number(value: Any, convert: Callable[[Any], Any], what: str):
    try:
        return convert(value)
    except (TypeError, ValueError):
        raise TemplateValidationError(f"{what} must be a number, got {value!r}")


def _reject_unknown_keys(section_type: str, data: Dict[str, Any], allowed: Set[str]) -> None:
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise TemplateValidationError(f"Unknown {section_type} content field(s): {', '.join(unknown)}")


@dataclass(frozen=True)
class Margins:
    top: float = 120
    bottom: float = 80
    left: float = 50
    right: float = 50

    def to_dict(self) -> Dict[str, Any]:
        return {'top': self.top, 'bottom': self.bottom, 'left': self.left, 'right': self.right}


@dataclass(frozen=True)
class StyleSheet:
    """Global style parameters of a template (lengths in points)"""

    primary_color: str = '#2563eb'
    secondary_color: str = '#64748b'
    accent_color: str = '#10b981'
    font_size: float = 10
    font_family: str = 'Helvetica'
    header_height: float = 100
    footer_height: float = 60
    margins: Margins = field(default_factory=Margins)
    repeat_header: bool = True
    repeat_footer: bool = True

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'StyleSheet':
        merged = get_default_style_config()
        margins = dict(merged['margins'])
        margins.update((data or {}).get('margins') or {})
        merged.update(data or {})
        return cls(
            primary_color=merged['primaryColor'],
            secondary_color=merged['secondaryColor'],
            accent_color=merged['accentColor'],
            font_size=_as_number(merged['fontSize'], float, 'fontSize'),
            font_family=merged.get('fontFamily') or 'Helvetica',
            header_height=_as_number(merged['headerHeight'], float, 'headerHeight'),
            footer_height=_as_number(merged['footerHeight'], float, 'footerHeight'),
            margins=Margins(**{k: _as_number(v, float, f"Margin {k!r}") for k, v in margins.items()}),
            repeat_header=bool(merged.get('repeatHeader', True)),
            repeat_footer=bool(merged.get('repeatFooter', True)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'primaryColor': self.primary_color,
            'secondaryColor': self.secondary_color,
            'accentColor': self.accent_color,
            'fontSize': self.font_size,
            'fontFamily': self.font_family,
            'headerHeight': self.header_height,
            'footerHeight': self.footer_height,
            'margins': self.margins.to_dict(),
            'repeatHeader': self.repeat_header,
            'repeatFooter': self.repeat_footer,
        }


@dataclass(frozen=True)
class HeaderContent:
    """Company identity block"""

    section_type: ClassVar[str] = 'header'

    company_name: str
    address: str = ''
    phone: str = ''
    email: str = ''
    tax_number: str = ''
    logo: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'HeaderContent':
        _reject_unknown_keys('header', data, {'companyName', 'address', 'phone', 'email', 'taxNumber', 'logo'})
        return cls(
            company_name=_as_text(data.get('companyName')),
            address=_as_text(data.get('address')),
            phone=_as_text(data.get('phone')),
            email=_as_text(data.get('email')),
            tax_number=_as_text(data.get('taxNumber')),
            logo=bool(data.get('logo', False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'companyName': self.company_name,
            'address': self.address,
            'phone': self.phone,
            'email': self.email,
        }
        if self.tax_number:
            data['taxNumber'] = self.tax_number
        data['logo'] = self.logo
        return data

    def template_strings(self) -> Tuple[str, ...]:
        return (self.company_name, self.address, self.phone, self.email, self.tax_number)

    def map_text(self, fn: TextMapper) -> 'HeaderContent':
        return replace(
            self,
            company_name=fn(self.company_name),
            address=fn(self.address),
            phone=fn(self.phone),
            email=fn(self.email),
            tax_number=fn(self.tax_number),
        )


@dataclass(frozen=True)
class BodyContent:
    """Optional title followed by labelled key/value lines, in declaration order"""

    section_type: ClassVar[str] = 'body'

    title: str = ''
    fields: Tuple[Tuple[str, str], ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BodyContent':
        return cls(
            title=_as_text(data.get('title')),
            fields=tuple((key, _as_text(value)) for key, value in data.items() if key != 'title'),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.title:
            data['title'] = self.title
        data.update(self.fields)
        return data

    def template_strings(self) -> Tuple[str, ...]:
        return (self.title,) + tuple(value for _, value in self.fields)

    def map_text(self, fn: TextMapper) -> 'BodyContent':
        return replace(self, title=fn(self.title), fields=tuple((k, fn(v)) for k, v in self.fields))


@dataclass(frozen=True)
class TableColumn:
    """Named-field binding for one table column.

    `fields` are candidate record keys, first present wins. `default` is used
    when a record has none of them; without a default the record is rejected.
    """

    fields: Tuple[str, ...]
    default: Optional[str] = None

    @classmethod
    def from_value(cls, value: Union[str, List[str], Dict[str, Any]]) -> 'TableColumn':
        if isinstance(value, dict):
            names = value.get('field')
            default = value.get('default')
        else:
            names, default = value, None
        if isinstance(names, str):
            names = [names]
        if not names or not all(isinstance(n, str) and n for n in names):
            raise TemplateValidationError(f"Invalid table column binding: {value!r}")
        return cls(fields=tuple(names), default=None if default is None else str(default))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'field': self.fields[0] if len(self.fields) == 1 else list(self.fields)}
        if self.default is not None:
            data['default'] = self.default
        return data


@dataclass(frozen=True)
class TableContent:
    section_type: ClassVar[str] = 'table'

    headers: Tuple[str, ...]
    data_source: str
    columns: Tuple[TableColumn, ...] = ()
    show_borders: bool = True
    alternate_row_colors: bool = False
    # filled in by the variable resolver, one tuple of cell strings per record
    rows: Tuple[Tuple[str, ...], ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TableContent':
        _reject_unknown_keys('table', data, {'headers', 'dataSource', 'columns', 'showBorders', 'alternateRowColors'})
        headers = data.get('headers') or []
        if not isinstance(headers, (list, tuple)):
            raise TemplateValidationError("Table 'headers' must be a list")
        return cls(
            headers=tuple(_as_text(h) for h in headers),
            data_source=_as_text(data.get('dataSource')),
            columns=tuple(TableColumn.from_value(c) for c in (data.get('columns') or [])),
            show_borders=bool(data.get('showBorders', True)),
            alternate_row_colors=bool(data.get('alternateRowColors', False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'headers': list(self.headers),
            'dataSource': self.data_source,
        }
        if self.columns:
            data['columns'] = [c.to_dict() for c in self.columns]
        data['showBorders'] = self.show_borders
        data['alternateRowColors'] = self.alternate_row_colors
        return data

    def template_strings(self) -> Tuple[str, ...]:
        return self.headers + (self.data_source,)

    def map_text(self, fn: TextMapper) -> 'TableContent':
        return replace(self, headers=tuple(fn(h) for h in self.headers))


@dataclass(frozen=True)
class SpacerContent:
    section_type: ClassVar[str] = 'spacer'

    height: float = 20

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SpacerContent':
        _reject_unknown_keys('spacer', data, {'height'})
        try:
            height = float(data.get('height', 20))
        except (TypeError, ValueError):
            raise TemplateValidationError(f"Spacer height must be a number, got {data.get('height')!r}")
        if height < 0:
            raise TemplateValidationError('Spacer height must not be negative')
        return cls(height=height)

    def to_dict(self) -> Dict[str, Any]:
        return {'height': self.height}

    def template_strings(self) -> Tuple[str, ...]:
        return ()

    def map_text(self, fn: TextMapper) -> 'SpacerContent':
        return self


@dataclass(frozen=True)
class TermsContent:
    section_type: ClassVar[str] = 'terms'

    title: str = ''
    items: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TermsContent':
        _reject_unknown_keys('terms', data, {'title', 'items'})
        items = data.get('items') or []
        if not isinstance(items, (list, tuple)):
            raise TemplateValidationError("Terms 'items' must be a list")
        return cls(title=_as_text(data.get('title')), items=tuple(_as_text(i) for i in items))

    def to_dict(self) -> Dict[str, Any]:
        return {'title': self.title, 'items': list(self.items)}

    def template_strings(self) -> Tuple[str, ...]:
        return (self.title,) + self.items

    def map_text(self, fn: TextMapper) -> 'TermsContent':
        return replace(self, title=fn(self.title), items=tuple(fn(i) for i in self.items))


@dataclass(frozen=True)
class FooterContent:
    section_type: ClassVar[str] = 'footer'

    text: str = ''
    contact: str = ''
    page_numbers: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FooterContent':
        _reject_unknown_keys('footer', data, {'text', 'contact', 'pageNumbers'})
        return cls(
            text=_as_text(data.get('text')),
            contact=_as_text(data.get('contact')),
            page_numbers=bool(data.get('pageNumbers', False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {'text': self.text, 'contact': self.contact, 'pageNumbers': self.page_numbers}

    def template_strings(self) -> Tuple[str, ...]:
        return (self.text, self.contact)

    def map_text(self, fn: TextMapper) -> 'FooterContent':
        return replace(self, text=fn(self.text), contact=fn(self.contact))


SectionContent = Union[HeaderContent, BodyContent, TableContent, SpacerContent, TermsContent, FooterContent]

CONTENT_TYPES: Dict[str, Any] = {
    cls.section_type: cls
    for cls in (HeaderContent, BodyContent, TableContent, SpacerContent, TermsContent, FooterContent)
}
SECTION_TYPES = tuple(CONTENT_TYPES)


@dataclass(frozen=True)
class Section:
    content: SectionContent
    order: int = 0

    @property
    def type(self) -> str:
        return self.content.section_type

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Section':
        section_type = data.get('type')
        content_cls = CONTENT_TYPES.get(section_type)
        if content_cls is None:
            raise TemplateValidationError(
                f"Unknown section type {section_type!r}; expected one of {', '.join(SECTION_TYPES)}"
            )
        content = data.get('content') or {}
        if not isinstance(content, dict):
            raise TemplateValidationError(f"Content of {section_type} section must be an object")
        order = _as_number(data.get('order', 0), int, 'Section order')
        return cls(content=content_cls.from_dict(content), order=order)

    def to_dict(self) -> Dict[str, Any]:
        return {'type': self.type, 'content': self.content.to_dict(), 'order': self.order}


@dataclass(frozen=True)
class DocumentTemplate:
    id: str
    name: str
    category: str
    language: str
    sections: Tuple[Section, ...]
    variables: Tuple[str, ...]
    styles: StyleSheet = field(default_factory=StyleSheet)
    is_active: bool = True
    is_default: bool = False
    version: int = 1
    description: str = ''
    tags: Tuple[str, ...] = ()

    @property
    def is_rtl(self) -> bool:
        return self.language == 'ar'

    def ordered_sections(self) -> Tuple[Section, ...]:
        """Sections sorted by `order`; sorted() is stable so ties keep declaration order"""
        return tuple(sorted(self.sections, key=lambda s: s.order))

    def referenced_placeholders(self) -> Set[str]:
        names: Set[str] = set()
        for section in self.sections:
            for text in section.content.template_strings():
                names.update(parse_template_text(text).placeholders)
        return names

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DocumentTemplate':
        try:
            template_id = data['id']
            sections = data['sections']
        except KeyError as e:
            raise TemplateValidationError(f"Template is missing required field {e.args[0]!r}")
        if not isinstance(sections, (list, tuple)):
            raise TemplateValidationError(f"Template {template_id!r}: 'sections' must be a list")
        return cls(
            id=str(template_id),
            name=str(data.get('name') or template_id),
            category=str(data.get('category') or ''),
            language=str(data.get('language') or 'ar'),
            sections=tuple(Section.from_dict(s) for s in sections),
            variables=tuple(data.get('variables') or ()),
            styles=StyleSheet.from_dict(data.get('styles')),
            is_active=bool(data.get('isActive', True)),
            is_default=bool(data.get('isDefault', False)),
            version=_as_number(data.get('version', 1), int, f"Template {template_id!r} version"),
            description=str(data.get('description') or ''),
            tags=tuple(data.get('tags') or ()),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'category': self.category,
            'language': self.language,
            'sections': [s.to_dict() for s in self.sections],
            'variables': list(self.variables),
            'styles': self.styles.to_dict(),
            'isActive': self.is_active,
            'isDefault': self.is_default,
            'version': self.version,
            'tags': list(self.tags),
        }


def validate_template(template: DocumentTemplate, page_height: float = A4[1]) -> List[str]:
    """Return every well-formedness problem of `template` (empty list when valid)"""
    errors: List[str] = []

    if not template.category:
        errors.append('Template category is required')
    if template.language not in TEMPLATE_LANGUAGES:
        errors.append(f"Unsupported language {template.language!r}")
    if not template.sections:
        errors.append('Template must contain at least one section')

    header_count = sum(1 for s in template.sections if s.type == 'header')
    footer_count = sum(1 for s in template.sections if s.type == 'footer')
    if header_count != 1:
        errors.append(f"Template must contain exactly one header section, found {header_count}")
    if footer_count > 1:
        errors.append(f"Template may contain at most one footer section, found {footer_count}")

    referenced: Set[str] = set()
    for index, section in enumerate(template.sections):
        for text in section.content.template_strings():
            try:
                referenced.update(parse_template_text(text).placeholders)
            except TemplateValidationError as e:
                errors.append(f"Section {index} ({section.type}): {e}")
        content = section.content
        if isinstance(content, TableContent):
            if not content.headers:
                errors.append(f"Section {index} (table): headers must not be empty")
            if content.columns and len(content.columns) != len(content.headers):
                errors.append(
                    f"Section {index} (table): {len(content.headers)} headers but {len(content.columns)} columns"
                )
            try:
                if not parse_template_text(content.data_source).is_standalone_placeholder:
                    errors.append(f"Section {index} (table): dataSource must be a single placeholder like '{{{{items}}}}'")
            except TemplateValidationError:
                pass  # already reported above

    undeclared = sorted(referenced - set(template.variables))
    if undeclared:
        errors.append(f"Placeholders not listed in variables: {', '.join(undeclared)}")

    styles = template.styles
    content_top = styles.margins.top
    content_bottom = page_height - styles.footer_height - styles.margins.bottom
    if content_bottom <= content_top:
        errors.append('Margins and footer height leave no room for page content')
    if styles.header_height > styles.margins.top:
        errors.append('headerHeight must not exceed the top margin')

    return errors


def ensure_valid_template(template: DocumentTemplate, page_height: float = A4[1]) -> DocumentTemplate:
    errors = validate_template(template, page_height)
    if errors:
        raise TemplateValidationError(f"Template {template.id!r} is invalid: {'; '.join(errors)}", errors)
    return template
