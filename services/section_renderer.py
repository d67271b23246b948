"""
Section Renderer - turns resolved sections into layout blocks
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Sequence

from reportlab.platypus import Paragraph

from config.settings import PDF_CONFIG
from models.template_models import (
    DocumentTemplate,
    StyleSheet,
    HeaderContent,
    BodyContent,
    TableContent,
    SpacerContent,
    TermsContent,
    FooterContent,
    ROW_NUMBER_FIELD
)
from services.layout_blocks import (
    LayoutBlock,
    SpacerBlock,
    ParagraphBlock,
    TextSpec,
    TableBlock,
    TableStyleSpec,
    HeaderBand,
    FooterBand,
    make_paragraph,
    line_height
)
from services.variable_resolver import ResolvedDocument, ResolvedSection
from shared.field_labels import field_label, no_items_text, page_label
from utils.errors import DocumentGenerationError, SectionRenderError
from utils.pdf_utils import FontSet, resolve_fonts, get_page_size, read_logo_size, text_width, truncate_text

logger = logging.getLogger(__name__)

WIDE_COLUMN_HINTS = ('name', 'description', 'product', 'اسم', 'الوصف', 'المنتج', 'ملاحظات')


@dataclass(frozen=True)
class RenderContext:
    """Page geometry, direction, fonts and styles for one render"""
    page_width: float
    page_height: float
    styles: StyleSheet
    language: str
    fonts: FontSet
    logo_path: str = ''
    logo_height: float = 60
    max_cell_chars: int = 300

    @classmethod
    def for_template(cls, template: DocumentTemplate, page_size: Optional[Tuple[float, float]] = None,
                     logo_path: Optional[str] = None) -> 'RenderContext':
        width, height = page_size or get_page_size()
        return cls(
            page_width=width,
            page_height=height,
            styles=template.styles,
            language=template.language,
            fonts=resolve_fonts(template.language, template.styles.font_family),
            logo_path=PDF_CONFIG['logo_path'] if logo_path is None else logo_path,
            logo_height=PDF_CONFIG['logo_height'],
            max_cell_chars=PDF_CONFIG['max_cell_chars'],
        )

    @property
    def rtl(self) -> bool:
        return self.language == 'ar'

    @property
    def content_left(self) -> float:
        return self.styles.margins.left

    @property
    def content_width(self) -> float:
        return self.page_width - self.styles.margins.left - self.styles.margins.right

    @property
    def content_top(self) -> float:
        """Distance from the page top where content starts"""
        return self.styles.margins.top

    @property
    def content_bottom(self) -> float:
        """Distance from the page top where content must end"""
        return self.page_height - self.styles.footer_height - self.styles.margins.bottom

    @property
    def content_height(self) -> float:
        return self.content_bottom - self.content_top

    @property
    def font_size(self) -> float:
        return self.styles.font_size


@dataclass
class RenderedSections:
    header: Optional[HeaderBand] = None
    footer: Optional[FooterBand] = None
    # (section index, section type, block) in render order
    blocks: List[Tuple[int, str, LayoutBlock]] = field(default_factory=list)


def column_weights(headers: Sequence[str], table: TableContent) -> List[float]:
    """'#' column narrow, name/description columns wide"""
    weights = []
    for i, label in enumerate(headers):
        lower = str(label).lower().strip()
        bound = table.columns[i].fields if i < len(table.columns) else ()
        if lower == ROW_NUMBER_FIELD or bound == (ROW_NUMBER_FIELD,):
            weights.append(0.6)
        elif any(h in lower for h in WIDE_COLUMN_HINTS) or any(
                h in f.lower() for f in bound for h in WIDE_COLUMN_HINTS):
            weights.append(2.0)
        else:
            weights.append(1.0)
    return weights


class SectionRenderer:
    """Renders one section at a time; dispatches on the content class"""

    def render(self, section_index: int, section, ctx: RenderContext) -> LayoutBlock:
        content = section.content
        if isinstance(content, HeaderContent):
            return self.render_header(section_index, content, ctx)
        if isinstance(content, BodyContent):
            return self.render_body(content, ctx)
        if isinstance(content, TableContent):
            return self.render_table(content, ctx)
        if isinstance(content, SpacerContent):
            return SpacerBlock(content.height)
        if isinstance(content, TermsContent):
            return self.render_terms(content, ctx)
        if isinstance(content, FooterContent):
            return self.render_footer(section_index, content, ctx)
        raise TypeError(f"Unsupported section content {type(content).__name__}")

    def render_all(self, document: ResolvedDocument, ctx: RenderContext) -> RenderedSections:
        result = RenderedSections()
        for section in document.sections:
            block = self._render_guarded(section, ctx)
            if isinstance(block, HeaderBand):
                result.header = block
            elif isinstance(block, FooterBand):
                result.footer = block
            else:
                result.blocks.append((section.index, section.type, block))
        return result

    def _render_guarded(self, section: ResolvedSection, ctx: RenderContext) -> LayoutBlock:
        try:
            return self.render(section.index, section, ctx)
        except DocumentGenerationError:
            raise
        except Exception as e:
            logger.error(f"Section {section.index} ({section.type}) failed to render: {e}")
            raise SectionRenderError(section.index, section.type, e) from e

    def _paragraph(self, text: str, ctx: RenderContext, size: float, bold: bool = False,
                   color: str = '#000000', align: str = 'start', width: Optional[float] = None) -> Paragraph:
        spec = TextSpec(text, ctx.fonts.pick(text, bold), size, color, align)
        return make_paragraph(spec, width or ctx.content_width, ctx.rtl)

    def render_header(self, section_index: int, content: HeaderContent, ctx: RenderContext) -> HeaderBand:
        styles = ctx.styles
        size = ctx.font_size
        logo_size = None
        logo_path = None
        if content.logo:
            logo_size = read_logo_size(ctx.logo_path, min(ctx.logo_height, styles.header_height))
            logo_path = ctx.logo_path if logo_size else None

        width = ctx.content_width
        if logo_size:
            width -= logo_size[0] + 8

        paragraphs: List[Paragraph] = []
        if content.company_name:
            paragraphs.append(self._paragraph(content.company_name, ctx, size + 6, bold=True,
                                              color=styles.primary_color, width=width))
        for value in (content.address, content.phone, content.email):
            if value:
                paragraphs.append(self._paragraph(value, ctx, size, color=styles.secondary_color, width=width))
        if content.tax_number:
            text = f"{field_label('taxNumber', ctx.language)}: {content.tax_number}"
            paragraphs.append(self._paragraph(text, ctx, size, color=styles.secondary_color, width=width))

        band = HeaderBand(paragraphs, width, ctx.rtl, styles.header_height, logo_path, logo_size)
        if band.height > styles.header_height:
            raise SectionRenderError(section_index, 'header', ValueError(
                f"header content needs {band.height:.1f}pt but headerHeight is {styles.header_height:.1f}pt"
            ))
        return band

    def render_body(self, content: BodyContent, ctx: RenderContext) -> ParagraphBlock:
        size = ctx.font_size
        paragraphs: List[Paragraph] = []
        if content.title:
            paragraphs.append(self._paragraph(content.title, ctx, size + 6, bold=True,
                                              color=ctx.styles.primary_color, align='center'))
        for key, value in content.fields:
            text = f"{field_label(key, ctx.language)}: {value}"
            paragraphs.append(self._paragraph(text, ctx, size))
        return ParagraphBlock(paragraphs, ctx.content_width, ctx.rtl, space_after=line_height(size) / 2.0)

    def render_terms(self, content: TermsContent, ctx: RenderContext) -> ParagraphBlock:
        size = ctx.font_size
        paragraphs: List[Paragraph] = []
        if content.title:
            paragraphs.append(self._paragraph(content.title, ctx, size + 2, bold=True,
                                              color=ctx.styles.accent_color))
        bullet = '• '
        for item in content.items:
            font = ctx.fonts.pick(item)
            spec = TextSpec(bullet + item, font, size, indent=text_width(bullet, font, size))
            paragraphs.append(make_paragraph(spec, ctx.content_width, ctx.rtl))
        return ParagraphBlock(paragraphs, ctx.content_width, ctx.rtl, space_after=line_height(size) / 2.0)

    def render_table(self, content: TableContent, ctx: RenderContext) -> TableBlock:
        weights = column_weights(content.headers, content)
        total = sum(weights) or float(len(weights))
        widths = [ctx.content_width * (w / total) for w in weights]

        headers = list(content.headers)
        rows = [[truncate_text(cell, ctx.max_cell_chars) for cell in r] for r in content.rows]
        if ctx.rtl:
            # first logical column sits on the right
            headers.reverse()
            widths.reverse()
            for row in rows:
                row.reverse()

        placeholder = not rows
        if placeholder:
            rows = [[no_items_text(ctx.language)] + [''] * (len(headers) - 1)]

        style = TableStyleSpec(
            fonts=ctx.fonts,
            font_size=ctx.font_size,
            header_color=ctx.styles.primary_color,
            border_color=ctx.styles.secondary_color,
            show_borders=content.show_borders,
            alternate_rows=content.alternate_row_colors,
            rtl=ctx.rtl,
        )
        return TableBlock.build(headers, rows, widths, style, placeholder=placeholder)

    def render_footer(self, section_index: int, content: FooterContent, ctx: RenderContext) -> FooterBand:
        styles = ctx.styles
        size = max(ctx.font_size - 1, 6)
        paragraphs: List[Paragraph] = []
        if content.text:
            paragraphs.append(self._paragraph(content.text, ctx, size, bold=True, align='center'))
        if content.contact:
            paragraphs.append(self._paragraph(content.contact, ctx, size, color=styles.secondary_color,
                                              align='center'))
        sample = page_label(1, 1, ctx.language)
        band = FooterBand(paragraphs, ctx.content_width, ctx.rtl, content.page_numbers, ctx.fonts.pick(sample),
                          size, styles.secondary_color)
        if band.height > styles.footer_height:
            raise SectionRenderError(section_index, 'footer', ValueError(
                f"footer content needs {band.height:.1f}pt but footerHeight is {styles.footer_height:.1f}pt"
            ))
        return band
