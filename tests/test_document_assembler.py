"""Tests for pagination and PDF serialisation."""
import pytest

from models.template_models import FooterContent, HeaderContent
from services.document_assembler import DocumentAssembler
from services.layout_blocks import LayoutBlock, SpacerBlock, TableBlock
from services.section_renderer import SectionRenderer, RenderedSections
from services.variable_resolver import VariableResolver
from utils.errors import SectionRenderError


class FixedBlock(LayoutBlock):
    """Unsplittable block of a given height"""

    def __init__(self, height):
        self.height = height

    def draw(self, canv, x, top_y, width):
        canv.rect(x, top_y - self.height, width, self.height)


@pytest.fixture
def assembler():
    return DocumentAssembler(page_compression=False)


@pytest.fixture
def render_products(table_template, make_ctx, make_products):
    """Render the table template with `count` products; returns (ctx, sections)"""
    def render(count, **overrides):
        template = table_template(**overrides)
        document = VariableResolver().resolve(template, {
            'companyName': 'ACME', 'date': '2024-01-15', 'products': make_products(count),
        })
        ctx = make_ctx(template)
        return ctx, SectionRenderer().render_all(document, ctx)
    return render


def bands(ctx, page_numbers=True):
    renderer = SectionRenderer()
    return (renderer.render_header(0, HeaderContent('ACME'), ctx),
            renderer.render_footer(9, FooterContent('Thanks', page_numbers=page_numbers), ctx))


class TestPagination:
    def test_single_page(self, assembler, render_products):
        ctx, sections = render_products(2)
        layout = assembler.paginate(ctx, sections)
        assert layout.page_count == 1
        page = layout.pages[0]
        assert page.header is sections.header
        assert page.footer is sections.footer
        assert page.footer_label == 'Page 1 of 1'
        assert [p.section_type for p in page.blocks] == ['body', 'table']
        assert page.blocks[0].top == ctx.content_top

    def test_table_flows_across_pages(self, assembler, render_products):
        ctx, sections = render_products(60)
        layout = assembler.paginate(ctx, sections)
        assert layout.page_count >= 2

        pieces = [p.block for page in layout.pages for p in page.blocks if p.section_type == 'table']
        assert len(pieces) == layout.page_count
        assert all(isinstance(piece, TableBlock) for piece in pieces)
        numbers = [n for piece in pieces for n in piece.row_numbers]
        assert numbers == list(range(60))
        assert not pieces[0].is_continuation
        assert all(piece.is_continuation for piece in pieces[1:])

        for page in layout.pages:
            assert page.header is sections.header
            assert page.footer_label == f'Page {page.number} of {layout.page_count}'
            for placed in page.blocks:
                assert placed.top + placed.block.height <= ctx.content_bottom + 1e-6

    def test_bands_only_on_first_and_last_page(self, assembler, render_products):
        ctx, sections = render_products(60, styles={'repeatHeader': False, 'repeatFooter': False})
        layout = assembler.paginate(ctx, sections)
        first, last = layout.pages[0], layout.pages[-1]
        assert first.header is not None and first.footer is None
        assert last.header is None and last.footer is not None
        assert last.footer_label == f'Page {layout.page_count} of {layout.page_count}'
        assert all(p.footer_label is None for p in layout.pages[:-1])

    def test_no_label_without_page_numbers(self, assembler, make_template, make_ctx):
        ctx = make_ctx(make_template())
        header, footer = bands(ctx, page_numbers=False)
        layout = assembler.paginate(ctx, RenderedSections(header, footer, [(1, 'body', FixedBlock(10))]))
        assert layout.pages[0].footer is footer
        assert layout.pages[0].footer_label is None

    def test_arabic_page_label(self, assembler, make_template, make_ctx):
        ctx = make_ctx(make_template(language='ar'))
        header, footer = bands(ctx)
        blocks = [(1, 'body', FixedBlock(ctx.content_height - 5)), (2, 'body', FixedBlock(50))]
        layout = assembler.paginate(ctx, RenderedSections(header, footer, blocks))
        assert [p.footer_label for p in layout.pages] == ['صفحة 1 من 2', 'صفحة 2 من 2']

    def test_unsplittable_block_moves_to_next_page(self, assembler, make_template, make_ctx):
        ctx = make_ctx(make_template())
        blocks = [(1, 'body', FixedBlock(ctx.content_height - 20)), (2, 'body', FixedBlock(40))]
        layout = assembler.paginate(ctx, RenderedSections(blocks=blocks))
        assert layout.page_count == 2
        assert layout.pages[1].blocks[0].section_index == 2
        assert layout.pages[1].blocks[0].top == ctx.content_top

    def test_block_taller_than_page(self, assembler, make_template, make_ctx):
        ctx = make_ctx(make_template())
        blocks = [(1, 'body', FixedBlock(10)), (2, 'terms', FixedBlock(ctx.content_height + 1))]
        with pytest.raises(SectionRenderError) as exc_info:
            assembler.paginate(ctx, RenderedSections(blocks=blocks))
        assert exc_info.value.section_index == 2
        assert exc_info.value.section_type == 'terms'

    def test_spacer_dropped_at_page_break(self, assembler, make_template, make_ctx):
        ctx = make_ctx(make_template())
        blocks = [
            (1, 'body', FixedBlock(ctx.content_height - 5)),
            (2, 'spacer', SpacerBlock(20)),
            (3, 'body', FixedBlock(30)),
        ]
        layout = assembler.paginate(ctx, RenderedSections(blocks=blocks))
        assert layout.page_count == 2
        assert [p.section_index for page in layout.pages for p in page.blocks] == [1, 3]
        assert layout.pages[1].blocks[0].top == ctx.content_top

    def test_trailing_spacer_adds_no_page(self, assembler, make_template, make_ctx):
        ctx = make_ctx(make_template())
        blocks = [(1, 'body', FixedBlock(ctx.content_height - 5)), (2, 'spacer', SpacerBlock(20))]
        assert assembler.paginate(ctx, RenderedSections(blocks=blocks)).page_count == 1

    def test_empty_document_has_one_page(self, assembler, make_template, make_ctx):
        ctx = make_ctx(make_template())
        header, footer = bands(ctx)
        layout = assembler.paginate(ctx, RenderedSections(header, footer))
        assert layout.page_count == 1
        assert layout.pages[0].footer_label == 'Page 1 of 1'


class TestSerialisation:
    def test_pdf_bytes(self, assembler, render_products):
        ctx, sections = render_products(30)
        content, layout = assembler.assemble(ctx, sections, title='Offer', subject='price_offer')
        assert content.startswith(b'%PDF')
        assert content.rstrip().endswith(b'%%EOF')
        assert layout.page_count >= 2

    def test_output_is_deterministic(self, assembler, render_products):
        ctx, sections = render_products(5)
        first, _ = assembler.assemble(ctx, sections, title='Offer')
        second, _ = assembler.assemble(ctx, sections, title='Offer')
        assert first == second
