"""
Document Assembler - paginates layout blocks and serialises them to PDF.

Pagination runs in two phases: blocks are placed page by page, then once
the page count is known the footer page labels are stamped.
"""
import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from io import BytesIO
from typing import List, Optional, Tuple

from reportlab.pdfgen import canvas

from config.settings import PDF_CONFIG
from services.layout_blocks import LayoutBlock, HeaderBand, FooterBand
from services.section_renderer import RenderContext, RenderedSections
from shared.field_labels import page_label
from utils.errors import SectionRenderError

logger = logging.getLogger(__name__)

PDF_CREATOR = 'Procurement Documents'


class AssemblerState(Enum):
    ACCUMULATING = 'accumulating'
    PAGE_FULL = 'page_full'
    FINALIZING = 'finalizing'
    DONE = 'done'


@dataclass
class PlacedBlock:
    section_index: int
    section_type: str
    block: LayoutBlock
    top: float  # distance from the page top


@dataclass
class PageLayout:
    number: int
    header: Optional[HeaderBand] = None
    blocks: List[PlacedBlock] = field(default_factory=list)
    footer: Optional[FooterBand] = None
    footer_label: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.blocks


@dataclass
class DocumentLayout:
    pages: List[PageLayout]

    @property
    def page_count(self) -> int:
        return len(self.pages)


class DocumentAssembler:
    """Places blocks on pages and writes the PDF"""

    def __init__(self, page_compression: Optional[bool] = None):
        self.page_compression = PDF_CONFIG['page_compression'] if page_compression is None else page_compression

    def paginate(self, ctx: RenderContext, sections: RenderedSections) -> DocumentLayout:
        styles = ctx.styles
        bottom = ctx.content_bottom
        pages: List[PageLayout] = []
        page = PageLayout(number=1)
        cursor = ctx.content_top
        queue = deque(sections.blocks)
        state = AssemblerState.ACCUMULATING

        while state is not AssemblerState.DONE:
            if state is AssemblerState.ACCUMULATING:
                if not queue:
                    # a trailing dropped spacer must not leave an empty last page
                    if not page.is_empty or not pages:
                        pages.append(page)
                    state = AssemblerState.FINALIZING
                    continue
                index, section_type, block = queue.popleft()
                available = bottom - cursor
                if block.height <= available:
                    page.blocks.append(PlacedBlock(index, section_type, block, cursor))
                    cursor += block.height
                    continue
                if block.discard_on_overflow:
                    if not page.is_empty:
                        state = AssemblerState.PAGE_FULL
                    continue
                parts = block.split(available) if available > 0 else None
                if parts is not None:
                    head, tail = parts
                    page.blocks.append(PlacedBlock(index, section_type, head, cursor))
                    queue.appendleft((index, section_type, tail))
                elif page.is_empty:
                    raise SectionRenderError(index, section_type, ValueError(
                        f"block of {block.height:.1f}pt does not fit on an empty page ({available:.1f}pt)"
                    ))
                else:
                    queue.appendleft((index, section_type, block))
                state = AssemblerState.PAGE_FULL

            elif state is AssemblerState.PAGE_FULL:
                pages.append(page)
                page = PageLayout(number=len(pages) + 1)
                cursor = ctx.content_top
                state = AssemblerState.ACCUMULATING

            elif state is AssemblerState.FINALIZING:
                total = len(pages)
                for p in pages:
                    if sections.header is not None and (p.number == 1 or styles.repeat_header):
                        p.header = sections.header
                    if sections.footer is not None and (p.number == total or styles.repeat_footer):
                        p.footer = sections.footer
                        if sections.footer.page_numbers:
                            p.footer_label = page_label(p.number, total, ctx.language)
                state = AssemblerState.DONE

        return DocumentLayout(pages=pages)

    def serialize(self, layout: DocumentLayout, ctx: RenderContext, title: str = '', subject: str = '') -> bytes:
        styles = ctx.styles
        buffer = BytesIO()
        canv = canvas.Canvas(
            buffer,
            pagesize=(ctx.page_width, ctx.page_height),
            pageCompression=1 if self.page_compression else 0,
            invariant=1,
        )
        canv.setTitle(title)
        canv.setSubject(subject)
        canv.setCreator(PDF_CREATOR)
        canv.setAuthor(PDF_CREATOR)

        x = ctx.content_left
        width = ctx.content_width
        for page in layout.pages:
            if page.header is not None:
                top = styles.margins.top - styles.header_height
                page.header.draw(canv, x, ctx.page_height - top, width)
            for placed in page.blocks:
                placed.block.draw(canv, x, ctx.page_height - placed.top, width)
            if page.footer is not None:
                page.footer.draw(canv, x, styles.margins.bottom + styles.footer_height, width, page.footer_label)
            canv.showPage()
        canv.save()
        return buffer.getvalue()

    def assemble(self, ctx: RenderContext, sections: RenderedSections,
                 title: str = '', subject: str = '') -> Tuple[bytes, DocumentLayout]:
        layout = self.paginate(ctx, sections)
        content = self.serialize(layout, ctx, title, subject)
        logger.debug(f"Assembled {layout.page_count} page(s), {len(content)} bytes")
        return content, layout
